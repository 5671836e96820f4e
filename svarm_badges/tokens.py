"""
tokens.py — Parse color token text into a tagged variant, once, at the boundary.

Accepted text forms (a leading `bg-` is stripped from non-hex forms):
  "#3B82F6"                       → HexLiteral("#3b82f6")
  "primary", "chart-3"            → ThemeAlias("primary")
  "blue-500", "bg-blue-500"       → PaletteRef("blue", 500)
  anything else                   → Malformed(text, reason)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple, Union

from .palette import SHADE_LADDER

THEME_ALIASES: Tuple[str, ...] = (
    "primary", "secondary", "accent",
    "chart-1", "chart-2", "chart-3", "chart-4", "chart-5",
)


@dataclass(frozen=True)
class HexLiteral:
    value: str


@dataclass(frozen=True)
class ThemeAlias:
    name: str

    @property
    def property_name(self) -> str:
        return f"--{self.name}"


@dataclass(frozen=True)
class PaletteRef:
    family: str
    shade: int

    def __str__(self) -> str:
        return f"{self.family}-{self.shade}"


@dataclass(frozen=True)
class Malformed:
    text: str
    reason: str


ColorToken = Union[HexLiteral, ThemeAlias, PaletteRef, Malformed]


def strip_bg_prefix(text: str) -> str:
    return text[3:] if text.startswith("bg-") else text


def parse_token(text: str) -> ColorToken:
    """Classify token text. Never raises; bad text becomes Malformed."""
    raw = (text or "").strip()
    if raw.startswith("#"):
        return HexLiteral(raw.lower())

    clean = strip_bg_prefix(raw.lower())
    if clean in THEME_ALIASES:
        return ThemeAlias(clean)

    parts = clean.split("-")
    if len(parts) != 2 or not parts[0]:
        return Malformed(text, f"expected <family>-<shade>, got {len(parts)} part(s)")

    family, shade_str = parts
    if not (shade_str.isascii() and shade_str.isdecimal()):
        return Malformed(text, f"shade {shade_str!r} is not a number")
    shade = int(shade_str)
    if shade not in SHADE_LADDER:
        return Malformed(text, f"shade {shade} is not on the ladder")
    return PaletteRef(family, shade)
