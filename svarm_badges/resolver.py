"""
resolver.py — Resolve color tokens to `#rrggbb` for the renderer.

    "#3B82F6"      → "#3b82f6"          (pass-through, lowercased)
    "blue-500"     → "#3b82f6"          (palette table)
    "bg-red-700"   → "#b91c1c"          (bg- prefix stripped)
    "primary"      → --primary from the environment, converted if OKLCH
    anything bad   → fallback hex + one warning

Results (fallbacks included) are cached under the original token text.
"""

from __future__ import annotations

import logging
import re
from typing import Dict, Optional

from .cache import ResolutionCache
from .environment import HeadlessEnvironment, PresentationEnvironment
from .oklch import FALLBACK_HEX, ColorConverter, select_converter
from .palette import Palette
from .shades import shift_token
from .tokens import (
    THEME_ALIASES,
    ColorToken,
    HexLiteral,
    Malformed,
    PaletteRef,
    ThemeAlias,
    parse_token,
)

logger = logging.getLogger(__name__)

# only full #rrggbb passes through; #rgb and #rrggbbaa go to the converter
_HEX_RE = re.compile(r"^#[0-9a-fA-F]{6}$")


class TokenResolver:
    def __init__(
        self,
        palette: Palette,
        environment: Optional[PresentationEnvironment] = None,
        cache: Optional[ResolutionCache[str]] = None,
        converter: Optional[ColorConverter] = None,
        fallback: str = FALLBACK_HEX,
    ) -> None:
        self.palette = palette
        self.environment = environment if environment is not None else HeadlessEnvironment()
        self.cache = cache if cache is not None else ResolutionCache("color cache")
        self.fallback = fallback
        self.converter = converter or select_converter(self.environment, fallback)

    # ── Public API ────────────────────────────────────────────────────────────

    def resolve(self, text: str) -> str:
        """Token text → `#rrggbb`. Never raises."""
        token = parse_token(text)
        if isinstance(token, HexLiteral):
            return token.value

        cached = self.cache.get(text)
        if isinstance(cached, str):
            return cached

        hex_value = self._resolve_token(token, text)
        self.cache.put(text, hex_value)
        return hex_value

    def shift(self, text: str, levels: int) -> str:
        """Resolve `text` moved `levels` down (+) or up (-) the shade ladder."""
        token = parse_token(text)
        if not isinstance(token, PaletteRef):
            return self.resolve(text)
        return self.resolve(str(shift_token(token, levels)))

    def darker(self, text: str, levels: int = 2) -> str:
        return self.shift(text, levels)

    def lighter(self, text: str, levels: int = 2) -> str:
        return self.shift(text, -levels)

    def theme_colors(self) -> Dict[str, str]:
        """All design-system aliases resolved at once (for chart series)."""
        return {alias: self.resolve(alias) for alias in THEME_ALIASES}

    def clear(self) -> None:
        self.cache.clear()

    # ── Per-shape resolution ──────────────────────────────────────────────────

    def _resolve_token(self, token: ColorToken, text: str) -> str:
        if isinstance(token, ThemeAlias):
            return self._resolve_alias(token, text)
        if isinstance(token, PaletteRef):
            return self._resolve_palette(token, text)
        if isinstance(token, Malformed):
            logger.warning(f"Malformed color token {text!r}: {token.reason} — using {self.fallback}")
        return self.fallback

    def _resolve_alias(self, token: ThemeAlias, text: str) -> str:
        value = self.environment.get_property(token.property_name)
        if not value:
            logger.warning(
                f"Theme color {token.property_name} has no value in the active environment "
                f"(token {text!r}) — using {self.fallback}"
            )
            return self.fallback
        if _HEX_RE.match(value):
            return value.lower()
        return self.converter.to_hex(value)

    def _resolve_palette(self, token: PaletteRef, text: str) -> str:
        hex_value = self.palette.hex(token.family, token.shade)
        if hex_value is None:
            logger.warning(
                f"Color not found: {text!r} — unknown palette family {token.family!r}; "
                f"using {self.fallback}"
            )
            return self.fallback
        return hex_value
