"""
palette.py — The fixed color palette and its shade ladder.

22 families × 11 shades, every value a literal `#rrggbb`. Loaded once from
`data/palette.json` and validated at load time; a malformed file is fatal.

Usage:
    from svarm_badges.palette import Palette, SHADE_LADDER

    palette = Palette.load()
    palette.hex("blue", 500)   # → "#3b82f6"
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterator, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).parent / "data"
PALETTE_PATH = DATA_DIR / "palette.json"

SHADE_LADDER: Tuple[int, ...] = (50, 100, 200, 300, 400, 500, 600, 700, 800, 900, 950)

FAMILY_NAMES: Tuple[str, ...] = (
    "slate", "gray", "zinc", "neutral", "stone",
    "red", "orange", "amber", "yellow", "lime", "green", "emerald", "teal",
    "cyan", "sky", "blue", "indigo", "violet", "purple", "fuchsia", "pink", "rose",
)

_HEX_RE = re.compile(r"^#[0-9a-f]{6}$")


class PaletteDataError(ValueError):
    """The bundled palette data is incomplete or malformed."""


class Palette:
    """Read-only family → shade → hex table."""

    def __init__(self, families: Mapping[str, Mapping[int, str]]) -> None:
        self._families: Mapping[str, Mapping[int, str]] = MappingProxyType({
            name: MappingProxyType(dict(shades)) for name, shades in families.items()
        })

    @classmethod
    def from_dict(cls, raw: Mapping[str, Mapping[str, str]]) -> "Palette":
        """Validate raw JSON-shaped data (shade keys as strings)."""
        if not isinstance(raw, Mapping):
            raise PaletteDataError("Palette data must be an object of families")

        missing = [name for name in FAMILY_NAMES if name not in raw]
        extra = [name for name in raw if name not in FAMILY_NAMES]
        if missing or extra:
            raise PaletteDataError(
                f"Palette families mismatch — missing: {missing}, unexpected: {extra}"
            )

        families: Dict[str, Dict[int, str]] = {}
        for name in FAMILY_NAMES:
            shades = raw[name]
            if not isinstance(shades, Mapping):
                raise PaletteDataError(f"Family {name!r} must map shades to hex values")
            try:
                parsed = {int(stop): value for stop, value in shades.items()}
            except (TypeError, ValueError) as e:
                raise PaletteDataError(f"Family {name!r} has a non-numeric shade: {e}") from e
            if tuple(sorted(parsed)) != SHADE_LADDER:
                raise PaletteDataError(
                    f"Family {name!r} shades {sorted(parsed)} do not match the ladder"
                )
            for stop, value in parsed.items():
                if not isinstance(value, str) or not _HEX_RE.match(value.lower()):
                    raise PaletteDataError(f"{name}-{stop} is not a #rrggbb hex: {value!r}")
            families[name] = {stop: parsed[stop].lower() for stop in SHADE_LADDER}

        return cls(families)

    @classmethod
    def load(cls, path: Path = PALETTE_PATH) -> "Palette":
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
        palette = cls.from_dict(raw)
        logger.info(f"Palette loaded: {len(palette)} families from {path.name}")
        return palette

    def hex(self, family: str, shade: int) -> Optional[str]:
        """Literal hex for family+shade, or None when either is unknown."""
        shades = self._families.get(family)
        if shades is None:
            return None
        return shades.get(shade)

    def shades(self, family: str) -> Mapping[int, str]:
        return self._families[family]

    def __contains__(self, family: object) -> bool:
        return family in self._families

    def __iter__(self) -> Iterator[str]:
        return iter(self._families)

    def __len__(self) -> int:
        return len(self._families)
