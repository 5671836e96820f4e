"""
shades.py — Move a palette token up or down the shade ladder.

One level = 100 shade units. Positive levels go darker (500 → 700 for +2),
negative levels go lighter. Results clamp to 50 / 950 and snap to the nearest
ladder stop, so the output is always a real shade.
"""

from __future__ import annotations

from .palette import SHADE_LADDER
from .tokens import ColorToken, PaletteRef

LEVEL_STEP = 100


def snap_shade(target: int, current: int) -> int:
    """Nearest ladder stop to `target`; ties resolve toward `current`."""
    clamped = max(SHADE_LADDER[0], min(SHADE_LADDER[-1], target))
    return min(SHADE_LADDER, key=lambda stop: (abs(stop - clamped), abs(stop - current)))


def shift_token(token: ColorToken, levels: int) -> ColorToken:
    """
    Shift a PaletteRef by `levels`; every other token shape is returned as-is.

    Examples:
        blue-500, +2   → blue-700
        blue-900, -10  → blue-50
        blue-50,  +1   → blue-100
    """
    if not isinstance(token, PaletteRef):
        return token
    new_shade = snap_shade(token.shade + levels * LEVEL_STEP, token.shade)
    return PaletteRef(token.family, new_shade)
