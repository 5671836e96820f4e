"""
oklch.py — Convert OKLCH color notation to sRGB hex for the renderer.

Two converters share one contract (`to_hex(value) -> "#rrggbb"`):
  1. OklchConverter       — pure numeric transform, deterministic, no host needed
     Pipeline: OKLCH → OKLab → LMS (cubed) → linear sRGB → gamma sRGB → hex
  2. EnvironmentConverter — hands the string to the presentation environment
     and reads back the computed `rgb(r, g, b)`

Neither raises on bad input: a malformed notation yields the fallback hex and a
warning in the log.

Usage:
    from svarm_badges.oklch import OklchConverter, select_converter

    OklchConverter().to_hex("oklch(62.3% 0.188 259.815)")   # → "#3b82f6"
    converter = select_converter(environment)
"""

from __future__ import annotations

import logging
import math
import re
from typing import Optional, Protocol, Tuple

import numpy as np

logger = logging.getLogger(__name__)

# blue-500
FALLBACK_HEX = "#3b82f6"

# ── Transform matrices (Björn Ottosson, OKLab) ────────────────────────────────

_OKLAB_TO_LMS = np.array([
    [1.0,  0.3963377774,  0.2158037573],
    [1.0, -0.1055613458, -0.0638541728],
    [1.0, -0.0894841775, -1.2914855480],
])

_LMS_TO_LINEAR_SRGB = np.array([
    [ 4.0767416621, -3.3077115913,  0.2309699292],
    [-1.2684380046,  2.6097574011, -0.3413193965],
    [-0.0041960863, -0.7034186147,  1.7076147010],
])

# 100% chroma in CSS Color 4
_CHROMA_PERCENT_REF = 0.4

_NUMBER = r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?"
_COMPONENT = rf"(none|{_NUMBER})(%|deg)?"
_OKLCH_RE = re.compile(
    rf"^\s*oklch\(\s*{_COMPONENT}\s+{_COMPONENT}\s+{_COMPONENT}"
    rf"\s*(?:/\s*(?:none|{_NUMBER})%?\s*)?\)\s*$",
    re.IGNORECASE,
)
_RGB_RE = re.compile(
    r"^\s*rgba?\(\s*(\d+(?:\.\d+)?)\s*,?\s*(\d+(?:\.\d+)?)\s*,?\s*(\d+(?:\.\d+)?)",
    re.IGNORECASE,
)


class ColorConverter(Protocol):
    """Anything that turns a color notation into `#rrggbb`."""

    def to_hex(self, value: str) -> str:
        ...


# ── Numeric transform ─────────────────────────────────────────────────────────

def parse_oklch(value: str) -> Optional[Tuple[float, float, float]]:
    """
    Parse 'oklch(62.3% 0.214 259.815)' → (L 0–1, C ≥ 0, H 0–360).

    Lightness accepts a percentage or a 0–1 number; a bare number above 1 is
    read as a percentage. Chroma accepts a number or a percentage of 0.4.
    Hue accepts an optional `deg` suffix and wraps. A trailing `/ alpha` is
    ignored. Returns None on parse failure.
    """
    match = _OKLCH_RE.match(value or "")
    if not match:
        return None
    l_raw, l_unit, c_raw, c_unit, h_raw, h_unit = match.groups()
    if l_unit == "deg" or c_unit == "deg" or h_unit == "%":
        return None

    def _num(raw: str) -> float:
        return 0.0 if raw.lower() == "none" else float(raw)

    try:
        L = _num(l_raw)
        C = _num(c_raw)
        H = _num(h_raw)
    except ValueError:
        return None
    if not all(math.isfinite(v) for v in (L, C, H)):
        return None

    if l_unit == "%" or L > 1.0:
        L = L / 100.0
    if c_unit == "%":
        C = C / 100.0 * _CHROMA_PERCENT_REF

    L = max(0.0, min(1.0, L))
    C = max(0.0, C)
    H = H % 360.0
    return L, C, H


def oklch_to_hex(L: float, C: float, H_deg: float) -> str:
    """
    Convert OKLCH(L, C, H°) → lowercase sRGB hex string.

    Out-of-gamut channels are clamped, not gamut-mapped.
    """
    H = math.radians(H_deg)
    lab = np.array([L, C * math.cos(H), C * math.sin(H)])

    with np.errstate(over="ignore", invalid="ignore"):
        lms = (_OKLAB_TO_LMS @ lab) ** 3
        linear = _LMS_TO_LINEAR_SRGB @ lms
    # huge chroma overflows to inf/nan; saturate instead
    linear = np.clip(np.nan_to_num(linear, nan=0.0, posinf=1.0, neginf=0.0), 0.0, 1.0)

    encoded = np.where(
        linear <= 0.0031308,
        12.92 * linear,
        1.055 * np.power(linear, 1.0 / 2.4) - 0.055,
    )
    channels = np.clip(np.rint(encoded * 255.0), 0, 255).astype(int)
    return "#" + "".join(f"{int(ch):02x}" for ch in channels)


def rgb_to_hex(r: float, g: float, b: float) -> str:
    """Clamp each channel to 0–255 and encode as `#rrggbb`."""
    return "#" + "".join(
        f"{max(0, min(255, int(round(ch)))):02x}" for ch in (r, g, b)
    )


def parse_rgb(value: str) -> Optional[Tuple[float, float, float]]:
    """Parse a computed 'rgb(r, g, b)' / 'rgba(r g b / a)' string."""
    match = _RGB_RE.match(value or "")
    if not match:
        return None
    return float(match.group(1)), float(match.group(2)), float(match.group(3))


# ── Converters ────────────────────────────────────────────────────────────────

class OklchConverter:
    """
    Numeric OKLCH converter.

    Strings that are not `oklch(...)` go to `delegate` when one is set
    (typically an EnvironmentConverter); otherwise they fall back.
    """

    def __init__(
        self,
        fallback: str = FALLBACK_HEX,
        delegate: Optional[ColorConverter] = None,
    ) -> None:
        self.fallback = fallback
        self.delegate = delegate

    def to_hex(self, value: str) -> str:
        value = value or ""
        parsed = parse_oklch(value)
        if parsed is not None:
            return oklch_to_hex(*parsed)
        if self.delegate is not None and not value.strip().lower().startswith("oklch("):
            return self.delegate.to_hex(value)
        logger.warning(f"Invalid OKLCH format: {value!r} — using {self.fallback}")
        return self.fallback


class EnvironmentConverter:
    """Ask the presentation environment to compute the final color."""

    def __init__(self, environment, fallback: str = FALLBACK_HEX) -> None:
        self.environment = environment
        self.fallback = fallback

    def to_hex(self, value: str) -> str:
        computed = self.environment.compute_color(value)
        rgb = parse_rgb(computed) if computed else None
        if rgb is None:
            logger.warning(
                f"Environment could not compute color {value!r} — using {self.fallback}"
            )
            return self.fallback
        return rgb_to_hex(*rgb)


def select_converter(environment=None, fallback: str = FALLBACK_HEX) -> ColorConverter:
    """
    Pick the converter stack once at startup.

    The numeric converter always handles `oklch()`. If the environment can
    compute colors (probed with black), other notations are delegated to it.
    """
    if environment is not None and parse_rgb(environment.compute_color("#000000") or ""):
        logger.info("Presentation environment computes colors — delegating non-OKLCH notations")
        return OklchConverter(fallback, delegate=EnvironmentConverter(environment, fallback))
    return OklchConverter(fallback)
