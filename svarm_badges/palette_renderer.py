"""
palette_renderer.py — Render the palette ladder as a swatch grid PNG.

Layout:
  ┌────────┬────┬─────┬─────┬─ ─ ─┬─────┐
  │        │ 50 │ 100 │ 200 │     │ 950 │  ← stop labels
  ├────────┼────┼─────┼─────┼─ ─ ─┼─────┤
  │ slate  │####│#####│#####│     │#####│  ← one row per family,
  │ gray   │####│#####│#####│     │#####│    hex label inside swatch
  │ ...    │    │     │     │     │     │
  └────────┴────┴─────┴─────┴─ ─ ─┴─────┘

Useful for checking what a dataset's `family-shade` tokens will look like.

Usage:
    from svarm_badges.palette_renderer import render_palette_sheet

    img = render_palette_sheet(palette)
    save_palette_sheet(palette, "out/palette.png")
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional, Tuple, Union

from PIL import Image, ImageDraw, ImageFont

from .palette import SHADE_LADDER, Palette

SHADE_STOPS_LABELS = [str(stop) for stop in SHADE_LADDER]

# ── Font helpers ────────────────────────────────────────────────────────────

_FONT_CANDIDATES = [
    "/System/Library/Fonts/HelveticaNeue.ttc",
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf",
]

_FONT_BOLD_CANDIDATES = [
    "/System/Library/Fonts/HelveticaNeue.ttc",
    "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationSans-Bold.ttf",
]


def _load_font(size: int, bold: bool = False) -> ImageFont.ImageFont:
    candidates = _FONT_BOLD_CANDIDATES if bold else _FONT_CANDIDATES
    for path in candidates:
        try:
            return ImageFont.truetype(path, size)
        except OSError:
            continue
    return ImageFont.load_default()


# ── Color utilities ─────────────────────────────────────────────────────────

def _hex_to_rgb(hex_str: str) -> Tuple[int, int, int]:
    h = hex_str.lstrip("#")
    return int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16)


def _brightness(rgb: Tuple[int, int, int]) -> float:
    return 0.299 * rgb[0] + 0.587 * rgb[1] + 0.114 * rgb[2]


def _text_color(bg_rgb: Tuple[int, int, int]) -> Tuple[int, int, int]:
    """White or near-black, whichever reads on the swatch."""
    return (255, 255, 255) if _brightness(bg_rgb) < 145 else (20, 20, 20)


def _text_width(draw: ImageDraw.ImageDraw, text: str, font: ImageFont.ImageFont) -> int:
    bb = draw.textbbox((0, 0), text, font=font)
    return bb[2] - bb[0]


# ── Core renderer ───────────────────────────────────────────────────────────

def render_palette_sheet(
    palette: Palette,
    families: Optional[Iterable[str]] = None,
    swatch_width: int = 96,
    row_height: int = 56,
    header_height: int = 40,
    name_col: int = 120,
    gap: int = 2,
    highlight: int = 500,
) -> Image.Image:
    """
    Draw one row per family and one column per ladder stop.

    Args:
        palette:       Loaded Palette.
        families:      Subset/order of families (default: all, palette order).
        swatch_width:  Width of one swatch cell.
        row_height:    Height of one family row.
        header_height: Height of the stop-label row.
        name_col:      Width of the family-name column.
        gap:           Pixels between cells.
        highlight:     Stop drawn with an inner border (the usual base shade).

    Returns:
        PIL Image in RGB mode.
    """
    rows = list(families) if families is not None else list(palette)
    unknown = [name for name in rows if name not in palette]
    if unknown:
        raise KeyError(f"Unknown palette families: {unknown}")

    n_stops = len(SHADE_LADDER)
    width = name_col + n_stops * swatch_width + (n_stops - 1) * gap
    height = header_height + len(rows) * (row_height + gap)
    bg = (12, 12, 16)

    img = Image.new("RGB", (width, height), bg)
    draw = ImageDraw.Draw(img)

    font_stop = _load_font(14)
    font_hex = _load_font(11)
    font_name = _load_font(14, bold=True)

    # ── Header row: stop labels ──────────────────────────────────────────────
    for si, stop in enumerate(SHADE_STOPS_LABELS):
        sx = name_col + si * (swatch_width + gap)
        lw = _text_width(draw, stop, font_stop)
        draw.text(
            (sx + (swatch_width - lw) // 2, (header_height - 16) // 2),
            stop,
            fill=(80, 80, 95),
            font=font_stop,
        )

    # ── Family rows ─────────────────────────────────────────────────────────
    for row_i, family in enumerate(rows):
        row_y = header_height + row_i * (row_height + gap)
        draw.rectangle([0, row_y, name_col - 1, row_y + row_height - 1], fill=(20, 20, 26))
        draw.text((10, row_y + row_height // 2 - 8), family, fill=(200, 200, 210), font=font_name)

        for si, stop in enumerate(SHADE_LADDER):
            hex_val = palette.hex(family, stop)
            rgb = _hex_to_rgb(hex_val)
            sx = name_col + si * (swatch_width + gap)
            draw.rectangle([sx, row_y, sx + swatch_width - 1, row_y + row_height - 1], fill=rgb)

            if stop == highlight:
                draw.rectangle(
                    [sx + 2, row_y + 2, sx + swatch_width - 3, row_y + row_height - 3],
                    outline=_text_color(rgb),
                    width=2,
                )

            label = hex_val.upper()
            lw = _text_width(draw, label, font_hex)
            draw.text(
                (sx + (swatch_width - lw) // 2, row_y + row_height - 18),
                label,
                fill=_text_color(rgb),
                font=font_hex,
            )

    return img


def save_palette_sheet(
    palette: Palette,
    output_path: Union[str, Path],
    families: Optional[Iterable[str]] = None,
) -> Path:
    """Render the sheet and save as PNG. Returns the written path."""
    img = render_palette_sheet(palette, families=families)
    out = Path(output_path)
    out.parent.mkdir(parents=True, exist_ok=True)
    img.save(str(out), "PNG")
    return out
