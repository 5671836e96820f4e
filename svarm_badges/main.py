"""
Svarm Badges — resolve color tokens and build node badges from the command line

Usage:
  python -m svarm_badges.main resolve blue-500 bg-red-700 primary
  python -m svarm_badges.main resolve blue-500 --darker 2
  python -m svarm_badges.main badge CircleUser --color emerald-600 --out badge.svg
  python -m svarm_badges.main icons --filter user
  python -m svarm_badges.main palette --out palette.png
  python -m svarm_badges.main --theme theme.css --selector .dark resolve primary
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .config import BadgeSettings, load_settings
from .palette_renderer import save_palette_sheet
from .symbols import DEFAULT_BACKGROUND, BadgePipeline, build_pipeline

console = Console()


# ── CLI ───────────────────────────────────────────────────────────────────────

def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Svarm Badges — color tokens and icon badges for the relationship graph"
    )
    parser.add_argument("--theme", default=None, help="Stylesheet with theme custom properties")
    parser.add_argument("--selector", default=None, help="Active theme selector (e.g. .dark)")
    sub = parser.add_subparsers(dest="command", required=True)

    p_resolve = sub.add_parser("resolve", help="Resolve color tokens to hex")
    p_resolve.add_argument("tokens", nargs="+", help="e.g. blue-500, bg-red-700, primary, #ff0000")
    shift = p_resolve.add_mutually_exclusive_group()
    shift.add_argument("--darker", type=int, default=None, metavar="N", help="Go N shades darker")
    shift.add_argument("--lighter", type=int, default=None, metavar="N", help="Go N shades lighter")

    p_badge = sub.add_parser("badge", help="Build a badge symbol for an icon")
    p_badge.add_argument("icon", help="Icon name in any casing, e.g. CircleUser")
    p_badge.add_argument("--color", default=DEFAULT_BACKGROUND, help="Background token")
    p_badge.add_argument("--stroke", default=None, help="Icon stroke hex")
    p_badge.add_argument("--out", default=None, help="Write the SVG here instead of printing the URI")

    p_icons = sub.add_parser("icons", help="List known icons")
    p_icons.add_argument("--filter", default="", help="Only names containing this text")

    p_palette = sub.add_parser("palette", help="Render the palette ladder as PNG")
    p_palette.add_argument("--out", required=True, help="PNG output path")

    return parser.parse_args(argv)


# ── Commands ──────────────────────────────────────────────────────────────────

def cmd_resolve(pipeline: BadgePipeline, args: argparse.Namespace) -> int:
    resolver = pipeline.resolver
    table = Table(title="Resolved colors")
    table.add_column("Token")
    table.add_column("Hex")
    table.add_column("")

    for token in args.tokens:
        if args.darker is not None:
            hex_value = resolver.darker(token, args.darker)
        elif args.lighter is not None:
            hex_value = resolver.lighter(token, args.lighter)
        else:
            hex_value = resolver.resolve(token)
        table.add_row(token, hex_value, f"[on {hex_value}]      [/]")

    console.print(table)
    return 0


def cmd_badge(pipeline: BadgePipeline, args: argparse.Namespace) -> int:
    symbol = pipeline.symbol(args.icon, args.color, args.stroke)
    if args.out:
        out = Path(args.out)
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(symbol.svg, encoding="utf-8")
        console.print(
            f"[green]✓ Badge[/green] → {out}  "
            f"(fill {symbol.background}, border {symbol.border})"
        )
    else:
        console.print(symbol.uri, soft_wrap=True, highlight=False, markup=False, emoji=False)
    return 0


def cmd_icons(pipeline: BadgePipeline, args: argparse.Namespace) -> int:
    names = [n for n in pipeline.icons.names() if args.filter.lower() in n]
    for name in names:
        console.print(name, highlight=False)
    console.print(f"[dim]{len(names)} icon(s)[/dim]")
    return 0


def cmd_palette(pipeline: BadgePipeline, args: argparse.Namespace) -> int:
    out = save_palette_sheet(pipeline.resolver.palette, args.out)
    console.print(f"[green]✓ Palette sheet[/green] → {out}")
    return 0


COMMANDS = {
    "resolve": cmd_resolve,
    "badge": cmd_badge,
    "icons": cmd_icons,
    "palette": cmd_palette,
}


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    try:
        settings: BadgeSettings = load_settings(
            theme_css=args.theme,
            theme_selector=args.selector,
        )
    except ValidationError as e:
        console.print(f"[red]✗ Invalid configuration:[/red]\n{escape(str(e))}")
        return 2

    logging.basicConfig(
        format="%(asctime)s — %(levelname)s — %(name)s — %(message)s",
        level=settings.log_level,
    )

    pipeline = build_pipeline(settings)
    return COMMANDS[args.command](pipeline, args)


if __name__ == "__main__":
    sys.exit(main())
