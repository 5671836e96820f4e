"""
symbols.py — Compose a colored circular badge with a centered icon.

Layout (48×48 canvas):
  ┌────────────────────────┐
  │   ╭────────────────╮   │  circle r=22 at (24,24)
  │   │   ┌────────┐   │   │    fill   = background token
  │   │   │  icon  │   │   │    stroke = background token, 2 levels darker
  │   │   └────────┘   │   │  icon: 24×24 box translated by (12,12),
  │   ╰────────────────╯   │    stroked in icon color, width 2, no fill
  └────────────────────────┘

The SVG is percent-encoded into an `image://data:image/svg+xml;utf8,...`
reference the chart renderer can use directly as a node symbol.

Usage:
    from svarm_badges.symbols import build_pipeline

    pipeline = build_pipeline()
    symbol = pipeline.symbol("CircleUser", "blue-500")
    symbol.uri   # → "image://data:image/svg+xml;utf8,%3Csvg..."
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional
from urllib.parse import quote

from .cache import NOT_FOUND
from .config import BadgeSettings
from .environment import PresentationEnvironment, load_environment
from .icons import IconDefinition, IconTable, normalize_icon_name
from .palette import Palette
from .resolver import TokenResolver

logger = logging.getLogger(__name__)

URI_PREFIX = "image://data:image/svg+xml;utf8,"

# encodeURIComponent leaves these unescaped besides alphanumerics and -_.
_URI_SAFE = "!~*'()"

CANVAS_SIZE = 48
BADGE_RADIUS = 22
BADGE_STROKE_WIDTH = 3
ICON_INSET = 12
ICON_SIZE = 24
ICON_STROKE_WIDTH = 2

DEFAULT_BACKGROUND = "blue-500"
DEFAULT_ICON_STROKE = "#ffffff"


class FallbackIconMissingError(LookupError):
    """The fallback icon is absent from the icon table; the data is corrupt."""


@dataclass(frozen=True)
class SymbolDescriptor:
    """One rendered badge. `uri` is what the renderer consumes."""

    uri: str
    svg: str
    background: str
    border: str
    icon_stroke: str

    def __str__(self) -> str:
        return self.uri


def serialize_elements(definition: IconDefinition) -> str:
    """Each element as a self-closing tag, attributes verbatim in order."""
    parts = []
    for tag, attrs in definition:
        attrs_str = " ".join(f'{key}="{value}"' for key, value in attrs.items())
        parts.append(f"<{tag} {attrs_str}/>" if attrs_str else f"<{tag}/>")
    return "".join(parts)


def compose_svg(icon_content: str, background: str, border: str, icon_stroke: str) -> str:
    center = CANVAS_SIZE // 2
    return (
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{CANVAS_SIZE}" height="{CANVAS_SIZE}" '
        f'viewBox="0 0 {CANVAS_SIZE} {CANVAS_SIZE}">'
        f'<circle cx="{center}" cy="{center}" r="{BADGE_RADIUS}" fill="{background}" '
        f'stroke="{border}" stroke-width="{BADGE_STROKE_WIDTH}"/>'
        f'<g transform="translate({ICON_INSET}, {ICON_INSET})">'
        f'<svg width="{ICON_SIZE}" height="{ICON_SIZE}" viewBox="0 0 {ICON_SIZE} {ICON_SIZE}" '
        f'fill="none" stroke="{icon_stroke}" stroke-width="{ICON_STROKE_WIDTH}" '
        f'stroke-linecap="round" stroke-linejoin="round">'
        f"{icon_content}"
        f"</svg>"
        f"</g>"
        f"</svg>"
    )


def encode_uri(svg: str) -> str:
    return URI_PREFIX + quote(svg, safe=_URI_SAFE)


class SymbolSynthesizer:
    def __init__(
        self,
        resolver: TokenResolver,
        icons: IconTable,
        fallback_icon: str = "circle-user",
        border_levels: int = 2,
        icon_stroke: str = DEFAULT_ICON_STROKE,
    ) -> None:
        self.resolver = resolver
        self.icons = icons
        self.fallback_icon = normalize_icon_name(fallback_icon)
        self.border_levels = border_levels
        self.icon_stroke = icon_stroke

    def synthesize(
        self,
        definition: IconDefinition,
        background_token: str,
        icon_stroke: Optional[str] = None,
    ) -> SymbolDescriptor:
        """Badge for an already-resolved icon definition."""
        background = self.resolver.resolve(background_token)
        border = self.resolver.darker(background_token, self.border_levels)
        stroke = icon_stroke or self.icon_stroke

        svg = compose_svg(serialize_elements(definition), background, border, stroke)
        return SymbolDescriptor(
            uri=encode_uri(svg),
            svg=svg,
            background=background,
            border=border,
            icon_stroke=stroke,
        )

    def symbol(
        self,
        icon_name: str,
        background_token: str = DEFAULT_BACKGROUND,
        icon_stroke: Optional[str] = None,
    ) -> SymbolDescriptor:
        """Badge for an icon name; unknown icons get the fallback icon."""
        definition = self.icons.lookup(icon_name)
        if definition is NOT_FOUND:
            logger.warning(f"Using fallback icon ({self.fallback_icon}) for: {icon_name!r}")
            definition = self.icons.lookup(self.fallback_icon)
            if definition is NOT_FOUND:
                raise FallbackIconMissingError(
                    f"Failed to load fallback icon {self.fallback_icon!r} — icon data is incomplete"
                )
        return self.synthesize(definition, background_token, icon_stroke)


class BadgePipeline(SymbolSynthesizer):
    """Palette + environment + icon table + both caches, wired together."""

    def invalidate(self) -> None:
        """Drop every cached color and icon (call after a theme change)."""
        self.resolver.clear()
        self.icons.clear()

    def use_theme(self, selector: str) -> None:
        use_selector = getattr(self.resolver.environment, "use_selector", None)
        if use_selector is None:
            logger.warning(f"Environment has no switchable themes — ignoring {selector!r}")
            return
        use_selector(selector)
        self.invalidate()


def build_pipeline(
    settings: Optional[BadgeSettings] = None,
    environment: Optional[PresentationEnvironment] = None,
    palette: Optional[Palette] = None,
    icons: Optional[IconTable] = None,
) -> BadgePipeline:
    settings = settings or BadgeSettings()
    if environment is None:
        environment = load_environment(settings.theme_css, settings.theme_selector)
    resolver = TokenResolver(
        palette or Palette.load(),
        environment=environment,
        fallback=settings.fallback_color,
    )
    return BadgePipeline(
        resolver,
        icons or IconTable.load(),
        fallback_icon=settings.fallback_icon,
        border_levels=settings.border_levels,
        icon_stroke=settings.icon_stroke,
    )
