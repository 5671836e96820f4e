"""Shared test fixtures."""

from pathlib import Path
from typing import Callable, Dict

import pytest

from svarm_badges.environment import HeadlessEnvironment, StylesheetEnvironment
from svarm_badges.icons import IconTable
from svarm_badges.palette import Palette
from svarm_badges.resolver import TokenResolver
from svarm_badges.symbols import BadgePipeline

THEME_CSS = """
/* light theme */
:root {
  --primary: oklch(62.3% 0.188 259.815);
  --secondary: #10B981;
  --accent: hsl(0, 100%, 50%);
  --chart-1: oklch(0.646 0.222 41.116);
  --chart-2: tomato;
  --chart-3: not-a-color;
}

.dark {
  --primary: #1e3a8a;
}
"""


def hex_close(actual: str, expected: str, tolerance: int = 1) -> bool:
    """True when every channel is within `tolerance` of the expected hex."""
    a = [int(actual[i:i + 2], 16) for i in (1, 3, 5)]
    e = [int(expected[i:i + 2], 16) for i in (1, 3, 5)]
    return len(actual) == 7 and all(abs(x - y) <= tolerance for x, y in zip(a, e))


@pytest.fixture(scope="session")
def palette() -> Palette:
    """The bundled palette (read-only, shared)."""
    return Palette.load()


@pytest.fixture
def icons() -> IconTable:
    """A fresh icon table with an empty cache."""
    return IconTable.load()


@pytest.fixture
def environment() -> StylesheetEnvironment:
    return StylesheetEnvironment.from_css(THEME_CSS)


@pytest.fixture
def theme_css_file(tmp_path: Path) -> Path:
    path = tmp_path / "theme.css"
    path.write_text(THEME_CSS, encoding="utf-8")
    return path


@pytest.fixture
def resolver(palette: Palette, environment: StylesheetEnvironment) -> TokenResolver:
    return TokenResolver(palette, environment=environment)


@pytest.fixture
def headless_resolver(palette: Palette) -> TokenResolver:
    return TokenResolver(palette, environment=HeadlessEnvironment())


@pytest.fixture
def pipeline(resolver: TokenResolver, icons: IconTable) -> BadgePipeline:
    return BadgePipeline(resolver, icons)


@pytest.fixture
def pipeline_factory(palette: Palette) -> Callable[..., BadgePipeline]:
    """Build a pipeline around custom icon nodes."""

    def _make(nodes: Dict, **kwargs) -> BadgePipeline:
        resolver = TokenResolver(palette, environment=HeadlessEnvironment())
        return BadgePipeline(resolver, IconTable.from_nodes(nodes), **kwargs)

    return _make
