"""
environment.py — The presentation environment the resolver reads theme state from.

A presentation environment offers two synchronous capabilities:
  get_property(name)    → computed custom-property value, "" when absent
  compute_color(value)  → "rgb(r, g, b)" for any color notation, "" when it can't

Adapters:
  StylesheetEnvironment — custom properties parsed from CSS text, with a
                          switchable active selector (":root", ".dark", ...)
  HeadlessEnvironment   — no rendering surface; every lookup comes back empty

Switching theme does not touch any cache: callers must invalidate the
resolution caches after `use_selector()`.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Protocol

from PIL import ImageColor

from .oklch import OklchConverter, parse_oklch

logger = logging.getLogger(__name__)

ROOT_SELECTOR = ":root"

_COMMENT_RE = re.compile(r"/\*.*?\*/", re.DOTALL)
_BLOCK_RE = re.compile(r"([^{}]+)\{([^{}]*)\}")
_DECL_RE = re.compile(r"(--[\w-]+)\s*:\s*([^;]+?)\s*(?:;|$)")


class PresentationEnvironment(Protocol):
    def get_property(self, name: str) -> str:
        ...

    def compute_color(self, value: str) -> str:
        ...


def property_name(name: str) -> str:
    """Accept 'primary' or '--primary'; always return '--primary'."""
    name = name.strip()
    return name if name.startswith("--") else f"--{name}"


def parse_custom_properties(css: str) -> Dict[str, Dict[str, str]]:
    """
    Collect custom properties per selector from flat CSS text.

    Nested at-rule wrappers (`@layer base { ... }`, `@theme inline { ... }`)
    are flattened: the innermost `selector { decls }` block wins its selector.
    A comma-separated selector list assigns the declarations to each selector.
    """
    text = _COMMENT_RE.sub("", css)
    blocks: Dict[str, Dict[str, str]] = {}

    for match in _BLOCK_RE.finditer(text):
        header, body = match.group(1), match.group(2)
        header = header.split(";")[-1].strip()
        if header.startswith("@"):
            # `@theme { --x: ... }` declares on the root
            header = ROOT_SELECTOR
        decls = {name: value.strip() for name, value in _DECL_RE.findall(body)}
        if not decls:
            continue
        for selector in (s.strip() for s in header.split(",")):
            if selector:
                blocks.setdefault(selector, {}).update(decls)

    return blocks


class StylesheetEnvironment:
    """Custom properties from a stylesheet, resolved like the cascade on <html>."""

    def __init__(
        self,
        blocks: Mapping[str, Mapping[str, str]],
        selector: str = ROOT_SELECTOR,
    ) -> None:
        self._blocks = {sel: dict(decls) for sel, decls in blocks.items()}
        self._numeric = OklchConverter()
        self.selector = ROOT_SELECTOR
        self.use_selector(selector)

    @classmethod
    def from_css(cls, css: str, selector: str = ROOT_SELECTOR) -> "StylesheetEnvironment":
        return cls(parse_custom_properties(css), selector)

    @classmethod
    def from_file(cls, path: Path, selector: str = ROOT_SELECTOR) -> "StylesheetEnvironment":
        css = Path(path).read_text(encoding="utf-8")
        env = cls.from_css(css, selector)
        logger.info(f"Theme stylesheet loaded: {Path(path).name} ({len(env.selectors())} selectors)")
        return env

    @classmethod
    def from_variables(cls, variables: Mapping[str, str]) -> "StylesheetEnvironment":
        return cls({ROOT_SELECTOR: {property_name(k): v for k, v in variables.items()}})

    def selectors(self) -> List[str]:
        return list(self._blocks)

    def use_selector(self, selector: str) -> None:
        """Activate a theme block (`.dark`, `[data-theme=x]`); falls back to :root."""
        if selector != ROOT_SELECTOR and selector not in self._blocks:
            logger.warning(f"Theme selector {selector!r} not found — using {ROOT_SELECTOR}")
            selector = ROOT_SELECTOR
        self.selector = selector
        logger.info(f"Active theme selector: {selector}")

    def get_property(self, name: str) -> str:
        key = property_name(name)
        active = self._blocks.get(self.selector, {})
        if key in active:
            return active[key].strip()
        return self._blocks.get(ROOT_SELECTOR, {}).get(key, "").strip()

    def compute_color(self, value: str) -> str:
        value = (value or "").strip()
        if not value:
            return ""
        if parse_oklch(value) is not None:
            hex_value = self._numeric.to_hex(value)
            r, g, b = ImageColor.getrgb(hex_value)[:3]
            return f"rgb({r}, {g}, {b})"
        try:
            rgb = ImageColor.getrgb(value)
        except ValueError:
            return ""
        r, g, b = rgb[:3]
        return f"rgb({r}, {g}, {b})"


class HeadlessEnvironment:
    """No rendering surface attached."""

    def get_property(self, name: str) -> str:
        return ""

    def compute_color(self, value: str) -> str:
        return ""


def load_environment(
    theme_css: Optional[Path] = None,
    selector: str = ROOT_SELECTOR,
) -> PresentationEnvironment:
    if theme_css is None:
        return HeadlessEnvironment()
    return StylesheetEnvironment.from_file(theme_css, selector)
