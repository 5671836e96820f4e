"""
icons.py — Lucide-style icon lookup by name in any casing.

Icon data is the `icon-nodes.json` shape: canonical kebab-case key → ordered
list of `[tag, {attr: value}]` rows. The file is validated once at load; any
malformed row is fatal.

Names are normalized before every lookup:
  "CircleUser", "circleUser", "circle_user", "CIRCLE_USER", "circle-user"
      → "circle-user"

Usage:
    from svarm_badges.icons import IconTable

    icons = IconTable.load()
    icons.lookup("CircleUser")   # → (IconElement("circle", {...}), ...)
    icons.lookup("nope")         # → NOT_FOUND (and one warning)
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, NamedTuple, Optional, Set, Tuple, Union

from pydantic import TypeAdapter, ValidationError

from .cache import NOT_FOUND, ResolutionCache, _NotFound

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).parent / "data"
ICON_NODES_PATH = DATA_DIR / "icon_nodes.json"

# lowercase/digit → Upper  ("circleUser")  and  UPPER → Upper+lower ("XMLFile")
_CAMEL_RE = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")
# stray hyphens or whitespace at either end
_EDGE_RE = re.compile(r"^[\s-]+|[\s-]+$")

_ICON_NODES_ADAPTER = TypeAdapter(Dict[str, List[Tuple[str, Dict[str, str]]]])


class IconElement(NamedTuple):
    tag: str
    attributes: Mapping[str, str]


IconDefinition = Tuple[IconElement, ...]
IconResult = Union[IconDefinition, _NotFound]


class IconDataError(ValueError):
    """The bundled icon data is malformed."""


def normalize_icon_name(name: str) -> str:
    """PascalCase / camelCase / snake_case / SCREAMING_SNAKE → kebab-case."""
    kebab = _CAMEL_RE.sub("-", name.strip())
    return _EDGE_RE.sub("", kebab.replace("_", "-").lower())


def _build_definitions(raw: object) -> Dict[str, IconDefinition]:
    try:
        nodes = _ICON_NODES_ADAPTER.validate_python(raw)
    except ValidationError as e:
        raise IconDataError(f"Icon data has malformed rows: {e}") from e

    definitions: Dict[str, IconDefinition] = {}
    for key, rows in nodes.items():
        if normalize_icon_name(key) != key:
            raise IconDataError(f"Icon key {key!r} is not in canonical kebab-case")
        if not rows:
            raise IconDataError(f"Icon {key!r} has no elements")
        definitions[key] = tuple(
            IconElement(tag, MappingProxyType(dict(attrs))) for tag, attrs in rows
        )
    return definitions


class IconTable:
    """Fixed icon table with a hit-and-miss cache under the normalized key."""

    def __init__(
        self,
        definitions: Mapping[str, IconDefinition],
        cache: Optional[ResolutionCache[IconDefinition]] = None,
    ) -> None:
        self._definitions = MappingProxyType(dict(definitions))
        self.cache = cache if cache is not None else ResolutionCache("icon cache")

    @classmethod
    def from_nodes(cls, raw: object, cache: Optional[ResolutionCache[IconDefinition]] = None) -> "IconTable":
        return cls(_build_definitions(raw), cache)

    @classmethod
    def load(
        cls,
        path: Path = ICON_NODES_PATH,
        cache: Optional[ResolutionCache[IconDefinition]] = None,
    ) -> "IconTable":
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
        table = cls.from_nodes(raw, cache)
        logger.info(f"Icon table loaded: {len(table)} icons from {path.name}")
        return table

    def lookup(self, name: str) -> IconResult:
        key = normalize_icon_name(name)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        definition = self._definitions.get(key)
        if definition is None:
            logger.warning(f"Icon not found: {name!r} (normalized: {key!r})")
            self.cache.put(key, NOT_FOUND)
            return NOT_FOUND

        self.cache.put(key, definition)
        return definition

    def preload(self, names: Iterable[str]) -> Set[str]:
        """Warm the cache for every name; return the names that did not resolve."""
        return {name for name in names if self.lookup(name) is NOT_FOUND}

    def names(self) -> List[str]:
        return sorted(self._definitions)

    def clear(self) -> None:
        self.cache.clear()

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and normalize_icon_name(name) in self._definitions

    def __len__(self) -> int:
        return len(self._definitions)
