"""
config.py — Pipeline settings from environment variables / `.env`.

    SVARM_FALLBACK_COLOR=#3b82f6     color for any token that can't be resolved
    SVARM_FALLBACK_ICON=circle-user  icon substituted for unknown names
    SVARM_BORDER_LEVELS=2            badge border = background N shades darker
    SVARM_ICON_STROKE=#ffffff        icon line color
    SVARM_THEME_CSS=theme.css        stylesheet with --primary, --chart-1, ...
    SVARM_THEME_SELECTOR=:root       active theme block (e.g. .dark)
    SVARM_LOG_LEVEL=WARNING
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

_HEX_RE = re.compile(r"^#[0-9a-fA-F]{6}$")

ENV_PREFIX = "SVARM_"


class BadgeSettings(BaseModel):
    fallback_color: str = Field(default="#3b82f6", description="Hex used when a token can't be resolved")
    fallback_icon: str = Field(default="circle-user", description="Icon used when a name can't be found")
    border_levels: int = Field(default=2, ge=0, le=10, description="Shade levels between fill and border")
    icon_stroke: str = Field(default="#ffffff", description="Icon stroke color")
    theme_css: Optional[Path] = Field(default=None, description="Stylesheet providing theme custom properties")
    theme_selector: str = Field(default=":root", description="Active theme selector")
    log_level: str = Field(default="WARNING")

    @field_validator("fallback_color", "icon_stroke")
    @classmethod
    def _check_hex(cls, v: str) -> str:
        if not _HEX_RE.match(v):
            raise ValueError(f"expected #rrggbb, got {v!r}")
        return v.lower()

    @field_validator("fallback_icon")
    @classmethod
    def _check_icon(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("fallback icon name must not be empty")
        return v.strip()

    @field_validator("log_level")
    @classmethod
    def _check_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level {v!r}")
        return level


def load_settings(environ: Optional[Mapping[str, str]] = None, **overrides) -> BadgeSettings:
    """
    Build settings from `SVARM_*` variables. Keyword overrides win.

    Raises pydantic.ValidationError on invalid values.
    """
    if environ is None:
        load_dotenv()
        environ = os.environ

    values = {}
    for name in BadgeSettings.model_fields:
        raw = environ.get(f"{ENV_PREFIX}{name.upper()}")
        if raw not in (None, ""):
            values[name] = raw
    values.update({k: v for k, v in overrides.items() if v is not None})
    return BadgeSettings(**values)
