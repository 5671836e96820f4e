"""Tests for badge symbol synthesis."""

import dataclasses
from urllib.parse import unquote

import pytest

from svarm_badges.config import BadgeSettings
from svarm_badges.environment import HeadlessEnvironment
from svarm_badges.symbols import (
    URI_PREFIX,
    FallbackIconMissingError,
    SymbolDescriptor,
    build_pipeline,
    serialize_elements,
)

USER_NODES = {
    "user": [
        ["path", {"d": "M19 21v-2a4 4 0 0 0-4-4H9a4 4 0 0 0-4 4v2"}],
        ["circle", {"cx": "12", "cy": "7", "r": "4"}],
    ],
}


def test_circle_user_on_blue(pipeline):
    symbol = pipeline.symbol("CircleUser", "blue-500")
    svg = unquote(symbol.uri[len(URI_PREFIX):])

    assert symbol.uri.startswith(URI_PREFIX)
    assert svg == symbol.svg
    assert 'fill="#3b82f6"' in svg
    assert 'stroke="#1d4ed8"' in svg
    assert '<circle cx="12" cy="12" r="10"/>' in svg
    assert '<circle cx="12" cy="10" r="3"/>' in svg
    assert '<path d="M7 20.662V19a2 2 0 0 1 2-2h6a2 2 0 0 1 2 2v1.662"/>' in svg


def test_synthesize_matches_symbol(pipeline, icons):
    direct = pipeline.synthesize(icons.lookup("CircleUser"), "blue-500")
    assert direct == pipeline.symbol("circle_user", "blue-500")
    assert direct.background == "#3b82f6"
    assert direct.border == "#1d4ed8"


def test_layout(pipeline):
    svg = pipeline.symbol("house", "emerald-600").svg
    assert svg.startswith('<svg xmlns="http://www.w3.org/2000/svg" width="48" height="48" viewBox="0 0 48 48">')
    assert '<circle cx="24" cy="24" r="22" fill="#059669" stroke="#065f46" stroke-width="3"/>' in svg
    assert '<g transform="translate(12, 12)">' in svg
    assert (
        '<svg width="24" height="24" viewBox="0 0 24 24" fill="none" stroke="#ffffff" '
        'stroke-width="2" stroke-linecap="round" stroke-linejoin="round">'
    ) in svg


def test_custom_icon_stroke(pipeline):
    symbol = pipeline.symbol("star", "amber-400", "#111827")
    assert symbol.icon_stroke == "#111827"
    assert 'stroke="#111827"' in symbol.svg


def test_hex_background_border_is_same_color(pipeline):
    symbol = pipeline.symbol("zap", "#FF0000")
    assert symbol.background == symbol.border == "#ff0000"


def test_unknown_icon_uses_fallback(pipeline):
    unknown = pipeline.symbol("DefinitelyNotAnIcon", "red-500")
    fallback = pipeline.symbol("circle-user", "red-500")
    assert unknown == fallback


def test_unknown_icon_warns(pipeline, caplog):
    pipeline.symbol("Unicorn", "red-500")
    assert "Using fallback icon (circle-user)" in caplog.text


def test_bad_color_still_renders(pipeline):
    symbol = pipeline.symbol("user", "mauve-500")
    assert symbol.background == symbol.border == "#3b82f6"


def test_missing_fallback_icon_is_fatal(pipeline_factory):
    pipeline = pipeline_factory(USER_NODES)
    assert pipeline.symbol("user", "blue-500").background == "#3b82f6"
    with pytest.raises(FallbackIconMissingError):
        pipeline.symbol("circle-user", "blue-500")


def test_configured_fallback_icon(pipeline_factory):
    pipeline = pipeline_factory(USER_NODES, fallback_icon="User")
    assert pipeline.symbol("nope", "blue-500") == pipeline.symbol("user", "blue-500")


def test_configured_border_levels(pipeline_factory):
    pipeline = pipeline_factory(USER_NODES, border_levels=4)
    assert pipeline.symbol("user", "blue-500").border == "#1e3a8a"


def test_uri_is_fully_escaped(pipeline):
    encoded = pipeline.symbol("MapPin", "sky-500").uri[len(URI_PREFIX):]
    for ch in '<>"# /=,':
        assert ch not in encoded


def test_descriptor_is_frozen(pipeline):
    symbol = pipeline.symbol("user")
    assert isinstance(symbol, SymbolDescriptor)
    assert str(symbol) == symbol.uri
    with pytest.raises(dataclasses.FrozenInstanceError):
        symbol.uri = "x"


def test_serialize_elements_verbatim():
    definition = (("line", {"x1": "4", "x2": "4"}), ("g", {}))
    assert serialize_elements(definition) == '<line x1="4" x2="4"/><g/>'


def test_invalidate_clears_both_caches(pipeline):
    pipeline.symbol("user", "blue-500")
    assert len(pipeline.resolver.cache) > 0
    assert len(pipeline.icons.cache) > 0
    pipeline.invalidate()
    assert len(pipeline.resolver.cache) == 0
    assert len(pipeline.icons.cache) == 0


def test_use_theme_switches_and_invalidates(pipeline):
    assert pipeline.symbol("user", "primary").background == "#3b82f6"
    pipeline.use_theme(".dark")
    assert pipeline.symbol("user", "primary").background == "#1e3a8a"


def test_use_theme_without_theme_support(pipeline_factory, caplog):
    pipeline = pipeline_factory(USER_NODES)
    pipeline.use_theme(".dark")
    assert "no switchable themes" in caplog.text


def test_build_pipeline_defaults():
    pipeline = build_pipeline(BadgeSettings(), environment=HeadlessEnvironment())
    symbol = pipeline.symbol("Users", "violet-500")
    assert symbol.background == "#8b5cf6"
    assert symbol.border == "#6d28d9"


def test_build_pipeline_with_theme_file(theme_css_file):
    settings = BadgeSettings(theme_css=theme_css_file, theme_selector=".dark")
    pipeline = build_pipeline(settings)
    assert pipeline.resolver.resolve("primary") == "#1e3a8a"
