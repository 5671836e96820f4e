"""Tests for icon name normalization and the icon table."""

import logging

import pytest

from svarm_badges.cache import NOT_FOUND
from svarm_badges.icons import IconDataError, IconElement, IconTable, normalize_icon_name


@pytest.mark.parametrize(
    "name, expected",
    [
        ("CircleUser", "circle-user"),
        ("circleUser", "circle-user"),
        ("circle_user", "circle-user"),
        ("CIRCLE_USER", "circle-user"),
        ("circle-user", "circle-user"),
        ("MapPin", "map-pin"),
        ("XMLFile", "xml-file"),
        ("X", "x"),
        ("_private", "private"),
        ("  House ", "house"),
        ("_ x", "x"),
        ("-\tX", "x"),
        ("map_pin_", "map-pin"),
    ],
)
def test_normalize(name, expected):
    assert normalize_icon_name(name) == expected


@pytest.mark.parametrize(
    "name",
    ["CircleUser", "CIRCLE_USER", "circle__user", "__Lead", "Arrow2Right", "a-B_c", "-", "", "XMLHttpRequest", "_ x", "-\tX", " _-Map_Pin-_ ", "x_"],
)
def test_normalize_is_idempotent(name):
    once = normalize_icon_name(name)
    assert normalize_icon_name(once) == once


def test_lookup_forms_share_one_entry(icons):
    a = icons.lookup("circle_user")
    b = icons.lookup("CircleUser")
    c = icons.lookup("circle-user")
    assert a is b is c
    assert len(icons.cache) == 1
    assert icons.cache.hits == 2


def test_lookup_preserves_element_order(icons):
    definition = icons.lookup("CircleUser")
    assert [el.tag for el in definition] == ["circle", "circle", "path"]
    assert definition[1] == IconElement("circle", {"cx": "12", "cy": "10", "r": "3"})


def test_definition_is_immutable(icons):
    definition = icons.lookup("user")
    with pytest.raises(TypeError):
        definition[0].attributes["d"] = "M0 0"


def test_unknown_icon_is_cached_miss(icons, caplog):
    with caplog.at_level(logging.WARNING):
        assert icons.lookup("NoSuchIcon") is NOT_FOUND
        assert icons.lookup("no_such_icon") is NOT_FOUND
    assert "no-such-icon" in icons.cache
    warnings = [r for r in caplog.records if "Icon not found" in r.getMessage()]
    assert len(warnings) == 1


def test_preload_reports_missing(icons):
    missing = icons.preload(["MapPin", "Users", "Unicorn", "building"])
    assert missing == {"Unicorn"}
    assert len(icons.cache) == 4


def test_names_and_membership(icons):
    names = icons.names()
    assert names == sorted(names)
    assert "circle-user" in names
    assert "CircleUser" in icons
    assert "unicorn" not in icons


def test_clear_empties_cache(icons):
    icons.lookup("user")
    icons.clear()
    assert len(icons.cache) == 0


@pytest.mark.parametrize(
    "nodes",
    [
        {"CircleUser": [["circle", {"r": "10"}]]},
        {"empty": []},
        {"short": [["path"]]},
        {"numeric": [["path", {"d": 1}]]},
        {"shape": "not-a-list"},
        ["not", "a", "mapping"],
    ],
)
def test_malformed_icon_data_is_fatal(nodes):
    with pytest.raises(IconDataError):
        IconTable.from_nodes(nodes)
