"""Tests for settings_parser.py."""

import json

import pytest
from grammar2html.colorizer import StyleTag
from grammar2html.settings_parser import (
    Grammar2HtmlSettings, StyleSpec,
    default_palette, parse_settings_file, settings_from_dict,
)


class TestDefaults:
    def test_palette_covers_every_style(self):
        assert set(default_palette()) == set(StyleTag)

    def test_production_colour(self):
        assert default_palette()[StyleTag.PRODUCTION] == StyleSpec(106, 90, 205)

    def test_extended_terminal_italic(self):
        assert default_palette()[StyleTag.EXTENDED_TERMINAL].italic

    def test_start_symbol(self):
        assert Grammar2HtmlSettings().start_symbol == "start"

    def test_css(self):
        assert StyleSpec(0, 128, 0).css == "color:rgb(0,128,0)"
        assert StyleSpec(1, 2, 3, True).css == "color:rgb(1,2,3);font-style:italic"


class TestSettingsFromDict:
    def test_partial_palette(self):
        s = settings_from_dict({"Palette": {"Comment": [128, 128, 128]}})
        assert s.palette[StyleTag.COMMENT] == StyleSpec(128, 128, 128)
        assert s.palette[StyleTag.TERMINAL] == StyleSpec(163, 21, 21)

    def test_italic_form(self):
        s = settings_from_dict({"Palette": {"Terminal": {"rgb": [1, 2, 3], "italic": True}}})
        assert s.palette[StyleTag.TERMINAL] == StyleSpec(1, 2, 3, True)

    def test_wrapped_values(self):
        s = settings_from_dict({"StartSymbol": {"value": "compilation_unit"},
                                "Title": {"value": "C# grammar"}})
        assert s.start_symbol == "compilation_unit"
        assert s.title == "C# grammar"

    @pytest.mark.parametrize("bad", [
        {"Palette": {"Keyword": [0, 0, 255]}},
        {"Palette": {"Comment": [0, 0]}},
        {"Palette": {"Comment": [0, 0, 300]}},
        {"Palette": {"Comment": "green"}},
        {"StartSymbol": ""},
        {"StartSymbol": 3},
    ])
    def test_bad_values_keep_defaults(self, bad):
        s = settings_from_dict(bad)
        assert s.palette == default_palette()
        assert s.start_symbol == "start"


class TestParseFile:
    def test_file(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"Title": "Expr", "Unknown": 1}), encoding="utf-8")
        s = parse_settings_file(path)
        assert s.title == "Expr"

    def test_non_object_gives_defaults(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text("[]", encoding="utf-8")
        assert parse_settings_file(path) == Grammar2HtmlSettings()
