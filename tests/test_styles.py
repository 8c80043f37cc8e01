"""Tests for codepaint.styles — style tables and resolution."""

import logging

import pytest

from codepaint.colors import hex_to_rgb_triplet
from codepaint.styles import (
    DEFAULT_DARK,
    DEFAULT_LIGHT,
    EMPTY_STYLE,
    Style,
    get_style_table,
    merge_overrides,
    resolve,
    style_table_from_pygments,
)


class TestStyle:
    def test_default_is_empty(self):
        assert Style().is_empty
        assert EMPTY_STYLE.is_empty

    @pytest.mark.parametrize("style", [
        Style(foreground="ffffff"),
        Style(background="000000"),
        Style(italic=True),
        Style(bold=True),
    ])
    def test_any_attribute_is_not_empty(self, style):
        assert not style.is_empty


class TestResolve:
    def test_exact_match(self):
        table = {"String": Style(foreground="ff0000")}
        assert resolve("String", table) == Style(foreground="ff0000")

    def test_missing_is_empty(self):
        assert resolve("Punctuation", DEFAULT_DARK) is EMPTY_STYLE

    def test_no_inheritance_between_names(self):
        table = {"String": Style(foreground="ff0000")}
        assert resolve("String Escape", table) is EMPTY_STYLE


class TestBuiltinTables:
    @pytest.mark.parametrize("table", [DEFAULT_DARK, DEFAULT_LIGHT])
    def test_all_colors_parse(self, table):
        for style in table.values():
            hex_to_rgb_triplet(style.foreground)
            hex_to_rgb_triplet(style.background)

    def test_plain_text_is_unstyled(self):
        assert "Plain Text" not in DEFAULT_DARK

    def test_read_only(self):
        with pytest.raises(TypeError):
            DEFAULT_DARK["Keyword"] = Style()


class TestGetStyleTable:
    def test_dark(self):
        assert get_style_table("dark") is DEFAULT_DARK

    def test_light(self):
        assert get_style_table("light") is DEFAULT_LIGHT

    def test_unknown_falls_back(self, caplog):
        with caplog.at_level(logging.WARNING, logger="codepaint"):
            assert get_style_table("neon") is DEFAULT_DARK
        assert "neon" in caplog.text

    def test_pygments_style(self):
        table = get_style_table("pygments:monokai")
        assert table["Keyword"].foreground.lower().endswith("66d9ef")

    def test_unknown_pygments_style_falls_back(self, caplog):
        with caplog.at_level(logging.WARNING, logger="codepaint"):
            assert get_style_table("pygments:no-such-style") is DEFAULT_DARK


class TestStyleTableFromPygments:
    def test_unknown_style(self):
        with pytest.raises(ValueError, match="no-such-style"):
            style_table_from_pygments("no-such-style")

    def test_colors_parse(self):
        for style in style_table_from_pygments("default").values():
            hex_to_rgb_triplet(style.foreground)
            hex_to_rgb_triplet(style.background)

    def test_no_empty_entries(self):
        assert all(not s.is_empty for s in style_table_from_pygments("default").values())


class TestMergeOverrides:
    def test_partial_override_keeps_other_attributes(self):
        merged = merge_overrides(DEFAULT_DARK, {"Keyword": {"bold": True}})
        assert merged["Keyword"].bold is True
        assert merged["Keyword"].foreground == DEFAULT_DARK["Keyword"].foreground

    def test_new_name(self):
        merged = merge_overrides(DEFAULT_DARK, {"Punctuation": {"foreground": "#808080"}})
        assert merged["Punctuation"] == Style(foreground="#808080")

    def test_base_untouched(self):
        merge_overrides(DEFAULT_DARK, {"Keyword": {"bold": True}})
        assert DEFAULT_DARK["Keyword"].bold is False

    def test_unknown_attribute(self):
        with pytest.raises(ValueError, match="underline"):
            merge_overrides(DEFAULT_DARK, {"Keyword": {"underline": True}})
