"""Tests for the kitty server: validator and catalog tools."""

from __future__ import annotations

import pytest

from dotmcp.config import ServerSettings
from dotmcp.servers.kitty import ACTIONS, KITTY, OPTIONS, TEMPLATES, THEMES, validate_config
from dotmcp.tools.errors import InvalidArgumentError


class TestValidateConfig:
    def test_valid_config(self) -> None:
        content = (
            "# fonts\n"
            "font_family JetBrains Mono\n"
            "font_size 12.5\n"
            "cursor_shape beam\n"
            "enable_audio_bell no\n"
            "background #1e1e2e\n"
            "map ctrl+shift+t new_tab\n"
            "include theme.conf\n"
        )
        report = validate_config(content)
        assert report.success, report.errors
        assert report.warnings == []

    def test_templates_are_valid(self) -> None:
        for template in TEMPLATES:
            report = validate_config(template.content)
            assert report.success, (template.name, report.errors)

    def test_option_without_value(self) -> None:
        report = validate_config("font_size\n")
        assert report.errors == ["Line 1: font_size has no value"]

    def test_invalid_option_name(self) -> None:
        report = validate_config("font-size 12\n")
        assert "invalid option name" in report.errors[0]

    def test_map_needs_action(self) -> None:
        report = validate_config("map ctrl+a\n")
        assert report.errors == ["Line 1: map needs keys and an action"]

    def test_unknown_option_is_a_warning(self) -> None:
        report = validate_config("some_future_option 1\n")
        assert report.success
        assert report.warnings == ["Line 1: unknown option some_future_option"]

    @pytest.mark.parametrize(
        "line",
        [
            "font_size big",
            "scrollback_lines 1.5",
            "sync_to_monitor maybe",
            "cursor_shape triangle",
            "tab_bar_style round",
            "foreground #12345",
        ],
    )
    def test_bad_values(self, line: str) -> None:
        assert not validate_config(line + "\n").success, line

    @pytest.mark.parametrize("value", ["yes", "no", "Y", "true"])
    def test_bool_spellings(self, value: str) -> None:
        assert validate_config(f"enable_audio_bell {value}\n").success

    def test_negative_float(self) -> None:
        assert validate_config("cursor_blink_interval -1\n").success


class TestCatalogTools:
    def _handler(self, name: str):
        entry = KITTY.build_registry(ServerSettings()).get(name)
        assert entry is not None
        return entry.handler

    def test_tool_names(self) -> None:
        assert KITTY.build_registry(ServerSettings()).names() == [
            "kitty_options",
            "kitty_keybindings",
            "kitty_templates",
            "kitty_themes",
            "kitty_validate",
            "kitty_apply",
            "health",
        ]

    def test_options_by_category(self) -> None:
        result = self._handler("kitty_options")({"category": "fonts"})
        assert result["count"] == 4
        assert all(o["category"] == "Fonts" for o in result["options"])

    def test_options_search_and_category(self) -> None:
        result = self._handler("kitty_options")({"search_term": "delay", "category": "Performance"})
        assert [o["name"] for o in result["options"]] == ["repaint_delay", "input_delay"]

    def test_options_all(self) -> None:
        assert self._handler("kitty_options")({})["count"] == len(OPTIONS)

    def test_keybindings_filter(self) -> None:
        result = self._handler("kitty_keybindings")({"action": "tab"})
        assert {a["action"] for a in result["actions"]} == {"new_tab", "next_tab", "previous_tab"}

    def test_keybindings_all(self) -> None:
        assert self._handler("kitty_keybindings")({})["count"] == len(ACTIONS)

    def test_templates(self) -> None:
        result = self._handler("kitty_templates")({"use_case": "performance"})
        assert [t["name"] for t in result["templates"]] == ["performance"]

    def test_rejects_non_string_filter(self) -> None:
        with pytest.raises(InvalidArgumentError):
            self._handler("kitty_options")({"search_term": 3})


class TestThemes:
    def _themes(self, arguments: dict) -> dict:
        entry = KITTY.build_registry(ServerSettings()).get("kitty_themes")
        assert entry is not None
        return entry.handler(arguments)

    def test_all_themes(self) -> None:
        result = self._themes({})
        assert result["count"] == len(THEMES)
        assert [t["theme_name"] for t in result["themes"]] == ["Default Dark", "Solarized Dark", "Nord"]

    def test_filter_is_case_insensitive(self) -> None:
        result = self._themes({"theme_name": "solarized DARK"})
        assert result["count"] == 1
        theme = result["themes"][0]
        assert theme["palette"]["background"] == "#002b36"
        assert "background #002b36" in theme["snippet"]
        assert theme["documentation_url"].startswith("https://")

    def test_filter_needs_exact_name(self) -> None:
        assert self._themes({"theme_name": "Solarized"})["count"] == 0

    def test_snippets_are_valid_config(self) -> None:
        for theme in THEMES:
            report = validate_config(theme.snippet)
            assert report.success, (theme.theme_name, report.errors)
            assert report.warnings == []

    def test_palette_has_sixteen_colors(self) -> None:
        for theme in THEMES:
            assert [f"color{n}" in theme.palette for n in range(16)] == [True] * 16

    def test_palette_keys_are_validated(self) -> None:
        assert not validate_config("color3 yellowish#\n").success
        assert validate_config("color255 #ffffff\n").success
        assert validate_config("color256 #ffffff\n").warnings == ["Line 1: unknown option color256"]
