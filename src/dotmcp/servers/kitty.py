"""kitty terminal server.

``kitty.conf`` lines are ``option value`` pairs, ``map <keys> <action>``
keybindings, ``include <file>`` directives and ``#`` comments.
"""

from __future__ import annotations

import re
from typing import Any

from pydantic import BaseModel

from dotmcp.mutation.models import ValidationReport
from dotmcp.servers.base import ServerDefinition
from dotmcp.tools.arguments import optional_str
from dotmcp.tools.registry import RegistryBuilder


class KittyOption(BaseModel):
    name: str
    category: str
    type: str
    default: str
    description: str


class KittyAction(BaseModel):
    action: str
    default_keys: str | None = None
    description: str


class KittyTemplate(BaseModel):
    name: str
    use_case: str
    description: str
    content: str


class KittyTheme(BaseModel):
    theme_name: str
    description: str
    palette: dict[str, str]
    documentation_url: str = "https://sw.kovidgoyal.net/kitty/conf/#color-scheme"

    @property
    def snippet(self) -> str:
        lines = [f"# {self.theme_name} Theme"]
        lines.extend(f"{key} {value}" for key, value in self.palette.items())
        return "\n".join(lines) + "\n"

    def to_result(self) -> dict[str, Any]:
        return {**self.model_dump(), "snippet": self.snippet}


def _palette(base: dict[str, str], colors: str) -> dict[str, str]:
    palette = dict(base)
    palette.update({f"color{n}": value for n, value in enumerate(colors.split())})
    return palette


OPTIONS: list[KittyOption] = [
    KittyOption(name="font_family", category="Fonts", type="string", default="monospace", description="Primary font family"),
    KittyOption(name="bold_font", category="Fonts", type="string", default="auto", description="Bold font face"),
    KittyOption(name="italic_font", category="Fonts", type="string", default="auto", description="Italic font face"),
    KittyOption(name="font_size", category="Fonts", type="float", default="11.0", description="Font size in points"),
    KittyOption(name="cursor_shape", category="Cursor", type="enum", default="block", description="block, beam or underline"),
    KittyOption(name="cursor_blink_interval", category="Cursor", type="float", default="-1", description="Blink interval in seconds; 0 disables blinking"),
    KittyOption(name="scrollback_lines", category="Scrollback", type="int", default="2000", description="Lines kept in the scrollback buffer"),
    KittyOption(name="mouse_hide_wait", category="Mouse", type="float", default="3.0", description="Seconds of inactivity before the mouse cursor is hidden"),
    KittyOption(name="copy_on_select", category="Mouse", type="string", default="no", description="Copy selection to a buffer on select"),
    KittyOption(name="repaint_delay", category="Performance", type="int", default="10", description="Milliseconds between screen repaints"),
    KittyOption(name="input_delay", category="Performance", type="int", default="3", description="Milliseconds to wait before processing input"),
    KittyOption(name="sync_to_monitor", category="Performance", type="bool", default="yes", description="Sync repaints to the monitor refresh rate"),
    KittyOption(name="enable_audio_bell", category="Bell", type="bool", default="yes", description="Play the audio bell"),
    KittyOption(name="remember_window_size", category="Window", type="bool", default="yes", description="Restore the previous window size on start"),
    KittyOption(name="initial_window_width", category="Window", type="string", default="640", description="Initial width in pixels or cells (e.g. 80c)"),
    KittyOption(name="initial_window_height", category="Window", type="string", default="400", description="Initial height in pixels or cells (e.g. 24c)"),
    KittyOption(name="window_padding_width", category="Window", type="string", default="0", description="Padding inside windows in points"),
    KittyOption(name="enabled_layouts", category="Layouts", type="string", default="*", description="Comma-separated list of enabled layouts"),
    KittyOption(name="tab_bar_style", category="Tabs", type="enum", default="fade", description="fade, slant, separator, powerline, custom or hidden"),
    KittyOption(name="background_opacity", category="Colors", type="float", default="1.0", description="Background opacity between 0 and 1"),
    KittyOption(name="foreground", category="Colors", type="color", default="#dddddd", description="Default foreground color"),
    KittyOption(name="background", category="Colors", type="color", default="#000000", description="Default background color"),
    KittyOption(name="cursor", category="Colors", type="color", default="#cccccc", description="Cursor color"),
    KittyOption(name="selection_background", category="Colors", type="color", default="#fffacd", description="Background of selected text"),
    KittyOption(name="shell", category="Advanced", type="string", default=".", description="Shell to run; '.' means the login shell"),
    KittyOption(name="allow_remote_control", category="Advanced", type="string", default="no", description="Allow other programs to control kitty"),
]

ACTIONS: list[KittyAction] = [
    KittyAction(action="copy_to_clipboard", default_keys="ctrl+shift+c", description="Copy the selection to the clipboard"),
    KittyAction(action="paste_from_clipboard", default_keys="ctrl+shift+v", description="Paste from the clipboard"),
    KittyAction(action="new_window", default_keys="ctrl+shift+enter", description="Open a new window in the current tab"),
    KittyAction(action="close_window", default_keys="ctrl+shift+w", description="Close the active window"),
    KittyAction(action="new_tab", default_keys="ctrl+shift+t", description="Open a new tab"),
    KittyAction(action="next_tab", default_keys="ctrl+shift+right", description="Switch to the next tab"),
    KittyAction(action="previous_tab", default_keys="ctrl+shift+left", description="Switch to the previous tab"),
    KittyAction(action="next_layout", default_keys="ctrl+shift+l", description="Cycle through enabled layouts"),
    KittyAction(action="goto_layout", description="Switch to a named layout, e.g. goto_layout tall"),
    KittyAction(action="resize_window", description="Resize the active window: narrower, wider, taller, shorter"),
    KittyAction(action="change_font_size", default_keys="ctrl+shift+equal", description="Change font size: all +2.0"),
    KittyAction(action="load_config_file", default_keys="ctrl+shift+f5", description="Reload kitty.conf"),
    KittyAction(action="kitten", description="Run a kitten, e.g. kitten hints"),
    KittyAction(action="launch", description="Launch a program in a new window, tab or overlay"),
]

TEMPLATES: list[KittyTemplate] = [
    KittyTemplate(
        name="minimal",
        use_case="general",
        description="Readable defaults",
        content="font_family JetBrains Mono\nfont_size 12.0\nscrollback_lines 10000\nenable_audio_bell no\n",
    ),
    KittyTemplate(
        name="performance",
        use_case="performance",
        description="Lower latency rendering",
        content="repaint_delay 8\ninput_delay 1\nsync_to_monitor no\n",
    ),
    KittyTemplate(
        name="tabs",
        use_case="workflow",
        description="Powerline tabs and layout switching",
        content="tab_bar_style powerline\nenabled_layouts tall,stack\nmap ctrl+shift+z toggle_layout stack\n",
    ),
]

THEMES: list[KittyTheme] = [
    KittyTheme(
        theme_name="Default Dark",
        description="Default dark theme with good contrast",
        palette=_palette(
            {"background": "#1e1e1e", "foreground": "#d4d4d4", "cursor": "#aeafad", "selection_background": "#264f78"},
            "#000000 #cd3131 #0dbc79 #e5e510 #2472c8 #bc3fbc #11a8cd #e5e5e5 "
            "#666666 #f14c4c #23d18b #f5f543 #3b8eea #d670d6 #29b8db #e5e5e5",
        ),
    ),
    KittyTheme(
        theme_name="Solarized Dark",
        description="Solarized dark color scheme",
        palette=_palette(
            {"background": "#002b36", "foreground": "#839496", "cursor": "#839496", "selection_background": "#073642"},
            "#073642 #dc322f #859900 #b58900 #268bd2 #d33682 #2aa198 #eee8d5 "
            "#002b36 #cb4b16 #586e75 #657b83 #839496 #6c71c4 #93a1a1 #fdf6e3",
        ),
    ),
    KittyTheme(
        theme_name="Nord",
        description="Nord color scheme",
        palette=_palette(
            {"background": "#2e3440", "foreground": "#d8dee9", "cursor": "#d8dee9", "selection_background": "#3b4252"},
            "#3b4252 #bf616a #a3be8c #ebcb8b #81a1c1 #b48ead #8fbcbb #e5e9f0 "
            "#4c566a #bf616a #a3be8c #ebcb8b #81a1c1 #b48ead #8fbcbb #eceff4",
        ),
    ),
]

_OPTION_TYPES = {option.name: option.type for option in OPTIONS}
_ENUMS: dict[str, set[str]] = {
    "cursor_shape": {"block", "beam", "underline"},
    "tab_bar_style": {"fade", "slant", "separator", "powerline", "custom", "hidden"},
}
_BOOLS = {"yes", "no", "true", "false", "y", "n"}
_KEY = re.compile(r"^[A-Za-z0-9_]+$")
# color0 .. color255
_PALETTE_KEY = re.compile(r"^color(25[0-5]|2[0-4]\d|1\d\d|[1-9]?\d)$")
_COLOR = re.compile(r"^(#[0-9A-Fa-f]{3}|#[0-9A-Fa-f]{6}|[a-z]+|none)$")
_DIRECTIVES = {"map", "mouse_map", "include", "globinclude", "envinclude", "env", "action_alias", "kitten_alias", "symbol_map", "font_features", "narrow_symbols"}


def validate_config(content: str) -> ValidationReport:
    """Check ``kitty.conf`` content."""
    report = ValidationReport()

    for number, raw in enumerate(content.splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue

        parts = line.split(None, 1)
        key = parts[0]
        value = parts[1].strip() if len(parts) > 1 else ""

        if not _KEY.match(key):
            report.errors.append(f"Line {number}: invalid option name {key!r}")
            continue
        if not value:
            report.errors.append(f"Line {number}: {key} has no value")
            continue

        if key in ("map", "mouse_map"):
            if len(value.split(None, 1)) < 2:
                report.errors.append(f"Line {number}: {key} needs keys and an action")
            continue
        if key in _DIRECTIVES:
            continue

        kind = "color" if _PALETTE_KEY.match(key) else _OPTION_TYPES.get(key)
        if kind is None:
            report.warnings.append(f"Line {number}: unknown option {key}")
            continue
        problem = _check_value(key, kind, value)
        if problem:
            report.errors.append(f"Line {number}: {problem}")

    return report


def _check_value(key: str, kind: str, value: str) -> str | None:
    if kind == "float":
        try:
            float(value)
        except ValueError:
            return f"{key} must be a number, got {value!r}"
    elif kind == "int":
        if not value.lstrip("-").isdigit():
            return f"{key} must be an integer, got {value!r}"
    elif kind == "bool":
        if value.lower() not in _BOOLS:
            return f"{key} must be yes or no, got {value!r}"
    elif kind == "enum":
        if value not in _ENUMS[key]:
            return f"invalid {key} {value!r}"
    elif kind == "color":
        if not _COLOR.match(value):
            return f"{key} must be a color, got {value!r}"
    return None


def _options(arguments: dict[str, Any]) -> dict[str, Any]:
    term = (optional_str(arguments, "search_term", max_length=1000) or "").lower()
    category = optional_str(arguments, "category", max_length=100)
    matches = [
        option.model_dump()
        for option in OPTIONS
        if (term in option.name.lower() or term in option.description.lower())
        and (category is None or option.category.lower() == category.lower())
    ]
    return {"options": matches, "count": len(matches)}


def _keybindings(arguments: dict[str, Any]) -> dict[str, Any]:
    action = optional_str(arguments, "action", max_length=200)
    matches = [
        entry.model_dump()
        for entry in ACTIONS
        if action is None or action.lower() in entry.action
    ]
    return {"actions": matches, "count": len(matches)}


def _templates(arguments: dict[str, Any]) -> dict[str, Any]:
    use_case = optional_str(arguments, "use_case", max_length=200)
    matches = [
        template.model_dump()
        for template in TEMPLATES
        if use_case is None or template.use_case == use_case or template.name == use_case
    ]
    return {"templates": matches, "count": len(matches)}


def _themes(arguments: dict[str, Any]) -> dict[str, Any]:
    name = optional_str(arguments, "theme_name", max_length=200)
    matches = [
        theme.to_result()
        for theme in THEMES
        if name is None or theme.theme_name.lower() == name.lower()
    ]
    return {"themes": matches, "count": len(matches)}


def add_catalog_tools(builder: RegistryBuilder) -> None:
    builder.add(
        "kitty_options",
        "Query known kitty options (fonts, window behavior, layouts, mouse, performance)",
        {
            "type": "object",
            "properties": {
                "search_term": {"type": "string", "description": "Filter by name or description"},
                "category": {"type": "string", "description": "Filter by category (Fonts, Window, Performance, ...)"},
            },
        },
        _options,
    )
    builder.add(
        "kitty_keybindings",
        "Query keybinding actions (new_tab, resize_window, goto_layout, kitten, ...)",
        {
            "type": "object",
            "properties": {
                "action": {"type": "string", "description": "Filter by action name"},
            },
        },
        _keybindings,
    )
    builder.add(
        "kitty_templates",
        "Return ready-to-use kitty.conf snippets",
        {
            "type": "object",
            "properties": {
                "use_case": {"type": "string", "description": "Filter by use case or template name"},
            },
        },
        _templates,
    )
    builder.add(
        "kitty_themes",
        "Return color theme snippets (background, foreground, cursor, color0-color15)",
        {
            "type": "object",
            "properties": {
                "theme_name": {"type": "string", "description": "Exact theme name, case-insensitive"},
            },
        },
        _themes,
    )


KITTY = ServerDefinition(
    name="kitty",
    binary="kitty",
    config_dir="kitty",
    config_file="kitty.conf",
    validator=validate_config,
    add_catalog_tools=add_catalog_tools,
    instructions="Use kitty_validate before kitty_apply; kitty_apply is a dry run unless dry_run is false.",
)
