"""wofi launcher server.

wofi reads ``key=value`` lines from ``~/.config/wofi/config``; ``#`` starts a
comment.
"""

from __future__ import annotations

import re
from typing import Any

from pydantic import BaseModel

from dotmcp.mutation.models import ValidationReport
from dotmcp.servers.base import ServerDefinition
from dotmcp.tools.arguments import optional_str
from dotmcp.tools.registry import RegistryBuilder


class WofiOption(BaseModel):
    name: str
    type: str
    default: str | None = None
    description: str


class WofiTemplate(BaseModel):
    name: str
    use_case: str
    description: str
    content: str


OPTIONS: list[WofiOption] = [
    WofiOption(name="mode", type="enum", default="drun", description="Launcher mode: drun, run, dmenu, ssh or a custom mode"),
    WofiOption(name="width", type="size", default="50%", description="Window width in pixels or percent of the screen"),
    WofiOption(name="height", type="size", default="40%", description="Window height in pixels or percent of the screen"),
    WofiOption(name="location", type="enum", default="center", description="Anchor position: center, top_left, top, top_right, right, bottom_right, bottom, bottom_left, left or 0-8"),
    WofiOption(name="xoffset", type="int", default="0", description="Horizontal offset from the anchor in pixels"),
    WofiOption(name="yoffset", type="int", default="0", description="Vertical offset from the anchor in pixels"),
    WofiOption(name="prompt", type="string", default=None, description="Text shown in the search entry before typing"),
    WofiOption(name="term", type="string", default=None, description="Terminal used to run terminal applications"),
    WofiOption(name="insensitive", type="bool", default="false", description="Case-insensitive search"),
    WofiOption(name="allow_images", type="bool", default="false", description="Show application icons"),
    WofiOption(name="allow_markup", type="bool", default="false", description="Enable pango markup in entries"),
    WofiOption(name="image_size", type="int", default="32", description="Icon size in pixels"),
    WofiOption(name="matching", type="enum", default="contains", description="Matching mode: contains, fuzzy or multi-contains"),
    WofiOption(name="sort_order", type="enum", default="default", description="Sort order: default or alphabetical"),
    WofiOption(name="hide_scroll", type="bool", default="false", description="Hide scroll bars"),
    WofiOption(name="no_actions", type="bool", default="false", description="Disable desktop file actions"),
    WofiOption(name="lines", type="int", default=None, description="Number of lines to show, overrides height"),
    WofiOption(name="columns", type="int", default="1", description="Number of columns"),
    WofiOption(name="cache_file", type="string", default=None, description="Path of the launch-count cache"),
    WofiOption(name="gtk_dark", type="bool", default="false", description="Prefer the dark GTK theme variant"),
]

TEMPLATES: list[WofiTemplate] = [
    WofiTemplate(
        name="minimal",
        use_case="launcher",
        description="Small centered application launcher",
        content="mode=drun\nwidth=600\nheight=400\nlocation=center\nprompt=Search\ninsensitive=true\n",
    ),
    WofiTemplate(
        name="icons",
        use_case="launcher",
        description="Launcher with application icons",
        content="mode=drun\nwidth=40%\nheight=50%\nallow_images=true\nimage_size=24\nmatching=fuzzy\ninsensitive=true\n",
    ),
    WofiTemplate(
        name="dmenu",
        use_case="scripting",
        description="dmenu replacement for shell scripts",
        content="mode=dmenu\nwidth=500\nlines=10\nhide_scroll=true\nno_actions=true\n",
    ),
]

_OPTION_TYPES = {option.name: option.type for option in OPTIONS}
_ENUMS: dict[str, set[str]] = {
    "mode": {"drun", "run", "dmenu", "ssh"},
    "location": {
        "center", "top_left", "top", "top_right", "right",
        "bottom_right", "bottom", "bottom_left", "left",
        *(str(n) for n in range(9)),
    },
    "matching": {"contains", "fuzzy", "multi-contains"},
    "sort_order": {"default", "alphabetical"},
}
_SIZE = re.compile(r"^\d+%?$")
_INT = re.compile(r"^-?\d+$")
_KEY = re.compile(r"^[A-Za-z_][A-Za-z0-9_-]*$")


def validate_config(content: str) -> ValidationReport:
    """Check wofi ``key=value`` content."""
    report = ValidationReport()
    seen: set[str] = set()

    for number, raw in enumerate(content.splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            report.errors.append(f"Line {number}: expected key=value, got {line!r}")
            continue

        key, value = (part.strip() for part in line.split("=", 1))
        if not _KEY.match(key):
            report.errors.append(f"Line {number}: invalid option name {key!r}")
            continue
        if key in seen:
            report.warnings.append(f"Line {number}: {key} is set more than once")
        seen.add(key)

        kind = _OPTION_TYPES.get(key)
        if kind is None:
            report.warnings.append(f"Line {number}: unknown option {key}")
            continue
        problem = _check_value(key, kind, value)
        if problem:
            report.errors.append(f"Line {number}: {problem}")

    return report


def _check_value(key: str, kind: str, value: str) -> str | None:
    if kind == "size" and not _SIZE.match(value):
        return f"{key} must be pixels or a percentage, got {value!r}"
    if kind == "int" and not _INT.match(value):
        return f"{key} must be an integer, got {value!r}"
    if kind == "bool" and value.lower() not in {"true", "false"}:
        return f"{key} must be true or false, got {value!r}"
    if key == "mode":
        # comma-separated combi list, e.g. "drun,run"
        modes = [m.strip() for m in value.split(",")]
        bad = [m for m in modes if m not in _ENUMS["mode"]]
        if bad:
            return f"invalid mode {', '.join(repr(m) for m in bad)}"
    elif kind == "enum" and value not in _ENUMS[key]:
        return f"invalid {key} {value!r}"
    return None


def _options(arguments: dict[str, Any]) -> dict[str, Any]:
    term = (optional_str(arguments, "search_term", max_length=1000) or "").lower()
    matches = [
        option.model_dump()
        for option in OPTIONS
        if term in option.name.lower() or term in option.description.lower()
    ]
    return {"options": matches, "count": len(matches)}


def _templates(arguments: dict[str, Any]) -> dict[str, Any]:
    use_case = optional_str(arguments, "use_case", max_length=200)
    matches = [
        template.model_dump()
        for template in TEMPLATES
        if use_case is None or template.use_case == use_case or template.name == use_case
    ]
    return {"templates": matches, "count": len(matches)}


def add_catalog_tools(builder: RegistryBuilder) -> None:
    builder.add(
        "wofi_options",
        "Query known wofi config options (size, position, matching, images)",
        {
            "type": "object",
            "properties": {
                "search_term": {"type": "string", "description": "Filter by name or description"},
            },
        },
        _options,
    )
    builder.add(
        "wofi_templates",
        "Return ready-to-use wofi config templates",
        {
            "type": "object",
            "properties": {
                "use_case": {"type": "string", "description": "Filter by use case or template name"},
            },
        },
        _templates,
    )


WOFI = ServerDefinition(
    name="wofi",
    binary="wofi",
    config_dir="wofi",
    config_file="config",
    validator=validate_config,
    add_catalog_tools=add_catalog_tools,
    instructions="Use wofi_validate before wofi_apply; wofi_apply is a dry run unless dry_run is false.",
)
