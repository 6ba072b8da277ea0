"""Tests for the shared validate/apply/health tools and server wiring."""

from __future__ import annotations

import io
import json
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest

from dotmcp.config import ServerSettings
from dotmcp.protocol.transport import StdioTransport
from dotmcp.servers import SERVERS, get_server
from dotmcp.servers.wofi import WOFI
from dotmcp.tools.errors import InvalidArgumentError, ToolError
from dotmcp.utils.process import CommandResult


def _handler(tmp_path: Path, name: str, **settings: Any):
    registry = WOFI.build_registry(ServerSettings(base_dir=tmp_path, **settings))
    entry = registry.get(name)
    assert entry is not None
    return entry.handler


class TestServerRegistry:
    def test_servers(self) -> None:
        assert sorted(SERVERS) == ["kitty", "wofi"]
        assert get_server("wofi") is WOFI

    def test_unknown_server(self) -> None:
        with pytest.raises(KeyError, match="Unknown server: foot"):
            get_server("foot")

    def test_base_dir_defaults_to_xdg(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        assert WOFI.base_dir(ServerSettings()) == tmp_path / "wofi"

    def test_base_dir_override(self, tmp_path: Path) -> None:
        assert WOFI.base_dir(ServerSettings(base_dir=tmp_path)) == tmp_path

    def test_apply_schema_requires_patch(self) -> None:
        registry = WOFI.build_registry(ServerSettings())
        descriptor = next(d for d in registry.list() if d.name == "wofi_apply")
        assert descriptor.input_schema["required"] == ["patch"]
        assert descriptor.input_schema["properties"]["dry_run"]["default"] is True


class TestValidateTool:
    def test_inline_content(self, tmp_path: Path) -> None:
        result = _handler(tmp_path, "wofi_validate")({"content": "width=wide\n"})
        assert result["success"] is False
        assert result["source"] == "<inline>"
        assert "width" in result["errors"][0]

    def test_default_file(self, tmp_path: Path) -> None:
        (tmp_path / "config").write_text("mode=drun\n")
        result = _handler(tmp_path, "wofi_validate")({})
        assert result["success"] is True
        assert result["source"] == str((tmp_path / "config").resolve())

    def test_both_sources_rejected(self, tmp_path: Path) -> None:
        with pytest.raises(InvalidArgumentError):
            _handler(tmp_path, "wofi_validate")({"content": "a=1", "config_path": "config"})

    def test_path_outside_base(self, tmp_path: Path) -> None:
        with pytest.raises(InvalidArgumentError, match="config_path"):
            _handler(tmp_path, "wofi_validate")({"config_path": "../elsewhere"})

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ToolError, match="Cannot read"):
            _handler(tmp_path, "wofi_validate")({"config_path": "nope"})


class TestApplyTool:
    def test_dry_run_by_default(self, tmp_path: Path) -> None:
        config = tmp_path / "config"
        config.write_text("width=600\n")
        result = _handler(tmp_path, "wofi_apply")({"patch": "-width=600\n+width=800\n"})

        assert result["success"] is True
        assert result["dry_run"] is True
        assert "+width=800" in result["diff"]
        assert config.read_text() == "width=600\n"

    def test_write(self, tmp_path: Path) -> None:
        config = tmp_path / "config"
        config.write_text("width=600\n")
        result = _handler(tmp_path, "wofi_apply")(
            {"patch": "-width=600\n+width=800\n", "dry_run": False}
        )
        assert result["backup_created"] is True
        assert config.read_text() == "width=800\n"

    def test_string_dry_run_flag(self, tmp_path: Path) -> None:
        config = tmp_path / "config"
        config.write_text("width=600\n")
        _handler(tmp_path, "wofi_apply")({"patch": "-width=600\n+width=1\n", "dry_run": "false"})
        assert config.read_text() == "width=1\n"

    def test_rejected_patch_raises_with_outcome(self, tmp_path: Path) -> None:
        config = tmp_path / "config"
        config.write_text("width=600\n")
        with pytest.raises(ToolError, match="Patch rejected") as exc_info:
            _handler(tmp_path, "wofi_apply")({"patch": "-width=600\n+width=wide\n", "dry_run": False})

        assert exc_info.value.data["success"] is False
        assert "+width=wide" in exc_info.value.data["diff"]
        assert config.read_text() == "width=600\n"

    def test_patch_required(self, tmp_path: Path) -> None:
        with pytest.raises(InvalidArgumentError, match="'patch'"):
            _handler(tmp_path, "wofi_apply")({})

    def test_allow_create_from_settings(self, tmp_path: Path) -> None:
        _handler(tmp_path, "wofi_apply", allow_create=True)({"patch": "+mode=run\n", "dry_run": False})
        assert (tmp_path / "config").read_text() == "mode=run\n"

    def test_write_failure_becomes_tool_error(self, tmp_path: Path) -> None:
        (tmp_path / "config").write_text("width=600\n")
        with patch("dotmcp.mutation.pipeline.atomic_write", side_effect=OSError("no space")):
            with pytest.raises(ToolError, match="write failed"):
                _handler(tmp_path, "wofi_apply")({"patch": "-width=600\n+width=1\n", "dry_run": False})


class TestHealthTool:
    def test_binary_found(self, tmp_path: Path) -> None:
        with (
            patch("dotmcp.servers.base.find_binary", return_value="/usr/bin/wofi"),
            patch(
                "dotmcp.servers.base.run_command",
                return_value=CommandResult(exit_code=0, stdout="v1.4.1\n"),
            ) as mock_run,
        ):
            result = _handler(tmp_path, "health")({})

        mock_run.assert_called_once_with(["/usr/bin/wofi", "--version"], timeout=10.0)
        assert result == {
            "status": "healthy",
            "server": "wofi-mcp",
            "version": "0.1.0",
            "binary": "wofi",
            "binary_found": True,
            "binary_version": "v1.4.1",
        }

    def test_binary_missing(self, tmp_path: Path) -> None:
        with patch("dotmcp.servers.base.find_binary", return_value=None):
            result = _handler(tmp_path, "health")({})
        assert result["status"] == "degraded"
        assert result["binary_found"] is False
        assert result["binary_version"] is None

    def test_uses_configured_timeout(self, tmp_path: Path) -> None:
        with (
            patch("dotmcp.servers.base.find_binary", return_value="/usr/bin/wofi"),
            patch(
                "dotmcp.servers.base.run_command",
                return_value=CommandResult(exit_code=0, stderr="wofi 1.3\n"),
            ) as mock_run,
        ):
            result = _handler(tmp_path, "health", command_timeout=2.5)({})
        assert mock_run.call_args.kwargs["timeout"] == 2.5
        assert result["binary_version"] == "wofi 1.3"


class TestEndToEnd:
    def test_apply_over_the_wire(self, tmp_path: Path) -> None:
        config = tmp_path / "config"
        config.write_text("width=600\nheight=400\n")
        engine = WOFI.build_engine(ServerSettings(base_dir=tmp_path))

        requests = [
            {"jsonrpc": "2.0", "id": 1, "method": "initialize", "params": {"protocolVersion": "2024-11-05"}},
            {"jsonrpc": "2.0", "method": "notifications/initialized"},
            {
                "jsonrpc": "2.0",
                "id": 2,
                "method": "tools/call",
                "params": {
                    "name": "wofi_apply",
                    "arguments": {
                        "patch": "-width=600\n+width=800\n-height=400\n+height=500\n",
                        "dry_run": False,
                    },
                },
            },
            {
                "jsonrpc": "2.0",
                "id": 3,
                "method": "tools/call",
                "params": {"name": "wofi_apply", "arguments": {"patch": "+width=-\n"}},
            },
        ]
        reader = io.StringIO("".join(json.dumps(r) + "\n" for r in requests))
        writer = io.StringIO()
        engine.serve(StdioTransport(reader, writer))

        responses = [json.loads(line) for line in writer.getvalue().splitlines()]
        assert [r["id"] for r in responses] == [1, 2, 3]
        assert responses[0]["result"]["serverInfo"]["name"] == "wofi-mcp"
        assert "instructions" in responses[0]["result"]

        outcome = json.loads(responses[1]["result"]["content"][0]["text"])
        assert outcome["success"] is True
        assert outcome["backup_created"] is True
        assert config.read_text() == "width=800\nheight=500\n"

        assert responses[2]["error"]["code"] == -32603
        assert responses[2]["error"]["data"]["tool"] == "wofi_apply"
        assert responses[2]["error"]["data"]["context"]["success"] is False
