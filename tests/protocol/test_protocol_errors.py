"""Tests for protocol error types."""

from __future__ import annotations

from dotmcp.protocol.errors import (
    ErrorCode,
    InvalidParamsError,
    MethodNotFoundError,
    ParseError,
    ProtocolError,
    ToolExecutionError,
    ToolNotFoundError,
)


class TestErrorCodes:
    def test_values(self) -> None:
        assert ErrorCode.PARSE_ERROR == -32700
        assert ErrorCode.INVALID_REQUEST == -32600
        assert ErrorCode.METHOD_NOT_FOUND == -32601
        assert ErrorCode.INVALID_PARAMS == -32602
        assert ErrorCode.INTERNAL_ERROR == -32603


class TestProtocolErrors:
    def test_parse_error(self) -> None:
        exc = ParseError("Expecting value", request_id=5)
        assert exc.code == ErrorCode.PARSE_ERROR
        assert exc.message == "Parse error: Expecting value"
        assert exc.request_id == 5

    def test_method_not_found(self) -> None:
        exc = MethodNotFoundError("resources/list")
        assert exc.code == ErrorCode.METHOD_NOT_FOUND
        assert "resources/list" in exc.message

    def test_tool_not_found_uses_method_not_found_code(self) -> None:
        exc = ToolNotFoundError("nope")
        assert isinstance(exc, MethodNotFoundError)
        assert exc.code == ErrorCode.METHOD_NOT_FOUND
        assert exc.message == "Unknown tool: nope"
        assert exc.data == {"tool": "nope"}

    def test_invalid_params_data(self) -> None:
        exc = InvalidParamsError("'name' is required", data={"tool": "x"})
        assert exc.code == ErrorCode.INVALID_PARAMS
        assert exc.data == {"tool": "x"}

    def test_tool_execution_error(self) -> None:
        exc = ToolExecutionError("wofi_apply", "disk full", {"patch": "+a"}, {"path": "/x"})
        assert isinstance(exc, ProtocolError)
        assert exc.code == ErrorCode.INTERNAL_ERROR
        assert exc.message == "Tool execution failed: wofi_apply: disk full"
        assert exc.data == {
            "tool": "wofi_apply",
            "arguments": {"patch": "+a"},
            "detail": "disk full",
            "context": {"path": "/x"},
        }

    def test_tool_execution_error_without_context(self) -> None:
        exc = ToolExecutionError("health")
        assert exc.message == "Tool execution failed: health"
        assert "context" not in exc.data
