"""JSON-RPC error taxonomy for the protocol layer.

Every error carries the standard JSON-RPC ``code`` it maps to, so the engine
can turn any :class:`ProtocolError` into an error response without a lookup
table.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Standard JSON-RPC 2.0 error codes."""

    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603


class ProtocolError(Exception):
    """Base error for all protocol-layer failures."""

    code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str, data: Any = None) -> None:
        self.message = message
        self.data = data
        super().__init__(message)


class ParseError(ProtocolError):
    """The input line is not well-formed JSON."""

    code = ErrorCode.PARSE_ERROR

    def __init__(self, detail: str, request_id: int | str = 0) -> None:
        self.request_id = request_id
        super().__init__(f"Parse error: {detail}")


class InvalidRequestError(ProtocolError):
    """The line is JSON but not a valid request object."""

    code = ErrorCode.INVALID_REQUEST

    def __init__(self, detail: str, request_id: int | str = 0) -> None:
        self.request_id = request_id
        super().__init__(f"Invalid request: {detail}")


class MethodNotFoundError(ProtocolError):
    """The requested method is not recognized."""

    code = ErrorCode.METHOD_NOT_FOUND

    def __init__(self, method: str) -> None:
        self.method = method
        super().__init__(f"Method not found: {method}")


class ToolNotFoundError(MethodNotFoundError):
    """Requested tool does not exist in the registry."""

    def __init__(self, name: str) -> None:
        self.name = name
        ProtocolError.__init__(self, f"Unknown tool: {name}", data={"tool": name})
        self.method = "tools/call"


class InvalidParamsError(ProtocolError):
    """Parameters are missing or have the wrong shape."""

    code = ErrorCode.INVALID_PARAMS

    def __init__(self, detail: str, data: Any = None) -> None:
        super().__init__(f"Invalid params: {detail}", data=data)


class InternalError(ProtocolError):
    """Unexpected failure while serving a request."""

    code = ErrorCode.INTERNAL_ERROR


class ToolExecutionError(InternalError):
    """A tool invocation failed inside its callable."""

    def __init__(
        self,
        name: str,
        detail: str = "",
        arguments: Any = None,
        context: Any = None,
    ) -> None:
        self.name = name
        self.detail = detail
        data: dict[str, Any] = {"tool": name, "arguments": arguments, "detail": detail}
        if context is not None:
            data["context"] = context
        super().__init__(
            f"Tool execution failed: {name}" + (f": {detail}" if detail else ""),
            data=data,
        )
