"""Protocol models: JSON-RPC 2.0 messages and tool descriptors.

Implements the message format used by the Model Context Protocol for
capability negotiation (``initialize``), tool discovery (``tools/list``) and
execution (``tools/call``).
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, model_validator

JSONRPC_VERSION = "2.0"
MCP_PROTOCOL_VERSION = "2024-11-05"

# ---------------------------------------------------------------------------
# JSON-RPC 2.0 envelope
# ---------------------------------------------------------------------------


class JsonRpcRequest(BaseModel):
    """A JSON-RPC 2.0 request message.

    ``id`` is ``None`` for notifications (absent or explicit ``null``).
    """

    jsonrpc: str = JSONRPC_VERSION
    method: str
    id: int | str | None = None
    params: Any = None

    @property
    def is_notification(self) -> bool:
        return self.id is None


class JsonRpcError(BaseModel):
    """A JSON-RPC 2.0 error object."""

    code: int
    message: str
    data: Any = None

    def to_wire(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data is not None:
            payload["data"] = self.data
        return payload


class JsonRpcResponse(BaseModel):
    """A JSON-RPC 2.0 response message.

    Exactly one of ``result`` and ``error`` is set.  The id is never ``None``
    on the wire; callers normalize a missing id to ``0``.
    """

    jsonrpc: str = JSONRPC_VERSION
    id: int | str = 0
    result: Any = None
    error: JsonRpcError | None = None

    @model_validator(mode="after")
    def _check_exclusive(self) -> JsonRpcResponse:
        if (self.result is None) == (self.error is None):
            msg = "response must carry exactly one of 'result' or 'error'"
            raise ValueError(msg)
        return self

    @classmethod
    def success(cls, request_id: int | str | None, result: Any) -> JsonRpcResponse:
        return cls(id=normalize_id(request_id), result=result)

    @classmethod
    def failure(
        cls,
        request_id: int | str | None,
        code: int,
        message: str,
        data: Any = None,
    ) -> JsonRpcResponse:
        return cls(
            id=normalize_id(request_id),
            error=JsonRpcError(code=int(code), message=message, data=data),
        )


def normalize_id(request_id: int | str | None) -> int | str:
    """Rewrite a missing id to ``0``; the protocol forbids ``null`` in responses."""
    return 0 if request_id is None else request_id


# ---------------------------------------------------------------------------
# MCP-specific payloads
# ---------------------------------------------------------------------------


class ToolDescriptor(BaseModel):
    """A tool definition as returned by ``tools/list``."""

    model_config = {"populate_by_name": True}

    name: str = Field(..., min_length=1)
    description: str = ""
    input_schema: dict[str, Any] = Field(
        default_factory=lambda: {"type": "object", "properties": {}},
        alias="inputSchema",
    )

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class ServerInfo(BaseModel):
    """Identity reported during ``initialize``."""

    name: str
    version: str
