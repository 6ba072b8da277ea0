"""Protocol layer: JSON-RPC codec, models, transport and engine."""

from dotmcp.protocol.engine import EngineStats, ProtocolEngine
from dotmcp.protocol.errors import (
    ErrorCode,
    InternalError,
    InvalidParamsError,
    InvalidRequestError,
    MethodNotFoundError,
    ParseError,
    ProtocolError,
    ToolExecutionError,
    ToolNotFoundError,
)
from dotmcp.protocol.models import (
    JsonRpcError,
    JsonRpcRequest,
    JsonRpcResponse,
    ServerInfo,
    ToolDescriptor,
)
from dotmcp.protocol.transport import LineTransport, StdioTransport, TransportClosedError

__all__ = [
    "EngineStats",
    "ErrorCode",
    "InternalError",
    "InvalidParamsError",
    "InvalidRequestError",
    "JsonRpcError",
    "JsonRpcRequest",
    "JsonRpcResponse",
    "LineTransport",
    "MethodNotFoundError",
    "ParseError",
    "ProtocolEngine",
    "ProtocolError",
    "ServerInfo",
    "StdioTransport",
    "ToolDescriptor",
    "ToolExecutionError",
    "ToolNotFoundError",
    "TransportClosedError",
]
