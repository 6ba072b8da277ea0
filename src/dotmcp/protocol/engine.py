"""ProtocolEngine: the strictly sequential JSON-RPC read loop.

One engine serves one :class:`~dotmcp.tools.registry.ToolRegistry` over one
:class:`~dotmcp.protocol.transport.LineTransport`.  Each input line yields at
most one output line, written before the next line is read:

* blank line                    -> nothing
* malformed line                -> parse / invalid-request error
* request with an id            -> exactly one response
* notification (no id / null)   -> dispatched for side effects, no response

Collaborator failures never escape the loop; only end of input or a failed
write to the output stream ends it.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

from dotmcp.protocol import codec
from dotmcp.protocol.errors import (
    ErrorCode,
    InvalidParamsError,
    InvalidRequestError,
    MethodNotFoundError,
    ParseError,
    ProtocolError,
    ToolExecutionError,
    ToolNotFoundError,
)
from dotmcp.protocol.models import (
    MCP_PROTOCOL_VERSION,
    JsonRpcRequest,
    JsonRpcResponse,
    ServerInfo,
)
from dotmcp.protocol.transport import TransportClosedError
from dotmcp.tools.errors import InvalidArgumentError, ToolError
from dotmcp.utils.telemetry import (
    ATTR_ERROR_CODE,
    ATTR_RPC_ID,
    ATTR_RPC_METHOD,
    ATTR_RPC_NOTIFICATION,
    ATTR_SERVER,
    ATTR_TOOL_NAME,
    get_tracer,
)

if TYPE_CHECKING:
    from dotmcp.protocol.transport import LineTransport
    from dotmcp.tools.registry import ToolRegistry

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)

SUPPORTED_PROTOCOL_VERSIONS = ("2025-06-18", "2025-03-26", MCP_PROTOCOL_VERSION)

_CLIENT_NOTIFICATIONS = frozenset(
    {"notifications/initialized", "initialized", "notifications/cancelled"}
)


@dataclass
class EngineStats:
    """Counters for one engine lifetime."""

    requests: int = 0
    notifications: int = 0
    errors: int = 0
    parse_errors: int = 0


class ProtocolEngine:
    """Routes JSON-RPC messages to a tool registry.

    Usage::

        engine = ProtocolEngine(registry, ServerInfo(name="wofi-mcp", version="0.1.0"))
        engine.serve(StdioTransport())
    """

    def __init__(
        self,
        registry: ToolRegistry,
        server_info: ServerInfo,
        *,
        instructions: str | None = None,
    ) -> None:
        self._registry = registry
        self._server_info = server_info
        self._instructions = instructions
        self._initialized = False
        self.stats = EngineStats()

    @property
    def registry(self) -> ToolRegistry:
        return self._registry

    @property
    def initialized(self) -> bool:
        return self._initialized

    # ------------------------------------------------------------------
    # Read loop
    # ------------------------------------------------------------------

    def serve(self, transport: LineTransport) -> EngineStats:
        """Run until end of input or until the output side closes."""
        logger.info(
            "%s %s serving %d tool(s)",
            self._server_info.name,
            self._server_info.version,
            len(self._registry),
        )
        while True:
            line = transport.read_line()
            if line is None:
                logger.info("End of input, shutting down")
                break

            response = self.handle_line(line)
            if response is None:
                continue

            try:
                transport.write_line(self.encode(response))
            except TransportClosedError as exc:
                logger.error("Cannot write response, shutting down: %s", exc)
                break

        logger.info(
            "Handled %d request(s), %d notification(s), %d error(s)",
            self.stats.requests,
            self.stats.notifications,
            self.stats.errors,
        )
        return self.stats

    def handle_line(self, line: str) -> JsonRpcResponse | None:
        """Decode one line and produce its response, if any."""
        try:
            request = codec.decode(line)
        except (ParseError, InvalidRequestError) as exc:
            self.stats.parse_errors += 1
            self.stats.errors += 1
            logger.warning("Rejected input line: %s", exc.message)
            return JsonRpcResponse.failure(exc.request_id, exc.code, exc.message, exc.data)

        if request is None:
            return None
        return self.handle_request(request)

    def handle_request(self, request: JsonRpcRequest) -> JsonRpcResponse | None:
        """Dispatch a decoded request.  Returns ``None`` for notifications."""
        notification = request.is_notification
        if notification:
            self.stats.notifications += 1
        else:
            self.stats.requests += 1

        with _tracer.start_as_current_span(f"dotmcp.rpc.{request.method}") as span:
            span.set_attribute(ATTR_SERVER, self._server_info.name)
            span.set_attribute(ATTR_RPC_METHOD, request.method)
            span.set_attribute(ATTR_RPC_NOTIFICATION, notification)
            if request.id is not None:
                span.set_attribute(ATTR_RPC_ID, str(request.id))

            try:
                result = self._dispatch(request)
            except ProtocolError as exc:
                self.stats.errors += 1
                span.set_attribute(ATTR_ERROR_CODE, int(exc.code))
                if notification:
                    logger.warning("Notification %s failed: %s", request.method, exc.message)
                    return None
                logger.debug("Request %s failed: %s", request.method, exc.message)
                return JsonRpcResponse.failure(request.id, exc.code, exc.message, exc.data)
            except Exception as exc:  # dispatch boundary: keep the loop alive
                self.stats.errors += 1
                span.set_attribute(ATTR_ERROR_CODE, int(ErrorCode.INTERNAL_ERROR))
                logger.exception("Unhandled error in %s", request.method)
                if notification:
                    return None
                return JsonRpcResponse.failure(
                    request.id, ErrorCode.INTERNAL_ERROR, f"Internal error: {exc}"
                )

        if notification:
            return None
        return JsonRpcResponse.success(request.id, result)

    def encode(self, response: JsonRpcResponse) -> str:
        """Serialize *response*, degrading to an internal error if it is not JSON."""
        try:
            return codec.encode(response)
        except (TypeError, ValueError) as exc:
            logger.exception("Cannot serialize response for id %r", response.id)
            fallback = JsonRpcResponse.failure(
                response.id,
                ErrorCode.INTERNAL_ERROR,
                f"Internal error: response is not serializable: {exc}",
            )
            return codec.encode(fallback)

    # ------------------------------------------------------------------
    # Method routing
    # ------------------------------------------------------------------

    def _dispatch(self, request: JsonRpcRequest) -> Any:
        method = request.method
        if method == "initialize":
            return self._initialize(request.params)
        if method in _CLIENT_NOTIFICATIONS:
            if method != "notifications/cancelled":
                self._initialized = True
                logger.info("Client initialized connection")
            return {}
        if method == "ping":
            return {}
        if method == "tools/list":
            return {"tools": [d.to_wire() for d in self._registry.list()]}
        if method == "tools/call":
            return self._call_tool(request.params)
        raise MethodNotFoundError(method)

    def _initialize(self, params: Any) -> dict[str, Any]:
        if params is not None and not isinstance(params, dict):
            raise InvalidParamsError("initialize params must be an object")

        requested = (params or {}).get("protocolVersion")
        negotiated = (
            requested if requested in SUPPORTED_PROTOCOL_VERSIONS else MCP_PROTOCOL_VERSION
        )
        client = (params or {}).get("clientInfo") or {}
        logger.info(
            "initialize from %s (requested protocol %s, using %s)",
            client.get("name", "unknown client") if isinstance(client, dict) else "unknown client",
            requested,
            negotiated,
        )

        result: dict[str, Any] = {
            "protocolVersion": negotiated,
            "capabilities": {"tools": {"listChanged": False}},
            "serverInfo": self._server_info.model_dump(),
        }
        if self._instructions:
            result["instructions"] = self._instructions
        return result

    def _call_tool(self, params: Any) -> dict[str, Any]:
        if params is None:
            params = {}
        if not isinstance(params, dict):
            raise InvalidParamsError("tools/call params must be an object")

        name = params.get("name")
        if not isinstance(name, str) or not name:
            raise InvalidParamsError("'name' must be a non-empty string")

        arguments = params.get("arguments")
        if arguments is None:
            arguments = {}
        if not isinstance(arguments, dict):
            raise InvalidParamsError("'arguments' must be an object", data={"tool": name})

        entry = self._registry.get(name)
        if entry is None:
            raise ToolNotFoundError(name)

        with _tracer.start_as_current_span("dotmcp.tool.call") as span:
            span.set_attribute(ATTR_TOOL_NAME, name)
            try:
                result = entry.handler(arguments)
                text = render_result(result)
            except InvalidArgumentError as exc:
                raise InvalidParamsError(
                    str(exc), data={"tool": name, "arguments": arguments}
                ) from exc
            except ToolError as exc:
                logger.warning("Tool %s failed: %s", name, exc)
                raise ToolExecutionError(name, str(exc), arguments, exc.data) from exc
            except Exception as exc:
                logger.exception("Tool %s raised", name)
                raise ToolExecutionError(name, str(exc), arguments) from exc

        return {"content": [{"type": "text", "text": text}]}


def render_result(result: Any) -> str:
    """Render a tool result as the text of an MCP content block."""
    if isinstance(result, str):
        return result
    if isinstance(result, BaseModel):
        result = result.model_dump(mode="json")
    return json.dumps(result, indent=2, ensure_ascii=False)
