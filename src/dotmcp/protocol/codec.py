"""Request frame codec: one JSON-RPC message per line.

``decode`` turns a raw input line into a :class:`JsonRpcRequest`; ``encode``
turns a :class:`JsonRpcResponse` into a single output line.  Both are pure.
"""

from __future__ import annotations

import json
import re
from typing import Any

from pydantic import ValidationError

from dotmcp.protocol.errors import InvalidRequestError, ParseError
from dotmcp.protocol.models import JSONRPC_VERSION, JsonRpcRequest, JsonRpcResponse

# Matches `"id": 12` or `"id": "abc"` anywhere in a broken line.
_ID_PATTERN = re.compile(r'"id"\s*:\s*(-?\d+(?![\d.eE])|"(?:[^"\\]|\\.)*")')


def decode(line: str) -> JsonRpcRequest | None:
    """Parse one input line.

    Returns ``None`` for blank lines, which carry no message.

    Raises:
        ParseError: The line is not well-formed JSON.
        InvalidRequestError: The line is JSON but not a request object.
    """
    text = line.strip()
    if not text:
        return None

    try:
        raw: Any = json.loads(text)
    except ValueError as exc:
        raise ParseError(str(exc), request_id=recover_id(text)) from exc

    if not isinstance(raw, dict):
        raise InvalidRequestError("request must be a JSON object")

    request_id = raw.get("id")
    fallback_id = request_id if _is_valid_id(request_id) else 0
    if request_id is not None and not _is_valid_id(request_id):
        raise InvalidRequestError("'id' must be a string or an integer")

    version = raw.get("jsonrpc", JSONRPC_VERSION)
    if version != JSONRPC_VERSION:
        raise InvalidRequestError(
            f"'jsonrpc' must be {JSONRPC_VERSION!r}", request_id=fallback_id
        )

    if not isinstance(raw.get("method"), str):
        raise InvalidRequestError("'method' must be a string", request_id=fallback_id)

    try:
        return JsonRpcRequest.model_validate(raw)
    except ValidationError as exc:
        raise InvalidRequestError(str(exc), request_id=fallback_id) from exc


def encode(response: JsonRpcResponse) -> str:
    """Serialize a response to a single line (without the trailing newline)."""
    payload: dict[str, Any] = {"jsonrpc": response.jsonrpc, "id": response.id}
    if response.error is not None:
        payload["error"] = response.error.to_wire()
    else:
        payload["result"] = response.result
    return json.dumps(payload, ensure_ascii=False)


def recover_id(text: str) -> int | str:
    """Best-effort extraction of the request id from a malformed line."""
    match = _ID_PATTERN.search(text)
    if match is None:
        return 0
    token = match.group(1)
    try:
        value = json.loads(token)
    except ValueError:
        return 0
    return value if _is_valid_id(value) else 0


def _is_valid_id(value: Any) -> bool:
    return isinstance(value, (int, str)) and not isinstance(value, bool)
