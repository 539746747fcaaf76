"""
Response decoding.

Bodies must be JSON objects or arrays. Anything else, including a bare
scalar such as ``42``, is a DecodeError. Exchange error envelopes are
recognised separately by raise_for_api_error().
"""

from __future__ import annotations

from typing import Any

import orjson

from mbxapi.rest.errors import ApiError, DecodeError

# Max body characters quoted in error messages
_PREVIEW_CHARS = 200


def _preview(raw: bytes | str) -> str:
    text = raw.decode("utf-8", errors="replace") if isinstance(raw, bytes) else raw
    return text[:_PREVIEW_CHARS]


def decode(raw: bytes | str) -> dict[str, Any] | list[Any]:
    """
    Parse a response body.

    Args:
        raw: Response body.

    Returns:
        Parsed mapping or sequence, untyped beyond that.

    Raises:
        DecodeError: If the body is not JSON or its top level is a scalar.
    """
    try:
        parsed = orjson.loads(raw)
    except orjson.JSONDecodeError as e:
        raise DecodeError(f"Response is not valid JSON: {_preview(raw)!r}") from e

    if not isinstance(parsed, (dict, list)):
        raise DecodeError(
            f"Expected JSON object or array, got {type(parsed).__name__}: {_preview(raw)!r}"
        )
    return parsed


def raise_for_api_error(payload: dict[str, Any] | list[Any], status: int = 200) -> None:
    """
    Raise ApiError if a decoded payload is an exchange error envelope.

    Recognised envelopes:
        {"code": -1121, "msg": "Invalid symbol."}   # api/sapi, negative codes
        {"success": false, "msg": "..."}            # wapi

    A non-2xx status with any other JSON body is also an ApiError.
    """
    if isinstance(payload, dict):
        code = payload.get("code")
        msg = payload.get("msg")
        if (
            isinstance(code, int)
            and not isinstance(code, bool)
            and "msg" in payload
            and (code < 0 or status >= 400)
        ):
            raise ApiError(str(msg), code=code, http_status=status)
        if payload.get("success") is False:
            raise ApiError(str(msg or "Request was not successful"), http_status=status)

    if status >= 400:
        raise ApiError(f"HTTP {status}", http_status=status)
