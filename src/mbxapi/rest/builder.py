"""Request assembly: endpoint params plus timestamp/recvWindow, then signing."""

from __future__ import annotations

from typing import TYPE_CHECKING

from mbxapi.rest.signing import canonicalize, format_param, sign
from mbxapi.rest.types import EndpointTier, HttpMethod, RequestSpec, SignedQuery

if TYPE_CHECKING:
    from collections.abc import Mapping

    from mbxapi.rest.types import Credentials

# Exchange-side bounds for recvWindow (ms)
MIN_RECV_WINDOW_MS = 1
MAX_RECV_WINDOW_MS = 60000


def validate_recv_window(recv_window_ms: int) -> int:
    """Return recv_window_ms if it is an int within exchange bounds."""
    if isinstance(recv_window_ms, bool) or not isinstance(recv_window_ms, int):
        raise ValueError(f"recv_window_ms must be an int, got {recv_window_ms!r}")
    if not MIN_RECV_WINDOW_MS <= recv_window_ms <= MAX_RECV_WINDOW_MS:
        raise ValueError(
            f"recv_window_ms must be in [{MIN_RECV_WINDOW_MS}, {MAX_RECV_WINDOW_MS}], "
            f"got {recv_window_ms}"
        )
    return recv_window_ms


def build_request(
    path: str,
    params: Mapping[str, object] | None,
    tier: EndpointTier,
    method: HttpMethod = HttpMethod.GET,
    *,
    now_ms: int,
    recv_window_ms: int,
) -> RequestSpec:
    """
    Build a RequestSpec for one call.

    For SIGNED and LEGACY tiers, ``timestamp`` and then ``recvWindow`` are
    appended after the endpoint params. PUBLIC requests are left as given.

    Args:
        path: Endpoint path relative to the tier base URL.
        params: Endpoint params in transmission order.
        tier: Security tier.
        method: HTTP verb.
        now_ms: Current time in integer milliseconds since epoch.
        recv_window_ms: Validity window for signed requests.

    Raises:
        ValueError: If now_ms is not an int, recv_window_ms is out of range,
            or params already contain a reserved key.
    """
    ordered = {key: format_param(value) for key, value in (params or {}).items()}

    if tier.is_signed:
        if isinstance(now_ms, bool) or not isinstance(now_ms, int):
            raise ValueError(f"now_ms must be an int, got {now_ms!r}")
        validate_recv_window(recv_window_ms)
        for reserved in ("timestamp", "recvWindow", "signature"):
            if reserved in ordered:
                raise ValueError(f"'{reserved}' is set by the client and cannot be passed in params")
        ordered["timestamp"] = str(now_ms)
        ordered["recvWindow"] = str(recv_window_ms)

    return RequestSpec(path=path, params=ordered, method=method, tier=tier)


def sign_request(spec: RequestSpec, credentials: Credentials | None) -> SignedQuery:
    """
    Canonicalize a RequestSpec once and sign it when its tier requires.

    Raises:
        ValueError: If a signed tier is requested without credentials.
    """
    query = canonicalize(spec.params)
    if not spec.tier.is_signed:
        return SignedQuery(spec=spec, query=query)

    if credentials is None or not credentials.api_key or not credentials.api_secret:
        raise ValueError(f"API key and secret are required for {spec.tier.value} endpoints")

    return SignedQuery(spec=spec, query=query, signature=sign(query, credentials.api_secret))
