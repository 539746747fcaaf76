"""
Types for the Binance REST request pipeline.

A request moves through three immutable values:
RequestSpec (what to call) -> SignedQuery (exact bytes to send) -> RawResponse.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class EndpointTier(str, Enum):
    """Security tier of an endpoint. Selects base URL and signing."""

    PUBLIC = "public"  # market data, no auth
    SIGNED = "signed"  # trading/account, HMAC signed
    LEGACY = "legacy"  # wapi withdraw/deposit, HMAC signed

    @property
    def is_signed(self) -> bool:
        return self is not EndpointTier.PUBLIC


class HttpMethod(str, Enum):
    """HTTP verbs used by the client."""

    GET = "GET"
    POST = "POST"


@dataclass(frozen=True)
class Credentials:
    """
    API key pair bound to a client.

    Attributes:
        api_key: Sent as the X-MBX-APIKEY header.
        api_secret: HMAC key. Never sent, never logged, hidden from repr.
    """

    api_key: str
    api_secret: str = field(repr=False)


@dataclass(frozen=True)
class RequestSpec:
    """
    A single request before signing.

    Attributes:
        path: Endpoint path relative to the tier base URL (e.g. "v3/account").
        params: Ordered query parameters, already stringified.
        method: HTTP verb.
        tier: Security tier.
    """

    path: str
    params: dict[str, str]
    method: HttpMethod
    tier: EndpointTier


@dataclass(frozen=True)
class SignedQuery:
    """
    Canonical query string ready for transmission.

    Attributes:
        spec: The request this query was built from.
        query: Canonical query string. For signed tiers this is exactly
            the string the signature was computed over.
        signature: Lowercase hex HMAC-SHA256, or None for public requests.
    """

    spec: RequestSpec
    query: str
    signature: str | None = None

    @property
    def transmitted_query(self) -> str:
        """Query as sent on the wire, with the signature appended last."""
        if self.signature is None:
            return self.query
        if not self.query:
            return f"signature={self.signature}"
        return f"{self.query}&signature={self.signature}"


@dataclass(frozen=True)
class RawResponse:
    """HTTP status plus the fully buffered response body."""

    status: int
    body: bytes
