"""
Binance REST request pipeline.

Request flow for one call:
- build_request: endpoint params, then timestamp/recvWindow for signed tiers
- sign_request: one canonical query string, HMAC-SHA256 signed
- EndpointRouter: tier -> base URL, final URL composition
- HttpTransport: single aiohttp round trip, no retries
- decode / raise_for_api_error: JSON shape check and error envelopes
"""

from mbxapi.rest.builder import build_request, sign_request
from mbxapi.rest.decoder import decode, raise_for_api_error
from mbxapi.rest.errors import (
    ApiError,
    DecodeError,
    Err,
    ErrorKind,
    MbxApiError,
    Ok,
    Result,
    TransportError,
)
from mbxapi.rest.metrics import RequestMetrics
from mbxapi.rest.router import EndpointRouter
from mbxapi.rest.signing import canonicalize, sign
from mbxapi.rest.transport import HttpTransport, TransportConfig
from mbxapi.rest.types import (
    Credentials,
    EndpointTier,
    HttpMethod,
    RawResponse,
    RequestSpec,
    SignedQuery,
)

__all__ = [
    "ApiError",
    "Credentials",
    "DecodeError",
    "EndpointRouter",
    "EndpointTier",
    "Err",
    "ErrorKind",
    "HttpMethod",
    "HttpTransport",
    "MbxApiError",
    "Ok",
    "RawResponse",
    "RequestMetrics",
    "RequestSpec",
    "Result",
    "SignedQuery",
    "TransportConfig",
    "TransportError",
    "build_request",
    "canonicalize",
    "decode",
    "raise_for_api_error",
    "sign",
    "sign_request",
]
