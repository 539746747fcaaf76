"""
Canonical query encoding and HMAC-SHA256 request signing.

The exchange verifies the signature against the query string it receives,
so the string handed to sign() must be the string that is transmitted.
Both come from canonicalize(); nothing re-encodes the query afterwards.
"""

from __future__ import annotations

import hashlib
import hmac
from decimal import Decimal
from typing import TYPE_CHECKING
from urllib.parse import urlencode

if TYPE_CHECKING:
    from collections.abc import Mapping


def format_param(value: object) -> str:
    """
    Stringify a parameter value for the query string.

    Floats and Decimals are rendered in positional notation so that
    650.5 stays "650.5" and 1e-05 becomes "0.00001".
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        value = Decimal(repr(value))
    if isinstance(value, Decimal):
        return format(value, "f")
    return str(value)


def canonicalize(params: Mapping[str, object]) -> str:
    """
    Encode params as an order-preserving URL query string.

    Args:
        params: Parameters in the order they should appear.

    Returns:
        "k1=v1&k2=v2" with form encoding (spaces as "+").
    """
    return urlencode([(key, format_param(value)) for key, value in params.items()])


def sign(canonical_query: str, secret: str) -> str:
    """
    Compute the request signature.

    Args:
        canonical_query: Exact query string that will be transmitted.
        secret: API secret used as HMAC key.

    Returns:
        Lowercase hex HMAC-SHA256 digest.
    """
    return hmac.new(
        secret.encode("utf-8"),
        canonical_query.encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()
