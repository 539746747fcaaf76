"""
Failure kinds and the result union returned by every client operation.

Operations never raise for network, decoding or exchange-side failures.
They return ``Err(error)`` instead, so callers branch on ``result.ok``:

    result = await client.get_balances()
    if result.ok:
        for balance in result.value:
            ...
    elif result.error.kind == ErrorKind.API:
        ...

``unwrap()`` is available for callers that prefer exceptions.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Literal, NoReturn, TypeVar

T = TypeVar("T")


class ErrorKind(str, Enum):
    """Category of a failed call."""

    TRANSPORT = "transport"  # network, TLS, timeout
    DECODE = "decode"  # invalid JSON or unexpected shape
    API = "api"  # exchange error envelope


class MbxApiError(Exception):
    """Base class for call failures."""

    kind: ErrorKind


class TransportError(MbxApiError):
    """Raised when the HTTP round trip itself fails."""

    kind = ErrorKind.TRANSPORT


class DecodeError(MbxApiError):
    """Raised when a response body is not valid JSON or has the wrong shape."""

    kind = ErrorKind.DECODE


class ApiError(MbxApiError):
    """Raised when the exchange answers with its own error envelope."""

    kind = ErrorKind.API

    def __init__(
        self,
        message: str,
        code: int | None = None,
        http_status: int | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.http_status = http_status

    def __str__(self) -> str:
        text = super().__str__()
        if self.code is not None:
            return f"{text} (code={self.code})"
        return text


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful call carrying its decoded payload."""

    value: T

    @property
    def ok(self) -> Literal[True]:
        return True

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Err:
    """Failed call carrying the failure."""

    error: MbxApiError

    @property
    def ok(self) -> Literal[False]:
        return False

    @property
    def kind(self) -> ErrorKind:
        return self.error.kind

    def unwrap(self) -> NoReturn:
        raise self.error


Result = Ok[T] | Err
