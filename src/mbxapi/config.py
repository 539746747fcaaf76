"""
Client configuration.

ClientConfig is passed explicitly to BinanceClient. The environment is read
only by ClientConfig.from_env(); the request pipeline never looks it up.

Environment variables:
    BINANCE_KEY, BINANCE_SECRET      API credentials
    BINANCE_TIMING                   recvWindow in ms (default 5000)
    BINANCE_SSL_VERIFYPEER           "true"/"false" (default true)
    BINANCE_API_URL                  public market data base URL
    BINANCE_TRADING_URL              signed trading/account base URL
    BINANCE_WAPI_URL                 legacy withdraw/deposit base URL
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from mbxapi.rest.builder import validate_recv_window
from mbxapi.rest.router import (
    DEFAULT_LEGACY_BASE_URL,
    DEFAULT_PUBLIC_BASE_URL,
    DEFAULT_TRADING_BASE_URL,
)
from mbxapi.rest.transport import DEFAULT_USER_AGENT, TransportConfig
from mbxapi.rest.types import Credentials

if TYPE_CHECKING:
    from collections.abc import Mapping

# Env vars whose values must never be logged
REDACTED_ENV_VARS = frozenset({
    "BINANCE_KEY",
    "BINANCE_SECRET",
})

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off", ""})


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean, got {raw!r}")


def _parse_int(name: str, raw: str) -> int:
    try:
        return int(raw.strip())
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


@dataclass
class ClientConfig:
    """Configuration for BinanceClient."""

    api_key: str = ""
    api_secret: str = field(default="", repr=False)
    public_base_url: str = DEFAULT_PUBLIC_BASE_URL
    trading_base_url: str = DEFAULT_TRADING_BASE_URL
    legacy_base_url: str = DEFAULT_LEGACY_BASE_URL
    recv_window_ms: int = 5000
    tls_verify_peer: bool = True
    connect_timeout_s: float = 20.0
    total_timeout_s: float = 300.0
    user_agent: str = DEFAULT_USER_AGENT

    def __post_init__(self) -> None:
        validate_recv_window(self.recv_window_ms)
        for name in ("public_base_url", "trading_base_url", "legacy_base_url"):
            url = getattr(self, name)
            if not url.startswith(("https://", "http://")):
                raise ValueError(f"{name} must be an http(s) URL, got {url!r}")
            if not url.endswith("/"):
                raise ValueError(f"{name} must end with '/', got {url!r}")
        if self.connect_timeout_s <= 0:
            raise ValueError(f"connect_timeout_s must be > 0, got {self.connect_timeout_s}")
        if self.total_timeout_s <= 0:
            raise ValueError(f"total_timeout_s must be > 0, got {self.total_timeout_s}")
        if not self.user_agent:
            raise ValueError("user_agent must not be empty")

    @property
    def credentials(self) -> Credentials | None:
        """Credentials, or None when no key pair is configured."""
        if not self.api_key or not self.api_secret:
            return None
        return Credentials(api_key=self.api_key, api_secret=self.api_secret)

    def transport_config(self) -> TransportConfig:
        return TransportConfig(
            verify_peer=self.tls_verify_peer,
            connect_timeout_s=self.connect_timeout_s,
            total_timeout_s=self.total_timeout_s,
            user_agent=self.user_agent,
        )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ClientConfig:
        """
        Build a config from environment variables.

        Args:
            environ: Mapping to read from (default os.environ).

        Raises:
            ValueError: If a variable is set to an unparseable value.
        """
        env = os.environ if environ is None else environ
        return cls(
            api_key=env.get("BINANCE_KEY", ""),
            api_secret=env.get("BINANCE_SECRET", ""),
            public_base_url=env.get("BINANCE_API_URL", DEFAULT_PUBLIC_BASE_URL),
            trading_base_url=env.get("BINANCE_TRADING_URL", DEFAULT_TRADING_BASE_URL),
            legacy_base_url=env.get("BINANCE_WAPI_URL", DEFAULT_LEGACY_BASE_URL),
            recv_window_ms=_parse_int("BINANCE_TIMING", env.get("BINANCE_TIMING", "5000")),
            tls_verify_peer=_parse_bool(
                "BINANCE_SSL_VERIFYPEER", env.get("BINANCE_SSL_VERIFYPEER", "true")
            ),
        )
