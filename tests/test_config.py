"""
Config validation tests for ClientConfig.

Tests __post_init__ validation and environment loading.
"""

from __future__ import annotations

import pytest

from mbxapi.config import REDACTED_ENV_VARS, ClientConfig
from mbxapi.rest.router import DEFAULT_LEGACY_BASE_URL, DEFAULT_PUBLIC_BASE_URL


class TestConfigValidation:
    """ClientConfig.__post_init__ validation."""

    def test_default_config_valid(self) -> None:
        config = ClientConfig()
        assert config.recv_window_ms == 5000
        assert config.tls_verify_peer is True
        assert config.public_base_url == DEFAULT_PUBLIC_BASE_URL
        assert config.legacy_base_url == DEFAULT_LEGACY_BASE_URL
        assert config.credentials is None

    @pytest.mark.parametrize("recv_window_ms", [0, -5, 60001])
    def test_invalid_recv_window(self, recv_window_ms: int) -> None:
        with pytest.raises(ValueError, match="recv_window_ms"):
            ClientConfig(recv_window_ms=recv_window_ms)

    def test_non_http_url(self) -> None:
        with pytest.raises(ValueError, match="trading_base_url"):
            ClientConfig(trading_base_url="ftp://api.binance.com/api/")

    def test_url_without_trailing_slash(self) -> None:
        with pytest.raises(ValueError, match="legacy_base_url"):
            ClientConfig(legacy_base_url="https://api.binance.com/wapi")

    def test_invalid_timeouts(self) -> None:
        with pytest.raises(ValueError, match="connect_timeout_s"):
            ClientConfig(connect_timeout_s=0)
        with pytest.raises(ValueError, match="total_timeout_s"):
            ClientConfig(total_timeout_s=0)

    def test_secret_not_in_repr(self) -> None:
        config = ClientConfig(api_key="key", api_secret="very-secret-value")
        assert "very-secret-value" not in repr(config)

    def test_credentials_require_both_parts(self) -> None:
        assert ClientConfig(api_key="key").credentials is None
        credentials = ClientConfig(api_key="key", api_secret="secret").credentials
        assert credentials is not None
        assert credentials.api_key == "key"

    def test_transport_config(self) -> None:
        transport = ClientConfig(tls_verify_peer=False, total_timeout_s=60).transport_config()
        assert transport.verify_peer is False
        assert transport.connect_timeout_s == 20.0
        assert transport.total_timeout_s == 60


class TestFromEnv:
    """ClientConfig.from_env()."""

    def test_reads_all_variables(self) -> None:
        config = ClientConfig.from_env(
            {
                "BINANCE_KEY": "k",
                "BINANCE_SECRET": "s",
                "BINANCE_TIMING": "10000",
                "BINANCE_SSL_VERIFYPEER": "false",
                "BINANCE_API_URL": "https://testnet.binance.vision/api/",
                "BINANCE_TRADING_URL": "https://testnet.binance.vision/api/",
                "BINANCE_WAPI_URL": "https://testnet.binance.vision/wapi/",
            }
        )
        assert config.api_key == "k"
        assert config.api_secret == "s"
        assert config.recv_window_ms == 10000
        assert config.tls_verify_peer is False
        assert config.trading_base_url == "https://testnet.binance.vision/api/"

    def test_defaults_when_unset(self) -> None:
        config = ClientConfig.from_env({})
        assert config.api_key == ""
        assert config.recv_window_ms == 5000
        assert config.tls_verify_peer is True

    def test_reads_os_environ(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("BINANCE_KEY", "env-key")
        monkeypatch.setenv("BINANCE_SECRET", "env-secret")
        config = ClientConfig.from_env()
        assert config.api_key == "env-key"

    def test_invalid_timing(self) -> None:
        with pytest.raises(ValueError, match="BINANCE_TIMING"):
            ClientConfig.from_env({"BINANCE_TIMING": "soon"})

    def test_invalid_bool(self) -> None:
        with pytest.raises(ValueError, match="BINANCE_SSL_VERIFYPEER"):
            ClientConfig.from_env({"BINANCE_SSL_VERIFYPEER": "maybe"})

    def test_out_of_range_timing(self) -> None:
        with pytest.raises(ValueError, match="recv_window_ms"):
            ClientConfig.from_env({"BINANCE_TIMING": "90000"})

    def test_redacted_env_vars(self) -> None:
        assert "BINANCE_SECRET" in REDACTED_ENV_VARS
        assert "BINANCE_KEY" in REDACTED_ENV_VARS
