"""Tests for request building and signing."""

from __future__ import annotations

import pytest

from mbxapi.rest.builder import build_request, sign_request
from mbxapi.rest.signing import sign
from mbxapi.rest.types import Credentials, EndpointTier, HttpMethod

NOW_MS = 1499827319559
CREDENTIALS = Credentials(api_key="test-key", api_secret="test-secret")


class TestBuildRequest:
    """Tests for build_request()."""

    @pytest.mark.parametrize("tier", [EndpointTier.SIGNED, EndpointTier.LEGACY])
    def test_signed_tiers_append_timestamp_then_recv_window(self, tier: EndpointTier) -> None:
        spec = build_request(
            "v3/myTrades",
            {"symbol": "BNBBTC", "limit": 500},
            tier,
            now_ms=NOW_MS,
            recv_window_ms=5000,
        )
        assert list(spec.params.items()) == [
            ("symbol", "BNBBTC"),
            ("limit", "500"),
            ("timestamp", str(NOW_MS)),
            ("recvWindow", "5000"),
        ]

    def test_public_tier_has_no_injection(self) -> None:
        spec = build_request(
            "v3/ticker/price",
            {"symbol": "BNBBTC"},
            EndpointTier.PUBLIC,
            now_ms=NOW_MS,
            recv_window_ms=5000,
        )
        assert spec.params == {"symbol": "BNBBTC"}
        assert "timestamp" not in spec.params
        assert "recvWindow" not in spec.params

    def test_public_empty_params(self) -> None:
        spec = build_request(
            "v3/ticker/price", None, EndpointTier.PUBLIC, now_ms=NOW_MS, recv_window_ms=5000
        )
        assert spec.params == {}
        assert sign_request(spec, None).query == ""

    def test_method_and_path_kept(self) -> None:
        spec = build_request(
            "v3/order",
            {"symbol": "BNBBTC"},
            EndpointTier.SIGNED,
            HttpMethod.POST,
            now_ms=NOW_MS,
            recv_window_ms=5000,
        )
        assert spec.path == "v3/order"
        assert spec.method is HttpMethod.POST
        assert spec.tier is EndpointTier.SIGNED

    @pytest.mark.parametrize("recv_window_ms", [0, -1, 60001])
    def test_recv_window_out_of_range(self, recv_window_ms: int) -> None:
        with pytest.raises(ValueError, match="recv_window_ms"):
            build_request(
                "v3/account", None, EndpointTier.SIGNED, now_ms=NOW_MS, recv_window_ms=recv_window_ms
            )

    @pytest.mark.parametrize("recv_window_ms", [1, 60000])
    def test_recv_window_bounds_inclusive(self, recv_window_ms: int) -> None:
        spec = build_request(
            "v3/account", None, EndpointTier.SIGNED, now_ms=NOW_MS, recv_window_ms=recv_window_ms
        )
        assert spec.params["recvWindow"] == str(recv_window_ms)

    def test_fractional_timestamp_rejected(self) -> None:
        with pytest.raises(ValueError, match="now_ms"):
            build_request(
                "v3/account",
                None,
                EndpointTier.SIGNED,
                now_ms=1499827319559.5,  # type: ignore[arg-type]
                recv_window_ms=5000,
            )

    @pytest.mark.parametrize("reserved", ["timestamp", "recvWindow", "signature"])
    def test_reserved_params_rejected(self, reserved: str) -> None:
        with pytest.raises(ValueError, match=reserved):
            build_request(
                "v3/account",
                {reserved: "1"},
                EndpointTier.SIGNED,
                now_ms=NOW_MS,
                recv_window_ms=5000,
            )


class TestSignRequest:
    """Tests for sign_request()."""

    def test_signature_covers_exact_query(self) -> None:
        spec = build_request(
            "v3/allOrders",
            {"symbol": "BNBBTC"},
            EndpointTier.SIGNED,
            now_ms=NOW_MS,
            recv_window_ms=5000,
        )
        signed = sign_request(spec, CREDENTIALS)

        assert signed.query == f"symbol=BNBBTC&timestamp={NOW_MS}&recvWindow=5000"
        assert signed.signature == sign(signed.query, "test-secret")
        assert signed.transmitted_query == f"{signed.query}&signature={signed.signature}"

    def test_public_request_unsigned(self) -> None:
        spec = build_request(
            "v3/avgPrice", {"symbol": "BNBBTC"}, EndpointTier.PUBLIC, now_ms=NOW_MS, recv_window_ms=5000
        )
        signed = sign_request(spec, CREDENTIALS)
        assert signed.signature is None
        assert signed.transmitted_query == "symbol=BNBBTC"

    def test_signed_tier_requires_credentials(self) -> None:
        spec = build_request("v3/account", None, EndpointTier.SIGNED, now_ms=NOW_MS, recv_window_ms=5000)
        with pytest.raises(ValueError, match="required"):
            sign_request(spec, None)

    def test_secret_not_in_credentials_repr(self) -> None:
        assert "test-secret" not in repr(CREDENTIALS)
        assert "test-key" in repr(CREDENTIALS)
