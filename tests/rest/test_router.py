"""Tests for tier -> base URL routing."""

from __future__ import annotations

import pytest

from mbxapi.rest.builder import build_request, sign_request
from mbxapi.rest.router import (
    DEFAULT_LEGACY_BASE_URL,
    DEFAULT_PUBLIC_BASE_URL,
    DEFAULT_TRADING_BASE_URL,
    EndpointRouter,
)
from mbxapi.rest.types import Credentials, EndpointTier

CREDENTIALS = Credentials(api_key="k", api_secret="s")


@pytest.fixture
def router() -> EndpointRouter:
    return EndpointRouter(
        public_base_url="https://public.example/api/",
        trading_base_url="https://trading.example/api/",
        legacy_base_url="https://legacy.example/wapi/",
    )


class TestResolve:
    """Tests for EndpointRouter.resolve()."""

    def test_each_tier_has_its_base(self, router: EndpointRouter) -> None:
        assert router.resolve(EndpointTier.PUBLIC) == "https://public.example/api/"
        assert router.resolve(EndpointTier.SIGNED) == "https://trading.example/api/"
        assert router.resolve(EndpointTier.LEGACY) == "https://legacy.example/wapi/"

    def test_defaults(self) -> None:
        router = EndpointRouter()
        assert router.resolve(EndpointTier.PUBLIC) == DEFAULT_PUBLIC_BASE_URL
        assert router.resolve(EndpointTier.SIGNED) == DEFAULT_TRADING_BASE_URL
        assert router.resolve(EndpointTier.LEGACY) == DEFAULT_LEGACY_BASE_URL

    @pytest.mark.parametrize("tier", list(EndpointTier))
    def test_base_independent_of_request(self, router: EndpointRouter, tier: EndpointTier) -> None:
        """Base URL depends on tier only, not on path or params."""
        first = build_request("v3/a", {"symbol": "X"}, tier, now_ms=1, recv_window_ms=5000)
        second = build_request("v3/b/c", {"asset": "Y"}, tier, now_ms=2, recv_window_ms=100)
        for spec in (first, second):
            url = router.url_for(sign_request(spec, CREDENTIALS))
            assert url.startswith(router.resolve(tier))


class TestUrlFor:
    """Tests for EndpointRouter.url_for()."""

    def test_public_with_query(self, router: EndpointRouter) -> None:
        spec = build_request(
            "v3/ticker/price", {"symbol": "BNBBTC"}, EndpointTier.PUBLIC, now_ms=1, recv_window_ms=5000
        )
        assert (
            router.url_for(sign_request(spec, None))
            == "https://public.example/api/v3/ticker/price?symbol=BNBBTC"
        )

    def test_public_without_query_has_no_question_mark(self, router: EndpointRouter) -> None:
        spec = build_request("v3/ticker/price", None, EndpointTier.PUBLIC, now_ms=1, recv_window_ms=5000)
        assert router.url_for(sign_request(spec, None)) == "https://public.example/api/v3/ticker/price"

    def test_signed_appends_signature_last(self, router: EndpointRouter) -> None:
        spec = build_request(
            "v3/depositAddress.html", {"asset": "BTC"}, EndpointTier.LEGACY, now_ms=7, recv_window_ms=5000
        )
        signed = sign_request(spec, CREDENTIALS)
        url = router.url_for(signed)
        assert url == (
            "https://legacy.example/wapi/v3/depositAddress.html"
            f"?asset=BTC&timestamp=7&recvWindow=5000&signature={signed.signature}"
        )

    def test_query_can_be_omitted(self, router: EndpointRouter) -> None:
        spec = build_request("v3/x", {"a": "1"}, EndpointTier.PUBLIC, now_ms=1, recv_window_ms=5000)
        assert router.url_for(sign_request(spec, None), include_query=False) == (
            "https://public.example/api/v3/x"
        )
