"""
Binance spot REST client.

Every operation is one signed or unsigned round trip through the request
pipeline (build -> sign -> route -> transport -> decode) and returns a
Result: ``Ok(value)`` with a typed payload, or ``Err(error)`` carrying a
TransportError, DecodeError or ApiError. Nothing is retried.

Usage:
    async with BinanceClient(ClientConfig.from_env()) as client:
        result = await client.get_balances()
        if result.ok:
            print(result.value)
"""

from __future__ import annotations

import logging
import time
from decimal import Decimal
from typing import TYPE_CHECKING, Any, TypeVar

from pydantic import BaseModel, ValidationError

from mbxapi.config import ClientConfig
from mbxapi.rest.builder import build_request, sign_request
from mbxapi.rest.decoder import decode, raise_for_api_error
from mbxapi.rest.errors import DecodeError, Err, MbxApiError, Ok
from mbxapi.rest.metrics import RequestMetrics
from mbxapi.rest.models import (
    AveragePrice,
    Balance,
    DepositAddress,
    Order,
    OrderAck,
    SymbolInfo,
    TickerPrice,
    Trade,
)
from mbxapi.rest.router import EndpointRouter
from mbxapi.rest.transport import HttpTransport
from mbxapi.rest.types import Credentials, EndpointTier, HttpMethod

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping
    from types import TracebackType

    from mbxapi.rest.errors import Result

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)
T = TypeVar("T")

API_KEY_HEADER = "X-MBX-APIKEY"
ORDER_SIDES = frozenset({"BUY", "SELL"})


def _now_ms() -> int:
    return int(time.time() * 1000)


def _project(payload: Any, key: str) -> Any:
    """Pull one top-level field out of an object payload."""
    if not isinstance(payload, dict) or key not in payload:
        raise DecodeError(f"Response has no '{key}' field")
    return payload[key]


def _as_model(model: type[M], payload: Any) -> M:
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise DecodeError(
            f"Response does not match {model.__name__} schema ({e.error_count()} errors)"
        ) from e


def _as_models(model: type[M], payload: Any) -> list[M]:
    if not isinstance(payload, list):
        raise DecodeError(f"Expected a list of {model.__name__}, got {type(payload).__name__}")
    return [_as_model(model, item) for item in payload]


class BinanceClient:
    """
    Async client for the Binance spot REST API.

    One instance owns one HTTP session and runs one request at a time.
    Use ``async with`` or call ``close()`` when done.
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        *,
        transport: HttpTransport | None = None,
        metrics: RequestMetrics | None = None,
        clock: Callable[[], int] | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            config: Client configuration. Defaults to public-only access.
            transport: HTTP transport. Built from config if not provided.
            metrics: Request counters. A private registry is used if not provided.
            clock: Returns current time in integer ms. Defaults to wall clock.
        """
        self._config = config or ClientConfig()
        self._credentials = self._config.credentials
        self._router = EndpointRouter(
            public_base_url=self._config.public_base_url,
            trading_base_url=self._config.trading_base_url,
            legacy_base_url=self._config.legacy_base_url,
        )
        self._transport = transport or HttpTransport(self._config.transport_config())
        self._metrics = metrics or RequestMetrics()
        self._clock = clock or _now_ms

    @property
    def router(self) -> EndpointRouter:
        return self._router

    @property
    def metrics(self) -> RequestMetrics:
        return self._metrics

    def set_credentials(self, api_key: str, api_secret: str) -> None:
        """Re-bind the API key pair used for signed requests."""
        if not api_key or not api_secret:
            raise ValueError("api_key and api_secret must both be non-empty")
        self._credentials = Credentials(api_key=api_key, api_secret=api_secret)

    async def open(self) -> None:
        await self._transport.open()

    async def close(self) -> None:
        """Release the HTTP session. Safe to call more than once."""
        await self._transport.close()

    async def __aenter__(self) -> BinanceClient:
        await self.open()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # Request pipeline
    # ------------------------------------------------------------------

    async def _dispatch(
        self,
        path: str,
        params: Mapping[str, object] | None,
        tier: EndpointTier,
        method: HttpMethod,
    ) -> Any:
        """
        Run one request through the pipeline and return the decoded payload.

        Raises:
            TransportError, DecodeError, ApiError: On call failure.
            ValueError: On invalid arguments or missing credentials.
        """
        spec = build_request(
            path,
            params,
            tier,
            method,
            now_ms=self._clock(),
            recv_window_ms=self._config.recv_window_ms,
        )
        signed = sign_request(spec, self._credentials)

        headers: dict[str, str] = {}
        body: dict[str, str] | None = None
        if tier.is_signed:
            assert self._credentials is not None  # checked by sign_request
            headers[API_KEY_HEADER] = self._credentials.api_key
        elif method is HttpMethod.POST:
            # Public POSTs carry params as a form body. Signed POSTs carry no
            # body, params travel in the query string only. Unconfirmed which
            # form the exchange expects for public POSTs.
            body = spec.params

        url = self._router.url_for(signed, include_query=body is None)

        logger.debug(
            "Dispatching request",
            extra={"endpoint": path, "tier": tier.value, "method": method.value},
        )
        raw = await self._transport.execute(url, method, headers=headers, body=body)
        payload = decode(raw.body)
        raise_for_api_error(payload, raw.status)
        return payload

    async def _run(
        self,
        path: str,
        params: Mapping[str, object] | None,
        tier: EndpointTier,
        method: HttpMethod,
        convert: Callable[[Any], T],
    ) -> Result[T]:
        try:
            value = convert(await self._dispatch(path, params, tier, method))
        except MbxApiError as e:
            self._metrics.record_failure(tier, e.kind)
            logger.warning(
                "Request failed",
                extra={
                    "endpoint": path,
                    "tier": tier.value,
                    "error_kind": e.kind.value,
                    "error": str(e),
                },
            )
            return Err(e)

        self._metrics.record_success(tier)
        return Ok(value)

    async def request(
        self,
        path: str,
        params: Mapping[str, object] | None = None,
        tier: EndpointTier = EndpointTier.PUBLIC,
        method: HttpMethod = HttpMethod.GET,
    ) -> Result[Any]:
        """
        Call an arbitrary endpoint and return its undecorated JSON payload.

        Args:
            path: Endpoint path relative to the tier base URL (e.g. "v3/time").
            params: Endpoint params in transmission order.
            tier: Security tier.
            method: HTTP verb.
        """
        return await self._run(path, params, tier, method, lambda payload: payload)

    # ------------------------------------------------------------------
    # Market data (PUBLIC)
    # ------------------------------------------------------------------

    async def get_tickers(self) -> Result[list[TickerPrice]]:
        """Latest price for every symbol."""
        return await self._run(
            "v3/ticker/price",
            None,
            EndpointTier.PUBLIC,
            HttpMethod.GET,
            lambda payload: _as_models(TickerPrice, payload),
        )

    async def get_symbol_price(self, symbol: str) -> Result[TickerPrice]:
        """Latest price for one symbol."""
        return await self._run(
            "v3/ticker/price",
            {"symbol": symbol},
            EndpointTier.PUBLIC,
            HttpMethod.GET,
            lambda payload: _as_model(TickerPrice, payload),
        )

    async def get_avg_price(self, symbol: str) -> Result[AveragePrice]:
        """Current average price for one symbol."""
        return await self._run(
            "v3/avgPrice",
            {"symbol": symbol},
            EndpointTier.PUBLIC,
            HttpMethod.GET,
            lambda payload: _as_model(AveragePrice, payload),
        )

    async def get_markets(self) -> Result[list[SymbolInfo]]:
        """Trading rules and metadata for every symbol."""
        return await self._run(
            "v3/exchangeInfo",
            None,
            EndpointTier.PUBLIC,
            HttpMethod.GET,
            lambda payload: _as_models(SymbolInfo, _project(payload, "symbols")),
        )

    # ------------------------------------------------------------------
    # Account (SIGNED)
    # ------------------------------------------------------------------

    async def get_balances(self) -> Result[list[Balance]]:
        """Asset balances of the account."""
        return await self._run(
            "v3/account",
            None,
            EndpointTier.SIGNED,
            HttpMethod.GET,
            lambda payload: _as_models(Balance, _project(payload, "balances")),
        )

    async def get_open_orders(self) -> Result[list[Order]]:
        """All open orders across symbols."""
        return await self._run(
            "v3/openOrders",
            None,
            EndpointTier.SIGNED,
            HttpMethod.GET,
            lambda payload: _as_models(Order, payload),
        )

    async def get_recent_trades(
        self, symbol: str = "BNBBTC", limit: int = 500
    ) -> Result[list[Trade]]:
        """
        Account trades for a symbol.

        Args:
            symbol: Trading pair.
            limit: Max trades to return (exchange max 1000).
        """
        return await self._run(
            "v3/myTrades",
            {"symbol": symbol, "limit": limit},
            EndpointTier.SIGNED,
            HttpMethod.GET,
            lambda payload: _as_models(Trade, payload),
        )

    async def get_all_orders(self, symbol: str) -> Result[list[Order]]:
        """All orders (open, cancelled, filled) for a symbol."""
        return await self._run(
            "v3/allOrders",
            {"symbol": symbol},
            EndpointTier.SIGNED,
            HttpMethod.GET,
            lambda payload: _as_models(Order, payload),
        )

    # ------------------------------------------------------------------
    # Trading (SIGNED, POST)
    # ------------------------------------------------------------------

    async def place_order(
        self,
        symbol: str,
        quantity: str | Decimal,
        side: str,
        order_type: str = "MARKET",
        price: str | Decimal | float | None = None,
    ) -> Result[OrderAck]:
        """
        Place an order.

        Args:
            symbol: Trading pair (e.g. "BNBBTC").
            quantity: Base asset amount.
            side: BUY or SELL.
            order_type: MARKET, LIMIT, STOP_LOSS, STOP_LOSS_LIMIT, TAKE_PROFIT,
                TAKE_PROFIT_LIMIT or LIMIT_MAKER.
            price: Limit price. Omitted from the request when None.

        Raises:
            ValueError: If side is not BUY or SELL.
        """
        side = side.upper()
        if side not in ORDER_SIDES:
            raise ValueError(f"side must be BUY or SELL, got {side!r}")

        params: dict[str, object] = {
            "symbol": symbol,
            "side": side,
            "type": order_type,
            "quantity": quantity,
        }
        if price is not None:
            params["price"] = price

        logger.info(
            "Placing order",
            extra={"order_side": side, "order_type": order_type},
        )
        return await self._run(
            "v3/order",
            params,
            EndpointTier.SIGNED,
            HttpMethod.POST,
            lambda payload: _as_model(OrderAck, payload),
        )

    async def market_buy(self, symbol: str, quantity: str | Decimal) -> Result[OrderAck]:
        return await self.place_order(symbol, quantity, "BUY")

    async def market_sell(self, symbol: str, quantity: str | Decimal) -> Result[OrderAck]:
        return await self.place_order(symbol, quantity, "SELL")

    async def limit_buy(
        self, symbol: str, quantity: str | Decimal, price: str | Decimal | float
    ) -> Result[OrderAck]:
        return await self.place_order(symbol, quantity, "BUY", "LIMIT", price)

    async def limit_sell(
        self, symbol: str, quantity: str | Decimal, price: str | Decimal | float
    ) -> Result[OrderAck]:
        return await self.place_order(symbol, quantity, "SELL", "LIMIT", price)

    # ------------------------------------------------------------------
    # Wallet (LEGACY)
    # ------------------------------------------------------------------

    async def get_deposit_address(self, asset: str) -> Result[DepositAddress]:
        """Deposit address for an asset."""
        return await self._run(
            "v3/depositAddress.html",
            {"asset": asset},
            EndpointTier.LEGACY,
            HttpMethod.GET,
            lambda payload: _as_model(DepositAddress, payload),
        )
