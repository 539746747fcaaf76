"""
Per-endpoint result schemas.

Field names are snake_case with the exchange's camelCase names as aliases.
Unknown fields are kept (``extra="allow"``) so newer exchange fields do not
break decoding. Prices and quantities are Decimals parsed from the
exchange's string values.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ExchangeModel(BaseModel):
    """Base for all decoded exchange payloads."""

    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)


class TickerPrice(ExchangeModel):
    """Latest price for a symbol (v3/ticker/price)."""

    symbol: str
    price: Decimal


class AveragePrice(ExchangeModel):
    """Current average price (v3/avgPrice)."""

    mins: int = Field(..., description="Averaging window in minutes")
    price: Decimal


class SymbolInfo(ExchangeModel):
    """Symbol entry from v3/exchangeInfo."""

    symbol: str
    status: str
    base_asset: str = Field(..., alias="baseAsset")
    quote_asset: str = Field(..., alias="quoteAsset")
    order_types: list[str] = Field(default_factory=list, alias="orderTypes")
    filters: list[dict[str, Any]] = Field(default_factory=list)


class Balance(ExchangeModel):
    """Asset balance from v3/account."""

    asset: str
    free: Decimal
    locked: Decimal = Decimal("0")


class Order(ExchangeModel):
    """Order state (v3/openOrders, v3/allOrders)."""

    symbol: str
    order_id: int = Field(..., alias="orderId")
    client_order_id: str = Field("", alias="clientOrderId")
    price: Decimal = Decimal("0")
    orig_qty: Decimal = Field(Decimal("0"), alias="origQty")
    executed_qty: Decimal = Field(Decimal("0"), alias="executedQty")
    status: str = ""
    type: str = ""
    side: str = ""
    time: int | None = None


class Trade(ExchangeModel):
    """Account trade (v3/myTrades)."""

    symbol: str
    id: int
    order_id: int = Field(..., alias="orderId")
    price: Decimal
    qty: Decimal
    quote_qty: Decimal | None = Field(None, alias="quoteQty")
    commission: Decimal = Decimal("0")
    commission_asset: str = Field("", alias="commissionAsset")
    time: int
    is_buyer: bool = Field(False, alias="isBuyer")
    is_maker: bool = Field(False, alias="isMaker")


class OrderAck(ExchangeModel):
    """Response to order placement (v3/order, ACK or RESULT form)."""

    symbol: str
    order_id: int = Field(..., alias="orderId")
    client_order_id: str = Field("", alias="clientOrderId")
    transact_time: int | None = Field(None, alias="transactTime")
    status: str | None = None


class DepositAddress(ExchangeModel):
    """Deposit address (wapi v3/depositAddress.html)."""

    address: str
    asset: str
    address_tag: str = Field("", alias="addressTag")
    success: bool = True
