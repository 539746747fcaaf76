"""Static tier -> base URL routing. Pure string composition, no I/O."""

from __future__ import annotations

from typing import TYPE_CHECKING

from mbxapi.rest.types import EndpointTier

if TYPE_CHECKING:
    from mbxapi.rest.types import SignedQuery

DEFAULT_PUBLIC_BASE_URL = "https://api.binance.com/api/"
DEFAULT_TRADING_BASE_URL = "https://api.binance.com/api/"
DEFAULT_LEGACY_BASE_URL = "https://api.binance.com/wapi/"


class EndpointRouter:
    """Maps each EndpointTier to its fixed base URL."""

    def __init__(
        self,
        public_base_url: str = DEFAULT_PUBLIC_BASE_URL,
        trading_base_url: str = DEFAULT_TRADING_BASE_URL,
        legacy_base_url: str = DEFAULT_LEGACY_BASE_URL,
    ) -> None:
        self._base_urls: dict[EndpointTier, str] = {
            EndpointTier.PUBLIC: public_base_url,
            EndpointTier.SIGNED: trading_base_url,
            EndpointTier.LEGACY: legacy_base_url,
        }

    def resolve(self, tier: EndpointTier) -> str:
        """Return the base URL for a tier."""
        return self._base_urls[tier]

    def url_for(self, signed: SignedQuery, *, include_query: bool = True) -> str:
        """
        Compose the final URL: base + path [+ "?" + query].

        Args:
            signed: Canonical (and possibly signed) query.
            include_query: False when the params travel in the body instead.
        """
        url = f"{self.resolve(signed.spec.tier)}{signed.spec.path}"
        query = signed.transmitted_query
        if query and include_query:
            return f"{url}?{query}"
        return url
