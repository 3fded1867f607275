"""Base interfaces for market data providers."""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Quote:
    """Current market quote for a stock."""
    symbol: str
    price: float
    currency: str = "USD"
    market_state: str = "REGULAR"


@dataclass(frozen=True)
class PutQuote:
    """A put option picked from a chain."""
    symbol: str
    strike: float
    bid: float
    ask: float
    expiration: str  # YYYYMMDD

    @property
    def mid_price(self) -> float:
        return (self.bid + self.ask) / 2


class QuoteSource(ABC):
    """Provider of current stock prices."""

    @abstractmethod
    def get_quote(self, symbol: str) -> Quote:
        """Get the current quote for a symbol.

        Args:
            symbol: Stock symbol

        Returns:
            Quote with a positive price

        Raises:
            InvalidTicker: If the symbol is unknown or has no usable price
            NetworkError: If the request fails in transit
        """
        pass

    @abstractmethod
    def get_provider_name(self) -> str:
        """Get the name of the provider."""
        pass


class PremiumSource(ABC):
    """Provider of put option premiums."""

    @abstractmethod
    def get_put_premium(self, symbol: str, strike: float, expiration: str,
                        underlying_price: Optional[float] = None) -> float:
        """Get the per-share premium of the put nearest to a strike.

        Args:
            symbol: Underlying stock symbol
            strike: Requested strike price
            expiration: Expiration date as YYYYMMDD
            underlying_price: Current stock price, for providers that need it

        Returns:
            Positive per-share premium

        Raises:
            PremiumUnavailable: If no usable put price exists
            NetworkError: If the request fails in transit
        """
        pass

    @abstractmethod
    def get_provider_name(self) -> str:
        """Get the name of the provider."""
        pass
