"""Yahoo Finance chart API client for current stock prices."""
from typing import Optional

import requests

from putsizer.errors import InvalidTicker, NetworkError
from putsizer.logging.sizer_logger import SizerLogger
from .base_client import Quote, QuoteSource


class YahooQuoteClient(QuoteSource):
    """Fetches quotes from the public Yahoo Finance chart endpoint."""

    BASE_URL = 'https://query1.finance.yahoo.com/v8/finance/chart'
    USER_AGENT = 'Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36'

    def __init__(self, timeout: float = 10.0, logger: Optional[SizerLogger] = None,
                 session: Optional[requests.Session] = None):
        """Initialize Yahoo quote client.

        Args:
            timeout: Request timeout in seconds
            logger: Optional logger instance
            session: Optional requests session (a new one is created otherwise)
        """
        self.timeout = timeout
        self.logger = logger
        self.session = session or requests.Session()
        self.session.headers.update({'User-Agent': self.USER_AGENT})

    def get_provider_name(self) -> str:
        return "Yahoo Finance"

    def get_quote(self, symbol: str) -> Quote:
        """Get the current market price for a symbol.

        The regular market price is used when present, otherwise the previous
        close (markets closed, pre-market).

        Args:
            symbol: Stock symbol (e.g., 'AAPL')

        Returns:
            Quote for the symbol

        Raises:
            InvalidTicker: If the ticker is unknown or has no price
            NetworkError: If the request times out or the service fails
        """
        symbol = symbol.upper()

        try:
            response = self.session.get(f'{self.BASE_URL}/{symbol}', timeout=self.timeout)
        except requests.Timeout as e:
            self._log_failure(f"Timed out fetching price for {symbol}", e, symbol)
            raise NetworkError(f"Timed out fetching stock price for {symbol}") from e
        except requests.RequestException as e:
            self._log_failure(f"Network error fetching price for {symbol}", e, symbol)
            raise NetworkError(f"Failed to fetch stock price for {symbol}: {e}") from e

        if response.status_code == 404:
            raise InvalidTicker(f"Ticker {symbol} not found")
        if response.status_code >= 500:
            raise NetworkError(
                f"Failed to fetch stock price for {symbol}: HTTP {response.status_code}"
            )
        if response.status_code != 200:
            raise InvalidTicker(
                f"Unable to fetch price for {symbol}: HTTP {response.status_code}"
            )

        try:
            data = response.json()
        except ValueError as e:
            raise NetworkError(f"Malformed price response for {symbol}") from e

        results = (data.get('chart') or {}).get('result') or []
        meta = results[0].get('meta') if results else None
        if not meta:
            raise InvalidTicker(f"Invalid ticker symbol: {symbol}")

        price = meta.get('regularMarketPrice') or meta.get('previousClose')
        if not isinstance(price, (int, float)) or price <= 0:
            raise InvalidTicker(f"Price data unavailable for symbol {symbol}")

        quote = Quote(
            symbol=meta.get('symbol', symbol),
            price=float(price),
            currency=meta.get('currency') or 'USD',
            market_state=meta.get('marketState') or 'REGULAR'
        )

        if self.logger:
            self.logger.log_info(
                f"Retrieved current price for {symbol}",
                {"symbol": symbol, "price": quote.price, "market_state": quote.market_state}
            )

        return quote

    def _log_failure(self, message: str, error: Exception, symbol: str):
        if self.logger:
            self.logger.log_error(
                message,
                error,
                {"symbol": symbol, "provider": "yahoo", "error_type": type(error).__name__}
            )
