"""Tradier market data client for quotes and put option chains."""
from datetime import datetime
from typing import List, Optional

import requests

from putsizer.errors import InvalidTicker, NetworkError, PremiumUnavailable
from putsizer.logging.sizer_logger import SizerLogger
from .base_client import PremiumSource, PutQuote, Quote, QuoteSource


class TradierClient(QuoteSource, PremiumSource):
    """Client for Tradier's market data endpoints."""

    def __init__(self, api_token: str, base_url: str = 'https://sandbox.tradier.com',
                 timeout: float = 10.0, logger: Optional[SizerLogger] = None,
                 session: Optional[requests.Session] = None):
        """Initialize Tradier client.

        Args:
            api_token: Tradier API access token
            base_url: Tradier API base URL (sandbox or production)
            timeout: Request timeout in seconds
            logger: Optional logger instance
            session: Optional requests session (a new one is created otherwise)
        """
        self.api_token = api_token
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.logger = logger
        self.session = session or requests.Session()
        self.session.headers.update({
            'Authorization': f'Bearer {api_token}',
            'Accept': 'application/json'
        })

    def get_provider_name(self) -> str:
        return "Tradier"

    def _get(self, path: str, params: dict, context: dict, client_error: type) -> dict:
        """GET a market data endpoint and decode the JSON body.

        Raises:
            client_error: On 4xx responses
            NetworkError: On timeouts, connection failures, 5xx or undecodable bodies
        """
        try:
            response = self.session.get(
                f'{self.base_url}{path}',
                params=params,
                timeout=self.timeout
            )
        except requests.Timeout as e:
            self._log_failure(f"Timed out calling Tradier {path}", e, context)
            raise NetworkError(f"Timed out calling Tradier {path}") from e
        except requests.RequestException as e:
            self._log_failure(f"Network error calling Tradier {path}", e, context)
            raise NetworkError(f"Tradier request failed: {e}") from e

        if response.status_code >= 500:
            raise NetworkError(f"Tradier {path} failed: HTTP {response.status_code}")
        if response.status_code in (401, 403):
            raise client_error(
                f"Tradier authorization failed for {path}: HTTP {response.status_code}. "
                f"Check that TRADIER_API_TOKEN is valid for {self.base_url}"
            )
        if response.status_code != 200:
            raise client_error(f"Tradier {path} rejected request: HTTP {response.status_code}")

        try:
            return response.json() or {}
        except ValueError as e:
            raise NetworkError(f"Malformed Tradier response from {path}") from e

    def get_quote(self, symbol: str) -> Quote:
        """Get the current market price for a symbol.

        Args:
            symbol: Stock symbol (e.g., 'AAPL')

        Returns:
            Quote for the symbol

        Raises:
            InvalidTicker: If the symbol is unmatched or has no price
            NetworkError: If the request fails in transit
        """
        symbol = symbol.upper()
        data = self._get(
            '/v1/markets/quotes', {'symbols': symbol}, {"symbol": symbol}, InvalidTicker
        )

        quotes = data.get('quotes') or {}
        if quotes.get('unmatched_symbols'):
            raise InvalidTicker(f"Ticker {symbol} not found")

        quote = quotes.get('quote') or {}
        # Handle both single quote (dict) and multiple quotes (list)
        if isinstance(quote, list):
            quote = quote[0] if quote else {}

        price = quote.get('last') or quote.get('close') or quote.get('prevclose')
        if price is None or float(price) <= 0:
            raise InvalidTicker(f"Price data unavailable for symbol {symbol}")

        result = Quote(symbol=quote.get('symbol', symbol), price=float(price))

        if self.logger:
            self.logger.log_info(
                f"Retrieved current price for {symbol}",
                {"symbol": symbol, "price": result.price}
            )

        return result

    def get_put_chain(self, symbol: str, expiration: str) -> List[PutQuote]:
        """Get put options for a symbol and expiration date.

        Args:
            symbol: Stock symbol
            expiration: Expiration date as YYYYMMDD

        Returns:
            List of PutQuote objects (may be empty)

        Raises:
            PremiumUnavailable: If the chain cannot be retrieved
            NetworkError: If the request fails in transit
        """
        symbol = symbol.upper()
        expiration_str = datetime.strptime(expiration, '%Y%m%d').strftime('%Y-%m-%d')
        context = {"symbol": symbol, "expiration": expiration_str}

        data = self._get(
            '/v1/markets/options/chains',
            {'symbol': symbol, 'expiration': expiration_str},
            context,
            PremiumUnavailable
        )

        options_data = data.get('options') or {}
        options_list = options_data.get('option', [])

        # Ensure it's a list
        if isinstance(options_list, dict):
            options_list = [options_list]

        puts = []
        for option in options_list:
            if option.get('option_type', '').lower() != 'put' or option.get('strike') is None:
                continue
            puts.append(PutQuote(
                symbol=option.get('symbol', ''),
                strike=float(option['strike']),
                bid=float(option.get('bid') or 0.0),
                ask=float(option.get('ask') or 0.0),
                expiration=expiration
            ))

        if self.logger:
            self.logger.log_debug(
                f"Retrieved put chain for {symbol}",
                {**context, "put_count": len(puts)}
            )

        return puts

    def get_put_premium(self, symbol: str, strike: float, expiration: str,
                        underlying_price: Optional[float] = None) -> float:
        """Get the mid-price of the put nearest to the requested strike.

        Args:
            symbol: Stock symbol
            strike: Requested strike
            expiration: Expiration date as YYYYMMDD
            underlying_price: Unused; chains are quoted directly

        Returns:
            Per-share mid-price premium

        Raises:
            PremiumUnavailable: If no put with a usable bid/ask exists
            NetworkError: If the request fails in transit
        """
        puts = self.get_put_chain(symbol, expiration)
        if not puts:
            raise PremiumUnavailable(
                f"No put options available for {symbol} expiring {expiration}"
            )

        chosen = self.find_nearest_put(puts, strike)

        # A quote with no bid and no ask is unusable; look among the quoted rows
        if chosen.bid == 0 and chosen.ask == 0:
            viable = [p for p in puts if p.bid > 0 or p.ask > 0]
            if not viable:
                raise PremiumUnavailable(
                    f"No options with valid bid/ask found for {symbol} on {expiration} "
                    f"near strike {strike}"
                )
            chosen = self.find_nearest_put(viable, strike)

        premium = chosen.mid_price
        if premium <= 0:
            raise PremiumUnavailable(
                f"Put premium for {symbol} strike {chosen.strike} is not positive"
            )

        if self.logger:
            self.logger.log_info(
                f"Retrieved put premium for {symbol}",
                {
                    "symbol": symbol,
                    "requested_strike": strike,
                    "strike": chosen.strike,
                    "bid": chosen.bid,
                    "ask": chosen.ask,
                    "mid": round(premium, 4),
                    "expiration": expiration
                }
            )

        return premium

    @staticmethod
    def find_nearest_put(puts: List[PutQuote], strike: float) -> PutQuote:
        """Pick the put whose strike is closest to the target (first wins ties)."""
        return min(puts, key=lambda p: abs(p.strike - strike))

    def _log_failure(self, message: str, error: Exception, context: dict):
        if self.logger:
            self.logger.log_error(
                message,
                error,
                {**context, "provider": "tradier", "error_type": type(error).__name__}
            )
