"""Protective put calculation: fetch market data, resolve expiration, size the position."""
import math
from dataclasses import dataclass
from datetime import date
from typing import Callable, Optional, Union

from putsizer.config.models import Config
from putsizer.errors import (
    InvalidMaxLoss,
    InvalidStopLoss,
    InvalidTicker,
    NetworkError,
    PremiumUnavailable,
)
from putsizer.logging.sizer_logger import SizerLogger
from putsizer.market_data.base_client import PremiumSource, Quote, QuoteSource
from putsizer.market_data.provider_factory import ProviderFactory
from putsizer.strategy.expiration import HoldingPeriod, resolve_expiration
from putsizer.strategy.position_sizer import PositionSizer, SizingOutcome


@dataclass(frozen=True)
class SizingRequest:
    """What the user asked for."""
    ticker: str
    stop_loss: float
    max_loss: float
    holding_period: str


@dataclass(frozen=True)
class CalculationResult:
    """Everything fetched and computed for one request."""
    request: SizingRequest
    quote: Quote
    expiration: str  # YYYYMMDD
    premium: float
    premium_source: str  # provider name, e.g. "tradier" or "estimate"
    outcome: SizingOutcome

    @property
    def is_estimated_premium(self) -> bool:
        return self.premium_source == "estimate"


class ProtectivePutCalculator:
    """Runs one protective put sizing request end to end."""

    def __init__(self, quote_source: QuoteSource, premium_source: PremiumSource,
                 position_sizer: Optional[PositionSizer] = None,
                 logger: Optional[SizerLogger] = None,
                 today: Optional[Callable[[], date]] = None):
        """Initialize the calculator.

        Args:
            quote_source: Provider of current stock prices
            premium_source: Provider (or estimator) of put premiums
            position_sizer: Sizer to use (default tolerance if omitted)
            logger: Optional logger instance
            today: Callable returning the current date, for expiration rules
        """
        self.quote_source = quote_source
        self.premium_source = premium_source
        self.position_sizer = position_sizer or PositionSizer(logger=logger)
        self.logger = logger
        self.today = today or date.today

    @classmethod
    def from_config(cls, config: Config, logger: Optional[SizerLogger] = None,
                    force_estimate: bool = False) -> 'ProtectivePutCalculator':
        """Build a calculator with the providers named in the configuration.

        Args:
            config: Loaded configuration
            logger: Optional logger instance
            force_estimate: Estimate premiums even when a feed is configured

        Returns:
            Configured ProtectivePutCalculator
        """
        quote_source = ProviderFactory.create_quote_source(config, logger)
        premium_source = ProviderFactory.create_premium_source(config, logger, force_estimate)

        if logger:
            logger.log_info(
                "Calculator initialized",
                {
                    "quote_provider": quote_source.get_provider_name(),
                    "premium_provider": premium_source.get_provider_name(),
                    "timeout_seconds": config.request_timeout_seconds
                }
            )

        return cls(
            quote_source=quote_source,
            premium_source=premium_source,
            position_sizer=PositionSizer(tolerance_percent=config.tolerance_percent, logger=logger),
            logger=logger
        )

    def size_position(self, ticker: str, stop_loss: float, max_loss: float,
                      holding_period: Union[HoldingPeriod, str] = HoldingPeriod.ONE_WEEK
                      ) -> CalculationResult:
        """Size a protective put position for a ticker.

        Args:
            ticker: Stock symbol
            stop_loss: Target stop-loss price, used as the put strike
            max_loss: Maximum acceptable loss in dollars
            holding_period: 1w, 2w or 1m

        Returns:
            CalculationResult; its outcome may be a zero position

        Raises:
            InvalidTicker: If the ticker is empty, unknown, or unpriced
            InvalidStopLoss: If the stop loss is not positive or not below the price
            InvalidMaxLoss: If the budget is not positive
            PremiumUnavailable: If no positive premium can be resolved
            NetworkError: If a market data request fails in transit
        """
        symbol = (ticker or '').strip().upper()
        if not symbol:
            raise InvalidTicker("Please enter a valid ticker symbol")
        if not math.isfinite(max_loss) or max_loss <= 0:
            raise InvalidMaxLoss("Max loss must be a positive number")
        if not math.isfinite(stop_loss) or stop_loss <= 0:
            raise InvalidStopLoss("Stop loss must be a positive number")

        period = getattr(holding_period, 'value', holding_period)
        request = SizingRequest(symbol, stop_loss, max_loss, period)

        if self.logger:
            self.logger.log_info(
                f"Sizing protective put for {symbol}",
                {"stop_loss": stop_loss, "max_loss": max_loss, "holding_period": period}
            )

        quote = self._fetch_quote(symbol)

        if stop_loss >= quote.price:
            raise InvalidStopLoss(
                f"Stop loss must be below current price "
                f"(stop loss ${stop_loss:,.2f}, current price ${quote.price:,.2f})"
            )

        expiration = resolve_expiration(holding_period, today=self.today(), logger=self.logger)
        premium = self._fetch_premium(symbol, stop_loss, expiration, quote.price)

        outcome = self.position_sizer.size(
            current_price=quote.price,
            strike=stop_loss,
            premium=premium,
            max_loss=max_loss
        )

        result = CalculationResult(
            request=request,
            quote=quote,
            expiration=expiration,
            premium=premium,
            premium_source=self.premium_source.get_provider_name().lower(),
            outcome=outcome
        )

        if self.logger:
            self.logger.log_calculation({
                "ticker": symbol,
                "feasible": outcome.is_feasible,
                "shares": outcome.shares,
                "contracts": outcome.contracts,
                "current_price": quote.price,
                "strike": stop_loss,
                "premium": premium,
                "expiration": expiration,
                "max_loss": max_loss,
                "realized_max_loss": outcome.realized_max_loss,
                "message": outcome.message
            })

        return result

    def _fetch_quote(self, symbol: str) -> Quote:
        try:
            return self.quote_source.get_quote(symbol)
        except (InvalidTicker, NetworkError):
            raise
        except Exception as e:
            if self.logger:
                self.logger.log_error(
                    f"Unable to fetch price for {symbol}",
                    e,
                    {"symbol": symbol, "error_type": type(e).__name__}
                )
            raise InvalidTicker(
                f"Invalid ticker or unable to fetch price for {symbol}: {e}"
            ) from e

    def _fetch_premium(self, symbol: str, strike: float, expiration: str,
                       current_price: float) -> float:
        try:
            premium = self.premium_source.get_put_premium(
                symbol, strike, expiration, underlying_price=current_price
            )
        except (PremiumUnavailable, NetworkError):
            raise
        except Exception as e:
            if self.logger:
                self.logger.log_error(
                    f"Unable to fetch put premium for {symbol}",
                    e,
                    {"symbol": symbol, "strike": strike, "expiration": expiration}
                )
            raise PremiumUnavailable(
                f"Unable to fetch put premium for {symbol} strike {strike} "
                f"expiring {expiration}: {e}"
            ) from e

        if premium is None or premium <= 0:
            raise PremiumUnavailable(
                "Put premium is zero or negative, indicating an issue with options "
                "data or availability."
            )
        return premium
