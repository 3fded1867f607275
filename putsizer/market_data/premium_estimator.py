"""Heuristic put premium estimate for when no option chain feed is configured.

This is not a pricing model. It adds a volatility-flavoured time value to the
intrinsic value and jitters the result by up to 5% so that repeated runs do
not pretend to a precision they do not have.
"""
import math
import random
from datetime import date, datetime
from typing import Callable, Optional

from putsizer.errors import PremiumUnavailable
from putsizer.logging.sizer_logger import SizerLogger
from .base_client import PremiumSource


class PremiumEstimator(PremiumSource):
    """Estimates put premiums from price, strike and days to expiration."""

    BASE_VOLATILITY = 0.02
    MIN_PREMIUM = 0.05
    MAX_VARIANCE = 0.05  # +/- 5%

    def __init__(self, rng: Optional[random.Random] = None,
                 today: Optional[Callable[[], date]] = None,
                 logger: Optional[SizerLogger] = None):
        """Initialize the estimator.

        Args:
            rng: Source of randomness for the price jitter
            today: Callable returning the current date
            logger: Optional logger instance
        """
        self.rng = rng or random.Random()
        self.today = today or date.today
        self.logger = logger

    def get_provider_name(self) -> str:
        return "Estimate"

    def days_to_expiration(self, expiration: str) -> int:
        """Calendar days from today until expiration, at least 1."""
        expiration_date = datetime.strptime(expiration, '%Y%m%d').date()
        return max((expiration_date - self.today()).days, 1)

    def base_premium(self, current_price: float, strike: float, days: int) -> float:
        """Intrinsic plus time value, before jitter."""
        intrinsic = max(strike - current_price, 0.0)
        moneyness = abs(1 - strike / current_price)
        time_value = current_price * self.BASE_VOLATILITY * math.sqrt(days / 365) * (1 + moneyness)
        return intrinsic + max(time_value, self.MIN_PREMIUM)

    def get_put_premium(self, symbol: str, strike: float, expiration: str,
                        underlying_price: Optional[float] = None) -> float:
        """Estimate the per-share premium of a put.

        Args:
            symbol: Underlying stock symbol
            strike: Put strike
            expiration: Expiration date as YYYYMMDD
            underlying_price: Current stock price (required)

        Returns:
            Estimated premium, at least 0.05, rounded to cents

        Raises:
            PremiumUnavailable: If the underlying price or strike is not positive
        """
        if underlying_price is None or underlying_price <= 0:
            raise PremiumUnavailable(
                f"Cannot estimate premium for {symbol} without a current price"
            )
        if strike <= 0:
            raise PremiumUnavailable(f"Cannot estimate premium for non-positive strike {strike}")

        days = self.days_to_expiration(expiration)
        base = self.base_premium(underlying_price, strike, days)
        variance = self.rng.uniform(-self.MAX_VARIANCE, self.MAX_VARIANCE)
        premium = round(max(base * (1 + variance), self.MIN_PREMIUM), 2)

        if self.logger:
            self.logger.log_warning(
                f"Using estimated put premium for {symbol} (no option chain feed)",
                {
                    "symbol": symbol,
                    "strike": strike,
                    "expiration": expiration,
                    "days": days,
                    "premium": premium
                }
            )

        return premium
