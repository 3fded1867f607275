"""Map holding periods to option expiration dates."""
from datetime import date, timedelta
from enum import Enum
from typing import Optional, Union

from putsizer.logging.sizer_logger import SizerLogger


EXPIRATION_FORMAT = '%Y%m%d'


class HoldingPeriod(str, Enum):
    """How long the position is meant to be held."""
    ONE_WEEK = '1w'
    TWO_WEEKS = '2w'
    ONE_MONTH = '1m'

    @property
    def label(self) -> str:
        return {'1w': '1 Week', '2w': '2 Weeks', '1m': '1 Month'}[self.value]


# Days added to today before rolling forward to Friday
_PERIOD_OFFSET_DAYS = {
    HoldingPeriod.ONE_WEEK: 0,
    HoldingPeriod.TWO_WEEKS: 7,
    HoldingPeriod.ONE_MONTH: 28,
}


def next_friday(from_date: date) -> date:
    """Return the first Friday strictly after from_date.

    A Friday rolls over to the following week's Friday.
    """
    # weekday() returns 0=Monday, 4=Friday
    days_until_friday = (4 - from_date.weekday()) % 7
    return from_date + timedelta(days=days_until_friday or 7)


def calculate_expiration_date(holding_period: Union[HoldingPeriod, str],
                              today: Optional[date] = None,
                              logger: Optional[SizerLogger] = None) -> date:
    """Calculate the option expiration date for a holding period.

    1w is the next Friday, 2w the next Friday after a week, 1m the next Friday
    after four weeks. Unknown codes fall back to the 1w rule.

    Args:
        holding_period: Holding period code or enum
        today: Reference date (defaults to today)
        logger: Optional logger for unsupported codes

    Returns:
        Expiration date (always a Friday)
    """
    if today is None:
        today = date.today()

    try:
        period = HoldingPeriod(holding_period)
    except ValueError:
        if logger:
            logger.log_warning(
                f"Unsupported holding period: {holding_period}. Defaulting to next Friday."
            )
        period = HoldingPeriod.ONE_WEEK

    return next_friday(today + timedelta(days=_PERIOD_OFFSET_DAYS[period]))


def resolve_expiration(holding_period: Union[HoldingPeriod, str],
                       today: Optional[date] = None,
                       logger: Optional[SizerLogger] = None) -> str:
    """Resolve a holding period to an expiration date string (YYYYMMDD)."""
    return calculate_expiration_date(holding_period, today, logger).strftime(EXPIRATION_FORMAT)
