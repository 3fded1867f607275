"""Exceptions raised while sizing a protective put position.

Validation errors are terminal for a calculation: the caller has to fix the
input. NetworkError is transient and may be retried by the caller. A budget
too small for any position is not an error; the sizer returns an
InfeasiblePosition instead.
"""


class PositionSizingError(Exception):
    """Base exception for all sizing errors."""


class InvalidTicker(PositionSizingError, ValueError):
    """Raised when a ticker is empty, unknown, or has no usable price."""


class InvalidStopLoss(PositionSizingError, ValueError):
    """Raised when the stop loss is non-positive or not below the current price."""


class InvalidMaxLoss(PositionSizingError, ValueError):
    """Raised when the maximum loss budget is not positive."""


class PremiumUnavailable(PositionSizingError, ValueError):
    """Raised when no positive put premium can be resolved."""


class NetworkError(PositionSizingError):
    """Raised when a market data request fails in transit (timeout, connection, 5xx)."""
