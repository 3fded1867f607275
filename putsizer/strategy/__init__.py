"""Position sizing and expiration rules."""
from .expiration import HoldingPeriod, calculate_expiration_date, next_friday, resolve_expiration
from .position_sizer import (
    SHARES_PER_CONTRACT,
    FeasiblePosition,
    InfeasiblePosition,
    PositionSizer,
    SizingInputs,
    SizingOutcome,
)

__all__ = [
    'HoldingPeriod', 'calculate_expiration_date', 'next_friday', 'resolve_expiration',
    'SHARES_PER_CONTRACT', 'FeasiblePosition', 'InfeasiblePosition', 'PositionSizer',
    'SizingInputs', 'SizingOutcome',
]
