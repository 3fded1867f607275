"""Protective put position sizing.

Shares and put contracts are solved together: one contract insures a block of
up to 100 shares, so every extra block of shares costs a whole contract's
premium on top of its own loss down to the strike. The sizer finds the
largest share count whose worst-case loss (price settles exactly at the
strike, puts expire worthless) fits the budget.

A budget too small for any position is a valid answer, returned as an
InfeasiblePosition with the reason. Only bad inputs raise.
"""
import math
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from putsizer.errors import InvalidMaxLoss, InvalidStopLoss, InvalidTicker, PremiumUnavailable
from putsizer.logging.sizer_logger import SizerLogger


SHARES_PER_CONTRACT = 100

# Quotients are rounded before flooring so 4500.0 / 10 can never land on 449
_FLOOR_PRECISION = 9


def _floor(value: float) -> int:
    return math.floor(round(value, _FLOOR_PRECISION))


@dataclass(frozen=True)
class SizingInputs:
    """The numbers a sizing run consumed."""
    current_price: float
    strike: float
    premium: float
    max_loss: float

    @property
    def premium_per_contract(self) -> float:
        return self.premium * SHARES_PER_CONTRACT

    @property
    def loss_per_share(self) -> float:
        return self.current_price - self.strike


@dataclass(frozen=True)
class FeasiblePosition:
    """A non-zero protective put position within budget."""
    inputs: SizingInputs
    shares: int
    contracts: int
    stock_cost: float
    premium_cost: float
    total_cost: float
    realized_max_loss: float
    breakeven: float  # current price + premium cost per share
    protection_level: float  # 1 - realized max loss / stock cost
    warning: Optional[str] = None

    @property
    def is_feasible(self) -> bool:
        return True

    @property
    def message(self) -> Optional[str]:
        return self.warning


@dataclass(frozen=True)
class InfeasiblePosition:
    """Zero position: the budget cannot carry any hedged shares."""
    inputs: SizingInputs
    reason: str

    shares = 0
    contracts = 0
    stock_cost = 0.0
    premium_cost = 0.0
    total_cost = 0.0
    realized_max_loss = 0.0

    @property
    def is_feasible(self) -> bool:
        return False

    @property
    def message(self) -> str:
        return self.reason


SizingOutcome = Union[FeasiblePosition, InfeasiblePosition]


class PositionSizer:
    """Sizes a shares-plus-puts position against a maximum loss budget."""

    def __init__(self, tolerance_percent: float = 1.0, logger: Optional[SizerLogger] = None):
        """Initialize the sizer.

        Args:
            tolerance_percent: How far the realized max loss may exceed the
                budget before a warning is attached
            logger: Optional logger instance
        """
        self.tolerance_percent = tolerance_percent
        self.logger = logger

    def validate_inputs(self, current_price: float, strike: float,
                        premium: float, max_loss: float):
        """Check sizing preconditions.

        Raises:
            InvalidTicker: If the current price is not positive
            InvalidStopLoss: If the strike is not positive or not below the price
            InvalidMaxLoss: If the budget is not positive
            PremiumUnavailable: If the premium is not positive
        """
        # NaN fails every comparison, so finiteness is checked explicitly
        if not math.isfinite(current_price) or current_price <= 0:
            raise InvalidTicker("Current price must be a positive number")
        if not math.isfinite(strike) or strike <= 0:
            raise InvalidStopLoss("Stop loss must be a positive number")
        if strike >= current_price:
            raise InvalidStopLoss("Stop loss must be below current price")
        if not math.isfinite(max_loss) or max_loss <= 0:
            raise InvalidMaxLoss("Max loss must be a positive number")
        if not math.isfinite(premium) or premium <= 0:
            raise PremiumUnavailable("Put premium must be a positive number")

    def size(self, current_price: float, strike: float,
             premium: float, max_loss: float) -> SizingOutcome:
        """Size a protective put position.

        Args:
            current_price: Current stock price (S)
            strike: Put strike, the user's stop loss (K)
            premium: Per-share put premium (P)
            max_loss: Maximum acceptable loss in dollars

        Returns:
            FeasiblePosition, or InfeasiblePosition with the reason

        Raises:
            InvalidTicker, InvalidStopLoss, InvalidMaxLoss, PremiumUnavailable:
                If a precondition fails
        """
        self.validate_inputs(current_price, strike, premium, max_loss)

        inputs = SizingInputs(current_price, strike, premium, max_loss)
        premium_per_contract = inputs.premium_per_contract
        loss_per_share = inputs.loss_per_share

        if max_loss < premium_per_contract:
            return self._infeasible(
                inputs,
                f"Max loss (${max_loss:,.2f}) is too low to cover the premium for a "
                f"single contract (${premium_per_contract:,.2f})."
            )

        # Shares one contract's premium leaves room for
        initial_shares = _floor((max_loss - premium_per_contract) / loss_per_share)
        if initial_shares <= 0:
            return self._infeasible(
                inputs,
                f"Cannot purchase any shares. The maximum loss of ${max_loss:,.2f} is not "
                f"enough to cover the premium for one contract (${premium_per_contract:,.2f}) "
                f"and the potential loss on even one share at the stop loss "
                f"(${loss_per_share:,.2f})."
            )

        contracts = math.ceil(initial_shares / SHARES_PER_CONTRACT)

        # Drop contracts whose combined premium alone breaks the budget
        affordable = _floor(max_loss / premium_per_contract)
        if contracts > affordable:
            contracts = max(affordable, 1)
        if premium_per_contract * contracts > max_loss:
            return self._infeasible(
                inputs,
                f"Max loss (${max_loss:,.2f}) is insufficient to cover the premium for "
                f"{contracts} contract(s) (${premium_per_contract * contracts:,.2f})."
            )

        shares, contracts = self._balance(inputs, contracts)
        if shares <= 0:
            return self._infeasible(
                inputs,
                f"Budget of ${max_loss:,.2f} is exhausted by the premium for {contracts} "
                f"contract(s) before any shares can be hedged."
            )

        return self._build_position(inputs, shares, contracts)

    def max_shares_for(self, inputs: SizingInputs, contracts: int) -> int:
        """Most shares `contracts` puts can cover while staying within budget."""
        remaining = inputs.max_loss - inputs.premium_per_contract * contracts
        return min(contracts * SHARES_PER_CONTRACT, _floor(remaining / inputs.loss_per_share))

    def _balance(self, inputs: SizingInputs, max_contracts: int) -> Tuple[int, int]:
        """Pick the contract count (up to max_contracts) that carries the most shares.

        Share capacity grows by 100 per contract until the budget line takes
        over, so the best count is one of the two integers around the point
        where 100 * c equals (max_loss - 100 * P * c) / (S - K).
        """
        crossover = inputs.max_loss / (
            SHARES_PER_CONTRACT * (inputs.loss_per_share + inputs.premium)
        )
        candidates = sorted({
            min(max(c, 1), max_contracts)
            for c in (math.floor(crossover), math.ceil(crossover))
        })

        best_shares, best_contracts = 0, candidates[0]
        for contracts in candidates:
            shares = self.max_shares_for(inputs, contracts)
            if shares > best_shares:
                best_shares, best_contracts = shares, contracts

        if best_shares <= 0:
            return 0, best_contracts
        return best_shares, math.ceil(best_shares / SHARES_PER_CONTRACT)

    def _build_position(self, inputs: SizingInputs, shares: int, contracts: int) -> FeasiblePosition:
        stock_cost = shares * inputs.current_price
        premium_cost = contracts * inputs.premium_per_contract
        realized_max_loss = inputs.loss_per_share * shares + premium_cost

        warning = None
        if realized_max_loss > inputs.max_loss * (1 + self.tolerance_percent / 100):
            warning = (
                f"Calculated max loss ${realized_max_loss:,.2f} exceeds desired max loss "
                f"${inputs.max_loss:,.2f} for {shares} shares and {contracts} contracts. "
                f"This comes from the indivisibility of shares and contracts."
            )
            if self.logger:
                self.logger.log_warning(warning)

        return FeasiblePosition(
            inputs=inputs,
            shares=shares,
            contracts=contracts,
            stock_cost=stock_cost,
            premium_cost=premium_cost,
            total_cost=stock_cost + premium_cost,
            realized_max_loss=realized_max_loss,
            breakeven=inputs.current_price + premium_cost / shares,
            protection_level=1 - realized_max_loss / stock_cost,
            warning=warning
        )

    def _infeasible(self, inputs: SizingInputs, reason: str) -> InfeasiblePosition:
        if self.logger:
            self.logger.log_debug(
                "Sizing produced a zero position",
                {"reason": reason, "max_loss": inputs.max_loss}
            )
        return InfeasiblePosition(inputs=inputs, reason=reason)
