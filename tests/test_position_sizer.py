"""Unit tests for PositionSizer."""
import math
import pytest
from unittest.mock import Mock

from putsizer.errors import InvalidMaxLoss, InvalidStopLoss, InvalidTicker, PremiumUnavailable
from putsizer.strategy.position_sizer import (
    FeasiblePosition,
    InfeasiblePosition,
    PositionSizer,
    SizingInputs,
)


@pytest.fixture
def sizer():
    """Create a PositionSizer with the default 1% tolerance."""
    return PositionSizer()


class TestFeasibleScenarios:
    """Tests for budgets that support a position."""

    def test_basic_scenario(self, sizer):
        """S=60, K=57, P=3, max loss 500 buys 66 shares and 1 contract."""
        outcome = sizer.size(current_price=60.0, strike=57.0, premium=3.0, max_loss=500.0)

        assert isinstance(outcome, FeasiblePosition)
        assert outcome.is_feasible
        assert outcome.shares == 66
        assert outcome.contracts == 1
        assert outcome.premium_cost == pytest.approx(300.0)
        assert outcome.stock_cost == pytest.approx(3960.0)
        assert outcome.total_cost == pytest.approx(4260.0)
        assert outcome.realized_max_loss == pytest.approx(498.0)
        assert outcome.message is None

    def test_multiple_contracts(self, sizer):
        """S=100, K=90, P=1, max loss 5000 buys 450 shares and 5 contracts."""
        outcome = sizer.size(current_price=100.0, strike=90.0, premium=1.0, max_loss=5000.0)

        assert outcome.shares == 450
        assert outcome.contracts == 5
        assert outcome.premium_cost == pytest.approx(500.0)
        assert outcome.realized_max_loss == pytest.approx(5000.0)

    def test_breakeven_and_protection_level(self, sizer):
        """Breakeven adds premium per share to the price; protection is the share of stock cost kept."""
        outcome = sizer.size(current_price=60.0, strike=57.0, premium=3.0, max_loss=500.0)

        assert outcome.breakeven == pytest.approx(60.0 + 300.0 / 66)
        assert outcome.protection_level == pytest.approx(1 - 498.0 / 3960.0)

    def test_surplus_contract_released(self, sizer):
        """A contract that only crowds out shares is not bought."""
        # One contract's premium leaves room for 200 shares, but a second
        # contract would eat the budget those extra shares need
        outcome = sizer.size(current_price=11.0, strike=10.0, premium=1.0, max_loss=300.0)

        assert outcome.shares == 100
        assert outcome.contracts == 1
        assert outcome.realized_max_loss == pytest.approx(200.0)

    def test_contracts_reduced_when_premium_breaks_budget(self, sizer):
        """ceil(N0 / 100) contracts cost more than the budget, so fewer are bought."""
        outcome = sizer.size(current_price=11.0, strike=10.0, premium=10.0, max_loss=1500.0)

        assert outcome.contracts == 1
        assert outcome.shares == 100
        assert outcome.realized_max_loss == pytest.approx(1100.0)

    def test_float_noise_does_not_drop_a_share(self, sizer):
        """91 / (1.1 - 1.0) evaluates to 909.99999..., which still buys 910 shares."""
        outcome = sizer.size(current_price=1.1, strike=1.0, premium=0.01, max_loss=101.0)

        assert outcome.shares == 910
        assert outcome.contracts == 10
        assert outcome.realized_max_loss <= 101.0 * 1.01

    def test_outcome_carries_inputs(self, sizer):
        """The inputs used are reported on the outcome."""
        outcome = sizer.size(current_price=60.0, strike=57.0, premium=3.0, max_loss=500.0)

        assert outcome.inputs == SizingInputs(60.0, 57.0, 3.0, 500.0)
        assert outcome.inputs.premium_per_contract == pytest.approx(300.0)
        assert outcome.inputs.loss_per_share == pytest.approx(3.0)

    def test_identical_inputs_give_identical_outcomes(self, sizer):
        """Sizing is deterministic."""
        first = sizer.size(current_price=100.0, strike=90.0, premium=1.0, max_loss=5000.0)
        second = sizer.size(current_price=100.0, strike=90.0, premium=1.0, max_loss=5000.0)

        assert first == second


class TestInfeasibleScenarios:
    """Tests for budgets too small for any position."""

    def test_max_loss_below_one_contract(self, sizer):
        """A budget smaller than one contract's premium returns a zero position."""
        outcome = sizer.size(current_price=60.0, strike=57.0, premium=3.0, max_loss=1.0)

        assert isinstance(outcome, InfeasiblePosition)
        assert not outcome.is_feasible
        assert outcome.shares == 0
        assert outcome.contracts == 0
        assert outcome.total_cost == 0.0
        assert "too low to cover the premium" in outcome.message

    def test_max_loss_equal_to_one_contract(self, sizer):
        """A budget consumed entirely by one premium leaves no room for shares."""
        outcome = sizer.size(current_price=60.0, strike=57.0, premium=3.0, max_loss=300.0)

        assert outcome.shares == 0
        assert outcome.contracts == 0
        assert "Cannot purchase any shares" in outcome.message

    def test_not_enough_for_one_share(self, sizer):
        """Premium plus one share's loss above the budget returns a zero position."""
        outcome = sizer.size(current_price=60.0, strike=50.0, premium=3.0, max_loss=305.0)

        assert outcome.shares == 0
        assert outcome.message

    def test_zero_position_reports_inputs(self, sizer):
        """Fetched inputs are kept for transparency."""
        outcome = sizer.size(current_price=60.0, strike=57.0, premium=3.0, max_loss=1.0)

        assert outcome.inputs.current_price == 60.0
        assert outcome.inputs.strike == 57.0
        assert outcome.inputs.premium == 3.0
        assert outcome.inputs.max_loss == 1.0


class TestInputValidation:
    """Tests for precondition errors."""

    def test_stop_loss_above_price(self, sizer):
        with pytest.raises(InvalidStopLoss, match="below current price"):
            sizer.size(current_price=60.0, strike=65.0, premium=3.0, max_loss=500.0)

    def test_stop_loss_equal_to_price(self, sizer):
        with pytest.raises(InvalidStopLoss, match="below current price"):
            sizer.size(current_price=60.0, strike=60.0, premium=3.0, max_loss=500.0)

    def test_non_positive_stop_loss(self, sizer):
        with pytest.raises(InvalidStopLoss, match="positive number"):
            sizer.size(current_price=60.0, strike=0.0, premium=3.0, max_loss=500.0)

    def test_non_positive_max_loss(self, sizer):
        with pytest.raises(InvalidMaxLoss):
            sizer.size(current_price=60.0, strike=57.0, premium=3.0, max_loss=0.0)

        with pytest.raises(InvalidMaxLoss):
            sizer.size(current_price=60.0, strike=57.0, premium=3.0, max_loss=-100.0)

    def test_non_positive_premium(self, sizer):
        with pytest.raises(PremiumUnavailable):
            sizer.size(current_price=60.0, strike=57.0, premium=0.0, max_loss=500.0)

    def test_non_positive_price(self, sizer):
        with pytest.raises(InvalidTicker):
            sizer.size(current_price=0.0, strike=57.0, premium=3.0, max_loss=500.0)

    @pytest.mark.parametrize("overrides,error", [
        ({"max_loss": float("nan")}, InvalidMaxLoss),
        ({"max_loss": float("inf")}, InvalidMaxLoss),
        ({"strike": float("nan")}, InvalidStopLoss),
        ({"strike": float("-inf")}, InvalidStopLoss),
        ({"premium": float("nan")}, PremiumUnavailable),
        ({"premium": float("inf")}, PremiumUnavailable),
        ({"current_price": float("nan")}, InvalidTicker),
        ({"current_price": float("inf")}, InvalidTicker),
    ])
    def test_non_finite_inputs_rejected(self, sizer, overrides, error):
        """NaN and infinity are refused rather than reaching the share arithmetic."""
        inputs = dict(current_price=60.0, strike=57.0, premium=3.0, max_loss=500.0)
        inputs.update(overrides)

        with pytest.raises(error):
            sizer.size(**inputs)

    def test_errors_are_value_errors(self, sizer):
        """Validation errors can be caught as ValueError."""
        with pytest.raises(ValueError):
            sizer.size(current_price=60.0, strike=65.0, premium=3.0, max_loss=500.0)


class TestSizingProperties:
    """Invariants over a sweep of budgets."""

    @pytest.mark.parametrize("price,strike,premium", [
        (60.0, 57.0, 3.0),
        (100.0, 90.0, 1.0),
        (11.0, 10.0, 1.0),
        (25.5, 24.0, 0.85),
        (412.3, 395.0, 6.4),
    ])
    def test_invariants_hold_as_budget_grows(self, sizer, price, strike, premium):
        """Shares never shrink with budget; contracts cover shares; loss stays in budget."""
        previous_shares = 0

        for max_loss in range(50, 20001, 37):
            outcome = sizer.size(price, strike, premium, float(max_loss))

            assert outcome.shares >= 0
            assert outcome.contracts >= 0
            assert outcome.shares >= previous_shares
            previous_shares = outcome.shares

            if outcome.shares > 0:
                assert outcome.contracts == math.ceil(outcome.shares / 100)
                assert outcome.realized_max_loss <= max_loss * 1.01

    def test_shares_are_maximal(self, sizer):
        """One more share would break the budget."""
        outcome = sizer.size(current_price=100.0, strike=90.0, premium=1.0, max_loss=5000.0)
        extra = outcome.shares + 1
        loss_with_extra = 10.0 * extra + math.ceil(extra / 100) * 100.0

        assert loss_with_extra > 5000.0


class TestToleranceWarning:
    """Tests for the realized max loss tolerance check."""

    def test_warning_attached_when_tolerance_exceeded(self):
        """Overshoot beyond tolerance is reported but numbers are kept."""
        logger = Mock()
        sizer = PositionSizer(tolerance_percent=-1.0, logger=logger)

        outcome = sizer.size(current_price=60.0, strike=57.0, premium=3.0, max_loss=500.0)

        assert outcome.shares == 66
        assert outcome.warning is not None
        assert "exceeds desired max loss" in outcome.message
        logger.log_warning.assert_called_once()

    def test_no_warning_within_tolerance(self):
        logger = Mock()
        sizer = PositionSizer(logger=logger)

        outcome = sizer.size(current_price=60.0, strike=57.0, premium=3.0, max_loss=500.0)

        assert outcome.warning is None
        logger.log_warning.assert_not_called()
