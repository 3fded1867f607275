"""Markdown rendering of a protective put calculation."""
from datetime import datetime

from putsizer.calculator.protective_put_calculator import CalculationResult
from putsizer.strategy.position_sizer import SHARES_PER_CONTRACT


DISCLAIMER = (
    "This information is for educational purposes only. Not financial advice. "
    "Options trading involves substantial risk. This calculator does not account for "
    "commissions, taxes, or other trading fees. Option liquidity and bid-ask spreads "
    "can also significantly affect outcomes."
)

LEARN_MORE_URL = "https://www.investopedia.com/terms/p/protective-put.asp"


def format_currency(value: float) -> str:
    """Format dollars as $1,234.56 (negative values as -$1,234.56)."""
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.2f}"


def format_percentage(ratio: float) -> str:
    """Format a ratio as a percentage with one decimal."""
    return f"{ratio * 100:.1f}%"


def format_shares(shares: int) -> str:
    return f"{shares:,}"


def format_expiration(expiration: str) -> str:
    """Render YYYYMMDD as YYYY-MM-DD (Fri)."""
    parsed = datetime.strptime(expiration, '%Y%m%d')
    return parsed.strftime('%Y-%m-%d (%a)')


def render_markdown(result: CalculationResult) -> str:
    """Render a calculation result as a markdown report.

    Zero positions still list every fetched input, with the reason in the
    calculation notes.
    """
    outcome = result.outcome
    inputs = outcome.inputs
    request = result.request
    premium_label = "estimated" if result.is_estimated_premium else "mid-price"

    lines = ["# Protective Put Strategy Results", ""]

    if outcome.message:
        lines += ["## Calculation Notes", outcome.message, "", "---", ""]

    lines += [
        "## Strategy Overview",
        f"- **Stock**: {request.ticker}",
        f"- **Current Price (S)**: {format_currency(inputs.current_price)}"
        f" ({result.quote.currency}, {result.quote.market_state})",
        f"- **Stop Loss / Put Strike (K)**: {format_currency(inputs.strike)}",
        f"- **Put Premium (P per share)**: {format_currency(inputs.premium)} ({premium_label})",
        f"- **Expiration**: {format_expiration(result.expiration)}",
        "",
        "## Position Summary",
        f"- **Shares**: {format_shares(outcome.shares)}",
        f"- **Contracts**: {outcome.contracts} (1 contract = {SHARES_PER_CONTRACT} shares)",
        "",
        "## Cost Breakdown",
        f"- **Stock Cost**: {format_currency(outcome.stock_cost)}",
        f"- **Option Premium**: {format_currency(outcome.premium_cost)}",
        f"- **Total Investment**: {format_currency(outcome.total_cost)}",
        "",
        "## Risk Analysis",
        f"- **Target Max Loss**: {format_currency(inputs.max_loss)}",
    ]

    if outcome.is_feasible:
        lines += [
            f"- **Maximum Loss**: {format_currency(outcome.realized_max_loss)}",
            f"- **Protection Level**: {format_percentage(outcome.protection_level)}",
            f"- **Breakeven Price**: {format_currency(outcome.breakeven)}",
            "",
            "This is the most you could lose if the stock falls to or below the strike by "
            "expiration, with the puts exercised or sold to offset the share losses.",
            "",
            "## Execution Steps",
            f"1. **Buy {format_shares(outcome.shares)} shares** of {request.ticker} "
            f"at current market price",
            f"2. **Buy {outcome.contracts} put contract(s)** with strike "
            f"{format_currency(inputs.strike)} expiring {format_expiration(result.expiration)}",
            "3. **Monitor position** and consider rolling or closing before expiration",
        ]
    else:
        lines += ["- **Maximum Loss**: N/A (no position)"]

    lines += ["", "---", f"*{DISCLAIMER}*", "", f"Learn more: {LEARN_MORE_URL}", ""]
    return "\n".join(lines)
