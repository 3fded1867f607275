#!/usr/bin/env python3
"""
Interactive Protective Put Calculator

Prompts for a ticker, stop loss, max loss and holding period, then shows the
sized position. Library log output is kept quiet for a cleaner interface.
"""

import sys
import os
import math
import logging

logging.getLogger("urllib3").setLevel(logging.CRITICAL)

from dotenv import load_dotenv

load_dotenv()

from putsizer.calculator import ProtectivePutCalculator
from putsizer.config.models import LoggingConfig
from putsizer.errors import NetworkError, PositionSizingError
from putsizer.logging import SizerLogger
from putsizer.report import format_currency, render_markdown
from putsizer.strategy import HoldingPeriod

from main import load_configuration


def clear_screen():
    """Clear terminal screen."""
    os.system("cls" if os.name == "nt" else "clear")


def display_banner():
    """Display the calculator banner."""
    print()
    print("╔" + "═" * 58 + "╗")
    print("║" + " " * 12 + "🛡️  PROTECTIVE PUT CALCULATOR" + " " * 17 + "║")
    print("╚" + "═" * 58 + "╝")
    print()
    print("  This tool is for educational purposes only. Not financial advice.")
    print("  Options trading involves substantial risk.")
    print()


def prompt_ticker():
    """Ask for a stock symbol."""
    print("📈 STOCK TICKER (e.g., OKLO, AAPL, TSLA):")
    while True:
        choice = input("  Enter stock symbol: ").strip().upper()

        if not choice:
            print("  ❌ Please enter a valid ticker symbol")
            continue

        # Letters plus '.' and '-' for class shares like BRK.B
        if not choice.replace(".", "").replace("-", "").isalpha() or len(choice) > 10:
            print("  ❌ Invalid symbol format (use letters like AAPL)")
            continue

        print(f"  ✅ Selected: {choice}")
        return choice


def prompt_positive_number(title, label, example):
    """Ask for a positive number, repeating until one is given."""
    print()
    print(title)
    while True:
        raw = input(f"  {label} (e.g., {example}): ").strip().replace("$", "").replace(",", "")
        try:
            value = float(raw)
        except ValueError:
            print(f"  ❌ {label} must be a positive number")
            continue
        if not math.isfinite(value) or value <= 0:
            print(f"  ❌ {label} must be a positive number")
            continue
        return value


def prompt_holding_period(default):
    """Ask for a holding period code."""
    print()
    print("📅 HOLDING PERIOD:")
    print("  ┌─────┬──────────┐")
    for period in HoldingPeriod:
        print(f"  │ {period.value:<3} │ {period.label:<8} │")
    print("  └─────┴──────────┘")

    valid = [p.value for p in HoldingPeriod]
    while True:
        choice = input(f"  Enter holding period [{default}]: ").strip().lower() or default
        if choice in valid:
            return choice
        print(f"  ❌ Enter one of: {', '.join(valid)}")


def confirm(prompt):
    """Yes/no confirmation."""
    while True:
        answer = input(f"  {prompt} (y/n): ").strip().lower()
        if answer in ["y", "yes"]:
            return True
        if answer in ["n", "no"]:
            return False
        print("  ❌ Please enter 'y' or 'n'")


def build_calculator():
    """Load configuration and build a calculator with quiet logging."""
    config = load_configuration(None)
    # Only errors reach the console here; details still go to the log file
    quiet_config = LoggingConfig(level="ERROR", file_path=config.logging_config.file_path)
    logger = SizerLogger(quiet_config)
    return config, ProtectivePutCalculator.from_config(config, logger)


def run_once(config, calculator):
    """Collect inputs, run one calculation and show the report."""
    ticker = prompt_ticker()
    stop_loss = prompt_positive_number("🎯 STOP LOSS PRICE (put strike):", "Stop loss", "57.00")
    max_loss = prompt_positive_number("💰 MAXIMUM LOSS (USD, premium included):", "Max loss", "500")
    holding_period = prompt_holding_period(config.default_holding_period)

    if max_loss > config.large_position_warning:
        print()
        print(
            f"  ⚠️  Large position: consider sizing carefully for amounts over "
            f"{format_currency(config.large_position_warning)}"
        )
        if not confirm("Continue anyway?"):
            return

    print()
    print("  ⏳ Fetching market data...")

    try:
        result = calculator.size_position(ticker, stop_loss, max_loss, holding_period)
    except NetworkError as e:
        print(f"\n  ❌ Network error: {e}")
        print("  🔁 Please try again in a moment")
        return
    except PositionSizingError as e:
        print(f"\n  ❌ Calculation failed: {e}")
        return

    print()
    print("═" * 60)
    print(render_markdown(result))
    print("═" * 60)


def main():
    """Main interactive loop."""
    try:
        display_banner()

        try:
            config, calculator = build_calculator()
        except (OSError, ValueError) as e:
            print(f"  ❌ Configuration error: {e}")
            sys.exit(1)

        while True:
            run_once(config, calculator)
            print()
            if not confirm("Calculate another position?"):
                break
            clear_screen()
            display_banner()

        print("\n  👋 Goodbye!")

    except KeyboardInterrupt:
        print("\n\n  👋 Goodbye!")
        sys.exit(0)


if __name__ == "__main__":
    main()
