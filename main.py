#!/usr/bin/env python3
"""
Protective Put Position Sizer - Command Line Entry Point

Sizes a shares-plus-puts position for one ticker so that the worst-case loss
at the stop loss stays within a dollar budget, and prints a markdown report.
"""

import sys
import argparse
from pathlib import Path
from dotenv import load_dotenv

from putsizer import __version__
from putsizer.calculator import ProtectivePutCalculator
from putsizer.config import ConfigManager
from putsizer.errors import NetworkError, PositionSizingError
from putsizer.logging import SizerLogger
from putsizer.report import format_currency, render_markdown

# Load environment variables from .env file
load_dotenv()

DEFAULT_CONFIG_PATH = 'config/config.json'

EXIT_OK = 0
EXIT_INPUT_ERROR = 1
EXIT_NETWORK_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Protective put position sizing: shares + puts within a max loss budget'
    )
    parser.add_argument('ticker', help='Stock ticker symbol, e.g. AAPL')
    parser.add_argument(
        '--stop-loss',
        type=float,
        required=True,
        help='Stop loss price, used as the put strike (must be below current price)'
    )
    parser.add_argument(
        '--max-loss',
        type=float,
        required=True,
        help='Maximum acceptable loss in dollars, premium included'
    )
    parser.add_argument(
        '--holding-period',
        choices=['1w', '2w', '1m'],
        default=None,
        help='How long you plan to hold the position (default from config, usually 1w)'
    )
    parser.add_argument(
        '--config',
        type=str,
        default=None,
        help=f'Path to configuration file (default: {DEFAULT_CONFIG_PATH} if present)'
    )
    parser.add_argument(
        '--estimate',
        action='store_true',
        help='Estimate the put premium instead of fetching an option chain'
    )
    parser.add_argument(
        '--version',
        action='version',
        version=f'Protective Put Sizer v{__version__}'
    )
    return parser


def load_configuration(config_path):
    """Load the config file, or build one from the environment when none exists."""
    manager = ConfigManager()
    if config_path is not None:
        return manager.load_config(config_path)
    if Path(DEFAULT_CONFIG_PATH).exists():
        return manager.load_config(DEFAULT_CONFIG_PATH)
    return manager.default_config()


def main(argv=None):
    """Main entry point for the position sizer."""
    args = build_parser().parse_args(argv)

    try:
        config = load_configuration(args.config)
    except FileNotFoundError as e:
        print(f"Error: {e}")
        return EXIT_INPUT_ERROR
    except ValueError as e:
        print(f"Error: {e}")
        return EXIT_INPUT_ERROR

    try:
        logger = SizerLogger(config.logging_config)
    except OSError as e:
        print(f"Error: cannot open log file {config.logging_config.file_path}: {e}")
        return EXIT_INPUT_ERROR

    calculator = ProtectivePutCalculator.from_config(config, logger, force_estimate=args.estimate)
    holding_period = args.holding_period or config.default_holding_period

    if args.max_loss > config.large_position_warning:
        print(
            f"Large position warning: consider position sizing carefully for amounts over "
            f"{format_currency(config.large_position_warning)}\n"
        )

    try:
        result = calculator.size_position(
            ticker=args.ticker,
            stop_loss=args.stop_loss,
            max_loss=args.max_loss,
            holding_period=holding_period
        )
    except NetworkError as e:
        print(f"Network error: {e}\nPlease try again.")
        return EXIT_NETWORK_ERROR
    except PositionSizingError as e:
        print(f"Calculation failed: {e}")
        return EXIT_INPUT_ERROR
    except Exception as e:
        logger.log_critical(f"Unexpected failure sizing {args.ticker}", e)
        raise

    print(render_markdown(result))
    return EXIT_OK


def cli():
    """Console script wrapper."""
    sys.exit(main())


if __name__ == '__main__':
    cli()
