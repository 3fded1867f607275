"""Structured logger with credential masking for position sizing runs."""
import logging
import re
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Optional

from putsizer.config.models import LoggingConfig


class SizerLogger:
    """Logger for the position sizer with structured context and credential protection."""

    # Patterns to detect and mask sensitive information
    SENSITIVE_PATTERNS = [
        (re.compile(r'(api[_-]?key["\']?\s*[:=]\s*["\']?)([^"\'}\s]+)', re.IGNORECASE), r'\1***MASKED***'),
        (re.compile(r'(api[_-]?secret["\']?\s*[:=]\s*["\']?)([^"\'}\s]+)', re.IGNORECASE), r'\1***MASKED***'),
        (re.compile(r'(password["\']?\s*[:=]\s*["\']?)([^"\'}\s]+)', re.IGNORECASE), r'\1***MASKED***'),
        (re.compile(r'(token["\']?\s*[:=]\s*["\']?)([^"\'}\s&]+)', re.IGNORECASE), r'\1***MASKED***'),
        (re.compile(r'(bearer\s+)([a-zA-Z0-9_\-\.]+)', re.IGNORECASE), r'\1***MASKED***'),
    ]

    SENSITIVE_KEYS = ['key', 'secret', 'password', 'token']

    def __init__(self, config: LoggingConfig):
        """Initialize the sizer logger.

        Args:
            config: Logging configuration
        """
        self.config = config
        level = getattr(logging, config.level.upper())
        self.logger = logging.getLogger('ProtectivePut')
        self.logger.setLevel(level)

        # Remove existing handlers to avoid duplicates
        self.logger.handlers.clear()

        formatter = logging.Formatter(
            '[%(asctime)s] [%(levelname)s] %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

        log_path = Path(config.file_path)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            config.file_path,
            maxBytes=10 * 1024 * 1024,  # 10 MB
            backupCount=5
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        self.logger.addHandler(file_handler)

        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        self.logger.addHandler(console_handler)

    def _mask_sensitive_data(self, message: str) -> str:
        """Mask sensitive information in log messages.

        Args:
            message: Original log message

        Returns:
            Message with sensitive data masked
        """
        masked_message = message
        for pattern, replacement in self.SENSITIVE_PATTERNS:
            masked_message = pattern.sub(replacement, masked_message)
        return masked_message

    def _format_context(self, context: Optional[Dict[str, Any]]) -> str:
        """Format context dictionary as ' | key=value' pairs."""
        if not context:
            return ""

        context_parts = []
        for key, value in context.items():
            if any(sensitive in key.lower() for sensitive in self.SENSITIVE_KEYS):
                value = '***MASKED***'
            context_parts.append(f"{key}={value}")

        return " | " + " | ".join(context_parts) if context_parts else ""

    def _render(self, message: str, context: Optional[Dict[str, Any]]) -> str:
        return f"{self._mask_sensitive_data(message)}{self._format_context(context)}"

    def log_info(self, message: str, context: Optional[Dict[str, Any]] = None):
        """Log an info message.

        Args:
            message: Log message
            context: Optional context dictionary for structured data
        """
        self.logger.info(self._render(message, context))

    def log_warning(self, message: str, context: Optional[Dict[str, Any]] = None):
        """Log a warning message.

        Args:
            message: Log message
            context: Optional context dictionary for structured data
        """
        self.logger.warning(self._render(message, context))

    def log_error(self, message: str, error: Optional[Exception] = None,
                  context: Optional[Dict[str, Any]] = None):
        """Log an error message.

        Args:
            message: Log message
            error: Optional exception object
            context: Optional context dictionary for structured data
        """
        rendered = self._render(message, context)

        if error:
            error_info = self._mask_sensitive_data(f" | Error: {type(error).__name__}: {str(error)}")
            self.logger.error(f"{rendered}{error_info}", exc_info=True)
        else:
            self.logger.error(rendered)

    def log_debug(self, message: str, context: Optional[Dict[str, Any]] = None):
        """Log a debug message."""
        self.logger.debug(self._render(message, context))

    def log_critical(self, message: str, error: Optional[Exception] = None,
                     context: Optional[Dict[str, Any]] = None):
        """Log a critical error message.

        Args:
            message: Log message
            error: Optional exception object
            context: Optional context dictionary for structured data
        """
        rendered = self._render(message, context)

        if error:
            error_info = self._mask_sensitive_data(f" | Error: {type(error).__name__}: {str(error)}")
            self.logger.critical(f"{rendered}{error_info}", exc_info=True)
        else:
            self.logger.critical(rendered)

    def log_calculation(self, summary: Dict[str, Any]):
        """Log the outcome of one sizing run.

        Args:
            summary: Dictionary with keys:
                - ticker: Stock symbol
                - feasible: Whether a non-zero position was found
                - shares: Shares to buy
                - contracts: Put contracts to buy
                - current_price: Quote used
                - strike: Put strike (stop loss)
                - premium: Per-share put premium
                - expiration: Expiration date (YYYYMMDD)
                - max_loss: Target max loss
                - realized_max_loss: Worst-case loss of the sized position
                - message: Diagnostic message, if any
        """
        ticker = summary.get('ticker', 'UNKNOWN')

        if summary.get('feasible'):
            message = (
                f"Position sized: {ticker} | "
                f"Shares={summary.get('shares', 0)} | "
                f"Contracts={summary.get('contracts', 0)} | "
                f"Price=${summary.get('current_price', 0):.2f} | "
                f"Strike=${summary.get('strike', 0):.2f} | "
                f"Premium=${summary.get('premium', 0):.2f} | "
                f"Expiration={summary.get('expiration', 'N/A')} | "
                f"Max Loss=${summary.get('realized_max_loss', 0):.2f}"
                f"/${summary.get('max_loss', 0):.2f}"
            )
            self.log_info(message)
        else:
            message = (
                f"No feasible position: {ticker} | "
                f"Reason={summary.get('message', 'Unknown')} | "
                f"Price=${summary.get('current_price', 0):.2f} | "
                f"Strike=${summary.get('strike', 0):.2f} | "
                f"Premium=${summary.get('premium', 0):.2f} | "
                f"Max Loss=${summary.get('max_loss', 0):.2f}"
            )
            self.log_warning(message)
