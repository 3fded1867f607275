"""Data models for configuration."""
from dataclasses import dataclass
from typing import Optional


VALID_QUOTE_PROVIDERS = ['yahoo', 'tradier']
VALID_PREMIUM_PROVIDERS = ['tradier', 'estimate']
VALID_HOLDING_PERIODS = ['1w', '2w', '1m']


@dataclass
class TradierCredentials:
    """Tradier market data credentials."""
    api_token: str
    base_url: str = 'https://sandbox.tradier.com'

    @property
    def is_configured(self) -> bool:
        """True when a non-blank token is present."""
        return bool(self.api_token and self.api_token.strip())

    def validate(self) -> tuple[bool, Optional[str]]:
        """Validate Tradier credentials.

        An empty token is allowed; it only disables the Tradier feeds.

        Returns:
            Tuple of (is_valid, error_message)
        """
        if not self.base_url or not self.base_url.strip():
            return False, "Base URL is required"
        if not self.base_url.startswith(('http://', 'https://')):
            return False, "Base URL must start with http:// or https://"
        return True, None


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str
    file_path: str

    def validate(self) -> tuple[bool, Optional[str]]:
        """Validate logging configuration.

        Returns:
            Tuple of (is_valid, error_message)
        """
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if self.level.upper() not in valid_levels:
            return False, f"Log level must be one of {valid_levels}"
        if not self.file_path or not self.file_path.strip():
            return False, "Log file path is required"
        return True, None


@dataclass
class Config:
    """Main configuration for the position sizer."""
    logging_config: LoggingConfig
    tradier_credentials: Optional[TradierCredentials] = None
    quote_provider: str = 'yahoo'  # "yahoo" or "tradier"
    premium_provider: str = 'tradier'  # "tradier" or "estimate"
    request_timeout_seconds: float = 10.0
    default_holding_period: str = '1w'
    large_position_warning: float = 10000.0  # Max loss above this triggers a caution
    tolerance_percent: float = 1.0  # Allowed overshoot of realized vs target max loss

    @property
    def has_tradier_token(self) -> bool:
        return self.tradier_credentials is not None and self.tradier_credentials.is_configured

    def validate(self) -> tuple[bool, Optional[str]]:
        """Validate the entire configuration.

        Returns:
            Tuple of (is_valid, error_message)
        """
        if self.quote_provider.lower() not in VALID_QUOTE_PROVIDERS:
            return False, f"Quote provider must be one of {VALID_QUOTE_PROVIDERS}"

        if self.premium_provider.lower() not in VALID_PREMIUM_PROVIDERS:
            return False, f"Premium provider must be one of {VALID_PREMIUM_PROVIDERS}"

        # Quotes from Tradier need a token; premiums degrade to the estimator instead
        if self.quote_provider.lower() == 'tradier' and not self.has_tradier_token:
            return False, "Tradier API token required when quote_provider is 'tradier'"

        if self.tradier_credentials is not None:
            is_valid, error = self.tradier_credentials.validate()
            if not is_valid:
                return False, f"Tradier credentials error: {error}"

        if self.request_timeout_seconds <= 0:
            return False, "Request timeout must be positive"

        if self.default_holding_period not in VALID_HOLDING_PERIODS:
            return False, f"Default holding period must be one of {VALID_HOLDING_PERIODS}"

        if self.large_position_warning <= 0:
            return False, "Large position warning threshold must be positive"

        if self.tolerance_percent < 0:
            return False, "Tolerance percent cannot be negative"

        is_valid, error = self.logging_config.validate()
        if not is_valid:
            return False, f"Logging config error: {error}"

        return True, None
