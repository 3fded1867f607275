"""Factory for creating market data providers from configuration."""
from typing import Optional

from putsizer.config.models import Config
from putsizer.logging.sizer_logger import SizerLogger
from .base_client import PremiumSource, QuoteSource
from .premium_estimator import PremiumEstimator
from .tradier_client import TradierClient
from .yahoo_client import YahooQuoteClient


class ProviderFactory:
    """Factory for creating quote and premium sources based on configuration."""

    @staticmethod
    def create_quote_source(config: Config, logger: Optional[SizerLogger] = None) -> QuoteSource:
        """Create the configured quote source.

        Args:
            config: Loaded configuration
            logger: Optional logger instance

        Returns:
            QuoteSource instance

        Raises:
            ValueError: If the provider is not supported
        """
        provider = config.quote_provider.lower()

        if provider == "yahoo":
            return YahooQuoteClient(timeout=config.request_timeout_seconds, logger=logger)
        elif provider == "tradier":
            return ProviderFactory._create_tradier(config, logger)
        else:
            supported = ", ".join(ProviderFactory.get_supported_providers()["quote"])
            raise ValueError(f"Unsupported quote provider: {provider}. Supported: {supported}")

    @staticmethod
    def create_premium_source(config: Config, logger: Optional[SizerLogger] = None,
                              force_estimate: bool = False) -> PremiumSource:
        """Create the configured premium source.

        Tradier is used when selected and a token is present; otherwise
        premiums are estimated.

        Args:
            config: Loaded configuration
            logger: Optional logger instance
            force_estimate: Use the estimator regardless of configuration

        Returns:
            PremiumSource instance

        Raises:
            ValueError: If the provider is not supported
        """
        provider = config.premium_provider.lower()

        if force_estimate or provider == "estimate":
            return PremiumEstimator(logger=logger)
        elif provider == "tradier":
            if not config.has_tradier_token:
                if logger:
                    logger.log_warning(
                        "No Tradier API token configured - falling back to estimated premiums"
                    )
                return PremiumEstimator(logger=logger)
            return ProviderFactory._create_tradier(config, logger)
        else:
            supported = ", ".join(ProviderFactory.get_supported_providers()["premium"])
            raise ValueError(f"Unsupported premium provider: {provider}. Supported: {supported}")

    @staticmethod
    def _create_tradier(config: Config, logger: Optional[SizerLogger]) -> TradierClient:
        credentials = config.tradier_credentials
        return TradierClient(
            api_token=credentials.api_token,
            base_url=credentials.base_url,
            timeout=config.request_timeout_seconds,
            logger=logger
        )

    @staticmethod
    def get_supported_providers() -> dict:
        """Get supported provider names by kind.

        Returns:
            Dictionary of provider kind to provider names
        """
        return {"quote": ["yahoo", "tradier"], "premium": ["tradier", "estimate"]}
