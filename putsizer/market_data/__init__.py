"""Market data providers: stock quotes and put premiums."""
from .base_client import PremiumSource, PutQuote, Quote, QuoteSource
from .premium_estimator import PremiumEstimator
from .provider_factory import ProviderFactory
from .tradier_client import TradierClient
from .yahoo_client import YahooQuoteClient

__all__ = [
    'PremiumSource', 'PutQuote', 'Quote', 'QuoteSource',
    'PremiumEstimator', 'ProviderFactory', 'TradierClient', 'YahooQuoteClient',
]
