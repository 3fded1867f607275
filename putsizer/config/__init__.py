"""Configuration management module."""
from .models import Config, TradierCredentials, LoggingConfig
from .config_manager import ConfigManager

__all__ = ['Config', 'TradierCredentials', 'LoggingConfig', 'ConfigManager']
