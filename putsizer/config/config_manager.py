"""Configuration manager for loading and validating configuration."""
import json
import os
import re
from .models import Config, TradierCredentials, LoggingConfig


class ConfigManager:
    """Manages loading and validation of configuration."""

    def load_config(self, config_path: str) -> Config:
        """Load configuration from a JSON file.

        Args:
            config_path: Path to the configuration file

        Returns:
            Config object with loaded configuration

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
            json.JSONDecodeError: If JSON is malformed
        """
        if not os.path.exists(config_path):
            raise FileNotFoundError(
                f"Configuration file not found: {config_path}\n"
                f"Copy config/config.example.json to this location to get started."
            )

        try:
            with open(config_path, 'r') as f:
                config_data = json.load(f)
        except json.JSONDecodeError as e:
            raise json.JSONDecodeError(
                f"Invalid JSON format in configuration file: {e.msg}",
                e.doc,
                e.pos
            )

        config_data = self._substitute_env_vars(config_data)

        config = self.build_config(config_data)

        # Validate configuration
        if not self.validate_config(config):
            raise ValueError("Configuration validation failed")

        return config

    def build_config(self, config_data: dict) -> Config:
        """Build a Config from already-parsed configuration data.

        Args:
            config_data: Dictionary in the config file layout

        Returns:
            Config object (not yet validated)

        Raises:
            ValueError: If a numeric value cannot be converted
        """
        # Support both nested "providers.tradier" and flat "tradier" sections
        providers = config_data.get('providers', {})
        tradier_data = providers.get('tradier', {}) or config_data.get('tradier', {})
        tradier_credentials = TradierCredentials(
            api_token=tradier_data.get('api_token', ''),
            base_url=tradier_data.get('base_url', 'https://sandbox.tradier.com')
        )

        logging_data = config_data.get('logging', {})
        logging_config = LoggingConfig(
            level=logging_data.get('level', 'INFO'),
            file_path=logging_data.get('file_path', 'logs/protective_put.log')
        )

        try:
            return Config(
                logging_config=logging_config,
                tradier_credentials=tradier_credentials,
                quote_provider=config_data.get('quote_provider', 'yahoo'),
                premium_provider=config_data.get('premium_provider', 'tradier'),
                request_timeout_seconds=float(config_data.get('request_timeout_seconds', 10.0)),
                default_holding_period=config_data.get('default_holding_period', '1w'),
                large_position_warning=float(config_data.get('large_position_warning', 10000.0)),
                tolerance_percent=float(config_data.get('tolerance_percent', 1.0))
            )
        except (ValueError, TypeError) as e:
            raise ValueError(
                f"Invalid configuration value type: {e}\n"
                f"Please check that numeric values are numbers and other values are correct types."
            )

    def default_config(self) -> Config:
        """Build a configuration from environment variables alone.

        Used when no config file is present. TRADIER_API_TOKEN enables the
        Tradier option chain feed.

        Returns:
            Validated Config object
        """
        config = self.build_config({
            'tradier': {
                'api_token': os.environ.get('TRADIER_API_TOKEN', ''),
                'base_url': os.environ.get('TRADIER_BASE_URL', 'https://sandbox.tradier.com')
            }
        })
        self.validate_config(config)
        return config

    def _substitute_env_vars(self, data):
        """Recursively substitute environment variables in configuration data.

        Environment variables should be in the format ${VAR_NAME}.

        Args:
            data: Configuration data (dict, list, or string)

        Returns:
            Data with environment variables substituted
        """
        if isinstance(data, dict):
            return {key: self._substitute_env_vars(value) for key, value in data.items()}
        elif isinstance(data, list):
            return [self._substitute_env_vars(item) for item in data]
        elif isinstance(data, str):
            pattern = r'\$\{([^}]+)\}'
            matches = re.findall(pattern, data)
            result = data
            for var_name in matches:
                env_value = os.environ.get(var_name, '')
                result = result.replace(f'${{{var_name}}}', env_value)
            return result
        else:
            return data

    def validate_config(self, config: Config) -> bool:
        """Validate the configuration.

        Args:
            config: Config object to validate

        Returns:
            True if valid

        Raises:
            ValueError: If validation fails with error message
        """
        is_valid, error_message = config.validate()
        if not is_valid:
            raise ValueError(f"Configuration validation error: {error_message}")
        return True
