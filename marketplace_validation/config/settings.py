"""
Validation Engine Configuration Module

This module provides the configuration infrastructure for the marketplace validation
engine, implementing environment-specific configuration classes with python-dotenv
based environment variable management.

Key Features:
- python-dotenv environment variable management with .env auto-discovery
- Environment-specific configuration inheritance (development, testing, production)
- Validation tunables (deadline window, password length, sanitizer defaults)
- Replaceable disposable email domain list without code changes
- Logging level and format selection consumed by config.logging

Dependencies:
- python-dotenv 1.0+ for environment variable management
"""

import os
import logging
from typing import Any, Dict, List, Optional, Tuple, Type

from dotenv import load_dotenv, find_dotenv

logger = logging.getLogger(__name__)


class ConfigurationError(Exception):
    """Custom exception for configuration validation errors."""
    pass


class EnvironmentManager:
    """
    Environment variable management using python-dotenv with type conversion.

    Loads an optional .env file without overriding variables that are already
    present in the process environment.
    """

    def __init__(self, env_file: Optional[str] = None):
        """
        Initialize environment manager.

        Args:
            env_file: Optional path to .env file, defaults to auto-discovery
        """
        self.env_file = env_file or find_dotenv(usecwd=True)
        self.logger = logging.getLogger(f"{__name__}.EnvironmentManager")
        self._load_environment_variables()

    def _load_environment_variables(self) -> None:
        """
        Load environment variables from the .env file if one was found.

        Raises:
            ConfigurationError: When the .env file cannot be read
        """
        if not self.env_file:
            return

        try:
            load_dotenv(self.env_file, override=False)
            self.logger.debug("Environment variables loaded from %s", self.env_file)
        except OSError as e:
            error_msg = f"Failed to load environment variables: {str(e)}"
            self.logger.error(error_msg)
            raise ConfigurationError(error_msg)

    def get_optional_env(self, key: str, default: Any = None, var_type: type = str) -> Any:
        """
        Get optional environment variable with default value and type conversion.

        Args:
            key: Environment variable name
            default: Default value if variable is not set
            var_type: Expected variable type

        Returns:
            Environment variable value or default

        Raises:
            ConfigurationError: When the variable is set but cannot be converted
        """
        value = os.getenv(key)
        if value is None or value.strip() == '':
            return default

        try:
            if var_type == bool:
                return value.strip().lower() in ('true', '1', 'yes', 'on')
            elif var_type == int:
                return int(value)
            elif var_type == float:
                return float(value)
            elif var_type == list:
                return [item.strip() for item in value.split(',') if item.strip()]
            else:
                return var_type(value)
        except (ValueError, TypeError) as e:
            raise ConfigurationError(f"Environment variable '{key}' has invalid type: {str(e)}")


class BaseConfig:
    """
    Base configuration shared by every environment.

    Attributes mirror environment variable names so that callers can read
    e.g. ``config.LOG_LEVEL`` regardless of the active environment.
    """

    ENVIRONMENT = 'production'

    def __init__(self, env_manager: Optional[EnvironmentManager] = None):
        """Initialize base configuration with environment manager."""
        self.env_manager = env_manager or EnvironmentManager()
        self._configure_logging_settings()
        self._configure_validation_settings()
        self._validate_configuration()

    def _configure_logging_settings(self) -> None:
        """Configure logging level and output format."""
        self.LOG_LEVEL = self.env_manager.get_optional_env('LOG_LEVEL', 'INFO')
        self.LOG_FORMAT = self.env_manager.get_optional_env('LOG_FORMAT', 'json')
        self.DEBUG = self.env_manager.get_optional_env('APP_DEBUG', False, bool)

    def _configure_validation_settings(self) -> None:
        """Configure validation engine tunables."""
        self.VALIDATION_DEADLINE_MAX_DAYS = self.env_manager.get_optional_env(
            'VALIDATION_DEADLINE_MAX_DAYS', 90, int
        )
        self.VALIDATION_PASSWORD_MIN_LENGTH = self.env_manager.get_optional_env(
            'VALIDATION_PASSWORD_MIN_LENGTH', 8, int
        )
        self.VALIDATION_DEFAULT_MAX_LENGTH = self.env_manager.get_optional_env(
            'VALIDATION_DEFAULT_MAX_LENGTH', 500, int
        )
        # None keeps the built-in disposable domain list
        self.VALIDATION_DISPOSABLE_EMAIL_DOMAINS = self.env_manager.get_optional_env(
            'VALIDATION_DISPOSABLE_EMAIL_DOMAINS', None, list
        )

    def _validate_configuration(self) -> None:
        """
        Validate configuration values.

        Raises:
            ConfigurationError: When a value is outside its accepted range
        """
        errors: List[str] = []

        if self.LOG_FORMAT.lower() not in ('json', 'console'):
            errors.append(f"LOG_FORMAT must be 'json' or 'console', got '{self.LOG_FORMAT}'")

        if not isinstance(logging.getLevelName(self.LOG_LEVEL.upper()), int):
            errors.append(f"LOG_LEVEL '{self.LOG_LEVEL}' is not a valid logging level")

        positive_settings = (
            'VALIDATION_DEADLINE_MAX_DAYS',
            'VALIDATION_PASSWORD_MIN_LENGTH',
            'VALIDATION_DEFAULT_MAX_LENGTH',
        )
        for name in positive_settings:
            if getattr(self, name) < 1:
                errors.append(f"{name} must be a positive integer")

        if errors:
            raise ConfigurationError('; '.join(errors))

    @property
    def disposable_email_domains(self) -> Optional[Tuple[str, ...]]:
        """Configured disposable domain list, lower-cased, or None for the default."""
        if self.VALIDATION_DISPOSABLE_EMAIL_DOMAINS is None:
            return None
        return tuple(domain.lower() for domain in self.VALIDATION_DISPOSABLE_EMAIL_DOMAINS)

    def to_dict(self) -> Dict[str, Any]:
        """Return the public settings as a dictionary."""
        return {
            key: value for key, value in vars(self).items()
            if key.isupper()
        }


class DevelopmentConfig(BaseConfig):
    """Development configuration with human-readable logs."""

    ENVIRONMENT = 'development'

    def _configure_logging_settings(self) -> None:
        super()._configure_logging_settings()
        self.LOG_LEVEL = self.env_manager.get_optional_env('LOG_LEVEL', 'DEBUG')
        self.LOG_FORMAT = self.env_manager.get_optional_env('LOG_FORMAT', 'console')
        self.DEBUG = True


class TestingConfig(BaseConfig):
    """
    Testing configuration.

    Ignores environment overrides for validation tunables so that test
    outcomes do not depend on the developer's shell.
    """

    ENVIRONMENT = 'testing'

    def _configure_logging_settings(self) -> None:
        self.LOG_LEVEL = 'WARNING'
        self.LOG_FORMAT = 'console'
        self.DEBUG = True

    def _configure_validation_settings(self) -> None:
        self.VALIDATION_DEADLINE_MAX_DAYS = 90
        self.VALIDATION_PASSWORD_MIN_LENGTH = 8
        self.VALIDATION_DEFAULT_MAX_LENGTH = 500
        self.VALIDATION_DISPOSABLE_EMAIL_DOMAINS = None


class ProductionConfig(BaseConfig):
    """Production configuration with JSON logs."""

    ENVIRONMENT = 'production'


CONFIG_MAPPING: Dict[str, Type[BaseConfig]] = {
    'development': DevelopmentConfig,
    'testing': TestingConfig,
    'production': ProductionConfig,
}


def get_config(config_name: Optional[str] = None) -> BaseConfig:
    """
    Configuration factory function returning an environment-specific instance.

    Args:
        config_name: Optional configuration name override, defaults to APP_ENV

    Returns:
        Environment-specific configuration instance

    Raises:
        ConfigurationError: When an invalid configuration name is provided
    """
    config_name = config_name or os.getenv('APP_ENV', 'production')

    config_class = CONFIG_MAPPING.get(config_name.lower())
    if not config_class:
        available_configs = ', '.join(CONFIG_MAPPING.keys())
        raise ConfigurationError(
            f"Invalid configuration name '{config_name}'. "
            f"Available configurations: {available_configs}"
        )

    config_instance = config_class()
    logger.debug("Configuration '%s' loaded", config_name)
    return config_instance


__all__ = [
    'BaseConfig',
    'DevelopmentConfig',
    'TestingConfig',
    'ProductionConfig',
    'CONFIG_MAPPING',
    'get_config',
    'EnvironmentManager',
    'ConfigurationError',
]
