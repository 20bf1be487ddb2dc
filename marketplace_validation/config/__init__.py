"""
Configuration package for the marketplace validation engine.

Exposes the environment-specific settings classes and the structured logging
setup.
"""

from .settings import (
    BaseConfig,
    DevelopmentConfig,
    TestingConfig,
    ProductionConfig,
    ConfigurationError,
    EnvironmentManager,
    get_config,
)
from .logging import (
    LoggingConfiguration,
    LoggingConfigurationError,
    configure_logging,
    filter_sensitive_data,
    get_logger,
)

__all__ = [
    'BaseConfig',
    'DevelopmentConfig',
    'TestingConfig',
    'ProductionConfig',
    'ConfigurationError',
    'EnvironmentManager',
    'get_config',
    'LoggingConfiguration',
    'LoggingConfigurationError',
    'configure_logging',
    'filter_sensitive_data',
    'get_logger',
]
