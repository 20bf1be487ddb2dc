"""
Structured Logging Configuration

Configures structlog and the standard library logging module for the validation
engine. Produces JSON logs (python-json-logger) for log aggregation or a console
renderer for local development, and masks sensitive fields before rendering.

Usage:
    from marketplace_validation.config.logging import configure_logging, get_logger

    configure_logging()
    logger = get_logger("business.validators")
    logger.info("Validation completed", entity="user", is_valid=True)
"""

import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import structlog
from pythonjsonlogger.json import JsonFormatter
from structlog.types import EventDict, WrappedLogger

from .settings import BaseConfig, get_config

SENSITIVE_FIELDS = (
    'password', 'passwd', 'secret', 'token', 'credential', 'api_key', 'apikey',
)

MASK = '***'


class LoggingConfigurationError(Exception):
    """Exception raised for logging configuration errors."""
    pass


class ValidationJSONFormatter(JsonFormatter):
    """JSON log formatter adding service identification fields."""

    def __init__(self, *args, **kwargs):
        format_string = ' '.join([
            '%(asctime)s',
            '%(name)s',
            '%(levelname)s',
            '%(message)s',
        ])
        super().__init__(format_string, *args, **kwargs)

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record['service'] = 'marketplace-validation'
        log_record['environment'] = os.getenv('APP_ENV', 'production')

        if not log_record.get('timestamp'):
            log_record['timestamp'] = datetime.now(timezone.utc).isoformat()


def filter_sensitive_data(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """
    Mask sensitive values in log entries.

    Keys are matched case-insensitively by substring against SENSITIVE_FIELDS;
    nested dictionaries and lists of dictionaries are filtered recursively.

    Args:
        logger: Wrapped logger instance
        method_name: Logging method name
        event_dict: Event dictionary to filter

    Returns:
        Filtered event dictionary with sensitive data masked
    """
    def filter_dict(data: Dict[str, Any]) -> Dict[str, Any]:
        filtered = {}
        for key, value in data.items():
            key_lower = str(key).lower()
            if any(sensitive in key_lower for sensitive in SENSITIVE_FIELDS):
                filtered[key] = MASK
            elif isinstance(value, dict):
                filtered[key] = filter_dict(value)
            elif isinstance(value, list):
                filtered[key] = [
                    filter_dict(item) if isinstance(item, dict) else item
                    for item in value
                ]
            else:
                filtered[key] = value
        return filtered

    return filter_dict(event_dict)


class LoggingConfiguration:
    """
    Logging configuration manager.

    Wires the standard library root logger and structlog together so that
    structlog events are rendered through the configured handlers.
    """

    def __init__(self, config: Optional[BaseConfig] = None):
        self.config = config or get_config()
        self.is_configured = False
        self._validate_configuration()

    def _validate_configuration(self) -> None:
        """
        Validate logging configuration requirements.

        Raises:
            LoggingConfigurationError: When configuration is invalid
        """
        required_attrs = ['LOG_LEVEL', 'LOG_FORMAT']
        missing_attrs = [attr for attr in required_attrs if not hasattr(self.config, attr)]

        if missing_attrs:
            raise LoggingConfigurationError(
                f"Missing required logging configuration: {', '.join(missing_attrs)}"
            )

    @property
    def use_json(self) -> bool:
        return self.config.LOG_FORMAT.lower() == 'json'

    def build_processors(self) -> List[Any]:
        """Build the structlog processor pipeline."""
        processors: List[Any] = [
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            filter_sensitive_data,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
        ]

        if self.use_json:
            processors.append(structlog.processors.JSONRenderer())
        else:
            processors.append(structlog.dev.ConsoleRenderer(colors=False))

        return processors

    def configure_structured_logging(self) -> None:
        """Configure stdlib logging and structlog."""
        self._configure_stdlib_logging()

        structlog.configure(
            processors=self.build_processors(),
            wrapper_class=structlog.stdlib.BoundLogger,
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=True,
        )

        self.is_configured = True

    def _configure_stdlib_logging(self) -> None:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(self._create_formatter())

        logging.basicConfig(
            level=getattr(logging, self.config.LOG_LEVEL.upper()),
            handlers=[handler],
            force=True
        )

        # Threat detections are always kept
        logging.getLogger('security').setLevel(logging.WARNING)

    def _create_formatter(self) -> logging.Formatter:
        if self.use_json:
            return ValidationJSONFormatter()
        return logging.Formatter(
            fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )


_logging_config: Optional[LoggingConfiguration] = None


def configure_logging(config: Optional[BaseConfig] = None) -> LoggingConfiguration:
    """
    Configure application logging once per process.

    Args:
        config: Configuration instance, defaults to get_config()

    Returns:
        Configured LoggingConfiguration instance
    """
    global _logging_config

    if _logging_config is None:
        _logging_config = LoggingConfiguration(config)
        _logging_config.configure_structured_logging()

    return _logging_config


def get_logger(name: str) -> Any:
    """
    Get a structlog logger, configuring logging on first use.

    Args:
        name: Logger name

    Returns:
        structlog bound logger proxy
    """
    if _logging_config is None:
        configure_logging()

    return structlog.get_logger(name)


__all__ = [
    'LoggingConfiguration',
    'LoggingConfigurationError',
    'ValidationJSONFormatter',
    'configure_logging',
    'filter_sensitive_data',
    'get_logger',
]
