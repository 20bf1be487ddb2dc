"""
Structured logging configuration testing module.

Tests sensitive data masking, the structlog processor pipeline for JSON and
console output, the python-json-logger formatter and one-time configuration.
"""

import json
import logging
import warnings
from types import SimpleNamespace

import pytest
import structlog

from marketplace_validation.config import logging as logging_module
from marketplace_validation.config.logging import (
    MASK,
    LoggingConfiguration,
    LoggingConfigurationError,
    ValidationJSONFormatter,
    configure_logging,
    filter_sensitive_data,
    get_logger,
)
from marketplace_validation.config.settings import ProductionConfig, TestingConfig


@pytest.fixture
def isolated_logging(monkeypatch):
    """Reset module, structlog and root logger state around a test."""
    monkeypatch.setattr(logging_module, '_logging_config', None)
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level

    yield

    structlog.reset_defaults()
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def production_config(monkeypatch):
    for name in ('LOG_LEVEL', 'LOG_FORMAT', 'APP_DEBUG'):
        monkeypatch.delenv(name, raising=False)
    return ProductionConfig()


@pytest.mark.unit
class TestSensitiveDataFilter:

    def test_top_level_values_masked(self):
        event = filter_sensitive_data(None, 'info', {'event': 'login', 'password': 'hunter2'})

        assert event == {'event': 'login', 'password': MASK}

    def test_nested_values_masked(self):
        event = filter_sensitive_data(None, 'info', {
            'event': 'validated',
            'record': {'firstName': 'Ann', 'apiKey': 'k-123'},
            'items': [{'access_token': 't'}, 'plain'],
        })

        assert event['record'] == {'firstName': 'Ann', 'apiKey': MASK}
        assert event['items'] == [{'access_token': MASK}, 'plain']

    def test_non_sensitive_entries_untouched(self):
        event = {'event': 'Entity validation completed', 'entity': 'user', 'error_count': 2}

        assert filter_sensitive_data(None, 'debug', event) == event


@pytest.mark.unit
class TestLoggingConfiguration:

    def test_console_pipeline_for_testing(self):
        processors = LoggingConfiguration(TestingConfig()).build_processors()

        assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)
        assert filter_sensitive_data in processors

    def test_json_pipeline_for_production(self, production_config):
        configuration = LoggingConfiguration(production_config)

        assert configuration.use_json
        assert isinstance(configuration.build_processors()[-1], structlog.processors.JSONRenderer)

    def test_missing_settings_raise(self):
        with pytest.raises(LoggingConfigurationError, match='LOG_FORMAT'):
            LoggingConfiguration(SimpleNamespace(LOG_LEVEL='INFO'))

    def test_configure_logging_runs_once(self, isolated_logging):
        first = configure_logging(TestingConfig())
        second = configure_logging(ProductionConfig())

        assert first is second
        assert first.is_configured
        assert logging.getLogger().level == logging.WARNING

    def test_get_logger_configures_on_first_use(self, isolated_logging):
        logger = get_logger('business.validators')

        assert logging_module._logging_config is not None
        assert hasattr(logger, 'info')


@pytest.mark.unit
class TestValidationJSONFormatter:

    def test_record_rendered_as_json(self):
        record = logging.LogRecord(
            name='security.sanitization',
            level=logging.WARNING,
            pathname=__file__,
            lineno=1,
            msg='Security threats detected in input',
            args=(),
            exc_info=None,
        )

        payload = json.loads(ValidationJSONFormatter().format(record))

        assert payload['message'] == 'Security threats detected in input'
        assert payload['levelname'] == 'WARNING'
        assert payload['service'] == 'marketplace-validation'
        assert 'timestamp' in payload

    def test_built_on_current_formatter_module(self):
        with warnings.catch_warnings():
            warnings.simplefilter('error', DeprecationWarning)
            from pythonjsonlogger.json import JsonFormatter

        assert issubclass(ValidationJSONFormatter, JsonFormatter)
