"""
Utils Package - Shared validation primitives

Module Organization:
- validators: Atomic field checks (required, length, range, pattern, choice,
  URL) and password strength scoring, built on marshmallow validators
- sanitizers: bleach based input sanitization and pattern based threat detection
- datetime_utils: python-dateutil based parsing of deadline values
"""

from .datetime_utils import DateParseError, parse_datetime, utc_now
from .sanitizers import (
    DEFAULT_MAX_LENGTH,
    DetectedThreat,
    InputSanitizer,
    ThreatScanner,
    detect_threats,
    sanitize_input,
)
from .validators import (
    as_text,
    coerce_number,
    is_present,
    validate_choice,
    validate_length,
    validate_password_strength,
    validate_pattern,
    validate_range,
    validate_required,
    validate_url,
)

__all__ = [
    # Date/time
    'DateParseError',
    'parse_datetime',
    'utc_now',

    # Sanitization
    'DEFAULT_MAX_LENGTH',
    'DetectedThreat',
    'InputSanitizer',
    'ThreatScanner',
    'detect_threats',
    'sanitize_input',

    # Primitive validators
    'as_text',
    'coerce_number',
    'is_present',
    'validate_choice',
    'validate_length',
    'validate_password_strength',
    'validate_pattern',
    'validate_range',
    'validate_required',
    'validate_url',
]
