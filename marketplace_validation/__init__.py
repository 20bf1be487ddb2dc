"""
Marketplace Validation Engine

Pure, synchronous input validation and business rule checks for marketplace
records: user accounts, job postings, job applications, company profiles and
file attachments. A record goes in, a ValidationResult comes out.

Usage:
    from marketplace_validation import validate_form

    result = validate_form({'name': 'Acme', 'industry': 'Tech'}, 'company')
    if not result.is_valid:
        for error in result.errors:
            print(error.field, error.message)
"""

from .business import (
    DEFAULT_BUSINESS_RULES,
    DEFAULT_DOMAIN_PATTERNS,
    BusinessRules,
    DomainPatterns,
    PatternKind,
    get_business_rules,
    get_validator_by_name,
    validate_application,
    validate_attachment,
    validate_company,
    validate_form,
    validate_job,
    validate_password,
    validate_user,
)
from .config import ConfigurationError, configure_logging, get_config
from .models import EntityKind, ErrorType, PasswordStrength, ValidationError, ValidationResult
from .utils import detect_threats, sanitize_input, validate_password_strength

__version__ = '1.0.0'

__all__ = [
    'BusinessRules',
    'ConfigurationError',
    'DEFAULT_BUSINESS_RULES',
    'DEFAULT_DOMAIN_PATTERNS',
    'DomainPatterns',
    'EntityKind',
    'ErrorType',
    'PasswordStrength',
    'PatternKind',
    'ValidationError',
    'ValidationResult',
    'configure_logging',
    'detect_threats',
    'get_business_rules',
    'get_config',
    'get_validator_by_name',
    'sanitize_input',
    'validate_application',
    'validate_attachment',
    'validate_company',
    'validate_form',
    'validate_job',
    'validate_password',
    'validate_password_strength',
    'validate_user',
]
