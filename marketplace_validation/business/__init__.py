"""
Business Logic Package

Package Components:
    Business Rules (rules.py):
        - Immutable rule table with length, range and enumeration bounds
        - Per-entity sanitization policies
        - Configuration driven construction via get_business_rules()

    Domain Patterns (patterns.py):
        - New Zealand postcode, phone, IRD, company number, bank account,
          address and suburb formats

    Entity Validators (validators.py):
        - User, job, application, company and attachment validators
        - validate_form dispatcher and validator registry
"""

from .patterns import (
    DEFAULT_DOMAIN_PATTERNS,
    DomainPattern,
    DomainPatterns,
    PatternKind,
    validate_abn,
    validate_bank_account,
    validate_company_number,
    validate_domain_value,
    validate_ird_number,
    validate_nz_address,
    validate_nz_phone,
    validate_nz_postcode,
    validate_suburb,
)
from .rules import (
    DEFAULT_BUSINESS_RULES,
    ApplicationRules,
    BusinessRules,
    CompanyRules,
    FieldPolicy,
    JobRules,
    LengthRule,
    PasswordPolicy,
    RangeRule,
    SanitizationPolicy,
    UserRules,
    get_business_rules,
)
from .validators import (
    VALIDATOR_REGISTRY,
    ApplicationValidator,
    AttachmentValidator,
    BaseEntityValidator,
    CompanyValidator,
    JobValidator,
    UserValidator,
    get_validator_by_name,
    validate_application,
    validate_attachment,
    validate_company,
    validate_email_address,
    validate_form,
    validate_job,
    validate_password,
    validate_user,
)

__all__ = [
    # Rules
    'DEFAULT_BUSINESS_RULES',
    'ApplicationRules',
    'BusinessRules',
    'CompanyRules',
    'FieldPolicy',
    'JobRules',
    'LengthRule',
    'PasswordPolicy',
    'RangeRule',
    'SanitizationPolicy',
    'UserRules',
    'get_business_rules',

    # Domain patterns
    'DEFAULT_DOMAIN_PATTERNS',
    'DomainPattern',
    'DomainPatterns',
    'PatternKind',
    'validate_abn',
    'validate_bank_account',
    'validate_company_number',
    'validate_domain_value',
    'validate_ird_number',
    'validate_nz_address',
    'validate_nz_phone',
    'validate_nz_postcode',
    'validate_suburb',

    # Entity validators
    'VALIDATOR_REGISTRY',
    'ApplicationValidator',
    'AttachmentValidator',
    'BaseEntityValidator',
    'CompanyValidator',
    'JobValidator',
    'UserValidator',
    'get_validator_by_name',
    'validate_application',
    'validate_attachment',
    'validate_company',
    'validate_email_address',
    'validate_form',
    'validate_job',
    'validate_password',
    'validate_user',
]
