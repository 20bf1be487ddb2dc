"""
Business Rules Table

Immutable configuration objects holding every bound the entity validators
enforce: length and numeric limits, enumerations, the password policy, the
disposable email denylist and the per-entity sanitization policy.

The table is built once (``get_business_rules()``) or constructed explicitly
and passed to validators. Changing a bound means constructing a different
table, never editing validator code.

Usage:
    from marketplace_validation.business.rules import BusinessRules, JobRules, RangeRule

    rules = BusinessRules(job=JobRules(salary=RangeRule(20000, 400000)))
"""

from dataclasses import dataclass, field
from functools import lru_cache
from typing import Optional, Tuple, Union

from ..config.settings import BaseConfig, ConfigurationError, get_config

Number = Union[int, float]

MIB = 1024 * 1024

DISPOSABLE_EMAIL_DOMAINS: Tuple[str, ...] = (
    '10minutemail.com',
    'tempmail.org',
    'guerrillamail.com',
    'mailinator.com',
    'yopmail.com',
    'throwaway.email',
)

USER_TYPES: Tuple[str, ...] = ('job_seeker', 'employer', 'both', 'admin')

JOB_TYPES: Tuple[str, ...] = (
    'full-time', 'part-time', 'contract', 'temporary', 'internship', 'casual',
)

ATTACHMENT_EXTENSIONS: Tuple[str, ...] = ('.pdf', '.doc', '.docx', '.txt')

ATTACHMENT_CONTENT_TYPES: Tuple[str, ...] = (
    'application/pdf',
    'application/msword',
    'application/vnd.openxmlformats-officedocument.wordprocessingml.document',
    'text/plain',
    'image/jpeg',
    'image/png',
    'image/gif',
)


def _check_bounds(kind: str, minimum: Optional[Number], maximum: Optional[Number]) -> None:
    if minimum is not None and maximum is not None and minimum > maximum:
        raise ConfigurationError(f"{kind} minimum {minimum} exceeds maximum {maximum}")


@dataclass(frozen=True)
class LengthRule:
    """Inclusive text length bounds; None leaves a side open."""

    min: Optional[int] = None
    max: Optional[int] = None

    def __post_init__(self):
        _check_bounds('Length', self.min, self.max)


@dataclass(frozen=True)
class RangeRule:
    """Inclusive numeric bounds; None leaves a side open."""

    min: Optional[Number] = None
    max: Optional[Number] = None

    def __post_init__(self):
        _check_bounds('Range', self.min, self.max)


@dataclass(frozen=True)
class PasswordPolicy:
    min_length: int = 8
    require_uppercase: bool = True
    require_lowercase: bool = True
    require_digits: bool = True
    require_special_chars: bool = False


@dataclass(frozen=True)
class FieldPolicy:
    """
    Sanitization options for input keys.

    With ``match_substring`` the policy applies to every key containing
    ``key``, ignoring case (e.g. ``name`` covers ``firstName``); otherwise
    the key must match exactly.
    """

    key: str
    max_length: Optional[int]
    allow_html: bool = False
    match_substring: bool = False

    def matches(self, field_name: str) -> bool:
        if self.match_substring:
            return self.key.lower() in field_name.lower()
        return self.key == field_name


@dataclass(frozen=True)
class SanitizationPolicy:
    """Per-entity sanitization options; the first matching field policy wins."""

    default_max_length: Optional[int] = 500
    fields: Tuple[FieldPolicy, ...] = ()

    def options_for(self, field_name: str) -> Tuple[Optional[int], bool]:
        """Return ``(max_length, allow_html)`` for an input key."""
        for policy in self.fields:
            if policy.matches(field_name):
                return policy.max_length, policy.allow_html
        return self.default_max_length, False


@dataclass(frozen=True)
class UserRules:
    name: LengthRule = LengthRule(2, 50)
    bio: LengthRule = LengthRule(None, 500)
    age: RangeRule = RangeRule(16, 120)
    skills_max: int = 20
    experience_years: RangeRule = RangeRule(0, 60)
    user_types: Tuple[str, ...] = USER_TYPES
    sanitization: SanitizationPolicy = SanitizationPolicy(
        default_max_length=500,
        fields=(
            FieldPolicy('bio', 500),
            FieldPolicy('name', 50, match_substring=True),
        ),
    )


@dataclass(frozen=True)
class JobRules:
    title: LengthRule = LengthRule(5, 100)
    description: LengthRule = LengthRule(50, 5000)
    salary: RangeRule = RangeRule(30000, 500000)
    max_applications: RangeRule = RangeRule(1, 1000)
    deadline_max_days: int = 90
    job_types: Tuple[str, ...] = JOB_TYPES
    sanitization: SanitizationPolicy = SanitizationPolicy(
        default_max_length=1000,
        fields=(
            FieldPolicy('description', 5000, allow_html=True),
            FieldPolicy('title', 100),
        ),
    )


@dataclass(frozen=True)
class ApplicationRules:
    cover_letter: LengthRule = LengthRule(100, 2000)
    experience: LengthRule = LengthRule(None, 1000)
    max_file_size: int = 10 * MIB
    allowed_extensions: Tuple[str, ...] = ATTACHMENT_EXTENSIONS
    allowed_content_types: Tuple[str, ...] = ATTACHMENT_CONTENT_TYPES
    sanitization: SanitizationPolicy = SanitizationPolicy(
        default_max_length=500,
        fields=(
            FieldPolicy('coverLetter', 2000),
            FieldPolicy('experience', 1000),
        ),
    )
    attachment_sanitization: SanitizationPolicy = SanitizationPolicy(
        default_max_length=255,
    )


@dataclass(frozen=True)
class CompanyRules:
    name: LengthRule = LengthRule(2, 100)
    description: LengthRule = LengthRule(20, 2000)
    employee_count: RangeRule = RangeRule(1, 100000)
    # The upper bound is the current year at validation time
    founded_year_min: int = 1800
    sanitization: SanitizationPolicy = SanitizationPolicy(
        default_max_length=500,
        fields=(
            FieldPolicy('description', 2000),
            FieldPolicy('name', 100),
        ),
    )


@dataclass(frozen=True)
class BusinessRules:
    """
    Complete, immutable rule table shared by every entity validator.

    Attributes:
        user: User account bounds and enumerations
        job: Job posting bounds, enumerations and deadline window
        application: Application text bounds and attachment limits
        company: Company profile bounds
        password: Password policy used by the strength check
        disposable_email_domains: Lower-cased denylist of email domains
        default_sanitization: Policy for records of unknown kind
    """

    user: UserRules = field(default_factory=UserRules)
    job: JobRules = field(default_factory=JobRules)
    application: ApplicationRules = field(default_factory=ApplicationRules)
    company: CompanyRules = field(default_factory=CompanyRules)
    password: PasswordPolicy = field(default_factory=PasswordPolicy)
    disposable_email_domains: Tuple[str, ...] = DISPOSABLE_EMAIL_DOMAINS
    default_sanitization: SanitizationPolicy = field(default_factory=SanitizationPolicy)

    def __post_init__(self):
        if self.job.deadline_max_days < 1:
            raise ConfigurationError("Job deadline window must be at least one day")
        if self.password.min_length < 1:
            raise ConfigurationError("Password minimum length must be positive")
        if self.user.skills_max < 0 or self.application.max_file_size < 0:
            raise ConfigurationError("Count and size limits cannot be negative")

    def is_disposable_email_domain(self, domain: str) -> bool:
        return domain.lower() in self.disposable_email_domains

    @classmethod
    def from_config(cls, config: BaseConfig) -> 'BusinessRules':
        """
        Build a rule table from environment configuration.

        Args:
            config: Loaded configuration instance

        Returns:
            Default rules with the configurable tunables applied

        Raises:
            ConfigurationError: When a configured value produces an invalid table
        """
        default_max_length = config.VALIDATION_DEFAULT_MAX_LENGTH
        domains = config.disposable_email_domains

        return cls(
            job=JobRules(deadline_max_days=config.VALIDATION_DEADLINE_MAX_DAYS),
            password=PasswordPolicy(min_length=config.VALIDATION_PASSWORD_MIN_LENGTH),
            disposable_email_domains=domains if domains is not None else DISPOSABLE_EMAIL_DOMAINS,
            default_sanitization=SanitizationPolicy(default_max_length=default_max_length),
        )


DEFAULT_BUSINESS_RULES = BusinessRules()


@lru_cache(maxsize=1)
def get_business_rules() -> BusinessRules:
    """Rule table built from the active configuration, once per process."""
    return BusinessRules.from_config(get_config())


__all__ = [
    'LengthRule',
    'RangeRule',
    'PasswordPolicy',
    'FieldPolicy',
    'SanitizationPolicy',
    'UserRules',
    'JobRules',
    'ApplicationRules',
    'CompanyRules',
    'BusinessRules',
    'DEFAULT_BUSINESS_RULES',
    'DISPOSABLE_EMAIL_DOMAINS',
    'USER_TYPES',
    'JOB_TYPES',
    'get_business_rules',
]
