"""
Entity Validation Engine

This module validates complete marketplace records (user accounts, job
postings, job applications, company profiles and file attachments) against
the business rules table and the domain pattern table.

Every entity validator follows the same contract:

    1. Required-field presence checks
    2. Per-field length, pattern and range checks (in that order per field)
    3. Entity-specific cross-field business rules
    4. Threat scan of every string value in the raw record
    5. Sanitized copy of the record, built whether or not validation passed
    6. ValidationResult with ``is_valid`` true exactly when no errors were found

Errors are collected, never raised. The only exception raised for input is
``TypeError`` when the record is not a mapping at all.

Validation Categories:
    Entity Validators:
        UserValidator: User account and profile validation
        JobValidator: Job posting validation including salary and deadline rules
        ApplicationValidator: Job application validation
        CompanyValidator: Company profile validation
        AttachmentValidator: Uploaded file metadata validation

    Call Surface:
        validate_user, validate_job, validate_application, validate_company,
        validate_attachment, validate_password, validate_form
"""

import re
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List, Mapping, Optional, Pattern, Tuple, Type, Union

import structlog

from ..models import EntityKind, ErrorType, ValidationError, ValidationResult
from ..utils.datetime_utils import DateParseError, ensure_utc, parse_datetime, utc_now
from ..utils.sanitizers import InputSanitizer, ThreatScanner
from ..utils.validators import (
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
from .patterns import DEFAULT_DOMAIN_PATTERNS, DomainPatterns, PatternKind
from .rules import (
    MIB,
    BusinessRules,
    LengthRule,
    PasswordPolicy,
    RangeRule,
    SanitizationPolicy,
    get_business_rules,
)

logger = structlog.get_logger("business.validators")

Clock = Callable[[], datetime]

EMAIL_PATTERN = re.compile(
    r"^[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+@[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)*\Z"
)

PERSON_NAME_PATTERN = re.compile(r"^[a-zA-Z\s'-]+\Z")

SECURITY_MESSAGE = "Input contains potentially malicious content"

# Shortest name or email local part considered personal information
PERSONAL_INFO_MIN_LENGTH = 3


def validate_email_address(
    value: Any,
    field: str,
    rules: BusinessRules
) -> List[ValidationError]:
    """
    Structural email check followed by the disposable domain denylist.

    Returns:
        A single ``format`` error for a malformed address, a single
        ``business_rule`` error for a disposable domain, or nothing
    """
    error = validate_pattern(value, EMAIL_PATTERN, field, "Please enter a valid email address")
    if error:
        return [error]

    domain = as_text(value).rsplit('@', 1)[1].strip()
    if rules.is_disposable_email_domain(domain):
        return [ValidationError(
            type=ErrorType.BUSINESS_RULE,
            field=field,
            message="Disposable email addresses are not allowed"
        )]

    return []


def validate_password(
    password: Any,
    user_data: Optional[Mapping[str, Any]] = None,
    policy: Optional[PasswordPolicy] = None
) -> List[ValidationError]:
    """
    Validate a password against the password policy and the owner's details.

    Unmet strength rules are reported as one ``security`` error whose message
    joins every piece of feedback and whose ``score`` carries the strength
    score. A password containing the owner's first name, last name or email
    local part (case-insensitive, parts of three characters or more) is a
    ``business_rule`` error.

    Args:
        password: Candidate password
        user_data: Record holding firstName, lastName and email
        policy: Password policy, defaults to the configured policy

    Returns:
        List of validation errors, empty when the password is acceptable
    """
    if not is_present(password):
        return [validate_required(password, 'password')]

    if not isinstance(password, str):
        return [ValidationError(
            type=ErrorType.FORMAT,
            field='password',
            message="password must be text"
        )]

    policy = policy or get_business_rules().password
    errors: List[ValidationError] = []

    strength = validate_password_strength(password, policy)
    if not strength.is_valid:
        errors.append(ValidationError(
            type=ErrorType.SECURITY,
            field='password',
            message='. '.join(strength.feedback),
            score=strength.score
        ))

    if _contains_personal_info(password, user_data or {}):
        errors.append(ValidationError(
            type=ErrorType.BUSINESS_RULE,
            field='password',
            message="Password should not contain your personal information"
        ))

    return errors


def _contains_personal_info(password: str, user_data: Mapping[str, Any]) -> bool:
    candidates = [user_data.get('firstName'), user_data.get('lastName')]

    email = user_data.get('email')
    if isinstance(email, str):
        candidates.append(email.split('@', 1)[0])

    password_lower = password.lower()
    for candidate in candidates:
        if not isinstance(candidate, str):
            continue
        candidate = candidate.strip().lower()
        if len(candidate) >= PERSONAL_INFO_MIN_LENGTH and candidate in password_lower:
            return True
    return False


class BaseEntityValidator:
    """
    Base class for all entity validators.

    Subclasses declare their required fields and sanitization policy and
    implement ``check_fields`` and, where the entity has any,
    ``check_business_rules``. ``validate`` runs the shared contract.

    Example:
        class ListingValidator(BaseEntityValidator):
            required_fields = ('title',)

            def check_fields(self, record):
                return self.check_length(record, 'title', LengthRule(5, 80))
    """

    entity: Optional[EntityKind] = None
    required_fields: Tuple[str, ...] = ()
    # Copied into data without sanitization
    verbatim_fields: Tuple[str, ...] = ()

    def __init__(
        self,
        rules: Optional[BusinessRules] = None,
        patterns: Optional[DomainPatterns] = None,
        clock: Optional[Clock] = None,
        sanitizer: Optional[InputSanitizer] = None,
        scanner: Optional[ThreatScanner] = None
    ):
        """
        Initialize the validator.

        Args:
            rules: Business rules table, defaults to the configured table
            patterns: Domain pattern table, defaults to the New Zealand table
            clock: Callable returning the current time for date-relative rules
            sanitizer: Sanitizer used to build the result data
            scanner: Threat scanner applied to the raw record
        """
        self.rules = rules or get_business_rules()
        self.patterns = patterns or DEFAULT_DOMAIN_PATTERNS
        self.clock = clock or utc_now
        self.sanitizer = sanitizer or InputSanitizer()
        self.scanner = scanner or ThreatScanner()

    @property
    def sanitization_policy(self) -> SanitizationPolicy:
        return self.rules.default_sanitization

    def now(self) -> datetime:
        return ensure_utc(self.clock())

    def validate(self, record: Mapping[str, Any]) -> ValidationResult:
        """
        Validate a record and return the aggregate result.

        Args:
            record: Raw input record

        Returns:
            ValidationResult with every error found and sanitized data

        Raises:
            TypeError: If record is not a mapping
        """
        if not isinstance(record, Mapping):
            raise TypeError(
                f"{self.__class__.__name__} expects a mapping, got {type(record).__name__}"
            )

        errors: List[ValidationError] = []
        errors.extend(self.check_required(record))
        errors.extend(self.check_fields(record))
        errors.extend(self.check_business_rules(record))
        errors.extend(self.scan_threats(record))

        result = ValidationResult.from_errors(errors, self.sanitize(record))

        logger.debug("Entity validation completed",
                     entity=self.entity.value if self.entity else None,
                     is_valid=result.is_valid,
                     error_count=len(errors),
                     failed_fields=sorted({error.field for error in errors}))

        return result

    def check_required(self, record: Mapping[str, Any]) -> List[ValidationError]:
        errors = []
        for field in self.required_fields:
            error = validate_required(record.get(field), field)
            if error:
                errors.append(error)
        return errors

    def check_fields(self, record: Mapping[str, Any]) -> List[ValidationError]:
        """Per-field length, pattern and range checks."""
        return []

    def check_business_rules(self, record: Mapping[str, Any]) -> List[ValidationError]:
        """Cross-field and domain rules."""
        return []

    def scan_threats(self, record: Mapping[str, Any]) -> List[ValidationError]:
        """
        Report every string value (including strings inside lists) that
        matches a threat pattern as a ``security`` error.
        """
        errors = []
        for key, value in record.items():
            items = value if isinstance(value, (list, tuple)) else [value]

            threats: List[str] = []
            for item in items:
                for tag in self.scanner.detect_threats(item, field=str(key)):
                    if tag not in threats:
                        threats.append(tag)

            if threats:
                errors.append(ValidationError(
                    type=ErrorType.SECURITY,
                    field=str(key),
                    message=SECURITY_MESSAGE,
                    threats=threats
                ))
        return errors

    def sanitize(self, record: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Build the sanitized copy of a record using the entity policy.

        Unknown keys are kept. Values that are not strings are copied as-is.
        """
        policy = self.sanitization_policy
        data: Dict[str, Any] = {}

        for key, value in record.items():
            if key in self.verbatim_fields:
                data[key] = value
                continue

            max_length, allow_html = policy.options_for(str(key))
            if isinstance(value, (list, tuple)):
                data[key] = [
                    self.sanitizer.sanitize(item, max_length=max_length, allow_html=allow_html)
                    for item in value
                ]
            else:
                data[key] = self.sanitizer.sanitize(value, max_length=max_length, allow_html=allow_html)

        return data

    # ------------------------------------------------------------------
    # Field check helpers. Absent values (None or '') are never checked.
    # ------------------------------------------------------------------

    def check_length(
        self,
        record: Mapping[str, Any],
        field: str,
        rule: LengthRule,
        pattern: Optional[Pattern[str]] = None,
        message: Optional[str] = None
    ) -> List[ValidationError]:
        """Length check, then an optional pattern check, on a present value."""
        value = record.get(field)
        if not is_present(value):
            return []

        errors = []
        error = validate_length(value, rule.min, rule.max, field)
        if error:
            errors.append(error)
            if error.type == ErrorType.FORMAT:
                return errors

        if pattern is not None:
            error = validate_pattern(value, pattern, field, message)
            if error:
                errors.append(error)

        return errors

    def check_range(
        self,
        record: Mapping[str, Any],
        field: str,
        rule: RangeRule
    ) -> List[ValidationError]:
        value = record.get(field)
        if not is_present(value):
            return []
        error = validate_range(value, rule.min, rule.max, field)
        return [error] if error else []

    def check_choice(
        self,
        record: Mapping[str, Any],
        field: str,
        choices: Tuple[str, ...],
        message: str
    ) -> List[ValidationError]:
        value = record.get(field)
        if not is_present(value):
            return []
        error = validate_choice(value, choices, field, message)
        return [error] if error else []

    def check_domain(
        self,
        record: Mapping[str, Any],
        field: str,
        kind: PatternKind
    ) -> List[ValidationError]:
        value = record.get(field)
        if not is_present(value):
            return []
        return self.patterns.validate(kind, value, field)

    def check_email(self, record: Mapping[str, Any], field: str) -> List[ValidationError]:
        value = record.get(field)
        if not is_present(value):
            return []
        return validate_email_address(value, field, self.rules)


class UserValidator(BaseEntityValidator):
    """
    User account and profile validation.

    Covers names, contact details, profile text, age, skills and the
    password, including the rule that a password must not contain the
    user's own name or email local part.

    The password is the one string field not sanitized into ``data``: it is
    copied verbatim, since cleaning would change the credential. It is still
    threat-scanned like every other string.
    """

    entity = EntityKind.USER
    required_fields = ('firstName', 'lastName', 'email', 'userType')
    verbatim_fields = ('password',)

    @property
    def sanitization_policy(self) -> SanitizationPolicy:
        return self.rules.user.sanitization

    def check_fields(self, record: Mapping[str, Any]) -> List[ValidationError]:
        user_rules = self.rules.user
        errors: List[ValidationError] = []

        errors.extend(self.check_email(record, 'email'))
        errors.extend(self.check_length(
            record, 'firstName', user_rules.name,
            PERSON_NAME_PATTERN,
            "First name can only contain letters, spaces, hyphens, and apostrophes"
        ))
        errors.extend(self.check_length(record, 'lastName', user_rules.name))
        errors.extend(self.check_domain(record, 'phone', PatternKind.PHONE))
        errors.extend(self.check_length(record, 'bio', user_rules.bio))
        errors.extend(self.check_range(record, 'age', user_rules.age))
        errors.extend(self.check_range(record, 'experienceYears', user_rules.experience_years))
        errors.extend(self._check_skills(record))
        errors.extend(self.check_domain(record, 'address', PatternKind.ADDRESS))
        errors.extend(self.check_domain(record, 'postcode', PatternKind.POSTCODE))
        errors.extend(self.check_choice(record, 'userType', user_rules.user_types, "Invalid user type"))

        return errors

    def check_business_rules(self, record: Mapping[str, Any]) -> List[ValidationError]:
        password = record.get('password')
        if not is_present(password):
            return []
        return validate_password(password, record, self.rules.password)

    def _check_skills(self, record: Mapping[str, Any]) -> List[ValidationError]:
        skills = record.get('skills')
        if not is_present(skills):
            return []

        if not isinstance(skills, (list, tuple)):
            return [ValidationError(
                type=ErrorType.FORMAT,
                field='skills',
                message="skills must be a list"
            )]

        error = validate_range(len(skills), 0, self.rules.user.skills_max, 'skills')
        return [error] if error else []


class JobValidator(BaseEntityValidator):
    """Job posting validation."""

    entity = EntityKind.JOB
    required_fields = ('title', 'company', 'description', 'location', 'type')

    @property
    def sanitization_policy(self) -> SanitizationPolicy:
        return self.rules.job.sanitization

    def check_fields(self, record: Mapping[str, Any]) -> List[ValidationError]:
        job_rules = self.rules.job
        errors: List[ValidationError] = []

        errors.extend(self.check_length(record, 'title', job_rules.title))
        errors.extend(self.check_length(record, 'description', job_rules.description))
        errors.extend(self.check_range(record, 'salaryMin', job_rules.salary))
        errors.extend(self.check_range(record, 'salaryMax', job_rules.salary))
        errors.extend(self.check_range(record, 'maxApplications', job_rules.max_applications))
        errors.extend(self.check_choice(record, 'type', job_rules.job_types, "Invalid job type"))

        return errors

    def check_business_rules(self, record: Mapping[str, Any]) -> List[ValidationError]:
        errors = []
        errors.extend(self._check_salary_order(record))
        errors.extend(self._check_deadline(record))
        return errors

    def _check_salary_order(self, record: Mapping[str, Any]) -> List[ValidationError]:
        salary_min = coerce_number(record.get('salaryMin'))
        salary_max = coerce_number(record.get('salaryMax'))

        if salary_min is None or salary_max is None or salary_max >= salary_min:
            return []

        return [ValidationError(
            type=ErrorType.BUSINESS_RULE,
            field='salary',
            message="Maximum salary must be greater than or equal to minimum salary",
            actual={'min': salary_min, 'max': salary_max}
        )]

    def _check_deadline(self, record: Mapping[str, Any]) -> List[ValidationError]:
        value = record.get('applicationDeadline')
        if not is_present(value):
            return []

        now = self.now()

        try:
            deadline = parse_datetime(value, default=now)
        except DateParseError:
            return [ValidationError(
                type=ErrorType.FORMAT,
                field='applicationDeadline',
                message="Application deadline must be a valid date"
            )]

        max_days = self.rules.job.deadline_max_days

        if deadline <= now:
            return [ValidationError(
                type=ErrorType.BUSINESS_RULE,
                field='applicationDeadline',
                message="Application deadline must be in the future"
            )]

        if deadline > now + timedelta(days=max_days):
            return [ValidationError(
                type=ErrorType.BUSINESS_RULE,
                field='applicationDeadline',
                message=f"Application deadline cannot be more than {max_days} days in the future",
                expected={'maxDays': max_days}
            )]

        return []


class ApplicationValidator(BaseEntityValidator):
    """Job application validation."""

    entity = EntityKind.APPLICATION
    required_fields = ('candidateName', 'candidateEmail', 'jobId')

    @property
    def sanitization_policy(self) -> SanitizationPolicy:
        return self.rules.application.sanitization

    def check_fields(self, record: Mapping[str, Any]) -> List[ValidationError]:
        application_rules = self.rules.application
        errors: List[ValidationError] = []

        errors.extend(self.check_email(record, 'candidateEmail'))
        errors.extend(self.check_length(record, 'coverLetter', application_rules.cover_letter))
        errors.extend(self.check_length(record, 'experience', application_rules.experience))
        errors.extend(self.check_domain(record, 'phone', PatternKind.PHONE))
        errors.extend(self.check_domain(record, 'candidatePhone', PatternKind.PHONE))

        return errors


class CompanyValidator(BaseEntityValidator):
    """
    Company profile validation.

    The founded year upper bound is the current year according to the
    validator clock.
    """

    entity = EntityKind.COMPANY
    required_fields = ('name', 'industry')

    @property
    def sanitization_policy(self) -> SanitizationPolicy:
        return self.rules.company.sanitization

    def check_fields(self, record: Mapping[str, Any]) -> List[ValidationError]:
        company_rules = self.rules.company
        errors: List[ValidationError] = []

        errors.extend(self.check_length(record, 'name', company_rules.name))
        errors.extend(self.check_length(record, 'description', company_rules.description))

        website = record.get('website')
        if is_present(website):
            error = validate_url(website, 'website', "Invalid website URL")
            if error:
                errors.append(error)

        errors.extend(self.check_range(record, 'employeeCount', company_rules.employee_count))
        errors.extend(self.check_range(
            record, 'foundedYear', RangeRule(company_rules.founded_year_min, self.now().year)
        ))
        errors.extend(self.check_domain(record, 'phone', PatternKind.PHONE))
        errors.extend(self.check_domain(record, 'companyNumber', PatternKind.COMPANY_NUMBER))
        errors.extend(self.check_domain(record, 'irdNumber', PatternKind.IRD_NUMBER))
        errors.extend(self.check_domain(record, 'address', PatternKind.ADDRESS))
        errors.extend(self.check_domain(record, 'postcode', PatternKind.POSTCODE))

        return errors


class AttachmentValidator(BaseEntityValidator):
    """
    Uploaded file metadata validation.

    Expects ``fileName`` and ``fileSize`` (bytes) and optionally the
    declared ``contentType``. Suspicious file names are reported by the
    threat scan like any other string value.
    """

    entity = EntityKind.ATTACHMENT
    required_fields = ('fileName', 'fileSize')

    @property
    def sanitization_policy(self) -> SanitizationPolicy:
        return self.rules.application.attachment_sanitization

    def check_fields(self, record: Mapping[str, Any]) -> List[ValidationError]:
        application_rules = self.rules.application
        errors: List[ValidationError] = []

        file_name = record.get('fileName')
        if is_present(file_name):
            text = as_text(file_name)
            if text is None or not text.lower().endswith(application_rules.allowed_extensions):
                errors.append(ValidationError(
                    type=ErrorType.FORMAT,
                    field='fileName',
                    message="File type not allowed",
                    expected=list(application_rules.allowed_extensions)
                ))

        file_size = record.get('fileSize')
        if is_present(file_size):
            max_size = application_rules.max_file_size
            error = validate_range(file_size, 0, max_size, 'fileSize')
            if error and error.type == ErrorType.RANGE and error.actual > max_size:
                error = error.model_copy(
                    update={'message': f"File size exceeds {max_size / MIB:g}MB limit"}
                )
            if error:
                errors.append(error)

        errors.extend(self.check_choice(
            record, 'contentType', application_rules.allowed_content_types, "File type not allowed"
        ))

        return errors


VALIDATOR_REGISTRY: Dict[EntityKind, Type[BaseEntityValidator]] = {
    EntityKind.USER: UserValidator,
    EntityKind.JOB: JobValidator,
    EntityKind.APPLICATION: ApplicationValidator,
    EntityKind.COMPANY: CompanyValidator,
    EntityKind.ATTACHMENT: AttachmentValidator,
}


def get_validator_by_name(name: Union[str, EntityKind]) -> Optional[Type[BaseEntityValidator]]:
    """
    Get an entity validator class from the registry.

    Args:
        name: Entity kind or its string tag

    Returns:
        Validator class if found, None otherwise
    """
    try:
        return VALIDATOR_REGISTRY.get(EntityKind(name))
    except ValueError:
        return None


def validate_user(record: Mapping[str, Any], **options: Any) -> ValidationResult:
    """Validate a user account record. Options are passed to UserValidator."""
    return UserValidator(**options).validate(record)


def validate_job(record: Mapping[str, Any], **options: Any) -> ValidationResult:
    """Validate a job posting record. Options are passed to JobValidator."""
    return JobValidator(**options).validate(record)


def validate_application(record: Mapping[str, Any], **options: Any) -> ValidationResult:
    return ApplicationValidator(**options).validate(record)


def validate_company(record: Mapping[str, Any], **options: Any) -> ValidationResult:
    return CompanyValidator(**options).validate(record)


def validate_attachment(record: Mapping[str, Any], **options: Any) -> ValidationResult:
    return AttachmentValidator(**options).validate(record)


def validate_form(
    record: Mapping[str, Any],
    kind: Union[str, EntityKind],
    **options: Any
) -> ValidationResult:
    """
    Validate a record with the validator registered for ``kind``.

    An unknown kind is reported as a ``format`` error on ``validationType``
    rather than raised; the data is then sanitized with the default policy.

    Args:
        record: Raw input record
        kind: Entity kind or its string tag
        **options: rules, patterns, clock, sanitizer or scanner overrides

    Returns:
        ValidationResult for the record

    Raises:
        TypeError: If record is not a mapping
    """
    validator_class = get_validator_by_name(kind)
    if validator_class is not None:
        return validator_class(**options).validate(record)

    if not isinstance(record, Mapping):
        raise TypeError(f"validate_form expects a mapping, got {type(record).__name__}")

    logger.debug("Unknown validation type requested", validation_type=str(kind))

    fallback = BaseEntityValidator(**options)
    return ValidationResult.from_errors(
        [ValidationError(
            type=ErrorType.FORMAT,
            field='validationType',
            message="Unknown validation type",
            actual=str(kind),
            expected=[member.value for member in EntityKind]
        )],
        fallback.sanitize(record)
    )


__all__ = [
    'BaseEntityValidator',
    'UserValidator',
    'JobValidator',
    'ApplicationValidator',
    'CompanyValidator',
    'AttachmentValidator',
    'VALIDATOR_REGISTRY',
    'EMAIL_PATTERN',
    'get_validator_by_name',
    'validate_email_address',
    'validate_password',
    'validate_user',
    'validate_job',
    'validate_application',
    'validate_company',
    'validate_attachment',
    'validate_form',
]
