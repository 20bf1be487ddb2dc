"""
Primitive Input Validators

Atomic field checks shared by every entity validator: required presence,
length bounds, numeric ranges, pattern matches, enumerations, URLs and
password strength. Bound comparisons are delegated to marshmallow validators
so the same constraint objects can be reused by marshmallow schemas.

Every primitive returns ``None`` when the value passes and a
``ValidationError`` describing the failure otherwise. Primitives never raise
for bad input: values of the wrong type are reported as ``format`` errors.
"""

import math
import re
from decimal import Decimal
from typing import Any, Iterable, Optional, Pattern, Union

from marshmallow import ValidationError as MarshmallowValidationError
from marshmallow import validate

from ..models import ErrorType, PasswordStrength, ValidationError


Number = Union[int, float]

# Scoring contributions for validate_password_strength
PASSWORD_SCORE_LENGTH = 25
PASSWORD_SCORE_CLASS = 25
PASSWORD_SCORE_SPECIAL = 10
PASSWORD_COMMON_PATTERN_PENALTY = 15

PASSWORD_PATTERNS = {
    'has_uppercase': re.compile(r'[A-Z]'),
    'has_lowercase': re.compile(r'[a-z]'),
    'has_digit': re.compile(r'\d'),
    'has_special': re.compile(r'[!@#$%^&*(),.?":{}|<>]'),
}

PASSWORD_COMMON_PATTERNS = (
    re.compile(r'(.)\1{2,}'),
    re.compile(r'123456|abcdef|qwerty', re.IGNORECASE),
    re.compile(r'password|admin|user', re.IGNORECASE),
)


def is_present(value: Any) -> bool:
    """A value is present unless it is None or the empty string."""
    return value is not None and value != ''


def as_text(value: Any) -> Optional[str]:
    """
    Coerce a scalar to text.

    Strings are returned as-is and numbers are rendered with ``str``.
    Anything else (mappings, sequences, bytes, booleans) cannot be treated
    as text and yields None.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float, Decimal)):
        return str(value)
    return None


def coerce_number(value: Any) -> Optional[Number]:
    """
    Coerce a value to a finite number.

    Accepts ints, floats, Decimals and numeric strings (surrounding
    whitespace ignored). Integral values are returned as ``int``.

    Returns:
        The number, or None when the value is not numeric
    """
    if isinstance(value, bool):
        return None

    if isinstance(value, (int, float, Decimal)):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        return None

    if not math.isfinite(number):
        return None
    if number.is_integer():
        return int(number)
    return number


def _format_error(field: str, message: str) -> ValidationError:
    return ValidationError(type=ErrorType.FORMAT, field=field, message=message)


def validate_required(value: Any, field: str) -> Optional[ValidationError]:
    """Fail when the value is None or the empty string."""
    if not is_present(value):
        return ValidationError(
            type=ErrorType.REQUIRED,
            field=field,
            message=f"{field} is required"
        )
    return None


def validate_length(
    value: Any,
    min_length: Optional[int],
    max_length: Optional[int],
    field: str
) -> Optional[ValidationError]:
    """
    Check the text length of a value against optional bounds.

    Args:
        value: Value to check, numbers are coerced to text
        min_length: Minimum length (inclusive) or None
        max_length: Maximum length (inclusive) or None
        field: Input key reported on failure

    Returns:
        ``length`` error with actual/expected details, ``format`` error when
        the value cannot be treated as text, or None
    """
    text = as_text(value)
    if text is None:
        return _format_error(field, f"{field} must be text")

    try:
        validate.Length(min=min_length, max=max_length)(text)
    except MarshmallowValidationError:
        if min_length is not None and len(text) < min_length:
            message = f"{field} must be at least {min_length} characters long"
        else:
            message = f"{field} must be no more than {max_length} characters long"
        return ValidationError(
            type=ErrorType.LENGTH,
            field=field,
            message=message,
            actual=len(text),
            expected={'min': min_length, 'max': max_length}
        )

    return None


def validate_range(
    value: Any,
    min_value: Optional[Number],
    max_value: Optional[Number],
    field: str
) -> Optional[ValidationError]:
    """
    Check a numeric value against optional inclusive bounds.

    Returns:
        ``format`` error when the value is not numeric, ``range`` error when
        out of bounds, otherwise None
    """
    number = coerce_number(value)
    if number is None:
        return _format_error(field, f"{field} must be a valid number")

    try:
        validate.Range(min=min_value, max=max_value)(number)
    except MarshmallowValidationError:
        if min_value is not None and number < min_value:
            message = f"{field} must be at least {min_value}"
        else:
            message = f"{field} must be no more than {max_value}"
        return ValidationError(
            type=ErrorType.RANGE,
            field=field,
            message=message,
            actual=number,
            expected={'min': min_value, 'max': max_value}
        )

    return None


def validate_pattern(
    value: Any,
    pattern: Pattern[str],
    field: str,
    message: Optional[str] = None
) -> Optional[ValidationError]:
    """Fail with ``format`` when the pattern does not match the value."""
    text = as_text(value)
    if text is None or not pattern.search(text):
        return _format_error(field, message or f"{field} format is invalid")
    return None


def validate_choice(
    value: Any,
    choices: Iterable[str],
    field: str,
    message: Optional[str] = None
) -> Optional[ValidationError]:
    """Fail with ``format`` when the value is not one of the choices."""
    try:
        validate.OneOf(tuple(choices))(value)
    except (MarshmallowValidationError, TypeError):
        return _format_error(field, message or f"Invalid {field}")
    return None


def validate_url(
    value: Any,
    field: str,
    message: Optional[str] = None
) -> Optional[ValidationError]:
    """Fail with ``format`` unless the value is an absolute http(s)/ftp URL."""
    if not isinstance(value, str):
        return _format_error(field, message or f"Invalid {field} URL")

    try:
        validate.URL(relative=False)(value.strip())
    except MarshmallowValidationError:
        return _format_error(field, message or f"Invalid {field} URL")
    return None


def validate_password_strength(password: str, policy: Any) -> PasswordStrength:
    """
    Score a password against a password policy.

    Every unmet mandatory rule adds a feedback line and fails the check.
    Common patterns (repeated characters, keyboard sequences, obvious words)
    lower the score and add advice but do not fail the check on their own.

    Args:
        password: Password to assess
        policy: PasswordPolicy with min_length and require_* flags

    Returns:
        PasswordStrength with validity, score (0-100) and feedback
    """
    is_valid = True
    score = 0
    feedback = []

    if len(password) < policy.min_length:
        is_valid = False
        feedback.append(f"Password must be at least {policy.min_length} characters long")
    else:
        score += PASSWORD_SCORE_LENGTH

    class_rules = (
        ('has_uppercase', policy.require_uppercase, 'Password must contain at least one uppercase letter'),
        ('has_lowercase', policy.require_lowercase, 'Password must contain at least one lowercase letter'),
        ('has_digit', policy.require_digits, 'Password must contain at least one number'),
    )
    for pattern_name, required, requirement_message in class_rules:
        if PASSWORD_PATTERNS[pattern_name].search(password):
            score += PASSWORD_SCORE_CLASS
        elif required:
            is_valid = False
            feedback.append(requirement_message)

    if PASSWORD_PATTERNS['has_special'].search(password):
        score += PASSWORD_SCORE_SPECIAL
    elif policy.require_special_chars:
        is_valid = False
        feedback.append('Password must contain at least one special character')

    if any(pattern.search(password) for pattern in PASSWORD_COMMON_PATTERNS):
        score -= PASSWORD_COMMON_PATTERN_PENALTY
        feedback.append('Avoid common patterns and sequences')

    return PasswordStrength(
        is_valid=is_valid,
        score=max(0, min(100, score)),
        feedback=feedback
    )


__all__ = [
    'is_present',
    'as_text',
    'coerce_number',
    'validate_required',
    'validate_length',
    'validate_range',
    'validate_pattern',
    'validate_choice',
    'validate_url',
    'validate_password_strength',
]
