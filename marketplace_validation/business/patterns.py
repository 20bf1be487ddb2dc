"""
New Zealand domain patterns.

Region-specific format checks for postcodes, phone numbers, tax and company
identifiers, bank accounts, street addresses and suburbs. Checks are format
only; no checksum algorithm is applied.

The pattern table is an immutable configuration object. Validators take a
``DomainPatterns`` instance so that another region's table can be swapped in
without touching validator code.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Pattern

from ..models import ValidationError
from ..utils.validators import as_text, validate_length, validate_pattern
from .rules import LengthRule


class PatternKind(str, Enum):
    POSTCODE = "postcode"
    PHONE = "phone"
    IRD_NUMBER = "irdNumber"
    COMPANY_NUMBER = "companyNumber"
    BANK_ACCOUNT = "bankAccount"
    ABN = "abn"
    ADDRESS = "address"
    SUBURB = "suburb"


@dataclass(frozen=True)
class DomainPattern:
    """
    A compiled format rule for one semantic field kind.

    Attributes:
        pattern: Regex the (optionally whitespace-stripped) value must match
        message: Human readable message for a format failure
        strip_whitespace: Remove all whitespace before matching
        length: Optional length bounds checked before the pattern
    """

    pattern: Pattern[str]
    message: str
    strip_whitespace: bool = False
    length: Optional[LengthRule] = None


def _default_patterns() -> Dict[PatternKind, DomainPattern]:
    return {
        PatternKind.POSTCODE: DomainPattern(
            pattern=re.compile(r'^\d{4}\Z', re.ASCII),
            message="Postcode must be a 4-digit number",
            length=LengthRule(4, 4),
        ),
        PatternKind.PHONE: DomainPattern(
            pattern=re.compile(r'^(\+64|0)[2-9]\d{7,9}\Z', re.ASCII),
            message="Phone number must be a valid New Zealand number (e.g., +64 21 123 4567 or 021 123 4567)",
            strip_whitespace=True,
        ),
        PatternKind.IRD_NUMBER: DomainPattern(
            pattern=re.compile(r'^\d{8,9}\Z', re.ASCII),
            message="IRD number must be 8 or 9 digits",
            strip_whitespace=True,
        ),
        PatternKind.COMPANY_NUMBER: DomainPattern(
            pattern=re.compile(r'^\d{8}\Z', re.ASCII),
            message="Company number must be 8 digits",
            strip_whitespace=True,
        ),
        PatternKind.BANK_ACCOUNT: DomainPattern(
            pattern=re.compile(r'^\d{2}-\d{4}-\d{7}-\d{2,3}\Z', re.ASCII),
            message="Bank account must be in the format 12-3456-7890123-00",
            strip_whitespace=True,
        ),
        PatternKind.ABN: DomainPattern(
            pattern=re.compile(r'^\d{11}\Z', re.ASCII),
            message="ABN must be 11 digits",
            strip_whitespace=True,
        ),
        PatternKind.ADDRESS: DomainPattern(
            pattern=re.compile(r'^[a-zA-Z0-9\s,.-]+\Z', re.ASCII),
            message="Address contains invalid characters",
            length=LengthRule(5, 200),
        ),
        PatternKind.SUBURB: DomainPattern(
            pattern=re.compile(r"^[a-zA-Z\s'-]+\Z", re.ASCII),
            message="Suburb can only contain letters, spaces, hyphens, and apostrophes",
        ),
    }


@dataclass(frozen=True)
class DomainPatterns:
    """Read-only mapping from pattern kind to its format rule."""

    patterns: Mapping[PatternKind, DomainPattern] = field(default_factory=_default_patterns)

    def __post_init__(self):
        frozen = MappingProxyType({PatternKind(kind): rule for kind, rule in self.patterns.items()})
        object.__setattr__(self, "patterns", frozen)

    def __getitem__(self, kind: PatternKind) -> DomainPattern:
        return self.patterns[PatternKind(kind)]

    def validate(self, kind: PatternKind, value: Any, field_name: str) -> List[ValidationError]:
        """
        Check a value against the rule for ``kind``.

        Both the length error and the format error are reported when both
        fail.

        Args:
            kind: Semantic field kind
            value: Raw value, numbers are treated as their text form
            field_name: Input key reported on every error

        Returns:
            List of validation errors, empty when the value is well formed
        """
        rule = self[kind]
        errors: List[ValidationError] = []

        text = as_text(value)
        if text is not None and rule.strip_whitespace:
            text = re.sub(r'\s', '', text)
        candidate = text if text is not None else value

        if rule.length is not None:
            error = validate_length(candidate, rule.length.min, rule.length.max, field_name)
            if error:
                errors.append(error)

        error = validate_pattern(candidate, rule.pattern, field_name, rule.message)
        # A value that cannot be text already has its format error
        if error and not (errors and text is None):
            errors.append(error)

        return errors


DEFAULT_DOMAIN_PATTERNS = DomainPatterns()


def validate_domain_value(
    kind: PatternKind,
    value: Any,
    field_name: Optional[str] = None,
    patterns: DomainPatterns = DEFAULT_DOMAIN_PATTERNS
) -> List[ValidationError]:
    """Validate a value against a domain pattern, naming ``field_name`` (default: the kind)."""
    kind = PatternKind(kind)
    return patterns.validate(kind, value, field_name or kind.value)


def validate_nz_postcode(value: Any, field_name: str = 'postcode') -> List[ValidationError]:
    return validate_domain_value(PatternKind.POSTCODE, value, field_name)


def validate_nz_phone(value: Any, field_name: str = 'phone') -> List[ValidationError]:
    return validate_domain_value(PatternKind.PHONE, value, field_name)


def validate_ird_number(value: Any, field_name: str = 'irdNumber') -> List[ValidationError]:
    return validate_domain_value(PatternKind.IRD_NUMBER, value, field_name)


def validate_company_number(value: Any, field_name: str = 'companyNumber') -> List[ValidationError]:
    return validate_domain_value(PatternKind.COMPANY_NUMBER, value, field_name)


def validate_bank_account(value: Any, field_name: str = 'bankAccount') -> List[ValidationError]:
    return validate_domain_value(PatternKind.BANK_ACCOUNT, value, field_name)


def validate_abn(value: Any, field_name: str = 'abn') -> List[ValidationError]:
    return validate_domain_value(PatternKind.ABN, value, field_name)


def validate_nz_address(value: Any, field_name: str = 'address') -> List[ValidationError]:
    return validate_domain_value(PatternKind.ADDRESS, value, field_name)


def validate_suburb(value: Any, field_name: str = 'suburb') -> List[ValidationError]:
    return validate_domain_value(PatternKind.SUBURB, value, field_name)


__all__ = [
    'PatternKind',
    'DomainPattern',
    'DomainPatterns',
    'DEFAULT_DOMAIN_PATTERNS',
    'validate_domain_value',
    'validate_nz_postcode',
    'validate_nz_phone',
    'validate_ird_number',
    'validate_company_number',
    'validate_bank_account',
    'validate_abn',
    'validate_nz_address',
    'validate_suburb',
]
