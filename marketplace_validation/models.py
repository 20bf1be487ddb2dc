"""
Validation Result Models

Pydantic models describing the output of every validator in the package:
the closed error taxonomy, a single validation error and the aggregate
validation result returned by the entity validators.

Model Categories:
    ErrorType: Closed enumeration of validation error tags
    EntityKind: Entity tags accepted by the form dispatcher
    ValidationError: A single field-level or record-level finding
    ValidationResult: Validity flag, ordered errors and sanitized data
    PasswordStrength: Outcome of the password strength check
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class ErrorType(str, Enum):
    """Validation error taxonomy."""

    REQUIRED = "required"
    FORMAT = "format"
    LENGTH = "length"
    RANGE = "range"
    BUSINESS_RULE = "business_rule"
    SECURITY = "security"
    # Reserved for cross-record checks (uniqueness, referential integrity)
    DUPLICATE = "duplicate"
    RELATIONSHIP = "relationship"


class EntityKind(str, Enum):
    """Record kinds understood by validate_form."""

    USER = "user"
    JOB = "job"
    APPLICATION = "application"
    COMPANY = "company"
    ATTACHMENT = "attachment"


class ValidationError(BaseModel):
    """
    A single validation finding.

    ``field`` always names an input key, including for whole-record rules
    such as ``"salary"`` or ``"password"``.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    type: ErrorType
    field: str
    message: str
    actual: Any = None
    expected: Any = None
    threats: Optional[List[str]] = None
    score: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a JSON-compatible dict, dropping unset members."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ValidationResult(BaseModel):
    """
    Aggregate outcome of an entity validation.

    ``data`` is always populated with a sanitized copy of the input record,
    even when ``is_valid`` is false, so callers can re-render a form.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    is_valid: bool
    errors: List[ValidationError] = Field(default_factory=list)
    data: Dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="after")
    def check_validity_matches_errors(self) -> "ValidationResult":
        if self.is_valid != (len(self.errors) == 0):
            raise ValueError("is_valid must be true exactly when errors is empty")
        return self

    @classmethod
    def from_errors(cls, errors: List[ValidationError], data: Dict[str, Any]) -> "ValidationResult":
        """Build a result whose validity is derived from the error list."""
        return cls(is_valid=not errors, errors=list(errors), data=data)

    def errors_for(self, field: str) -> List[ValidationError]:
        """Errors reported against a single input key."""
        return [error for error in self.errors if error.field == field]

    def has_error(self, field: str, error_type: ErrorType) -> bool:
        return any(error.type == error_type for error in self.errors_for(field))

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the camelCase shape used by form renderers."""
        return {
            "isValid": self.is_valid,
            "errors": [error.to_dict() for error in self.errors],
            "data": self.data,
        }


class PasswordStrength(BaseModel):
    """Password strength check outcome."""

    model_config = ConfigDict(frozen=True)

    is_valid: bool
    score: int = Field(ge=0, le=100)
    feedback: List[str] = Field(default_factory=list)


__all__ = [
    "ErrorType",
    "EntityKind",
    "ValidationError",
    "ValidationResult",
    "PasswordStrength",
]
