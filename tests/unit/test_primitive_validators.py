"""
Primitive validator testing module.

Tests the atomic field checks shared by every entity validator: presence,
length, numeric range, pattern, enumeration, URL and password strength.
"""

import re
from decimal import Decimal

import pytest

from marketplace_validation.business.rules import PasswordPolicy
from marketplace_validation.models import ErrorType
from marketplace_validation.utils.validators import (
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


@pytest.mark.unit
class TestPresence:

    @pytest.mark.parametrize('value', [None, ''])
    def test_absent_values_fail_required(self, value):
        error = validate_required(value, 'email')

        assert error.type == ErrorType.REQUIRED
        assert error.field == 'email'

    @pytest.mark.parametrize('value', [0, False, ' ', [], 'x'])
    def test_falsy_but_present_values_pass(self, value):
        assert is_present(value)
        assert validate_required(value, 'age') is None


@pytest.mark.unit
class TestLengthValidation:

    def test_within_bounds(self):
        assert validate_length('Auckland', 2, 50, 'location') is None

    def test_too_short_reports_actual_and_expected(self):
        error = validate_length('Dev', 5, 100, 'title')

        assert error.type == ErrorType.LENGTH
        assert error.field == 'title'
        assert error.actual == 3
        assert error.expected == {'min': 5, 'max': 100}
        assert 'at least 5' in error.message

    def test_too_long(self):
        error = validate_length('x' * 501, None, 500, 'bio')

        assert error.type == ErrorType.LENGTH
        assert error.actual == 501
        assert 'no more than 500' in error.message

    def test_bounds_are_inclusive(self):
        assert validate_length('ab', 2, 2, 'code') is None

    def test_numbers_are_coerced_to_text(self):
        assert validate_length(1234, 4, 4, 'postcode') is None
        assert validate_length(123, 4, 4, 'postcode').type == ErrorType.LENGTH

    @pytest.mark.parametrize('value', [{'a': 1}, ['a'], b'bytes', True])
    def test_non_text_values_are_format_errors(self, value):
        error = validate_length(value, 1, 10, 'name')

        assert error.type == ErrorType.FORMAT
        assert error.field == 'name'


@pytest.mark.unit
class TestRangeValidation:

    def test_within_range(self):
        assert validate_range(34, 16, 120, 'age') is None

    def test_numeric_strings_are_coerced(self):
        assert validate_range('45000', 30000, 500000, 'salaryMin') is None

    def test_below_minimum(self):
        error = validate_range(15, 16, 120, 'age')

        assert error.type == ErrorType.RANGE
        assert error.actual == 15
        assert error.expected == {'min': 16, 'max': 120}

    def test_above_maximum(self):
        error = validate_range(600000, 30000, 500000, 'salaryMax')

        assert error.type == ErrorType.RANGE
        assert 'no more than 500000' in error.message

    def test_zero_is_validated(self):
        assert validate_range(0, 16, 120, 'age').type == ErrorType.RANGE

    @pytest.mark.parametrize('value', ['abc', '', True, None, float('nan'), float('inf'), [1]])
    def test_non_numeric_values_are_format_errors(self, value):
        assert validate_range(value, 0, 10, 'count').type == ErrorType.FORMAT


@pytest.mark.unit
class TestCoerceNumber:

    @pytest.mark.parametrize('value,expected', [
        (5, 5),
        ('5', 5),
        (' 7.5 ', 7.5),
        (Decimal('12.0'), 12),
        (2.0, 2),
    ])
    def test_numeric_values(self, value, expected):
        assert coerce_number(value) == expected

    def test_integral_values_become_int(self):
        assert isinstance(coerce_number('2024'), int)

    @pytest.mark.parametrize('value', ['x', '', None, False, 'nan', {}])
    def test_non_numeric_values(self, value):
        assert coerce_number(value) is None


@pytest.mark.unit
class TestPatternValidation:

    def test_match(self):
        assert validate_pattern('6011', re.compile(r'^\d{4}$'), 'postcode') is None

    def test_mismatch_uses_custom_message(self):
        error = validate_pattern('60a1', re.compile(r'^\d{4}$'), 'postcode', 'Postcode must be a 4-digit number')

        assert error.type == ErrorType.FORMAT
        assert error.message == 'Postcode must be a 4-digit number'

    def test_mismatch_default_message(self):
        error = validate_pattern('x', re.compile(r'^\d+$'), 'code')

        assert error.message == 'code format is invalid'

    def test_non_text_value_is_format_error(self):
        assert validate_pattern({'v': 1}, re.compile(r'.*'), 'code').type == ErrorType.FORMAT


@pytest.mark.unit
class TestChoiceAndUrlValidation:

    def test_choice_accepts_member(self):
        assert validate_choice('contract', ('full-time', 'contract'), 'type') is None

    def test_choice_rejects_other_values(self):
        error = validate_choice('freelance', ('full-time', 'contract'), 'type', 'Invalid job type')

        assert error.type == ErrorType.FORMAT
        assert error.message == 'Invalid job type'

    def test_choice_is_case_sensitive(self):
        assert validate_choice('Full-Time', ('full-time',), 'type') is not None

    @pytest.mark.parametrize('value', ['https://acme.example.com', 'http://example.org/about?x=1'])
    def test_valid_urls(self, value):
        assert validate_url(value, 'website') is None

    @pytest.mark.parametrize('value', ['not a url', 'example.com', '/relative/path', 42])
    def test_invalid_urls(self, value):
        error = validate_url(value, 'website', 'Invalid website URL')

        assert error.type == ErrorType.FORMAT
        assert error.message == 'Invalid website URL'


@pytest.mark.unit
class TestPasswordStrength:

    @pytest.fixture
    def policy(self):
        return PasswordPolicy()

    def test_strong_password(self, policy):
        strength = validate_password_strength('Kiwi!Harbour42', policy)

        assert strength.is_valid
        assert strength.score == 100
        assert strength.feedback == []

    def test_missing_classes_are_all_reported(self, policy):
        strength = validate_password_strength('short', policy)

        assert not strength.is_valid
        assert 'Password must be at least 8 characters long' in strength.feedback
        assert 'Password must contain at least one uppercase letter' in strength.feedback
        assert 'Password must contain at least one number' in strength.feedback
        assert strength.score == 25

    def test_special_character_optional_by_default(self, policy):
        strength = validate_password_strength('Harbour42x', policy)

        assert strength.is_valid
        assert strength.score == 100

    def test_special_character_required_by_policy(self):
        strength = validate_password_strength('Harbour42x', PasswordPolicy(require_special_chars=True))

        assert not strength.is_valid
        assert 'Password must contain at least one special character' in strength.feedback

    def test_common_patterns_lower_score_without_failing(self, policy):
        strength = validate_password_strength('Qwerty123456', policy)

        assert strength.is_valid
        assert strength.score == 85
        assert 'Avoid common patterns and sequences' in strength.feedback

    def test_score_is_clamped(self, policy):
        strength = validate_password_strength('aaa', policy)

        assert 0 <= strength.score <= 100
