"""
Domain pattern library testing module.

Tests the New Zealand format checks, whitespace handling and the rule that
length and format failures are both reported for the same value.
"""

import re
from types import MappingProxyType

import pytest

from marketplace_validation.business.patterns import (
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
from marketplace_validation.models import ErrorType


def error_types(errors):
    return [error.type for error in errors]


@pytest.mark.unit
class TestPostcode:

    @pytest.mark.parametrize('value', ['6011', '0110', 1010])
    def test_valid_postcodes(self, value):
        assert validate_nz_postcode(value) == []

    def test_one_character_postcode_reports_length_and_format(self):
        errors = validate_nz_postcode('7')

        assert error_types(errors) == [ErrorType.LENGTH, ErrorType.FORMAT]
        assert all(error.field == 'postcode' for error in errors)

    def test_letters_report_format_only(self):
        errors = validate_nz_postcode('60a1')

        assert error_types(errors) == [ErrorType.FORMAT]
        assert errors[0].message == 'Postcode must be a 4-digit number'

    def test_custom_field_name(self):
        errors = validate_nz_postcode('12345', field_name='billingPostcode')

        assert {error.field for error in errors} == {'billingPostcode'}

    def test_non_text_value_reports_single_format_error(self):
        assert error_types(validate_nz_postcode(['6011'])) == [ErrorType.FORMAT]


@pytest.mark.unit
class TestPhone:

    @pytest.mark.parametrize('value', [
        '021 123 4567',
        '+64 21 123 4567',
        '09 123 4567',
        '0272345678',
        '+6495551234',
    ])
    def test_valid_numbers(self, value):
        assert validate_nz_phone(value) == []

    @pytest.mark.parametrize('value', [
        '011 123 4567',
        '+61 2 1234 5678',
        '021-123-4567',
        '12345',
        '021 123 456 789 0',
    ])
    def test_invalid_numbers(self, value):
        errors = validate_nz_phone(value)

        assert error_types(errors) == [ErrorType.FORMAT]
        assert errors[0].message.startswith('Phone number must be a valid New Zealand number')

    def test_error_names_record_key(self):
        errors = validate_nz_phone('123', field_name='candidatePhone')

        assert errors[0].field == 'candidatePhone'


@pytest.mark.unit
class TestIdentifiers:

    @pytest.mark.parametrize('value', ['12345678', '123456789', '123 456 789'])
    def test_valid_ird_numbers(self, value):
        assert validate_ird_number(value) == []

    @pytest.mark.parametrize('value', ['1234567', '1234567890', '12-345-678'])
    def test_invalid_ird_numbers(self, value):
        errors = validate_ird_number(value)

        assert errors[0].message == 'IRD number must be 8 or 9 digits'
        assert errors[0].field == 'irdNumber'

    def test_company_number(self):
        assert validate_company_number('1234 5678') == []
        assert validate_company_number('123456789')[0].message == 'Company number must be 8 digits'

    def test_bank_account(self):
        assert validate_bank_account('12-3456-7890123-00') == []
        assert validate_bank_account('12-3456-7890123-001') == []
        assert error_types(validate_bank_account('123456789012300')) == [ErrorType.FORMAT]

    def test_abn(self):
        assert validate_abn('51 824 753 556') == []
        assert error_types(validate_abn('5182475355')) == [ErrorType.FORMAT]


@pytest.mark.unit
class TestAddressAndSuburb:

    def test_valid_address(self):
        assert validate_nz_address('12 Cuba Street, Te Aro') == []

    def test_short_address_reports_length(self):
        errors = validate_nz_address('1 A')

        assert error_types(errors) == [ErrorType.LENGTH]

    def test_invalid_characters(self):
        errors = validate_nz_address('12 Cuba Street #4')

        assert error_types(errors) == [ErrorType.FORMAT]
        assert errors[0].message == 'Address contains invalid characters'

    def test_long_address_with_bad_characters_reports_both(self):
        errors = validate_nz_address('#' * 201)

        assert error_types(errors) == [ErrorType.LENGTH, ErrorType.FORMAT]

    def test_suburb(self):
        assert validate_suburb("Ngaio") == []
        assert validate_suburb("Mount Eden-O'Brien") == []
        assert error_types(validate_suburb('Suburb 9')) == [ErrorType.FORMAT]


@pytest.mark.unit
class TestDomainPatternTable:

    def test_generic_validation_by_kind(self):
        assert validate_domain_value(PatternKind.POSTCODE, '6011') == []
        assert validate_domain_value('postcode', '601')[0].field == 'postcode'

    def test_unknown_kind_raises(self):
        with pytest.raises(ValueError):
            validate_domain_value('passport', 'X123')

    def test_table_is_read_only(self):
        assert isinstance(DEFAULT_DOMAIN_PATTERNS.patterns, MappingProxyType)
        with pytest.raises(TypeError):
            DEFAULT_DOMAIN_PATTERNS.patterns[PatternKind.POSTCODE] = None

    def test_replacement_table(self):
        australian = DomainPatterns({
            PatternKind.POSTCODE: DomainPattern(
                pattern=re.compile(r'^\d{4}$'),
                message='Postcode must be 4 digits',
            ),
            PatternKind.PHONE: DomainPattern(
                pattern=re.compile(r'^(\+61|0)[2-478]\d{8}$'),
                message='Phone number must be a valid Australian number',
                strip_whitespace=True,
            ),
        })

        assert australian.validate(PatternKind.PHONE, '02 9876 5432', 'phone') == []
        assert australian.validate(PatternKind.PHONE, '+64 21 123 4567', 'phone')[0].message == (
            'Phone number must be a valid Australian number'
        )


@pytest.mark.unit
class TestAsciiDigitsOnly:

    @pytest.mark.parametrize('check,value', [
        (validate_nz_postcode, '١٢٣٤'),
        (validate_company_number, '१२३४५६७८'),
        (validate_ird_number, '١٢٣٤٥٦٧٨'),
        (validate_nz_phone, '٠٢١ ١٢٣ ٤٥٦٧'),
    ])
    def test_non_ascii_digits_rejected(self, check, value):
        assert error_types(check(value)) == [ErrorType.FORMAT]

    def test_trailing_newline_counts_against_postcode(self):
        assert error_types(validate_nz_postcode('6011\n')) == [ErrorType.LENGTH, ErrorType.FORMAT]
