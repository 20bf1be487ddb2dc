"""
Global pytest Configuration and Fixtures

Shared fixtures for the validation engine test suite: a fixed clock for
date-relative rules, the default rule and pattern tables, and sample records
for every entity kind.

Key Components:
- Testing configuration selected through APP_ENV before any rules are built
- Fixed clock (2026-10-19T12:00:00Z) injected into validators
- Valid sample records that individual tests mutate to provoke one failure
- Custom markers for unit and security test categorization
"""

import os
from datetime import datetime, timezone

import pytest

os.environ['APP_ENV'] = 'testing'

from marketplace_validation.business.patterns import DEFAULT_DOMAIN_PATTERNS  # noqa: E402
from marketplace_validation.business.rules import BusinessRules  # noqa: E402

FIXED_NOW = datetime(2026, 10, 19, 12, 0, 0, tzinfo=timezone.utc)


def pytest_configure(config):
    """Register custom markers for test categorization."""
    config.addinivalue_line(
        "markers",
        "unit: Unit tests with isolated component testing"
    )
    config.addinivalue_line(
        "markers",
        "security: Threat detection and sanitization tests"
    )


@pytest.fixture
def fixed_now():
    return FIXED_NOW


@pytest.fixture
def fixed_clock():
    """Clock callable that always returns FIXED_NOW."""
    return lambda: FIXED_NOW


@pytest.fixture
def business_rules():
    return BusinessRules()


@pytest.fixture
def validator_options(business_rules, fixed_clock):
    """Keyword options shared by every validator under test."""
    return {
        'rules': business_rules,
        'patterns': DEFAULT_DOMAIN_PATTERNS,
        'clock': fixed_clock,
    }


@pytest.fixture
def sample_user_data():
    """Valid user record."""
    return {
        'firstName': 'Ann',
        'lastName': 'Lee',
        'email': 'ann.lee@example.com',
        'userType': 'job_seeker',
        'phone': '021 123 4567',
        'bio': 'Backend developer based in Wellington.',
        'age': 34,
        'skills': ['python', 'sql'],
        'experienceYears': 8,
        'postcode': '6011',
        'address': '12 Cuba Street, Te Aro',
    }


@pytest.fixture
def sample_job_data():
    """Valid job posting record."""
    return {
        'title': 'Senior Backend Developer',
        'company': 'Acme Ltd',
        'description': 'Build and operate the services behind our marketplace platform.',
        'location': 'Auckland',
        'type': 'full-time',
        'salaryMin': 90000,
        'salaryMax': 120000,
        'applicationDeadline': '2026-11-15T00:00:00Z',
        'maxApplications': 200,
    }


@pytest.fixture
def sample_application_data():
    """Valid job application record."""
    return {
        'candidateName': 'Jane Smith',
        'candidateEmail': 'jane@example.com',
        'jobId': 'job_1',
        'phone': '+64 21 555 0199',
        'coverLetter': 'I have spent six years building payment and search services. ' * 3,
        'experience': 'Six years as a backend engineer.',
    }


@pytest.fixture
def sample_company_data():
    """Valid company profile record."""
    return {
        'name': 'Acme Ltd',
        'industry': 'Technology',
        'description': 'Online marketplace for New Zealand buyers and sellers.',
        'website': 'https://acme.example.com',
        'employeeCount': 120,
        'foundedYear': 2004,
        'phone': '09 123 4567',
        'companyNumber': '1234 5678',
        'irdNumber': '123 456 789',
        'address': '1 Queen Street, Auckland CBD',
        'postcode': '1010',
    }


@pytest.fixture
def sample_attachment_data():
    """Valid attachment metadata record."""
    return {
        'fileName': 'curriculum-vitae.pdf',
        'fileSize': 245760,
        'contentType': 'application/pdf',
    }


@pytest.fixture
def malicious_input_samples():
    """Raw inputs paired with the threat tag each must produce."""
    return [
        ('<script>alert(1)</script>', 'script_injection'),
        ('<a href="javascript:alert(1)">x</a>', 'js_uri'),
        ('<img src=x onerror=alert(1)>', 'event_handler'),
        ('<iframe src="https://evil.example"></iframe>', 'embedded_content'),
        ('eval(document.cookie)', 'eval_call'),
        ('width: expression(alert(1))', 'css_expression'),
        ("' OR 1=1 --", 'sql_injection'),
        ('1; DROP TABLE users', 'sql_injection'),
        ('../../etc/passwd', 'path_traversal'),
        ('report.txt; cat /etc/shadow', 'command_injection'),
    ]
