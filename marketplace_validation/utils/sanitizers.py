"""
Input Sanitization and Threat Detection Utilities

This module provides the sanitization collaborator of the validation engine:
string normalization using bleach for markup cleaning, and a threat scanner
that inspects raw input for known injection patterns.

Sanitization always returns a cleaned value suitable for re-rendering a
form. Threat detection reports what the raw value contained.

Features:
- Markup cleaning with bleach (no tags for plain text, a small formatting
  allowlist for rich text fields)
- Removal of script blocks, script URI schemes, inline event handlers,
  eval() and CSS expression() calls
- Length clamping and whitespace trimming
- Pattern based threat detection returning stable threat tags

Limitations:
    Regex and allowlist based cleaning is a defense-in-depth normalization
    step. It is not a substitute for output encoding at render time.
"""

import html
import re
from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, List, Optional, Pattern, Tuple

import bleach
import structlog

logger = structlog.get_logger("security.sanitization")

DEFAULT_MAX_LENGTH = 500

# Formatting allowlist used when a field permits HTML
ALLOWED_HTML_TAGS: FrozenSet[str] = frozenset({
    'p', 'br', 'strong', 'em', 'b', 'i', 'u', 'ul', 'ol', 'li', 'h3', 'h4', 'a',
})

ALLOWED_HTML_ATTRIBUTES: Dict[str, List[str]] = {
    'a': ['href', 'title', 'rel'],
}

ALLOWED_PROTOCOLS: FrozenSet[str] = frozenset({'http', 'https', 'mailto'})

SCRIPT_BLOCK_PATTERN = re.compile(
    r'<\s*script\b[^>]*>[\s\S]*?<\s*/\s*script\s*>',
    re.IGNORECASE
)

# Fragments removed from every sanitized value until none remain
SUSPICIOUS_FRAGMENTS: Tuple[Pattern[str], ...] = (
    re.compile(r'(?:java|vb)script\s*:', re.IGNORECASE),
    re.compile(r'\bon[a-z]+\s*=', re.IGNORECASE),
    re.compile(r'\beval\s*\(', re.IGNORECASE),
    re.compile(r'\bexpression\s*\(', re.IGNORECASE),
)


@dataclass(frozen=True)
class ThreatPattern:
    """A compiled detection pattern and the tag it reports."""

    tag: str
    pattern: Pattern[str]
    severity: str


@dataclass(frozen=True)
class DetectedThreat:
    """A single pattern match in a raw input value."""

    tag: str
    severity: str
    match: str
    position: Tuple[int, int]


def _threat(tag: str, expression: str, severity: str = 'high') -> ThreatPattern:
    return ThreatPattern(tag=tag, pattern=re.compile(expression, re.IGNORECASE), severity=severity)


# Order defines the order of reported tags
THREAT_PATTERNS: Tuple[ThreatPattern, ...] = (
    _threat('script_injection', r'<\s*script\b'),
    _threat('js_uri', r'(?:java|vb)script\s*:'),
    _threat('event_handler', r'\bon[a-z]+\s*='),
    _threat('embedded_content', r'<\s*(?:iframe|object|embed)\b'),
    _threat('eval_call', r'\beval\s*\('),
    _threat('css_expression', r'\bexpression\('),
    _threat('sql_injection', r'\b(?:or|and)\s+\d+\s*=\s*\d+', 'critical'),
    _threat('sql_injection', r"'\s*(?:;|--|/\*)", 'critical'),
    _threat(
        'sql_injection',
        r'\b(?:union\s+(?:all\s+)?select|drop\s+(?:table|database)|insert\s+into\s+\w+\s*\(|delete\s+from\s+\w+\s*(?:where\b|;))',
        'critical'
    ),
    _threat('path_traversal', r'\.\.[/\\]|%2e%2e(?:%2f|%5c)', 'medium'),
    _threat('command_injection', r'(?:;|\||&&)\s*(?:cat|ls|pwd|whoami|id|uname)\b', 'critical'),
)


class ThreatScanner:
    """
    Detects known injection patterns in raw, unsanitized input.

    The pattern table is immutable; a scanner holds no per-call state and
    can be shared freely.
    """

    def __init__(self, patterns: Tuple[ThreatPattern, ...] = THREAT_PATTERNS):
        self.patterns = patterns

    def scan(self, value: Any) -> List[DetectedThreat]:
        """
        Return every pattern match in the value.

        Args:
            value: Raw input; non-string values never contain threats

        Returns:
            Detected threats in pattern-table order
        """
        if not isinstance(value, str):
            return []

        detected = []
        for threat_pattern in self.patterns:
            for match in threat_pattern.pattern.finditer(value):
                detected.append(DetectedThreat(
                    tag=threat_pattern.tag,
                    severity=threat_pattern.severity,
                    match=match.group(),
                    position=match.span()
                ))
        return detected

    def detect_threats(self, value: Any, field: Optional[str] = None) -> List[str]:
        """
        Return the de-duplicated threat tags found in the value.

        Args:
            value: Raw input value
            field: Input key, used for audit logging only

        Returns:
            Ordered list of threat tags, empty when the value is clean
        """
        tags: List[str] = []
        for threat in self.scan(value):
            if threat.tag not in tags:
                tags.append(threat.tag)

        if tags:
            logger.warning(
                "Security threats detected in input",
                field=field,
                threat_types=tags,
                input_length=len(value)
            )

        return tags


class InputSanitizer:
    """
    String normalization for untrusted form input.

    Sanitization never fails: values that are not strings are returned
    unchanged and every string yields a cleaned string.
    """

    def __init__(
        self,
        allowed_tags: FrozenSet[str] = ALLOWED_HTML_TAGS,
        allowed_attributes: Optional[Dict[str, List[str]]] = None,
        allowed_protocols: FrozenSet[str] = ALLOWED_PROTOCOLS
    ):
        self.allowed_tags = allowed_tags
        self.allowed_attributes = allowed_attributes or ALLOWED_HTML_ATTRIBUTES
        self.allowed_protocols = allowed_protocols

    def sanitize(
        self,
        value: Any,
        max_length: Optional[int] = DEFAULT_MAX_LENGTH,
        allow_html: bool = False
    ) -> Any:
        """
        Clean a single value.

        Args:
            value: Raw input value
            max_length: Length the result is truncated to, None for no limit
            allow_html: Keep the formatting allowlist instead of stripping
                every tag

        Returns:
            Cleaned string, or the original value when it is not a string
        """
        if not isinstance(value, str):
            return value

        sanitized = value.replace('\x00', '')
        sanitized = self._remove_script_blocks(sanitized)

        if allow_html:
            sanitized = bleach.clean(
                sanitized,
                tags=self.allowed_tags,
                attributes=self.allowed_attributes,
                protocols=self.allowed_protocols,
                strip=True,
                strip_comments=True
            )
        else:
            sanitized = self._clean_text(sanitized)

        sanitized = self._remove_suspicious_fragments(sanitized)
        sanitized = sanitized.strip()

        if max_length is not None:
            sanitized = sanitized[:max_length]

        return sanitized

    def _clean_text(self, text: str) -> str:
        """
        Strip every tag, then decode entities unless that would bring back
        angle brackets.
        """
        cleaned = bleach.clean(text, tags=set(), attributes={}, strip=True, strip_comments=True)
        decoded = html.unescape(cleaned)
        if '<' in decoded or '>' in decoded:
            return cleaned
        return decoded

    def _remove_script_blocks(self, text: str) -> str:
        previous = None
        while previous != text:
            previous = text
            text = SCRIPT_BLOCK_PATTERN.sub('', text)
        return text

    def _remove_suspicious_fragments(self, text: str) -> str:
        previous = None
        while previous != text:
            previous = text
            for pattern in SUSPICIOUS_FRAGMENTS:
                text = pattern.sub('', text)
        return text


_default_sanitizer = InputSanitizer()
_default_scanner = ThreatScanner()


def sanitize_input(
    value: Any,
    max_length: Optional[int] = DEFAULT_MAX_LENGTH,
    allow_html: bool = False
) -> Any:
    """
    Convenience function for input sanitization with the default allowlist.

    Args:
        value: Raw input value
        max_length: Maximum length of the result
        allow_html: Whether benign formatting markup is kept

    Returns:
        Sanitized value
    """
    return _default_sanitizer.sanitize(value, max_length=max_length, allow_html=allow_html)


def detect_threats(value: Any, field: Optional[str] = None) -> List[str]:
    """
    Convenience function for threat detection with the default pattern table.

    Args:
        value: Raw input value
        field: Input key, used for audit logging only

    Returns:
        Ordered list of threat tags
    """
    return _default_scanner.detect_threats(value, field=field)


__all__ = [
    'ThreatPattern',
    'DetectedThreat',
    'ThreatScanner',
    'InputSanitizer',
    'THREAT_PATTERNS',
    'ALLOWED_HTML_TAGS',
    'ALLOWED_HTML_ATTRIBUTES',
    'DEFAULT_MAX_LENGTH',
    'sanitize_input',
    'detect_threats',
]
