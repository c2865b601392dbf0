"""Security utilities for input validation and sanitization."""
import re
from typing import Any
from sl_locations.core.config import MAX_INPUT_LENGTH, MAX_SEARCH_LENGTH
from sl_locations.core.exceptions import ValidationError, UnsafeInputError


MIN_SEARCH_LENGTH = 2

BLOCKED_PATTERNS = [
    re.compile(r"<script", re.IGNORECASE),
    re.compile(r"javascript:", re.IGNORECASE),
    re.compile(r"on\w+\s*=", re.IGNORECASE),
    re.compile(r"eval\(", re.IGNORECASE),
    re.compile(r"expression\(", re.IGNORECASE),
    re.compile(r"vbscript:", re.IGNORECASE),
    re.compile(r"import\s+", re.IGNORECASE),
    re.compile(r"require\s*\(", re.IGNORECASE),
    re.compile(r"\.\."),  # path traversal
    re.compile(r"file:", re.IGNORECASE),
    re.compile(r"data:", re.IGNORECASE),
    re.compile(r"\bexec\b", re.IGNORECASE),
    re.compile(r"\bsystem\b", re.IGNORECASE),
    re.compile(r"\bdrop\b", re.IGNORECASE),
    re.compile(r"\bdelete\b", re.IGNORECASE),
    re.compile(r"\bunion\b", re.IGNORECASE),
    re.compile(r"\bselect\b.*\bfrom\b", re.IGNORECASE),
]

SQL_INJECTION_PATTERNS = [
    re.compile(r"\b(or|and)\b\s*\d+\s*=\s*\d+", re.IGNORECASE),
    re.compile(r"'.*\b(or|and)\b.*'", re.IGNORECASE),
    re.compile(r"(--|#|/\*|\*/)"),
    re.compile(r"(benchmark|sleep|waitfor|delay)\s*\(", re.IGNORECASE),
    re.compile(r"\bunion\b\s+\bselect\b", re.IGNORECASE),
    re.compile(r"'\s*;\s*\w+"),
]

_HTML_TAGS = re.compile(r"<[^>]*>")
_UNSAFE_CHARS = re.compile(r"[<>'\"`;\\]")
_WHITESPACE = re.compile(r"\s+")

# Source data cleaning only removes markup fragments
_SOURCE_ANGLE_BRACKETS = re.compile(r"[<>]")
_SOURCE_JS_PROTOCOL = re.compile(r"javascript:", re.IGNORECASE)
_SOURCE_EVENT_HANDLER = re.compile(r"on\w+=", re.IGNORECASE)


def sanitize(text: Any, max_length: int = MAX_INPUT_LENGTH) -> str:
    """
    Validate and clean free-text input.

    Args:
        text: Raw user input
        max_length: Maximum accepted length

    Returns:
        Cleaned text with tags and quote/escape characters removed

    Raises:
        ValidationError: If the input is not a string or is too long
        UnsafeInputError: If the input matches an injection or blocked pattern
    """
    if not text:
        return ""

    if not isinstance(text, str):
        raise ValidationError("Input must be a string")

    if len(text) > max_length:
        raise ValidationError(f"Input exceeds maximum length of {max_length} characters")

    for pattern in SQL_INJECTION_PATTERNS:
        if pattern.search(text):
            raise UnsafeInputError("Input contains SQL injection patterns")

    for pattern in BLOCKED_PATTERNS:
        if pattern.search(text):
            raise UnsafeInputError("Input contains potentially malicious content")

    text = _HTML_TAGS.sub("", text)
    text = _UNSAFE_CHARS.sub("", text)
    text = _WHITESPACE.sub(" ", text)
    return text.strip()


def sanitize_search_query(query: Any) -> str:
    """
    Sanitize a search query, additionally enforcing search length bounds.

    Raises:
        ValidationError: If the query is too long or shorter than two characters
        UnsafeInputError: If the query matches an injection or blocked pattern
    """
    if not query:
        return ""

    if not isinstance(query, str):
        raise ValidationError("Search query must be a string")

    if len(query) > MAX_SEARCH_LENGTH:
        raise ValidationError(
            f"Search query exceeds maximum length of {MAX_SEARCH_LENGTH} characters"
        )

    if len(query) < MIN_SEARCH_LENGTH:
        raise ValidationError(
            f"Search query must be at least {MIN_SEARCH_LENGTH} characters long"
        )

    return sanitize(query)


def sanitize_location_name(name: Any) -> str:
    """
    Clean a location name read from source data.

    Only markup-like fragments are removed so that commas, slashes and
    parentheses in official names survive.
    """
    if not name or not isinstance(name, str):
        return ""

    name = _SOURCE_ANGLE_BRACKETS.sub("", name)
    name = _SOURCE_JS_PROTOCOL.sub("", name)
    name = _SOURCE_EVENT_HANDLER.sub("", name)
    return name.strip()


def escape_html(unsafe: str) -> str:
    """Escape a string for safe display in HTML."""
    return (
        unsafe.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&#039;")
    )
