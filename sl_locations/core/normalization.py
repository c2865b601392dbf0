"""Text normalization utilities for location name matching."""
import re
from typing import Any, List


CODE_PREFIX = "SL"
MAX_CODE_LENGTH = 50
PHONETIC_KEY_LENGTH = 6
MIN_WORD_KEY_LENGTH = 3

_DISALLOWED_CHARS = re.compile(r"[^\w\s-]")
_WHITESPACE = re.compile(r"\s+")
_VOWELS = re.compile(r"[aeiou]")
_REPEATED_CHARS = re.compile(r"(.)\1+")
_NON_CODE_CHARS = re.compile(r"[^A-Z0-9]")


def normalize_text(text: Any) -> str:
    """
    Normalize text for comparison: lowercase, strip punctuation, collapse whitespace.

    Word characters, whitespace and hyphens survive; everything else is removed.
    Punctuation is stripped before whitespace is collapsed so that the result is
    stable under repeated normalization.

    Args:
        text: Input value; anything that is not a non-empty string yields ""

    Returns:
        Normalized text string
    """
    if not text or not isinstance(text, str):
        return ""

    text = text.lower()
    text = _DISALLOWED_CHARS.sub("", text)
    text = _WHITESPACE.sub(" ", text)
    return text.strip()


def significant_words(normalized: str) -> List[str]:
    """Words of a multi-word normalized name long enough to be index keys."""
    words = normalized.split(" ")
    if len(words) < 2:
        return []
    return [word for word in words if len(word) >= MIN_WORD_KEY_LENGTH]


def phonetic_key(normalized: str) -> str:
    """
    Coarse phonetic abbreviation of a normalized name.

    Vowels are removed, runs of a repeated character are collapsed to one,
    and the result is cut to six characters.
    """
    key = _VOWELS.sub("", normalized)
    key = _REPEATED_CHARS.sub(r"\1", key)
    return key[:PHONETIC_KEY_LENGTH]


def generate_code(type_label: str, name: str) -> str:
    """
    Generate a stable location code such as ``SL-DISTRICT-TONKOLILI``.

    Args:
        type_label: Level label, e.g. "PROVINCE" or "TOWN"
        name: Location name

    Returns:
        Code string of at most 50 characters
    """
    body = _NON_CODE_CHARS.sub("", normalize_text(name).upper())
    return f"{CODE_PREFIX}-{type_label.upper()}-{body}"[:MAX_CODE_LENGTH]
