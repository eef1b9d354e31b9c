"""utils/validators.py

Validation utilities for Reqform.
"""

import re

__all__ = ["validate_url", "validate_header", "validate_boundary", "is_token"]

# Whitespace, control characters and characters never legal in a URL.
_INVALID_URL_CHARS = re.compile(r'[\x00-\x20\x7f<>"{}|\\^`]')
_BOUNDARY = re.compile(r"^[0-9A-Za-z'()+_,\-./:=? ]{0,69}[0-9A-Za-z'()+_,\-./:=?]$")
_TOKEN = re.compile(r"^[!#$%&'*+\-.^_`|~0-9A-Za-z]+$")


def validate_url(url: str) -> bool:
    """Check that a URL (or URL fragment) holds only legal characters."""
    return bool(url) and _INVALID_URL_CHARS.search(url) is None


def validate_header(name: str, value: str) -> None:
    """Reject header names/values that could inject extra header lines."""
    if "\r" in name or "\n" in name or "\r" in value or "\n" in value:
        raise ValueError(f"Invalid character in header {name}: {value!r}")
    if "\x00" in name or "\x00" in value:
        raise ValueError(f"Null byte in header {name}: {value!r}")


def validate_boundary(boundary: str) -> bool:
    """Check a multipart boundary against RFC 2046 (1-70 chars, no trailing space)."""
    return _BOUNDARY.match(boundary) is not None


def is_token(value: str) -> bool:
    """Check whether a parameter value can be sent unquoted (RFC 9110 token)."""
    return _TOKEN.match(value) is not None
