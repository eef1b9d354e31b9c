"""utils/serialization.py

Serialization utilities for Reqform (JSON, form-urlencode, query strings).
"""

import json
import urllib.parse
from typing import Any, Callable, Iterable, Tuple

__all__ = ["to_json", "form_quote", "query_quote", "join_pairs"]

_COMPACT_SEPARATORS = (",", ":")
_PRETTY_SEPARATORS = (",", " : ")


def to_json(data: Any, *, sort_keys: bool = False, pretty: bool = False) -> str:
    """
    Serializes data to a JSON string.

    Compact output has no whitespace. Pretty output uses 2-space indentation
    and ``" : "`` between keys and values. Non-ASCII text is kept as-is and
    NaN/infinity are rejected with ``ValueError``.
    """
    return json.dumps(
        data,
        ensure_ascii=False,
        allow_nan=False,
        sort_keys=sort_keys,
        indent=2 if pretty else None,
        separators=_PRETTY_SEPARATORS if pretty else _COMPACT_SEPARATORS,
    )


def form_quote(text: str) -> str:
    """Percent-encode for application/x-www-form-urlencoded (space as ``+``)."""
    return urllib.parse.quote_plus(text, safe="")


def query_quote(text: str) -> str:
    """Percent-encode a query component, keeping only unreserved characters."""
    return urllib.parse.quote(text, safe="")


def join_pairs(
    pairs: Iterable[Tuple[str, str]], quote: Callable[[str], str] = query_quote
) -> str:
    """Join ``(name, value)`` pairs as ``name=value&name=value``."""
    return "&".join(f"{quote(name)}={quote(value)}" for name, value in pairs)
