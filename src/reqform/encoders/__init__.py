"""src/reqform/encoders/__init__.py

Encoders for request bodies and query strings.

This module provides the body encoder interface with its JSON, multipart and
URL-encoded form implementations, the query string encoder, and the strategy
options that control how dates, binary data and non-finite floats render.
"""

from .base import BodyEncoder
from .form import URLEncodedFormEncoder
from .json_body import JSONEncoder
from .multipart import MultipartEncoder
from .query import QueryEncoder
from .strategies import (
    ArrayEncoding,
    DataEncoding,
    DataMode,
    DateEncoding,
    DateMode,
    EncodingOptions,
    KeyEncoding,
    KeyOrdering,
    NonFiniteFloatEncoding,
)
from .values import Field, Part, SelfDescribing, ValueBuilder

__all__ = [
    "BodyEncoder",
    "JSONEncoder",
    "MultipartEncoder",
    "URLEncodedFormEncoder",
    "QueryEncoder",
    "EncodingOptions",
    "DateEncoding",
    "DateMode",
    "DataEncoding",
    "DataMode",
    "NonFiniteFloatEncoding",
    "KeyOrdering",
    "KeyEncoding",
    "ArrayEncoding",
    "Field",
    "Part",
    "ValueBuilder",
    "SelfDescribing",
]
