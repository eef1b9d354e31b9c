"""src/reqform/encoders/strategies.py

Encoding strategy options shared by all encoders.
"""

import dataclasses
import enum
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone, tzinfo
from typing import Any, Callable, Optional, Tuple

__all__ = [
    "DateMode",
    "DateEncoding",
    "DataMode",
    "DataEncoding",
    "NonFiniteFloatEncoding",
    "KeyOrdering",
    "KeyEncoding",
    "ArrayEncoding",
    "EncodingOptions",
]


class DateMode(enum.Enum):
    """How date/time values are rendered."""

    ISO8601 = "iso8601"
    SECONDS_SINCE_EPOCH = "seconds_since_epoch"
    MILLISECONDS_SINCE_EPOCH = "milliseconds_since_epoch"
    FORMATTED = "formatted"
    CUSTOM = "custom"


@dataclass(frozen=True)
class DateEncoding:
    """
    Date encoding strategy.

    Attributes:
        mode: Rendering mode.
        pattern: Date pattern for ``FORMATTED`` (e.g. ``yyyy-MM-dd``).
        timezone: Timezone the value is converted to before formatting.
        function: Callable for ``CUSTOM``; its return value is encoded in turn.
    """

    mode: DateMode = DateMode.ISO8601
    pattern: Optional[str] = None
    timezone: tzinfo = timezone.utc
    function: Optional[Callable[[datetime], Any]] = None

    @classmethod
    def iso8601(cls) -> "DateEncoding":
        """RFC 3339 UTC string, e.g. ``1970-01-01T00:00:00Z``."""
        return cls(DateMode.ISO8601)

    @classmethod
    def seconds_since_epoch(cls) -> "DateEncoding":
        """Float seconds since the Unix epoch."""
        return cls(DateMode.SECONDS_SINCE_EPOCH)

    @classmethod
    def milliseconds_since_epoch(cls) -> "DateEncoding":
        """Float milliseconds since the Unix epoch."""
        return cls(DateMode.MILLISECONDS_SINCE_EPOCH)

    @classmethod
    def formatted(cls, pattern: str, tz: tzinfo = timezone.utc) -> "DateEncoding":
        """String rendered with a date pattern in the given timezone."""
        return cls(DateMode.FORMATTED, pattern=pattern, timezone=tz)

    @classmethod
    def custom(cls, function: Callable[[datetime], Any]) -> "DateEncoding":
        """Delegate to a caller-supplied function."""
        return cls(DateMode.CUSTOM, function=function)


class DataMode(enum.Enum):
    """How binary blobs are rendered."""

    BASE64 = "base64"
    BYTE_ARRAY = "byte_array"
    CUSTOM = "custom"


@dataclass(frozen=True)
class DataEncoding:
    """Binary data encoding strategy."""

    mode: DataMode = DataMode.BASE64
    function: Optional[Callable[[bytes], Any]] = None

    @classmethod
    def base64(cls) -> "DataEncoding":
        """Standard base64 string with padding."""
        return cls(DataMode.BASE64)

    @classmethod
    def byte_array(cls) -> "DataEncoding":
        """List of integers, one per byte."""
        return cls(DataMode.BYTE_ARRAY)

    @classmethod
    def custom(cls, function: Callable[[bytes], Any]) -> "DataEncoding":
        """Delegate to a caller-supplied function."""
        return cls(DataMode.CUSTOM, function=function)


@dataclass(frozen=True)
class NonFiniteFloatEncoding:
    """
    Strategy for NaN and infinities.

    Attributes:
        substitutions: ``(positive_infinity, negative_infinity, nan)`` strings,
            or None to fail encoding.
    """

    substitutions: Optional[Tuple[str, str, str]] = None

    @classmethod
    def fail(cls) -> "NonFiniteFloatEncoding":
        """Reject non-finite floats."""
        return cls()

    @classmethod
    def substitute(
        cls, positive_infinity: str, negative_infinity: str, nan: str
    ) -> "NonFiniteFloatEncoding":
        """Emit the given strings in place of non-finite floats."""
        return cls((positive_infinity, negative_infinity, nan))


class KeyOrdering(enum.Enum):
    """Order of keys in structured output."""

    INSERTION = "insertion"
    SORTED = "sorted"


class ArrayEncoding(enum.Enum):
    """How lists are flattened into form and query pairs."""

    BRACKETS = "brackets"  # a[]=1&a[]=2
    INDEXED = "indexed"  # a[0]=1&a[1]=2
    REPEATED = "repeated"  # a=1&a=2


_ACRONYM_BOUNDARY = re.compile(r"([A-Z]+)([A-Z][a-z])")
_WORD_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")


def to_snake_case(key: str) -> str:
    """Convert ``camelCase`` keys to ``snake_case`` (``myURLValue`` -> ``my_url_value``)."""
    stripped = key.strip("_")
    if not stripped:
        return key
    leading = key[: len(key) - len(key.lstrip("_"))]
    trailing = key[len(key.rstrip("_")) :]
    converted = _WORD_BOUNDARY.sub(r"\1_\2", _ACRONYM_BOUNDARY.sub(r"\1_\2", stripped))
    return f"{leading}{converted.lower()}{trailing}"


@dataclass(frozen=True)
class KeyEncoding:
    """Key transformation applied to field names and nested mapping keys."""

    function: Optional[Callable[[str], str]] = None

    @classmethod
    def default(cls) -> "KeyEncoding":
        """Keep keys unchanged."""
        return cls()

    @classmethod
    def snake_case(cls) -> "KeyEncoding":
        """Convert ``camelCase`` keys to ``snake_case``."""
        return cls(to_snake_case)

    @classmethod
    def custom(cls, function: Callable[[str], str]) -> "KeyEncoding":
        """Apply a caller-supplied function to every key."""
        return cls(function)

    def apply(self, key: str) -> str:
        """Return the encoded form of ``key``."""
        return self.function(key) if self.function else key


@dataclass(frozen=True)
class EncodingOptions:
    """
    Immutable bundle of encoding strategies for one encoder.

    Attributes:
        date: Date encoding strategy.
        data: Binary data encoding strategy.
        non_finite_floats: NaN/infinity strategy.
        key_ordering: Key order for structured output.
        pretty: Indented multi-line output (structured encoder only).
        key_encoding: Key transformation.
        array_encoding: List flattening for form and query encoders.
    """

    date: DateEncoding = field(default_factory=DateEncoding)
    data: DataEncoding = field(default_factory=DataEncoding)
    non_finite_floats: NonFiniteFloatEncoding = field(
        default_factory=NonFiniteFloatEncoding
    )
    key_ordering: KeyOrdering = KeyOrdering.INSERTION
    pretty: bool = False
    key_encoding: KeyEncoding = field(default_factory=KeyEncoding)
    array_encoding: ArrayEncoding = ArrayEncoding.BRACKETS

    def replace(self, **changes: Any) -> "EncodingOptions":
        """Return a copy with the given strategies replaced."""
        return dataclasses.replace(self, **changes)
