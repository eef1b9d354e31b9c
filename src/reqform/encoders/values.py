"""src/reqform/encoders/values.py

Field value model and the per-type encoding rules shared by all encoders.

Supported field values form a closed set: ``str``, ``int``, ``float``,
``bool``, ``None``, ``datetime.datetime`` / ``datetime.date``, ``bytes`` /
``bytearray``, mappings with string keys, lists and tuples, :class:`Part`,
and objects implementing :class:`SelfDescribing`.
"""

# pylint: disable=too-many-return-statements

import base64
import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import (
    Any,
    Iterable,
    List,
    Mapping,
    NamedTuple,
    Optional,
    Protocol,
    Tuple,
    Union,
    runtime_checkable,
)

from reqform.encoders.strategies import (
    ArrayEncoding,
    DataEncoding,
    DataMode,
    DateEncoding,
    DateMode,
    EncodingOptions,
    KeyOrdering,
    NonFiniteFloatEncoding,
)
from reqform.exceptions import (
    DateFormatError,
    NonFiniteFloatError,
    UnsupportedValueError,
)
from reqform.utils.dates import format_date

__all__ = [
    "Field",
    "Part",
    "ValueBuilder",
    "SelfDescribing",
    "encode_date",
    "encode_data",
    "encode_float",
    "to_structure",
    "to_text",
    "flatten",
    "encode_key",
    "fields_from_value",
    "field_pairs",
]

Path = Tuple[str, ...]

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class Field(NamedTuple):
    """A named value to be serialized into a request."""

    name: str
    value: Any


@dataclass(frozen=True)
class Part:
    """
    File-like attachment for multipart bodies.

    Attributes:
        data: Raw payload. ``str`` data is stored as UTF-8 bytes.
        file_name: Optional ``filename`` for the Content-Disposition line.
        mime_type: Optional part ``Content-Type``.
    """

    data: bytes
    file_name: Optional[str] = None
    mime_type: Optional[str] = None

    def __post_init__(self) -> None:
        if isinstance(self.data, str):
            object.__setattr__(self, "data", self.data.encode("utf-8"))
        elif isinstance(self.data, (bytearray, memoryview)):
            object.__setattr__(self, "data", bytes(self.data))
        elif not isinstance(self.data, bytes):
            raise TypeError(
                f"Part data must be bytes or str, got {type(self.data).__name__}"
            )


class ValueBuilder:
    """
    Generic structured-value builder handed to :class:`SelfDescribing` objects.

    Keys are kept in insertion order.
    """

    __slots__ = ("_items",)

    def __init__(self) -> None:
        self._items: List[Tuple[str, Any]] = []

    def add(self, key: str, value: Any) -> "ValueBuilder":
        """Add a key/value pair and return this builder for chaining."""
        self._items.append((key, value))
        return self

    def nested(self, key: str) -> "ValueBuilder":
        """Add a nested object under ``key`` and return its builder."""
        child = ValueBuilder()
        self._items.append((key, child))
        return child

    def items(self) -> List[Tuple[str, Any]]:
        """Return the accumulated pairs."""
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)


@runtime_checkable
class SelfDescribing(Protocol):
    """Object that writes its own structure into a :class:`ValueBuilder`."""

    def describe(self, builder: ValueBuilder) -> None:
        """Add this object's keys to ``builder``."""


def _as_utc(value: date) -> datetime:
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
    return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)


def encode_date(value: date, strategy: DateEncoding, path: Path = ()) -> Any:
    """
    Apply a date strategy to a date or datetime.

    Naive datetimes are taken as UTC; plain dates as midnight UTC.

    Raises:
        DateFormatError: If the pattern or custom function fails.
    """
    try:
        moment = _as_utc(value)
    except OverflowError as exc:
        raise DateFormatError(f"Date out of range: {exc}", path) from exc
    if strategy.mode is DateMode.ISO8601:
        return (
            f"{moment.year:04d}-{moment.month:02d}-{moment.day:02d}"
            f"T{moment.hour:02d}:{moment.minute:02d}:{moment.second:02d}Z"
        )
    if strategy.mode is DateMode.SECONDS_SINCE_EPOCH:
        return (moment - _EPOCH) / timedelta(seconds=1)
    if strategy.mode is DateMode.MILLISECONDS_SINCE_EPOCH:
        return (moment - _EPOCH) / timedelta(milliseconds=1)
    if strategy.mode is DateMode.FORMATTED:
        if not strategy.pattern:
            raise DateFormatError("Formatted date strategy requires a pattern", path)
        try:
            return format_date(moment.astimezone(strategy.timezone), strategy.pattern)
        except OverflowError as exc:
            raise DateFormatError(f"Date out of range: {exc}", path) from exc
        except DateFormatError as exc:
            raise DateFormatError(str(exc), path) from exc

    if strategy.function is None:
        raise DateFormatError("Custom date strategy requires a function", path)
    try:
        result = strategy.function(moment)
    except Exception as exc:  # pylint: disable=broad-exception-caught
        raise DateFormatError(f"Custom date encoding failed: {exc}", path) from exc
    if isinstance(result, date):
        raise DateFormatError("Custom date encoding returned a date", path)
    return result


def encode_data(
    value: Union[bytes, bytearray], strategy: DataEncoding, path: Path = ()
) -> Any:
    """
    Apply a binary data strategy.

    Raises:
        DateFormatError: If the custom function fails.
    """
    if strategy.mode is DataMode.BASE64:
        return base64.b64encode(bytes(value)).decode("ascii")
    if strategy.mode is DataMode.BYTE_ARRAY:
        return list(value)

    if strategy.function is None:
        raise DateFormatError("Custom data strategy requires a function", path)
    try:
        result = strategy.function(bytes(value))
    except Exception as exc:  # pylint: disable=broad-exception-caught
        raise DateFormatError(f"Custom data encoding failed: {exc}", path) from exc
    if isinstance(result, (bytes, bytearray)):
        raise DateFormatError("Custom data encoding returned bytes", path)
    return result


def encode_float(
    value: float, strategy: NonFiniteFloatEncoding, path: Path = ()
) -> Union[float, str]:
    """
    Return finite floats unchanged and substitute non-finite ones.

    Raises:
        NonFiniteFloatError: If ``value`` is NaN/infinite and no substitution is set.
    """
    if math.isfinite(value):
        return value
    if strategy.substitutions is None:
        raise NonFiniteFloatError(f"Non-finite float value {value!r}", path)
    positive, negative, nan = strategy.substitutions
    if math.isnan(value):
        return nan
    return positive if value > 0 else negative


def _resolve(value: Any, options: EncodingOptions, path: Path) -> Any:
    """Apply the float, date and data strategies to a single value."""
    if isinstance(value, float):
        return encode_float(value, options.non_finite_floats, path)
    if isinstance(value, date):
        return _resolve(encode_date(value, options.date, path), options, path)
    if isinstance(value, (bytes, bytearray)):
        return _resolve(encode_data(value, options.data, path), options, path)
    return value


def _items(value: Any, path: Path = ()) -> Optional[Iterable[Tuple[Any, Any]]]:
    """Return key/value pairs for object-like values, None otherwise."""
    if isinstance(value, Mapping):
        return value.items()
    if isinstance(value, ValueBuilder):
        return value.items()
    if isinstance(value, SelfDescribing):
        builder = ValueBuilder()
        try:
            value.describe(builder)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            raise UnsupportedValueError(f"describe() failed: {exc}", path) from exc
        return builder.items()
    return None


def encode_key(key: str, options: EncodingOptions, path: Path = ()) -> str:
    """
    Apply the key encoding strategy to a single key.

    Raises:
        UnsupportedValueError: If a custom key function fails or returns a
            non-string.
    """
    try:
        encoded = options.key_encoding.apply(key)
    except Exception as exc:  # pylint: disable=broad-exception-caught
        raise UnsupportedValueError(f"Key encoding failed: {exc}", path) from exc
    if not isinstance(encoded, str):
        raise UnsupportedValueError(
            f"Key encoding returned {type(encoded).__name__}, expected str", path
        )
    return encoded


def _check_key(key: Any, path: Path) -> str:
    if not isinstance(key, str):
        raise UnsupportedValueError(
            f"Object keys must be strings, got {type(key).__name__}", path
        )
    return key


def to_structure(value: Any, options: EncodingOptions, path: Path = ()) -> Any:
    """
    Convert a field value into plain JSON-compatible Python objects.

    Raises:
        EncodingError: If the value (or a nested value) cannot be encoded.
    """
    value = _resolve(value, options, path)
    if value is None or isinstance(value, (str, int, float)):
        return value
    if isinstance(value, Part):
        raise UnsupportedValueError("Part values require a multipart encoder", path)

    items = _items(value, path)
    if items is not None:
        result = {}
        for key, item in items:
            key = _check_key(key, path)
            result[encode_key(key, options, path + (key,))] = to_structure(
                item, options, path + (key,)
            )
        return result

    if isinstance(value, (list, tuple)):
        return [
            to_structure(item, options, path + (str(index),))
            for index, item in enumerate(value)
        ]
    raise UnsupportedValueError(f"Unsupported value type {type(value).__name__}", path)


def to_text(value: Any, options: EncodingOptions, path: Path = ()) -> str:
    """
    Render a scalar value as plain text (no quoting).

    Raises:
        EncodingError: If the value is not a scalar or cannot be encoded.
    """
    value = _resolve(value, options, path)
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return repr(value)
    raise UnsupportedValueError(
        f"Value of type {type(value).__name__} cannot be rendered as text", path
    )


def flatten(
    key: str, value: Any, options: EncodingOptions, path: Path = ()
) -> List[Tuple[str, str]]:
    """
    Flatten a value into ``(key, text)`` pairs for form and query strings.

    Mappings become ``key[child]`` and lists follow ``options.array_encoding``.
    ``None`` values produce no pairs.

    Raises:
        EncodingError: If a value cannot be encoded.
    """
    value = _resolve(value, options, path)
    if value is None:
        return []
    if isinstance(value, Part):
        raise UnsupportedValueError("Part values require a multipart encoder", path)

    pairs: List[Tuple[str, str]] = []
    items = _items(value, path)
    if items is not None:
        for child, item in items:
            child = _check_key(child, path)
            child_key = f"{key}[{encode_key(child, options, path + (child,))}]"
            pairs.extend(flatten(child_key, item, options, path + (child,)))
        return pairs

    if isinstance(value, (list, tuple)):
        for index, item in enumerate(value):
            if options.array_encoding is ArrayEncoding.INDEXED:
                child_key = f"{key}[{index}]"
            elif options.array_encoding is ArrayEncoding.REPEATED:
                child_key = key
            else:
                child_key = f"{key}[]"
            pairs.extend(flatten(child_key, item, options, path + (str(index),)))
        return pairs

    return [(key, to_text(value, options, path))]


def fields_from_value(value: Any) -> List[Field]:
    """
    Expand an object-like whole-body value into fields.

    Raises:
        UnsupportedValueError: If the value is not a mapping or self-describing.
    """
    items = _items(value)
    if items is None:
        raise UnsupportedValueError(
            f"Body of type {type(value).__name__} cannot be expanded into fields"
        )
    return [Field(_check_key(key, ()), item) for key, item in items]


def field_pairs(
    fields: Iterable[Field], options: EncodingOptions
) -> List[Tuple[str, str]]:
    """
    Flatten fields into ``(key, text)`` pairs in field order.

    With ``KeyOrdering.SORTED`` fields are stably sorted by encoded name first.
    """
    named = [
        (encode_key(field.name, options, (field.name,)), field) for field in fields
    ]
    if options.key_ordering is KeyOrdering.SORTED:
        named.sort(key=lambda entry: entry[0])
    pairs: List[Tuple[str, str]] = []
    for key, field in named:
        pairs.extend(flatten(key, field.value, options, (field.name,)))
    return pairs
