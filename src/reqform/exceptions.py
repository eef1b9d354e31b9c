"""src/reqform/exceptions.py

Reqform Exceptions hierarchy.
"""

from typing import Iterable, Optional, Tuple


class ReqformError(Exception):
    """Base exception for all Reqform errors."""


class MalformedURLError(ReqformError):
    """Base URL and path cannot be combined into a valid URL."""


class EncodingError(ReqformError):
    """
    Base exception for serialization failures.

    Attributes:
        path: Key path of the value that failed to encode, outermost first.
    """

    def __init__(
        self, message: str = "Encoding failed", path: Optional[Iterable[str]] = None
    ):
        self.path: Tuple[str, ...] = tuple(path or ())
        if self.path:
            message = f"{message} (at {'.'.join(self.path)})"
        super().__init__(message)


class UnsupportedValueError(EncodingError):
    """Value type is not supported by the active encoder."""


class NonFiniteFloatError(EncodingError):
    """NaN or infinity encountered with no substitution strategy configured."""


class DateFormatError(EncodingError):
    """A date pattern or custom date/data function could not render a value."""
