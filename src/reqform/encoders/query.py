"""src/reqform/encoders/query.py

URL query string encoder.
"""

from typing import Any, Optional, Sequence

from reqform.encoders.strategies import EncodingOptions
from reqform.encoders.values import Field, field_pairs
from reqform.utils.serialization import join_pairs, query_quote

__all__ = ["QueryEncoder"]


class QueryEncoder:
    """
    Encodes query fields as a URL query string (without the leading ``?``).

    Carries its own :class:`EncodingOptions`, independent from the body
    encoder, so dates in the URL can be rendered differently from dates in
    the body. Pairs keep field order; spaces become ``%20``.
    """

    __slots__ = ("_options",)

    def __init__(self, options: Optional[EncodingOptions] = None) -> None:
        self._options = options or EncodingOptions()

    @property
    def options(self) -> EncodingOptions:
        """Encoding strategies, fixed for the lifetime of the encoder."""
        return self._options

    def replace(self, **changes: Any) -> "QueryEncoder":
        """Return a new encoder with the given strategies replaced."""
        return QueryEncoder(self._options.replace(**changes))

    def encode(self, fields: Sequence[Field]) -> str:
        """
        Encode query fields.

        Raises:
            EncodingError: If a value cannot be encoded.
        """
        return join_pairs(field_pairs(fields, self._options), query_quote)
