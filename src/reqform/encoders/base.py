"""src/reqform/encoders/base.py

Body encoder interface.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional, Sequence, Tuple

from reqform.encoders.strategies import EncodingOptions
from reqform.encoders.values import Field, fields_from_value

__all__ = ["BodyEncoder"]


class BodyEncoder(ABC):
    """
    Turns an ordered field list into request body bytes plus a content type.

    Concrete encoders: :class:`~reqform.encoders.json_body.JSONEncoder`,
    :class:`~reqform.encoders.multipart.MultipartEncoder` and
    :class:`~reqform.encoders.form.URLEncodedFormEncoder`.
    """

    __slots__ = ("_options",)

    def __init__(self, options: Optional[EncodingOptions] = None) -> None:
        self._options = options or EncodingOptions()

    @property
    def options(self) -> EncodingOptions:
        """Encoding strategies, fixed for the lifetime of the encoder."""
        return self._options

    @property
    @abstractmethod
    def content_type(self) -> str:
        """Value of the ``Content-Type`` header for bodies from this encoder."""

    @abstractmethod
    def encode(self, fields: Sequence[Field]) -> Tuple[bytes, str]:
        """
        Encode fields into a body.

        Args:
            fields: Fields in insertion order.

        Returns:
            Tuple of (body bytes, Content-Type header value).

        Raises:
            EncodingError: If a value cannot be encoded.
        """

    def encode_value(self, value: Any) -> Tuple[bytes, str]:
        """
        Encode a single value as the whole body.

        Object-like values (mappings, :class:`SelfDescribing`) are expanded
        into fields; other values are rejected unless the encoder overrides
        this method.
        """
        return self.encode(fields_from_value(value))
