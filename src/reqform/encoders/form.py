"""src/reqform/encoders/form.py

application/x-www-form-urlencoded body encoder.
"""

import logging
from typing import Sequence, Tuple

from reqform.encoders.base import BodyEncoder
from reqform.encoders.values import Field, field_pairs
from reqform.utils.serialization import form_quote, join_pairs

__all__ = ["URLEncodedFormEncoder"]

logger = logging.getLogger(__name__)


class URLEncodedFormEncoder(BodyEncoder):
    """
    Encodes body fields as ``name=value&name=value`` with form escaping.

    Spaces become ``+`` and every other non-unreserved character is
    percent-escaped. Pairs are written in field order and nested values
    flatten to ``name[key]`` / ``name[]`` keys.
    """

    __slots__ = ()

    @property
    def content_type(self) -> str:
        return "application/x-www-form-urlencoded"

    def encode(self, fields: Sequence[Field]) -> Tuple[bytes, str]:
        pairs = field_pairs(fields, self.options)
        body = join_pairs(pairs, form_quote).encode("ascii")
        logger.debug(
            "Encoded form body with %d pairs (%d bytes)", len(pairs), len(body)
        )
        return body, self.content_type
