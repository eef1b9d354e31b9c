"""src/reqform/encoders/json_body.py

Structured-object (JSON) body encoder.
"""

import logging
from typing import Any, Dict, Sequence, Tuple

from reqform.encoders.base import BodyEncoder
from reqform.encoders.strategies import KeyOrdering
from reqform.encoders.values import Field, encode_key, to_structure
from reqform.exceptions import EncodingError
from reqform.utils.serialization import to_json

__all__ = ["JSONEncoder"]

logger = logging.getLogger(__name__)


class JSONEncoder(BodyEncoder):
    """
    Encodes body fields as a single JSON object.

    Each field becomes one key. When a name repeats, the last value wins
    and the key keeps the position of its first occurrence.

    Example::

        encoder = JSONEncoder(
            EncodingOptions(key_ordering=KeyOrdering.SORTED, pretty=True)
        )
        body, content_type = encoder.encode([Field("a", "one")])
    """

    __slots__ = ()

    @property
    def content_type(self) -> str:
        return "application/json"

    def encode(self, fields: Sequence[Field]) -> Tuple[bytes, str]:
        structure: Dict[str, Any] = {}
        for field in fields:
            key = encode_key(field.name, self.options, (field.name,))
            structure[key] = to_structure(field.value, self.options, (field.name,))
        return self._dump(structure)

    def encode_value(self, value: Any) -> Tuple[bytes, str]:
        """Encode any JSON-compatible value (not only objects) as the whole body."""
        return self._dump(to_structure(value, self.options))

    def _dump(self, structure: Any) -> Tuple[bytes, str]:
        try:
            text = to_json(
                structure,
                sort_keys=self.options.key_ordering is KeyOrdering.SORTED,
                pretty=self.options.pretty,
            )
        except (TypeError, ValueError) as exc:
            raise EncodingError(f"JSON serialization failed: {exc}") from exc

        body = text.encode("utf-8")
        logger.debug("Encoded JSON body (%d bytes)", len(body))
        return body, self.content_type
