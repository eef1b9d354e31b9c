"""src/reqform/encoders/multipart.py

multipart/form-data body encoder.
"""

import logging
import uuid
from typing import Any, List, Optional, Sequence, Tuple

from reqform.encoders.base import BodyEncoder
from reqform.encoders.strategies import EncodingOptions
from reqform.encoders.values import Field, Part, encode_key, to_text
from reqform.exceptions import UnsupportedValueError
from reqform.utils.validators import is_token, validate_boundary, validate_header

__all__ = ["MultipartEncoder"]

logger = logging.getLogger(__name__)

_DISPOSITION_ESCAPES = str.maketrans({'"': "%22", "\r": "%0D", "\n": "%0A"})


def _escape(value: str) -> str:
    return value.translate(_DISPOSITION_ESCAPES)


class MultipartEncoder(BodyEncoder):
    """
    Encodes body fields as ``multipart/form-data``.

    Each field becomes one part, written in field order::

        --{boundary}\\r\\n
        Content-Disposition: form-data; name="{name}"[; filename="{file}"]\\r\\n
        [Content-Type: {mime}\\r\\n]
        \\r\\n
        {bytes}\\r\\n

    followed by ``--{boundary}--\\r\\n``. :class:`Part` values carry the
    optional filename and MIME type; ``bytes`` are written raw and scalars
    as plain text. A list value emits one part per item under the same name
    and ``None`` fields are skipped.

    A boundary containing characters outside the header token set (spaces,
    ``=``, ``:``...) is quoted in the Content-Type value.

    Attributes:
        boundary: Delimiter token between parts.
    """

    __slots__ = ("boundary",)

    def __init__(
        self, boundary: Optional[str] = None, options: Optional[EncodingOptions] = None
    ) -> None:
        """
        Args:
            boundary: Boundary token. A random UUID-based token is used when omitted.
            options: Encoding strategies for scalar values.

        Raises:
            ValueError: If the boundary is not a valid RFC 2046 boundary.
        """
        super().__init__(options)
        if boundary is None:
            boundary = str(uuid.uuid4()).upper()
        if not validate_boundary(boundary):
            raise ValueError(f"Invalid multipart boundary: {boundary!r}")
        self.boundary = boundary

    @property
    def content_type(self) -> str:
        if is_token(self.boundary):
            return f"multipart/form-data; boundary={self.boundary}"
        return f'multipart/form-data; boundary="{self.boundary}"'

    def encode(self, fields: Sequence[Field]) -> Tuple[bytes, str]:
        delimiter = f"--{self.boundary}\r\n".encode("ascii")
        chunks: List[bytes] = []
        for field in fields:
            path = (field.name,)
            name = encode_key(field.name, self.options, path)
            for part in self._parts(field.value, path):
                chunks.append(delimiter)
                chunks.append(self._part_headers(name, part, path))
                chunks.append(part.data)
                chunks.append(b"\r\n")
        chunks.append(f"--{self.boundary}--\r\n".encode("ascii"))

        body = b"".join(chunks)
        logger.debug(
            "Encoded multipart body with %d fields (%d bytes)", len(fields), len(body)
        )
        return body, self.content_type

    def _parts(self, value: Any, path: Tuple[str, ...]) -> List[Part]:
        if value is None:
            return []
        if isinstance(value, Part):
            return [value]
        if isinstance(value, (bytes, bytearray)):
            return [Part(bytes(value))]
        if isinstance(value, (list, tuple)):
            parts: List[Part] = []
            for index, item in enumerate(value):
                parts.extend(self._parts(item, path + (str(index),)))
            return parts
        return [Part(to_text(value, self.options, path))]

    @staticmethod
    def _part_headers(name: str, part: Part, path: Tuple[str, ...]) -> bytes:
        disposition = f'Content-Disposition: form-data; name="{_escape(name)}"'
        if part.file_name is not None:
            disposition += f'; filename="{_escape(part.file_name)}"'
        lines = [disposition]
        if part.mime_type is not None:
            try:
                validate_header("Content-Type", part.mime_type)
            except ValueError as exc:
                raise UnsupportedValueError(str(exc), path) from exc
            lines.append(f"Content-Type: {part.mime_type}")
        return ("\r\n".join(lines) + "\r\n\r\n").encode("utf-8")
