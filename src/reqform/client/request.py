"""src/reqform/client/request.py

HTTP request builder: accumulates fields and produces the URL, body and headers.
"""

import logging
import re
from typing import Any, Dict, List, Mapping, NamedTuple, Optional

from reqform.client.auth import build_basic_auth_header, build_bearer_auth_header
from reqform.encoders.base import BodyEncoder
from reqform.encoders.query import QueryEncoder
from reqform.encoders.values import Field, to_text
from reqform.exceptions import EncodingError
from reqform.http.headers import Headers
from reqform.http.url import build_url
from reqform.utils.serialization import query_quote

__all__ = ["RequestBuilder", "EncodedBody"]

logger = logging.getLogger(__name__)

_UNSET = object()


class EncodedBody(NamedTuple):
    """Encoded request body and the headers to send with it."""

    body: Optional[bytes]
    headers: Dict[str, str]


class RequestBuilder:
    """
    HTTP request builder.

    Collects path parameters, query fields, body fields and headers for one
    logical request, then resolves them with :meth:`full_url` and
    :meth:`body_and_headers`. Field lists are append-only and keep duplicate
    names. A builder holds mutable state and must not be shared between
    concurrent requests.

    Attributes:
        base_url: Base URL the path is joined to.
        method: HTTP method, passed through to the transport.
        path: Request path, may contain ``:name`` or ``{name}`` placeholders.
        headers: Explicit request headers.
        parameters: Path parameter values by placeholder name.
        body_fields: Body fields in insertion order.
        query_fields: Query fields in insertion order.
        body_encoder: Encoder for the body, or None for a body-less request.
        query_encoder: Encoder for the query string.

    Example::

        req = RequestBuilder("https://api.example.com/", "POST", "users/:id")
        req.body_encoder = JSONEncoder()
        req.add_parameter("id", 42)
        req.add_query("verbose", True)
        req.add_field("name", "Ada")
        url = req.full_url()
        body, headers = req.body_and_headers()
    """

    # pylint: disable=too-many-instance-attributes
    __slots__ = (
        "base_url",
        "method",
        "path",
        "headers",
        "parameters",
        "body_fields",
        "query_fields",
        "body_encoder",
        "query_encoder",
        "_body",
    )

    def __init__(
        self,
        base_url: str,
        method: str,
        path: str,
        *,
        body_encoder: Optional[BodyEncoder] = None,
        query_encoder: Optional[QueryEncoder] = None,
    ) -> None:
        self.base_url = base_url
        self.method = method
        self.path = path
        self.headers = Headers()
        self.parameters: Dict[str, Any] = {}
        self.body_fields: List[Field] = []
        self.query_fields: List[Field] = []
        self.body_encoder = body_encoder
        self.query_encoder = query_encoder or QueryEncoder()
        self._body: Any = _UNSET

    def add_field(self, name: str, value: Any) -> None:
        """Append a body field. Repeated names are kept, not overwritten."""
        self.body_fields.append(Field(name, value))

    def add_query(self, name: str, value: Any) -> None:
        """Append a query field. Repeated names are kept, not overwritten."""
        self.query_fields.append(Field(name, value))

    def add_parameter(self, name: str, value: Any) -> None:
        """Set the value substituted for ``:name`` / ``{name}`` in the path."""
        self.parameters[name] = value

    def add_header(self, name: str, value: str) -> None:
        """
        Add an explicit header value.

        Raises:
            ValueError: If the name or value contains CR, LF or NUL.
        """
        self.headers.add(name, value)

    def add_headers(self, headers: Mapping[str, str]) -> None:
        """Add several explicit headers."""
        for name, value in headers.items():
            self.headers.add(name, value)

    def add_authorization(self, value: str) -> None:
        """Set the ``Authorization`` header, replacing any previous value."""
        self.headers["Authorization"] = value

    def set_basic_auth(self, username: str, password: str) -> None:
        """Set Basic credentials as the ``Authorization`` header."""
        self.add_authorization(build_basic_auth_header(username, password))

    def set_bearer_token(self, token: str) -> None:
        """Set a Bearer token as the ``Authorization`` header."""
        self.add_authorization(build_bearer_auth_header(token))

    def set_body(self, value: Any) -> None:
        """
        Use ``value`` as the entire body instead of per-field encoding.

        Cannot be combined with :meth:`add_field`.
        """
        self._body = value

    @property
    def has_body(self) -> bool:
        """Whether a whole-body value or any body field is set."""
        return self._body is not _UNSET or bool(self.body_fields)

    def resolved_path(self) -> str:
        """
        Return the path with path parameters substituted.

        Values are rendered with the query encoder's options and fully
        percent-encoded.

        Raises:
            EncodingError: If a parameter value cannot be rendered as text.
        """
        path = self.path
        for name, value in self.parameters.items():
            text = query_quote(to_text(value, self.query_encoder.options, (name,)))
            path = path.replace("{" + name + "}", text)
            path = re.sub(rf":{re.escape(name)}(?!\w)", lambda _match: text, path)
        return path

    def full_url(self) -> str:
        """
        Resolve the request URL: base URL, path and query string.

        Returns:
            URL string, with ``?query`` appended only when query fields encode
            to something.

        Raises:
            MalformedURLError: If base URL and path cannot form a valid URL.
            EncodingError: If a query or path parameter value cannot be encoded.
        """
        query = self.query_encoder.encode(self.query_fields) if self.query_fields else ""
        url = build_url(self.base_url, self.resolved_path(), query)
        logger.debug("Resolved %s %s", self.method, url)
        return url

    def body_and_headers(self) -> EncodedBody:
        """
        Encode the body and compute the headers to send with it.

        Without a body encoder, or with nothing to encode, the body is None
        and only the explicit headers are returned. Otherwise ``Content-Type``
        and ``Content-Length`` from the encoder replace any explicit values.

        Returns:
            EncodedBody, unpackable as ``(body, headers)``.

        Raises:
            EncodingError: If a value cannot be encoded. Nothing is emitted
                and the builder is left unchanged.
        """
        headers = self.headers.copy()
        if self.body_encoder is None:
            if self.has_body:
                logger.warning(
                    "No body encoder set for %s %s; body is dropped",
                    self.method,
                    self.path,
                )
            return EncodedBody(None, headers.to_dict())
        if not self.has_body:
            return EncodedBody(None, headers.to_dict())

        if self._body is not _UNSET:
            if self.body_fields:
                raise EncodingError("Cannot combine a whole-body value with body fields")
            body, content_type = self.body_encoder.encode_value(self._body)
        else:
            body, content_type = self.body_encoder.encode(self.body_fields)

        headers["Content-Type"] = content_type
        headers["Content-Length"] = str(len(body))
        logger.debug(
            "Encoded %s body for %s %s (%d bytes)",
            type(self.body_encoder).__name__,
            self.method,
            self.path,
            len(body),
        )
        return EncodedBody(body, headers.to_dict())
