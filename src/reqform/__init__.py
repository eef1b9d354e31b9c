"""src/reqform/__init__.py

Reqform - pluggable request serialization for typed HTTP API clients.

Reqform turns named, typed field values into a resolved URL and an encoded
request body with matching headers. It performs no network I/O; the result is
handed to whatever transport sends the request.

Key Features:
    - Zero external dependencies
    - JSON, multipart/form-data and URL-encoded form bodies
    - Independent query string encoding
    - Configurable date, binary data and non-finite float strategies
    - Exact Content-Type / Content-Length headers
    - Full type hints (PEP 561)

Example:
    JSON body::

        from reqform import EncodingOptions, JSONEncoder, KeyOrdering, RequestBuilder

        req = RequestBuilder("https://api.example.com/", "POST", "/users")
        req.body_encoder = JSONEncoder(
            EncodingOptions(key_ordering=KeyOrdering.SORTED)
        )
        req.add_field("name", "Ada")
        req.add_field("admin", False)
        url = req.full_url()
        body, headers = req.body_and_headers()

    Multipart upload::

        from reqform import MultipartEncoder, Part, RequestBuilder

        req = RequestBuilder("https://api.example.com", "POST", "upload")
        req.body_encoder = MultipartEncoder()
        req.add_field("file", Part(b"...", file_name="a.txt", mime_type="text/plain"))
        body, headers = req.body_and_headers()

    Query dates as epoch seconds::

        from reqform import DateEncoding, RequestBuilder

        req = RequestBuilder("https://api.example.com/", "GET", "search")
        req.query_encoder = req.query_encoder.replace(
            date=DateEncoding.seconds_since_epoch()
        )
        req.add_query("since", since)
        url = req.full_url()
"""

from reqform.client.auth import build_basic_auth_header, build_bearer_auth_header
from reqform.client.request import EncodedBody, RequestBuilder
from reqform.encoders import (
    ArrayEncoding,
    BodyEncoder,
    DataEncoding,
    DateEncoding,
    EncodingOptions,
    Field,
    JSONEncoder,
    KeyEncoding,
    KeyOrdering,
    MultipartEncoder,
    NonFiniteFloatEncoding,
    Part,
    QueryEncoder,
    SelfDescribing,
    URLEncodedFormEncoder,
    ValueBuilder,
)
from reqform.exceptions import (
    DateFormatError,
    EncodingError,
    MalformedURLError,
    NonFiniteFloatError,
    ReqformError,
    UnsupportedValueError,
)
from reqform.version import __version__

__all__ = [
    "RequestBuilder",
    "EncodedBody",
    "Field",
    "Part",
    "ValueBuilder",
    "SelfDescribing",
    "BodyEncoder",
    "JSONEncoder",
    "MultipartEncoder",
    "URLEncodedFormEncoder",
    "QueryEncoder",
    "EncodingOptions",
    "DateEncoding",
    "DataEncoding",
    "NonFiniteFloatEncoding",
    "KeyOrdering",
    "KeyEncoding",
    "ArrayEncoding",
    "ReqformError",
    "MalformedURLError",
    "EncodingError",
    "UnsupportedValueError",
    "NonFiniteFloatError",
    "DateFormatError",
    "build_basic_auth_header",
    "build_bearer_auth_header",
    "__version__",
]
