"""src/reqform/client/__init__.py"""

from .auth import build_basic_auth_header, build_bearer_auth_header
from .request import EncodedBody, RequestBuilder

__all__ = [
    "RequestBuilder",
    "EncodedBody",
    "build_basic_auth_header",
    "build_bearer_auth_header",
]
