"""src/reqform/http/url.py

URL builder and parser for Reqform.
"""

import urllib.parse

from reqform.exceptions import MalformedURLError
from reqform.utils.validators import validate_url

__all__ = ["URL", "join_path", "append_query", "build_url"]

_NETWORK_SCHEMES = frozenset({"http", "https", "ws", "wss"})


class URL:
    """
    Parsed, validated URL.

    Raises MalformedURLError for bad ports, broken IPv6 hosts, and
    network schemes (``http``, ``https``, ``ws``, ``wss``) without a host.
    """

    __slots__ = ("raw", "scheme", "host", "port")

    def __init__(self, url: str):
        self.raw = url
        try:
            parsed = urllib.parse.urlsplit(url)
            self.port = parsed.port
        except ValueError as exc:
            raise MalformedURLError(f"Invalid URL {url!r}: {exc}") from exc
        self.scheme = parsed.scheme
        self.host = parsed.hostname
        if self.scheme in _NETWORK_SCHEMES and not self.host:
            raise MalformedURLError(f"Invalid URL {url!r}: missing host")

    def __str__(self) -> str:
        return self.raw


def join_path(base_url: str, path: str) -> str:
    """
    Join a base URL and a path with exactly one ``/`` between them.

    ``foo/`` + ``baz``, ``foo`` + ``/baz`` and ``foo/`` + ``/baz`` all give
    ``foo/baz``. An empty path returns the base unchanged.
    """
    if not path:
        return base_url
    base_slash = base_url.endswith("/")
    path_slash = path.startswith("/")
    if base_slash and path_slash:
        return base_url + path[1:]
    if not base_slash and not path_slash:
        return f"{base_url}/{path}"
    return base_url + path


def append_query(url: str, query: str) -> str:
    """Append an encoded query string, using ``&`` if the URL already has one."""
    if not query:
        return url
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}{query}"


def build_url(base_url: str, path: str, query: str = "") -> str:
    """
    Join base, path and query into a validated URL string.

    Raises:
        MalformedURLError: If the base is empty or either part contains
            characters that are never legal in a URL.
    """
    if not base_url or not base_url.strip():
        raise MalformedURLError("Base URL is empty")
    if not validate_url(base_url):
        raise MalformedURLError(f"Invalid characters in base URL {base_url!r}")
    if path and not validate_url(path):
        raise MalformedURLError(f"Invalid characters in path {path!r}")
    return str(URL(append_query(join_path(base_url, path), query)))
