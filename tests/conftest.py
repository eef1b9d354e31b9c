from datetime import datetime, timezone

import pytest

from reqform.client.request import RequestBuilder

UUID_BOUNDARY = "C2E9E6A6-4C6B-4D3B-9B6A-1F2E3D4C5B6A"


@pytest.fixture
def epoch():
    """Fixture providing the Unix epoch as an aware datetime."""
    return datetime(1970, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def builder():
    """Fixture providing a builder with a relative base URL."""
    return RequestBuilder("foo/", "bar", "/baz")


@pytest.fixture
def boundary():
    """Fixture providing a UUID-shaped multipart boundary."""
    return UUID_BOUNDARY
