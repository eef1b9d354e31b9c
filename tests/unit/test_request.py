"""tests/unit/test_request.py"""

import logging
from datetime import datetime, timedelta, timezone

import pytest

from reqform.client.request import EncodedBody, RequestBuilder
from reqform.encoders.form import URLEncodedFormEncoder
from reqform.encoders.json_body import JSONEncoder
from reqform.encoders.multipart import MultipartEncoder
from reqform.encoders.query import QueryEncoder
from reqform.encoders.strategies import (
    DateEncoding,
    EncodingOptions,
    KeyEncoding,
    KeyOrdering,
)
from reqform.encoders.values import Field, Part
from reqform.exceptions import (
    DateFormatError,
    EncodingError,
    MalformedURLError,
    NonFiniteFloatError,
    UnsupportedValueError,
)


class TestFullURL:
    """Tests for RequestBuilder.full_url()."""

    @pytest.mark.parametrize(
        "base_url, path",
        [
            ("foo/", "baz"),
            ("foo", "/baz"),
            ("foo/", "/baz"),
            ("foo", "baz"),
        ],
    )
    def test_path_joined_with_single_slash(self, base_url, path):
        """Test base and path are joined by exactly one slash."""
        req = RequestBuilder(base_url, "bar", path)
        assert req.full_url() == "foo/baz"

    def test_absolute_base_url(self):
        """Test joining against an absolute base URL."""
        req = RequestBuilder("https://api.example.com/v1/", "GET", "/users")
        assert req.full_url() == "https://api.example.com/v1/users"

    def test_empty_path_keeps_base(self):
        """Test an empty path leaves the base URL untouched."""
        req = RequestBuilder("https://api.example.com", "GET", "")
        assert req.full_url() == "https://api.example.com"

    def test_no_query_fields_no_question_mark(self):
        """Test the query string is omitted entirely without query fields."""
        req = RequestBuilder("https://api.example.com/", "GET", "search")
        assert req.full_url() == "https://api.example.com/search"

    def test_query_appended_in_insertion_order(self):
        """Test query fields keep insertion order, duplicates included."""
        req = RequestBuilder("https://api.example.com/", "GET", "search")
        req.add_query("q", "hello world")
        req.add_query("page", 2)
        req.add_query("q", "again")
        assert (
            req.full_url()
            == "https://api.example.com/search?q=hello%20world&page=2&q=again"
        )

    def test_query_appended_to_existing_query(self):
        """Test query fields extend a path that already has a query string."""
        req = RequestBuilder("https://api.example.com/", "GET", "search?x=1")
        req.add_query("y", 2)
        assert req.full_url() == "https://api.example.com/search?x=1&y=2"

    def test_all_none_query_fields_omit_query(self):
        """Test query fields that encode to nothing leave no trailing '?'."""
        req = RequestBuilder("https://api.example.com/", "GET", "search")
        req.add_query("q", None)
        assert req.full_url() == "https://api.example.com/search"

    def test_query_date_strategy_independent_of_body(self):
        """Test the query encoder's date strategy is separate from the body's."""
        req = RequestBuilder("https://api.example.com/", "GET", "search")
        req.body_encoder = JSONEncoder(EncodingOptions(date=DateEncoding.iso8601()))
        req.query_encoder = req.query_encoder.replace(
            date=DateEncoding.seconds_since_epoch()
        )
        date = datetime.fromtimestamp(1000, tz=timezone.utc)
        req.add_query("since", date)
        req.add_field("since", date)

        assert req.full_url() == "https://api.example.com/search?since=1000.0"
        body, _ = req.body_and_headers()
        assert body == b'{"since":"1970-01-01T00:16:40Z"}'

    def test_query_encoder_from_constructor(self):
        """Test a query encoder can be injected at construction."""
        encoder = QueryEncoder(EncodingOptions(key_ordering=KeyOrdering.SORTED))
        req = RequestBuilder("http://h/", "GET", "p", query_encoder=encoder)
        req.add_query("b", 1)
        req.add_query("a", 2)
        assert req.full_url() == "http://h/p?a=2&b=1"

    @pytest.mark.parametrize(
        "base_url, path",
        [
            ("", "baz"),
            ("   ", "baz"),
            ("http://exa mple.com", "baz"),
            ("foo", "ba<z>"),
            ("foo", "users/{id}"),
            ("http://example.com:port/", "baz"),
            ("http://[::1/", "baz"),
        ],
    )
    def test_malformed_url(self, base_url, path):
        """Test invalid base/path combinations raise MalformedURLError."""
        req = RequestBuilder(base_url, "GET", path)
        with pytest.raises(MalformedURLError):
            req.full_url()

    def test_query_encoding_error_propagates(self):
        """Test unencodable query values raise EncodingError."""
        req = RequestBuilder("http://h/", "GET", "p")
        req.add_query("x", float("nan"))
        with pytest.raises(NonFiniteFloatError):
            req.full_url()

    def test_full_url_logs_resolution(self, caplog):
        """Test URL resolution is logged at DEBUG level."""
        req = RequestBuilder("http://h/", "GET", "p")
        with caplog.at_level(logging.DEBUG, logger="reqform.client.request"):
            req.full_url()
        assert "Resolved GET http://h/p" in caplog.text


class TestPathParameters:
    """Tests for path parameter substitution."""

    def test_colon_and_brace_placeholders(self):
        """Test :name and {name} placeholders are both substituted."""
        req = RequestBuilder(
            "https://api.example.com", "GET", "users/:id/posts/{post}"
        )
        req.add_parameter("id", 42)
        req.add_parameter("post", "a b")
        assert req.full_url() == "https://api.example.com/users/42/posts/a%20b"

    def test_colon_placeholder_matches_whole_name(self):
        """Test :id does not replace the prefix of :identifier."""
        req = RequestBuilder("foo", "GET", "/:id/:identifier")
        req.add_parameter("id", 1)
        assert req.resolved_path() == "/1/:identifier"

    def test_parameter_values_fully_escaped(self):
        """Test slashes and reserved characters in values are escaped."""
        req = RequestBuilder("foo", "GET", "files/:name")
        req.add_parameter("name", "a/b?c")
        assert req.resolved_path() == "files/a%2Fb%3Fc"

    def test_parameter_uses_query_options(self):
        """Test parameter values render with the query encoder's strategies."""
        req = RequestBuilder("foo", "GET", "at/:when")
        req.query_encoder = QueryEncoder(
            EncodingOptions(date=DateEncoding.formatted("yyyy-MM-dd"))
        )
        req.add_parameter("when", datetime(2024, 3, 5, tzinfo=timezone.utc))
        assert req.full_url() == "foo/at/2024-03-05"


class TestAccumulation:
    """Tests for field and header accumulation."""

    def test_duplicate_fields_retained(self, builder):
        """Test repeated names are appended, not overwritten."""
        builder.add_field("a", 1)
        builder.add_field("a", 2)
        builder.add_query("q", 1)
        builder.add_query("q", 2)
        assert builder.body_fields == [Field("a", 1), Field("a", 2)]
        assert builder.query_fields == [Field("q", 1), Field("q", 2)]

    def test_add_header_rejects_injection(self, builder):
        """Test header values with line breaks are rejected."""
        with pytest.raises(ValueError, match="Invalid character in header"):
            builder.add_header("X-Broken", "val\nline")

    def test_add_headers(self, builder):
        """Test adding several headers at once."""
        builder.add_headers({"Accept": "application/json", "X-Trace": "1"})
        _, headers = builder.body_and_headers()
        assert headers == {"Accept": "application/json", "X-Trace": "1"}

    def test_bearer_token(self, builder):
        """Test bearer token sets the Authorization header."""
        builder.set_bearer_token("abc")
        assert builder.headers["authorization"] == "Bearer abc"

    def test_basic_auth_replaces_previous_authorization(self, builder):
        """Test basic auth replaces an earlier Authorization header."""
        builder.set_bearer_token("abc")
        builder.set_basic_auth("user", "pass")
        assert builder.headers.get_all("Authorization") == ["Basic dXNlcjpwYXNz"]


class TestBodyAndHeaders:
    """Tests for RequestBuilder.body_and_headers()."""

    def test_no_encoder_returns_no_body(self, builder):
        """Test a builder without a body encoder returns (None, {})."""
        assert builder.body_and_headers() == (None, {})

    def test_no_encoder_with_fields_logs_warning(self, builder, caplog):
        """Test dropped body fields are reported."""
        builder.add_field("a", "one")
        with caplog.at_level(logging.WARNING, logger="reqform.client.request"):
            body, headers = builder.body_and_headers()
        assert body is None
        assert headers == {}
        assert "No body encoder set" in caplog.text

    def test_encoder_without_fields_returns_no_body(self, builder):
        """Test nothing is encoded when there are no body fields."""
        builder.body_encoder = JSONEncoder()
        assert builder.body_and_headers() == (None, {})

    def test_returns_encoded_body_tuple(self, builder):
        """Test the result is an EncodedBody named tuple."""
        builder.body_encoder = JSONEncoder()
        builder.add_field("a", 1)
        result = builder.body_and_headers()
        assert isinstance(result, EncodedBody)
        assert result.body == b'{"a":1}'
        assert result.headers["Content-Length"] == "7"

    def test_multipart(self, builder, boundary):
        """Test multipart body and headers match byte-for-byte."""
        encoder = MultipartEncoder(boundary)
        builder.body_encoder = encoder
        builder.add_field(
            "a", Part(b"one", file_name="one.txt", mime_type="text/plain")
        )
        builder.add_field("b", Part(b"two"))

        body, headers = builder.body_and_headers()

        assert headers == {
            "Content-Type": f"multipart/form-data; boundary={boundary}",
            "Content-Length": "266",
        }
        assert body == (
            f"--{boundary}\r\n"
            'Content-Disposition: form-data; name="a"; filename="one.txt"\r\n'
            "Content-Type: text/plain\r\n"
            "\r\n"
            "one\r\n"
            f"--{boundary}\r\n"
            'Content-Disposition: form-data; name="b"\r\n'
            "\r\n"
            "two\r\n"
            f"--{boundary}--\r\n"
        ).encode("utf-8")

    def test_json_sorted_pretty(self, builder):
        """Test sorted, pretty-printed JSON body and headers."""
        builder.body_encoder = JSONEncoder(
            EncodingOptions(key_ordering=KeyOrdering.SORTED, pretty=True)
        )
        builder.add_field("b", "two")
        builder.add_field("a", "one")

        body, headers = builder.body_and_headers()

        assert headers == {"Content-Type": "application/json", "Content-Length": "32"}
        assert body == b'{\n  "a" : "one",\n  "b" : "two"\n}'

    def test_url_form(self, builder):
        """Test URL-encoded form body and headers."""
        builder.body_encoder = URLEncodedFormEncoder()
        builder.add_field("a", "one")
        builder.add_field("b", "two")

        body, headers = builder.body_and_headers()

        assert headers == {
            "Content-Type": "application/x-www-form-urlencoded",
            "Content-Length": "11",
        }
        assert set(body.decode("ascii").split("&")) == {"a=one", "b=two"}

    def test_encoder_headers_win_over_explicit(self, builder):
        """Test explicit Content-Type/Length never clobber the encoder's."""
        builder.add_header("content-type", "text/plain")
        builder.add_header("Content-Length", "999")
        builder.add_header("X-Trace", "1")
        builder.body_encoder = JSONEncoder()
        builder.add_field("a", "one")

        body, headers = builder.body_and_headers()

        assert headers == {
            "X-Trace": "1",
            "Content-Type": "application/json",
            "Content-Length": str(len(body)),
        }

    def test_content_length_counts_bytes_not_characters(self, builder):
        """Test Content-Length is the UTF-8 byte length."""
        builder.body_encoder = JSONEncoder()
        builder.add_field("name", "héllo")
        body, headers = builder.body_and_headers()
        assert body == '{"name":"héllo"}'.encode("utf-8")
        assert headers["Content-Length"] == str(len(body)) == "17"

    def test_encoder_can_be_injected_at_construction(self):
        """Test the body encoder constructor argument."""
        req = RequestBuilder(
            "foo", "POST", "bar", body_encoder=URLEncodedFormEncoder()
        )
        req.add_field("a", 1)
        assert req.body_and_headers().body == b"a=1"

    def test_failure_is_atomic(self, builder):
        """Test a failed encode leaves the builder usable and unchanged."""
        builder.body_encoder = JSONEncoder()
        builder.add_field("value", float("nan"))
        with pytest.raises(NonFiniteFloatError):
            builder.body_and_headers()
        assert len(builder.body_fields) == 1
        assert "Content-Type" not in builder.headers

    def test_unsupported_value(self, builder):
        """Test unsupported value types raise EncodingError."""
        builder.body_encoder = JSONEncoder()
        builder.add_field("obj", object())
        with pytest.raises(EncodingError, match="Unsupported value type object"):
            builder.body_and_headers()


class TestWholeBody:
    """Tests for RequestBuilder.set_body()."""

    def test_json_array_body(self, builder):
        """Test a non-object value can be the whole JSON body."""
        builder.body_encoder = JSONEncoder()
        builder.set_body([1, "two", None])
        body, headers = builder.body_and_headers()
        assert body == b'[1,"two",null]'
        assert headers["Content-Length"] == "14"

    def test_form_body_from_mapping(self, builder):
        """Test a mapping body expands into form fields."""
        builder.body_encoder = URLEncodedFormEncoder()
        builder.set_body({"a": 1, "b": "x y"})
        assert builder.body_and_headers().body == b"a=1&b=x+y"

    def test_form_body_rejects_scalar(self, builder):
        """Test a scalar body cannot be expanded into form fields."""
        builder.body_encoder = URLEncodedFormEncoder()
        builder.set_body("text")
        with pytest.raises(UnsupportedValueError):
            builder.body_and_headers()

    def test_body_and_fields_conflict(self, builder):
        """Test combining set_body() with add_field() fails."""
        builder.body_encoder = JSONEncoder()
        builder.set_body({"a": 1})
        builder.add_field("b", 2)
        with pytest.raises(EncodingError, match="Cannot combine"):
            builder.body_and_headers()

    def test_has_body(self, builder):
        """Test has_body reflects fields and whole-body values."""
        assert builder.has_body is False
        builder.set_body(None)
        assert builder.has_body is True


class Report:
    """Value whose describe() is unrelated to structured encoding."""

    def describe(self):
        return "quarterly"


def _reject_key(_key):
    raise RuntimeError("bad key")


class TestEncodingFailures:
    """Tests that every encoding failure surfaces as EncodingError."""

    def test_multipart_header_injection(self, builder, boundary):
        """Test a part MIME type with CRLF fails as EncodingError."""
        builder.body_encoder = MultipartEncoder(boundary)
        builder.add_field("a", Part(b"x", mime_type="text/plain\r\nX-Evil: 1"))
        with pytest.raises(EncodingError) as exc_info:
            builder.body_and_headers()
        assert exc_info.value.path == ("a",)
        assert "Content-Type" not in builder.headers

    @pytest.mark.parametrize(
        "encoder", [JSONEncoder(), URLEncodedFormEncoder(), MultipartEncoder("B")]
    )
    def test_unrelated_describe_method(self, builder, encoder):
        """Test a describe() that rejects the builder fails as EncodingError."""
        builder.body_encoder = encoder
        builder.add_field("r", Report())
        with pytest.raises(UnsupportedValueError) as exc_info:
            builder.body_and_headers()
        assert exc_info.value.path == ("r",)

    @pytest.mark.parametrize(
        "encoder_class", [JSONEncoder, URLEncodedFormEncoder, MultipartEncoder]
    )
    def test_failing_key_function_in_body(self, builder, encoder_class):
        """Test custom key function errors are wrapped for every body encoder."""
        options = EncodingOptions(key_encoding=KeyEncoding.custom(_reject_key))
        builder.body_encoder = encoder_class(options=options)
        builder.add_field("a", 1)
        with pytest.raises(EncodingError, match="bad key") as exc_info:
            builder.body_and_headers()
        assert exc_info.value.path == ("a",)

    def test_failing_key_function_in_nested_json(self, builder):
        """Test nested key failures report the nested path."""

        def reject_inner(key):
            if key == "inner":
                raise RuntimeError("bad key")
            return key

        builder.body_encoder = JSONEncoder(
            EncodingOptions(key_encoding=KeyEncoding.custom(reject_inner))
        )
        builder.add_field("a", {"inner": 1})
        with pytest.raises(UnsupportedValueError, match="bad key") as exc_info:
            builder.body_and_headers()
        assert exc_info.value.path == ("a", "inner")

    def test_key_function_returning_non_string(self, builder):
        """Test a key function must return text."""
        builder.body_encoder = JSONEncoder(
            EncodingOptions(key_encoding=KeyEncoding.custom(len))
        )
        builder.add_field("a", 1)
        with pytest.raises(UnsupportedValueError, match="expected str"):
            builder.body_and_headers()

    def test_failing_key_function_in_query(self):
        """Test custom key function errors are wrapped by full_url()."""
        req = RequestBuilder(
            "http://h/",
            "GET",
            "p",
            query_encoder=QueryEncoder(
                EncodingOptions(key_encoding=KeyEncoding.custom(_reject_key))
            ),
        )
        req.add_query("q", 1)
        with pytest.raises(EncodingError, match="bad key"):
            req.full_url()

    def test_date_out_of_range(self, builder):
        """Test datetimes that overflow on UTC conversion fail as DateFormatError."""
        builder.body_encoder = JSONEncoder()
        late = datetime(9999, 12, 31, 23, tzinfo=timezone(timedelta(hours=-5)))
        builder.add_field("d", late)
        with pytest.raises(DateFormatError, match="out of range") as exc_info:
            builder.body_and_headers()
        assert exc_info.value.path == ("d",)
