"""tests/unit/test_query.py"""

from datetime import datetime, timezone

import pytest

from reqform.encoders.query import QueryEncoder
from reqform.encoders.strategies import (
    DateEncoding,
    EncodingOptions,
    NonFiniteFloatEncoding,
)
from reqform.encoders.values import Field
from reqform.exceptions import NonFiniteFloatError


class TestQueryEncoder:
    """Tests for QueryEncoder."""

    def test_seconds_since_epoch_date(self):
        """Test a seconds-since-epoch date renders as a float literal."""
        encoder = QueryEncoder(EncodingOptions(date=DateEncoding.seconds_since_epoch()))
        date = datetime.fromtimestamp(1000, tz=timezone.utc)
        assert encoder.encode([Field("since", date)]) == "since=1000.0"

    def test_default_date_is_iso8601(self, epoch):
        """Test the default date strategy, percent-encoded."""
        assert QueryEncoder().encode([Field("since", epoch)]) == (
            "since=1970-01-01T00%3A00%3A00Z"
        )

    def test_insertion_order_with_duplicates(self):
        """Test pairs keep field order, duplicates included."""
        fields = [Field("a", 1), Field("b", 2), Field("a", 3)]
        assert QueryEncoder().encode(fields) == "a=1&b=2&a=3"

    def test_escaping(self):
        """Test spaces become %20 and reserved characters are escaped."""
        assert QueryEncoder().encode([Field("q", "a b/c+d")]) == "q=a%20b%2Fc%2Bd"

    def test_none_omitted(self):
        """Test None values are left out."""
        assert QueryEncoder().encode([Field("a", None), Field("b", "x")]) == "b=x"

    def test_booleans(self):
        """Test booleans render lowercase."""
        assert QueryEncoder().encode([Field("flag", True)]) == "flag=true"

    def test_non_finite(self):
        """Test non-finite floats follow the float strategy."""
        with pytest.raises(NonFiniteFloatError):
            QueryEncoder().encode([Field("x", float("nan"))])
        encoder = QueryEncoder().replace(
            non_finite_floats=NonFiniteFloatEncoding.substitute("Inf", "-Inf", "NaN")
        )
        assert encoder.encode([Field("x", float("nan"))]) == "x=NaN"

    def test_replace_returns_new_encoder(self):
        """Test replace() leaves the original encoder untouched."""
        original = QueryEncoder()
        changed = original.replace(date=DateEncoding.milliseconds_since_epoch())
        assert changed is not original
        assert original.options.date == DateEncoding.iso8601()
        assert changed.options.date == DateEncoding.milliseconds_since_epoch()

    def test_empty(self):
        """Test no fields give an empty string."""
        assert QueryEncoder().encode([]) == ""
