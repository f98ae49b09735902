"""Tests for URL composition, method validation and date formatting."""

from datetime import date, datetime
from urllib.parse import parse_qs, urlsplit

import pytest

from canadapost.errors.domain import CanadaPostUsageError
from canadapost.services.paths import compose_path, compose_url, format_date, validate_method


class TestComposePath:
    """Path resolution order: prefix, then customer, then bare call."""

    def test_prefix_wins(self):
        assert compose_path("service", path="rs/ship", customer="0001234567") == "/rs/ship/service"

    def test_customer(self):
        assert compose_path("ncshipment", customer="0001234567") == "/rs/0001234567/ncshipment"

    def test_bare_call(self):
        assert compose_path("service") == "/service"


class TestComposeUrl:
    """Tests for compose_url."""

    def test_query_with_customer(self):
        """GET-style call with customer: /rs/{customer}/service plus query."""
        url = compose_url(
            "ct.soa-gw.canadapost.ca",
            "service",
            customer="0001234567",
            query={"origin": "V6G3E2", "country": "US"},
        )
        parts = urlsplit(url)
        assert parts.scheme == "https"
        assert parts.netloc == "ct.soa-gw.canadapost.ca"
        assert parts.path == "/rs/0001234567/service"
        assert parse_qs(parts.query) == {"origin": ["V6G3E2"], "country": ["US"]}

    def test_query_without_customer(self):
        url = compose_url(
            "ct.soa-gw.canadapost.ca",
            "service",
            query={"origin": "V6G3E2", "country": "US"},
        )
        parts = urlsplit(url)
        assert parts.path == "/service"
        assert parse_qs(parts.query) == {"origin": ["V6G3E2"], "country": ["US"]}

    def test_none_query_values_omitted(self):
        url = compose_url("host", "service", query={"origpc": "V6G3E2", "destpc": None})
        assert urlsplit(url).query == "origpc=V6G3E2"

    def test_no_query(self):
        assert compose_url("host", "ncshipment/1") == "https://host/ncshipment/1"


class TestValidateMethod:
    """Tests for validate_method."""

    @pytest.mark.parametrize("method", ["GET", "post", "Head", "DELETE"])
    def test_supported(self, method):
        assert validate_method(method) == method.upper()

    @pytest.mark.parametrize("method", ["FETCH", "", "SEND"])
    def test_unsupported(self, method):
        with pytest.raises(CanadaPostUsageError) as exc_info:
            validate_method(method)
        assert "Invalid method" in str(exc_info.value)


class TestFormatDate:
    """Tests for the YYYYMMDDHHmm range-query format."""

    def test_datetime(self):
        assert format_date(datetime(2026, 1, 5, 7, 3, 59)) == "202601050703"

    def test_date(self):
        assert format_date(date(2026, 10, 18)) == "202610180000"

    def test_rejects_strings(self):
        with pytest.raises(CanadaPostUsageError):
            format_date("2026-10-18")
