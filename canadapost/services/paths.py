"""URL composition, method validation and date formatting for requests."""

from collections.abc import Mapping
from datetime import date, datetime
from typing import Any
from urllib.parse import urlencode, urlunsplit

from canadapost.errors.domain import CanadaPostUsageError

SUPPORTED_METHODS: frozenset[str] = frozenset({
    "GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS",
})

# Range-query parameters use a fixed, non-delimited minute precision
DATE_FORMAT = "%Y%m%d%H%M"


def validate_method(method: str) -> str:
    """Return the upper-cased method name.

    Raises:
        CanadaPostUsageError: If the transport does not understand the method.
    """
    normalized = (method or "").upper()
    if normalized not in SUPPORTED_METHODS:
        raise CanadaPostUsageError(
            f"Invalid method {method}. Should be one of "
            f"{', '.join(sorted(SUPPORTED_METHODS))}."
        )
    return normalized


def compose_path(call: str, path: str | None = None, customer: str | None = None) -> str:
    """Resolve the request path for a call.

    Args:
        call: Endpoint segment, e.g. ``"ncshipment"`` or ``"pin/123/summary"``.
        path: Explicit prefix, e.g. ``"rs/ship"``. Wins over ``customer``.
        customer: Customer number; yields ``/rs/{customer}/{call}``.

    Returns:
        Absolute path starting with ``/``.
    """
    if path:
        return f"/{path}/{call}"
    if customer:
        return f"/rs/{customer}/{call}"
    return f"/{call}"


def compose_url(
    host: str,
    call: str,
    path: str | None = None,
    customer: str | None = None,
    query: Mapping[str, Any] | None = None,
) -> str:
    """Build the https URL for a call.

    Args:
        host: Endpoint host name.
        call: Endpoint segment.
        path: Optional path prefix.
        customer: Optional customer number.
        query: Optional query parameters; None values are omitted.

    Returns:
        Full URL.
    """
    query_string = ""
    if query:
        query_string = urlencode(
            [(key, value) for key, value in query.items() if value is not None]
        )
    return urlunsplit(("https", host, compose_path(call, path, customer), query_string, ""))


def format_date(value: datetime | date) -> str:
    """Format a date for range queries as ``YYYYMMDDHHmm``."""
    if not isinstance(value, date):
        raise CanadaPostUsageError(f"Expected a date or datetime, got {value!r}")
    if not isinstance(value, datetime):
        value = datetime(value.year, value.month, value.day)
    return value.strftime(DATE_FORMAT)
