"""Typed exceptions raised by the Canada Post client.

Transport failures (``httpx.HTTPError`` subclasses) are never wrapped; the
classes here cover what the carrier reports and what the client itself
detects:

- CanadaPostError: the carrier returned one or more messages.
- ResultFormatError: a successful response lacked an expected field.
- CanadaPostUsageError: the caller passed an unsupported option.

Usage:
    try:
        rates = await client.get_rates(scenario)
    except CanadaPostError as e:
        print(e.code, e.message)
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class CarrierMessage:
    """One ``<message>`` entry from a Canada Post ``<messages>`` envelope."""

    code: str
    description: str


class CanadaPostClientError(Exception):
    """Base exception for all errors raised by this package."""


@dataclass
class CanadaPostError(CanadaPostClientError):
    """Error reported by Canada Post inside a response body.

    Attributes:
        code: Carrier code, or comma-joined codes when several messages
            were returned.
        message: Carrier description, or one annotated line per message.
        original_messages: Every message as returned by the carrier.
    """

    code: str
    message: str
    original_messages: list[CarrierMessage] = field(default_factory=list)

    def __post_init__(self) -> None:
        super().__init__(self.message)

    def __str__(self) -> str:
        """Return formatted error message."""
        return f"[{self.code}] {self.message}"


@dataclass
class ResultFormatError(CanadaPostClientError):
    """A successful response did not have the expected structure.

    Attributes:
        expected_path: Dotted path that was looked up (e.g.
            ``"priceQuotes.priceQuote"``).
        actual: JSON snapshot of the structure that was received.
    """

    expected_path: str
    actual: str

    def __post_init__(self) -> None:
        super().__init__(self.expected_path)

    def __str__(self) -> str:
        """Return formatted error message."""
        return (
            f"Response was in an unknown format: expected '{self.expected_path}' "
            f"in {self.actual}"
        )


class CanadaPostUsageError(CanadaPostClientError, ValueError):
    """Invalid option passed by the caller. Raised before any request."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
