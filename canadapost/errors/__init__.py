"""Error handling for the Canada Post client.

This package provides:
- Typed exceptions for carrier, shape and usage errors
- Extraction of carrier messages from XML envelopes
- Translation of non-2xx responses into carrier errors

Error kinds:
- CanadaPostError: reported by Canada Post (code + description)
- ResultFormatError: successful response missing an expected field
- CanadaPostUsageError: invalid option passed by the caller
- httpx.HTTPError: transport failures, propagated unchanged
"""

from canadapost.errors.domain import (
    CanadaPostClientError,
    CanadaPostError,
    CanadaPostUsageError,
    CarrierMessage,
    ResultFormatError,
)
from canadapost.errors.translation import (
    build_carrier_error,
    check_result_format,
    extract_carrier_messages,
    raise_for_carrier_error,
    translate_error_response,
)

__all__ = [
    # Exceptions
    "CanadaPostClientError",
    "CanadaPostError",
    "CanadaPostUsageError",
    "CarrierMessage",
    "ResultFormatError",
    # Translation
    "build_carrier_error",
    "check_result_format",
    "extract_carrier_messages",
    "raise_for_carrier_error",
    "translate_error_response",
]
