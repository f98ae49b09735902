"""Async client for the Canada Post XML web services.

Example:
    from canadapost import CanadaPostClient, DEVELOPMENT_ENDPOINT

    client = CanadaPostClient(user_id, password, customer="0001234567",
                              endpoint=DEVELOPMENT_ENDPOINT)
    quotes = await client.get_rates({
        "originPostalCode": "V5C2H2",
        "parcelCharacteristics": {"weight": 1},
        "destination": {"domestic": {"postalCode": "V0N1B6"}},
    })
"""

from canadapost.config import CanadaPostConfig, load_config
from canadapost.errors import (
    CanadaPostClientError,
    CanadaPostError,
    CanadaPostUsageError,
    CarrierMessage,
    ResultFormatError,
)
from canadapost.services.client import CanadaPostClient
from canadapost.services.constants import DEVELOPMENT_ENDPOINT, PRODUCTION_ENDPOINT

__all__ = [
    "CanadaPostClient",
    "CanadaPostClientError",
    "CanadaPostConfig",
    "CanadaPostError",
    "CanadaPostUsageError",
    "CarrierMessage",
    "DEVELOPMENT_ENDPOINT",
    "PRODUCTION_ENDPOINT",
    "ResultFormatError",
    "load_config",
]
