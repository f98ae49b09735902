"""Canonical Canada Post web service constants.

Single source of truth for endpoint hosts, media types, XML namespaces and
path prefixes. These values are part of the carrier's wire contract and
must not be altered.
"""

from enum import Enum


# ---------------------------------------------------------------------------
# Endpoint hosts
# ---------------------------------------------------------------------------

PRODUCTION_ENDPOINT = "soa-gw.canadapost.ca"
DEVELOPMENT_ENDPOINT = "ct.soa-gw.canadapost.ca"

DEFAULT_LANGUAGE = "en-CA"


# ---------------------------------------------------------------------------
# Media types (used for both Accept and Content-Type)
# ---------------------------------------------------------------------------

RATE_MEDIA_TYPE = "application/vnd.cpc.ship.rate-v3+xml"
NCSHIPMENT_MEDIA_TYPE = "application/vnd.cpc.ncshipment-v4+xml"
TRACK_MEDIA_TYPE = "application/vnd.cpc.track+xml"


# ---------------------------------------------------------------------------
# XML namespaces injected on request payloads
# ---------------------------------------------------------------------------

RATE_NAMESPACE = "http://www.canadapost.ca/ws/ship/rate-v3"
NCSHIPMENT_NAMESPACE = "http://www.canadapost.ca/ws/ncshipment-v4"


# ---------------------------------------------------------------------------
# Path prefixes
# ---------------------------------------------------------------------------

RATE_PATH = "rs/ship"
TRACK_PATH = "vis/track"


class TrackingType(str, Enum):
    """Identifier kinds accepted by the tracking services."""

    PIN = "pin"
    REFERENCE = "ref"
    DELIVERY_NOTICE_CARD = "dnc"


SUMMARY_TRACKING_TYPES: frozenset[str] = frozenset(t.value for t in TrackingType)
DETAIL_TRACKING_TYPES: frozenset[str] = frozenset({
    TrackingType.PIN.value,
    TrackingType.DELIVERY_NOTICE_CARD.value,
})
