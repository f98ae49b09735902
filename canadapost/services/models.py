"""Request and link data models for the Canada Post client."""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class RequestDescriptor:
    """One call against the Canada Post API.

    Attributes:
        call: Endpoint segment (e.g. ``"price"``, ``"ncshipment/123"``).
        content_type: Media type sent as both Accept and Content-Type.
        params: Query parameters for GET, XML payload for other methods.
        path: Optional path prefix (e.g. ``"rs/ship"``).
        method: HTTP method name.
    """

    call: str
    content_type: str
    params: Mapping[str, Any] | None = None
    path: str | None = None
    method: str = "GET"


@dataclass(frozen=True)
class LinkEntry:
    """A hyperlink returned by the carrier.

    Attributes:
        rel: Relation, e.g. ``"self"``, ``"label"``, ``"details"``, ``"refund"``.
        href: Absolute URL.
        media_type: Media type to request the link with.
        index: Carrier-assigned position for repeated relations.
    """

    rel: str
    href: str
    media_type: str | None = None
    index: int | None = None
