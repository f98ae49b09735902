"""Link extraction from Canada Post ``<links>`` collections.

Shipment responses carry their follow-up URLs as attribute-only elements:

    <links>
      <link rel="self" href="https://.../ncshipment/340531309186521749"
            media-type="application/vnd.cpc.ncshipment-v4+xml"/>
      <link rel="label" href="https://.../artifact/76108cb5192002d5/10238/0"
            media-type="application/pdf" index="0"/>
    </links>

Normalize these with attributes kept; the link data lives entirely in the
attributes.
"""

import re
from collections.abc import Mapping
from typing import Any

from canadapost.services.models import LinkEntry
from canadapost.wire.codec import Element
from canadapost.wire.normalizer import ensure_list

LABEL_RELATION = "label"

_SHIPMENT_ID_PATTERN = re.compile(r"ncshipment/([0-9]+)")


def parse_link(item: Any) -> LinkEntry:
    """Read one link from an Element, a mapping or an existing LinkEntry."""
    if isinstance(item, LinkEntry):
        return item
    if isinstance(item, Element):
        fields = item.attributes
    elif isinstance(item, Mapping):
        fields = item
    else:
        raise TypeError(f"Cannot read a link from {type(item).__name__}")

    return LinkEntry(
        rel=fields.get("rel", ""),
        href=fields.get("href", ""),
        media_type=fields.get("media-type", fields.get("mediaType")),
        index=_parse_index(fields.get("index")),
    )


def _parse_index(value: Any) -> int | None:
    """Label position, or None when absent or not a non-negative integer."""
    try:
        index = int(value)
    except (TypeError, ValueError):
        return None
    return index if index >= 0 else None


def extract_links(collection: Any) -> dict[str, str | list[str | None]]:
    """Build a relation -> href map from a link collection.

    Args:
        collection: A single link or a list of links.

    Returns:
        Each relation mapped to its href. When more than one ``label`` link
        is present, ``label`` maps to a list with every href placed at its
        ``index`` (gaps are None). Labels without an index are appended
        after the indexed ones. Other relations keep the last href seen.
    """
    entries = [parse_link(item) for item in ensure_list(collection)]
    labels = [entry for entry in entries if entry.rel == LABEL_RELATION]
    multiple_labels = len(labels) > 1

    links: dict[str, str | list[str | None]] = {}
    for entry in entries:
        if entry.rel == LABEL_RELATION and multiple_labels:
            continue
        links[entry.rel] = entry.href

    if multiple_labels:
        links[LABEL_RELATION] = _place_labels(labels)
    return links


def _place_labels(labels: list[LinkEntry]) -> list[str | None]:
    placed: list[str | None] = []
    for entry in labels:
        if entry.index is None:
            continue
        if entry.index >= len(placed):
            placed.extend([None] * (entry.index + 1 - len(placed)))
        placed[entry.index] = entry.href
    placed.extend(entry.href for entry in labels if entry.index is None)
    return placed


def parse_shipment_link(item: Any) -> dict[str, str | None] | None:
    """Convert one shipment-list link into a shipment reference.

    Returns:
        ``{shipmentId, href, mediaType, rel}``, or None when the href does
        not contain a shipment id.
    """
    entry = parse_link(item)
    match = _SHIPMENT_ID_PATTERN.search(entry.href)
    if not match:
        return None
    return {
        "shipmentId": match.group(1),
        "href": entry.href,
        "mediaType": entry.media_type,
        "rel": entry.rel,
    }
