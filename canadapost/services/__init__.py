"""Canada Post request pipeline, URL composition and link extraction."""

from canadapost.services.client import CanadaPostClient, set_namespace
from canadapost.services.links import extract_links, parse_link, parse_shipment_link
from canadapost.services.models import LinkEntry, RequestDescriptor
from canadapost.services.paths import compose_path, compose_url, format_date, validate_method

__all__ = [
    "CanadaPostClient",
    "LinkEntry",
    "RequestDescriptor",
    "compose_path",
    "compose_url",
    "extract_links",
    "format_date",
    "parse_link",
    "parse_shipment_link",
    "set_namespace",
    "validate_method",
]
