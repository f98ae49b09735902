"""XML wire format: codec and structural normalization."""

from canadapost.wire.codec import Element, WireFormatError, build_xml, parse_xml
from canadapost.wire.normalizer import (
    CAMEL,
    KEBAB,
    KeyStyle,
    children_of,
    ensure_list,
    normalize_object,
    split_words,
    to_camel_case,
    to_kebab_case,
)

__all__ = [
    "CAMEL",
    "KEBAB",
    "Element",
    "KeyStyle",
    "WireFormatError",
    "build_xml",
    "children_of",
    "ensure_list",
    "normalize_object",
    "parse_xml",
    "split_words",
    "to_camel_case",
    "to_kebab_case",
]
