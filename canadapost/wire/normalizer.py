"""Structural normalization between Wire Tree and application objects.

The carrier's XML uses hyphenated element names (``customer-ref-1``) while
callers work with lowerCamelCase keys (``customerRef1``). ``normalize_object``
walks a tree, rewrites every child key into one convention and unwraps
``Element`` nodes whose attributes and text carry no extra information.

Nothing in this module knows about Canada Post. It is a generic transform
and is reused for both request payloads and responses.
"""

import re
from collections.abc import Mapping
from typing import Any, Literal

from canadapost.wire.codec import Element

KeyStyle = Literal["kebab", "camel"]

KEBAB: KeyStyle = "kebab"
CAMEL: KeyStyle = "camel"

# Acronym runs, capitalised or lower-case words, and digit runs. Anything
# else (hyphens, underscores, spaces, dots) is a separator.
_WORD_PATTERN = re.compile(r"[A-Z]+(?![a-z])|[A-Z]?[a-z]+|[0-9]+")


def split_words(key: str) -> list[str]:
    """Split a key in any casing convention into its words.

    Examples:
        >>> split_words("customerRef1")
        ['customer', 'Ref', '1']
        >>> split_words("address-line-1")
        ['address', 'line', '1']
    """
    return _WORD_PATTERN.findall(key)


def to_kebab_case(key: str) -> str:
    """Convert a key to hyphenated lowercase (``priceQuotes`` -> ``price-quotes``)."""
    words = split_words(key)
    if not words:
        return key
    return "-".join(word.lower() for word in words)


def to_camel_case(key: str) -> str:
    """Convert a key to lowerCamelCase (``price-quotes`` -> ``priceQuotes``)."""
    words = split_words(key)
    if not words:
        return key
    first, *rest = words
    return first.lower() + "".join(word[:1].upper() + word[1:].lower() for word in rest)


_CONVERTERS = {
    KEBAB: to_kebab_case,
    CAMEL: to_camel_case,
}


def ensure_list(value: Any) -> list[Any]:
    """Coerce a repeated-element value to a list.

    xmltodict yields a bare node for one occurrence and a list for several,
    so every collection read from the wire goes through here first.
    """
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def children_of(node: Any) -> Mapping[str, Any]:
    """Return the child mapping of an Element or mapping, else an empty dict."""
    if isinstance(node, Element):
        return node.children
    if isinstance(node, Mapping):
        return node
    return {}


def normalize_object(
    node: Any,
    key_style: KeyStyle,
    drop_attributes: bool = False,
) -> Any:
    """Recursively rewrite keys and unwrap attribute/text elements.

    Args:
        node: Wire Tree, application object, or any mix of the two.
        key_style: ``"kebab"`` for the wire format, ``"camel"`` for callers.
        drop_attributes: Discard XML attributes instead of keeping them.

    Returns:
        A new structure; the input is never mutated. Elements collapse to
        their text when they have no children and no attributes that must be
        kept, become plain dicts when nothing but children remains, and stay
        Elements (with converted children) otherwise.
    """
    try:
        convert = _CONVERTERS[key_style]
    except KeyError:
        raise ValueError(f"Unknown key style: {key_style!r}") from None
    return _normalize(node, convert, drop_attributes)


def _normalize(node: Any, convert, drop_attributes: bool) -> Any:
    if isinstance(node, list):
        return [_normalize(item, convert, drop_attributes) for item in node]

    if isinstance(node, Element):
        attributes = {} if drop_attributes else dict(node.attributes)
        if node.text is not None and not node.children and not attributes:
            return _normalize(node.text, convert, drop_attributes)

        children = _normalize_mapping(node.children, convert, drop_attributes)
        if not attributes and node.text is None:
            return children
        return Element(attributes=attributes, text=node.text, children=children)

    if isinstance(node, Mapping):
        return _normalize_mapping(node, convert, drop_attributes)

    return node


def _normalize_mapping(mapping: Mapping[str, Any], convert, drop_attributes: bool) -> dict[str, Any]:
    return {
        convert(key): _normalize(value, convert, drop_attributes)
        for key, value in mapping.items()
    }
