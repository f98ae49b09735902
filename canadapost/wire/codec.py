"""XML wire codec for Canada Post request and response bodies.

Uses xmltodict to convert XML to dict and back, then lifts xmltodict's
``@attribute`` / ``#text`` keys into a tagged ``Element`` node so that
attribute and text content can never be confused with real child elements.

A Wire Tree node is one of:
- a scalar (str, int, float, bool) or None for empty elements
- a list of nodes (repeated sibling elements)
- an Element carrying attributes, text and children
- a plain mapping (document root, or a payload built by the caller)
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any
from xml.parsers.expat import ExpatError

import xmltodict

_ATTR_PREFIX = "@"
_TEXT_KEY = "#text"


@dataclass
class Element:
    """An XML element that has attributes, text mixed with children, or both.

    Attributes:
        attributes: XML attribute name -> value, kept verbatim.
        text: Text content, or None.
        children: Child element name -> node.
    """

    attributes: dict[str, Any] = field(default_factory=dict)
    text: Any = None
    children: dict[str, Any] = field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        """Return the child named ``key``, or ``default``."""
        return self.children.get(key, default)


class WireFormatError(ValueError):
    """Raised when a response body is not well-formed XML."""


def parse_xml(text: str | bytes | None) -> dict[str, Any] | None:
    """Parse an XML document into a Wire Tree.

    Args:
        text: Raw response body.

    Returns:
        ``{root_tag: node}``, or None for an empty body.

    Raises:
        WireFormatError: If the body is not well-formed XML.
    """
    if text is None or not text.strip():
        return None
    try:
        raw = xmltodict.parse(text, attr_prefix=_ATTR_PREFIX, cdata_key=_TEXT_KEY)
    except ExpatError as e:
        raise WireFormatError(f"Invalid XML in response body: {e}") from e
    return {key: _lift(value) for key, value in raw.items()}


def build_xml(tree: Mapping[str, Any]) -> str:
    """Serialize a Wire Tree with a single root element to an XML document.

    Args:
        tree: ``{root_tag: node}``.

    Returns:
        XML document text, including the XML declaration.
    """
    if len(tree) != 1:
        raise ValueError(f"XML document must have exactly one root, got {len(tree)}")
    return xmltodict.unparse(_lower(tree), full_document=True)


def _lift(value: Any) -> Any:
    """Convert xmltodict output into Wire Tree nodes."""
    if isinstance(value, list):
        return [_lift(item) for item in value]
    if not isinstance(value, Mapping):
        return value

    element = Element()
    for key, item in value.items():
        if key == _TEXT_KEY:
            element.text = item
        elif key.startswith(_ATTR_PREFIX):
            element.attributes[key[len(_ATTR_PREFIX):]] = item
        else:
            element.children[key] = _lift(item)
    return element


def _lower(node: Any) -> Any:
    """Convert Wire Tree nodes back into the dict shape xmltodict emits from."""
    if isinstance(node, list):
        return [_lower(item) for item in node]
    if isinstance(node, Element):
        out: dict[str, Any] = {
            f"{_ATTR_PREFIX}{name}": value for name, value in node.attributes.items()
        }
        if node.text is not None:
            out[_TEXT_KEY] = node.text
        out.update((key, _lower(child)) for key, child in node.children.items())
        return out
    if isinstance(node, Mapping):
        return {key: _lower(child) for key, child in node.items()}
    return node
