"""Canada Post error extraction and translation.

Canada Post reports problems inside an XML ``<messages>`` envelope, both on
error status codes and, for some services, on otherwise successful
responses:

    <messages xmlns="http://www.canadapost.ca/ws/messages">
      <message>
        <code>9111</code>
        <description>The destination postal code is invalid.</description>
      </message>
    </messages>

This module turns that envelope into a CanadaPostError, and checks that
successful responses carry the fields each operation expects.
"""

import json
import logging
from collections.abc import Sequence
from typing import Any, NoReturn

import httpx

from canadapost.errors.domain import CanadaPostError, CarrierMessage, ResultFormatError
from canadapost.utils.redaction import sanitize_message
from canadapost.wire.codec import Element, WireFormatError, parse_xml
from canadapost.wire.normalizer import CAMEL, children_of, ensure_list, normalize_object

logger = logging.getLogger(__name__)

# Cap for the structure snapshot attached to ResultFormatError
_SNAPSHOT_LIMIT = 2000


def extract_carrier_messages(tree: Any) -> list[CarrierMessage] | None:
    """Extract carrier messages from a parsed response.

    Handles both wire shapes of ``messages/message``: a single element or a
    list of elements.

    Args:
        tree: Parsed Wire Tree (``{root_tag: node}``) or None.

    Returns:
        List of messages, or None if the body is not a message envelope.
    """
    normalized = normalize_object(tree, CAMEL, drop_attributes=True)
    messages = children_of(normalized).get("messages")
    if not messages:
        return None

    entries = ensure_list(children_of(messages).get("message"))
    result = []
    for entry in entries:
        fields = children_of(entry)
        code = fields.get("code")
        description = fields.get("description")
        if code is None and description is None:
            continue
        result.append(
            CarrierMessage(
                code="" if code is None else str(code),
                description="" if description is None else str(description),
            )
        )
    return result or None


def build_carrier_error(
    source: str | CarrierMessage | Sequence[CarrierMessage],
    code: str | None = None,
) -> CanadaPostError:
    """Build a CanadaPostError from a description, one message or several.

    Args:
        source: Plain description (with ``code``), a single message, or a
            sequence of messages.
        code: Error code, only used when ``source`` is a plain string.

    Returns:
        CanadaPostError. With several messages, the message is one
        ``"{description} - (code {code})"`` line per message and the code is
        the comma-joined list of codes.
    """
    if isinstance(source, str):
        return CanadaPostError(code=code or "", message=source)

    if isinstance(source, CarrierMessage):
        return CanadaPostError(
            code=source.code,
            message=source.description,
            original_messages=[source],
        )

    messages = list(source)
    if len(messages) == 1:
        return build_carrier_error(messages[0])

    return CanadaPostError(
        code=",".join(m.code for m in messages),
        message="\n".join(f"{m.description} - (code {m.code})" for m in messages),
        original_messages=messages,
    )


def raise_for_carrier_error(tree: Any) -> None:
    """Raise CanadaPostError if ``tree`` is a carrier message envelope."""
    messages = extract_carrier_messages(tree)
    if messages:
        error = build_carrier_error(messages)
        logger.warning("Canada Post returned error %s: %s", error.code, error.message)
        raise error


def translate_error_response(error: httpx.HTTPStatusError) -> NoReturn:
    """Re-raise a non-2xx response as a carrier error when possible.

    Must be called from inside the ``except`` block handling ``error``.

    Raises:
        CanadaPostError: If the error body is a carrier message envelope.
        httpx.HTTPStatusError: The original error, unchanged, otherwise.
    """
    try:
        tree = parse_xml(error.response.text)
    except WireFormatError:
        logger.debug(
            "Error body for HTTP %s is not XML: %s",
            error.response.status_code,
            sanitize_message(error.response.text),
        )
        tree = None

    messages = extract_carrier_messages(tree)
    if messages:
        carrier_error = build_carrier_error(messages)
        logger.warning(
            "Canada Post returned HTTP %s with error %s: %s",
            error.response.status_code,
            carrier_error.code,
            carrier_error.message,
        )
        raise carrier_error from error

    raise error


def check_result_format(result: Any, path: str) -> Any:
    """Look up a dotted path and fail with a shape error if it is missing.

    Args:
        result: Normalized application object.
        path: Dotted path such as ``"priceQuotes.priceQuote"``.

    Returns:
        The value found at ``path``.

    Raises:
        ResultFormatError: If any segment is absent or None.
    """
    node = result
    for segment in path.split("."):
        fields = children_of(node)
        if fields.get(segment) is None:
            raise ResultFormatError(expected_path=path, actual=snapshot(result))
        node = fields[segment]
    return node


def snapshot(result: Any) -> str:
    """Serialize a structure for diagnostics, truncated to a readable size."""
    text = json.dumps(result, default=_jsonable, sort_keys=True)
    if len(text) > _SNAPSHOT_LIMIT:
        text = text[:_SNAPSHOT_LIMIT - 3] + "..."
    return text


def _jsonable(value: Any) -> Any:
    if isinstance(value, Element):
        return {
            "attributes": value.attributes,
            "text": value.text,
            "children": value.children,
        }
    return str(value)
