"""Credential redaction for request logging.

The client sends an HTTP Basic credential with every request and carries
the account password in its configuration. Anything the client logs goes
through these helpers first.
"""

import re
from collections.abc import Mapping
from typing import Any

# Substring patterns matched case-insensitively against keys
_DEFAULT_SENSITIVE_PATTERNS = frozenset({
    "authorization", "password", "secret", "token", "credential",
})

_REDACTED = "***REDACTED***"


def _is_sensitive_key(key: str, sensitive_patterns: frozenset[str]) -> bool:
    key_lower = key.lower()
    return any(pattern in key_lower for pattern in sensitive_patterns)


def redact_for_logging(
    obj: Mapping[str, Any],
    sensitive_patterns: frozenset[str] = _DEFAULT_SENSITIVE_PATTERNS,
) -> dict[str, Any]:
    """Redact sensitive values from a mapping (headers, config) for logging.

    Args:
        obj: Mapping to redact (not mutated, a copy is returned).
        sensitive_patterns: Substring patterns whose matching keys' values
            are replaced. Matching is case-insensitive.

    Returns:
        New dict with sensitive values replaced by '***REDACTED***'.
        Nested mappings are redacted recursively.
    """
    result: dict[str, Any] = {}
    for key, value in obj.items():
        if _is_sensitive_key(str(key), sensitive_patterns):
            result[key] = _REDACTED
        elif isinstance(value, Mapping):
            result[key] = redact_for_logging(value, sensitive_patterns)
        else:
            result[key] = value
    return result


# Basic/Bearer credentials and key=value pairs in free text
_SENSITIVE_VALUE_PATTERN = re.compile(
    r"(?i)"
    r"(?:"
    r"Authorization\s*:\s*(?:Basic|Bearer)\s+\S+"
    r"|"
    r"(?:password|secret|token)\s*[=:]\s*\S+"
    r")",
)


def sanitize_message(msg: str | None, max_length: int = 500) -> str | None:
    """Redact credentials from free text and truncate it for logging.

    Args:
        msg: Text to sanitize (None passes through).
        max_length: Maximum length of the result.

    Returns:
        Sanitized and truncated text, or None.
    """
    if msg is None:
        return None
    sanitized = _SENSITIVE_VALUE_PATTERN.sub(_REDACTED, msg)
    if len(sanitized) > max_length:
        sanitized = sanitized[:max_length - 3] + "..."
    return sanitized
