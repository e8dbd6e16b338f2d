"""Secret redaction utility for safe logging and error messages.

The pickup envelope carries the odfl4me password in clear text, and ODFL
replies are logged at INFO. Everything that reaches a log line passes
through one of these helpers first.
"""

import re

# Substring patterns matched case-insensitively against dict keys
_DEFAULT_SENSITIVE_PATTERNS = frozenset({
    "secret", "token", "authorization", "password", "credential",
})

_REDACTED = "***REDACTED***"

# Element text of any tag whose local name contains "password"
_XML_SECRET_PATTERN = re.compile(
    r"(<(?P<tag>[\w:.-]*[Pp]assword[\w.-]*)(?:\s[^>]*)?>)[^<]*(</(?P=tag)>)"
)


def _is_sensitive_key(key: str, sensitive_patterns: frozenset[str]) -> bool:
    """Check if a key matches any sensitive pattern (case-insensitive substring).

    Args:
        key: Dict key to check.
        sensitive_patterns: Patterns to match against.

    Returns:
        True if the key matches any sensitive pattern.
    """
    key_lower = key.lower()
    return any(pattern in key_lower for pattern in sensitive_patterns)


def redact_for_logging(
    obj: dict,
    sensitive_patterns: frozenset[str] = _DEFAULT_SENSITIVE_PATTERNS,
) -> dict:
    """Redact sensitive values from a dict for safe logging.

    Args:
        obj: Dict to redact (not mutated; a copy is returned).
        sensitive_patterns: Substring patterns whose matching keys' values
            should be replaced. Matching is case-insensitive.

    Returns:
        New dict with sensitive values replaced by '***REDACTED***'.
        Handles nested dicts and lists of dicts recursively.
    """
    result = {}
    for key, value in obj.items():
        if _is_sensitive_key(key, sensitive_patterns):
            result[key] = _REDACTED
        elif isinstance(value, dict):
            result[key] = redact_for_logging(value, sensitive_patterns)
        elif isinstance(value, list):
            result[key] = [
                redact_for_logging(item, sensitive_patterns) if isinstance(item, dict) else item
                for item in value
            ]
        else:
            result[key] = value
    return result


def redact_xml(document: str) -> str:
    """Mask the text of password elements in an XML string.

    Args:
        document: Serialized XML.

    Returns:
        The document with e.g. ``<odfl4mePassword>...</odfl4mePassword>``
        content replaced by '***REDACTED***'.
    """
    return _XML_SECRET_PATTERN.sub(rf"\1{_REDACTED}\3", document)


def truncate_for_message(text: str, max_length: int = 500) -> str:
    """Shorten text for inclusion in an error message.

    Args:
        text: Text to shorten.
        max_length: Maximum length of the result.

    Returns:
        Redacted text, truncated with '...' when longer than max_length.
    """
    text = redact_xml(text)
    if len(text) > max_length:
        text = text[:max_length - 3] + "..."
    return text
