"""Decode ODFL replies into PickupResult.

Accepts the SOAP envelope ODFL normally answers with, a bare XML
document, or a JSON object (some ODFL test harnesses and proxies echo
JSON). The decoder only reshapes the reply: it surfaces a SOAP fault or
carrier error fields when it sees them, but deciding whether the pickup
was booked is left to the caller via ``PickupResult``.
"""

import json
import logging
from typing import Any
from xml.parsers.expat import ExpatError

import xmltodict

from odfl_pickup.errors import DecodeError
from odfl_pickup.models import PickupResult
from odfl_pickup.utils.redaction import truncate_for_message

logger = logging.getLogger(__name__)

_OPERATION = "odfl_pickup.decode_response"

# Checked in order against the last segment of each flattened key
CONFIRMATION_KEYS = (
    "confirmationnumber",
    "confirmationno",
    "pickupconfirmationnumber",
    "pickupnumber",
)
FAULT_CODE_KEYS = ("faultcode", "errorcode")
FAULT_MESSAGE_KEYS = ("faultstring", "errormessage", "errordescription")
# errorCode value ODFL sends alongside a successful reply
NO_ERROR_CODE = "0"

_UTF8_BOM = b"\xef\xbb\xbf"


def _decode_error(reason: str, body: bytes) -> DecodeError:
    snippet = truncate_for_message(body.decode("utf-8", errors="replace"))
    return DecodeError.from_code(
        "E-3004", operation=_OPERATION, reason=reason, details={"body": snippet},
    )


def _clean_xml(node: Any) -> Any:
    """Strip namespace prefixes, attributes and xmlns declarations.

    An element holding only text (plus attributes) collapses to its text.
    Mixed content keeps the text under ``#text`` beside the children.
    Siblings whose names clash once prefixes are stripped keep their
    prefixed names.
    """
    if isinstance(node, list):
        return [_clean_xml(item) for item in node]
    if not isinstance(node, dict):
        return node
    children = {key: value for key, value in node.items() if not key.startswith("@")}
    if list(children) == ["#text"]:
        return children["#text"]
    local_names = [key.rsplit(":", 1)[-1] for key in children]
    cleaned: dict[str, Any] = {}
    for key, value in children.items():
        local = key.rsplit(":", 1)[-1]
        cleaned[key if local_names.count(local) > 1 else local] = _clean_xml(value)
    return cleaned


def flatten_fields(record: dict[str, Any], separator: str = ".", prefix: str = "") -> dict[str, Any]:
    """Flatten nested dicts into one level, joining names with ``separator``.

    Lists are kept as values.
    """
    flat: dict[str, Any] = {}
    for key, value in record.items():
        full_key = f"{prefix}{separator}{key}" if prefix else key
        if isinstance(value, dict):
            flat.update(flatten_fields(value, separator, full_key))
        else:
            flat[full_key] = value
    return flat


def _find_body(envelope: dict[str, Any]) -> dict[str, Any] | None:
    """Locate Body directly under Envelope or nested inside Header."""
    if isinstance(envelope.get("Body"), dict):
        return envelope["Body"]
    header = envelope.get("Header")
    if isinstance(header, dict) and isinstance(header.get("Body"), dict):
        return header["Body"]
    return None


def _parse_xml(body: bytes) -> dict[str, Any]:
    try:
        raw = xmltodict.parse(body)
    except ExpatError as exc:
        raise _decode_error(f"malformed XML ({exc})", body) from exc

    document = _clean_xml(raw)
    root_name, root = next(iter(document.items()))

    if root_name == "Envelope":
        if not isinstance(root, dict):
            raise _decode_error("SOAP Envelope has no content", body)
        soap_body = _find_body(root)
        if soap_body is None:
            raise _decode_error("SOAP Envelope has no Body", body)
        if "Fault" in soap_body:
            fault = soap_body["Fault"]
            if not isinstance(fault, dict) or not fault:
                raise _decode_error("SOAP Fault has no faultcode or faultstring", body)
            return flatten_fields(fault)
        # Unwrap the single response element, e.g. pickupRequestResponse
        if len(soap_body) == 1:
            only = next(iter(soap_body.values()))
            if isinstance(only, dict):
                soap_body = only
        root = soap_body

    if not isinstance(root, dict) or not root:
        raise _decode_error(f"<{root_name}> holds no fields", body)
    return flatten_fields(root)


def _parse_json(body: bytes) -> dict[str, Any]:
    try:
        data = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise _decode_error(f"malformed JSON ({exc})", body) from exc
    if not isinstance(data, dict):
        raise _decode_error(f"expected a JSON object, got {type(data).__name__}", body)
    return data


def _leaf(key: str) -> str:
    """Last name in a flattened key, ignoring ``#text`` and prefixes."""
    segments = key.split(".")
    if segments[-1] == "#text" and len(segments) > 1:
        segments.pop()
    return segments[-1].rsplit(":", 1)[-1].lower()


def _pick(fields: dict[str, Any], candidates: tuple[str, ...]) -> str | None:
    """Return the first value whose key (last segment) matches a candidate."""
    by_leaf: dict[str, Any] = {}
    for key, value in fields.items():
        by_leaf.setdefault(_leaf(key), value)
    for candidate in candidates:
        value = by_leaf.get(candidate)
        if value not in (None, ""):
            return str(value)
    return None


def decode_response(body: bytes) -> PickupResult:
    """Decode a raw ODFL reply.

    Args:
        body: Raw response body.

    Returns:
        PickupResult with every field in ``fields`` plus the confirmation
        number and fault details when recognisable.

    Raises:
        DecodeError: If the body is empty, unparseable, or not a
            key/value document. No partial result is returned.
    """
    stripped = body.strip()
    if stripped.startswith(_UTF8_BOM):
        stripped = stripped[len(_UTF8_BOM):].lstrip()
    if not stripped:
        raise _decode_error("empty response body", body)

    if stripped.startswith(b"{") or stripped.startswith(b"["):
        fields = _parse_json(stripped)
    else:
        fields = _parse_xml(stripped)

    fault_code = _pick(fields, FAULT_CODE_KEYS)
    fault_message = _pick(fields, FAULT_MESSAGE_KEYS)
    if fault_code is not None and fault_code.strip() == NO_ERROR_CODE:
        fault_code = fault_message = None

    result = PickupResult(
        confirmation_number=_pick(fields, CONFIRMATION_KEYS),
        fault_code=fault_code,
        fault_message=fault_message,
        fields=fields,
    )
    if result.is_fault:
        logger.warning("ODFL fault %s: %s", result.fault_code, result.fault_message)
    return result
