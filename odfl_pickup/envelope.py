"""SOAP envelope serializer for ODFL pickup requests.

The wire format is dictated by ODFL: every tag name below, the namespace
URIs, and the Header > Body > pickupRequest nesting must match what the
pickup service expects. The shape is held as data (SHIPPER_SCHEMA and
CONSIGNEE_SCHEMA) and rendered with xmltodict:

    <soapenv:Envelope xmlns:soapenv="..." xmlns:pic="...">
      <soapenv:Header>
        <soapenv:Body>
          <pic:pickupRequest>
            <shipper>...</shipper>
            <consignees><Consignee>...</Consignee></consignees>
          </pic:pickupRequest>
        </soapenv:Body>
      </soapenv:Header>
    </soapenv:Envelope>

Namespace attributes and the test flag are written onto the request by
``prepare_request`` before ``serialize_envelope`` runs. Serializing first
and patching the object afterwards would send the stale values.
"""

import logging
import re
from enum import Enum
from typing import Any, NamedTuple

import xmltodict
from pydantic import BaseModel

from odfl_pickup.errors import SerializationError
from odfl_pickup.mode import PickupSettings
from odfl_pickup.models import PickupRequest
from odfl_pickup.utils.redaction import redact_xml

logger = logging.getLogger(__name__)

SOAPENV_NAMESPACE = "http://schemas.xmlsoap.org/soap/envelope/"
PICKUP_NAMESPACE = "http://pickup.ws.odfl.com"

_OPERATION = "odfl_pickup.serialize_envelope"

# Anything outside the XML 1.0 Char production
_INVALID_XML_CHARS = re.compile(
    "[^\u0009\u000A\u000D\u0020-\uD7FF\uE000-\uFFFD\U00010000-\U0010FFFF]"
)


class FieldSpec(NamedTuple):
    """One model attribute and the ODFL tag it is sent as."""

    name: str
    tag: str
    required: bool


SHIPPER_SCHEMA: tuple[FieldSpec, ...] = (
    FieldSpec("odfl4me_user", "odfl4meUser", True),
    FieldSpec("odfl4me_password", "odfl4mePassword", True),
    FieldSpec("company_name", "companyName", True),
    FieldSpec("address_line1", "addressLine1", True),
    FieldSpec("city", "city", True),
    FieldSpec("state_province", "stateProvince", True),
    FieldSpec("postal_code", "postalCode", True),
    FieldSpec("country", "country", True),
    FieldSpec("contact_first_name", "contactFName", True),
    FieldSpec("contact_last_name", "contactLName", True),
    FieldSpec("phone_area_code", "phoneAreaCode", True),
    FieldSpec("phone_number", "phoneNumber", True),
    FieldSpec("test_flag", "testFlag", True),
    FieldSpec("pickup_date", "pickupDate", True),
    FieldSpec("pickup_time", "pickupTime", True),
    FieldSpec("pickup_time_ampm", "pickupTimeAMPM", True),
    FieldSpec("who_entered", "whoEntered", True),
    FieldSpec("who_phone_number", "whoPhoneNumber", True),
    FieldSpec("account_number", "accountNumber", False),
    FieldSpec("attention", "attention", False),
    FieldSpec("address_line2", "addressLine2", False),
    FieldSpec("phone_ext", "phoneExt", False),
    FieldSpec("fax_area_code", "faxAreaCode", False),
    FieldSpec("fax_number", "faxNumber", False),
    FieldSpec("email", "email", False),
    FieldSpec("comments", "comments", False),
    FieldSpec("dock_close_time", "dockCloseTime", False),
    FieldSpec("dock_close_ampm", "dockCloseAMPM", False),
)

CONSIGNEE_SCHEMA: tuple[FieldSpec, ...] = (
    FieldSpec("customer_shipment_id", "customerShipmentId", True),
    FieldSpec("city", "city", True),
    FieldSpec("state_province", "stateProvince", True),
    FieldSpec("postal_code", "postalCode", True),
    FieldSpec("country", "country", True),
    FieldSpec("phone_area_code", "phoneAreaCode", True),
    FieldSpec("phone_number", "phoneNumber", True),
    FieldSpec("handling_units", "handlingUnits", True),
    FieldSpec("pieces", "pieces", True),
    FieldSpec("unit_type", "unitType", True),
    FieldSpec("weight", "weight", True),
    FieldSpec("payment_method", "paymentMethod", False),
    FieldSpec("company_name", "companyName", False),
    FieldSpec("address_line1", "addressLine1", False),
    FieldSpec("address_line2", "addressLine2", False),
    FieldSpec("contact_first_name", "contactFName", False),
    FieldSpec("contact_last_name", "contactLName", False),
    FieldSpec("phone_ext", "phoneExt", False),
    FieldSpec("fax_area_code", "faxAreaCode", False),
    FieldSpec("fax_number", "faxNumber", False),
    FieldSpec("email", "email", False),
    FieldSpec("hazmat", "hazmat", False),
    FieldSpec("freezable", "freezable", False),
    FieldSpec("description", "description", False),
)


def _format_value(value: Any) -> str | None:
    """Render a model value as element text. None renders as an empty element."""
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return str(int(value)) if value.is_integer() else repr(value)
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def _render_section(
    model: BaseModel,
    schema: tuple[FieldSpec, ...],
    section: str,
) -> dict[str, str | None]:
    """Map a model onto its ordered wire tags.

    Raises:
        SerializationError: If a required field is None or a value holds
            characters XML 1.0 cannot carry.
    """
    rendered: dict[str, str | None] = {}
    for spec in schema:
        value = getattr(model, spec.name, None)
        if value is None and spec.required:
            raise SerializationError.from_code(
                "E-2001",
                operation=_OPERATION,
                reason=f"required field {section}.{spec.tag} is not set",
                details={"field": spec.name, "tag": spec.tag},
            )
        text = _format_value(value)
        if text is not None and (bad := _INVALID_XML_CHARS.search(text)):
            raise SerializationError.from_code(
                "E-2001",
                operation=_OPERATION,
                reason=(
                    f"{section}.{spec.tag} contains character "
                    f"U+{ord(bad.group()):04X}, which XML 1.0 does not allow"
                ),
                details={"field": spec.name, "tag": spec.tag},
            )
        rendered[spec.tag] = text
    return rendered


def prepare_request(request: PickupRequest, settings: PickupSettings) -> PickupRequest:
    """Inject namespace declarations and the test flag onto the request.

    Any test_flag the caller set is discarded in favour of the mode in
    ``settings``.
    """
    request.soapenv_attr = SOAPENV_NAMESPACE
    request.pic_attr = PICKUP_NAMESPACE
    request.shipper.test_flag = settings.test_flag
    return request


def serialize_envelope(request: PickupRequest) -> bytes:
    """Render a prepared request as the ODFL SOAP envelope.

    Args:
        request: Request already passed through ``prepare_request``.

    Returns:
        UTF-8 encoded XML document.

    Raises:
        SerializationError: If a required field is missing or a value
            cannot be encoded.
    """
    document = {
        "soapenv:Envelope": {
            "@xmlns:soapenv": request.soapenv_attr,
            "@xmlns:pic": request.pic_attr,
            "soapenv:Header": {
                "soapenv:Body": {
                    "pic:pickupRequest": {
                        "shipper": _render_section(request.shipper, SHIPPER_SCHEMA, "shipper"),
                        "consignees": {
                            "Consignee": _render_section(
                                request.consignee, CONSIGNEE_SCHEMA, "Consignee",
                            ),
                        },
                    },
                },
            },
        },
    }
    try:
        payload = xmltodict.unparse(document, encoding="utf-8").encode("utf-8")
    except (ValueError, TypeError, UnicodeError) as exc:
        raise SerializationError.from_code(
            "E-2001", operation=_OPERATION, reason=str(exc),
        ) from exc

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("ODFL pickup envelope: %s", redact_xml(payload.decode("utf-8")))
    return payload


def build_envelope(request: PickupRequest, settings: PickupSettings) -> bytes:
    """Prepare then serialize ``request`` for the mode in ``settings``."""
    return serialize_envelope(prepare_request(request, settings))
