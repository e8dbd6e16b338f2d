"""ODFL fault translation to pickup error codes.

ODFL reports rejections either as a SOAP Fault or as error fields inside
an otherwise normal reply. This module maps what is recognisable to the
E-4xxx codes in the registry so callers get an actionable message.
"""

from odfl_pickup.errors.registry import get_error

# Exact SOAP faultcode values (namespace prefix stripped)
FAULT_CODE_MAP: dict[str, str] = {
    "AuthenticationFailed": "E-4001",
    "InvalidUser": "E-4001",
    "InvalidUnitType": "E-4002",
    "InvalidPickupDate": "E-4003",
    "InvalidPickupTime": "E-4003",
    "ServiceUnavailable": "E-4004",
    "Server.Unavailable": "E-4004",
}

# Substrings matched case-insensitively against the fault message
FAULT_MESSAGE_PATTERNS: dict[str, str] = {
    "password": "E-4001",
    "odfl4me": "E-4001",
    "unauthorized": "E-4001",
    "unit type": "E-4002",
    "unittype": "E-4002",
    "pickup date": "E-4003",
    "pickup time": "E-4003",
    "unavailable": "E-4004",
    "postal code": "E-4005",
    "zip": "E-4005",
    "invalid city": "E-4005",
}


def _strip_prefix(code: str) -> str:
    """Drop a namespace prefix such as ``soapenv:`` from a fault code."""
    return code.rsplit(":", 1)[-1]


def translate_fault(
    fault_code: str | None,
    fault_message: str | None,
) -> tuple[str, str, str, bool]:
    """Translate an ODFL fault to a pickup error code.

    Args:
        fault_code: SOAP faultcode or carrier error code.
        fault_message: SOAP faultstring or carrier error message.

    Returns:
        Tuple of (error_code, formatted_message, remediation, is_retryable).
    """
    carrier_message = fault_message or f"Code: {fault_code}"

    code = None
    if fault_code:
        code = FAULT_CODE_MAP.get(_strip_prefix(fault_code))
    if code is None and fault_message:
        lowered = fault_message.lower()
        for pattern, mapped in FAULT_MESSAGE_PATTERNS.items():
            if pattern in lowered:
                code = mapped
                break

    error = get_error(code or "E-4999")
    if error is None:
        return (
            "E-4999",
            f"ODFL fault: {carrier_message}",
            "Contact ODFL with this message.",
            False,
        )
    return (
        error.code,
        error.message_template.format(carrier_message=carrier_message),
        error.remediation,
        error.is_retryable,
    )
