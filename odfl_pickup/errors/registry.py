"""Error code registry with E-XXXX format codes.

This module defines the error code system for the pickup client, organizing
errors into categories:
- E-2xxx: Request serialization errors
- E-3xxx: Transport and decoding errors
- E-4xxx: Carrier (ODFL) fault errors

Each error includes a code, title, message template, and remediation steps.
"""

from dataclasses import dataclass
from enum import Enum

# Appended to every remediation where a blind retry could double-book.
_DUPLICATE_WARNING = (
    "Pickup requests are not idempotent: confirm with ODFL that no pickup "
    "was scheduled before retrying."
)


class ErrorCategory(str, Enum):
    """Categories for error codes."""

    SERIALIZATION = "serialization"  # E-2xxx
    TRANSPORT = "transport"  # E-3xxx
    CARRIER = "carrier"  # E-4xxx


@dataclass
class ErrorCode:
    """Definition of an error code with metadata.

    Attributes:
        code: Error code in E-XXXX format.
        category: Error category for grouping.
        title: Short title for display.
        message_template: Message with {placeholders} for context.
        remediation: Action user should take to resolve.
        is_retryable: Whether the operation can be retried without user action.
    """

    code: str
    category: ErrorCategory
    title: str
    message_template: str
    remediation: str
    is_retryable: bool = False


ERROR_REGISTRY: dict[str, ErrorCode] = {
    # Serialization errors (E-2xxx)
    "E-2001": ErrorCode(
        code="E-2001",
        category=ErrorCategory.SERIALIZATION,
        title="Envelope Serialization Failed",
        message_template="Could not build the pickup envelope: {reason}",
        remediation="Check that every required shipper and consignee field is set.",
    ),
    # Transport errors (E-3xxx)
    "E-3001": ErrorCode(
        code="E-3001",
        category=ErrorCategory.TRANSPORT,
        title="Carrier Unreachable",
        message_template="Could not POST the pickup request to {url}: {reason}",
        remediation="Check network connectivity to ODFL. " + _DUPLICATE_WARNING,
    ),
    "E-3002": ErrorCode(
        code="E-3002",
        category=ErrorCategory.TRANSPORT,
        title="Carrier Timeout",
        message_template="No reply from {url} within {timeout} seconds.",
        remediation="Increase the timeout with set_timeout(). " + _DUPLICATE_WARNING,
    ),
    "E-3003": ErrorCode(
        code="E-3003",
        category=ErrorCategory.TRANSPORT,
        title="Response Read Failed",
        message_template="Could not read the carrier response: {reason}",
        remediation=_DUPLICATE_WARNING,
    ),
    "E-3004": ErrorCode(
        code="E-3004",
        category=ErrorCategory.TRANSPORT,
        title="Response Decode Failed",
        message_template="Could not decode the carrier response: {reason}",
        remediation="Inspect the raw response body. " + _DUPLICATE_WARNING,
    ),
    # Carrier faults (E-4xxx)
    "E-4001": ErrorCode(
        code="E-4001",
        category=ErrorCategory.CARRIER,
        title="Carrier Authentication Failed",
        message_template="ODFL rejected the odfl4me credentials: {carrier_message}",
        remediation="Verify the odfl4me user and password.",
    ),
    "E-4002": ErrorCode(
        code="E-4002",
        category=ErrorCategory.CARRIER,
        title="Invalid Unit Type",
        message_template="ODFL rejected the unit type: {carrier_message}",
        remediation="Use one of BDL, CRT, CTN, DRUM, SKID or OTH.",
    ),
    "E-4003": ErrorCode(
        code="E-4003",
        category=ErrorCategory.CARRIER,
        title="Invalid Pickup Date or Time",
        message_template="ODFL rejected the pickup date or time: {carrier_message}",
        remediation="Use yyyymmdd dates and hhmmss times with an AM/PM designator.",
    ),
    "E-4004": ErrorCode(
        code="E-4004",
        category=ErrorCategory.CARRIER,
        title="Carrier Service Unavailable",
        message_template="ODFL pickup service is unavailable: {carrier_message}",
        remediation="Wait a few minutes and retry.",
        is_retryable=True,
    ),
    "E-4005": ErrorCode(
        code="E-4005",
        category=ErrorCategory.CARRIER,
        title="Invalid Address",
        message_template="ODFL rejected an address: {carrier_message}",
        remediation="Check city, state/province, postal code and country.",
    ),
    "E-4999": ErrorCode(
        code="E-4999",
        category=ErrorCategory.CARRIER,
        title="Carrier Fault",
        message_template="ODFL returned a fault: {carrier_message}",
        remediation="Contact ODFL with this message. " + _DUPLICATE_WARNING,
    ),
}


def get_error(code: str) -> ErrorCode | None:
    """Get error definition by code.

    Args:
        code: Error code in E-XXXX format.

    Returns:
        ErrorCode if found, None otherwise.
    """
    return ERROR_REGISTRY.get(code)


def get_errors_by_category(category: ErrorCategory) -> list[ErrorCode]:
    """Get all errors in a category.

    Args:
        category: The error category to filter by.

    Returns:
        List of ErrorCode objects in the specified category.
    """
    return [e for e in ERROR_REGISTRY.values() if e.category == category]
