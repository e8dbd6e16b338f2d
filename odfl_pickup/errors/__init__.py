"""Error handling framework for the ODFL pickup client.

This package provides:
- Error code registry with E-XXXX format codes
- Typed exceptions for each pipeline stage
- ODFL fault translation to friendly messages

Error categories:
- E-2xxx: Request serialization errors
- E-3xxx: Transport and decoding errors
- E-4xxx: Carrier fault errors
"""

from odfl_pickup.errors.exceptions import (
    CarrierFaultError,
    DecodeError,
    PickupError,
    ReadError,
    SerializationError,
    TransmissionError,
)
from odfl_pickup.errors.fault_translation import (
    FAULT_CODE_MAP,
    translate_fault,
)
from odfl_pickup.errors.registry import (
    ERROR_REGISTRY,
    ErrorCategory,
    ErrorCode,
    get_error,
    get_errors_by_category,
)

__all__ = [
    # Registry
    "ErrorCode",
    "ErrorCategory",
    "ERROR_REGISTRY",
    "get_error",
    "get_errors_by_category",
    # Exceptions
    "PickupError",
    "SerializationError",
    "TransmissionError",
    "ReadError",
    "DecodeError",
    "CarrierFaultError",
    # Fault translation
    "translate_fault",
    "FAULT_CODE_MAP",
]
