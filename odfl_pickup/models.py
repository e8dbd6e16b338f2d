"""Pydantic models for ODFL pickup requests and results.

The request models hold every field the ODFL pickup service accepts.
Field names are Python names; the wire tag each one is serialized under
lives in ``odfl_pickup.envelope`` (SHIPPER_SCHEMA / CONSIGNEE_SCHEMA).

Example:
    request = PickupRequest(
        shipper=ShipperInfo(odfl4me_user="acme", ...),
        consignee=ConsigneeInfo(customer_shipment_id="PO-1001", ...),
    )
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from odfl_pickup.errors import CarrierFaultError, translate_fault


class UnitType(str, Enum):
    """ODFL handling unit codes. Not enforced on ConsigneeInfo."""

    BUNDLE = "BDL"
    CRATE = "CRT"
    CARTON = "CTN"
    DRUM = "DRUM"
    SKID = "SKID"
    OTHER = "OTH"


class PaymentMethod(str, Enum):
    """Freight payment terms."""

    PREPAID = "P"
    COLLECT = "C"


class ShipperInfo(BaseModel):
    """Pickup origin and the identity of whoever is requesting it."""

    model_config = ConfigDict(validate_assignment=True)

    # Required
    odfl4me_user: str
    odfl4me_password: str
    company_name: str
    address_line1: str
    city: str
    state_province: str  # two characters
    postal_code: str
    country: str  # USA, CAN or MEX
    contact_first_name: str
    contact_last_name: str
    phone_area_code: str  # no + or +1
    phone_number: str  # last 7 digits
    pickup_date: str  # yyyymmdd
    pickup_time: str  # hhmmss
    pickup_time_ampm: str
    who_entered: str
    who_phone_number: str
    # Overwritten from the mode controller before every serialization
    test_flag: bool = True

    # Optional
    account_number: str | None = None
    attention: str | None = None
    address_line2: str | None = None
    phone_ext: str | None = None  # digits only
    fax_area_code: str | None = None
    fax_number: str | None = None
    email: str | None = None
    comments: str | None = None
    dock_close_time: str | None = None  # hhmmss
    dock_close_ampm: str | None = None


class ConsigneeInfo(BaseModel):
    """Where the shipment is going and what the shipment is."""

    model_config = ConfigDict(validate_assignment=True)

    # Required
    customer_shipment_id: str
    city: str
    state_province: str
    postal_code: str
    country: str
    phone_area_code: str
    phone_number: str
    handling_units: int = Field(..., ge=0)
    pieces: int = Field(..., ge=0)
    unit_type: str  # see UnitType; ODFL validates the code
    weight: float = Field(..., ge=0)

    # Optional
    payment_method: str | None = None  # see PaymentMethod
    company_name: str | None = None
    address_line1: str | None = None
    address_line2: str | None = None
    contact_first_name: str | None = None
    contact_last_name: str | None = None
    phone_ext: str | None = None
    fax_area_code: str | None = None
    fax_number: str | None = None
    email: str | None = None
    hazmat: str | None = None
    freezable: str | None = None
    description: str | None = None


class PickupRequest(BaseModel):
    """One shipper plus one consignee, sent as a single pickup call.

    ``soapenv_attr`` and ``pic_attr`` are namespace declarations filled in
    by the envelope serializer; callers leave them empty.
    """

    model_config = ConfigDict(validate_assignment=True)

    shipper: ShipperInfo
    consignee: ConsigneeInfo
    soapenv_attr: str = ""
    pic_attr: str = ""


class PickupResult(BaseModel):
    """Decoded ODFL reply.

    Attributes:
        confirmation_number: Pickup confirmation, when ODFL returned one.
        fault_code: SOAP faultcode or carrier error code, if any.
        fault_message: SOAP faultstring or carrier error message, if any.
        fields: Every decoded field in document order.

    A result without a confirmation number must be treated as a failed
    pickup even when no fault was reported.
    """

    confirmation_number: str | None = None
    fault_code: str | None = None
    fault_message: str | None = None
    fields: dict[str, Any] = Field(default_factory=dict)

    @property
    def is_fault(self) -> bool:
        return self.fault_code is not None or self.fault_message is not None

    @property
    def is_confirmed(self) -> bool:
        return bool(self.confirmation_number) and not self.is_fault

    def raise_for_fault(self) -> "PickupResult":
        """Raise CarrierFaultError if ODFL reported a fault.

        Returns:
            This result, so calls can be chained.

        Raises:
            CarrierFaultError: With the translated E-4xxx code.
        """
        if not self.is_fault:
            return self
        code, message, remediation, retryable = translate_fault(
            self.fault_code, self.fault_message,
        )
        raise CarrierFaultError(
            code=code,
            message=message,
            operation="odfl_pickup.PickupResult.raise_for_fault",
            remediation=remediation,
            is_retryable=retryable,
            details={"fault_code": self.fault_code, "fault_message": self.fault_message},
        )
