"""ODFL pickup client.

Schedules Old Dominion Freight Line LTL (less than truckload) pickups
through the ODFL pickup SOAP service.

To request a pickup:
- Choose test or production mode (set_production_mode()).
- Describe the shipper (ShipperInfo) and the shipment (ConsigneeInfo).
- Wrap them in a PickupRequest.
- Call request_pickup() and check the PickupResult.
"""

from odfl_pickup.client import PickupClient, request_pickup
from odfl_pickup.config import PickupConfig, apply_config, load_config
from odfl_pickup.errors import (
    CarrierFaultError,
    DecodeError,
    PickupError,
    ReadError,
    SerializationError,
    TransmissionError,
)
from odfl_pickup.mode import (
    ModeController,
    PickupSettings,
    force_test_mode,
    get_settings,
    set_production_mode,
    set_timeout,
)
from odfl_pickup.models import (
    ConsigneeInfo,
    PaymentMethod,
    PickupRequest,
    PickupResult,
    ShipperInfo,
    UnitType,
)

__version__ = "1.0.0"
__all__ = [
    # Client
    "PickupClient",
    "request_pickup",
    # Models
    "ShipperInfo",
    "ConsigneeInfo",
    "PickupRequest",
    "PickupResult",
    "UnitType",
    "PaymentMethod",
    # Mode
    "ModeController",
    "PickupSettings",
    "set_production_mode",
    "force_test_mode",
    "set_timeout",
    "get_settings",
    # Config
    "PickupConfig",
    "load_config",
    "apply_config",
    # Errors
    "PickupError",
    "SerializationError",
    "TransmissionError",
    "ReadError",
    "DecodeError",
    "CarrierFaultError",
]
