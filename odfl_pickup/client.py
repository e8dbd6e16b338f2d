"""Schedule ODFL LTL pickups.

Typical use:

    from odfl_pickup import PickupClient, set_production_mode

    set_production_mode(True)  # omit to stay in test mode
    result = PickupClient().request_pickup(request)
    result.raise_for_fault()
    if not result.is_confirmed:
        ...  # treat as failed

Pickup scheduling is not idempotent. Nothing here retries, and a caller
that retries after a TransmissionError or ReadError may book the same
pickup twice.
"""

import logging

import httpx

from odfl_pickup.decoder import decode_response
from odfl_pickup.envelope import build_envelope
from odfl_pickup.mode import ModeController, PickupSettings, get_mode_controller
from odfl_pickup.models import PickupRequest, PickupResult
from odfl_pickup.transport import post_envelope
from odfl_pickup.utils.redaction import redact_for_logging

logger = logging.getLogger(__name__)


class PickupClient:
    """Builds, sends and decodes ODFL pickup requests.

    Args:
        mode: Controller to read settings from. Defaults to the
            process-wide controller.
        http_client: Optional httpx client reused across calls. The
            caller owns its lifecycle.
    """

    def __init__(
        self,
        mode: ModeController | None = None,
        http_client: httpx.Client | None = None,
    ) -> None:
        self._mode = mode or get_mode_controller()
        self._http_client = http_client

    def request_pickup(
        self,
        request: PickupRequest,
        settings: PickupSettings | None = None,
    ) -> PickupResult:
        """Schedule one pickup.

        Args:
            request: Shipper and consignee details.
            settings: Explicit settings for this call. When omitted, one
                snapshot of the mode controller is taken and used for the
                whole call.

        Returns:
            Decoded reply. Check ``is_confirmed``; a missing confirmation
            number means the pickup was not scheduled.

        Raises:
            SerializationError: Request could not be serialized; nothing
                was sent.
            TransmissionError: POST failed or timed out; the pickup may or
                may not exist.
            ReadError: Reply could not be read; the pickup may exist.
            DecodeError: Reply could not be parsed; the pickup may exist.
        """
        settings = settings or self._mode.snapshot()
        shipment_id = request.consignee.customer_shipment_id

        if settings.production_mode:
            logger.warning("Scheduling LIVE ODFL pickup for shipment %s", shipment_id)
        else:
            logger.info("Scheduling test ODFL pickup for shipment %s", shipment_id)

        payload = build_envelope(request, settings)
        body = post_envelope(payload, settings, client=self._http_client)
        result = decode_response(body)

        if result.is_confirmed:
            logger.info(
                "ODFL pickup confirmed for shipment %s: %s",
                shipment_id, result.confirmation_number,
            )
        else:
            logger.warning(
                "ODFL pickup for shipment %s not confirmed: %s",
                shipment_id, redact_for_logging(result.fields),
            )
        return result


def request_pickup(
    request: PickupRequest,
    settings: PickupSettings | None = None,
    http_client: httpx.Client | None = None,
) -> PickupResult:
    """Schedule one pickup using the process-wide mode controller.

    See ``PickupClient.request_pickup``.
    """
    return PickupClient(http_client=http_client).request_pickup(request, settings=settings)
