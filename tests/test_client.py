"""End-to-end tests for PickupClient against a mocked ODFL endpoint."""

import xml.etree.ElementTree as ET

import httpx
import pytest

from odfl_pickup import request_pickup, set_production_mode
from odfl_pickup.client import PickupClient
from odfl_pickup.envelope import PICKUP_NAMESPACE, SOAPENV_NAMESPACE
from odfl_pickup.errors import DecodeError, TransmissionError
from odfl_pickup.mode import ModeController, PickupSettings

_PICKUP_PATH = "{%s}Header/{%s}Body/{%s}pickupRequest" % (
    SOAPENV_NAMESPACE, SOAPENV_NAMESPACE, PICKUP_NAMESPACE,
)


def _test_flag_sent(request: httpx.Request) -> str:
    root = ET.fromstring(request.content)
    return root.find(_PICKUP_PATH).findtext("shipper/testFlag")


class TestRequestPickup:
    """build → serialize → transmit → decode."""

    def test_end_to_end_test_mode(self, pickup_request, mock_http):
        """1 skid, 150.5 lb, echo of confirmationNumber=TEST123."""
        sent = {}

        def handler(request):
            sent["flag"] = _test_flag_sent(request)
            return httpx.Response(200, json={"confirmationNumber": "TEST123"})

        result = request_pickup(pickup_request, http_client=mock_http(handler))

        assert result.confirmation_number == "TEST123"
        assert result.fields == {"confirmationNumber": "TEST123"}
        assert result.is_confirmed
        assert sent["flag"] == "true"

    def test_production_mode_sends_false_flag(self, pickup_request, mock_http):
        sent = {}

        def handler(request):
            sent["flag"] = _test_flag_sent(request)
            return httpx.Response(200, json={"confirmationNumber": "LIVE1"})

        set_production_mode(True)
        set_production_mode(False)
        request_pickup(pickup_request, http_client=mock_http(handler))
        assert sent["flag"] == "false"

    def test_caller_test_flag_ignored(self, pickup_request, mock_http):
        """A caller-set flag never reaches the wire."""
        sent = {}

        def handler(request):
            sent["flag"] = _test_flag_sent(request)
            return httpx.Response(200, json={"confirmationNumber": "X"})

        pickup_request.shipper.test_flag = False
        request_pickup(pickup_request, http_client=mock_http(handler))
        assert sent["flag"] == "true"

    def test_explicit_settings_override_controller(self, pickup_request, mock_http):
        """Settings passed per call win over the controller."""
        sent = {}

        def handler(request):
            sent["url"] = str(request.url)
            sent["flag"] = _test_flag_sent(request)
            return httpx.Response(200, json={"confirmationNumber": "X"})

        settings = PickupSettings(production_mode=True, endpoint_url="https://odfl.example.test/pickup")
        request_pickup(pickup_request, settings=settings, http_client=mock_http(handler))
        assert sent == {"url": "https://odfl.example.test/pickup", "flag": "false"}

    def test_dedicated_controller(self, pickup_request, mock_http):
        """A client bound to its own controller ignores the default one."""
        own = ModeController()
        own.set_production_mode(True)
        sent = {}

        def handler(request):
            sent["flag"] = _test_flag_sent(request)
            return httpx.Response(200, json={"confirmationNumber": "X"})

        PickupClient(mode=own, http_client=mock_http(handler)).request_pickup(pickup_request)
        assert sent["flag"] == "false"

    def test_fault_reply_returned_not_raised(self, pickup_request, mock_http):
        """Carrier faults come back on the result for the caller to inspect."""
        fault = (
            b"<soapenv:Envelope xmlns:soapenv='http://schemas.xmlsoap.org/soap/envelope/'>"
            b"<soapenv:Body><soapenv:Fault><faultcode>soapenv:Client</faultcode>"
            b"<faultstring>Invalid pickup date</faultstring></soapenv:Fault>"
            b"</soapenv:Body></soapenv:Envelope>"
        )

        def handler(request):
            return httpx.Response(500, content=fault)

        result = request_pickup(pickup_request, http_client=mock_http(handler))
        assert result.is_fault
        assert not result.is_confirmed


class TestRequestPickupFailures:

    def test_timeout_gives_no_result(self, pickup_request, mock_http):
        def handler(request):
            raise httpx.ConnectTimeout("timed out", request=request)

        with pytest.raises(TransmissionError):
            request_pickup(pickup_request, http_client=mock_http(handler))

    def test_undecodable_reply(self, pickup_request, mock_http):
        def handler(request):
            return httpx.Response(200, content=b"<html><body>Service Unavailable")

        with pytest.raises(DecodeError):
            request_pickup(pickup_request, http_client=mock_http(handler))

    def test_no_retry_on_failure(self, pickup_request, mock_http):
        """A failed POST is attempted exactly once."""
        calls = []

        def handler(request):
            calls.append(request)
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(TransmissionError):
            request_pickup(pickup_request, http_client=mock_http(handler))
        assert len(calls) == 1

    def test_controller_timeout_bounds_slow_reply(self, pickup_request, slow_server):
        """set_timeout caps a reply that trickles in byte by byte."""
        slow_server.byte_interval = 0.3
        mode = ModeController(endpoint_url=slow_server.url)
        mode.set_timeout(1.0)

        with httpx.Client(trust_env=False) as http_client:
            with pytest.raises(TransmissionError) as exc_info:
                PickupClient(mode=mode, http_client=http_client).request_pickup(pickup_request)
        assert exc_info.value.code == "E-3002"
