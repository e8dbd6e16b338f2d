"""Root-level pytest fixtures for all tests.

Provides:
- Minimal valid shipper, consignee and pickup request fixtures
- A fresh ModeController per test
- Reset of the process-wide controller between tests
- A MockTransport-backed httpx client factory
- A real local HTTP server that answers slowly
"""

import threading
import time
from collections.abc import Callable, Generator
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import httpx
import pytest

from odfl_pickup import mode as mode_module
from odfl_pickup.mode import ModeController
from odfl_pickup.models import ConsigneeInfo, PickupRequest, ShipperInfo


# ============================================================================
# Mode Controller
# ============================================================================


@pytest.fixture(autouse=True)
def reset_default_mode(monkeypatch) -> Generator[None, None, None]:
    """Give each test a pristine process-wide controller."""
    monkeypatch.setattr(mode_module, "_default_controller", ModeController())
    yield


@pytest.fixture
def controller() -> ModeController:
    """Fresh controller in test mode with default timeout."""
    return ModeController()


# ============================================================================
# Request data
# ============================================================================


@pytest.fixture
def shipper() -> ShipperInfo:
    """Shipper with every required field populated."""
    return ShipperInfo(
        odfl4me_user="acme_shipping",
        odfl4me_password="hunter2",
        company_name="Acme Widgets",
        address_line1="100 Industrial Way",
        city="Greensboro",
        state_province="NC",
        postal_code="27409",
        country="USA",
        contact_first_name="Dana",
        contact_last_name="Reyes",
        phone_area_code="336",
        phone_number="5550100",
        pickup_date="20261020",
        pickup_time="013000",
        pickup_time_ampm="PM",
        who_entered="Dana Reyes",
        who_phone_number="3365550100",
    )


@pytest.fixture
def consignee() -> ConsigneeInfo:
    """Consignee from the end-to-end scenario: 1 skid, 150.5 lb."""
    return ConsigneeInfo(
        customer_shipment_id="PO-1001",
        city="Atlanta",
        state_province="GA",
        postal_code="30301",
        country="USA",
        phone_area_code="404",
        phone_number="5550199",
        handling_units=1,
        pieces=1,
        unit_type="SKID",
        weight=150.5,
    )


@pytest.fixture
def pickup_request(shipper, consignee) -> PickupRequest:
    """Minimal valid pickup request."""
    return PickupRequest(shipper=shipper, consignee=consignee)


# ============================================================================
# HTTP
# ============================================================================


@pytest.fixture
def mock_http():
    """Build an httpx.Client whose requests are answered by ``handler``."""
    clients: list[httpx.Client] = []

    def _make(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.Client:
        client = httpx.Client(transport=httpx.MockTransport(handler))
        clients.append(client)
        return client

    yield _make
    for client in clients:
        client.close()


class _SlowHandler(BaseHTTPRequestHandler):
    """Answers POSTs late, or one byte at a time, per the server's settings."""

    def do_POST(self):
        self.rfile.read(int(self.headers.get("Content-Length", 0)))
        time.sleep(self.server.header_delay)
        body = b"<ok>12345</ok>"
        try:
            self.send_response(200)
            self.send_header("Content-Type", "text/xml")
            self.send_header("Content-Length", str(len(body)))
            self.end_headers()
            for i in range(len(body)):
                self.wfile.write(body[i:i + 1])
                self.wfile.flush()
                time.sleep(self.server.byte_interval)
        except ConnectionError:
            pass

    def log_message(self, format, *args):
        pass


@pytest.fixture
def slow_server() -> Generator[ThreadingHTTPServer, None, None]:
    """Local HTTP server on 127.0.0.1 that can stall headers or trickle the body.

    Set ``header_delay`` and ``byte_interval`` (seconds) on the yielded
    server; ``server.url`` is its endpoint.
    """
    server = ThreadingHTTPServer(("127.0.0.1", 0), _SlowHandler)
    server.daemon_threads = True
    server.header_delay = 0.0
    server.byte_interval = 0.0
    server.url = f"http://127.0.0.1:{server.server_address[1]}/soap"
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield server
    server.shutdown()
    server.server_close()
    thread.join(timeout=5)
