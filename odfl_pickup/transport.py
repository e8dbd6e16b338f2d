"""HTTP transport for the ODFL pickup endpoint.

POSTs the serialized envelope and hands back the raw body. ODFL returns
SOAP faults inside the body, frequently with a 500 status, so the status
code is logged but never turned into an error here.
"""

import logging
import time

import httpx

from odfl_pickup.errors import ReadError, TransmissionError
from odfl_pickup.mode import PickupSettings

logger = logging.getLogger(__name__)

_OPERATION = "odfl_pickup.post_envelope"

SOAP_HEADERS = {
    "Content-Type": "text/xml; charset=utf-8",
    "SOAPAction": '""',
}


def post_envelope(
    payload: bytes,
    settings: PickupSettings,
    client: httpx.Client | None = None,
) -> bytes:
    """POST an envelope to ODFL and return the response body verbatim.

    Args:
        payload: Serialized SOAP envelope.
        settings: Settings snapshot supplying endpoint URL and timeout.
        client: Optional httpx client to send through. When omitted a
            client is created for this call and closed afterwards.

    Returns:
        Raw response body bytes.

    Raises:
        TransmissionError: On connection failure, timeout, or other
            transport-level fault. No retry is attempted.
        ReadError: If the response body could not be read or decoded.

    The whole exchange, body included, is bounded by ``settings.timeout``.
    """
    owns_client = client is None
    if owns_client:
        client = httpx.Client()
    try:
        return _send(client, payload, settings)
    finally:
        if owns_client:
            client.close()


def _send(client: httpx.Client, payload: bytes, settings: PickupSettings) -> bytes:
    url = settings.endpoint_url
    timeout = httpx.Timeout(settings.timeout)
    # httpx timeouts apply per phase; the deadline bounds the whole exchange
    deadline = time.monotonic() + settings.timeout
    logger.info("POST %s (%d bytes, timeout=%ss)", url, len(payload), settings.timeout)

    try:
        with client.stream(
            "POST", url, content=payload, headers=SOAP_HEADERS, timeout=timeout,
        ) as response:
            if not response.is_success:
                logger.warning(
                    "ODFL responded with HTTP %d; decoding body anyway",
                    response.status_code,
                )
            try:
                body = _read_until(response, deadline)
            except httpx.TimeoutException as exc:
                raise _timeout_error(url, settings) from exc
            except (httpx.TransportError, httpx.StreamError, httpx.DecodingError) as exc:
                raise ReadError.from_code(
                    "E-3003", operation=_OPERATION, reason=str(exc) or type(exc).__name__,
                ) from exc
    except httpx.TimeoutException as exc:
        raise _timeout_error(url, settings) from exc
    except httpx.RequestError as exc:
        logger.error("Could not reach %s: %s", url, exc)
        raise TransmissionError.from_code(
            "E-3001", operation=_OPERATION, url=url, reason=str(exc) or type(exc).__name__,
        ) from exc

    logger.debug("ODFL returned %d bytes (HTTP %d)", len(body), response.status_code)
    return body


def _read_until(response: httpx.Response, deadline: float) -> bytes:
    """Read the whole body, giving up once ``deadline`` has passed.

    Raises:
        httpx.ReadTimeout: If the deadline passes before the body ends.
    """
    chunks: list[bytes] = []
    if time.monotonic() > deadline:
        raise httpx.ReadTimeout("deadline passed before body", request=response.request)
    for chunk in response.iter_bytes():
        chunks.append(chunk)
        if time.monotonic() > deadline:
            raise httpx.ReadTimeout("deadline passed mid-body", request=response.request)
    return b"".join(chunks)


def _timeout_error(url: str, settings: PickupSettings) -> TransmissionError:
    logger.error("Timed out after %ss waiting for %s", settings.timeout, url)
    return TransmissionError.from_code(
        "E-3002", operation=_OPERATION, url=url, timeout=settings.timeout,
    )
