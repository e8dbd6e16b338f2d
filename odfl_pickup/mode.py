"""Process-wide test/production mode and transport settings.

A freshly imported process is in test mode: ODFL receives
``testFlag=true`` and no real truck is dispatched. ``set_production_mode``
only ever promotes to production; ``set_production_mode(False)`` is a
no-op. ``force_test_mode`` is the explicit way back.

Each pickup call reads a single ``PickupSettings`` snapshot, so a mode or
timeout change made concurrently lands either before or after that call,
never halfway through it.
"""

import logging
import threading

from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT_URL = "http://www.odfl.com/wsPickup_v1b/services/ODPickupSOAP"

DEFAULT_TIMEOUT_SECONDS = 10.0


class PickupSettings(BaseModel):
    """Immutable settings snapshot used for one pickup call."""

    model_config = ConfigDict(frozen=True)

    production_mode: bool = False
    timeout: float = DEFAULT_TIMEOUT_SECONDS
    endpoint_url: str = DEFAULT_ENDPOINT_URL

    @property
    def test_flag(self) -> bool:
        """Value sent as ``testFlag``: true unless in production."""
        return not self.production_mode


class ModeController:
    """Lock-guarded holder of the production flag, timeout and endpoint."""

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        endpoint_url: str = DEFAULT_ENDPOINT_URL,
    ) -> None:
        self._lock = threading.Lock()
        self._settings = PickupSettings(timeout=timeout, endpoint_url=endpoint_url)

    def set_production_mode(self, enable: bool) -> None:
        """Promote to production mode when ``enable`` is true.

        Passing False leaves the current mode unchanged.
        """
        if not enable:
            return
        with self._lock:
            if not self._settings.production_mode:
                logger.warning("ODFL pickup client promoted to PRODUCTION mode")
            self._settings = self._settings.model_copy(update={"production_mode": True})

    def force_test_mode(self) -> None:
        """Drop back to test mode. Subsequent pickups are not dispatched."""
        with self._lock:
            if self._settings.production_mode:
                logger.warning("ODFL pickup client forced back to TEST mode")
            self._settings = self._settings.model_copy(update={"production_mode": False})

    def set_timeout(self, seconds: float) -> None:
        """Replace the HTTP timeout used by subsequent calls.

        Raises:
            ValueError: If seconds is not positive.
        """
        if seconds <= 0:
            raise ValueError(f"Timeout must be positive, got {seconds}")
        with self._lock:
            self._settings = self._settings.model_copy(update={"timeout": float(seconds)})
        logger.debug("ODFL pickup timeout set to %ss", seconds)

    def set_endpoint_url(self, url: str) -> None:
        with self._lock:
            self._settings = self._settings.model_copy(update={"endpoint_url": url})

    def snapshot(self) -> PickupSettings:
        """Return the current settings as an immutable snapshot."""
        with self._lock:
            return self._settings

    @property
    def production_mode(self) -> bool:
        return self.snapshot().production_mode

    @property
    def timeout(self) -> float:
        return self.snapshot().timeout


_default_controller = ModeController()


def get_mode_controller() -> ModeController:
    """Return the process-wide default controller."""
    return _default_controller


def set_production_mode(enable: bool) -> None:
    """Promote the default controller to production (promote-only)."""
    _default_controller.set_production_mode(enable)


def force_test_mode() -> None:
    """Return the default controller to test mode."""
    _default_controller.force_test_mode()


def set_timeout(seconds: float) -> None:
    """Set the default controller's HTTP timeout in seconds."""
    _default_controller.set_timeout(seconds)


def get_settings() -> PickupSettings:
    """Snapshot the default controller's settings."""
    return _default_controller.snapshot()
