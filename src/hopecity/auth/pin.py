"""Operator PIN for the admin panel when no remote store is configured."""

from __future__ import annotations

import hmac

import structlog

from hopecity.site_config.local_storage import PIN_STORAGE_KEY, LocalStorage

logger = structlog.get_logger()

DEFAULT_PIN = "1234"
MIN_PIN_LENGTH = 4


class PinGuard:
    def __init__(self, storage: LocalStorage) -> None:
        self._storage = storage

    def has_pin(self) -> bool:
        return bool(self._storage.get_item(PIN_STORAGE_KEY))

    def set_pin(self, pin: str) -> None:
        """Store a new PIN.

        Raises:
            ValueError: If *pin* is shorter than :data:`MIN_PIN_LENGTH`.
        """
        if len(pin) < MIN_PIN_LENGTH:
            raise ValueError(f"PIN must be at least {MIN_PIN_LENGTH} characters")
        self._storage.set_item(PIN_STORAGE_KEY, pin)
        logger.info("admin_pin_set")

    def verify(self, pin: str | None) -> bool:
        """Check *pin* against the stored PIN, or the default before one is set."""
        if pin is None:
            return False
        expected = self._storage.get_item(PIN_STORAGE_KEY) or DEFAULT_PIN
        return hmac.compare_digest(pin.encode(), expected.encode())
