"""Connectivity state of external signing devices."""

from __future__ import annotations

import logging
import threading
from typing import Callable, Iterable

logger = logging.getLogger(__name__)


class HardwareStore:
    def __init__(self, connected: Iterable[str] | None = None):
        self._lock = threading.Lock()
        self._connected: set[str] = {addr.lower() for addr in connected or []}
        self._listeners: list[Callable[[], None]] = []

    def is_connected(self, address: str) -> bool:
        try:
            with self._lock:
                return address.lower() in self._connected
        except AttributeError:
            logger.warning("Invalid address in hardware lookup: %r", address)
            return False

    def set_connected(self, addresses: Iterable[str]) -> None:
        with self._lock:
            connected = {addr.lower() for addr in addresses}
            changed = connected != self._connected
            self._connected = connected
            listeners = list(self._listeners)
        if not changed:
            return
        logger.info("Hardware devices connected: %d", len(connected))
        for listener in listeners:
            try:
                listener()
            except Exception as e:
                logger.error("Error in hardware listener: %s", e)

    def subscribe(self, listener: Callable[[], None]) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe
