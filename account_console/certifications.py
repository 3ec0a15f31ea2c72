"""Certification lookups and the background fetcher that feeds the store."""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Mapping, Protocol

import requests

from account_console.models import Certification, Certifier
from account_console.store import AccountStore

logger = logging.getLogger(__name__)


class CertificationError(Exception):
    """Raised when certification data cannot be retrieved."""


class CertificationSource(Protocol):
    def certifiers(self) -> list[Certifier]: ...
    def certifications(self, address: str) -> list[Certification]: ...


class HttpCertificationSource:
    def __init__(self, base_url: str, timeout: float = 10.0):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _get(self, path: str) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = requests.get(url, timeout=self.timeout)
        except requests.exceptions.Timeout as e:
            raise CertificationError(f"Request timed out: {url}") from e
        except requests.exceptions.RequestException as e:
            raise CertificationError(f"Connection error: {e}") from e

        if response.status_code != 200:
            raise CertificationError(f"HTTP {response.status_code} from {url}")
        try:
            return response.json()
        except ValueError as e:
            raise CertificationError(f"Invalid JSON from {url}") from e

    def certifiers(self) -> list[Certifier]:
        data = self._get("/certifiers")
        return [Certifier.from_dict(item) for item in data or []]

    def certifications(self, address: str) -> list[Certification]:
        data = self._get(f"/certifications/{address}")
        return [Certification.from_dict(item) for item in data or []]


class StaticCertificationSource:
    """Serves certifications from an in-memory mapping keyed by address."""

    def __init__(
        self,
        certifications: Mapping[str, list[dict[str, Any]]] | None = None,
        certifiers: list[dict[str, Any]] | None = None,
    ):
        self._certifications = dict(certifications or {})
        self._certifiers = list(certifiers or [])

    def certifiers(self) -> list[Certifier]:
        return [Certifier.from_dict(item) for item in self._certifiers]

    def certifications(self, address: str) -> list[Certification]:
        return [
            Certification.from_dict(item)
            for item in self._certifications.get(address, [])
        ]


class CertificationFetcher:
    """Fire-and-forget certification requests.

    Results are merged into the store only while the address is still in the
    visible set; anything arriving later is dropped.
    """

    def __init__(
        self,
        store: AccountStore,
        source: CertificationSource,
        background: bool = True,
    ):
        self.store = store
        self.source = source
        self.background = background

    def _run(self, name: str, work: Callable[[], None]) -> None:
        if not self.background:
            work()
            return
        threading.Thread(target=work, name=name, daemon=True).start()

    def fetch_certifiers(self) -> None:
        def worker() -> None:
            try:
                certifiers = self.source.certifiers()
            except Exception as e:
                logger.warning("Failed to fetch certifiers: %s", e)
                self.store.new_error(e)
                return
            self.store.set_certifiers(certifiers)
            logger.debug("Loaded %d certifiers", len(certifiers))

        self._run("fetch-certifiers", worker)

    def fetch_certifications(self, address: str) -> None:
        def worker() -> None:
            try:
                certifications = self.source.certifications(address)
            except Exception as e:
                logger.warning("Failed to fetch certifications for %s: %s", address, e)
                self.store.new_error(e)
                return
            if not self.store.set_certifications_if_visible(address, certifications):
                logger.debug("Discarding certifications for hidden account %s", address)

        self._run(f"fetch-certifications-{address}", worker)
