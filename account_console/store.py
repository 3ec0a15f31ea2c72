"""Shared account state with explicit change notification.

The store is a plain mutable object. Views never write to it directly; they
read the current snapshot and receive a callback whenever it changes. The few
writes a view performs go through ``AccountActions``.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Iterable, Mapping, Protocol, Sequence

from account_console.models import (
    Account,
    Balance,
    Certification,
    Certifier,
    Transaction,
)

if TYPE_CHECKING:
    from account_console.certifications import CertificationFetcher

logger = logging.getLogger(__name__)

Listener = Callable[[], None]
ErrorListener = Callable[[Exception], None]


class AccountContext(Protocol):
    """Read-only view of the store used by account views."""

    @property
    def accounts(self) -> Mapping[str, Account]: ...
    @property
    def balances(self) -> Mapping[str, Balance]: ...
    @property
    def certifications(self) -> Mapping[str, Sequence[Certification]]: ...
    @property
    def transactions(self) -> Mapping[str, Sequence[Transaction]]: ...
    @property
    def net_version(self) -> str: ...

    def subscribe(self, listener: Listener) -> Callable[[], None]: ...


class AccountStore:
    def __init__(self, net_version: str = ""):
        self._lock = threading.RLock()
        self._accounts: dict[str, Account] = {}
        self._balances: dict[str, Balance] = {}
        self._certifications: dict[str, list[Certification]] = {}
        self._certifiers: list[Certifier] = []
        self._transactions: dict[str, list[Transaction]] = {}
        self._net_version = net_version
        self._visible_accounts: list[str] = []
        self._errors: list[Exception] = []
        self._listeners: list[Listener] = []
        self._error_listeners: list[ErrorListener] = []

    @property
    def accounts(self) -> dict[str, Account]:
        with self._lock:
            return dict(self._accounts)

    @property
    def balances(self) -> dict[str, Balance]:
        with self._lock:
            return dict(self._balances)

    @property
    def certifications(self) -> dict[str, list[Certification]]:
        with self._lock:
            return {addr: list(records) for addr, records in self._certifications.items()}

    @property
    def certifiers(self) -> list[Certifier]:
        with self._lock:
            return list(self._certifiers)

    @property
    def transactions(self) -> dict[str, list[Transaction]]:
        with self._lock:
            return dict(self._transactions)

    @property
    def net_version(self) -> str:
        with self._lock:
            return self._net_version

    @property
    def visible_accounts(self) -> list[str]:
        with self._lock:
            return list(self._visible_accounts)

    @property
    def errors(self) -> list[Exception]:
        with self._lock:
            return list(self._errors)

    def is_visible(self, address: str) -> bool:
        with self._lock:
            return address in self._visible_accounts

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def subscribe_errors(self, listener: ErrorListener) -> Callable[[], None]:
        with self._lock:
            self._error_listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._error_listeners:
                    self._error_listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener()
            except Exception as e:
                logger.error("Error in store listener: %s", e, exc_info=True)

    def set_accounts(self, accounts: Iterable[Account]) -> None:
        with self._lock:
            self._accounts = {account.address: account for account in accounts}
        self._notify()

    def set_balances(self, balances: Mapping[str, Balance]) -> None:
        with self._lock:
            self._balances = dict(balances)
        self._notify()

    def set_transactions(self, address: str, transactions: Iterable[Transaction]) -> None:
        with self._lock:
            self._transactions[address] = list(transactions)
        self._notify()

    def set_net_version(self, net_version: str) -> None:
        with self._lock:
            changed = net_version != self._net_version
            self._net_version = net_version
        if changed:
            logger.info("Network version set to %s", net_version)
            self._notify()

    def set_certifiers(self, certifiers: Iterable[Certifier]) -> None:
        with self._lock:
            self._certifiers = list(certifiers)
        self._notify()

    def set_certifications(
        self, address: str, certifications: Iterable[Certification]
    ) -> None:
        with self._lock:
            self._certifications[address] = list(certifications)
        self._notify()

    def set_certifications_if_visible(
        self, address: str, certifications: Iterable[Certification]
    ) -> bool:
        with self._lock:
            if address not in self._visible_accounts:
                return False
            self._certifications[address] = list(certifications)
        self._notify()
        return True

    def set_visible_accounts(self, addresses: Sequence[str]) -> None:
        unique: list[str] = []
        for address in addresses:
            if address and address not in unique:
                unique.append(address)

        with self._lock:
            if unique == self._visible_accounts:
                return
            self._visible_accounts = unique
        logger.debug("Visible accounts: %s", unique)
        self._notify()

    def new_error(self, error: Exception) -> None:
        logger.error("Reported error: %s", error)
        with self._lock:
            self._errors.append(error)
            listeners = list(self._error_listeners)
        for listener in listeners:
            try:
                listener(error)
            except Exception as e:
                logger.error("Error in error listener: %s", e, exc_info=True)


@dataclass
class AccountActions:
    """Writes an account view is allowed to dispatch."""

    set_visible_accounts: Callable[[Sequence[str]], None]
    fetch_certifiers: Callable[[], None]
    fetch_certifications: Callable[[str], None]
    new_error: Callable[[Exception], None]


def bind_actions(store: AccountStore, fetcher: "CertificationFetcher") -> AccountActions:
    return AccountActions(
        set_visible_accounts=store.set_visible_accounts,
        fetch_certifiers=fetcher.fetch_certifiers,
        fetch_certifications=fetcher.fetch_certifications,
        new_error=store.new_error,
    )
