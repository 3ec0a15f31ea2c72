"""Account dialog event handlers for the account console app."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable

from account_console.features.account.controller import ACCOUNTS_ROUTE
from account_console.registry import AccountRegistry, RegistryError
from account_console.store import AccountStore

if TYPE_CHECKING:
    from account_console.__main__ import AccountConsoleApp

logger = logging.getLogger(__name__)

ExternalService = Callable[[str, dict[str, Any]], None]


class AccountHandlersMixin:
    """Mixin class providing account dialog handlers for AccountConsoleApp."""

    registry: AccountRegistry
    store: AccountStore
    external_service: ExternalService | None = None

    def on_accounts_screen_account_opened(
        self: "AccountConsoleApp", event: Any
    ) -> None:
        self.show_account(event.address)

    def on_delete_account_screen_delete_requested(
        self: "AccountConsoleApp", event: Any
    ) -> None:
        try:
            self.registry.delete_account(event.address, event.password)
        except RegistryError as e:
            self.store.new_error(e)
            return
        self.notify("Account deleted", severity="information")
        self.show_accounts()

    def on_delete_address_screen_remove_requested(
        self: "AccountConsoleApp", event: Any
    ) -> None:
        try:
            self.registry.remove_address(event.address)
        except RegistryError as e:
            self.store.new_error(e)
            return
        self.notify("Address removed from the account list", severity="information")
        if event.route == ACCOUNTS_ROUTE:
            self.show_accounts()

    def on_edit_meta_screen_meta_submitted(
        self: "AccountConsoleApp", event: Any
    ) -> None:
        try:
            self.registry.set_meta(
                event.address, event.account_name, {"description": event.description}
            )
        except RegistryError as e:
            self.store.new_error(e)
            return
        self.notify("Account updated", severity="information")

    def on_password_manager_screen_password_change_submitted(
        self: "AccountConsoleApp", event: Any
    ) -> None:
        try:
            self.registry.change_password(event.address, event.current, event.new)
            if event.hint:
                account = self.registry.get_account(event.address)
                name = account.name if account else ""
                self.registry.set_meta(event.address, name, {"passwordHint": event.hint})
        except RegistryError as e:
            self.store.new_error(e)
            return
        self.notify("Password changed", severity="information")

    def on_transfer_screen_transfer_requested(
        self: "AccountConsoleApp", event: Any
    ) -> None:
        self.hand_off(
            "transfer",
            {
                "from": event.address,
                "to": event.recipient,
                "token": event.token,
                "amount": str(event.amount),
            },
        )

    def on_faucet_screen_faucet_requested(
        self: "AccountConsoleApp", event: Any
    ) -> None:
        self.hand_off("faucet", {"address": event.address, "net_version": event.net_version})

    def on_shapeshift_screen_fund_requested(
        self: "AccountConsoleApp", event: Any
    ) -> None:
        self.hand_off("shapeshift", {"address": event.address, "coin": event.coin})

    def on_verification_screen_verification_requested(
        self: "AccountConsoleApp", event: Any
    ) -> None:
        self.hand_off(
            "verification", {"address": event.address, "method": event.method}
        )

    def hand_off(self: "AccountConsoleApp", service: str, payload: dict[str, Any]) -> None:
        logger.info("Handing %s request to external service: %s", service, payload)
        if self.external_service is None:
            self.notify(
                f"No {service} service is configured; request was not sent",
                severity="warning",
            )
            return
        try:
            self.external_service(service, payload)
        except Exception as e:
            self.store.new_error(e)
            return
        self.notify(f"{service.capitalize()} request submitted", severity="information")
