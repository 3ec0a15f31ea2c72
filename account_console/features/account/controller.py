"""Account detail view controller.

The controller owns the dialog flags and the export session for one mounted
account view. It reads accounts, balances and certifications from the shared
store, dispatches the few writes it is allowed to make through
``AccountActions``, and turns the current state into an ``AccountView``
description that the host UI draws.

Lifecycle::

    CREATED --mount()--> MOUNTED --unmount()--> UNMOUNTED
                          |  ^
                          +--+ update_address()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Mapping, Protocol, Sequence

from account_console.features.account.dialogs import Dialog, DialogVisibilityState
from account_console.features.account.eligibility import evaluate
from account_console.features.account.export import AccountExporter, ExportSession
from account_console.models import Account, Balance, Transaction
from account_console.store import AccountActions, AccountContext

logger = logging.getLogger(__name__)

ACCOUNTS_ROUTE = "/accounts"
ACTIONBAR_TITLE = "Account Management"
ACTIONBAR_KEYS = (
    "transferFunds",
    "shapeshift",
    "verification",
    "faucet",
    "editmeta",
    "exportmeta",
    "passwordManager",
    "delete",
)
HARDWARE_DELETE_MESSAGE = (
    "Are you sure you want to remove the following hardware address "
    "from your account list?"
)


class HardwareConnectivity(Protocol):
    def is_connected(self, address: str) -> bool: ...


class ControllerPhase(Enum):
    CREATED = "created"
    MOUNTED = "mounted"
    UNMOUNTED = "unmounted"


class DialogKind(Enum):
    DELETE_ACCOUNT = "delete_account"
    DELETE_ADDRESS = "delete_address"
    EDIT_META = "edit_meta"
    EXPORT = "export"
    FAUCET = "faucet"
    SHAPESHIFT = "shapeshift"
    PASSWORD_MANAGER = "password_manager"
    TRANSFER = "transfer"
    VERIFICATION = "verification"


@dataclass
class ActionButton:
    key: str
    label: str
    on_click: Callable[[], None]
    disabled: bool = False


@dataclass
class Actionbar:
    title: str
    buttons: list[ActionButton]

    def keys(self) -> list[str]:
        return [button.key for button in self.buttons]

    def get(self, key: str) -> ActionButton | None:
        for button in self.buttons:
            if button.key == key:
                return button
        return None


@dataclass
class DialogSpec:
    """A dialog to show, with the arguments its body needs."""

    dialog: Dialog
    kind: DialogKind
    on_close: Callable[[], None]
    props: dict[str, Any] = field(default_factory=dict)


@dataclass
class HeaderSpec:
    account: Account
    balance: Balance | None
    disabled: bool


@dataclass
class TransactionsSpec:
    address: str
    accounts: Mapping[str, Account]
    transactions: Sequence[Transaction]


@dataclass
class AccountView:
    address: str
    dialogs: list[DialogSpec]
    actionbar: Actionbar
    header: HeaderSpec
    transactions: TransactionsSpec


class AccountViewController:
    def __init__(
        self,
        address: str,
        context: AccountContext,
        actions: AccountActions,
        hardware: HardwareConnectivity,
        exporter: AccountExporter,
        export_dir: Path | None = None,
        on_change: Callable[[], None] | None = None,
    ):
        self.address = address
        self.context = context
        self.actions = actions
        self.hardware = hardware
        self.exporter = exporter
        self.export_dir = export_dir
        self.on_change = on_change
        self.store = DialogVisibilityState()
        self.export_store: ExportSession | None = None
        self.phase = ControllerPhase.CREATED
        self._unsubscribers: list[Callable[[], None]] = []

    @property
    def is_mounted(self) -> bool:
        return self.phase == ControllerPhase.MOUNTED

    def mount(self) -> None:
        if self.phase != ControllerPhase.CREATED:
            logger.debug("Ignoring mount in phase %s", self.phase.value)
            return

        self.export_store = ExportSession(
            self.exporter,
            self.context.accounts,
            self.actions.new_error,
            self.address,
            export_dir=self.export_dir,
        )
        self._unsubscribers = [
            self.context.subscribe(self._changed),
            self.store.subscribe(lambda dialog: self._changed()),
        ]
        self.phase = ControllerPhase.MOUNTED
        logger.info("Account view mounted for %s", self.address)

        self.actions.fetch_certifiers()
        self._set_visible_accounts(self.address)

    def update_address(self, address: str) -> None:
        if address == self.address:
            return
        logger.info("Account view moved from %s to %s", self.address, address)
        self.address = address
        if self.is_mounted:
            self._set_visible_accounts(address)
            self._changed()

    def unmount(self) -> None:
        if self.phase == ControllerPhase.UNMOUNTED:
            return
        was_mounted = self.is_mounted
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []
        self.export_store = None
        self.phase = ControllerPhase.UNMOUNTED
        if was_mounted:
            self.actions.set_visible_accounts([])
            logger.info("Account view unmounted for %s", self.address)

    def _set_visible_accounts(self, address: str) -> None:
        self.actions.set_visible_accounts([address])
        self.actions.fetch_certifications(address)

    def _changed(self) -> None:
        if self.on_change is not None:
            self.on_change()

    def is_available(self, account: Account) -> bool:
        return not account.hardware or self.hardware.is_connected(self.address)

    def render(self) -> AccountView | None:
        accounts = self.context.accounts or {}
        balances = self.context.balances or {}
        account = accounts.get(self.address)
        balance = balances.get(self.address)

        if account is None:
            return None

        transactions = (self.context.transactions or {}).get(self.address, [])
        return AccountView(
            address=self.address,
            dialogs=self.render_dialogs(account, balance),
            actionbar=self.render_actionbar(account, balance),
            header=HeaderSpec(
                account=account,
                balance=balance,
                disabled=not self.is_available(account),
            ),
            transactions=TransactionsSpec(
                address=self.address,
                accounts=accounts,
                transactions=list(transactions),
            ),
        )

    def render_actionbar(self, account: Account, balance: Balance | None) -> Actionbar:
        eligibility = evaluate(
            self.context.net_version, self.context.certifications, self.address
        )
        show_transfer = balance is not None and balance.has_tokens
        store = self.store

        buttons = [
            ActionButton(
                "transferFunds",
                "transfer",
                store.toggle_transfer_dialog,
                disabled=not show_transfer,
            ),
            ActionButton("shapeshift", "shapeshift", store.toggle_fund_dialog),
        ]
        if eligibility.verifiable:
            buttons.append(
                ActionButton("verification", "verify", store.toggle_verification_dialog)
            )
        if eligibility.faucettable:
            buttons.append(
                ActionButton("faucet", "Kovan ETH", store.toggle_faucet_dialog)
            )
        buttons.append(ActionButton("editmeta", "edit", store.toggle_edit_dialog))
        buttons.append(ActionButton("exportmeta", "export", store.toggle_export_dialog))
        if not account.hardware:
            buttons.append(
                ActionButton(
                    "passwordManager", "password", store.toggle_password_dialog
                )
            )
        buttons.append(ActionButton("delete", "delete", store.toggle_delete_dialog))

        return Actionbar(title=ACTIONBAR_TITLE, buttons=buttons)

    def render_dialogs(
        self, account: Account, balance: Balance | None
    ) -> list[DialogSpec]:
        builders: dict[Dialog, Callable[[], DialogSpec]] = {
            Dialog.DELETE: lambda: self._delete_dialog(account),
            Dialog.EDIT: lambda: DialogSpec(
                Dialog.EDIT,
                DialogKind.EDIT_META,
                self.store.toggle_edit_dialog,
                {"account": account},
            ),
            Dialog.EXPORT: self._export_dialog,
            Dialog.FAUCET: lambda: DialogSpec(
                Dialog.FAUCET,
                DialogKind.FAUCET,
                self.store.toggle_faucet_dialog,
                {"address": self.address, "net_version": self.context.net_version},
            ),
            Dialog.FUND: lambda: DialogSpec(
                Dialog.FUND,
                DialogKind.SHAPESHIFT,
                self.store.toggle_fund_dialog,
                {"address": self.address},
            ),
            Dialog.PASSWORD: lambda: DialogSpec(
                Dialog.PASSWORD,
                DialogKind.PASSWORD_MANAGER,
                self.store.toggle_password_dialog,
                {"account": account},
            ),
            Dialog.TRANSFER: lambda: DialogSpec(
                Dialog.TRANSFER,
                DialogKind.TRANSFER,
                self.store.toggle_transfer_dialog,
                {
                    "account": account,
                    "balance": balance,
                    "balances": self.context.balances,
                },
            ),
            Dialog.VERIFICATION: lambda: DialogSpec(
                Dialog.VERIFICATION,
                DialogKind.VERIFICATION,
                self.store.toggle_verification_dialog,
                {"account": self.address},
            ),
        }
        return [builders[dialog]() for dialog in self.store.visible_dialogs()]

    def _delete_dialog(self, account: Account) -> DialogSpec:
        if account.hardware:
            return DialogSpec(
                Dialog.DELETE,
                DialogKind.DELETE_ADDRESS,
                self.store.toggle_delete_dialog,
                {
                    "account": account,
                    "confirm_message": HARDWARE_DELETE_MESSAGE,
                    "route": ACCOUNTS_ROUTE,
                },
            )
        return DialogSpec(
            Dialog.DELETE,
            DialogKind.DELETE_ACCOUNT,
            self.store.toggle_delete_dialog,
            {"account": account},
        )

    def _export_dialog(self) -> DialogSpec:
        session = self.export_store
        props: dict[str, Any] = {"address": self.address}
        if session is not None:
            props.update(
                {
                    "address": session.address,
                    "value": session.account_value,
                    "on_change": session.change_password,
                    "on_confirm": session.on_export,
                }
            )
        return DialogSpec(
            Dialog.EXPORT, DialogKind.EXPORT, self.store.toggle_export_dialog, props
        )
