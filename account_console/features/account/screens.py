"""Textual screens for the account view and its dialogs."""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, cast

from rich.table import Table
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.coordinate import Coordinate
from textual.message import Message
from textual.screen import ModalScreen, Screen
from textual.widgets import Button, DataTable, Footer, Header, Input, Label, Static

from account_console.features.account.controller import (
    ACTIONBAR_KEYS,
    ACTIONBAR_TITLE,
    AccountView,
    AccountViewController,
    DialogKind,
    DialogSpec,
    HeaderSpec,
    TransactionsSpec,
)
from account_console.features.account.dialogs import Dialog
from account_console.features.account.validators import (
    validate_address,
    validate_amount,
    validate_new_password,
)
from account_console.models import Account

logger = logging.getLogger(__name__)


class AccountDialogScreen(ModalScreen):
    """Base for dialogs opened from the account action bar.

    Closing always goes through the dialog's own flag so the view and the
    screen stack stay in step.
    """

    BINDINGS = [
        ("escape", "close", "Close"),
        ("tab", "focus_next", "Next"),
        ("shift+tab", "focus_previous", "Previous"),
    ]

    DIALOG_TITLE = ""
    CONFIRM_LABEL = "✓ Confirm"

    def __init__(self, spec: DialogSpec):
        super().__init__()
        self.spec = spec

    @property
    def account(self) -> Account | None:
        return self.spec.props.get("account")

    @property
    def address(self) -> str:
        account = self.account
        if isinstance(account, Account):
            return account.address
        return self.spec.props.get("address") or str(account or "")

    def compose(self) -> ComposeResult:
        with Vertical():
            yield Label(self.DIALOG_TITLE, classes="dialog-title")
            yield from self.compose_body()
            yield Horizontal(
                Button(self.CONFIRM_LABEL, id="confirm-button", variant="primary"),
                Button("✗ Cancel", id="cancel-button"),
            )

    def compose_body(self) -> ComposeResult:
        yield Label(f"Address: {self.address}")

    def value_of(self, input_id: str) -> str:
        return cast(Input, self.query_one(f"#{input_id}")).value

    def action_close(self) -> None:
        self.spec.on_close()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "confirm-button":
            self.confirm()
        elif event.button.id == "cancel-button":
            self.action_close()

    def confirm(self) -> None:
        self.action_close()

    def submit(self, message: Message) -> None:
        self.app.post_message(message)
        self.action_close()


class DeleteAccountScreen(AccountDialogScreen):
    DIALOG_TITLE = "🗑️ Delete Account"
    CONFIRM_LABEL = "🗑️ Delete"

    def compose_body(self) -> ComposeResult:
        account = self.account
        yield Label(f"Account: {account.name if account else ''}")
        yield Label(f"Address: {self.address}")
        yield Label("⚠️ The key will be removed permanently.", classes="warning")
        yield Input(placeholder="Account password", id="password-input", password=True)

    def confirm(self) -> None:
        password = self.value_of("password-input")
        if not password:
            self.notify("Password is required to delete an account", severity="error")
            return
        self.submit(self.DeleteRequested(address=self.address, password=password))

    class DeleteRequested(Message):
        def __init__(self, address: str, password: str):
            super().__init__()
            self.address = address
            self.password = password


class DeleteAddressScreen(AccountDialogScreen):
    DIALOG_TITLE = "🗑️ Remove Hardware Address"
    CONFIRM_LABEL = "✓ Remove"

    def compose_body(self) -> ComposeResult:
        yield Label(self.spec.props.get("confirm_message", ""))
        yield Label(f"Address: {self.address}")
        yield Label("The device keeps its key; only the list entry is removed.", classes="hint")

    def confirm(self) -> None:
        self.submit(
            self.RemoveRequested(
                address=self.address, route=self.spec.props.get("route", "")
            )
        )

    class RemoveRequested(Message):
        def __init__(self, address: str, route: str):
            super().__init__()
            self.address = address
            self.route = route


class EditMetaScreen(AccountDialogScreen):
    DIALOG_TITLE = "✏️ Edit Account"
    CONFIRM_LABEL = "✓ Save"

    def compose_body(self) -> ComposeResult:
        account = self.account
        name = account.name if account else ""
        description = str(account.meta.get("description", "")) if account else ""
        yield Label("Name:")
        yield Input(value=name, placeholder="Account name", id="name-input")
        yield Label("Description:")
        yield Input(value=description, placeholder="Description", id="description-input")

    def confirm(self) -> None:
        name = self.value_of("name-input").strip()
        if not name:
            self.notify("Name cannot be empty", severity="error")
            return
        self.submit(
            self.MetaSubmitted(
                address=self.address,
                account_name=name,
                description=self.value_of("description-input").strip(),
            )
        )

    class MetaSubmitted(Message):
        def __init__(self, address: str, account_name: str, description: str):
            super().__init__()
            self.address = address
            self.account_name = account_name
            self.description = description


class ExportAccountScreen(AccountDialogScreen):
    DIALOG_TITLE = "🔐 Export Account"
    CONFIRM_LABEL = "✓ Export"

    def compose_body(self) -> ComposeResult:
        yield Label(f"Account: {self.address}")
        yield Label(
            "Export your account as a JSON file. Please enter the password "
            "linked with this account."
        )
        yield Input(
            value=self.spec.props.get("value", ""),
            placeholder="Account password",
            id="password-input",
            password=True,
        )
        yield Label("The password specified when creating this account", classes="hint")

    def on_input_changed(self, event: Input.Changed) -> None:
        on_change = self.spec.props.get("on_change")
        if event.input.id == "password-input" and on_change is not None:
            on_change(event.value)

    def confirm(self) -> None:
        on_confirm: Callable[[], Any] | None = self.spec.props.get("on_confirm")
        if on_confirm is None:
            return

        def worker() -> None:
            result = on_confirm()
            self.app.call_from_thread(self._on_export_finished, result)

        threading.Thread(target=worker, daemon=True).start()

    def _on_export_finished(self, result: Any) -> None:
        # failures were already reported through the error channel
        if result is None:
            return
        self.notify(f"Account exported to {result.path}", severity="information")
        self.action_close()


class FaucetScreen(AccountDialogScreen):
    DIALOG_TITLE = "💧 Kovan ETH"
    CONFIRM_LABEL = "✓ Request"

    def compose_body(self) -> ComposeResult:
        yield Label(f"Address: {self.address}")
        yield Label(f"Network: {self.spec.props.get('net_version', '')}")
        yield Label("Request test Ether for this address.", classes="hint")

    def confirm(self) -> None:
        self.submit(
            self.FaucetRequested(
                address=self.address,
                net_version=self.spec.props.get("net_version", ""),
            )
        )

    class FaucetRequested(Message):
        def __init__(self, address: str, net_version: str):
            super().__init__()
            self.address = address
            self.net_version = net_version


class ShapeshiftScreen(AccountDialogScreen):
    DIALOG_TITLE = "🔁 Fund Account"
    CONFIRM_LABEL = "✓ Continue"

    def compose_body(self) -> ComposeResult:
        yield Label(f"Deposit to: {self.address}")
        yield Label("Coin to exchange from:")
        yield Input(value="BTC", placeholder="e.g. BTC", id="coin-input")

    def confirm(self) -> None:
        coin = self.value_of("coin-input").strip().upper()
        if not coin:
            self.notify("Choose a coin to exchange from", severity="error")
            return
        self.submit(self.FundRequested(address=self.address, coin=coin))

    class FundRequested(Message):
        def __init__(self, address: str, coin: str):
            super().__init__()
            self.address = address
            self.coin = coin


class PasswordManagerScreen(AccountDialogScreen):
    DIALOG_TITLE = "🔑 Password Manager"
    CONFIRM_LABEL = "✓ Change"

    def compose_body(self) -> ComposeResult:
        account = self.account
        hint = account.meta.get("passwordHint", "") if account else ""
        yield Label(f"Address: {self.address}")
        if hint:
            yield Label(f"Hint: {hint}", classes="hint")
        yield Input(placeholder="Current password", id="current-input", password=True)
        yield Input(placeholder="New password", id="new-input", password=True)
        yield Input(placeholder="Repeat new password", id="repeat-input", password=True)
        yield Input(placeholder="New password hint (optional)", id="hint-input")

    def confirm(self) -> None:
        result = validate_new_password(
            self.value_of("new-input"), self.value_of("repeat-input")
        )
        if not result.is_valid:
            self.notify(result.error_message or "Invalid password", severity="error")
            return
        self.submit(
            self.PasswordChangeSubmitted(
                address=self.address,
                current=self.value_of("current-input"),
                new=result.normalized_value,
                hint=self.value_of("hint-input").strip(),
            )
        )

    class PasswordChangeSubmitted(Message):
        def __init__(self, address: str, current: str, new: str, hint: str):
            super().__init__()
            self.address = address
            self.current = current
            self.new = new
            self.hint = hint


class TransferScreen(AccountDialogScreen):
    DIALOG_TITLE = "📤 Transfer"
    CONFIRM_LABEL = "✓ Send"

    def compose_body(self) -> ComposeResult:
        balance = self.spec.props.get("balance")
        tokens = ", ".join(
            f"{item.token} {item.value}" for item in (balance.tokens if balance else [])
        )
        yield Label(f"From: {self.address}")
        yield Label(f"Holdings: {tokens or 'none'}", classes="hint")
        yield Input(placeholder="Recipient (0x...)", id="recipient-input")
        yield Input(value="ETH", placeholder="Token", id="token-input")
        yield Input(placeholder="Amount", id="amount-input")

    def confirm(self) -> None:
        recipient = validate_address(self.value_of("recipient-input"))
        if not recipient.is_valid:
            self.notify(recipient.error_message or "Invalid address", severity="error")
            return
        token = self.value_of("token-input").strip()
        amount = validate_amount(
            self.value_of("amount-input"), token, self.spec.props.get("balance")
        )
        if not amount.is_valid:
            self.notify(amount.error_message or "Invalid amount", severity="error")
            return
        self.submit(
            self.TransferRequested(
                address=self.address,
                recipient=recipient.normalized_value,
                token=token,
                amount=amount.normalized_value,
            )
        )

    class TransferRequested(Message):
        def __init__(self, address: str, recipient: str, token: str, amount: Any):
            super().__init__()
            self.address = address
            self.recipient = recipient
            self.token = token
            self.amount = amount


class VerificationScreen(AccountDialogScreen):
    DIALOG_TITLE = "✅ Verify Account"
    CONFIRM_LABEL = "✓ Start"

    def __init__(self, spec: DialogSpec):
        super().__init__(spec)
        self.method = "sms"

    def compose_body(self) -> ComposeResult:
        yield Label(f"Address: {self.address}")
        yield Label("Verification method:")
        yield Horizontal(
            Button("SMS", id="sms-button", variant="primary"),
            Button("E-mail", id="email-button"),
        )
        yield Label("Method: SMS", id="method-label", classes="hint")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id in ("sms-button", "email-button"):
            self.method = "sms" if event.button.id == "sms-button" else "email"
            cast(Label, self.query_one("#method-label")).update(
                f"Method: {'SMS' if self.method == 'sms' else 'E-mail'}"
            )
            return
        super().on_button_pressed(event)

    def confirm(self) -> None:
        self.submit(self.VerificationRequested(address=self.address, method=self.method))

    class VerificationRequested(Message):
        def __init__(self, address: str, method: str):
            super().__init__()
            self.address = address
            self.method = method


DIALOG_SCREENS: dict[DialogKind, type[AccountDialogScreen]] = {
    DialogKind.DELETE_ACCOUNT: DeleteAccountScreen,
    DialogKind.DELETE_ADDRESS: DeleteAddressScreen,
    DialogKind.EDIT_META: EditMetaScreen,
    DialogKind.EXPORT: ExportAccountScreen,
    DialogKind.FAUCET: FaucetScreen,
    DialogKind.SHAPESHIFT: ShapeshiftScreen,
    DialogKind.PASSWORD_MANAGER: PasswordManagerScreen,
    DialogKind.TRANSFER: TransferScreen,
    DialogKind.VERIFICATION: VerificationScreen,
}


def build_dialog_screen(spec: DialogSpec) -> AccountDialogScreen:
    return DIALOG_SCREENS[spec.kind](spec)


def header_text(header: HeaderSpec) -> str:
    account = header.account
    lines = [
        f"[b]{account.name or 'Unnamed account'}[/b]",
        account.address,
    ]
    description = account.meta.get("description")
    if description:
        lines.append(str(description))
    if header.balance is not None:
        lines.append(f"{header.balance.eth} ETH")
        for token in header.balance.tokens:
            lines.append(f"  {token.token}: {token.value}")
    if account.hardware:
        lines.append("hardware wallet" + (" (not connected)" if header.disabled else ""))
    return "\n".join(lines)


def transactions_table(spec: TransactionsSpec) -> Table:
    table = Table(title="Transactions", expand=True)
    table.add_column("Block")
    table.add_column("From")
    table.add_column("To")
    table.add_column("Value", justify="right")
    for tx in spec.transactions:
        table.add_row(
            str(tx.block_number) if tx.block_number is not None else "pending",
            _address_label(tx.from_address, spec),
            _address_label(tx.to_address, spec),
            str(tx.value),
        )
    return table


def _address_label(address: str, spec: TransactionsSpec) -> str:
    account = spec.accounts.get(address)
    if account is not None and account.name:
        return account.name
    return address


class AccountScreen(Screen):
    """Hosts one ``AccountViewController`` for its mounted lifetime."""

    BINDINGS = [
        ("escape", "app.show_accounts", "Accounts"),
        ("[", "app.previous_account", "Previous"),
        ("]", "app.next_account", "Next"),
    ]

    def __init__(self, controller: AccountViewController):
        super().__init__()
        self.controller = controller
        self.controller.on_change = self._on_controller_change
        self._view: AccountView | None = None
        self._open_dialogs: dict[Dialog, AccountDialogScreen] = {}
        self._ui_thread_id: int | None = None

    @property
    def address(self) -> str:
        return self.controller.address

    def compose(self) -> ComposeResult:
        yield Header()
        yield Static("No account found for this address.", id="account-empty")
        with Vertical(id="account-body"):
            yield Label(ACTIONBAR_TITLE, id="actionbar-title")
            yield Horizontal(
                *[Button(key, id=f"action-{key}") for key in ACTIONBAR_KEYS],
                id="actionbar",
            )
            yield Static("", id="account-header")
            yield Static("", id="transactions")
        yield Footer()

    def on_mount(self) -> None:
        self._ui_thread_id = threading.get_ident()
        self.controller.mount()
        self._refresh_view()

    def on_unmount(self) -> None:
        self.controller.unmount()
        self._open_dialogs.clear()

    def _on_controller_change(self) -> None:
        if threading.get_ident() == self._ui_thread_id:
            self._refresh_view()
        else:
            self.app.call_from_thread(self._refresh_view)

    def _refresh_view(self) -> None:
        if not self.controller.is_mounted:
            return
        self._view = self.controller.render()
        self.sub_title = self.address
        self._update_widgets(self._view)
        self._sync_dialogs()

    def _update_widgets(self, view: AccountView | None) -> None:
        self.query_one("#account-empty").display = view is None
        self.query_one("#account-body").display = view is not None
        if view is None:
            return

        cast(Label, self.query_one("#actionbar-title")).update(view.actionbar.title)
        for key in ACTIONBAR_KEYS:
            button = cast(Button, self.query_one(f"#action-{key}"))
            spec = view.actionbar.get(key)
            button.display = spec is not None
            if spec is not None:
                button.label = spec.label
                button.disabled = spec.disabled

        header = cast(Static, self.query_one("#account-header"))
        header.update(header_text(view.header))
        header.set_class(view.header.disabled, "disabled")
        cast(Static, self.query_one("#transactions")).update(
            transactions_table(view.transactions)
        )

    def _sync_dialogs(self) -> None:
        wanted = {spec.dialog: spec for spec in self._view.dialogs} if self._view else {}

        for dialog, screen in list(self._open_dialogs.items()):
            if dialog in wanted:
                continue
            if self.app.screen is screen:
                self.app.pop_screen()
                del self._open_dialogs[dialog]
            elif screen not in self.app.screen_stack:
                del self._open_dialogs[dialog]
            else:
                logger.warning("Dialog %s is not on top and stays open", dialog.value)

        for dialog, spec in wanted.items():
            if dialog not in self._open_dialogs:
                screen = build_dialog_screen(spec)
                self._open_dialogs[dialog] = screen
                self.app.push_screen(screen)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if self._view is None or not event.button.id:
            return
        key = event.button.id.removeprefix("action-")
        button = self._view.actionbar.get(key)
        if button is not None and not button.disabled:
            button.on_click()


class AccountsScreen(Screen):
    """List of known accounts; selecting a row opens its account view."""

    BINDINGS = [("enter", "select", "Open")]

    def __init__(self, accounts: list[Account]):
        super().__init__()
        self.accounts = accounts

    def compose(self) -> ComposeResult:
        yield Header()
        yield Label("👤 Accounts", id="accounts-title")
        yield DataTable(id="accounts-table")
        yield Footer()

    def on_mount(self) -> None:
        table = cast(DataTable, self.query_one("#accounts-table"))
        table.cursor_type = "row"
        table.add_column("Name", key="name")
        table.add_column("Address", key="address")
        table.add_column("Type", key="type")
        self.update_accounts(self.accounts)

    def update_accounts(self, accounts: list[Account]) -> None:
        self.accounts = accounts
        table = cast(DataTable, self.query_one("#accounts-table"))
        table.clear()
        for account in accounts:
            table.add_row(
                account.name or "-",
                account.address,
                "Hardware" if account.hardware else "Local",
                key=account.address,
            )
        if accounts:
            table.cursor_coordinate = Coordinate(0, 0)

    def _selected_address(self) -> str | None:
        table = cast(DataTable, self.query_one("#accounts-table"))
        row = table.cursor_row
        if row is not None and 0 <= row < len(self.accounts):
            return self.accounts[row].address
        return None

    def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        self.action_select()

    def action_select(self) -> None:
        address = self._selected_address()
        if address is not None:
            self.post_message(self.AccountOpened(address=address))

    class AccountOpened(Message):
        def __init__(self, address: str):
            super().__init__()
            self.address = address
