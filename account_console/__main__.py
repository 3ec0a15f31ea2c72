"""Main application entry point for the account console."""

from __future__ import annotations

import argparse
import logging
import threading
from typing import Callable

from textual.app import App

from account_console.certifications import (
    CertificationFetcher,
    CertificationSource,
    HttpCertificationSource,
    StaticCertificationSource,
)
from account_console.features.account.controller import AccountViewController
from account_console.features.account.handlers import AccountHandlersMixin
from account_console.features.account.screens import AccountScreen, AccountsScreen
from account_console.hardware import HardwareStore
from account_console.registry import AccountRegistry
from account_console.shared.config import ConsoleConfig
from account_console.shared.logging import (
    LoggingConfig,
    format_error_for_user,
    setup_logging,
)
from account_console.state import NodeState, apply_state, load_state
from account_console.store import AccountStore, bind_actions
from account_console.styles import CSS

logger = logging.getLogger(__name__)


class AccountConsoleApp(AccountHandlersMixin, App):
    CSS = CSS
    TITLE = "Account Console"

    BINDINGS = [
        ("q", "quit", "Quit"),
    ]

    def __init__(
        self,
        config: ConsoleConfig,
        initial_address: str | None = None,
        source: CertificationSource | None = None,
        net_version: str | None = None,
    ):
        super().__init__()
        self.console_config = config
        self.initial_address = initial_address
        self.store = AccountStore(net_version=config.net_version)
        self.hardware = HardwareStore()
        self.registry = AccountRegistry(config.storage_dir, self.store)

        node_state = load_state(config.state_file)
        apply_state(node_state, self.store, self.hardware)
        override = net_version or config.net_version_override
        if override:
            self.store.set_net_version(override)
        self.fetcher = CertificationFetcher(
            self.store, source or self._default_source(node_state)
        )
        self.account_actions = bind_actions(self.store, self.fetcher)
        self._ui_thread_id: int | None = None
        self._unsubscribers: list[Callable[[], None]] = []

    def _default_source(self, node_state: NodeState) -> CertificationSource:
        config = self.console_config
        if config.certification_url:
            logger.info("Using certification service %s", config.certification_url)
            return HttpCertificationSource(
                config.certification_url, timeout=config.request_timeout
            )
        return StaticCertificationSource(node_state.certifications, node_state.certifiers)

    def on_mount(self) -> None:
        self._ui_thread_id = threading.get_ident()
        self._unsubscribers = [
            self.store.subscribe_errors(self._on_store_error),
            self.store.subscribe(self._on_store_change),
        ]
        self.push_screen(AccountsScreen(self.registry.get_accounts()))
        if self.initial_address:
            self.show_account(self.initial_address)
        logger.info("Account console started with %d accounts", len(self.store.accounts))

    def on_unmount(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []

    def _in_ui_thread(self, callback: Callable[[], None]) -> None:
        if threading.get_ident() == self._ui_thread_id:
            callback()
        else:
            self.call_from_thread(callback)

    def _on_store_error(self, error: Exception) -> None:
        self._in_ui_thread(
            lambda: self.notify(format_error_for_user(error), severity="error")
        )

    def _on_store_change(self) -> None:
        self._in_ui_thread(self._refresh_accounts_screen)

    def _refresh_accounts_screen(self) -> None:
        for screen in self.screen_stack:
            if isinstance(screen, AccountsScreen):
                accounts = self.registry.get_accounts()
                if accounts != screen.accounts:
                    screen.update_accounts(accounts)

    def create_controller(self, address: str) -> AccountViewController:
        return AccountViewController(
            address,
            self.store,
            self.account_actions,
            self.hardware,
            self.registry,
            export_dir=self.console_config.export_dir,
        )

    def show_account(self, address: str) -> None:
        account = self.registry.get_account(address)
        if account is not None:
            address = account.address
        if isinstance(self.screen, AccountScreen):
            self.screen.controller.update_address(address)
            return
        self.push_screen(AccountScreen(self.create_controller(address)))

    def show_accounts(self) -> None:
        while len(self.screen_stack) > 1 and not isinstance(self.screen, AccountsScreen):
            self.pop_screen()

    def _step_account(self, offset: int) -> None:
        if not isinstance(self.screen, AccountScreen):
            return
        addresses = [account.address for account in self.registry.get_accounts()]
        if not addresses:
            return
        current = self.screen.address
        index = addresses.index(current) if current in addresses else -offset
        self.show_account(addresses[(index + offset) % len(addresses)])

    def action_show_accounts(self) -> None:
        self.show_accounts()

    def action_next_account(self) -> None:
        self._step_account(1)

    def action_previous_account(self) -> None:
        self._step_account(-1)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="account-console")
    parser.add_argument("--address", help="open this account directly")
    parser.add_argument("--net-version", help="network id, e.g. 1 or 42")
    parser.add_argument("--storage-dir", help="registry and config directory")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    """Entry point for the application."""
    args = parse_args(argv)
    config = ConsoleConfig.load(args.storage_dir)
    setup_logging(LoggingConfig.from_environment(log_dir=config.storage_dir))

    app = AccountConsoleApp(
        config, initial_address=args.address, net_version=args.net_version
    )
    app.run()


if __name__ == "__main__":
    main()
