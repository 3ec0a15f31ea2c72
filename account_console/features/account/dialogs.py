"""Visibility flags for the account view's modal dialogs."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable

logger = logging.getLogger(__name__)


class Dialog(Enum):
    DELETE = "delete"
    EDIT = "edit"
    EXPORT = "export"
    FAUCET = "faucet"
    FUND = "fund"
    PASSWORD = "password"
    TRANSFER = "transfer"
    VERIFICATION = "verification"


class DialogVisibilityState:
    """One independent flag per dialog.

    Flags are not mutually exclusive; opening one dialog never closes another.
    """

    def __init__(self) -> None:
        self._visible: dict[Dialog, bool] = {dialog: False for dialog in Dialog}
        self._listeners: list[Callable[[Dialog], None]] = []

    def is_visible(self, dialog: Dialog) -> bool:
        return self._visible[dialog]

    def visible_dialogs(self) -> list[Dialog]:
        return [dialog for dialog in Dialog if self._visible[dialog]]

    def toggle(self, dialog: Dialog) -> None:
        self._visible[dialog] = not self._visible[dialog]
        logger.debug("Dialog %s visible=%s", dialog.value, self._visible[dialog])
        for listener in list(self._listeners):
            try:
                listener(dialog)
            except Exception as e:
                logger.error("Error in dialog listener: %s", e, exc_info=True)

    def subscribe(self, listener: Callable[[Dialog], None]) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    @property
    def is_delete_visible(self) -> bool:
        return self._visible[Dialog.DELETE]

    @property
    def is_edit_visible(self) -> bool:
        return self._visible[Dialog.EDIT]

    @property
    def is_export_visible(self) -> bool:
        return self._visible[Dialog.EXPORT]

    @property
    def is_faucet_visible(self) -> bool:
        return self._visible[Dialog.FAUCET]

    @property
    def is_fund_visible(self) -> bool:
        return self._visible[Dialog.FUND]

    @property
    def is_password_visible(self) -> bool:
        return self._visible[Dialog.PASSWORD]

    @property
    def is_transfer_visible(self) -> bool:
        return self._visible[Dialog.TRANSFER]

    @property
    def is_verification_visible(self) -> bool:
        return self._visible[Dialog.VERIFICATION]

    def toggle_delete_dialog(self) -> None:
        self.toggle(Dialog.DELETE)

    def toggle_edit_dialog(self) -> None:
        self.toggle(Dialog.EDIT)

    def toggle_export_dialog(self) -> None:
        self.toggle(Dialog.EXPORT)

    def toggle_faucet_dialog(self) -> None:
        self.toggle(Dialog.FAUCET)

    def toggle_fund_dialog(self) -> None:
        self.toggle(Dialog.FUND)

    def toggle_password_dialog(self) -> None:
        self.toggle(Dialog.PASSWORD)

    def toggle_transfer_dialog(self) -> None:
        self.toggle(Dialog.TRANSFER)

    def toggle_verification_dialog(self) -> None:
        self.toggle(Dialog.VERIFICATION)
