"""Account detail feature for the account console."""

from account_console.features.account.controller import (
    AccountView,
    AccountViewController,
    ActionButton,
    Actionbar,
    ControllerPhase,
    DialogKind,
    DialogSpec,
)
from account_console.features.account.dialogs import Dialog, DialogVisibilityState
from account_console.features.account.eligibility import (
    is_faucettable,
    is_kovan,
    is_mainnet,
    is_sms_certified,
    is_verifiable,
)
from account_console.features.account.export import ExportResult, ExportSession

__all__ = [
    "AccountView",
    "AccountViewController",
    "ActionButton",
    "Actionbar",
    "ControllerPhase",
    "Dialog",
    "DialogKind",
    "DialogSpec",
    "DialogVisibilityState",
    "ExportResult",
    "ExportSession",
    "is_faucettable",
    "is_kovan",
    "is_mainnet",
    "is_sms_certified",
    "is_verifiable",
]
