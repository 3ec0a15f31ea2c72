"""Account Console - terminal account management for an Ethereum node wallet.

This package is organized into feature-based modules:
- features.account: Account detail view, dialogs and eligibility checks
- store / registry / certifications / hardware: data the views read from
- shared: Logging and configuration
"""

from account_console.certifications import CertificationFetcher
from account_console.hardware import HardwareStore
from account_console.registry import AccountRegistry
from account_console.store import AccountActions, AccountStore, bind_actions

__version__ = "0.3.0"
__all__ = [
    "AccountActions",
    "AccountRegistry",
    "AccountStore",
    "CertificationFetcher",
    "HardwareStore",
    "bind_actions",
]
