"""Feature modules for the account console.

- account: Account detail view, its action bar and modal dialogs
"""

from account_console.features import account

__all__ = ["account"]
