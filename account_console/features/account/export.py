"""Password-protected export of one account to a JSON keyfile."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Mapping, Protocol

from account_console.models import Account

logger = logging.getLogger(__name__)


class AccountExporter(Protocol):
    def export_account(self, address: str, password: str) -> dict[str, Any]: ...


class ExportError(Exception):
    pass


@dataclass
class ExportResult:
    address: str
    path: Path
    keyfile: dict[str, Any]


class ExportSession:
    """Holds the export password for the account a view was opened on."""

    def __init__(
        self,
        exporter: AccountExporter,
        accounts: Mapping[str, Account],
        new_error: Callable[[Exception], None],
        address: str,
        export_dir: Path | None = None,
    ):
        self.exporter = exporter
        self.accounts = accounts
        self.new_error = new_error
        self.address = address
        self.export_dir = export_dir or Path.cwd()
        self.account_value = ""

    @property
    def account(self) -> Account | None:
        return self.accounts.get(self.address)

    def change_password(self, value: str) -> None:
        self.account_value = value

    def on_export(self) -> ExportResult | None:
        try:
            if self.account is None:
                raise ExportError(f"Account not found: {self.address}")
            keyfile = self.exporter.export_account(self.address, self.account_value)
            self.export_dir.mkdir(parents=True, exist_ok=True)
            path = self.export_dir / f"{self.address}.json"
            with open(path, "w") as f:
                json.dump(keyfile, f, indent=2)
        except Exception as e:
            logger.warning("Export of %s failed: %s", self.address, e)
            self.new_error(e)
            return None

        logger.info("Exported %s to %s", self.address, path)
        return ExportResult(address=self.address, path=path, keyfile=keyfile)
