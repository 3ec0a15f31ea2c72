"""Local account registry with password-encrypted key material."""

from __future__ import annotations

import base64
import json
import logging
import secrets
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC
from eth_account import Account as EthAccount

from account_console.models import Account, normalize_address
from account_console.store import AccountStore

logger = logging.getLogger(__name__)

REGISTRY_VERSION = 1
KDF_ITERATIONS = 200_000


class RegistryError(Exception):
    pass


class UnknownAccountError(RegistryError):
    pass


class InvalidPasswordError(RegistryError):
    pass


def _derive_key(password: str, salt: bytes, iterations: int) -> bytes:
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=32,
        salt=salt,
        iterations=iterations,
    )
    return base64.urlsafe_b64encode(kdf.derive(password.encode()))


def encrypt_secret(secret: str, password: str) -> dict[str, Any]:
    salt = secrets.token_bytes(16)
    iterations = KDF_ITERATIONS
    cipher = Fernet(_derive_key(password, salt, iterations))
    return {
        "kdf": "pbkdf2-sha256",
        "iterations": iterations,
        "salt": salt.hex(),
        "ciphertext": cipher.encrypt(secret.encode()).decode(),
    }


def decrypt_secret(crypto: dict[str, Any], password: str) -> str:
    salt = bytes.fromhex(crypto["salt"])
    iterations = int(crypto.get("iterations", KDF_ITERATIONS))
    cipher = Fernet(_derive_key(password, salt, iterations))
    try:
        return cipher.decrypt(crypto["ciphertext"].encode()).decode()
    except InvalidToken as e:
        raise InvalidPasswordError("Invalid password for account") from e


def _derive_address(secret: str) -> str:
    return EthAccount.from_key(secret).address


@dataclass
class RegistryEntry:
    account: Account
    crypto: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        data = self.account.to_dict()
        if self.crypto is not None:
            data["crypto"] = self.crypto
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RegistryEntry":
        return cls(account=Account.from_dict(data), crypto=data.get("crypto"))


class AccountRegistry:
    def __init__(self, storage_dir: Path, store: AccountStore | None = None):
        self.storage_dir = Path(storage_dir)
        self.storage_dir.mkdir(parents=True, exist_ok=True)
        self.accounts_file = self.storage_dir / "accounts.json"
        self.store = store
        self._entries: dict[str, RegistryEntry] = {}
        self._load()
        self._publish()

    def _load(self) -> None:
        if not self.accounts_file.exists():
            self._entries = {}
            return
        try:
            with open(self.accounts_file, "r") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Failed to load account registry: %s", e)
            self._entries = {}
            return

        if not isinstance(data, dict):
            logger.warning("Account registry is not a JSON object, starting fresh")
            self._entries = {}
            return

        version = data.get("version", 0)
        if not isinstance(version, int) or version < REGISTRY_VERSION:
            logger.warning("Account registry version mismatch, starting fresh")
            self._entries = {}
            return

        try:
            entries = [RegistryEntry.from_dict(item) for item in data.get("accounts", [])]
        except (AttributeError, TypeError, ValueError) as e:
            logger.warning("Malformed account registry, starting fresh: %s", e)
            self._entries = {}
            return
        self._entries = {entry.account.address: entry for entry in entries}
        logger.info("Loaded %d accounts", len(self._entries))

    def _save(self) -> None:
        data = {
            "version": REGISTRY_VERSION,
            "accounts": [entry.to_dict() for entry in self._entries.values()],
        }
        with open(self.accounts_file, "w") as f:
            json.dump(data, f, indent=2)
        self._publish()

    def _publish(self) -> None:
        if self.store is not None:
            self.store.set_accounts(self.get_accounts())

    def _lookup(self, address: str) -> RegistryEntry | None:
        address = normalize_address(address)
        entry = self._entries.get(address)
        if entry is None:
            lowered = address.lower()
            for key, candidate in self._entries.items():
                if key.lower() == lowered:
                    return candidate
        return entry

    def _entry(self, address: str) -> RegistryEntry:
        entry = self._lookup(address)
        if entry is None:
            raise UnknownAccountError(f"Account not found: {address}")
        return entry

    def get_accounts(self) -> list[Account]:
        return [entry.account for entry in self._entries.values()]

    def get_account(self, address: str) -> Account | None:
        entry = self._lookup(address)
        return entry.account if entry else None

    def create_account(
        self, name: str, password: str, secret: str | None = None
    ) -> Account:
        if not password:
            raise RegistryError("Password cannot be empty")
        secret = (secret or secrets.token_hex(32)).strip().removeprefix("0x")
        try:
            address = _derive_address(secret)
        except Exception as e:
            raise RegistryError("Invalid secret key") from e
        if self._lookup(address) is not None:
            raise RegistryError(f"Account already exists: {address}")

        account = Account(address=address, name=name, uuid=str(uuid.uuid4()))
        self._entries[address] = RegistryEntry(account, encrypt_secret(secret, password))
        self._save()
        logger.info("Created account %s", address)
        return account

    def add_hardware_account(self, address: str, name: str = "") -> Account:
        address = normalize_address(address)
        if self._lookup(address) is not None:
            raise RegistryError(f"Account already exists: {address}")
        account = Account(address=address, name=name, hardware=True)
        self._entries[address] = RegistryEntry(account)
        self._save()
        logger.info("Added hardware account %s", address)
        return account

    def export_account(self, address: str, password: str) -> dict[str, Any]:
        entry = self._entry(address)
        if entry.crypto is None:
            raise RegistryError("Hardware accounts cannot be exported")
        secret = decrypt_secret(entry.crypto, password)
        keyfile = dict(
            EthAccount.encrypt(
                bytes.fromhex(secret), password, kdf="pbkdf2", iterations=KDF_ITERATIONS
            )
        )
        if entry.account.uuid:
            keyfile["id"] = entry.account.uuid
        keyfile["name"] = entry.account.name
        keyfile["meta"] = dict(entry.account.meta)
        return keyfile

    def change_password(self, address: str, current: str, new: str) -> None:
        entry = self._entry(address)
        if entry.crypto is None:
            raise RegistryError("Hardware accounts have no password")
        if not new:
            raise RegistryError("Password cannot be empty")
        secret = decrypt_secret(entry.crypto, current)
        entry.crypto = encrypt_secret(secret, new)
        self._save()
        logger.info("Changed password for %s", entry.account.address)

    def set_meta(self, address: str, name: str, meta: dict[str, Any]) -> Account:
        entry = self._entry(address)
        entry.account = Account(
            address=entry.account.address,
            name=name,
            meta={**entry.account.meta, **meta},
            hardware=entry.account.hardware,
            uuid=entry.account.uuid,
        )
        self._save()
        return entry.account

    def delete_account(self, address: str, password: str) -> None:
        entry = self._entry(address)
        if entry.crypto is None:
            raise RegistryError("Use remove_address for hardware accounts")
        decrypt_secret(entry.crypto, password)
        del self._entries[entry.account.address]
        self._save()
        logger.info("Deleted account %s", entry.account.address)

    def remove_address(self, address: str) -> None:
        entry = self._entry(address)
        del self._entries[entry.account.address]
        self._save()
        logger.info("Removed %s from the account list", entry.account.address)
