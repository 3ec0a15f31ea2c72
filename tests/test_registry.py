import json

import pytest
from eth_account import Account as EthAccount

from account_console.registry import (
    AccountRegistry,
    InvalidPasswordError,
    RegistryError,
    UnknownAccountError,
    decrypt_secret,
    encrypt_secret,
)
from account_console.store import AccountStore

SECRET = "11" * 32


@pytest.fixture
def registry_dir(tmp_path):
    return tmp_path / "registry"


@pytest.fixture
def registry(registry_dir):
    return AccountRegistry(registry_dir, AccountStore())


@pytest.mark.unit
def test_encrypt_decrypt_secret():
    crypto = encrypt_secret(SECRET, "password123")
    assert SECRET not in json.dumps(crypto)
    assert decrypt_secret(crypto, "password123") == SECRET
    with pytest.raises(InvalidPasswordError):
        decrypt_secret(crypto, "wrong")


@pytest.mark.unit
def test_create_account(registry):
    account = registry.create_account("Primary", "password123")
    assert account.address.startswith("0x")
    assert len(account.address) == 42
    assert account.name == "Primary"
    assert account.uuid
    assert registry.get_account(account.address) == account


@pytest.mark.unit
def test_create_account_from_secret_is_deterministic(registry):
    account = registry.create_account("Imported", "password123", secret=SECRET)
    with pytest.raises(RegistryError, match="already exists"):
        registry.create_account("Again", "password123", secret=SECRET)
    assert len(registry.get_accounts()) == 1
    assert account.address == registry.get_accounts()[0].address


@pytest.mark.unit
@pytest.mark.parametrize(
    "password, secret, message",
    [("", None, "Password cannot be empty"), ("pw", "not-hex", "Invalid secret key")],
)
def test_create_account_rejects(registry, password, secret, message):
    with pytest.raises(RegistryError, match=message):
        registry.create_account("Bad", password, secret=secret)


@pytest.mark.unit
def test_registry_publishes_to_store(registry):
    account = registry.create_account("Primary", "password123")
    assert registry.store.accounts == {account.address: account}

    registry.remove_address(account.address)
    assert registry.store.accounts == {}


@pytest.mark.unit
def test_registry_persists(registry, registry_dir):
    local = registry.create_account("Primary", "password123")
    hardware = registry.add_hardware_account("  " + "0x" + "c3" * 20, "Ledger")
    assert hardware.address == "0x" + "c3" * 20

    reloaded = AccountRegistry(registry_dir)

    assert reloaded.get_accounts() == [local, hardware]
    assert reloaded.get_account(hardware.address).hardware is True


@pytest.mark.unit
def test_old_registry_version_is_ignored(registry_dir):
    registry_dir.mkdir(parents=True)
    (registry_dir / "accounts.json").write_text(json.dumps({"version": 0}))
    assert AccountRegistry(registry_dir).get_accounts() == []


@pytest.mark.unit
def test_export_account(registry):
    account = registry.create_account("Primary", "password123", secret=SECRET)

    keyfile = registry.export_account(account.address, "password123")

    assert keyfile["version"] == 3
    assert "0x" + keyfile["address"] == account.address.lower()
    assert keyfile["id"] == account.uuid
    assert keyfile["name"] == "Primary"
    assert SECRET not in json.dumps(keyfile)
    with pytest.raises(InvalidPasswordError):
        registry.export_account(account.address, "wrong")


@pytest.mark.unit
def test_export_hardware_account_fails(registry):
    account = registry.add_hardware_account("0x" + "c3" * 20)
    with pytest.raises(RegistryError, match="cannot be exported"):
        registry.export_account(account.address, "anything")


@pytest.mark.unit
def test_unknown_account(registry):
    with pytest.raises(UnknownAccountError, match="Account not found"):
        registry.export_account("0x" + "00" * 20, "password123")


@pytest.mark.unit
def test_change_password(registry):
    account = registry.create_account("Primary", "old-password", secret=SECRET)

    with pytest.raises(InvalidPasswordError):
        registry.change_password(account.address, "wrong", "new-password")
    registry.change_password(account.address, "old-password", "new-password")

    keyfile = registry.export_account(account.address, "new-password")
    assert bytes(EthAccount.decrypt(keyfile, "new-password")) == bytes.fromhex(SECRET)


@pytest.mark.unit
def test_set_meta_merges(registry):
    account = registry.create_account("Primary", "password123")
    registry.set_meta(account.address, "Renamed", {"description": "cold"})
    updated = registry.set_meta(account.address, "Renamed", {"passwordHint": "pet"})

    assert updated.name == "Renamed"
    assert updated.meta == {"description": "cold", "passwordHint": "pet"}
    assert updated.uuid == account.uuid


@pytest.mark.unit
def test_delete_account_requires_password(registry):
    account = registry.create_account("Primary", "password123")

    with pytest.raises(InvalidPasswordError):
        registry.delete_account(account.address, "wrong")
    assert registry.get_account(account.address) is not None

    registry.delete_account(account.address, "password123")
    assert registry.get_account(account.address) is None


@pytest.mark.unit
def test_hardware_accounts_are_removed_not_deleted(registry):
    account = registry.add_hardware_account("0x" + "c3" * 20)

    with pytest.raises(RegistryError, match="remove_address"):
        registry.delete_account(account.address, "")
    registry.remove_address(account.address)

    assert registry.get_accounts() == []


@pytest.mark.unit
def test_exported_keystore_decrypts_to_secret(registry):
    account = registry.create_account("Primary", "password123", secret=SECRET)
    keyfile = registry.export_account(account.address, "password123")
    assert bytes(EthAccount.decrypt(keyfile, "password123")) == bytes.fromhex(SECRET)


@pytest.mark.unit
def test_address_is_derived_from_public_key(registry):
    account = registry.create_account("One", "pw", secret="0x" + "00" * 31 + "01")
    assert account.address.lower() == "0x7e5f4552091a69125d5dfcb7b8c2659029395bdf"


@pytest.mark.unit
def test_lookup_ignores_address_case(registry):
    account = registry.create_account("Primary", "password123", secret=SECRET)
    assert registry.get_account(account.address.lower()) == account
    assert registry.get_account(account.address.upper().replace("0X", "0x")) == account
    with pytest.raises(RegistryError, match="already exists"):
        registry.add_hardware_account(account.address.lower())


@pytest.mark.unit
@pytest.mark.parametrize(
    "content",
    [
        [],
        {"version": "1", "accounts": []},
        {"version": 1, "accounts": ["0xabc"]},
        {"version": 1, "accounts": None},
    ],
)
def test_malformed_registry_is_read_as_empty(registry_dir, content):
    registry_dir.mkdir(parents=True)
    (registry_dir / "accounts.json").write_text(json.dumps(content))
    assert AccountRegistry(registry_dir).get_accounts() == []
