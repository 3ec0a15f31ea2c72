from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from account_console import registry
from account_console.models import Account, Balance, Certification, TokenBalance
from account_console.store import AccountStore

ADDRESS_A = "0x" + "a1" * 20
ADDRESS_B = "0x" + "b2" * 20
HARDWARE_ADDRESS = "0x" + "c3" * 20


@pytest.fixture(autouse=True)
def isolated_storage(tmp_path, monkeypatch):
    """Keep config and registry files out of the real home directory"""
    monkeypatch.setenv("ACCOUNT_CONSOLE_DIR", str(tmp_path / "console"))
    monkeypatch.delenv("ACCOUNT_CONSOLE_NET_VERSION", raising=False)
    monkeypatch.delenv("ACCOUNT_CONSOLE_CERTIFICATION_URL", raising=False)
    return tmp_path / "console"


@pytest.fixture(autouse=True)
def fast_kdf(monkeypatch):
    monkeypatch.setattr(registry, "KDF_ITERATIONS", 1_000)


@pytest.fixture
def accounts():
    return {
        ADDRESS_A: Account(address=ADDRESS_A, name="Savings", uuid="uuid-a"),
        ADDRESS_B: Account(address=ADDRESS_B, name="Spending", uuid="uuid-b"),
        HARDWARE_ADDRESS: Account(
            address=HARDWARE_ADDRESS, name="Ledger", hardware=True
        ),
    }


@pytest.fixture
def balances():
    return {
        ADDRESS_A: Balance(
            eth=Decimal("1.5"), tokens=[TokenBalance("ETH", Decimal("1.5"))]
        ),
        ADDRESS_B: Balance(eth=Decimal(0), tokens=[]),
    }


@pytest.fixture
def store(accounts, balances):
    """Fixture providing a populated account store on Kovan"""
    s = AccountStore(net_version="42")
    s.set_accounts(accounts.values())
    s.set_balances(balances)
    return s


@pytest.fixture
def mock_actions():
    return MagicMock()


@pytest.fixture
def sms_certifications():
    return {ADDRESS_A: [Certification(name="smsverification-1", title="SMS")]}


@pytest.fixture
def address():
    return ADDRESS_A


@pytest.fixture
def other_address():
    return ADDRESS_B


@pytest.fixture
def hardware_address():
    return HARDWARE_ADDRESS
