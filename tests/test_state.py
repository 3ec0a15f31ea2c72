import json
from decimal import Decimal

import pytest

from account_console.hardware import HardwareStore
from account_console.state import NodeState, apply_state, load_state
from account_console.store import AccountStore


@pytest.fixture
def state_data(address, hardware_address):
    return {
        "net_version": 1,
        "balances": {
            address: {"eth": "1.5", "tokens": [{"token": "ETH", "value": "1.5"}]}
        },
        "transactions": {
            address: [
                {"hash": "0x01", "from": address, "to": hardware_address, "value": "0.5", "blockNumber": "12"}
            ]
        },
        "certifications": {address: [{"name": "smsverification"}]},
        "certifiers": [{"id": 1, "name": "smsverification"}],
        "hardware": [hardware_address],
    }


@pytest.mark.unit
def test_load_missing_state(tmp_path):
    assert load_state(tmp_path / "state.json") == NodeState()


@pytest.mark.unit
def test_load_corrupt_state(tmp_path):
    path = tmp_path / "state.json"
    path.write_text("[")
    assert load_state(path) == NodeState()


@pytest.mark.unit
def test_load_and_apply_state(tmp_path, state_data, address, hardware_address):
    path = tmp_path / "state.json"
    path.write_text(json.dumps(state_data))
    store = AccountStore(net_version="42")
    hardware = HardwareStore()

    state = load_state(path)
    apply_state(state, store, hardware)

    assert store.net_version == "1"
    assert store.balances[address].has_tokens is True
    assert store.balances[address].eth == Decimal("1.5")
    tx = store.transactions[address][0]
    assert tx.to_address == hardware_address
    assert tx.block_number == 12
    assert hardware.is_connected(hardware_address) is True
    assert state.certifications[address] == [{"name": "smsverification"}]


@pytest.mark.unit
@pytest.mark.parametrize(
    "content",
    [
        [],
        {"balances": []},
        {"transactions": {"0x01": "not-a-list"}},
        {"balances": {"0x01": {"eth": "lots"}}},
        {"certifications": "x"},
    ],
)
def test_malformed_state_is_read_as_empty(tmp_path, content):
    path = tmp_path / "state.json"
    path.write_text(json.dumps(content))
    assert load_state(path) == NodeState()
