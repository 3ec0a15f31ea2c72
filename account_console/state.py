"""Loading of node-side data (balances, transactions, certifications) from disk.

The console does not talk to a node for balances itself. Whatever feeds it
writes a ``state.json`` next to the account registry::

    {
      "net_version": "42",
      "balances": {"0x..": {"eth": "1.5", "tokens": [{"token": "ETH", "value": "1.5"}]}},
      "transactions": {"0x..": [{"hash": "0x..", "from": "0x..", "to": "0x..", "value": "1"}]},
      "certifications": {"0x..": [{"name": "smsverification"}]},
      "certifiers": [{"id": 1, "name": "smsverification"}],
      "hardware": ["0x.."]
    }
"""

from __future__ import annotations

import json
import logging
from decimal import InvalidOperation
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from account_console.hardware import HardwareStore
from account_console.models import Balance, Transaction
from account_console.store import AccountStore

logger = logging.getLogger(__name__)


@dataclass
class NodeState:
    net_version: str | None = None
    balances: dict[str, Balance] = field(default_factory=dict)
    transactions: dict[str, list[Transaction]] = field(default_factory=dict)
    certifications: dict[str, list[dict[str, Any]]] = field(default_factory=dict)
    certifiers: list[dict[str, Any]] = field(default_factory=list)
    hardware: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "NodeState":
        net_version = data.get("net_version")
        return cls(
            net_version=str(net_version) if net_version is not None else None,
            balances={
                address: Balance.from_dict(item)
                for address, item in data.get("balances", {}).items()
            },
            transactions={
                address: [Transaction.from_dict(tx) for tx in items]
                for address, items in data.get("transactions", {}).items()
            },
            certifications=dict(data.get("certifications", {})),
            certifiers=list(data.get("certifiers", [])),
            hardware=list(data.get("hardware", [])),
        )


def load_state(path: Path) -> NodeState:
    if not path.exists():
        return NodeState()
    try:
        with open(path, "r") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.warning("Failed to load node state from %s: %s", path, e)
        return NodeState()

    if not isinstance(data, dict):
        logger.warning("Node state in %s is not a JSON object, ignoring it", path)
        return NodeState()
    try:
        return NodeState.from_dict(data)
    except (AttributeError, TypeError, ValueError, InvalidOperation) as e:
        logger.warning("Malformed node state in %s, ignoring it: %s", path, e)
        return NodeState()


def apply_state(state: NodeState, store: AccountStore, hardware: HardwareStore) -> None:
    if state.net_version:
        store.set_net_version(state.net_version)
    store.set_balances(state.balances)
    for address, transactions in state.transactions.items():
        store.set_transactions(address, transactions)
    hardware.set_connected(state.hardware)
