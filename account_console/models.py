"""Account, balance and certification records shown by the account console."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any


def normalize_address(address: str) -> str:
    return address.strip() if address else ""


@dataclass
class Account:
    address: str
    name: str = ""
    meta: dict[str, Any] = field(default_factory=dict)
    hardware: bool = False
    uuid: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "address": self.address,
            "name": self.name,
            "meta": dict(self.meta),
            "hardware": self.hardware,
            "uuid": self.uuid,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Account":
        return cls(
            address=normalize_address(data.get("address", "")),
            name=data.get("name", ""),
            meta=dict(data.get("meta") or {}),
            hardware=bool(data.get("hardware", False)),
            uuid=data.get("uuid", ""),
        )


@dataclass
class TokenBalance:
    token: str
    value: Decimal = Decimal(0)

    def to_dict(self) -> dict[str, Any]:
        return {"token": self.token, "value": str(self.value)}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TokenBalance":
        return cls(token=data.get("token", ""), value=Decimal(str(data.get("value", 0))))


@dataclass
class Balance:
    """Native amount plus token holdings for one address."""

    eth: Decimal = Decimal(0)
    tokens: list[TokenBalance] = field(default_factory=list)

    @property
    def has_tokens(self) -> bool:
        return len(self.tokens) > 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "eth": str(self.eth),
            "tokens": [token.to_dict() for token in self.tokens],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Balance":
        return cls(
            eth=Decimal(str(data.get("eth", 0))),
            tokens=[TokenBalance.from_dict(item) for item in data.get("tokens", [])],
        )


@dataclass
class Certification:
    name: str
    title: str = ""
    icon: str = ""
    id: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "title": self.title, "icon": self.icon, "id": self.id}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Certification":
        return cls(
            name=data.get("name", ""),
            title=data.get("title", ""),
            icon=data.get("icon", ""),
            id=data.get("id"),
        )


@dataclass
class Certifier:
    id: int
    name: str
    title: str = ""
    icon: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Certifier":
        return cls(
            id=int(data.get("id", 0)),
            name=data.get("name", ""),
            title=data.get("title", ""),
            icon=data.get("icon", ""),
        )


@dataclass
class Transaction:
    hash: str
    from_address: str
    to_address: str
    value: Decimal = Decimal(0)
    block_number: int | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Transaction":
        block = data.get("block_number", data.get("blockNumber"))
        return cls(
            hash=data.get("hash", ""),
            from_address=data.get("from", data.get("from_address", "")),
            to_address=data.get("to", data.get("to_address", "")),
            value=Decimal(str(data.get("value", 0))),
            block_number=int(block) if block is not None else None,
        )
