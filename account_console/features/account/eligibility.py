"""Network and certification checks that gate account actions.

All functions are pure: the same inputs always give the same answer, and
missing certification data reads as "not certified".
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Sequence

KOVAN_NET_VERSION = "42"
MAINNET_NET_VERSION = "1"
SMS_CERTIFICATION_PREFIX = "smsverification"


def is_kovan(net_version: str | None) -> bool:
    return net_version == KOVAN_NET_VERSION


def is_mainnet(net_version: str | None) -> bool:
    return net_version == MAINNET_NET_VERSION


def _certification_name(record: Any) -> str:
    if isinstance(record, Mapping):
        name = record.get("name")
    else:
        name = getattr(record, "name", None)
    return name if isinstance(name, str) else ""


def is_sms_certified(
    certifications: Mapping[str, Sequence[Any]] | None, address: str
) -> bool:
    if not certifications:
        return False
    records = certifications.get(address) or []
    return any(
        _certification_name(record).startswith(SMS_CERTIFICATION_PREFIX)
        for record in records
    )


def is_faucettable(
    net_version: str | None,
    certifications: Mapping[str, Sequence[Any]] | None,
    address: str,
) -> bool:
    return is_kovan(net_version) or (
        is_mainnet(net_version) and is_sms_certified(certifications, address)
    )


def is_verifiable(net_version: str | None) -> bool:
    return is_mainnet(net_version)


@dataclass(frozen=True)
class Eligibility:
    faucettable: bool
    verifiable: bool


def evaluate(
    net_version: str | None,
    certifications: Mapping[str, Sequence[Any]] | None,
    address: str,
) -> Eligibility:
    return Eligibility(
        faucettable=is_faucettable(net_version, certifications, address),
        verifiable=is_verifiable(net_version),
    )
