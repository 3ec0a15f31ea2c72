"""Input validation for the account dialogs."""

from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any

from account_console.models import Balance

ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")


@dataclass
class DialogValidationResult:
    is_valid: bool
    error_message: str | None = None
    normalized_value: Any = None


def validate_address(value: str) -> DialogValidationResult:
    address = (value or "").strip()
    if not address:
        return DialogValidationResult(False, "Recipient address is required")
    if not ADDRESS_RE.match(address):
        return DialogValidationResult(
            False, "Address must be 0x followed by 40 hex characters"
        )
    return DialogValidationResult(True, normalized_value=address)


def validate_amount(
    value: str, token: str, balance: Balance | None
) -> DialogValidationResult:
    raw = (value or "").strip().replace(",", "")
    if not raw:
        return DialogValidationResult(False, "Amount is required")
    try:
        amount = Decimal(raw)
    except (InvalidOperation, ValueError):
        return DialogValidationResult(False, "Amount must be a valid number")
    if not amount.is_finite() or amount <= 0:
        return DialogValidationResult(False, "Amount must be greater than zero")

    holdings = {item.token: item.value for item in (balance.tokens if balance else [])}
    if token not in holdings:
        return DialogValidationResult(False, f"No {token or 'token'} balance available")
    if amount > holdings[token]:
        return DialogValidationResult(False, f"Insufficient {token} balance")
    return DialogValidationResult(True, normalized_value=amount)


def validate_new_password(password: str, confirm: str) -> DialogValidationResult:
    if not password:
        return DialogValidationResult(False, "Password cannot be empty")
    if password != confirm:
        return DialogValidationResult(False, "Passwords do not match")
    return DialogValidationResult(True, normalized_value=password)
