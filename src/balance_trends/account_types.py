# Balance Trends - Balance aggregation engine for financial dashboards
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Account types and their sign policy.

Every balance in a report is split by account type. Deposits and
withdrawals are stored as raw positive amounts, so a "net amount" needs
a per-type factor to be comparable across types:

- asset, expense, other: debit-normal, factor +1
- liability, income:     credit-normal, factor -1

With the factor applied, all types can be drawn on the same chart with a
single "up is larger" convention.
"""

from collections.abc import Iterable, Sequence
from enum import Enum
from typing import Union

from .errors import InvalidArgumentError


class AccountType(str, Enum):
    """Closed set of account types used as keys in balance reports."""

    ASSET = "asset"
    LIABILITY = "liability"
    INCOME = "income"
    EXPENSE = "expense"
    OTHER = "other"


ACCUMULATION_SUFFIX = "-Accumulation"

DEFAULT_ACCOUNT_TYPE_ORDER: tuple[AccountType, ...] = (
    AccountType.ASSET,
    AccountType.LIABILITY,
    AccountType.INCOME,
    AccountType.EXPENSE,
    AccountType.OTHER,
)

_SIGN_FACTORS: dict[AccountType, int] = {
    AccountType.ASSET: 1,
    AccountType.LIABILITY: -1,
    AccountType.INCOME: -1,
    AccountType.EXPENSE: 1,
    AccountType.OTHER: 1,
}

# Adding a member to AccountType without a factor must fail at import time.
_missing = set(AccountType) - set(_SIGN_FACTORS)
if _missing:  # pragma: no cover
    raise RuntimeError(
        "Sign factor table is missing account types: "
        + ", ".join(sorted(t.value for t in _missing))
    )


def parse_account_type(value: Union[str, AccountType]) -> AccountType:
    """Return the AccountType for a tag such as 'asset' or 'LIABILITY'.

    Raises:
        InvalidArgumentError: if the tag is not one of the known types.
    """
    if isinstance(value, AccountType):
        return value
    if isinstance(value, str):
        tag = value.strip().lower()
        for member in AccountType:
            if member.value == tag:
                return member
    raise InvalidArgumentError(
        f"Unknown account type {value!r}. Expected one of: "
        + ", ".join(t.value for t in AccountType)
        + "."
    )


def parse_account_types(
    values: Iterable[Union[str, AccountType]],
) -> tuple[AccountType, ...]:
    """Validate an ordered account type selection.

    The selection must be non-empty and free of duplicates; its order is
    kept because it drives series order downstream.
    """
    selection = tuple(parse_account_type(v) for v in values)
    if not selection:
        raise InvalidArgumentError("At least one account type must be selected.")

    seen: set[AccountType] = set()
    for account_type in selection:
        if account_type in seen:
            raise InvalidArgumentError(
                f"Account type {account_type.value!r} is selected more than once."
            )
        seen.add(account_type)
    return selection


def account_type_factor(account_type: AccountType) -> int:
    """Return +1 or -1, the sign normalizing deposits/withdrawals for a type."""
    if not isinstance(account_type, AccountType):
        raise InvalidArgumentError(f"Unknown account type {account_type!r}.")
    return _SIGN_FACTORS[account_type]


def net_amount(
    deposits_amount: float, withdrawals_amount: float, account_type: AccountType
) -> float:
    """Sign-normalized ``deposits - withdrawals`` for one account type."""
    return (deposits_amount - withdrawals_amount) * account_type_factor(account_type)


def amount_key(account_type: AccountType) -> str:
    """Dataset column holding the per-bucket net amount of a type."""
    return account_type.value


def accumulation_key(account_type: AccountType) -> str:
    """Dataset column holding the running total of a type."""
    return f"{account_type.value}{ACCUMULATION_SUFFIX}"


def series_columns(
    account_types: Sequence[AccountType], accumulate: bool
) -> list[str]:
    """Ordered dataset columns (besides 'time') for a selection."""
    columns = [amount_key(t) for t in account_types]
    if accumulate:
        columns.extend(accumulation_key(t) for t in account_types)
    return columns
