import pytest

from balance_trends.account_types import (
    AccountType,
    account_type_factor,
    accumulation_key,
    net_amount,
    parse_account_type,
    parse_account_types,
    series_columns,
)
from balance_trends.errors import InvalidArgumentError


def test_sign_factors_cover_every_account_type() -> None:
    """Credit-normal types are negated, debit-normal types are kept."""
    assert account_type_factor(AccountType.ASSET) == 1
    assert account_type_factor(AccountType.EXPENSE) == 1
    assert account_type_factor(AccountType.OTHER) == 1
    assert account_type_factor(AccountType.LIABILITY) == -1
    assert account_type_factor(AccountType.INCOME) == -1
    for account_type in AccountType:
        assert account_type_factor(account_type) in (1, -1)


def test_net_amount_applies_sign() -> None:
    """Same balance gives opposite nets for asset and liability."""
    assert net_amount(100, 30, AccountType.ASSET) == 70
    assert net_amount(100, 30, AccountType.LIABILITY) == -70


def test_unknown_account_type_fails_fast() -> None:
    with pytest.raises(InvalidArgumentError):
        account_type_factor("asset")  # type: ignore[arg-type]
    with pytest.raises(InvalidArgumentError):
        parse_account_type("equity")


def test_parse_account_type_is_case_insensitive() -> None:
    assert parse_account_type(" LIABILITY ") is AccountType.LIABILITY
    assert parse_account_type(AccountType.INCOME) is AccountType.INCOME


def test_parse_account_types_rejects_empty_and_duplicates() -> None:
    assert parse_account_types(["income", "asset"]) == (
        AccountType.INCOME,
        AccountType.ASSET,
    )
    with pytest.raises(InvalidArgumentError):
        parse_account_types([])
    with pytest.raises(InvalidArgumentError):
        parse_account_types(["asset", AccountType.ASSET])


def test_series_columns_order() -> None:
    types = [AccountType.LIABILITY, AccountType.ASSET]
    assert series_columns(types, accumulate=False) == ["liability", "asset"]
    assert series_columns(types, accumulate=True) == [
        "liability",
        "asset",
        "liability-Accumulation",
        "asset-Accumulation",
    ]
    assert accumulation_key(AccountType.OTHER) == "other-Accumulation"
