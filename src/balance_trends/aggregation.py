# Balance Trends - Balance aggregation engine for financial dashboards
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Core balance aggregation engine for Balance Trends.

``build_dataset()`` turns a sparse granularity report into an ordered
dataset ready to be charted:

1. Result states
   -------------
   - ``PENDING``: no report was given (still loading) or no time period
     is selected yet.
   - ``NO_DATA``: the report is loaded but has no real bucket once the
     initial bucket is set aside.
   - ``Dataset``: one row per real bucket, in ascending time order.

   ``PENDING`` and ``NO_DATA`` are plain values, not exceptions, and both
   are falsy.

2. Rows
   ----
   Each row is a mapping with:
       time                 : bucket start (ms since epoch)
       <type>               : net amount of the bucket for that type
       <type>-Accumulation  : running total (only when accumulating)

   Net amount = (deposits - withdrawals) * account_type_factor(type);
   a type missing from a bucket counts as 0.

3. Accumulation
   ------------
   - NONE:      no running totals.
   - NORMAL:    running totals start at 0; the initial bucket is ignored.
   - PLUS_INIT: running totals start at the initial bucket's net amounts.

The initial bucket never becomes a row.

Notes
-----
The engine is a pure function: it does not mutate the report and keeps
no cache. Callers wanting memoization can use ``memo.DatasetMemo``.
"""

import logging
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Optional, Union

import pandas as pd

from .account_types import (
    AccountType,
    accumulation_key,
    amount_key,
    net_amount,
    parse_account_types,
    series_columns,
)
from .buckets import INITIAL_BUCKET_KEY, split_buckets
from .errors import InvalidArgumentError
from .periods import TimeGranularity, TimePeriod
from .report import BalanceReport, BookGranularityBalanceReport

logger = logging.getLogger(__name__)


class AccumulationType(str, Enum):
    """Running-total behaviour of a dataset."""

    NONE = "none"
    NORMAL = "normal"
    PLUS_INIT = "plus_init"


def parse_accumulation_type(
    value: Union[str, AccumulationType, None],
) -> AccumulationType:
    """Return the AccumulationType for 'none', 'normal' or 'plus_init'.

    None is read as NONE.
    """
    if value is None:
        return AccumulationType.NONE
    if isinstance(value, AccumulationType):
        return value
    if isinstance(value, str):
        tag = value.strip().lower().replace("-", "_")
        for member in AccumulationType:
            if member.value == tag:
                return member
    raise InvalidArgumentError(
        f"Unsupported accumulation type {value!r}. Expected one of: "
        + ", ".join(a.value for a in AccumulationType)
        + "."
    )


# ---------------------------------------------------------------------------
# Result values
# ---------------------------------------------------------------------------


class Pending:
    """The report is not available yet; keep showing a loading state."""

    _instance: Optional["Pending"] = None

    def __new__(cls) -> "Pending":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "PENDING"


class NoData:
    """The report is loaded but holds no real bucket; show an empty state."""

    _instance: Optional["NoData"] = None

    def __new__(cls) -> "NoData":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NO_DATA"


PENDING = Pending()
NO_DATA = NoData()


@dataclass(frozen=True)
class Dataset:
    """
    Ordered rows produced by the aggregation engine.

    Attributes
    ----------
    rows :
        Read-only row mappings in strictly ascending ``time`` order.
    account_types :
        The requested account types, in series order.
    accumulation_type :
        Accumulation mode used to build the rows.
    granularity :
        Granularity of the period the dataset was built for. Carried for
        the axis planner; it plays no role in the arithmetic.
    """

    rows: tuple[Mapping[str, float], ...]
    account_types: tuple[AccountType, ...]
    accumulation_type: AccumulationType
    granularity: TimeGranularity

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[Mapping[str, float]]:
        return iter(self.rows)

    def __getitem__(self, index: int) -> Mapping[str, float]:
        return self.rows[index]

    @property
    def accumulates(self) -> bool:
        return self.accumulation_type != AccumulationType.NONE

    @property
    def times(self) -> list[int]:
        return [int(row["time"]) for row in self.rows]

    @property
    def columns(self) -> list[str]:
        return ["time"] + series_columns(self.account_types, self.accumulates)

    def to_frame(self) -> pd.DataFrame:
        """Wide DataFrame: one row per bucket, columns as in ``columns``."""
        return pd.DataFrame([dict(row) for row in self.rows], columns=self.columns)


BuildResult = Union[Dataset, NoData, Pending]


def _net_amounts(
    report: Optional[BalanceReport], account_types: Sequence[AccountType]
) -> dict[AccountType, float]:
    amounts: dict[AccountType, float] = {}
    for account_type in account_types:
        if report is None:
            amounts[account_type] = 0.0
            continue
        balance = report.balance_of(account_type)
        amounts[account_type] = net_amount(
            balance.deposits_amount, balance.withdrawals_amount, account_type
        )
    return amounts


def build_dataset(
    report: Optional[BookGranularityBalanceReport],
    account_types: Sequence[Union[AccountType, str]],
    time_period: Optional[TimePeriod],
    accumulation_type: Union[AccumulationType, str, None] = AccumulationType.NONE,
    initial_key: str = INITIAL_BUCKET_KEY,
) -> BuildResult:
    """Aggregate a granularity report into an ordered chart dataset.

    Args:
        report: The report, or None while it is still being fetched.
        account_types: Non-empty ordered selection without duplicates.
            Strings are accepted and parsed as account type tags.
        time_period: Selected period; only its granularity is used. None
            while no period is selected.
        accumulation_type: NONE, NORMAL or PLUS_INIT (or their tags).
        initial_key: Wire literal of the initial bucket.

    Returns:
        ``PENDING`` when report or period is missing, ``NO_DATA`` when the
        report has no real bucket, otherwise a ``Dataset``.

    Raises:
        InvalidArgumentError: on unknown account types or accumulation
            modes, an empty/duplicated selection, or malformed bucket keys.
    """
    selection = parse_account_types(account_types)
    accumulation = parse_accumulation_type(accumulation_type)

    if report is None or time_period is None:
        return PENDING

    initial_report, buckets = split_buckets(report.reports, initial_key)
    if not buckets:
        logger.debug("Report has no real bucket (%d keys)", len(report.reports))
        return NO_DATA

    accumulate = accumulation != AccumulationType.NONE
    if accumulation == AccumulationType.PLUS_INIT:
        accumulators = _net_amounts(initial_report, selection)
    else:
        accumulators = {account_type: 0.0 for account_type in selection}

    rows: list[Mapping[str, float]] = []
    for bucket, bucket_report in buckets:
        amounts = _net_amounts(bucket_report, selection)
        row: dict[str, float] = {"time": bucket.time}
        for account_type in selection:
            row[amount_key(account_type)] = amounts[account_type]
        if accumulate:
            for account_type in selection:
                accumulators[account_type] += amounts[account_type]
                row[accumulation_key(account_type)] = accumulators[account_type]
        rows.append(MappingProxyType(row))

    logger.debug(
        "Built dataset: %d rows, %d account types, accumulation=%s",
        len(rows),
        len(selection),
        accumulation.value,
    )
    return Dataset(
        rows=tuple(rows),
        account_types=selection,
        accumulation_type=accumulation,
        granularity=time_period.granularity,
    )
