# Balance Trends - Balance aggregation engine for financial dashboards
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Period helpers for Balance Trends.

This module defines the TimePeriod value object (a millisecond range plus
a bucketing granularity) and the helpers that live around the aggregation
engine rather than inside it:

- resolving "from book inception" into the report request range,
- shifting a period backward/forward by a month or a year,
- deriving a period from CLI arguments,
- clipping a full report to a period the way the report service does.
"""

from dataclasses import dataclass, replace
from datetime import date, datetime, timezone
from enum import Enum
from typing import Optional, Union

import pandas as pd

from .buckets import INITIAL_BUCKET_KEY, bucket_key_to_wire, split_buckets
from .errors import InvalidArgumentError
from .report import Balance, BalanceReport, BookGranularityBalanceReport

MS_PER_DAY = 24 * 60 * 60 * 1000


class TimeGranularity(str, Enum):
    """Bucketing resolution of a report."""

    DAILY = "daily"
    MONTHLY = "monthly"
    YEARLY = "yearly"


def parse_granularity(value: Union[str, TimeGranularity]) -> TimeGranularity:
    """Return the TimeGranularity for 'daily', 'monthly' or 'yearly'."""
    if isinstance(value, TimeGranularity):
        return value
    if isinstance(value, str):
        tag = value.strip().lower()
        for member in TimeGranularity:
            if member.value == tag:
                return member
    raise InvalidArgumentError(
        f"Unsupported granularity {value!r}. Expected one of: "
        + ", ".join(g.value for g in TimeGranularity)
        + "."
    )


@dataclass(frozen=True)
class TimePeriod:
    """A reporting period in milliseconds since the Unix epoch.

    ``start`` is None (or negative) when the period runs from book
    inception.
    """

    start: Optional[int]
    end: int
    granularity: TimeGranularity = TimeGranularity.MONTHLY

    @property
    def from_inception(self) -> bool:
        return self.start is None or self.start < 0

    def report_range(
        self, initial_key: str = INITIAL_BUCKET_KEY
    ) -> tuple[Union[int, str], int]:
        """Range to request from the report service.

        A from-inception period asks for everything since the initial
        bucket; the aggregation engine itself never performs this step.
        """
        start: Union[int, str] = (
            initial_key if self.from_inception else int(self.start)  # type: ignore[arg-type]
        )
        return start, self.end


def _today() -> date:
    """Return today's date as a date object (isolated for easier testing)."""
    return datetime.today().date()


def to_timestamp_ms(value: Union[date, datetime, pd.Timestamp]) -> int:
    """Milliseconds since epoch for a date (midnight UTC) or datetime."""
    ts = pd.Timestamp(value)
    if ts.tzinfo is None:
        ts = ts.tz_localize(timezone.utc)
    return int(ts.value // 1_000_000)


def from_timestamp_ms(ms: int, tz: Optional[str] = None) -> pd.Timestamp:
    """Timezone-aware Timestamp for a millisecond epoch value."""
    ts = pd.Timestamp(int(ms), unit="ms", tz="UTC")
    if tz:
        ts = ts.tz_convert(tz)
    return ts


def uses_year_shift(period: TimePeriod) -> bool:
    """True when previous/next should move by a year instead of a month.

    That is the case for yearly granularity, or for periods spanning at
    least 364 days.
    """
    if period.granularity == TimeGranularity.YEARLY:
        return True
    if not period.from_inception:
        return abs(period.end - period.start) / MS_PER_DAY >= 364
    return False


def shift_period(period: TimePeriod, step: int) -> TimePeriod:
    """Move a period ``step`` months (or years) back (<0) or forward (>0).

    From-inception periods keep their open start and only move their end.
    """
    offset = (
        pd.DateOffset(years=step)
        if uses_year_shift(period)
        else pd.DateOffset(months=step)
    )
    # Shift the exclusive end so month-end periods stay month-end periods.
    end = to_timestamp_ms(from_timestamp_ms(period.end + 1) + offset) - 1
    if period.from_inception:
        return replace(period, end=end)
    start = to_timestamp_ms(from_timestamp_ms(period.start) + offset)  # type: ignore[arg-type]
    return replace(period, start=start, end=end)


def determine_period_from_args(
    args,
    default_granularity: TimeGranularity = TimeGranularity.MONTHLY,
) -> TimePeriod:
    """
    Determine the period to use based on CLI args.

    - ``args.from_date`` (YYYY-MM-DD): period start, or from inception when
      omitted,
    - ``args.to_date`` (YYYY-MM-DD): period end (inclusive, end of day),
      or today when omitted,
    - ``args.granularity``: overrides ``default_granularity``.
    """
    from_raw: Optional[str] = getattr(args, "from_date", None)
    to_raw: Optional[str] = getattr(args, "to_date", None)
    granularity_raw = getattr(args, "granularity", None)

    granularity = (
        parse_granularity(granularity_raw) if granularity_raw else default_granularity
    )

    try:
        start_day = date.fromisoformat(from_raw) if from_raw else None
        end_day = date.fromisoformat(to_raw) if to_raw else _today()
    except ValueError as exc:
        raise ValueError("Invalid period dates, expected YYYY-MM-DD format.") from exc

    if start_day is not None and end_day < start_day:
        raise ValueError("Custom period end date cannot be before start date.")

    start = to_timestamp_ms(start_day) if start_day is not None else None
    end = to_timestamp_ms(end_day) + MS_PER_DAY - 1
    return TimePeriod(start=start, end=end, granularity=granularity)


def _merge_balances(into: dict, report: BalanceReport) -> None:
    for account_type, balance in report.account_types.items():
        current = into.get(account_type, Balance())
        into[account_type] = Balance(
            deposits_amount=current.deposits_amount + balance.deposits_amount,
            withdrawals_amount=current.withdrawals_amount + balance.withdrawals_amount,
        )


def clip_report_to_period(
    report: BookGranularityBalanceReport,
    period: TimePeriod,
    initial_key: str = INITIAL_BUCKET_KEY,
) -> BookGranularityBalanceReport:
    """
    Restrict a report to ``period``.

    Real buckets after ``period.end`` are dropped. Real buckets before
    ``period.start`` are folded into the initial bucket, so that running
    totals seeded from it stay correct. From-inception periods keep every
    bucket up to the end.

    Keys resolving to the same timestamp are not merged: the last one seen
    wins, exactly as in the aggregation engine.

    Parameters
    ----------
    report:
        Full report, typically read from a file.
    period:
        Period defining the [start, end] boundaries (inclusive).

    Returns
    -------
    BookGranularityBalanceReport
        A new report; the input is left untouched.
    """
    start = None if period.from_inception else period.start

    initial_report, buckets = split_buckets(report.reports, initial_key)

    initial_balances: dict = {}
    has_initial = initial_report is not None
    if initial_report is not None:
        _merge_balances(initial_balances, initial_report)
    kept: dict[str, BalanceReport] = {}

    for bucket, bucket_report in buckets:
        if bucket.time > period.end:
            continue
        if start is not None and bucket.time < start:
            has_initial = True
            _merge_balances(initial_balances, bucket_report)
        else:
            kept[bucket_key_to_wire(bucket, initial_key)] = bucket_report

    reports: dict[str, BalanceReport] = {}
    if has_initial:
        reports[initial_key] = BalanceReport(account_types=initial_balances)
    reports.update(kept)
    return BookGranularityBalanceReport(reports=reports)
