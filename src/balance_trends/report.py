# Balance Trends - Balance aggregation engine for financial dashboards
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Balance report value objects and readers.

A ``BookGranularityBalanceReport`` holds one ``BalanceReport`` per time
bucket; each ``BalanceReport`` maps account types to a ``Balance`` made
of raw deposits and withdrawals. Account types absent from a bucket
simply have a zero balance there.

Supported input formats
-----------------------

1) JSON (the report service wire format)
   --------------------------------------
       {"reports": {"<bucket key>": {"accountTypes": {
           "asset": {"depositsAmount": 100.0, "withdrawalsAmount": 30.0},
           ...}}}}

   The top-level ``reports`` wrapper is optional.

2) Long-format CSV
   ----------------
       bucket, account_type, deposits, withdrawals

   One row per (bucket, account type). Column names are case-insensitive;
   ``key`` / ``time`` are accepted as aliases for ``bucket`` and ``type``
   for ``account_type``. Rows repeating the same (bucket, account type)
   pair are summed.

Bucket keys follow ``buckets.parse_bucket_key``: the initial literal or a
base-10 integer timestamp.
"""

import json
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Union

import pandas as pd

from .account_types import AccountType, parse_account_type
from .buckets import INITIAL_BUCKET_KEY, parse_bucket_key
from .errors import InvalidArgumentError


@dataclass(frozen=True)
class Balance:
    """Raw deposits and withdrawals of one account type in one bucket."""

    deposits_amount: float = 0.0
    withdrawals_amount: float = 0.0


ZERO_BALANCE = Balance()


@dataclass(frozen=True)
class BalanceReport:
    """Balances by account type for exactly one time bucket."""

    account_types: Mapping[AccountType, Balance] = field(default_factory=dict)

    def balance_of(self, account_type: AccountType) -> Balance:
        return self.account_types.get(account_type, ZERO_BALANCE)


@dataclass(frozen=True)
class BookGranularityBalanceReport:
    """Balance reports keyed by wire bucket key (see buckets.py)."""

    reports: Mapping[str, BalanceReport] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.reports)


# ---------------------------------------------------------------------------
# Dict <-> objects
# ---------------------------------------------------------------------------


def _to_float(value: Any, what: str) -> float:
    if value is None:
        return 0.0
    if isinstance(value, bool):
        raise ValueError(f"Invalid numeric value for {what}: {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid numeric value for {what}: {value!r}") from exc


def balance_report_from_dict(data: Mapping[str, Any]) -> BalanceReport:
    """Build a BalanceReport from ``{"accountTypes": {...}}`` (or the inner dict)."""
    if not isinstance(data, Mapping):
        raise ValueError(f"Invalid balance report, expected an object: {data!r}")

    raw_types = data.get("accountTypes", data)
    if not isinstance(raw_types, Mapping):
        raise ValueError("Invalid 'accountTypes' entry, expected an object.")

    balances: dict[AccountType, Balance] = {}
    for tag, raw_balance in raw_types.items():
        account_type = parse_account_type(tag)
        if raw_balance is None:
            continue
        if not isinstance(raw_balance, Mapping):
            raise ValueError(
                f"Invalid balance for account type {tag!r}, expected an object."
            )
        balances[account_type] = Balance(
            deposits_amount=_to_float(
                raw_balance.get("depositsAmount"), f"{tag}.depositsAmount"
            ),
            withdrawals_amount=_to_float(
                raw_balance.get("withdrawalsAmount"), f"{tag}.withdrawalsAmount"
            ),
        )
    return BalanceReport(account_types=balances)


def report_from_dict(
    data: Mapping[str, Any], initial_key: str = INITIAL_BUCKET_KEY
) -> BookGranularityBalanceReport:
    """Build a BookGranularityBalanceReport from the JSON wire structure.

    Raises:
        InvalidArgumentError: on malformed bucket keys or unknown account types.
        ValueError: on structurally invalid payloads or non-numeric amounts.
    """
    if not isinstance(data, Mapping):
        raise ValueError("Invalid report payload, expected a JSON object.")

    raw_reports = data.get("reports", data)
    if not isinstance(raw_reports, Mapping):
        raise ValueError("Invalid 'reports' entry, expected an object.")

    reports: dict[str, BalanceReport] = {}
    for key, raw_report in raw_reports.items():
        parse_bucket_key(str(key), initial_key)
        reports[str(key)] = balance_report_from_dict(raw_report or {})
    return BookGranularityBalanceReport(reports=reports)


def report_to_dict(report: BookGranularityBalanceReport) -> dict[str, Any]:
    """Serialize a report back to the JSON wire structure."""
    return {
        "reports": {
            key: {
                "accountTypes": {
                    account_type.value: {
                        "depositsAmount": balance.deposits_amount,
                        "withdrawalsAmount": balance.withdrawals_amount,
                    }
                    for account_type, balance in bucket.account_types.items()
                }
            }
            for key, bucket in report.reports.items()
        }
    }


# ---------------------------------------------------------------------------
# Readers
# ---------------------------------------------------------------------------


def _report_from_frame(
    df: pd.DataFrame, initial_key: str
) -> BookGranularityBalanceReport:
    df = df.copy()
    df.columns = [str(c).lower().strip() for c in df.columns]
    aliases = {"key": "bucket", "time": "bucket", "type": "account_type"}
    df = df.rename(columns={c: aliases[c] for c in df.columns if c in aliases})

    required = {"bucket", "account_type", "deposits", "withdrawals"}
    if not required.issubset(df.columns):
        raise ValueError(
            "Invalid balance report structure. Expected columns:\n"
            "  - bucket, account_type, deposits, withdrawals\n"
            "(column names are case-insensitive; 'key'/'time' are accepted "
            "for 'bucket' and 'type' for 'account_type')."
        )

    for col in ("deposits", "withdrawals"):
        df[col] = pd.to_numeric(df[col], errors="coerce")
    if df[["deposits", "withdrawals"]].isna().any().any():
        raise ValueError("Invalid numeric values in 'deposits'/'withdrawals' columns.")

    df["bucket"] = df["bucket"].astype(str).str.strip()
    df["account_type"] = df["account_type"].map(parse_account_type)

    grouped = df.groupby(["bucket", "account_type"], sort=False, as_index=False)[
        ["deposits", "withdrawals"]
    ].sum()

    balances_by_key: dict[str, dict[AccountType, Balance]] = {}
    for row in grouped.itertuples(index=False):
        parse_bucket_key(row.bucket, initial_key)
        account_type = parse_account_type(row.account_type)
        balances_by_key.setdefault(row.bucket, {})[account_type] = Balance(
            deposits_amount=float(row.deposits),
            withdrawals_amount=float(row.withdrawals),
        )

    return BookGranularityBalanceReport(
        reports={
            key: BalanceReport(account_types=balances)
            for key, balances in balances_by_key.items()
        }
    )


def read_balance_report(
    path: Union[str, "os.PathLike[str]"],
    initial_key: str = INITIAL_BUCKET_KEY,
) -> BookGranularityBalanceReport:
    """
    Read a granularity balance report from a JSON or CSV file.

    The format is chosen from the file suffix: ``.json`` for the wire
    format, anything else is read as a long-format CSV.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    ValueError
        If the content cannot be parsed into a report.
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise FileNotFoundError(f"Balance report file not found: {file_path}")

    if file_path.suffix.lower() == ".json":
        try:
            data = json.loads(file_path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise ValueError(f"Failed to parse JSON report file: {file_path}") from exc
        return report_from_dict(data, initial_key)

    # Bucket keys must stay strings: "01700" and the initial literal matter.
    df = pd.read_csv(file_path, dtype=str, keep_default_na=False)
    try:
        return _report_from_frame(df, initial_key)
    except InvalidArgumentError:
        raise
    except ValueError as exc:
        raise ValueError(f"{exc} (in {file_path})") from exc
