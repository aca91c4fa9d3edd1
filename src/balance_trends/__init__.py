# Balance Trends - Balance aggregation engine for financial dashboards
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Balance Trends
--------------

A Python library that turns periodic balance reports into chart-ready
time series for financial dashboards (balance sheets, account type
breakdowns).

Main capabilities:
- sign-normalized net amounts per account type (asset, liability,
  income, expense, other),
- an explicit initial bucket holding the balance accrued before the
  visible period,
- three accumulation modes (none, normal, initial + accumulated),
- time axis planning with daily / monthly / yearly labels,
- chart series, legend and margin binding with injected labels, colours
  and number/date formatting,
- TOML configuration and a small CLI for JSON / CSV report files.

The engine is pure: no I/O, no cache, no state between calls. Report
fetching, caching and rendering belong to the caller.


Version: 0.1.0

Usage:
    python -m balance_trends.cli --help
"""

__all__ = [
    "account_types",
    "aggregation",
    "axis",
    "buckets",
    "config",
    "formatting",
    "memo",
    "periods",
    "report",
    "series",
]

__version__ = "0.1.0"
