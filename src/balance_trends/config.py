# Balance Trends - Balance aggregation engine for financial dashboards
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Configuration helpers for Balance Trends.

This module is responsible for:
- loading the application configuration from a TOML file,
- validating enum-like settings (account types, granularity, accumulation),
- exposing typed dataclasses used by the CLI and by embedding code.
"""

import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from .account_types import (
    DEFAULT_ACCOUNT_TYPE_ORDER,
    AccountType,
    parse_account_types,
)
from .aggregation import AccumulationType, parse_accumulation_type
from .axis import DEFAULT_DATE_FORMAT, DEFAULT_MONTH_FORMAT
from .buckets import INITIAL_BUCKET_KEY
from .formatting import currency_symbol
from .periods import TimeGranularity, parse_granularity

DEFAULT_CONFIG_FILENAME = "balance_trends.toml"


@dataclass(frozen=True)
class BookConfig:
    """Book-level settings: display name, currency and precision."""

    name: str = ""
    currency: str = "EUR"
    symbol: Optional[str] = None
    fraction_digits: int = 2

    @property
    def currency_symbol(self) -> str:
        return currency_symbol(self.currency, self.symbol)


@dataclass(frozen=True)
class DisplayConfig:
    """Number/date display preferences and CLI output mode."""

    fix_fraction_digits: bool = False
    date_format: str = DEFAULT_DATE_FORMAT
    month_format: str = DEFAULT_MONTH_FORMAT
    timezone: str = "UTC"
    mode: str = "table"


@dataclass(frozen=True)
class ReportConfig:
    """Where to read reports from and how the initial bucket is spelled."""

    path: Optional[Path] = None
    initial_bucket_key: str = INITIAL_BUCKET_KEY


@dataclass(frozen=True)
class ChartConfig:
    """Default chart selection."""

    account_types: tuple[AccountType, ...] = DEFAULT_ACCOUNT_TYPE_ORDER
    accumulation: AccumulationType = AccumulationType.NONE
    granularity: TimeGranularity = TimeGranularity.MONTHLY


@dataclass(frozen=True)
class AppConfig:
    """Application-wide configuration for Balance Trends."""

    book: BookConfig = field(default_factory=BookConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    report: ReportConfig = field(default_factory=ReportConfig)
    chart: ChartConfig = field(default_factory=ChartConfig)


def _load_toml(path: Path) -> dict[str, Any]:
    """
    Load a TOML file and return its content as a dictionary.

    Raises:
        FileNotFoundError: if the file does not exist.
        ValueError: if the TOML content cannot be parsed or is not a table.
    """
    if not path.is_file():
        raise FileNotFoundError(f"Config file not found: {path}")

    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise ValueError(f"Failed to parse TOML config file: {path}") from exc

    if not isinstance(data, dict):
        raise ValueError(f"Invalid TOML root type in {path}, expected a table.")

    return data


def _section(raw: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    value = raw.get(name) or {}
    if not isinstance(value, Mapping):
        return {}
    return value


def _parse_book(section: Mapping[str, Any]) -> BookConfig:
    try:
        fraction_digits = int(section.get("fraction_digits", 2))
    except (TypeError, ValueError) as exc:
        raise ValueError(
            "Invalid value for 'book.fraction_digits' in the configuration. "
            "Expected an integer."
        ) from exc
    if fraction_digits < 0:
        raise ValueError("'book.fraction_digits' cannot be negative.")

    symbol = section.get("symbol")
    return BookConfig(
        name=str(section.get("name") or ""),
        currency=str(section.get("currency") or "EUR"),
        symbol=str(symbol) if symbol else None,
        fraction_digits=fraction_digits,
    )


def _parse_display(section: Mapping[str, Any]) -> DisplayConfig:
    mode = str(section.get("mode", "table"))
    if mode not in {"table", "csv", "both"}:
        raise ValueError(
            f"Invalid value for 'display.mode': {mode!r}. "
            "Expected one of: table, csv, both."
        )
    return DisplayConfig(
        fix_fraction_digits=bool(section.get("fix_fraction_digits", False)),
        date_format=str(section.get("date_format") or DEFAULT_DATE_FORMAT),
        month_format=str(section.get("month_format") or DEFAULT_MONTH_FORMAT),
        timezone=str(section.get("timezone") or "UTC"),
        mode=mode,
    )


def _parse_report(section: Mapping[str, Any], base_dir: Path) -> ReportConfig:
    raw_path = section.get("path")
    path = (base_dir / str(raw_path)).resolve() if raw_path else None
    initial_key = str(section.get("initial_bucket_key") or INITIAL_BUCKET_KEY)
    return ReportConfig(path=path, initial_bucket_key=initial_key)


def _parse_chart(section: Mapping[str, Any]) -> ChartConfig:
    raw_types = section.get("account_types")
    if raw_types is None:
        account_types = DEFAULT_ACCOUNT_TYPE_ORDER
    elif isinstance(raw_types, list):
        account_types = parse_account_types(raw_types)
    else:
        raise ValueError("'chart.account_types' must be a list of account types.")

    return ChartConfig(
        account_types=account_types,
        accumulation=parse_accumulation_type(section.get("accumulation")),
        granularity=parse_granularity(section.get("granularity") or "monthly"),
    )


def load_app_config(
    config_path: Optional[str] = None, missing_ok: bool = False
) -> AppConfig:
    """
    Load the Balance Trends configuration from a TOML file.

    Expected sections (all optional)
    --------------------------------
    [book]
        name, currency, symbol, fraction_digits.

    [display]
        fix_fraction_digits, date_format, month_format (strftime patterns),
        timezone, mode (table / csv / both).

    [report]
        path of a default report file (relative to the TOML file) and
        initial_bucket_key, the literal used for the initial bucket.

    [chart]
        account_types, accumulation (none / normal / plus_init) and
        granularity (daily / monthly / yearly).

    Parameters
    ----------
    config_path :
        Path to the TOML file. Defaults to ``balance_trends.toml`` in the
        current directory.
    missing_ok :
        Return the defaults instead of raising when the file is absent.

    Returns
    -------
    AppConfig
        Parsed and validated configuration.

    Raises
    ------
    FileNotFoundError
        If the file is missing and ``missing_ok`` is False.
    ValueError
        If the file cannot be parsed or holds invalid values
        (``InvalidArgumentError`` for unknown enum values).
    """
    if config_path is None:
        config_file = Path(DEFAULT_CONFIG_FILENAME).resolve()
    else:
        config_file = Path(config_path).resolve()

    if missing_ok and not config_file.is_file():
        return AppConfig()

    raw = _load_toml(config_file)
    base_dir = config_file.parent

    return AppConfig(
        book=_parse_book(_section(raw, "book")),
        display=_parse_display(_section(raw, "display")),
        report=_parse_report(_section(raw, "report"), base_dir),
        chart=_parse_chart(_section(raw, "chart")),
    )
