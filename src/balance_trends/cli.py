# Balance Trends - Balance aggregation engine for financial dashboards
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Command-Line Interface (CLI) for Balance Trends.

The CLI is intentionally thin: it does not implement any aggregation
logic itself. It wires together the building blocks of the package:

1) Load the TOML configuration (``balance_trends.toml`` by default, or
   ``--config PATH``). Without ``--config`` a missing file is fine and
   built-in defaults are used.

2) Read a granularity balance report from a JSON or CSV file
   (``--report PATH``, or ``[report].path`` from the configuration).

3) Determine the period from ``--from-date`` / ``--to-date`` /
   ``--granularity`` and clip the report to it, folding earlier buckets
   into the initial bucket.

4) Build the dataset for the selected account types and accumulation
   mode, plan the time axis and bind the chart series.

5) Render the dataset as a console table and/or a CSV file depending on
   the display mode.

Usage:
    python -m balance_trends.cli --report data/report.json \\
        --account-types asset,liability --accumulation plus_init
"""

import argparse
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

import pandas as pd

from . import __version__
from .account_types import AccountType, parse_account_types
from .aggregation import (
    AccumulationType,
    Dataset,
    build_dataset,
    parse_accumulation_type,
)
from .axis import AxisPlan, LabelContext, plan_axis
from .config import AppConfig, load_app_config
from .formatting import DefaultFormatter
from .periods import clip_report_to_period, determine_period_from_args
from .report import read_balance_report
from .series import ChartSeries, bind_series

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser for the CLI."""
    ap = argparse.ArgumentParser(
        prog="python -m balance_trends.cli",
        description=(
            "Balance Trends - turns a granularity balance report into "
            "per-account-type net amounts and running totals over time."
        ),
    )

    ap.add_argument(
        "--version",
        action="store_true",
        help="Show the installed version of balance_trends and exit.",
    )
    ap.add_argument(
        "--config",
        dest="config_path",
        help=(
            "Path to the TOML configuration file. If omitted, "
            "'balance_trends.toml' in the current directory is used when present."
        ),
    )
    ap.add_argument(
        "--report",
        dest="report_path",
        help="Granularity balance report file (.json or long-format .csv).",
    )
    ap.add_argument(
        "--account-types",
        dest="account_types",
        help=(
            "Comma-separated account types in series order, e.g. "
            "'asset,liability'. Defaults to the configuration."
        ),
    )
    ap.add_argument(
        "--granularity",
        choices=["daily", "monthly", "yearly"],
        help="Granularity of the report buckets. Defaults to the configuration.",
    )
    ap.add_argument(
        "--accumulation",
        choices=["none", "normal", "plus_init"],
        help=(
            "Running totals: 'none', 'normal' (from zero) or 'plus_init' "
            "(seeded with the initial balance). Defaults to the configuration."
        ),
    )
    ap.add_argument(
        "--from-date",
        dest="from_date",
        help="Period start date (YYYY-MM-DD). If omitted, from book inception.",
    )
    ap.add_argument(
        "--to-date",
        dest="to_date",
        help="Period end date (YYYY-MM-DD, inclusive). If omitted, today.",
    )
    ap.add_argument(
        "--display-mode",
        dest="display_mode",
        choices=["table", "csv", "both"],
        help=(
            "Override the display.mode setting from the configuration file. "
            "'table' prints results to stdout, "
            "'csv' writes a CSV file only, "
            "'both' does both."
        ),
    )
    ap.add_argument(
        "--output",
        dest="output_dir",
        help=(
            "Output directory where CSV files will be written when display "
            "mode includes 'csv'. If omitted, 'data/output' is used."
        ),
    )
    ap.add_argument(
        "--log-level",
        dest="log_level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level for diagnostic messages (default: WARNING).",
    )
    return ap


def _resolve_account_types(
    raw: Optional[str], config: AppConfig
) -> tuple[AccountType, ...]:
    if not raw:
        return config.chart.account_types
    return parse_account_types(part for part in raw.split(",") if part.strip())


def dataset_view(
    dataset: Dataset, axis: AxisPlan, chart: ChartSeries, formatted: bool
) -> pd.DataFrame:
    """Tabular view of a dataset with a human-readable period column.

    Columns are renamed after the series labels. With ``formatted`` the
    amounts are rendered through the chart value formatter, otherwise
    raw floats are kept (CSV export).
    """
    df = dataset.to_frame()
    labels = {spec.data_key: spec.label for spec in chart.series}
    df.insert(1, "period", [axis.label_for(t, LabelContext.TICK) for t in df["time"]])
    if formatted:
        for column in labels:
            df[column] = df[column].map(chart.value_formatter)
    return df.rename(columns=labels)


def main(argv: Optional[list[str]] = None) -> None:
    """Entry point for the Balance Trends CLI."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(f"balance_trends version {__version__}")
        return

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(levelname)s %(name)s: %(message)s",
    )

    # 1) Configuration
    try:
        config = load_app_config(
            args.config_path, missing_ok=args.config_path is None
        )
    except (FileNotFoundError, ValueError) as exc:
        parser.error(str(exc))

    initial_key = config.report.initial_bucket_key

    # 2) Report
    report_path: Optional[Path] = (
        Path(args.report_path) if args.report_path else config.report.path
    )
    if report_path is None:
        parser.error(
            "No report file given. Either set [report].path in the "
            "configuration or provide --report."
        )

    # 3) Selection and period
    try:
        report = read_balance_report(report_path, initial_key=initial_key)
        account_types = _resolve_account_types(args.account_types, config)
        accumulation: AccumulationType = (
            parse_accumulation_type(args.accumulation)
            if args.accumulation
            else config.chart.accumulation
        )
        period = determine_period_from_args(args, config.chart.granularity)
    except (FileNotFoundError, ValueError) as exc:
        parser.error(str(exc))

    report = clip_report_to_period(report, period, initial_key=initial_key)
    logger.info(
        "Report %s: %d buckets after clipping to the period", report_path, len(report)
    )

    # 4) Dataset, axis and series
    result = build_dataset(
        report, account_types, period, accumulation, initial_key=initial_key
    )
    if not isinstance(result, Dataset):
        print("No data for the selected period.")
        return

    formatter = DefaultFormatter(timezone=config.display.timezone)
    axis = plan_axis(
        result,
        period.granularity,
        formatter,
        currency_symbol=config.book.currency_symbol,
        date_format=config.display.date_format,
        month_format=config.display.month_format,
    )
    chart = bind_series(
        result,
        formatter,
        fraction_digits=config.book.fraction_digits,
        fix_fraction_digits=config.display.fix_fraction_digits,
    )

    display_mode = args.display_mode or config.display.mode

    # 5) Render
    if display_mode in {"table", "both"}:
        title = config.book.name or "Balances"
        symbol = config.book.currency_symbol
        print(f"=== {title}{f' ({symbol})' if symbol else ''} ===")
        print(
            f"{axis.label_for(axis.min)} → {axis.label_for(axis.max)} "
            f"| {period.granularity.value} | accumulation: {accumulation.value}"
        )
        print()
        view = dataset_view(result, axis, chart, formatted=True)
        print(view.drop(columns=["time"]).to_string(index=False))

    if display_mode in {"csv", "both"}:
        output_dir = Path(args.output_dir) if args.output_dir else Path("data/output")
        output_dir.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y-%m-%d-%H-%M-%S")
        path = output_dir / f"balances_{timestamp}.csv"
        dataset_view(result, axis, chart, formatted=False).to_csv(path, index=False)
        print(f"Wrote {path} ({len(result)} rows)")


if __name__ == "__main__":
    main()
