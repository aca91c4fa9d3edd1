# Balance Trends - Balance aggregation engine for financial dashboards
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Chart series binding.

This module turns a ``Dataset`` into the metadata a line-chart layer
needs: one series per account type (net amounts, left "amount" axis),
plus one area series per type for running totals on the right
"accumulation" axis when the dataset accumulates. The legend only lists
the net series.

Labels and colours are not decided here. They come from a
``Presentation`` whose callables are provided by the UI; the defaults
use title-cased account type tags and no colour.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Optional

from .account_types import AccountType, accumulation_key, amount_key
from .aggregation import AccumulationType, Dataset
from .formatting import Formatter

AMOUNT_AXIS_ID = "amount"
ACCUMULATION_AXIS_ID = "accumulation"

# Approximate glyph width (px) used to size axis margins.
CHAR_WIDTH = 8


def _default_type_label(account_type: AccountType) -> str:
    return account_type.value.capitalize()


def _default_accumulation_label(accumulation_type: AccumulationType) -> str:
    if accumulation_type == AccumulationType.PLUS_INIT:
        return "Initial + accumulated amount"
    return "Accumulated amount"


def _no_color(account_type: AccountType) -> Optional[str]:
    return None


@dataclass(frozen=True)
class Presentation:
    """Label and colour lookups injected by the presentation layer."""

    type_label: Callable[[AccountType], str] = _default_type_label
    accumulation_label: Callable[[AccumulationType], str] = (
        _default_accumulation_label
    )
    line_color: Callable[[AccountType], Optional[str]] = _no_color
    area_color: Callable[[AccountType], Optional[str]] = _no_color


@dataclass(frozen=True)
class SeriesSpec:
    id: str
    data_key: str
    y_axis_id: str
    label: str
    color: Optional[str] = None
    area: bool = False
    show_mark: bool = True


@dataclass(frozen=True)
class YAxisSpec:
    id: str
    label: Optional[str] = None


@dataclass(frozen=True)
class LegendItem:
    id: str
    label: str
    color: Optional[str] = None


@dataclass(frozen=True)
class Margins:
    left: int
    right: int
    top: int = 8


@dataclass(frozen=True)
class ChartSeries:
    """Everything the chart layer needs besides the dataset and x axis."""

    series: tuple[SeriesSpec, ...]
    y_axes: tuple[YAxisSpec, ...]
    legend: tuple[LegendItem, ...]
    margins: Margins
    value_formatter: Callable[[Optional[float]], str] = field(repr=False)


def make_value_formatter(
    formatter: Formatter, fraction_digits: int = 0, fix_fraction_digits: bool = False
) -> Callable[[Optional[float]], str]:
    """Formatter for series values; None renders as an empty string."""

    def _format(value: Optional[float]) -> str:
        if value is None:
            return ""
        return formatter.format_number(
            value,
            min_fraction_digits=fraction_digits if fix_fraction_digits else None,
            max_fraction_digits=fraction_digits,
        )

    return _format


def bind_series(
    dataset: Dataset,
    formatter: Formatter,
    presentation: Optional[Presentation] = None,
    fraction_digits: int = 0,
    fix_fraction_digits: bool = False,
) -> ChartSeries:
    """Build series, y axes, legend and margins for a dataset.

    Margins follow the widest formatted value: the left margin fits net
    amounts, the right margin fits running totals (plus room for the
    right axis label) or stays minimal when nothing accumulates.
    """
    presentation = presentation or Presentation()
    value_formatter = make_value_formatter(
        formatter, fraction_digits, fix_fraction_digits
    )
    accumulates = dataset.accumulation_type != AccumulationType.NONE

    max_amount_len = 0
    max_acc_len = 0
    for row in dataset:
        for account_type in dataset.account_types:
            max_amount_len = max(
                max_amount_len, len(value_formatter(row[amount_key(account_type)]))
            )
            if accumulates:
                max_acc_len = max(
                    max_acc_len,
                    len(value_formatter(row[accumulation_key(account_type)])),
                )

    series: list[SeriesSpec] = [
        SeriesSpec(
            id=amount_key(t),
            data_key=amount_key(t),
            y_axis_id=AMOUNT_AXIS_ID,
            label=presentation.type_label(t),
            color=presentation.line_color(t),
        )
        for t in dataset.account_types
    ]
    y_axes: list[YAxisSpec] = [YAxisSpec(id=AMOUNT_AXIS_ID)]

    if accumulates:
        series.extend(
            SeriesSpec(
                id=accumulation_key(t),
                data_key=accumulation_key(t),
                y_axis_id=ACCUMULATION_AXIS_ID,
                label=presentation.type_label(t) + "+",
                color=presentation.area_color(t),
                area=True,
                show_mark=False,
            )
            for t in dataset.account_types
        )
        y_axes.append(
            YAxisSpec(
                id=ACCUMULATION_AXIS_ID,
                label=presentation.accumulation_label(dataset.accumulation_type),
            )
        )

    legend = tuple(
        LegendItem(
            id=amount_key(t),
            label=presentation.type_label(t),
            color=presentation.line_color(t),
        )
        for t in dataset.account_types
    )

    margins = Margins(
        left=(max_amount_len + 1) * CHAR_WIDTH,
        right=(max_acc_len + 1) * CHAR_WIDTH + 30 if accumulates else CHAR_WIDTH,
    )

    return ChartSeries(
        series=tuple(series),
        y_axes=tuple(y_axes),
        legend=legend,
        margins=margins,
        value_formatter=value_formatter,
    )
