# Balance Trends - Balance aggregation engine for financial dashboards
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Time axis planning.

Bucket keys are raw timestamps, so nothing in the data says whether a
value is a day, a month or a year. The label granularity is taken from
the caller's selected granularity: the same timestamp renders as a date
under DAILY, a month under MONTHLY and a bare year under YEARLY.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from .aggregation import BuildResult, Dataset
from .errors import InvalidArgumentError
from .formatting import Formatter
from .periods import TimeGranularity, parse_granularity

DEFAULT_DATE_FORMAT = "%Y-%m-%d"
DEFAULT_MONTH_FORMAT = "%Y-%m"
YEAR_FORMAT = "%Y"


class LabelContext(str, Enum):
    """Where a time label is displayed."""

    TICK = "tick"
    TOOLTIP = "tooltip"


@dataclass(frozen=True)
class AxisPlan:
    """
    Bounds and label function of the time axis.

    Attributes
    ----------
    min, max :
        First and last dataset time, or None when there is no dataset
        (the axis is then unbounded).
    granularity :
        Granularity driving the label pattern.
    formatter :
        Injected formatting capability.
    currency_symbol :
        Appended as " (<symbol>)" to tooltip labels when not empty.
    date_format, month_format :
        strftime patterns for DAILY and MONTHLY labels.
    """

    min: Optional[int]
    max: Optional[int]
    granularity: TimeGranularity
    formatter: Formatter
    currency_symbol: str = ""
    date_format: str = DEFAULT_DATE_FORMAT
    month_format: str = DEFAULT_MONTH_FORMAT

    @property
    def pattern(self) -> str:
        if self.granularity == TimeGranularity.DAILY:
            return self.date_format
        if self.granularity == TimeGranularity.MONTHLY:
            return self.month_format
        if self.granularity == TimeGranularity.YEARLY:
            return YEAR_FORMAT
        raise InvalidArgumentError(f"Unsupported granularity {self.granularity!r}.")

    def label_for(
        self, time: int, context: Union[LabelContext, str, None] = None
    ) -> str:
        """Format ``time`` for an axis tick (default) or a tooltip."""
        label = self.formatter.format_date(int(time), self.pattern)
        if context is not None and LabelContext(context) == LabelContext.TOOLTIP:
            if self.currency_symbol:
                return f"{label} ({self.currency_symbol})"
        return label


def plan_axis(
    dataset: BuildResult,
    granularity: Union[TimeGranularity, str],
    formatter: Formatter,
    currency_symbol: str = "",
    date_format: str = DEFAULT_DATE_FORMAT,
    month_format: str = DEFAULT_MONTH_FORMAT,
) -> AxisPlan:
    """Derive the time axis for a build result.

    Raises:
        InvalidArgumentError: if ``granularity`` is not DAILY, MONTHLY or
            YEARLY.
    """
    resolved = parse_granularity(granularity)

    axis_min: Optional[int] = None
    axis_max: Optional[int] = None
    if isinstance(dataset, Dataset) and len(dataset) > 0:
        axis_min = int(dataset[0]["time"])
        axis_max = int(dataset[-1]["time"])

    return AxisPlan(
        min=axis_min,
        max=axis_max,
        granularity=resolved,
        formatter=formatter,
        currency_symbol=currency_symbol or "",
        date_format=date_format,
        month_format=month_format,
    )
