# Balance Trends - Balance aggregation engine for financial dashboards
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Caller-side memoization of ``build_dataset``.

A dashboard recomputes its dataset whenever the report, the account type
selection, the period granularity or the accumulation mode changes.
``DatasetMemo`` makes that dependency explicit: results are cached under
a SHA-256 digest of exactly those inputs, with LRU eviction.

``PENDING`` results are never cached, since they only mean "ask again
once the report is there".
"""

import hashlib
import json
import logging
from collections import OrderedDict
from collections.abc import Sequence
from typing import Optional, Union

from .account_types import AccountType, parse_account_types
from .aggregation import (
    AccumulationType,
    BuildResult,
    Pending,
    build_dataset,
    parse_accumulation_type,
)
from .buckets import INITIAL_BUCKET_KEY
from .periods import TimePeriod, parse_granularity
from .report import BookGranularityBalanceReport, report_to_dict

logger = logging.getLogger(__name__)


def dataset_cache_key(
    report: BookGranularityBalanceReport,
    account_types: Sequence[Union[AccountType, str]],
    time_period: TimePeriod,
    accumulation_type: Union[AccumulationType, str, None],
    initial_key: str = INITIAL_BUCKET_KEY,
) -> str:
    """Content hash of the inputs that determine a dataset."""
    payload = {
        # Bucket order is kept: it decides which duplicate timestamp wins.
        "report": list(report_to_dict(report)["reports"].items()),
        "account_types": [t.value for t in parse_account_types(account_types)],
        "granularity": parse_granularity(time_period.granularity).value,
        "accumulation": parse_accumulation_type(accumulation_type).value,
        "initial_key": initial_key,
    }
    encoded = json.dumps(payload, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(encoded.encode("utf-8")).hexdigest()


class DatasetMemo:
    """LRU cache in front of ``build_dataset``."""

    def __init__(self, maxsize: int = 32):
        if maxsize < 1:
            raise ValueError("DatasetMemo maxsize must be at least 1.")
        self.maxsize = maxsize
        self._entries: "OrderedDict[str, BuildResult]" = OrderedDict()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def clear(self) -> None:
        self._entries.clear()

    def build(
        self,
        report: Optional[BookGranularityBalanceReport],
        account_types: Sequence[Union[AccountType, str]],
        time_period: Optional[TimePeriod],
        accumulation_type: Union[AccumulationType, str, None] = AccumulationType.NONE,
        initial_key: str = INITIAL_BUCKET_KEY,
    ) -> BuildResult:
        """Same contract as ``build_dataset``, answered from cache when possible."""
        if report is None or time_period is None:
            return build_dataset(
                report, account_types, time_period, accumulation_type, initial_key
            )

        key = dataset_cache_key(
            report, account_types, time_period, accumulation_type, initial_key
        )
        if key in self._entries:
            self.hits += 1
            self._entries.move_to_end(key)
            logger.debug("Dataset memo hit %s", key[:12])
            return self._entries[key]

        self.misses += 1
        result = build_dataset(
            report, account_types, time_period, accumulation_type, initial_key
        )
        if not isinstance(result, Pending):
            self._entries[key] = result
            if len(self._entries) > self.maxsize:
                self._entries.popitem(last=False)
        return result
