# Balance Trends - Balance aggregation engine for financial dashboards
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Time bucket keys.

A granularity report is keyed by strings. Each key is either:

- the reserved initial-balance literal (``INITIAL_BUCKET_KEY`` by default),
  meaning "everything accrued before the visible period", or
- a base-10 integer timestamp (milliseconds since the Unix epoch) marking
  the start of one real bucket.

Internally keys are parsed into a small tagged variant, ``RealBucket`` or
``InitialBucket``, so that the initial bucket can never be confused with a
real timestamp.

Ordering rules
--------------
- the initial bucket logically precedes every real bucket, but it is never
  part of the plotted sequence,
- real buckets sort ascending by timestamp,
- two keys resolving to the same timestamp (e.g. "1700" and "01700") are
  not merged: the last one seen in the report wins and a warning is logged.
"""

import logging
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Optional, TypeVar, Union

from .errors import InvalidArgumentError

logger = logging.getLogger(__name__)

INITIAL_BUCKET_KEY = "initial"

_TIMESTAMP_RE = re.compile(r"^-?\d+$")

T = TypeVar("T")


@dataclass(frozen=True, order=True)
class RealBucket:
    """A bucket starting at ``time`` (milliseconds since epoch)."""

    time: int


@dataclass(frozen=True)
class InitialBucket:
    """The pre-period bucket holding the balance accrued before the start."""


INITIAL_BUCKET = InitialBucket()

BucketKey = Union[RealBucket, InitialBucket]


def parse_bucket_key(raw: str, initial_key: str = INITIAL_BUCKET_KEY) -> BucketKey:
    """Parse one wire key into a ``RealBucket`` or ``INITIAL_BUCKET``.

    The initial literal is compared as a string before any numeric parsing,
    so a numeric literal (e.g. "-1") can be configured as the sentinel.

    Raises:
        InvalidArgumentError: if the key is neither the initial literal nor a
            base-10 integer.
    """
    if not isinstance(raw, str):
        raise InvalidArgumentError(f"Bucket key must be a string, got {raw!r}.")
    key = raw.strip()
    if key == initial_key:
        return INITIAL_BUCKET
    if not _TIMESTAMP_RE.match(key):
        raise InvalidArgumentError(
            f"Malformed bucket key {raw!r}: expected {initial_key!r} or a "
            "base-10 integer timestamp."
        )
    return RealBucket(int(key))


def is_initial(key: BucketKey) -> bool:
    return isinstance(key, InitialBucket)


def bucket_key_to_wire(key: BucketKey, initial_key: str = INITIAL_BUCKET_KEY) -> str:
    """Inverse of :func:`parse_bucket_key` (canonical form)."""
    if isinstance(key, InitialBucket):
        return initial_key
    return str(key.time)


def chronological_order(
    keys: Iterable[str], initial_key: str = INITIAL_BUCKET_KEY
) -> list[RealBucket]:
    """Return the real buckets of ``keys`` sorted ascending, initial excluded.

    Duplicate timestamps collapse into a single bucket.
    """
    buckets: set[RealBucket] = set()
    for raw in keys:
        key = parse_bucket_key(raw, initial_key)
        if isinstance(key, RealBucket):
            buckets.add(key)
    return sorted(buckets)


def split_buckets(
    entries: Mapping[str, T], initial_key: str = INITIAL_BUCKET_KEY
) -> tuple[Optional[T], list[tuple[RealBucket, T]]]:
    """Split keyed report entries into (initial entry, ordered real entries).

    Parameters
    ----------
    entries:
        Mapping of wire keys to per-bucket values (usually BalanceReport).
    initial_key:
        Reserved literal of the initial bucket.

    Returns
    -------
    tuple
        ``(initial, real)`` where ``initial`` is the value stored under the
        initial key (or None) and ``real`` is a list of
        ``(RealBucket, value)`` pairs in ascending time order.

    Notes
    -----
    When several keys resolve to the same bucket, the value of the last key
    in iteration order is kept (last-seen-wins).
    """
    initial: Optional[T] = None
    by_bucket: dict[RealBucket, T] = {}

    for raw, value in entries.items():
        key = parse_bucket_key(raw, initial_key)
        if isinstance(key, InitialBucket):
            initial = value
            continue
        if key in by_bucket:
            logger.warning(
                "Bucket key %r resolves to already seen timestamp %d; "
                "keeping the last one",
                raw,
                key.time,
            )
        by_bucket[key] = value

    ordered = sorted(by_bucket.items(), key=lambda item: item[0])
    return initial, ordered
