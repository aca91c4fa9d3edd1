import logging

import pytest

from balance_trends.buckets import (
    INITIAL_BUCKET,
    INITIAL_BUCKET_KEY,
    RealBucket,
    bucket_key_to_wire,
    chronological_order,
    is_initial,
    parse_bucket_key,
    split_buckets,
)
from balance_trends.errors import InvalidArgumentError


def test_parse_bucket_key_variants() -> None:
    assert parse_bucket_key(INITIAL_BUCKET_KEY) is INITIAL_BUCKET
    assert is_initial(parse_bucket_key("initial"))
    assert parse_bucket_key("1704067200000") == RealBucket(1704067200000)
    assert parse_bucket_key("-86400000") == RealBucket(-86400000)


def test_numeric_initial_literal_wins_over_timestamp() -> None:
    """A configured numeric sentinel is never read as a real bucket."""
    assert parse_bucket_key("-1", initial_key="-1") is INITIAL_BUCKET
    assert parse_bucket_key("-2", initial_key="-1") == RealBucket(-2)


@pytest.mark.parametrize("raw", ["", "abc", "12.5", "1e9", "INITIAL"])
def test_malformed_keys_are_rejected(raw: str) -> None:
    with pytest.raises(InvalidArgumentError):
        parse_bucket_key(raw)


def test_chronological_order_sorts_numerically_and_drops_initial() -> None:
    keys = ["300", "initial", "20", "1000"]
    assert chronological_order(keys) == [
        RealBucket(20),
        RealBucket(300),
        RealBucket(1000),
    ]


def test_split_buckets_keeps_initial_apart() -> None:
    initial, real = split_buckets({"200": "b", "initial": "i", "100": "a"})
    assert initial == "i"
    assert real == [(RealBucket(100), "a"), (RealBucket(200), "b")]


def test_split_buckets_last_seen_wins_on_duplicate_timestamp(caplog) -> None:
    with caplog.at_level(logging.WARNING, logger="balance_trends.buckets"):
        initial, real = split_buckets({"0100": "first", "100": "second"})
    assert initial is None
    assert real == [(RealBucket(100), "second")]
    assert "already seen timestamp" in caplog.text


def test_bucket_key_to_wire() -> None:
    assert bucket_key_to_wire(INITIAL_BUCKET) == "initial"
    assert bucket_key_to_wire(RealBucket(42)) == "42"
