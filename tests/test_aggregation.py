import pytest

from balance_trends.account_types import AccountType
from balance_trends.aggregation import (
    NO_DATA,
    PENDING,
    AccumulationType,
    Dataset,
    build_dataset,
    parse_accumulation_type,
)
from balance_trends.errors import InvalidArgumentError
from balance_trends.periods import TimeGranularity, TimePeriod
from balance_trends.report import report_from_dict

JAN = 1704067200000  # 2024-01-01T00:00:00Z
FEB = 1706745600000  # 2024-02-01T00:00:00Z
MAR = 1709251200000  # 2024-03-01T00:00:00Z

PERIOD = TimePeriod(start=JAN, end=MAR + 1, granularity=TimeGranularity.MONTHLY)


def _bal(deposits: float, withdrawals: float) -> dict:
    return {"depositsAmount": deposits, "withdrawalsAmount": withdrawals}


def _report(buckets: dict):
    return report_from_dict(
        {"reports": {k: {"accountTypes": v} for k, v in buckets.items()}}
    )


def test_absent_report_is_pending() -> None:
    """No report yet: PENDING, distinct from NO_DATA and falsy."""
    result = build_dataset(None, [AccountType.ASSET], PERIOD)
    assert result is PENDING
    assert result is not NO_DATA
    assert not result


def test_missing_period_is_pending() -> None:
    report = _report({str(JAN): {"asset": _bal(1, 0)}})
    assert build_dataset(report, ["asset"], None) is PENDING


def test_report_with_only_initial_bucket_is_no_data() -> None:
    report = _report({"initial": {"asset": _bal(500, 0)}})
    assert build_dataset(report, ["asset"], PERIOD) is NO_DATA
    assert build_dataset(_report({}), ["asset"], PERIOD) is NO_DATA


def test_net_amount_sign_policy() -> None:
    report = _report(
        {str(JAN): {"asset": _bal(100, 30), "liability": _bal(100, 30)}}
    )
    dataset = build_dataset(report, ["asset", "liability"], PERIOD)

    assert isinstance(dataset, Dataset)
    assert dataset[0]["asset"] == pytest.approx(70)
    assert dataset[0]["liability"] == pytest.approx(-70)


def test_rows_sorted_by_time_and_initial_never_emitted() -> None:
    report = _report(
        {
            str(MAR): {"asset": _bal(3, 0)},
            "initial": {"asset": _bal(99, 0)},
            str(JAN): {"asset": _bal(1, 0)},
            str(FEB): {"asset": _bal(2, 0)},
        }
    )
    dataset = build_dataset(report, ["asset"], PERIOD)

    assert dataset.times == [JAN, FEB, MAR]
    assert [row["asset"] for row in dataset] == [1, 2, 3]


def test_none_accumulation_emits_no_running_totals() -> None:
    report = _report({str(JAN): {"asset": _bal(50, 0)}})
    dataset = build_dataset(report, ["asset"], PERIOD, AccumulationType.NONE)

    assert set(dataset[0].keys()) == {"time", "asset"}
    assert dataset.columns == ["time", "asset"]


def test_normal_accumulation_ignores_initial_bucket() -> None:
    report = _report(
        {
            "initial": {"asset": _bal(200, 0)},
            str(JAN): {"asset": _bal(50, 0)},
            str(FEB): {"asset": _bal(0, 20)},
        }
    )
    dataset = build_dataset(report, ["asset"], PERIOD, AccumulationType.NORMAL)

    assert [row["asset"] for row in dataset] == [50, -20]
    assert [row["asset-Accumulation"] for row in dataset] == [50, 30]


def test_plus_init_accumulation_is_seeded_with_initial_bucket() -> None:
    report = _report(
        {
            "initial": {"asset": _bal(200, 0)},
            str(JAN): {"asset": _bal(50, 0)},
            str(FEB): {"asset": _bal(0, 20)},
        }
    )
    dataset = build_dataset(report, ["asset"], PERIOD, "plus_init")

    assert [row["asset-Accumulation"] for row in dataset] == [250, 230]


def test_plus_init_without_initial_bucket_starts_at_zero() -> None:
    report = _report({str(JAN): {"liability": _bal(0, 40)}})
    dataset = build_dataset(report, ["liability"], PERIOD, "plus_init")
    assert dataset[0]["liability-Accumulation"] == pytest.approx(40)


def test_missing_account_type_in_bucket_defaults_to_zero() -> None:
    report = _report(
        {
            str(JAN): {"asset": _bal(10, 0), "expense": _bal(5, 0)},
            str(FEB): {"asset": _bal(7, 0)},
        }
    )
    dataset = build_dataset(
        report, ["expense", "asset"], PERIOD, AccumulationType.NORMAL
    )

    feb = dataset[1]
    assert feb["expense"] == 0
    assert feb["expense-Accumulation"] == 5
    assert feb["asset-Accumulation"] == 17


def test_accumulation_fields_for_every_type() -> None:
    report = _report({str(JAN): {"income": _bal(0, 1000)}})
    dataset = build_dataset(
        report, ["income", "other"], PERIOD, AccumulationType.NORMAL
    )
    assert dataset.columns == [
        "time",
        "income",
        "other",
        "income-Accumulation",
        "other-Accumulation",
    ]
    assert dataset[0]["income"] == pytest.approx(1000)
    assert dataset[0]["other-Accumulation"] == 0


def test_build_is_idempotent_and_does_not_mutate_report() -> None:
    buckets = {
        "initial": {"asset": _bal(200, 0)},
        str(JAN): {"asset": _bal(50, 0)},
    }
    report = _report(buckets)
    snapshot = {k: dict(v.account_types) for k, v in report.reports.items()}

    first = build_dataset(report, ["asset"], PERIOD, "plus_init")
    second = build_dataset(report, ["asset"], PERIOD, "plus_init")

    assert [dict(r) for r in first] == [dict(r) for r in second]
    assert {k: dict(v.account_types) for k, v in report.reports.items()} == snapshot


def test_rows_are_read_only() -> None:
    report = _report({str(JAN): {"asset": _bal(1, 0)}})
    dataset = build_dataset(report, ["asset"], PERIOD)
    with pytest.raises(TypeError):
        dataset[0]["asset"] = 5  # type: ignore[index]


def test_dataset_carries_selection_and_granularity() -> None:
    report = _report({str(JAN): {"asset": _bal(1, 0)}})
    yearly = TimePeriod(start=None, end=MAR, granularity=TimeGranularity.YEARLY)
    dataset = build_dataset(report, ["liability", "asset"], yearly)

    assert dataset.account_types == (AccountType.LIABILITY, AccountType.ASSET)
    assert dataset.granularity is TimeGranularity.YEARLY
    assert not dataset.accumulates


def test_to_frame_has_one_row_per_bucket() -> None:
    report = _report(
        {str(JAN): {"asset": _bal(1, 0)}, str(FEB): {"asset": _bal(2, 0)}}
    )
    df = build_dataset(report, ["asset"], PERIOD, "normal").to_frame()

    assert list(df.columns) == ["time", "asset", "asset-Accumulation"]
    assert df["asset-Accumulation"].tolist() == [1, 3]


def test_invalid_arguments_raise() -> None:
    report = _report({str(JAN): {"asset": _bal(1, 0)}})
    with pytest.raises(InvalidArgumentError):
        build_dataset(report, ["equity"], PERIOD)
    with pytest.raises(InvalidArgumentError):
        build_dataset(report, [], PERIOD)
    with pytest.raises(InvalidArgumentError):
        build_dataset(report, ["asset", "asset"], PERIOD)
    with pytest.raises(InvalidArgumentError):
        build_dataset(report, ["asset"], PERIOD, "running")


def test_invalid_arguments_raise_even_while_pending() -> None:
    with pytest.raises(InvalidArgumentError):
        build_dataset(None, ["equity"], PERIOD)


def test_parse_accumulation_type() -> None:
    assert parse_accumulation_type(None) is AccumulationType.NONE
    assert parse_accumulation_type("PLUS-INIT") is AccumulationType.PLUS_INIT
    assert parse_accumulation_type(AccumulationType.NORMAL) is AccumulationType.NORMAL
