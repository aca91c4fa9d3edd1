from balance_trends.account_types import AccountType
from balance_trends.aggregation import AccumulationType, build_dataset
from balance_trends.formatting import DefaultFormatter
from balance_trends.periods import TimeGranularity, TimePeriod
from balance_trends.report import report_from_dict
from balance_trends.series import (
    ACCUMULATION_AXIS_ID,
    AMOUNT_AXIS_ID,
    Presentation,
    bind_series,
    make_value_formatter,
)

JAN = 1704067200000
FEB = 1706745600000
PERIOD = TimePeriod(start=JAN, end=FEB, granularity=TimeGranularity.MONTHLY)


def _dataset(accumulation):
    report = report_from_dict(
        {
            "reports": {
                "initial": {
                    "accountTypes": {"asset": {"depositsAmount": 100000}}
                },
                str(JAN): {
                    "accountTypes": {
                        "asset": {"depositsAmount": 1234.5, "withdrawalsAmount": 0},
                        "liability": {"depositsAmount": 0, "withdrawalsAmount": 10},
                    }
                },
                str(FEB): {"accountTypes": {}},
            }
        }
    )
    return build_dataset(report, ["asset", "liability"], PERIOD, accumulation)


def test_net_series_only_without_accumulation() -> None:
    chart = bind_series(_dataset(AccumulationType.NONE), DefaultFormatter())

    assert [s.data_key for s in chart.series] == ["asset", "liability"]
    assert all(s.y_axis_id == AMOUNT_AXIS_ID for s in chart.series)
    assert [a.id for a in chart.y_axes] == [AMOUNT_AXIS_ID]
    assert chart.margins.right == 8
    assert chart.margins.top == 8


def test_accumulated_series_on_second_axis() -> None:
    chart = bind_series(_dataset(AccumulationType.NORMAL), DefaultFormatter())

    acc = [s for s in chart.series if s.y_axis_id == ACCUMULATION_AXIS_ID]
    assert [s.data_key for s in acc] == [
        "asset-Accumulation",
        "liability-Accumulation",
    ]
    assert [s.label for s in acc] == ["Asset+", "Liability+"]
    assert all(s.area and not s.show_mark for s in acc)
    assert chart.y_axes[1].label == "Accumulated amount"


def test_accumulation_axis_label_distinguishes_plus_init() -> None:
    chart = bind_series(_dataset(AccumulationType.PLUS_INIT), DefaultFormatter())
    assert chart.y_axes[1].label == "Initial + accumulated amount"


def test_legend_lists_net_series_only() -> None:
    chart = bind_series(_dataset(AccumulationType.NORMAL), DefaultFormatter())
    assert [item.id for item in chart.legend] == ["asset", "liability"]


def test_margins_follow_widest_formatted_value() -> None:
    chart = bind_series(
        _dataset(AccumulationType.PLUS_INIT),
        DefaultFormatter(),
        fraction_digits=2,
        fix_fraction_digits=True,
    )
    # widest net: "1,234.50" (8 chars); widest running total: "101,234.50" (10)
    assert chart.margins.left == (8 + 1) * 8
    assert chart.margins.right == (10 + 1) * 8 + 30


def test_presentation_callables_are_used() -> None:
    presentation = Presentation(
        type_label=lambda t: f"label:{t.value}",
        line_color=lambda t: "#111111",
        area_color=lambda t: "#222222",
        accumulation_label=lambda a: f"acc:{a.value}",
    )
    chart = bind_series(
        _dataset(AccumulationType.NORMAL), DefaultFormatter(), presentation
    )

    assert chart.series[0].label == "label:asset"
    assert chart.series[0].color == "#111111"
    assert chart.series[2].color == "#222222"
    assert chart.legend[1].label == "label:liability"
    assert chart.y_axes[1].label == "acc:normal"


def test_value_formatter_handles_none() -> None:
    fmt = make_value_formatter(DefaultFormatter(), fraction_digits=2)
    assert fmt(None) == ""
    assert fmt(10.0) == "10"
    fixed = make_value_formatter(
        DefaultFormatter(), fraction_digits=2, fix_fraction_digits=True
    )
    assert fixed(10.0) == "10.00"


def test_default_labels_are_title_cased_tags() -> None:
    chart = bind_series(_dataset(AccumulationType.NONE), DefaultFormatter())
    assert chart.series[0].label == AccountType.ASSET.value.capitalize()
