"""Unit tests for chart geometry"""

import pytest
from loansewa_web.domain.charts import bar_chart, bar_percent, pie_slices, score_ring, slice_path
from loansewa_web.domain.models import ChartPoint


def points(*values):
    return [ChartPoint(label=f"App {i + 1}", value=v, formatted_date=f"{i + 1} Oct") for i, v in enumerate(values)]


def test_bar_percent_against_series_maximum():
    bars = bar_chart(points(250, 500, 1000))

    assert [b.percent for b in bars] == pytest.approx([25.0, 50.0, 100.0])
    assert bars[2].percent == 100.0


def test_bar_percent_non_negative():
    assert bar_percent(0, 900) == 0
    assert all(b.percent >= 0 for b in bar_chart(points(0, 3, 7)))


def test_bar_percent_zero_maximum():
    assert bar_percent(10, 0) == 0
    assert [b.percent for b in bar_chart(points(0, 0))] == [0, 0]


def test_bar_chart_fixed_maximum_tolerates_overflow():
    """Values above a supplied maximum render past 100% rather than failing"""
    bars = bar_chart(points(450, 1800), maximum=900)

    assert bars[0].percent == pytest.approx(50.0)
    assert bars[1].percent == pytest.approx(200.0)


def test_bar_chart_floor_raises_maximum():
    bars = bar_chart(points(100_000, 250_000), floor=500_000)

    assert bars[0].percent == pytest.approx(20.0)
    assert bars[1].percent == pytest.approx(50.0)


def test_bar_chart_floor_below_series_max_is_ignored():
    bars = bar_chart(points(1_000_000), floor=500_000)
    assert bars[0].percent == pytest.approx(100.0)


def test_bar_chart_color_and_caption():
    bars = bar_chart(
        points(780, 420),
        maximum=900,
        color=lambda v: "green" if v >= 750 else "red",
        caption=lambda p: f"{int(p.value)} pts",
    )

    assert [b.color for b in bars] == ["green", "red"]
    assert [b.caption for b in bars] == ["780 pts", "420 pts"]


def test_bar_chart_default_caption_is_date():
    assert bar_chart(points(5))[0].caption == "1 Oct"


def test_pie_slices_risk_example():
    """low:3, medium:1, high:0 -> 75% over 0-270 degrees, 25% over 270-360, no high slice"""
    slices = pie_slices([("Low", 3, "#4caf50"), ("Medium", 1, "#ff9800"), ("High", 0, "#f44336")])

    assert [s.label for s in slices] == ["Low", "Medium"]
    low, medium = slices

    assert low.percent == pytest.approx(75.0)
    assert (low.start_angle, low.end_angle) == pytest.approx((0.0, 270.0))
    assert low.large_arc == 1
    assert low.path == "M 100 100 L 100 20 A 80 80 0 1 1 20 100 Z"

    assert medium.percent == pytest.approx(25.0)
    assert (medium.start_angle, medium.end_angle) == pytest.approx((270.0, 360.0))
    assert medium.large_arc == 0
    assert medium.path == "M 100 100 L 20 100 A 80 80 0 0 1 100 20 Z"


@pytest.mark.parametrize(
    "values",
    [
        (1, 1, 1),
        (3, 7),
        (0.2, 5.5, 13, 99),
        (1_000_000, 1),
    ],
)
def test_pie_percentages_sum_to_hundred(values):
    slices = pie_slices([(str(i), v, "#000") for i, v in enumerate(values)])

    assert sum(s.percent for s in slices) == pytest.approx(100.0)
    assert slices[-1].end_angle == pytest.approx(360.0)


def test_zero_category_takes_no_angle():
    slices = pie_slices([("a", 1, "#000"), ("b", 0, "#111"), ("c", 1, "#222")])

    assert [s.label for s in slices] == ["a", "c"]
    assert slices[1].start_angle == pytest.approx(180.0)


def test_pie_slices_zero_total_draws_nothing():
    assert pie_slices([("a", 0, "#000"), ("b", 0, "#111")]) == []
    assert pie_slices([]) == []


def test_pie_slices_explicit_total():
    """Repaid/outstanding are shares of the disbursed total"""
    slices = pie_slices([("Repaid", 25, "#0f0"), ("Outstanding", 25, "#00f")], total=100)

    assert [s.percent for s in slices] == pytest.approx([25.0, 25.0])
    assert slices[1].end_angle == pytest.approx(180.0)


def test_single_category_draws_full_circle():
    """A 360 degree wedge is split through the opposite point so it renders"""
    (only,) = pie_slices([("Low", 5, "#4caf50"), ("High", 0, "#f44336")])

    assert only.percent == pytest.approx(100.0)
    assert only.path.count(" A ") == 2
    assert only.path == "M 100 100 L 100 20 A 80 80 0 0 1 100 180 A 80 80 0 0 1 100 20 Z"


def test_slice_path_large_arc_flag():
    assert " 0 1 1 " in slice_path(100, 100, 80, 0, 181)
    assert " 0 0 1 " in slice_path(100, 100, 80, 0, 180)


@pytest.mark.parametrize("score,offset", [(300, 534), (600, 267), (900, 0)])
def test_score_ring_offset(score, offset):
    ring = score_ring(score)

    assert ring.circumference == 534
    assert ring.stroke_offset == pytest.approx(offset)
    assert ring.color == "#4169E1"


def test_score_ring_without_score():
    ring = score_ring(None)

    assert ring.stroke_offset == 534
    assert ring.color == "#ccc"


def test_pie_slices_total_below_magnitudes_is_widened():
    """Repaid plus outstanding can exceed the reported disbursed total"""
    slices = pie_slices([("Repaid", 80, "#0f0"), ("Outstanding", 60, "#00f")], total=100)

    assert sum(s.percent for s in slices) == pytest.approx(100.0)
    assert slices[-1].end_angle == pytest.approx(360.0)
    assert slices[0].percent == pytest.approx(80 / 140 * 100)
