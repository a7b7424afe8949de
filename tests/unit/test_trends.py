"""Unit tests for derived credit metrics"""

import pytest
from datetime import datetime, timedelta, timezone
from loansewa_web.domain.trends import (
    application_outlook,
    average_amount_by_status,
    filter_by_period,
    loan_amount_series,
    loan_to_income_ratio,
    priority_class,
    rating_for_score,
    risk_band,
    score_color,
    score_series,
    score_stats,
    time_ago,
    total_requested,
    trend_label,
)
from loansewa_web.infrastructure.clients.schemas import LoanApplication

NOW = datetime(2025, 6, 1, 12, 0, 0)


def app(app_id: str, score: int, created_at: datetime | None, amount: float = 100_000, status: str = "Pending"):
    return LoanApplication(id=app_id, credit_score=score, created_at=created_at, loan_amount=amount, status=status)


def test_score_stats_empty_history():
    """No applications yields zeros and no date labels"""
    stats = score_stats([], now=NOW)

    assert stats.current == 0
    assert stats.highest == 0
    assert stats.lowest == 0
    assert stats.current_change == 0
    assert stats.highest_date is None
    assert stats.lowest_date is None


def test_score_stats_two_applications():
    """Newest 720 after 680: change is +40"""
    applications = [
        app("2", 720, NOW - timedelta(days=3)),
        app("1", 680, NOW - timedelta(days=70)),
    ]

    stats = score_stats(applications, now=NOW)

    assert stats.current == 720
    assert stats.current_change == 40
    assert stats.highest == 720
    assert stats.lowest == 680
    assert stats.highest_date == "this month"
    assert stats.lowest_date == "2 months ago"


def test_score_stats_single_application_has_no_change():
    stats = score_stats([app("1", 655, NOW)], now=NOW)

    assert stats.current == 655
    assert stats.current_change == 0
    assert stats.highest == stats.lowest == 655


def test_score_stats_negative_change():
    applications = [app("3", 600, NOW), app("2", 640, NOW), app("1", 700, NOW)]

    assert score_stats(applications, now=NOW).current_change == -40


def test_score_stats_ties_use_first_matching_application():
    """Equal highest scores resolve to the earliest position in the list"""
    applications = [
        app("3", 700, NOW - timedelta(days=1)),
        app("2", 650, NOW - timedelta(days=45)),
        app("1", 700, NOW - timedelta(days=100)),
    ]

    stats = score_stats(applications, now=NOW)

    assert stats.highest == 700
    assert stats.highest_date == "this month"
    assert stats.lowest_date == "1 month ago"


def test_score_stats_missing_dates_give_no_label():
    stats = score_stats([app("1", 700, None)], now=NOW)

    assert stats.current == 700
    assert stats.highest_date is None


@pytest.mark.parametrize(
    "days,expected",
    [
        (0, "this month"),
        (29, "this month"),
        (30, "1 month ago"),
        (59, "1 month ago"),
        (60, "2 months ago"),
        (365, "12 months ago"),
    ],
)
def test_time_ago(days: int, expected: str):
    assert time_ago(NOW - timedelta(days=days), now=NOW) == expected


def test_time_ago_future_timestamp_is_this_month():
    assert time_ago(NOW + timedelta(days=10), now=NOW) == "this month"


def test_time_ago_mixed_timezones():
    """Naive backend timestamps are compared as UTC against an aware clock"""
    aware_now = NOW.replace(tzinfo=timezone.utc)
    assert time_ago(NOW - timedelta(days=31), now=aware_now) == "1 month ago"


def test_time_ago_none():
    assert time_ago(None, now=NOW) is None


def test_score_series_takes_six_most_recent_oldest_first():
    applications = [app(str(i), 300 + i * 10, NOW - timedelta(days=i)) for i in range(8)]

    series = score_series(applications)

    assert len(series) == 6
    assert [p.label for p in series] == ["App 1", "App 2", "App 3", "App 4", "App 5", "App 6"]
    # Newest application (index 0, score 300) is the last bar
    assert [p.value for p in series] == [350, 340, 330, 320, 310, 300]


def test_loan_amount_series_formats_dates():
    applications = [app("1", 700, datetime(2025, 10, 5), amount=250_000)]

    series = loan_amount_series(applications)

    assert series[0].value == 250_000
    assert series[0].formatted_date == "5 Oct"


def test_series_empty():
    assert score_series([]) == []
    assert loan_amount_series([]) == []


def test_filter_by_period():
    applications = [
        app("3", 700, NOW - timedelta(days=10)),
        app("2", 690, NOW - timedelta(days=100)),
        app("1", 680, None),
    ]

    assert [a.id for a in filter_by_period(applications, 1, now=NOW)] == ["3"]
    assert [a.id for a in filter_by_period(applications, 6, now=NOW)] == ["3", "2"]


@pytest.mark.parametrize(
    "score,label,color",
    [
        (900, "Low Risk - High Need", "green"),
        (750, "Low Risk - High Need", "green"),
        (749, "Low Risk - Moderate Need", "green"),
        (650, "Low Risk - Moderate Need", "green"),
        (649, "Moderate Risk", "orange"),
        (500, "Moderate Risk", "orange"),
        (499, "High Risk", "red"),
        (300, "High Risk", "red"),
        (None, "No Application", "gray"),
    ],
)
def test_risk_band_thresholds(score, label, color):
    band = risk_band(score)
    assert band.label == label
    assert band.color == color


@pytest.mark.parametrize(
    "score,rating,color",
    [(780, "Excellent", "#4CAF50"), (700, "Good", "#2196F3"), (550, "Fair", "#FF9800"), (420, "Poor", "#F44336")],
)
def test_rating_and_color_bands(score, rating, color):
    assert rating_for_score(score) == rating
    assert score_color(score) == color


def test_trend_label():
    assert trend_label(0) == ("→", "Constant from last month")
    assert trend_label(40) == ("↗", "+40 from last month")
    assert trend_label(-12) == ("↘", "-12 from last month")


def test_application_outlook():
    assert application_outlook("Approved") == "Instant approval eligible"
    assert application_outlook("Under Review") == "Under review by team"
    assert application_outlook("Rejected") == "Application needs improvement"


def test_loan_to_income_ratio():
    assert loan_to_income_ratio(2_560_000, 1_200_000) == "2.13"
    assert loan_to_income_ratio(100, 0) == "0.00"


def test_total_requested():
    applications = [app("1", 700, NOW, amount=100_000), app("2", 700, NOW, amount=250_000)]
    assert total_requested(applications) == 350_000
    assert total_requested([]) == 0


def test_average_amount_by_status():
    applications = [
        app("1", 700, NOW, amount=100_000, status="Approved"),
        app("2", 700, NOW, amount=300_000, status="Approved"),
        app("3", 500, NOW, amount=50_000, status="Rejected"),
    ]

    assert average_amount_by_status(applications) == {"Approved": 200_000, "Rejected": 50_000}
    assert average_amount_by_status([]) == {}


def test_priority_class():
    assert priority_class("High") == "priority-high"
    assert priority_class("MEDIUM") == "priority-medium"
    assert priority_class("low") == "priority-low"
    assert priority_class("anything") == "priority-low"
