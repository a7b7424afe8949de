"""Derived credit metrics - trend statistics and chart series from application history"""

from collections import defaultdict
from datetime import datetime
from typing import Dict, List, Optional, Sequence

from loansewa_web.domain.models import ChartPoint, DerivedStats, RiskBand
from loansewa_web.infrastructure.clients.schemas import LoanApplication
from loansewa_web.utils.date_utils import short_date, whole_months_between

# Score bands shared by ratings, risk bands and bar colours
EXCELLENT_SCORE = 750
GOOD_SCORE = 650
FAIR_SCORE = 500

SERIES_LENGTH = 6


def time_ago(timestamp: Optional[datetime], now: Optional[datetime] = None) -> Optional[str]:
    """Whole months since timestamp: 'this month', '1 month ago', 'n months ago'"""
    if timestamp is None:
        return None

    months = whole_months_between(timestamp, now)
    if months == 0:
        return "this month"
    return f"{months} {'month' if months == 1 else 'months'} ago"


def score_stats(applications: Sequence[LoanApplication], now: Optional[datetime] = None) -> DerivedStats:
    """
    Summarize credit score history.

    Applications are ordered newest first. The change is measured against the
    previous application; with fewer than two applications it is zero. Ties on
    highest/lowest resolve to the first application carrying that score.
    """
    if not applications:
        return DerivedStats(
            current=0,
            highest=0,
            lowest=0,
            current_change=0,
            highest_date=None,
            lowest_date=None,
        )

    scores = [app.credit_score for app in applications]
    current = scores[0]
    previous = scores[1] if len(scores) > 1 else current

    highest = max(scores)
    lowest = min(scores)
    highest_app = applications[scores.index(highest)]
    lowest_app = applications[scores.index(lowest)]

    return DerivedStats(
        current=current,
        highest=highest,
        lowest=lowest,
        current_change=current - previous,
        highest_date=time_ago(highest_app.created_at, now),
        lowest_date=time_ago(lowest_app.created_at, now),
    )


def _recent_points(applications: Sequence[LoanApplication], value_of, length: int) -> List[ChartPoint]:
    # Newest-first input; charts read left to right, oldest to newest
    recent = list(reversed(applications[:length]))
    return [
        ChartPoint(
            label=f"App {index + 1}",
            value=value_of(app) or 0,
            formatted_date=short_date(app.created_at),
        )
        for index, app in enumerate(recent)
    ]


def score_series(applications: Sequence[LoanApplication], length: int = SERIES_LENGTH) -> List[ChartPoint]:
    """Credit scores of the most recent applications"""
    return _recent_points(applications, lambda app: app.credit_score, length)


def loan_amount_series(applications: Sequence[LoanApplication], length: int = SERIES_LENGTH) -> List[ChartPoint]:
    """Requested amounts of the most recent applications"""
    return _recent_points(applications, lambda app: app.loan_amount, length)


def filter_by_period(
    applications: Sequence[LoanApplication],
    months: int,
    now: Optional[datetime] = None,
) -> List[LoanApplication]:
    """Keep applications created within the last `months` months, preserving order"""
    return [
        app
        for app in applications
        if app.created_at is not None and whole_months_between(app.created_at, now) < months
    ]


def rating_for_score(score: int) -> str:
    if score >= EXCELLENT_SCORE:
        return "Excellent"
    elif score >= GOOD_SCORE:
        return "Good"
    elif score >= FAIR_SCORE:
        return "Fair"
    return "Poor"


def risk_band(score: Optional[int]) -> RiskBand:
    """Group a credit score into a risk band; None means no application yet"""
    if score is None:
        return RiskBand("No Application", "gray")
    if score >= EXCELLENT_SCORE:
        return RiskBand("Low Risk - High Need", "green")
    elif score >= GOOD_SCORE:
        return RiskBand("Low Risk - Moderate Need", "green")
    elif score >= FAIR_SCORE:
        return RiskBand("Moderate Risk", "orange")
    return RiskBand("High Risk", "red")


def score_color(score: float) -> str:
    if score >= EXCELLENT_SCORE:
        return "#4CAF50"
    elif score >= GOOD_SCORE:
        return "#2196F3"
    elif score >= FAIR_SCORE:
        return "#FF9800"
    return "#F44336"


_SCORE_MESSAGES = {
    "Excellent": "Your credit score is in the excellent range. Maintain your current financial habits to keep your score high.",
    "Good": "Your credit score is good. Continue managing your finances responsibly.",
    "Fair": "Your credit score is average. Consider improving your financial habits.",
    "Poor": "Your credit score needs improvement. Focus on better financial management.",
}


def score_message(score: int) -> str:
    return _SCORE_MESSAGES[rating_for_score(score)]


def trend_label(change: int) -> tuple[str, str]:
    """Arrow and text describing the change since the previous application"""
    if change == 0:
        return "→", "Constant from last month"
    arrow = "↗" if change > 0 else "↘"
    return arrow, f"{'+' if change > 0 else ''}{change} from last month"


def application_outlook(status: str) -> str:
    if status == "Approved":
        return "Instant approval eligible"
    elif status == "Under Review":
        return "Under review by team"
    return "Application needs improvement"


def total_requested(applications: Sequence[LoanApplication]) -> float:
    return sum(app.loan_amount for app in applications)


def loan_to_income_ratio(loan_amount: float, income: float) -> str:
    """Two-decimal ratio shown beside the apply form"""
    if income <= 0:
        return "0.00"
    return f"{loan_amount / income:.2f}"


def average_amount_by_status(applications: Sequence[LoanApplication]) -> Dict[str, float]:
    """Mean requested amount per status, over the statuses present"""
    totals: Dict[str, float] = defaultdict(float)
    counts: Dict[str, int] = defaultdict(int)
    for app in applications:
        totals[app.status] += app.loan_amount
        counts[app.status] += 1
    return {status: totals[status] / counts[status] for status in totals}


def priority_class(priority: str) -> str:
    level = priority.lower()
    if level == "high":
        return "priority-high"
    elif level == "medium":
        return "priority-medium"
    return "priority-low"
