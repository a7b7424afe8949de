"""Date manipulation utilities"""

from datetime import datetime, timezone
from typing import Optional

DAYS_PER_MONTH = 30


def now_matching(reference: datetime) -> datetime:
    """Current time, timezone-aware only if the reference is"""
    if reference.tzinfo is None:
        return datetime.now()
    return datetime.now(timezone.utc)


def whole_months_between(earlier: datetime, later: Optional[datetime] = None) -> int:
    """Floored count of 30-day months from earlier to later (never negative)"""
    later = later or now_matching(earlier)
    # Naive pairs compare as local wall time; a naive side of a mixed pair is taken as UTC
    if earlier.tzinfo is None and later.tzinfo is not None:
        earlier = earlier.replace(tzinfo=timezone.utc)
    elif earlier.tzinfo is not None and later.tzinfo is None:
        later = later.replace(tzinfo=timezone.utc)
    days = (later - earlier).total_seconds() / (60 * 60 * 24)
    return max(int(days // DAYS_PER_MONTH), 0)


def short_date(value: Optional[datetime]) -> str:
    """Day and abbreviated month, e.g. '5 Oct'"""
    if value is None:
        return ""
    return f"{value.day} {value.strftime('%b')}"


def long_date(value: Optional[datetime]) -> str:
    """Day, full month and year, e.g. '5 October 2025'"""
    if value is None:
        return "-"
    return f"{value.day} {value.strftime('%B %Y')}"
