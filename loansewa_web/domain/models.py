"""Domain models - pure Python dataclasses for values derived at render time"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class DerivedStats:
    """Credit score trend summary over an application history"""

    current: int
    highest: int
    lowest: int
    current_change: int
    highest_date: Optional[str]
    lowest_date: Optional[str]


@dataclass
class ChartPoint:
    """One bar of a time series chart"""

    label: str
    value: float
    formatted_date: str


@dataclass
class RiskBand:
    """UI grouping of a credit score"""

    label: str
    color: str


@dataclass
class Bar:
    """Rendered bar: percent is relative to the chart maximum"""

    label: str
    value: float
    percent: float
    color: str
    caption: str = ""


@dataclass
class PieSlice:
    """Wedge of a pie/donut chart, angles in degrees clockwise from 12 o'clock"""

    label: str
    value: float
    percent: float
    start_angle: float
    end_angle: float
    large_arc: int
    path: str
    color: str


@dataclass
class ScoreRing:
    """Circular credit score gauge"""

    circumference: float
    stroke_offset: float
    color: str
