"""Chart geometry - bar scaling, pie/donut slice paths and the score gauge"""

import math
from typing import Callable, List, Optional, Sequence, Tuple

from loansewa_web.domain.models import Bar, ChartPoint, PieSlice, ScoreRing

MIN_SCORE = 300
MAX_SCORE = 900

# Score gauge: r=85 circle, circumference rounded as drawn by the stylesheet
RING_CIRCUMFERENCE = 534

# Pie slices start at 12 o'clock
START_OFFSET_DEGREES = -90


def bar_percent(value: float, maximum: float) -> float:
    """Bar length as a percent of the chart maximum; may exceed 100 if value > maximum"""
    if maximum <= 0:
        return 0.0
    return value / maximum * 100


def bar_chart(
    points: Sequence[ChartPoint],
    maximum: Optional[float] = None,
    floor: Optional[float] = None,
    color: str | Callable[[float], str] = "#9C27B0",
    caption: Callable[[ChartPoint], str] | None = None,
) -> List[Bar]:
    """
    Scale a series into bars.

    Args:
        points: Series to draw, in display order
        maximum: Fixed chart maximum (default: the series maximum)
        floor: Lower bound applied to the maximum
        color: Bar colour, or a function of the value
        caption: Text shown on each bar (default: the point's date)
    """
    if maximum is None:
        maximum = max((p.value for p in points), default=0)
    if floor is not None:
        maximum = max(maximum, floor)

    return [
        Bar(
            label=p.label,
            value=p.value,
            percent=bar_percent(p.value, maximum),
            color=color(p.value) if callable(color) else color,
            caption=caption(p) if caption else p.formatted_date,
        )
        for p in points
    ]


def _fmt(value: float) -> str:
    text = f"{value:.3f}".rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def _point(cx: float, cy: float, radius: float, angle: float) -> Tuple[float, float]:
    theta = math.radians(angle + START_OFFSET_DEGREES)
    return cx + radius * math.cos(theta), cy + radius * math.sin(theta)


def slice_path(cx: float, cy: float, radius: float, start_angle: float, end_angle: float) -> str:
    """SVG wedge from the centre between two clockwise angles"""
    span = end_angle - start_angle
    x1, y1 = _point(cx, cy, radius, start_angle)
    x2, y2 = _point(cx, cy, radius, end_angle)
    r = _fmt(radius)

    if span >= 360:
        # Coincident endpoints draw nothing; go through the opposite point
        mx, my = _point(cx, cy, radius, start_angle + 180)
        return (
            f"M {_fmt(cx)} {_fmt(cy)} L {_fmt(x1)} {_fmt(y1)} "
            f"A {r} {r} 0 0 1 {_fmt(mx)} {_fmt(my)} "
            f"A {r} {r} 0 0 1 {_fmt(x2)} {_fmt(y2)} Z"
        )

    large_arc = 1 if span > 180 else 0
    return (
        f"M {_fmt(cx)} {_fmt(cy)} L {_fmt(x1)} {_fmt(y1)} "
        f"A {r} {r} 0 {large_arc} 1 {_fmt(x2)} {_fmt(y2)} Z"
    )


def pie_slices(
    categories: Sequence[Tuple[str, float, str]],
    cx: float = 100,
    cy: float = 100,
    radius: float = 80,
    total: Optional[float] = None,
) -> List[PieSlice]:
    """
    Lay out (label, magnitude, colour) categories as consecutive clockwise wedges.

    Percentages are taken against `total`, which defaults to the sum of the
    magnitudes. A total smaller than that sum is widened to it so the wedges
    never wrap past a full turn. Zero magnitudes produce no slice and take no
    angle. A non-positive total yields no slices at all.
    """
    magnitude = sum(value for _, value, _ in categories if value > 0)
    total = magnitude if total is None else max(total, magnitude)
    if total <= 0:
        return []

    slices = []
    current_angle = 0.0
    for label, value, color in categories:
        if value <= 0:
            continue

        percent = value / total * 100
        span = percent / 100 * 360
        start_angle = current_angle
        end_angle = current_angle + span
        current_angle = end_angle

        slices.append(
            PieSlice(
                label=label,
                value=value,
                percent=percent,
                start_angle=start_angle,
                end_angle=end_angle,
                large_arc=1 if span > 180 else 0,
                path=slice_path(cx, cy, radius, start_angle, end_angle),
                color=color,
            )
        )

    return slices


def score_ring(score: Optional[int]) -> ScoreRing:
    """Stroke offset for the credit score gauge; no score leaves the ring empty"""
    if score is None:
        return ScoreRing(RING_CIRCUMFERENCE, RING_CIRCUMFERENCE, "#ccc")

    normalized = (score - MIN_SCORE) / (MAX_SCORE - MIN_SCORE)
    return ScoreRing(
        circumference=RING_CIRCUMFERENCE,
        stroke_offset=RING_CIRCUMFERENCE - normalized * RING_CIRCUMFERENCE,
        color="#4169E1",
    )
