"""Display formatting for amounts and percentages"""

from typing import Optional

LAKH = 100_000


def format_lakhs(amount: Optional[float], digits: int = 2) -> str:
    """Rupee amount in lakhs, e.g. 2560000 -> '₹25.60L'"""
    return f"₹{(amount or 0) / LAKH:.{digits}f}L"


def format_optional_lakhs(amount: Optional[float]) -> str:
    """Like format_lakhs but renders '-' for empty amounts"""
    return format_lakhs(amount) if amount else "-"


def format_probability(probability: float) -> str:
    return f"{probability * 100:.2f}%"
