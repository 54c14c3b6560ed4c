# ==============================================================================
# Guarded Ratios
# ==============================================================================
"""
Division helpers that yield 0 instead of raising or producing NaN.

Every rate the dashboard shows goes through these so that an empty window
renders as zeros.
"""


def safe_ratio(numerator: float, denominator: float) -> float:
    """Return numerator / denominator, or 0.0 when the denominator is zero."""
    if not denominator:
        return 0.0
    return numerator / denominator


def percent(part: float, whole: float, digits: int = 1) -> float:
    """Return part as a percentage of whole, rounded to ``digits`` decimals."""
    return round(safe_ratio(part, whole) * 100, digits)


def percent_change(current: float, previous: float, digits: int = 1) -> float:
    """Percent change from previous to current; 0.0 when there is no baseline."""
    if not previous:
        return 0.0
    return round((current - previous) / previous * 100, digits)
