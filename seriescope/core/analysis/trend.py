"""
Trend Analyzer - Slope significance, direction and change points.
"""

import logging

import numpy as np

from seriescope.core.analysis.statistics import linear_regression
from seriescope.core.domain.errors import InsufficientDataError
from seriescope.core.domain.result import TrendAnalysis, TrendDirection
from seriescope.core.domain.series import TimeSeriesData
from seriescope.core.domain.settings import EngineSettings

logger = logging.getLogger(__name__)

MIN_TREND_POINTS = 3


def determine_trend_direction(slope: float, p_value: float, significance_level: float = 0.05) -> TrendDirection:
    if p_value > significance_level:
        return TrendDirection.STABLE
    if slope > 0:
        return TrendDirection.INCREASING
    if slope < 0:
        return TrendDirection.DECREASING
    return TrendDirection.VOLATILE


def detect_change_points(values: np.ndarray, sigma: float = 2.0) -> list[int]:
    """
    Indices where the mean of the next window differs from the previous one
    by more than ``sigma`` pooled standard deviations of the two windows.

    Window is max(5, n // 10). Adjacent indices are all reported.
    """
    n = len(values)
    window = max(5, n // 10)
    change_points = []
    for i in range(window, n - window):
        before = values[i - window:i]
        after = values[i:i + window]
        shift = abs(after.mean() - before.mean())
        pooled_std = np.sqrt((before.var() + after.var()) / 2.0)
        threshold = sigma * pooled_std
        if shift > threshold:
            change_points.append(i)
    return change_points


def analyze_trend(
    data: TimeSeriesData,
    confidence_level: float = 0.95,
    settings: EngineSettings | None = None,
) -> TrendAnalysis:
    """
    Regress the values on their index and summarise the trend.

    Args:
        data: Input series (at least 3 points)
        confidence_level: Echoed back in the result
        settings: Engine settings (defaults if None)

    Raises:
        InsufficientDataError: for fewer than 3 points
    """
    settings = settings or EngineSettings()
    values = data.as_array()
    n = len(values)
    if n < MIN_TREND_POINTS:
        raise InsufficientDataError(
            f"Need at least {MIN_TREND_POINTS} data points for trend analysis",
            required=MIN_TREND_POINTS,
            actual=n,
        )

    regression = linear_regression(np.arange(n, dtype=float), values)
    direction = determine_trend_direction(regression.slope, regression.p_value, settings.significance_level)
    change_points = detect_change_points(values, sigma=settings.change_point_sigma)

    logger.info(
        f"Trend over {n} points: slope={regression.slope:.4g} p={regression.p_value:.3g} "
        f"direction={direction.value} change_points={len(change_points)}"
    )

    return TrendAnalysis(
        slope=regression.slope,
        p_value=regression.p_value,
        confidence=confidence_level,
        trend_direction=direction,
        change_points=tuple(change_points),
    )
