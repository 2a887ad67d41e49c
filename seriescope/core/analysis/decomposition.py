"""
Seasonal Decomposer - Additive trend / seasonal / residual split.
"""

import logging

import numpy as np

from seriescope.core.analysis.statistics import autocorrelation
from seriescope.core.domain.errors import InsufficientDataError, InvalidInputError
from seriescope.core.domain.result import SeasonalDecomposition
from seriescope.core.domain.series import TimeSeriesData
from seriescope.core.domain.settings import EngineSettings

logger = logging.getLogger(__name__)


def detect_seasonal_period(
    values: np.ndarray,
    max_period: int = 365,
    default_period: int = 7,
) -> int:
    """
    Pick the lag in [2, min(n // 3, max_period)] with the highest positive autocorrelation.

    Falls back to ``default_period`` when no candidate correlates positively.
    """
    best_period = default_period
    best_correlation = 0.0

    upper = min(len(values) // 3, max_period)
    for period in range(2, upper + 1):
        correlation = autocorrelation(values, period)
        if correlation > best_correlation:
            best_correlation = correlation
            best_period = period

    if best_correlation <= 0:
        logger.warning(f"No positively autocorrelated lag found, using default period {default_period}")
    return best_period


def extract_trend(values: np.ndarray, period: int) -> np.ndarray:
    """Centered moving average; windows shrink at the edges instead of wrapping."""
    n = len(values)
    half = period // 2
    trend = np.empty(n)
    for i in range(n):
        start = max(0, i - half)
        end = min(n, i + half + 1)
        trend[i] = values[start:end].mean()
    return trend


def extract_seasonal(detrended: np.ndarray, period: int) -> np.ndarray:
    """Average detrended value per cycle position, tiled across the series."""
    positions = np.arange(len(detrended)) % period
    pattern = np.zeros(period)
    for position in range(period):
        members = detrended[positions == position]
        if len(members):
            pattern[position] = members.mean()
    return pattern[positions]


def seasonal_strength(seasonal: np.ndarray, residual: np.ndarray) -> float:
    seasonal_variance = float(np.mean(np.square(seasonal)))
    residual_variance = float(np.mean(np.square(residual)))
    total = seasonal_variance + residual_variance
    if total == 0:
        return 0.0
    return seasonal_variance / total


def decompose_values(
    values: np.ndarray,
    seasonal_period: int | None = None,
    settings: EngineSettings | None = None,
) -> SeasonalDecomposition:
    """
    Decompose a raw value array. See ``decompose`` for the contract.
    """
    settings = settings or EngineSettings()
    values = np.asarray(values, dtype=float)
    n = len(values)

    if n < settings.decomposition_min_points:
        raise InsufficientDataError(
            f"Need at least {settings.decomposition_min_points} data points for seasonal decomposition",
            required=settings.decomposition_min_points,
            actual=n,
        )

    if seasonal_period is None:
        period = detect_seasonal_period(
            values,
            max_period=settings.max_seasonal_period,
            default_period=settings.default_seasonal_period,
        )
        logger.info(f"Detected seasonal period {period} for {n} points")
    else:
        if seasonal_period < 2 or seasonal_period > n:
            raise InvalidInputError(f"Seasonal period must be in [2, {n}], got {seasonal_period}")
        period = seasonal_period

    trend = extract_trend(values, period)
    seasonal = extract_seasonal(values - trend, period)
    residual = values - trend - seasonal

    return SeasonalDecomposition(
        trend=tuple(trend.tolist()),
        seasonal=tuple(seasonal.tolist()),
        residual=tuple(residual.tolist()),
        seasonal_period=period,
        strength=seasonal_strength(seasonal, residual),
    )


def decompose(
    data: TimeSeriesData,
    seasonal_period: int | None = None,
    settings: EngineSettings | None = None,
) -> SeasonalDecomposition:
    """
    Split a series into trend, seasonal and residual components.

    Args:
        data: Input series (at least 24 points by default)
        seasonal_period: Cycle length; auto-detected by autocorrelation if None
        settings: Engine settings (defaults if None)

    Returns:
        SeasonalDecomposition whose components sum back to the input

    Raises:
        InsufficientDataError: if the series is too short
        InvalidInputError: if the supplied period is out of range
    """
    return decompose_values(data.as_array(), seasonal_period=seasonal_period, settings=settings)
