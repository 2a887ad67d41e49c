"""
Forecasting Engine - Dispatches a series to one of the forecast strategies.

Every strategy is a pure function ``(values, params, horizon) -> _Fit``; the
engine wraps the fit with confidence intervals and forward timestamps.
"""

import logging
from datetime import datetime, timedelta
from typing import NamedTuple

import numpy as np
import pandas as pd

from seriescope.core.analysis.decomposition import decompose_values
from seriescope.core.analysis.statistics import (
    ar_residuals,
    goodness_of_fit,
    linear_regression,
    residual_standard_error,
    yule_walker,
)
from seriescope.core.domain.errors import InsufficientDataError, InvalidInputError
from seriescope.core.domain.models import (
    Arima,
    Autoregressive,
    ExponentialSmoothing,
    ForecastModel,
    MovingAverage,
    Prophet,
    SeasonalDecompositionModel,
    parse_model,
)
from seriescope.core.domain.result import ConfidenceInterval, ForecastResult
from seriescope.core.domain.series import TimeSeriesData
from seriescope.core.domain.settings import EngineSettings

logger = logging.getLogger(__name__)


class _Fit(NamedTuple):
    predictions: np.ndarray
    residuals: np.ndarray
    accuracy: float


def recursive_forecast(history: np.ndarray, coefficients: np.ndarray, horizon: int) -> np.ndarray:
    """
    Roll an AR model forward, appending each prediction to the lag buffer.
    """
    working = list(history)
    predictions = []
    for _ in range(horizon):
        lags = min(len(coefficients), len(working))
        prediction = sum(coefficients[i] * working[-1 - i] for i in range(lags))
        predictions.append(prediction)
        working.append(prediction)
    return np.array(predictions, dtype=float)


def _autoregressive(values: np.ndarray, order: int, horizon: int) -> _Fit:
    coefficients = yule_walker(values, order)
    predictions = recursive_forecast(values, coefficients, horizon)
    residuals = ar_residuals(values, coefficients)
    return _Fit(predictions, residuals, goodness_of_fit(residuals, values))


def _moving_average(values: np.ndarray, order: int, horizon: int) -> _Fit:
    n = len(values)
    if order > n:
        raise InvalidInputError(f"MA order {order} cannot exceed data length {n}")

    level = values[-order:].mean()
    residuals = np.array([values[i] - values[i - order:i].mean() for i in range(order, n)])
    return _Fit(np.full(horizon, level), residuals, goodness_of_fit(residuals, values))


def _arima(values: np.ndarray, p: int, d: int, horizon: int) -> _Fit:
    levels = [values]
    for _ in range(d):
        levels.append(np.diff(levels[-1]))
    differenced = levels[-1]

    coefficients = yule_walker(differenced, p)
    predictions = recursive_forecast(differenced, coefficients, horizon)

    # Undo each differencing pass, seeding from the last value one level up
    for k in range(d, 0, -1):
        predictions = levels[k - 1][-1] + np.cumsum(predictions)

    residuals = ar_residuals(differenced, coefficients)
    return _Fit(predictions, residuals, goodness_of_fit(residuals, differenced))


def _exponential_smoothing(values: np.ndarray, alpha: float, horizon: int) -> _Fit:
    smoothed = np.empty(len(values))
    smoothed[0] = values[0]
    for i in range(1, len(values)):
        smoothed[i] = alpha * values[i] + (1 - alpha) * smoothed[i - 1]

    residuals = values - smoothed
    return _Fit(np.full(horizon, smoothed[-1]), residuals, goodness_of_fit(residuals, values))


def _seasonal(values: np.ndarray, period: int | None, horizon: int, settings: EngineSettings) -> _Fit:
    decomposition = decompose_values(values, seasonal_period=period, settings=settings)
    trend = np.asarray(decomposition.trend)
    seasonal = np.asarray(decomposition.seasonal)
    residuals = np.asarray(decomposition.residual)
    n = len(values)

    slope = linear_regression(np.arange(n, dtype=float), trend).slope
    steps = np.arange(1, horizon + 1)
    future_trend = trend[-1] + slope * steps
    future_seasonal = seasonal[(n + steps - 1) % decomposition.seasonal_period]

    return _Fit(future_trend + future_seasonal, residuals, goodness_of_fit(residuals, values))


def weekly_pattern(timestamps: pd.DatetimeIndex, values: np.ndarray) -> np.ndarray:
    """
    Mean value per day of week (Monday=0) minus the overall mean of the values.

    Weekdays with no observations get an offset of 0.
    """
    days = np.asarray(timestamps.dayofweek)
    overall = values.mean()
    pattern = np.zeros(7)
    for day in range(7):
        members = values[days == day]
        if len(members):
            pattern[day] = members.mean() - overall
    return pattern


def _prophet(
    values: np.ndarray,
    timestamps: pd.DatetimeIndex,
    future: pd.DatetimeIndex,
    horizon: int,
) -> _Fit:
    n = len(values)
    time_index = np.arange(n, dtype=float)
    slope = linear_regression(time_index, values).slope
    pattern = weekly_pattern(timestamps, values)

    steps = np.arange(1, horizon + 1)
    predictions = values[-1] + slope * steps + pattern[np.asarray(future.dayofweek)]

    fitted = values[0] + slope * time_index + pattern[np.asarray(timestamps.dayofweek)]
    residuals = values - fitted
    return _Fit(predictions, residuals, goodness_of_fit(residuals, values))


def future_timestamps(last: datetime, horizon: int) -> list[datetime]:
    """One calendar day per step after ``last``."""
    return [last + timedelta(days=i) for i in range(1, horizon + 1)]


def confidence_intervals(
    predictions: np.ndarray,
    residuals: np.ndarray,
    multiplier: float,
) -> tuple[ConfidenceInterval, ...]:
    margin = multiplier * residual_standard_error(residuals)
    return tuple(ConfidenceInterval(lower=float(p - margin), upper=float(p + margin)) for p in predictions)


def forecast(
    data: TimeSeriesData,
    model: ForecastModel | dict | str,
    horizon: int,
    confidence_level: float = 0.95,
    settings: EngineSettings | None = None,
) -> ForecastResult:
    """
    Forecast ``horizon`` steps ahead with the selected model.

    Args:
        data: Input series (at least 10 points by default)
        model: Forecast model instance, kind name or config mapping
        horizon: Number of steps, in [1, 100] by default
        confidence_level: Interval coverage, in (0, 1)
        settings: Engine settings (defaults if None)

    Returns:
        ForecastResult with one prediction, interval and timestamp per step

    Raises:
        InsufficientDataError: if the series is too short
        InvalidInputError: for an out-of-range horizon, order or confidence level
    """
    settings = settings or EngineSettings()
    model = parse_model(model)
    n = len(data)

    if n < settings.forecast_min_points:
        raise InsufficientDataError(
            f"Need at least {settings.forecast_min_points} data points for forecasting",
            required=settings.forecast_min_points,
            actual=n,
        )
    if not 1 <= horizon <= settings.max_horizon:
        raise InvalidInputError(f"Forecast horizon must be between 1 and {settings.max_horizon}, got {horizon}")

    multiplier = settings.confidence_multiplier(confidence_level)
    values = data.as_array()
    future = future_timestamps(data.timestamps[-1], horizon)

    logger.info(f"Forecasting {horizon} steps with '{model.kind}' over {n} points")

    match model:
        case Autoregressive(order=order):
            fit = _autoregressive(values, order, horizon)
        case MovingAverage(order=order):
            fit = _moving_average(values, order, horizon)
        case Arima(p=p, d=d):
            fit = _arima(values, p, d, horizon)
        case ExponentialSmoothing(alpha=alpha):
            fit = _exponential_smoothing(values, alpha or settings.exponential_smoothing_alpha, horizon)
        case SeasonalDecompositionModel(period=period):
            fit = _seasonal(values, period, horizon, settings)
        case Prophet():
            fit = _prophet(values, pd.DatetimeIndex(data.timestamps), pd.DatetimeIndex(future), horizon)
        case _:
            raise InvalidInputError(f"Unsupported forecast model: {model!r}")

    return ForecastResult(
        predictions=tuple(float(p) for p in fit.predictions),
        confidence_intervals=confidence_intervals(fit.predictions, fit.residuals, multiplier),
        timestamps=tuple(future),
        model=model,
        accuracy=fit.accuracy,
        residuals=tuple(float(r) for r in fit.residuals),
    )
