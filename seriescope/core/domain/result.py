"""
Result Domain Models - Data structures for forecast, decomposition, anomaly and trend results.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

import pandas as pd

from seriescope.core.domain.models import ForecastModel


@dataclass(frozen=True)
class ConfidenceInterval:
    """Symmetric uncertainty bounds around a single prediction."""

    lower: float
    upper: float


@dataclass(frozen=True)
class ForecastResult:
    """Result of a forecast."""

    predictions: tuple[float, ...]
    confidence_intervals: tuple[ConfidenceInterval, ...]
    timestamps: tuple[datetime, ...]
    model: ForecastModel
    accuracy: float  # 1 - SSE / sum(y^2), clamped to [0, 1]
    residuals: tuple[float, ...]

    @property
    def horizon(self) -> int:
        return len(self.predictions)

    def to_frame(self) -> pd.DataFrame:
        """Return the forecast as a ['ds', 'mean', 'lower', 'upper'] DataFrame."""
        return pd.DataFrame({
            "ds": pd.to_datetime(list(self.timestamps)),
            "mean": list(self.predictions),
            "lower": [ci.lower for ci in self.confidence_intervals],
            "upper": [ci.upper for ci in self.confidence_intervals],
        })


@dataclass(frozen=True)
class SeasonalDecomposition:
    """Additive decomposition: value[i] == trend[i] + seasonal[i] + residual[i]."""

    trend: tuple[float, ...]
    seasonal: tuple[float, ...]
    residual: tuple[float, ...]
    seasonal_period: int
    strength: float


@dataclass(frozen=True)
class AnomalyDetection:
    """Per-sample anomaly scores and the indices above threshold."""

    anomalies: tuple[int, ...]
    scores: tuple[float, ...]
    threshold: float
    method: str


class TrendDirection(str, Enum):
    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"
    VOLATILE = "volatile"


@dataclass(frozen=True)
class TrendAnalysis:
    """Regression slope, its significance, and detected change points."""

    slope: float
    p_value: float
    confidence: float
    trend_direction: TrendDirection
    change_points: tuple[int, ...]
