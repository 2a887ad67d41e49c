"""
Analysis Service - Async entry point to the analysis engine.

Each call:
1. Runs the CPU-bound computation on a worker thread
2. Records its wall-clock duration through the MetricsRecorder port
3. Logs and re-raises any failure
"""

import asyncio
import logging
import time
from typing import Any, Callable

from seriescope.adapters.metrics.recorders import LoggingMetricsRecorder
from seriescope.core.analysis.anomaly import detect_anomalies
from seriescope.core.analysis.decomposition import decompose
from seriescope.core.analysis.forecasting import forecast
from seriescope.core.analysis.trend import analyze_trend
from seriescope.core.domain.models import ForecastModel
from seriescope.core.domain.result import (
    AnomalyDetection,
    ForecastResult,
    SeasonalDecomposition,
    TrendAnalysis,
)
from seriescope.core.domain.series import TimeSeriesData
from seriescope.core.domain.settings import EngineSettings
from seriescope.core.ports.metrics import MetricsRecorder

logger = logging.getLogger(__name__)


class AnalysisService:
    """
    Stateless facade over the forecasting, decomposition, anomaly and trend operations.
    """

    def __init__(
        self,
        settings: EngineSettings | None = None,
        metrics: MetricsRecorder | None = None,
    ):
        """
        Initialize the service.

        Args:
            settings: Engine settings shared by every call
            metrics: Port receiving per-call durations (default: log at DEBUG)
        """
        self.settings = settings or EngineSettings()
        self.metrics = metrics or LoggingMetricsRecorder()

    async def _run(self, metric: str, func: Callable[..., Any], *args, **kwargs) -> Any:
        start = time.perf_counter()
        try:
            return await asyncio.to_thread(func, *args, **kwargs)
        except Exception as e:
            logger.error(f"{metric} failed: {e}")
            raise
        finally:
            self.metrics.record_metric(metric, time.perf_counter() - start)

    async def forecast(
        self,
        data: TimeSeriesData,
        model: ForecastModel | dict | str,
        horizon: int,
        confidence_level: float = 0.95,
    ) -> ForecastResult:
        return await self._run(
            "time_series_forecasting",
            forecast,
            data,
            model,
            horizon,
            confidence_level=confidence_level,
            settings=self.settings,
        )

    async def decompose(
        self,
        data: TimeSeriesData,
        seasonal_period: int | None = None,
    ) -> SeasonalDecomposition:
        return await self._run(
            "seasonal_decomposition",
            decompose,
            data,
            seasonal_period=seasonal_period,
            settings=self.settings,
        )

    async def detect_anomalies(
        self,
        data: TimeSeriesData,
        method: str = "isolation_forest",
        threshold: float = 2.0,
        random_state: int | None = None,
    ) -> AnomalyDetection:
        return await self._run(
            "anomaly_detection",
            detect_anomalies,
            data,
            method=method,
            threshold=threshold,
            settings=self.settings,
            random_state=random_state,
        )

    async def analyze_trend(
        self,
        data: TimeSeriesData,
        confidence_level: float = 0.95,
    ) -> TrendAnalysis:
        return await self._run(
            "trend_analysis",
            analyze_trend,
            data,
            confidence_level=confidence_level,
            settings=self.settings,
        )

    async def analyze_trends(
        self,
        series: dict[str, TimeSeriesData],
        confidence_level: float = 0.95,
    ) -> dict[str, TrendAnalysis]:
        """
        Analyze several named series concurrently.

        Returns:
            Mapping of series name to its TrendAnalysis
        """
        names = list(series)
        results = await asyncio.gather(
            *(self.analyze_trend(series[name], confidence_level) for name in names)
        )
        return dict(zip(names, results))
