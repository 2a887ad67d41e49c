"""
MetricsRecorder Port - Interface for recording per-call performance metrics.

The engine only measures; where the numbers go (logs, Prometheus, a test
list) is decided by the adapter.
"""

from abc import ABC, abstractmethod


class MetricsRecorder(ABC):
    """
    Abstract interface for metric sinks.

    Implementations:
    - LoggingMetricsRecorder: Writes metrics to the log
    - InMemoryMetricsRecorder: Keeps metrics in a list
    """

    @abstractmethod
    def record_metric(self, name: str, value: float) -> None:
        """
        Record a single metric sample.

        Args:
            name: Metric name (e.g. "time_series_forecasting")
            value: Sample value, in seconds for durations
        """
        ...
