"""
Metrics Recorder Adapters - Concrete sinks for the MetricsRecorder port.
"""

import logging

from seriescope.core.ports.metrics import MetricsRecorder

logger = logging.getLogger(__name__)


class LoggingMetricsRecorder(MetricsRecorder):
    """Writes each metric sample to the log."""

    def __init__(self, level: int = logging.DEBUG):
        self.level = level

    def record_metric(self, name: str, value: float) -> None:
        logger.log(self.level, f"metric {name}={value:.6f}")


class InMemoryMetricsRecorder(MetricsRecorder):
    """Keeps every sample in ``self.samples`` as (name, value) tuples."""

    def __init__(self):
        self.samples: list[tuple[str, float]] = []

    def record_metric(self, name: str, value: float) -> None:
        self.samples.append((name, value))

    def values(self, name: str) -> list[float]:
        return [value for sample_name, value in self.samples if sample_name == name]
