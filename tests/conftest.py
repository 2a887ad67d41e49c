"""
Pytest configuration and shared series fixtures.
"""
import numpy as np
import pytest

from seriescope.core.domain.series import TimeSeriesData


def make_series(values, start="2024-01-01") -> TimeSeriesData:
    return TimeSeriesData.from_values(values, start=start)


@pytest.fixture
def series_factory():
    """Build a daily TimeSeriesData from bare values."""
    return make_series


@pytest.fixture
def rng():
    return np.random.default_rng(42)


@pytest.fixture
def linear_series():
    """x[t] = t for 50 days."""
    return make_series(np.arange(50, dtype=float))


@pytest.fixture
def seasonal_series():
    """Period-7 sinusoid on a level of 10, 70 days, no noise."""
    t = np.arange(70)
    return make_series(10 + np.sin(2 * np.pi * t / 7))


@pytest.fixture
def noisy_series(rng):
    """Slowly rising level with weekly seasonality and mild noise."""
    t = np.arange(84)
    values = 50 + 0.2 * t + 3 * np.sin(2 * np.pi * t / 7) + rng.normal(0, 0.5, len(t))
    return make_series(values)
