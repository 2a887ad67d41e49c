"""
Statistics Kernel - Pure numeric helpers shared by the analysis modules.

Covers:
- Sample autocorrelation
- Yule-Walker AR estimation (Levinson-Durbin recursion)
- Ordinary least squares slope with a t-test p-value
- Normal distribution helpers
- Goodness-of-fit and residual standard error

Every function guards degenerate input (zero variance, empty arrays) by
returning zeros instead of NaN.
"""

from typing import NamedTuple, Sequence

import numpy as np
from scipy import stats

from seriescope.core.domain.errors import InvalidInputError


class Regression(NamedTuple):
    slope: float
    intercept: float
    p_value: float


def autocorrelation(data: Sequence[float] | np.ndarray, lag: int) -> float:
    """
    Biased sample autocorrelation at ``lag`` (covariance and variance both divided by n).

    Returns 0.0 for an out-of-range lag or a constant series.
    """
    x = np.asarray(data, dtype=float)
    n = len(x)
    if lag < 0 or lag >= n:
        return 0.0

    centered = x - x.mean()
    variance = float(np.dot(centered, centered)) / n
    if variance <= 0:
        return 0.0

    covariance = float(np.dot(centered[: n - lag], centered[lag:])) / n
    return covariance / variance


def autocorrelations(data: Sequence[float] | np.ndarray, max_lag: int) -> np.ndarray:
    """Autocorrelation for lags 0..max_lag inclusive."""
    return np.array([autocorrelation(data, lag) for lag in range(max_lag + 1)])


def levinson_durbin(acf: Sequence[float] | np.ndarray) -> np.ndarray:
    """
    Solve the Yule-Walker system for AR coefficients.

    Args:
        acf: Autocorrelations r[0..p]

    Returns:
        Coefficients phi[0..p-1] where phi[0] multiplies the lag-1 value
    """
    r = np.asarray(acf, dtype=float)
    order = len(r) - 1
    phi = np.zeros(order)
    if order < 1 or r[0] == 0:
        return phi

    phi[0] = r[1] / r[0]
    error = r[0] * (1.0 - phi[0] ** 2)

    for m in range(1, order):
        if error <= 0:
            break
        acc = r[m + 1] - float(np.dot(phi[:m], r[m:0:-1]))
        reflection = acc / error
        previous = phi[:m].copy()
        phi[:m] = previous - reflection * previous[::-1]
        phi[m] = reflection
        error *= 1.0 - reflection ** 2

    return phi


def yule_walker(data: Sequence[float] | np.ndarray, order: int) -> np.ndarray:
    """
    Estimate AR(order) coefficients from the sample autocorrelations.

    Raises:
        InvalidInputError: if order is not in [1, len(data))
    """
    n = len(data)
    if order <= 0 or order >= n:
        raise InvalidInputError(f"Invalid AR order {order} for a series of length {n}")

    acf = autocorrelations(data, order)
    if acf[0] == 0:
        return np.zeros(order)
    if order == 1:
        return np.array([acf[1] / acf[0]])
    return levinson_durbin(acf)


def ar_residuals(data: Sequence[float] | np.ndarray, coefficients: Sequence[float] | np.ndarray) -> np.ndarray:
    """One-step in-sample errors of an AR model, for t in [order, n)."""
    x = np.asarray(data, dtype=float)
    phi = np.asarray(coefficients, dtype=float)
    order = len(phi)
    residuals = []
    for t in range(order, len(x)):
        # x[t-1], x[t-2], ... x[t-order]
        lagged = x[t - order:t][::-1]
        residuals.append(x[t] - float(np.dot(phi, lagged)))
    return np.array(residuals, dtype=float)


def linear_regression(x: Sequence[float] | np.ndarray, y: Sequence[float] | np.ndarray) -> Regression:
    """
    Ordinary least squares of y on x.

    The p-value is the two-sided Student-t probability of the slope's
    t-statistic with n - 2 degrees of freedom. A perfect fit gives p=0 for a
    non-zero slope and p=1 for a flat one.
    """
    xs = np.asarray(x, dtype=float)
    ys = np.asarray(y, dtype=float)
    n = len(xs)
    if n == 0:
        return Regression(0.0, 0.0, 1.0)

    x_mean = xs.mean()
    y_mean = ys.mean()
    dx = xs - x_mean
    sxx = float(np.dot(dx, dx))
    if sxx == 0 or np.all(ys == ys[0]):
        return Regression(0.0, float(y_mean), 1.0)

    slope = float(np.dot(dx, ys - y_mean)) / sxx
    intercept = float(y_mean - slope * x_mean)

    if n < 3:
        return Regression(slope, intercept, 1.0)

    residuals = ys - (y_mean + slope * dx)
    mse = float(np.dot(residuals, residuals)) / (n - 2)
    se_slope = np.sqrt(mse / sxx)

    if slope == 0:
        p_value = 1.0
    elif se_slope == 0:
        p_value = 0.0
    else:
        t_stat = slope / se_slope
        p_value = float(2.0 * stats.t.sf(abs(t_stat), n - 2))

    return Regression(slope, intercept, p_value)


def normal_cdf(x: float) -> float:
    """Standard normal cumulative distribution function."""
    return float(stats.norm.cdf(x))


def z_multiplier(confidence_level: float) -> float:
    """
    Two-sided standard normal quantile for a confidence level (0.95 -> 1.96).

    Raises:
        InvalidInputError: if the level is not strictly between 0 and 1
    """
    if not 0.0 < confidence_level < 1.0:
        raise InvalidInputError(f"Confidence level must be in (0, 1), got {confidence_level}")
    return float(stats.norm.ppf((1.0 + confidence_level) / 2.0))


def goodness_of_fit(residuals: Sequence[float] | np.ndarray, reference: Sequence[float] | np.ndarray) -> float:
    """
    Normalized error score ``1 - sum(residual^2) / sum(reference^2)`` clamped to [0, 1].

    This is not R^2: the reference is not mean-centered.
    """
    sse = float(np.sum(np.square(np.asarray(residuals, dtype=float))))
    total = float(np.sum(np.square(np.asarray(reference, dtype=float))))
    if total == 0:
        return 1.0 if sse == 0 else 0.0
    return float(min(1.0, max(0.0, 1.0 - sse / total)))


def residual_standard_error(residuals: Sequence[float] | np.ndarray) -> float:
    """Root mean square of the residuals; 0.0 when there are none."""
    r = np.asarray(residuals, dtype=float)
    if len(r) == 0:
        return 0.0
    return float(np.sqrt(np.mean(np.square(r))))


def population_std(data: Sequence[float] | np.ndarray) -> float:
    x = np.asarray(data, dtype=float)
    if len(x) == 0:
        return 0.0
    return float(x.std())
