"""
Tests for the statistics kernel.
"""
import numpy as np
import pytest
from scipy import stats

from seriescope.core.analysis.statistics import (
    ar_residuals,
    autocorrelation,
    goodness_of_fit,
    levinson_durbin,
    linear_regression,
    normal_cdf,
    residual_standard_error,
    yule_walker,
    z_multiplier,
)
from seriescope.core.domain.errors import InvalidInputError


def simulate_ar(coefficients, n, rng, noise=1.0):
    order = len(coefficients)
    x = np.zeros(n + 200)
    for t in range(order, len(x)):
        x[t] = sum(c * x[t - 1 - i] for i, c in enumerate(coefficients)) + rng.normal(0, noise)
    return x[200:]  # drop burn-in


def test_autocorrelation_basics():
    data = np.sin(np.arange(100) / 3.0)

    assert autocorrelation(data, 0) == pytest.approx(1.0)
    assert autocorrelation(data, 100) == 0.0
    assert autocorrelation(data, -1) == 0.0
    assert autocorrelation([5.0] * 20, 1) == 0.0


def test_ar1_yule_walker_recovers_phi(rng):
    phi = 0.7
    data = simulate_ar([phi], 5000, rng)

    coefficients = yule_walker(data, 1)

    assert coefficients.shape == (1,)
    assert coefficients[0] == pytest.approx(phi, abs=0.05)


def test_ar2_yule_walker_recovers_coefficients(rng):
    data = simulate_ar([0.5, -0.3], 5000, rng)

    coefficients = yule_walker(data, 2)

    assert coefficients[0] == pytest.approx(0.5, abs=0.05)
    assert coefficients[1] == pytest.approx(-0.3, abs=0.05)


def test_levinson_durbin_matches_direct_solve():
    acf = np.array([1.0, 0.6, 0.25, 0.1])
    order = len(acf) - 1
    toeplitz = np.array([[acf[abs(i - j)] for j in range(order)] for i in range(order)])

    expected = np.linalg.solve(toeplitz, acf[1:])

    np.testing.assert_allclose(levinson_durbin(acf), expected, rtol=1e-10)


def test_yule_walker_rejects_invalid_order():
    with pytest.raises(InvalidInputError):
        yule_walker([1.0, 2.0, 3.0], 0)
    with pytest.raises(InvalidInputError):
        yule_walker([1.0, 2.0, 3.0], 3)


def test_yule_walker_constant_series_gives_zero_coefficients():
    np.testing.assert_array_equal(yule_walker([4.0] * 30, 3), np.zeros(3))


def test_ar_residuals_length_and_values():
    data = np.array([1.0, 2.0, 4.0, 8.0])
    residuals = ar_residuals(data, [2.0])

    np.testing.assert_allclose(residuals, [0.0, 0.0, 0.0])


def test_linear_regression_perfect_line():
    x = np.arange(20, dtype=float)
    result = linear_regression(x, 3.0 + 2.0 * x)

    assert result.slope == pytest.approx(2.0)
    assert result.intercept == pytest.approx(3.0)
    assert result.p_value == pytest.approx(0.0)


def test_linear_regression_flat_series():
    result = linear_regression(np.arange(20, dtype=float), [0.1] * 20)

    assert result.slope == 0.0
    assert result.p_value == 1.0


def test_linear_regression_noise_is_not_significant(rng):
    result = linear_regression(np.arange(200, dtype=float), rng.normal(0, 1, 200))

    assert result.p_value > 0.01


def test_linear_regression_p_value_uses_student_t(rng):
    x = np.arange(12, dtype=float)
    y = 0.3 * x + rng.normal(0, 2, 12)

    result = linear_regression(x, y)
    reference = stats.linregress(x, y)

    assert result.slope == pytest.approx(reference.slope)
    assert result.p_value == pytest.approx(reference.pvalue)


def test_normal_helpers():
    assert normal_cdf(0.0) == pytest.approx(0.5)
    assert z_multiplier(0.95) == pytest.approx(1.96, abs=1e-3)
    assert z_multiplier(0.99) == pytest.approx(2.576, abs=1e-3)
    with pytest.raises(InvalidInputError):
        z_multiplier(1.0)


def test_goodness_of_fit_bounds():
    assert goodness_of_fit([0.0, 0.0], [1.0, 2.0]) == 1.0
    assert goodness_of_fit([10.0, 10.0], [1.0, 1.0]) == 0.0
    assert goodness_of_fit([0.0], [0.0]) == 1.0
    assert goodness_of_fit([1.0], [2.0]) == pytest.approx(0.75)


def test_residual_standard_error():
    assert residual_standard_error([]) == 0.0
    assert residual_standard_error([3.0, -3.0]) == pytest.approx(3.0)
