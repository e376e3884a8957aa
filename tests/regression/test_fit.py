"""
Tests for polynomial regression fit() and polynomial_regression().

Tests the complete pipeline: design construction, backend selection,
and solution properties.
"""

import warnings

import numpy as np
import pytest
from numpy.testing import assert_allclose
from scipy import linalg as sp_linalg

from pypolyfit import polynomial_regression
from pypolyfit.core.exceptions import DimensionError, SingularMatrixError, ValidationError
from pypolyfit.core.compute.device import get_cpu_info
from pypolyfit.regression import fit, PolynomialDesign, PolynomialSolution
from pypolyfit.regression import solvers
from pypolyfit.regression.backends import CPUNormalEquationsBackend


class TestPolynomialRegression:
    """Coefficient vector entry point."""

    def test_exact_quadratic(self, quadratic_points):
        coef = polynomial_regression(quadratic_points, 2)
        assert coef.shape == (3,)
        assert_allclose(coef, [1.0, 1.0, 1.0], atol=1e-6)

    def test_points_on_x_squared_plus_one(self):
        coef = polynomial_regression([(0, 1), (1, 2), (2, 5)], 2)
        assert_allclose(coef, [1.0, 0.0, 1.0], atol=1e-6)

    def test_degree_zero_constant(self):
        coef = polynomial_regression([(0, 7), (1, 7), (5, 7), (-2, 7)], 0)
        assert_allclose(coef, [7.0])

    def test_degree_zero_is_mean(self):
        coef = polynomial_regression([(0, 1), (1, 2), (2, 6)], 0)
        assert_allclose(coef, [3.0])

    def test_single_point_degree_zero(self):
        assert_allclose(polynomial_regression([(4.0, -2.5)], 0), [-2.5])

    def test_straight_line_least_squares(self):
        # Best fit through (0,0), (1,1), (2,1): slope 0.5, intercept 1/6
        coef = polynomial_regression([(0, 0), (1, 1), (2, 1)], 1)
        assert_allclose(coef, [1.0 / 6.0, 0.5], rtol=1e-10)

    def test_matches_numpy_polyfit(self, noisy_cubic_data):
        x, y, _ = noisy_cubic_data
        coef = polynomial_regression(np.column_stack([x, y]), 3)
        expected = np.polyfit(x, y, 3)[::-1]
        assert_allclose(coef, expected, rtol=1e-8, atol=1e-10)

    def test_matches_scipy_lstsq(self, noisy_cubic_data):
        x, y, _ = noisy_cubic_data
        coef = polynomial_regression(np.column_stack([x, y]), 2)
        expected, *_ = sp_linalg.lstsq(np.vander(x, 3, increasing=True), y)
        assert_allclose(coef, expected, rtol=1e-8, atol=1e-10)

    def test_recovers_truth_under_noise(self, noisy_cubic_data):
        x, y, beta_true = noisy_cubic_data
        coef = polynomial_regression(np.column_stack([x, y]), 3)
        assert_allclose(coef, beta_true, atol=0.1)


class TestInvalidInput:

    def test_empty_points(self):
        with pytest.raises(ValidationError, match="at least one"):
            polynomial_regression([], 1)

    def test_negative_degree(self):
        with pytest.raises(ValidationError, match=">= 0"):
            polynomial_regression([(0, 1), (1, 2)], -1)

    @pytest.mark.parametrize("degree", [1.5, 2.0, True])
    def test_non_integer_degree(self, degree):
        with pytest.raises(ValidationError):
            polynomial_regression([(0, 1), (1, 2), (2, 3)], degree)

    def test_malformed_points(self):
        with pytest.raises(DimensionError):
            polynomial_regression([(0, 1, 2), (1, 2, 3)], 1)

    def test_unknown_backend(self):
        with pytest.raises(ValidationError, match="Unknown backend"):
            polynomial_regression([(0, 1), (1, 2)], 1, backend='tpu')

    def test_bad_pivot_threshold(self):
        with pytest.raises(ValidationError, match="pivot_threshold"):
            polynomial_regression([(0, 1), (1, 2)], 1, pivot_threshold=-1.0)

    def test_vandermonde_overflow_names_x(self):
        with pytest.raises(ValidationError, match=r"x: x\*\*2 overflows") as exc_info:
            polynomial_regression([(1e200, 1.0), (2e200, 2.0)], 2)
        assert "A:" not in str(exc_info.value)


class TestSingularFits:

    def test_too_few_distinct_x(self):
        with pytest.raises(SingularMatrixError) as exc_info:
            polynomial_regression([(1, 1), (1, 2), (2, 3)], 2)
        assert exc_info.value.matrix_name == "X'X"
        assert exc_info.value.pivot_index == 2

    def test_single_point_line(self):
        with pytest.raises(SingularMatrixError):
            polynomial_regression([(3.0, 1.0)], 1)

    def test_threshold_forwarded(self, quadratic_points):
        with pytest.raises(SingularMatrixError):
            polynomial_regression(quadratic_points, 2, pivot_threshold=1e6)


class TestFitSolution:
    """Derived properties of PolynomialSolution."""

    def test_returns_solution(self, noisy_cubic_data):
        x, y, _ = noisy_cubic_data
        result = fit(np.column_stack([x, y]), 3)
        assert isinstance(result, PolynomialSolution)
        assert result.degree == 3
        assert result.df_residual == len(x) - 4
        assert result.backend_name == 'cpu_normal_equations'

    def test_fitted_plus_residuals_equals_y(self, noisy_cubic_data):
        x, y, _ = noisy_cubic_data
        result = fit(np.column_stack([x, y]), 3)
        assert_allclose(result.fitted_values + result.residuals, y, atol=1e-12)

    def test_rss_matches_residuals(self, noisy_cubic_data):
        x, y, _ = noisy_cubic_data
        result = fit(np.column_stack([x, y]), 3)
        assert result.rss == pytest.approx(float(result.residuals @ result.residuals))

    def test_r_squared(self, noisy_cubic_data):
        x, y, _ = noisy_cubic_data
        result = fit(np.column_stack([x, y]), 3)
        assert result.r_squared == pytest.approx(1.0 - result.rss / result.tss)
        assert 0.99 < result.r_squared <= 1.0
        assert result.adjusted_r_squared <= result.r_squared

    def test_exact_fit_r_squared_one(self, quadratic_points):
        result = fit(quadratic_points, 2)
        assert result.r_squared == pytest.approx(1.0)
        assert_allclose(result.residuals, 0.0, atol=1e-9)

    def test_standard_errors_match_formula(self, noisy_cubic_data):
        x, y, _ = noisy_cubic_data
        result = fit(np.column_stack([x, y]), 3)
        X = np.vander(x, 4, increasing=True)
        sigma_sq = result.rss / result.df_residual
        expected = np.sqrt(sigma_sq * np.diag(np.linalg.inv(X.T @ X)))
        assert_allclose(result.standard_errors, expected, rtol=1e-8)

    def test_inference_ranges(self, noisy_cubic_data):
        x, y, _ = noisy_cubic_data
        result = fit(np.column_stack([x, y]), 3)
        assert np.all(np.isfinite(result.t_statistics))
        assert np.all((result.p_values >= 0.0) & (result.p_values <= 1.0))
        # The x^2 term is large relative to the noise
        assert result.p_values[2] < 1e-10

    def test_no_residual_df_gives_nan_inference(self, quadratic_points):
        result = fit(quadratic_points, 2)
        assert result.df_residual == 0
        assert result.residual_std_error == 0.0
        assert np.all(np.isnan(result.standard_errors))
        assert np.all(np.isnan(result.p_values))

    def test_predict(self, quadratic_points):
        result = fit(quadratic_points, 2)
        assert_allclose(result.predict([3.0, -1.0]), [13.0, 1.0], atol=1e-8)
        assert_allclose(result.predict(0.0), 1.0, atol=1e-8)

    def test_info_and_timing(self, noisy_cubic_data):
        x, y, _ = noisy_cubic_data
        result = fit(np.column_stack([x, y]), 3)
        assert result.info['method'] == 'normal_equations'
        assert result.info['min_pivot'] > 0.0
        assert result.info['condition_number'] >= 1.0
        assert sorted(result.info['permutation']) == [0, 1, 2, 3]
        assert 'elimination' in result.timing
        assert 'normal_equations' in result.timing

    def test_summary(self, noisy_cubic_data):
        x, y, _ = noisy_cubic_data
        s = fit(np.column_stack([x, y]), 3).summary()
        assert "R-squared" in s
        assert "Pr(>|t|)" in s
        assert "x^3" in s
        assert "Backend: cpu_normal_equations" in s

    def test_repr(self, quadratic_points):
        assert "degree=2" in repr(fit(quadratic_points, 2))


class TestFitDesign:

    def test_fit_from_design(self, quadratic_points):
        design = PolynomialDesign.from_points(quadratic_points, degree=2)
        assert_allclose(fit(design).coefficients, [1.0, 1.0, 1.0], atol=1e-6)

    def test_design_degree_conflict(self, quadratic_points):
        design = PolynomialDesign.from_points(quadratic_points, degree=2)
        with pytest.raises(ValidationError, match="conflicts"):
            fit(design, 1)

    def test_raw_points_require_degree(self, quadratic_points):
        with pytest.raises(ValidationError, match="degree required"):
            fit(quadratic_points)


class TestConditioningWarnings:

    def test_ill_conditioned_fit_warns(self):
        x = np.linspace(0.0, 1000.0, 20)
        points = np.column_stack([x, 1.0 + x])
        with pytest.warns(RuntimeWarning, match="ill-conditioned"):
            result = fit(points, 3)
        assert result.info['condition_number'] > 1e12
        assert any("ill-conditioned" in w for w in result.warnings)

    @pytest.mark.parametrize("entry", [fit, polynomial_regression])
    def test_warning_points_at_caller(self, entry):
        x = np.linspace(0.0, 1000.0, 20)
        with pytest.warns(RuntimeWarning, match="ill-conditioned") as record:
            entry(np.column_stack([x, 1.0 + x]), 3)
        ill = [w for w in record if "ill-conditioned" in str(w.message)]
        assert ill[0].filename.endswith("test_fit.py")

    def test_well_conditioned_fit_is_silent(self, noisy_cubic_data):
        x, y, _ = noisy_cubic_data
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            result = fit(np.column_stack([x, y]), 3)
        assert result.warnings == ()


class TestBackendSelection:

    def test_cpu_backend(self):
        backend = solvers._get_backend('cpu', 1e-10)
        assert isinstance(backend, CPUNormalEquationsBackend)
        assert backend.pivot_threshold == 1e-10

    def test_auto_without_gpu_uses_cpu(self, monkeypatch):
        monkeypatch.setattr(solvers, 'select_device', lambda prefer: get_cpu_info())
        assert isinstance(solvers._get_backend('auto', 1e-10), CPUNormalEquationsBackend)

    def test_gpu_without_gpu_raises(self, monkeypatch):
        def no_gpu(prefer):
            raise RuntimeError("GPU requested but no GPU available.")
        monkeypatch.setattr(solvers, 'select_device', no_gpu)
        with pytest.raises(RuntimeError, match="no GPU"):
            fit([(0, 1), (1, 2)], 1, backend='gpu')
