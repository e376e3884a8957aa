"""
Polynomial regression solution types.

Contains the parameter payload and user-facing solution wrapper.
"""

from dataclasses import dataclass
from typing import Any, TYPE_CHECKING
import numpy as np
from numpy.typing import ArrayLike, NDArray
from scipy import stats as sp_stats

from pypolyfit.core.result import Result
from pypolyfit.core.validation import check_array, check_finite

if TYPE_CHECKING:
    from pypolyfit.regression.design import PolynomialDesign


@dataclass(frozen=True)
class PolynomialParams:
    """
    Parameter payload for polynomial regression.

    This is the immutable data computed by backends.
    coefficients[d] is the coefficient of x**d.
    """
    coefficients: NDArray[np.floating[Any]]
    residuals: NDArray[np.floating[Any]]
    fitted_values: NDArray[np.floating[Any]]
    rss: float
    tss: float
    degree: int
    df_residual: int


def evaluate_polynomial(
    coefficients: NDArray[np.floating[Any]],
    x: NDArray[np.floating[Any]],
) -> NDArray[np.floating[Any]]:
    """Evaluate sum_d coefficients[d] * x**d by Horner's rule."""
    result = np.zeros_like(x, dtype=np.float64)
    for c in coefficients[::-1]:
        result = result * x + c
    return result


@dataclass
class PolynomialSolution:
    """
    User-facing polynomial regression results.

    Wraps the backend Result and provides accessors for goodness of fit,
    coefficient inference and prediction.

    The normal equations square the condition number of the design matrix.
    For high degrees or x values spanning a wide range the coefficients
    can lose many digits; check `warnings` and `info['condition_number']`.
    """
    _result: Result[PolynomialParams]
    _design: 'PolynomialDesign'

    # Cached computations
    _standard_errors: NDArray[np.floating[Any]] | None = None

    @property
    def coefficients(self) -> NDArray[np.floating[Any]]:
        return self._result.params.coefficients

    @property
    def residuals(self) -> NDArray[np.floating[Any]]:
        return self._result.params.residuals

    @property
    def fitted_values(self) -> NDArray[np.floating[Any]]:
        return self._result.params.fitted_values

    @property
    def rss(self) -> float:
        return self._result.params.rss

    @property
    def tss(self) -> float:
        return self._result.params.tss

    @property
    def degree(self) -> int:
        return self._result.params.degree

    @property
    def df_residual(self) -> int:
        return self._result.params.df_residual

    @property
    def r_squared(self) -> float:
        if self.tss == 0:
            return 1.0 if self.rss == 0 else 0.0
        return 1.0 - (self.rss / self.tss)

    @property
    def adjusted_r_squared(self) -> float:
        n = self._design.n
        p = self._design.p
        if n - p <= 0 or self.tss == 0:
            return self.r_squared
        return 1.0 - (1.0 - self.r_squared) * (n - 1) / (n - p)

    @property
    def residual_std_error(self) -> float:
        df = self.df_residual
        if df <= 0:
            return 0.0
        return float(np.sqrt(self.rss / df))

    @property
    def standard_errors(self) -> NDArray[np.floating[Any]]:
        """
        Standard errors of coefficients.

        SE(beta) = sqrt(diag(sigma^2 (X'X)^-1)). NaN when there are no
        residual degrees of freedom.
        """
        if self._standard_errors is not None:
            return self._standard_errors

        p = len(self.coefficients)
        if self.df_residual <= 0:
            self._standard_errors = np.full(p, np.nan, dtype=np.float64)
            return self._standard_errors

        sigma_sq = self.rss / self.df_residual
        try:
            XtX_inv = np.linalg.inv(self._design.XtX())
            self._standard_errors = np.sqrt(sigma_sq * np.diag(XtX_inv))
        except np.linalg.LinAlgError:
            self._standard_errors = np.full(p, np.nan, dtype=np.float64)
        return self._standard_errors

    @property
    def t_statistics(self) -> NDArray[np.floating[Any]]:
        se = self.standard_errors
        with np.errstate(divide='ignore', invalid='ignore'):
            t = self.coefficients / se
        return np.where(np.isfinite(t), t, np.nan)

    @property
    def p_values(self) -> NDArray[np.floating[Any]]:
        """Two-sided p-values from Student's t with df_residual DF."""
        t = self.t_statistics
        if self.df_residual <= 0:
            return np.full_like(t, np.nan)
        return 2.0 * sp_stats.t.sf(np.abs(t), self.df_residual)

    @property
    def info(self) -> dict[str, Any]:
        return self._result.info

    @property
    def timing(self) -> dict[str, float] | None:
        return self._result.timing

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    def predict(self, x: ArrayLike) -> NDArray[np.floating[Any]]:
        """
        Evaluate the fitted polynomial at x.

        Args:
            x: Scalar or array of predictor values

        Returns:
            Array of predictions with the same shape as x
        """
        x_arr = check_array(x, 'x')
        check_finite(x_arr, 'x')
        return evaluate_polynomial(self.coefficients, x_arr)

    def summary(self) -> str:
        """Generate R-style summary output."""
        lines = [
            "Polynomial Regression Results (normal equations)",
            "=" * 60,
            f"Observations: {self._design.n}",
            f"Degree: {self.degree}",
            f"R-squared: {self.r_squared:.6f}",
            f"Adj. R-squared: {self.adjusted_r_squared:.6f}",
            f"Residual Std. Error: {self.residual_std_error:.6f} on {self.df_residual} DF",
            "",
            "Coefficients:",
            "-" * 60,
            f"{'Term':<8} {'Estimate':>14} {'Std.Error':>12} {'t value':>10} {'Pr(>|t|)':>10}",
            "-" * 60,
        ]

        for d, (coef, se, t, pv) in enumerate(zip(
            self.coefficients, self.standard_errors, self.t_statistics, self.p_values
        )):
            term = "1" if d == 0 else ("x" if d == 1 else f"x^{d}")
            se_str = f"{se:12.6f}" if not np.isnan(se) else "          NA"
            t_str = f"{t:10.3f}" if not np.isnan(t) else "        NA"
            p_str = f"{pv:10.4g}" if not np.isnan(pv) else "        NA"
            lines.append(f"{term:<8} {coef:14.6f} {se_str} {t_str} {p_str}")

        lines.append("-" * 60)
        cond = self.info.get('condition_number')
        if cond is not None:
            lines.append(f"Condition number of X'X: {cond:.3e}")
        for w in self.warnings:
            lines.append(f"Warning: {w}")
        lines.append(f"Backend: {self.backend_name}")
        if self.timing:
            lines.append(f"Time: {self.timing.get('total_seconds', 0):.4f}s")

        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"PolynomialSolution(n={self._design.n}, degree={self.degree}, "
            f"r_squared={self.r_squared:.4f})"
        )
