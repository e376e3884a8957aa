"""
CPU reference backend for polynomial regression.

Forms the normal equations (X'X) beta = X'y with the dense multiply and
transpose kernels and solves them by Gauss-Jordan elimination with partial
pivoting, all in float64 NumPy.
"""

from typing import Any
import numpy as np

from pypolyfit.core.result import Result
from pypolyfit.core.compute.timing import Timer
from pypolyfit.core.compute.tolerances import PIVOT_THRESHOLD, ILL_CONDITIONED_THRESHOLD
from pypolyfit.core.compute.linalg.gauss import gauss_jordan_cpu
from pypolyfit.regression.design import PolynomialDesign
from pypolyfit.regression.solution import PolynomialParams


def condition_warning(cond: float) -> str | None:
    """Warning text for an ill-conditioned X'X, or None."""
    if cond <= ILL_CONDITIONED_THRESHOLD:
        return None
    return (
        f"X'X is ill-conditioned (condition number {cond:.2e} > "
        f"{ILL_CONDITIONED_THRESHOLD:.0e}); coefficients may be inaccurate. "
        f"Lower the degree or center and scale x."
    )


class CPUNormalEquationsBackend:
    """
    CPU backend solving the normal equations.

    This is the reference implementation; the GPU backend is validated
    against it.
    """

    def __init__(self, pivot_threshold: float = PIVOT_THRESHOLD):
        self.pivot_threshold = pivot_threshold

    @property
    def name(self) -> str:
        return 'cpu_normal_equations'

    def solve(self, design: PolynomialDesign) -> Result[PolynomialParams]:
        """
        Fit the polynomial by solving the normal equations.

        Algorithm:
            1. Form X'X and X'y
            2. Solve (X'X) beta = X'y by Gauss-Jordan elimination
            3. Compute residuals, fitted values and diagnostics

        Raises:
            SingularMatrixError: If X'X is singular within pivot_threshold
                (e.g. fewer distinct x values than degree + 1)
        """
        timer = Timer()
        timer.start()

        X = design.X
        y = design.y
        n, p = design.n, design.p

        with timer.section('normal_equations'):
            XtX = design.XtX()
            Xty = design.Xty()

        with timer.section('elimination'):
            gj = gauss_jordan_cpu(
                XtX, Xty, pivot_threshold=self.pivot_threshold, matrix_name="X'X"
            )
            coefficients = gj.x

        with timer.section('residuals'):
            fitted_values = X @ coefficients
            residuals = y - fitted_values

        with timer.section('statistics'):
            rss = float(residuals @ residuals)
            tss = float(np.sum((y - np.mean(y)) ** 2))
            cond = float(np.linalg.cond(XtX))

        timer.stop()

        params = PolynomialParams(
            coefficients=coefficients,
            residuals=residuals,
            fitted_values=fitted_values,
            rss=rss,
            tss=tss,
            degree=design.degree,
            df_residual=n - p,
        )

        info: dict[str, Any] = {
            'method': 'normal_equations',
            'solver': 'gauss_jordan',
            'pivot_threshold': self.pivot_threshold,
            'min_pivot': gj.min_pivot,
            'permutation': gj.permutation,
            'condition_number': cond,
        }

        warning = condition_warning(cond)

        return Result(
            params=params,
            info=info,
            timing=timer.result(),
            backend_name=self.name,
            warnings=(warning,) if warning else (),
        )
