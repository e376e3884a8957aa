"""
Solver dispatch for polynomial regression.

This module provides the public entry points and backend selection:
    fit(points, degree) -> PolynomialSolution
    polynomial_regression(points, degree) -> coefficient vector
"""

from typing import Any, Literal
import warnings

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pypolyfit.core.exceptions import ValidationError
from pypolyfit.core.compute.device import select_device
from pypolyfit.core.compute.tolerances import PIVOT_THRESHOLD
from pypolyfit.core.validation import check_positive_scalar
from pypolyfit.regression.design import PolynomialDesign
from pypolyfit.regression.solution import PolynomialSolution
from pypolyfit.regression.backends.cpu import CPUNormalEquationsBackend


BackendChoice = Literal['auto', 'cpu', 'gpu']


def fit(
    points: ArrayLike | PolynomialDesign,
    degree: int | None = None,
    *,
    pivot_threshold: float = PIVOT_THRESHOLD,
    backend: BackendChoice = 'cpu',
) -> PolynomialSolution:
    """
    Fit a least-squares polynomial.

    Minimizes sum_i (y_i - sum_d beta_d x_i**d)^2 by solving the normal
    equations (X'X) beta = X'y, where X is the Vandermonde design matrix.

    The normal equations square the condition number of X. For large
    degrees or x values spanning a wide range the fit degrades; such fits
    carry a RuntimeWarning (also listed in ``solution.warnings``).

    Args:
        points: Array-like of (x, y) pairs, shape (n, 2), or a prebuilt
            PolynomialDesign
        degree: Polynomial degree >= 0. Required with raw points; must
            match design.degree (or be None) with a design.
        pivot_threshold: Smallest absolute pivot accepted by the elimination
        backend: 'cpu' (NumPy, float64), 'gpu' (PyTorch on CUDA/MPS), or
            'auto' (CUDA when available, else CPU)

    Returns:
        PolynomialSolution with coefficients, diagnostics and summary

    Raises:
        ValidationError: If points is empty, degree is invalid, or the
            backend name is unknown
        DimensionError: If points is not shaped (n, 2)
        SingularMatrixError: If X'X is singular, e.g. fewer distinct x
            values than degree + 1
        NumericalError: If elimination overflows to non-finite values

    Example:
        >>> result = fit([(0, 1), (1, 3), (2, 7)], degree=2)
        >>> result.coefficients
        array([1., 1., 1.])
    """
    solution = _fit(points, degree, pivot_threshold, backend)
    _emit_warnings(solution)
    return solution


def _fit(
    points: ArrayLike | PolynomialDesign,
    degree: int | None,
    pivot_threshold: float,
    backend: BackendChoice,
) -> PolynomialSolution:
    threshold = check_positive_scalar(pivot_threshold, 'pivot_threshold')

    if isinstance(points, PolynomialDesign):
        if degree is not None and degree != points.degree:
            raise ValidationError(
                f"degree={degree} conflicts with design built for degree={points.degree}"
            )
        design = points
    else:
        if degree is None:
            raise ValidationError("degree required when fitting raw points")
        design = PolynomialDesign.from_points(points, degree)

    backend_impl = _get_backend(backend, threshold)
    result = backend_impl.solve(design)
    return PolynomialSolution(_result=result, _design=design)


def _emit_warnings(solution: PolynomialSolution) -> None:
    """Re-emit backend diagnostics at the caller of the public entry point."""
    for message in solution.warnings:
        warnings.warn(message, RuntimeWarning, stacklevel=3)


def polynomial_regression(
    points: ArrayLike,
    degree: int,
    *,
    pivot_threshold: float = PIVOT_THRESHOLD,
    backend: BackendChoice = 'cpu',
) -> NDArray[np.floating[Any]]:
    """
    Least-squares polynomial coefficients for a set of (x, y) points.

    Returns:
        Coefficient vector of length degree + 1; index d is the
        coefficient of x**d

    Raises:
        Same as fit()

    Example:
        >>> polynomial_regression([(0, 7), (1, 7), (2, 7)], degree=0)
        array([7.])
    """
    solution = _fit(points, degree, pivot_threshold, backend)
    _emit_warnings(solution)
    return solution.coefficients


def _get_backend(choice: BackendChoice, pivot_threshold: float):
    """
    Select and instantiate the appropriate backend.

    'auto' only moves to the GPU when the device runs float64; MPS is
    used only on explicit request.

    Raises:
        ValidationError: If unknown backend specified
        RuntimeError: If GPU requested but unavailable
    """
    if choice == 'cpu':
        return CPUNormalEquationsBackend(pivot_threshold=pivot_threshold)

    if choice == 'auto':
        device = select_device('auto')
        if device.is_gpu and device.supports_fp64:
            from pypolyfit.regression.backends.gpu import GPUNormalEquationsBackend
            return GPUNormalEquationsBackend(
                device=device.torch_device, pivot_threshold=pivot_threshold
            )
        return CPUNormalEquationsBackend(pivot_threshold=pivot_threshold)

    if choice == 'gpu':
        device = select_device('gpu')
        from pypolyfit.regression.backends.gpu import GPUNormalEquationsBackend
        return GPUNormalEquationsBackend(
            device=device.torch_device,
            use_fp64=device.supports_fp64,
            pivot_threshold=pivot_threshold,
        )

    raise ValidationError(f"Unknown backend: {choice!r}. Use 'auto', 'cpu' or 'gpu'.")
