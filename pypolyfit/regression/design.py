"""
Polynomial regression design.

Turns (x, y) observations and a degree into the Vandermonde design matrix
X with rows [1, x_i, x_i**2, ..., x_i**degree] and the response vector y.
Validation happens once, here; backends trust a built design.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
import numpy as np
from numpy.typing import ArrayLike, NDArray

from pypolyfit.core.exceptions import ValidationError, DimensionError
from pypolyfit.core.compute.linalg.dense import multiply, transpose
from pypolyfit.core.validation import (
    check_array,
    check_finite,
    check_1d,
    check_consistent_length,
    check_degree,
)


@dataclass(frozen=True)
class PolynomialDesign:
    """
    Polynomial regression design specification.

    Immutable after construction.

    Construction:
        PolynomialDesign.from_points([(0, 1), (1, 2), (2, 5)], degree=2)
        PolynomialDesign.from_arrays(x, y, degree=2)
    """
    _X: NDArray[np.floating[Any]]
    _x: NDArray[np.floating[Any]]
    _y: NDArray[np.floating[Any]]
    _n: int
    _degree: int

    @classmethod
    def from_points(cls, points: ArrayLike, degree: int) -> PolynomialDesign:
        """
        Build a design from a sequence of (x, y) pairs.

        Args:
            points: Array-like of shape (n, 2), n >= 1
            degree: Polynomial degree, >= 0

        Raises:
            ValidationError: If points is empty, degree is invalid, or
                x**degree overflows float64
            DimensionError: If points is not of shape (n, 2)
        """
        P = check_array(points, 'points')
        if P.size == 0:
            raise ValidationError("points: at least one (x, y) point is required")
        if P.ndim != 2 or P.shape[1] != 2:
            raise DimensionError(
                f"points: expected shape (n, 2) of (x, y) pairs, got {P.shape}"
            )
        return cls._build(P[:, 0].copy(), P[:, 1].copy(), degree)

    @classmethod
    def from_arrays(cls, x: ArrayLike, y: ArrayLike, degree: int) -> PolynomialDesign:
        """Build a design from separate x and y vectors."""
        x_arr = check_array(x, 'x')
        y_arr = check_array(y, 'y')
        if y_arr.ndim == 2 and y_arr.shape[1] == 1:
            y_arr = y_arr.ravel()
        check_1d(x_arr, 'x')
        check_1d(y_arr, 'y')
        if x_arr.size == 0:
            raise ValidationError("x: at least one observation is required")
        return cls._build(x_arr, y_arr, degree)

    @classmethod
    def _build(cls, x: NDArray, y: NDArray, degree: int) -> PolynomialDesign:
        """Internal builder with validation."""
        d = check_degree(degree)
        check_finite(x, 'x')
        check_finite(y, 'y')
        check_consistent_length(x, y, names=('x', 'y'))

        with np.errstate(over='ignore'):
            X = vandermonde(x, d)
        if not np.all(np.isfinite(X)):
            raise ValidationError(
                f"x: x**{d} overflows float64 (max |x| = {np.max(np.abs(x)):.3e}); "
                f"center and scale x or lower the degree"
            )
        return cls(_X=X, _x=x, _y=y, _n=x.shape[0], _degree=d)

    # === Properties ===

    @property
    def X(self) -> NDArray[np.floating[Any]]:
        """Design matrix (n x (degree + 1))."""
        return self._X

    @property
    def x(self) -> NDArray[np.floating[Any]]:
        """Predictor values (n,)."""
        return self._x

    @property
    def y(self) -> NDArray[np.floating[Any]]:
        """Response vector (n,)."""
        return self._y

    @property
    def n(self) -> int:
        """Number of observations."""
        return self._n

    @property
    def degree(self) -> int:
        return self._degree

    @property
    def p(self) -> int:
        """Number of coefficients (degree + 1)."""
        return self._degree + 1

    def XtX(self) -> NDArray[np.floating[Any]]:
        """Normal-equations matrix X'X, (degree + 1) x (degree + 1)."""
        return multiply(transpose(self._X), self._X)

    def Xty(self) -> NDArray[np.floating[Any]]:
        """Normal-equations right-hand side X'y, length degree + 1."""
        return multiply(transpose(self._X), self._y.reshape(-1, 1)).ravel()


def vandermonde(x: NDArray[np.floating[Any]], degree: int) -> NDArray[np.floating[Any]]:
    """
    Vandermonde matrix with increasing powers.

    Row i is [x_i**0, x_i**1, ..., x_i**degree]; 0**0 is taken as 1.
    """
    return np.vander(x, degree + 1, increasing=True).astype(np.float64, copy=False)
