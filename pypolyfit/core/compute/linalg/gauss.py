"""
Gauss-Jordan elimination with partial pivoting.

Solves square dense systems Ax = b by reducing the augmented matrix [A | b]
to [I | x]. CPU (NumPy) and GPU (PyTorch) kernels run the same algorithm:

    for each column i:
        1. swap in the row (among i..n-1) with the largest |M[k, i]|
        2. stop with SingularMatrixError if that magnitude < pivot_threshold
        3. scale the pivot row so M[i, i] == 1
        4. subtract multiples of the pivot row from every other row
        5. stop with NumericalError if the row operations overflowed

The kernels trust their inputs; solve() is the validated entry point.
"""

from dataclasses import dataclass
from typing import Any, TYPE_CHECKING
import numpy as np
from numpy.typing import ArrayLike, NDArray

from pypolyfit.core.exceptions import NumericalError, SingularMatrixError
from pypolyfit.core.compute.tolerances import PIVOT_THRESHOLD
from pypolyfit.core.validation import (
    check_array,
    check_finite,
    check_1d,
    check_2d,
    check_nonempty,
    check_square,
    check_consistent_length,
    check_positive_scalar,
)

if TYPE_CHECKING:
    import torch


@dataclass(frozen=True)
class GaussJordanResult:
    """
    Result of Gauss-Jordan elimination.

    Attributes:
        x: Solution vector (n,)
        permutation: Row order after pivoting; permutation[i] is the
            original row index that ended up in row i
        pivots: Absolute pivot magnitudes, one per column, before scaling
    """
    x: NDArray[np.floating[Any]]
    permutation: NDArray[np.intp]
    pivots: NDArray[np.floating[Any]]

    @property
    def min_pivot(self) -> float:
        """Smallest pivot magnitude used; a cheap proximity-to-singular gauge."""
        return float(np.min(self.pivots))


def _singular(column: int, magnitude: float, threshold: float, matrix_name: str) -> SingularMatrixError:
    return SingularMatrixError(
        f"{matrix_name} is singular or nearly singular: largest pivot candidate "
        f"in column {column} has magnitude {magnitude:.3e}, below threshold "
        f"{threshold:.1e}",
        matrix_name=matrix_name,
        pivot_index=column,
        pivot_value=magnitude,
        threshold=threshold,
    )


def _overflow(column: int, matrix_name: str) -> NumericalError:
    return NumericalError(
        f"Elimination on {matrix_name} overflowed at column {column}: row "
        f"operations produced non-finite values. Rescale the system or raise "
        f"pivot_threshold."
    )


def gauss_jordan_cpu(
    A: NDArray[np.floating[Any]],
    b: NDArray[np.floating[Any]],
    pivot_threshold: float = PIVOT_THRESHOLD,
    matrix_name: str = 'A',
) -> GaussJordanResult:
    """
    Solve Ax = b by Gauss-Jordan elimination (NumPy).

    Row operations are vectorized per pivot: row k is updated as
    M[k, i:] -= M[k, i] * M[i, i:], the same arithmetic a row-by-row loop
    performs. Ties in pivot magnitude go to the lowest row index.

    Args:
        A: Square matrix (n x n), validated and finite
        b: Right-hand side (n,)
        pivot_threshold: Smallest acceptable absolute pivot
        matrix_name: Name used in error messages

    Returns:
        GaussJordanResult with solution and pivoting diagnostics

    Raises:
        SingularMatrixError: If a column has no pivot >= pivot_threshold
        NumericalError: If the row operations overflow to non-finite values
    """
    n = A.shape[0]

    # Working copy; caller's arrays are never touched
    M = np.empty((n, n + 1), dtype=np.float64)
    M[:, :n] = A
    M[:, n] = b

    permutation = np.arange(n)
    pivots = np.empty(n, dtype=np.float64)

    for i in range(n):
        p = i + int(np.argmax(np.abs(M[i:, i])))
        if p != i:
            M[[i, p]] = M[[p, i]]
            permutation[[i, p]] = permutation[[p, i]]

        pivot = M[i, i]
        if abs(pivot) < pivot_threshold:
            raise _singular(i, float(abs(pivot)), pivot_threshold, matrix_name)
        pivots[i] = abs(pivot)

        with np.errstate(over='ignore', invalid='ignore'):
            M[i, i:] /= pivot

            factors = M[:, i].copy()
            factors[i] = 0.0
            M[:, i:] -= np.outer(factors, M[i, i:])

        if not np.all(np.isfinite(M[:, i:])):
            raise _overflow(i, matrix_name)

    return GaussJordanResult(x=M[:, n].copy(), permutation=permutation, pivots=pivots)


def gauss_jordan_gpu(
    A: 'torch.Tensor',
    b: 'torch.Tensor',
    pivot_threshold: float = PIVOT_THRESHOLD,
    matrix_name: str = 'A',
) -> GaussJordanResult:
    """
    Solve Ax = b by Gauss-Jordan elimination (PyTorch).

    Works on any device and floating dtype; A and b must share both.
    Results are moved back to the CPU as float64 NumPy arrays.

    Args:
        A: Square tensor (n x n)
        b: Right-hand side tensor (n,)
        pivot_threshold: Smallest acceptable absolute pivot
        matrix_name: Name used in error messages

    Raises:
        SingularMatrixError: If a column has no pivot >= pivot_threshold
        NumericalError: If the row operations overflow to non-finite values
    """
    import torch

    n = A.shape[0]
    M = torch.cat([A, b.reshape(-1, 1)], dim=1).clone()
    permutation = torch.arange(n, device=A.device)
    pivots = torch.empty(n, dtype=A.dtype, device=A.device)

    for i in range(n):
        p = i + int(torch.argmax(torch.abs(M[i:, i])).item())
        if p != i:
            M[[i, p]] = M[[p, i]]
            permutation[[i, p]] = permutation[[p, i]]

        pivot = float(M[i, i].item())
        if abs(pivot) < pivot_threshold:
            raise _singular(i, abs(pivot), pivot_threshold, matrix_name)
        pivots[i] = abs(pivot)

        M[i, i:] = M[i, i:] / pivot

        factors = M[:, i].clone()
        factors[i] = 0.0
        M[:, i:] -= torch.outer(factors, M[i, i:])

        if not bool(torch.isfinite(M[:, i:]).all()):
            raise _overflow(i, matrix_name)

    return GaussJordanResult(
        x=M[:, n].cpu().numpy().astype(np.float64),
        permutation=permutation.cpu().numpy().astype(np.intp),
        pivots=pivots.cpu().numpy().astype(np.float64),
    )


def solve(
    A: ArrayLike,
    b: ArrayLike,
    *,
    pivot_threshold: float = PIVOT_THRESHOLD,
) -> NDArray[np.floating[Any]]:
    """
    Solve the square linear system Ax = b.

    Uses Gauss-Jordan elimination with partial pivoting on the augmented
    matrix [A | b]. Cost is O(n^3).

    Args:
        A: Coefficient matrix (n x n)
        b: Right-hand side, shape (n,) or (n, 1)
        pivot_threshold: Smallest absolute pivot accepted before the
            system is declared singular. Tune for the scale of A.

    Returns:
        Solution vector x, shape (n,)

    Raises:
        DimensionError: If A is not square, is empty, or b's length differs
        ValidationError: If inputs are non-numeric or non-finite, or
            pivot_threshold is not a positive finite number
        SingularMatrixError: If A is singular within pivot_threshold
        NumericalError: If elimination overflows to non-finite values

    Example:
        >>> solve([[2.0, 1.0], [1.0, 3.0]], [3.0, 5.0])
        array([0.8, 1.4])
    """
    threshold = check_positive_scalar(pivot_threshold, 'pivot_threshold')

    A_arr = check_array(A, 'A')
    check_2d(A_arr, 'A')
    check_nonempty(A_arr, 'A')
    check_square(A_arr, 'A')
    check_finite(A_arr, 'A')

    b_arr = check_array(b, 'b')
    if b_arr.ndim == 2 and b_arr.shape[1] == 1:
        b_arr = b_arr.ravel()
    check_1d(b_arr, 'b')
    check_finite(b_arr, 'b')
    check_consistent_length(A_arr, b_arr, names=('A', 'b'))

    return gauss_jordan_cpu(A_arr, b_arr, pivot_threshold=threshold).x
