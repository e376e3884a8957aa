"""
Dense matrix product and transpose.

Both functions validate their operands at entry and always return newly
allocated arrays; inputs are never modified.
"""

from typing import Any
import numpy as np
from numpy.typing import ArrayLike, NDArray

from pypolyfit.core.validation import (
    check_array,
    check_finite,
    check_2d,
    check_nonempty,
    check_matmul_compatible,
)


def _as_matrix(array: ArrayLike, name: str) -> NDArray[np.floating[Any]]:
    M = check_array(array, name)
    check_2d(M, name)
    check_nonempty(M, name)
    check_finite(M, name)
    return M


def multiply(A: ArrayLike, B: ArrayLike) -> NDArray[np.floating[Any]]:
    """
    Matrix product C = AB.

    C[i, j] = sum_k A[i, k] * B[k, j]

    The product is computed by NumPy's ``@`` operator (BLAS GEMM). BLAS
    blocks and reorders the k-summation, so results can differ in the last
    bits from a naive i-j-k triple loop. Asymptotic accuracy is the same.

    Args:
        A: Left operand (m x n)
        B: Right operand (n x p)

    Returns:
        New m x p float64 array

    Raises:
        DimensionError: If A's column count differs from B's row count,
            or either operand is not a non-empty 2D matrix
        ValidationError: If either operand is non-numeric or non-finite
    """
    A_arr = _as_matrix(A, 'A')
    B_arr = _as_matrix(B, 'B')
    check_matmul_compatible(A_arr, B_arr, names=('A', 'B'))
    return A_arr @ B_arr


def transpose(A: ArrayLike) -> NDArray[np.floating[Any]]:
    """
    Matrix transpose.

    Returns an n x m array with At[j, i] = A[i, j]. The result owns its
    memory, so writing to it never touches A.

    Raises:
        DimensionError: If A is not a non-empty 2D matrix
        ValidationError: If A is non-numeric or non-finite
    """
    A_arr = _as_matrix(A, 'A')
    return A_arr.T.copy()
