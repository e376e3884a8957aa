"""
Input validation utilities for pypolyfit.

These validators follow the "fail fast, fail loud" principle. They raise
immediately with clear error messages rather than silently correcting
or making assumptions about user intent.

Design principles:
    - No silent type coercion (except np.asarray on array-likes)
    - Clear, actionable error messages with actual values
    - Each function validates ONE thing
    - Parameter names included in all error messages
"""

import math
from numbers import Integral
from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pypolyfit.core.exceptions import ValidationError, DimensionError


def check_array(
    array: ArrayLike,
    name: str,
) -> NDArray[np.floating[Any]]:
    """
    Validate and convert input to a float64 numpy array.

    Accepts any array-like. Rejects ragged nested sequences and inputs that
    result in object dtype (mixed types or non-numeric data).

    Args:
        array: Input to validate
        name: Parameter name for error messages

    Returns:
        numpy.ndarray with dtype float64

    Raises:
        ValidationError: If input cannot be converted to a numeric array
    """
    try:
        result = np.asarray(array)
    except (ValueError, TypeError) as e:
        # NumPy refuses ragged nested sequences outright
        raise ValidationError(f"{name}: cannot convert to array: {e}") from e

    if result.dtype == object:
        raise ValidationError(
            f"{name}: converted to object dtype, indicating ragged rows, "
            f"mixed types or non-numeric data"
        )

    if not np.issubdtype(result.dtype, np.number) or np.issubdtype(
        result.dtype, np.complexfloating
    ):
        raise ValidationError(
            f"{name}: non-numeric dtype {result.dtype}, expected real numeric data"
        )

    return result.astype(np.float64, copy=False)


def check_finite(array: NDArray[np.floating[Any]], name: str) -> None:
    """
    Verify array contains no NaN or Inf values.

    Raises:
        ValidationError: If array contains non-finite values
    """
    if not np.all(np.isfinite(array)):
        n_nan = int(np.sum(np.isnan(array)))
        n_inf = int(np.sum(np.isinf(array)))
        raise ValidationError(
            f"{name}: contains non-finite values ({n_nan} NaN, {n_inf} Inf)"
        )


def check_ndim(array: NDArray[np.floating[Any]], ndim: int, name: str) -> None:
    """
    Verify array has exactly the specified number of dimensions.

    Raises:
        DimensionError: If array has wrong number of dimensions
    """
    if array.ndim != ndim:
        raise DimensionError(
            f"{name}: expected {ndim}D array, got {array.ndim}D with shape {array.shape}"
        )


def check_1d(array: NDArray[np.floating[Any]], name: str) -> None:
    """Verify array is 1-dimensional."""
    check_ndim(array, 1, name)


def check_2d(array: NDArray[np.floating[Any]], name: str) -> None:
    """Verify array is 2-dimensional."""
    check_ndim(array, 2, name)


def check_nonempty(array: NDArray[np.floating[Any]], name: str) -> None:
    """
    Verify every axis of the array has at least one element.

    Raises:
        DimensionError: If any dimension has length zero
    """
    if array.size == 0:
        raise DimensionError(f"{name}: empty array with shape {array.shape}")


def check_square(array: NDArray[np.floating[Any]], name: str) -> None:
    """
    Verify a 2D array is square.

    Raises:
        DimensionError: If rows != columns
    """
    n_rows, n_cols = array.shape
    if n_rows != n_cols:
        raise DimensionError(
            f"{name}: expected square matrix, got shape {array.shape}"
        )


def check_matmul_compatible(
    A: NDArray[np.floating[Any]],
    B: NDArray[np.floating[Any]],
    names: tuple[str, str],
) -> None:
    """
    Verify A @ B is defined: A's column count equals B's row count.

    Raises:
        DimensionError: If the inner dimensions disagree
    """
    if A.shape[1] != B.shape[0]:
        raise DimensionError(
            f"Cannot multiply {names[0]} with shape {A.shape} by {names[1]} "
            f"with shape {B.shape}: inner dimensions {A.shape[1]} != {B.shape[0]}"
        )


def check_consistent_length(
    *arrays: NDArray[np.floating[Any]],
    names: tuple[str, ...]
) -> None:
    """
    Verify all arrays have the same length (first dimension).

    Raises:
        ValueError: If number of names doesn't match number of arrays
        DimensionError: If arrays have inconsistent lengths
    """
    if len(arrays) != len(names):
        raise ValueError(
            f"Number of arrays ({len(arrays)}) must match number of names ({len(names)})"
        )

    if len(arrays) < 2:
        return

    lengths = [arr.shape[0] for arr in arrays]
    if len(set(lengths)) > 1:
        details = ", ".join(f"{name}={length}" for name, length in zip(names, lengths))
        raise DimensionError(f"Inconsistent lengths: {details}")


def check_degree(degree: Any, name: str = 'degree') -> int:
    """
    Validate a polynomial degree.

    Accepts Python and NumPy integers; rejects bool, floats and negatives.

    Returns:
        The degree as a plain int

    Raises:
        ValidationError: If degree is not a non-negative integer
    """
    if isinstance(degree, bool) or not isinstance(degree, Integral):
        raise ValidationError(
            f"{name}: expected a non-negative integer, got {type(degree).__name__} {degree!r}"
        )
    if degree < 0:
        raise ValidationError(f"{name}: must be >= 0, got {degree}")
    return int(degree)


def check_positive_scalar(value: Any, name: str) -> float:
    """
    Validate a finite, strictly positive real scalar (tolerances, thresholds).

    Returns:
        The value as a float

    Raises:
        ValidationError: If value is not a finite positive number
    """
    if isinstance(value, bool):
        raise ValidationError(f"{name}: expected a positive number, got {value!r}")
    try:
        result = float(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"{name}: expected a positive number, got {value!r}") from e
    if not math.isfinite(result) or result <= 0.0:
        raise ValidationError(f"{name}: must be finite and > 0, got {result}")
    return result
