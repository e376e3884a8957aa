"""
Exception hierarchy for pypolyfit.

All exceptions inherit from PyPolyfitError so callers can catch any
library-specific failure with a single except clause.

Design principles:
    - Exceptions carry diagnostic information as attributes
    - Error messages are actionable with actual vs expected values
    - Never catch and re-raise with less information
"""


class PyPolyfitError(Exception):
    """Base exception for all pypolyfit errors."""
    pass


class ValidationError(PyPolyfitError):
    """
    Input validation failed.

    Raised when user-provided inputs are degenerate or malformed:
    empty point sets, negative degrees, non-numeric or non-finite data.
    """
    pass


class DimensionError(ValidationError):
    """
    Array dimensions are incorrect or incompatible.

    Raised when operand shapes do not agree, e.g. multiplying an m x n
    matrix by a k x p matrix with k != n, or solving with a non-square
    coefficient matrix.
    """
    pass


class NumericalError(PyPolyfitError):
    """
    Numerical computation failed.

    Base class for errors arising from numerical issues during computation.
    """
    pass


class SingularMatrixError(NumericalError):
    """
    Matrix is singular or numerically indistinguishable from singular.

    Raised by Gauss-Jordan elimination when no row offers a pivot whose
    magnitude reaches the pivot threshold.

    Attributes:
        matrix_name: Name/description of the problematic matrix
        pivot_index: Column in which elimination broke down
        pivot_value: Largest absolute pivot candidate found in that column
        threshold: Pivot threshold in force
        condition_number: Estimated condition number, if available
    """

    def __init__(
        self,
        message: str,
        matrix_name: str | None = None,
        pivot_index: int | None = None,
        pivot_value: float | None = None,
        threshold: float | None = None,
        condition_number: float | None = None,
    ):
        super().__init__(message)
        self.matrix_name = matrix_name
        self.pivot_index = pivot_index
        self.pivot_value = pivot_value
        self.threshold = threshold
        self.condition_number = condition_number
