"""
Core infrastructure for pypolyfit.

Key components:
    result: Generic Result[P] envelope
    exceptions: Exception hierarchy
    validation: Input validators
    compute: Device selection, timing, tolerances, linear algebra kernels
"""

from pypolyfit.core.result import Result
from pypolyfit.core.exceptions import (
    PyPolyfitError,
    ValidationError,
    DimensionError,
    NumericalError,
    SingularMatrixError,
)

__all__ = [
    "Result",
    "PyPolyfitError",
    "ValidationError",
    "DimensionError",
    "NumericalError",
    "SingularMatrixError",
]
