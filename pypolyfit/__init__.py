"""
pypolyfit: dense linear algebra and polynomial least-squares regression.

Provides matrix multiply and transpose, Gauss-Jordan elimination with
partial pivoting, and polynomial regression via the normal equations,
with an optional PyTorch GPU backend.

Submodules:
    core: Exceptions, validation, result envelope, compute kernels
    regression: Polynomial least-squares fitting
"""

__version__ = "0.1.0"

from pypolyfit.core.compute.linalg import multiply, transpose, solve
from pypolyfit.core.exceptions import (
    PyPolyfitError,
    ValidationError,
    DimensionError,
    NumericalError,
    SingularMatrixError,
)
from pypolyfit import regression
from pypolyfit.regression import fit, polynomial_regression

__all__ = [
    "__version__",
    "multiply",
    "transpose",
    "solve",
    "polynomial_regression",
    "fit",
    "regression",
    "PyPolyfitError",
    "ValidationError",
    "DimensionError",
    "NumericalError",
    "SingularMatrixError",
]
