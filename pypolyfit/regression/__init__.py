"""
Polynomial least-squares regression.

Public API:
    fit(points, degree, ...) -> PolynomialSolution
    polynomial_regression(points, degree, ...) -> coefficients

fit() handles:
    - Input validation
    - Design construction
    - Backend selection
    - Result wrapping

Example:
    >>> from pypolyfit.regression import fit
    >>> result = fit([(0, 1), (1, 3), (2, 7)], degree=2)
    >>> print(result.coefficients)
    >>> print(result.summary())
"""

from pypolyfit.regression.design import PolynomialDesign
from pypolyfit.regression.solution import PolynomialSolution, PolynomialParams
from pypolyfit.regression.solvers import fit, polynomial_regression

__all__ = [
    "fit",
    "polynomial_regression",
    "PolynomialDesign",
    "PolynomialSolution",
    "PolynomialParams",
]
