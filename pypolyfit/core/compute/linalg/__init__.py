"""
Linear algebra kernels for pypolyfit.

Conventions:
    - CPU functions use NumPy
    - GPU functions use PyTorch and return NumPy arrays (data moved to CPU)
    - Kernels return structured result dataclasses
    - Errors are raised immediately with clear messages

Submodules:
    dense: Matrix product and transpose
    gauss: Gauss-Jordan elimination with partial pivoting
"""

from pypolyfit.core.compute.linalg.dense import multiply, transpose
from pypolyfit.core.compute.linalg.gauss import (
    GaussJordanResult,
    gauss_jordan_cpu,
    gauss_jordan_gpu,
    solve,
)

__all__ = [
    "multiply",
    "transpose",
    "GaussJordanResult",
    "gauss_jordan_cpu",
    "gauss_jordan_gpu",
    "solve",
]
