"""
Regression backends.

Available backends:
    CPUNormalEquationsBackend: NumPy reference implementation
    GPUNormalEquationsBackend: PyTorch implementation (imported on demand)
"""

from pypolyfit.regression.backends.cpu import CPUNormalEquationsBackend

__all__ = [
    "CPUNormalEquationsBackend",
]
