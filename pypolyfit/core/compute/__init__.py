"""
Shared compute infrastructure for pypolyfit.

Hardware detection, timing, numeric thresholds and the linear algebra
kernels used by the regression backends.

Submodules:
    device: Hardware detection and device selection
    timing: Execution timing utilities
    tolerances: Pivot/conditioning thresholds and tolerance tiers
    linalg: Multiply, transpose, Gauss-Jordan solve
"""

from pypolyfit.core.compute.device import (
    DeviceInfo,
    detect_gpu,
    get_cpu_info,
    select_device,
)
from pypolyfit.core.compute.timing import Timer

__all__ = [
    "DeviceInfo",
    "detect_gpu",
    "get_cpu_info",
    "select_device",
    "Timer",
]
