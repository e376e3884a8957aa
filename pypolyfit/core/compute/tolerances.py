"""
Numeric thresholds and tolerance tiers.

Pivot and conditioning thresholds used by the elimination kernels, plus the
precision expectations for each compute path:
- CPU FP64 (reference)
- GPU FP64: same as CPU
- GPU FP32: relaxed for single-precision arithmetic

Used by the kernels, the regression backends and the test suite.
"""

from dataclasses import dataclass


# Smallest absolute pivot Gauss-Jordan elimination accepts before declaring
# the system singular. Absolute, not scaled by the matrix norm.
PIVOT_THRESHOLD = 1e-10

# Estimated cond(X'X) above which a regression result carries an
# ill-conditioning warning. cond(X'X) = cond(X)^2, so this corresponds to
# cond(X) = 1e6.
ILL_CONDITIONED_THRESHOLD = 1e12


@dataclass(frozen=True)
class ToleranceTier:
    """Tolerance specification for numerical comparison."""
    rtol: float
    atol: float
    name: str
    description: str


CPU_FP64 = ToleranceTier(
    rtol=1e-10,
    atol=1e-12,
    name='cpu_fp64',
    description='CPU double precision reference',
)

# Normal equations on poorly scaled data lose roughly half the digits
CPU_FP64_ILL_CONDITIONED = ToleranceTier(
    rtol=1e-4,
    atol=1e-6,
    name='cpu_fp64_ill_conditioned',
    description='CPU double precision, ill-conditioned (cond > 1e4)',
)

GPU_FP64 = ToleranceTier(
    rtol=1e-10,
    atol=1e-12,
    name='gpu_fp64',
    description='GPU double precision, matches CPU reference',
)

GPU_FP32 = ToleranceTier(
    rtol=1e-4,
    atol=1e-5,
    name='gpu_fp32',
    description='GPU single precision',
)

GPU_FP32_ILL_CONDITIONED = ToleranceTier(
    rtol=1e-2,
    atol=1e-3,
    name='gpu_fp32_ill_conditioned',
    description='GPU single precision, ill-conditioned',
)


def select_tolerance(
    backend_name: str,
    is_ill_conditioned: bool = False,
) -> ToleranceTier:
    """Select appropriate tolerance tier for a given backend."""
    if 'gpu' in backend_name:
        if 'fp64' in backend_name:
            return GPU_FP64
        if is_ill_conditioned:
            return GPU_FP32_ILL_CONDITIONED
        return GPU_FP32
    else:
        if is_ill_conditioned:
            return CPU_FP64_ILL_CONDITIONED
        return CPU_FP64
