"""
GPU backend for polynomial regression using PyTorch.

Forms the normal equations on the device and runs the PyTorch
Gauss-Jordan kernel. Validated against the CPU reference.
Supports CUDA (Linux/Windows) and MPS (macOS Apple Silicon).
"""

from typing import Any
import numpy as np

from pypolyfit.core.result import Result
from pypolyfit.core.compute.timing import Timer
from pypolyfit.core.compute.tolerances import PIVOT_THRESHOLD
from pypolyfit.core.compute.linalg.gauss import gauss_jordan_gpu
from pypolyfit.regression.design import PolynomialDesign
from pypolyfit.regression.solution import PolynomialParams
from pypolyfit.regression.backends.cpu import condition_warning


class GPUNormalEquationsBackend:
    """
    GPU backend solving the normal equations with PyTorch.

    FP64 on CUDA by default. MPS has no float64 support, so it always
    runs in FP32 and carries a precision warning: squaring the condition
    number in single precision loses digits quickly.
    """

    def __init__(
        self,
        device: str = 'cuda',
        use_fp64: bool = True,
        pivot_threshold: float = PIVOT_THRESHOLD,
    ):
        """
        Args:
            device: GPU device ('cuda', 'cuda:0', 'mps')
            use_fp64: Use float64 on CUDA. Ignored (forced False) on MPS.
            pivot_threshold: Smallest acceptable absolute pivot
        """
        import torch

        if device.startswith('cuda'):
            if not torch.cuda.is_available():
                raise RuntimeError(
                    "CUDA not available. Install PyTorch with CUDA support, "
                    "or use backend='cpu'."
                )
            self.device = torch.device(device)
            self.use_fp64 = use_fp64
            self.device_name = torch.cuda.get_device_properties(self.device).name
        elif device == 'mps':
            if not (hasattr(torch.backends, 'mps') and torch.backends.mps.is_available()):
                raise RuntimeError(
                    "MPS not available. Requires macOS with Apple Silicon "
                    "and PyTorch with MPS support."
                )
            self.device = torch.device('mps')
            self.use_fp64 = False
            self.device_name = 'Apple Silicon GPU (MPS)'
        else:
            raise ValueError(f"Unknown GPU device: {device!r}. Use 'cuda' or 'mps'.")

        self.dtype = torch.float64 if self.use_fp64 else torch.float32
        self.pivot_threshold = pivot_threshold

    @property
    def name(self) -> str:
        precision = "fp64" if self.use_fp64 else "fp32"
        return f'gpu_normal_equations_{precision}'

    def solve(self, design: PolynomialDesign) -> Result[PolynomialParams]:
        """
        Fit the polynomial on the GPU.

        Raises:
            SingularMatrixError: If X'X is singular within pivot_threshold
        """
        import torch

        timer = Timer(sync_cuda=self.device.type == 'cuda')
        timer.start()

        n, p = design.n, design.p

        with timer.section('data_transfer_to_gpu'):
            X = torch.from_numpy(design.X).to(device=self.device, dtype=self.dtype)
            y = torch.from_numpy(design.y).to(device=self.device, dtype=self.dtype)

        with timer.section('normal_equations'):
            XtX = X.T @ X
            Xty = X.T @ y

        with timer.section('elimination'):
            gj = gauss_jordan_gpu(
                XtX, Xty, pivot_threshold=self.pivot_threshold, matrix_name="X'X"
            )
            coef = torch.from_numpy(gj.x).to(device=self.device, dtype=self.dtype)

        with timer.section('residuals'):
            fitted_gpu = X @ coef
            residuals_gpu = y - fitted_gpu

        with timer.section('statistics'):
            rss = float((residuals_gpu @ residuals_gpu).item())
            y_centered = y - y.mean()
            tss = float((y_centered @ y_centered).item())

        with timer.section('data_transfer_to_cpu'):
            XtX_cpu = XtX.cpu().numpy().astype(np.float64)
            fitted_values = fitted_gpu.cpu().numpy().astype(np.float64)
            residuals = residuals_gpu.cpu().numpy().astype(np.float64)

        timer.stop()

        cond = float(np.linalg.cond(XtX_cpu))
        warnings_list = []
        warning = condition_warning(cond)
        if warning:
            warnings_list.append(warning)
        if not self.use_fp64:
            warnings_list.append(
                "Normal equations solved in float32; expect roughly "
                "single-precision accuracy in the coefficients."
            )

        params = PolynomialParams(
            coefficients=gj.x,
            residuals=residuals,
            fitted_values=fitted_values,
            rss=rss,
            tss=tss,
            degree=design.degree,
            df_residual=n - p,
        )

        info: dict[str, Any] = {
            'method': 'normal_equations',
            'solver': 'gauss_jordan',
            'pivot_threshold': self.pivot_threshold,
            'min_pivot': gj.min_pivot,
            'permutation': gj.permutation,
            'condition_number': cond,
            'device': str(self.device),
            'dtype': str(self.dtype),
            'device_name': self.device_name,
        }

        return Result(
            params=params,
            info=info,
            timing=timer.result(),
            backend_name=self.name,
            warnings=tuple(warnings_list),
        )
