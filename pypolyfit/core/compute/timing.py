"""
Execution timing for backend phases.

Backends time their phases (forming normal equations, elimination,
residuals) and report the breakdown in Result.timing. GPU kernels run
asynchronously, so CUDA can be synchronized before every clock read.
"""

import time
from contextlib import contextmanager
from typing import Iterator


class Timer:
    """
    Accumulating phase timer.

    Usage:
        timer = Timer()
        timer.start()

        with timer.section('normal_equations'):
            XtX = multiply(transpose(X), X)

        with timer.section('elimination'):
            beta = solve(XtX, Xty)

        timer.stop()
        timer.result()
        # {'total_seconds': 0.004, 'normal_equations': 0.001, 'elimination': 0.003}
    """

    def __init__(self, sync_cuda: bool = False):
        """
        Args:
            sync_cuda: Synchronize CUDA before each clock read. Needed for
                       meaningful numbers from the PyTorch backend.
        """
        self._sync_cuda = sync_cuda
        self._sections: dict[str, float] = {}
        self._start_time: float | None = None
        self._total: float | None = None

    def _now(self) -> float:
        if self._sync_cuda:
            try:
                import torch
            except ImportError:
                pass
            else:
                if torch.cuda.is_available():
                    torch.cuda.synchronize()
        return time.perf_counter()

    def start(self) -> None:
        self._start_time = self._now()

    def stop(self) -> None:
        end = self._now()
        if self._start_time is None:
            raise RuntimeError("Timer.stop() called before start()")
        self._total = end - self._start_time

    @property
    def running(self) -> bool:
        """True between start() and stop()."""
        return self._start_time is not None and self._total is None

    @contextmanager
    def section(self, name: str) -> Iterator[None]:
        """
        Time a named phase. Repeated sections with the same name accumulate.
        """
        begin = self._now()
        try:
            yield
        finally:
            elapsed = self._now() - begin
            self._sections[name] = self._sections.get(name, 0.0) + elapsed

    def result(self) -> dict[str, float]:
        """
        Timing breakdown: 'total_seconds' plus one entry per section.

        Raises:
            RuntimeError: If called before stop()
        """
        if self._total is None:
            raise RuntimeError("Timer.result() called before stop()")
        return {'total_seconds': self._total, **self._sections}
