"""
Tests for shared compute infrastructure: timing, device selection,
tolerance tiers.
"""

import time

import pytest

from pypolyfit.core.compute import device as device_module
from pypolyfit.core.compute.device import DeviceInfo, get_cpu_info, select_device
from pypolyfit.core.compute.timing import Timer
from pypolyfit.core.compute.tolerances import (
    CPU_FP64,
    CPU_FP64_ILL_CONDITIONED,
    GPU_FP32,
    GPU_FP64,
    PIVOT_THRESHOLD,
    select_tolerance,
)


class TestTimer:

    def test_sections_and_total(self):
        timer = Timer()
        timer.start()
        with timer.section('elimination'):
            time.sleep(0.001)
        timer.stop()
        result = timer.result()
        assert result['elimination'] > 0.0
        assert result['total_seconds'] >= result['elimination']

    def test_sections_accumulate(self):
        timer = Timer()
        timer.start()
        for _ in range(3):
            with timer.section('step'):
                pass
        timer.stop()
        assert set(timer.result()) == {'total_seconds', 'step'}

    def test_result_before_stop_raises(self):
        timer = Timer()
        timer.start()
        assert timer.running
        with pytest.raises(RuntimeError, match="before stop"):
            timer.result()

    def test_stop_before_start_raises(self):
        with pytest.raises(RuntimeError, match="before start"):
            Timer().stop()

    def test_not_running_after_stop(self):
        timer = Timer()
        timer.start()
        timer.stop()
        assert not timer.running
        assert timer.result()['total_seconds'] >= 0.0


class TestDevice:

    def test_cpu_info(self):
        info = get_cpu_info()
        assert info.device_type == 'cpu'
        assert not info.is_gpu
        assert info.supports_fp64
        assert str(info).startswith("CPU")

    def test_select_cpu(self):
        assert select_device('cpu').device_type == 'cpu'

    def test_auto_falls_back_to_cpu(self, monkeypatch):
        monkeypatch.setattr(device_module, 'detect_gpu', lambda: None)
        assert select_device('auto').device_type == 'cpu'

    def test_gpu_required_but_missing(self, monkeypatch):
        monkeypatch.setattr(device_module, 'detect_gpu', lambda: None)
        with pytest.raises(RuntimeError, match="no GPU available"):
            select_device('gpu')

    def test_torch_device_strings(self):
        cuda = DeviceInfo('cuda', 1, 'Test GPU', 8 * 1024**3, True)
        mps = DeviceInfo('mps', 0, 'Apple Silicon GPU', None, False)
        assert cuda.torch_device == 'cuda:1'
        assert mps.torch_device == 'mps'
        assert cuda.is_gpu and mps.is_gpu
        assert "8.0GB" in str(cuda)


class TestTolerances:

    def test_pivot_threshold_default(self):
        assert PIVOT_THRESHOLD == 1e-10

    def test_select_tolerance(self):
        assert select_tolerance('cpu_normal_equations') is CPU_FP64
        assert select_tolerance('cpu_normal_equations', True) is CPU_FP64_ILL_CONDITIONED
        assert select_tolerance('gpu_normal_equations_fp64') is GPU_FP64
        assert select_tolerance('gpu_normal_equations_fp32') is GPU_FP32
