"""
pytest configuration and shared fixtures.
"""

import pytest
import numpy as np


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def well_conditioned_system(rng):
    """Diagonally dominant square system with known solution."""
    n = 6
    A = rng.standard_normal((n, n)) + n * np.eye(n)
    x_true = rng.standard_normal(n)
    b = A @ x_true
    return A, b, x_true


@pytest.fixture
def quadratic_points():
    """Points lying exactly on y = x^2 + x + 1."""
    x = np.array([0.0, 1.0, 2.0])
    return np.column_stack([x, x**2 + x + 1.0])


@pytest.fixture
def noisy_cubic_data(rng):
    """Noisy samples of y = 0.5 - x + 2x^2 + 0.3x^3 on [-2, 2]."""
    n = 60
    x = np.linspace(-2.0, 2.0, n)
    beta_true = np.array([0.5, -1.0, 2.0, 0.3])
    y = beta_true[0] + beta_true[1] * x + beta_true[2] * x**2 + beta_true[3] * x**3
    y = y + rng.standard_normal(n) * 0.05
    return x, y, beta_true
