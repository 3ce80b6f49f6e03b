"""
conftest.py - Pytest Configuration and Shared Fixtures

This file contains fixtures used across all test modules. Fixtures are
organized by category:
- Random number generators (for reproducibility)
- VAR parameter sets (various configurations)
- Samplers (real and deterministic stubs)
"""

import pytest
import numpy as np

from var_lab import VARParameters, GaussianSampler


# =============================================================================
# RANDOM NUMBER GENERATORS
# =============================================================================

@pytest.fixture
def rng():
    """
    Provide a seeded random number generator for reproducible tests.

    All tests should use this fixture (or derive from it) to ensure
    reproducibility across runs.
    """
    return np.random.default_rng(seed=42)


@pytest.fixture
def rng_alternate():
    """Alternate RNG with different seed for comparison tests."""
    return np.random.default_rng(seed=12345)


# =============================================================================
# VAR PARAMETERS - SCALAR
# =============================================================================

@pytest.fixture
def ar1_params():
    """
    Scalar AR(1): y_t = 0.5 + 0.8 y_{t-1} + e_t, e_t ~ N(0, 0.25).

    Stationary mean is 0.5 / (1 - 0.8) = 2.5.
    """
    B = np.array([[0.5], [0.8]])
    Sigma = np.array([[0.25]])
    return VARParameters(B=B, Sigma=Sigma)


@pytest.fixture
def ar2_params():
    """Scalar AR(2): y_t = 1.0 + 0.5 y_{t-1} - 0.3 y_{t-2} + e_t."""
    B = np.array([[1.0], [0.5], [-0.3]])
    Sigma = np.array([[1.0]])
    return VARParameters(B=B, Sigma=Sigma)


# =============================================================================
# VAR PARAMETERS - MULTIVARIATE
# =============================================================================

@pytest.fixture
def var2_params():
    """
    A bivariate VAR(2) with correlated shocks.

    Structure (row-vector form, B is 5 x 2):
    - Intercepts: 0.1, -0.2
    - Lag 1: cross-effects between the two variables
    - Lag 2: small own-lag terms only
    """
    B = np.array([
        [0.1, -0.2],   # intercept
        [0.5, 0.1],    # lag 1, coefficients on y1
        [0.2, 0.4],    # lag 1, coefficients on y2
        [-0.1, 0.0],   # lag 2, coefficients on y1
        [0.0, 0.15],   # lag 2, coefficients on y2
    ])
    Sigma = np.array([
        [1.0, 0.3],
        [0.3, 0.5]
    ])
    return VARParameters(B=B, Sigma=Sigma)


@pytest.fixture
def var2_init():
    """Initial observations for var2_params, oldest row first."""
    return np.array([
        [0.0, 1.0],
        [2.0, -1.0]
    ])


@pytest.fixture
def trivariate_var1_params(rng):
    """
    A 3-variable VAR(1) with random (stable) coefficients and a dense
    covariance built as A @ A.T.
    """
    n = 3
    A1 = rng.uniform(-0.3, 0.3, (n, n))
    c = rng.normal(0.0, 0.1, n)
    B = np.vstack([c, A1])

    A = rng.standard_normal((n, n))
    Sigma = A @ A.T + 0.1 * np.eye(n)

    return VARParameters(B=B, Sigma=Sigma)


# =============================================================================
# SAMPLERS
# =============================================================================

class RecordingSampler:
    """
    Deterministic stand-in for the Gaussian-sampling capability.

    Returns `draws[:count]` (or a constant fill) and records the arguments
    of every call so tests can audit entropy consumption.
    """

    def __init__(self, draws=None, fill=0.0):
        self.draws = None if draws is None else np.asarray(draws, dtype=float)
        self.fill = fill
        self.calls = []

    def __call__(self, mean, cov, count):
        self.calls.append({
            "mean": np.array(mean),
            "cov": np.array(cov),
            "count": count
        })
        if self.draws is not None:
            return self.draws[:count]
        return np.full((count, len(mean)), self.fill)


@pytest.fixture
def recording_sampler():
    """A stub sampler returning zero innovations."""
    return RecordingSampler()


@pytest.fixture
def make_recording_sampler():
    """Factory for stub samplers with custom draws or fill value."""
    return RecordingSampler


@pytest.fixture
def gaussian_sampler(rng):
    """A GaussianSampler using the seeded RNG."""
    return GaussianSampler(rng=rng)


# =============================================================================
# HELPER FIXTURES
# =============================================================================

@pytest.fixture
def tolerance():
    """Standard numerical tolerance for float comparisons."""
    return {"rtol": 1e-10, "atol": 1e-12}


@pytest.fixture
def large_sample_tolerance():
    """Looser tolerance for statistical convergence tests."""
    return {"rtol": 0.05, "atol": 0.05}
