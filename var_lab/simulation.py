"""
simulation.py - Monte Carlo Simulation for Vector Autoregressions

This module provides tools for simulating sample paths from a Gaussian VAR(p):
- VARSimulator: Generate a path conditional on p initial observations
- simulate_var: Convenience function working directly on (B, Sigma, Yinit)

Mathematical Background:
-----------------------
Given a VAR with n variables and p lags in row-vector form:
    y_t' = x_t' B + e_t',   e_t ~ N(0, Sigma)
    x_t  = [1, y_{t-1}', ..., y_{t-p}']'

we simulate a path by:
1. Drawing every required innovation e_t in one batch
2. Seeding x with the initial observations (most recent first)
3. Iterating y_t = x_t' B + e_t, shifting y_t into x after each step

Initial Conditions:
------------------
With drop_init=False the p initial observations are the first p rows of the
output and only T - p new observations are drawn. With drop_init=True the
initial observations only seed the recursion and T new observations are
drawn.

Example Usage:
-------------
    >>> import numpy as np
    >>> from var_lab import VARParameters, VARSimulator
    >>>
    >>> params = VARParameters(
    ...     B=np.array([[0.0, 0.0], [0.5, 0.1], [0.2, 0.4]]),
    ...     Sigma=np.array([[1.0, 0.3], [0.3, 1.0]])
    ... )
    >>> simulator = VARSimulator(params, rng=np.random.default_rng(42))
    >>> results = simulator.simulate(T=200, Yinit=np.zeros((1, 2)))
    >>> results["observations"].shape
    (200, 2)
"""

from __future__ import annotations

import numbers
import numpy as np
from typing import Dict, Optional
from loguru import logger

from .types import (
    VARParameters,
    GaussianSamplerCallable,
    InsufficientSampleLength,
    InconsistentDimensions,
)
from .samplers import GaussianSampler


# =============================================================================
# ARGUMENT VALIDATION
# =============================================================================

def _check_sample_length(T: int, p: int, drop_init: bool) -> None:
    """Validate T against the number of initial conditions p."""
    if isinstance(T, bool) or not isinstance(T, numbers.Integral):
        raise TypeError(f"Sample length must be an integer, got {type(T).__name__}")

    if T < 1:
        logger.error(f"Invalid sample length T={T}")
        raise InsufficientSampleLength(
            f"Sample length must be positive, got T={T}"
        )

    if not drop_init and T < p:
        logger.error(f"Sample length T={T} shorter than p={p} initial conditions")
        raise InsufficientSampleLength(
            f"Sample length is shorter than number of initial conditions "
            f"(T={T}, p={p})"
        )


def _coerce_initial(Yinit: np.ndarray) -> np.ndarray:
    """Convert initial observations to a 2D float array."""
    Yinit = np.asarray(Yinit, dtype=float)
    if Yinit.ndim != 2:
        logger.error(f"Initial observations have shape {Yinit.shape}")
        raise InconsistentDimensions(
            f"Yinit must be 2D with shape (p, n), got shape {Yinit.shape}"
        )
    return Yinit


# =============================================================================
# VAR SIMULATOR
# =============================================================================

class VARSimulator:
    """
    Monte Carlo simulator for Gaussian vector autoregressions.

    Parameters
    ----------
    params : VARParameters
        Coefficients B and innovation covariance Sigma of the VAR.
    sampler : GaussianSamplerCallable, optional
        Gaussian-sampling capability, called once per simulation as
        `sampler(zeros(n), Sigma, count)`. If None, a GaussianSampler over
        `rng` is used.
    rng : np.random.Generator, optional
        Random number generator for the default sampler. Ignored when an
        explicit sampler is given. If None, creates a new default RNG.

    Examples
    --------
    >>> # Scalar AR(2)
    >>> params = VARParameters(
    ...     B=np.array([[0.0], [0.6], [0.2]]),
    ...     Sigma=np.array([[0.25]])
    ... )
    >>> simulator = VARSimulator(params, rng=np.random.default_rng(7))
    >>> results = simulator.simulate(T=100, Yinit=np.array([[0.0], [0.1]]))
    >>> results["observations"].shape, results["innovations"].shape
    ((100, 1), (98, 1))

    Notes
    -----
    The simulator holds no per-simulation state. Each call to `simulate`
    allocates its own output path and regressor vector, so a single
    instance can be reused for many paths (e.g. in a bootstrap loop).
    """

    def __init__(
        self,
        params: VARParameters,
        sampler: Optional[GaussianSamplerCallable] = None,
        rng: Optional[np.random.Generator] = None
    ):
        self.params = params
        if sampler is None:
            sampler = GaussianSampler(rng=rng)
        self.sampler = sampler
        self._regressor = params.regressor()

    @property
    def n(self) -> int:
        """Number of variables."""
        return self.params.n

    @property
    def p(self) -> int:
        """Number of lags."""
        return self.params.n_lags

    def simulate(
        self,
        T: int,
        Yinit: np.ndarray,
        drop_init: bool = False
    ) -> Dict[str, np.ndarray]:
        """
        Simulate a sample path conditional on initial observations.

        Parameters
        ----------
        T : int
            Number of rows in the returned path.
        Yinit : np.ndarray
            Initial observations with shape (p, n), oldest row first.
        drop_init : bool, default=False
            If False, Yinit fills the first p rows of the output and T - p
            new observations are simulated. If True, Yinit only seeds the
            recursion and T new observations are simulated.

        Returns
        -------
        Dict[str, np.ndarray]
            Dictionary containing:
            - "observations": (T, n) simulated path
            - "innovations": (T - p, n) or (T, n) shocks, one row per newly
              simulated observation (none for carried-over initial rows)

        Raises
        ------
        TypeError
            If T is not an integer.
        InsufficientSampleLength
            If T < 1, or T < p while keeping the initial observations.
        InconsistentDimensions
            If Yinit does not have shape (p, n) for this VAR.
        ValueError
            If the sampler returns draws of the wrong shape. Errors raised
            by the sampler itself propagate unchanged.

        Examples
        --------
        >>> results = simulator.simulate(T=5, Yinit=Yinit, drop_init=True)
        >>> Y = results["observations"]  # 5 new rows, Yinit not included
        """
        Yinit = _coerce_initial(Yinit)
        _check_sample_length(T, Yinit.shape[0], drop_init)

        n, p = self.n, self.p
        B = self.params.B

        if Yinit.shape != (p, n):
            logger.error(f"Yinit shape {Yinit.shape} does not match VAR({p}) over {n} variables")
            raise InconsistentDimensions(
                f"Argument dimensions are inconsistent: B has {self.params.k} rows "
                f"and {n} columns, which needs Yinit of shape ({p}, {n}), "
                f"got {Yinit.shape}"
            )

        t_init = 0 if drop_init else p
        n_draws = T - t_init

        logger.info(
            f"Simulating VAR({p}) | n: {n}, T: {T}, "
            f"drop_init: {drop_init}, draws: {n_draws}"
        )

        # All randomness is consumed here, in a single batch
        innovations = np.asarray(
            self.sampler(np.zeros(n), self.params.Sigma, n_draws),
            dtype=float
        )
        if innovations.shape != (n_draws, n):
            raise ValueError(
                f"Sampler returned shape {innovations.shape}, "
                f"expected ({n_draws}, {n})"
            )

        Y = np.empty((T, n))
        if not drop_init:
            Y[:p] = Yinit

        x = self._regressor.initial(Yinit)

        for t in range(t_init, T):
            Y[t] = x @ B + innovations[t - t_init]
            self._regressor.advance(x, Y[t])

        logger.success(f"Simulation complete. Generated {n_draws} new observations.")

        return {
            "observations": Y,
            "innovations": innovations
        }


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

def simulate_var(
    T: int,
    B: np.ndarray,
    Sigma: np.ndarray,
    Yinit: np.ndarray,
    drop_init: bool = False,
    sampler: Optional[GaussianSamplerCallable] = None,
    rng: Optional[np.random.Generator] = None
) -> np.ndarray:
    """
    Simulate a sample of length T from a VAR with parameters {B, Sigma}.

    This is a simplified interface when you don't need the innovations or
    want to reuse a simulator across many paths.

    Parameters
    ----------
    T : int
        Length of the sample to generate.
    B : np.ndarray
        Coefficient matrix with shape (k, n), k = n * p + 1. Row 0 is the
        intercept, followed by the lag-1 block, lag-2 block, etc.
    Sigma : np.ndarray
        Innovation covariance with shape (n, n).
    Yinit : np.ndarray
        Initial observations with shape (p, n), oldest row first.
    drop_init : bool, default=False
        If True, exclude the initial observations from the output and
        simulate T new observations; otherwise include them and simulate
        T - p.
    sampler : GaussianSamplerCallable, optional
        Gaussian-sampling capability. Defaults to a GaussianSampler.
    rng : np.random.Generator, optional
        Random number generator for the default sampler.

    Returns
    -------
    np.ndarray
        Simulated observations with shape (T, n).

    Raises
    ------
    InsufficientSampleLength
        If T < p and drop_init is False (checked first), or T < 1.
    InconsistentDimensions
        If k != n * p + 1, Sigma is not (n, n), or Yinit does not have n
        columns.

    Examples
    --------
    >>> # AR(1) with phi = 0.9, no noise: a deterministic decay
    >>> Y = simulate_var(
    ...     T=4, B=np.array([[0.0], [0.9]]), Sigma=np.zeros((1, 1)),
    ...     Yinit=np.array([[1.0]])
    ... )
    >>> Y.ravel()
    array([1.   , 0.9  , 0.81 , 0.729])
    """
    Yinit = _coerce_initial(Yinit)
    _check_sample_length(T, Yinit.shape[0], drop_init)

    params = VARParameters(B=B, Sigma=Sigma)
    simulator = VARSimulator(params, sampler=sampler, rng=rng)
    results = simulator.simulate(T=T, Yinit=Yinit, drop_init=drop_init)

    return results["observations"]
