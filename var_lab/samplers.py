"""
samplers.py - Multivariate Gaussian Innovation Sampling

This module provides the Gaussian-sampling capability consumed by the VAR
simulator:
- covariance_transform: Square root of a covariance matrix (diagonal or dense)
- GaussianSampler: Draws independent N(mean, cov) vectors in one batch

Any callable with the signature `sampler(mean, cov, count) -> (count, n)`
can stand in for GaussianSampler (see GaussianSamplerCallable), e.g. a
stub returning fixed draws in tests.

Design Principles:
-----------------
1. Dependency Injection: Samplers accept an explicit RNG for reproducibility
2. Batching: One call returns every requested draw
3. Auditability: Each sampler counts its calls and draws

Example Usage:
-------------
    >>> import numpy as np
    >>> from var_lab.samplers import GaussianSampler
    >>>
    >>> rng = np.random.default_rng(42)
    >>> sampler = GaussianSampler(rng=rng)
    >>> draws = sampler(np.zeros(2), np.array([[1.0, 0.5], [0.5, 2.0]]), 1000)
    >>> draws.shape
    (1000, 2)
"""

from __future__ import annotations

import numpy as np
import scipy.linalg
from typing import Optional
from loguru import logger

from .types import CovarianceTransform, TransformType


# =============================================================================
# COVARIANCE SQUARE ROOTS
# =============================================================================

def _is_diagonal(M: np.ndarray) -> bool:
    """Check if a matrix is diagonal (off-diagonals are zero)."""
    off_diagonal = ~np.eye(M.shape[0], dtype=bool)
    return not np.any(M[off_diagonal])


def _eigen_root(cov: np.ndarray, tol: float) -> np.ndarray:
    """
    Symmetric square root of a positive semi-definite matrix.

    Eigenvalues within `tol` of zero (relative to the largest one) are
    clipped to zero; anything more negative is rejected.
    """
    vals, vecs = scipy.linalg.eigh(cov)
    scale = max(1.0, float(np.max(np.abs(vals))))

    if vals.min() < -tol * scale:
        logger.error(f"Covariance has negative eigenvalue {vals.min():.3e}")
        raise ValueError(
            "covariance matrix is not positive semi-definite "
            f"(smallest eigenvalue {vals.min():.3e})"
        )

    vals = np.clip(vals, 0.0, None)
    return (vecs * np.sqrt(vals)) @ vecs.T


def covariance_transform(
    cov: np.ndarray,
    force_dense: bool = False,
    tol: float = 1e-10
) -> CovarianceTransform:
    """
    Compute a square root of a covariance matrix for sampling.

    Parameters
    ----------
    cov : np.ndarray
        Covariance matrix with shape (n, n).
    force_dense : bool, default=False
        If True, always return a DENSE transform even for diagonal matrices.
        Primarily useful for testing that diagonal and dense paths agree.
    tol : float, default=1e-10
        Relative tolerance for treating slightly negative eigenvalues of a
        singular covariance as zero.

    Returns
    -------
    CovarianceTransform
        DIAGONAL (standard deviations) or DENSE (factor L with L @ L.T == cov).

    Raises
    ------
    ValueError
        If cov is not square, or is not positive semi-definite.

    Notes
    -----
    The dense path tries a Cholesky factorization first. Singular but
    positive semi-definite matrices (e.g. perfectly correlated shocks) make
    Cholesky fail, in which case the symmetric eigen-root is used instead.
    """
    cov = np.asarray(cov, dtype=float)

    if cov.ndim != 2 or cov.shape[0] != cov.shape[1]:
        raise ValueError(f"Covariance must be square, got shape {cov.shape}")

    if not force_dense and _is_diagonal(cov):
        variances = np.diag(cov)
        if np.any(variances < 0):
            logger.error("Diagonal covariance has negative variances")
            raise ValueError(
                "covariance matrix is not positive semi-definite "
                "(negative variance on the diagonal)"
            )
        logger.debug(f"Using diagonal covariance transform | n: {cov.shape[0]}")
        return CovarianceTransform(
            matrix=np.sqrt(variances),
            transform_type=TransformType.DIAGONAL
        )

    try:
        L = scipy.linalg.cholesky(cov, lower=True)
        logger.debug(f"Using Cholesky covariance transform | n: {cov.shape[0]}")
    except scipy.linalg.LinAlgError:
        logger.debug("Cholesky failed, falling back to eigen-root (singular covariance)")
        L = _eigen_root(cov, tol)

    return CovarianceTransform(matrix=L, transform_type=TransformType.DENSE)


# =============================================================================
# GAUSSIAN SAMPLER
# =============================================================================

class GaussianSampler:
    """
    Batch sampler for independent multivariate Gaussian vectors.

    Implements the `GaussianSamplerCallable` protocol:

        sampler(mean, cov, count) -> (count, n) array of draws from N(mean, cov)

    Draws are produced by colouring standard normal samples with a square
    root of `cov` (see `covariance_transform`).

    Parameters
    ----------
    rng : np.random.Generator, optional
        Random number generator. If None, creates a new default RNG.
    force_dense : bool, default=False
        Always use a dense square root, even for diagonal covariances.

    Attributes
    ----------
    n_calls : int
        Number of times the sampler has been invoked.
    n_draws : int
        Total number of vectors drawn across all calls.

    Examples
    --------
    >>> sampler = GaussianSampler(rng=np.random.default_rng(0))
    >>> eps = sampler(np.zeros(3), np.eye(3), 500)
    >>> eps.shape, sampler.n_calls, sampler.n_draws
    ((500, 3), 1, 500)

    Notes
    -----
    For a fixed seed, the diagonal and dense paths consume the same standard
    normal draws, so they return identical results for a diagonal covariance.
    """

    def __init__(
        self,
        rng: Optional[np.random.Generator] = None,
        force_dense: bool = False
    ):
        self._rng = rng if rng is not None else np.random.default_rng()
        self._force_dense = force_dense
        self.n_calls = 0
        self.n_draws = 0

    @property
    def rng(self) -> np.random.Generator:
        """The random number generator used by this sampler."""
        return self._rng

    def __call__(
        self,
        mean: np.ndarray,
        cov: np.ndarray,
        count: int
    ) -> np.ndarray:
        """
        Draw `count` independent vectors from N(mean, cov).

        Parameters
        ----------
        mean : np.ndarray
            Mean vector with shape (n,).
        cov : np.ndarray
            Covariance matrix with shape (n, n).
        count : int
            Number of vectors to draw. Zero returns an empty (0, n) array.

        Returns
        -------
        np.ndarray
            Draws with shape (count, n).

        Raises
        ------
        ValueError
            If shapes are inconsistent, count is negative, or cov is not
            positive semi-definite.
        """
        mean = np.asarray(mean, dtype=float)
        cov = np.asarray(cov, dtype=float)

        if mean.ndim != 1:
            raise ValueError(f"Mean must be 1D, got shape {mean.shape}")

        n = mean.shape[0]

        if cov.shape != (n, n):
            raise ValueError(
                f"Covariance shape mismatch: expected ({n}, {n}), got {cov.shape}"
            )

        if count < 0:
            raise ValueError(f"Draw count must be non-negative, got {count}")

        transform = covariance_transform(cov, force_dense=self._force_dense)

        z = self._rng.standard_normal((count, n))
        draws = transform.apply(z) + mean

        self.n_calls += 1
        self.n_draws += count
        return draws
