"""
types.py - Core Data Structures and Type Definitions for VAR Lab

This module defines the fundamental data structures used throughout var_lab:
- VARParameters: Coefficients and innovation covariance of a Gaussian VAR(p)
- LaggedRegressor: Builder for the regressor vector x_t = [1, y_{t-1}', ..., y_{t-p}']'
- CovarianceTransform: Discriminated union for covariance square roots
- DimensionError: Argument-shape failures raised before any simulation work

Design Principles:
-----------------
1. Validation at construction time (fail-fast)
2. The regressor layout and the row layout of B live in one place
3. Clear type discrimination (no ambiguous Optional fields)
4. Numpy-style docstrings throughout

Example Usage:
-------------
    >>> import numpy as np
    >>> from var_lab.types import VARParameters
    >>>
    >>> # Bivariate VAR(1) with intercepts
    >>> B = np.array([[0.1, 0.2],     # intercept
    ...               [0.5, 0.1],     # lag 1, coefficients on y1
    ...               [0.0, 0.3]])    # lag 1, coefficients on y2
    >>> Sigma = np.eye(2)
    >>>
    >>> params = VARParameters(B=B, Sigma=Sigma)
    >>> print(f"VAR({params.n_lags}) over {params.n} variables")
    VAR(1) over 2 variables
"""

from __future__ import annotations

import numpy as np
from dataclasses import dataclass
from typing import Callable
from enum import Enum, auto


# =============================================================================
# ERRORS
# =============================================================================

class DimensionError(ValueError):
    """Base class for arguments whose shapes cannot describe a VAR(p)."""


class InsufficientSampleLength(DimensionError):
    """The requested sample is shorter than the initial conditions it must hold."""


class InconsistentDimensions(DimensionError):
    """B, Sigma and the initial observations disagree on n or p."""


# =============================================================================
# TYPE ALIASES
# =============================================================================

# A Gaussian sampler takes (mean, cov, count) and returns a (count, n) array
# of independent draws from N(mean, cov).
GaussianSamplerCallable = Callable[[np.ndarray, np.ndarray, int], np.ndarray]


# =============================================================================
# COVARIANCE TRANSFORM TYPES
# =============================================================================

class TransformType(Enum):
    """
    Discriminator for covariance matrix square root representations.

    DIAGONAL: The covariance is diagonal; sqrt is stored as a 1D vector of
              standard deviations. Enables O(n) colouring of draws.
    DENSE: The covariance has off-diagonal elements; sqrt is stored as a full
           (n, n) factor L with L @ L.T == Sigma. Requires O(n²) work per draw.
    """
    DIAGONAL = auto()
    DENSE = auto()


@dataclass(frozen=True)
class CovarianceTransform:
    """
    Represents the square root of a covariance matrix for efficient sampling.

    This is a discriminated union: the `transform_type` field indicates how
    to interpret the `matrix` field.

    Parameters
    ----------
    matrix : np.ndarray
        Either a 1D array of standard deviations (DIAGONAL) or a 2D factor
        L such that L @ L.T equals the covariance (DENSE). L is lower
        triangular when it comes from a Cholesky decomposition and symmetric
        when it comes from an eigendecomposition.
    transform_type : TransformType
        Indicates how `matrix` should be interpreted and applied.

    Examples
    --------
    >>> diag_tx = CovarianceTransform(
    ...     matrix=np.array([0.2, 0.3]),
    ...     transform_type=TransformType.DIAGONAL
    ... )
    >>> diag_tx.apply(np.ones((4, 2))).shape
    (4, 2)
    """
    matrix: np.ndarray
    transform_type: TransformType

    @property
    def is_diagonal(self) -> bool:
        """Check if this is a diagonal (O(n)) transform."""
        return self.transform_type == TransformType.DIAGONAL

    @property
    def dim(self) -> int:
        """Dimension of the covariance this transform represents."""
        return self.matrix.shape[0]

    def apply(self, z: np.ndarray) -> np.ndarray:
        """
        Apply this covariance transform to standard normal draws.

        Parameters
        ----------
        z : np.ndarray
            Standard normal draws with shape (n_samples, dim).

        Returns
        -------
        np.ndarray
            Draws with the target covariance structure.

        Notes
        -----
        For DIAGONAL transforms: output = z * stds (element-wise)
        For DENSE transforms: output = z @ L.T (matrix multiplication)
        """
        if self.is_diagonal:
            return z * self.matrix  # Broadcasting: (m, n) * (n,)
        else:
            return z @ self.matrix.T  # (m, n) @ (n, n).T


# =============================================================================
# LAGGED REGRESSOR
# =============================================================================

@dataclass(frozen=True)
class LaggedRegressor:
    """
    Builder for the VAR regressor vector, parameterized once by n and p.

    The regressor paired with the coefficient matrix B is

        x_t = [1, y_{t-1}', y_{t-2}', ..., y_{t-p}']'

    i.e. a leading constant followed by p blocks of n values, the most
    recent observation first. Row 0 of B multiplies the constant, rows
    1..n multiply the lag-1 block, rows n+1..2n the lag-2 block, and so on.
    Every caller that builds or updates x goes through this class so that
    the two layouts cannot drift apart.

    Parameters
    ----------
    n : int
        Number of variables.
    p : int
        Number of lags (may be 0 for an intercept-plus-noise model).

    Examples
    --------
    >>> reg = LaggedRegressor(n=1, p=2)
    >>> x = reg.initial(np.array([[1.0], [2.0]]))  # oldest first
    >>> x
    array([1., 2., 1.])
    >>> reg.advance(x, np.array([3.0]))
    >>> x
    array([1., 3., 2.])
    """
    n: int
    p: int

    def __post_init__(self):
        if self.n <= 0:
            raise InconsistentDimensions(
                f"Number of variables must be positive, got {self.n}"
            )
        if self.p < 0:
            raise InconsistentDimensions(
                f"Number of lags must be non-negative, got {self.p}"
            )

    @property
    def size(self) -> int:
        """Length of the regressor vector, n * p + 1."""
        return self.n * self.p + 1

    def initial(self, Yinit: np.ndarray) -> np.ndarray:
        """
        Build the first regressor vector from the initial observations.

        Parameters
        ----------
        Yinit : np.ndarray
            Initial observations with shape (p, n), oldest row first.

        Returns
        -------
        np.ndarray
            Fresh regressor vector [1, Yinit[p-1], ..., Yinit[0]] of length
            n * p + 1.
        """
        Yinit = np.asarray(Yinit, dtype=float)
        if Yinit.shape != (self.p, self.n):
            raise InconsistentDimensions(
                f"Initial observations must have shape ({self.p}, {self.n}), "
                f"got {Yinit.shape}"
            )

        x = np.empty(self.size)
        x[0] = 1.0
        # Reverse rows so the most recent observation comes first
        x[1:] = Yinit[::-1].ravel()
        return x

    def from_history(self, history: np.ndarray) -> np.ndarray:
        """
        Build the regressor vector for the step following `history`.

        Parameters
        ----------
        history : np.ndarray
            Observations with shape (m, n), m >= p, oldest row first. Only
            the last p rows are used.

        Returns
        -------
        np.ndarray
            Regressor vector of length n * p + 1.
        """
        history = np.asarray(history, dtype=float)
        if history.ndim != 2 or history.shape[1] != self.n:
            raise InconsistentDimensions(
                f"History must have {self.n} columns, got shape {history.shape}"
            )
        if history.shape[0] < self.p:
            raise InconsistentDimensions(
                f"History needs at least {self.p} rows, got {history.shape[0]}"
            )
        return self.initial(history[history.shape[0] - self.p:])

    def advance(self, x: np.ndarray, y: np.ndarray) -> None:
        """
        Shift the regressor in place so that `y` becomes the lag-1 block.

        The oldest block is dropped and every other block moves one
        position toward the back. With p == 0 there are no lag blocks and
        the vector is left untouched.

        Parameters
        ----------
        x : np.ndarray
            Regressor vector of length n * p + 1, modified in place.
        y : np.ndarray
            Newest observation with shape (n,).
        """
        if self.p == 0:
            return

        n = self.n
        # Explicit copy: source and destination slices overlap
        x[1 + n:] = x[1:self.size - n].copy()
        x[1:1 + n] = y


# =============================================================================
# VAR PARAMETERS
# =============================================================================

@dataclass
class VARParameters:
    """
    Coefficients and innovation covariance of a Gaussian VAR(p).

    The VAR has n variables and p lags:

        y_t = c + B_1 y_{t-1} + ... + B_p y_{t-p} + e_t,   e_t ~ N(0, Sigma)

    and is stored in row-vector form y_t' = x_t' B + e_t' with
    B = [c, B_1, ..., B_p]' of shape (k, n), k = n * p + 1.

    Parameters
    ----------
    B : np.ndarray
        Coefficient matrix with shape (k, n). Row 0 is the intercept,
        rows 1..n hold lag-1 coefficients, rows n+1..2n lag-2, etc.
    Sigma : np.ndarray
        Innovation covariance with shape (n, n). Positive semi-definiteness
        is not checked here; the sampler rejects matrices it cannot factor.

    Attributes
    ----------
    n : int
        Number of variables (read-only property).
    k : int
        Number of regressors, n * p + 1 (read-only property).
    n_lags : int
        Number of lags p implied by B (read-only property).

    Examples
    --------
    >>> # Scalar AR(1): y_t = 0.5 + 0.9 y_{t-1} + e_t
    >>> params = VARParameters(B=np.array([[0.5], [0.9]]), Sigma=np.array([[1.0]]))
    >>> params.n, params.n_lags
    (1, 1)

    Notes
    -----
    The `validate()` method is automatically called in `__post_init__`.
    """
    B: np.ndarray      # (k, n) Coefficients
    Sigma: np.ndarray  # (n, n) Innovation covariance

    def __post_init__(self):
        """Coerce to float arrays and validate dimensions on construction."""
        self.B = np.asarray(self.B, dtype=float)
        self.Sigma = np.asarray(self.Sigma, dtype=float)
        self.validate()

    @property
    def n(self) -> int:
        """Number of variables."""
        return self.B.shape[1]

    @property
    def k(self) -> int:
        """Number of regressors including the intercept."""
        return self.B.shape[0]

    @property
    def n_lags(self) -> int:
        """Number of lags p, from k = n * p + 1."""
        return (self.k - 1) // self.n

    @property
    def intercept(self) -> np.ndarray:
        """The intercept vector c, shape (n,)."""
        return self.B[0]

    def lag_matrix(self, lag: int) -> np.ndarray:
        """
        Coefficient block for a given lag in row-vector form.

        Parameters
        ----------
        lag : int
            Lag index, 1-based (1 <= lag <= n_lags).

        Returns
        -------
        np.ndarray
            The (n, n) block of B multiplying y_{t-lag}. Its transpose is the
            usual column-form matrix B_lag.
        """
        if not 1 <= lag <= self.n_lags:
            raise ValueError(
                f"Lag must be between 1 and {self.n_lags}, got {lag}"
            )
        start = 1 + (lag - 1) * self.n
        return self.B[start:start + self.n]

    def regressor(self) -> LaggedRegressor:
        """The regressor builder whose layout matches the rows of B."""
        return LaggedRegressor(n=self.n, p=self.n_lags)

    def validate(self) -> None:
        """
        Validate internal consistency of the VAR parameters.

        Raises
        ------
        InconsistentDimensions
            If any dimension mismatches are detected.

        Notes
        -----
        Checks performed:
        1. B and Sigma are 2D
        2. B has at least one column (n > 0)
        3. Sigma has shape (n, n)
        4. k - 1 is a non-negative multiple of n
        """
        if self.B.ndim != 2:
            raise InconsistentDimensions(
                f"B must be 2D, got shape {self.B.shape}"
            )

        if self.Sigma.ndim != 2:
            raise InconsistentDimensions(
                f"Sigma must be 2D, got shape {self.Sigma.shape}"
            )

        k, n = self.B.shape

        if n == 0:
            raise InconsistentDimensions(
                f"B must have at least one column, got shape {self.B.shape}"
            )

        if self.Sigma.shape != (n, n):
            raise InconsistentDimensions(
                f"Sigma shape mismatch: expected ({n}, {n}), got {self.Sigma.shape}"
            )

        if k < 1 or (k - 1) % n != 0:
            raise InconsistentDimensions(
                f"B has {k} rows, which is not n * p + 1 for n={n}"
            )
