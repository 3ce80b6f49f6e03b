"""
var_lab - A Python Library for Simulating Vector Autoregressions
"""

__version__ = "1.0.0"

# =============================================================================
# CORE TYPES
# =============================================================================
from .types import (
    VARParameters,
    LaggedRegressor,
    CovarianceTransform,
    TransformType,
    GaussianSamplerCallable,
    DimensionError,
    InsufficientSampleLength,
    InconsistentDimensions,
)

# =============================================================================
# SAMPLERS
# =============================================================================
from .samplers import (
    GaussianSampler,
    covariance_transform,
)

# =============================================================================
# SIMULATION
# =============================================================================
from .simulation import (
    VARSimulator,
    simulate_var,
)

# PUBLIC API
# =============================================================================
__all__ = [
    "__version__",
    "VARParameters",
    "LaggedRegressor",
    "CovarianceTransform",
    "TransformType",
    "GaussianSamplerCallable",
    "DimensionError",
    "InsufficientSampleLength",
    "InconsistentDimensions",
    "GaussianSampler",
    "covariance_transform",
    "VARSimulator",
    "simulate_var",
]
