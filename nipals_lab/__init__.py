"""
nipals_lab - NIPALS Principal Component Analysis for Chemometric Batch Data
"""

__version__ = "1.0.0"

# =============================================================================
# CORE TYPES
# =============================================================================
from .types import (
    PCAResult,
    ScalingParameters,
    NipalsConfig,
    DEFAULT_N_ITER,
)

# =============================================================================
# ERRORS
# =============================================================================
from .errors import (
    PCAError,
    InvalidArgumentError,
    DegenerateInputError,
)

# =============================================================================
# PREPROCESSING
# =============================================================================
from .preprocessing import (
    as_matrix,
    compute_scaling,
    preprocess,
)

# =============================================================================
# DECOMPOSITION
# =============================================================================
from .decomposition import (
    nipals_pca,
    svd_pca,
    compute_pca,
    orient_components,
    PCAMethod,
)

# =============================================================================
# SIMULATION
# =============================================================================
from .simulation import (
    PeakAreaTable,
    simulate_peak_areas,
)

# =============================================================================
# I/O
# =============================================================================
from .io import (
    save_result,
    load_result,
    read_peak_table,
    ResultFormat,
)

# =============================================================================
# PUBLIC API
# =============================================================================
__all__ = [
    "__version__",
    "PCAResult",
    "ScalingParameters",
    "NipalsConfig",
    "DEFAULT_N_ITER",
    "PCAError",
    "InvalidArgumentError",
    "DegenerateInputError",
    "as_matrix",
    "compute_scaling",
    "preprocess",
    "nipals_pca",
    "svd_pca",
    "compute_pca",
    "orient_components",
    "PCAMethod",
    "PeakAreaTable",
    "simulate_peak_areas",
    "save_result",
    "load_result",
    "read_peak_table",
    "ResultFormat",
]
