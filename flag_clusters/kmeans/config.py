"""
K-Means Configuration

Parameters for Lloyd's k-means over 3-dimensional color points.
"""

from dataclasses import dataclass
from numbers import Integral
from typing import Optional

from ..exceptions import InvalidInputError


@dataclass
class KMeansConfig:
    """
    Configuration for K-Means clustering.

    Attributes:
        n_clusters: Number of groups to form (k)
        max_iter: Maximum number of assign/update iterations
        tol: Absolute per-component tolerance on centroid movement
        random_state: Seed for the default random generator
    """
    n_clusters: int = 4
    """Number of clusters (k parameter). The flag page uses 4."""

    max_iter: int = 100
    """Maximum number of iterations before giving up on convergence."""

    tol: float = 1e-6
    """Converged once no centroid component moves by more than this."""

    random_state: Optional[int] = None
    """Seed for reproducibility. None draws fresh entropy on every fit."""

    def __post_init__(self):
        """Validate configuration parameters."""
        for name in ("n_clusters", "max_iter"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, Integral):
                raise InvalidInputError(f"{name} must be an integer, got {value!r}")
        if self.n_clusters < 1:
            raise InvalidInputError(f"n_clusters must be >= 1, got {self.n_clusters}")
        if self.max_iter < 1:
            raise InvalidInputError(f"max_iter must be >= 1, got {self.max_iter}")
        if self.tol < 0:
            raise InvalidInputError(f"tol must be >= 0, got {self.tol}")
