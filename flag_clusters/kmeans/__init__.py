"""
K-Means clustering module for grouping flags by color.
"""

from .config import KMeansConfig
from .kmeans import (
    BaseKMeans,
    KMeansResult,
    LloydKMeans,
    SklearnKMeans,
    assign_labels,
    cluster,
    cluster_batch,
    compute_inertia,
    update_centroids,
)

__all__ = [
    'BaseKMeans',
    'KMeansConfig',
    'KMeansResult',
    'LloydKMeans',
    'SklearnKMeans',
    'assign_labels',
    'cluster',
    'cluster_batch',
    'compute_inertia',
    'update_centroids',
]
