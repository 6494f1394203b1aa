"""
flag_clusters - K-Means grouping of flags by average RGB color.

Este paquete agrupa un conjunto pequeño de entidades descritas por un color
promedio (banderas estatales) en k grupos mediante el algoritmo de Lloyd.

Example:
    >>> from flag_clusters import cluster, points_from_records
    >>> points = points_from_records(records)
    >>> result = cluster(points, k=4)
    >>> groups = result.group_points(points)
"""

from .exceptions import ClusteringError, InvalidInputError
from .kmeans import KMeansConfig, KMeansResult, LloydKMeans, cluster, cluster_batch
from .points import ColorPoint, points_from_records

__all__ = [
    'ClusteringError',
    'InvalidInputError',
    'KMeansConfig',
    'KMeansResult',
    'LloydKMeans',
    'cluster',
    'cluster_batch',
    'ColorPoint',
    'points_from_records',
]
