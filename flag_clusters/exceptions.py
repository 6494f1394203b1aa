"""Exceptions for the clustering package."""


class ClusteringError(Exception):
    """Base class for clustering-related exceptions."""

    pass


class InvalidInputError(ClusteringError, ValueError):
    """Raised when points, k or iteration bounds cannot be clustered."""

    pass
