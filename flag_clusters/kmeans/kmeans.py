"""
K-Means Clustering for Flag Colors

Lloyd's algorithm over 3-dimensional points (average RGB per flag):
random initialization with replacement, nearest-centroid assignment,
mean update with random re-seeding of empty groups, and an absolute
tolerance on centroid movement.

Objective Function: J(V) = Σ Σ ||xn - vl||²
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import numpy as np
from sklearn.cluster import KMeans as SklearnKMeansAlgorithm

from ..exceptions import InvalidInputError
from ..points import ColorPoint, extract_vectors
from ..utils.logging import get_logger
from .config import KMeansConfig

logger = get_logger(__name__)


# ============================================================================
# Results
# ============================================================================

@dataclass
class KMeansResult:
    """
    Results from k-means clustering.

    Labels and centroids always come from the same iteration: the labels of
    the last assignment step and the centroids updated from them.
    """
    labels: np.ndarray
    """Group index for each input point. Shape: (N,)"""

    centroids: np.ndarray
    """Centroid per group. Shape: (n_clusters, 3)"""

    inertia: float
    """Objective function J(V) for (labels, centroids)."""

    n_iter: int
    """Number of iterations executed."""

    converged: bool
    """Whether the centroids stabilized within tol before max_iter."""

    inertia_history: List[float] = field(default_factory=list)
    """Inertia after each iteration's update step."""

    n_reseeded: int = 0
    """Total number of empty-group re-seeds across all iterations."""

    @property
    def n_clusters(self) -> int:
        return len(self.centroids)

    def get_cluster_sizes(self) -> Dict[int, int]:
        """
        Get the size of each cluster, including empty ones.

        Returns:
            Dictionary mapping cluster_id -> count
        """
        counts = np.bincount(self.labels, minlength=self.n_clusters)
        return {cluster_id: int(count) for cluster_id, count in enumerate(counts)}

    def get_cluster_members(self, cluster_id: int) -> np.ndarray:
        """
        Get indices of all members of a cluster.

        Args:
            cluster_id: ID of the cluster, in [0, n_clusters)

        Returns:
            Array of input positions belonging to this cluster
        """
        if not 0 <= cluster_id < self.n_clusters:
            raise ValueError(
                f"cluster_id must be in [0, {self.n_clusters}), got {cluster_id}"
            )
        return np.flatnonzero(self.labels == cluster_id)

    def group_points(self, points: Sequence[ColorPoint]) -> Dict[int, List[ColorPoint]]:
        """
        Group the caller's points by cluster, keeping input order.

        Every cluster appears in the mapping, empty ones with an empty list.

        Args:
            points: The same sequence that was clustered

        Returns:
            Dictionary mapping cluster_id -> points
        """
        if len(points) != len(self.labels):
            raise InvalidInputError(
                f"Expected {len(self.labels)} points, got {len(points)}"
            )

        groups: Dict[int, List[ColorPoint]] = {k: [] for k in range(self.n_clusters)}
        for point, label in zip(points, self.labels):
            groups[int(label)].append(point)
        return groups


# ============================================================================
# Algorithm Steps
# ============================================================================

def _draw_index(rng, n: int) -> int:
    """Draw one point index uniformly from [0, n)."""
    return int(rng.integers(0, n))


def squared_distances(vectors: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    """
    Squared Euclidean distance from every point to every centroid.

    Args:
        vectors: Points, shape (N, 3)
        centroids: Centroids, shape (K, 3)

    Returns:
        distances: Shape (N, K)
    """
    diff = vectors[:, np.newaxis, :] - centroids[np.newaxis, :, :]
    return np.sum(diff ** 2, axis=2)


def assign_labels(vectors: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    """
    Assign each point to its nearest centroid.

    np.argmin returns the first minimum, so exact ties go to the lowest
    group index.

    Args:
        vectors: Points, shape (N, 3)
        centroids: Centroids, shape (K, 3)

    Returns:
        labels: Group indices, shape (N,)
    """
    return np.argmin(squared_distances(vectors, centroids), axis=1)


def update_centroids(
    vectors: np.ndarray,
    labels: np.ndarray,
    n_clusters: int,
    draw_index: Callable[[], int]
) -> Tuple[np.ndarray, List[int]]:
    """
    Recompute centroids as the mean of their assigned points.

    A group with no points is re-seeded with a copy of the point returned by
    draw_index(). Draws happen in increasing group order.

    Args:
        vectors: Points, shape (N, 3)
        labels: Current assignment, shape (N,)
        n_clusters: Number of groups (K)
        draw_index: Returns a random point index for re-seeding

    Returns:
        centroids: New centroids, shape (K, 3)
        reseeded: Group indices that were re-seeded
    """
    sums = np.zeros((n_clusters, vectors.shape[1]))
    np.add.at(sums, labels, vectors)
    counts = np.bincount(labels, minlength=n_clusters)

    centroids = np.empty_like(sums)
    reseeded = []
    for j in range(n_clusters):
        if counts[j] > 0:
            centroids[j] = sums[j] / counts[j]
        else:
            centroids[j] = vectors[draw_index()]
            reseeded.append(j)

    return centroids, reseeded


def compute_inertia(
    vectors: np.ndarray,
    labels: np.ndarray,
    centroids: np.ndarray
) -> float:
    """
    Compute k-means objective function J(V).

    Args:
        vectors: Points, shape (N, 3)
        labels: Cluster assignments, shape (N,)
        centroids: Cluster centers, shape (K, 3)

    Returns:
        inertia: Sum of squared distances to the assigned centroid
    """
    return float(np.sum((vectors - centroids[labels]) ** 2))


# ============================================================================
# Abstract Base Class (Interface)
# ============================================================================

class BaseKMeans(ABC):
    """
    Abstract base class for k-means clustering implementations.

    - LloydKMeans: From-scratch Lloyd's algorithm (the engine)
    - SklearnKMeans: Wrapper around scikit-learn, used as a cross-check

    Inputs are ColorPoints or any (N, 3) array-like; they are never mutated.
    """

    def __init__(self, config: Optional[KMeansConfig] = None):
        """
        Initialize k-means clusterer.

        Args:
            config: Configuration parameters. If None, uses defaults.
        """
        self.config = config or KMeansConfig()
        self._fitted = False
        self._centroids: Optional[np.ndarray] = None

    @abstractmethod
    def fit(self, points) -> 'BaseKMeans':
        """Fit k-means on the points and return self."""
        pass

    @abstractmethod
    def fit_predict(self, points) -> KMeansResult:
        """Fit k-means and return complete results."""
        pass

    @property
    def centroids(self) -> np.ndarray:
        if not self._fitted:
            raise RuntimeError("Must call fit() before accessing centroids")
        return self._centroids

    def predict(self, points) -> np.ndarray:
        """
        Run one assignment step against the fitted centroids.

        Args:
            points: ColorPoints or array of shape (N, 3)

        Returns:
            labels: Cluster assignments, shape (N,)

        Raises:
            RuntimeError: If called before fit()
        """
        if not self._fitted:
            raise RuntimeError(
                "Must call fit() before predict(). "
                "Or use fit_predict() to do both."
            )
        return assign_labels(extract_vectors(points), self._centroids)

    def compute_inertia(self, points, labels: np.ndarray) -> float:
        """J(V) of the given labels against the fitted centroids."""
        return compute_inertia(extract_vectors(points), labels, self.centroids)


# ============================================================================
# Lloyd Implementation
# ============================================================================

class LloydKMeans(BaseKMeans):
    """
    Lloyd's k-means with random initialization and random re-seeding.

    Algorithm:
    1. Draw k points uniformly with replacement as initial centroids
    2. Assign each point to the nearest centroid
    3. Update centroids as the mean of their points (re-seed empty groups)
    4. Repeat until no component moves by more than tol, or max_iter

    k larger than the number of points is accepted: some groups start on
    duplicate points, stay empty and get re-seeded on every iteration.

    Example:
        >>> kmeans = LloydKMeans(KMeansConfig(n_clusters=4, random_state=0))
        >>> result = kmeans.fit_predict(points)
        >>> print(f"Converged: {result.converged} after {result.n_iter} iterations")
    """

    def __init__(self, config: Optional[KMeansConfig] = None, rng=None):
        """
        Initialize Lloyd's k-means.

        Args:
            config: K-means configuration
            rng: Randomness source exposing integers(low, high), e.g. a
                 numpy Generator. If None, each fit builds its own generator
                 from config.random_state.
        """
        super().__init__(config)
        self._rng = rng

    def fit(self, points) -> 'LloydKMeans':
        self.fit_predict(points)
        return self

    def fit_predict(self, points) -> KMeansResult:
        """
        Fit k-means and return complete results.

        Args:
            points: ColorPoints or array of shape (N, 3)

        Returns:
            result: KMeansResult with labels, centroids and convergence info

        Raises:
            InvalidInputError: If points is empty or not (N, 3)
        """
        vectors = extract_vectors(points)
        result = self._run(vectors)

        self._centroids = result.centroids
        self._fitted = True

        return result

    def _run(self, vectors: np.ndarray) -> KMeansResult:
        rng = self._rng if self._rng is not None else np.random.default_rng(self.config.random_state)
        n = len(vectors)
        k = self.config.n_clusters

        def draw() -> int:
            return _draw_index(rng, n)

        # Fancy indexing copies, so centroids never alias the input
        centroids = vectors[[draw() for _ in range(k)]]

        labels = np.zeros(n, dtype=np.intp)
        history: List[float] = []
        n_reseeded = 0
        converged = False
        n_iter = 0

        for iteration in range(1, self.config.max_iter + 1):
            labels = assign_labels(vectors, centroids)
            new_centroids, reseeded = update_centroids(vectors, labels, k, draw)

            shift = float(np.max(np.abs(new_centroids - centroids)))
            centroids = new_centroids
            n_iter = iteration

            if reseeded:
                n_reseeded += len(reseeded)
                logger.debug(f"Iteration {iteration}: re-seeded empty groups {reseeded}")

            history.append(compute_inertia(vectors, labels, centroids))
            logger.debug(
                f"Iteration {iteration}: inertia={history[-1]:.6f}, max shift={shift:.3e}"
            )

            if shift <= self.config.tol:
                converged = True
                break

        logger.info(
            f"K-means k={k} on {n} points: {n_iter} iterations, "
            f"converged={converged}, inertia={history[-1]:.4f}"
        )

        return KMeansResult(
            labels=labels,
            centroids=centroids,
            inertia=history[-1],
            n_iter=n_iter,
            converged=converged,
            inertia_history=history,
            n_reseeded=n_reseeded
        )


# ============================================================================
# Sklearn Implementation
# ============================================================================

class SklearnKMeans(BaseKMeans):
    """
    K-means clustering using scikit-learn.

    Runs sklearn's Lloyd iteration with a single initialization, either
    'random' or explicit initial centroids. Useful to cross-check
    LloydKMeans. sklearn relocates empty clusters differently and uses a
    relative tolerance, so only well-separated inputs agree exactly.
    """

    def __init__(self, config: Optional[KMeansConfig] = None):
        super().__init__(config)
        self._sklearn_kmeans: Optional[SklearnKMeansAlgorithm] = None

    def fit(self, points, init_centroids=None) -> 'SklearnKMeans':
        """
        Fit k-means using sklearn.

        Args:
            points: ColorPoints or array of shape (N, 3)
            init_centroids: Optional initial centroids, shape (n_clusters, 3)

        Returns:
            self

        Raises:
            InvalidInputError: If there are fewer points than clusters or
                               init_centroids has the wrong shape
        """
        vectors = extract_vectors(points)
        k = self.config.n_clusters

        if k > len(vectors):
            raise InvalidInputError(
                f"sklearn requires n_clusters <= number of points, "
                f"got {k} > {len(vectors)}"
            )

        if init_centroids is None:
            init = 'random'
        else:
            init = np.array(init_centroids, dtype=np.float64)
            if init.shape != (k, vectors.shape[1]):
                raise InvalidInputError(
                    f"init_centroids must have shape ({k}, {vectors.shape[1]}), "
                    f"got {init.shape}"
                )

        self._sklearn_kmeans = SklearnKMeansAlgorithm(
            n_clusters=k,
            max_iter=self.config.max_iter,
            tol=self.config.tol,
            n_init=1,
            init=init,
            algorithm='lloyd',
            random_state=self.config.random_state
        )
        self._sklearn_kmeans.fit(vectors)

        self._centroids = self._sklearn_kmeans.cluster_centers_
        self._fitted = True

        return self

    def fit_predict(self, points, init_centroids=None) -> KMeansResult:
        """
        Fit k-means and return complete results.

        Args:
            points: ColorPoints or array of shape (N, 3)
            init_centroids: Optional initial centroids, shape (n_clusters, 3)

        Returns:
            result: KMeansResult (inertia_history is left empty)
        """
        self.fit(points, init_centroids=init_centroids)

        n_iter = int(self._sklearn_kmeans.n_iter_)

        # sklearn sets n_iter_ = max_iter if it didn't converge
        return KMeansResult(
            labels=self._sklearn_kmeans.labels_,
            centroids=self._sklearn_kmeans.cluster_centers_,
            inertia=float(self._sklearn_kmeans.inertia_),
            n_iter=n_iter,
            converged=n_iter < self.config.max_iter
        )


# ============================================================================
# Functional Interface
# ============================================================================

def cluster(
    points,
    k: int,
    max_iter: int = 100,
    rng=None,
    random_state: Optional[int] = None
) -> KMeansResult:
    """
    Partition points into k groups with Lloyd's k-means.

    Args:
        points: ColorPoints or array of shape (N, 3)
        k: Number of groups, >= 1 (may exceed the number of points)
        max_iter: Iteration bound, >= 1
        rng: Randomness source exposing integers(low, high). Overrides
             random_state when given.
        random_state: Seed for a call-local numpy Generator

    Returns:
        result: KMeansResult

    Raises:
        InvalidInputError: Empty points, k <= 0 or max_iter <= 0

    Example:
        >>> points = points_from_records(records)
        >>> result = cluster(points, k=4, random_state=7)
        >>> result.group_points(points)[0]
    """
    config = KMeansConfig(n_clusters=k, max_iter=max_iter, random_state=random_state)
    return LloydKMeans(config, rng=rng).fit_predict(points)


def cluster_batch(
    points,
    ks: Sequence[int],
    max_iter: int = 100,
    random_state: Optional[int] = None
) -> Dict[int, KMeansResult]:
    """
    Aplica K-Means a los mismos puntos para varios valores de k.

    Cada clustering es independiente y usa su propio generador, derivado de
    random_state mediante np.random.SeedSequence.spawn, de modo que el
    resultado para un k no depende de los demás k del batch.

    Args:
        points: ColorPoints o array de forma (N, 3)
        ks: Valores de k (sin repetidos)
        max_iter: Límite de iteraciones para cada clustering
        random_state: Semilla raíz; None usa entropía nueva

    Returns:
        Diccionario {k: KMeansResult}, en el orden de ks.

    Raises:
        InvalidInputError: Si ks tiene repetidos o algún k/max_iter no es
                           válido. Se valida todo antes de ejecutar nada.

    Example:
        >>> results = cluster_batch(points, ks=[2, 3, 4], random_state=0)
        >>> print(results[4].inertia)
    """
    if len(set(ks)) != len(ks):
        raise InvalidInputError(f"ks must not contain duplicates, got {list(ks)}")

    # Validar todo antes de ejecutar ningún clustering
    vectors = extract_vectors(points)
    configs = [KMeansConfig(n_clusters=k, max_iter=max_iter) for k in ks]
    seeds = np.random.SeedSequence(random_state).spawn(len(configs))

    results = {}
    for config, seed in zip(configs, seeds):
        rng = np.random.default_rng(seed)
        results[config.n_clusters] = LloydKMeans(config, rng=rng).fit_predict(vectors)

    return results
