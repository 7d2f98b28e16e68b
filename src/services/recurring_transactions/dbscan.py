"""
Density-based clustering of transactions.

Wraps scikit-learn's DBSCAN over a precomputed transaction distance matrix.
Clusters are discovered by scanning points in input order and expanding
from core points, so for a fixed input order the assignment (including
which cluster claims a shared border point) is reproducible.
"""

import logging
from dataclasses import dataclass
from typing import FrozenSet, List, Optional, Sequence

import numpy as np
from sklearn.cluster import DBSCAN as SklearnDBSCAN

from services.recurring_transactions.config import DistanceConfig
from services.recurring_transactions.distance import pairwise_distances
from services.recurring_transactions.preprocessor import Datum

logger = logging.getLogger(__name__)

NOISE_LABEL = -1


@dataclass(frozen=True)
class Cluster:
    """A group of density-connected datums, identified by their indices."""
    label: int
    items: FrozenSet[int]

    def __len__(self) -> int:
        return len(self.items)


class DBSCAN:
    """
    Clusters a fixed set of datums.

    A point is a core point when at least `min_neighbors` other points lie
    within `epsilon` of it. Clusters grow from core points through every
    density-reachable point; non-core points reached this way join as border
    members. Points reachable from no core point are noise and belong to no
    cluster.
    """

    def __init__(
        self,
        dataset: Sequence[Datum],
        epsilon: float,
        min_neighbors: int,
        distance_config: Optional[DistanceConfig] = None
    ):
        """
        Initialize the clustering engine.

        Args:
            dataset: Datums to cluster, in a stable order
            epsilon: Neighborhood radius
            min_neighbors: Neighbors required (excluding the point) for a core point
            distance_config: Distance weights (defaults if None)
        """
        if epsilon <= 0:
            raise ValueError(f"epsilon must be positive, got {epsilon}")
        if min_neighbors < 0:
            raise ValueError(f"min_neighbors must be non-negative, got {min_neighbors}")

        self.dataset = list(dataset)
        self.epsilon = epsilon
        self.min_neighbors = min_neighbors
        self.distance_config = distance_config or DistanceConfig()
        self.labels: np.ndarray = np.full(len(self.dataset), NOISE_LABEL, dtype=int)

    def calculate(self) -> List[Cluster]:
        """
        Run DBSCAN over the dataset.

        Returns:
            Clusters in discovery order; noise points are not included
        """
        n_samples = len(self.dataset)
        self.labels = np.full(n_samples, NOISE_LABEL, dtype=int)

        # sklearn counts the point itself towards min_samples
        min_samples = self.min_neighbors + 1
        if n_samples < min_samples:
            logger.debug(f"{n_samples} datums cannot reach density {min_samples}; all noise")
            return []

        distances = pairwise_distances(self.dataset, self.distance_config)

        logger.debug(f"Running DBSCAN with eps={self.epsilon}, min_samples={min_samples}")
        model = SklearnDBSCAN(eps=self.epsilon, min_samples=min_samples, metric='precomputed')
        self.labels = model.fit_predict(distances)

        clusters = []
        for label in sorted(set(self.labels.tolist()) - {NOISE_LABEL}):
            members = np.flatnonzero(self.labels == label)
            clusters.append(Cluster(label=label, items=frozenset(int(i) for i in members)))

        n_noise = int(np.sum(self.labels == NOISE_LABEL))
        logger.info(f"DBSCAN complete: {len(clusters)} clusters, {n_noise} noise points")

        return clusters

    @property
    def noise(self) -> List[int]:
        """Indices of datums that belong to no cluster after calculate()."""
        return [int(i) for i in np.flatnonzero(self.labels == NOISE_LABEL)]
