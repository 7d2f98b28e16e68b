"""
Configuration classes for recurring transaction detection.

Centralizes the clustering radius, distance weights and scoring constants
used in the detection pipeline. The scoring constants were chosen
empirically and are kept at their historical values so results stay
comparable across releases.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class ClusteringConfig:
    """Configuration for the DBSCAN clustering engine."""

    epsilon: float = 0.5
    """Neighborhood radius: transactions closer than this are neighbors."""

    min_neighbors: int = 1
    """Neighbors (excluding the point itself) a point needs to be a cluster core."""

    def __post_init__(self):
        if self.epsilon <= 0:
            raise ValueError(f"epsilon must be positive, got {self.epsilon}")
        if self.min_neighbors < 0:
            raise ValueError(f"min_neighbors must be non-negative, got {self.min_neighbors}")


@dataclass
class DistanceConfig:
    """
    Weights for the transaction dissimilarity.

    distance = text_weight * cosine_distance + amount_weight * relative_amount_difference
    """

    text_weight: float = 1.0
    """Weight of the description term-vector cosine distance (range 0..1)."""

    amount_weight: float = 1.0
    """Weight of the relative amount difference (range 0..2, 2 when signs differ)."""

    def __post_init__(self):
        if self.text_weight < 0 or self.amount_weight < 0:
            raise ValueError(
                f"Distance weights must be non-negative, got "
                f"text={self.text_weight}, amount={self.amount_weight}"
            )
        if self.text_weight == 0 and self.amount_weight == 0:
            raise ValueError("At least one distance weight must be positive")


@dataclass
class ScoringConfig:
    """Constants used when scoring a cluster against candidate windows."""

    min_confidence: float = 0.65
    """A cluster's best window is emitted only if its confidence exceeds this."""

    miss_penalty: float = 1.1
    """Each missed occurrence costs this many hits."""

    ended_fuzz_multiplier: int = 2
    """
    A series has ended when its predicted next date is older than the latest
    observed transaction by more than this many fuzz windows.
    """


class DetectionConfig:
    """
    Master configuration for recurring transaction detection.

    Aggregates all configuration classes into a single configuration object.
    """

    def __init__(
        self,
        clustering: Optional[ClusteringConfig] = None,
        distance: Optional[DistanceConfig] = None,
        scoring: Optional[ScoringConfig] = None
    ):
        """
        Initialize detection configuration.

        Args:
            clustering: DBSCAN clustering config (creates default if None)
            distance: Distance weighting config (creates default if None)
            scoring: Window scoring config (creates default if None)
        """
        self.clustering = clustering or ClusteringConfig()
        self.distance = distance or DistanceConfig()
        self.scoring = scoring or ScoringConfig()


# Default configuration instance
DEFAULT_CONFIG = DetectionConfig()


# Named constants mapping to the default configuration values
EPSILON = DEFAULT_CONFIG.clustering.epsilon
MIN_NEIGHBORS = DEFAULT_CONFIG.clustering.min_neighbors
MIN_CONFIDENCE = DEFAULT_CONFIG.scoring.min_confidence
MISS_PENALTY = DEFAULT_CONFIG.scoring.miss_penalty
ENDED_FUZZ_MULTIPLIER = DEFAULT_CONFIG.scoring.ended_fuzz_multiplier
