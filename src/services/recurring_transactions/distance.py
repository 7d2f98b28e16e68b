"""
Transaction dissimilarity.

Combines how different two descriptions are (cosine distance between their
TF-IDF vectors) with how different their amounts are (relative difference).
Charges in the same recurring series usually share a merchant and have
identical or slowly drifting amounts, so both terms are small for them.

The scalar and matrix forms compute the same values; DBSCAN uses the
matrix form.
"""

from typing import Optional, Sequence

import numpy as np

from services.recurring_transactions.config import DistanceConfig
from services.recurring_transactions.preprocessor import Datum


def text_distance(u: np.ndarray, v: np.ndarray) -> float:
    """
    Cosine distance between two non-negative term vectors, in [0, 1].

    Two empty (all-zero) vectors are considered identical; an empty vector
    is maximally distant from a non-empty one.
    """
    norm_u = float(np.linalg.norm(u))
    norm_v = float(np.linalg.norm(v))
    if norm_u == 0.0 or norm_v == 0.0:
        return 0.0 if norm_u == norm_v else 1.0
    similarity = float(np.dot(u, v)) / (norm_u * norm_v)
    return float(np.clip(1.0 - similarity, 0.0, 1.0))


def amount_distance(a: int, b: int) -> float:
    """
    Relative difference between two signed amounts.

    0 for equal amounts, approaching 1 as they diverge, and up to 2 when a
    debit is compared with a credit.
    """
    if a == b:
        return 0.0
    return abs(a - b) / max(abs(a), abs(b))


def transaction_distance(x: Datum, y: Datum, config: Optional[DistanceConfig] = None) -> float:
    """Weighted dissimilarity between two datums."""
    config = config or DistanceConfig()
    if x is y:
        return 0.0
    return (
        config.text_weight * text_distance(x.vector, y.vector)
        + config.amount_weight * amount_distance(x.transaction.amount, y.transaction.amount)
    )


def pairwise_distances(datums: Sequence[Datum], config: Optional[DistanceConfig] = None) -> np.ndarray:
    """
    Symmetric (n, n) distance matrix with a zero diagonal.

    Args:
        datums: Datums to compare
        config: Distance weights (defaults if None)

    Returns:
        Array where [i, j] == transaction_distance(datums[i], datums[j])
    """
    config = config or DistanceConfig()
    n = len(datums)
    if n == 0:
        return np.zeros((0, 0))

    vectors = np.vstack([datum.vector for datum in datums]).astype(float)
    norms = np.linalg.norm(vectors, axis=1)
    empty = norms == 0.0

    safe_norms = np.where(empty, 1.0, norms)
    unit = vectors / safe_norms[:, None]
    similarity = unit @ unit.T
    # Empty vs empty is identical, empty vs non-empty is unrelated
    similarity[np.logical_and(empty[:, None], empty[None, :])] = 1.0
    similarity[np.logical_xor(empty[:, None], empty[None, :])] = 0.0
    text = np.clip(1.0 - similarity, 0.0, 1.0)

    amounts = np.array([datum.transaction.amount for datum in datums], dtype=float)
    difference = np.abs(amounts[:, None] - amounts[None, :])
    scale = np.maximum(np.abs(amounts)[:, None], np.abs(amounts)[None, :])
    amount = np.divide(difference, scale, out=np.zeros_like(difference), where=scale > 0)

    distances = config.text_weight * text + config.amount_weight * amount
    distances = (distances + distances.T) / 2
    np.fill_diagonal(distances, 0.0)
    return distances
