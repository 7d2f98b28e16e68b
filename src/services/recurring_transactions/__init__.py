"""
Recurring Transaction Detection.

This package detects recurring transactions (subscriptions, rent, paychecks,
utility bills) in a bank account's transaction history without any
external labeling.

Public API:
    - RecurringTransactionDetection: Detection session (add transactions, then detect)
    - detect_recurring_transactions: One-shot detection over a transaction list
    - PreProcessor: Description normalization and TF-IDF vectorization
    - DBSCAN: Density-based clustering over transaction distances
    - get_windows_for_date: Candidate recurrence windows for an anchor date
    - DetectionConfig: Configuration for detection parameters
    - DEFAULT_CONFIG: Default configuration instance
"""

from services.recurring_transactions.detection_service import (
    RecurringTransactionDetection,
    detect_recurring_transactions,
)
from services.recurring_transactions.preprocessor import (
    Datum,
    Document,
    PreProcessor,
    normalize_description,
    tokenize,
)
from services.recurring_transactions.distance import (
    amount_distance,
    pairwise_distances,
    text_distance,
    transaction_distance,
)
from services.recurring_transactions.dbscan import Cluster, DBSCAN
from services.recurring_transactions.windows import Window, get_windows_for_date
from services.recurring_transactions.config import (
    DetectionConfig,
    DEFAULT_CONFIG,
    ClusteringConfig,
    DistanceConfig,
    ScoringConfig,
    EPSILON,
    MIN_NEIGHBORS,
    MIN_CONFIDENCE,
    MISS_PENALTY,
    ENDED_FUZZ_MULTIPLIER,
)

__all__ = [
    'RecurringTransactionDetection',
    'detect_recurring_transactions',
    'Datum',
    'Document',
    'PreProcessor',
    'normalize_description',
    'tokenize',
    'amount_distance',
    'pairwise_distances',
    'text_distance',
    'transaction_distance',
    'Cluster',
    'DBSCAN',
    'Window',
    'get_windows_for_date',
    'DetectionConfig',
    'DEFAULT_CONFIG',
    'ClusteringConfig',
    'DistanceConfig',
    'ScoringConfig',
    'EPSILON',
    'MIN_NEIGHBORS',
    'MIN_CONFIDENCE',
    'MISS_PENALTY',
    'ENDED_FUZZ_MULTIPLIER',
]
