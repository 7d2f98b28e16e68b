"""
Recurring Transaction Detection Service.

This module orchestrates recurring transaction detection for a single bank
account: description vectorization, DBSCAN clustering and scoring each
cluster against candidate recurrence windows.

## Detection Pipeline

```mermaid
graph TD
    A[Transactions] --> B[PreProcessor: TF-IDF term vectors]
    B --> C[Pairwise distances: text + amount]
    C --> D[DBSCAN clustering]
    D --> E[Per cluster: candidate windows at first date]
    E --> F[Count hits / misses per window]
    F --> G[confidence = hits - 1.1 x misses / cluster size]
    G --> H{Best window > 0.65?}
    H -->|Yes| I[RecurringTransaction]
    H -->|No| J[Dropped]
```

Every call to get_recurring_transactions() recomputes the clustering from
the full set of transactions added so far. A session is not safe for
concurrent use.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, tzinfo
from typing import Iterable, List, Optional, Union

from models.transaction import Transaction
from models.recurring_transaction import RecurringTransaction
from services.recurring_transactions.config import DetectionConfig, DEFAULT_CONFIG
from services.recurring_transactions.dbscan import Cluster, DBSCAN
from services.recurring_transactions.preprocessor import Datum, PreProcessor
from services.recurring_transactions.windows import Window, get_windows_for_date
from utils.ml_performance import MLPerformanceTracker
from utils.temporal_utils import add_days, hours_between, localize, resolve_timezone

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Member:
    """A cluster member with its date expressed in the session timezone."""
    transaction: Transaction
    date: datetime


class RecurringTransactionDetection:
    """
    Detection session for one bank account.

    Feed transactions with add_transaction(), then call
    get_recurring_transactions() for the best-supported schedule of each
    cluster of similar transactions.
    """

    def __init__(
        self,
        timezone: Union[str, tzinfo],
        config: Optional[DetectionConfig] = None
    ):
        """
        Initialize the detection session.

        Args:
            timezone: IANA name or tzinfo the account's dates are expressed in
            config: Optional detection configuration. If None, uses DEFAULT_CONFIG.

        Raises:
            ValueError: If the timezone cannot be resolved
        """
        self.timezone = resolve_timezone(timezone)
        self.config = config or DEFAULT_CONFIG
        self.preprocessor = PreProcessor()
        self._latest_observed_date: Optional[datetime] = None

    @property
    def latest_observed_date(self) -> Optional[datetime]:
        """Latest transaction date added so far, or None for an empty session."""
        return self._latest_observed_date

    @property
    def transaction_count(self) -> int:
        return len(self.preprocessor.documents)

    def add_transaction(self, txn: Transaction) -> None:
        """Add a transaction to the session and advance the date watermark."""
        self.preprocessor.add_transaction(txn)
        date = localize(txn.date, self.timezone)
        if self._latest_observed_date is None or date > self._latest_observed_date:
            self._latest_observed_date = date

    def get_recurring_transactions(self) -> List[RecurringTransaction]:
        """
        Run the full pipeline over every transaction added so far.

        Returns:
            At most one RecurringTransaction per cluster, in cluster order
        """
        if self.transaction_count == 0:
            logger.info("No transactions to analyze")
            return []

        clustering = self.config.clustering
        with MLPerformanceTracker("recurring_transaction_detection") as tracker:
            tracker.set_transaction_count(self.transaction_count)

            with tracker.stage("feature_extraction"):
                datums = self.preprocessor.get_datums()

            with tracker.stage("clustering"):
                dbscan = DBSCAN(
                    datums,
                    epsilon=clustering.epsilon,
                    min_neighbors=clustering.min_neighbors,
                    distance_config=self.config.distance
                )
                clusters = dbscan.calculate()
                tracker.set_clusters_identified(len(clusters))
                tracker.set_noise_points(len(dbscan.noise))

            with tracker.stage("pattern_analysis"):
                results = []
                for cluster in clusters:
                    best = self._analyze_cluster(cluster, datums, tracker)
                    if best is not None:
                        results.append(best)
                tracker.set_patterns_detected(len(results))

        logger.info(f"Detection complete: found {len(results)} recurring transactions")
        return results

    def _analyze_cluster(
        self,
        cluster: Cluster,
        datums: List[Datum],
        tracker: MLPerformanceTracker
    ) -> Optional[RecurringTransaction]:
        """
        Score every candidate window for a cluster and keep the best.

        Returns:
            The best RecurringTransaction, or None if no window matched or the
            best one is not confident enough
        """
        members = [
            _Member(transaction=datums[index].transaction,
                    date=localize(datums[index].transaction.date, self.timezone))
            for index in sorted(cluster.items)
        ]
        # Stable sort keeps input order for same-day transactions
        members.sort(key=lambda member: member.date)

        windows = get_windows_for_date(members[0].date, self.timezone)
        tracker.add_windows_evaluated(len(windows))

        scores = []
        for window in windows:
            score = self._score_window(window, members)
            if score is not None:
                scores.append(score)

        if not scores:
            logger.debug(f"Cluster {cluster.label}: no window matched any of {len(members)} transactions")
            return None

        # max() returns the first of equal scores, i.e. candidate order breaks ties
        best = max(scores, key=lambda score: score.confidence)
        logger.debug(
            f"Cluster {cluster.label} ({len(members)} transactions): best window "
            f"{best.window.value} with confidence {best.confidence:.3f}"
        )

        if best.confidence > self.config.scoring.min_confidence:
            return best
        return None

    def _score_window(self, window: Window, members: List[_Member]) -> Optional[RecurringTransaction]:
        """
        Match a window's occurrences against cluster members.

        Each occurrence is a hit when some member falls within the window's
        fuzz of it (the first such member is recorded), otherwise a miss.
        Members are not consumed, so one transaction may satisfy several
        occurrences.
        """
        scoring = self.config.scoring
        start, end = members[0].date, members[-1].date
        fuzz_hours = window.fuzzy * 24

        occurrences = window.rule.between(
            add_days(start, -window.fuzzy), add_days(end, window.fuzzy), inc=False
        )

        hits: List[datetime] = []
        matches: List[int] = []
        misses = 0
        for occurrence in occurrences:
            member = next(
                (m for m in members if hours_between(m.date, occurrence) <= fuzz_hours),
                None
            )
            if member is None:
                misses += 1
                continue
            hits.append(occurrence)
            matches.append(member.transaction.transaction_id)

        if not hits:
            return None

        next_occurrence = window.rule.after(hits[-1], inc=False)
        if next_occurrence is None:
            return None

        ended_cutoff = add_days(self._latest_observed_date, -window.fuzzy * scoring.ended_fuzz_multiplier)
        confidence = (len(hits) - scoring.miss_penalty * misses) / len(members)

        return RecurringTransaction(
            name=members[-1].transaction.display_name,
            window=window.type,
            rule=window.rule,
            first=hits[0],
            last=hits[-1],
            next=next_occurrence,
            ended=next_occurrence < ended_cutoff,
            confidence=confidence,
            matches=matches,
        )


def detect_recurring_transactions(
    transactions: Iterable[Transaction],
    timezone: Union[str, tzinfo],
    config: Optional[DetectionConfig] = None
) -> List[RecurringTransaction]:
    """
    Detect recurring transactions in one pass.

    Args:
        transactions: Transactions of a single bank account
        timezone: IANA name or tzinfo the account's dates are expressed in
        config: Optional detection configuration

    Returns:
        List of RecurringTransaction objects
    """
    detection = RecurringTransactionDetection(timezone, config=config)
    for txn in transactions:
        detection.add_transaction(txn)
    return detection.get_recurring_transactions()
