"""
Performance monitoring utilities for recurring transaction detection.

Tracks and logs the cost of each detection pass:
- Feature extraction time (term weighting / vectorization)
- Clustering time (pairwise distances + DBSCAN)
- Pattern analysis time (window scoring)
- Total execution time
- Memory usage delta
"""

import os
import time
import logging
from typing import Dict, Any, Optional
from dataclasses import dataclass, field
from datetime import datetime, timezone

import psutil

logger = logging.getLogger(__name__)

SLOW_OPERATION_MS = 10000
VERY_SLOW_OPERATION_MS = 30000

STAGES = ('feature_extraction', 'clustering', 'pattern_analysis')


@dataclass
class MLPerformanceMetrics:
    """Container for detection performance metrics."""
    operation_name: str
    start_time: float = field(default_factory=time.time)
    end_time: Optional[float] = None
    elapsed_ms: Optional[float] = None
    transaction_count: int = 0
    clusters_identified: int = 0
    noise_points: int = 0
    windows_evaluated: int = 0
    patterns_detected: int = 0
    memory_usage_mb: Optional[float] = None
    stage_ms: Dict[str, float] = field(default_factory=dict)

    def finish(self):
        """Mark the operation as finished and calculate elapsed time."""
        self.end_time = time.time()
        self.elapsed_ms = (self.end_time - self.start_time) * 1000

    def to_dict(self) -> Dict[str, Any]:
        """Convert metrics to dictionary for logging."""
        data = {
            'operation_name': self.operation_name,
            'elapsed_ms': self.elapsed_ms,
            'transaction_count': self.transaction_count,
            'clusters_identified': self.clusters_identified,
            'noise_points': self.noise_points,
            'windows_evaluated': self.windows_evaluated,
            'patterns_detected': self.patterns_detected,
            'memory_usage_mb': self.memory_usage_mb,
            'timestamp': datetime.now(timezone.utc).isoformat()
        }
        for stage in STAGES:
            data[f'{stage}_ms'] = self.stage_ms.get(stage)
        return data

    def log_metrics(self):
        """Log the metrics, escalating the level for slow runs."""
        metrics = self.to_dict()
        elapsed = self.elapsed_ms or 0.0

        if elapsed > VERY_SLOW_OPERATION_MS:
            logger.error(
                f"SLOW ML OPERATION: {self.operation_name} took {elapsed:.2f}ms",
                extra={'ml_metrics': metrics}
            )
        elif elapsed > SLOW_OPERATION_MS:
            logger.warning(
                f"Slow ML operation: {self.operation_name} took {elapsed:.2f}ms",
                extra={'ml_metrics': metrics}
            )
        else:
            logger.info(
                f"ML operation completed: {self.operation_name} in {elapsed:.2f}ms "
                f"({self.transaction_count} transactions, {self.clusters_identified} clusters, "
                f"{self.patterns_detected} patterns)",
                extra={'ml_metrics': metrics}
            )

        if self.stage_ms:
            breakdown = ", ".join(f"{stage}: {ms:.2f}ms" for stage, ms in self.stage_ms.items())
            logger.debug(
                f"ML operation breakdown for {self.operation_name}: {breakdown}",
                extra={'ml_metrics': metrics}
            )


class StageTimer:
    """Context manager recording the duration of one pipeline stage."""

    def __init__(self, metrics: MLPerformanceMetrics, stage: str):
        self.metrics = metrics
        self.stage = stage
        self.start_time: float = 0.0

    def __enter__(self):
        self.start_time = time.time()
        logger.debug(f"Starting stage: {self.stage}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        elapsed_ms = (time.time() - self.start_time) * 1000
        self.metrics.stage_ms[self.stage] = elapsed_ms
        logger.debug(f"Completed stage {self.stage} in {elapsed_ms:.2f}ms")


def get_memory_usage_mb() -> float:
    """
    Get current resident memory usage in MB.

    Returns:
        Memory usage in MB, or 0.0 if the process cannot be inspected
    """
    try:
        process = psutil.Process(os.getpid())
        return process.memory_info().rss / (1024 * 1024)
    except psutil.Error as e:
        logger.warning(f"Unable to get memory usage: {e}")
        return 0.0


class MLPerformanceTracker:
    """
    Context manager for tracking one detection pass.

    Usage:
        with MLPerformanceTracker("recurring_transaction_detection") as tracker:
            tracker.set_transaction_count(len(transactions))

            with tracker.stage('feature_extraction'):
                datums = preprocessor.get_datums()

            with tracker.stage('clustering'):
                clusters = dbscan.calculate()
            tracker.set_clusters_identified(len(clusters))
    """

    def __init__(self, operation_name: str):
        self.metrics = MLPerformanceMetrics(operation_name=operation_name)
        self.memory_at_start = get_memory_usage_mb()

    def __enter__(self):
        logger.debug(f"Starting ML operation: {self.metrics.operation_name}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.metrics.finish()

        memory_at_end = get_memory_usage_mb()
        if memory_at_end > 0 and self.memory_at_start > 0:
            self.metrics.memory_usage_mb = memory_at_end - self.memory_at_start

        self.metrics.log_metrics()

    def stage(self, stage_name: str) -> StageTimer:
        """Create a context manager for tracking a stage."""
        return StageTimer(self.metrics, stage_name)

    def set_transaction_count(self, count: int):
        self.metrics.transaction_count = count

    def set_clusters_identified(self, count: int):
        self.metrics.clusters_identified = count

    def set_noise_points(self, count: int):
        self.metrics.noise_points = count

    def add_windows_evaluated(self, count: int):
        self.metrics.windows_evaluated += count

    def set_patterns_detected(self, count: int):
        self.metrics.patterns_detected = count
