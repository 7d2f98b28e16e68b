"""
Unit tests for detection performance tracking.
"""

import logging

from utils.ml_performance import (
    MLPerformanceMetrics,
    MLPerformanceTracker,
    get_memory_usage_mb,
)


class TestMLPerformanceMetrics:

    def test_finish_sets_elapsed(self):
        metrics = MLPerformanceMetrics(operation_name="detect")
        metrics.finish()

        assert metrics.elapsed_ms is not None
        assert metrics.elapsed_ms >= 0

    def test_to_dict_includes_stages(self):
        metrics = MLPerformanceMetrics(operation_name="detect", transaction_count=12)
        metrics.stage_ms['clustering'] = 4.5

        data = metrics.to_dict()

        assert data['operation_name'] == "detect"
        assert data['transaction_count'] == 12
        assert data['clustering_ms'] == 4.5
        assert data['feature_extraction_ms'] is None
        assert 'timestamp' in data

    def test_slow_operation_logged_as_warning(self, caplog):
        metrics = MLPerformanceMetrics(operation_name="detect")
        metrics.elapsed_ms = 12000

        with caplog.at_level(logging.INFO, logger="utils.ml_performance"):
            metrics.log_metrics()

        assert any(record.levelno == logging.WARNING for record in caplog.records)


class TestMLPerformanceTracker:

    def test_tracks_stages_and_counts(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="utils.ml_performance"):
            with MLPerformanceTracker("recurring_transaction_detection") as tracker:
                tracker.set_transaction_count(10)
                with tracker.stage("feature_extraction"):
                    pass
                with tracker.stage("clustering"):
                    pass
                tracker.set_clusters_identified(2)
                tracker.set_noise_points(3)
                tracker.add_windows_evaluated(9)
                tracker.add_windows_evaluated(9)
                tracker.set_patterns_detected(1)

        metrics = tracker.metrics
        assert metrics.transaction_count == 10
        assert set(metrics.stage_ms) == {"feature_extraction", "clustering"}
        assert metrics.windows_evaluated == 18
        assert metrics.patterns_detected == 1
        assert metrics.elapsed_ms is not None
        assert any(
            getattr(record, 'ml_metrics', {}).get('clusters_identified') == 2
            for record in caplog.records
        )

    def test_memory_usage_is_reported(self):
        assert get_memory_usage_mb() > 0
