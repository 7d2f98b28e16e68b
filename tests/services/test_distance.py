"""
Unit tests for the transaction distance function.
"""

import numpy as np
import pytest
from datetime import datetime

from services.recurring_transactions.config import DistanceConfig
from services.recurring_transactions.distance import (
    amount_distance,
    pairwise_distances,
    text_distance,
    transaction_distance,
)
from services.recurring_transactions.preprocessor import PreProcessor
from tests.fixtures.recurring_transaction_fixtures import create_transaction


@pytest.fixture
def datums():
    preprocessor = PreProcessor()
    for name, amount in [
        ("NETFLIX.COM", -1599),
        ("NETFLIX.COM", -1599),
        ("NETFLIX.COM", -2299),
        ("SHELL OIL 57442", -4000),
        ("ACME PAYROLL", 250000),
        ("12345", -1599),
    ]:
        preprocessor.add_transaction(create_transaction(datetime(2023, 1, 1), name, amount))
    return preprocessor.get_datums()


class TestTextDistance:

    def test_identical_vectors(self):
        v = np.array([0.6, 0.8])
        assert text_distance(v, v) == pytest.approx(0.0)

    def test_orthogonal_vectors(self):
        assert text_distance(np.array([1.0, 0.0]), np.array([0.0, 1.0])) == pytest.approx(1.0)

    def test_empty_vectors(self):
        zero = np.zeros(2)
        assert text_distance(zero, zero) == 0.0
        assert text_distance(zero, np.array([1.0, 0.0])) == 1.0


class TestAmountDistance:

    def test_equal_amounts(self):
        assert amount_distance(-1599, -1599) == 0.0
        assert amount_distance(0, 0) == 0.0

    def test_relative_difference(self):
        assert amount_distance(-1000, -1100) == pytest.approx(100 / 1100)

    def test_symmetric(self):
        assert amount_distance(-1000, -1100) == amount_distance(-1100, -1000)

    def test_opposite_signs(self):
        assert amount_distance(-1000, 1000) == pytest.approx(2.0)


class TestTransactionDistance:

    def test_self_distance_is_zero(self, datums):
        for datum in datums:
            assert transaction_distance(datum, datum) == 0.0

    def test_symmetric(self, datums):
        for x in datums:
            for y in datums:
                assert transaction_distance(x, y) == pytest.approx(transaction_distance(y, x))

    def test_non_negative(self, datums):
        for x in datums:
            for y in datums:
                assert transaction_distance(x, y) >= 0.0

    def test_duplicates_are_at_zero_distance(self, datums):
        assert transaction_distance(datums[0], datums[1]) == pytest.approx(0.0)

    def test_amount_drift_increases_distance(self, datums):
        assert transaction_distance(datums[0], datums[2]) == pytest.approx(700 / 2299)

    def test_weights_applied(self, datums):
        config = DistanceConfig(text_weight=0.0, amount_weight=2.0)
        # Same amount, unrelated text
        assert transaction_distance(datums[0], datums[5], config) == pytest.approx(0.0)
        assert transaction_distance(datums[0], datums[2], config) == pytest.approx(2 * 700 / 2299)


class TestPairwiseDistances:

    def test_empty(self):
        assert pairwise_distances([]).shape == (0, 0)

    def test_matches_scalar_distance(self, datums):
        matrix = pairwise_distances(datums)

        assert matrix.shape == (len(datums), len(datums))
        for i, x in enumerate(datums):
            for j, y in enumerate(datums):
                assert matrix[i, j] == pytest.approx(transaction_distance(x, y), abs=1e-9)

    def test_symmetric_with_zero_diagonal(self, datums):
        matrix = pairwise_distances(datums)

        np.testing.assert_allclose(matrix, matrix.T)
        assert np.all(np.diag(matrix) == 0.0)
        assert np.all(matrix >= 0.0)
