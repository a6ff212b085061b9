"""Unit tests for StationaryRanker."""

import logging

import numpy as np
import pytest

from textplanner.ranking import StationaryRanker, TransitionMatrixBuilder
from textplanner.similarity import PairwiseSimilarity


class TestStationaryRanker:
    """Tests for power iteration."""

    @pytest.fixture
    def chain(self):
        # Stationary distribution is (9/14, 5/14)
        return np.array([[0.5, 0.5], [0.9, 0.1]])

    def test_single_item(self):
        ranker = StationaryRanker()
        np.testing.assert_array_equal(ranker.rank(np.array([[1.0]])), [1.0])
        assert ranker.last_iterations == 0

    def test_empty_matrix(self):
        assert StationaryRanker().rank(np.zeros((0, 0))).size == 0

    def test_stationary_distribution(self, chain):
        v = StationaryRanker().rank(chain, epsilon=1e-12)
        np.testing.assert_allclose(v, [9 / 14, 5 / 14], atol=1e-9)
        assert v.sum() == pytest.approx(1.0)

    def test_result_is_fixed_point(self, chain):
        ranker = StationaryRanker()
        v = ranker.rank(chain, epsilon=1e-12)
        np.testing.assert_allclose(chain.T @ v, v, atol=1e-9)

    def test_rank_is_idempotent(self, chain):
        ranker = StationaryRanker()
        v1 = ranker.rank(chain)
        v2 = ranker.rank(chain)
        np.testing.assert_array_equal(v1, v2)

    def test_two_symmetric_items(self):
        sim = PairwiseSimilarity.from_matrix(["a", "b"], [[0.0, 1.0], [1.0, 0.0]])
        matrix = TransitionMatrixBuilder().build(["a", "b"], sim)
        np.testing.assert_allclose(StationaryRanker().rank(matrix), [0.5, 0.5])

    def test_iteration_cap(self, chain, caplog):
        ranker = StationaryRanker(max_iterations=1)
        with caplog.at_level(logging.WARNING):
            v = ranker.rank(chain)
        assert not ranker.converged
        assert ranker.last_iterations == 1
        assert "did not converge" in caplog.text
        np.testing.assert_allclose(v, [0.7, 0.3])

    def test_invalid_cap_raises(self):
        with pytest.raises(ValueError):
            StationaryRanker(max_iterations=0)

    def test_negative_entries_fail(self):
        with pytest.raises(AssertionError):
            StationaryRanker().rank(np.array([[1.5, -0.5], [0.5, 0.5]]))

    def test_nan_entries_fail(self):
        with pytest.raises(AssertionError):
            StationaryRanker().rank(np.array([[np.nan, 1.0], [0.5, 0.5]]))

    def test_non_square_fails(self):
        with pytest.raises(AssertionError):
            StationaryRanker().rank(np.array([[0.5, 0.5]]))

    def test_debug_ranking_output(self, chain, caplog):
        with caplog.at_level(logging.DEBUG, logger="textplanner.ranking.power_iteration"):
            StationaryRanker().rank(chain, labels=["first", "second"])
        assert "first" in caplog.text
