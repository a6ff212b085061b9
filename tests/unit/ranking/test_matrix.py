"""Unit tests for transition matrix construction."""

import logging

import numpy as np
import pytest

from textplanner.ranking.matrix import (
    TransitionMatrixBuilder,
    is_row_stochastic,
    normalize_rows,
    rebase,
)
from textplanner.similarity import PairwiseSimilarity

from tests.conftest import MockSimilarity


class TestHelpers:
    """Tests for module level helpers."""

    def test_normalize_rows_makes_zero_rows_uniform(self):
        m = normalize_rows(np.array([[0.0, 2.0], [0.0, 0.0]]))
        np.testing.assert_allclose(m, [[0.0, 1.0], [0.5, 0.5]])

    def test_is_row_stochastic(self):
        assert is_row_stochastic(np.array([[0.5, 0.5], [1.0, 0.0]]))
        assert not is_row_stochastic(np.array([[0.5, 0.4], [1.0, 0.0]]))
        assert not is_row_stochastic(np.array([[1.5, -0.5], [1.0, 0.0]]))
        assert not is_row_stochastic(np.array([[1.0, 0.0]]))

    def test_rebase(self):
        np.testing.assert_allclose(rebase(np.array([0.2, 0.6, 0.4])), [0.0, 1.0, 0.5])

    def test_rebase_constant_vector(self):
        np.testing.assert_allclose(rebase(np.array([0.3, 0.3])), [1.0, 1.0])


class TestTransitionMatrixBuilder:
    """Tests for TransitionMatrixBuilder.build."""

    @pytest.fixture
    def items(self):
        return ["a", "b", "c", "d"]

    @pytest.fixture
    def similarity(self):
        return MockSimilarity({
            ("a", "b"): 0.9,
            ("a", "c"): 0.2,
            ("b", "c"): 0.5,
            ("c", "d"): -0.3,
        })

    def test_rows_are_stochastic(self, items, similarity):
        m = TransitionMatrixBuilder().build(items, similarity)
        assert m.shape == (4, 4)
        assert is_row_stochastic(m)

    def test_diagonal_is_zero(self, items, similarity):
        m = TransitionMatrixBuilder().build(items, similarity)
        # Row d has no positive similarity and is made uniform
        np.testing.assert_allclose(np.diag(m)[:3], 0.0)

    def test_empty_input(self, similarity):
        m = TransitionMatrixBuilder().build([], similarity)
        assert m.shape == (0, 0)

    def test_single_item(self, similarity):
        m = TransitionMatrixBuilder().build(["a"], similarity)
        np.testing.assert_array_equal(m, [[1.0]])

    def test_damping_out_of_range_raises(self, items, similarity):
        with pytest.raises(ValueError):
            TransitionMatrixBuilder().build(items, similarity, damping=1.5)

    def test_negative_similarity_is_discarded(self, items, similarity):
        m = TransitionMatrixBuilder().build(items, similarity)
        assert m[2, 3] == 0.0

    def test_zero_rows_are_reported(self, items, similarity, caplog):
        with caplog.at_level(logging.WARNING):
            m = TransitionMatrixBuilder().build(items, similarity)
        assert "all-zero rows" in caplog.text
        np.testing.assert_allclose(m[3], 0.25)

    def test_sim_lower_bound(self, items, similarity):
        m = TransitionMatrixBuilder().build(items, similarity, sim_lower_bound=0.5)
        assert m[0, 2] == 0.0
        assert m[0, 1] == 1.0

    def test_adjacency_filters_pairs(self, items, similarity):
        m = TransitionMatrixBuilder().build(
            items, similarity, adjacency=lambda x, y: {x, y} != {"a", "b"}
        )
        assert m[0, 1] == 0.0
        assert m[0, 2] == 1.0

    def test_full_damping_copies_bias(self, items, similarity):
        bias = {"a": 0.5, "b": 0.3, "c": 0.2, "d": 0.0}
        m = TransitionMatrixBuilder().build(items, similarity, bias=bias.__getitem__, damping=1.0)
        for row in m:
            np.testing.assert_allclose(row, [0.5, 0.3, 0.2, 0.0])

    def test_bias_blend(self):
        sim = PairwiseSimilarity.from_matrix(["a", "b"], [[0.0, 1.0], [1.0, 0.0]])
        bias = {"a": 1.0, "b": 0.0}
        m = TransitionMatrixBuilder().build(["a", "b"], sim, bias=bias.__getitem__, damping=0.2)
        np.testing.assert_allclose(m, [[0.2, 0.8], [1.0, 0.0]])

    def test_relevance_lower_bound(self):
        sim = PairwiseSimilarity.from_matrix(["a", "b"], [[0.0, 1.0], [1.0, 0.0]])
        bias = {"a": 0.8, "b": 0.1}
        m = TransitionMatrixBuilder().build(
            ["a", "b"], sim, bias=bias.__getitem__, damping=1.0, relevance_lower_bound=0.2
        )
        np.testing.assert_allclose(m, [[1.0, 0.0], [1.0, 0.0]])

    def test_all_zero_bias_falls_back_to_uniform(self):
        sim = PairwiseSimilarity.from_matrix(["a", "b"], [[0.0, 1.0], [1.0, 0.0]])
        m = TransitionMatrixBuilder().build(["a", "b"], sim, bias=lambda r: 0.0, damping=1.0)
        np.testing.assert_allclose(m, [[0.5, 0.5], [0.5, 0.5]])

    def test_workers_give_same_result(self, items, similarity):
        m1 = TransitionMatrixBuilder(workers=1).build(items, similarity)
        m2 = TransitionMatrixBuilder(workers=3).build(items, similarity)
        np.testing.assert_allclose(m1, m2)

    def test_symmetric_evaluates_each_pair_once(self, items, similarity):
        TransitionMatrixBuilder().build(items, similarity)
        assert similarity.calls == 6

    def test_random_matrices_are_stochastic(self, rng):
        for n in (2, 5, 13, 30):
            values = rng.random((n, n))
            labels = [str(i) for i in range(n)]
            sim = PairwiseSimilarity.from_matrix(labels, values)
            bias = dict(zip(labels, rng.random(n)))
            m = TransitionMatrixBuilder().build(
                labels, sim, bias=bias.__getitem__, damping=float(rng.random()), sim_lower_bound=0.3
            )
            assert is_row_stochastic(m)
