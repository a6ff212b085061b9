"""
Construction of row-stochastic transition matrices for biased ranking.

The matrix blends a pairwise similarity (or co-occurrence) signal with an
optional prior over the items, following the personalized PageRank scheme of
Biased LexRank (Otterbacher et al., 2009):

    R[i, j] = d * bias[j] + (1 - d) * X[i, j]

where X is the row-normalized similarity block and bias is normalized to sum 1.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Optional, Sequence, TypeVar

import numpy as np

T = TypeVar("T")

logger = logging.getLogger(__name__)

EPSILON = np.finfo(np.float64).eps


def row_sum_tolerance(n: int) -> float:
    return max(2 * EPSILON * n, 1e-12)


def is_row_stochastic(matrix: np.ndarray) -> bool:
    if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1]:
        return False
    if np.isnan(matrix).any() or (matrix < 0.0).any():
        return False
    sums = matrix.sum(axis=1)
    return bool(np.all(np.abs(sums - 1.0) <= row_sum_tolerance(matrix.shape[0])))


def normalize_rows(matrix: np.ndarray) -> np.ndarray:
    """Row-normalizes a non-negative matrix; all-zero rows become uniform."""
    n = matrix.shape[1]
    sums = matrix.sum(axis=1, keepdims=True)
    zero_rows = (sums == 0.0).ravel()
    out = np.divide(matrix, sums, out=np.zeros_like(matrix), where=sums > 0.0)
    out[zero_rows, :] = 1.0 / n
    return out


def normalize_vector(v: np.ndarray) -> np.ndarray:
    """Normalizes a non-negative vector to sum 1; an all-zero vector becomes uniform."""
    total = v.sum()
    if total > 0.0:
        return v / total
    return np.full(len(v), 1.0 / len(v))


def rebase(v: np.ndarray) -> np.ndarray:
    """Min-max rescaling to [0, 1]; constant vectors map to all ones."""
    v = np.asarray(v, dtype=np.float64)
    if v.size == 0:
        return v
    lo, hi = v.min(), v.max()
    if hi - lo > 0.0:
        return (v - lo) / (hi - lo)
    return np.ones_like(v)


class TransitionMatrixBuilder:
    """Builds biased row-stochastic matrices over a list of items.

    Args:
        workers: Number of threads used to fill the similarity block. Each worker
            writes whole rows, so no locking is needed.
        symmetric: Assume the similarity and adjacency functions are symmetric
            and only evaluate them once per unordered pair.
    """

    def __init__(self, workers: int = 1, symmetric: bool = True):
        self.workers = max(1, workers)
        self.symmetric = symmetric

    def similarity_matrix(
        self,
        items: Sequence[T],
        similarity: Callable[[T, T], Optional[float]],
        adjacency: Optional[Callable[[T, T], bool]] = None,
        sim_lower_bound: float = 0.0,
    ) -> np.ndarray:
        n = len(items)
        m = np.zeros((n, n), dtype=np.float64)
        stats = {"evaluated": 0, "defined": 0, "negative": 0}

        def fill_row(i: int) -> List[int]:
            evaluated = defined = negative = 0
            columns = range(i + 1, n) if self.symmetric else range(n)
            for j in columns:
                if i == j:
                    continue
                if adjacency is not None and not adjacency(items[i], items[j]):
                    continue
                evaluated += 1
                s = similarity(items[i], items[j])
                if s is None:
                    continue
                defined += 1
                if s < 0.0:
                    negative += 1
                elif s >= sim_lower_bound:
                    m[i, j] = s
            return [evaluated, defined, negative]

        if self.workers > 1 and n > 1:
            with ThreadPoolExecutor(max_workers=self.workers) as pool:
                counts = list(pool.map(fill_row, range(n)))
        else:
            counts = [fill_row(i) for i in range(n)]

        if self.symmetric:
            m = np.triu(m, k=1)
            m = m + m.T

        for evaluated, defined, negative in counts:
            stats["evaluated"] += evaluated
            stats["defined"] += defined
            stats["negative"] += negative
        logger.debug(
            f"Similarity evaluated for {stats['evaluated']} pairs, "
            f"defined for {stats['defined']}, negative for {stats['negative']}"
        )
        return m

    def bias_vector(
        self,
        items: Sequence[T],
        bias: Callable[[T], float],
        relevance_lower_bound: float = 0.0,
    ) -> np.ndarray:
        v = np.array([bias(item) for item in items], dtype=np.float64)
        v = np.nan_to_num(v, nan=0.0)
        v = np.clip(v, 0.0, 1.0)
        v[v < relevance_lower_bound] = 0.0
        return normalize_vector(v)

    def build(
        self,
        items: Sequence[T],
        similarity: Callable[[T, T], Optional[float]],
        bias: Optional[Callable[[T], float]] = None,
        adjacency: Optional[Callable[[T, T], bool]] = None,
        sim_lower_bound: float = 0.0,
        damping: float = 0.0,
        relevance_lower_bound: float = 0.0,
    ) -> np.ndarray:
        """Creates a row-stochastic transition matrix for `items`.

        Args:
            items: Items to rank.
            similarity: Pairwise similarity; None (undefined) is read as 0.
            bias: Optional prior relevance of each item, clamped to [0, 1].
            adjacency: Optional predicate; pairs failing it get no similarity mass.
            sim_lower_bound: Similarities below this value are set to 0.
            damping: Weight of the bias in the blend, in [0, 1].
            relevance_lower_bound: Bias values below this value are set to 0.

        Returns:
            Square row-stochastic numpy array.
        """
        if not 0.0 <= damping <= 1.0:
            raise ValueError(f"Damping factor must be in [0, 1], got {damping}")
        n = len(items)
        if n == 0:
            return np.zeros((0, 0), dtype=np.float64)
        if n == 1:
            return np.ones((1, 1), dtype=np.float64)

        logger.info(f"Creating ranking matrix for {n} items")
        x = self.similarity_matrix(items, similarity, adjacency, sim_lower_bound)
        zero_rows = int((x.sum(axis=1) == 0.0).sum())
        if zero_rows:
            logger.warning(f"Similarity matrix has {zero_rows} all-zero rows, made uniform")
        x = normalize_rows(x)

        if bias is not None:
            b = self.bias_vector(items, bias, relevance_lower_bound)
            r = damping * b[np.newaxis, :] + (1.0 - damping) * x
        else:
            r = x

        r = normalize_rows(r)
        assert is_row_stochastic(r), "Transition matrix is not row-stochastic"
        return r
