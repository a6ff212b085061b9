import logging
from typing import Optional, Sequence

import numpy as np

logger = logging.getLogger(__name__)


class StationaryRanker:
    """Power iteration to obtain the stationary distribution of a Markov chain.

    Args:
        max_iterations: Safety cap. When reached, a warning is logged and the
            latest distribution is returned.
    """

    def __init__(self, max_iterations: int = 10000):
        if max_iterations < 1:
            raise ValueError(f"max_iterations must be positive, got {max_iterations}")
        self.max_iterations = max_iterations
        self.last_iterations = 0
        self.converged = True

    @staticmethod
    def _check(matrix: np.ndarray) -> None:
        assert matrix.ndim == 2 and matrix.shape[0] == matrix.shape[1], "Matrix is not square"
        assert not np.isnan(matrix).any(), "Matrix contains NaN values"
        assert (matrix >= 0.0).all(), "Matrix contains negative values"

    def step(self, matrix: np.ndarray, v: np.ndarray) -> np.ndarray:
        """One iteration: propagate probability mass along incoming transitions."""
        tmp = matrix.T @ v
        norm = np.abs(tmp).sum()
        return tmp / norm if norm > 0.0 else tmp

    def rank(
        self,
        matrix: np.ndarray,
        epsilon: Optional[float] = None,
        labels: Optional[Sequence[str]] = None,
    ) -> np.ndarray:
        """Returns the stationary distribution of a row-stochastic matrix.

        Args:
            matrix: Square row-stochastic matrix.
            epsilon: Stop once no entry changes by this much or more. Defaults
                to 1 / (1000 * n).
            labels: Optional item labels for debug output.
        """
        matrix = np.asarray(matrix, dtype=np.float64)
        self._check(matrix)
        n = matrix.shape[0]
        self.last_iterations = 0
        self.converged = True
        if n == 0:
            return np.zeros(0)
        if n == 1:
            return np.ones(1)

        e = epsilon if epsilon is not None else 1.0 / (n * 1000)
        v = np.full(n, 1.0 / n)
        delta = np.inf
        iterations = 0
        while delta >= e:
            if iterations >= self.max_iterations:
                self.converged = False
                logger.warning(
                    f"Power iteration did not converge after {iterations} iterations "
                    f"(delta={delta:.3g}, epsilon={e:.3g})"
                )
                break
            tmp = self.step(matrix, v)
            delta = float(np.abs(tmp - v).max())
            v = tmp
            iterations += 1
            if iterations % 100 == 0:
                logger.debug(f"...{iterations} iterations")

        self.last_iterations = iterations
        logger.info(f"Power iteration completed after {iterations} iterations")
        if labels is not None and logger.isEnabledFor(logging.DEBUG):
            order = np.argsort(-v)
            ranking = "\n".join(f"\t{labels[i]}\t{v[i]:.6f}" for i in order)
            logger.debug(f"Ranking:\n{ranking}")
        return v
