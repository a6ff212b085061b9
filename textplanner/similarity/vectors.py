from typing import Dict, Mapping, Optional, Sequence, Tuple

import numpy as np

from textplanner.registry import similarity_functions


@similarity_functions.register("cosine")
class VectorsCosineSimilarity:
    """Cosine similarity between meaning embeddings.

    Negative cosines are returned as they are; the matrix builder discards them.
    """

    def __init__(self, vectors: Mapping[str, Sequence[float]]):
        self.vectors: Dict[str, np.ndarray] = {}
        for reference, vector in vectors.items():
            v = np.asarray(vector, dtype=np.float64)
            norm = np.linalg.norm(v)
            if norm > 0.0:
                self.vectors[reference] = v / norm

    def is_defined(self, reference: str) -> bool:
        return reference in self.vectors

    def __call__(self, r1: str, r2: str) -> Optional[float]:
        v1 = self.vectors.get(r1)
        v2 = self.vectors.get(r2)
        if v1 is None or v2 is None:
            return None
        return float(np.clip(v1 @ v2, -1.0, 1.0))


@similarity_functions.register("pairwise")
class PairwiseSimilarity:
    """Similarity looked up from a table of precomputed, symmetric pair values."""

    def __init__(self, pairs: Mapping[Tuple[str, str], float], identity: float = 1.0):
        self.pairs: Dict[Tuple[str, str], float] = {}
        self.references = set()
        for (r1, r2), value in pairs.items():
            self.pairs[(r1, r2)] = float(value)
            self.pairs[(r2, r1)] = float(value)
            self.references.update((r1, r2))
        self.identity = identity

    @classmethod
    def from_matrix(cls, references: Sequence[str], matrix: Sequence[Sequence[float]]) -> "PairwiseSimilarity":
        pairs = {
            (references[i], references[j]): matrix[i][j]
            for i in range(len(references))
            for j in range(i + 1, len(references))
        }
        sim = cls(pairs)
        sim.references.update(references)
        return sim

    def is_defined(self, reference: str) -> bool:
        return reference in self.references

    def __call__(self, r1: str, r2: str) -> Optional[float]:
        if r1 == r2 and self.is_defined(r1):
            return self.identity
        return self.pairs.get((r1, r2))


similarity_functions.register("pairwise_matrix")(PairwiseSimilarity.from_matrix)
