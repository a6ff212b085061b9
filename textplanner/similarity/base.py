from typing import Optional, Protocol

from textplanner.subgraph import Subgraph


class SimilarityFunction(Protocol):
    """Similarity between pairs of meaning references.

    Returns a value in [0, 1], or None when similarity is undefined for the pair.
    """

    def __call__(self, r1: str, r2: str) -> Optional[float]:
        ...

    def is_defined(self, reference: str) -> bool:
        ...


class TreeSimilarity(Protocol):
    """Similarity between pairs of subgraphs interpreted as rooted trees."""

    def similarity(self, s1: Subgraph, s2: Subgraph) -> Optional[float]:
        ...
