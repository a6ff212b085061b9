import logging
from typing import List, Sequence, Tuple

from textplanner.similarity.base import TreeSimilarity
from textplanner.subgraph import Subgraph

logger = logging.getLogger(__name__)


class RedundancyRemover:
    """Prunes subgraphs too similar to other, more relevant, subgraphs.

    Args:
        similarity: Pairwise similarity between subgraphs.
        threshold: Pairs more similar than this are considered redundant.
    """

    def __init__(self, similarity: TreeSimilarity, threshold: float = 0.5):
        self.similarity = similarity
        self.threshold = threshold

    def similar_pairs(self, subgraphs: Sequence[Subgraph]) -> List[Tuple[int, int, float]]:
        pairs = []
        for i in range(len(subgraphs)):
            for j in range(i + 1, len(subgraphs)):
                s = self.similarity.similarity(subgraphs[i], subgraphs[j])
                if s is not None and s > self.threshold:
                    pairs.append((i, j, s))
        return pairs

    def filter(self, subgraphs: Sequence[Subgraph]) -> List[Subgraph]:
        """Returns the surviving subgraphs in their original order."""
        logger.info(f"Calculating similarities between {len(subgraphs)} subgraphs")
        pairs = self.similar_pairs(subgraphs)
        pruned = set()

        while pairs:
            # max() keeps the first of equally similar pairs
            i, j, s = max(pairs, key=lambda p: p[2])
            avg_i = subgraphs[i].average_weight
            avg_j = subgraphs[j].average_weight
            discarded = i if avg_i < avg_j else j
            logger.debug(f"Pruned subgraph {discarded} from pair {i}-{j} with sim={s:.3f}")
            pruned.add(discarded)
            pairs = [p for p in pairs if discarded not in (p[0], p[1])]

        selected = [s for k, s in enumerate(subgraphs) if k not in pruned]
        logger.info(f"Selected {len(selected)} subgraphs out of {len(subgraphs)}")
        return selected
