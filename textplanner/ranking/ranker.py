"""
Ranking of candidate meanings and of graph variables.

Both rankings build a biased transition matrix and take its stationary
distribution as relevance:

- meanings are ranked before disambiguation, using pairwise meaning similarity
  and a bias function,
- variables are ranked after disambiguation, using adjacency in the graph and
  the weights inherited from their meanings as bias.
"""

import logging
from collections import defaultdict
from types import MappingProxyType
from typing import Callable, Collection, Dict, FrozenSet, Iterable, List, Mapping, Optional, Set

import numpy as np

from textplanner.bias.base import BiasFunction
from textplanner.graph import WeightedGraph
from textplanner.ranking.matrix import TransitionMatrixBuilder, rebase
from textplanner.ranking.power_iteration import StationaryRanker
from textplanner.registry import candidate_filters
from textplanner.similarity.base import SimilarityFunction
from textplanner.types import POS, Candidate, Mention

logger = logging.getLogger(__name__)


class DifferentMentionsFilter:
    """Accepts pairs of meanings which are not candidates of exactly the same mentions.

    Two meanings competing for the very same mentions must not reinforce each
    other, otherwise a mention would vote for its own candidates.
    """

    def __init__(self, candidates: Iterable[Candidate]):
        mentions: Dict[str, Set[int]] = defaultdict(set)
        for c in candidates:
            mentions[c.meaning.reference].add(c.mention.id)
        self.mention_sets: Dict[str, FrozenSet[int]] = {
            r: frozenset(ids) for r, ids in mentions.items()
        }

    def __call__(self, r1: str, r2: str) -> bool:
        m1 = self.mention_sets.get(r1)
        m2 = self.mention_sets.get(r2)
        if m1 is None or m2 is None:
            return True
        return m1 != m2


class TopCandidatesFilter:
    """Keeps, for each mention, its best candidates.

    A candidate is kept if it is among the first `top_k` in dictionary order,
    among the `top_k` with the highest bias, or if its bias reaches `threshold`.
    """

    def __init__(
        self,
        candidates: Iterable[Candidate],
        bias: Callable[[str], float],
        top_k: int = 1,
        threshold: float = 0.7,
    ):
        by_mention: Dict[Mention, List[Candidate]] = defaultdict(list)
        for c in candidates:
            by_mention[c.mention].append(c)

        self.selected: Set[Candidate] = set()
        if top_k < 1:
            return
        for mention_candidates in by_mention.values():
            self.selected.update(mention_candidates[:top_k])
            by_bias = sorted(mention_candidates, key=lambda c: bias(c.meaning.reference), reverse=True)
            self.selected.update(by_bias[:top_k])
            self.selected.update(c for c in mention_candidates if bias(c.meaning.reference) >= threshold)

    def __call__(self, candidate: Candidate) -> bool:
        return candidate in self.selected


class POSFilter:
    """Keeps candidates whose mention has one of the given part-of-speech tags."""

    def __init__(self, tags: Collection[POS]):
        self.tags = frozenset(POS(t) for t in tags)

    def __call__(self, candidate: Candidate) -> bool:
        return candidate.mention.pos in self.tags


# Filter factories take the candidates being ranked and the bias in use
@candidate_filters.register("top")
def top_candidates_filter(
    candidates: Iterable[Candidate],
    bias: Optional[BiasFunction] = None,
    top_k: int = 1,
    threshold: float = 0.7,
) -> TopCandidatesFilter:
    return TopCandidatesFilter(candidates, bias if bias is not None else (lambda reference: 0.0), top_k=top_k, threshold=threshold)


@candidate_filters.register("pos")
def pos_filter(
    candidates: Iterable[Candidate], bias: Optional[BiasFunction] = None, tags: Collection[str] = ()
) -> POSFilter:
    return POSFilter(tags)


def rank_meanings(
    candidates: List[Candidate],
    similarity: SimilarityFunction,
    bias: Optional[BiasFunction] = None,
    damping: float = 0.2,
    sim_lower_bound: float = 0.0,
    relevance_lower_bound: float = 0.0,
    epsilon: Optional[float] = None,
    candidate_filter: Optional[Callable[[Candidate], bool]] = None,
    builder: Optional[TransitionMatrixBuilder] = None,
    ranker: Optional[StationaryRanker] = None,
) -> Mapping[str, float]:
    """Ranks the distinct meanings of a set of candidates.

    Ranks are rebased to [0, 1] and assigned to the `weight` of every candidate
    whose meaning was ranked.

    Returns:
        Read-only mapping from meaning reference to rebased rank.
    """
    builder = builder or TransitionMatrixBuilder()
    ranker = ranker or StationaryRanker()

    ranked = [c for c in candidates if candidate_filter is None or candidate_filter(c)]
    references: List[str] = []
    seen: Set[str] = set()
    for c in ranked:
        r = c.meaning.reference
        if r in seen or not similarity.is_defined(r):
            continue
        seen.add(r)
        references.append(r)

    if not references:
        logger.info("No meanings to rank")
        return MappingProxyType({})

    logger.info(f"Ranking {len(references)} meanings of {len(ranked)} candidates")
    matrix = builder.build(
        references,
        similarity,
        bias=bias,
        adjacency=DifferentMentionsFilter(ranked),
        sim_lower_bound=sim_lower_bound,
        damping=damping,
        relevance_lower_bound=relevance_lower_bound,
    )
    distribution = ranker.rank(matrix, epsilon, labels=references)
    ranks = dict(zip(references, rebase(distribution).tolist()))

    for c in candidates:
        if c.meaning.reference in ranks:
            c.weight = ranks[c.meaning.reference]

    return MappingProxyType(ranks)


def rank_variables(
    graph: WeightedGraph,
    damping: float = 0.2,
    epsilon: Optional[float] = None,
    builder: Optional[TransitionMatrixBuilder] = None,
    ranker: Optional[StationaryRanker] = None,
) -> Mapping[str, float]:
    """Ranks the variables of a disambiguated graph and stores ranks as weights.

    Adjacent variables (an edge in either direction) transfer probability mass
    to each other; current variable weights, smoothed with a small pseudo-count,
    act as bias.

    Returns:
        Read-only mapping from variable to its new weight.
    """
    builder = builder or TransitionMatrixBuilder()
    ranker = ranker or StationaryRanker()

    variables = sorted(graph.vertices)
    if not variables:
        return MappingProxyType({})

    weights = np.array([graph.get_weight(v) for v in variables], dtype=np.float64)
    alpha = weights.mean() / 100.0  # additive smoothing avoids zero bias values
    smoothed = weights + alpha
    total = smoothed.sum()
    bias_values = dict(zip(variables, (smoothed / total).tolist() if total > 0.0 else [0.0] * len(variables)))

    def adjacent(v1: str, v2: str) -> Optional[float]:
        return 1.0 if graph.contains_edge(v1, v2) or graph.contains_edge(v2, v1) else 0.0

    logger.info(f"Ranking {len(variables)} variables")
    matrix = builder.build(variables, adjacent, bias=bias_values.__getitem__, damping=damping)
    labels = [graph.label(v) for v in variables]
    distribution = ranker.rank(matrix, epsilon, labels=labels)

    ranks = dict(zip(variables, distribution.tolist()))
    graph.set_weights(ranks)
    return MappingProxyType(ranks)
