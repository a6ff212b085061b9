import logging
from collections import defaultdict
from typing import Dict, List

from textplanner.graph import WeightedGraph
from textplanner.registry import disambiguators
from textplanner.types import Candidate

logger = logging.getLogger(__name__)


def _weight(candidate: Candidate) -> float:
    return candidate.weight if candidate.weight is not None else 0.0


@disambiguators.register("top")
class TopCandidateDisambiguator:
    """Chooses the highest weighted candidate of each variable.

    When `contract_subsumed` is set, a variable whose mention spans over the
    mention of another variable absorbs it if its best candidate weighs more,
    e.g. "Barack Obama" absorbs "Obama".
    """

    def __init__(self, contract_subsumed: bool = True):
        self.contract_subsumed = contract_subsumed

    def _candidates_by_variable(
        self, graph: WeightedGraph, candidates: List[Candidate]
    ) -> Dict[str, List[Candidate]]:
        variables = {}
        for v in graph.vertices:
            for m in graph.get_mentions(v):
                variables[m.id] = v
        grouped: Dict[str, List[Candidate]] = defaultdict(list)
        for c in candidates:
            v = variables.get(c.mention.id)
            if v is not None:
                grouped[v].append(c)
        return grouped

    @staticmethod
    def _spans_over(graph: WeightedGraph, v1: str, v2: str) -> bool:
        return any(
            m1.spans_over(m2) and m1 != m2
            for m1 in graph.get_mentions(v1)
            for m2 in graph.get_mentions(v2)
        )

    def disambiguate(self, graph: WeightedGraph, candidates: List[Candidate]) -> Dict[str, Candidate]:
        grouped = self._candidates_by_variable(graph, candidates)
        best = {v: max(cs, key=_weight) for v, cs in grouped.items()}

        if self.contract_subsumed:
            for v in sorted(best, key=lambda v: _weight(best[v]), reverse=True):
                if v not in graph:
                    continue
                subsumed = [
                    u for u in best
                    if u != v and u in graph
                    and _weight(best[v]) > _weight(best[u])
                    and self._spans_over(graph, v, u)
                ]
                if subsumed:
                    graph.contract(v, subsumed)
            best = {v: c for v, c in best.items() if v in graph}

        for v, c in best.items():
            graph.set_meaning(v, c.meaning)
            if c.weight is not None:
                graph.set_weight(v, c.weight)
        logger.info(f"Disambiguated {len(best)} variables from {len(candidates)} candidates")
        return best
