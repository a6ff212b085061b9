"""
Subgraph extraction by greedy hill climbing.

Each extraction picks a start state, then repeatedly extends it with the
neighbour chosen by the expansion policy, as long as the extension strictly
improves the objective

    value(S) = lambda * W(S) - |S| * C + |V| * C

where W(S) sums the weights of the members of S, C is the average vertex
weight of the graph and V its vertex set. The last term is constant for a
given graph and keeps values non-negative.

The climb stops at the first non-improving step, without backtracking.
"""

import logging
import time
from typing import FrozenSet, List, Optional, Set

from textplanner.extraction.explorer import Explorer
from textplanner.extraction.policies import ArgMaxPolicy, Policy
from textplanner.graph import WeightedGraph
from textplanner.subgraph import Subgraph

logger = logging.getLogger(__name__)


class SubgraphExtractor:
    """Extracts connected, acyclic, high-value subgraphs from a weighted graph."""

    def __init__(
        self,
        explorer: Explorer,
        start_policy: Policy,
        expand_policy: Policy,
        lambda_: float = 1.0,
        max_attempts: int = 1000,
    ):
        self.explorer = explorer
        self.start_policy = start_policy
        self.expand_policy = expand_policy
        self.lambda_ = lambda_
        self.max_attempts = max_attempts
        self.attempts = 0

    @staticmethod
    def cost(graph: WeightedGraph) -> float:
        """Average vertex weight, used as the cost of each selected vertex."""
        if len(graph) == 0:
            return 0.0
        return sum(graph.get_weight(v) for v in graph.vertices) / len(graph)

    def value(self, subgraph: Subgraph, cost: float) -> float:
        graph = subgraph.base
        # Vertices without weight add no reward but still count towards the cost
        reward = sum(graph.get_weight(v) for v in subgraph.vertices if graph.has_weight(v))
        value = self.lambda_ * reward - len(subgraph) * cost + len(graph) * cost
        subgraph.value = value
        return value

    def extract(self, graph: WeightedGraph, cost: float, visited_starts: Set[FrozenSet[str]]) -> Optional[Subgraph]:
        """Runs one hill climb. Returns None when no start state is available."""
        if len(graph) == 0:
            return None

        candidates = self.explorer.start_states(graph)
        if isinstance(self.start_policy, ArgMaxPolicy):
            # ArgMax starts are used at most once
            candidates = [c for c in candidates if c.vertices not in visited_starts]
        if not candidates:
            return None

        weights = [self.value(c, cost) for c in candidates]
        current = candidates[self.start_policy.select(weights)]
        visited_starts.add(current.vertices)

        while True:
            next_states = self.explorer.next_states(current)
            if not next_states:
                break
            weights = [self.value(s, cost) for s in next_states]
            i = self.expand_policy.select(weights)
            if weights[i] > current.value:
                current = next_states[i]
            else:
                break

        return current

    def extract_many(self, graph: WeightedGraph, target_count: int) -> List[Subgraph]:
        """Extracts up to `target_count` distinct valid subgraphs.

        Stops early when the attempt budget is exhausted, in which case fewer
        subgraphs are returned. Subgraphs are sorted by descending average weight.
        """
        start = time.perf_counter()
        cost = self.cost(graph)
        subgraphs: List[Subgraph] = []
        accepted: Set[FrozenSet[str]] = set()
        visited_starts: Set[FrozenSet[str]] = set()

        self.attempts = 0
        while len(subgraphs) < target_count and self.attempts < self.max_attempts:
            self.attempts += 1
            s = self.extract(graph, cost, visited_starts)
            if s is None:
                break
            if not s.is_valid():
                logger.debug(f"Discarded invalid subgraph {s}")
                continue
            if s.vertices in accepted:
                logger.debug(f"Discarded redundant subgraph {s}")
                continue
            accepted.add(s.vertices)
            subgraphs.append(s)

        subgraphs.sort(key=lambda s: s.average_weight, reverse=True)
        if len(subgraphs) < target_count:
            logger.warning(
                f"Only {len(subgraphs)} of {target_count} subgraphs extracted "
                f"after {self.attempts} attempts"
            )
        logger.info(
            f"{len(subgraphs)} subgraphs extracted after {self.attempts} attempts "
            f"in {time.perf_counter() - start:.2f}s"
        )
        return subgraphs
