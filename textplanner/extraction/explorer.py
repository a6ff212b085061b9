"""
Search space for subgraph extraction.

An explorer defines the legal start states of a search and the legal ways of
growing a subgraph by one neighbour. What gets added along with a neighbour is
decided by a requirements function:

- `single_vertex` adds only the neighbour and its connecting edge,
- `requirements_closure` also pulls in, transitively, every vertex the
  semantics model marks as required (e.g. obligatory arguments).
"""

import logging
from enum import Enum
from typing import Callable, List, Optional, Set, Tuple

from textplanner.graph import Edge, WeightedGraph
from textplanner.semantics import GraphSemantics, NoSemantics
from textplanner.subgraph import Subgraph

logger = logging.getLogger(__name__)

Requirements = Callable[[str, Optional[Edge], Subgraph, GraphSemantics], Tuple[Set[str], Set[Edge]]]


class ExpansionConstraint(str, Enum):
    """Which neighbours a subgraph may grow into."""

    SAME_SOURCE = "same_source"
    NON_CORE_ONLY = "non_core_only"
    ALL = "all"


def single_vertex(
    vertex: str, edge: Optional[Edge], subgraph: Subgraph, semantics: GraphSemantics
) -> Tuple[Set[str], Set[Edge]]:
    return {vertex}, ({edge} if edge is not None else set())


def requirements_closure(
    vertex: str, edge: Optional[Edge], subgraph: Subgraph, semantics: GraphSemantics
) -> Tuple[Set[str], Set[Edge]]:
    graph = subgraph.base
    vertices = {vertex}
    edges = {edge} if edge is not None else set()
    frontier = [vertex]
    # Each round only follows vertices added in the previous one
    while frontier:
        added = []
        for v in frontier:
            for e in graph.edges_of(v):
                n = e.other(v)
                if n in subgraph.vertices or n in vertices:
                    continue
                if semantics.is_required(v, e.source, e.target, e.role, graph):
                    vertices.add(n)
                    edges.add(e)
                    added.append(n)
        frontier = added
    return vertices, edges


REQUIREMENTS = {
    "single_vertex": single_vertex,
    "requirements": requirements_closure,
}


class Explorer:
    """Start and expansion rules for subgraph search.

    Args:
        semantics: Role semantics, consulted for core roles and requirements.
        constraint: Which neighbours are admitted when growing a subgraph.
        start_from_verbs: Seed searches from variables with verbal mentions
            when the graph has any.
        requirements: Function deciding what is added together with a neighbour.
    """

    def __init__(
        self,
        semantics: Optional[GraphSemantics] = None,
        constraint: ExpansionConstraint = ExpansionConstraint.SAME_SOURCE,
        start_from_verbs: bool = True,
        requirements: Requirements = single_vertex,
    ):
        self.semantics = semantics or NoSemantics()
        self.constraint = ExpansionConstraint(constraint)
        self.start_from_verbs = start_from_verbs
        self.requirements = requirements

    def start_states(self, graph: WeightedGraph) -> List[Subgraph]:
        vertices = sorted(graph.vertices)
        if self.start_from_verbs:
            verbal = [v for v in vertices if graph.is_verbal(v)]
            if verbal:
                vertices = verbal

        states: List[Subgraph] = []
        seen = set()
        for v in vertices:
            sources = sorted(graph.get_sources(v)) or [None]
            for source in sources:
                seed = Subgraph(graph, v, source=source)
                required, edges = self.requirements(v, None, seed, self.semantics)
                state = seed.extend(required, edges)
                if state.vertices in seen:
                    continue
                seen.add(state.vertices)
                states.append(state)
        return states

    def is_allowed(self, neighbour: str, edge: Edge, subgraph: Subgraph) -> bool:
        if neighbour in subgraph.vertices or edge in subgraph.edges:
            return False
        if self.constraint == ExpansionConstraint.ALL:
            return True

        sources = subgraph.base.get_sources(neighbour)
        same_source = subgraph.source in sources
        if self.constraint == ExpansionConstraint.SAME_SOURCE:
            return same_source
        # Non-core relations may cross sources, but only towards their target
        return same_source or (not self.semantics.is_core(edge.role) and edge.target == neighbour)

    def next_states(self, subgraph: Subgraph) -> List[Subgraph]:
        graph = subgraph.base
        states: List[Subgraph] = []
        seen = set()
        for v in sorted(subgraph.vertices):
            for e in graph.edges_of(v):
                n = e.other(v)
                if not self.is_allowed(n, e, subgraph):
                    continue
                required, edges = self.requirements(n, e, subgraph, self.semantics)
                state = subgraph.extend(required, edges)
                if state.vertices in seen:
                    continue
                seen.add(state.vertices)
                states.append(state)
        return states
