"""
Role semantics consulted while growing subgraphs.

A semantics model tells the explorer which roles are core (obligatory
arguments) and which neighbours must be pulled into a subgraph together with a
vertex so that the selection remains meaningful.
"""

from typing import FrozenSet, Protocol

from textplanner.graph import WeightedGraph
from textplanner.registry import semantics_models

INVERSE_SUFFIX = "-of"


class GraphSemantics(Protocol):
    """Semantics of edge roles."""

    def is_core(self, role: str) -> bool:
        ...

    def is_required(self, vertex: str, source: str, target: str, role: str, graph: WeightedGraph) -> bool:
        ...


def _with_inverses(roles: FrozenSet[str]) -> FrozenSet[str]:
    return roles | frozenset(r + INVERSE_SUFFIX for r in roles)


@semantics_models.register("amr")
class AMRSemantics:
    """Role semantics for Abstract Meaning Representation graphs."""

    ARGS = frozenset(f":ARG{i}" for i in range(6))
    OPS = frozenset(f":op{i}" for i in range(1, 11))
    CORE = _with_inverses(ARGS | OPS)

    # Roles whose target is required when the source is selected
    SOURCE_REQUIRES = ARGS | OPS | frozenset({
        ":instance", ":domain", ":polarity", ":mode", ":quant", ":unit", ":value",
        ":ord", ":poss", ":calendar", ":century", ":day", ":dayperiod", ":decade",
        ":era", ":month", ":quarter", ":season", ":timezone", ":weekday", ":year",
        ":year2",
    })
    # Roles whose source is required when the target is selected
    TARGET_REQUIRES = frozenset(r + INVERSE_SUFFIX for r in ARGS | OPS) | frozenset({
        ":mod", ":polarity-of", ":quant-of", ":ord-of", ":poss-of",
    })
    UNKNOWN_CONCEPTS = frozenset({"amr-unknown", "amr-choice"})

    def is_core(self, role: str) -> bool:
        return role in self.CORE

    def is_required(self, vertex: str, source: str, target: str, role: str, graph: WeightedGraph) -> bool:
        source_selected = vertex == source
        target_selected = vertex == target
        if role in self.SOURCE_REQUIRES:
            return source_selected
        if role in self.TARGET_REQUIRES:
            return target_selected
        # Any other role is required only towards interrogative concepts
        return source_selected and bool(graph.get_types(target) & self.UNKNOWN_CONCEPTS)


@semantics_models.register("none")
class NoSemantics:
    """Treats every role as core and nothing as required."""

    def is_core(self, role: str) -> bool:
        return True

    def is_required(self, vertex: str, source: str, target: str, role: str, graph: WeightedGraph) -> bool:
        return False
