"""
Weighted semantic graph.

Vertices are variables named by strings, stored internally as stable integer
handles into an arena. Every per-vertex attribute (meaning, mentions, sources,
types and weight) lives in a side table keyed by the same handle, so removing
or contracting a vertex is a matter of dropping or re-pointing handles.
"""

import itertools
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Set

import networkx as nx

from textplanner.types import Meaning, Mention

logger = logging.getLogger(__name__)


class GraphError(ValueError):
    """Raised when an operation would break a structural invariant of a graph."""


@dataclass(frozen=True)
class Edge:
    """Role-labelled directed edge between two variables."""

    source: str
    target: str
    role: str

    def other(self, variable: str) -> str:
        return self.target if variable == self.source else self.source

    def __str__(self) -> str:
        return f"{self.source}-{self.role}->{self.target}"


class WeightedGraph:
    """Directed multigraph over variables with role-labelled edges."""

    def __init__(self) -> None:
        self._g = nx.MultiDiGraph()
        self._ids = itertools.count()
        self._handles: Dict[str, int] = {}
        self._variables: Dict[int, str] = {}
        self._meanings: Dict[int, Meaning] = {}
        self._mentions: Dict[int, List[Mention]] = {}
        self._sources: Dict[int, Set[str]] = {}
        self._types: Dict[int, Set[str]] = {}
        self._weights: Dict[int, float] = {}

    # ------------------------------------------------------------------
    # Structure
    # ------------------------------------------------------------------

    def _handle(self, variable: str) -> int:
        try:
            return self._handles[variable]
        except KeyError as exc:
            raise GraphError(f"Variable '{variable}' not in graph.") from exc

    def add_vertex(self, variable: str) -> None:
        if variable in self._handles:
            return
        h = next(self._ids)
        self._handles[variable] = h
        self._variables[h] = variable
        self._g.add_node(h)

    def add_edge(self, source: str, target: str, role: str) -> Edge:
        if source not in self._handles or target not in self._handles:
            raise GraphError(
                f"Cannot add edge {source}-{role}->{target}: endpoint not in graph."
            )
        self._g.add_edge(self._handles[source], self._handles[target], key=role)
        return Edge(source, target, role)

    def remove_vertex(self, variable: str) -> None:
        h = self._handle(variable)
        self._g.remove_node(h)
        for table in (self._meanings, self._mentions, self._sources, self._types, self._weights):
            table.pop(h, None)
        del self._handles[variable]
        del self._variables[h]

    def contract(self, variable: str, others: Iterable[str]) -> None:
        """Merges vertices into `variable`.

        Edges incident to the merged vertices are re-pointed to `variable`
        (edges that would become loops are dropped), their mentions, sources and
        types are reassigned, and their meanings and weights are discarded.
        """
        h = self._handle(variable)
        merged = {self._handle(o) for o in others} - {h}
        for m in merged:
            for u, _, role in list(self._g.in_edges(m, keys=True)):
                if u != h and u not in merged:
                    self._g.add_edge(u, h, key=role)
            for _, t, role in list(self._g.out_edges(m, keys=True)):
                if t != h and t not in merged:
                    self._g.add_edge(h, t, key=role)
            self._mentions.setdefault(h, []).extend(self._mentions.get(m, []))
            self._sources.setdefault(h, set()).update(self._sources.get(m, set()))
            self._types.setdefault(h, set()).update(self._types.get(m, set()))
        for m in merged:
            self.remove_vertex(self._variables[m])
        logger.debug(f"Contracted {len(merged)} vertices into '{variable}'")

    def __contains__(self, variable: object) -> bool:
        return variable in self._handles

    def __len__(self) -> int:
        return len(self._handles)

    @property
    def vertices(self) -> List[str]:
        return [self._variables[h] for h in self._g.nodes]

    @property
    def edges(self) -> List[Edge]:
        return [
            Edge(self._variables[u], self._variables[v], role)
            for u, v, role in self._g.edges(keys=True)
        ]

    def out_edges(self, variable: str) -> List[Edge]:
        h = self._handle(variable)
        return [
            Edge(variable, self._variables[v], role)
            for _, v, role in self._g.out_edges(h, keys=True)
        ]

    def in_edges(self, variable: str) -> List[Edge]:
        h = self._handle(variable)
        return [
            Edge(self._variables[u], variable, role)
            for u, _, role in self._g.in_edges(h, keys=True)
        ]

    def edges_of(self, variable: str) -> List[Edge]:
        return self.out_edges(variable) + [
            e for e in self.in_edges(variable) if e.source != variable
        ]

    def contains_edge(self, source: str, target: str, role: Optional[str] = None) -> bool:
        if source not in self._handles or target not in self._handles:
            return False
        u, v = self._handles[source], self._handles[target]
        if role is None:
            return self._g.has_edge(u, v)
        return self._g.has_edge(u, v, key=role)

    # ------------------------------------------------------------------
    # Side tables
    # ------------------------------------------------------------------

    def get_meaning(self, variable: str) -> Optional[Meaning]:
        return self._meanings.get(self._handle(variable))

    def set_meaning(self, variable: str, meaning: Meaning) -> None:
        self._meanings[self._handle(variable)] = meaning

    @property
    def meanings(self) -> Set[Meaning]:
        return set(self._meanings.values())

    def get_mentions(self, variable: str) -> List[Mention]:
        return list(self._mentions.get(self._handle(variable), []))

    def add_mention(self, variable: str, mention: Mention) -> None:
        h = self._handle(variable)
        mentions = self._mentions.setdefault(h, [])
        if mention not in mentions:
            mentions.append(mention)
        self._sources.setdefault(h, set()).add(mention.source_id)

    def get_sources(self, variable: str) -> Set[str]:
        return set(self._sources.get(self._handle(variable), set()))

    def add_source(self, variable: str, source: str) -> None:
        self._sources.setdefault(self._handle(variable), set()).add(source)

    def get_types(self, variable: str) -> Set[str]:
        return set(self._types.get(self._handle(variable), set()))

    def add_type(self, variable: str, type_: str) -> None:
        self._types.setdefault(self._handle(variable), set()).add(type_)

    def has_weight(self, variable: str) -> bool:
        return self._handle(variable) in self._weights

    def get_weight(self, variable: str) -> float:
        return self._weights.get(self._handle(variable), 0.0)

    def set_weight(self, variable: str, weight: float) -> None:
        self._weights[self._handle(variable)] = float(weight)

    @property
    def weights(self) -> Dict[str, float]:
        return {self._variables[h]: w for h, w in self._weights.items()}

    def set_weights(self, weights: Mapping[str, float]) -> None:
        for variable, weight in weights.items():
            self.set_weight(variable, weight)

    def is_verbal(self, variable: str) -> bool:
        return any(m.is_verbal for m in self._mentions.get(self._handle(variable), []))

    def label(self, variable: str) -> str:
        """Human readable label used in log messages."""
        meaning = self._meanings.get(self._handle(variable))
        mentions = self._mentions.get(self._handle(variable), [])
        forms = ",".join(m.surface_form for m in mentions)
        return f"{variable}[{meaning or '-'}|{forms}]"

    def to_networkx(self) -> nx.MultiDiGraph:
        """Copy of the structure labelled with variable names."""
        return nx.relabel_nodes(self._g, self._variables, copy=True)
