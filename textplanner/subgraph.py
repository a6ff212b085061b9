from typing import FrozenSet, Iterable, List, Optional

import networkx as nx

from textplanner.graph import Edge, WeightedGraph
from textplanner.types import Meaning, Mention


class Subgraph:
    """A rooted selection of vertices and edges of a WeightedGraph.

    The subgraph is a view: attribute lookups go to the base graph, which is
    never copied. `value` is the score assigned by the extraction objective.

    Only the edges used to reach each vertex are kept, not every base edge
    between member vertices. An extracted subgraph is therefore a tree even
    when its vertex set induces a cycle in the base graph, and edges such as
    the inverse of a kept relation are not visible through it.
    """

    def __init__(
        self,
        base: WeightedGraph,
        root: str,
        vertices: Iterable[str] = (),
        edges: Iterable[Edge] = (),
        source: Optional[str] = None,
        value: float = 0.0,
    ) -> None:
        self.base = base
        self.root = root
        self.source = source
        self.vertices: FrozenSet[str] = frozenset(vertices) | {root}
        self.edges: FrozenSet[Edge] = frozenset(edges)
        self.value = value

    def extend(self, vertices: Iterable[str], edges: Iterable[Edge]) -> "Subgraph":
        return Subgraph(
            self.base,
            self.root,
            self.vertices | frozenset(vertices),
            self.edges | frozenset(edges),
            source=self.source,
        )

    def __len__(self) -> int:
        return len(self.vertices)

    def __contains__(self, variable: object) -> bool:
        return variable in self.vertices

    def __repr__(self) -> str:
        return f"Subgraph(root={self.root!r}, vertices={sorted(self.vertices)}, value={self.value:.4f})"

    @property
    def average_weight(self) -> float:
        """Mean weight of the member vertices that carry a weight."""
        weights = [self.base.get_weight(v) for v in self.vertices if self.base.has_weight(v)]
        return sum(weights) / len(weights) if weights else 0.0

    def get_weight(self, variable: str) -> float:
        return self.base.get_weight(variable)

    def get_meaning(self, variable: str) -> Optional[Meaning]:
        return self.base.get_meaning(variable)

    def get_mentions(self, variable: str) -> List[Mention]:
        return self.base.get_mentions(variable)

    def to_networkx(self) -> nx.MultiDiGraph:
        g = nx.MultiDiGraph()
        g.add_nodes_from(self.vertices)
        for e in self.edges:
            g.add_edge(e.source, e.target, key=e.role)
        return g

    def is_valid(self) -> bool:
        """Valid subgraphs are non-empty, connected and free of cycles."""
        if not self.vertices:
            return False
        if any(e.source not in self.vertices or e.target not in self.vertices for e in self.edges):
            return False
        g = self.to_networkx()
        return nx.is_weakly_connected(g) and nx.is_directed_acyclic_graph(g)
