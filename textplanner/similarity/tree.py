"""
Similarity between extracted subgraphs.

Subgraphs are unfolded into rooted trees: vertices reachable through several
parents are replicated once per parent, and a virtual root is added above
subgraphs with more than one source vertex. Trees are then linearized in
preorder and compared with an edit distance whose substitution cost depends on
the semantic similarity of the meanings of the aligned nodes.
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Set

import numpy as np

from textplanner.subgraph import Subgraph

VIRTUAL_ROOT = "root"


@dataclass
class TreeNode:
    """Node of a semantic tree; `variable` is None for the virtual root."""

    variable: Optional[str]
    role: str
    label: str
    reference: Optional[str] = None
    children: List["TreeNode"] = field(default_factory=list)


class SemanticTree:
    """A subgraph unfolded into a rooted tree."""

    def __init__(self, subgraph: Subgraph):
        self.subgraph = subgraph
        children: Dict[str, List] = {v: [] for v in subgraph.vertices}
        has_parent: Set[str] = set()
        for e in subgraph.edges:
            children[e.source].append(e)
            has_parent.add(e.target)

        roots = sorted(v for v in subgraph.vertices if v not in has_parent) or [subgraph.root]
        if len(roots) == 1:
            self.root = self._unfold(roots[0], "", children, set())
        else:
            self.root = TreeNode(None, VIRTUAL_ROOT, VIRTUAL_ROOT)
            self.root.children = [
                self._unfold(r, VIRTUAL_ROOT, children, set()) for r in roots
            ]
        self.preorder = self._preorder()

    def _unfold(self, variable: str, role: str, children: Dict[str, List], path: Set[str]) -> TreeNode:
        meaning = self.subgraph.get_meaning(variable)
        node = TreeNode(
            variable,
            role,
            str(meaning) if meaning else variable,
            meaning.reference if meaning else None,
        )
        path = path | {variable}
        for e in children[variable]:
            if e.target not in path:
                node.children.append(self._unfold(e.target, e.role, children, path))
        return node

    def _preorder(self) -> List[TreeNode]:
        preorder: List[TreeNode] = []
        stack = [self.root]
        while stack:
            current = stack.pop()
            preorder.append(current)
            stack.extend(sorted(current.children, key=lambda n: (n.label, n.role), reverse=True))
        return preorder

    def __len__(self) -> int:
        return len(self.preorder)

    @property
    def average_weight(self) -> float:
        return self.subgraph.average_weight


class SemanticTreeSimilarity:
    """Edit-distance similarity between subgraphs linearized as semantic trees.

    Args:
        meaning_similarity: Similarity between meaning references; None is read as 0.
        role_weight: Weight of role agreement in the substitution cost. 0 ignores roles.
    """

    def __init__(
        self,
        meaning_similarity: Callable[[str, str], Optional[float]],
        role_weight: float = 0.0,
    ):
        if not 0.0 <= role_weight <= 1.0:
            raise ValueError(f"role_weight must be in [0, 1], got {role_weight}")
        self.meaning_similarity = meaning_similarity
        self.role_weight = role_weight

    def _node_similarity(self, n1: TreeNode, n2: TreeNode) -> float:
        if n1.variable is None or n2.variable is None:
            return 1.0 if n1.variable is None and n2.variable is None else 0.0
        if n1.reference is not None and n2.reference is not None:
            if n1.reference == n2.reference:
                return 1.0
            sim = self.meaning_similarity(n1.reference, n2.reference)
            return max(0.0, min(1.0, sim)) if sim is not None else 0.0
        return 1.0 if n1.label == n2.label else 0.0

    def _substitution_cost(self, n1: TreeNode, n2: TreeNode) -> float:
        role_match = 1.0 if n1.role == n2.role else 0.0
        sim = (1.0 - self.role_weight) * self._node_similarity(n1, n2) + self.role_weight * role_match
        return 1.0 - sim

    def tree_similarity(self, t1: SemanticTree, t2: SemanticTree) -> float:
        a, b = t1.preorder, t2.preorder
        d = np.zeros((len(a) + 1, len(b) + 1))
        d[:, 0] = np.arange(len(a) + 1)
        d[0, :] = np.arange(len(b) + 1)
        for i in range(1, len(a) + 1):
            for j in range(1, len(b) + 1):
                d[i, j] = min(
                    d[i - 1, j] + 1.0,
                    d[i, j - 1] + 1.0,
                    d[i - 1, j - 1] + self._substitution_cost(a[i - 1], b[j - 1]),
                )
        distance = d[len(a), len(b)]
        # Metric normalization of tree edit distance (Li & Zhang, 2011)
        return 1.0 - min(1.0, distance / float(len(a) + len(b)))

    def similarity(self, s1: Subgraph, s2: Subgraph) -> float:
        return self.tree_similarity(SemanticTree(s1), SemanticTree(s2))
