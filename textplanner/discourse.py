"""
Discourse ordering of extracted subgraphs.

Subgraphs become vertices of a complete graph whose edges are weighted by the
similarity between subgraphs. Starting from the most relevant subgraph, the
ordering greedily follows the open edge (from any visited subgraph to an
unvisited one) that maximizes the mean of the edge similarity and the
relevance of the subgraph it leads to.
"""

import heapq
import logging
from typing import List, Sequence

import networkx as nx

from textplanner.similarity.base import TreeSimilarity
from textplanner.subgraph import Subgraph

logger = logging.getLogger(__name__)


class DiscourseOrderer:
    """Sorts subgraphs by relevance and pairwise similarity.

    Args:
        similarity: Pairwise similarity between subgraphs. Pairs with undefined
            similarity are not connected.
        append_unreached: Append subgraphs the walk could not reach, by
            descending relevance. Otherwise they are dropped.
    """

    def __init__(self, similarity: TreeSimilarity, append_unreached: bool = True):
        self.similarity = similarity
        self.append_unreached = append_unreached

    def discourse_graph(self, subgraphs: Sequence[Subgraph]) -> nx.Graph:
        g = nx.Graph()
        for i, s in enumerate(subgraphs):
            g.add_node(i, rank=s.average_weight)
        for i in range(len(subgraphs)):
            for j in range(i + 1, len(subgraphs)):
                sim = self.similarity.similarity(subgraphs[i], subgraphs[j])
                if sim is not None:
                    g.add_edge(i, j, weight=sim)
        return g

    def order(self, subgraphs: Sequence[Subgraph]) -> List[Subgraph]:
        if not subgraphs:
            return []

        g = self.discourse_graph(subgraphs)
        rank = nx.get_node_attributes(g, "rank")
        # highest rank first, original order on ties
        by_rank = sorted(range(len(subgraphs)), key=lambda i: (-rank[i], i))

        current = by_rank[0]
        visited = [current]
        visited_set = {current}
        open_edges = []  # heap of (-score, tie, target)
        counter = 0

        while True:
            for _, target, data in g.edges(current, data=True):
                if target not in visited_set:
                    score = (data["weight"] + rank[target]) / 2.0
                    heapq.heappush(open_edges, (-score, counter, target))
                    counter += 1
            while open_edges and open_edges[0][2] in visited_set:
                heapq.heappop(open_edges)
            if not open_edges:
                break
            _, _, current = heapq.heappop(open_edges)
            visited.append(current)
            visited_set.add(current)

        if len(visited) != len(subgraphs):
            unreached = [i for i in by_rank if i not in visited_set]
            logger.error(
                f"Discourse ordering failed to reach {len(unreached)} of {len(subgraphs)} subgraphs"
            )
            if self.append_unreached:
                visited.extend(unreached)

        logger.debug(f"Discourse order: {visited}")
        return [subgraphs[i] for i in visited]
