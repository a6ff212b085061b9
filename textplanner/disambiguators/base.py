from typing import Dict, List, Protocol

from textplanner.graph import WeightedGraph
from textplanner.types import Candidate


class Disambiguator(Protocol):
    """Binds one meaning to each variable of a graph."""

    def disambiguate(self, graph: WeightedGraph, candidates: List[Candidate]) -> Dict[str, Candidate]:
        ...
