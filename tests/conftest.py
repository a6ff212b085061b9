"""Shared fixtures for text planner tests."""

import json
import os
import tempfile
from typing import Dict, FrozenSet, Iterator, List, Optional, Tuple

import numpy as np
import pytest

from textplanner.graph import WeightedGraph
from textplanner.subgraph import Subgraph
from textplanner.types import POS, Candidate, Meaning, Mention


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


def make_graph(
    edges: List[Tuple[str, str, str]],
    weights: Optional[Dict[str, float]] = None,
    vertices: Optional[List[str]] = None,
) -> WeightedGraph:
    """Graph from (source, target, role) triples."""
    g = WeightedGraph()
    for v in vertices or []:
        g.add_vertex(v)
    for source, target, _ in edges:
        g.add_vertex(source)
        g.add_vertex(target)
    for source, target, role in edges:
        g.add_edge(source, target, role)
    if weights:
        g.set_weights(weights)
    return g


def random_graph(rng: np.random.Generator, n: int, density: float = 0.15) -> WeightedGraph:
    """Random weighted graph over n variables with a spanning path plus random edges."""
    vertices = [f"v{i}" for i in range(n)]
    g = WeightedGraph()
    for v in vertices:
        g.add_vertex(v)
        g.set_weight(v, float(rng.random()))
    for i in range(1, n):
        g.add_edge(vertices[int(rng.integers(0, i))], vertices[i], ":ARG0")
    for i in range(n):
        for j in range(n):
            if i != j and rng.random() < density:
                g.add_edge(vertices[i], vertices[j], f":ARG{int(rng.integers(1, 4))}")
    return g


# ---------------------------------------------------------------------------
# Sample data fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def diamond_graph() -> WeightedGraph:
    """root->a, root->b, a->c, b->c with uniform weight 1.0."""
    return make_graph(
        [("root", "a", ":ARG0"), ("root", "b", ":ARG1"), ("a", "c", ":ARG0"), ("b", "c", ":ARG1")],
        weights={"root": 1.0, "a": 1.0, "b": 1.0, "c": 1.0},
    )


@pytest.fixture
def sample_meanings() -> Dict[str, Meaning]:
    """Meanings for the sentence "Obama visited Hawaii"."""
    return {
        "obama": Meaning("bn:obama", "Barack Obama", is_ne=True),
        "obama_sr": Meaning("bn:obama_sr", "Barack Obama Sr.", is_ne=True),
        "visit": Meaning("bn:visit", "visit"),
        "hawaii": Meaning("bn:hawaii", "Hawaii", is_ne=True),
        "island": Meaning("bn:island", "island"),
    }


@pytest.fixture
def sample_mentions() -> Dict[str, Mention]:
    """Mentions of "Obama visited Hawaii" in source s1."""
    return {
        "obama": Mention("s1", (0, 1), "Obama", "Obama", POS.PROPN, is_ne=True),
        "visited": Mention("s1", (1, 2), "visited", "visit", POS.VERB),
        "hawaii": Mention("s1", (2, 3), "Hawaii", "Hawaii", POS.PROPN, is_ne=True),
    }


@pytest.fixture
def sample_candidates(
    sample_mentions: Dict[str, Mention], sample_meanings: Dict[str, Meaning]
) -> List[Candidate]:
    return [
        Candidate(sample_mentions["obama"], sample_meanings["obama"]),
        Candidate(sample_mentions["obama"], sample_meanings["obama_sr"]),
        Candidate(sample_mentions["visited"], sample_meanings["visit"]),
        Candidate(sample_mentions["hawaii"], sample_meanings["hawaii"]),
        Candidate(sample_mentions["hawaii"], sample_meanings["island"]),
    ]


@pytest.fixture
def sample_graph(sample_mentions: Dict[str, Mention]) -> WeightedGraph:
    """AMR-like graph of "Obama visited Hawaii"."""
    g = make_graph([("v", "o", ":ARG0"), ("v", "h", ":ARG1")])
    g.add_mention("v", sample_mentions["visited"])
    g.add_mention("o", sample_mentions["obama"])
    g.add_mention("h", sample_mentions["hawaii"])
    return g


@pytest.fixture
def sample_similarities() -> Dict[Tuple[str, str], float]:
    return {
        ("bn:obama", "bn:hawaii"): 0.6,
        ("bn:obama", "bn:visit"): 0.3,
        ("bn:visit", "bn:hawaii"): 0.4,
        ("bn:visit", "bn:island"): 0.2,
        ("bn:obama_sr", "bn:island"): 0.1,
        ("bn:hawaii", "bn:island"): 0.8,
    }


# ---------------------------------------------------------------------------
# Mock classes
# ---------------------------------------------------------------------------


class MockSimilarity:
    """Symmetric meaning similarity backed by a dict of pairs."""

    def __init__(self, pairs: Optional[Dict[Tuple[str, str], float]] = None):
        self.pairs: Dict[Tuple[str, str], float] = {}
        self.references = set()
        for (r1, r2), value in (pairs or {}).items():
            self.set(r1, r2, value)
        self.calls = 0

    def set(self, r1: str, r2: str, value: float) -> None:
        self.pairs[(r1, r2)] = value
        self.pairs[(r2, r1)] = value
        self.references.update((r1, r2))

    def is_defined(self, reference: str) -> bool:
        return reference in self.references

    def __call__(self, r1: str, r2: str) -> Optional[float]:
        self.calls += 1
        if r1 == r2:
            return 1.0
        return self.pairs.get((r1, r2))


class MockTreeSimilarity:
    """Subgraph similarity looked up by the pair of subgraph roots."""

    def __init__(self, pairs: Optional[Dict[FrozenSet[str], Optional[float]]] = None):
        self.pairs = pairs or {}

    def similarity(self, s1: Subgraph, s2: Subgraph) -> Optional[float]:
        return self.pairs.get(frozenset((s1.root, s2.root)))


# ---------------------------------------------------------------------------
# Mock fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_similarity(sample_similarities: Dict[Tuple[str, str], float]) -> MockSimilarity:
    return MockSimilarity(sample_similarities)


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(42)


# ---------------------------------------------------------------------------
# Configuration fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def minimal_config_dict() -> Dict:
    """Minimal config dict for deterministic planning."""
    return {
        "start_policy": "argmax",
        "expand_policy": "argmax",
        "num_subgraphs": 3,
        "seed": 7,
        "similarity": {
            "name": "label",
            "params": {"labels": {"bn:visit": "visit", "bn:obama": "Barack Obama"}},
        },
    }


@pytest.fixture
def temp_config_file(minimal_config_dict: Dict) -> Iterator[str]:
    """Temporary config JSON file for CLI testing."""
    with tempfile.NamedTemporaryFile(mode="w", suffix=".json", delete=False) as f:
        json.dump(minimal_config_dict, f)
        path = f.name
    yield path
    os.unlink(path)
