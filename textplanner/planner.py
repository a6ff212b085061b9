import logging
import time
from typing import List, Mapping, Optional

import numpy as np

# Ensure component registration by importing modules with registry decorators.
from textplanner import bias as _bias_pkg  # noqa: F401
from textplanner import disambiguators as _disamb_pkg  # noqa: F401
from textplanner import similarity as _similarity_pkg  # noqa: F401

from .bias.base import BiasFunction
from .config import PlanningConfig
from .discourse import DiscourseOrderer
from .extraction import REQUIREMENTS, Explorer, SubgraphExtractor, create_policy
from .graph import WeightedGraph
from .ranking import StationaryRanker, TransitionMatrixBuilder, rank_meanings, rank_variables
from .redundancy import RedundancyRemover
from .registry import bias_functions, candidate_filters, disambiguators, semantics_models, similarity_functions
from .semantics import GraphSemantics
from .similarity.base import SimilarityFunction, TreeSimilarity
from .similarity.tree import SemanticTreeSimilarity
from .subgraph import Subgraph
from .types import Candidate

logger = logging.getLogger(__name__)


class TextPlanner:
    """Orchestrates ranking, extraction, pruning and ordering of a semantic graph.

    Collaborators passed explicitly take precedence over those named in the
    configuration.
    """

    def __init__(
        self,
        config: PlanningConfig,
        similarity: Optional[SimilarityFunction] = None,
        bias: Optional[BiasFunction] = None,
        semantics: Optional[GraphSemantics] = None,
        tree_similarity: Optional[TreeSimilarity] = None,
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        self.config = config

        if similarity is None and config.similarity:
            sim_factory = similarity_functions.get(config.similarity.name)
            similarity = sim_factory(**config.similarity.params)
        if similarity is None:
            raise ValueError("A meaning similarity function is required")
        self.similarity = similarity

        if bias is None and config.bias:
            bias_factory = bias_functions.get(config.bias.name)
            bias = bias_factory(**config.bias.params)
        self.bias = bias

        cand_filter = config.candidate_filter
        self.candidate_filter_factory = candidate_filters.get(cand_filter.name) if cand_filter else None

        if semantics is None:
            semantics = semantics_models.get(config.semantics)()
        self.semantics = semantics

        disamb = config.disambiguator
        disamb_factory = disambiguators.get(disamb.name if disamb else "top")
        self.disambiguator = disamb_factory(**(disamb.params if disamb else {}))

        self.tree_similarity = tree_similarity or SemanticTreeSimilarity(
            self.similarity, role_weight=config.tree_edit_lambda
        )
        self.rng = rng if rng is not None else np.random.default_rng(config.seed)

        self.builder = TransitionMatrixBuilder(workers=config.workers)
        self.ranker = StationaryRanker(max_iterations=config.max_iterations)
        explorer = Explorer(
            semantics=self.semantics,
            constraint=config.expansion_constraint,
            start_from_verbs=config.start_from_verbs,
            requirements=REQUIREMENTS[config.explorer],
        )
        self.extractor = SubgraphExtractor(
            explorer,
            start_policy=create_policy(config.start_policy, config.softmax_temperature, self.rng),
            expand_policy=create_policy(config.expand_policy, config.softmax_temperature, self.rng),
            lambda_=config.extraction_lambda,
            max_attempts=config.max_extraction_attempts,
        )
        self.redundancy = RedundancyRemover(self.tree_similarity, threshold=config.redundancy_threshold)
        self.orderer = DiscourseOrderer(self.tree_similarity)

    def rank_meanings(self, candidates: List[Candidate]) -> Mapping[str, float]:
        candidate_filter = None
        if self.candidate_filter_factory is not None:
            candidate_filter = self.candidate_filter_factory(
                candidates, self.bias, **self.config.candidate_filter.params
            )
        return rank_meanings(
            candidates,
            self.similarity,
            bias=self.bias,
            damping=self.config.damping_meanings,
            sim_lower_bound=self.config.sim_lower_bound,
            relevance_lower_bound=self.config.relevance_lower_bound,
            epsilon=self.config.stopping_threshold,
            candidate_filter=candidate_filter,
            builder=self.builder,
            ranker=self.ranker,
        )

    def disambiguate(self, graph: WeightedGraph, candidates: List[Candidate]):
        return self.disambiguator.disambiguate(graph, candidates)

    def rank_variables(self, graph: WeightedGraph) -> Mapping[str, float]:
        return rank_variables(
            graph,
            damping=self.config.damping_variables,
            epsilon=self.config.stopping_threshold,
            builder=self.builder,
            ranker=self.ranker,
        )

    def extract_subgraphs(self, graph: WeightedGraph) -> List[Subgraph]:
        return self.extractor.extract_many(graph, self.config.num_subgraphs)

    def remove_redundant(self, subgraphs: List[Subgraph]) -> List[Subgraph]:
        return self.redundancy.filter(subgraphs)

    def order(self, subgraphs: List[Subgraph]) -> List[Subgraph]:
        return self.orderer.order(subgraphs)

    def plan(self, graph: WeightedGraph, candidates: Optional[List[Candidate]] = None) -> List[Subgraph]:
        """Runs the full planning flow and returns the ordered subgraphs.

        Candidates, when given, are ranked and used to disambiguate the graph
        before its variables are ranked. An empty graph yields an empty plan.
        """
        start = time.perf_counter()
        if candidates:
            self.rank_meanings(candidates)
            self.disambiguate(graph, candidates)
        logger.info(f"Meanings ranked in {time.perf_counter() - start:.2f}s")

        stage = time.perf_counter()
        self.rank_variables(graph)
        logger.info(f"Variables ranked in {time.perf_counter() - stage:.2f}s")

        subgraphs = self.extract_subgraphs(graph)

        stage = time.perf_counter()
        subgraphs = self.remove_redundant(subgraphs)
        ordered = self.order(subgraphs)
        logger.info(f"Subgraphs pruned and ordered in {time.perf_counter() - stage:.2f}s")
        logger.info(f"Planning done in {time.perf_counter() - start:.2f}s: {len(ordered)} subgraphs")
        return ordered
