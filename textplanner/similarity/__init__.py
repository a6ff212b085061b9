"""Similarity functions between meanings and between subgraphs."""

from .label import LabelSimilarity  # noqa: F401
from .vectors import PairwiseSimilarity, VectorsCosineSimilarity  # noqa: F401
from .tree import SemanticTree, SemanticTreeSimilarity  # noqa: F401
