"""Content selection and discourse planning over weighted semantic graphs."""

__all__ = [
    "PlanningConfig",
    "TextPlanner",
    "WeightedGraph",
    "Subgraph",
]

__version__ = "0.1.0"

from .config import PlanningConfig  # noqa: E402
from .graph import WeightedGraph  # noqa: E402
from .planner import TextPlanner  # noqa: E402
from .subgraph import Subgraph  # noqa: E402
