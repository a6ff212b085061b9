"""Biased graph ranking of meanings and variables."""

from .matrix import TransitionMatrixBuilder, is_row_stochastic, rebase  # noqa: F401
from .power_iteration import StationaryRanker  # noqa: F401
from .ranker import (  # noqa: F401
    DifferentMentionsFilter,
    POSFilter,
    TopCandidatesFilter,
    pos_filter,
    rank_meanings,
    rank_variables,
    top_candidates_filter,
)
