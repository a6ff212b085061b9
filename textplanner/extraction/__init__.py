"""Subgraph extraction."""

from .explorer import (  # noqa: F401
    REQUIREMENTS,
    ExpansionConstraint,
    Explorer,
    requirements_closure,
    single_vertex,
)
from .extractor import SubgraphExtractor  # noqa: F401
from .policies import ArgMaxPolicy, Policy, SoftMaxPolicy, create_policy  # noqa: F401
