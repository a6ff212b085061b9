from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from textplanner.extraction.explorer import REQUIREMENTS, ExpansionConstraint

POLICIES = ("argmax", "softmax")
COMPONENT_SECTIONS = ("similarity", "bias", "disambiguator", "candidate_filter")


@dataclass
class ComponentConfig:
    """Generic component configuration."""

    name: str
    params: Dict[str, Any] = field(default_factory=dict)


@dataclass
class PlanningConfig:
    """Top-level planning configuration."""

    damping_meanings: float = 0.2
    damping_variables: float = 0.2
    sim_lower_bound: float = 0.0
    relevance_lower_bound: float = 0.0
    redundancy_threshold: float = 0.5
    num_subgraphs: int = 10
    max_extraction_attempts: int = 1000
    expansion_constraint: str = "same_source"
    start_policy: str = "softmax"
    expand_policy: str = "argmax"
    extraction_lambda: float = 1.0
    softmax_temperature: float = 0.01
    start_from_verbs: bool = True
    explorer: str = "single_vertex"
    semantics: str = "amr"
    max_iterations: int = 10000
    stopping_threshold: Optional[float] = None
    tree_edit_lambda: float = 0.0
    seed: Optional[int] = None
    workers: int = 1
    similarity: Optional[ComponentConfig] = None
    bias: Optional[ComponentConfig] = None
    disambiguator: Optional[ComponentConfig] = None
    candidate_filter: Optional[ComponentConfig] = None

    def __post_init__(self) -> None:
        for policy in (self.start_policy, self.expand_policy):
            if policy not in POLICIES:
                raise ValueError(f"Unknown policy '{policy}', expected one of {POLICIES}")
        try:
            ExpansionConstraint(self.expansion_constraint)
        except ValueError as exc:
            raise ValueError(f"Unknown expansion constraint '{self.expansion_constraint}'") from exc
        if self.explorer not in REQUIREMENTS:
            raise ValueError(f"Unknown explorer '{self.explorer}', expected one of {sorted(REQUIREMENTS)}")
        for name in ("damping_meanings", "damping_variables"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be in [0, 1], got {value}")
        if self.num_subgraphs < 0:
            raise ValueError(f"num_subgraphs must be non-negative, got {self.num_subgraphs}")
        if self.max_extraction_attempts < 1:
            raise ValueError(f"max_extraction_attempts must be positive, got {self.max_extraction_attempts}")

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "PlanningConfig":
        def build(section: str) -> Optional[ComponentConfig]:
            if section not in data or data[section] is None:
                return None
            entry = data[section]
            return ComponentConfig(name=entry["name"], params=entry.get("params", {}))

        known = set(PlanningConfig.__dataclass_fields__) - set(COMPONENT_SECTIONS)
        unknown = set(data) - known - set(COMPONENT_SECTIONS)
        if unknown:
            raise ValueError(f"Unknown configuration fields: {sorted(unknown)}")

        return PlanningConfig(
            **{section: build(section) for section in COMPONENT_SECTIONS},
            **{k: v for k, v in data.items() if k in known},
        )

    def to_dict(self) -> Dict[str, Any]:
        data = {k: getattr(self, k) for k in self.__dataclass_fields__}
        for section in COMPONENT_SECTIONS:
            entry = data[section]
            data[section] = None if entry is None else {"name": entry.name, "params": entry.params}
        return data
