from typing import Dict, Mapping

from textplanner.registry import bias_functions


@bias_functions.register("mapping")
class MappingBias:
    """Bias values read from a precomputed table, e.g. domain relevance scores.

    References absent from the table get `default`.
    """

    def __init__(self, weights: Mapping[str, float], default: float = 0.0):
        self.weights: Dict[str, float] = dict(weights)
        self.default = default

    def is_defined(self, reference: str) -> bool:
        return reference in self.weights

    def __call__(self, reference: str) -> float:
        return self.weights.get(reference, self.default)


@bias_functions.register("uniform")
class UniformBias:
    """Same bias for every reference."""

    def __init__(self, value: float = 1.0):
        self.value = value

    def is_defined(self, reference: str) -> bool:
        return True

    def __call__(self, reference: str) -> float:
        return self.value
