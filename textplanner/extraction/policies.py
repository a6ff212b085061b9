from typing import Optional, Protocol, Sequence

import numpy as np


class Policy(Protocol):
    """Selects one option given the weights of all options."""

    def select(self, weights: Sequence[float]) -> int:
        ...


class ArgMaxPolicy:
    """Selects the option with the highest weight; ties go to the first one."""

    def select(self, weights: Sequence[float]) -> int:
        if len(weights) == 0:
            raise ValueError("Cannot select from an empty list of weights.")
        return int(np.argmax(np.asarray(weights, dtype=np.float64)))


class SoftMaxPolicy:
    """Samples an option from a softmax distribution over rebased weights.

    Low temperatures boost the probability of high weight options while
    keeping some randomness. Pass a seeded generator for reproducible runs.
    """

    def __init__(self, temperature: float = 0.01, rng: Optional[np.random.Generator] = None):
        if temperature <= 0.0:
            raise ValueError(f"Temperature must be positive, got {temperature}")
        self.temperature = temperature
        self.rng = rng if rng is not None else np.random.default_rng()

    def probabilities(self, weights: Sequence[float]) -> np.ndarray:
        w = np.asarray(weights, dtype=np.float64)
        lo, hi = w.min(), w.max()
        if lo == hi:
            return np.full(len(w), 1.0 / len(w))
        rebased = (w - lo) / (hi - lo)
        # max of rebased is 1, so exponents stay <= 0
        exps = np.exp((rebased - 1.0) / self.temperature)
        return exps / exps.sum()

    def select(self, weights: Sequence[float]) -> int:
        if len(weights) == 0:
            raise ValueError("Cannot select from an empty list of weights.")
        if len(weights) == 1:
            return 0
        return int(self.rng.choice(len(weights), p=self.probabilities(weights)))


def create_policy(name: str, temperature: float = 0.01, rng: Optional[np.random.Generator] = None) -> Policy:
    if name == "argmax":
        return ArgMaxPolicy()
    if name == "softmax":
        return SoftMaxPolicy(temperature, rng)
    raise ValueError(f"Unknown policy: {name}")
