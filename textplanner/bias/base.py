from typing import Protocol


class BiasFunction(Protocol):
    """Prior relevance of meaning references, in [0, 1]."""

    def __call__(self, reference: str) -> float:
        ...

    def is_defined(self, reference: str) -> bool:
        ...
