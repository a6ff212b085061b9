from typing import Any, Callable, Dict, TypeVar

T = TypeVar("T")


class ComponentRegistry:
    """Simple registry to keep collaborators pluggable."""

    def __init__(self, kind: str) -> None:
        self.kind = kind
        self._registry: Dict[str, Callable[..., Any]] = {}

    def register(self, name: str) -> Callable[[Callable[..., T]], Callable[..., T]]:
        def decorator(factory: Callable[..., T]) -> Callable[..., T]:
            if name in self._registry:
                raise ValueError(f"{self.kind} '{name}' already registered.")
            self._registry[name] = factory
            return factory

        return decorator

    def get(self, name: str) -> Callable[..., Any]:
        try:
            return self._registry[name]
        except KeyError as exc:
            raise KeyError(f"{self.kind} '{name}' not found.") from exc

    def available(self) -> Dict[str, Callable[..., Any]]:
        return dict(self._registry)


# Registries per collaborator type
similarity_functions = ComponentRegistry("Similarity function")
bias_functions = ComponentRegistry("Bias function")
semantics_models = ComponentRegistry("Semantics model")
disambiguators = ComponentRegistry("Disambiguator")
candidate_filters = ComponentRegistry("Candidate filter")
