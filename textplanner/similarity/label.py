from typing import Dict, Optional

from rapidfuzz import fuzz

from textplanner.registry import similarity_functions


@similarity_functions.register("label")
class LabelSimilarity:
    """Fuzzy string similarity between the labels of two meanings."""

    def __init__(self, labels: Dict[str, str], scorer: str = "token_sort_ratio"):
        self.labels = labels
        try:
            self.scorer = getattr(fuzz, scorer)
        except AttributeError as exc:
            raise ValueError(f"Unknown rapidfuzz scorer: {scorer}") from exc

    def is_defined(self, reference: str) -> bool:
        return bool(self.labels.get(reference))

    def __call__(self, r1: str, r2: str) -> Optional[float]:
        if not (self.is_defined(r1) and self.is_defined(r2)):
            return None
        if r1 == r2:
            return 1.0
        return float(self.scorer(self.labels[r1], self.labels[r2])) / 100.0
