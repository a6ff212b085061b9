import itertools
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple


class POS(str, Enum):
    """Universal Dependencies part-of-speech tags."""

    ADJ = "ADJ"
    ADP = "ADP"
    ADV = "ADV"
    AUX = "AUX"
    CCONJ = "CCONJ"
    DET = "DET"
    INTJ = "INTJ"
    NOUN = "NOUN"
    NUM = "NUM"
    PART = "PART"
    PRON = "PRON"
    PROPN = "PROPN"
    PUNCT = "PUNCT"
    SCONJ = "SCONJ"
    SYM = "SYM"
    VERB = "VERB"
    X = "X"


_mention_ids = itertools.count()


@dataclass(frozen=True, eq=False)
class Meaning:
    """Word sense, real-world entity or any other datum a mention may refer to.

    Meanings are value objects: two meanings are equal when their references are.
    """

    reference: str
    label: str = ""
    is_ne: bool = False
    type: str = ""

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Meaning):
            return NotImplemented
        return self.reference == other.reference

    def __hash__(self) -> int:
        return hash(self.reference)

    def __str__(self) -> str:
        return f"{self.reference}-{self.label}" if self.label else self.reference


@dataclass(eq=False)
class Mention:
    """A sequence of one or more consecutive tokens in a source context."""

    source_id: str
    span: Tuple[int, int]
    surface_form: str
    lemma: str = ""
    pos: POS = POS.X
    is_ne: bool = False
    context_id: str = ""
    type: str = ""
    id: int = field(default_factory=lambda: next(_mention_ids))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Mention):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    @property
    def start(self) -> int:
        return self.span[0]

    @property
    def end(self) -> int:
        return self.span[1]

    @property
    def is_multiword(self) -> bool:
        return self.end - self.start > 1

    @property
    def is_nominal(self) -> bool:
        return self.pos in (POS.NOUN, POS.PROPN)

    @property
    def is_verbal(self) -> bool:
        return self.pos == POS.VERB

    def spans_over(self, other: "Mention") -> bool:
        """True if this mention's span covers the other's within the same source."""
        return (
            self.source_id == other.source_id
            and self.start <= other.start
            and self.end >= other.end
        )

    def __str__(self) -> str:
        return f"{self.id}_{self.source_id}_{self.span}_{self.surface_form}"


@dataclass(eq=False)
class Candidate:
    """Pairing of a mention with one of its candidate meanings."""

    mention: Mention
    meaning: Meaning
    weight: Optional[float] = None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Candidate):
            return NotImplemented
        return self.mention == other.mention and self.meaning == other.meaning

    def __hash__(self) -> int:
        return hash((self.mention, self.meaning))

    def __str__(self) -> str:
        return f"{self.mention.source_id} {self.mention.span} {self.meaning}"
