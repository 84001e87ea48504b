"""Abstract base class for entity classifiers."""

import re
from abc import ABC, abstractmethod

from ..config import AnalyzerSettings
from ..lexicon import Lexicon
from ..models import Candidate, NodeType, Segment
from ..timeframe import TimeframeMatch

_WORD = re.compile(r"[A-Za-z][A-Za-z0-9+#.'-]*")
_DANGLING = {
    "a", "an", "the", "in", "on", "at", "by", "from", "since", "during", "until",
    "through", "between", "of", "for", "to", "and", "or", "with",
}


class Classifier(ABC):
    """Common interface: score one segment for one node type."""

    node_type: NodeType
    # Only the skill classifier may emit several candidates per segment.
    multi: bool = False

    def __init__(self, lexicon: Lexicon, settings: AnalyzerSettings):
        self.lexicon = lexicon
        self.settings = settings

    @abstractmethod
    def classify(self, segment: Segment, timeframe: TimeframeMatch | None = None) -> list[Candidate]:
        """Return zero or one candidate (several for multi classifiers)."""

    def section_bonus(self, segment: Segment) -> float:
        """Boost for segments under a heading that names this classifier's type."""
        if segment.section and self.lexicon.section_type(segment.section) == self.node_type.value:
            return self.settings.section_boost
        return 0.0

    def candidate(
        self,
        segment: Segment,
        label: str,
        confidence: float,
        matched_span: str | None = None,
        timeframe: TimeframeMatch | None = None,
        ordinal: int = 0,
    ) -> Candidate:
        return Candidate(
            node_type=self.node_type,
            label=label,
            confidence=round(min(max(confidence, 0.0), 1.0), 4),
            matched_span=matched_span if matched_span is not None else segment.text,
            segment=segment,
            timeframe=timeframe.timeframe if timeframe else None,
            ordinal=ordinal,
        )


def words(text: str) -> list[str]:
    return _WORD.findall(text)


def truncate(text: str, max_len: int) -> str:
    """Shorten text to at most ``max_len`` characters on a word boundary."""
    text = text.strip()
    if len(text) <= max_len:
        return text
    cut = text[:max_len - 3].rsplit(" ", 1)[0].rstrip(" ,;:-")
    return f"{cut}..."


def sentence_case(text: str) -> str:
    return text[:1].upper() + text[1:] if text else text


def trim_dangling(text: str) -> str:
    """Drop words left hanging once a date is cut out ("a portal in")."""
    tokens = text.split()
    while len(tokens) > 1 and tokens[-1].lower().strip(",;:") in _DANGLING:
        tokens.pop()
    return " ".join(tokens)
