"""Interest classifier: weak catch-all for personal interests."""

import re

from ..models import Candidate, NodeType, Segment
from ..timeframe import TimeframeMatch, remove_span
from .base import Classifier, sentence_case, truncate

_PHRASE_END = re.compile(r"[.,;:!?]|\s+(?:and then|because|but|so)\s")


class InterestClassifier(Classifier):
    node_type = NodeType.INTEREST

    def classify(self, segment: Segment, timeframe: TimeframeMatch | None = None) -> list[Candidate]:
        if not self.settings.interest_enabled:
            return []

        text = remove_span(segment.text, timeframe)
        m = self.lexicon.pattern("interest_markers").search(text)
        if not m:
            return []

        in_section = self.lexicon.section_type(segment.section) == "interest" if segment.section else False
        if not in_section and not self.lexicon.find_all("first_person", text):
            return []

        phrase = _PHRASE_END.split(text[m.end():], maxsplit=1)[0].strip()
        label = sentence_case(truncate(phrase or text, 60))

        confidence = 0.4
        if self.lexicon.find_all("interest_strong_markers", text):
            confidence += 0.1
        confidence += self.section_bonus(segment)

        return [self.candidate(segment, label, confidence, timeframe=timeframe)]
