"""Education classifier."""

from ..models import Candidate, NodeType, Segment
from ..timeframe import TimeframeMatch, remove_span
from .base import Classifier, trim_dangling, truncate


class EducationClassifier(Classifier):
    """Degrees, schools and universities."""

    node_type = NodeType.EDUCATION

    def classify(self, segment: Segment, timeframe: TimeframeMatch | None = None) -> list[Candidate]:
        text = trim_dangling(remove_span(segment.text, timeframe)) if timeframe else segment.text
        keywords = self.lexicon.find_all("education_keywords", text)
        if not keywords or not text:
            return []

        confidence = 0.55 + 0.1 * min(len(keywords) - 1, 2)
        if timeframe:
            confidence += 0.1
        confidence += self.section_bonus(segment)

        label = truncate(text, self.settings.label_max)
        return [self.candidate(segment, label, confidence, timeframe=timeframe)]
