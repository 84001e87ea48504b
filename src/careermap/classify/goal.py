"""Goal classifier: forward-looking statements."""

from ..models import Candidate, NodeType, Segment
from ..timeframe import TimeframeMatch, remove_span
from .base import Classifier, sentence_case, trim_dangling, truncate, words


class GoalClassifier(Classifier):
    node_type = NodeType.GOAL

    def classify(self, segment: Segment, timeframe: TimeframeMatch | None = None) -> list[Candidate]:
        text = trim_dangling(remove_span(segment.text, timeframe)) if timeframe else segment.text
        if not self.lexicon.find_all("goal_markers", text):
            return []
        if len(words(text)) < self.settings.goal_min_words:
            return []
        # Goals already reached are history, not intent.
        if self.lexicon.find_all("goal_past_markers", text):
            return []

        confidence = 0.55
        if self.lexicon.find_all("goal_strong_markers", text):
            confidence += 0.1
        confidence += self.section_bonus(segment)

        label = sentence_case(truncate(text, self.settings.label_max))
        return [self.candidate(segment, label, confidence, timeframe=timeframe)]
