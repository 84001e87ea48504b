"""Project classifier: accomplishment verbs with a concrete object."""

from ..models import Candidate, NodeType, Segment
from ..timeframe import TimeframeMatch, remove_span
from .base import Classifier, sentence_case, trim_dangling, truncate, words

STOPWORDS = {
    "a", "an", "the", "my", "our", "their", "his", "her", "its", "it", "this",
    "that", "with", "using", "and", "or", "of", "to", "for", "on", "in", "by",
    "we", "i", "was", "were", "is", "are", "be", "as", "at", "from", "up",
}


class ProjectClassifier(Classifier):
    """Things the author built, led or shipped."""

    node_type = NodeType.PROJECT

    def classify(self, segment: Segment, timeframe: TimeframeMatch | None = None) -> list[Candidate]:
        text = trim_dangling(remove_span(segment.text, timeframe)) if timeframe else segment.text
        m = self.lexicon.pattern("project_verbs").search(text)
        if not m:
            return []

        object_words = [w.lower() for w in words(text[m.end():]) if w.lower() not in STOPWORDS]
        if not any(len(w) >= 3 for w in object_words):
            return []

        confidence = 0.45
        nouns = set(self.lexicon.get("project_nouns"))
        if any(w in nouns for w in object_words):
            confidence += 0.1
        confidence += self.section_bonus(segment)

        label = sentence_case(truncate(text, self.settings.label_max))
        return [self.candidate(segment, label, confidence, timeframe=timeframe)]
