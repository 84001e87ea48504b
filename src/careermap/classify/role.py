"""Role classifier: "<title> at <company>" lines."""

import re

from ..models import Candidate, NodeType, Segment
from ..timeframe import TimeframeMatch, remove_span
from .base import Classifier

ROLE_PATTERN = re.compile(
    r"^(?P<title>.+?)\s+(?:at|@)\s+(?P<company>.+?)(?:\s*[(\[•·|]|\s+[-–—]\s+|\s*$)",
    re.IGNORECASE,
)
# Where a company name ends inside running prose.
_COMPANY_END = re.compile(r"[,;]\s|\.\s|\s+(?:where|which|who|when|while|since|because|but)\s", re.IGNORECASE)
_SENTENCE_BREAK = re.compile(r"[.!?]\s+")
_BECOME = re.compile(r"\bbecom(?:e|es|ing)\b", re.IGNORECASE)


class RoleClassifier(Classifier):
    """Job roles such as "Software Engineer at TechCorp (2022-2024)"."""

    node_type = NodeType.ROLE

    def classify(self, segment: Segment, timeframe: TimeframeMatch | None = None) -> list[Candidate]:
        text = remove_span(segment.text, timeframe)
        m = ROLE_PATTERN.match(text)
        if not m:
            return []

        title = self._clean_title(m.group("title"))
        if self._is_intent(title):
            return []
        company = _COMPANY_END.split(m.group("company"), maxsplit=1)[0].strip(" ,;:.-–—")

        title_lo, title_hi = self.settings.role_title_len
        company_lo, company_hi = self.settings.company_len
        if not (title_lo < len(title) < title_hi and company_lo < len(company) < company_hi):
            return []

        keywords = self.lexicon.find_all("role_keywords", title)
        if not keywords:
            return []

        confidence = 0.6 + 0.05 * min(len(keywords) - 1, 2)
        if timeframe:
            confidence += 0.15
        confidence += self.section_bonus(segment)

        return [self.candidate(segment, f"{title} at {company}", confidence, timeframe=timeframe)]

    def _is_intent(self, title: str) -> bool:
        """Titles such as "My goal is to become a lead engineer" name a wish, not a job."""
        return bool(
            _BECOME.search(title)
            or self.lexicon.find_all("goal_markers", title)
            or self.lexicon.find_all("goal_past_markers", title)
        )

    def _clean_title(self, title: str) -> str:
        # Keep only the clause that introduces the role.
        title = _SENTENCE_BREAK.split(title)[-1].strip(" ,;:-–—")
        for prefix in self.lexicon.get("title_prefixes"):
            m = re.match(rf"^(?:i\s+)?{re.escape(prefix)}\s+(?:an?\s+|the\s+)?", title, re.IGNORECASE)
            if m:
                title = title[m.end():]
                break
        return title[:1].upper() + title[1:]
