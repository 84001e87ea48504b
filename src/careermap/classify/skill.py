"""Skill classifier: list-like lines of short tokens."""

import re

from ..models import Candidate, NodeType, Segment
from ..timeframe import TimeframeMatch
from .base import Classifier, words

HEADER_PATTERN = re.compile(r"^(?P<header>[A-Za-z][A-Za-z0-9 /&+'-]{0,40}?)\s*:\s*(?P<body>.+)$")
_SEPARATORS = re.compile(r"\s*(?:[,;|•·]|\s-\s)\s*")
_TERMINAL = re.compile(r"[.!?]\s")


class SkillClassifier(Classifier):
    """Skills from "Skills: a, b, c" lines, bare token lists and skills sections.

    The only classifier allowed to return several candidates for one segment.
    """

    node_type = NodeType.SKILL
    multi = True

    def classify(self, segment: Segment, timeframe: TimeframeMatch | None = None) -> list[Candidate]:
        if segment.kind != "line":
            return []

        text = segment.text
        bonus = self.section_bonus(segment)
        in_section = self.lexicon.section_type(segment.section) == "skill" if segment.section else False
        headers = set(self.lexicon.get("skill_headers"))

        m = HEADER_PATTERN.match(text)
        if m and m.group("header").strip().lower() in headers:
            tokens = self._tokens(m.group("body"))
            return self._emit(segment, tokens, 0.7 + bonus)

        if in_section:
            if m:
                # "Leadership: Led the mobile app team" names one skill.
                name = m.group("header").strip()
                if self._valid(name):
                    return self._emit(segment, [name], 0.6 + bonus, matched_span=name)
                return []
            tokens = self._tokens(text)
            if len(tokens) > 1 or (tokens and len(words(text)) <= 4):
                return self._emit(segment, tokens, 0.6 + bonus)
            return []

        # Bare list such as "Python | SQL | Docker".
        if _TERMINAL.search(text) or self._starts_with_verb(text):
            return []
        parts = [p for p in _SEPARATORS.split(text.rstrip(".")) if p]
        tokens = self._tokens(text)
        if len(parts) >= self.settings.skill_min_tokens and len(tokens) == len(parts):
            if all(len(words(t)) <= 3 for t in tokens):
                return self._emit(segment, tokens, 0.5 + bonus)
        return []

    def _tokens(self, body: str) -> list[str]:
        tokens: list[str] = []
        seen: set[str] = set()
        for part in _SEPARATORS.split(body.strip().rstrip(".")):
            token = part.strip(" .")
            token = re.sub(r"^(?:and|or)\s+", "", token, flags=re.IGNORECASE)
            if token.lower() in ("etc", "and more") or not self._valid(token):
                continue
            if token.lower() not in seen:
                seen.add(token.lower())
                tokens.append(token)
        return tokens

    def _valid(self, token: str) -> bool:
        if not self.settings.skill_min_token_len <= len(token) <= self.settings.skill_token_max:
            return False
        # One-letter languages such as C and R.
        if len(token) == 1 and not token.isupper():
            return False
        return 0 < len(words(token)) <= 4

    def _starts_with_verb(self, text: str) -> bool:
        first = words(text)[:1]
        if not first:
            return True
        word = first[0].lower()
        return word.endswith("ed") or word in self.lexicon.get("project_verbs")

    def _emit(self, segment: Segment, tokens: list[str], confidence: float, matched_span: str | None = None) -> list[Candidate]:
        return [
            self.candidate(segment, token, confidence, matched_span=matched_span or token, ordinal=i)
            for i, token in enumerate(tokens)
        ]
