"""Keyword lists driving the entity classifiers."""

import re
from pathlib import Path
from typing import Any

import yaml


DEFAULT_LEXICON: dict[str, list[str]] = {
    "role_keywords": [
        "engineer", "developer", "manager", "analyst", "consultant", "designer",
        "architect", "scientist", "researcher", "intern", "director", "lead",
        "specialist", "coordinator", "administrator", "officer", "assistant",
        "associate", "head", "president", "founder", "co-founder", "teacher",
        "professor", "lecturer", "instructor", "tutor", "programmer", "technician",
        "editor", "writer", "accountant", "strategist", "owner", "executive",
        "advisor", "representative", "supervisor", "volunteer", "fellow",
    ],
    "education_keywords": [
        "university", "college", "bachelor", "bachelors", "master", "masters",
        "phd", "ph.d", "doctorate", "degree", "diploma", "mba", "bsc", "msc",
        "b.sc", "m.sc", "b.a", "m.a", "institute", "academy", "school", "bootcamp",
    ],
    "project_verbs": [
        "built", "developed", "led", "implemented", "created", "designed",
        "launched", "deployed", "architected", "shipped", "delivered", "founded",
        "prototyped", "automated", "migrated",
    ],
    "project_nouns": [
        "app", "application", "applications", "platform", "system", "portal",
        "api", "apis", "tool", "website", "site", "service", "pipeline",
        "dashboard", "project", "model", "models", "library", "feature",
        "prototype", "solution", "product", "database",
    ],
    "goal_markers": [
        "want to", "wants to", "plan to", "planning to", "aspire to", "hope to",
        "aim to", "intend to", "would like to", "looking to", "goal", "goals",
        "next steps", "objective", "ambition", "dream of",
    ],
    "goal_strong_markers": ["want to", "plan to", "aspire to", "hope to"],
    "goal_past_markers": [
        "wanted to", "planned to", "hoped to", "aspired to", "aimed to",
        "intended to", "achieved", "reached my goal", "met my goal",
    ],
    "skill_headers": [
        "skills", "skill", "technical skills", "programming", "programming languages",
        "languages", "tools", "frameworks", "technologies", "tech stack",
        "methodologies", "platforms", "databases", "libraries", "competencies",
    ],
    "interest_markers": [
        "interested in", "interest in", "passionate about", "enjoy", "enjoys",
        "love", "fascinated by", "curious about", "hobby", "hobbies",
        "in my free time", "in my spare time", "enthusiast",
    ],
    "interest_strong_markers": ["passionate about", "interested in", "fascinated by"],
    "first_person": ["i", "i'm", "i've", "my", "me", "myself"],
    "title_prefixes": ["started as", "worked as", "working as", "joined as", "served as", "began as"],
}

# Section heading words that name a node type.
SECTION_TYPES: dict[str, str] = {
    "experience": "role",
    "employment": "role",
    "work history": "role",
    "career": "role",
    "education": "education",
    "academic": "education",
    "projects": "project",
    "project": "project",
    "skills": "skill",
    "skill": "skill",
    "goals": "goal",
    "goal": "goal",
    "aspirations": "goal",
    "objectives": "goal",
    "interests": "interest",
    "hobbies": "interest",
}


class Lexicon:
    """Holds keyword lists and precompiled matchers for the classifiers."""

    def __init__(self, words: dict[str, list[str]] | None = None):
        self.words: dict[str, list[str]] = {k: list(v) for k, v in DEFAULT_LEXICON.items()}
        if words:
            for key, values in words.items():
                if key not in self.words:
                    raise ValueError(f"Unknown lexicon list: {key}")
                self.words[key] = [str(v).lower() for v in values]
        self._patterns: dict[str, re.Pattern] = {}

    def get(self, key: str) -> list[str]:
        return self.words[key]

    def pattern(self, key: str) -> re.Pattern:
        """Case-insensitive whole-word alternation over a keyword list."""
        if key not in self._patterns:
            terms = sorted(self.words[key], key=len, reverse=True)
            alternation = "|".join(re.escape(t) for t in terms)
            self._patterns[key] = re.compile(rf"(?<![\w.])(?:{alternation})(?![\w])", re.IGNORECASE)
        return self._patterns[key]

    def find_all(self, key: str, text: str) -> list[str]:
        """Distinct keywords from ``key`` present in text, lowercased, first-seen order."""
        found: list[str] = []
        for match in self.pattern(key).finditer(text):
            word = match.group(0).lower()
            if word not in found:
                found.append(word)
        return found

    def section_type(self, section: str) -> str | None:
        """Map a section heading to the node type it introduces."""
        heading = section.lower()
        for word, node_type in SECTION_TYPES.items():
            if re.search(rf"\b{re.escape(word)}\b", heading):
                return node_type
        return None


def load_lexicon(lexicon_path: str | Path | None = None) -> Lexicon:
    """Load keyword overrides from YAML, falling back to the built-in lists.

    The YAML maps list names (e.g. ``role_keywords``) to lists of terms. A
    list named ``extra_<name>`` is appended to the default instead of
    replacing it.
    """
    if not lexicon_path:
        return Lexicon()

    path = Path(lexicon_path)
    if not path.exists():
        raise FileNotFoundError(f"Lexicon file not found: {path}")

    with open(path) as f:
        data: dict[str, Any] = yaml.safe_load(f) or {}

    words: dict[str, list[str]] = {}
    for key, values in data.items():
        if key.startswith("extra_"):
            base = key.removeprefix("extra_")
            words[base] = DEFAULT_LEXICON.get(base, []) + list(values)
        else:
            words[key] = list(values)
    return Lexicon(words)
