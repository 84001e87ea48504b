"""Tests for the per-type classifiers."""

import pytest

from careermap.classify import (
    EducationClassifier,
    GoalClassifier,
    InterestClassifier,
    ProjectClassifier,
    RoleClassifier,
    SkillClassifier,
    build_classifiers,
)
from careermap.config import AnalyzerSettings
from careermap.lexicon import Lexicon
from careermap.models import TYPE_PRIORITY, NodeType, Segment, Timeframe
from careermap.timeframe import find_timeframe


def _seg(text: str, section: str = "", kind: str = "line") -> Segment:
    return Segment(text=text, source_document="doc.txt", index=0, kind=kind, section=section)


def _run(cls, text: str, section: str = "", kind: str = "line", settings: AnalyzerSettings | None = None):
    classifier = cls(Lexicon(), settings or AnalyzerSettings())
    return classifier.classify(_seg(text, section, kind), find_timeframe(text))


def test_build_classifiers_in_priority_order():
    classifiers = build_classifiers(Lexicon(), AnalyzerSettings())
    assert [c.node_type for c in classifiers] == TYPE_PRIORITY
    assert [c.multi for c in classifiers].count(True) == 1


def test_role_with_date_range():
    [c] = _run(RoleClassifier, "Software Engineer at TechCorp (2022-2024)")
    assert c.node_type == NodeType.ROLE
    assert c.label == "Software Engineer at TechCorp"
    assert c.timeframe == Timeframe("2022", "2024")
    assert c.confidence == pytest.approx(0.75)
    assert c.matched_span == "Software Engineer at TechCorp (2022-2024)"


def test_role_without_date_scores_lower():
    [c] = _run(RoleClassifier, "Junior Developer at StartupXYZ")
    assert c.confidence == pytest.approx(0.6)
    assert c.timeframe is None


def test_role_strips_leading_phrase_in_prose():
    text = "Started as an intern at TechCorp, where I learned the fundamentals of web development."
    [c] = _run(RoleClassifier, text, kind="sentence")
    assert c.label == "Intern at TechCorp"


def test_role_requires_keyword_and_bounds():
    assert _run(RoleClassifier, "Coffee at Starbucks") == []
    assert _run(RoleClassifier, "x" * 90 + " engineer at Corp") == []
    assert _run(RoleClassifier, "Engineer at ") == []


def test_role_rejects_goals_and_past_wishes():
    assert _run(RoleClassifier, "My goal is to become a lead engineer at Google") == []
    assert _run(RoleClassifier, "I wanted to become a manager at Acme but it did not work out") == []
    assert _run(RoleClassifier, "Plan to work as a data engineer at Spotify") == []


def test_role_company_stops_at_but():
    [c] = _run(RoleClassifier, "Senior Engineer at Acme but the team was small", kind="sentence")
    assert c.label == "Senior Engineer at Acme"


def test_role_section_bonus():
    [c] = _run(RoleClassifier, "Data Analyst at Acme", section="EXPERIENCE")
    assert c.confidence == pytest.approx(0.7)


def test_education():
    [c] = _run(EducationClassifier, "Bachelor of Computer Science, University of Technology (2016-2020)")
    assert c.node_type == NodeType.EDUCATION
    assert c.label == "Bachelor of Computer Science, University of Technology"
    assert c.timeframe == Timeframe("2016", "2020")
    assert c.confidence == pytest.approx(0.75)


def test_education_label_is_truncated():
    settings = AnalyzerSettings(label_max=30)
    [c] = _run(EducationClassifier, "Master of Science in Data Engineering and Applied Statistics", settings=settings)
    assert len(c.label) <= 30
    assert c.label.endswith("...")


def test_project():
    [c] = _run(ProjectClassifier, "Built REST APIs with Node.js and Express")
    assert c.node_type == NodeType.PROJECT
    assert c.label == "Built REST APIs with Node.js and Express"
    assert c.confidence == pytest.approx(0.55)


def test_project_without_deliverable_noun():
    [c] = _run(ProjectClassifier, "Led the migration effort")
    assert c.confidence == pytest.approx(0.45)


def test_project_needs_an_object():
    assert _run(ProjectClassifier, "I led.") == []
    assert _run(ProjectClassifier, "Collaborated with designers") == []


def test_project_label_drops_words_left_by_the_date():
    [c] = _run(ProjectClassifier, "Developed a customer portal in 2019 - 2020")
    assert c.label == "Developed a customer portal"
    assert c.timeframe == Timeframe("2019", "2020")


def test_goal_label_drops_words_left_by_the_date():
    [c] = _run(GoalClassifier, "I plan to finish my degree by March 2026")
    assert c.label == "I plan to finish my degree"


def test_goal():
    [c] = _run(GoalClassifier, "Want to become a senior software architect")
    assert c.node_type == NodeType.GOAL
    assert c.label == "Want to become a senior software architect"
    assert c.confidence == pytest.approx(0.65)
    assert c.timeframe is None


def test_goal_rejects_past_tense():
    assert _run(GoalClassifier, "I wanted to become a manager back then") == []
    assert _run(GoalClassifier, "Achieved my goal of running a marathon") == []


def test_goal_weak_marker():
    [c] = _run(GoalClassifier, "My goal is to become a cloud architect")
    assert c.confidence == pytest.approx(0.55)


def test_skill_header_list():
    cands = _run(SkillClassifier, "Programming: JavaScript, Python, TypeScript, Java")
    assert [c.label for c in cands] == ["JavaScript", "Python", "TypeScript", "Java"]
    assert [c.ordinal for c in cands] == [0, 1, 2, 3]
    assert all(c.confidence == pytest.approx(0.7) for c in cands)


def test_skill_header_in_skills_section():
    cands = _run(SkillClassifier, "Tools: Git, Docker, AWS", section="SKILLS")
    assert [c.label for c in cands] == ["Git", "Docker", "AWS"]
    assert all(c.confidence == pytest.approx(0.8) for c in cands)


def test_skill_bare_list():
    cands = _run(SkillClassifier, "Python | SQL | Docker")
    assert [c.label for c in cands] == ["Python", "SQL", "Docker"]
    assert all(c.confidence == pytest.approx(0.5) for c in cands)


def test_skill_single_letter_languages():
    cands = _run(SkillClassifier, "Skills: C, R, Go, SQL")
    assert [c.label for c in cands] == ["C", "R", "Go", "SQL"]
    assert [c.label for c in _run(SkillClassifier, "Skills: x, Go, SQL")] == ["Go", "SQL"]


def test_skill_min_token_len():
    settings = AnalyzerSettings(skill_min_token_len=3)
    cands = _run(SkillClassifier, "Skills: C, Go, SQL, Rust", settings=settings)
    assert [c.label for c in cands] == ["SQL", "Rust"]


def test_skill_named_item_under_skills_heading():
    [c] = _run(SkillClassifier, "Leadership: Led the mobile app project team", section="Skills I've developed")
    assert c.label == "Leadership"
    assert c.confidence == pytest.approx(0.7)


def test_skill_rejects_prose_and_sentences():
    assert _run(SkillClassifier, "Developed apps, APIs, and tools") == []
    assert _run(SkillClassifier, "Python, SQL") == []
    assert _run(SkillClassifier, "Python, SQL, Docker", kind="sentence") == []


def test_interest():
    [c] = _run(InterestClassifier, "I am passionate about rock climbing.")
    assert c.node_type == NodeType.INTEREST
    assert c.label == "Rock climbing"
    assert c.confidence == pytest.approx(0.5)


def test_interest_needs_personal_context():
    assert _run(InterestClassifier, "Passionate about climbing") == []
    [c] = _run(InterestClassifier, "Passionate about climbing", section="INTERESTS")
    assert c.label == "Climbing"


def test_interest_can_be_disabled():
    settings = AnalyzerSettings(interest_enabled=False)
    assert _run(InterestClassifier, "I love painting", settings=settings) == []


def test_custom_lexicon():
    lexicon = Lexicon({"role_keywords": ["barista"]})
    classifier = RoleClassifier(lexicon, AnalyzerSettings())
    [c] = classifier.classify(_seg("Head Barista at Blue Bottle"))
    assert c.label == "Head Barista at Blue Bottle"
    assert classifier.classify(_seg("Software Engineer at TechCorp")) == []
