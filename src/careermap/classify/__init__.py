"""Entity classifiers, one per node type."""

from ..config import AnalyzerSettings
from ..lexicon import Lexicon
from ..models import TYPE_PRIORITY, NodeType
from .base import Classifier
from .education import EducationClassifier
from .goal import GoalClassifier
from .interest import InterestClassifier
from .project import ProjectClassifier
from .role import RoleClassifier
from .skill import SkillClassifier

CLASSIFIERS: dict[NodeType, type[Classifier]] = {
    NodeType.ROLE: RoleClassifier,
    NodeType.EDUCATION: EducationClassifier,
    NodeType.PROJECT: ProjectClassifier,
    NodeType.GOAL: GoalClassifier,
    NodeType.SKILL: SkillClassifier,
    NodeType.INTEREST: InterestClassifier,
}


def build_classifiers(lexicon: Lexicon, settings: AnalyzerSettings) -> list[Classifier]:
    """Instantiate every classifier, in type-priority order."""
    return [CLASSIFIERS[t](lexicon, settings) for t in TYPE_PRIORITY]


__all__ = [
    "CLASSIFIERS",
    "Classifier",
    "build_classifiers",
    "RoleClassifier",
    "EducationClassifier",
    "ProjectClassifier",
    "GoalClassifier",
    "SkillClassifier",
    "InterestClassifier",
]
