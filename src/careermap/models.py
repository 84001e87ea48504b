"""Data models used throughout careermap."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class NodeType(str, Enum):
    """Closed set of entity types a segment can be classified as."""
    ROLE = "role"
    PROJECT = "project"
    EDUCATION = "education"
    SKILL = "skill"
    GOAL = "goal"
    INTEREST = "interest"


# Tie-break order when two classifiers score a segment equally.
TYPE_PRIORITY: list[NodeType] = [
    NodeType.ROLE,
    NodeType.EDUCATION,
    NodeType.PROJECT,
    NodeType.GOAL,
    NodeType.SKILL,
    NodeType.INTEREST,
]


@dataclass(frozen=True)
class ProcessedDocument:
    """Plain text produced by the document ingestion layer."""
    file_name: str
    content: str
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Segment:
    """A line or sentence of a document, ready for classification."""
    text: str
    source_document: str
    index: int
    kind: str = "line"  # "line" or "sentence"
    line_start: int = 0
    line_end: int = 0
    sentence_id: int = 0
    section: str = ""
    is_heading: bool = False


@dataclass(frozen=True)
class Timeframe:
    """Start/end pair of normalized dates ("YYYY" or "YYYY-MM").

    ``end`` of None means the timeframe is ongoing.
    """
    start: str
    end: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"start": self.start, "end": self.end}


@dataclass
class Candidate:
    """A classifier's proposal for one segment."""
    node_type: NodeType
    label: str
    confidence: float
    matched_span: str
    segment: Segment
    timeframe: Timeframe | None = None
    ordinal: int = 0  # position among candidates emitted for the same segment


@dataclass
class Position:
    x: float = 0.0
    y: float = 0.0

    def to_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y}


@dataclass
class ExtractedNode:
    """An entity of the career map."""
    id: str
    type: NodeType
    label: str
    position: Position = field(default_factory=Position)
    timeframe: Timeframe | None = None
    source_documents: list[str] = field(default_factory=list)
    connections: list[str] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def confidence(self) -> float:
        return self.metadata.get("confidence", 0.0)

    @property
    def pinned(self) -> bool:
        return bool(self.metadata.get("pinned", False))

    def add_source(self, file_name: str) -> None:
        if file_name not in self.source_documents:
            self.source_documents.append(file_name)

    def connect(self, other_id: str) -> None:
        if other_id != self.id and other_id not in self.connections:
            self.connections.append(other_id)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the camelCase shape used by the map front end."""
        data: dict[str, Any] = {
            "id": self.id,
            "type": self.type.value,
            "label": self.label,
            "position": self.position.to_dict(),
            "sourceDocuments": list(self.source_documents),
            "connections": list(self.connections),
            "metadata": {
                "extractedText": self.metadata.get("extracted_text", ""),
                "confidence": self.confidence,
            },
        }
        if self.timeframe:
            data["timeframe"] = self.timeframe.to_dict()
        if self.pinned:
            data["metadata"]["pinned"] = True
        return data


@dataclass
class TimelineEvent:
    date: str
    node_id: str
    description: str

    def to_dict(self) -> dict[str, str]:
        return {"date": self.date, "nodeId": self.node_id, "description": self.description}


@dataclass
class Timeline:
    start_date: str | None = None
    end_date: str | None = None
    events: list[TimelineEvent] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "startDate": self.start_date,
            "endDate": self.end_date,
            "events": [e.to_dict() for e in self.events],
        }


@dataclass
class AnalysisResult:
    """Nodes in discovery order plus the derived timeline."""
    nodes: list[ExtractedNode] = field(default_factory=list)
    timeline: Timeline = field(default_factory=Timeline)

    def get(self, node_id: str) -> ExtractedNode | None:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def by_type(self, node_type: NodeType | str) -> list[ExtractedNode]:
        node_type = NodeType(node_type)
        return [n for n in self.nodes if n.type == node_type]

    def to_dict(self) -> dict[str, Any]:
        return {
            "nodes": [n.to_dict() for n in self.nodes],
            "timeline": self.timeline.to_dict(),
        }
