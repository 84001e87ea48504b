"""The extraction pipeline and its analyzer presets."""

import copy
import logging
from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor
from typing import Any, TypeVar

from .classify import build_classifiers
from .config import DEFAULT_CONFIG, AnalyzerSettings, settings_from_config
from .graph.builder import build_nodes, default_id_factory, normalize_label, select_candidates, shadow_line_candidates
from .graph.connections import apply_connections, drop_dangling, infer_connections
from .graph.layout import layout_nodes
from .graph.timeline import build_timeline
from .ingest.normalizer import normalize_document
from .lexicon import Lexicon, load_lexicon
from .models import AnalysisResult, Candidate, ExtractedNode, NodeType, Position, ProcessedDocument, Segment, Timeframe
from .timeframe import date_ordinal, is_open_end, normalize_date, resolve_timeframe

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

EDITABLE_FIELDS = {"label", "type", "timeframe", "position"}


class ContentAnalyzer:
    """Turns processed documents into a career map.

    Normalization and classification run per document (optionally on a
    thread pool); merging, connection inference, layout and the timeline
    run sequentially over candidates in canonical order.
    """

    preset = "standard"

    def __init__(
        self,
        settings: AnalyzerSettings | None = None,
        lexicon: Lexicon | None = None,
        id_factory: Callable[[], str] | None = None,
    ):
        self.settings = settings or settings_from_config(DEFAULT_CONFIG, self.preset)
        self.lexicon = lexicon or Lexicon()
        self.id_factory = id_factory or default_id_factory
        self.classifiers = build_classifiers(self.lexicon, self.settings)
        self.multi_types = {c.node_type for c in self.classifiers if c.multi}

    def analyze_documents(
        self,
        documents: Iterable[ProcessedDocument],
        previous: AnalysisResult | None = None,
    ) -> AnalysisResult:
        """Run the full pipeline.

        Args:
            documents: Documents with their text already extracted.
            previous: An earlier result; nodes the user moved there keep
                their position when they are found again.

        Returns:
            The analysis result. Empty input, or input with nothing
            recognizable, gives a result without nodes or events.
        """
        documents = list(documents)
        if not documents:
            logger.info("No documents to analyze")
            return AnalysisResult()

        segmented = self._budget(self._map(normalize_document, documents))
        per_document = self._map(self._classify_document, segmented)

        nodes, evidence = build_nodes(per_document, self.settings.merge_ratio, self.id_factory)
        edges = infer_connections(nodes, evidence, self.settings.adjacency_months)
        apply_connections(nodes, edges)
        drop_dangling(nodes)

        if previous is not None:
            _carry_over_positions(nodes, previous)
        layout_nodes(nodes, self.settings.layout)
        timeline = build_timeline(nodes)

        logger.info(
            f"Analyzed {len(documents)} document(s): {len(nodes)} node(s), "
            f"{len(edges)} connection(s), {len(timeline.events)} timeline event(s)"
        )
        return AnalysisResult(nodes=nodes, timeline=timeline)

    def _map(self, fn: Callable[[T], R], items: list[T]) -> list[R]:
        """Apply fn to every item, in input order."""
        if self.settings.workers > 1 and len(items) > 1:
            with ThreadPoolExecutor(max_workers=self.settings.workers) as pool:
                return list(pool.map(fn, items))
        return [fn(item) for item in items]

    def _budget(self, segmented: list[list[Segment]]) -> list[list[Segment]]:
        """Cap the total number of segments, dropping from the end."""
        remaining = self.settings.max_segments
        kept = []
        dropped = 0
        for segments in segmented:
            kept.append(segments[:max(remaining, 0)])
            dropped += max(len(segments) - max(remaining, 0), 0)
            remaining -= len(segments)
        if dropped:
            logger.warning(f"Segment budget of {self.settings.max_segments} exceeded; skipped {dropped} segment(s)")
        return kept

    def _classify_document(self, segments: list[Segment]) -> list[Candidate]:
        lines = [s for s in segments if s.kind == "line"]
        winners: list[Candidate] = []
        for segment in segments:
            if segment.is_heading:
                continue
            timeframe = resolve_timeframe(segment, lines, self.settings.timeframe_lookahead)
            proposals: list[Candidate] = []
            for classifier in self.classifiers:
                proposals.extend(classifier.classify(segment, timeframe))
            accepted = select_candidates(proposals, self.settings.threshold, self.multi_types)
            for c in accepted:
                logger.debug(f"{segment.source_document}#{segment.index}: {c.node_type.value} {c.label!r} ({c.confidence})")
            winners.extend(accepted)
        return shadow_line_candidates(winners)


class UltraSimpleAnalyzer(ContentAnalyzer):
    """Lenient preset: lower threshold, looser merging, no section boost."""

    preset = "simple"


class SmartContentAnalyzer(ContentAnalyzer):
    """Strict preset: higher threshold, tighter merging, stronger section boost."""

    preset = "smart"


ANALYZERS: dict[str, type[ContentAnalyzer]] = {
    "simple": UltraSimpleAnalyzer,
    "standard": ContentAnalyzer,
    "smart": SmartContentAnalyzer,
}


def get_analyzer(name: str | None = None, config: dict[str, Any] | None = None) -> ContentAnalyzer:
    """Factory: return the analyzer for a preset, configured from config."""
    cfg = config if config is not None else DEFAULT_CONFIG
    name = name or cfg.get("analyzer", "standard")
    if name not in ANALYZERS:
        raise ValueError(f"Unknown analyzer: {name} (expected one of {', '.join(ANALYZERS)})")
    settings = settings_from_config(cfg, name)
    return ANALYZERS[name](settings=settings, lexicon=load_lexicon(cfg.get("lexicon_path")))


def analyze_documents(
    documents: Iterable[ProcessedDocument],
    analyzer: str | None = None,
    config: dict[str, Any] | None = None,
    previous: AnalysisResult | None = None,
) -> AnalysisResult:
    """Shortcut for ``get_analyzer(analyzer, config).analyze_documents(...)``."""
    return get_analyzer(analyzer, config).analyze_documents(documents, previous=previous)


def _carry_over_positions(nodes: list[ExtractedNode], previous: AnalysisResult) -> None:
    pinned = {
        (n.type, normalize_label(n.label)): n
        for n in previous.nodes
        if n.pinned
    }
    for node in nodes:
        old = pinned.get((node.type, normalize_label(node.label)))
        if old:
            node.position = Position(old.position.x, old.position.y)
            node.metadata["pinned"] = True
            logger.debug(f"Kept user position for {node.label!r}")


def _coerce_timeframe(value: Any) -> Timeframe | None:
    if value is None:
        return None
    if isinstance(value, Timeframe):
        start, end = value.start, value.end
    elif isinstance(value, dict):
        start, end = value.get("start"), value.get("end")
    else:
        raise ValueError(f"Timeframe must be a dict or Timeframe, got {type(value).__name__}")

    norm_start = normalize_date(str(start)) if start else None
    if norm_start is None:
        raise ValueError(f"Invalid timeframe start: {start!r}")
    if end is None or not str(end).strip() or is_open_end(str(end)):
        return Timeframe(norm_start, None)
    norm_end = normalize_date(str(end))
    if norm_end is None:
        raise ValueError(f"Invalid timeframe end: {end!r}")
    if date_ordinal(norm_start) > date_ordinal(norm_end):
        raise ValueError(f"Timeframe starts after it ends: {norm_start} > {norm_end}")
    return Timeframe(norm_start, norm_end)


def _coerce_position(value: Any) -> Position:
    if isinstance(value, Position):
        return Position(value.x, value.y)
    try:
        if isinstance(value, dict):
            return Position(float(value["x"]), float(value["y"]))
        if isinstance(value, (tuple, list)) and len(value) == 2:
            return Position(float(value[0]), float(value[1]))
    except (KeyError, TypeError, ValueError) as e:
        raise ValueError(f"Invalid position: {value!r}") from e
    raise ValueError(f"Position must be {{x, y}} or an (x, y) pair, got {value!r}")


def update_node(result: AnalysisResult, node_id: str, **fields: Any) -> AnalysisResult:
    """Apply a partial edit to one node and return the updated result.

    Editable fields are ``label``, ``type``, ``timeframe`` and ``position``.
    A new position pins the node so later re-analysis keeps it. The input
    result is left untouched.

    Raises:
        KeyError: If no node has ``node_id``.
        ValueError: On an unknown field or an invalid value.
    """
    unknown = set(fields) - EDITABLE_FIELDS
    if unknown:
        raise ValueError(f"Cannot edit field(s): {', '.join(sorted(unknown))}")

    updated = copy.deepcopy(result)
    node = updated.get(node_id)
    if node is None:
        raise KeyError(node_id)

    if "label" in fields:
        label = str(fields["label"]).strip()
        if not label:
            raise ValueError("Label cannot be empty")
        node.label = label
    if "type" in fields:
        node.type = NodeType(fields["type"])
    if "timeframe" in fields:
        node.timeframe = _coerce_timeframe(fields["timeframe"])
    if "position" in fields:
        node.position = _coerce_position(fields["position"])
        node.metadata["pinned"] = True

    updated.timeline = build_timeline(updated.nodes)
    return updated
