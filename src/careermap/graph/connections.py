"""Infer symmetric edges between nodes."""

import logging
from dataclasses import dataclass
from itertools import combinations

from ..models import Candidate, ExtractedNode, NodeType
from ..timeframe import month_span

logger = logging.getLogger(__name__)

CO_OCCURRENCE = "co-occurrence"
TEMPORAL = "temporal"
SKILL_ATTRIBUTION = "skill-attribution"

_EXPERIENCE_TYPES = {NodeType.ROLE, NodeType.PROJECT}


@dataclass(frozen=True)
class Edge:
    """An undirected connection; ``source`` is the earlier-discovered node."""
    source: str
    target: str
    reason: str


def _sentence_keys(candidates: list[Candidate]) -> set[tuple[str, int]]:
    return {(c.segment.source_document, c.segment.sentence_id) for c in candidates}


def timeframes_touch(a: ExtractedNode, b: ExtractedNode, adjacency_months: int) -> bool:
    """Overlapping, or separated by at most ``adjacency_months``."""
    if not a.timeframe or not b.timeframe:
        return False
    a_first, a_last = month_span(a.timeframe)
    b_first, b_last = month_span(b.timeframe)
    if a_first <= b_last and b_first <= a_last:
        return True
    gap = b_first - a_last if a_last < b_first else a_first - b_last
    return gap <= adjacency_months


def infer_connections(
    nodes: list[ExtractedNode],
    evidence: dict[str, list[Candidate]],
    adjacency_months: int = 12,
) -> list[Edge]:
    """Derive edges, earlier rules taking precedence for the recorded reason.

    1. Nodes of different types extracted from the same sentence.
    2. Nodes sharing a source document whose timeframes overlap or abut.
    3. Skills attach to every role and project of the same document.

    Only nodes that share a sentence or a document are ever compared.

    Args:
        nodes: Nodes in discovery order.
        evidence: Candidates each node was built from, by node id.
        adjacency_months: Largest gap still counted as adjacent.

    Returns:
        Deduplicated edges; no self-loops.
    """
    edges: dict[frozenset[str], Edge] = {}

    def add(pairs: set[tuple[int, int]], reason: str) -> None:
        for i, j in sorted(pairs):
            a, b = nodes[i], nodes[j]
            key = frozenset((a.id, b.id))
            if a.id != b.id and key not in edges:
                edges[key] = Edge(a.id, b.id, reason)

    # Node positions per sentence and per document, ascending.
    by_sentence: dict[tuple[str, int], list[int]] = {}
    by_document: dict[str, list[int]] = {}
    for i, node in enumerate(nodes):
        for key in _sentence_keys(evidence.get(node.id, [])):
            by_sentence.setdefault(key, []).append(i)
        for doc in set(node.source_documents):
            by_document.setdefault(doc, []).append(i)

    add({
        (i, j)
        for members in by_sentence.values()
        for i, j in combinations(members, 2)
        if nodes[i].type != nodes[j].type
    }, CO_OCCURRENCE)

    add({
        (i, j)
        for members in by_document.values()
        for i, j in combinations([k for k in members if nodes[k].timeframe], 2)
        if timeframes_touch(nodes[i], nodes[j], adjacency_months)
    }, TEMPORAL)

    attributed = set()
    for members in by_document.values():
        skills = [k for k in members if nodes[k].type == NodeType.SKILL]
        experience = [k for k in members if nodes[k].type in _EXPERIENCE_TYPES]
        attributed.update((min(s, e), max(s, e)) for s in skills for e in experience)
    add(attributed, SKILL_ATTRIBUTION)

    logger.debug(f"Inferred {len(edges)} edge(s) between {len(nodes)} node(s)")
    return list(edges.values())


def apply_connections(nodes: list[ExtractedNode], edges: list[Edge]) -> None:
    """Write each edge into both endpoints' connection lists."""
    by_id = {n.id: n for n in nodes}
    for edge in edges:
        source, target = by_id.get(edge.source), by_id.get(edge.target)
        if source and target:
            source.connect(target.id)
            target.connect(source.id)


def drop_dangling(nodes: list[ExtractedNode]) -> int:
    """Remove connections to ids not present among nodes; returns how many were removed."""
    ids = {n.id for n in nodes}
    removed = 0
    for node in nodes:
        kept = [c for c in node.connections if c in ids and c != node.id]
        removed += len(node.connections) - len(kept)
        node.connections = kept
    if removed:
        logger.debug(f"Dropped {removed} dangling connection(s)")
    return removed
