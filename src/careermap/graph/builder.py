"""Turn accepted candidates into nodes, merging near-duplicates."""

import logging
import re
import uuid
from collections.abc import Callable, Collection
from typing import Any

from ..models import TYPE_PRIORITY, Candidate, ExtractedNode, NodeType
from ..timeframe import date_ordinal

logger = logging.getLogger(__name__)

_NON_ALNUM = re.compile(r"[^a-z0-9+#]+")


def default_id_factory() -> str:
    return f"node-{uuid.uuid4().hex[:12]}"


def normalize_label(label: str) -> str:
    """Lowercase, punctuation-free, single-spaced form used for matching."""
    return " ".join(_NON_ALNUM.sub(" ", label.lower()).split())


def near_duplicate(a: str, b: str, ratio: float) -> bool:
    """Whether two labels name the same thing.

    Equal after normalization, or one contained in the other on word
    boundaries with ``len(shorter) / len(longer) >= ratio``.
    """
    na, nb = normalize_label(a), normalize_label(b)
    if not na or not nb:
        return False
    if na == nb:
        return True
    short, long_ = sorted((na, nb), key=len)
    return _contains(long_, short, ratio)


def _contains(long_: str, short: str, ratio: float) -> bool:
    # Both arguments already normalized.
    return len(short) / len(long_) >= ratio and f" {short} " in f" {long_} "


def separate_periods(a: Candidate, b: Candidate) -> bool:
    """Whether two candidates of one document describe back-to-back periods.

    "Software Engineer at Google (2018-2020)" and "Senior Software Engineer
    at Google (2020-2022)" are a promotion, not one role. Both are dated and
    one period is over before the other starts.
    """
    if a.segment.source_document != b.segment.source_document:
        return False
    if not a.timeframe or not b.timeframe or a.timeframe == b.timeframe:
        return False
    first, second = sorted((a.timeframe, b.timeframe), key=lambda t: date_ordinal(t.start))
    return date_ordinal(first.end) <= date_ordinal(second.start)


def select_candidates(
    proposals: list[Candidate],
    threshold: float,
    multi_types: Collection[NodeType] = (),
) -> list[Candidate]:
    """Keep the winning candidate(s) for one segment.

    Candidates under the threshold are discarded. Interest only survives when
    nothing else does. The best confidence wins, ties going to the more
    specific type; a winning type listed in ``multi_types`` keeps all of its
    accepted candidates.
    """
    accepted = [c for c in proposals if c.confidence >= threshold]
    if any(c.node_type != NodeType.INTEREST for c in accepted):
        accepted = [c for c in accepted if c.node_type != NodeType.INTEREST]
    if not accepted:
        return []

    best = min(accepted, key=lambda c: (-c.confidence, TYPE_PRIORITY.index(c.node_type), c.ordinal))
    if best.node_type in multi_types:
        return sorted((c for c in accepted if c.node_type == best.node_type), key=lambda c: c.ordinal)
    return [best]


def shadow_line_candidates(winners: list[Candidate]) -> list[Candidate]:
    """Drop line winners repeated by a same-type winner of a sentence covering the line."""
    covered = {
        (c.node_type, line)
        for c in winners
        if c.segment.kind == "sentence"
        for line in range(c.segment.line_start, c.segment.line_end + 1)
    }
    kept = []
    for c in winners:
        if c.segment.kind == "line" and (c.node_type, c.segment.line_start) in covered:
            logger.debug(f"Shadowed by sentence: {c.label!r}")
            continue
        kept.append(c)
    return kept


class UnionFind:
    """Disjoint sets over candidate indices; the root is always the smallest index."""

    def __init__(self, size: int):
        self.parent = list(range(size))

    def find(self, i: int) -> int:
        root = i
        while self.parent[root] != root:
            root = self.parent[root]
        while self.parent[i] != root:
            self.parent[i], i = root, self.parent[i]
        return root

    def union(self, a: int, b: int) -> None:
        ra, rb = self.find(a), self.find(b)
        if ra != rb:
            self.parent[max(ra, rb)] = min(ra, rb)


def canonical_order(per_document: list[list[Candidate]]) -> list[Candidate]:
    """Flatten per-document candidates into (document, segment, ordinal) order."""
    keyed = [
        ((pos, c.segment.index, c.ordinal), c)
        for pos, candidates in enumerate(per_document)
        for c in candidates
    ]
    keyed.sort(key=lambda item: item[0])
    return [c for _, c in keyed]


def _group(candidates: list[Candidate], ratio: float) -> UnionFind:
    uf = UnionFind(len(candidates))

    # Exact matches first.
    by_key: dict[tuple[NodeType, str], int] = {}
    for i, c in enumerate(candidates):
        key = (c.node_type, normalize_label(c.label))
        if key in by_key:
            uf.union(by_key[key], i)
        else:
            by_key[key] = i

    # Then substring matches between distinct labels. A containing label
    # holds every word of the contained one, so looking up one word is enough.
    by_word: dict[tuple[NodeType, str], list[tuple[str, int]]] = {}
    for (node_type, label), i in by_key.items():
        for word in set(label.split()):
            by_word.setdefault((node_type, word), []).append((label, i))

    for (node_type, label), i in by_key.items():
        if not label:
            continue
        rarest = min(set(label.split()), key=lambda w: len(by_word[(node_type, w)]))
        for other, j in by_word[(node_type, rarest)]:
            if len(other) <= len(label) or not _contains(other, label, ratio):
                continue
            if separate_periods(candidates[i], candidates[j]):
                logger.debug(f"Kept apart, different periods: {candidates[i].label!r} / {candidates[j].label!r}")
                continue
            uf.union(i, j)
    return uf


def build_nodes(
    per_document: list[list[Candidate]],
    merge_ratio: float,
    id_factory: Callable[[], str] = default_id_factory,
) -> tuple[list[ExtractedNode], dict[str, list[Candidate]]]:
    """Create one node per group of near-duplicate candidates.

    Args:
        per_document: Accepted candidates, one list per input document.
        merge_ratio: Minimum length ratio for substring merges.
        id_factory: Produces a fresh node id.

    Returns:
        Nodes in discovery order, and the candidates each node was built from
        keyed by node id.
    """
    candidates = canonical_order(per_document)
    uf = _group(candidates, merge_ratio)

    groups: dict[int, list[Candidate]] = {}
    for i, c in enumerate(candidates):
        groups.setdefault(uf.find(i), []).append(c)

    nodes: list[ExtractedNode] = []
    evidence: dict[str, list[Candidate]] = {}
    for root in sorted(groups):
        members = groups[root]
        best = max(members, key=lambda c: c.confidence)  # first wins on ties
        timeframe = best.timeframe or next((c.timeframe for c in members if c.timeframe), None)

        metadata: dict[str, Any] = {
            "extracted_text": best.matched_span,
            "confidence": best.confidence,
        }
        if len(members) > 1:
            metadata["merged_count"] = len(members)

        node = ExtractedNode(
            id=id_factory(),
            type=best.node_type,
            label=best.label,
            timeframe=timeframe,
            metadata=metadata,
        )
        for c in members:
            node.add_source(c.segment.source_document)
        nodes.append(node)
        evidence[node.id] = members

    logger.debug(f"Built {len(nodes)} node(s) from {len(candidates)} candidate(s)")
    return nodes, evidence
