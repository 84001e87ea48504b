"""Tests for candidate selection and node merging."""

import itertools
import time

from careermap.graph.builder import (
    UnionFind,
    build_nodes,
    canonical_order,
    near_duplicate,
    separate_periods,
    normalize_label,
    select_candidates,
    shadow_line_candidates,
)
from careermap.models import Candidate, NodeType, Segment, Timeframe


def _seg(doc="a.txt", index=0, kind="line", line_start=0, line_end=0, sentence_id=0):
    return Segment(
        text="...", source_document=doc, index=index, kind=kind,
        line_start=line_start, line_end=line_end, sentence_id=sentence_id,
    )


def _cand(node_type, label, confidence=0.6, segment=None, timeframe=None, ordinal=0):
    return Candidate(
        node_type=node_type,
        label=label,
        confidence=confidence,
        matched_span=label,
        segment=segment or _seg(),
        timeframe=timeframe,
        ordinal=ordinal,
    )


def _ids():
    counter = itertools.count(1)
    return lambda: f"n{next(counter)}"


def test_normalize_label():
    assert normalize_label("  Node.js / React ") == "node js react"
    assert normalize_label("C++ & C#") == "c++ c#"


def test_near_duplicate():
    assert near_duplicate("Software Engineer at Google", "software engineer at google!", 0.6)
    assert not near_duplicate("Python", "Python programming", 0.6)
    assert near_duplicate("Python", "Python programming", 0.3)
    assert not near_duplicate("Java", "JavaScript", 0.1)
    assert not near_duplicate("", "Java", 0.1)


def test_select_drops_below_threshold():
    assert select_candidates([_cand(NodeType.PROJECT, "Built x", 0.35)], 0.4) == []


def test_select_prefers_confidence_then_type_priority():
    role = _cand(NodeType.ROLE, "Engineer at X", 0.6)
    edu = _cand(NodeType.EDUCATION, "University of X", 0.6)
    project = _cand(NodeType.PROJECT, "Built X", 0.7)
    assert select_candidates([edu, role], 0.4) == [role]
    assert select_candidates([role, project], 0.4) == [project]


def test_select_drops_interest_when_anything_else_passes():
    interest = _cand(NodeType.INTEREST, "Climbing", 0.9)
    goal = _cand(NodeType.GOAL, "Want to climb", 0.5)
    assert select_candidates([interest, goal], 0.4) == [goal]
    assert select_candidates([interest], 0.4) == [interest]


def test_select_keeps_every_winning_skill():
    skills = [_cand(NodeType.SKILL, name, 0.7, ordinal=i) for i, name in enumerate(["Git", "AWS", "SQL"])]
    project = _cand(NodeType.PROJECT, "Built things", 0.55)
    assert select_candidates([project, *reversed(skills)], 0.4, multi_types={NodeType.SKILL}) == skills
    # Without the multi flag only the best skill survives.
    assert select_candidates([project, *reversed(skills)], 0.4) == [skills[0]]


def test_shadow_line_candidates():
    line = _cand(NodeType.GOAL, "I want to be a", segment=_seg(kind="line", line_start=0, line_end=0))
    other_line = _cand(NodeType.ROLE, "Engineer at X", segment=_seg(kind="line", line_start=1, line_end=1))
    sentence = _cand(
        NodeType.GOAL, "I want to be a cloud architect",
        segment=_seg(index=2, kind="sentence", line_start=0, line_end=1),
    )
    assert shadow_line_candidates([line, other_line, sentence]) == [other_line, sentence]


def test_union_find_root_is_smallest():
    uf = UnionFind(5)
    uf.union(3, 4)
    uf.union(4, 1)
    assert uf.find(3) == uf.find(4) == uf.find(1) == 1
    assert uf.find(2) == 2


def test_canonical_order():
    a1 = _cand(NodeType.SKILL, "Git", segment=_seg(index=3), ordinal=1)
    a0 = _cand(NodeType.SKILL, "AWS", segment=_seg(index=3), ordinal=0)
    b = _cand(NodeType.ROLE, "Engineer at X", segment=_seg(doc="b.txt", index=0))
    first = _cand(NodeType.GOAL, "Want to grow", segment=_seg(index=1))
    assert canonical_order([[a1, a0, first], [b]]) == [first, a0, a1, b]


def test_same_role_in_two_documents_merges():
    doc_a = [_cand(NodeType.ROLE, "Software Engineer at Google", 0.75,
                   segment=_seg(doc="a.txt"), timeframe=Timeframe("2022", None))]
    doc_b = [_cand(NodeType.ROLE, "software engineer at Google", 0.6, segment=_seg(doc="b.txt"))]
    nodes, evidence = build_nodes([doc_a, doc_b], merge_ratio=0.6, id_factory=_ids())

    assert len(nodes) == 1
    node = nodes[0]
    assert node.id == "n1"
    assert node.label == "Software Engineer at Google"
    assert node.source_documents == ["a.txt", "b.txt"]
    assert node.timeframe == Timeframe("2022", None)
    assert node.metadata["merged_count"] == 2
    assert node.confidence == 0.75
    assert len(evidence["n1"]) == 2


def test_merge_is_transitive():
    cands = [
        _cand(NodeType.SKILL, "Machine learning", 0.6, segment=_seg(index=0)),
        _cand(NodeType.SKILL, "machine learning models", 0.6, segment=_seg(index=1)),
        _cand(NodeType.SKILL, "Applied machine learning models", 0.6, segment=_seg(index=2)),
    ]
    # First and last are too far apart to merge directly; the middle label links them.
    assert not near_duplicate(cands[0].label, cands[2].label, 0.6)
    nodes, _ = build_nodes([cands], merge_ratio=0.6, id_factory=_ids())
    assert len(nodes) == 1
    assert nodes[0].label == "Machine learning"


def test_different_types_never_merge():
    cands = [
        _cand(NodeType.SKILL, "Python", segment=_seg(index=0)),
        _cand(NodeType.INTEREST, "Python", segment=_seg(index=1)),
    ]
    nodes, _ = build_nodes([cands], merge_ratio=0.6, id_factory=_ids())
    assert [n.type for n in nodes] == [NodeType.SKILL, NodeType.INTEREST]


def test_timeframe_falls_back_to_any_member():
    cands = [
        _cand(NodeType.ROLE, "Engineer at X", 0.8, segment=_seg(index=0)),
        _cand(NodeType.ROLE, "Engineer at X", 0.6, segment=_seg(index=1), timeframe=Timeframe("2019", "2020")),
    ]
    nodes, _ = build_nodes([cands], merge_ratio=0.6, id_factory=_ids())
    assert nodes[0].timeframe == Timeframe("2019", "2020")
    assert nodes[0].confidence == 0.8


def test_promotion_in_one_document_is_not_merged():
    junior = _cand(NodeType.ROLE, "Software Engineer at Google", 0.75,
                   segment=_seg(index=2), timeframe=Timeframe("2018", "2020"))
    senior = _cand(NodeType.ROLE, "Senior Software Engineer at Google", 0.75,
                   segment=_seg(index=0), timeframe=Timeframe("2020", "2022"))
    assert separate_periods(junior, senior)

    nodes, _ = build_nodes([[senior, junior]], merge_ratio=0.6, id_factory=_ids())
    assert [(n.label, n.timeframe) for n in nodes] == [
        ("Senior Software Engineer at Google", Timeframe("2020", "2022")),
        ("Software Engineer at Google", Timeframe("2018", "2020")),
    ]


def test_overlapping_or_undated_variants_still_merge():
    dated = _cand(NodeType.ROLE, "Senior Software Engineer at Google", 0.75,
                  segment=_seg(index=0), timeframe=Timeframe("2018", "2022"))
    inside = _cand(NodeType.ROLE, "Software Engineer at Google", 0.6,
                   segment=_seg(index=1), timeframe=Timeframe("2019", "2020"))
    undated = _cand(NodeType.ROLE, "Software Engineer at Google", 0.6, segment=_seg(index=1))
    assert not separate_periods(dated, inside)
    assert not separate_periods(dated, undated)

    nodes, _ = build_nodes([[dated, inside]], merge_ratio=0.6, id_factory=_ids())
    assert len(nodes) == 1


def test_separate_periods_needs_one_document():
    a = _cand(NodeType.ROLE, "Software Engineer at Google", segment=_seg(doc="a.txt"),
              timeframe=Timeframe("2018", "2020"))
    b = _cand(NodeType.ROLE, "Senior Software Engineer at Google", segment=_seg(doc="b.txt"),
              timeframe=Timeframe("2020", "2022"))
    assert not separate_periods(a, b)
    nodes, _ = build_nodes([[a], [b]], merge_ratio=0.6, id_factory=_ids())
    assert len(nodes) == 1


def test_many_distinct_labels_group_quickly():
    cands = [
        _cand(NodeType.SKILL, f"Tool{i}", segment=_seg(index=i // 3), ordinal=i % 3)
        for i in range(6000)
    ]
    cands.append(_cand(NodeType.SKILL, "tool7 scripting", segment=_seg(index=2000)))
    started = time.perf_counter()
    nodes, _ = build_nodes([cands], merge_ratio=0.3, id_factory=_ids())
    assert time.perf_counter() - started < 10
    assert len(nodes) == 6000
    assert next(n for n in nodes if n.label == "Tool7").metadata["merged_count"] == 2
