"""Chronological timeline of node timeframes."""

from ..models import ExtractedNode, Timeline, TimelineEvent
from ..timeframe import date_ordinal


def build_timeline(nodes: list[ExtractedNode]) -> Timeline:
    """Collect start/end events from dated nodes, sorted by date.

    The sort is stable, so same-date events keep node discovery order. An
    end event is only added when the end is resolved and differs from the
    start.
    """
    events: list[TimelineEvent] = []
    for node in nodes:
        tf = node.timeframe
        if not tf or not tf.start:
            continue
        if tf.end == tf.start:
            events.append(TimelineEvent(tf.start, node.id, node.label))
            continue
        suffix = " (ongoing)" if tf.end is None else ""
        events.append(TimelineEvent(tf.start, node.id, f"Started: {node.label}{suffix}"))
        if tf.end:
            events.append(TimelineEvent(tf.end, node.id, f"Ended: {node.label}"))

    events.sort(key=lambda e: date_ordinal(e.date))
    if not events:
        return Timeline()
    return Timeline(start_date=events[0].date, end_date=events[-1].date, events=events)
