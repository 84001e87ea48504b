"""Deterministic initial placement: one lane per type, time on the x axis."""

import numpy as np

from ..config import LayoutSettings
from ..models import ExtractedNode, NodeType, Position
from ..timeframe import month_span

LANES: dict[NodeType, int] = {t: i for i, t in enumerate(NodeType)}


def _x_positions(nodes: list[ExtractedNode], settings: LayoutSettings) -> list[float]:
    """Dated nodes scale across ``time_width``; undated ones step along their lane."""
    dated = [month_span(n.timeframe)[0] for n in nodes if n.timeframe]
    lo, hi = (min(dated), max(dated)) if dated else (0, 0)

    xs: list[float] = []
    undated_in_lane: dict[NodeType, int] = {}
    for node in nodes:
        if node.timeframe:
            first = month_span(node.timeframe)[0]
            if hi > lo:
                x = float(np.interp(first, [lo, hi], [settings.x_origin, settings.x_origin + settings.time_width]))
            else:
                x = settings.x_origin
        else:
            k = undated_in_lane.get(node.type, 0)
            undated_in_lane[node.type] = k + 1
            x = settings.x_origin + k * settings.x_step
        xs.append(x)
    return xs


def _offset(k: int, step: float) -> float:
    """0, +step, -step, +2*step, -2*step, ..."""
    if k == 0:
        return 0.0
    return step * ((k + 1) // 2) * (1 if k % 2 else -1)


class _Occupancy:
    """Points already placed in one lane, bucketed into ``spacing``-sized cells."""

    def __init__(self, spacing: float):
        self.spacing = spacing
        self.cells: dict[tuple[int, int], list[tuple[float, float]]] = {}

    def _cell(self, x: float, y: float) -> tuple[int, int]:
        return int(x // self.spacing), int(y // self.spacing)

    def add(self, x: float, y: float) -> None:
        if self.spacing > 0:
            self.cells.setdefault(self._cell(x, y), []).append((x, y))

    def crowded(self, x: float, y: float) -> bool:
        """Whether a placed point is closer than ``spacing`` on both axes."""
        if self.spacing <= 0:
            return False
        cx, cy = self._cell(x, y)
        return any(
            abs(px - x) < self.spacing and abs(py - y) < self.spacing
            for dx in (-1, 0, 1)
            for dy in (-1, 0, 1)
            for px, py in self.cells.get((cx + dx, cy + dy), ())
        )


def layout_nodes(nodes: list[ExtractedNode], settings: LayoutSettings) -> None:
    """Assign positions in place. Pinned nodes keep theirs and are avoided."""
    lanes: dict[NodeType, _Occupancy] = {}

    def lane_of(node_type: NodeType) -> _Occupancy:
        return lanes.setdefault(node_type, _Occupancy(settings.min_spacing))

    for node in nodes:
        if node.pinned:
            lane_of(node.type).add(node.position.x, node.position.y)

    for node, x in zip(nodes, _x_positions(nodes, settings)):
        if node.pinned:
            continue
        base_y = settings.y_origin + LANES[node.type] * settings.lane_height
        lane = lane_of(node.type)

        k = 0
        y = base_y
        while lane.crowded(x, y):
            k += 1
            y = base_y + _offset(k, settings.jitter_step)

        node.position = Position(x=round(x, 2), y=round(y, 2))
        lane.add(x, y)
