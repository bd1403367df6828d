"""
Mind-map geometry: auto layouts, child placement, drag deltas and the viewport.

All functions are total over finite inputs. Positions are (x, y) tuples in
canvas coordinates.
"""

import math
import random
from typing import Dict, Optional, Tuple

import networkx as nx
import numpy as np
from pydantic import BaseModel, PrivateAttr

Point = Tuple[float, float]

LEVEL1_RADIUS = 200.0
LEVEL2_RADIUS = 300.0
GRANDCHILD_ARC = math.pi / 4
CHILD_DISTANCE = 150.0
LEVEL_GAP = 120.0
SIBLING_GAP = 160.0
FORCE_RADIUS = 300.0

MIN_SCALE = 0.5
MAX_SCALE = 2.0
WHEEL_STEP = 0.05
BUTTON_STEP = 0.1


def radial_layout(graph: nx.DiGraph, root_id: str, center: Point) -> Dict[str, Point]:
    """
    Places root at center, its children on a circle and grandchildren on an
    outer arc around their parent's angle.

    Children are ordered by link insertion, so the result depends only on
    child index and count. Nodes deeper than two levels are not returned and
    keep their current position.
    """
    if root_id not in graph:
        return {}

    cx, cy = center
    positions: Dict[str, Point] = {root_id: (cx, cy)}

    children = [c for c in graph.successors(root_id) if c != root_id]
    if not children:
        return positions
    angle_step = (2 * math.pi) / len(children)

    for i, child_id in enumerate(children):
        angle = i * angle_step
        positions[child_id] = (
            cx + LEVEL1_RADIUS * math.cos(angle),
            cy + LEVEL1_RADIUS * math.sin(angle),
        )

        grandchildren = list(graph.successors(child_id))
        count = len(grandchildren)
        for j, gc_id in enumerate(grandchildren):
            if gc_id in positions:
                continue
            gc_angle = angle + (j - (count - 1) / 2) * GRANDCHILD_ARC / count
            positions[gc_id] = (
                cx + LEVEL2_RADIUS * math.cos(gc_angle),
                cy + LEVEL2_RADIUS * math.sin(gc_angle),
            )

    return positions


def hierarchical_layout(graph: nx.DiGraph, root_id: str, center: Point) -> Dict[str, Point]:
    """Top-down tree: one row per BFS depth, siblings centred under the root."""
    if root_id not in graph:
        return {}

    cx, cy = center
    positions: Dict[str, Point] = {}
    for depth, layer in enumerate(nx.bfs_layers(graph, [root_id])):
        width = (len(layer) - 1) * SIBLING_GAP
        for k, node_id in enumerate(layer):
            positions[node_id] = (cx - width / 2 + k * SIBLING_GAP, cy + depth * LEVEL_GAP)
    return positions


def force_layout(graph: nx.DiGraph, root_id: str, center: Point, seed: int = 42) -> Dict[str, Point]:
    """
    Spring layout of the component reachable from root, seeded so repeated
    runs agree, translated so root sits at center.
    """
    if root_id not in graph:
        return {}

    reachable = nx.descendants(graph, root_id) | {root_id}
    sub = graph.subgraph(reachable).to_undirected()
    raw = nx.spring_layout(sub, seed=seed)

    ids = list(raw)
    coords = np.array([raw[n] for n in ids], dtype=float)
    coords -= np.asarray(raw[root_id], dtype=float)
    extent = float(np.max(np.linalg.norm(coords, axis=1))) if len(ids) > 1 else 0.0
    if extent > 0:
        coords *= FORCE_RADIUS / extent
    coords += np.asarray(center, dtype=float)

    return {n: (float(x), float(y)) for n, (x, y) in zip(ids, coords)}


LAYOUTS = {
    "radial": radial_layout,
    "hierarchical": hierarchical_layout,
    "force": force_layout,
}


def free_child_position(parent: Point, distance: float = CHILD_DISTANCE,
                        rng: Optional[random.Random] = None) -> Point:
    """Parent + distance in a random direction within a quarter turn of +x."""
    rng = rng or random
    theta = rng.uniform(-math.pi / 4, math.pi / 4)
    return (parent[0] + distance * math.cos(theta), parent[1] + distance * math.sin(theta))


def apply_drag_delta(origin: Point, pointer_start: Point, pointer_now: Point, scale: float = 1.0) -> Point:
    """Node position after a drag, from its pre-drag position and the pointer delta in screen space."""
    scale = scale or 1.0
    return (
        origin[0] + (pointer_now[0] - pointer_start[0]) / scale,
        origin[1] + (pointer_now[1] - pointer_start[1]) / scale,
    )


def clamp_scale(scale: float) -> float:
    return min(max(MIN_SCALE, scale), MAX_SCALE)


class Viewport(BaseModel):
    """Zoom and pan of the canvas. scale always stays within [0.5, 2.0]."""
    scale: float = 1.0
    x: float = 0.0
    y: float = 0.0

    _pan_anchor: Optional[Point] = PrivateAttr(default=None)

    def wheel(self, delta_y: float) -> float:
        """Scroll down zooms out, scroll up zooms in, by a fixed step."""
        step = -WHEEL_STEP if delta_y > 0 else WHEEL_STEP
        self.scale = clamp_scale(self.scale + step)
        return self.scale

    def zoom_in(self) -> float:
        self.scale = clamp_scale(self.scale + BUTTON_STEP)
        return self.scale

    def zoom_out(self) -> float:
        self.scale = clamp_scale(self.scale - BUTTON_STEP)
        return self.scale

    @property
    def zoom_percent(self) -> int:
        return round(self.scale * 100)

    def pan_start(self, pointer: Point):
        self._pan_anchor = (pointer[0] - self.x, pointer[1] - self.y)

    def pan_move(self, pointer: Point):
        if self._pan_anchor is None:
            return
        self.x = pointer[0] - self._pan_anchor[0]
        self.y = pointer[1] - self._pan_anchor[1]

    def pan_end(self):
        self._pan_anchor = None

    @property
    def is_panning(self) -> bool:
        return self._pan_anchor is not None

    def reset(self):
        self.scale = 1.0
        self.x = 0.0
        self.y = 0.0
        self._pan_anchor = None

    def to_screen(self, point: Point) -> Point:
        return (point[0] * self.scale + self.x, point[1] * self.scale + self.y)

    def to_canvas(self, point: Point) -> Point:
        return ((point[0] - self.x) / self.scale, (point[1] - self.y) / self.scale)
