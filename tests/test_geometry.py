"""
Test Suite for mind-map geometry

Tests for:
1. Radial, hierarchical and force layouts
2. Child placement and drag deltas
3. Viewport zoom clamping and panning
"""

import math
import random

import networkx as nx
import pytest

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from study_buddy.utils.geometry import (
    CHILD_DISTANCE,
    LEVEL1_RADIUS,
    LEVEL2_RADIUS,
    MAX_SCALE,
    MIN_SCALE,
    Viewport,
    apply_drag_delta,
    force_layout,
    free_child_position,
    hierarchical_layout,
    radial_layout,
)

CENTER = (640.0, 240.0)


def _tree(edges):
    graph = nx.DiGraph()
    graph.add_node("root")
    graph.add_edges_from(edges)
    return graph


class TestRadialLayout:
    """Tests for the radial auto layout"""

    def test_root_and_children_on_circle(self):
        """Test: root at center, children evenly spaced at radius 200"""
        graph = _tree([("root", "a"), ("root", "b"), ("root", "c"), ("root", "d")])
        positions = radial_layout(graph, "root", CENTER)

        assert positions["root"] == CENTER
        assert positions["a"] == pytest.approx((CENTER[0] + LEVEL1_RADIUS, CENTER[1]))
        assert positions["b"] == pytest.approx((CENTER[0], CENTER[1] + LEVEL1_RADIUS))
        for child in "abcd":
            x, y = positions[child]
            assert math.hypot(x - CENTER[0], y - CENTER[1]) == pytest.approx(LEVEL1_RADIUS)

        print("✅ Children placed on the inner circle")

    def test_grandchildren_spread_around_parent_angle(self):
        """Test: grandchildren sit at radius 300, centred on the parent's angle"""
        graph = _tree([("root", "a"), ("a", "g1"), ("a", "g2")])
        positions = radial_layout(graph, "root", CENTER)

        spread = (math.pi / 4) / 2
        for gc, offset in (("g1", -0.5 * spread), ("g2", 0.5 * spread)):
            expected = (
                CENTER[0] + LEVEL2_RADIUS * math.cos(offset),
                CENTER[1] + LEVEL2_RADIUS * math.sin(offset),
            )
            assert positions[gc] == pytest.approx(expected)

    def test_is_deterministic_and_leaves_deep_nodes(self):
        """Test: same input gives the same output; great-grandchildren are not moved"""
        graph = _tree([("root", "a"), ("root", "b"), ("a", "g"), ("g", "deep")])

        first = radial_layout(graph, "root", CENTER)
        second = radial_layout(graph, "root", CENTER)

        assert first == second
        assert "deep" not in first

    def test_missing_root(self):
        """Test: a graph without the root yields no positions"""
        assert radial_layout(nx.DiGraph(), "root", CENTER) == {}


class TestOtherLayouts:
    """Tests for hierarchical and force layouts"""

    def test_hierarchical_rows(self):
        """Test: one row per depth, siblings centred under root"""
        graph = _tree([("root", "a"), ("root", "b"), ("a", "c")])
        positions = hierarchical_layout(graph, "root", CENTER)

        assert positions["root"] == CENTER
        assert positions["a"] == pytest.approx((CENTER[0] - 80, CENTER[1] + 120))
        assert positions["b"] == pytest.approx((CENTER[0] + 80, CENTER[1] + 120))
        assert positions["c"] == pytest.approx((CENTER[0], CENTER[1] + 240))

    def test_force_layout_centred_and_seeded(self):
        """Test: root lands on center, repeated runs agree, orphans excluded"""
        graph = _tree([("root", "a"), ("root", "b"), ("a", "c")])
        graph.add_node("orphan")

        first = force_layout(graph, "root", CENTER)
        second = force_layout(graph, "root", CENTER)

        assert first["root"] == pytest.approx(CENTER)
        assert "orphan" not in first
        for node_id in first:
            assert first[node_id] == pytest.approx(second[node_id])
        farthest = max(math.hypot(x - CENTER[0], y - CENTER[1]) for x, y in first.values())
        assert farthest == pytest.approx(300.0)

    def test_force_layout_large_map(self):
        """Test: maps of 500+ nodes take the sparse solver and still lay out every node"""
        graph = _tree([("root", f"n{i}") for i in range(600)])
        positions = force_layout(graph, "root", CENTER)

        assert len(positions) == 601
        assert positions["root"] == pytest.approx(CENTER)
        farthest = max(math.hypot(x - CENTER[0], y - CENTER[1]) for x, y in positions.values())
        assert farthest == pytest.approx(300.0)


class TestPlacement:
    """Tests for child placement and dragging"""

    def test_free_child_position_within_quarter_turn(self):
        """Test: new children are 150 away, to the right of the parent"""
        rng = random.Random(7)
        for _ in range(50):
            x, y = free_child_position((100.0, 100.0), rng=rng)
            assert math.hypot(x - 100.0, y - 100.0) == pytest.approx(CHILD_DISTANCE)
            assert x - 100.0 >= CHILD_DISTANCE * math.cos(math.pi / 4) - 1e-9

    def test_drag_delta_respects_scale(self):
        """Test: pointer movement is divided by the zoom scale"""
        assert apply_drag_delta((100.0, 100.0), (10.0, 10.0), (30.0, 50.0), scale=2.0) == (110.0, 120.0)
        assert apply_drag_delta((0.0, 0.0), (0.0, 0.0), (5.0, -5.0)) == (5.0, -5.0)


class TestViewport:
    """Tests for zoom and pan"""

    def test_wheel_zoom_is_clamped(self):
        """Test: scale never leaves [0.5, 2.0] whatever the wheel input"""
        viewport = Viewport()
        for _ in range(100):
            viewport.wheel(-1)
        assert viewport.scale == MAX_SCALE

        for _ in range(100):
            viewport.wheel(120)
        assert viewport.scale == MIN_SCALE

        print("✅ Wheel zoom stays within bounds")

    def test_wheel_step(self):
        """Test: scrolling down zooms out by 0.05"""
        viewport = Viewport()
        viewport.wheel(1)
        assert viewport.scale == pytest.approx(0.95)

    def test_buttons_are_clamped(self):
        """Test: zoom buttons step 0.1 and clamp"""
        viewport = Viewport()
        viewport.zoom_in()
        assert viewport.zoom_percent == 110
        for _ in range(30):
            viewport.zoom_in()
        assert viewport.scale == MAX_SCALE
        for _ in range(30):
            viewport.zoom_out()
        assert viewport.scale == MIN_SCALE

    def test_pan_and_reset(self):
        """Test: panning follows the pointer; reset restores the default view"""
        viewport = Viewport()
        viewport.pan_start((10.0, 10.0))
        viewport.pan_move((40.0, 25.0))
        assert (viewport.x, viewport.y) == (30.0, 15.0)
        assert viewport.is_panning

        viewport.pan_end()
        viewport.pan_move((500.0, 500.0))
        assert (viewport.x, viewport.y) == (30.0, 15.0)

        viewport.zoom_in()
        viewport.reset()
        assert (viewport.scale, viewport.x, viewport.y) == (1.0, 0.0, 0.0)

    def test_screen_canvas_transforms(self):
        """Test: to_canvas undoes to_screen"""
        viewport = Viewport(scale=1.5, x=20.0, y=-10.0)
        point = (123.0, 45.0)
        assert viewport.to_canvas(viewport.to_screen(point)) == pytest.approx(point)
