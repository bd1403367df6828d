"""
Test Suite for the mind-map store and editor

Tests for:
1. Root protection and child creation
2. Deletion (orphaning and cascade)
3. Links with missing endpoints
4. Editor: dragging, auto layout, AI suggestions, saved maps
"""

import math
import random
from unittest.mock import Mock

import pytest

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from study_buddy.config import settings
from study_buddy.core.mindmap import MindMapEditor
from study_buddy.models.mindmap import ROOT_ID, MindMapLink, MindMapNode
from study_buddy.storage.engine import LocalStore
from study_buddy.storage.mindmap import SECONDARY_COLOR, MindMapStore
from study_buddy.utils.seed import MIND_MAP_TEMPLATES_BY_ID


class TestMindMapStore:
    """Tests for MindMapStore"""

    def test_root_created_at_canvas_center(self):
        """Test: a new map has exactly the central idea"""
        store = MindMapStore()
        root = store.get_node(ROOT_ID)

        assert len(store.nodes) == 1
        assert root.text == "Central Idea"
        assert root.type == "main"
        assert (root.x, root.y) == settings.CANVAS_CENTER

    def test_root_cannot_be_deleted(self):
        """Test: deleting root is refused and changes nothing"""
        store = MindMapStore()
        store.add_child(ROOT_ID)

        assert store.delete_node(ROOT_ID) is False
        assert store.delete_node(ROOT_ID, cascade=True) is False
        assert store.get_node(ROOT_ID) is not None
        assert len(store.nodes) == 2

        print("✅ Root is protected")

    def test_add_child_types_and_colors(self):
        """Test: children of main are sub, deeper children are leaf with a random hue"""
        store = MindMapStore()
        rng = random.Random(1)
        sub_id = store.add_child(ROOT_ID, "Topic", rng=rng)
        leaf_id = store.add_child(sub_id, "Detail", rng=rng)

        sub = store.get_node(sub_id)
        leaf = store.get_node(leaf_id)
        assert (sub.type, sub.color) == ("sub", SECONDARY_COLOR)
        assert leaf.type == "leaf"
        assert leaf.color.startswith("hsl(")
        assert store.children(ROOT_ID) == [sub_id]
        assert store.children(sub_id) == [leaf_id]

        root = store.get_node(ROOT_ID)
        assert math.hypot(sub.x - root.x, sub.y - root.y) == pytest.approx(150.0)

    def test_add_child_missing_parent(self):
        """Test: unknown parent is a no-op"""
        store = MindMapStore()
        assert store.add_child("nope") is None
        assert len(store.nodes) == 1
        assert store.links == []

    def test_delete_orphans_descendants(self):
        """Test: deleting a node keeps its children but drops every link touching it"""
        store = MindMapStore()
        a = store.add_child(ROOT_ID, "A")
        b = store.add_child(a, "B")

        assert store.delete_node(a) is True
        assert store.get_node(a) is None
        assert store.get_node(b) is not None
        assert all(a not in (link.source, link.target) for link in store.links)
        assert store.orphans() == [b]

        print("✅ Descendants are orphaned, not removed")

    def test_cascade_delete(self):
        """Test: cascade removes the whole subtree"""
        store = MindMapStore()
        a = store.add_child(ROOT_ID, "A")
        b = store.add_child(a, "B")
        c = store.add_child(b, "C")
        keep = store.add_child(ROOT_ID, "Keep")

        assert store.delete_node(a, cascade=True) is True
        remaining = {n.id for n in store.nodes}
        assert remaining == {ROOT_ID, keep}
        assert c not in remaining

    def test_dangling_links_skipped(self):
        """Test: links to missing nodes are never stored or resolved"""
        store = MindMapStore()
        store.replace(
            [MindMapNode(id=ROOT_ID, text="R", type="main"), MindMapNode(id="x", text="X")],
            [MindMapLink(source=ROOT_ID, target="x"), MindMapLink(source="x", target="ghost")],
        )

        assert len(store.links) == 1
        assert store.add_link(MindMapLink(source="ghost", target=ROOT_ID)) is False
        resolved = list(store.resolve_links())
        assert len(resolved) == 1
        link, source, target = resolved[0]
        assert (source.id, target.id) == (ROOT_ID, "x")

    def test_update_and_move_unknown_ids(self):
        """Test: edits on unknown ids are silent no-ops"""
        store = MindMapStore()
        assert store.update_text("nope", "x") is False
        assert store.move_node("nope", 1, 2) is False
        assert store.update_text(ROOT_ID, "") is True
        assert store.get_node(ROOT_ID).text == ""

    def test_template_and_document(self):
        """Test: loading a template replaces the map; documents restore it"""
        store = MindMapStore()
        store.load_template(MIND_MAP_TEMPLATES_BY_ID["study-plan"])

        assert len(store.nodes) == 15
        assert len(store.links) == 14
        assert store.orphans() == []

        doc = store.to_document("Plan")
        restored = MindMapStore.from_document(doc)
        assert {n.id for n in restored.nodes} == {n.id for n in store.nodes}
        assert len(restored.links) == 14
        assert '"aiGenerated"' in store.export_json("Plan")


class TestMindMapEditor:
    """Tests for MindMapEditor"""

    def test_add_new_node_uses_active_node(self):
        """Test: new nodes go under the active node, or root"""
        editor = MindMapEditor(rng=random.Random(3))
        first = editor.add_new_node()
        assert editor.map.children(ROOT_ID) == [first]

        editor.select(first)
        second = editor.add_new_node()
        assert editor.map.children(first) == [second]

    def test_drag_commits_once(self):
        """Test: dragging only previews until it ends"""
        editor = MindMapEditor(rng=random.Random(3))
        node_id = editor.add_child(ROOT_ID)
        start = editor.map.get_node(node_id)
        editor.viewport.scale = 2.0

        assert editor.begin_drag(node_id, (0.0, 0.0))
        preview = editor.drag_to((50.0, 20.0))
        assert preview == pytest.approx((start.x + 25.0, start.y + 10.0))
        assert (editor.map.get_node(node_id).x, editor.map.get_node(node_id).y) == (start.x, start.y)

        assert editor.end_drag() is True
        moved = editor.map.get_node(node_id)
        assert (moved.x, moved.y) == pytest.approx(preview)
        assert editor.drag is None

    def test_cancel_drag_keeps_position(self):
        """Test: a cancelled drag leaves the node where it was"""
        editor = MindMapEditor(rng=random.Random(3))
        node_id = editor.add_child(ROOT_ID)
        start = editor.map.get_node(node_id)

        editor.begin_drag(node_id, (0.0, 0.0))
        editor.drag_to((80.0, 80.0))
        editor.cancel_drag()

        assert editor.drag is None
        assert editor.end_drag() is False
        node = editor.map.get_node(node_id)
        assert (node.x, node.y) == (start.x, start.y)

    def test_auto_arrange_resets_viewport(self):
        """Test: auto arrange applies the radial layout and resets zoom/pan"""
        editor = MindMapEditor(rng=random.Random(3))
        child = editor.add_child(ROOT_ID)
        editor.viewport.zoom_in()
        editor.viewport.x = 99.0

        editor.auto_arrange()

        cx, cy = settings.CANVAS_CENTER
        node = editor.map.get_node(child)
        assert (node.x, node.y) == pytest.approx((cx + 200.0, cy))
        assert (editor.viewport.scale, editor.viewport.x) == (1.0, 0.0)

    def test_auto_layout_on_add(self):
        """Test: with auto layout enabled, new children are arranged immediately"""
        editor = MindMapEditor(rng=random.Random(3))
        assert editor.toggle_auto_layout() is True

        first = editor.add_child(ROOT_ID)
        second = editor.add_child(ROOT_ID)

        cx, cy = settings.CANVAS_CENTER
        assert (editor.map.get_node(first).x, editor.map.get_node(first).y) == pytest.approx((cx + 200.0, cy))
        assert (editor.map.get_node(second).x, editor.map.get_node(second).y) == pytest.approx((cx - 200.0, cy))

    def test_set_layout_rejects_unknown(self):
        """Test: only the three known layouts are accepted"""
        editor = MindMapEditor()
        editor.set_layout("force")
        assert editor.current_layout == "force"
        with pytest.raises(ValueError):
            editor.set_layout("spiral")

    def test_generate_ideas_and_add_suggestion(self):
        """Test: ideas come from the AI adapter; suggestions are flagged"""
        llm = Mock()
        llm.suggest_ideas.return_value = ["One", "Two", "Three", "Four", "Five"]
        editor = MindMapEditor(llm=llm, rng=random.Random(3))

        ideas = editor.generate_ideas(ROOT_ID)
        assert ideas == ["One", "Two", "Three", "Four", "Five"]
        llm.suggest_ideas.assert_called_once_with("Central Idea")

        node_id = editor.add_ai_suggestion(ideas[0])
        assert editor.map.get_node(node_id).ai_generated is True
        assert editor.generate_ideas("missing") == []

    def test_save_and_load(self, tmp_path):
        """Test: saved maps are listed and restored; re-saving replaces the entry"""
        store = LocalStore(tmp_path)
        editor = MindMapEditor(title="Biology", rng=random.Random(3))
        node_id = editor.add_child(ROOT_ID, "Cells")

        doc = editor.save(store)
        editor.save(store)
        assert [d.id for d in editor.list_saved(store)] == [doc.id]

        other = MindMapEditor()
        assert other.load(store, doc.id) is True
        assert other.title == "Biology"
        assert other.map.get_node(node_id).text == "Cells"
        assert other.load(store, "missing") is False

        assert other.delete_saved(store, doc.id) is True
        assert other.list_saved(store) == []
