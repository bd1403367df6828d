"""
Mind-map editor: a MindMapStore plus the viewport, layout selection, the
active node and an in-progress drag.
"""

import random
from typing import Dict, List, Optional

from pydantic import ValidationError

from ..config import settings
from ..models.mindmap import ROOT_ID, LayoutName, MindMapDocument, MindMapTemplate
from ..storage.engine import LocalStore
from ..storage.mindmap import MindMapStore
from ..utils.events import log_debug, log_event
from ..utils.geometry import LAYOUTS, Point, Viewport, apply_drag_delta
from ..utils.llm import GeminiService


class DragSession:
    """A node being dragged. Only preview positions change until it ends."""

    def __init__(self, node_id: str, origin: Point, pointer_start: Point):
        self.node_id = node_id
        self.origin = origin
        self.pointer_start = pointer_start
        self.preview = origin


class MindMapEditor:
    def __init__(
        self,
        llm: Optional[GeminiService] = None,
        title: str = "Untitled Mind Map",
        rng: Optional[random.Random] = None,
    ):
        self.map = MindMapStore()
        self.viewport = Viewport()
        self.llm = llm
        self.title = title
        self.map_id: Optional[str] = None
        self.current_layout: LayoutName = "radial"
        self.auto_layout_enabled = False
        self.active_node_id: Optional[str] = None
        self.drag: Optional[DragSession] = None
        self.rng = rng or random.Random()

    # --- Editing ---

    def add_child(self, parent_id: str, text: str = "New Idea", is_ai_generated: bool = False) -> Optional[str]:
        node_id = self.map.add_child(parent_id, text, is_ai_generated=is_ai_generated, rng=self.rng)
        if node_id is None:
            return None
        log_event("NODE_ADDED", {"id": node_id, "parent": parent_id, "ai_generated": is_ai_generated})
        if self.auto_layout_enabled:
            self.auto_arrange()
        return node_id

    def add_new_node(self) -> Optional[str]:
        """Adds a child to the active node, or to root when none is active."""
        parent_id = self.active_node_id if self.map.get_node(self.active_node_id or "") else ROOT_ID
        return self.add_child(parent_id)

    def select(self, node_id: Optional[str]):
        self.active_node_id = node_id if node_id and self.map.get_node(node_id) else None

    def update_text(self, node_id: str, text: str) -> bool:
        return self.map.update_text(node_id, text)

    def delete_node(self, node_id: str, cascade: bool = False) -> bool:
        if not self.map.delete_node(node_id, cascade=cascade):
            return False
        if self.active_node_id and self.map.get_node(self.active_node_id) is None:
            self.active_node_id = None
        log_event("NODE_DELETED", {"id": node_id, "cascade": cascade})
        return True

    # --- Dragging ---

    def begin_drag(self, node_id: str, pointer: Point) -> bool:
        node = self.map.get_node(node_id)
        if node is None:
            return False
        self.drag = DragSession(node_id, (node.x, node.y), pointer)
        self.active_node_id = node_id
        return True

    def drag_to(self, pointer: Point) -> Optional[Point]:
        if self.drag is None:
            return None
        self.drag.preview = apply_drag_delta(
            self.drag.origin, self.drag.pointer_start, pointer, self.viewport.scale
        )
        return self.drag.preview

    def end_drag(self) -> bool:
        """Commits the previewed position with a single move."""
        if self.drag is None:
            return False
        drag, self.drag = self.drag, None
        return self.map.move_node(drag.node_id, *drag.preview)

    def cancel_drag(self):
        self.drag = None

    # --- Layout ---

    def set_layout(self, name: LayoutName):
        if name not in LAYOUTS:
            raise ValueError(f"Unknown layout: {name}")
        self.current_layout = name

    def toggle_auto_layout(self) -> bool:
        self.auto_layout_enabled = not self.auto_layout_enabled
        if self.auto_layout_enabled:
            self.auto_arrange()
        return self.auto_layout_enabled

    def auto_arrange(self) -> Dict[str, Point]:
        """Applies the current layout around the canvas center and resets the viewport."""
        layout = LAYOUTS[self.current_layout]
        positions = layout(self.map.graph, ROOT_ID, settings.CANVAS_CENTER)
        self.map.set_positions(positions)
        self.viewport.reset()
        log_event("LAYOUT_APPLIED", {"layout": self.current_layout, "nodes": len(positions)})
        return positions

    # --- AI suggestions ---

    def generate_ideas(self, node_id: str) -> List[str]:
        node = self.map.get_node(node_id)
        if node is None or self.llm is None:
            return []
        return self.llm.suggest_ideas(node.text)

    def add_ai_suggestion(self, text: str, parent_id: Optional[str] = None) -> Optional[str]:
        return self.add_child(parent_id or self.active_node_id or ROOT_ID, text, is_ai_generated=True)

    # --- Templates and saved maps ---

    def load_template(self, template: MindMapTemplate):
        self.map.load_template(template)
        self.title = template.title
        self.map_id = None
        self.active_node_id = None
        self.viewport.reset()

    def new_map(self, title: str = "Untitled Mind Map"):
        self.map = MindMapStore()
        self.title = title
        self.map_id = None
        self.active_node_id = None
        self.viewport.reset()

    def _read_saved(self, store: LocalStore) -> List[MindMapDocument]:
        raw = store.get_item(settings.MIND_MAPS_KEY)
        if not isinstance(raw, list):
            return []
        docs = []
        for item in raw:
            try:
                docs.append(MindMapDocument.model_validate(item))
            except ValidationError as e:
                log_debug(f"[MINDMAP] Skipping unreadable saved map: {e}")
        return docs

    def list_saved(self, store: LocalStore) -> List[MindMapDocument]:
        return self._read_saved(store)

    def save(self, store: LocalStore) -> MindMapDocument:
        """Saves the current map, replacing an earlier save of the same map."""
        doc = self.map.to_document(self.title, self.map_id)
        self.map_id = doc.id
        saved = [d for d in self._read_saved(store) if d.id != doc.id]
        saved.append(doc)
        store.set_item(settings.MIND_MAPS_KEY, [d.to_storage() for d in saved])
        return doc

    def load(self, store: LocalStore, map_id: str) -> bool:
        for doc in self._read_saved(store):
            if doc.id == map_id:
                self.map = MindMapStore.from_document(doc)
                self.title = doc.title
                self.map_id = doc.id
                self.active_node_id = None
                self.viewport.reset()
                return True
        return False

    def delete_saved(self, store: LocalStore, map_id: str) -> bool:
        saved = self._read_saved(store)
        remaining = [d for d in saved if d.id != map_id]
        if len(remaining) == len(saved):
            return False
        store.set_item(settings.MIND_MAPS_KEY, [d.to_storage() for d in remaining])
        return True
