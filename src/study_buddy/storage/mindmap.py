"""
Mind-map graph store

Nodes and links live in a networkx DiGraph: node attributes are the
MindMapNode fields, edge attributes carry the link id and label. Successor
order follows link insertion, which the radial layout relies on.
"""

import json
import random
from datetime import datetime, timezone
from typing import Dict, Iterator, List, Optional, Tuple

import networkx as nx

from ..config import settings
from ..models.mindmap import ROOT_ID, MindMapDocument, MindMapLink, MindMapNode, MindMapTemplate
from ..utils.events import log_debug
from ..utils.geometry import Point, free_child_position

PRIMARY_COLOR = "#4338CA"
SECONDARY_COLOR = "#047857"


class MindMapStore:
    def __init__(self, root_text: str = "Central Idea", center: Optional[Point] = None):
        self.graph = nx.DiGraph()
        cx, cy = center or settings.CANVAS_CENTER
        self.add_node(MindMapNode(id=ROOT_ID, text=root_text, x=cx, y=cy, color=PRIMARY_COLOR, type="main"))

    # --- Reads ---

    @property
    def nodes(self) -> List[MindMapNode]:
        return [MindMapNode(**attrs) for _, attrs in self.graph.nodes(data=True)]

    @property
    def links(self) -> List[MindMapLink]:
        return [
            MindMapLink(id=attrs["id"], source=source, target=target, label=attrs.get("label"))
            for source, target, attrs in self.graph.edges(data=True)
        ]

    def get_node(self, node_id: str) -> Optional[MindMapNode]:
        attrs = self.graph.nodes.get(node_id)
        if attrs is None:
            return None
        return MindMapNode(**attrs)

    def children(self, node_id: str) -> List[str]:
        if node_id not in self.graph:
            return []
        return list(self.graph.successors(node_id))

    def resolve_links(self) -> Iterator[Tuple[MindMapLink, MindMapNode, MindMapNode]]:
        """Yields each link with both endpoint nodes; links with a missing endpoint are skipped."""
        for link in self.links:
            source = self.get_node(link.source)
            target = self.get_node(link.target)
            if source is None or target is None:
                continue
            yield link, source, target

    def orphans(self) -> List[str]:
        """Ids of nodes no chain of links reaches from root."""
        if ROOT_ID not in self.graph:
            return list(self.graph.nodes)
        reachable = nx.descendants(self.graph, ROOT_ID) | {ROOT_ID}
        return [n for n in self.graph.nodes if n not in reachable]

    # --- Writes ---

    def add_node(self, node: MindMapNode):
        """Adds or replaces a node (in-memory)."""
        self.graph.add_node(node.id, **node.model_dump())

    def add_link(self, link: MindMapLink) -> bool:
        """Adds a link. Links whose endpoints are missing are skipped."""
        if link.source not in self.graph or link.target not in self.graph:
            log_debug(f"[MINDMAP] Skipping dangling link {link.id} ({link.source} -> {link.target})")
            return False
        self.graph.add_edge(link.source, link.target, id=link.id, label=link.label)
        return True

    def add_child(
        self,
        parent_id: str,
        text: str = "New Idea",
        is_ai_generated: bool = False,
        rng: Optional[random.Random] = None,
    ) -> Optional[str]:
        """
        Creates a child of parent_id plus the parent->child link.

        Returns the new node id, or None (no-op) when the parent does not exist.
        """
        parent = self.get_node(parent_id)
        if parent is None:
            return None

        rng = rng or random
        child_type = "sub" if parent.type == "main" else "leaf"
        if child_type == "sub":
            color = SECONDARY_COLOR
        else:
            color = f"hsl({rng.randrange(360)}, 70%, 60%)"

        x, y = free_child_position((parent.x, parent.y), rng=rng)
        child = MindMapNode(text=text, x=x, y=y, color=color, type=child_type, ai_generated=is_ai_generated)
        self.add_node(child)
        self.add_link(MindMapLink(source=parent_id, target=child.id))
        return child.id

    def update_text(self, node_id: str, text: str) -> bool:
        if node_id not in self.graph:
            return False
        self.graph.nodes[node_id]["text"] = text
        return True

    def move_node(self, node_id: str, x: float, y: float) -> bool:
        if node_id not in self.graph:
            return False
        self.graph.nodes[node_id]["x"] = x
        self.graph.nodes[node_id]["y"] = y
        return True

    def set_positions(self, positions: Dict[str, Point]):
        for node_id, (x, y) in positions.items():
            self.move_node(node_id, x, y)

    def delete_node(self, node_id: str, cascade: bool = False) -> bool:
        """
        Removes a node and every link it is an endpoint of. The root is never removed.

        Without cascade, descendants stay in the map but lose their link to
        it (orphaned). With cascade, the whole subtree below the node goes too.
        """
        if node_id == ROOT_ID or node_id not in self.graph:
            return False

        doomed = {node_id}
        if cascade:
            doomed |= nx.descendants(self.graph, node_id)
            doomed.discard(ROOT_ID)
        # NetworkX removes incident edges together with the node
        self.graph.remove_nodes_from(doomed)
        return True

    # --- Documents ---

    def replace(self, nodes: List[MindMapNode], links: List[MindMapLink]):
        """Replaces the whole map. Links pointing at missing nodes are dropped."""
        self.graph = nx.DiGraph()
        for node in nodes:
            self.add_node(node)
        for link in links:
            self.add_link(link)

    def load_template(self, template: MindMapTemplate):
        self.replace(template.nodes, template.links)

    def to_document(self, title: str, map_id: Optional[str] = None) -> MindMapDocument:
        doc = MindMapDocument(
            title=title,
            nodes=self.nodes,
            links=self.links,
            created_at=datetime.now(timezone.utc).isoformat(),
        )
        if map_id:
            doc.id = map_id
        return doc

    @classmethod
    def from_document(cls, doc: MindMapDocument) -> "MindMapStore":
        store = cls()
        store.replace(doc.nodes, doc.links)
        return store

    def export_json(self, title: str) -> str:
        return json.dumps(self.to_document(title).to_storage(), indent=2, ensure_ascii=False)
