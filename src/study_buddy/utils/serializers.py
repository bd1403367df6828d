"""
Serialization helpers for exposing study data via CLI/MCP tools.
"""

from __future__ import annotations

from typing import Any, Dict, List

import networkx as nx

from ..models.base import CamelModel
from ..models.note import SmartNote
from .wikilinks import TAG_PATTERN, backlink_context


def serialize(model: CamelModel) -> Dict[str, Any]:
    """JSON-ready dict with the stored (camelCase) field names and ISO dates."""
    return model.to_storage()


def serialize_note_summary(note: SmartNote, preview_chars: int = 160) -> Dict[str, Any]:
    """
    Compact listing entry: metadata plus a plain-text preview instead of the
    full HTML body.
    """
    text = " ".join(TAG_PATTERN.sub(" ", note.content).split())
    return {
        "id": note.id,
        "title": note.title,
        "category": note.category,
        "tags": note.tags,
        "isPinned": note.is_pinned,
        "isArchived": note.is_archived,
        "isFolder": note.is_folder,
        "parentId": note.parent_id,
        "updatedAt": note.updated_at.isoformat(),
        "backlinks": len(note.backlinks),
        "preview": text[:preview_chars],
    }


def serialize_backlinks(note: SmartNote, referencing: List[SmartNote]) -> List[Dict[str, Any]]:
    """Backlinks panel: each referencing note with the snippet around the mention."""
    return [
        {
            "id": other.id,
            "title": other.title,
            "context": backlink_context(other.content, note.title),
        }
        for other in referencing
    ]


def serialize_graph(graph: nx.DiGraph) -> Dict[str, Any]:
    """Nodes + edges of a graph, attributes flattened into each entry."""
    nodes = [dict(attrs, id=node_id) for node_id, attrs in graph.nodes(data=True)]
    edges = [dict(attrs, source=source, target=target) for source, target, attrs in graph.edges(data=True)]
    return {"nodes": nodes, "edges": edges}
