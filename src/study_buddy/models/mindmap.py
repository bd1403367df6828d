"""
Data models for mind maps
"""

import uuid
from typing import List, Literal, Optional
from pydantic import Field

from .base import CamelModel

ROOT_ID = "root"

NodeType = Literal["main", "sub", "leaf"]
LayoutName = Literal["radial", "hierarchical", "force"]


class MindMapNode(CamelModel):
    """A single idea on the canvas."""
    id: str = Field(default_factory=lambda: f"node-{uuid.uuid4().hex[:12]}")
    text: str = ""
    x: float = 0.0
    y: float = 0.0
    color: str = "#4338CA"
    type: NodeType = "leaf"
    ai_generated: bool = False


class MindMapLink(CamelModel):
    """Directed edge parent -> child. Endpoints reference node ids."""
    id: str = Field(default_factory=lambda: f"link-{uuid.uuid4().hex[:12]}")
    source: str
    target: str
    label: Optional[str] = None


class MindMapTemplate(CamelModel):
    id: str
    title: str
    description: str = ""
    nodes: List[MindMapNode] = Field(default_factory=list)
    links: List[MindMapLink] = Field(default_factory=list)


class MindMapDocument(CamelModel):
    """A saved map: what gets written under the mind-maps storage key."""
    id: str = Field(default_factory=lambda: f"map-{uuid.uuid4().hex[:12]}")
    title: str = "Untitled Mind Map"
    nodes: List[MindMapNode] = Field(default_factory=list)
    links: List[MindMapLink] = Field(default_factory=list)
    created_at: Optional[str] = None
