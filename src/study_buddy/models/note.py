"""
Data models for Smart Notes
"""

import uuid
from datetime import datetime, timezone
from typing import List, Literal, Optional
from pydantic import Field

from .base import CamelModel

NoteCategory = Literal["lecture", "assignment", "research", "exam", "project", "personal", "other"]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SmartNote(CamelModel):
    """A note (or folder) in the Smart Notes collection."""
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    title: str = ""
    content: str = Field(default="", description="HTML body; may contain [[Title]] references")
    tags: List[str] = Field(default_factory=list)
    category: NoteCategory = "personal"
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
    is_pinned: bool = False
    is_archived: bool = False
    color: Optional[str] = None
    version: int = 1
    template_id: Optional[str] = None

    # Hierarchy
    parent_id: Optional[str] = None
    is_folder: bool = False
    children: List[str] = Field(default_factory=list)

    # Derived: ids of notes whose content references this note's title
    backlinks: List[str] = Field(default_factory=list)

    # AI enrichment
    ai_summary: Optional[str] = None
    ai_topics: List[str] = Field(default_factory=list)
    ai_key_insights: List[str] = Field(default_factory=list)


class NoteTemplate(CamelModel):
    id: str
    name: str
    description: str = ""
    content: str = ""
    tags: List[str] = Field(default_factory=list)
    category: NoteCategory = "personal"
    color: Optional[str] = None


class NoteFilter(CamelModel):
    """Search/filter/sort options of the notes list."""
    search: str = ""
    tags: List[str] = Field(default_factory=list)
    categories: List[NoteCategory] = Field(default_factory=list)
    pinned: bool = False
    archived: bool = False
    include_archived: bool = False
    sort_by: Literal["updatedAt", "createdAt", "title"] = "updatedAt"
    sort_direction: Literal["asc", "desc"] = "desc"
