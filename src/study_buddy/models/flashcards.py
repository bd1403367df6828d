"""
Data models for flashcard decks
"""

import uuid
from datetime import datetime
from typing import List, Optional
from pydantic import Field

from .base import CamelModel
from .note import utcnow


class Flashcard(CamelModel):
    id: str = Field(default_factory=lambda: uuid.uuid4().hex[:9])
    front: str
    back: str
    confidence: int = Field(default=0, ge=0, le=3, description="0 = never reviewed, 1..3 after review")
    last_reviewed: Optional[datetime] = None
    tags: List[str] = Field(default_factory=list)


class Deck(CamelModel):
    id: str = Field(default_factory=lambda: uuid.uuid4().hex[:12])
    name: str
    flashcards: List[Flashcard] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utcnow)
    last_studied: Optional[datetime] = None
    description: Optional[str] = None
    tags: List[str] = Field(default_factory=list)


class StudySession(CamelModel):
    deck_id: str
    start_time: datetime = Field(default_factory=utcnow)
    end_time: Optional[datetime] = None
    cards_studied: int = 0
    correct_answers: int = 0
    average_confidence: float = 0.0
