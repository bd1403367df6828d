"""
Data models for the study planner
"""

import uuid
import datetime as dt
from datetime import datetime
from typing import List, Literal, Optional
from pydantic import Field

from .base import CamelModel
from .note import utcnow

TopicStatus = Literal["pending", "in-progress", "completed", "needs-review"]
SubtopicStatus = Literal["pending", "completed"]
Priority = Literal["low", "medium", "high"]


class StudySubtopic(CamelModel):
    id: str = Field(default_factory=lambda: f"subtopic-{uuid.uuid4().hex[:9]}")
    title: str
    status: SubtopicStatus = "pending"
    duration: int = Field(default=30, description="Minutes")


class StudyTopic(CamelModel):
    id: str = Field(default_factory=lambda: f"topic-{uuid.uuid4().hex[:9]}")
    title: str
    description: str = ""
    duration: float = Field(default=1.0, description="Hours")
    status: TopicStatus = "pending"
    subtopics: List[StudySubtopic] = Field(default_factory=list)
    priority: Priority = "medium"
    scheduled_date: Optional[dt.date] = None


class ScheduleDay(CamelModel):
    date: dt.date
    topics: List[str] = Field(default_factory=list)


class StudyPlan(CamelModel):
    id: str = Field(default_factory=lambda: f"plan-{uuid.uuid4().hex[:9]}")
    title: str = "Study Plan"
    deadline: dt.date
    daily_hours: float = 2.0
    progress: float = 0.0
    topics: List[StudyTopic] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utcnow)
    recommendations: List[str] = Field(default_factory=list)
    schedule: List[ScheduleDay] = Field(default_factory=list)
    is_fallback: bool = False
