"""
Shapes exchanged with the generative model.

Model output is parsed into these and validated; anything that does not fit
falls back to canned data of the same shape.
"""

import datetime as dt
from typing import List, Literal, Optional
from pydantic import BaseModel, Field

from .base import CamelModel

Difficulty = Literal["easy", "medium", "hard"]


class QuizQuestion(CamelModel):
    question: str
    options: List[str] = Field(default_factory=list)
    correct_answer: str = ""
    explanation: str = ""


class GeneratedCard(BaseModel):
    question: str
    answer: str


class SummaryOptions(BaseModel):
    length: Literal["short", "medium", "long"] = "medium"
    style: Literal["concise", "detailed", "bullets"] = "concise"


class ChatMessage(BaseModel):
    role: str
    content: str


class HistoryEntry(BaseModel):
    role: Literal["user", "model"]
    parts: str


class ChatReply(BaseModel):
    text: str
    history: List[HistoryEntry] = Field(default_factory=list)
    is_fallback: bool = False


class LearningPreferences(CamelModel):
    difficulty: str = "intermediate"
    learning_style: str = "visual"
    session_duration: int = 30
    include_examples: bool = True
    include_practice_questions: bool = True
    explain_in_depth: bool = False


class SessionInfo(CamelModel):
    duration: int = Field(description="Minutes")
    productivity: int = Field(default=0, description="Self-rated 0..10")
    notes: str = ""


class TaskInfo(CamelModel):
    title: str
    subject: str = ""


class SessionAnalysis(CamelModel):
    strengths: List[str] = Field(default_factory=list)
    improvements: List[str] = Field(default_factory=list)
    next_steps: List[str] = Field(default_factory=list)
    is_fallback: bool = False


class DraftSubtopic(BaseModel):
    title: str
    duration: int = 30


class DraftTopic(BaseModel):
    title: str
    description: Optional[str] = None
    duration: float = 1.0
    priority: Literal["low", "medium", "high"] = "medium"
    subtopics: List[DraftSubtopic] = Field(default_factory=list)
    date: Optional[dt.date] = None


class DraftScheduleDay(BaseModel):
    date: dt.date
    topics: List[str] = Field(default_factory=list)


class StudyPlanDraft(BaseModel):
    topics: List[DraftTopic] = Field(default_factory=list)
    schedule: List[DraftScheduleDay] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)
    is_fallback: bool = False
