"""
Study planner: turns a syllabus into a scheduled plan and tracks progress.
"""

from datetime import date
from typing import Optional

from pydantic import ValidationError

from ..config import settings
from ..models.ai import StudyPlanDraft
from ..models.planner import ScheduleDay, StudyPlan, StudySubtopic, StudyTopic, SubtopicStatus, TopicStatus
from ..storage.engine import LocalStore
from ..utils.events import log_debug, log_event
from ..utils.llm import GeminiService


def plan_from_draft(title: str, deadline: date, daily_hours: float, draft: StudyPlanDraft) -> StudyPlan:
    """Converts model output into a plan with ids, statuses and scheduled dates."""
    topics = []
    for draft_topic in draft.topics:
        topics.append(StudyTopic(
            title=draft_topic.title,
            description=draft_topic.description or f"Study {draft_topic.title}",
            duration=draft_topic.duration,
            priority=draft_topic.priority,
            subtopics=[StudySubtopic(title=s.title, duration=s.duration or 30) for s in draft_topic.subtopics],
            scheduled_date=draft_topic.date,
        ))

    schedule = [ScheduleDay(date=day.date, topics=list(day.topics)) for day in draft.schedule]

    # Topics without their own date take the first schedule day that names them
    by_title = {t.title: t for t in topics}
    for day in schedule:
        for name in day.topics:
            topic = by_title.get(name)
            if topic is not None and topic.scheduled_date is None:
                topic.scheduled_date = day.date

    return StudyPlan(
        title=title,
        deadline=deadline,
        daily_hours=daily_hours,
        topics=topics,
        schedule=schedule,
        recommendations=list(draft.recommendations),
        is_fallback=draft.is_fallback,
    )


class StudyPlanner:
    def __init__(self, store: LocalStore, llm: GeminiService):
        self.store = store
        self.llm = llm
        self.plan: Optional[StudyPlan] = None

    def load(self) -> Optional[StudyPlan]:
        raw = self.store.get_item(settings.STUDY_PLAN_KEY)
        if raw is None:
            return None
        try:
            self.plan = StudyPlan.model_validate(raw)
        except ValidationError as e:
            log_debug(f"[PLANNER] Saved study plan unreadable: {e}")
            self.plan = None
        return self.plan

    def _persist(self):
        if self.plan is not None:
            self.store.set_item(settings.STUDY_PLAN_KEY, self.plan.to_storage())

    def create_plan(self, title: str, syllabus: str, deadline: date, daily_hours: float) -> StudyPlan:
        draft = self.llm.generate_study_plan(syllabus, deadline, daily_hours)
        return self.adopt_draft(title, deadline, daily_hours, draft)

    def adopt_draft(self, title: str, deadline: date, daily_hours: float, draft: StudyPlanDraft) -> StudyPlan:
        """Replaces the current plan with one built from model output."""
        self.plan = plan_from_draft(title, deadline, daily_hours, draft)
        self._persist()
        log_event("PLAN_CREATED", {
            "id": self.plan.id,
            "topics": len(self.plan.topics),
            "fallback": self.plan.is_fallback,
        })
        return self.plan

    def clear(self):
        self.plan = None
        self.store.remove_item(settings.STUDY_PLAN_KEY)

    def _topic(self, topic_id: str) -> Optional[StudyTopic]:
        if self.plan is None:
            return None
        for topic in self.plan.topics:
            if topic.id == topic_id:
                return topic
        return None

    def _recompute_progress(self):
        topics = self.plan.topics
        completed = sum(1 for t in topics if t.status == "completed")
        self.plan.progress = (completed / len(topics) * 100) if topics else 0.0

    def set_topic_status(self, topic_id: str, status: TopicStatus) -> Optional[StudyTopic]:
        topic = self._topic(topic_id)
        if topic is None:
            return None
        topic.status = status
        self._recompute_progress()
        self._persist()
        log_event("TOPIC_STATUS_CHANGED", {"id": topic_id, "status": status, "progress": self.plan.progress})
        return topic

    def set_subtopic_status(self, topic_id: str, subtopic_id: str, status: SubtopicStatus) -> Optional[StudyTopic]:
        """
        Updates a subtopic. The topic becomes completed once every subtopic is,
        and in-progress while only some are.
        """
        topic = self._topic(topic_id)
        if topic is None:
            return None
        subtopic = next((s for s in topic.subtopics if s.id == subtopic_id), None)
        if subtopic is None:
            return None
        subtopic.status = status

        done = sum(1 for s in topic.subtopics if s.status == "completed")
        if done == len(topic.subtopics):
            new_status = "completed"
        elif done > 0:
            new_status = "in-progress"
        else:
            new_status = topic.status if topic.status != "completed" else "in-progress"
        return self.set_topic_status(topic_id, new_status)

    def complete_focus_session(self, topic_id: str) -> Optional[StudyTopic]:
        """A finished focus session marks its topic in-progress."""
        return self.set_topic_status(topic_id, "in-progress")

    def refresh_recommendations(self):
        if self.plan is None:
            return []
        by_status = {"completed": [], "in-progress": [], "pending": []}
        for topic in self.plan.topics:
            by_status.get(topic.status, by_status["pending"]).append(topic.title)
        self.plan.recommendations = self.llm.study_recommendations(
            by_status["completed"],
            by_status["in-progress"],
            by_status["pending"],
            self.plan.deadline,
            self.plan.daily_hours,
            self.plan.progress,
        )
        self._persist()
        return self.plan.recommendations

    def days_left(self, today: Optional[date] = None) -> Optional[int]:
        if self.plan is None:
            return None
        today = today or date.today()
        return max(0, (self.plan.deadline - today).days)
