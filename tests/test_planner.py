"""
Test Suite for the study planner
"""

from datetime import date, timedelta
from unittest.mock import Mock

import pytest

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from study_buddy.core.planner import StudyPlanner, plan_from_draft
from study_buddy.models.ai import DraftTopic, StudyPlanDraft
from study_buddy.storage.engine import LocalStore
from study_buddy.utils.fallbacks import fallback_study_plan

TODAY = date(2030, 1, 1)
DEADLINE = date(2030, 1, 15)


@pytest.fixture
def store(tmp_path):
    return LocalStore(tmp_path)


@pytest.fixture
def planner(store):
    llm = Mock()
    llm.generate_study_plan.return_value = fallback_study_plan(TODAY)
    planner = StudyPlanner(store, llm)
    planner.create_plan("Finals", "Maths, physics and CS", DEADLINE, 3)
    return planner


class TestPlanCreation:
    """Tests for turning a draft into a plan"""

    def test_topics_scheduled_from_draft(self, planner):
        """Test: each topic takes the first schedule day that names it"""
        plan = planner.plan

        assert [t.title for t in plan.topics] == [
            "Mathematics Foundations", "Physics Principles", "Computer Science Fundamentals",
        ]
        assert [t.scheduled_date for t in plan.topics] == [TODAY, TODAY + timedelta(days=1), TODAY + timedelta(days=2)]
        assert all(t.status == "pending" for t in plan.topics)
        assert plan.progress == 0.0
        assert plan.is_fallback
        assert len(plan.topics[2].subtopics) == 4

        print("✅ Plan built from draft")

    def test_default_description(self):
        """Test: a topic without a description gets a default one"""
        draft = StudyPlanDraft(topics=[DraftTopic(title="Optics")])
        plan = plan_from_draft("P", DEADLINE, 2, draft)

        assert plan.topics[0].description == "Study Optics"
        assert plan.topics[0].scheduled_date is None

    def test_plan_survives_reload(self, planner, store):
        """Test: the plan is read back from storage"""
        reloaded = StudyPlanner(store, Mock())
        plan = reloaded.load()
        assert plan.id == planner.plan.id
        assert [t.id for t in plan.topics] == [t.id for t in planner.plan.topics]

    def test_clear(self, planner, store):
        """Test: clearing removes the stored plan"""
        planner.clear()
        assert planner.plan is None
        assert StudyPlanner(store, Mock()).load() is None


class TestProgress:
    """Tests for status changes and progress"""

    def test_progress_follows_completed_topics(self, planner):
        """Test: progress is the completed share of topics"""
        topics = planner.plan.topics
        planner.set_topic_status(topics[0].id, "completed")
        assert planner.plan.progress == pytest.approx(100 / 3)

        planner.set_topic_status(topics[1].id, "needs-review")
        assert planner.plan.progress == pytest.approx(100 / 3)
        assert planner.set_topic_status("missing", "completed") is None

    def test_focus_session_marks_in_progress(self, planner):
        """Test: a finished focus session moves the topic to in-progress"""
        topic = planner.plan.topics[1]
        assert planner.complete_focus_session(topic.id).status == "in-progress"

    def test_subtopics_drive_topic_status(self, planner):
        """Test: some subtopics done means in-progress; all done means completed"""
        topic = planner.plan.topics[0]
        first, *rest = topic.subtopics

        assert planner.set_subtopic_status(topic.id, first.id, "completed").status == "in-progress"
        for sub in rest:
            planner.set_subtopic_status(topic.id, sub.id, "completed")
        assert topic.status == "completed"
        assert planner.plan.progress == pytest.approx(100 / 3)

        assert planner.set_subtopic_status(topic.id, first.id, "pending").status == "in-progress"
        assert planner.set_subtopic_status(topic.id, "missing", "completed") is None

    def test_days_left(self, planner):
        """Test: days until the deadline, never negative"""
        assert planner.days_left(TODAY) == 14
        assert planner.days_left(DEADLINE + timedelta(days=3)) == 0

    def test_refresh_recommendations(self, planner):
        """Test: topics are grouped by status for the adapter"""
        topics = planner.plan.topics
        planner.set_topic_status(topics[0].id, "completed")
        planner.set_topic_status(topics[1].id, "in-progress")
        planner.llm.study_recommendations.return_value = ["Keep going"]

        assert planner.refresh_recommendations() == ["Keep going"]
        args = planner.llm.study_recommendations.call_args.args
        assert args[0] == ["Mathematics Foundations"]
        assert args[1] == ["Physics Principles"]
        assert args[2] == ["Computer Science Fundamentals"]
        assert planner.plan.recommendations == ["Keep going"]
