"""
Test Suite for StudyBuddyController (async facade used by the MCP server)

Runs against a temporary store with no API key, so every AI call takes the
fallback path.
"""

import asyncio
import json
import time
from datetime import date
from unittest.mock import Mock

import pytest

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from study_buddy import main
from study_buddy.core.logic import StudyBuddyController
from study_buddy.models.mindmap import ROOT_ID
from study_buddy.models.note import NoteFilter
from study_buddy.storage.engine import LocalStore
from study_buddy.utils.fallbacks import fallback_quiz
from study_buddy.utils.llm import GeminiService


@pytest.fixture
def controller(tmp_path):
    return StudyBuddyController(LocalStore(tmp_path), GeminiService(api_key=""))


class TestNotesFacade:
    """Tests for the notes operations"""

    @pytest.mark.asyncio
    async def test_list_notes_seeds_demo_data(self, controller):
        """Test: first call loads the demo notes"""
        notes = await controller.list_notes_data()
        assert len(notes) == 5
        assert notes[0]["title"] == "Introduction to Quantum Computing"
        assert "<" not in notes[0]["preview"]

        search = await controller.list_notes_data(NoteFilter(search="calculus"))
        assert [n["id"] for n in search] == ["3"]

    @pytest.mark.asyncio
    async def test_save_note_with_snake_case_payload(self, controller):
        """Test: snake_case fields are accepted and the referenced note gains a backlink"""
        result = await controller.save_note({
            "title": "Integration Practice",
            "content": "<p>See [[Calculus II Exam Review]]</p>",
            "is_pinned": True,
        })
        saved = result["note"]
        assert result["error"] is None
        assert saved["isPinned"] is True

        backlinks = await controller.get_backlinks_data("3")
        assert [b["id"] for b in backlinks] == [saved["id"]]
        assert "[[Calculus II Exam Review]]" in backlinks[0]["context"]

        note = await controller.get_note_data(saved["id"])
        assert note["outgoingLinks"] == [{"title": "Calculus II Exam Review", "id": "3"}]

        print("✅ Save via facade updates backlinks")

    @pytest.mark.asyncio
    async def test_partial_update_keeps_other_fields(self, controller):
        """Test: updating one field of an existing note keeps the rest"""
        await controller.save_note({"id": "2", "is_archived": True})
        note = await controller.get_note_data("2")

        assert note["isArchived"] is True
        assert note["title"] == "Neural Networks Architecture"
        assert note["version"] == 1

    @pytest.mark.asyncio
    async def test_delete_and_link_graph(self, controller):
        """Test: deleting removes the note and its edges"""
        saved = (await controller.save_note({"title": "Q", "content": "[[Research Paper Structure]]"}))["note"]
        graph = await controller.get_link_graph()
        assert {"source": saved["id"], "target": "4"}.items() <= graph["edges"][0].items()

        assert await controller.delete_note(saved["id"]) is True
        assert await controller.get_note_data(saved["id"]) is None
        assert (await controller.get_link_graph())["edges"] == []


class TestMindMapFacade:
    """Tests for the mind-map operations"""

    @pytest.mark.asyncio
    async def test_add_child_and_reload(self, controller, tmp_path):
        """Test: mutations are saved and restored by a fresh controller"""
        child = await controller.mindmap_add_child(ROOT_ID, "Cells")
        snapshot = await controller.get_mindmap()
        assert {n["id"] for n in snapshot["nodes"]} == {ROOT_ID, child}
        assert snapshot["links"][0]["source"] == ROOT_ID

        fresh = StudyBuddyController(LocalStore(tmp_path), GeminiService(api_key=""))
        restored = await fresh.get_mindmap()
        assert {n["id"] for n in restored["nodes"]} == {ROOT_ID, child}

    @pytest.mark.asyncio
    async def test_root_cannot_be_deleted(self, controller):
        """Test: deleting the central idea is refused"""
        assert await controller.mindmap_delete_node(ROOT_ID) is False
        assert len((await controller.get_mindmap())["nodes"]) == 1

    @pytest.mark.asyncio
    async def test_auto_arrange_unknown_layout(self, controller):
        """Test: unknown layout names raise"""
        with pytest.raises(ValueError):
            await controller.mindmap_auto_arrange("spiral")


class TestAIFacade:
    """Tests for AI operations on the fallback path"""

    @pytest.mark.asyncio
    async def test_quiz_has_requested_size(self, controller):
        """Test: n questions, four options each, answer among them"""
        quiz = await controller.generate_quiz("Genetics", "easy", 3)
        assert len(quiz) == 3
        for q in quiz:
            assert len(q["options"]) == 4
            assert q["correctAnswer"] in q["options"]

    @pytest.mark.asyncio
    async def test_flashcards_into_deck(self, controller):
        """Test: with a deck name the generated cards are stored as a deck"""
        result = await controller.generate_flashcards("cells and organelles", 5, deck_name="Biology")
        assert len(result["deck"]["flashcards"]) == 5

        decks = await controller.list_decks_data()
        assert decks[0]["name"] == "Biology"
        assert decks[0]["total"] == 5

        card_id = result["deck"]["flashcards"][0]["id"]
        reviewed = await controller.review_flashcard(decks[0]["id"], card_id, 3)
        assert reviewed["stats"]["mastered"] == 1

    @pytest.mark.asyncio
    async def test_session_analysis_and_plan(self, controller):
        """Test: fallback analysis and plan come back serialized"""
        analysis = await controller.analyze_study_session({"duration": 45}, {"title": "Essay"})
        assert analysis["isFallback"] is True
        assert "45-minute" in analysis["strengths"][0]

        plan = await controller.create_study_plan("Finals", "syllabus", date(2030, 6, 1), 2)
        assert len(plan["topics"]) == 3
        result = await controller.set_topic_status(plan["topics"][0]["id"], "completed")
        assert result["progress"] == pytest.approx(100 / 3)

    @pytest.mark.asyncio
    async def test_model_calls_run_concurrently(self, tmp_path):
        """Test: two slow quiz requests and a notes read overlap instead of queueing"""
        def slow_quiz(topic, difficulty, n):
            time.sleep(0.3)
            return fallback_quiz(topic, n)

        llm = Mock()
        llm.generate_quiz.side_effect = slow_quiz
        controller = StudyBuddyController(LocalStore(tmp_path), llm)
        await controller.list_notes_data()

        start = time.perf_counter()
        first, second, notes = await asyncio.gather(
            controller.generate_quiz("a", "easy", 2),
            controller.generate_quiz("b", "easy", 2),
            controller.list_notes_data(),
        )
        elapsed = time.perf_counter() - start

        assert (len(first), len(second), len(notes)) == (2, 2, 5)
        assert elapsed < 0.55
        print(f"✅ Concurrent model calls finished in {elapsed:.2f}s")


def _payload(result):
    return json.loads(result[0].text)


@pytest.fixture
def call_tool(controller, monkeypatch):
    monkeypatch.setattr(main, "controller", controller)
    return main.call_tool


class TestToolDispatch:
    """Tests for the MCP tool handlers"""

    @pytest.mark.asyncio
    async def test_search_notes_include_archived(self, controller, call_tool):
        """Test: include_archived returns live and archived matches together"""
        live = (await controller.save_note({"title": "Entropy live"}))["note"]
        old = (await controller.save_note({"title": "Entropy old", "is_archived": True}))["note"]

        both = _payload(await call_tool("search_notes", {"query": "entropy", "include_archived": True}))
        assert {n["id"] for n in both} == {live["id"], old["id"]}

        live_only = _payload(await call_tool("search_notes", {"query": "entropy"}))
        assert [n["id"] for n in live_only] == [live["id"]]

    @pytest.mark.asyncio
    async def test_list_notes_snake_case_sort(self, call_tool):
        """Test: snake_case sort options reach the filter"""
        notes = _payload(await call_tool("list_notes", {"sort_by": "title", "sort_direction": "asc"}))
        assert notes[0]["title"] == "Calculus II Exam Review"
        assert len(notes) == 5

    @pytest.mark.asyncio
    async def test_root_delete_refused(self, call_tool):
        """Test: deleting the central idea reports refused"""
        result = _payload(await call_tool("mindmap_delete_node", {"node_id": ROOT_ID}))
        assert result == {"status": "refused", "node_id": ROOT_ID}

    @pytest.mark.asyncio
    async def test_generate_quiz_question_count(self, call_tool):
        """Test: num_questions controls the quiz size"""
        result = _payload(await call_tool("generate_quiz", {"topic": "Optics", "num_questions": 3}))
        assert result["topic"] == "Optics"
        assert len(result["questions"]) == 3

    @pytest.mark.asyncio
    async def test_note_templates(self, call_tool):
        """Test: templates are listed and filtered by query"""
        everything = _payload(await call_tool("list_note_templates", {}))
        assert len(everything) == 6

        exam = _payload(await call_tool("list_note_templates", {"query": "exam"}))
        assert [t["id"] for t in exam] == ["exam-prep"]

    @pytest.mark.asyncio
    async def test_unknown_tool_and_bad_arguments(self, call_tool):
        """Test: failures come back as an error payload"""
        assert _payload(await call_tool("nope", {}))["error"] == "Unknown tool: nope"
        assert "error" in _payload(await call_tool("mindmap_auto_arrange", {"layout": "spiral"}))
