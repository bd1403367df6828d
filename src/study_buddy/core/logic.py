"""
Core Logic: StudyBuddyController

Owns the storage, the AI adapter and the feature controllers. Blocking work
(storage I/O and model calls) is offloaded with `run_in_executor`. State
reads and writes hold one lock; model calls do not, so concurrent AI
requests resolve independently.
"""

import asyncio
from datetime import date
from typing import Any, Dict, List, Optional

from pydantic.alias_generators import to_camel

from ..models.ai import SessionInfo, SummaryOptions, TaskInfo
from ..models.note import NoteFilter, SmartNote
from ..models.planner import TopicStatus
from ..storage.engine import LocalStore
from ..utils.backlinks import build_link_graph
from ..utils.events import log_debug
from ..utils.llm import GeminiService
from ..utils.serializers import (
    serialize,
    serialize_backlinks,
    serialize_graph,
    serialize_note_summary,
)
from ..utils.wikilinks import outgoing_references
from .flashcards import DeckManager
from .mindmap import MindMapEditor
from .notes import NotesController
from .planner import StudyPlanner


class StudyBuddyController:
    def __init__(self, store: Optional[LocalStore] = None, llm: Optional[GeminiService] = None):
        self.store = store or LocalStore()
        self.llm = llm or GeminiService()
        self.notes = NotesController(self.store, self.llm)
        self.mindmap = MindMapEditor(self.llm)
        self.decks = DeckManager(self.store, self.llm)
        self.planner = StudyPlanner(self.store, self.llm)
        self._loaded = False
        self._lock = asyncio.Lock()

    def load(self):
        """Reads every collection from storage (idempotent)."""
        if self._loaded:
            return
        self.notes.load()
        self.decks.load()
        self.planner.load()
        saved_maps = self.mindmap.list_saved(self.store)
        if saved_maps:
            self.mindmap.load(self.store, saved_maps[-1].id)
        self._loaded = True
        log_debug(f"[LOAD] {len(self.notes.notes)} notes, {len(self.decks.decks)} decks loaded")

    async def _run(self, func, *args):
        """Runs a blocking call in the default executor, one state change at a time."""
        loop = asyncio.get_running_loop()
        async with self._lock:
            if not self._loaded:
                await loop.run_in_executor(None, self.load)
            return await loop.run_in_executor(None, func, *args)

    async def _call(self, func, *args):
        """Runs a model call in the default executor without holding the state lock."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, func, *args)

    # --- Notes ---

    async def list_notes_data(self, options: Optional[NoteFilter] = None) -> List[Dict[str, Any]]:
        def _collect():
            return [serialize_note_summary(n) for n in self.notes.filter_notes(options)]
        return await self._run(_collect)

    async def get_note_data(self, note_id: str) -> Optional[Dict[str, Any]]:
        def _get():
            note = self.notes.get(note_id)
            if note is None:
                return None
            data = serialize(note)
            data["outgoingLinks"] = [
                {"title": title, "id": target_id}
                for title, target_id in outgoing_references(note, self.notes.notes)
            ]
            return data
        return await self._run(_get)

    async def save_note(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Creates or updates a note from a (camelCase or snake_case) payload."""
        def _save():
            fields = {(to_camel(k) if "_" in k else k): v for k, v in payload.items()}
            existing = self.notes.get(fields["id"]) if fields.get("id") else None
            base = serialize(existing) if existing else {}
            note = SmartNote.model_validate({**base, **fields})
            saved = self.notes.save_note(note)
            return {"note": serialize(saved), "error": self.notes.error}
        return await self._run(_save)

    async def delete_note(self, note_id: str) -> bool:
        return await self._run(self.notes.delete_note, note_id)

    async def get_backlinks_data(self, note_id: str) -> List[Dict[str, Any]]:
        def _get():
            note = self.notes.get(note_id)
            if note is None:
                return []
            return serialize_backlinks(note, self.notes.backlinks(note_id))
        return await self._run(_get)

    async def get_link_graph(self) -> Dict[str, Any]:
        return await self._run(lambda: serialize_graph(build_link_graph(self.notes.notes)))

    # --- Mind map ---

    def _mindmap_snapshot(self) -> Dict[str, Any]:
        return {
            "id": self.mindmap.map_id,
            "title": self.mindmap.title,
            "layout": self.mindmap.current_layout,
            "nodes": [serialize(n) for n in self.mindmap.map.nodes],
            "links": [serialize(link) for link in self.mindmap.map.links],
            "orphans": self.mindmap.map.orphans(),
        }

    def _mindmap_commit(self, result):
        self.mindmap.save(self.store)
        return result

    async def get_mindmap(self) -> Dict[str, Any]:
        return await self._run(self._mindmap_snapshot)

    async def mindmap_add_child(self, parent_id: str, text: str = "New Idea") -> Optional[str]:
        return await self._run(lambda: self._mindmap_commit(self.mindmap.add_child(parent_id, text)))

    async def mindmap_update_text(self, node_id: str, text: str) -> bool:
        return await self._run(lambda: self._mindmap_commit(self.mindmap.update_text(node_id, text)))

    async def mindmap_delete_node(self, node_id: str, cascade: bool = False) -> bool:
        return await self._run(lambda: self._mindmap_commit(self.mindmap.delete_node(node_id, cascade)))

    async def mindmap_move_node(self, node_id: str, x: float, y: float) -> bool:
        return await self._run(lambda: self._mindmap_commit(self.mindmap.map.move_node(node_id, x, y)))

    async def mindmap_auto_arrange(self, layout: Optional[str] = None) -> Dict[str, Any]:
        def _arrange():
            if layout:
                self.mindmap.set_layout(layout)
            self.mindmap.auto_arrange()
            return self._mindmap_commit(self._mindmap_snapshot())
        return await self._run(_arrange)

    # --- AI ---
    # Model round trips run outside the lock; only merging results into state takes it.

    async def generate_quiz(self, topic: str, difficulty: str = "medium", n: int = 5) -> List[Dict[str, Any]]:
        questions = await self._call(self.llm.generate_quiz, topic, difficulty, n)
        return [serialize(q) for q in questions]

    async def generate_flashcards(self, content: str, n: int = 5,
                                  deck_name: Optional[str] = None) -> Dict[str, Any]:
        """Generates cards; with deck_name they are also stored as a new deck."""
        cards = await self._call(self.llm.generate_flashcards, content, n)
        if deck_name:
            deck = await self._run(self.decks.deck_from_generated, deck_name, cards)
            return {"deck": serialize(deck) if deck else None}
        return {"cards": [c.model_dump() for c in cards]}

    async def summarize_text(self, text: str, length: str = "medium", style: str = "concise") -> str:
        options = SummaryOptions(length=length, style=style)
        return await self._call(self.llm.summarize_text, text, options)

    async def analyze_study_session(self, session: Dict[str, Any], task: Dict[str, Any]) -> Dict[str, Any]:
        analysis = await self._call(
            self.llm.analyze_study_session,
            SessionInfo.model_validate(session),
            TaskInfo.model_validate(task),
        )
        return serialize(analysis)

    # --- Planner ---

    async def create_study_plan(self, title: str, syllabus: str, deadline: date,
                                daily_hours: float) -> Dict[str, Any]:
        draft = await self._call(self.llm.generate_study_plan, syllabus, deadline, daily_hours)
        plan = await self._run(self.planner.adopt_draft, title, deadline, daily_hours, draft)
        return serialize(plan)

    async def set_topic_status(self, topic_id: str, status: TopicStatus) -> Optional[Dict[str, Any]]:
        def _set():
            topic = self.planner.set_topic_status(topic_id, status)
            if topic is None:
                return None
            return {"topic": serialize(topic), "progress": self.planner.plan.progress}
        return await self._run(_set)

    # --- Flashcards ---

    async def review_flashcard(self, deck_id: str, card_id: str, confidence: int) -> Optional[Dict[str, Any]]:
        def _review():
            card = self.decks.review(deck_id, card_id, confidence)
            if card is None:
                return None
            return {"card": serialize(card), "stats": self.decks.deck_stats(deck_id)}
        return await self._run(_review)

    async def list_decks_data(self) -> List[Dict[str, Any]]:
        def _collect():
            return [
                {"id": d.id, "name": d.name, "description": d.description, **self.decks.deck_stats(d.id)}
                for d in self.decks.decks
            ]
        return await self._run(_collect)
