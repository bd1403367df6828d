"""
Smart Notes: the notes collection, folders, filtering and persistence.

The whole collection is read and written under one storage key. Every
mutation recomputes backlinks and persists.
"""

import json
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import ValidationError

from ..config import settings
from ..models.note import NoteFilter, NoteTemplate, SmartNote, utcnow
from ..storage.engine import LocalStore, StorageError
from ..utils.backlinks import backlinks_for, recompute_backlinks
from ..utils.events import log_debug, log_event
from ..utils.llm import GeminiService
from ..utils.seed import demo_notes

SAVE_ERROR = "Failed to save notes. Your changes may not persist."
LOAD_ERROR = "Failed to load notes. Please try again later."


class NotesController:
    def __init__(self, store: LocalStore, llm: Optional[GeminiService] = None):
        self.store = store
        self.llm = llm
        self.notes: List[SmartNote] = []
        self.error: Optional[str] = None
        # content as last saved, per note id
        self._saved_content: Dict[str, str] = {}

    # --- Persistence ---

    def load(self) -> List[SmartNote]:
        """
        Loads the collection. Unreadable notes are skipped and the stored
        document is backed up first; when nothing usable is left (missing,
        empty or unparseable data) the demo notes are written back instead.
        """
        try:
            raw = self.store.get_item(settings.NOTES_KEY)
        except OSError as e:
            log_debug(f"[NOTES] Error loading notes: {e}")
            self.error = LOAD_ERROR
            return self.notes

        notes = []
        skipped = 0
        if isinstance(raw, list):
            for item in raw:
                try:
                    notes.append(SmartNote.model_validate(item))
                except ValidationError as e:
                    skipped += 1
                    log_debug(f"[NOTES] Skipping unreadable note: {e}")
        elif raw is not None:
            skipped = 1

        if skipped:
            backup_path = self.store.backup_item(settings.NOTES_KEY)
            log_event("NOTES_SKIPPED", {"count": skipped, "backup": str(backup_path)})

        if notes:
            self.notes = notes
        else:
            log_debug("[NOTES] No valid saved notes found, using demo data")
            self.notes = demo_notes()
            self._persist()

        recompute_backlinks(self.notes)
        self._saved_content = {note.id: note.content for note in self.notes}
        return self.notes

    def _persist(self):
        try:
            self.store.set_item(settings.NOTES_KEY, [note.to_storage() for note in self.notes])
            self.error = None
        except StorageError as e:
            log_debug(f"[NOTES] Error saving notes: {e}")
            self.error = SAVE_ERROR

    def _commit(self):
        self._sync_children()
        recompute_backlinks(self.notes)
        self._persist()

    def _sync_children(self):
        """Folder children lists mirror the parent_id of every note."""
        for note in self.notes:
            if note.is_folder:
                note.children = [n.id for n in self.notes if n.parent_id == note.id]

    # --- Notes ---

    def get(self, note_id: str) -> Optional[SmartNote]:
        for note in self.notes:
            if note.id == note_id:
                return note
        return None

    def create_note(self, template: Optional[NoteTemplate] = None, parent_id: Optional[str] = None) -> SmartNote:
        """A new, unsaved note, optionally pre-filled from a template."""
        if template is None:
            return SmartNote(parent_id=parent_id)
        return SmartNote(
            content=template.content,
            tags=list(template.tags),
            category=template.category,
            color=template.color,
            template_id=template.id,
            parent_id=parent_id,
        )

    def save_note(self, note: SmartNote) -> SmartNote:
        """Inserts or replaces note. The version goes up when the content changed."""
        existing = self.get(note.id)
        note.updated_at = utcnow()
        if existing is None:
            self.notes.append(note)
            log_event("NOTE_CREATED", {"id": note.id, "title": note.title, "category": note.category})
        else:
            if self._saved_content.get(note.id, existing.content) != note.content:
                note.version = existing.version + 1
            self.notes[self.notes.index(existing)] = note
            log_event("NOTE_UPDATED", {"id": note.id, "version": note.version})
        self._saved_content[note.id] = note.content
        self._commit()
        return note

    def delete_note(self, note_id: str) -> bool:
        note = self.get(note_id)
        if note is None:
            return False
        self.notes.remove(note)
        log_event("NOTE_DELETED", {"id": note_id})
        self._saved_content.pop(note_id, None)
        self._commit()
        return True

    def move_note(self, note_id: str, parent_id: Optional[str]) -> bool:
        """Moves a note into a folder (None for the top level)."""
        note = self.get(note_id)
        if note is None or note_id == parent_id:
            return False
        if parent_id is not None:
            parent = self.get(parent_id)
            if parent is None or not parent.is_folder:
                return False
        note.parent_id = parent_id
        note.updated_at = utcnow()
        self._commit()
        return True

    def toggle_pin(self, note_id: str) -> Optional[SmartNote]:
        note = self.get(note_id)
        if note is None:
            return None
        note.is_pinned = not note.is_pinned
        note.updated_at = utcnow()
        self._commit()
        return note

    def toggle_archive(self, note_id: str) -> Optional[SmartNote]:
        note = self.get(note_id)
        if note is None:
            return None
        note.is_archived = not note.is_archived
        note.updated_at = utcnow()
        self._commit()
        return note

    # --- Folders ---

    def create_folder(self, name: str, parent_id: Optional[str] = None) -> Optional[SmartNote]:
        name = name.strip()
        if not name:
            return None
        folder = SmartNote(title=name, is_folder=True, parent_id=parent_id)
        self.notes.append(folder)
        log_event("FOLDER_CREATED", {"id": folder.id, "name": name, "parent_id": parent_id})
        self._commit()
        return folder

    def rename_folder(self, folder_id: str, name: str) -> bool:
        folder = self.get(folder_id)
        name = name.strip()
        if folder is None or not folder.is_folder or not name:
            return False
        folder.title = name
        folder.updated_at = utcnow()
        self._commit()
        return True

    def delete_folder(self, folder_id: str) -> bool:
        """Removes the folder; its contents move up to the folder's parent."""
        folder = self.get(folder_id)
        if folder is None or not folder.is_folder:
            return False
        for note in self.notes:
            if note.parent_id == folder_id:
                note.parent_id = folder.parent_id
        self.notes.remove(folder)
        log_event("FOLDER_DELETED", {"id": folder_id, "moved_to": folder.parent_id})
        self._commit()
        return True

    def folder_notes(self, folder_id: Optional[str]) -> List[SmartNote]:
        """Direct contents of a folder (None for the top level)."""
        return [note for note in self.notes if note.parent_id == folder_id]

    def folder_path(self, note_id: str) -> List[SmartNote]:
        """Ancestors of a note from the top level down (breadcrumb)."""
        path = []
        seen = set()
        note = self.get(note_id)
        while note is not None and note.parent_id and note.parent_id not in seen:
            seen.add(note.parent_id)
            note = self.get(note.parent_id)
            if note is not None:
                path.insert(0, note)
        return path

    # --- Queries ---

    def filter_notes(self, options: Optional[NoteFilter] = None) -> List[SmartNote]:
        options = options or NoteFilter()
        result = [note for note in self.notes if not note.is_folder]

        if options.search:
            q = options.search.lower()
            result = [
                n for n in result
                if q in n.title.lower() or q in n.content.lower() or any(q in t.lower() for t in n.tags)
            ]
        if options.categories:
            result = [n for n in result if n.category in options.categories]
        if options.tags:
            result = [n for n in result if any(t in n.tags for t in options.tags)]
        if options.pinned:
            result = [n for n in result if n.is_pinned]
        # Archived notes only show when asked for; include_archived shows both
        if not options.include_archived:
            result = [n for n in result if n.is_archived == options.archived]

        if options.sort_by == "title":
            key = lambda n: n.title.lower()
        elif options.sort_by == "createdAt":
            key = lambda n: n.created_at
        else:
            key = lambda n: n.updated_at
        return sorted(result, key=key, reverse=options.sort_direction == "desc")

    def all_tags(self) -> List[str]:
        return sorted({tag for note in self.notes for tag in note.tags})

    def backlinks(self, note_id: str) -> List[SmartNote]:
        note = self.get(note_id)
        if note is None:
            return []
        return backlinks_for(note, self.notes)

    def export_json(self) -> str:
        return json.dumps([note.to_storage() for note in self.notes], indent=2, ensure_ascii=False)

    def export_filename(self, today: Optional[datetime] = None) -> str:
        today = today or utcnow()
        return f"smart_notes_export_{today.date().isoformat()}.json"

    # --- Welcome banner ---

    def is_welcome_visible(self) -> bool:
        return self.store.get_item(settings.WELCOME_DISMISSED_KEY) is not True

    def dismiss_welcome(self):
        self.store.set_item(settings.WELCOME_DISMISSED_KEY, True)

    # --- AI ---

    def enhance_note(self, note_id: str) -> Optional[SmartNote]:
        """Fills ai_summary from the AI adapter's analysis of the note body."""
        note = self.get(note_id)
        if note is None or self.llm is None:
            return None
        note.ai_summary = self.llm.analyze_text(note.content)
        note.updated_at = utcnow()
        self._commit()
        return note
