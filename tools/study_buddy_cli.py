"""
Study Buddy CLI helper for external integrations.

Reads the local stores directly so tools can inspect notes, backlinks,
the saved mind maps and flashcard decks without going through the MCP server.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict

ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from study_buddy.core.flashcards import DeckManager
from study_buddy.core.mindmap import MindMapEditor
from study_buddy.core.notes import NotesController
from study_buddy.models.note import NoteFilter
from study_buddy.storage.engine import LocalStore
from study_buddy.utils.backlinks import build_link_graph
from study_buddy.utils.serializers import (
    serialize,
    serialize_backlinks,
    serialize_graph,
    serialize_note_summary,
)


def list_notes(notes: NotesController, search: str = "", archived: bool = False) -> Dict[str, Any]:
    options = NoteFilter(search=search, archived=archived)
    return {"notes": [serialize_note_summary(n) for n in notes.filter_notes(options)]}


def get_note(notes: NotesController, note_id: str) -> Dict[str, Any]:
    note = notes.get(note_id)
    if not note:
        return {"error": f"Note {note_id} not found"}
    return {"note": serialize(note)}


def get_backlinks(notes: NotesController, note_id: str) -> Dict[str, Any]:
    note = notes.get(note_id)
    if not note:
        return {"error": f"Note {note_id} not found"}
    return {"note_id": note_id, "backlinks": serialize_backlinks(note, notes.backlinks(note_id))}


def get_link_graph(notes: NotesController) -> Dict[str, Any]:
    return serialize_graph(build_link_graph(notes.notes))


def get_mindmap(store: LocalStore, map_id: str | None = None) -> Dict[str, Any]:
    editor = MindMapEditor()
    saved = editor.list_saved(store)
    if not saved:
        return {"error": "No saved mind maps"}
    if map_id is None:
        return {"maps": [{"id": d.id, "title": d.title, "nodes": len(d.nodes)} for d in saved]}
    if not editor.load(store, map_id):
        return {"error": f"Mind map {map_id} not found"}
    doc = editor.map.to_document(editor.title, editor.map_id)
    return {"mindmap": serialize(doc), "orphans": editor.map.orphans()}


def list_decks(decks: DeckManager) -> Dict[str, Any]:
    return {
        "decks": [
            {"id": d.id, "name": d.name, **decks.deck_stats(d.id)}
            for d in decks.decks
        ]
    }


def main() -> None:
    parser = argparse.ArgumentParser(description="Study Buddy CLI helper")
    parser.add_argument("--data-dir", help="Storage directory (defaults to the configured one)")
    sub = parser.add_subparsers(dest="command")

    notes_cmd = sub.add_parser("list-notes")
    notes_cmd.add_argument("--search", default="")
    notes_cmd.add_argument("--archived", action="store_true")

    note_cmd = sub.add_parser("get-note")
    note_cmd.add_argument("--id", required=True)

    backlinks_cmd = sub.add_parser("backlinks")
    backlinks_cmd.add_argument("--id", required=True)

    sub.add_parser("link-graph")

    mindmap_cmd = sub.add_parser("get-mindmap")
    mindmap_cmd.add_argument("--id", required=False, help="Saved map id; omit to list saved maps")

    sub.add_parser("list-decks")

    args = parser.parse_args()
    store = LocalStore(Path(args.data_dir) if args.data_dir else None)

    if args.command in ("list-notes", "get-note", "backlinks", "link-graph"):
        notes = NotesController(store)
        notes.load()
        if args.command == "list-notes":
            result = list_notes(notes, args.search, args.archived)
        elif args.command == "get-note":
            result = get_note(notes, args.id)
        elif args.command == "backlinks":
            result = get_backlinks(notes, args.id)
        else:
            result = get_link_graph(notes)
    elif args.command == "get-mindmap":
        result = get_mindmap(store, getattr(args, "id", None))
    elif args.command == "list-decks":
        decks = DeckManager(store)
        decks.load()
        result = list_decks(decks)
    else:
        parser.print_help()
        sys.exit(1)

    print(json.dumps(result, ensure_ascii=False))


if __name__ == "__main__":
    main()
