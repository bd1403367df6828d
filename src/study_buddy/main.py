"""
MCP Server for Study Buddy

Exposes smart notes, backlinks, the mind map, flashcards, the study planner
and the AI study tools over MCP (stdio).
"""

import asyncio
import json
from datetime import date
from typing import Any, Sequence

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from .core.logic import StudyBuddyController
from .models.note import NoteFilter
from .utils.seed import search_note_templates
from .utils.serializers import serialize

server = Server("study-buddy")
controller = StudyBuddyController()

_STRING = {"type": "string"}
_ID = {"type": "string", "description": "Id of the item."}


def _reply(payload: Any) -> Sequence[TextContent]:
    return [TextContent(type="text", text=json.dumps(payload, indent=2, ensure_ascii=False, default=str))]


@server.list_tools()
async def list_tools() -> list[Tool]:
    """Lists all available tools."""
    return [
        # --- Notes ---
        Tool(
            name="list_notes",
            description="Lists smart notes with optional search, category/tag filters and sorting. Archived notes are hidden unless archived=true.",
            inputSchema={
                "type": "object",
                "properties": {
                    "search": {"type": "string", "description": "Matches title, content and tags (case-insensitive)."},
                    "tags": {"type": "array", "items": _STRING},
                    "categories": {"type": "array", "items": _STRING},
                    "pinned": {"type": "boolean", "default": False},
                    "archived": {"type": "boolean", "default": False},
                    "include_archived": {"type": "boolean", "default": False, "description": "Show archived and live notes together."},
                    "sort_by": {"type": "string", "enum": ["updatedAt", "createdAt", "title"], "default": "updatedAt"},
                    "sort_direction": {"type": "string", "enum": ["asc", "desc"], "default": "desc"},
                },
            },
        ),
        Tool(
            name="get_note",
            description="Returns a note with its full content, backlinks and outgoing [[Title]] references.",
            inputSchema={"type": "object", "properties": {"note_id": _ID}, "required": ["note_id"]},
        ),
        Tool(
            name="save_note",
            description="Creates or updates a note. Omit id to create. [[Title]] references in content become backlinks on the referenced notes.",
            inputSchema={
                "type": "object",
                "properties": {
                    "id": _ID,
                    "title": _STRING,
                    "content": {"type": "string", "description": "HTML body."},
                    "tags": {"type": "array", "items": _STRING},
                    "category": {
                        "type": "string",
                        "enum": ["lecture", "assignment", "research", "exam", "project", "personal", "other"],
                    },
                    "parent_id": {"type": "string", "description": "Folder id."},
                    "is_pinned": {"type": "boolean"},
                    "is_archived": {"type": "boolean"},
                },
            },
        ),
        Tool(
            name="delete_note",
            description="Deletes a note. Backlinks are recomputed.",
            inputSchema={"type": "object", "properties": {"note_id": _ID}, "required": ["note_id"]},
        ),
        Tool(
            name="get_backlinks",
            description="Lists the notes referencing a note, each with a snippet around the mention.",
            inputSchema={"type": "object", "properties": {"note_id": _ID}, "required": ["note_id"]},
        ),
        Tool(
            name="search_notes",
            description="Full-text search over note titles, content and tags.",
            inputSchema={
                "type": "object",
                "properties": {"query": _STRING, "include_archived": {"type": "boolean", "default": False}},
                "required": ["query"],
            },
        ),
        Tool(
            name="list_note_templates",
            description="Lists note templates (lecture, assignment, research, ...), optionally filtered by a query over name, description and tags.",
            inputSchema={"type": "object", "properties": {"query": _STRING}},
        ),
        # --- Mind map ---
        Tool(
            name="mindmap_get",
            description="Returns the current mind map: nodes, links and orphaned node ids.",
            inputSchema={"type": "object", "properties": {}},
        ),
        Tool(
            name="mindmap_add_child",
            description="Adds a child idea under a node (use 'root' for the central idea).",
            inputSchema={
                "type": "object",
                "properties": {"parent_id": _ID, "text": {"type": "string", "default": "New Idea"}},
                "required": ["parent_id"],
            },
        ),
        Tool(
            name="mindmap_update_text",
            description="Changes the text of a node.",
            inputSchema={
                "type": "object",
                "properties": {"node_id": _ID, "text": _STRING},
                "required": ["node_id", "text"],
            },
        ),
        Tool(
            name="mindmap_delete_node",
            description="Deletes a node and its links. The root cannot be deleted. Without cascade its descendants stay on the map unconnected.",
            inputSchema={
                "type": "object",
                "properties": {"node_id": _ID, "cascade": {"type": "boolean", "default": False}},
                "required": ["node_id"],
            },
        ),
        Tool(
            name="mindmap_move_node",
            description="Moves a node to canvas coordinates.",
            inputSchema={
                "type": "object",
                "properties": {"node_id": _ID, "x": {"type": "number"}, "y": {"type": "number"}},
                "required": ["node_id", "x", "y"],
            },
        ),
        Tool(
            name="mindmap_auto_arrange",
            description="Arranges the map with a layout (radial, hierarchical or force).",
            inputSchema={
                "type": "object",
                "properties": {"layout": {"type": "string", "enum": ["radial", "hierarchical", "force"]}},
            },
        ),
        # --- AI study tools ---
        Tool(
            name="generate_quiz",
            description="Generates a multiple-choice quiz (4 options per question). Always returns exactly the requested number of questions (1-20).",
            inputSchema={
                "type": "object",
                "properties": {
                    "topic": _STRING,
                    "difficulty": {"type": "string", "enum": ["easy", "medium", "hard"], "default": "medium"},
                    "num_questions": {"type": "integer", "default": 5, "minimum": 1, "maximum": 20},
                },
                "required": ["topic"],
            },
        ),
        Tool(
            name="generate_flashcards",
            description="Generates question/answer flashcards from text. With deck_name, the cards are saved as a new deck.",
            inputSchema={
                "type": "object",
                "properties": {
                    "content": _STRING,
                    "count": {"type": "integer", "default": 5, "minimum": 1},
                    "deck_name": _STRING,
                },
                "required": ["content"],
            },
        ),
        Tool(
            name="summarize_text",
            description="Summarizes text.",
            inputSchema={
                "type": "object",
                "properties": {
                    "text": _STRING,
                    "length": {"type": "string", "enum": ["short", "medium", "long"], "default": "medium"},
                    "style": {"type": "string", "enum": ["concise", "detailed", "bullets"], "default": "concise"},
                },
                "required": ["text"],
            },
        ),
        Tool(
            name="analyze_study_session",
            description="Reviews a finished study session and suggests strengths, improvements and next steps.",
            inputSchema={
                "type": "object",
                "properties": {
                    "task_title": _STRING,
                    "subject": _STRING,
                    "duration": {"type": "integer", "description": "Minutes."},
                    "productivity": {"type": "integer", "minimum": 0, "maximum": 10},
                    "notes": _STRING,
                },
                "required": ["task_title", "duration"],
            },
        ),
        # --- Planner and flashcards ---
        Tool(
            name="create_study_plan",
            description="Creates a study plan with topics, a day-by-day schedule and recommendations from a syllabus.",
            inputSchema={
                "type": "object",
                "properties": {
                    "title": _STRING,
                    "syllabus": _STRING,
                    "deadline": {"type": "string", "description": "YYYY-MM-DD"},
                    "daily_hours": {"type": "number", "default": 2},
                },
                "required": ["syllabus", "deadline"],
            },
        ),
        Tool(
            name="set_topic_status",
            description="Sets a study-plan topic's status and returns the updated plan progress.",
            inputSchema={
                "type": "object",
                "properties": {
                    "topic_id": _ID,
                    "status": {"type": "string", "enum": ["pending", "in-progress", "completed", "needs-review"]},
                },
                "required": ["topic_id", "status"],
            },
        ),
        Tool(
            name="review_flashcard",
            description="Records a flashcard review with confidence 1 (hard) to 3 (easy).",
            inputSchema={
                "type": "object",
                "properties": {
                    "deck_id": _ID,
                    "card_id": _ID,
                    "confidence": {"type": "integer", "minimum": 1, "maximum": 3},
                },
                "required": ["deck_id", "card_id", "confidence"],
            },
        ),
        Tool(
            name="list_decks",
            description="Lists flashcard decks with review statistics.",
            inputSchema={"type": "object", "properties": {}},
        ),
    ]


@server.call_tool()
async def call_tool(name: str, arguments: dict[str, Any]) -> Sequence[TextContent]:
    """Executes a tool."""
    try:
        if name == "list_notes":
            options = NoteFilter.model_validate(arguments or {})
            return _reply(await controller.list_notes_data(options))

        elif name == "get_note":
            note = await controller.get_note_data(arguments["note_id"])
            if note is None:
                return _reply({"error": f"Note {arguments['note_id']} not found"})
            note["backlinkDetails"] = await controller.get_backlinks_data(arguments["note_id"])
            return _reply(note)

        elif name == "save_note":
            return _reply(await controller.save_note(dict(arguments)))

        elif name == "delete_note":
            deleted = await controller.delete_note(arguments["note_id"])
            return _reply({"status": "deleted" if deleted else "not_found", "note_id": arguments["note_id"]})

        elif name == "get_backlinks":
            return _reply(await controller.get_backlinks_data(arguments["note_id"]))

        elif name == "search_notes":
            options = NoteFilter(search=arguments["query"], include_archived=arguments.get("include_archived", False))
            return _reply(await controller.list_notes_data(options))

        elif name == "list_note_templates":
            return _reply([serialize(t) for t in search_note_templates(arguments.get("query", ""))])

        elif name == "mindmap_get":
            return _reply(await controller.get_mindmap())

        elif name == "mindmap_add_child":
            node_id = await controller.mindmap_add_child(arguments["parent_id"], arguments.get("text", "New Idea"))
            if node_id is None:
                return _reply({"error": f"Node {arguments['parent_id']} not found"})
            return _reply({"status": "success", "node_id": node_id})

        elif name == "mindmap_update_text":
            updated = await controller.mindmap_update_text(arguments["node_id"], arguments["text"])
            return _reply({"status": "success" if updated else "not_found", "node_id": arguments["node_id"]})

        elif name == "mindmap_delete_node":
            deleted = await controller.mindmap_delete_node(arguments["node_id"], arguments.get("cascade", False))
            return _reply({"status": "deleted" if deleted else "refused", "node_id": arguments["node_id"]})

        elif name == "mindmap_move_node":
            moved = await controller.mindmap_move_node(
                arguments["node_id"], float(arguments["x"]), float(arguments["y"])
            )
            return _reply({"status": "success" if moved else "not_found", "node_id": arguments["node_id"]})

        elif name == "mindmap_auto_arrange":
            return _reply(await controller.mindmap_auto_arrange(arguments.get("layout")))

        elif name == "generate_quiz":
            questions = await controller.generate_quiz(
                arguments["topic"], arguments.get("difficulty", "medium"), int(arguments.get("num_questions", 5))
            )
            return _reply({"topic": arguments["topic"], "questions": questions})

        elif name == "generate_flashcards":
            return _reply(await controller.generate_flashcards(
                arguments["content"], int(arguments.get("count", 5)), arguments.get("deck_name")
            ))

        elif name == "summarize_text":
            summary = await controller.summarize_text(
                arguments["text"], arguments.get("length", "medium"), arguments.get("style", "concise")
            )
            return _reply({"summary": summary})

        elif name == "analyze_study_session":
            session = {
                "duration": arguments["duration"],
                "productivity": arguments.get("productivity", 0),
                "notes": arguments.get("notes", ""),
            }
            task = {"title": arguments["task_title"], "subject": arguments.get("subject", "")}
            return _reply(await controller.analyze_study_session(session, task))

        elif name == "create_study_plan":
            plan = await controller.create_study_plan(
                arguments.get("title", "Study Plan"),
                arguments["syllabus"],
                date.fromisoformat(arguments["deadline"]),
                float(arguments.get("daily_hours", 2)),
            )
            return _reply(plan)

        elif name == "set_topic_status":
            result = await controller.set_topic_status(arguments["topic_id"], arguments["status"])
            if result is None:
                return _reply({"error": f"Topic {arguments['topic_id']} not found"})
            return _reply(result)

        elif name == "review_flashcard":
            result = await controller.review_flashcard(
                arguments["deck_id"], arguments["card_id"], int(arguments["confidence"])
            )
            if result is None:
                return _reply({"error": f"Card {arguments['card_id']} not found"})
            return _reply(result)

        elif name == "list_decks":
            return _reply(await controller.list_decks_data())

        else:
            return _reply({"error": f"Unknown tool: {name}"})

    except Exception as e:
        return _reply({"error": str(e)})


async def main():
    """Main function for the MCP Server."""
    async with stdio_server() as (read_stream, write_stream):
        await server.run(
            read_stream,
            write_stream,
            server.create_initialization_options()
        )


def run():
    """Console entry point."""
    asyncio.run(main())


if __name__ == "__main__":
    run()
