#!/usr/bin/env python3
"""
Study Buddy Stats - workspace status at a glance

Summarizes notes, backlinks, saved mind maps, flashcard decks and the study
plan straight from local storage, plus the latest activity in events.jsonl.
Usage: python tools/study_buddy_stats.py [--compact | --json | --diff]
"""

import argparse
import json
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

# Add src to path
ROOT = Path(__file__).resolve().parent.parent
SRC_PATH = ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from rich.console import Console
from rich.table import Table
from rich.text import Text

from study_buddy.config import settings
from study_buddy.core.flashcards import DeckManager
from study_buddy.core.mindmap import MindMapEditor
from study_buddy.core.notes import NotesController
from study_buddy.core.planner import StudyPlanner
from study_buddy.storage.engine import LocalStore
from study_buddy.utils.backlinks import build_link_graph
from study_buddy.utils.llm import GeminiService

console = Console()

CACHE_FILE_NAME = ".study_buddy_stats_cache.json"
DIFF_KEYS = ("notes", "links", "cards", "mastered")


def format_time_ago(timestamp_str: str, now: Optional[datetime] = None) -> str:
    """Formats an ISO timestamp as '42s ago', '5min ago', '3h ago' or '2d ago'."""
    try:
        ts = datetime.fromisoformat(timestamp_str.replace("Z", "+00:00"))
    except ValueError:
        return "unknown"
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    seconds = ((now or datetime.now(timezone.utc)) - ts).total_seconds()

    if seconds < 60:
        return f"{int(seconds)}s ago"
    if seconds < 3600:
        return f"{int(seconds / 60)}min ago"
    if seconds < 86400:
        return f"{int(seconds / 3600)}h ago"
    return f"{int(seconds / 86400)}d ago"


def get_last_event(events_file: Path, event_types: Optional[set] = None) -> Optional[Dict[str, Any]]:
    """Most recent event (optionally of the given types), reading the log backwards."""
    if not events_file.exists():
        return None
    with open(events_file, "r", encoding="utf-8") as f:
        lines = [line.strip() for line in f if line.strip()]
    for line in reversed(lines):
        try:
            event = json.loads(line)
        except json.JSONDecodeError:
            continue
        if event_types is None or event.get("event") in event_types:
            return event
    return None


def collect_stats(store: LocalStore) -> Dict[str, Any]:
    """Counts read from disk. Loading never writes except for first-run demo seeding."""
    notes = NotesController(store)
    notes.load()
    regular = [n for n in notes.notes if not n.is_folder]
    link_graph = build_link_graph(notes.notes)

    category_counts: Dict[str, int] = {}
    for note in regular:
        category_counts[note.category] = category_counts.get(note.category, 0) + 1

    decks = DeckManager(store)
    decks.load()
    deck_stats = [decks.deck_stats(d.id) for d in decks.decks]

    planner = StudyPlanner(store, GeminiService(api_key=""))
    plan = planner.load()

    maps = MindMapEditor().list_saved(store)

    return {
        "notes": len(regular),
        "folders": len(notes.notes) - len(regular),
        "pinned": sum(1 for n in regular if n.is_pinned),
        "archived": sum(1 for n in regular if n.is_archived),
        "links": link_graph.number_of_edges(),
        "unlinked": sum(1 for n in regular if link_graph.degree(n.id) == 0),
        "category_counts": category_counts,
        "mind_maps": len(maps),
        "mind_map_nodes": sum(len(m.nodes) for m in maps),
        "decks": len(deck_stats),
        "cards": sum(s["total"] for s in deck_stats),
        "mastered": sum(s["mastered"] for s in deck_stats),
        "plan": None if plan is None else {
            "title": plan.title,
            "progress": round(plan.progress, 1),
            "days_left": planner.days_left(),
            "topics": len(plan.topics),
        },
    }


def print_compact_status(stats: Dict[str, Any], last_event: Optional[Dict[str, Any]] = None):
    """Prints compact one-line status."""
    last = format_time_ago(last_event["timestamp"]) if last_event else "never"
    plan = f" | plan {stats['plan']['progress']}%" if stats.get("plan") else ""
    print(f"{stats['notes']} notes | {stats['links']} links | {stats['cards']} cards{plan} | Last: {last}")


def print_full_status(stats: Dict[str, Any], last_event: Optional[Dict[str, Any]] = None,
                      last_fallback: Optional[Dict[str, Any]] = None):
    console.print("📚 Study Buddy Status", style="bold")

    table = Table(show_header=False, box=None)
    table.add_row("📝 Notes", f"{stats['notes']} ({stats['pinned']} pinned, {stats['archived']} archived)")
    table.add_row("📁 Folders", str(stats["folders"]))
    table.add_row("🔗 Links", f"{stats['links']} ({stats['unlinked']} notes unlinked)")
    table.add_row("🧠 Mind maps", f"{stats['mind_maps']} ({stats['mind_map_nodes']} nodes)")
    table.add_row("🃏 Flashcards", f"{stats['cards']} in {stats['decks']} decks, {stats['mastered']} mastered")
    plan = stats.get("plan")
    if plan:
        table.add_row("🗓️  Plan", f"{plan['title']}: {plan['progress']}% of {plan['topics']} topics, "
                                  f"{plan['days_left']} days left")
    else:
        table.add_row("🗓️  Plan", "none")
    console.print(table)

    if stats["category_counts"]:
        categories = Table(title="Notes by Category", title_justify="left")
        categories.add_column("Category")
        categories.add_column("Count", justify="right")
        for category, count in sorted(stats["category_counts"].items(), key=lambda x: x[1], reverse=True):
            categories.add_row(category, str(count))
        console.print(categories)

    if last_event:
        console.print(f"⚙️  Last activity: {last_event['event']} {format_time_ago(last_event['timestamp'])}")
    else:
        console.print("⚙️  Last activity: never")
    if last_fallback:
        console.print(f"⚠️  Last AI fallback: {format_time_ago(last_fallback['timestamp'])}", style="yellow")


def diff_stats(stats: Dict[str, Any], previous: Dict[str, Any]) -> Dict[str, int]:
    return {key: stats[key] - previous.get(key, 0) for key in DIFF_KEYS}


def print_diff_status(stats: Dict[str, Any], previous: Optional[Dict[str, Any]]):
    """Prints the change since the last run, colored by sign."""
    if not previous:
        console.print("No previous stats found. This will be the baseline for future diffs.", style="yellow")
        return

    output = Text()
    for i, (key, value) in enumerate(diff_stats(stats, previous).items()):
        if i:
            output.append(" | ", style="dim")
        if value > 0:
            output.append(f"+{value} {key}", style="green")
        elif value < 0:
            output.append(f"{value} {key}", style="red")
        else:
            output.append(f"0 {key}", style="dim")
    console.print(output)


def load_cache(cache_file: Path) -> Optional[Dict[str, Any]]:
    if not cache_file.exists():
        return None
    try:
        with open(cache_file, "r", encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError:
        return None


def save_cache(cache_file: Path, stats: Dict[str, Any]):
    data = {key: stats[key] for key in DIFF_KEYS}
    data["timestamp"] = datetime.now(timezone.utc).isoformat()
    with open(cache_file, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


def main():
    parser = argparse.ArgumentParser(description="Study Buddy Status - workspace statistics")
    parser.add_argument("--data-dir", help="Storage directory (defaults to the configured one)")
    parser.add_argument("--compact", action="store_true", help="Compact one-line output")
    parser.add_argument("--json", action="store_true", help="Output as JSON")
    parser.add_argument("--diff", action="store_true", help="Show changes since last run")
    args = parser.parse_args()

    store = LocalStore(Path(args.data_dir) if args.data_dir else None)
    stats = collect_stats(store)
    last_event = get_last_event(settings.EVENT_LOG_PATH)
    cache_file = settings.DATA_DIR / CACHE_FILE_NAME

    if args.json:
        print(json.dumps({"stats": stats, "last_event": last_event}, indent=2, ensure_ascii=False))
    elif args.compact:
        print_compact_status(stats, last_event)
    elif args.diff:
        print_diff_status(stats, load_cache(cache_file))
        save_cache(cache_file, stats)
    else:
        last_fallback = get_last_event(settings.EVENT_LOG_PATH, {"AI_FALLBACK_USED"})
        print_full_status(stats, last_event, last_fallback)


if __name__ == "__main__":
    main()
