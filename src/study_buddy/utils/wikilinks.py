"""
Wiki-style [[Title]] references inside note bodies.
"""

import re
from typing import List, Optional, Set, Tuple

from ..models.note import SmartNote

LINK_PATTERN = re.compile(r"\[\[(.*?)\]\]")
TAG_PATTERN = re.compile(r"<[^>]*>")


def parse_internal_links(content: str) -> Set[str]:
    """
    Titles referenced by content.

    Scans the raw body (HTML is not stripped), case preserved. There is no
    escaping for a literal "[[" or "]]".
    """
    if not content:
        return set()
    return set(LINK_PATTERN.findall(content))


def find_note_by_title(title: str, notes: List[SmartNote]) -> Optional[SmartNote]:
    """First note whose title equals title, ignoring case."""
    wanted = title.lower()
    for note in notes:
        if note.title.lower() == wanted:
            return note
    return None


def outgoing_references(note: SmartNote, notes: List[SmartNote]) -> List[Tuple[str, Optional[str]]]:
    """(title, note id or None) for every reference in the note, sorted by title."""
    references = []
    for title in sorted(parse_internal_links(note.content)):
        target = find_note_by_title(title, notes)
        references.append((title, target.id if target else None))
    return references


def backlink_context(content: str, title: str, radius: int = 50) -> str:
    """
    Snippet of content around the first [[title]] mention (case-insensitive),
    HTML tags replaced by spaces, "..." marking cut ends. Empty if not mentioned.
    """
    match = re.search(r"\[\[" + re.escape(title) + r"\]\]", content, re.IGNORECASE)
    if not match:
        return ""

    start = max(0, match.start() - radius)
    end = min(len(content), match.start() + radius)
    snippet = content[start:end]
    if start > 0:
        snippet = "..." + snippet
    if end < len(content):
        snippet = snippet + "..."
    return TAG_PATTERN.sub(" ", snippet)
