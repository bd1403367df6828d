"""
Backlink indexer

Backlinks are derived data: they are recomputed from scratch over the whole
collection whenever any note changes.
"""

from typing import List

import networkx as nx

from ..models.note import SmartNote
from .wikilinks import find_note_by_title, parse_internal_links


def recompute_backlinks(notes: List[SmartNote]) -> List[SmartNote]:
    """
    Rebuilds every note's backlinks in place and returns the same list.

    note_i.backlinks contains note_j.id whenever note_j's content references
    note_i's title (case-insensitive exact match). References to titles that
    do not exist are dropped.
    """
    for note in notes:
        note.backlinks = []

    for note in notes:
        for title in sorted(parse_internal_links(note.content)):
            target = find_note_by_title(title, notes)
            if target is not None and note.id not in target.backlinks:
                target.backlinks.append(note.id)

    return notes


def backlinks_for(note: SmartNote, notes: List[SmartNote]) -> List[SmartNote]:
    """Notes other than note itself whose references resolve to note."""
    result = []
    for other in notes:
        if other.id == note.id:
            continue
        for title in parse_internal_links(other.content):
            target = find_note_by_title(title, notes)
            if target is not None and target.id == note.id:
                result.append(other)
                break
    return result


def build_link_graph(notes: List[SmartNote]) -> nx.DiGraph:
    """Directed graph referencing note -> referenced note, one node per note."""
    graph = nx.DiGraph()
    for note in notes:
        graph.add_node(note.id, title=note.title, is_folder=note.is_folder)
    for note in notes:
        for title in parse_internal_links(note.content):
            target = find_note_by_title(title, notes)
            if target is not None:
                graph.add_edge(note.id, target.id, title=title)
    return graph
