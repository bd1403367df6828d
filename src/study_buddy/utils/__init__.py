"""
Utilities for Study Buddy
"""

from .llm import GeminiService
from .events import log_debug, log_event
from .wikilinks import parse_internal_links, backlink_context
from .backlinks import recompute_backlinks, build_link_graph

__all__ = [
    "GeminiService",
    "log_debug",
    "log_event",
    "parse_internal_links",
    "backlink_context",
    "recompute_backlinks",
    "build_link_graph"
]
