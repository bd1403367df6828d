"""
Debug output and event logging

Debug messages go to stderr (stdout is reserved for MCP JSON-RPC).
Events use append-only JSONL format.
"""

import json
import sys
from datetime import datetime, timezone
from typing import Dict, Any
from ..config import settings


def log_debug(message: str):
    """Logs debug messages to stderr to avoid breaking MCP JSON-RPC on stdout."""
    print(message, file=sys.stderr)


def log_event(event_type: str, data: Dict[str, Any]) -> None:
    """
    Logs an event to the append-only JSONL file.

    Args:
        event_type: Type of event (e.g., "NOTE_CREATED", "AI_FALLBACK_USED")
        data: Event data dictionary
    """
    if not settings.EVENT_LOG_ENABLED:
        return

    settings.EVENT_LOG_PATH.parent.mkdir(parents=True, exist_ok=True)

    entry = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "event": event_type,
        "data": data
    }

    try:
        with open(settings.EVENT_LOG_PATH, "a", encoding="utf-8") as f:
            f.write(json.dumps(entry, ensure_ascii=False) + "\n")
    except Exception as e:
        log_debug(f"Event logging error: {e}")
