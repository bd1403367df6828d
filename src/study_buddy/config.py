"""
Configuration for the Study Buddy core
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load .env file
load_dotenv()

class Config:
    # Paths - absolute, based on file location rather than cwd
    _config_file = Path(__file__).resolve()
    BASE_DIR = _config_file.parent.parent.parent  # Go up from src/study_buddy/config.py to project root
    DATA_DIR = Path(os.getenv("STUDY_BUDDY_DATA_DIR", str(BASE_DIR / "data")))
    STORAGE_DIR = DATA_DIR / "storage"
    EVENT_LOG_PATH = DATA_DIR / "events.jsonl"

    # Concurrency
    LOCK_FILE = STORAGE_DIR / "storage.lock"

    # Storage keys (one JSON document per key, like browser local storage)
    NOTES_KEY = "study-buddy-smart-notes"
    WELCOME_DISMISSED_KEY = "study-buddy-welcome-dismissed"
    DECKS_KEY = "flashcard-decks"
    MIND_MAPS_KEY = "study-buddy-mind-maps"
    STUDY_PLAN_KEY = "study-buddy-study-plan"

    # Gemini Settings
    GEMINI_API_KEY = os.getenv("GEMINI_API_KEY", "")
    GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")
    GEMINI_BASE_URL = os.getenv("GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta")
    GEMINI_TIMEOUT = float(os.getenv("GEMINI_TIMEOUT", "60"))
    GEMINI_MAX_OUTPUT_TOKENS = int(os.getenv("GEMINI_MAX_OUTPUT_TOKENS", "2048"))
    GEMINI_TEMPERATURE = float(os.getenv("GEMINI_TEMPERATURE", "0.7"))

    # Quiz Settings
    QUIZ_MAX_QUESTIONS = int(os.getenv("QUIZ_MAX_QUESTIONS", "20"))

    # Canvas (mind-map auto layout centers on width/2, height/3)
    CANVAS_WIDTH = float(os.getenv("CANVAS_WIDTH", "1280"))
    CANVAS_HEIGHT = float(os.getenv("CANVAS_HEIGHT", "720"))

    # Event log
    EVENT_LOG_ENABLED = os.getenv("EVENT_LOG_ENABLED", "true").lower() == "true"

    @property
    def CANVAS_CENTER(self):
        """Returns the point the auto layout arranges around."""
        return (self.CANVAS_WIDTH / 2, self.CANVAS_HEIGHT / 3)

    def __init__(self):
        self.DATA_DIR.mkdir(parents=True, exist_ok=True)
        self.STORAGE_DIR.mkdir(parents=True, exist_ok=True)

settings = Config()
