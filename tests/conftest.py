import os
import sys
import tempfile
from pathlib import Path

# Keep test runs out of the project's data directory
os.environ.setdefault("STUDY_BUDDY_DATA_DIR", tempfile.mkdtemp(prefix="study-buddy-tests-"))
os.environ.setdefault("GEMINI_API_KEY", "")

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
