"""Local configuration for learnpath."""

from __future__ import annotations

import os


DEFAULT_FILE_PATH = "learning-path.md"
DEFAULT_STATE_FILE = ".learnpath-state"
DEFAULT_NOTE_LABEL = "Note"
DEFAULT_MIN_PAGE_SIZE = 5
DEFAULT_PAGE_SIZE_FLOOR = 15
DEFAULT_SCROLL_STEP = 3
DEFAULT_PAGE_SIZE_STEP = 10
DEFAULT_LOG_LEVEL = "WARNING"

LEARNPATH_FILE = os.getenv("LEARNPATH_FILE", DEFAULT_FILE_PATH)
LEARNPATH_STATE_FILE = os.getenv("LEARNPATH_STATE_FILE", DEFAULT_STATE_FILE)
LEARNPATH_NOTE_LABEL = os.getenv("LEARNPATH_NOTE_LABEL", DEFAULT_NOTE_LABEL)
LEARNPATH_MIN_PAGE_SIZE = int(os.getenv("LEARNPATH_MIN_PAGE_SIZE", str(DEFAULT_MIN_PAGE_SIZE)))
LEARNPATH_SCROLL_STEP = int(os.getenv("LEARNPATH_SCROLL_STEP", str(DEFAULT_SCROLL_STEP)))
LEARNPATH_PAGE_SIZE_STEP = int(os.getenv("LEARNPATH_PAGE_SIZE_STEP", str(DEFAULT_PAGE_SIZE_STEP)))

# Terminal UIs own stdout/stderr, so logs only go to a file when one is configured.
LEARNPATH_LOG_FILE = os.getenv("LEARNPATH_LOG_FILE")
LEARNPATH_LOG_LEVEL = os.getenv("LEARNPATH_LOG_LEVEL", DEFAULT_LOG_LEVEL)

FALLBACK_EDITORS = ("nano", "vim", "vi")
