"""Text conventions recognised in a learning-path document."""

from __future__ import annotations

import re
from typing import Final

from learnpath.config import LEARNPATH_NOTE_LABEL

# 1-4 markers, whitespace, then a title that is not blank.
HEADER_RE: Final = re.compile(r"^(#{1,4})\s+(\S.*)$")

UNCHECKED: Final = "- [ ]"
CHECKED: Final = "- [x]"

QUOTE_MARKER: Final = ">"
TIMESTAMP_FORMAT: Final = "%Y-%m-%d %H:%M"


def note_prefix(label: str = LEARNPATH_NOTE_LABEL) -> str:
    """Start of the first line of a note block, e.g. ``> **Note [``."""
    return f"{QUOTE_MARKER} **{label} ["


def is_quote(line: str) -> bool:
    return line.strip().startswith(QUOTE_MARKER)


def has_checkbox(line: str) -> bool:
    return UNCHECKED in line or CHECKED in line
