"""Edit a section's content: checkboxes and timestamped notes.

Notes are not stored separately. A note is a block quote whose first line is
``> **<label> [YYYY-MM-DD HH:MM]:** text``, followed by any number of
``>``-prefixed continuation lines. A blank line, a non-quote line or the
first line of another note ends the block. Extraction, removal and cleaning
all use that same rule.
"""

from __future__ import annotations

import logging
from datetime import datetime

from learnpath.config import LEARNPATH_NOTE_LABEL
from learnpath.schemas import Section
from learnpath.syntax import (
    CHECKED,
    QUOTE_MARKER,
    TIMESTAMP_FORMAT,
    UNCHECKED,
    has_checkbox,
    is_quote,
    note_prefix,
)

logger = logging.getLogger(__name__)

_NOTE_HEADER_END = ":**"


def checkbox_line_indices(section: Section) -> list[int]:
    """Content-line indices holding a checked or unchecked box, in order."""
    return [index for index, line in enumerate(section.content_lines) if has_checkbox(line)]


def toggle_checkbox(section: Section, line_index: int) -> bool:
    """Flip the first checkbox marker on one content line.

    Returns:
        False without touching the section when the index is out of range or
        the line holds no checkbox.
    """
    lines = section.content_lines
    if line_index < 0 or line_index >= len(lines):
        return False

    line = lines[line_index]
    if UNCHECKED in line:
        lines[line_index] = line.replace(UNCHECKED, CHECKED, 1)
    elif CHECKED in line:
        lines[line_index] = line.replace(CHECKED, UNCHECKED, 1)
    else:
        return False

    section.content = "\n".join(lines)
    logger.debug("Toggled checkbox on line %d of %r", line_index, section.title)
    return True


def format_note(
    text: str,
    *,
    label: str = LEARNPATH_NOTE_LABEL,
    now: datetime | None = None,
) -> str:
    """First line of a note block stamped with the local time."""
    timestamp = (now or datetime.now()).strftime(TIMESTAMP_FORMAT)
    return f"{note_prefix(label)}{timestamp}]{_NOTE_HEADER_END} {text}"


def quote_continuation(text: str) -> str:
    """Quote every line after the first so multi-line text stays one note block."""
    first, *rest = text.split("\n")
    quoted = [f"{QUOTE_MARKER} {line}" if line.strip() else QUOTE_MARKER for line in rest]
    return "\n".join([first, *quoted])


def add_note(
    section: Section,
    text: str,
    *,
    label: str = LEARNPATH_NOTE_LABEL,
    now: datetime | None = None,
) -> bool:
    """Append a note block to the section, separated by a blank line.

    The text is used as-is; callers wanting multi-line notes should pass it
    through :func:`quote_continuation` first.
    """
    if text == "":
        return False
    section.content += "\n\n" + format_note(text, label=label, now=now)
    return True


def extract_notes(content: str, *, label: str = LEARNPATH_NOTE_LABEL) -> list[str]:
    """Return every note block in ``content``, stripped, in document order."""
    prefix = note_prefix(label)
    notes: list[str] = []
    current: list[str] = []

    def _flush() -> None:
        if current:
            notes.append("\n".join(current).strip())
            current.clear()

    for line in content.split("\n"):
        trimmed = line.strip()
        if trimmed.startswith(prefix):
            _flush()
            current.append(trimmed)
        elif current and trimmed.startswith(QUOTE_MARKER):
            current.append(trimmed)
        else:
            _flush()

    _flush()
    return notes


def remove_note_from_content(
    content: str,
    note_block: str,
    *,
    label: str = LEARNPATH_NOTE_LABEL,
) -> str:
    """Delete the note whose header line matches ``note_block``.

    The header line and its continuation lines are removed. A blank line right
    after the block is dropped too when another quote follows it, so two notes
    do not end up separated by a double blank line. Everything else is kept.

    Returns:
        The new content, stripped of leading and trailing whitespace.
    """
    prefix = note_prefix(label)
    target = note_block.split("\n", 1)[0].strip()
    lines = content.split("\n")
    start = _find_note_start(lines, target, prefix)
    result: list[str] = []
    index = 0

    while index < len(lines):
        if index == start:
            index += 1
            while index < len(lines) and _is_continuation(lines[index], prefix):
                index += 1
            if (
                index + 1 < len(lines)
                and not lines[index].strip()
                and is_quote(lines[index + 1])
            ):
                index += 1
            continue
        result.append(lines[index])
        index += 1

    if start is None:
        logger.debug("No note matching %r", target)
    return "\n".join(result).strip()


def clean_notes(content: str, *, label: str = LEARNPATH_NOTE_LABEL) -> str:
    """Remove every note block and the blank lines trailing each one."""
    prefix = note_prefix(label)
    result: list[str] = []
    in_note = False

    for line in content.split("\n"):
        trimmed = line.strip()
        if trimmed.startswith(prefix):
            in_note = True
            continue
        if in_note and (not trimmed or trimmed.startswith(QUOTE_MARKER)):
            continue
        in_note = False
        result.append(line)

    return "\n".join(result).strip()


def note_body(note_block: str, *, label: str = LEARNPATH_NOTE_LABEL) -> str:
    """Text of a note without its label, timestamp and quote markers."""
    body = note_block
    if body.startswith(note_prefix(label)):
        end = body.find(_NOTE_HEADER_END)
        if end != -1:
            body = body[end + len(_NOTE_HEADER_END):].strip()
    lines = [_dequote(line) for line in body.split("\n")]
    return "\n".join(lines)


def _find_note_start(lines: list[str], target: str, prefix: str) -> int | None:
    """Index of the note header matching ``target``.

    An exact header match wins; otherwise the first header contained in
    ``target`` is used.
    """
    if not target:
        return None
    headers = [(index, line.strip()) for index, line in enumerate(lines) if line.strip().startswith(prefix)]
    for index, trimmed in headers:
        if trimmed == target:
            return index
    for index, trimmed in headers:
        if trimmed[2:] in target:
            return index
    return None


def _is_continuation(line: str, prefix: str) -> bool:
    trimmed = line.strip()
    return trimmed.startswith(QUOTE_MARKER) and not trimmed.startswith(prefix)


def _dequote(line: str) -> str:
    if line.startswith(QUOTE_MARKER + " "):
        return line[2:]
    if line.startswith(QUOTE_MARKER):
        return line[1:]
    return line
