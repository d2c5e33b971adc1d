"""Parse document lines into sections and query them."""

from __future__ import annotations

import logging
from typing import Iterable, Sequence

from learnpath.schemas import Section
from learnpath.syntax import CHECKED, HEADER_RE, UNCHECKED

logger = logging.getLogger(__name__)


def match_header(line: str) -> tuple[int, str] | None:
    """Return ``(level, title)`` if ``line`` is a header, else None."""
    match = HEADER_RE.match(line)
    if not match:
        return None
    title = match.group(2).strip()
    if not title:
        return None
    return len(match.group(1)), title


def parse_sections(lines: Sequence[str]) -> list[Section]:
    """Split raw lines into sections.

    Each header opens a section that owns every following line up to the next
    header of any level. Lines before the first header belong to no section.

    Args:
        lines: The backing lines of the document.

    Returns:
        Sections in document order; empty for a document without headers.
    """
    sections: list[Section] = []
    current: Section | None = None
    pending: list[str] = []

    for index, line in enumerate(lines):
        header = match_header(line)
        if header is None:
            if current is not None:
                pending.append(line)
            continue

        if current is not None:
            current.content = "\n".join(pending)
            sections.append(current)
        level, title = header
        current = Section(title=title, level=level, start_line=index)
        pending = []

    if current is not None:
        current.content = "\n".join(pending)
        sections.append(current)

    logger.debug("Parsed %d sections from %d lines", len(sections), len(lines))
    return sections


def search_sections(sections: Iterable[Section], query: str) -> list[int]:
    """Indices of sections whose title or content contains ``query``, ignoring case."""
    needle = query.lower()
    return [
        index
        for index, section in enumerate(sections)
        if needle in section.title.lower() or needle in section.content.lower()
    ]


def count_progress(content: str) -> tuple[int, int]:
    """Count checkboxes in ``content`` as ``(checked, total)``."""
    checked = content.count(CHECKED)
    return checked, checked + content.count(UNCHECKED)
