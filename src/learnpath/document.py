"""The learning-path document: backing lines, parsed sections and a cursor."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable

from learnpath import content as mutator
from learnpath.config import LEARNPATH_NOTE_LABEL
from learnpath.schemas import Section
from learnpath.sections import count_progress, parse_sections, search_sections

logger = logging.getLogger(__name__)

SectionEdit = Callable[[Section], bool]


class Document:
    """An editable learning-path document.

    ``lines`` is the source of truth; ``sections`` is a cache rebuilt by
    :meth:`parse`. Structural edits go through :meth:`apply_edit`, which
    writes the edited section back into ``lines`` and re-parses in one step
    so ``Section.start_line`` is never used while stale.

    Sections have no stable identity: after an edit they are addressed again
    by index, never by a reference kept from before the edit.

    Windows line endings in ``text`` are normalised to ``\\n``.
    """

    def __init__(self, text: str = "", *, note_label: str = LEARNPATH_NOTE_LABEL) -> None:
        self.lines: list[str] = text.replace("\r\n", "\n").split("\n")
        self.sections: list[Section] = []
        self.current_index = 0
        self.note_label = note_label
        self.parse()

    @property
    def text(self) -> str:
        """The document as it should be persisted."""
        return "\n".join(self.lines)

    def __len__(self) -> int:
        return len(self.sections)

    def parse(self) -> list[Section]:
        """Rebuild sections from the backing lines."""
        self.sections = parse_sections(self.lines)
        if self.current_index >= len(self.sections):
            self.current_index = max(len(self.sections) - 1, 0)
        return self.sections

    # Navigation

    @property
    def current_section(self) -> Section | None:
        if not self._valid(self.current_index):
            return None
        return self.sections[self.current_index]

    def next_section(self) -> bool:
        if self.current_index < len(self.sections) - 1:
            self.current_index += 1
            return True
        return False

    def prev_section(self) -> bool:
        if self.current_index > 0:
            self.current_index -= 1
            return True
        return False

    def goto_section(self, index: int) -> bool:
        """Move the cursor to ``index``; out-of-range indices leave it unchanged."""
        if not self._valid(index):
            return False
        self.current_index = index
        return True

    def goto_last(self) -> bool:
        return self.goto_section(len(self.sections) - 1)

    def search(self, query: str) -> list[int]:
        return search_sections(self.sections, query)

    # Progress

    def progress(self, index: int) -> tuple[int, int]:
        """``(checked, total)`` checkboxes in one section; ``(0, 0)`` if invalid."""
        if not self._valid(index):
            return 0, 0
        return count_progress(self.sections[index].content)

    def total_progress(self) -> tuple[int, int]:
        checked = total = 0
        for index in range(len(self.sections)):
            section_checked, section_total = self.progress(index)
            checked += section_checked
            total += section_total
        return checked, total

    # Synchronisation

    def update_file_section(self, index: int) -> bool:
        """Write one section's header and content back into ``lines``.

        Replaces the lines from the section's header up to the next section's
        header (or end of file). Offsets of later sections are stale
        afterwards: call :meth:`parse` before reading any ``start_line``.
        :meth:`apply_edit` does both.
        """
        if not self._valid(index):
            return False

        section = self.sections[index]
        start = section.start_line
        end = len(self.lines)
        if index < len(self.sections) - 1:
            end = self.sections[index + 1].start_line

        self.lines[start:end] = [section.header_line, *section.content_lines]
        logger.debug(
            "Synced section %d (%r): lines %d-%d replaced with %d lines",
            index,
            section.title,
            start,
            end,
            len(section.content_lines) + 1,
        )
        return True

    def apply_edit(self, edit: SectionEdit, index: int | None = None) -> bool:
        """Run ``edit`` on a section, then sync and re-parse if it changed anything.

        Args:
            edit: Callable mutating the section in place and returning whether
                it did.
            index: Section to edit; defaults to the current one.

        Returns:
            The value returned by ``edit``, or False for an invalid index.
        """
        target = self.current_index if index is None else index
        if not self._valid(target):
            return False
        if not edit(self.sections[target]):
            return False
        self.update_file_section(target)
        self.parse()
        return True

    # Content edits

    def checkbox_lines(self, index: int | None = None) -> list[int]:
        section = self._section(index)
        return mutator.checkbox_line_indices(section) if section else []

    def toggle_checkbox(self, line_index: int, index: int | None = None) -> bool:
        return self.apply_edit(lambda section: mutator.toggle_checkbox(section, line_index), index)

    def add_note(
        self,
        text: str,
        index: int | None = None,
        *,
        now: datetime | None = None,
    ) -> bool:
        """Append a note; multi-line text is quoted so it stays one block."""
        if not text.strip():
            return False
        note = mutator.quote_continuation(text)
        return self.apply_edit(
            lambda section: mutator.add_note(section, note, label=self.note_label, now=now),
            index,
        )

    def notes(self, index: int | None = None) -> list[str]:
        section = self._section(index)
        if section is None:
            return []
        return mutator.extract_notes(section.content, label=self.note_label)

    def delete_note(self, note_block: str, index: int | None = None) -> bool:
        if note_block not in self.notes(index):
            return False
        return self.apply_edit(lambda section: self._remove_note(section, note_block), index)

    def edit_note(
        self,
        note_block: str,
        new_text: str,
        index: int | None = None,
        *,
        now: datetime | None = None,
    ) -> bool:
        """Replace a note with ``new_text`` stamped with a fresh timestamp."""
        if not new_text.strip() or note_block not in self.notes(index):
            return False
        note = mutator.quote_continuation(new_text)

        def _edit(section: Section) -> bool:
            self._remove_note(section, note_block)
            return mutator.add_note(section, note, label=self.note_label, now=now)

        return self.apply_edit(_edit, index)

    def clean_notes(self, index: int | None = None) -> bool:
        if not self.notes(index):
            return False

        def _edit(section: Section) -> bool:
            section.content = mutator.clean_notes(section.content, label=self.note_label)
            return True

        return self.apply_edit(_edit, index)

    def _remove_note(self, section: Section, note_block: str) -> bool:
        section.content = mutator.remove_note_from_content(
            section.content, note_block, label=self.note_label
        )
        return True

    def _section(self, index: int | None) -> Section | None:
        target = self.current_index if index is None else index
        return self.sections[target] if self._valid(target) else None

    def _valid(self, index: int) -> bool:
        return 0 <= index < len(self.sections)
