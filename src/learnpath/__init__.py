"""learnpath: read and track a markdown learning path in the terminal."""

from learnpath.content import (
    add_note,
    checkbox_line_indices,
    clean_notes,
    extract_notes,
    remove_note_from_content,
    toggle_checkbox,
)
from learnpath.document import Document
from learnpath.exceptions import (
    DocumentError,
    EditorError,
    LearnPathError,
    StateError,
    TemplateError,
)
from learnpath.render import render_line
from learnpath.schemas import Section, ViewerState
from learnpath.sections import parse_sections, search_sections
from learnpath.viewport import Viewport

__all__ = [
    "Document",
    "DocumentError",
    "EditorError",
    "LearnPathError",
    "Section",
    "StateError",
    "TemplateError",
    "ViewerState",
    "Viewport",
    "add_note",
    "checkbox_line_indices",
    "clean_notes",
    "extract_notes",
    "parse_sections",
    "remove_note_from_content",
    "render_line",
    "search_sections",
    "toggle_checkbox",
]
