"""Read and write the document, its default template and the viewer state."""

from __future__ import annotations

import logging
from importlib import resources
from pathlib import Path

from pydantic import ValidationError

from learnpath.exceptions import DocumentError, StateError, TemplateError
from learnpath.schemas import ViewerState

logger = logging.getLogger(__name__)

_TEMPLATE_NAME = "default.md"
_INT_KEYS = ("current_section", "page_size")


def read_document(path: Path, encoding: str = "utf-8") -> str:
    """Read the document text.

    Raises:
        DocumentError: If the file cannot be read.
    """
    try:
        return path.read_text(encoding=encoding)
    except (OSError, UnicodeDecodeError) as exc:
        raise DocumentError(f"Cannot read file {path}: {exc}") from exc


def write_document(path: Path, text: str, encoding: str = "utf-8") -> None:
    """Persist the document text.

    Raises:
        DocumentError: If the file cannot be written.
    """
    try:
        path.write_text(text, encoding=encoding)
    except OSError as exc:
        raise DocumentError(f"Cannot write file {path}: {exc}") from exc
    logger.debug("Saved %s (%d bytes)", path, len(text))


def default_template() -> str:
    """The packaged starter learning path."""
    template = resources.files("learnpath") / "templates" / _TEMPLATE_NAME
    return template.read_text(encoding="utf-8")


def create_from_template(path: Path) -> None:
    """Write the default template to ``path``.

    Raises:
        TemplateError: If the file cannot be created.
    """
    try:
        path.write_text(default_template(), encoding="utf-8")
    except OSError as exc:
        raise TemplateError(f"Cannot create file {path}: {exc}") from exc
    logger.info("Created %s from the default template", path)


def parse_state(text: str) -> ViewerState:
    """Parse ``key=value`` lines; unknown keys and bad values are ignored."""
    values: dict[str, int | str] = {}
    for line in text.split("\n"):
        key, sep, value = line.partition("=")
        if not sep:
            continue
        if key in _INT_KEYS:
            try:
                number = int(value)
            except ValueError:
                logger.debug("Ignoring state %s=%r", key, value)
                continue
            if number >= 0:
                values[key] = number
        elif key == "file_path" and value:
            values[key] = value
    try:
        return ViewerState(**values)
    except ValidationError:
        logger.debug("Discarding invalid state %r", values)
        return ViewerState()


def format_state(state: ViewerState) -> str:
    return (
        f"current_section={state.current_section}\n"
        f"page_size={state.page_size}\n"
        f"file_path={state.file_path or ''}\n"
    )


def load_state(path: Path) -> ViewerState | None:
    """Load saved state, or None when there is none to read."""
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return None
    return parse_state(text)


def save_state(path: Path, state: ViewerState) -> None:
    """Persist the reading position.

    Raises:
        StateError: If the state file cannot be written.
    """
    try:
        path.write_text(format_state(state), encoding="utf-8")
    except OSError as exc:
        raise StateError(f"Cannot write state file {path}: {exc}") from exc
