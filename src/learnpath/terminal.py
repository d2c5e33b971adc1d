"""Terminal mode switching, key reading and external editor support."""

from __future__ import annotations

import logging
import os
import shlex
import shutil
import subprocess
import sys
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from learnpath.config import FALLBACK_EDITORS
from learnpath.exceptions import EditorError

try:
    import termios
    import tty
except ImportError:  # pragma: no cover - non-POSIX platforms
    termios = None
    tty = None

logger = logging.getLogger(__name__)

_ESCAPE_KEYS = {
    "\x1b[A": "up",
    "\x1b[B": "down",
    "\x1b[C": "right",
    "\x1b[D": "left",
}
_NAMED_KEYS = {
    "\r": "enter",
    "\n": "enter",
    "\x1b": "escape",
    "\x03": "ctrl-c",
    " ": "space",
}


def normalize_key(raw: str) -> str:
    """Map raw bytes read from the terminal to a key name."""
    if raw in _ESCAPE_KEYS:
        return _ESCAPE_KEYS[raw]
    if raw[:1] in _NAMED_KEYS:
        return _NAMED_KEYS[raw[:1]]
    return raw[:1]


class Terminal:
    """The controlling terminal, switched between cbreak and line mode."""

    def __init__(self, fd: int | None = None) -> None:
        self.fd = sys.stdin.fileno() if fd is None else fd
        self._saved: list | None = None

    @property
    def interactive(self) -> bool:
        return termios is not None and os.isatty(self.fd)

    def size(self) -> tuple[int, int]:
        """``(width, height)`` of the terminal, 80x24 when unknown."""
        size = shutil.get_terminal_size((80, 24))
        return size.columns, size.lines

    def enter_cbreak(self) -> None:
        """Read keys one at a time, without echo."""
        if not self.interactive or self._saved is not None:
            return
        self._saved = termios.tcgetattr(self.fd)
        tty.setcbreak(self.fd, termios.TCSADRAIN)

    def restore(self) -> None:
        if self._saved is None:
            return
        termios.tcsetattr(self.fd, termios.TCSADRAIN, self._saved)
        self._saved = None

    @contextmanager
    def cbreak(self) -> Iterator[None]:
        self.enter_cbreak()
        try:
            yield
        finally:
            self.restore()

    @contextmanager
    def line_mode(self) -> Iterator[None]:
        """Temporarily restore normal line input, e.g. for prompts."""
        was_cbreak = self._saved is not None
        self.restore()
        try:
            yield
        finally:
            if was_cbreak:
                self.enter_cbreak()

    def read_key(self) -> str:
        raw = os.read(self.fd, 3).decode("utf-8", errors="ignore")
        return normalize_key(raw) if raw else "ctrl-c"


def find_editor() -> str | None:
    """``$EDITOR``, then ``$VISUAL``, then the first common editor on PATH."""
    editor = os.getenv("EDITOR") or os.getenv("VISUAL")
    if editor:
        return editor
    for candidate in FALLBACK_EDITORS:
        if shutil.which(candidate):
            return candidate
    return None


def edit_text(initial: str = "", *, editor: str | None = None) -> str:
    """Open ``initial`` in an external editor and return the saved text, stripped.

    Raises:
        EditorError: If no editor is available or it exits with an error.
    """
    command = editor or find_editor()
    if not command:
        raise EditorError("No editor found; set $EDITOR")

    with tempfile.NamedTemporaryFile(
        "w", suffix=".txt", prefix="learnpath-note-", delete=False, encoding="utf-8"
    ) as handle:
        handle.write(initial)
        path = Path(handle.name)

    try:
        subprocess.run([*shlex.split(command), str(path)], check=True)
        return path.read_text(encoding="utf-8").strip()
    except (OSError, subprocess.CalledProcessError) as exc:
        raise EditorError(f"Editor {command!r} failed: {exc}") from exc
    finally:
        path.unlink(missing_ok=True)
        logger.debug("Removed temporary note file %s", path)
