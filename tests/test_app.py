"""Tests for the interactive session, driven by a scripted terminal."""

from __future__ import annotations

import io
import re
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

import pytest
from rich.console import Console

from learnpath import app as app_module
from learnpath.app import LearnPathApp
from learnpath.document import Document
from learnpath.exceptions import EditorError
from learnpath.storage import load_state
from learnpath.viewport import Viewport

ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")


class ScriptedTerminal:
    """Terminal stand-in replaying a fixed list of keys."""

    def __init__(self, keys: list[str] | None = None, size: tuple[int, int] = (80, 24)) -> None:
        self.keys = list(keys or [])
        self._size = size

    def size(self) -> tuple[int, int]:
        return self._size

    def read_key(self) -> str:
        return self.keys.pop(0) if self.keys else "q"

    @contextmanager
    def cbreak(self) -> Iterator[None]:
        yield

    @contextmanager
    def line_mode(self) -> Iterator[None]:
        yield


@pytest.fixture
def doc_path(tmp_path: Path, sample_markdown: str) -> Path:
    path = tmp_path / "learning-path.md"
    path.write_text(sample_markdown, encoding="utf-8")
    return path


@pytest.fixture
def make_app(document: Document, doc_path: Path, tmp_path: Path):
    def _make(keys: list[str] | None = None, **kwargs) -> LearnPathApp:
        return LearnPathApp(
            document,
            file_path=doc_path,
            state_path=tmp_path / ".learnpath-state",
            console=Console(file=io.StringIO(), width=80),
            terminal=ScriptedTerminal(keys),
            **kwargs,
        )

    return _make


def answers(monkeypatch: pytest.MonkeyPatch, app: LearnPathApp, *replies: str) -> None:
    """Feed prompt answers to the app in order."""
    queue = list(replies)
    monkeypatch.setattr(app, "_ask", lambda prompt: queue.pop(0) if queue else "")


def plain_screen(app: LearnPathApp) -> list[str]:
    return [ANSI_RE.sub("", line) for line in app.screen_lines()]


class TestScreen:
    """Tests for the main screen layout."""

    def test_default_page_size_from_terminal(self, make_app) -> None:
        """The page fills the terminal minus chrome."""
        assert make_app().viewport.page_size == 18

    def test_screen_shows_section(self, make_app) -> None:
        """Title bar, header and content are on screen."""
        screen = plain_screen(make_app())

        assert "(1/6)" in screen[0]
        assert screen[2] == "# Main Title"
        assert "Introduction text." in screen

    def test_empty_document(self, doc_path: Path) -> None:
        """A document without sections says so."""
        app = LearnPathApp(
            Document("no headers"),
            file_path=doc_path,
            console=Console(file=io.StringIO()),
            terminal=ScriptedTerminal(),
        )

        assert app.screen_lines() == ["No sections."]

    def test_position_hint_for_long_section(self, doc_path: Path) -> None:
        """Sections longer than a page show where the window is."""
        body = "\n".join(f"line {n}" for n in range(30))
        app = LearnPathApp(
            Document(f"# Long\n{body}"),
            file_path=doc_path,
            viewport=Viewport(10),
            console=Console(file=io.StringIO()),
            terminal=ScriptedTerminal(),
        )

        screen = plain_screen(app)

        assert any(line.startswith("[1-10/30] ↓20") for line in screen)
        assert "line 10" not in screen

    def test_draw_writes_to_console(self, make_app) -> None:
        """Drawing renders the screen through the console."""
        app = make_app()

        app.draw()

        assert "Main Title" in app.console.file.getvalue()


class TestHandleKey:
    """Tests for key dispatch."""

    def test_next_and_previous(self, make_app) -> None:
        """n/Enter and p move between sections."""
        app = make_app()

        assert app.handle_key("n")
        assert app.handle_key("enter")
        assert app.document.current_index == 2
        assert app.handle_key("p")
        assert app.document.current_index == 1

    def test_last_section(self, make_app) -> None:
        """G jumps to the last section."""
        app = make_app()

        app.handle_key("G")

        assert app.document.current_index == 5

    def test_moving_resets_scroll(self, make_app) -> None:
        """Changing section scrolls back to the top."""
        app = make_app(viewport=Viewport(5))
        app.document.goto_section(2)
        app.handle_key("j")
        assert app.viewport.scroll_offset == 3

        app.handle_key("n")

        assert app.viewport.scroll_offset == 0

    def test_boundary_move_keeps_scroll(self, make_app) -> None:
        """A no-op move does not touch the scroll offset."""
        app = make_app(viewport=Viewport(5))
        app.document.goto_last()
        app.viewport.scroll_offset = 1

        app.handle_key("n")

        assert app.viewport.scroll_offset == 1

    def test_scroll_keys(self, make_app) -> None:
        """j/down and k/up scroll the content."""
        app = make_app(viewport=Viewport(5))
        app.document.goto_section(2)

        app.handle_key("down")
        assert app.viewport.scroll_offset == 3
        app.handle_key("k")
        assert app.viewport.scroll_offset == 0

    def test_page_size_keys(self, make_app) -> None:
        """+ and - change the page size by ten, with a minimum."""
        app = make_app(viewport=Viewport(15))

        app.handle_key("+")
        assert app.viewport.page_size == 25
        app.handle_key("-")
        app.handle_key("_")
        assert app.viewport.page_size == 5

    @pytest.mark.parametrize("key", ["q", "Q", "ctrl-c"])
    def test_quit_keys(self, make_app, key: str) -> None:
        """Quit keys end the session."""
        assert not make_app().handle_key(key)

    def test_unknown_key_is_ignored(self, make_app) -> None:
        """Unbound keys keep the session going."""
        app = make_app()

        assert app.handle_key("z")
        assert app.document.current_index == 0

    def test_save_key(self, make_app, doc_path: Path, tmp_path: Path) -> None:
        """s writes the document and the reading position."""
        app = make_app()
        app.document.sections[0].content = "\nChanged.\n"
        app.document.update_file_section(0)
        app.document.parse()
        app.document.goto_section(4)

        app.handle_key("s")

        assert "Changed." in doc_path.read_text(encoding="utf-8")
        state = load_state(tmp_path / ".learnpath-state")
        assert state is not None
        assert state.current_section == 4
        assert state.file_path == str(doc_path)

    def test_help_waits_for_key(self, make_app) -> None:
        """Help consumes one key press and lists the bindings."""
        app = make_app(["x"])

        assert app.handle_key("?")

        assert app.terminal.keys == []
        assert "KEYBOARD SHORTCUTS" in app.console.file.getvalue()


class TestMenus:
    """Tests for prompt-driven menus."""

    def test_goto(self, make_app, monkeypatch: pytest.MonkeyPatch) -> None:
        """Numbers are 1-based."""
        app = make_app()
        answers(monkeypatch, app, "4")

        app.handle_key("g")

        assert app.document.current_index == 3

    @pytest.mark.parametrize("reply", ["", "0", "7", "abc", "-1"])
    def test_goto_invalid(self, make_app, monkeypatch: pytest.MonkeyPatch, reply: str) -> None:
        """Invalid answers keep the current section."""
        app = make_app()
        app.document.goto_section(2)
        answers(monkeypatch, app, reply)

        app.handle_key("g")

        assert app.document.current_index == 2

    def test_search(self, make_app, monkeypatch: pytest.MonkeyPatch) -> None:
        """Search results are chosen by number."""
        app = make_app()
        answers(monkeypatch, app, "chapter", "2")

        app.handle_key("/")

        assert app.document.current_index == 3

    def test_search_without_matches(self, make_app, monkeypatch: pytest.MonkeyPatch) -> None:
        """No match leaves the cursor alone."""
        app = make_app()
        answers(monkeypatch, app, "kubernetes", "")

        app.handle_key("/")

        assert app.document.current_index == 0
        assert "No matches." in app.console.file.getvalue()

    def test_toggle_saves(self, make_app, monkeypatch: pytest.MonkeyPatch, doc_path: Path) -> None:
        """Toggling a checkbox writes the file."""
        app = make_app()
        app.document.goto_section(2)
        answers(monkeypatch, app, "1")

        app.handle_key("x")

        assert "- [x] Task one" in doc_path.read_text(encoding="utf-8")
        assert app.document.progress(2) == (2, 3)

    def test_toggle_without_checkboxes(self, make_app, doc_path: Path, sample_markdown: str) -> None:
        """Sections without checkboxes do nothing."""
        app = make_app()

        app.handle_key("x")

        assert doc_path.read_text(encoding="utf-8") == sample_markdown

    def test_toc_enter_jumps(self, make_app) -> None:
        """Moving down the table of contents and pressing Enter opens the section."""
        app = make_app(["j", "j", "down", "enter"])

        app.handle_key("t")

        assert app.document.current_index == 3

    def test_toc_escape_keeps_section(self, make_app) -> None:
        """Closing the table of contents keeps the section."""
        app = make_app(["G", "escape"])

        app.handle_key("t")

        assert app.document.current_index == 0

    def test_toc_row_marks_progress(self, make_app) -> None:
        """Completed sections are ticked, started ones show a percentage."""
        app = make_app()

        assert "✓" in app.toc_row(5, False)
        assert "33%" in app.toc_row(2, False)
        assert "(current)" in app.toc_row(0, True)

    def test_add_note(self, make_app, monkeypatch: pytest.MonkeyPatch, doc_path: Path) -> None:
        """A note from the editor is added and saved."""
        app = make_app()
        monkeypatch.setattr(app_module, "find_editor", lambda: "nano")
        monkeypatch.setattr(app_module, "edit_text", lambda initial="": "from the editor")
        answers(monkeypatch, app, "a", "q")

        app.handle_key("a")

        assert app.document.notes() != []
        assert "from the editor" in doc_path.read_text(encoding="utf-8")

    def test_edit_note_prefills_body(self, make_app, monkeypatch: pytest.MonkeyPatch) -> None:
        """The editor starts with the note text, without its label."""
        app = make_app()
        app.document.add_note("first draft")
        seen: list[str] = []

        def fake_edit(initial: str = "") -> str:
            seen.append(initial)
            return "second draft"

        monkeypatch.setattr(app_module, "edit_text", fake_edit)
        answers(monkeypatch, app, "e", "1", "q")

        app.handle_key("a")

        assert seen == ["first draft"]
        assert len(app.document.notes()) == 1
        assert "second draft" in app.document.notes()[0]

    def test_delete_note_needs_confirmation(self, make_app, monkeypatch: pytest.MonkeyPatch) -> None:
        """Notes are only deleted after confirming."""
        app = make_app()
        app.document.add_note("keep?")
        answers(monkeypatch, app, "d", "1", "d", "1", "q")
        confirmations = iter([False, True])
        monkeypatch.setattr(app, "_confirm", lambda prompt: next(confirmations))

        app.handle_key("a")

        assert app.document.notes() == []

    def test_clean_notes(self, make_app, monkeypatch: pytest.MonkeyPatch) -> None:
        """All notes can be removed at once."""
        app = make_app()
        app.document.add_note("one")
        app.document.add_note("two")
        answers(monkeypatch, app, "c", "q")
        monkeypatch.setattr(app, "_confirm", lambda prompt: True)

        app.handle_key("a")

        assert app.document.notes() == []

    def test_editor_failure_is_reported(self, make_app, monkeypatch: pytest.MonkeyPatch) -> None:
        """Editor errors are shown and nothing is added."""
        app = make_app()

        def broken(initial: str = "") -> str:
            raise EditorError("Editor 'nano' failed: exit status 1")

        monkeypatch.setattr(app_module, "find_editor", lambda: "nano")
        monkeypatch.setattr(app_module, "edit_text", broken)
        answers(monkeypatch, app, "a", "", "q")

        app.handle_key("a")

        assert app.document.notes() == []
        assert "failed: exit status 1" in app.console.file.getvalue()

    def test_add_note_without_editor_reads_lines(
        self, make_app, monkeypatch: pytest.MonkeyPatch, doc_path: Path
    ) -> None:
        """Without an editor the note is typed line by line until an empty line."""
        app = make_app()
        monkeypatch.setattr(app_module, "find_editor", lambda: None)
        answers(monkeypatch, app, "a", "line one", "line two", "", "q")

        app.handle_key("a")

        (note,) = app.document.notes()
        assert note.endswith(":** line one\n> line two")
        assert "> line two" in doc_path.read_text(encoding="utf-8")

    def test_add_note_without_editor_empty_input(self, make_app, monkeypatch: pytest.MonkeyPatch) -> None:
        """An empty first line adds nothing."""
        app = make_app()
        monkeypatch.setattr(app_module, "find_editor", lambda: None)
        answers(monkeypatch, app, "a", "", "q")

        app.handle_key("a")

        assert app.document.notes() == []


class TestRun:
    """Tests for the main loop."""

    def test_run_saves_position_on_exit(self, make_app, tmp_path: Path) -> None:
        """Quitting stores the current section."""
        app = make_app(["n", "n", "q"])

        app.run()

        state = load_state(tmp_path / ".learnpath-state")
        assert state is not None
        assert state.current_section == 2
        assert "Bye!" in app.console.file.getvalue()

    def test_run_without_state_path(self, document: Document, doc_path: Path, tmp_path: Path) -> None:
        """No state file is written when state is disabled."""
        app = LearnPathApp(
            document,
            file_path=doc_path,
            console=Console(file=io.StringIO()),
            terminal=ScriptedTerminal(["n", "q"]),
        )

        app.run()

        assert not (tmp_path / ".learnpath-state").exists()
