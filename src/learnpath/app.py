"""Interactive terminal session over a learning-path document."""

from __future__ import annotations

from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.prompt import Confirm, Prompt
from rich.text import Text

from learnpath.config import LEARNPATH_PAGE_SIZE_STEP
from learnpath.content import note_body
from learnpath.document import Document
from learnpath.exceptions import EditorError, LearnPathError
from learnpath.render import (
    CHECKED_GLYPH,
    UNCHECKED_GLYPH,
    progress_bar,
    render_header,
    render_lines,
    render_rule,
)
from learnpath.schemas import ViewerState
from learnpath.storage import save_state, write_document
from learnpath.syntax import CHECKED, UNCHECKED
from learnpath.terminal import Terminal, edit_text, find_editor
from learnpath.utils.logging_config import get_logger
from learnpath.viewport import Viewport, default_page_size

logger = get_logger(__name__)

_NOTE_PREVIEW_CHARS = 100
_TOC_TITLE_CHARS = 50

HELP_ITEMS = (
    ("j / ↓", "Scroll down within the section"),
    ("k / ↑", "Scroll up within the section"),
    ("n / Enter", "Next section"),
    ("p", "Previous section"),
    ("", ""),
    ("t", "Table of contents"),
    ("g", "Go to section by number"),
    ("G", "Go to last section"),
    ("/", "Search sections"),
    ("", ""),
    ("x", "Toggle a checkbox"),
    ("a", "Notes (add / view / edit / delete)"),
    ("s", "Save file and position"),
    ("", ""),
    ("+", f"Show {LEARNPATH_PAGE_SIZE_STEP} more lines"),
    ("-", f"Show {LEARNPATH_PAGE_SIZE_STEP} fewer lines"),
    ("?", "This help"),
    ("q", "Quit"),
)


class LearnPathApp:
    """Key-driven viewer: renders the current section and dispatches keys."""

    def __init__(
        self,
        document: Document,
        *,
        file_path: Path,
        state_path: Path | None = None,
        viewport: Viewport | None = None,
        console: Console | None = None,
        terminal: Terminal | None = None,
    ) -> None:
        self.document = document
        self.file_path = file_path
        self.state_path = state_path
        self.console = console or Console(highlight=False)
        self.terminal = terminal or Terminal()
        self.width, self.height = self.terminal.size()
        self.viewport = viewport or Viewport(default_page_size(self.height))

    # Persistence

    @property
    def state(self) -> ViewerState:
        return ViewerState(
            current_section=self.document.current_index,
            page_size=self.viewport.page_size,
            file_path=str(self.file_path),
        )

    def save_document(self) -> bool:
        try:
            write_document(self.file_path, self.document.text)
        except LearnPathError as exc:
            logger.error("Save failed", extra={"path": str(self.file_path), "error": str(exc)})
            self.console.print(f"[red]Save failed: {exc}[/red]")
            return False
        return True

    def save_state(self) -> None:
        if self.state_path is None:
            return
        try:
            save_state(self.state_path, self.state)
        except LearnPathError as exc:
            logger.warning("State not saved", extra={"path": str(self.state_path), "error": str(exc)})

    # Screen

    def content_lines(self) -> list[str]:
        section = self.document.current_section
        if section is None:
            return []
        return render_lines(section.content, self.width)

    def screen_lines(self) -> list[str]:
        """ANSI lines making up the main screen."""
        section = self.document.current_section
        if section is None:
            return ["No sections."]

        position = self.document.current_index + 1
        count = len(self.document)
        percent = position / count * 100
        lines = [
            f" Learning Path  [{progress_bar(position, count)}] {percent:.0f}%  ({position}/{count})",
            "",
            render_header(section),
            render_rule(self.width),
        ]

        rendered = self.content_lines()
        lines.extend(self.viewport.visible(rendered))
        hint = self.viewport.position_hint(len(rendered))
        if hint:
            lines.append("")
            lines.append(f"{hint}  [{self.viewport.page_size} lines/page, +/- to adjust]")
        lines.append("")
        lines.append(" j/k scroll  n/p section  t toc  x tick  a note  ? help  q quit")
        return lines

    def draw(self) -> None:
        self.console.clear()
        for line in self.screen_lines():
            self.console.print(Text.from_ansi(line))

    # Keys

    def handle_key(self, key: str) -> bool:
        """Act on one key press. Returns False when the session should end."""
        if key in ("j", "down"):
            self.viewport.scroll_down(len(self.content_lines()))
        elif key in ("k", "up"):
            self.viewport.scroll_up()
        elif key in ("n", "enter"):
            self._moved(self.document.next_section())
        elif key == "p":
            self._moved(self.document.prev_section())
        elif key == "G":
            self._moved(self.document.goto_last())
        elif key in ("t", "T"):
            self.show_toc()
            self.viewport.reset_scroll()
        elif key == "g":
            self.prompt_goto()
            self.viewport.reset_scroll()
        elif key == "/":
            self.prompt_search()
            self.viewport.reset_scroll()
        elif key in ("x", "X"):
            self.prompt_toggle()
        elif key in ("a", "A"):
            self.notes_menu()
        elif key in ("+", "="):
            self.viewport.adjust_page_size(LEARNPATH_PAGE_SIZE_STEP)
        elif key in ("-", "_"):
            self.viewport.adjust_page_size(-LEARNPATH_PAGE_SIZE_STEP)
        elif key in ("s", "S"):
            self.save_document()
            self.save_state()
        elif key in ("q", "Q", "ctrl-c"):
            return False
        elif key == "?":
            self.show_help()
        return True

    def run(self) -> None:
        with self.terminal.cbreak():
            try:
                while True:
                    self.draw()
                    if not self.handle_key(self.terminal.read_key()):
                        break
            finally:
                self.save_state()
        self.console.clear()
        self.console.print("Bye! Progress saved.")

    def _moved(self, moved: bool) -> None:
        if moved:
            self.viewport.reset_scroll()

    # Menus

    def _ask(self, prompt: str) -> str:
        with self.terminal.line_mode():
            return Prompt.ask(prompt, console=self.console, default="", show_default=False).strip()

    def _ask_number(self, prompt: str, upper: int) -> int | None:
        """1-based choice in ``[1, upper]`` as a 0-based index, or None."""
        answer = self._ask(prompt)
        if not answer.isdigit():
            return None
        number = int(answer)
        if 1 <= number <= upper:
            return number - 1
        return None

    def _confirm(self, prompt: str) -> bool:
        with self.terminal.line_mode():
            return Confirm.ask(prompt, console=self.console, default=False)

    def _pause(self) -> None:
        self._ask("[dim]Press Enter to go back[/dim]")

    def _progress_suffix(self, index: int) -> str:
        checked, total = self.document.progress(index)
        if not total:
            return ""
        if checked == total:
            return " [green]✓[/green]"
        if checked:
            return f" [yellow]{checked / total * 100:.0f}%[/yellow]"
        return " [dim]○[/dim]"

    def toc_row(self, index: int, selected: bool) -> str:
        section = self.document.sections[index]
        title = section.title
        if len(title) > _TOC_TITLE_CHARS:
            title = title[: _TOC_TITLE_CHARS - 3] + "..."
        selector = "[green]▶[/green] " if selected else "  "
        indent = "  " * (section.level - 1)
        current = " [cyan](current)[/cyan]" if index == self.document.current_index else ""
        style = ("bold white", "bold magenta", "cyan", "dim")[section.level - 1]
        return f"{selector}{indent}[{style}]{escape(title)}[/{style}]{self._progress_suffix(index)}{current}"

    def show_toc(self) -> None:
        """Scrollable table of contents; Enter jumps to the selected section."""
        count = len(self.document)
        if not count:
            return
        selected = self.document.current_index
        offset = 0
        visible = max(self.height - 6, 1)

        while True:
            offset = min(offset, selected)
            if selected >= offset + visible:
                offset = selected - visible + 1
            end = min(offset + visible, count)

            self.console.clear()
            self.console.print("[bold white on magenta] CONTENTS  (j/k move, Enter select, q close) [/]\n")
            for index in range(offset, end):
                self.console.print(self.toc_row(index, index == selected))
            if offset:
                self.console.print(f"\n[dim]  ↑ {offset} more above[/dim]")
            if end < count:
                self.console.print(f"\n[dim]  ↓ {count - end} more below[/dim]")
            checked, total = self.document.total_progress()
            if total:
                bar = progress_bar(checked, total)
                self.console.print(f"\n  Progress: {escape(f'[{bar}]')} {checked}/{total} ({checked / total * 100:.0f}%)")

            key = self.terminal.read_key()
            if key in ("j", "down"):
                selected = min(selected + 1, count - 1)
            elif key in ("k", "up"):
                selected = max(selected - 1, 0)
            elif key == "g":
                selected = offset = 0
            elif key == "G":
                selected = count - 1
            elif key == "space":
                selected = min(selected + visible, count - 1)
            elif key == "enter":
                self.document.goto_section(selected)
                return
            elif key in ("q", "Q", "escape"):
                return

    def prompt_goto(self) -> None:
        self.console.clear()
        self.console.print("[bold]SECTIONS[/bold]")
        for index, section in enumerate(self.document.sections):
            marker = " [green]◀[/green]" if index == self.document.current_index else ""
            checked, total = self.document.progress(index)
            progress = f" [dim]{escape(f'[{checked}/{total}]')}[/dim]" if total else ""
            indent = "  " * (section.level - 1)
            self.console.print(f"[cyan]{index + 1:3d}.[/cyan] {indent}{escape(section.title)}{progress}{marker}")
        choice = self._ask_number(f"\n[bold]Number (1-{len(self.document)}) or Enter to cancel[/bold]", len(self.document))
        if choice is not None:
            self.document.goto_section(choice)

    def prompt_search(self) -> None:
        self.console.clear()
        query = self._ask("[bold]Search[/bold]")
        if not query:
            return
        matches = self.document.search(query)
        logger.debug("Search", extra={"query": query, "matches": len(matches)})
        if not matches:
            self.console.print("[red]No matches.[/red]")
            self._pause()
            return
        self.console.print(f"\n[green]{len(matches)} match(es):[/green]\n")
        for number, index in enumerate(matches, start=1):
            self.console.print(f"[cyan]{number:2d}.[/cyan] {escape(self.document.sections[index].title)}")
        choice = self._ask_number("\n[bold]Number or Enter to cancel[/bold]", len(matches))
        if choice is not None:
            self.document.goto_section(matches[choice])

    def prompt_toggle(self) -> None:
        section = self.document.current_section
        checkbox_lines = self.document.checkbox_lines()
        if section is None or not checkbox_lines:
            return
        lines = section.content_lines

        self.console.clear()
        self.console.print("[bold]TOGGLE CHECKBOX[/bold]")
        for number, line_index in enumerate(checkbox_lines, start=1):
            line = lines[line_index]
            status = f"[green]{CHECKED_GLYPH}[/green]" if CHECKED in line and UNCHECKED not in line else f"[red]{UNCHECKED_GLYPH}[/red]"
            text = line.strip().removeprefix(UNCHECKED).removeprefix(CHECKED).strip()
            self.console.print(f"[cyan]{number:2d}.[/cyan] {status} {escape(text)}")

        choice = self._ask_number("\n[bold]Number to toggle or Enter to cancel[/bold]", len(checkbox_lines))
        if choice is None:
            return
        if self.document.toggle_checkbox(checkbox_lines[choice]):
            self.save_document()

    def notes_menu(self) -> None:
        while True:
            section = self.document.current_section
            if section is None:
                return
            notes = self.document.notes()

            self.console.clear()
            self.console.print(f"[bold cyan]NOTES - {escape(section.title)}[/bold cyan]")
            if notes:
                self.console.print(f"\n[yellow]Existing notes ({len(notes)}):[/yellow]\n")
                for number, note in enumerate(notes, start=1):
                    self.console.print(f"  [cyan]{number}.[/cyan] {escape(_preview(note, 200))}")
            else:
                self.console.print("\n[dim]No notes yet.[/dim]")

            self.console.print("\n[bold]Choose:[/bold]\n  [cyan]a[/cyan] - add a note")
            if notes:
                self.console.print(
                    "  [cyan]v[/cyan] - view a note\n"
                    "  [cyan]e[/cyan] - edit a note\n"
                    "  [cyan]d[/cyan] - delete a note\n"
                    "  [cyan]c[/cyan] - delete ALL notes"
                )
            self.console.print("  [cyan]q[/cyan] - back")

            choice = self._ask("\nChoice").lower()
            if choice in ("q", ""):
                return
            if choice == "a":
                self.add_note()
            elif notes and choice == "v":
                self.view_note(notes)
            elif notes and choice == "e":
                self.edit_note(notes)
            elif notes and choice == "d":
                self.delete_note(notes)
            elif notes and choice == "c":
                self.clean_notes()

    def _edit(self, initial: str = "") -> str | None:
        try:
            with self.terminal.line_mode():
                return edit_text(initial)
        except EditorError as exc:
            logger.warning("Editor failed", extra={"error": str(exc)})
            self.console.print(f"[red]{exc}[/red]")
            self._pause()
            return None

    def _read_note_lines(self) -> str:
        """Collect note lines from the prompt until an empty line."""
        self.console.print("No editor found (set $EDITOR). Type the note, empty line to finish:")
        lines: list[str] = []
        while True:
            line = self._ask("")
            if not line:
                break
            lines.append(line)
        return "\n".join(lines).strip()

    def add_note(self) -> None:
        text = self._edit() if find_editor() else self._read_note_lines()
        if not text:
            return
        if self.document.add_note(text) and self.save_document():
            self.console.print("[green]Note saved.[/green]")

    def _pick_note(self, notes: list[str], verb: str) -> int | None:
        self.console.clear()
        for number, note in enumerate(notes, start=1):
            self.console.print(f"  [cyan]{number}.[/cyan] {escape(_preview(note, _NOTE_PREVIEW_CHARS))}")
        return self._ask_number(f"\nNumber to {verb} (1-{len(notes)}) or Enter to cancel", len(notes))

    def view_note(self, notes: list[str]) -> None:
        choice = self._pick_note(notes, "view")
        if choice is None:
            return
        self.console.clear()
        self.console.print(f"[bold cyan]NOTE #{choice + 1}[/bold cyan]\n")
        self.console.print(Text(notes[choice]))
        self._pause()

    def edit_note(self, notes: list[str]) -> None:
        choice = self._pick_note(notes, "edit")
        if choice is None:
            return
        old = notes[choice]
        text = self._edit(note_body(old, label=self.document.note_label))
        if not text:
            return
        if self.document.edit_note(old, text) and self.save_document():
            self.console.print("[green]Note updated.[/green]")

    def delete_note(self, notes: list[str]) -> None:
        choice = self._pick_note(notes, "delete")
        if choice is None or not self._confirm(f"Delete note #{choice + 1}?"):
            return
        if self.document.delete_note(notes[choice]) and self.save_document():
            self.console.print("[green]Note deleted.[/green]")

    def clean_notes(self) -> None:
        if not self._confirm("Delete ALL notes in this section?"):
            return
        if self.document.clean_notes() and self.save_document():
            self.console.print("[green]All notes deleted.[/green]")

    def show_help(self) -> None:
        self.console.clear()
        self.console.print("[bold black on cyan] KEYBOARD SHORTCUTS [/]\n")
        for key, description in HELP_ITEMS:
            if not key:
                self.console.print()
                continue
            self.console.print(f"  [bold cyan]{key:<10}[/bold cyan] {description}")
        self.console.print(
            "\n[bold magenta]In the table of contents:[/bold magenta]\n"
            "  [bold cyan]j/k       [/bold cyan] Move\n"
            "  [bold cyan]Enter     [/bold cyan] Open section\n"
            "  [bold cyan]q/Esc     [/bold cyan] Close"
        )
        self.console.print("  [dim]Notes open in $EDITOR (nano/vim when unset)[/dim]")
        self.console.print(f"\n[dim]Currently {self.viewport.page_size} lines per page[/dim]")
        self.console.print("\n[dim](press any key to go back)[/dim]")
        self.terminal.read_key()


def _preview(note: str, limit: int) -> str:
    if len(note) > limit:
        note = note[:limit] + "..."
    return note.replace("\n", " ")
