"""Command-line entry point for learnpath."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from rich.console import Console
from rich.prompt import Prompt

from learnpath.app import LearnPathApp
from learnpath.config import DEFAULT_FILE_PATH, LEARNPATH_FILE, LEARNPATH_STATE_FILE
from learnpath.document import Document
from learnpath.exceptions import LearnPathError
from learnpath.schemas import ViewerState
from learnpath.storage import create_from_template, load_state, read_document
from learnpath.utils.logging_config import configure_logging, get_logger
from learnpath.viewport import Viewport

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="learnpath",
        description="Read a markdown learning path section by section, tick items and keep notes.",
    )
    parser.add_argument("file", nargs="?", help=f"Markdown file to open (default: {LEARNPATH_FILE})")
    parser.add_argument("--state-file", default=LEARNPATH_STATE_FILE, help="Where the reading position is saved")
    parser.add_argument("--page-size", type=int, help="Visible content lines per page")
    parser.add_argument("--no-state", action="store_true", help="Do not load or save the reading position")
    parser.add_argument("--log-level", help="Log level (DEBUG, INFO, WARNING, ...)")
    parser.add_argument("--log-file", help="Write logs to this file")
    return parser


def resolve_file_path(requested: str | None, state: ViewerState | None) -> Path:
    """Pick the document path.

    An explicit path wins. A path remembered in the state file is only used
    when the configured path is still the default one.
    """
    if requested:
        return Path(requested)
    if state and state.file_path and LEARNPATH_FILE == DEFAULT_FILE_PATH:
        return Path(state.file_path)
    return Path(LEARNPATH_FILE)


def bootstrap(path: Path, console: Console) -> Path | None:
    """Offer to create a missing document or open another one.

    Returns:
        The path to open, or None if the user chose to quit.
    """
    console.print(f"[bold cyan]learnpath[/bold cyan]\n\nFile [yellow]{path}[/yellow] does not exist.\n")
    console.print(
        "  [bold cyan]1[/bold cyan]. Create it from the default template\n"
        "  [bold cyan]2[/bold cyan]. Open another file\n"
        "  [bold cyan]3[/bold cyan]. Quit"
    )
    choice = Prompt.ask("\nChoice", choices=["1", "2", "3"], default="3", console=console)
    if choice == "1":
        create_from_template(path)
        console.print(f"[green]Created {path}[/green]")
        return path
    if choice == "2":
        other = Prompt.ask("Path", default="", show_default=False, console=console).strip()
        if not other:
            console.print("Empty path.")
            return None
        other_path = Path(other)
        if not other_path.exists():
            console.print(f"File {other_path} does not exist.")
            return None
        return other_path
    return None


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level, log_file=args.log_file)
    console = Console(highlight=False)

    state_path = None if args.no_state else Path(args.state_file)
    state = load_state(state_path) if state_path else None
    file_path = resolve_file_path(args.file, state)

    try:
        if not file_path.exists():
            if not sys.stdin.isatty():
                console.print(f"[red]File {file_path} does not exist.[/red]")
                return 1
            opened = bootstrap(file_path, console)
            if opened is None:
                return 0
            file_path = opened

        document = Document(read_document(file_path))
        if state and state.current_section < len(document):
            document.goto_section(state.current_section)

        page_size = args.page_size or (state.page_size if state else 0)
        app = LearnPathApp(
            document,
            file_path=file_path,
            state_path=state_path,
            viewport=Viewport(page_size) if page_size > 0 else None,
            console=console,
        )

        logger.info("Opening document", extra={"path": str(file_path), "sections": len(document)})
        app.run()
    except LearnPathError as exc:
        logger.error("learnpath failed", extra={"error": str(exc)})
        console.print(f"[red]Error: {exc}[/red]")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
