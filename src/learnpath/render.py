"""Render document lines as ANSI-styled terminal text.

Each line is classified once from its original text, then exactly one
block-level rule styles it. Inline styling (bold, italic, code) is applied to
the text that rule keeps. Leading whitespace is always preserved.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Final

from rich.style import Style

from learnpath.schemas import Section
from learnpath.syntax import CHECKED, QUOTE_MARKER, UNCHECKED

UNCHECKED_GLYPH: Final = "☐"
CHECKED_GLYPH: Final = "☑"
BULLET_GLYPH: Final = "•"
QUOTE_BAR: Final = "│"
RULE_CHAR: Final = "─"

_UNCHECKED_STYLE = Style(color="red")
_CHECKED_STYLE = Style(color="green")
_BOLD_STYLE = Style(bold=True)
_ITALIC_STYLE = Style(italic=True)
_CODE_STYLE = Style(color="cyan", bgcolor="black")
_BULLET_STYLE = Style(color="yellow")
_NUMBER_STYLE = Style(color="cyan")
_DIM_STYLE = Style(dim=True)
_LEVEL_STYLES = (
    Style(bold=True, color="white"),
    Style(bold=True, color="cyan"),
    Style(bold=True, color="yellow"),
    Style(bold=True, color="green"),
)

_BOLD_RE = re.compile(r"\*\*([^*]+)\*\*")
_ITALIC_RE = re.compile(r"(?<!\*)\*([^*]+)\*(?!\*)")
_CODE_RE = re.compile(r"`([^`]+)`")
_NUMBERED_RE = re.compile(r"^(\d+)\.\s")
_INDENT_RE = re.compile(r"^\s*")

_RESET = "\x1b[0m"
_DIM_OPEN = "\x1b[2m"

RULE_MARKER: Final = "---"
TABLE_DELIMITER: Final = "|"
BULLET_MARKER: Final = "- "


class LineKind(str, Enum):
    """Block-level kind of a content line."""

    PLAIN = "plain"
    CHECKBOX = "checkbox"
    BULLET = "bullet"
    NUMBERED = "numbered"
    QUOTE = "quote"
    RULE = "rule"
    TABLE_SEPARATOR = "table_separator"


def classify_line(line: str) -> LineKind:
    """Decide the kind of ``line`` from its raw text."""
    stripped = line.strip()
    if stripped == RULE_MARKER:
        return LineKind.RULE
    if stripped.startswith(QUOTE_MARKER):
        return LineKind.QUOTE
    if TABLE_DELIMITER in line and RULE_MARKER in line:
        return LineKind.TABLE_SEPARATOR
    if UNCHECKED in line or CHECKED in line:
        return LineKind.CHECKBOX
    if stripped.startswith(BULLET_MARKER):
        return LineKind.BULLET
    if _NUMBERED_RE.match(stripped):
        return LineKind.NUMBERED
    return LineKind.PLAIN


def render_line(line: str, width: int = 80) -> str:
    """Convert one markdown line into styled terminal output.

    Args:
        line: Raw content line.
        width: Terminal width; horizontal rules span ``width - 4`` columns.

    Returns:
        The styled line, with the original leading whitespace kept in front.
    """
    kind = classify_line(line)
    indent = _INDENT_RE.match(line).group(0)
    body = line[len(indent):]

    if kind is LineKind.RULE:
        return indent + _DIM_STYLE.render(RULE_CHAR * max(width - 4, 0))

    if kind is LineKind.TABLE_SEPARATOR:
        return indent + _DIM_STYLE.render(body)

    if kind is LineKind.QUOTE:
        text = body.rstrip()[len(QUOTE_MARKER):]
        if text.startswith(" "):
            text = text[1:]
        # Inline spans end with a full reset; dim is reopened after each one.
        styled = style_inline(text).replace(_RESET, _RESET + _DIM_OPEN)
        return indent + _DIM_STYLE.render(f"{QUOTE_BAR} {styled}")

    if kind is LineKind.CHECKBOX:
        body = body.replace(UNCHECKED, _UNCHECKED_STYLE.render(UNCHECKED_GLYPH), 1)
        body = body.replace(CHECKED, _CHECKED_STYLE.render(CHECKED_GLYPH), 1)
        return indent + style_inline(body)

    if kind is LineKind.BULLET:
        rest = body[len(BULLET_MARKER):]
        return indent + _BULLET_STYLE.render(f"{BULLET_GLYPH} ") + style_inline(rest)

    if kind is LineKind.NUMBERED:
        match = _NUMBERED_RE.match(body)
        number = _NUMBER_STYLE.render(f"{match.group(1)}.")
        return indent + number + " " + style_inline(body[match.end():])

    return indent + style_inline(body)


def style_inline(text: str) -> str:
    """Apply bold, then italic, then inline-code styling."""
    text = _BOLD_RE.sub(lambda m: _BOLD_STYLE.render(m.group(1)), text)
    text = _ITALIC_RE.sub(lambda m: _ITALIC_STYLE.render(m.group(1)), text)
    return _CODE_RE.sub(lambda m: _CODE_STYLE.render(m.group(1)), text)


def render_lines(content: str, width: int = 80) -> list[str]:
    return [render_line(line, width) for line in content.split("\n")]


def render_header(section: Section) -> str:
    """Section title indented and colored by level."""
    style = _LEVEL_STYLES[min(section.level, len(_LEVEL_STYLES)) - 1]
    return "  " * (section.level - 1) + style.render(section.header_line)


def render_rule(width: int) -> str:
    return _DIM_STYLE.render(RULE_CHAR * max(width - 4, 0))


def progress_bar(done: int, total: int, width: int = 20) -> str:
    """Text bar with ``width`` cells, filled in proportion to ``done / total``."""
    filled = int(width * done / total) if total > 0 else 0
    filled = min(max(filled, 0), width)
    return "█" * filled + "░" * (width - filled)
