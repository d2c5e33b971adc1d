"""Section model."""

from __future__ import annotations

from pydantic import BaseModel, Field


class Section(BaseModel):
    """A header plus every line up to the next header of any level.

    Sections are rebuilt wholesale on every parse, so a ``Section`` has no
    identity beyond its position in the document. ``start_line`` is only
    valid until the next size-changing edit; re-parse before trusting it.

    Attributes:
        title: Header text after the marker run, trimmed.
        content: Raw lines between this header and the next, joined by ``\\n``.
        level: Number of ``#`` characters in the header (1-4).
        start_line: 0-indexed line of the header in the backing lines.
    """

    title: str
    content: str = ""
    level: int = Field(..., ge=1, le=4)
    start_line: int = Field(default=0, ge=0)

    @property
    def header_line(self) -> str:
        """Header line reconstructed from level and title."""
        return f"{'#' * self.level} {self.title}"

    @property
    def content_lines(self) -> list[str]:
        return self.content.split("\n")
