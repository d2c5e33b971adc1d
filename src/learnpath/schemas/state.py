"""Persisted viewer state."""

from __future__ import annotations

from pydantic import BaseModel, Field


class ViewerState(BaseModel):
    """Reading position saved between sessions.

    Attributes:
        current_section: Index of the section being read.
        page_size: Visible content lines; 0 means "use the default".
        file_path: Document the position belongs to.
    """

    current_section: int = Field(default=0, ge=0)
    page_size: int = Field(default=0, ge=0)
    file_path: str | None = None
