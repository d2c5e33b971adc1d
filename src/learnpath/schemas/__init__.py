"""Shared schemas for learnpath."""

from learnpath.schemas.section import Section
from learnpath.schemas.state import ViewerState

__all__ = ["Section", "ViewerState"]
