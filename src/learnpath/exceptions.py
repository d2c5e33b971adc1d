"""Custom exceptions for learnpath."""


class LearnPathError(Exception):
    """Base exception for learnpath operations."""


class DocumentError(LearnPathError):
    """Error reading or writing the learning-path document."""


class TemplateError(DocumentError):
    """Default template could not be written."""


class StateError(LearnPathError):
    """Error persisting the reading position."""


class EditorError(LearnPathError):
    """External editor is missing or exited with an error."""
