"""Test setup for learnpath."""

from __future__ import annotations

import sys
from datetime import datetime
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from learnpath.document import Document  # noqa: E402

SAMPLE_MARKDOWN = """# Main Title

Introduction text.

## Phase 1: Learning

Some content here.

### Chapter 1: Basics

- [ ] Task one
- [x] Task two completed
- [ ] Task three

**Bold text** and *italic text*.

### Chapter 2: Advanced

More content.

- [ ] Advanced task

## Phase 2: Practice

Practice section.

### Exercise 1

- [x] Done
- [x] Also done
"""


@pytest.fixture
def sample_markdown() -> str:
    """Learning path with four levels, checkboxes and plain text."""
    return SAMPLE_MARKDOWN


@pytest.fixture
def document(sample_markdown: str) -> Document:
    """Parsed sample document with the cursor on the first section."""
    return Document(sample_markdown)


@pytest.fixture
def fixed_now() -> datetime:
    """Deterministic timestamp for note tests."""
    return datetime(2025, 1, 2, 11, 30)
