"""Scroll and page window over the lines of one section."""

from __future__ import annotations

from typing import Sequence, TypeVar

from learnpath.config import (
    DEFAULT_PAGE_SIZE_FLOOR,
    LEARNPATH_MIN_PAGE_SIZE,
    LEARNPATH_SCROLL_STEP,
)

T = TypeVar("T")

# Rows taken by the title bar, section header and footer.
_CHROME_ROWS = 6


def default_page_size(term_height: int) -> int:
    """Page size for a terminal of ``term_height`` rows."""
    return max(term_height - _CHROME_ROWS, DEFAULT_PAGE_SIZE_FLOOR)


class Viewport:
    """Window of ``page_size`` lines starting at ``scroll_offset``.

    The viewport does not know which section it shows; callers reset it with
    :meth:`reset_scroll` whenever the current section changes.
    """

    def __init__(
        self,
        page_size: int = DEFAULT_PAGE_SIZE_FLOOR,
        *,
        scroll_step: int = LEARNPATH_SCROLL_STEP,
        min_page_size: int = LEARNPATH_MIN_PAGE_SIZE,
    ) -> None:
        self.scroll_step = scroll_step
        self.min_page_size = min_page_size
        self.page_size = max(page_size, min_page_size)
        self.scroll_offset = 0

    def scroll_down(self, total_lines: int) -> bool:
        """Advance one step unless the last line is already visible."""
        if self.scroll_offset + self.page_size < total_lines:
            self.scroll_offset += self.scroll_step
            return True
        return False

    def scroll_up(self) -> bool:
        if self.scroll_offset > 0:
            self.scroll_offset = max(self.scroll_offset - self.scroll_step, 0)
            return True
        return False

    def reset_scroll(self) -> None:
        self.scroll_offset = 0

    def adjust_page_size(self, delta: int) -> int:
        """Grow or shrink the page; never below ``min_page_size``."""
        self.page_size = max(self.page_size + delta, self.min_page_size)
        return self.page_size

    def window(self, total_lines: int) -> tuple[int, int]:
        """Visible ``[start, end)`` range, resetting an offset past the end."""
        if self.scroll_offset >= total_lines:
            self.scroll_offset = 0
        start = self.scroll_offset
        return start, min(start + self.page_size, total_lines)

    def visible(self, lines: Sequence[T]) -> list[T]:
        start, end = self.window(len(lines))
        return list(lines[start:end])

    def position_hint(self, total_lines: int) -> str | None:
        """``[start-end/total]`` plus lines hidden above and below.

        None when everything fits on one page.
        """
        if total_lines <= self.page_size:
            return None
        start, end = self.window(total_lines)
        above = start
        below = total_lines - end
        hint = f"[{start + 1}-{end}/{total_lines}]"
        if above and below:
            return f"{hint} ↑{above} ↓{below}"
        if above:
            return f"{hint} ↑{above}"
        return f"{hint} ↓{below}"
