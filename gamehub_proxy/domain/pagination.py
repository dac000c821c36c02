from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Optional, TypeVar

__all__ = ["PaginationWindow", "window_from"]

T = TypeVar("T")


@dataclass(frozen=True)
class PaginationWindow:
    """A 1-based page over a sequence, as a half-open ``[start, end)`` window.

    Windows past the end of the sequence, and pages below 1, select nothing
    rather than raising.
    """

    page: int
    page_size: int

    @property
    def start(self) -> int:
        return (self.page - 1) * self.page_size

    @property
    def end(self) -> int:
        return self.start + self.page_size

    def slice(self, items: Sequence[T]) -> list[T]:
        if self.page < 1 or self.page_size < 1:
            return []
        return list(items[self.start : self.end])


def window_from(page: Optional[int], page_size: Optional[int], *, default_size: int) -> PaginationWindow:
    """Build a window from client input; missing or zero values take the defaults."""
    return PaginationWindow(page=page or 1, page_size=page_size or default_size)
