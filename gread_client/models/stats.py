"""Reading statistics for a member."""

from __future__ import annotations

from .base import BaseSchema


class UserStats(BaseSchema):
    points: int = 0
    books_completed: int = 0
    pages_read: int = 0
    books_added: int = 0
    approved_reports: int = 0

    def value_of(self, stat: str) -> int:
        """Look a stat up by the camelCase name used in unlock requirements."""
        mapping = {
            "points": self.points,
            "booksCompleted": self.books_completed,
            "pagesRead": self.pages_read,
            "booksAdded": self.books_added,
            "approvedReports": self.approved_reports,
        }
        if stat not in mapping:
            raise KeyError(stat)
        return mapping[stat]
