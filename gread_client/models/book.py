"""Book and library item models for the `gread/v1` namespace."""

from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import Field, model_validator

from .base import BaseSchema

OPEN_LIBRARY_COVER_URL = "https://covers.openlibrary.org/b/isbn/{isbn}-M.jpg"


class LibraryStatus(str, Enum):
    """Shelf states the library endpoints use."""

    WANT_TO_READ = "want_to_read"
    READING = "reading"
    COMPLETED = "completed"


class Book(BaseSchema):
    id: int
    title: str
    author: Optional[str] = None
    description: Optional[str] = Field(default=None, alias="content")
    cover_url: Optional[str] = None
    total_pages: Optional[int] = Field(default=None, alias="page_count")
    isbn: Optional[str] = None
    published_date: Optional[str] = None

    @property
    def effective_cover_url(self) -> Optional[str]:
        """The API cover if present, otherwise an Open Library cover derived from the ISBN."""
        if self.cover_url:
            return self.cover_url
        if self.isbn:
            return OPEN_LIBRARY_COVER_URL.format(isbn=self.isbn.replace("-", ""))
        return None


class LibraryItem(BaseSchema):
    """One book on a user's shelf.

    Items created offline in guest mode carry negative ids; the server never
    hands those out.
    """

    id: int
    user_id: int = 0
    book: Optional[Book] = None
    status: str = LibraryStatus.WANT_TO_READ.value
    current_page: int = 0
    progress_percentage: float = 0.0
    date_added: Optional[str] = None

    @property
    def book_id(self) -> Optional[int]:
        return self.book.id if self.book else None

    @property
    def is_local(self) -> bool:
        return self.id < 0

    @property
    def effective_status(self) -> str:
        if self.book and self.book.total_pages and self.book.total_pages > 0:
            if self.current_page >= self.book.total_pages:
                return LibraryStatus.COMPLETED.value
        return self.status


class BookSearchResponse(BaseSchema):
    """The search endpoint answers either a bare list or ``{"books": [...], "total": n}``."""

    books: List[Book] = []
    total: Optional[int] = None
    page: Optional[int] = None

    @model_validator(mode="before")
    @classmethod
    def _coerce(cls, v):
        if isinstance(v, list):
            return {"books": v}
        return v


class BookNote(BaseSchema):
    id: int
    book_id: Optional[int] = None
    user_id: Optional[int] = None
    note: Optional[str] = None
    page: Optional[int] = None
    is_public: Optional[bool] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
