"""Help guides published by the site."""

from __future__ import annotations

from typing import Optional

from .base import BaseSchema


class Guide(BaseSchema):
    id: int
    title: str
    description: str = ""
    icon: str = ""
    content: str = ""
    order: int = 0
    category: Optional[str] = None


class GuideCategory(BaseSchema):
    id: int
    name: str
    icon: str = ""
    order: int = 0
