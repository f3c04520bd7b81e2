"""BuddyPress member model."""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import Field

from .base import BaseSchema

DEFAULT_AVATAR_URL = "https://www.gravatar.com/avatar/default?d=mp&s=150"


class User(BaseSchema):
    """A BuddyPress member as returned by `/members/me` and `/members/{id}`.

    BuddyPress sometimes serializes `id` as a string; pydantic's lax mode
    coerces numeric strings to int.
    """

    id: int
    name: str
    link: Optional[str] = None
    user_login: Optional[str] = None
    member_types: Optional[List[str]] = None
    registered_date: Optional[str] = None
    avatar_urls: Optional[Dict[str, str]] = Field(default=None)

    @property
    def avatar_url(self) -> str:
        """Largest available avatar, falling back to the gravatar placeholder."""
        if self.avatar_urls:
            for size in ("96", "48", "24"):
                url = self.avatar_urls.get(size)
                if url:
                    return url
        return DEFAULT_AVATAR_URL
