"""Profile models: the signed-in user's profile and cached views of other members."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import Field, model_validator

from .base import BaseSchema
from .stats import UserStats
from .user import User


class ProfileStats(BaseSchema):
    points: int = 0
    books_completed: int = 0
    pages_read: int = 0
    books_added: int = 0
    approved_reports: int = 0


class ProfileSocial(BaseSchema):
    followers_count: int = 0
    following_count: int = 0


class UserProfile(BaseSchema):
    id: int
    display_name: str
    username: str
    email: str = ""
    bio: Optional[str] = None
    website: Optional[str] = None
    location: Optional[str] = None
    avatar_url: Optional[str] = None
    profile_url: Optional[str] = None
    registered_date: Optional[str] = None
    stats: Optional[ProfileStats] = None
    social: Optional[ProfileSocial] = None


class ProfileUpdateRequest(BaseSchema):
    display_name: Optional[str] = None
    bio: Optional[str] = None
    website: Optional[str] = None
    location: Optional[str] = None


class XProfileField(BaseSchema):
    id: int
    name: str
    value: Optional[str] = None
    type: str = "textbox"
    group_id: int = 0
    group: str = ""
    description: Optional[str] = None
    can_delete: Optional[int] = None
    is_required: Optional[int] = None
    order: Optional[int] = None


class XProfileFieldList(BaseSchema):
    """Accepts either a JSON list of fields or a `{"<id>": field}` mapping."""

    items: List[XProfileField] = []

    @model_validator(mode="before")
    @classmethod
    def _coerce(cls, v):
        if isinstance(v, list):
            return {"items": v}
        if isinstance(v, dict) and "items" not in v:
            return {"items": [f for f in v.values() if isinstance(f, dict)]}
        return v


class FriendsListResponse(BaseSchema):
    friends: List[User] = []
    total: Optional[int] = None

    @model_validator(mode="before")
    @classmethod
    def _coerce(cls, v):
        if isinstance(v, list):
            return {"friends": v}
        return v


class FriendRequest(BaseSchema):
    id: int
    user_id: int
    friend_id: int
    initiator_id: Optional[int] = None
    status: str = "pending"
    created_at: Optional[str] = None
    user: Optional[User] = None
    friend: Optional[User] = None


class FriendRequestResponse(BaseSchema):
    success: bool = False
    message: Optional[str] = None
    friend_request: Optional[FriendRequest] = None


class PendingRequestsResponse(BaseSchema):
    requests: List[FriendRequest] = []
    total_count: Optional[int] = None

    @model_validator(mode="before")
    @classmethod
    def _coerce(cls, v):
        if isinstance(v, list):
            return {"requests": v}
        return v


class CachedUserProfile(BaseSchema):
    """Everything known about another member, cached under their id."""

    user_id: int
    user: Optional[User] = None
    user_profile: Optional[UserProfile] = None
    xprofile_fields: List[XProfileField] = Field(default_factory=list)
    user_stats: Optional[UserStats] = None
    friends: List[User] = Field(default_factory=list)
    last_load_time: Optional[datetime] = None
