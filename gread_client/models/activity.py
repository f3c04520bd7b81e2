"""BuddyPress activity stream models."""

from __future__ import annotations

from typing import Any, List, Optional

from pydantic import field_validator, model_validator

from .base import BaseSchema, coerce_optional_int


class ActivityAvatar(BaseSchema):
    full: Optional[str] = None
    thumb: Optional[str] = None


class Activity(BaseSchema):
    id: int
    user_id: Optional[int] = None
    component: Optional[str] = None
    type: Optional[str] = None
    action: Optional[str] = None
    content: Optional[str] = None
    primary_link: Optional[str] = None
    item_id: Optional[int] = None
    secondary_item_id: Optional[int] = None
    date_recorded: Optional[str] = None
    user_nicename: Optional[str] = None
    user_login: Optional[str] = None
    display_name: Optional[str] = None
    user_fullname: Optional[str] = None
    user_avatar: Optional[ActivityAvatar] = None
    user_email: Optional[str] = None
    parent: Optional[int] = None
    children: Optional[List["Activity"]] = None

    @field_validator("user_id", "item_id", "secondary_item_id", "parent", mode="before")
    @classmethod
    def _lenient_int(cls, v: Any) -> Optional[int]:
        return coerce_optional_int(v)

    @field_validator("content", mode="before")
    @classmethod
    def _unwrap_content(cls, v: Any) -> Optional[str]:
        # REST responses wrap content as {"rendered": ..., "raw": ...}
        if isinstance(v, dict):
            return v.get("rendered") or v.get("raw")
        return v if isinstance(v, str) else None

    @field_validator("user_avatar", mode="before")
    @classmethod
    def _avatar_from_string(cls, v: Any) -> Any:
        if isinstance(v, str):
            return {"full": v, "thumb": v}
        return v


class ActivityResponse(BaseSchema):
    activities: List[Activity] = []

    @model_validator(mode="before")
    @classmethod
    def _coerce(cls, v):
        if isinstance(v, list):
            return {"activities": v}
        if isinstance(v, dict) and "activities" not in v and isinstance(v.get("data"), list):
            return {"activities": v["data"]}
        return v
