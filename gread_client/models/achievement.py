"""Achievement models for the `gread/v1` achievements endpoints."""

from __future__ import annotations

from typing import Any, List, Optional

from pydantic import field_validator

from .base import BaseSchema, coerce_int_or_zero


class AchievementIcon(BaseSchema):
    type: str
    color: str
    symbol: str


class UnlockRequirements(BaseSchema):
    metric: str
    value: int
    condition: str


class AchievementProgress(BaseSchema):
    current: int
    required: int
    percentage: float


class Achievement(BaseSchema):
    id: int
    slug: str
    name: str
    description: str
    icon: AchievementIcon
    unlock_requirements: UnlockRequirements
    reward: int
    is_hidden: bool
    display_order: int
    progress: Optional[AchievementProgress] = None
    is_unlocked: Optional[bool] = None
    date_unlocked: Optional[str] = None


class UserAchievementsResponse(BaseSchema):
    user_id: int = 0
    total: int
    unlocked_count: int
    achievements: List[Achievement]

    @field_validator("user_id", mode="before")
    @classmethod
    def _user_id(cls, v: Any) -> int:
        return coerce_int_or_zero(v)


class LeaderboardEntry(BaseSchema):
    rank: int
    user_id: int = 0
    user_name: str
    user_avatar_url: str
    achievement_count: int

    @field_validator("user_id", mode="before")
    @classmethod
    def _user_id(cls, v: Any) -> int:
        return coerce_int_or_zero(v)
