"""Cosmetic unlock models (themes and app icons earned through reading stats)."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import Field

from .base import BaseSchema
from .stats import UserStats

STAT_LABELS = {
    "booksCompleted": "Books Completed",
    "pagesRead": "Pages Read",
    "points": "Points",
    "booksAdded": "Books Added",
    "approvedReports": "Approved Reports",
}


class CosmeticType(str, Enum):
    THEME = "theme"
    ICON = "icon"
    BADGE = "badge"
    PROFILE_FRAME = "profileFrame"


class UnlockRequirement(BaseSchema):
    stat: str
    value: int

    def is_met(self, stats: UserStats) -> bool:
        try:
            return stats.value_of(self.stat) >= self.value
        except KeyError:
            return False

    @property
    def label(self) -> str:
        return STAT_LABELS.get(self.stat, self.stat)


class AppTheme(BaseSchema):
    id: str
    name: str
    description: str
    primary_color: str
    secondary_color: str
    accent_color: str
    background_color: str
    is_dark_theme: bool = False
    unlock_requirement: Optional[UnlockRequirement] = None


class CustomIcon(BaseSchema):
    id: str
    name: str
    description: str
    image_url: str


class CosmeticUnlock(BaseSchema):
    id: str
    type: CosmeticType
    name: str
    description: str
    image_url: Optional[str] = None
    unlocked_at: Optional[datetime] = None
    unlocked_by: str
    required_value: int
    theme: Optional[AppTheme] = None
    icon: Optional[CustomIcon] = None


class UserCosmetics(BaseSchema):
    """The member's active selections and everything they have unlocked."""

    active_theme: Optional[str] = None
    active_icon: Optional[str] = None
    unlocked_cosmetics: List[str] = Field(default_factory=list)
