"""Dashboard manager: stats, recent activity and unlocked achievements."""

from __future__ import annotations

import asyncio
from datetime import datetime
from typing import List, Optional

from gread_client.api.client import GReadApiClient
from gread_client.api.errors import ApiError
from gread_client.models import Achievement, UserStats
from gread_client.models.activity import Activity
from gread_client.storage import PreferenceKeys, PreferenceStore

from .base import CachedManager, utcnow

RECENT_ACTIVITY_COUNT = 5


class DashboardManager(CachedManager):
    cache_keys = (
        PreferenceKeys.DASHBOARD_STATS,
        PreferenceKeys.DASHBOARD_ACTIVITY,
        PreferenceKeys.DASHBOARD_ACHIEVEMENTS,
        PreferenceKeys.DASHBOARD_LOAD_TIME,
    )

    def __init__(self, api: GReadApiClient, store: PreferenceStore) -> None:
        super().__init__(api, store)
        self.stats: Optional[UserStats] = None
        self.recent_activity: List[Activity] = []
        self.achievements: List[Achievement] = []
        self.is_loading = False
        self.last_load_time: Optional[datetime] = None
        self._has_loaded_once = False
        self._load_from_cache()

    async def load_dashboard_if_needed(self, user_id: int) -> None:
        if self._has_loaded_once:
            return
        await self.load_dashboard(user_id)

    async def load_dashboard(self, user_id: int) -> None:
        """Load the three dashboard sections concurrently.

        Each section keeps its previous value when its request fails.
        """
        if self.is_loading:
            return
        self.is_loading = True
        try:
            await asyncio.gather(
                self._load_stats(user_id),
                self._load_recent_activity(),
                self._load_achievements(user_id),
            )
        finally:
            self.is_loading = False

        self.last_load_time = utcnow()
        self._has_loaded_once = True
        self._save_to_cache()

    async def _load_stats(self, user_id: int) -> None:
        try:
            self.stats = await self.api.get_user_stats(user_id)
        except ApiError as e:
            self._logger.warning("Failed to load stats: %s", e)

    async def _load_recent_activity(self) -> None:
        try:
            self.recent_activity = await self.api.get_activity(page=1, per_page=RECENT_ACTIVITY_COUNT)
        except ApiError as e:
            self._logger.warning("Failed to load activity: %s", e)

    async def _load_achievements(self, user_id: int) -> None:
        try:
            response = await self.api.get_user_achievements(user_id, filter="unlocked")
        except ApiError as e:
            self._logger.warning("Failed to load achievements: %s", e)
            return
        self.achievements = sorted(response.achievements, key=lambda a: a.date_unlocked or "", reverse=True)

    def clear_cache(self) -> None:
        self.stats = None
        self.recent_activity = []
        self.achievements = []
        self._has_loaded_once = False
        self.last_load_time = None
        self._drop_keys()

    def _save_to_cache(self) -> None:
        if self.stats is not None:
            self.store.set_model(PreferenceKeys.DASHBOARD_STATS, self.stats)
        self.store.set_model(PreferenceKeys.DASHBOARD_ACTIVITY, self.recent_activity)
        self.store.set_model(PreferenceKeys.DASHBOARD_ACHIEVEMENTS, self.achievements)
        self._write_time(PreferenceKeys.DASHBOARD_LOAD_TIME, self.last_load_time)

    def _load_from_cache(self) -> None:
        stats = self.store.get_model(PreferenceKeys.DASHBOARD_STATS, UserStats)
        if stats is not None:
            self.stats = stats
            self._has_loaded_once = True
        self.recent_activity = self.store.get_model(PreferenceKeys.DASHBOARD_ACTIVITY, List[Activity]) or []
        self.achievements = self.store.get_model(PreferenceKeys.DASHBOARD_ACHIEVEMENTS, List[Achievement]) or []
        self.last_load_time = self._read_time(PreferenceKeys.DASHBOARD_LOAD_TIME)
