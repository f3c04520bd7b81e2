"""Cache of other members' profiles, keyed by user id."""

from __future__ import annotations

from typing import Dict, Optional

from gread_client.api.client import GReadApiClient
from gread_client.api.errors import ApiError
from gread_client.models import CachedUserProfile
from gread_client.storage import PreferenceKeys, PreferenceStore

from .base import CachedManager, utcnow


class UserProfileManager(CachedManager):
    cache_keys = (PreferenceKeys.USER_PROFILES,)

    def __init__(self, api: GReadApiClient, store: PreferenceStore) -> None:
        super().__init__(api, store)
        self.cached_profiles: Dict[int, CachedUserProfile] = {}
        self._load_from_cache()

    async def load_profile_if_needed(self, user_id: int) -> Optional[CachedUserProfile]:
        cached = self.cached_profiles.get(user_id)
        if cached is not None:
            return cached
        return await self.load_profile(user_id)

    async def load_profile(self, user_id: int) -> Optional[CachedUserProfile]:
        """Fetch everything about a member.

        The basic member record is required and None is returned without it.
        Profile, xprofile fields, stats and friends are each optional.
        """
        try:
            user = await self.api.get_member(user_id)
        except ApiError as e:
            self._logger.error("Failed to load member %s: %s", user_id, e)
            return None

        profile = CachedUserProfile(user_id=user_id, user=user)

        try:
            profile.user_profile = await self.api.get_user_profile(user_id)
        except ApiError as e:
            self._logger.debug("No extended profile for %s: %s", user_id, e)

        try:
            fields = await self.api.get_user_xprofile_fields(user_id)
            profile.xprofile_fields = [f for f in fields if f.id != 0]
        except ApiError as e:
            self._logger.debug("No xprofile fields for %s: %s", user_id, e)

        try:
            profile.user_stats = await self.api.get_user_stats(user_id)
        except ApiError as e:
            self._logger.debug("No stats for %s: %s", user_id, e)

        try:
            profile.friends = (await self.api.get_friends(user_id)).friends
        except ApiError as e:
            self._logger.debug("No friends list for %s: %s", user_id, e)

        profile.last_load_time = utcnow()
        self.cached_profiles[user_id] = profile
        self._save_to_cache()
        return profile

    def clear_cache(self) -> None:
        self.cached_profiles.clear()
        self._drop_keys()

    def _save_to_cache(self) -> None:
        self.store.set_model(PreferenceKeys.USER_PROFILES, self.cached_profiles)

    def _load_from_cache(self) -> None:
        cached = self.store.get_model(PreferenceKeys.USER_PROFILES, Dict[int, CachedUserProfile])
        if cached:
            self.cached_profiles = cached
