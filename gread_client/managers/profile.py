"""The signed-in member's own profile and extended profile fields."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from gread_client.api.client import GReadApiClient
from gread_client.api.errors import ApiError
from gread_client.models import UserProfile, XProfileField
from gread_client.storage import PreferenceKeys, PreferenceStore

from .base import CachedManager, utcnow


class ProfileManager(CachedManager):
    cache_keys = (
        PreferenceKeys.USER_PROFILE,
        PreferenceKeys.XPROFILE_FIELDS,
        PreferenceKeys.PROFILE_LOAD_TIME,
    )

    def __init__(self, api: GReadApiClient, store: PreferenceStore) -> None:
        super().__init__(api, store)
        self.user_profile: Optional[UserProfile] = None
        self.xprofile_fields: List[XProfileField] = []
        self.is_loading = False
        self.last_load_time: Optional[datetime] = None
        self._has_loaded_once = False
        self._load_from_cache()

    async def load_profile_if_needed(self) -> None:
        if self._has_loaded_once:
            return
        await self.load_profile()

    async def load_profile(self) -> None:
        if self.is_loading:
            return
        self.is_loading = True
        try:
            try:
                self.user_profile = await self.api.get_my_profile()
            except ApiError as e:
                self._logger.error("Failed to load profile: %s", e)

            # Extended fields are optional; some installs do not expose them
            try:
                fields = await self.api.get_xprofile_fields()
                self.xprofile_fields = sorted(fields, key=lambda f: f.order or 0)
            except ApiError as e:
                self._logger.warning("XProfile fields unavailable: %s", e)
        finally:
            self.is_loading = False

        self.last_load_time = utcnow()
        self._has_loaded_once = True
        self._save_to_cache()

    async def update_profile(
        self,
        *,
        display_name: Optional[str] = None,
        bio: Optional[str] = None,
        website: Optional[str] = None,
        location: Optional[str] = None,
    ) -> UserProfile:
        profile = await self.api.update_my_profile(
            display_name=display_name, bio=bio, website=website, location=location
        )
        self.user_profile = profile
        self._save_to_cache()
        return profile

    def clear_cache(self) -> None:
        self.user_profile = None
        self.xprofile_fields = []
        self._has_loaded_once = False
        self.last_load_time = None
        self._drop_keys()

    def _save_to_cache(self) -> None:
        if self.user_profile is not None:
            self.store.set_model(PreferenceKeys.USER_PROFILE, self.user_profile)
        self.store.set_model(PreferenceKeys.XPROFILE_FIELDS, self.xprofile_fields)
        self._write_time(PreferenceKeys.PROFILE_LOAD_TIME, self.last_load_time)

    def _load_from_cache(self) -> None:
        self.user_profile = self.store.get_model(PreferenceKeys.USER_PROFILE, UserProfile)
        self.xprofile_fields = self.store.get_model(PreferenceKeys.XPROFILE_FIELDS, List[XProfileField]) or []
        self.last_load_time = self._read_time(PreferenceKeys.PROFILE_LOAD_TIME)
