"""Help guides, cached so the dashboard can show them offline."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from gread_client.api.client import GReadApiClient
from gread_client.api.errors import ApiError
from gread_client.models import Guide
from gread_client.storage import PreferenceKeys, PreferenceStore

from .base import CachedManager, utcnow

FEATURED_GUIDE_COUNT = 3


class GuidesManager(CachedManager):
    cache_keys = (PreferenceKeys.GUIDES, PreferenceKeys.GUIDES_LOAD_TIME)

    def __init__(self, api: GReadApiClient, store: PreferenceStore) -> None:
        super().__init__(api, store)
        self.guides: List[Guide] = []
        self.is_loading = False
        self.last_load_time: Optional[datetime] = None
        self._has_loaded_once = False
        self._load_from_cache()

    @property
    def featured_guides(self) -> List[Guide]:
        return self.guides[:FEATURED_GUIDE_COUNT]

    async def load_guides_if_needed(self) -> None:
        if self._has_loaded_once:
            self._logger.debug("Guides already cached, skipping reload")
            return
        await self.load_guides()

    async def load_guides(self) -> None:
        if self.is_loading:
            self._logger.debug("Guides already loading, skipping duplicate request")
            return
        self.is_loading = True
        try:
            guides = await self.api.get_guides()
        except ApiError as e:
            self._logger.warning("Failed to load guides: %s", e)
            return
        finally:
            self.is_loading = False

        self.guides = sorted(guides, key=lambda g: g.order)
        self.last_load_time = utcnow()
        self._has_loaded_once = True
        self._save_to_cache()

    def clear_cache(self) -> None:
        self.guides = []
        self._has_loaded_once = False
        self.last_load_time = None
        self._drop_keys()

    def _save_to_cache(self) -> None:
        self.store.set_model(PreferenceKeys.GUIDES, self.guides)
        self._write_time(PreferenceKeys.GUIDES_LOAD_TIME, self.last_load_time)

    def _load_from_cache(self) -> None:
        cached = self.store.get_model(PreferenceKeys.GUIDES, List[Guide])
        if cached is not None:
            self.guides = cached
            self._has_loaded_once = True
        self.last_load_time = self._read_time(PreferenceKeys.GUIDES_LOAD_TIME)
