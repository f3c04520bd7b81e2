"""
Cosmetic unlocks and selection.

Tracks which themes and icons the member has earned and which one is active.
Rendering a theme is up to the host application; this manager only decides
what is selectable and persists the choice.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from gread_client.api.client import GReadApiClient
from gread_client.api.errors import ApiError
from gread_client.models import AppTheme, CosmeticUnlock, UserCosmetics, UserStats
from gread_client.storage import PreferenceKeys, PreferenceStore

from .base import CachedManager

DEFAULT_THEME = AppTheme(
    id="default",
    name="Light",
    description="Fresh and bright light theme",
    primary_color="#6C5CE7",
    secondary_color="#A29BFE",
    accent_color="#FF6B9D",
    background_color="#FFFFFF",
    is_dark_theme=False,
)

DARK_THEME = AppTheme(
    id="dark",
    name="Dark",
    description="Easy on the eyes dark theme",
    primary_color="#A29BFE",
    secondary_color="#74B9FF",
    accent_color="#FF7675",
    background_color="#121212",
    is_dark_theme=True,
)

BUILT_IN_THEMES = (DEFAULT_THEME, DARK_THEME)


class CosmeticsManager(CachedManager):
    cache_keys = (PreferenceKeys.AVAILABLE_COSMETICS,)

    def __init__(self, api: GReadApiClient, store: PreferenceStore) -> None:
        super().__init__(api, store)
        self.themes: Dict[str, AppTheme] = {theme.id: theme for theme in BUILT_IN_THEMES}
        self.user_cosmetics = UserCosmetics()
        self.available_cosmetics: List[CosmeticUnlock] = []
        self._load_from_store()

    @property
    def current_theme(self) -> AppTheme:
        active = self.user_cosmetics.active_theme
        return self.themes.get(active or "", DEFAULT_THEME)

    def register_theme(self, theme: AppTheme) -> None:
        self.themes[theme.id] = theme

    def is_theme_unlocked(self, theme_id: str) -> bool:
        return theme_id == DEFAULT_THEME.id or theme_id in self.user_cosmetics.unlocked_cosmetics

    def is_icon_unlocked(self, icon_id: str) -> bool:
        return icon_id in self.user_cosmetics.unlocked_cosmetics

    def set_active_theme(self, theme_id: str) -> bool:
        """Select a known, unlocked theme. Returns False when the selection is refused."""
        if theme_id not in self.themes or not self.is_theme_unlocked(theme_id):
            self._logger.info("Theme %s is not available", theme_id)
            return False
        self.user_cosmetics.active_theme = theme_id
        self._save_user_cosmetics()
        return True

    def set_active_icon(self, icon_id: Optional[str]) -> bool:
        if icon_id is not None and not self.is_icon_unlocked(icon_id):
            return False
        self.user_cosmetics.active_icon = icon_id
        self._save_user_cosmetics()
        return True

    def check_and_unlock(self, stats: UserStats) -> List[str]:
        """Unlock every theme whose requirement `stats` now meets.

        Returns the ids unlocked by this call.
        """
        new_unlocks: List[str] = []
        for theme in self.themes.values():
            if theme.id in self.user_cosmetics.unlocked_cosmetics:
                continue
            requirement = theme.unlock_requirement
            if requirement is not None and requirement.is_met(stats):
                self.user_cosmetics.unlocked_cosmetics.append(theme.id)
                new_unlocks.append(theme.id)
        if new_unlocks:
            self._logger.info("New cosmetics unlocked: %s", ", ".join(new_unlocks))
            self._save_user_cosmetics()
        return new_unlocks

    async def refresh_available_cosmetics(self) -> None:
        try:
            cosmetics = await self.api.get_available_cosmetics()
        except ApiError as e:
            self._logger.warning("Failed to load available cosmetics: %s", e)
            return
        self.available_cosmetics = cosmetics
        for cosmetic in cosmetics:
            if cosmetic.theme is not None:
                self.register_theme(cosmetic.theme)
        self.store.set_model(PreferenceKeys.AVAILABLE_COSMETICS, cosmetics)

    def clear_cache(self) -> None:
        # The selection and earned unlocks are kept; only the server catalogue is cache
        self.available_cosmetics = []
        self.themes = {theme.id: theme for theme in BUILT_IN_THEMES}
        self._drop_keys()

    def _save_user_cosmetics(self) -> None:
        self.store.set_model(PreferenceKeys.USER_COSMETICS, self.user_cosmetics)

    def _load_from_store(self) -> None:
        cosmetics = self.store.get_model(PreferenceKeys.USER_COSMETICS, UserCosmetics)
        if cosmetics is not None:
            self.user_cosmetics = cosmetics
        available = self.store.get_model(PreferenceKeys.AVAILABLE_COSMETICS, List[CosmeticUnlock]) or []
        self.available_cosmetics = available
        for cosmetic in available:
            if cosmetic.theme is not None:
                self.register_theme(cosmetic.theme)
