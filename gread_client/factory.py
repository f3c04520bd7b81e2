"""
Composition root.

`build_app` wires one `SessionState` through the API client, the auth
manager and every feature manager, and registers each manager's
`clear_cache` as a logout hook so signing out drops all cached data.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from gread_client.api.client import GReadApiClient
from gread_client.auth.manager import AuthManager
from gread_client.core.config import Settings, get_settings
from gread_client.core.logging_config import setup_logging
from gread_client.core.session import SessionState
from gread_client.managers import (
    CacheManager,
    CacheType,
    CosmeticsManager,
    DashboardManager,
    GuidesManager,
    LibraryManager,
    ProfileManager,
    UserProfileManager,
)
from gread_client.storage import PreferenceStore, build_store

logger = logging.getLogger(__name__)


@dataclass
class GReadApp:
    settings: Settings
    store: PreferenceStore
    session: SessionState
    api: GReadApiClient
    auth: AuthManager
    library: LibraryManager
    dashboard: DashboardManager
    profile: ProfileManager
    user_profiles: UserProfileManager
    cosmetics: CosmeticsManager
    guides: GuidesManager
    cache: CacheManager

    async def aclose(self) -> None:
        await self.api.aclose()
        self.store.close()


def build_app(
    settings: Optional[Settings] = None,
    *,
    store: Optional[PreferenceStore] = None,
    http_client: Optional[httpx.AsyncClient] = None,
    configure_logging: bool = True,
) -> GReadApp:
    settings = settings or get_settings()
    if configure_logging:
        log_cfg = settings.logging
        setup_logging(
            log_level=log_cfg.level,
            log_format=log_cfg.format,
            enable_file=log_cfg.enable_file,
            log_file_dir=log_cfg.file_dir,
        )

    api_cfg = settings.api
    storage_cfg = settings.storage
    store = store or build_store(storage_cfg.url)
    session = SessionState()
    api = GReadApiClient(api_cfg.base_url, session=session, timeout=api_cfg.timeout, client=http_client)
    auth = AuthManager(api, store, session)

    library = LibraryManager(api, store, session)
    dashboard = DashboardManager(api, store)
    profile = ProfileManager(api, store)
    user_profiles = UserProfileManager(api, store)
    cosmetics = CosmeticsManager(api, store)
    guides = GuidesManager(api, store)
    cache = CacheManager(
        store,
        {
            CacheType.LIBRARY: library,
            CacheType.DASHBOARD: dashboard,
            CacheType.PROFILE: profile,
            CacheType.USER_PROFILES: user_profiles,
            CacheType.GUIDES: guides,
            CacheType.COSMETICS: cosmetics,
        },
        default_max_size=storage_cfg.max_cache_size,
    )

    for manager in cache.managers.values():
        auth.add_logout_hook(manager.clear_cache)
    auth.add_logout_hook(cache.calculate_cache_size)

    logger.debug("GRead client wired for %s", api_cfg.base_url)
    return GReadApp(
        settings=settings,
        store=store,
        session=session,
        api=api,
        auth=auth,
        library=library,
        dashboard=dashboard,
        profile=profile,
        user_profiles=user_profiles,
        cosmetics=cosmetics,
        guides=guides,
        cache=cache,
    )
