"""
Cache accounting across the feature managers.

Sizes are the byte length of the persisted JSON snapshots; the limit is a
simple threshold, exceeding it after lowering the limit clears everything.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Dict, Optional

from gread_client.storage import PreferenceKeys, PreferenceStore

from .base import CachedManager

DEFAULT_MAX_CACHE_SIZE = 100 * 1024 * 1024
APPROACHING_LIMIT_RATIO = 0.8

logger = logging.getLogger(__name__)


class CacheType(str, Enum):
    LIBRARY = "Library"
    DASHBOARD = "Dashboard"
    PROFILE = "Profile"
    USER_PROFILES = "User Profiles"
    GUIDES = "Guides"
    COSMETICS = "Cosmetics"


def format_bytes(size: int) -> str:
    """Render a byte count in KB or MB (decimal units)."""
    if size < 1000 * 1000:
        return f"{size / 1000:.1f} KB"
    return f"{size / (1000 * 1000):.1f} MB"


class CacheManager:
    def __init__(
        self,
        store: PreferenceStore,
        managers: Dict[CacheType, CachedManager],
        *,
        default_max_size: int = DEFAULT_MAX_CACHE_SIZE,
    ) -> None:
        self.store = store
        self.managers = managers
        saved = store.get_json(PreferenceKeys.MAX_CACHE_SIZE)
        self.max_cache_size: int = saved if isinstance(saved, int) and saved > 0 else default_max_size
        self.cache_size = 0
        self.calculate_cache_size()

    def calculate_cache_size(self) -> int:
        total = sum(manager.cached_size() for manager in self.managers.values())
        # The session token is counted too
        total += self.store.size_of(PreferenceKeys.JWT_TOKEN)
        self.cache_size = total
        logger.debug("Total cache size: %s", format_bytes(total))
        return total

    def get_cache_size(self, cache_type: CacheType) -> int:
        manager = self.managers.get(cache_type)
        return manager.cached_size() if manager else 0

    def clear_cache(self, cache_type: CacheType) -> None:
        logger.debug("Clearing %s cache", cache_type.value)
        manager: Optional[CachedManager] = self.managers.get(cache_type)
        if manager is not None:
            manager.clear_cache()
        self.calculate_cache_size()

    def clear_all_caches(self) -> None:
        for manager in self.managers.values():
            manager.clear_cache()
        self.calculate_cache_size()
        logger.info("All caches cleared")

    def set_max_cache_size(self, size: int) -> None:
        if size <= 0:
            raise ValueError(f"max cache size must be positive, got {size}")
        self.max_cache_size = size
        self.store.set_json(PreferenceKeys.MAX_CACHE_SIZE, size)
        logger.debug("Max cache size set to: %s", format_bytes(size))
        if self.cache_size > self.max_cache_size:
            logger.warning("Cache size exceeds new limit, clearing")
            self.clear_all_caches()

    @property
    def is_approaching_limit(self) -> bool:
        return self.cache_size / self.max_cache_size > APPROACHING_LIMIT_RATIO

    @property
    def usage_percentage(self) -> float:
        if self.max_cache_size <= 0:
            return 0.0
        return min(self.cache_size / self.max_cache_size, 1.0)

    format_bytes = staticmethod(format_bytes)
