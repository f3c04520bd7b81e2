"""Key-value preference storage.

Every persisted value (the session token, cached library, dashboard and
profile snapshots, cosmetics selection) is stored as a JSON text blob under a
well-known key. Implementations only need to provide the raw string
operations; JSON and model (de)serialization live here.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from typing import Any, List, Optional, Type, TypeVar

from pydantic import TypeAdapter, ValidationError
from pydantic_core import to_jsonable_python

T = TypeVar("T")

logger = logging.getLogger(__name__)


class PreferenceKeys:
    """Storage keys shared by the auth layer and the managers."""

    JWT_TOKEN = "jwtToken"
    USER_ID = "userId"

    LIBRARY_ITEMS = "cachedLibraryItems"
    LIBRARY_LOAD_TIME = "cachedLibraryLoadTime"
    GUEST_LIBRARY_ITEMS = "guestLibraryItems"

    DASHBOARD_STATS = "cachedDashboardStats"
    DASHBOARD_ACTIVITY = "cachedDashboardActivity"
    DASHBOARD_ACHIEVEMENTS = "cachedDashboardAchievements"
    DASHBOARD_LOAD_TIME = "cachedDashboardLoadTime"

    USER_PROFILE = "cachedUserProfile"
    XPROFILE_FIELDS = "cachedXProfileFields"
    PROFILE_LOAD_TIME = "cachedProfileLoadTime"

    USER_PROFILES = "cachedUserProfiles"

    USER_COSMETICS = "userCosmetics"
    AVAILABLE_COSMETICS = "availableCosmetics"

    GUIDES = "cachedGuides"
    GUIDES_LOAD_TIME = "guidesLastLoadTime"

    MAX_CACHE_SIZE = "maxCacheSize"


class PreferenceStore(ABC):
    """Abstract named key-value store holding JSON text."""

    @abstractmethod
    def get_raw(self, key: str) -> Optional[str]:
        """Return the stored text for ``key`` or None when absent."""

    @abstractmethod
    def set_raw(self, key: str, value: str) -> None:
        """Create or replace ``key``."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove ``key``; a missing key is not an error."""

    @abstractmethod
    def keys(self) -> List[str]:
        """All keys currently stored."""

    def clear(self) -> None:
        for key in self.keys():
            self.delete(key)

    def close(self) -> None:
        return None

    def contains(self, key: str) -> bool:
        return self.get_raw(key) is not None

    def size_of(self, key: str) -> int:
        """Size in bytes of the UTF-8 encoded value, 0 when absent."""
        raw = self.get_raw(key)
        return len(raw.encode("utf-8")) if raw is not None else 0

    def get_json(self, key: str) -> Any:
        raw = self.get_raw(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError as e:
            logger.warning("Discarding unreadable value for key %s: %s", key, e)
            return None

    def set_json(self, key: str, value: Any) -> None:
        self.set_raw(key, json.dumps(to_jsonable_python(value, by_alias=True)))

    def get_model(self, key: str, model_type: Type[T] | Any) -> Optional[T]:
        """Load ``key`` and validate it as ``model_type``.

        Stale or corrupt snapshots are logged and reported as absent.
        """
        data = self.get_json(key)
        if data is None:
            return None
        try:
            return TypeAdapter(model_type).validate_python(data)
        except ValidationError as e:
            logger.warning("Cached value for key %s does not match %s: %s", key, model_type, e)
            return None

    def set_model(self, key: str, value: Any) -> None:
        self.set_json(key, value)
