"""Shared plumbing for the per-feature cache managers."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Optional, Tuple

from gread_client.api.client import GReadApiClient
from gread_client.storage import PreferenceStore


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CachedManager(ABC):
    """A manager whose state is mirrored into the preference store.

    Subclasses list the keys they own in `cache_keys`; `clear_cache` must
    reset in-memory state and drop those keys.
    """

    cache_keys: Tuple[str, ...] = ()

    def __init__(self, api: GReadApiClient, store: PreferenceStore) -> None:
        self.api = api
        self.store = store
        self._logger = logging.getLogger(type(self).__module__)

    @abstractmethod
    def clear_cache(self) -> None:
        """Reset in-memory state and remove the persisted snapshot."""

    def _drop_keys(self) -> None:
        for key in self.cache_keys:
            self.store.delete(key)

    def _read_time(self, key: str) -> Optional[datetime]:
        return self.store.get_model(key, datetime)

    def _write_time(self, key: str, value: Optional[datetime]) -> None:
        if value is not None:
            self.store.set_json(key, value)

    def cached_size(self) -> int:
        """Bytes currently persisted under this manager's keys."""
        return sum(self.store.size_of(key) for key in self.cache_keys)
