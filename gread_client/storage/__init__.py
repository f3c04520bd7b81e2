"""Local persistence for session data and manager caches.

`build_store` picks the backend from a storage URL: ``memory`` gives a
process-local dict, anything else is treated as an SQLAlchemy URL.
"""

from __future__ import annotations

from .base import PreferenceKeys, PreferenceStore
from .memory import InMemoryPreferenceStore
from .sql import SqlPreferenceStore


def build_store(url: str) -> PreferenceStore:
    if url.strip().lower() == "memory":
        return InMemoryPreferenceStore()
    return SqlPreferenceStore(url)


__all__ = [
    "PreferenceKeys",
    "PreferenceStore",
    "InMemoryPreferenceStore",
    "SqlPreferenceStore",
    "build_store",
]
