"""
SQL-backed preference store.

Uses a synchronous SQLModel session per operation. The table is created on
construction; there are no migrations for this single-table schema.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine, select

from .base import PreferenceStore
from .entities import PreferenceEntry

logger = logging.getLogger(__name__)

_IN_MEMORY_SQLITE_URLS = ("sqlite://", "sqlite:///:memory:")


def create_preference_engine(url: str) -> Engine:
    """Create the engine for ``url``.

    In-memory SQLite needs a single shared connection, otherwise every session
    would see its own empty database.
    """
    if url in _IN_MEMORY_SQLITE_URLS:
        return create_engine(url, connect_args={"check_same_thread": False}, poolclass=StaticPool)
    if url.startswith("sqlite"):
        return create_engine(url, connect_args={"check_same_thread": False})
    return create_engine(url, pool_pre_ping=True)


class SqlPreferenceStore(PreferenceStore):
    def __init__(self, url: str, *, engine: Optional[Engine] = None) -> None:
        self.url = url
        self._engine = engine or create_preference_engine(url)
        SQLModel.metadata.create_all(self._engine, tables=[PreferenceEntry.__table__])
        logger.debug("Preference store ready at %s", self._engine.url.render_as_string(hide_password=True))

    def get_raw(self, key: str) -> Optional[str]:
        with Session(self._engine) as session:
            entry = session.get(PreferenceEntry, key)
            return entry.value if entry else None

    def set_raw(self, key: str, value: str) -> None:
        with Session(self._engine) as session:
            entry = session.get(PreferenceEntry, key)
            if entry is None:
                entry = PreferenceEntry(key=key, value=value)
            else:
                entry.value = value
                entry.updated_at = datetime.now(timezone.utc)
            session.add(entry)
            session.commit()

    def delete(self, key: str) -> None:
        with Session(self._engine) as session:
            entry = session.get(PreferenceEntry, key)
            if entry is not None:
                session.delete(entry)
                session.commit()

    def keys(self) -> List[str]:
        with Session(self._engine) as session:
            return list(session.exec(select(PreferenceEntry.key)).all())

    def clear(self) -> None:
        with Session(self._engine) as session:
            for entry in session.exec(select(PreferenceEntry)).all():
                session.delete(entry)
            session.commit()

    def close(self) -> None:
        self._engine.dispose()
