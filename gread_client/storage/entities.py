"""
Database entity for persisted preferences.

One row per preference key; the value is the JSON text written by
`PreferenceStore.set_json`.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlmodel import Column, DateTime, Field, SQLModel, Text


class PreferenceEntry(SQLModel, table=True):
    """A single stored preference."""

    __tablename__ = "gr_preferences"

    key: str = Field(primary_key=True, max_length=255, description="Preference key")
    value: str = Field(sa_column=Column(Text, nullable=False), description="JSON encoded value")
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False),
        description="Last write timestamp",
    )
