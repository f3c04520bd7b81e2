"""Pydantic base schema utilities for GRead models.

Provides a common `BaseSchema` that every DTO and domain model under
`gread_client.models` derives from, plus small coercion helpers for the
loosely typed payloads WordPress and BuddyPress return.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict


class BaseSchema(BaseModel):
    """Shared base for all Pydantic models in gread_client.

    - Ignores unknown fields; the backend plugins add keys freely
    - Enables populate_by_name so wire aliases and field names both validate
    """

    model_config = ConfigDict(
        populate_by_name=True,
        extra="ignore",
    )


def coerce_int_or_zero(value: Any) -> int:
    """Accept ints and numeric strings; anything else becomes 0."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return 0
    return 0


def coerce_optional_int(value: Any) -> Optional[int]:
    """Like `coerce_int_or_zero` but keeps missing or unparsable values as None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None
