"""Authentication payloads exchanged with the JWT-auth, signup and Apple login endpoints."""

from __future__ import annotations

from typing import Any, List, Optional

from pydantic import field_validator

from .base import BaseSchema, coerce_optional_int


class TokenResponse(BaseSchema):
    token: str
    user_email: Optional[str] = None
    user_nicename: Optional[str] = None
    user_display_name: Optional[str] = None


class WordPressErrorPayload(BaseSchema):
    """`WP_Error` as serialized by the REST API.

    The human readable text can sit at `message`, `data.message` or inside
    the first entry of `errors`.
    """

    code: Optional[str] = None
    message: Optional[str] = None
    data: Optional[Any] = None
    errors: Optional[Any] = None

    def best_message(self) -> Optional[str]:
        if self.message:
            return self.message
        if isinstance(self.data, dict) and isinstance(self.data.get("message"), str):
            return self.data["message"]
        if isinstance(self.errors, dict) and self.errors:
            first = next(iter(self.errors.values()))
            if isinstance(first, dict) and isinstance(first.get("message"), str):
                return first["message"]
            if isinstance(first, list) and first and isinstance(first[0], str):
                return first[0]
        return None


class AppleLoginResponse(BaseSchema):
    token: str
    user_id: Optional[int] = None
    user_email: Optional[str] = None
    user_display_name: Optional[str] = None
    needs_username_selection: bool = False
    suggested_username: Optional[str] = None

    @field_validator("user_id", mode="before")
    @classmethod
    def _user_id(cls, v: Any) -> Optional[int]:
        return coerce_optional_int(v)


class UsernameAvailability(BaseSchema):
    available: bool
    username: str


class AppleSignupCompletion(BaseSchema):
    success: bool
    username: str
    user_id: Optional[int] = None

    @field_validator("user_id", mode="before")
    @classmethod
    def _user_id(cls, v: Any) -> Optional[int]:
        return coerce_optional_int(v)


class ModerationResponse(BaseSchema):
    success: bool = False
    message: Optional[str] = None


class BlockedListResponse(BaseSchema):
    success: bool = False
    blocked_users: List[int] = []


class MutedListResponse(BaseSchema):
    success: bool = False
    muted_users: List[int] = []
