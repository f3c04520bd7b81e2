"""In-process session state shared by the API client, auth layer and managers.

`SessionState` is the single injected object that answers "who is signed in
and with which bearer token". The API client reads the token from it on every
request, so swapping tokens never requires rebuilding the client.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from gread_client.models.user import User


@dataclass
class PendingAppleSignup:
    """An Apple account the backend created but which still needs a username."""

    token: str
    user_id: Optional[int] = None
    suggested_username: Optional[str] = None


@dataclass
class SessionState:
    jwt_token: Optional[str] = None
    current_user: Optional[User] = None
    is_authenticated: bool = False
    is_guest_mode: bool = False
    pending_apple_signup: Optional[PendingAppleSignup] = field(default=None)

    @property
    def user_id(self) -> Optional[int]:
        return self.current_user.id if self.current_user else None

    @property
    def needs_username_selection(self) -> bool:
        return self.pending_apple_signup is not None

    def reset(self) -> None:
        self.jwt_token = None
        self.current_user = None
        self.is_authenticated = False
        self.is_guest_mode = False
        self.pending_apple_signup = None
