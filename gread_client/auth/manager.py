"""
Authentication and session lifecycle.

`AuthManager` owns every transition of the shared `SessionState`:

- username/password login against the JWT-auth plugin
- BuddyPress signup followed by an automatic login
- guest mode, logout and restoring a persisted session
- the two-phase Apple Sign In, where a first-time Apple account stays
  unauthenticated until a username has been chosen

Persisted state is limited to the bearer token and the user id; every failed
attempt leaves both untouched.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Optional

import httpx
from pydantic import ValidationError

from gread_client.api.client import GReadApiClient, Namespace
from gread_client.api.errors import ApiError, HttpStatusError, InvalidUrlError, NetworkError
from gread_client.core.session import PendingAppleSignup, SessionState
from gread_client.models import (
    AppleLoginResponse,
    AppleSignupCompletion,
    TokenResponse,
    User,
    UsernameAvailability,
    WordPressErrorPayload,
)
from gread_client.storage import PreferenceKeys, PreferenceStore

from .apple import AppleSignInResult
from .errors import (
    ACTIVATE_ACCOUNT_MESSAGE,
    EMAIL_TAKEN_MESSAGE,
    REGISTRATION_INVALID_MESSAGE,
    REGISTRATION_RETRY_MESSAGE,
    USERNAME_TAKEN_MESSAGE,
    VERIFY_ACCOUNT_MESSAGE,
    AuthError,
    AuthErrorKind,
)

_EMAIL_TAKEN_MARKERS = (
    "email is already registered",
    "email address is already in use",
    "sorry, that email address is already used!",
)
_USERNAME_TAKEN_MARKERS = (
    "sorry, that username already exists",
    "username is already in use",
)

LogoutHook = Callable[[], None]


@dataclass
class AppleSignInOutcome:
    """Result of the first Apple Sign In phase."""

    needs_username_selection: bool
    suggested_username: Optional[str] = None
    user: Optional[User] = None


def _json_or_none(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


def _is_success(response: httpx.Response) -> bool:
    return 200 <= response.status_code < 300


def _auth_error_from_api(error: ApiError) -> AuthError:
    if isinstance(error, NetworkError):
        return AuthError(AuthErrorKind.NETWORK_ERROR)
    if isinstance(error, HttpStatusError) and error.status_code is not None:
        return AuthError.http_error(error.status_code)
    return AuthError(AuthErrorKind.INVALID_RESPONSE, status_code=error.status_code)


def registration_error_message(payload: Any) -> str:
    """Map a 400/409 signup error body to the message shown to the user."""
    message: Optional[str] = None
    if isinstance(payload, dict):
        try:
            message = WordPressErrorPayload.model_validate(payload).best_message()
        except ValidationError:
            message = None
    if message:
        lowered = message.lower()
        if any(marker in lowered for marker in _EMAIL_TAKEN_MARKERS):
            return EMAIL_TAKEN_MESSAGE
        if any(marker in lowered for marker in _USERNAME_TAKEN_MARKERS):
            return USERNAME_TAKEN_MESSAGE
    return REGISTRATION_INVALID_MESSAGE


class AuthManager:
    def __init__(
        self,
        api: GReadApiClient,
        store: PreferenceStore,
        session: Optional[SessionState] = None,
    ) -> None:
        self.api = api
        self.store = store
        self.session = session or api.session
        # The client must read the token from the very same session object
        self.api.session = self.session
        self._logout_hooks: List[LogoutHook] = []
        self._logger = logging.getLogger(__name__)

    # ------------------------------------------------------------------
    # Session helpers
    # ------------------------------------------------------------------

    def add_logout_hook(self, hook: LogoutHook) -> None:
        self._logout_hooks.append(hook)

    def _save_auth_state(self) -> None:
        if self.session.jwt_token:
            self.store.set_json(PreferenceKeys.JWT_TOKEN, self.session.jwt_token)
        if self.session.user_id is not None:
            self.store.set_json(PreferenceKeys.USER_ID, self.session.user_id)

    def _mark_authenticated(self) -> None:
        self.session.is_authenticated = True
        self.session.is_guest_mode = False
        self.session.pending_apple_signup = None
        self._save_auth_state()

    async def _post(self, namespace: Namespace, endpoint: str, body: Any, *, token: Optional[str] = None) -> httpx.Response:
        try:
            url = self.api.build_url(namespace, endpoint)
        except InvalidUrlError as e:
            raise AuthError(AuthErrorKind.INVALID_RESPONSE) from e
        try:
            return await self.api.send("POST", url, body=body, authenticated=False, token=token)
        except NetworkError as e:
            self._logger.error("Auth request to %s failed: %s", endpoint, e)
            raise AuthError(AuthErrorKind.NETWORK_ERROR) from e

    # ------------------------------------------------------------------
    # Username / password
    # ------------------------------------------------------------------

    async def login(self, username: str, password: str) -> User:
        r = await self._post(Namespace.JWT_AUTH, "/token", {"username": username, "password": password})
        payload = _json_or_none(r)

        # The JWT plugin reports unverified or unknown accounts with a `code`
        if isinstance(payload, dict) and payload.get("code") is not None:
            self._logger.warning("JWT Error detected: %s", payload.get("message") or "Unknown error")
            raise AuthError.registration_failed(VERIFY_ACCOUNT_MESSAGE)

        if r.status_code in (401, 403):
            if isinstance(payload, dict) and payload.get("message"):
                self._logger.warning("JWT Error: %s", payload["message"])
                raise AuthError.registration_failed(VERIFY_ACCOUNT_MESSAGE)
            raise AuthError(AuthErrorKind.UNAUTHORIZED, status_code=r.status_code)

        if not _is_success(r):
            self._logger.error("JWT Auth failed with status: %s", r.status_code)
            raise AuthError.http_error(r.status_code)

        try:
            token = TokenResponse.model_validate(payload)
        except ValidationError as e:
            raise AuthError(AuthErrorKind.INVALID_RESPONSE, status_code=r.status_code) from e

        previous_token = self.session.jwt_token
        self.session.jwt_token = token.token
        try:
            user = await self.fetch_current_user()
        except ApiError as e:
            self._logger.error("Login succeeded but fetching the user failed: %s", e)
            self.session.jwt_token = previous_token
            raise _auth_error_from_api(e) from e

        self._mark_authenticated()
        self._logger.info("Logged in as user %s", user.id)
        return user

    async def register(self, username: str, email: str, password: str) -> User:
        body = {
            "user_login": username,
            "user_email": email,
            "password": password,
            "signup_field_data": [{"field_id": 1, "value": username}],
        }
        r = await self._post(Namespace.BUDDYPRESS, "/signup", body)

        if r.status_code in (400, 409):
            message = registration_error_message(_json_or_none(r))
            self._logger.warning("Registration rejected (%s): %s", r.status_code, message)
            raise AuthError.registration_failed(message)

        if not _is_success(r):
            self._logger.error("Registration failed with status: %s", r.status_code)
            raise AuthError.registration_failed(REGISTRATION_RETRY_MESSAGE)

        try:
            return await self.login(username, password)
        except AuthError as e:
            if e.kind is AuthErrorKind.UNAUTHORIZED:
                raise AuthError.registration_failed(ACTIVATE_ACCOUNT_MESSAGE) from e
            raise

    async def fetch_current_user(self) -> User:
        """Resolve the signed-in member, then load the full record (with avatars)."""
        basic = await self.api.get_current_user()
        full = await self.api.get_member(basic.id)
        self.session.current_user = full
        return full

    # ------------------------------------------------------------------
    # Mode switches
    # ------------------------------------------------------------------

    def enter_guest_mode(self) -> None:
        self.session.is_guest_mode = True
        self.session.is_authenticated = False

    def logout(self) -> None:
        self.session.reset()
        self.store.delete(PreferenceKeys.JWT_TOKEN)
        self.store.delete(PreferenceKeys.USER_ID)
        for hook in self._logout_hooks:
            hook()
        self._logger.info("Logged out")

    async def restore_session(self) -> bool:
        """Re-authenticate from the persisted token.

        Returns True when the stored token still resolves to a member; an
        expired token logs out.
        """
        token = self.store.get_json(PreferenceKeys.JWT_TOKEN)
        if not isinstance(token, str) or not token:
            return False
        self.session.jwt_token = token
        self.session.is_authenticated = True
        try:
            await self.fetch_current_user()
        except ApiError as e:
            self._logger.warning("Stored session is no longer valid: %s", e)
            self.logout()
            return False
        return True

    # ------------------------------------------------------------------
    # Apple Sign In
    # ------------------------------------------------------------------

    async def sign_in_with_apple(self, result: AppleSignInResult) -> AppleSignInOutcome:
        self._logger.debug("Apple login for identifier %s", result.user_identifier)
        r = await self._post(Namespace.CUSTOM, "/apple-login", result.to_login_body())

        if not _is_success(r):
            if r.status_code == 404:
                raise AuthError(AuthErrorKind.USER_NOT_FOUND, status_code=404)
            self._logger.error("Apple login failed with status: %s", r.status_code)
            raise AuthError.http_error(r.status_code)

        try:
            response = AppleLoginResponse.model_validate(_json_or_none(r))
        except ValidationError as e:
            raise AuthError(AuthErrorKind.INVALID_RESPONSE, status_code=r.status_code) from e

        if response.needs_username_selection:
            self.session.pending_apple_signup = PendingAppleSignup(
                token=response.token,
                user_id=response.user_id,
                suggested_username=response.suggested_username,
            )
            self.session.is_authenticated = False
            self._logger.info("Apple account needs a username before sign in completes")
            return AppleSignInOutcome(needs_username_selection=True, suggested_username=response.suggested_username)

        self.session.jwt_token = response.token
        self.session.current_user = User(
            id=response.user_id or 0,
            name=response.user_display_name or "User",
        )
        self._mark_authenticated()
        await self._refresh_user_quietly()
        return AppleSignInOutcome(needs_username_selection=False, user=self.session.current_user)

    async def check_username(self, username: str) -> UsernameAvailability:
        try:
            return await self.api.request(
                "/check-username",
                UsernameAvailability,
                method="POST",
                body={"username": username},
                authenticated=False,
                namespace=Namespace.CUSTOM,
            )
        except ApiError as e:
            raise _auth_error_from_api(e) from e

    async def complete_apple_signup(self, username: str) -> User:
        pending = self.session.pending_apple_signup
        if pending is None:
            raise AuthError(AuthErrorKind.USERNAME_SELECTION_REQUIRED)

        r = await self._post(Namespace.CUSTOM, "/complete-apple-signup", {"username": username}, token=pending.token)

        if r.status_code in (400, 409):
            raise AuthError.registration_failed(USERNAME_TAKEN_MESSAGE)
        if not _is_success(r):
            self._logger.error("Completing Apple signup failed with status: %s", r.status_code)
            raise AuthError.http_error(r.status_code)

        try:
            completion = AppleSignupCompletion.model_validate(_json_or_none(r))
        except ValidationError as e:
            raise AuthError(AuthErrorKind.INVALID_RESPONSE, status_code=r.status_code) from e
        if not completion.success:
            raise AuthError.registration_failed(REGISTRATION_RETRY_MESSAGE)

        self.session.jwt_token = pending.token
        self.session.current_user = User(
            id=completion.user_id or pending.user_id or 0,
            name=completion.username,
            user_login=completion.username,
        )
        self._mark_authenticated()
        await self._refresh_user_quietly()
        return self.session.current_user

    def cancel_apple_signup(self) -> None:
        self.session.pending_apple_signup = None

    async def _refresh_user_quietly(self) -> None:
        try:
            await self.fetch_current_user()
        except ApiError as e:
            self._logger.warning("Could not fetch full user profile after Apple sign in: %s", e)
