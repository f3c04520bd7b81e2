from __future__ import annotations

import json
import logging
import typing
from enum import Enum
from typing import Any, Dict, List, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError

from gread_client.core.session import SessionState
from gread_client.models import (
    Achievement,
    ActivityResponse,
    BlockedListResponse,
    Book,
    BookNote,
    BookSearchResponse,
    CosmeticUnlock,
    FriendRequestResponse,
    FriendsListResponse,
    Guide,
    LeaderboardEntry,
    LibraryItem,
    ModerationResponse,
    MutedListResponse,
    PendingRequestsResponse,
    User,
    UserAchievementsResponse,
    UserCosmetics,
    UserProfile,
    UserStats,
    XProfileField,
    XProfileFieldList,
)
from gread_client.models.activity import Activity
from gread_client.models.profile import ProfileUpdateRequest

from .errors import (
    DecodeError,
    EmptyResponseError,
    HttpStatusError,
    InvalidUrlError,
    NetworkError,
)

T = TypeVar("T")

# Bodies WordPress plugins return when a collection is empty
_EMPTY_BODIES = ("", "false", "[]")
_LOG_BODY_PREFIX = 500


class Namespace(str, Enum):
    BUDDYPRESS = "buddypress/v1"
    GREAD = "gread/v1"
    JWT_AUTH = "jwt-auth/v1"
    CUSTOM = "custom/v1"


def _is_list_type(response_type: Any) -> bool:
    origin = typing.get_origin(response_type)
    return response_type is list or origin in (list, List)


def _empty_collection(response_type: Any) -> Any:
    """The value an empty body decodes to, or None when `response_type` is not a collection.

    Wrapper models count as collections when they validate from an empty list.
    """
    if _is_list_type(response_type):
        return []
    if isinstance(response_type, type) and issubclass(response_type, BaseModel):
        try:
            return response_type.model_validate([])
        except ValidationError:
            return None
    return None


class GReadApiClient:
    """
    Thin async HTTP client for the GRead WordPress/BuddyPress REST API.

    Responsibilities:
    - build namespaced URLs under ``/wp-json``
    - attach the bearer JWT from the shared `SessionState`
    - decode JSON into pydantic models, treating ``false``/empty bodies as
      empty collections for list-typed endpoints

    Note: This client does not cache or retry. Caching lives in the managers.
    """

    def __init__(
        self,
        base_url: str = "https://gread.fun",
        *,
        session: Optional[SessionState] = None,
        timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.session = session or SessionState()
        self._client = client or httpx.AsyncClient(timeout=timeout, follow_redirects=True)
        self._logger = logging.getLogger(__name__)

    async def aclose(self) -> None:
        await self._client.aclose()

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def build_url(self, namespace: Namespace | str, endpoint: str) -> str:
        ns = namespace.value if isinstance(namespace, Namespace) else namespace
        url = f"{self.base_url}/wp-json/{ns.strip('/')}{endpoint}"
        if not endpoint.startswith("/"):
            raise InvalidUrlError(url)
        try:
            parsed = httpx.URL(url)
        except httpx.InvalidURL as e:
            raise InvalidUrlError(url) from e
        if parsed.scheme not in ("http", "https") or not parsed.host:
            raise InvalidUrlError(url)
        return url

    def _headers(self, authenticated: bool, token: Optional[str]) -> Dict[str, str]:
        headers: Dict[str, str] = {"Content-Type": "application/json"}
        bearer = token or (self.session.jwt_token if authenticated else None)
        if bearer:
            headers["Authorization"] = f"Bearer {bearer}"
        return headers

    async def send(
        self,
        method: str,
        url: str,
        *,
        body: Optional[Any] = None,
        params: Optional[Dict[str, Any]] = None,
        authenticated: bool = True,
        token: Optional[str] = None,
    ) -> httpx.Response:
        """Issue one request and return the raw response, whatever its status.

        ``token`` overrides the session token; the Apple signup completion
        uses it to authorize with a token that is not yet a session.
        """
        clean_params = {k: _param(v) for k, v in (params or {}).items() if v is not None}
        try:
            r = await self._client.request(
                method,
                url,
                headers=self._headers(authenticated, token),
                params=clean_params or None,
                content=json.dumps(body).encode("utf-8") if body is not None else None,
            )
        except httpx.TransportError as e:
            self._logger.error("GReadApiClient.send: %s %s failed: %s", method, url, e)
            raise NetworkError(url, e) from e
        self._logger.debug(
            "GReadApiClient.send: %s %s params=%s -> %s body=%s",
            method,
            url,
            clean_params,
            r.status_code,
            r.text[:_LOG_BODY_PREFIX],
        )
        return r

    def decode(self, response: httpx.Response, response_type: Type[T] | Any, endpoint: str) -> T:
        if not 200 <= response.status_code < 300:
            self._logger.error("API Error: Status %s for %s", response.status_code, endpoint)
            raise HttpStatusError(response.status_code, details=response.text)

        text = response.text.strip()
        if text in _EMPTY_BODIES:
            empty = _empty_collection(response_type)
            if empty is not None:
                return typing.cast(T, empty)
            self._logger.warning("Empty response detected for %s", endpoint)
            raise EmptyResponseError(endpoint, status_code=response.status_code)

        try:
            data = json.loads(text)
        except ValueError as e:
            self._logger.error("Decoding error for %s: %s", endpoint, e)
            raise DecodeError(endpoint, e, status_code=response.status_code) from e
        try:
            return TypeAdapter(response_type).validate_python(data)
        except ValidationError as e:
            self._logger.error("Decoding error for %s: %s", endpoint, e)
            self._logger.debug("JSON structure: %s", json.dumps(data, indent=2)[:1000])
            raise DecodeError(endpoint, e, status_code=response.status_code) from e

    async def request(
        self,
        endpoint: str,
        response_type: Type[T] | Any,
        *,
        method: str = "GET",
        body: Optional[Any] = None,
        params: Optional[Dict[str, Any]] = None,
        authenticated: bool = True,
        namespace: Namespace | str = Namespace.BUDDYPRESS,
    ) -> T:
        url = self.build_url(namespace, endpoint)
        r = await self.send(method, url, body=body, params=params, authenticated=authenticated)
        return self.decode(r, response_type, endpoint)

    async def custom_request(
        self,
        endpoint: str,
        response_type: Type[T] | Any,
        *,
        method: str = "GET",
        body: Optional[Any] = None,
        params: Optional[Dict[str, Any]] = None,
        authenticated: bool = True,
    ) -> T:
        """Same as `request` but against the ``gread/v1`` namespace."""
        return await self.request(
            endpoint,
            response_type,
            method=method,
            body=body,
            params=params,
            authenticated=authenticated,
            namespace=Namespace.GREAD,
        )

    async def execute(
        self,
        endpoint: str,
        *,
        method: str = "POST",
        body: Optional[Any] = None,
        params: Optional[Dict[str, Any]] = None,
        authenticated: bool = True,
        namespace: Namespace | str = Namespace.GREAD,
    ) -> Optional[Any]:
        """Run a mutation whose body the caller does not need.

        Only the status is checked; the parsed JSON body (if any) is returned.
        """
        url = self.build_url(namespace, endpoint)
        r = await self.send(method, url, body=body, params=params, authenticated=authenticated)
        if not 200 <= r.status_code < 300:
            self._logger.error("API Error: Status %s for %s", r.status_code, endpoint)
            raise HttpStatusError(r.status_code, details=r.text)
        try:
            return r.json() if r.content else None
        except ValueError:
            return None

    # ------------------------------------------------------------------
    # BuddyPress members and activity
    # ------------------------------------------------------------------

    async def get_current_user(self) -> User:
        return await self.request("/members/me", User, authenticated=True)

    async def get_member(self, user_id: int) -> User:
        return await self.request(f"/members/{user_id}", User, authenticated=False)

    async def get_members(
        self, *, page: int = 1, per_page: int = 20, search: Optional[str] = None, type: str = "active"
    ) -> List[User]:
        params = {"page": page, "per_page": per_page, "type": type, "search": search}
        return await self.request("/members", List[User], params=params, authenticated=False)

    async def get_activity(
        self,
        *,
        page: int = 1,
        per_page: int = 20,
        user_id: Optional[int] = None,
        type: Optional[str] = None,
        scope: Optional[str] = None,
    ) -> List[Activity]:
        params = {"page": page, "per_page": per_page, "user_id": user_id, "type": type, "scope": scope}
        response = await self.request("/activity", ActivityResponse, params=params, authenticated=False)
        return response.activities

    async def get_xprofile_fields(self, *, page: int = 1, per_page: int = 20) -> List[XProfileField]:
        params = {"page": page, "per_page": per_page}
        return await self.request("/xprofile/fields", List[XProfileField], params=params, authenticated=False)

    # ------------------------------------------------------------------
    # Stats and achievements
    # ------------------------------------------------------------------

    async def get_user_stats(self, user_id: int) -> UserStats:
        return await self.custom_request(f"/user/{user_id}/stats", UserStats)

    async def get_user_achievements(self, user_id: int, *, filter: str = "all") -> UserAchievementsResponse:
        return await self.custom_request(
            f"/user/{user_id}/achievements",
            UserAchievementsResponse,
            params={"filter": filter},
            authenticated=False,
        )

    async def get_my_achievements(self, *, filter: str = "all") -> UserAchievementsResponse:
        return await self.custom_request("/me/achievements", UserAchievementsResponse, params={"filter": filter})

    async def get_all_achievements(self, *, show_hidden: bool = False) -> List[Achievement]:
        return await self.custom_request(
            "/achievements", List[Achievement], params={"show_hidden": show_hidden}, authenticated=False
        )

    async def check_and_unlock_achievements(self) -> UserAchievementsResponse:
        return await self.custom_request("/me/achievements/check", UserAchievementsResponse, method="POST")

    async def get_achievements_leaderboard(self, *, limit: int = 10, offset: int = 0) -> List[LeaderboardEntry]:
        return await self.custom_request(
            "/achievements/leaderboard",
            List[LeaderboardEntry],
            params={"limit": limit, "offset": offset},
            authenticated=False,
        )

    # ------------------------------------------------------------------
    # Library
    # ------------------------------------------------------------------

    async def get_library(self) -> List[LibraryItem]:
        return await self.custom_request("/library", List[LibraryItem])

    async def add_to_library(self, book_id: int) -> None:
        await self.execute("/library/add", method="POST", body={"book_id": book_id}, params={"book_id": book_id})

    async def remove_from_library(self, book_id: int) -> None:
        await self.execute("/library/remove", method="DELETE", params={"book_id": book_id})

    async def update_reading_progress(self, book_id: int, current_page: int) -> None:
        await self.execute(
            "/library/progress",
            method="POST",
            body={"current_page": current_page},
            params={"book_id": book_id, "current_page": current_page},
        )

    # ------------------------------------------------------------------
    # Books
    # ------------------------------------------------------------------

    async def get_book(self, book_id: int) -> Book:
        return await self.custom_request(f"/book/{book_id}", Book, authenticated=False)

    async def search_books(self, query: str, *, page: int = 1, per_page: int = 20) -> List[Book]:
        response = await self.custom_request(
            "/books/search",
            BookSearchResponse,
            params={"query": query, "page": page, "per_page": per_page},
            authenticated=False,
        )
        return response.books

    async def search_books_by_isbn(self, isbn: str) -> List[Book]:
        return await self.custom_request("/books/isbn", List[Book], params={"isbn": isbn}, authenticated=False)

    async def get_book_notes(self, book_id: int) -> List[BookNote]:
        return await self.custom_request(f"/books/{book_id}/notes", List[BookNote])

    async def create_book_note(
        self, book_id: int, note: str, *, page: Optional[int] = None, is_public: bool = False
    ) -> BookNote:
        body: Dict[str, Any] = {"note": note, "is_public": is_public}
        if page is not None:
            body["page"] = page
        return await self.custom_request(f"/books/{book_id}/notes", BookNote, method="POST", body=body)

    # ------------------------------------------------------------------
    # Guides
    # ------------------------------------------------------------------

    async def get_guides(self) -> List[Guide]:
        return await self.request("/guides", List[Guide], authenticated=False)

    # ------------------------------------------------------------------
    # Profiles and friends
    # ------------------------------------------------------------------

    async def get_my_profile(self) -> UserProfile:
        payload = await self.custom_request("/me/profile", Any)
        return self._unwrap(payload, UserProfile, "/me/profile")

    async def update_my_profile(
        self,
        *,
        display_name: Optional[str] = None,
        bio: Optional[str] = None,
        website: Optional[str] = None,
        location: Optional[str] = None,
    ) -> UserProfile:
        update = ProfileUpdateRequest(display_name=display_name, bio=bio, website=website, location=location)
        payload = await self.custom_request(
            "/me/profile", Any, method="PUT", body=update.model_dump(exclude_none=True)
        )
        return self._unwrap(payload, UserProfile, "/me/profile")

    async def get_user_profile(self, user_id: int) -> UserProfile:
        endpoint = f"/user/{user_id}/profile"
        payload = await self.custom_request(endpoint, Any, authenticated=False)
        return self._unwrap(payload, UserProfile, endpoint)

    async def get_user_xprofile_fields(self, user_id: int) -> List[XProfileField]:
        response = await self.custom_request(f"/user/{user_id}/xprofile", XProfileFieldList, authenticated=False)
        return response.items

    async def get_friends(self, user_id: int) -> FriendsListResponse:
        return await self.custom_request(f"/friends/{user_id}", FriendsListResponse, authenticated=False)

    async def get_pending_friend_requests(self) -> PendingRequestsResponse:
        return await self.custom_request("/friends/requests/pending", PendingRequestsResponse)

    async def send_friend_request(self, friend_id: int) -> FriendRequestResponse:
        return await self.custom_request(
            "/friends/request", FriendRequestResponse, method="POST", body={"friend_id": friend_id}
        )

    async def accept_friend_request(self, request_id: int) -> FriendRequestResponse:
        return await self.custom_request(f"/friends/request/{request_id}/accept", FriendRequestResponse, method="POST")

    async def reject_friend_request(self, request_id: int) -> FriendRequestResponse:
        return await self.custom_request(f"/friends/request/{request_id}/reject", FriendRequestResponse, method="POST")

    async def remove_friend(self, friend_id: int) -> FriendRequestResponse:
        return await self.custom_request(f"/friends/{friend_id}/remove", FriendRequestResponse, method="POST")

    def _unwrap(self, payload: Any, model: Type[T], endpoint: str) -> T:
        # Profile endpoints wrap their body as {"success": true, "data": {...}}
        if isinstance(payload, dict) and "data" in payload and "success" in payload:
            payload = payload["data"]
        try:
            return TypeAdapter(model).validate_python(payload)
        except ValidationError as e:
            raise DecodeError(endpoint, e) from e

    # ------------------------------------------------------------------
    # Cosmetics
    # ------------------------------------------------------------------

    async def get_user_cosmetics(self) -> UserCosmetics:
        return await self.custom_request("/user/cosmetics", UserCosmetics)

    async def get_available_cosmetics(self) -> List[CosmeticUnlock]:
        return await self.custom_request("/cosmetics", List[CosmeticUnlock])

    async def set_active_theme(self, theme_id: str) -> UserCosmetics:
        return await self.custom_request(
            "/user/cosmetics/theme", UserCosmetics, method="POST", body={"theme_id": theme_id}
        )

    async def set_active_icon(self, icon_id: str) -> UserCosmetics:
        return await self.custom_request("/user/cosmetics/icon", UserCosmetics, method="POST", body={"icon_id": icon_id})

    async def check_and_unlock_cosmetics(self, stats: UserStats) -> List[CosmeticUnlock]:
        return await self.custom_request(
            "/user/check-unlocks", List[CosmeticUnlock], method="POST", body=stats.model_dump()
        )

    # ------------------------------------------------------------------
    # Moderation
    # ------------------------------------------------------------------

    async def block_user(self, user_id: int) -> ModerationResponse:
        return await self._moderate("/user/block", {"user_id": user_id})

    async def unblock_user(self, user_id: int) -> ModerationResponse:
        return await self._moderate("/user/unblock", {"user_id": user_id})

    async def mute_user(self, user_id: int) -> ModerationResponse:
        return await self._moderate("/user/mute", {"user_id": user_id})

    async def unmute_user(self, user_id: int) -> ModerationResponse:
        return await self._moderate("/user/unmute", {"user_id": user_id})

    async def report_user(self, user_id: int, reason: str) -> ModerationResponse:
        return await self._moderate("/user/report", {"user_id": user_id, "reason": reason})

    async def get_blocked_list(self) -> BlockedListResponse:
        return await self.custom_request("/user/blocked_list", BlockedListResponse)

    async def get_muted_list(self) -> MutedListResponse:
        return await self.custom_request("/user/muted_list", MutedListResponse)

    async def _moderate(self, endpoint: str, body: Dict[str, Any]) -> ModerationResponse:
        return await self.custom_request(endpoint, ModerationResponse, method="POST", body=body)


def _param(value: Any) -> str:
    if isinstance(value, bool):
        return str(value).lower()
    return str(value)


__all__ = ["GReadApiClient", "Namespace"]
