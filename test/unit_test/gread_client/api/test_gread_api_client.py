from __future__ import annotations

from typing import List

import httpx
import pytest

from gread_client.api.client import GReadApiClient, Namespace
from gread_client.api.errors import (
    DecodeError,
    EmptyResponseError,
    HttpStatusError,
    InvalidUrlError,
    NetworkError,
)
from gread_client.core.session import SessionState
from gread_client.models import LibraryItem, User, UserStats

GREAD = "/wp-json/gread/v1"
BP = "/wp-json/buddypress/v1"


def test_build_url_joins_namespace_and_endpoint(api: GReadApiClient) -> None:
    assert api.build_url(Namespace.GREAD, "/library") == "http://mock/wp-json/gread/v1/library"
    assert api.build_url("buddypress/v1", "/members/me") == "http://mock/wp-json/buddypress/v1/members/me"


def test_build_url_rejects_relative_endpoint_and_bad_base() -> None:
    client = GReadApiClient("http://mock")
    with pytest.raises(InvalidUrlError):
        client.build_url(Namespace.GREAD, "library")

    no_scheme = GReadApiClient("gread.fun")
    with pytest.raises(InvalidUrlError):
        no_scheme.build_url(Namespace.GREAD, "/library")


@pytest.mark.asyncio
async def test_false_body_decodes_to_empty_list_for_list_endpoints(api: GReadApiClient, backend) -> None:
    backend.add("GET", f"{GREAD}/library", text="false")
    assert await api.get_library() == []


@pytest.mark.asyncio
@pytest.mark.parametrize("body", ["", "  false \n", "[]"])
async def test_empty_bodies_decode_to_empty_list(api: GReadApiClient, backend, body: str) -> None:
    backend.add("GET", f"{GREAD}/library", text=body)
    items = await api.custom_request("/library", List[LibraryItem])
    assert items == []


@pytest.mark.asyncio
async def test_false_body_for_single_object_raises_empty_response(api: GReadApiClient, backend) -> None:
    backend.add("GET", f"{GREAD}/user/3/stats", text="false")
    with pytest.raises(EmptyResponseError) as exc:
        await api.get_user_stats(3)
    assert str(exc.value) == "No data available"


@pytest.mark.asyncio
async def test_non_2xx_raises_http_status_error(api: GReadApiClient, backend) -> None:
    backend.add("GET", f"{GREAD}/user/3/stats", status=500, json={"message": "boom"})
    with pytest.raises(HttpStatusError) as exc:
        await api.get_user_stats(3)
    assert exc.value.status_code == 500
    assert "boom" in exc.value.details


@pytest.mark.asyncio
async def test_invalid_json_and_schema_mismatch_raise_decode_error(api: GReadApiClient, backend) -> None:
    backend.add("GET", f"{GREAD}/user/3/stats", text="<html>not json</html>")
    with pytest.raises(DecodeError):
        await api.get_user_stats(3)

    backend.add("GET", f"{BP}/members/4", json={"name": "no id"})
    with pytest.raises(DecodeError):
        await api.get_member(4)


@pytest.mark.asyncio
async def test_transport_failure_raises_network_error(session: SessionState) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    api = GReadApiClient("http://mock", session=session, client=client)
    with pytest.raises(NetworkError):
        await api.get_library()


@pytest.mark.asyncio
async def test_bearer_token_comes_from_session(api: GReadApiClient, backend, session: SessionState) -> None:
    backend.add("GET", f"{BP}/members/me", json={"id": 7, "name": "Reader"})
    backend.add("GET", f"{BP}/members/7", json={"id": "7", "name": "Reader"})

    session.jwt_token = "jwt-abc"
    me = await api.get_current_user()
    member = await api.get_member(me.id)

    assert isinstance(member, User) and member.id == 7
    me_request, member_request = backend.requests
    assert me_request.headers["Authorization"] == "Bearer jwt-abc"
    assert me_request.headers["Content-Type"] == "application/json"
    # Member lookups are public
    assert "Authorization" not in member_request.headers


@pytest.mark.asyncio
async def test_no_authorization_header_without_token(api: GReadApiClient, backend) -> None:
    backend.add("GET", f"{GREAD}/library", json=[])
    await api.get_library()
    assert "Authorization" not in backend.requests[0].headers


@pytest.mark.asyncio
async def test_library_mutations_send_query_parameters(api: GReadApiClient, backend) -> None:
    backend.add("POST", f"{GREAD}/library/add", json={"success": True})
    backend.add("DELETE", f"{GREAD}/library/remove", text="")
    backend.add("POST", f"{GREAD}/library/progress", text="false")

    await api.add_to_library(12)
    await api.remove_from_library(12)
    await api.update_reading_progress(12, 40)

    add, remove, progress = backend.requests
    assert add.url.params["book_id"] == "12"
    assert backend.body(add) == {"book_id": 12}
    assert remove.method == "DELETE" and remove.url.params["book_id"] == "12"
    assert progress.url.params["book_id"] == "12"
    assert progress.url.params["current_page"] == "40"
    assert backend.body(progress) == {"current_page": 40}


@pytest.mark.asyncio
async def test_mutation_failure_raises(api: GReadApiClient, backend) -> None:
    backend.add("POST", f"{GREAD}/library/add", status=403, json={"code": "forbidden"})
    with pytest.raises(HttpStatusError):
        await api.add_to_library(1)


@pytest.mark.asyncio
async def test_library_items_decode_with_book_aliases(api: GReadApiClient, backend) -> None:
    backend.add(
        "GET",
        f"{GREAD}/library",
        json=[
            {
                "id": 1,
                "user_id": 7,
                "status": "reading",
                "current_page": 10,
                "progress_percentage": 5.0,
                "book": {"id": 99, "title": "Dune", "content": "Spice", "page_count": 200, "isbn": "978-0-441"},
            }
        ],
    )
    (item,) = await api.get_library()
    assert item.book_id == 99
    assert item.book.description == "Spice"
    assert item.book.total_pages == 200
    assert item.book.effective_cover_url == "https://covers.openlibrary.org/b/isbn/9780441-M.jpg"


@pytest.mark.asyncio
async def test_activity_accepts_bare_list(api: GReadApiClient, backend) -> None:
    backend.add(
        "GET",
        f"{BP}/activity",
        json=[{"id": 1, "user_id": "7", "content": {"rendered": "<p>hi</p>", "raw": "hi"}}],
    )
    (activity,) = await api.get_activity(per_page=5)
    assert activity.user_id == 7
    assert activity.content == "<p>hi</p>"
    assert backend.requests[0].url.params["per_page"] == "5"


@pytest.mark.asyncio
async def test_profile_envelope_is_unwrapped(api: GReadApiClient, backend) -> None:
    profile = {"id": 7, "display_name": "Reader", "username": "reader"}
    backend.add("GET", f"{GREAD}/me/profile", json={"success": True, "data": profile})
    backend.add("GET", f"{GREAD}/user/8/profile", json={**profile, "id": 8})

    mine = await api.get_my_profile()
    theirs = await api.get_user_profile(8)
    assert mine.id == 7 and mine.email == ""
    assert theirs.id == 8


@pytest.mark.asyncio
async def test_update_profile_sends_only_given_fields(api: GReadApiClient, backend) -> None:
    backend.add(
        "PUT",
        f"{GREAD}/me/profile",
        json={"success": True, "data": {"id": 7, "display_name": "New", "username": "reader", "bio": "b"}},
    )
    updated = await api.update_my_profile(display_name="New", bio="b")
    assert updated.display_name == "New"
    assert backend.body(backend.requests[0]) == {"display_name": "New", "bio": "b"}


@pytest.mark.asyncio
async def test_search_books_accepts_wrapped_and_bare_results(api: GReadApiClient, backend) -> None:
    backend.add("GET", f"{GREAD}/books/search", json={"books": [{"id": 1, "title": "Emma"}], "total": 1})
    (book,) = await api.search_books("emma")
    assert book.title == "Emma"
    assert backend.requests[0].url.params["query"] == "emma"


@pytest.mark.asyncio
async def test_user_xprofile_fields_accept_mapping(api: GReadApiClient, backend) -> None:
    backend.add(
        "GET",
        f"{GREAD}/user/7/xprofile",
        json={"1": {"id": 1, "name": "Name", "value": "Reader"}, "2": {"id": 2, "name": "Bio"}},
    )
    fields = await api.get_user_xprofile_fields(7)
    assert [f.id for f in fields] == [1, 2]


@pytest.mark.asyncio
async def test_check_and_unlock_cosmetics_posts_stats(api: GReadApiClient, backend) -> None:
    backend.add("POST", f"{GREAD}/user/check-unlocks", text="[]")
    unlocked = await api.check_and_unlock_cosmetics(UserStats(points=10, pages_read=300))
    assert unlocked == []
    assert backend.body(backend.requests[0])["pages_read"] == 300


@pytest.mark.asyncio
async def test_moderation_endpoints(api: GReadApiClient, backend, session: SessionState) -> None:
    session.jwt_token = "t"
    backend.add("POST", f"{GREAD}/user/report", json={"success": True, "message": "Reported"})
    result = await api.report_user(5, "spam")
    assert result.success is True
    assert backend.body(backend.requests[0]) == {"user_id": 5, "reason": "spam"}
    assert backend.requests[0].headers["Authorization"] == "Bearer t"


@pytest.mark.asyncio
async def test_achievements_user_id_falls_back_to_zero(api: GReadApiClient, backend) -> None:
    backend.add(
        "GET",
        f"{GREAD}/user/7/achievements",
        json={"user_id": "not-a-number", "total": 0, "unlocked_count": 0, "achievements": []},
    )
    response = await api.get_user_achievements(7, filter="unlocked")
    assert response.user_id == 0
    assert backend.requests[0].url.params["filter"] == "unlocked"


@pytest.mark.asyncio
async def test_search_books_accepts_bare_list(api: GReadApiClient, backend) -> None:
    backend.add("GET", f"{GREAD}/books/search", json=[{"id": 2, "title": "Persuasion"}])
    books = await api.search_books("persuasion")
    assert [b.id for b in books] == [2]


@pytest.mark.asyncio
@pytest.mark.parametrize("body", ["false", ""])
async def test_false_body_decodes_to_empty_for_wrapped_list_endpoints(api: GReadApiClient, backend, body: str) -> None:
    backend.add("GET", f"{GREAD}/books/search", text=body)
    backend.add("GET", f"{BP}/activity", text=body)
    backend.add("GET", f"{GREAD}/user/7/xprofile", text=body)
    backend.add("GET", f"{GREAD}/friends/7", text=body)
    backend.add("GET", f"{GREAD}/friends/requests/pending", text=body)

    assert await api.search_books("x") == []
    assert await api.get_activity() == []
    assert await api.get_user_xprofile_fields(7) == []
    friends = await api.get_friends(7)
    assert friends.friends == []
    pending = await api.get_pending_friend_requests()
    assert pending.requests == []


@pytest.mark.asyncio
async def test_friend_request_flow_endpoints(api: GReadApiClient, backend, session: SessionState) -> None:
    session.jwt_token = "t"
    request = {"id": 11, "user_id": 3, "friend_id": 5, "initiator_id": 3, "status": "pending", "created_at": "2024-01-01"}
    backend.add("GET", f"{GREAD}/friends/requests/pending", json={"success": True, "requests": [request], "total_count": 1})
    backend.add(
        "POST",
        f"{GREAD}/friends/request",
        json={"success": True, "message": "Friend request sent", "friend_request": request},
    )
    backend.add("POST", f"{GREAD}/friends/request/11/accept", json={"success": True, "message": "Accepted"})
    backend.add("POST", f"{GREAD}/friends/request/11/reject", json={"success": True, "message": "Rejected"})
    backend.add("POST", f"{GREAD}/friends/5/remove", json={"success": True, "message": "Removed"})

    pending = await api.get_pending_friend_requests()
    assert [r.id for r in pending.requests] == [11]
    assert pending.total_count == 1

    sent = await api.send_friend_request(5)
    assert sent.friend_request is not None and sent.friend_request.friend_id == 5
    assert backend.body(backend.calls("POST", f"{GREAD}/friends/request")[0]) == {"friend_id": 5}

    assert (await api.accept_friend_request(11)).message == "Accepted"
    assert (await api.reject_friend_request(11)).message == "Rejected"
    assert (await api.remove_friend(5)).success is True
    assert all(r.headers["Authorization"] == "Bearer t" for r in backend.requests)


@pytest.mark.asyncio
async def test_blocked_and_muted_lists(api: GReadApiClient, backend, session: SessionState) -> None:
    session.jwt_token = "t"
    backend.add("GET", f"{GREAD}/user/blocked_list", json={"success": True, "blocked_users": [4, 9]})
    backend.add("GET", f"{GREAD}/user/muted_list", json={"success": True, "muted_users": []})

    blocked = await api.get_blocked_list()
    muted = await api.get_muted_list()

    assert blocked.blocked_users == [4, 9]
    assert muted.success is True and muted.muted_users == []


@pytest.mark.asyncio
async def test_book_notes_list_and_create(api: GReadApiClient, backend) -> None:
    backend.add("GET", f"{GREAD}/books/10/notes", text="false")
    backend.add(
        "POST",
        f"{GREAD}/books/10/notes",
        json={"id": 1, "book_id": 10, "note": "Great opening", "page": 3, "is_public": True},
    )

    assert await api.get_book_notes(10) == []
    note = await api.create_book_note(10, "Great opening", page=3, is_public=True)

    assert note.page == 3
    assert backend.body(backend.calls("POST", f"{GREAD}/books/10/notes")[0]) == {
        "note": "Great opening",
        "is_public": True,
        "page": 3,
    }


@pytest.mark.asyncio
async def test_create_book_note_omits_missing_page(api: GReadApiClient, backend) -> None:
    backend.add("POST", f"{GREAD}/books/10/notes", json={"id": 2, "note": "Private"})
    await api.create_book_note(10, "Private")
    assert backend.body(backend.requests[0]) == {"note": "Private", "is_public": False}


@pytest.mark.asyncio
async def test_guides_come_from_buddypress_namespace(api: GReadApiClient, backend) -> None:
    backend.add("GET", f"{BP}/guides", json=[{"id": 1, "title": "Getting started", "order": 1}])
    (guide,) = await api.get_guides()
    assert guide.title == "Getting started"
    assert "Authorization" not in backend.requests[0].headers
