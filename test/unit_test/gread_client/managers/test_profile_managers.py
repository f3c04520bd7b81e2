from __future__ import annotations

import pytest

from gread_client.api.errors import HttpStatusError
from gread_client.managers import ProfileManager, UserProfileManager
from gread_client.storage import InMemoryPreferenceStore, PreferenceKeys

GREAD = "/wp-json/gread/v1"
BP = "/wp-json/buddypress/v1"
PROFILE = {"id": 7, "display_name": "Reader", "username": "reader", "bio": "Loves books"}


class TestProfileManager:
    @pytest.mark.asyncio
    async def test_load_profile_sorts_fields_by_order(self, api, backend, store) -> None:
        backend.add("GET", f"{GREAD}/me/profile", json={"success": True, "data": PROFILE})
        backend.add(
            "GET",
            f"{BP}/xprofile/fields",
            json=[{"id": 2, "name": "Bio", "order": 2}, {"id": 1, "name": "Name", "order": 1}],
        )
        manager = ProfileManager(api, store)

        await manager.load_profile()

        assert manager.user_profile.bio == "Loves books"
        assert [f.id for f in manager.xprofile_fields] == [1, 2]
        assert store.contains(PreferenceKeys.USER_PROFILE)

    @pytest.mark.asyncio
    async def test_missing_xprofile_endpoint_is_tolerated(self, api, backend, store) -> None:
        backend.add("GET", f"{GREAD}/me/profile", json=PROFILE)
        manager = ProfileManager(api, store)

        await manager.load_profile()

        assert manager.user_profile.id == 7
        assert manager.xprofile_fields == []

    @pytest.mark.asyncio
    async def test_update_profile_replaces_cached_profile(self, api, backend, store) -> None:
        backend.add("PUT", f"{GREAD}/me/profile", json={"success": True, "data": {**PROFILE, "location": "Oslo"}})
        manager = ProfileManager(api, store)

        await manager.update_profile(location="Oslo")

        assert manager.user_profile.location == "Oslo"
        assert ProfileManager(api, store).user_profile.location == "Oslo"

    @pytest.mark.asyncio
    async def test_update_failure_propagates(self, api, backend, store) -> None:
        backend.add("PUT", f"{GREAD}/me/profile", status=400, json={"message": "bad"})
        manager = ProfileManager(api, store)
        with pytest.raises(HttpStatusError):
            await manager.update_profile(bio="x")
        assert manager.user_profile is None


class TestUserProfileManager:
    @pytest.mark.asyncio
    async def test_load_profile_collects_optional_parts(self, api, backend, store) -> None:
        backend.add("GET", f"{BP}/members/8", json={"id": 8, "name": "Other"})
        backend.add("GET", f"{GREAD}/user/8/profile", json={**PROFILE, "id": 8})
        backend.add(
            "GET",
            f"{GREAD}/user/8/xprofile",
            json=[{"id": 0, "name": "Hidden"}, {"id": 1, "name": "Name", "value": "Other"}],
        )
        backend.add("GET", f"{GREAD}/user/8/stats", json={"points": 3})
        backend.add("GET", f"{GREAD}/friends/8", json={"friends": [{"id": 9, "name": "Pal"}], "total": 1})
        manager = UserProfileManager(api, store)

        profile = await manager.load_profile(8)

        assert profile.user.name == "Other"
        assert profile.user_profile.id == 8
        assert [f.id for f in profile.xprofile_fields] == [1]
        assert profile.user_stats.points == 3
        assert [f.id for f in profile.friends] == [9]
        assert profile.last_load_time is not None

    @pytest.mark.asyncio
    async def test_only_basic_user_is_required(self, api, backend, store) -> None:
        backend.add("GET", f"{BP}/members/8", json={"id": 8, "name": "Other"})
        manager = UserProfileManager(api, store)

        profile = await manager.load_profile(8)

        assert profile.user.id == 8
        assert profile.user_profile is None
        assert profile.friends == []

    @pytest.mark.asyncio
    async def test_missing_member_returns_none(self, api, backend, store) -> None:
        manager = UserProfileManager(api, store)
        assert await manager.load_profile(404) is None
        assert manager.cached_profiles == {}

    @pytest.mark.asyncio
    async def test_cache_survives_restart_and_short_circuits(self, api, backend) -> None:
        store = InMemoryPreferenceStore()
        backend.add("GET", f"{BP}/members/8", json={"id": 8, "name": "Other"})
        await UserProfileManager(api, store).load_profile(8)
        request_count = len(backend.requests)

        restored = UserProfileManager(api, store)
        profile = await restored.load_profile_if_needed(8)

        assert profile.user.name == "Other"
        assert list(restored.cached_profiles) == [8]
        assert len(backend.requests) == request_count

    @pytest.mark.asyncio
    async def test_clear_cache(self, api, backend, store) -> None:
        backend.add("GET", f"{BP}/members/8", json={"id": 8, "name": "Other"})
        manager = UserProfileManager(api, store)
        await manager.load_profile(8)

        manager.clear_cache()

        assert manager.cached_profiles == {}
        assert not store.contains(PreferenceKeys.USER_PROFILES)
