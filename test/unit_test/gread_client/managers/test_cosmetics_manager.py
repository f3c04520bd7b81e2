from __future__ import annotations

import pytest

from gread_client.managers import CosmeticsManager
from gread_client.models import AppTheme, UnlockRequirement, UserCosmetics, UserStats
from gread_client.storage import PreferenceKeys

COSMETICS = "/wp-json/gread/v1/cosmetics"

OCEAN = AppTheme(
    id="ocean",
    name="Ocean",
    description="Blue",
    primary_color="#0000FF",
    secondary_color="#00FFFF",
    accent_color="#FFFFFF",
    background_color="#000033",
    is_dark_theme=True,
    unlock_requirement=UnlockRequirement(stat="pagesRead", value=1000),
)


@pytest.fixture
def cosmetics(api, store) -> CosmeticsManager:
    return CosmeticsManager(api, store)


def test_defaults(cosmetics) -> None:
    assert cosmetics.current_theme.id == "default"
    assert set(cosmetics.themes) == {"default", "dark"}
    assert cosmetics.is_theme_unlocked("default") is True
    assert cosmetics.is_theme_unlocked("dark") is False


def test_locked_theme_cannot_be_selected(cosmetics, store) -> None:
    cosmetics.register_theme(OCEAN)
    assert cosmetics.set_active_theme("ocean") is False
    assert cosmetics.set_active_theme("missing") is False
    assert cosmetics.current_theme.id == "default"
    assert not store.contains(PreferenceKeys.USER_COSMETICS)


def test_check_and_unlock_then_select(cosmetics, api, store) -> None:
    cosmetics.register_theme(OCEAN)

    assert cosmetics.check_and_unlock(UserStats(pages_read=999)) == []
    assert cosmetics.check_and_unlock(UserStats(pages_read=1000)) == ["ocean"]
    assert cosmetics.check_and_unlock(UserStats(pages_read=5000)) == []
    assert cosmetics.set_active_theme("ocean") is True

    restored = CosmeticsManager(api, store)
    assert restored.user_cosmetics.active_theme == "ocean"
    assert restored.is_theme_unlocked("ocean") is True


def test_icons_require_unlock(cosmetics) -> None:
    assert cosmetics.set_active_icon("gold") is False
    cosmetics.user_cosmetics = UserCosmetics(unlocked_cosmetics=["gold"])
    assert cosmetics.set_active_icon("gold") is True
    assert cosmetics.user_cosmetics.active_icon == "gold"


@pytest.mark.asyncio
async def test_refresh_registers_server_themes(cosmetics, backend, store) -> None:
    backend.add(
        "GET",
        COSMETICS,
        json=[
            {
                "id": "ocean",
                "type": "theme",
                "name": "Ocean",
                "description": "Blue",
                "unlocked_by": "pagesRead",
                "required_value": 1000,
                "theme": OCEAN.model_dump(),
            }
        ],
    )

    await cosmetics.refresh_available_cosmetics()

    assert "ocean" in cosmetics.themes
    assert cosmetics.available_cosmetics[0].required_value == 1000
    assert store.contains(PreferenceKeys.AVAILABLE_COSMETICS)

    cosmetics.clear_cache()
    assert "ocean" not in cosmetics.themes
    assert not store.contains(PreferenceKeys.AVAILABLE_COSMETICS)


@pytest.mark.asyncio
async def test_refresh_failure_keeps_catalogue(cosmetics, backend) -> None:
    backend.add("GET", COSMETICS, status=500, text="")
    await cosmetics.refresh_available_cosmetics()
    assert cosmetics.available_cosmetics == []
