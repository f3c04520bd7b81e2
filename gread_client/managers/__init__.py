"""Per-feature managers that fetch, cache and mutate client state."""

from .base import CachedManager
from .cache import CacheManager, CacheType, format_bytes
from .cosmetics import CosmeticsManager
from .dashboard import DashboardManager
from .guides import GuidesManager
from .library import LibraryManager
from .profile import ProfileManager
from .user_profile import UserProfileManager

__all__ = [
    "CachedManager",
    "CacheManager",
    "CacheType",
    "CosmeticsManager",
    "DashboardManager",
    "GuidesManager",
    "LibraryManager",
    "ProfileManager",
    "UserProfileManager",
    "format_bytes",
]
