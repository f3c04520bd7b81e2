"""GRead models.

Re-exports the DTOs and domain models consumed by `GReadApiClient`, the
auth layer and the feature managers.
"""

from gread_client.models.achievement import (
    Achievement,
    AchievementIcon,
    AchievementProgress,
    LeaderboardEntry,
    UnlockRequirements,
    UserAchievementsResponse,
)
from gread_client.models.activity import Activity, ActivityAvatar, ActivityResponse
from gread_client.models.auth import (
    AppleLoginResponse,
    AppleSignupCompletion,
    BlockedListResponse,
    ModerationResponse,
    MutedListResponse,
    TokenResponse,
    UsernameAvailability,
    WordPressErrorPayload,
)
from gread_client.models.book import Book, BookNote, BookSearchResponse, LibraryItem, LibraryStatus
from gread_client.models.cosmetic import (
    AppTheme,
    CosmeticType,
    CosmeticUnlock,
    CustomIcon,
    UnlockRequirement,
    UserCosmetics,
)
from gread_client.models.guide import Guide, GuideCategory
from gread_client.models.profile import (
    CachedUserProfile,
    FriendRequest,
    FriendRequestResponse,
    FriendsListResponse,
    PendingRequestsResponse,
    ProfileSocial,
    ProfileStats,
    ProfileUpdateRequest,
    UserProfile,
    XProfileField,
    XProfileFieldList,
)
from gread_client.models.stats import UserStats
from gread_client.models.user import User

__all__ = [
    # Members and profiles
    "User",
    "UserProfile",
    "ProfileStats",
    "ProfileSocial",
    "ProfileUpdateRequest",
    "XProfileField",
    "XProfileFieldList",
    "FriendsListResponse",
    "FriendRequest",
    "FriendRequestResponse",
    "PendingRequestsResponse",
    "CachedUserProfile",
    "UserStats",
    # Library
    "Book",
    "LibraryItem",
    "LibraryStatus",
    "BookNote",
    "BookSearchResponse",
    # Guides
    "Guide",
    "GuideCategory",
    # Activity and achievements
    "Activity",
    "ActivityAvatar",
    "ActivityResponse",
    "Achievement",
    "AchievementIcon",
    "AchievementProgress",
    "UnlockRequirements",
    "UserAchievementsResponse",
    "LeaderboardEntry",
    # Cosmetics
    "AppTheme",
    "CosmeticType",
    "CosmeticUnlock",
    "CustomIcon",
    "UnlockRequirement",
    "UserCosmetics",
    # Auth payloads
    "TokenResponse",
    "WordPressErrorPayload",
    "AppleLoginResponse",
    "UsernameAvailability",
    "AppleSignupCompletion",
    "ModerationResponse",
    "BlockedListResponse",
    "MutedListResponse",
]
