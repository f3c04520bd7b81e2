"""GRead reading-tracker client.

Async REST client, authentication/session management and offline caches for
the GRead WordPress/BuddyPress backend. Start with `build_app`.
"""

from gread_client.factory import GReadApp, build_app

__all__ = ["GReadApp", "build_app"]
