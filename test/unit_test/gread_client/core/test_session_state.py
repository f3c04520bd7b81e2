from gread_client.core.session import PendingAppleSignup, SessionState
from gread_client.models import User


def test_reset_clears_everything() -> None:
    session = SessionState(
        jwt_token="t",
        current_user=User(id=3, name="Reader"),
        is_authenticated=True,
        is_guest_mode=True,
        pending_apple_signup=PendingAppleSignup(token="p"),
    )
    assert session.user_id == 3
    assert session.needs_username_selection is True

    session.reset()

    assert session == SessionState()
    assert session.user_id is None
    assert session.needs_username_selection is False
