from .apple import AppleSignInResult, PersonName
from .errors import AppleSignInError, AppleSignInErrorKind, AuthError, AuthErrorKind
from .manager import AppleSignInOutcome, AuthManager

__all__ = [
    "AuthManager",
    "AppleSignInOutcome",
    "AppleSignInResult",
    "PersonName",
    "AuthError",
    "AuthErrorKind",
    "AppleSignInError",
    "AppleSignInErrorKind",
]
