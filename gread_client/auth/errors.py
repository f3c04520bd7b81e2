"""Errors raised by the authentication layer.

`AuthError` carries a machine-readable `kind` and the user-facing `message`
the app shows verbatim. `AppleSignInError` classifies failures of the
platform Apple ID credential before any request is made.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

VERIFY_ACCOUNT_MESSAGE = "If you are a new user and your username is unique, check your email and verify your account."
EMAIL_TAKEN_MESSAGE = "This email address is already registered."
USERNAME_TAKEN_MESSAGE = "This username is already taken. Please choose another."
REGISTRATION_INVALID_MESSAGE = "Registration failed. Please check your information."
REGISTRATION_RETRY_MESSAGE = "Registration failed. Please try again."
ACTIVATE_ACCOUNT_MESSAGE = "Account created! Please check your email to activate your account before logging in."


class AuthErrorKind(str, Enum):
    INVALID_CREDENTIALS = "invalid_credentials"
    INVALID_RESPONSE = "invalid_response"
    UNAUTHORIZED = "unauthorized"
    HTTP_ERROR = "http_error"
    NETWORK_ERROR = "network_error"
    REGISTRATION_FAILED = "registration_failed"
    USER_NOT_FOUND = "user_not_found"
    USERNAME_SELECTION_REQUIRED = "username_selection_required"


_DEFAULT_MESSAGES = {
    AuthErrorKind.INVALID_CREDENTIALS: "Invalid username or password format",
    AuthErrorKind.INVALID_RESPONSE: "Invalid response from server",
    AuthErrorKind.UNAUTHORIZED: "Invalid username or password",
    AuthErrorKind.NETWORK_ERROR: "Network error. Please check your connection.",
    AuthErrorKind.REGISTRATION_FAILED: REGISTRATION_RETRY_MESSAGE,
    AuthErrorKind.USER_NOT_FOUND: "No account is linked to this Apple ID.",
    AuthErrorKind.USERNAME_SELECTION_REQUIRED: "Choose a username to finish signing in.",
}


class AuthError(Exception):
    """Authentication or registration failure.

    Args:
        kind: Failure category.
        message: Text for the user; defaults per kind.
        status_code: HTTP status when the failure came from a response.
    """

    def __init__(self, kind: AuthErrorKind, message: Optional[str] = None, *, status_code: Optional[int] = None) -> None:
        if message is None:
            if kind is AuthErrorKind.HTTP_ERROR:
                message = f"Server error: {status_code}"
            else:
                message = _DEFAULT_MESSAGES[kind]
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.status_code = status_code

    @classmethod
    def http_error(cls, status_code: int) -> "AuthError":
        return cls(AuthErrorKind.HTTP_ERROR, status_code=status_code)

    @classmethod
    def registration_failed(cls, message: str) -> "AuthError":
        return cls(AuthErrorKind.REGISTRATION_FAILED, message)


class AppleSignInErrorKind(str, Enum):
    INVALID_CREDENTIAL = "invalid_credential"
    MISSING_TOKEN = "missing_token"
    MISSING_AUTH_CODE = "missing_auth_code"
    USER_CANCELLED = "user_cancelled"
    UNKNOWN = "unknown"


_APPLE_MESSAGES = {
    AppleSignInErrorKind.INVALID_CREDENTIAL: "Invalid Apple ID credential",
    AppleSignInErrorKind.MISSING_TOKEN: "Missing identity token",
    AppleSignInErrorKind.MISSING_AUTH_CODE: "Missing authorization code",
    AppleSignInErrorKind.USER_CANCELLED: "Sign in was cancelled",
    AppleSignInErrorKind.UNKNOWN: "An unknown error occurred",
}


class AppleSignInError(Exception):
    def __init__(self, kind: AppleSignInErrorKind, *, code: Optional[str] = None) -> None:
        super().__init__(_APPLE_MESSAGES[kind])
        self.kind = kind
        self.message = _APPLE_MESSAGES[kind]
        self.code = code

    @classmethod
    def from_authorization_failure(cls, code: str) -> "AppleSignInError":
        """Classify a platform authorization failure code.

        Codes other than ``canceled`` are reported as unknown, keeping the
        raw code for diagnosis.
        """
        if code == "canceled":
            return cls(AppleSignInErrorKind.USER_CANCELLED, code=code)
        return cls(AppleSignInErrorKind.UNKNOWN, code=code)
