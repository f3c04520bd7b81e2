"""Apple ID credential handling.

The platform hands back raw bytes for the identity token and authorization
code; `AppleSignInResult.from_credential` validates them into the values the
``custom/v1/apple-login`` endpoint expects.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from .errors import AppleSignInError, AppleSignInErrorKind

CredentialPart = Union[str, bytes, None]


@dataclass(frozen=True)
class PersonName:
    given_name: Optional[str] = None
    family_name: Optional[str] = None


def _decode(value: CredentialPart) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, bytes):
        try:
            value = value.decode("utf-8")
        except UnicodeDecodeError:
            return None
    return value or None


@dataclass(frozen=True)
class AppleSignInResult:
    user_identifier: str
    identity_token: str
    authorization_code: str
    email: Optional[str] = None
    full_name: Optional[PersonName] = None

    @classmethod
    def from_credential(
        cls,
        *,
        user_identifier: Optional[str],
        identity_token: CredentialPart,
        authorization_code: CredentialPart,
        email: Optional[str] = None,
        full_name: Optional[PersonName] = None,
    ) -> "AppleSignInResult":
        if not user_identifier:
            raise AppleSignInError(AppleSignInErrorKind.INVALID_CREDENTIAL)
        token = _decode(identity_token)
        if token is None:
            raise AppleSignInError(AppleSignInErrorKind.MISSING_TOKEN)
        code = _decode(authorization_code)
        if code is None:
            raise AppleSignInError(AppleSignInErrorKind.MISSING_AUTH_CODE)
        return cls(
            user_identifier=user_identifier,
            identity_token=token,
            authorization_code=code,
            email=email,
            full_name=full_name,
        )

    @property
    def full_name_string(self) -> Optional[str]:
        if self.full_name is None:
            return None
        parts = [p for p in (self.full_name.given_name, self.full_name.family_name) if p]
        return " ".join(parts) if parts else None

    def to_login_body(self) -> Dict[str, Any]:
        # Apple only shares email and name on the very first authorization
        body: Dict[str, Any] = {
            "identity_token": self.identity_token,
            "user_identifier": self.user_identifier,
        }
        if self.email:
            body["email"] = self.email
        if self.full_name_string:
            body["full_name"] = self.full_name_string
        return body
