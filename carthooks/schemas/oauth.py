"""Wire models for the OAuth token endpoint and user identity endpoints."""

from __future__ import annotations

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class GrantType(str, Enum):
    CLIENT_CREDENTIALS = "client_credentials"
    AUTHORIZATION_CODE = "authorization_code"
    REFRESH_TOKEN = "refresh_token"


class OAuthTokens(BaseModel):
    """Token payload returned in the envelope ``data`` of ``/oauth/token``."""

    access_token: str = ""
    token_type: Optional[str] = "Bearer"
    expires_in: Optional[int] = 0
    refresh_token: Optional[str] = None
    scope: Optional[str] = None


class OAuthTokenRequest(BaseModel):
    """Form fields posted to the token endpoint."""

    grant_type: GrantType
    client_id: str
    client_secret: str
    user_access_token: Optional[str] = None
    code: Optional[str] = None
    redirect_uri: Optional[str] = None
    refresh_token: Optional[str] = None

    def to_form(self) -> Dict[str, str]:
        """Return the non-empty fields as form-encodable strings."""
        form = {
            "grant_type": self.grant_type.value,
            "client_id": self.client_id,
            "client_secret": self.client_secret,
        }
        for key in ("user_access_token", "code", "redirect_uri", "refresh_token"):
            value = getattr(self, key)
            if value:
                form[key] = value
        return form


class OAuthAuthorizeCodeRequest(BaseModel):
    client_id: str
    redirect_uri: str
    state: str
    target_tenant_id: Optional[int] = Field(
        None, description="Only used by platform-level clients."
    )


class OAuthAuthorizeCodeResponse(BaseModel):
    redirect_url: str


class UserInfo(BaseModel):
    """Identity of the token holder, as returned by ``/v1/me``."""

    user_id: int
    username: str = ""
    email: str = ""
    tenant_id: int = 0
    tenant_name: str = ""
    is_admin: bool = False
    scope: List[str] = Field(default_factory=list)


class User(BaseModel):
    id: int
    name: str = ""
    email: str = ""
    avatar: Optional[str] = None


__all__ = [
    "GrantType",
    "OAuthAuthorizeCodeRequest",
    "OAuthAuthorizeCodeResponse",
    "OAuthTokenRequest",
    "OAuthTokens",
    "User",
    "UserInfo",
]
