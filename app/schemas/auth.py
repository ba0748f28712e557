"""Request/response schemas for auth endpoints."""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from app.core.security import PASSWORD_MAX_LEN


class CamelModel(BaseModel):
    """Base for API bodies: snake_case in Python, camelCase on the wire (both accepted on input)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _check_email(v: str) -> str:
    s = v.strip().lower()
    local, sep, domain = s.partition("@")
    if not sep or not local or "." not in domain or " " in s:
        raise ValueError("Invalid email address")
    return s


class RegisterRequest(CamelModel):
    """Body for POST /auth/register."""

    name: str = Field(..., min_length=1, max_length=255, description="Display name")
    email: str = Field(..., min_length=3, max_length=320, description="Email address")
    password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LEN, description="Password")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Name must not be blank")
        return v.strip()

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return _check_email(v)


class LoginRequest(CamelModel):
    """Credentials for login."""

    email: str = Field(..., min_length=1, max_length=320, description="Email address")
    password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LEN, description="Password")


class RefreshRequest(CamelModel):
    """Body for POST /auth/refresh and POST /auth/logout."""

    refresh_token: str | None = Field(default=None, description="Refresh token to rotate or revoke")


class TokenPairResponse(CamelModel):
    """New access/refresh pair returned by refresh."""

    access_token: str = Field(..., description="JWT access token (Authorization: Bearer)")
    refresh_token: str = Field(..., description="Single-use JWT refresh token")


class UserSummary(CamelModel):
    """Identity returned alongside tokens on register and login."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: str
    name: str
    email: str
    role: str


class AuthResponse(TokenPairResponse):
    """Token pair plus the authenticated user's summary."""

    user: UserSummary


class CurrentIdentity(BaseModel):
    """Identity asserted by a verified access token (no store read)."""

    id: str
    role: str


class MessageResponse(BaseModel):
    """Plain confirmation body."""

    message: str
