"""Pydantic request/response schemas."""

from app.schemas.auth import (
    AuthResponse,
    CurrentIdentity,
    LoginRequest,
    MessageResponse,
    RefreshRequest,
    RegisterRequest,
    TokenPairResponse,
    UserSummary,
)
from app.schemas.health import HealthResponse
from app.schemas.user import Address, ProfileUpdate, UserProfile

__all__ = [
    "Address",
    "AuthResponse",
    "CurrentIdentity",
    "HealthResponse",
    "LoginRequest",
    "MessageResponse",
    "ProfileUpdate",
    "RefreshRequest",
    "RegisterRequest",
    "TokenPairResponse",
    "UserProfile",
    "UserSummary",
]
