"""Register, login, refresh-token rotation and logout."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from app.api.deps import get_current_identity, get_settings_dep, get_user_store
from app.core.config import Settings
from app.core.errors import InvalidRefreshTokenError
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
from app.services.accounts import login_user, register_user
from app.services.sessions import revoke_refresh_token, rotate_refresh_token
from app.services.user_store import UserStore

router = APIRouter()


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    body: RegisterRequest,
    store: Annotated[UserStore, Depends(get_user_store)],
    settings: Annotated[Settings, Depends(get_settings_dep)],
) -> AuthResponse:
    """Create an account with role 'user' and return its first token pair."""
    user, pair = register_user(store, body.name, body.email, body.password, settings)
    return AuthResponse(
        access_token=pair.access_token,
        refresh_token=pair.refresh_token,
        user=UserSummary.model_validate(user),
    )


@router.post("/login", response_model=AuthResponse)
def login(
    body: LoginRequest,
    store: Annotated[UserStore, Depends(get_user_store)],
    settings: Annotated[Settings, Depends(get_settings_dep)],
) -> AuthResponse:
    """
    Authenticate with email and password; opens a new session alongside any existing ones.
    Include the access token in the Authorization header as: Bearer <accessToken>
    """
    user, pair = login_user(store, body.email, body.password, settings)
    return AuthResponse(
        access_token=pair.access_token,
        refresh_token=pair.refresh_token,
        user=UserSummary.model_validate(user),
    )


@router.post("/refresh", response_model=TokenPairResponse)
def refresh(
    store: Annotated[UserStore, Depends(get_user_store)],
    settings: Annotated[Settings, Depends(get_settings_dep)],
    body: RefreshRequest | None = None,
) -> TokenPairResponse:
    """Exchange a refresh token for a new pair. The presented token cannot be used again."""
    if body is None or not body.refresh_token:
        raise InvalidRefreshTokenError("Refresh token required")
    pair = rotate_refresh_token(store, body.refresh_token, settings)
    return TokenPairResponse(access_token=pair.access_token, refresh_token=pair.refresh_token)


@router.post("/logout", response_model=MessageResponse)
def logout(
    identity: Annotated[CurrentIdentity, Depends(get_current_identity)],
    store: Annotated[UserStore, Depends(get_user_store)],
    body: RefreshRequest | None = None,
) -> MessageResponse:
    """End one session: remove the given refresh token from the caller's own set."""
    revoke_refresh_token(store, identity.id, body.refresh_token if body else None)
    return MessageResponse(message="Logged out")
