"""Request dependencies: settings, credential store, and the auth gate (get_current_identity, require_admin)."""

from typing import Annotated

import jwt
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.core.config import Settings
from app.core.database import get_db
from app.core.errors import ForbiddenError, UnauthenticatedError
from app.core.security import decode_access_token
from app.models import User
from app.models.user import ROLE_ADMIN
from app.schemas.auth import CurrentIdentity
from app.services.user_store import UserStore

security = HTTPBearer(auto_error=False)


def get_settings_dep(request: Request) -> Settings:
    """Settings the running app was built with."""
    return request.app.state.settings


def get_user_store(db: Annotated[Session, Depends(get_db)]) -> UserStore:
    return UserStore(db)


def get_current_identity(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    settings: Annotated[Settings, Depends(get_settings_dep)],
) -> CurrentIdentity:
    """
    Dependency: require a valid Bearer access token and return its subject and role.

    Raises UnauthenticatedError (401) if the token is missing, malformed, signed
    with another key, expired, or not an access token. Does not read the store.
    """
    if credentials is None:
        raise UnauthenticatedError("No token provided")
    try:
        payload = decode_access_token(credentials.credentials, settings)
    except jwt.PyJWTError as e:
        raise UnauthenticatedError("Invalid or expired token") from e
    sub = payload.get("sub")
    role = payload.get("role")
    if not sub or not isinstance(role, str):
        raise UnauthenticatedError("Invalid token payload")

    request.state.user_id = sub
    request.state.user_role = role
    return CurrentIdentity(id=sub, role=role)


def require_admin(
    identity: Annotated[CurrentIdentity, Depends(get_current_identity)],
    store: Annotated[UserStore, Depends(get_user_store)],
) -> User:
    """
    Dependency: require that the caller's stored record has role 'admin'. Raises 403 otherwise.

    The record is loaded on every request, so a demotion applies at once even
    while the caller's access token still claims 'admin'.
    """
    admin = store.find_by_id(identity.id)
    if admin is None or admin.role != ROLE_ADMIN:
        raise ForbiddenError("Admin permission required")
    return admin
