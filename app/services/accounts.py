"""Registration, login, profile update and admin deletion of user accounts."""

import logging

from app.core.config import Settings
from app.core.errors import ConflictError, NotFoundError, UnauthenticatedError
from app.core.security import TokenPair, dummy_password_hash, hash_password, verify_password
from app.models import User
from app.models.user import ROLE_USER
from app.services.sessions import issue_and_register
from app.services.user_store import UserStore, normalize_email

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"


def register_user(
    store: UserStore,
    name: str,
    email: str,
    password: str,
    settings: Settings,
) -> tuple[User, TokenPair]:
    """Create a 'user' account and open its first session. Raises ConflictError on a taken email."""
    email = normalize_email(email)
    if store.find_by_email(email) is not None:
        raise ConflictError()

    user = User(
        name=name,
        email=email,
        password_hash=hash_password(password, rounds=settings.BCRYPT_ROUNDS),
        role=ROLE_USER,
        phone="",
        addresses=[],
    )
    store.create(user)
    pair = issue_and_register(store, user, settings)
    logger.info("User registered", extra={"user_id": user.id})
    return user, pair


def authenticate_user(store: UserStore, email: str, password: str, settings: Settings) -> User:
    """
    Return the user for valid credentials; raise UnauthenticatedError otherwise.

    Always runs bcrypt, against a dummy hash when the email is unknown, so the
    response time does not reveal which emails are registered.
    """
    user = store.find_by_email(email)
    if user is None:
        verify_password(password, dummy_password_hash(settings.BCRYPT_ROUNDS))
        logger.info("Login failed: unknown email")
        raise UnauthenticatedError(INVALID_CREDENTIALS)
    if not verify_password(password, user.password_hash):
        logger.info("Login failed: wrong password", extra={"user_id": user.id})
        raise UnauthenticatedError(INVALID_CREDENTIALS)
    return user


def login_user(store: UserStore, email: str, password: str, settings: Settings) -> tuple[User, TokenPair]:
    user = authenticate_user(store, email, password, settings)
    pair = issue_and_register(store, user, settings)
    logger.info("User logged in", extra={"user_id": user.id})
    return user, pair


def get_user(store: UserStore, user_id: str) -> User:
    user = store.find_by_id(user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


def update_profile(
    store: UserStore,
    user_id: str,
    name: str | None = None,
    phone: str | None = None,
    addresses: list[dict] | None = None,
) -> User:
    """
    Apply a partial profile update to the user's own record.

    Empty name or phone leaves the stored value unchanged; addresses replace the
    stored list whenever given, so an empty list clears them.
    """
    user = get_user(store, user_id)
    if name:
        user.name = name
    if phone:
        user.phone = phone
    if addresses is not None:
        user.addresses = addresses
    store.update(user)
    store.commit()
    return user


def delete_user(store: UserStore, user_id: str, deleted_by: str) -> None:
    """Delete a user and, by cascade, every refresh token they hold."""
    user = get_user(store, user_id)
    store.delete(user)
    store.commit()
    logger.info("User deleted", extra={"user_id": user_id, "deleted_by": deleted_by})
