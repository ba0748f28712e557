"""Refresh-token sessions: issue-and-register, rotate-on-use refresh, and logout.

Each user holds a set of valid refresh tokens, one per live session. A refresh
token is usable once: rotation removes it and registers its replacement in the
same transaction, so a replayed token finds nothing to consume. A refresh only
succeeds when the token both verifies (signature, expiry, type) and is still
a member of the owner's set; removing it from the set is enough to revoke it
before its expiry.
"""

import logging
from datetime import UTC, datetime

import jwt

from app.core.config import Settings
from app.core.errors import InvalidRefreshTokenError
from app.core.security import TokenPair, decode_refresh_token, issue_token_pair
from app.models import User
from app.services.user_store import UserStore

logger = logging.getLogger(__name__)


def _register_refresh_token(store: UserStore, user_id: str, pair: TokenPair, settings: Settings) -> None:
    """Append the new refresh token, then drop the user's expired and over-cap tokens."""
    store.add_refresh_token(user_id, pair.refresh_token, pair.refresh_expires_at)
    # Expired tokens already fail verification; removing them keeps the set from growing.
    store.delete_expired_refresh_tokens(user_id, datetime.now(UTC))
    if settings.MAX_REFRESH_TOKENS_PER_USER is not None:
        evicted = store.evict_oldest_refresh_tokens(user_id, settings.MAX_REFRESH_TOKENS_PER_USER)
        if evicted:
            logger.info(
                "Evicted oldest refresh tokens",
                extra={"user_id": user_id, "evicted": evicted},
            )


def issue_and_register(store: UserStore, user: User, settings: Settings) -> TokenPair:
    """
    Issue a fresh pair for the user and add its refresh token to their set.

    Other sessions of the user are left untouched. Commits.
    """
    pair = issue_token_pair(user.id, user.role, settings)
    _register_refresh_token(store, user.id, pair, settings)
    store.commit()
    return pair


def rotate_refresh_token(store: UserStore, presented: str, settings: Settings) -> TokenPair:
    """
    Exchange a refresh token for a new pair, consuming the presented token.

    Raises InvalidRefreshTokenError when the token fails verification (checked
    before any store access), is not held by any user, or was consumed by a
    concurrent rotation between lookup and delete.
    """
    try:
        claims = decode_refresh_token(presented, settings)
    except jwt.PyJWTError as e:
        logger.info("Refresh rejected: token failed verification (%s)", type(e).__name__)
        raise InvalidRefreshTokenError() from e

    user = store.find_by_refresh_token(presented)
    if user is None:
        logger.info("Refresh rejected: token not in any session", extra={"user_id": claims.get("sub")})
        raise InvalidRefreshTokenError()
    if user.id != claims.get("sub"):
        logger.warning(
            "Refresh rejected: token subject does not match its owner",
            extra={"user_id": user.id},
        )
        raise InvalidRefreshTokenError()

    if not store.consume_refresh_token(user.id, presented):
        store.rollback()
        logger.info("Refresh rejected: token consumed concurrently", extra={"user_id": user.id})
        raise InvalidRefreshTokenError()

    # Role comes from the stored record, not from the presented token's claims.
    pair = issue_token_pair(user.id, user.role, settings)
    _register_refresh_token(store, user.id, pair, settings)
    store.commit()
    logger.info("Refresh token rotated", extra={"user_id": user.id})
    return pair


def revoke_refresh_token(store: UserStore, user_id: str, presented: str | None) -> bool:
    """
    Remove one refresh token from the user's own set. Idempotent.

    Returns True when a token was removed; an absent or unknown token is not an error.
    """
    if not presented:
        return False
    removed = store.remove_refresh_token(user_id, presented)
    store.commit()
    logger.info("Logout", extra={"user_id": user_id, "revoked": removed})
    return removed > 0
