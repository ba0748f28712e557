"""Token retention: delete refresh tokens whose expiry has passed."""

import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

from app.models import RefreshToken

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)


def purge_expired_refresh_tokens(session: Session, settings: "Settings") -> int:
    """
    Delete refresh tokens past their expiry across all users.

    Returns the number of tokens deleted. Idempotent: safe to run repeatedly.
    Expired tokens already fail verification, so this only reclaims storage.
    """
    if not settings.TOKEN_CLEANUP_ENABLED:
        logger.info("Token cleanup is disabled (TOKEN_CLEANUP_ENABLED=false); skipping.")
        return 0

    now = datetime.now(timezone.utc)
    deleted_count = (
        session.query(RefreshToken)
        .filter(RefreshToken.expires_at < now)
        .delete(synchronize_session=False)
    )
    session.commit()

    if deleted_count > 0:
        logger.info(
            "Token cleanup run: cutoff=%s, tokens_deleted=%s",
            now.isoformat(),
            deleted_count,
        )
    return deleted_count
