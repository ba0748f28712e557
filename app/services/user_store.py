"""Credential store: persistence of users and their refresh tokens behind one repository.

Route and service code never builds queries directly; they go through
UserStore. Methods do not commit, except commit() itself, so a service can
group several changes (consume old token, register new one) into one
transaction.
"""

from datetime import datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import ConflictError
from app.models import RefreshToken, User


def normalize_email(email: str) -> str:
    """Emails are unique case-insensitively; store and look them up lower-cased."""
    return email.strip().lower()


class UserStore:
    """Repository for User and RefreshToken rows on one session."""

    def __init__(self, session: Session) -> None:
        self.session = session

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    def find_by_email(self, email: str) -> User | None:
        return (
            self.session.query(User)
            .filter(User.email == normalize_email(email))
            .first()
        )

    def find_by_id(self, user_id: str) -> User | None:
        return self.session.get(User, user_id)

    def find_by_refresh_token(self, token: str) -> User | None:
        """Membership check only: the owner of a stored token, or None. No signature check."""
        return (
            self.session.query(User)
            .join(RefreshToken, RefreshToken.user_id == User.id)
            .filter(RefreshToken.token == token)
            .first()
        )

    def list_users(self) -> list[User]:
        return self.session.query(User).order_by(User.created_at, User.id).all()

    def create(self, user: User) -> User:
        """Insert a user. Raises ConflictError if the email is taken (unique index)."""
        user.email = normalize_email(user.email)
        self.session.add(user)
        try:
            self.session.flush()
        except IntegrityError as e:
            self.session.rollback()
            raise ConflictError() from e
        return user

    def update(self, user: User) -> User:
        self.session.add(user)
        self.session.flush()
        return user

    def delete(self, user: User) -> None:
        self.session.delete(user)
        self.session.flush()

    # ------------------------------------------------------------------
    # Refresh tokens
    # ------------------------------------------------------------------

    def add_refresh_token(self, user_id: str, token: str, expires_at: datetime) -> None:
        self.session.add(RefreshToken(user_id=user_id, token=token, expires_at=expires_at))
        self.session.flush()

    def consume_refresh_token(self, user_id: str, token: str) -> bool:
        """
        Remove the token only if it is still present; True if this call removed it.

        A single conditional DELETE: of two concurrent callers presenting the
        same token, at most one sees a row count of 1.
        """
        deleted = (
            self.session.query(RefreshToken)
            .filter(RefreshToken.user_id == user_id, RefreshToken.token == token)
            .delete(synchronize_session=False)
        )
        return deleted == 1

    def remove_refresh_token(self, user_id: str, token: str) -> int:
        """Remove the token from the user's set if present. Returns rows removed (0 or 1)."""
        return (
            self.session.query(RefreshToken)
            .filter(RefreshToken.user_id == user_id, RefreshToken.token == token)
            .delete(synchronize_session=False)
        )

    def refresh_tokens_for(self, user_id: str) -> list[str]:
        """The user's valid refresh tokens, oldest first."""
        rows = (
            self.session.query(RefreshToken.token)
            .filter(RefreshToken.user_id == user_id)
            .order_by(RefreshToken.id)
            .all()
        )
        return [row.token for row in rows]

    def delete_expired_refresh_tokens(self, user_id: str, now: datetime) -> int:
        return (
            self.session.query(RefreshToken)
            .filter(RefreshToken.user_id == user_id, RefreshToken.expires_at < now)
            .delete(synchronize_session=False)
        )

    def evict_oldest_refresh_tokens(self, user_id: str, keep: int) -> int:
        """Delete all but the newest `keep` tokens of the user. Returns rows removed."""
        stale_ids = [
            row.id
            for row in self.session.query(RefreshToken.id)
            .filter(RefreshToken.user_id == user_id)
            .order_by(RefreshToken.id.desc())
            .offset(keep)
            .all()
        ]
        if not stale_ids:
            return 0
        return (
            self.session.query(RefreshToken)
            .filter(RefreshToken.id.in_(stale_ids))
            .delete(synchronize_session=False)
        )

    # ------------------------------------------------------------------
    # Transaction
    # ------------------------------------------------------------------

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()
