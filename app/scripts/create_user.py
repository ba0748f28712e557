"""
Create a user directly in the store (e.g. the first admin). Run from project root:
  python -m app.scripts.create_user NAME EMAIL PASSWORD [role]
Example:
  python -m app.scripts.create_user "Ada Admin" admin@example.com your-secure-password admin
"""
import argparse
import sys

from app.core.config import get_settings
from app.core.database import Database
from app.core.errors import ConflictError
from app.core.security import PASSWORD_MAX_LEN, hash_password
from app.models.user import ROLES, ROLE_USER, User
from app.services.user_store import UserStore, normalize_email


def main(argv: list[str] | None = None, database: Database | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a Turnstile user (admins have no signup route).")
    parser.add_argument("name", help="Display name (1-255 chars)")
    parser.add_argument("email", help="Email address, unique case-insensitively")
    parser.add_argument("password", help=f"Password (1-{PASSWORD_MAX_LEN} chars)")
    parser.add_argument("role", nargs="?", default=ROLE_USER, choices=list(ROLES))
    args = parser.parse_args(argv)

    name = args.name.strip()
    email = normalize_email(args.email)
    if not name or len(name) > 255:
        print("Invalid name length.", file=sys.stderr)
        return 1
    if "@" not in email:
        print("Invalid email address.", file=sys.stderr)
        return 1
    if not args.password or len(args.password) > PASSWORD_MAX_LEN:
        print(f"Password must be 1-{PASSWORD_MAX_LEN} characters.", file=sys.stderr)
        return 1

    settings = get_settings()
    owns_database = database is None
    if database is None:
        database = Database(settings.DATABASE_URL, echo=settings.DEBUG)
    db = database.SessionLocal()
    try:
        store = UserStore(db)
        if store.find_by_email(email) is not None:
            print(f"User '{email}' already exists.", file=sys.stderr)
            return 1
        try:
            store.create(
                User(
                    name=name,
                    email=email,
                    password_hash=hash_password(args.password, rounds=settings.BCRYPT_ROUNDS),
                    role=args.role,
                    phone="",
                    addresses=[],
                )
            )
        except ConflictError:
            print(f"User '{email}' already exists.", file=sys.stderr)
            return 1
        store.commit()
        print(f"Created user '{email}' with role '{args.role}'.")
        return 0
    finally:
        db.close()
        if owns_database:
            database.dispose()


if __name__ == "__main__":
    sys.exit(main())
