"""
Create a user directly in the store (e.g. first admin). Run from project root:
  python -m insightboard.scripts.create_user EMAIL PASSWORD [role]
Example:
  python -m insightboard.scripts.create_user admin@example.com your-secure-password admin
"""
import argparse
import sys

from insightboard.core.config import get_settings
from insightboard.core.database import create_db_engine, create_session_factory
from insightboard.core.security import ROLES, hash_password
from insightboard.services.users import DuplicateEmailError, insert_user, normalize_email


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create an InsightBoard user.")
    parser.add_argument("email", help="Email address (stored lowercase)")
    parser.add_argument("password", help="Password (1-128 chars)")
    parser.add_argument("role", nargs="?", default="user", choices=list(ROLES))
    args = parser.parse_args(argv)

    email = normalize_email(args.email)
    if not email or len(email) > 255:
        print("Invalid email length.", file=sys.stderr)
        return 1
    if not args.password or len(args.password) > 128:
        print("Password must be 1-128 characters.", file=sys.stderr)
        return 1

    settings = get_settings()
    engine = create_db_engine(settings)
    db = create_session_factory(engine)()
    try:
        insert_user(db, email, hash_password(args.password), args.role)
    except DuplicateEmailError:
        print(f"User '{email}' already exists.", file=sys.stderr)
        return 1
    finally:
        db.close()
        engine.dispose()
    print(f"Created user '{email}' with role '{args.role}'.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
