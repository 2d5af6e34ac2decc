"""
Create a user (e.g. the first admin) without going through the API. Run from project root:
  python -m store_ratings.scripts.create_user NAME EMAIL PASSWORD [role]
Example:
  python -m store_ratings.scripts.create_user "Site Admin" admin@example.com 'Secret#Pass1' SYSTEM_ADMIN
"""
import argparse
import logging
import sys

from store_ratings.core.database import SessionLocal
from store_ratings.core.errors import ConflictError
from store_ratings.core.permissions import Role
from store_ratings.schemas.auth import SignupRequest
from store_ratings.schemas.common import validate_payload
from store_ratings.services.accounts import register_user

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a Store Ratings user.")
    parser.add_argument("name", help="Full name (2-60 chars)")
    parser.add_argument("email", help="Email address (must be unique)")
    parser.add_argument("password", help="8-16 chars, one uppercase letter, one special character")
    parser.add_argument(
        "role",
        nargs="?",
        default=Role.SYSTEM_ADMIN.value,
        choices=[r.value for r in Role],
    )
    parser.add_argument("--address", default="", help="Postal address (max 400 chars)")
    args = parser.parse_args(argv)

    body, errors = validate_payload(
        SignupRequest,
        {"name": args.name, "email": args.email, "password": args.password, "address": args.address},
    )
    if body is None:
        for err in errors:
            print(f"{err.field}: {err.message}", file=sys.stderr)
        return 1

    db = SessionLocal()
    try:
        user = register_user(db, body, Role(args.role))
    except ConflictError as e:
        print(e.message, file=sys.stderr)
        return 1
    finally:
        db.close()
    logger.info("Created user '%s' with role '%s'.", user.email, user.role)
    return 0


if __name__ == "__main__":
    sys.exit(main())
