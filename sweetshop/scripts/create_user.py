"""
Create a user (e.g. the first admin). Run from project root:
  python -m sweetshop.scripts.create_user USERNAME EMAIL PASSWORD [role]
Example:
  python -m sweetshop.scripts.create_user admin admin@example.com your-secure-password admin
"""
import argparse
import logging
import sys

from pydantic import ValidationError

from sweetshop.core.config import get_settings
from sweetshop.core.database import Database
from sweetshop.core.errors import ConflictError
from sweetshop.models.user import ROLE_USER, ROLES
from sweetshop.schemas.auth import RegisterRequest
from sweetshop.services.auth import create_user

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a Sweet Shop user, typically an admin.")
    parser.add_argument("username", help="Username (at least 3 chars)")
    parser.add_argument("email", help="Email address used to log in")
    parser.add_argument("password", help="Password (at least 6 chars)")
    parser.add_argument("role", nargs="?", default=ROLE_USER, choices=list(ROLES))
    args = parser.parse_args(argv)

    try:
        body = RegisterRequest(username=args.username, email=args.email, password=args.password)
    except ValidationError as e:
        for err in e.errors():
            print(f"Invalid {err['loc'][0]}: {err['msg']}", file=sys.stderr)
        return 1

    settings = get_settings()
    database = Database.from_settings(settings)
    db = database.session()
    try:
        user = create_user(
            db,
            username=body.username,
            email=str(body.email),
            password=body.password,
            role=args.role,
            bcrypt_rounds=settings.BCRYPT_ROUNDS,
        )
        logger.info("Created user '%s' <%s> with role '%s'.", user.username, user.email, user.role)
        return 0
    except ConflictError as e:
        print(e.message, file=sys.stderr)
        return 1
    finally:
        db.close()
        database.dispose()


if __name__ == "__main__":
    sys.exit(main())
