"""
Create a user (e.g. the first admin). Run from project root:
  python -m prowler_dashboard.scripts.create_user USERNAME EMAIL PASSWORD [role]
Example:
  python -m prowler_dashboard.scripts.create_user admin admin@example.com your-secure-password admin
"""
import argparse
import sys

from dotenv import load_dotenv
from pydantic import ValidationError

from prowler_dashboard.core.config import get_settings
from prowler_dashboard.core.database import Database
from prowler_dashboard.models.user import UserRole
from prowler_dashboard.schemas.users import UserCreate
from prowler_dashboard.services.users import DuplicateUserError, create_user


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a Prowler Dashboard user.")
    parser.add_argument("username", help="Username (at least 3 chars)")
    parser.add_argument("email", help="Email address")
    parser.add_argument("password", help="Password (at least 6 chars)")
    parser.add_argument("role", nargs="?", default="user", choices=[r.value for r in UserRole])
    parser.add_argument("--first-name", default="Admin", help="First name")
    parser.add_argument("--last-name", default="User", help="Last name")
    args = parser.parse_args(argv)

    try:
        body = UserCreate(
            username=args.username,
            email=args.email,
            password=args.password,
            first_name=args.first_name,
            last_name=args.last_name,
            role=UserRole(args.role),
        )
    except ValidationError as e:
        for err in e.errors():
            print(f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}", file=sys.stderr)
        return 1

    load_dotenv()
    database = Database(get_settings().DATABASE_URL)
    db = database.session()
    try:
        user = create_user(
            db,
            username=body.username,
            email=body.email,
            password=body.password,
            first_name=body.first_name,
            last_name=body.last_name,
            role=body.role,
        )
        print(f"Created user '{user.username}' with role '{user.role.value}'.")
        return 0
    except DuplicateUserError as e:
        print(e.message, file=sys.stderr)
        return 1
    finally:
        db.close()
        database.dispose()


if __name__ == "__main__":
    sys.exit(main())
