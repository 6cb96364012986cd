"""
Create an account out-of-band (e.g. the first admin). Run from project root:
  python -m supportdesk.scripts.create_user EMAIL PASSWORD [role]
Example:
  python -m supportdesk.scripts.create_user ops@example.com your-secure-password admin
"""
import argparse
import sys

from supportdesk.core.database import session_scope
from supportdesk.core.errors import SupportDeskError
from supportdesk.schemas.auth import Role
from supportdesk.services.accounts import CredentialStore


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a support desk account.")
    parser.add_argument("email", help="Email address (stored lowercased)")
    parser.add_argument("password", help="Password (8-128 chars)")
    parser.add_argument(
        "role",
        nargs="?",
        default=Role.USER.value,
        choices=[r.value for r in Role],
    )
    args = parser.parse_args(argv)

    with session_scope() as db:
        try:
            account = CredentialStore(db).register(args.email, args.password, Role(args.role))
        except SupportDeskError as e:
            print(e.message, file=sys.stderr)
            return 1
        print(f"Created account '{account.email}' with role '{account.role}'.")
        return 0


if __name__ == "__main__":
    sys.exit(main())
