"""
Promote an existing account to admin. This is the only elevation pathway;
public registration never grants admin. Run from project root:

  python -m supportdesk.scripts.promote_admin user@example.com

Existing tokens keep their old role until they expire.
"""

import argparse
import logging
import sys

from supportdesk.core.database import session_scope
from supportdesk.core.errors import NotFoundError, SupportDeskError
from supportdesk.services.accounts import CredentialStore

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Promote an account to admin.")
    parser.add_argument("email", help="Email of the account to promote")
    args = parser.parse_args(argv)

    try:
        with session_scope() as db:
            account, changed = CredentialStore(db).promote(args.email)
    except NotFoundError as e:
        logger.error("%s", e.message)
        return 1
    except SupportDeskError as e:
        logger.error("Failed to promote account: %s", e.message)
        return 1

    if changed:
        logger.info("Account %s has been promoted to admin.", account.email)
    else:
        logger.info("Account %s is already an admin.", account.email)
    return 0


if __name__ == "__main__":
    sys.exit(main())
