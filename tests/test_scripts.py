"""Tests for the operator scripts (create_user, promote_admin)."""

import contextlib
import io
import unittest
from unittest.mock import patch

from support import make_session

from supportdesk.models import Account
from supportdesk.scripts import create_user, promote_admin


class _ScriptTestCase(unittest.TestCase):
    def setUp(self) -> None:
        rounds = patch("supportdesk.core.security.BCRYPT_ROUNDS", 4)
        rounds.start()
        self.addCleanup(rounds.stop)
        self.session = make_session()
        self.addCleanup(self.session.close)

        @contextlib.contextmanager
        def fake_scope():
            yield self.session

        for module in (create_user, promote_admin):
            scope = patch.object(module, "session_scope", fake_scope)
            scope.start()
            self.addCleanup(scope.stop)

    def _role(self, email: str) -> str | None:
        account = self.session.query(Account).filter(Account.email == email).first()
        return account.role if account else None


class TestCreateUser(_ScriptTestCase):
    def test_creates_admin(self) -> None:
        with contextlib.redirect_stdout(io.StringIO()):
            code = create_user.main(["Ops@Example.com", "secret123", "admin"])
        self.assertEqual(code, 0)
        self.assertEqual(self._role("ops@example.com"), "admin")

    def test_duplicate_fails(self) -> None:
        with contextlib.redirect_stdout(io.StringIO()), contextlib.redirect_stderr(io.StringIO()):
            self.assertEqual(create_user.main(["a@example.com", "secret123"]), 0)
            self.assertEqual(create_user.main(["a@example.com", "secret123"]), 1)
        self.assertEqual(self._role("a@example.com"), "user")


class TestPromoteAdmin(_ScriptTestCase):
    def test_promotes_existing_account(self) -> None:
        with contextlib.redirect_stdout(io.StringIO()):
            create_user.main(["bob@example.com", "secret123"])
        self.assertEqual(promote_admin.main(["BOB@example.com"]), 0)
        self.assertEqual(self._role("bob@example.com"), "admin")
        self.assertEqual(promote_admin.main(["bob@example.com"]), 0)

    def test_unknown_account(self) -> None:
        self.assertEqual(promote_admin.main(["ghost@example.com"]), 1)


if __name__ == "__main__":
    unittest.main()
