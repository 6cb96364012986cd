"""Tests for supportdesk.services.accounts.CredentialStore against in-memory SQLite."""

import unittest
from unittest.mock import MagicMock, patch

from sqlalchemy.exc import OperationalError
from support import make_session

from supportdesk.core.errors import (
    NotFoundError,
    StoreUnavailableError,
    UnauthenticatedError,
    ValidationFailedError,
)
from supportdesk.core.security import TokenConfig, TokenService
from supportdesk.models import Account
from supportdesk.schemas.auth import Role
from supportdesk.services.accounts import CredentialStore, identity_of


class _StoreTestCase(unittest.TestCase):
    def setUp(self) -> None:
        # Cheap bcrypt cost keeps the suite fast; hashing logic is unchanged.
        rounds = patch("supportdesk.core.security.BCRYPT_ROUNDS", 4)
        rounds.start()
        self.addCleanup(rounds.stop)
        self.session = make_session()
        self.addCleanup(self.session.close)
        self.store = CredentialStore(self.session)


class TestRegister(_StoreTestCase):
    def test_defaults_to_user_and_lowercases_email(self) -> None:
        account = self.store.register("alice@Example.com", "secret123")
        self.assertEqual(account.email, "alice@example.com")
        self.assertEqual(account.role, "user")
        self.assertEqual(len(account.id), 32)
        self.assertNotIn("secret123", account.password_hash)

    def test_duplicate_email_case_insensitive(self) -> None:
        self.store.register("alice@example.com", "secret123")
        with self.assertRaises(ValidationFailedError) as ctx:
            self.store.register("ALICE@EXAMPLE.COM", "other-pass")
        self.assertEqual(ctx.exception.message, "Email is already registered")

    def test_invalid_input(self) -> None:
        for email, password in (
            ("", "secret123"),
            ("no-at-sign", "secret123"),
            ("@example.com", "secret123"),
            ("bob@example.com", ""),
            ("bob@example.com", "short"),
            ("bob@example.com", "x" * 129),
        ):
            with self.subTest(email=email, password_len=len(password)):
                with self.assertRaises(ValidationFailedError):
                    self.store.register(email, password)

    def test_operator_can_create_admin(self) -> None:
        account = self.store.register("ops@example.com", "secret123", Role.ADMIN)
        self.assertEqual(account.role, "admin")


class TestAuthenticate(_StoreTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.store.register("alice@Example.com", "secret123")

    def test_case_insensitive_email(self) -> None:
        account = self.store.authenticate("ALICE@example.com", "secret123")
        self.assertEqual(account.email, "alice@example.com")

    def test_wrong_password_and_unknown_email_look_the_same(self) -> None:
        with self.assertRaises(UnauthenticatedError) as wrong:
            self.store.authenticate("alice@example.com", "secret124")
        with self.assertRaises(UnauthenticatedError) as unknown:
            self.store.authenticate("nobody@example.com", "secret123")
        self.assertEqual(wrong.exception.message, unknown.exception.message)

    def test_missing_fields(self) -> None:
        with self.assertRaises(ValidationFailedError):
            self.store.authenticate("", "secret123")

    def test_register_then_login_token_verifies(self) -> None:
        tokens = TokenService(TokenConfig(secret="store-test"))
        account = self.store.authenticate("Alice@EXAMPLE.com", "secret123")
        identity = tokens.verify(tokens.issue(identity_of(account)))
        self.assertEqual(identity.email, "alice@example.com")
        self.assertEqual(identity.role, Role.USER)


class TestPromoteAndGet(_StoreTestCase):
    def test_promote(self) -> None:
        self.store.register("bob@example.com", "secret123")
        account, changed = self.store.promote("BOB@example.com")
        self.assertTrue(changed)
        self.assertEqual(account.role, "admin")
        _, changed_again = self.store.promote("bob@example.com")
        self.assertFalse(changed_again)

    def test_promote_unknown(self) -> None:
        with self.assertRaises(NotFoundError):
            self.store.promote("ghost@example.com")

    def test_get(self) -> None:
        created = self.store.register("carol@example.com", "secret123")
        self.assertEqual(self.store.get(created.id).email, "carol@example.com")
        with self.assertRaises(NotFoundError):
            self.store.get("0" * 32)


class TestStoreFaults(unittest.TestCase):
    """Database errors surface as STORE_UNAVAILABLE, not validation failures."""

    def test_lookup_failure(self) -> None:
        session = MagicMock()
        session.query.side_effect = OperationalError("SELECT", {}, Exception("down"))
        with self.assertRaises(StoreUnavailableError):
            CredentialStore(session).authenticate("a@example.com", "secret123")

    def _session_losing_connection_after_commit(self, existing: Account | None) -> MagicMock:
        session = MagicMock()
        session.query.return_value.filter.return_value.first.return_value = existing
        session.refresh.side_effect = OperationalError("SELECT", {}, Exception("gone"))
        return session

    @patch("supportdesk.core.security.BCRYPT_ROUNDS", 4)
    def test_register_refresh_failure(self) -> None:
        session = self._session_losing_connection_after_commit(None)
        with self.assertRaises(StoreUnavailableError):
            CredentialStore(session).register("a@example.com", "secret123")
        session.rollback.assert_called_once()

    def test_promote_refresh_failure(self) -> None:
        account = Account(email="a@example.com", password_hash="x", role="user")
        session = self._session_losing_connection_after_commit(account)
        with self.assertRaises(StoreUnavailableError):
            CredentialStore(session).promote("a@example.com")
        session.rollback.assert_called_once()


if __name__ == "__main__":
    unittest.main()
