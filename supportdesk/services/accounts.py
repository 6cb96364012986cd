"""Credential store: account registration, credential checks and operator promotion."""

import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from supportdesk.core.errors import (
    NotFoundError,
    StoreUnavailableError,
    UnauthenticatedError,
    ValidationFailedError,
)
from supportdesk.core.security import (
    EMAIL_MAX_LEN,
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    hash_password,
    verify_password,
)
from supportdesk.models import Account
from supportdesk.schemas.auth import Identity, Role

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"


def normalize_email(email: str) -> str:
    """Emails are compared and stored lowercased."""
    return email.strip().lower()


def _validate_email(email: str) -> None:
    if not email or len(email) > EMAIL_MAX_LEN:
        raise ValidationFailedError("Email and password are required")
    local, sep, domain = email.partition("@")
    if not sep or not local or not domain:
        raise ValidationFailedError("Invalid email address")


def _validate_password(password: str) -> None:
    if not password:
        raise ValidationFailedError("Email and password are required")
    if not (PASSWORD_MIN_LEN <= len(password) <= PASSWORD_MAX_LEN):
        raise ValidationFailedError(
            f"Password must be {PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} characters."
        )


def identity_of(account: Account) -> Identity:
    return Identity(id=account.id, email=account.email, role=Role(account.role))


class CredentialStore:
    """Account persistence over a SQLAlchemy session."""

    def __init__(self, session: Session) -> None:
        self._db = session

    def find_by_email(self, email: str) -> Account | None:
        try:
            return (
                self._db.query(Account)
                .filter(Account.email == normalize_email(email))
                .first()
            )
        except SQLAlchemyError as e:
            logger.error("Account lookup failed: %s", type(e).__name__)
            raise StoreUnavailableError() from e

    def get(self, account_id: str) -> Account:
        try:
            account = self._db.get(Account, account_id)
        except SQLAlchemyError as e:
            logger.error("Account lookup failed: %s", type(e).__name__)
            raise StoreUnavailableError() from e
        if account is None:
            raise NotFoundError("Account not found")
        return account

    def register(self, email: str, password: str, role: Role = Role.USER) -> Account:
        """
        Create an account. Public registration always passes the default role;
        admin accounts come only from operator tooling.
        """
        normalized = normalize_email(email or "")
        _validate_email(normalized)
        _validate_password(password)

        if self.find_by_email(normalized) is not None:
            raise ValidationFailedError("Email is already registered")

        account = Account(
            email=normalized,
            password_hash=hash_password(password),
            role=role.value,
        )
        try:
            self._db.add(account)
            self._db.commit()
            self._db.refresh(account)
        except IntegrityError as e:
            # Lost a race on the unique email index.
            self._db.rollback()
            raise ValidationFailedError("Email is already registered") from e
        except SQLAlchemyError as e:
            self._db.rollback()
            logger.error("Account insert failed: %s", type(e).__name__)
            raise StoreUnavailableError() from e
        logger.info("Account registered", extra={"account_id": account.id, "role": account.role})
        return account

    def authenticate(self, email: str, password: str) -> Account:
        """Return the account for matching credentials; unknown email and bad password look the same."""
        if not email or not password:
            raise ValidationFailedError("Email and password are required")
        account = self.find_by_email(email)
        if account is None or not verify_password(password, account.password_hash):
            logger.info("Login failed", extra={"email": normalize_email(email)})
            raise UnauthenticatedError(INVALID_CREDENTIALS)
        return account

    def promote(self, email: str) -> tuple[Account, bool]:
        """
        Elevate an account to admin (operator-only pathway).
        Returns (account, changed); already-admin accounts are left untouched.
        """
        account = self.find_by_email(email)
        if account is None:
            raise NotFoundError(f"No account found with email: {normalize_email(email)}")
        if account.role == Role.ADMIN.value:
            return account, False
        account.role = Role.ADMIN.value
        try:
            self._db.commit()
            self._db.refresh(account)
        except SQLAlchemyError as e:
            self._db.rollback()
            logger.error("Account update failed: %s", type(e).__name__)
            raise StoreUnavailableError() from e
        logger.info("Account promoted to admin", extra={"account_id": account.id})
        return account, True
