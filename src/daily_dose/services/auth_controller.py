"""Local accounts - register, login, logout against the stored directory."""

import logging
import re
from abc import ABC, abstractmethod
from typing import Callable

from daily_dose.errors import DuplicateEmail, InvalidCredentials, ValidationError
from daily_dose.models import AccountRecord, User
from daily_dose.persistence import AppStore

logger = logging.getLogger(__name__)

# Min 8 chars, lowercase, uppercase, digit, non-alphanumeric
PASSWORD_PATTERN = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[\W_]).{8,}$")
PASSWORD_RULES_MESSAGE = (
    "Password must be at least 8 characters and include a number, "
    "uppercase letter, lowercase letter, and special character."
)


def validate_password(password: str) -> bool:
    return bool(PASSWORD_PATTERN.match(password or ""))


class PasswordVault(ABC):
    """How directory secrets are stored and checked."""

    @abstractmethod
    def seal(self, password: str) -> str:
        ...

    @abstractmethod
    def verify(self, password: str, stored: str) -> bool:
        ...


class PlaintextPasswordVault(PasswordVault):
    """Stores passwords as given. Kept for compatibility with existing directories."""

    def seal(self, password: str) -> str:
        return password

    def verify(self, password: str, stored: str) -> bool:
        return password == stored


class AuthController:
    """Active session plus the account directory it is checked against."""

    def __init__(
        self,
        store: AppStore,
        vault: PasswordVault | None = None,
        *,
        on_session_start: Callable[[User], None] | None = None,
    ) -> None:
        self._store = store
        self._vault = vault or PlaintextPasswordVault()
        self._on_session_start = on_session_start
        self._current_user = store.load_current_user()

    @property
    def current_user(self) -> User | None:
        return self._current_user

    def has_session(self) -> bool:
        return self._current_user is not None

    def register(self, user: User, password: str) -> User:
        if not user.name or not user.email or not password:
            raise ValidationError("All fields are required.")
        if not validate_password(password):
            raise ValidationError(PASSWORD_RULES_MESSAGE)
        accounts = self._store.load_accounts()
        if any(a.email == user.email for a in accounts):
            raise DuplicateEmail("An account with this email already exists. Please log in.")
        record = AccountRecord(name=user.name, email=user.email, password=self._vault.seal(password))
        self._store.save_accounts([*accounts, record])
        self._set_session(record.public())
        logger.info("Registered account %s", user.email)
        return self._current_user

    def _directory(self) -> list[AccountRecord]:
        accounts = self._store.load_accounts()
        if accounts:
            return accounts
        legacy = self._store.load_legacy_account()
        if legacy is None:
            return []
        logger.info("Migrating legacy account %s into directory", legacy.email)
        self._store.save_accounts([legacy])
        return [legacy]

    def login(self, email: str, password: str) -> User:
        if not email or not password:
            raise ValidationError("Email and password are required.")
        match = next(
            (
                a
                for a in self._directory()
                if a.email == email and self._vault.verify(password, a.password)
            ),
            None,
        )
        if match is None:
            raise InvalidCredentials("Invalid email or password.")
        self._set_session(match.public())
        return self._current_user

    def logout(self) -> None:
        self._set_session(None)

    def _set_session(self, user: User | None) -> None:
        self._current_user = user
        self._store.save_current_user(user)
        if user is not None and self._on_session_start:
            self._on_session_start(user)
