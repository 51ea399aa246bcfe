"""User and account directory data models."""

from pydantic import Field

from daily_dose.models.base import CamelModel


class User(CamelModel):
    """Public profile. This is what the active session holds."""

    name: str = Field(..., description="Display name")
    email: str = Field(..., description="Unique key in the account directory")


class AccountRecord(User):
    """Directory entry. The stored secret never leaves the directory."""

    password: str

    def public(self) -> User:
        return User(name=self.name, email=self.email)
