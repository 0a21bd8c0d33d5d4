"""User lookup collaborator for history attribution."""

from abc import ABC, abstractmethod

from pydantic import BaseModel, ConfigDict, Field


class CurrentUser(BaseModel):
    """The user a save is attributed to."""

    model_config = ConfigDict(frozen=True)

    user_name: str = Field(..., description="Login name")
    organisation: str | None = Field(default=None, description="Owning organisation")


class UserDirectory(ABC):
    """Looks up users by login name."""

    @abstractmethod
    def find_by_user_name(self, user_name: str) -> CurrentUser | None:
        """Return the user, or None when unknown."""
        pass


class InMemoryUserDirectory(UserDirectory):
    """In-memory implementation of UserDirectory for testing and development."""

    def __init__(self, users: list[CurrentUser] | None = None) -> None:
        self._users: dict[str, CurrentUser] = {}
        for user in users or []:
            self.add(user)

    def add(self, user: CurrentUser) -> None:
        """Register or replace a user."""
        self._users[user.user_name] = user

    def find_by_user_name(self, user_name: str) -> CurrentUser | None:
        return self._users.get(user_name)
