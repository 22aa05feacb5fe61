# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Collaborator roles the enrollment operation depends on.

Anything exposing these methods can be passed in; nothing here is tied to a
concrete storage or delivery implementation.
"""

from typing import Any, Protocol

from app.models.domain import User


class UserDirectory(Protocol):
    def find_or_create(self, username: str) -> User:
        ...

    def find_by_username(self, username: str) -> User:
        """Raise ``NotFoundError`` when the user does not exist."""
        ...

    def update(self, user: User, changes: dict[str, Any]) -> User:
        """Raise ``PersistenceError`` when the record cannot be written."""
        ...


class Notifier(Protocol):
    def notify(self, user: User, list_id: str) -> None:
        """Raise ``NotificationError`` when delivery fails."""
        ...
