# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Repository: in-memory user directory.
Same contract as the SQL directory; state lives for the process lifetime.
"""

import threading
from typing import Any, Optional

from app.core.exceptions import NotFoundError, PersistenceError
from app.models.domain import UPDATABLE_COLUMNS, User, utcnow


class InMemoryUserDirectory:
    """Dict-backed directory keyed by username."""

    def __init__(self) -> None:
        self._store: dict[str, User] = {}
        self._lock = threading.Lock()

    # ── Read ──

    def get(self, username: str) -> Optional[User]:
        return self._store.get(username)

    def find_by_username(self, username: str) -> User:
        user = self._store.get(username)
        if user is None:
            raise NotFoundError(f"User '{username}' not found", username=username)
        return user

    def list_members(self, list_id: str) -> list[User]:
        return sorted(
            (u for u in self._store.values() if u.list_membership == list_id),
            key=lambda u: u.username,
        )

    def count(self) -> int:
        return len(self._store)

    def verify_connection(self) -> int:
        return self.count()

    # ── Write ──

    def find_or_create(self, username: str) -> User:
        with self._lock:
            user = self._store.get(username)
            if user is None:
                user = User(username=username)
                self._store[username] = user
            return user

    def update(self, user: User, changes: dict[str, Any]) -> User:
        unknown = set(changes) - UPDATABLE_COLUMNS
        if unknown:
            raise PersistenceError(f"Cannot update column(s): {', '.join(sorted(unknown))}")
        with self._lock:
            if user.username not in self._store:
                raise PersistenceError(f"User '{user.username}' no longer exists", username=user.username)
            updated = self._store[user.username].model_copy(update={**changes, "updated_at": utcnow()})
            self._store[user.username] = updated
            return updated

    # ── Bulk / internal ──

    def clear(self) -> None:
        with self._lock:
            self._store.clear()
