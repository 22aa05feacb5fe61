# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Data-access layer for directory users (SQL)."""
import uuid
from typing import Any, Dict, List, Optional

from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app.core.exceptions import NotFoundError, PersistenceError
from app.core.logging import get_logger
from app.models.domain import UPDATABLE_COLUMNS, User, utcnow

logger = get_logger(__name__)

USER_COLS = "username, list_membership, created_at, updated_at"

CREATE_USERS_TABLE = """
    CREATE TABLE IF NOT EXISTS users (
        id              VARCHAR(36)  PRIMARY KEY,
        username        VARCHAR(255) NOT NULL UNIQUE,
        list_membership VARCHAR(255),
        created_at      TIMESTAMP WITH TIME ZONE NOT NULL,
        updated_at      TIMESTAMP WITH TIME ZONE
    )
"""


def _row_to_user(row) -> User:
    return User(
        username=row["username"],
        list_membership=row["list_membership"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


class SqlUserDirectory:
    def __init__(self, engine: Engine):
        self._engine = engine

    def create_schema(self) -> None:
        with self._engine.begin() as conn:
            conn.execute(text(CREATE_USERS_TABLE))
            conn.execute(text(
                "CREATE INDEX IF NOT EXISTS ix_users_list_membership ON users (list_membership)"
            ))

    # ── Read ──

    def get(self, username: str) -> Optional[User]:
        try:
            with self._engine.connect() as conn:
                row = conn.execute(
                    text(f"SELECT {USER_COLS} FROM users WHERE username = :username"),
                    {"username": username},
                ).mappings().first()
        except SQLAlchemyError as exc:
            logger.error("Failed to read user %s: %s", username, exc)
            raise PersistenceError(f"Could not read user '{username}'") from exc
        return _row_to_user(row) if row else None

    def find_by_username(self, username: str) -> User:
        user = self.get(username)
        if user is None:
            raise NotFoundError(f"User '{username}' not found", username=username)
        return user

    def list_members(self, list_id: str) -> List[User]:
        try:
            with self._engine.connect() as conn:
                rows = conn.execute(
                    text(f"SELECT {USER_COLS} FROM users WHERE list_membership = :list_id ORDER BY username"),
                    {"list_id": list_id},
                ).mappings().all()
        except SQLAlchemyError as exc:
            logger.error("Failed to list members of %s: %s", list_id, exc)
            raise PersistenceError(f"Could not list members of '{list_id}'") from exc
        return [_row_to_user(r) for r in rows]

    def count(self) -> int:
        with self._engine.connect() as conn:
            return conn.execute(text("SELECT COUNT(*) FROM users")).scalar() or 0

    def verify_connection(self) -> int:
        return self.count()

    # ── Write ──

    def find_or_create(self, username: str) -> User:
        existing = self.get(username)
        if existing is not None:
            return existing

        now = utcnow()
        try:
            with self._engine.begin() as conn:
                conn.execute(
                    text("""
                        INSERT INTO users (id, username, list_membership, created_at, updated_at)
                        VALUES (:id, :username, NULL, :created_at, NULL)
                    """),
                    {"id": str(uuid.uuid4()), "username": username, "created_at": now.isoformat()},
                )
        except IntegrityError:
            # Lost an insert race for the same username; the winner's row stands.
            winner = self.get(username)
            if winner is None:
                raise PersistenceError(f"Could not create user '{username}'", username=username)
            return winner
        except SQLAlchemyError as exc:
            logger.error("Failed to create user %s: %s", username, exc)
            raise PersistenceError(f"Could not create user '{username}'", username=username) from exc

        logger.info("User created username=%s", username)
        return User(username=username, created_at=now)

    def update(self, user: User, changes: Dict[str, Any]) -> User:
        unknown = set(changes) - UPDATABLE_COLUMNS
        if unknown:
            raise PersistenceError(f"Cannot update column(s): {', '.join(sorted(unknown))}")
        if not changes:
            return user

        now = utcnow()
        assignments = ", ".join(f"{col} = :{col}" for col in changes)
        params = dict(changes, username=user.username, updated_at=now.isoformat())
        try:
            with self._engine.begin() as conn:
                result = conn.execute(
                    text(f"UPDATE users SET {assignments}, updated_at = :updated_at WHERE username = :username"),
                    params,
                )
                rowcount = result.rowcount
        except SQLAlchemyError as exc:
            logger.error("Failed to update user %s: %s", user.username, exc)
            raise PersistenceError(f"Could not update user '{user.username}'", username=user.username) from exc

        if rowcount == 0:
            raise PersistenceError(f"User '{user.username}' no longer exists", username=user.username)
        return user.model_copy(update={**changes, "updated_at": now})

    def dispose(self):
        self._engine.dispose()
