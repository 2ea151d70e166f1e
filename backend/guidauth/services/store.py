"""Persistent identity -> refresh session mapping."""
from dataclasses import dataclass
from datetime import datetime
import logging
import threading
from typing import Protocol

from sqlalchemy import update
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.engine import Engine

from guidauth.database import Base, create_session_factory, session_scope
from guidauth.models.session import UserRefreshToken, utc_now_iso
from guidauth.services.errors import StoreUnavailable

logger = logging.getLogger(__name__)

UPSERT_DIALECTS = {
    "sqlite": sqlite_insert,
    "postgresql": postgresql_insert,
}


def parse_expires_at(value: str) -> datetime:
    """Parse a stored expiry; only timezone-aware ISO timestamps are valid."""
    expires_at = datetime.fromisoformat(value)
    if expires_at.tzinfo is None:
        raise ValueError(f"Stored expiry has no timezone: {value}")
    return expires_at


@dataclass(frozen=True)
class SessionRecord:
    identity: str
    refresh_token_hash: str
    expires_at: datetime


class CredentialStore(Protocol):
    def upsert(self, identity: str, refresh_token_hash: str, expires_at: datetime) -> None:
        ...

    def get(self, identity: str) -> SessionRecord | None:
        ...

    def replace_if_current(
        self,
        identity: str,
        expected_hash: str,
        refresh_token_hash: str,
        expires_at: datetime,
    ) -> bool:
        ...

    def create_schema(self) -> None:
        ...


class MemoryCredentialStore:
    """In-process store; each operation holds a lock for its whole duration."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._records: dict[str, SessionRecord] = {}

    def upsert(self, identity: str, refresh_token_hash: str, expires_at: datetime) -> None:
        with self._lock:
            self._records[identity] = SessionRecord(identity, refresh_token_hash, expires_at)

    def get(self, identity: str) -> SessionRecord | None:
        with self._lock:
            return self._records.get(identity)

    def replace_if_current(
        self,
        identity: str,
        expected_hash: str,
        refresh_token_hash: str,
        expires_at: datetime,
    ) -> bool:
        with self._lock:
            current = self._records.get(identity)
            if current is None or current.refresh_token_hash != expected_hash:
                return False
            self._records[identity] = SessionRecord(identity, refresh_token_hash, expires_at)
            return True

    def create_schema(self) -> None:
        return None


class SqlCredentialStore:
    """SQLAlchemy-backed store keyed by GUID."""

    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        self.session_factory = create_session_factory(engine)

    def create_schema(self) -> None:
        try:
            Base.metadata.create_all(bind=self.engine)
        except SQLAlchemyError as exc:
            logger.exception("Failed to create credential store schema")
            raise StoreUnavailable() from exc

    def upsert(self, identity: str, refresh_token_hash: str, expires_at: datetime) -> None:
        """Create or replace the session row for ``identity`` in one statement."""
        now = utc_now_iso()
        values = {
            "refresh_token_hash": refresh_token_hash,
            "expires_at": expires_at.isoformat(),
            "updated_at": now,
        }
        try:
            with session_scope(self.session_factory) as db:
                insert_fn = UPSERT_DIALECTS.get(db.get_bind().dialect.name)
                if insert_fn is None:
                    db.merge(UserRefreshToken(guid=identity, **values))
                    return
                stmt = insert_fn(UserRefreshToken).values(guid=identity, created_at=now, **values)
                stmt = stmt.on_conflict_do_update(index_elements=["guid"], set_=values)
                db.execute(stmt)
        except SQLAlchemyError as exc:
            logger.exception(f"Failed to upsert refresh session for {identity}")
            raise StoreUnavailable() from exc

    def get(self, identity: str) -> SessionRecord | None:
        try:
            with session_scope(self.session_factory) as db:
                row = db.get(UserRefreshToken, identity)
                if row is None:
                    return None
                return SessionRecord(
                    identity=row.guid,
                    refresh_token_hash=row.refresh_token_hash,
                    expires_at=parse_expires_at(row.expires_at),
                )
        except (SQLAlchemyError, TypeError, ValueError) as exc:
            logger.exception(f"Failed to load refresh session for {identity}")
            raise StoreUnavailable() from exc

    def replace_if_current(
        self,
        identity: str,
        expected_hash: str,
        refresh_token_hash: str,
        expires_at: datetime,
    ) -> bool:
        """Swap the digest only if it still equals ``expected_hash``."""
        try:
            with session_scope(self.session_factory) as db:
                result = db.execute(
                    update(UserRefreshToken)
                    .where(
                        UserRefreshToken.guid == identity,
                        UserRefreshToken.refresh_token_hash == expected_hash,
                    )
                    .values(
                        refresh_token_hash=refresh_token_hash,
                        expires_at=expires_at.isoformat(),
                        updated_at=utc_now_iso(),
                    )
                )
                return result.rowcount == 1
        except SQLAlchemyError as exc:
            logger.exception(f"Failed to rotate refresh session for {identity}")
            raise StoreUnavailable() from exc
