"""Refresh session model."""
from datetime import datetime, timezone

from sqlalchemy import Column, Index, String

from guidauth.database import Base


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class UserRefreshToken(Base):
    """Current refresh-token digest for an identity; one row per GUID."""

    __tablename__ = "user_refresh_tokens"
    __table_args__ = (
        Index("ix_user_refresh_tokens_expires_at", "expires_at"),
    )

    guid = Column(String(255), primary_key=True)
    refresh_token_hash = Column(String(128), nullable=False)
    expires_at = Column(String(32), nullable=False)
    created_at = Column(String(32), default=utc_now_iso)
    updated_at = Column(String(32), default=utc_now_iso, onupdate=utc_now_iso)
