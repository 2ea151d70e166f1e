"""SQLAlchemy models package."""
from guidauth.models.session import UserRefreshToken

__all__ = [
    "UserRefreshToken",
]
