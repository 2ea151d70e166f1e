"""Refresh secret generation."""
import base64
from datetime import datetime
import secrets
from typing import Callable

RefreshTokenGenerator = Callable[[str, datetime], str]


def generate_random_refresh_token(identity: str, now: datetime) -> str:
    """Return an unguessable URL-safe refresh secret."""
    return secrets.token_urlsafe(32)


def generate_derived_refresh_token(identity: str, now: datetime) -> str:
    """Return base64(identity + time of day).

    Anyone who knows the identity and roughly when it was issued can rebuild
    this value. It is only acceptable because refresh secrets are never
    trusted without checking them against the stored bcrypt digest.
    """
    timestamp = now.strftime("%H:%M:%S.%f")[:-1]
    return base64.b64encode(f"{identity}{timestamp}".encode("utf-8")).decode("ascii")


GENERATORS: dict[str, RefreshTokenGenerator] = {
    "random": generate_random_refresh_token,
    "derived": generate_derived_refresh_token,
}


def get_refresh_token_generator(strategy: str) -> RefreshTokenGenerator:
    try:
        return GENERATORS[strategy]
    except KeyError:
        raise ValueError(f"Unknown refresh token strategy: {strategy}") from None
