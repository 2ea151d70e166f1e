"""Signing and inspection of access tokens."""
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum

from jose import JWTError, jwt

from guidauth.services.errors import InvalidCredential, NotYetEligibleForRefresh


class TokenStatus(str, Enum):
    VALID = "valid"
    EXPIRED = "expired"
    MALFORMED = "malformed"


@dataclass(frozen=True)
class IssuedAccessToken:
    token: str
    expires_at: datetime


@dataclass(frozen=True)
class TokenInspection:
    """Outcome of checking an access token against a point in time."""

    status: TokenStatus
    identity: str | None = None
    expires_at: datetime | None = None


class AccessTokenCodec:
    """Issues HMAC-signed JWTs carrying ``guid`` and ``exp`` claims."""

    def __init__(self, secret_key: str, algorithm: str = "HS512", ttl: timedelta = timedelta(minutes=60)) -> None:
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.ttl = ttl

    def issue(self, identity: str, now: datetime) -> IssuedAccessToken:
        """Create a signed access token expiring ``ttl`` after ``now``."""
        expires_at = now + self.ttl
        claims = {"guid": identity, "exp": int(expires_at.timestamp())}
        token = jwt.encode(claims, self.secret_key, algorithm=self.algorithm)
        return IssuedAccessToken(token=token, expires_at=expires_at)

    def inspect(self, token: str, now: datetime) -> TokenInspection:
        """Verify the signature and classify the token as valid, expired or malformed.

        Expiry is evaluated against ``now`` instead of the wall clock, so the
        library's own ``exp`` check is disabled.
        """
        try:
            claims = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                options={"verify_exp": False},
            )
        except (JWTError, UnicodeError):
            return TokenInspection(TokenStatus.MALFORMED)

        identity = claims.get("guid")
        exp = claims.get("exp")
        if not isinstance(identity, str) or not identity:
            return TokenInspection(TokenStatus.MALFORMED)
        if isinstance(exp, bool) or not isinstance(exp, int):
            return TokenInspection(TokenStatus.MALFORMED)

        expires_at = datetime.fromtimestamp(exp, tz=timezone.utc)
        status = TokenStatus.EXPIRED if now > expires_at else TokenStatus.VALID
        return TokenInspection(status, identity=identity, expires_at=expires_at)

    def parse_expired_only(self, token: str, now: datetime) -> str:
        """Return the identity of a correctly signed token that has already expired."""
        inspection = self.inspect(token, now)
        if inspection.status is TokenStatus.MALFORMED:
            raise InvalidCredential()
        if inspection.status is TokenStatus.VALID:
            raise NotYetEligibleForRefresh()
        return inspection.identity
