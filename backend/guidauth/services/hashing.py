"""One-way hashing of refresh secrets."""
import bcrypt

from guidauth.services.errors import HashingError

# bcrypt only consumes the first 72 bytes of its input
BCRYPT_MAX_BYTES = 72


class RefreshTokenHasher:
    """Salted bcrypt digests for refresh secrets."""

    def __init__(self, rounds: int = 10) -> None:
        self.rounds = rounds

    def hash(self, secret: str) -> str:
        """Hash a refresh secret for storage."""
        try:
            secret_bytes = secret.encode("utf-8")
        except UnicodeEncodeError as exc:
            raise HashingError("Refresh secret is not valid UTF-8") from exc
        if not secret_bytes:
            raise HashingError("Refresh secret must not be empty")
        if len(secret_bytes) > BCRYPT_MAX_BYTES:
            raise HashingError(f"Refresh secret exceeds {BCRYPT_MAX_BYTES} bytes")
        try:
            hashed = bcrypt.hashpw(secret_bytes, bcrypt.gensalt(rounds=self.rounds))
        except ValueError as exc:
            raise HashingError() from exc
        return hashed.decode("utf-8")

    def verify(self, secret: str, digest: str) -> bool:
        """Verify a refresh secret against a stored digest."""
        try:
            secret_bytes = secret.encode("utf-8")
        except UnicodeEncodeError:
            return False
        if not secret_bytes or len(secret_bytes) > BCRYPT_MAX_BYTES:
            return False
        try:
            return bcrypt.checkpw(secret_bytes, digest.encode("utf-8"))
        except (TypeError, ValueError):
            return False
