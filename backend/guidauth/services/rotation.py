"""Issuance and rotation of access/refresh credential pairs."""
from datetime import datetime, timedelta, timezone
import logging
from typing import Callable

from guidauth.config import Settings
from guidauth.schemas.auth import TokenPair
from guidauth.services.access_tokens import AccessTokenCodec
from guidauth.services.errors import (
    CredentialError,
    RefreshExpired,
    RefreshMismatch,
    UnknownSession,
    ValidationError,
)
from guidauth.services.hashing import RefreshTokenHasher
from guidauth.services.refresh_tokens import RefreshTokenGenerator, get_refresh_token_generator
from guidauth.services.store import CredentialStore, SessionRecord

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class RotationService:
    """Single-active-session credential protocol.

    ``authenticate`` always replaces whatever session the identity had.
    ``refresh`` only accepts an access token whose signature is valid and whose
    expiry has passed, together with the refresh secret matching the stored
    digest. Each successful refresh rotates the refresh secret.
    """

    def __init__(
        self,
        codec: AccessTokenCodec,
        hasher: RefreshTokenHasher,
        store: CredentialStore,
        generate_refresh_token: RefreshTokenGenerator,
        refresh_ttl: timedelta = timedelta(days=30),
        strict_rotation: bool = False,
        clock: Clock = utc_now,
    ) -> None:
        self.codec = codec
        self.hasher = hasher
        self.store = store
        self.generate_refresh_token = generate_refresh_token
        self.refresh_ttl = refresh_ttl
        self.strict_rotation = strict_rotation
        self.clock = clock

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        store: CredentialStore,
        clock: Clock = utc_now,
    ) -> "RotationService":
        return cls(
            codec=AccessTokenCodec(
                settings.secret_key,
                algorithm=settings.algorithm,
                ttl=timedelta(minutes=settings.access_token_expire_minutes),
            ),
            hasher=RefreshTokenHasher(rounds=settings.bcrypt_rounds),
            store=store,
            generate_refresh_token=get_refresh_token_generator(settings.refresh_token_strategy),
            refresh_ttl=timedelta(days=settings.refresh_token_expire_days),
            strict_rotation=settings.strict_rotation,
            clock=clock,
        )

    def authenticate(self, identity: str) -> TokenPair:
        """Start a new session for ``identity``, replacing any existing one."""
        if not identity:
            raise ValidationError("GUID is required")
        try:
            identity.encode("utf-8")
        except UnicodeEncodeError:
            raise ValidationError("GUID must be valid UTF-8") from None

        pair = self._issue(identity, self.clock())
        logger.info(f"Issued new session for {identity}")
        return pair

    def refresh(self, access_token: str, refresh_token: str) -> TokenPair:
        """Exchange an expired access token and its refresh secret for a new pair."""
        now = self.clock()
        try:
            identity = self.codec.parse_expired_only(access_token, now)
            record = self._load_active_session(identity, now)

            if not self.hasher.verify(refresh_token, record.refresh_token_hash):
                raise RefreshMismatch()

            pair = self._issue(identity, now, previous=record)
        except CredentialError as exc:
            logger.warning(f"Refresh rejected: {exc.error_code}")
            raise

        logger.info(f"Rotated session for {identity}")
        return pair

    def _load_active_session(self, identity: str, now: datetime) -> SessionRecord:
        record = self.store.get(identity)
        if record is None:
            raise UnknownSession()
        if now > record.expires_at:
            raise RefreshExpired()
        return record

    def _issue(self, identity: str, now: datetime, previous: SessionRecord | None = None) -> TokenPair:
        access = self.codec.issue(identity, now)
        refresh_token = self.generate_refresh_token(identity, now)
        refresh_token_hash = self.hasher.hash(refresh_token)
        expires_at = now + self.refresh_ttl

        if previous is not None and self.strict_rotation:
            swapped = self.store.replace_if_current(
                identity,
                previous.refresh_token_hash,
                refresh_token_hash,
                expires_at,
            )
            if not swapped:
                # Another refresh rotated this session after we verified it
                raise RefreshMismatch()
        else:
            self.store.upsert(identity, refresh_token_hash, expires_at)

        return TokenPair(access_token=access.token, refresh_token=refresh_token)
