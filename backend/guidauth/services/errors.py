"""Credential protocol errors.

Each error carries the HTTP status and a stable error code so the API layer
can render it without inspecting the protocol state that produced it.
"""


class CredentialError(Exception):
    """Base class for protocol errors mapped to HTTP responses."""

    status_code: int = 400
    error_code: str = "credential_error"
    default_message: str = "Credential error"

    def __init__(self, message: str | None = None, *, status_code: int | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)
        if status_code is not None:
            self.status_code = status_code


class ValidationError(CredentialError):
    """Bad or missing input at the boundary (400)."""

    status_code = 400
    error_code = "validation_error"
    default_message = "Invalid request"


class InvalidCredential(CredentialError):
    """Access token signature or format check failed (401)."""

    status_code = 401
    error_code = "invalid_credential"
    default_message = "Invalid access token"


class NotYetEligibleForRefresh(CredentialError):
    """Access token is still valid, so it cannot be exchanged yet (400)."""

    status_code = 400
    error_code = "not_yet_eligible_for_refresh"
    default_message = "Access token has not expired yet"


class UnknownSession(CredentialError):
    """No session record exists for the token's identity (404)."""

    status_code = 404
    error_code = "unknown_session"
    default_message = "Session for this token was not found"


class RefreshExpired(CredentialError):
    """Session record expired; a new session must be authenticated (400)."""

    status_code = 400
    error_code = "refresh_expired"
    default_message = "Refresh token has expired"


class RefreshMismatch(CredentialError):
    """Presented refresh token does not match the stored digest (400)."""

    status_code = 400
    error_code = "refresh_mismatch"
    default_message = "Invalid refresh token"


class HashingError(CredentialError):
    """Refresh secret could not be hashed (500)."""

    status_code = 500
    error_code = "server_error"
    default_message = "Internal server error"


class StoreUnavailable(CredentialError):
    """Credential store failed on read or write (500)."""

    status_code = 500
    error_code = "server_error"
    default_message = "Internal server error"
