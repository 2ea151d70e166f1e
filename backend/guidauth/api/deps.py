"""FastAPI dependencies."""
from fastapi import Depends, Request

from guidauth.config import Settings
from guidauth.database import create_engine_from_settings
from guidauth.services.rotation import RotationService
from guidauth.services.store import CredentialStore, MemoryCredentialStore, SqlCredentialStore


def build_credential_store(settings: Settings) -> CredentialStore:
    """Create the credential store for the configured backend."""
    if settings.store_backend == "memory":
        return MemoryCredentialStore()
    return SqlCredentialStore(create_engine_from_settings(settings))


def get_credential_store(request: Request) -> CredentialStore:
    return request.app.state.credential_store


def get_rotation_service(
    request: Request,
    store: CredentialStore = Depends(get_credential_store),
) -> RotationService:
    """Dependency that provides the rotation protocol."""
    return RotationService.from_settings(request.app.state.settings, store)
