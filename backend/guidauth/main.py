"""GuidAuth - access/refresh credential service."""
from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI

from guidauth.api import auth
from guidauth.api.deps import build_credential_store
from guidauth.api.errors import register_exception_handlers
from guidauth.config import Settings, get_settings
from guidauth.schemas.auth import HealthResponse
from guidauth.services.store import CredentialStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Import all models so they're registered with Base
    from guidauth import models  # noqa: F401

    app.state.credential_store.create_schema()
    logger.info(f"{app.title} ready")
    yield


def create_app(
    settings: Settings | None = None,
    store: CredentialStore | None = None,
) -> FastAPI:
    settings = settings or get_settings()
    app = FastAPI(
        title=settings.app_name,
        description="Issue and rotate access/refresh credentials for GUID identities",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.credential_store = store if store is not None else build_credential_store(settings)
    register_exception_handlers(app)

    @app.get("/health", response_model=HealthResponse)
    async def health_check():
        """Health check endpoint."""
        return HealthResponse(status="healthy", app=settings.app_name)

    app.include_router(auth.router, prefix="/api")
    return app


def run() -> None:
    """Serve the API with uvicorn on the configured address."""
    import uvicorn

    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(create_app(), host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()
