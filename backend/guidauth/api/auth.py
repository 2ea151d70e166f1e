"""Authentication API endpoints."""
from fastapi import APIRouter, Depends

from guidauth.api.deps import get_rotation_service
from guidauth.schemas.auth import ErrorMessage, TokenPair
from guidauth.services.errors import ValidationError
from guidauth.services.rotation import RotationService

router = APIRouter(
    prefix="/auth",
    tags=["auth"],
    responses={
        400: {"model": ErrorMessage},
        401: {"model": ErrorMessage},
        404: {"model": ErrorMessage},
        500: {"model": ErrorMessage},
    },
)


@router.get("", response_model=TokenPair)
def authenticate(
    guid: str | None = None,
    service: RotationService = Depends(get_rotation_service),
):
    """Issue a new access/refresh pair for a GUID."""
    if not guid:
        raise ValidationError("GUID is required")
    return service.authenticate(guid)


@router.post("/refresh", response_model=TokenPair)
def refresh_tokens(
    tokens: TokenPair,
    service: RotationService = Depends(get_rotation_service),
):
    """Exchange an expired access token and its refresh token for a new pair."""
    return service.refresh(tokens.access_token, tokens.refresh_token)
