"""Authentication schemas."""
from pydantic import BaseModel


class TokenPair(BaseModel):
    """Access/refresh credential pair, used both as response and refresh request."""

    access_token: str
    refresh_token: str


class ErrorMessage(BaseModel):
    """Error envelope returned for every failed request."""

    status_code: int
    error_code: str
    error_message: str


class HealthResponse(BaseModel):
    status: str
    app: str
