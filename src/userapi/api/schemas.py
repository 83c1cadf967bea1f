"""
Wire formats of the JSON API, as pydantic models.

    POST /api/users/register
        request   RegistrationRequest   {"login": str, "password": str}
        201       RegistrationResponse  {"id": str}
        4xx/5xx   ErrorResponse         {"code": int, "message": str}

RegistrationRequest forbids extra fields, so {"wrong": "request"} fails
validation instead of being silently ignored.
"""

from pydantic import BaseModel, ConfigDict


class RegistrationRequest(BaseModel):
    """Body of a registration call. Both fields are required strings."""

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
    )

    login: str
    password: str


class RegistrationResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str


class ErrorResponse(BaseModel):
    """Body of every JSON error response."""

    model_config = ConfigDict(frozen=True)

    code: int
    message: str
