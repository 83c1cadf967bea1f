"""
=============================================================================
REGISTRATION ENDPOINT
=============================================================================

    POST /api/users/register
    {"login": "test", "password": "test"}

    ReceiveRequest
         │
         ▼
    ValidateMethod ──── not POST ─────────────► METHOD_NOT_ALLOWED  405
         │
         ▼
    ParseBody ───────── bad JSON, unknown or ─► INVALID_REQUEST     400
         │              missing fields
         ▼
    BuildDomainObject   NewUser(login, encode(password))
         │
         ▼
    PersistUser ─────── store refuses ────────► (its own kind)
         │
         ▼
    WriteSuccessResponse
         201  {"id": "<uuid4>"}

Every failure edge is an exception; the ErrorHandler wrapped around the
router turns it into the JSON error body. Nothing is retried.

=============================================================================
"""

import logging

from pydantic import ValidationError

from ..api.schemas import RegistrationRequest, RegistrationResponse
from ..domain import NewUser, PasswordEncoder, UserService
from ..errors import invalid_request_from, method_not_allowed
from ..http import HTTPRequest, HTTPResponse, created


logger = logging.getLogger(__name__)


class RegistrationHandler:
    """
    Creates a user from a JSON body.

    Args:
        user_service: Where new users are persisted.
        password_encoder: Encodes the password before it leaves the handler.
    """

    def __init__(self, user_service: UserService, password_encoder: PasswordEncoder):
        self.user_service = user_service
        self.password_encoder = password_encoder

    def __call__(self, request: HTTPRequest) -> HTTPResponse:
        if request.method != "POST":
            raise method_not_allowed(
                f"Method {request.method} is not allowed, use POST",
                allowed=["POST"],
            )

        try:
            payload = RegistrationRequest.model_validate_json(request.body)
        except ValidationError as e:
            raise invalid_request_from(e) from e

        new_user = NewUser(
            login=payload.login,
            password=self.password_encoder.encode(payload.password),
        )
        user_id = self.user_service.create(new_user)
        logger.info(f"Registered user '{new_user.login}'")

        return created(RegistrationResponse(id=user_id).model_dump())
