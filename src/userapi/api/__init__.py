"""
JSON request and response schemas.
"""

from .schemas import RegistrationRequest, RegistrationResponse, ErrorResponse

__all__ = ["RegistrationRequest", "RegistrationResponse", "ErrorResponse"]
