"""
Endpoint handlers.

Each handler is a callable object built once at startup with the
collaborators it needs, then registered on the router.
"""

from .hello import HelloHandler
from .registration import RegistrationHandler

__all__ = ["HelloHandler", "RegistrationHandler"]
