"""
Domain model: user records, the user service and password encoding.
"""

from .user import NewUser, User
from .service import UserService
from .password import PasswordEncoder, Sha256PasswordEncoder

__all__ = [
    "NewUser",
    "User",
    "UserService",
    "PasswordEncoder",
    "Sha256PasswordEncoder",
]
