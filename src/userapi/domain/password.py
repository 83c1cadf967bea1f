"""
Password encoding.

Handlers depend on the PasswordEncoder protocol, not on a hash function,
so tests can pass a trivial encoder and the hashing scheme can change
without touching request handling.
"""

import hashlib
from typing import Protocol


class PasswordEncoder(Protocol):
    def encode(self, raw_password: str) -> str:
        ...


class Sha256PasswordEncoder:
    """
    Hex SHA-256 of the UTF-8 password.

    Unsalted; fine for an in-memory demo store, not for real credentials.
    """

    def encode(self, raw_password: str) -> str:
        return hashlib.sha256(raw_password.encode("utf-8")).hexdigest()
