"""
User records.

    NewUser ──► UserStore.create() ──► User (id assigned by the store)
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class NewUser:
    """
    Input for user creation.

    ``password`` is already encoded by a PasswordEncoder; nothing below
    the handler ever sees the plain text.
    """

    login: str
    password: str = field(repr=False)


@dataclass(frozen=True)
class User:
    """A stored user. ``id`` is generated by the store, never by the caller."""

    id: str
    login: str
    password: str = field(repr=False)
