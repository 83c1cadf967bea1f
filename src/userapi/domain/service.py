"""
User service: the domain entry point handlers call.
"""

import logging

from .user import NewUser


logger = logging.getLogger(__name__)


class UserService:
    """
    Creates users through a store.

    Today this only delegates. Work that should follow a successful
    registration (notifications, audit records) belongs here, not in the
    handler or the store.
    """

    def __init__(self, store):
        """
        Args:
            store: Anything with ``create(NewUser) -> str``, usually an
                   InMemoryUserStore.
        """
        self._store = store

    def create(self, new_user: NewUser) -> str:
        """Persist ``new_user`` and return its generated id."""
        user_id = self._store.create(new_user)
        logger.debug(f"Created user '{new_user.login}' with id {user_id}")
        return user_id
