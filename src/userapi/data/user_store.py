"""
=============================================================================
IN-MEMORY USER STORE
=============================================================================

Keeps User records in a dict keyed by LOGIN, while every record gets its
own freshly generated id.

    create(NewUser("alice", h1)) ──► "3f2c...-..."   users["alice"] = User(id1, ...)
    create(NewUser("alice", h2)) ──► "9a71...-..."   users["alice"] = User(id2, ...)
                                                      └── id1 is gone

=============================================================================
DUPLICATE LOGINS
=============================================================================

    reject_duplicates=False (default)   last writer wins, each call still
                                        returns a new id
    reject_duplicates=True              second create raises INVALID_REQUEST,
                                        the first record stays

=============================================================================
THREAD SAFETY
=============================================================================

Requests run on many worker threads. One lock guards the dict, so each
put (and, in reject mode, each check-then-put) is atomic. There is no
ordering between concurrent writers beyond that.

=============================================================================
"""

import logging
import threading
import uuid
from typing import Dict, Optional, Protocol

from ..domain.user import NewUser, User
from ..errors import invalid_request


logger = logging.getLogger(__name__)


class UserStore(Protocol):
    def create(self, new_user: NewUser) -> str:
        ...


class InMemoryUserStore:
    """
    Thread-safe dict of users keyed by login.

    Lost when the process exits.
    """

    def __init__(self, reject_duplicates: bool = False):
        """
        Args:
            reject_duplicates: Refuse a login that is already stored instead
                               of overwriting its record.
        """
        self.reject_duplicates = reject_duplicates
        self._users: Dict[str, User] = {}
        self._lock = threading.Lock()

    def create(self, new_user: NewUser) -> str:
        """
        Store a user under a new random id.

        Args:
            new_user: Login and encoded password.

        Returns:
            The generated id, a 36 character UUID4 string.

        Raises:
            ApplicationError: INVALID_REQUEST if the login exists and
                              duplicates are rejected.
        """
        user = User(
            id=str(uuid.uuid4()),
            login=new_user.login,
            password=new_user.password,
        )

        with self._lock:
            if new_user.login in self._users:
                if self.reject_duplicates:
                    raise invalid_request(
                        f"User with login '{new_user.login}' already exists"
                    )
                logger.debug(f"Overwriting user with login '{new_user.login}'")
            self._users[new_user.login] = user

        return user.id

    def get(self, login: str) -> Optional[User]:
        with self._lock:
            return self._users.get(login)

    def __contains__(self, login: object) -> bool:
        with self._lock:
            return login in self._users

    def __len__(self) -> int:
        with self._lock:
            return len(self._users)
