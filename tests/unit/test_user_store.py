"""
Unit tests for the in-memory user store and the user service.
"""

import threading
import uuid

import pytest

from userapi.data import InMemoryUserStore
from userapi.domain import NewUser, UserService, Sha256PasswordEncoder
from userapi.errors import ApplicationError, ErrorKind


class TestInMemoryUserStore:
    """Tests for InMemoryUserStore."""

    def test_create_returns_uuid(self):
        """Test that ids are 36 character UUID strings."""
        store = InMemoryUserStore()
        user_id = store.create(NewUser(login="test", password="x"))

        assert len(user_id) == 36
        assert str(uuid.UUID(user_id)) == user_id

    def test_distinct_logins_get_distinct_ids(self):
        """Test that different users never share an id."""
        store = InMemoryUserStore()

        first = store.create(NewUser(login="ann", password="x"))
        second = store.create(NewUser(login="bob", password="y"))

        assert first != second
        assert len(store) == 2
        assert "ann" in store and "bob" in store

    def test_duplicate_login_overwrites(self):
        """Test that a second registration replaces the record with a new id."""
        store = InMemoryUserStore()

        first = store.create(NewUser(login="ann", password="old"))
        second = store.create(NewUser(login="ann", password="new"))

        assert first != second
        assert len(store) == 1
        stored = store.get("ann")
        assert stored.id == second
        assert stored.password == "new"

    def test_duplicate_login_rejected(self):
        """Test that reject_duplicates turns a second login into 400."""
        store = InMemoryUserStore(reject_duplicates=True)
        first = store.create(NewUser(login="ann", password="old"))

        with pytest.raises(ApplicationError) as exc_info:
            store.create(NewUser(login="ann", password="new"))

        assert exc_info.value.kind is ErrorKind.INVALID_REQUEST
        assert "ann" in exc_info.value.message
        assert store.get("ann").id == first

    def test_get_missing(self):
        """Test that unknown logins return None."""
        assert InMemoryUserStore().get("nobody") is None

    def test_password_hidden_from_repr(self):
        """Test that stored passwords never show up in repr()."""
        store = InMemoryUserStore()
        store.create(NewUser(login="ann", password="secret-hash"))

        assert "secret-hash" not in repr(store.get("ann"))

    def test_concurrent_creates(self):
        """Test that parallel registrations all land with unique ids."""
        store = InMemoryUserStore()
        ids = []
        ids_lock = threading.Lock()

        def register(n):
            for i in range(50):
                user_id = store.create(NewUser(login=f"user-{n}-{i}", password="x"))
                with ids_lock:
                    ids.append(user_id)

        threads = [threading.Thread(target=register, args=(n,)) for n in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(store) == 400
        assert len(set(ids)) == 400


class TestUserService:
    """Tests for UserService."""

    def test_create_delegates_to_store(self):
        """Test that the service returns the id the store generated."""
        store = InMemoryUserStore()
        service = UserService(store)

        user_id = service.create(NewUser(login="test", password="x"))

        assert store.get("test").id == user_id

    def test_store_errors_propagate(self):
        """Test that the service does not swallow store failures."""
        store = InMemoryUserStore(reject_duplicates=True)
        service = UserService(store)
        service.create(NewUser(login="test", password="x"))

        with pytest.raises(ApplicationError):
            service.create(NewUser(login="test", password="x"))


class TestSha256PasswordEncoder:
    """Tests for the password encoder."""

    def test_known_digest(self):
        """Test the hex SHA-256 of a known value."""
        encoded = Sha256PasswordEncoder().encode("test")

        assert encoded == "9f86d081884c7d659a2feaa0c55ad015a3bf4f1b2b0b822cd15d6c15b0f00a08"

    def test_deterministic(self):
        """Test that equal passwords encode equally."""
        encoder = Sha256PasswordEncoder()
        assert encoder.encode("pa:ss") == encoder.encode("pa:ss")
        assert encoder.encode("a") != encoder.encode("b")
