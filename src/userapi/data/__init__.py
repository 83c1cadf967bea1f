"""
Storage for user records.
"""

from .user_store import UserStore, InMemoryUserStore

__all__ = ["UserStore", "InMemoryUserStore"]
