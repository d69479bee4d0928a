"""In-memory repository implementations (tests / local dev)."""

from .user import InMemoryUserRepository

__all__ = ["InMemoryUserRepository"]
