"""
Domain Layer

Ports (Protocols) consumed by the auth use cases. No infrastructure imports.
"""

from .repositories import UserCredentialRepository
from .services import EmailMessage, Notifier

__all__ = [
    "UserCredentialRepository",
    "EmailMessage",
    "Notifier",
]
