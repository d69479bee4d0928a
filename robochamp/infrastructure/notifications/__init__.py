"""Notifier implementations (consola / Resend HTTP API)."""

from .console import ConsoleNotifier
from .resend import ResendNotifier

__all__ = ["ConsoleNotifier", "ResendNotifier"]
