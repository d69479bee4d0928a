"""Fuente única de tiempo (UTC). Los casos de uso reciben un Clock inyectable."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)
