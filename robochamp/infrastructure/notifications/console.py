"""
CRC — infrastructure/notifications/console.py

Notifier de desarrollo: no envía nada, loguea destinatario y asunto. Con
include_body=True también el cuerpo de texto (incluye el link, que es lo que
se necesita para probar el flujo en local). Nunca falla.
"""

from __future__ import annotations

from ...crosscutting.logger import logger
from ...domain.services import EmailMessage


class ConsoleNotifier:
    def __init__(self, *, include_body: bool = True) -> None:
        self._include_body = include_body

    def send(self, message: EmailMessage) -> None:
        extra = {"mail_to": message.recipient, "mail_subject": message.subject}
        if self._include_body:
            extra["mail_body"] = message.text_body
        logger.info("Email (console mode)", extra=extra)
