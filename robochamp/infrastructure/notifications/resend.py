"""
===============================================================================
CRC CARD — infrastructure/notifications/resend.py
===============================================================================

Componente:
  ResendNotifier (Notifier sobre la API HTTP de Resend)

Responsabilidades:
  - POST /emails con remitente, destinatario, asunto, html y texto.
  - Traducir cualquier respuesta no-2xx o error de transporte a NotificationError.

Colaboradores:
  - httpx.Client (inyectable; tests usan httpx.MockTransport)
  - domain.services.EmailMessage
===============================================================================
"""

from __future__ import annotations

import httpx

from ...crosscutting.exceptions import NotificationError
from ...crosscutting.logger import logger
from ...domain.services import EmailMessage

DEFAULT_RESEND_API_URL = "https://api.resend.com/emails"


class ResendNotifier:
    def __init__(
        self,
        api_key: str,
        *,
        sender: str,
        api_url: str = DEFAULT_RESEND_API_URL,
        timeout_seconds: float = 10.0,
        client: httpx.Client | None = None,
    ) -> None:
        if not api_key:
            raise ValueError("Resend API key is required")
        self._api_key = api_key
        self._sender = sender
        self._api_url = api_url
        self._client = client or httpx.Client(timeout=timeout_seconds)

    def send(self, message: EmailMessage) -> None:
        try:
            response = self._client.post(
                self._api_url,
                headers={
                    "Authorization": f"Bearer {self._api_key}",
                    "Content-Type": "application/json",
                },
                json={
                    "from": self._sender,
                    "to": [message.recipient],
                    "subject": message.subject,
                    "html": message.html_body,
                    "text": message.text_body,
                },
            )
        except httpx.HTTPError as exc:
            logger.error("Resend: transport error", extra={"error": str(exc)})
            raise NotificationError(
                "Email provider unreachable", original_error=exc
            ) from exc

        if not response.is_success:
            detail = _error_detail(response)
            logger.error(
                "Resend: email rejected",
                extra={"status_code": response.status_code, "error": detail},
            )
            raise NotificationError(f"Email provider rejected message: {detail}")

        logger.info(
            "Email enviado via Resend",
            extra={"provider_message_id": _message_id(response)},
        )

    def close(self) -> None:
        self._client.close()


def _error_detail(response: httpx.Response) -> str:
    try:
        return str(response.json().get("message", response.status_code))
    except ValueError:
        return str(response.status_code)


def _message_id(response: httpx.Response) -> str | None:
    try:
        return response.json().get("id")
    except ValueError:
        return None
