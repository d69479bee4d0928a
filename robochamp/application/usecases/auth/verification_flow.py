"""
===============================================================================
VERIFICATION FLOW (Email verification + password reset links)
===============================================================================

Name:
    VerificationFlow

Business Goal:
    Emitir, enviar y consumir tokens de un solo uso que prueban posesión del
    email (verificación de cuenta y reset de password).

Why (Context / Intención):
    - Hay un único token pendiente por usuario: emitir uno nuevo reemplaza al
      anterior (último en escribir gana).
    - En storage vive el digest SHA-256; el valor en claro solo viaja en el link.
    - El consumo es un UPDATE condicional: dos requests con el mismo token no
      pueden consumirlo ambos.
    - Un token encontrado pero vencido se limpia y se rechaza.

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Class:
    VerificationFlow

Responsibilities:
    - issue/start: generar token, persistir digest + expiración, enviar email.
    - start_best_effort: igual que start, pero una falla del notifier se loguea
      y se informa como False (signup / re-envío).
    - claim: resolver un token presentado a un PendingVerification vigente.
    - consume: aplicar el consumo atómico (marcar verificado / nuevo password).

Collaborators:
    - UserCredentialRepository
    - identity.verification.VerificationCodeGenerator
    - domain.services.Notifier / EmailMessage
    - crosscutting.clock
===============================================================================
"""

from __future__ import annotations

import html
import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from ....crosscutting.clock import Clock, utc_now
from ....crosscutting.exceptions import NotificationError
from ....domain.repositories import UserCredentialRepository
from ....domain.services import EmailMessage, Notifier
from ....identity.users import User
from ....identity.verification import VerificationCode, VerificationCodeGenerator

logger = logging.getLogger(__name__)


class VerificationPurpose(str, Enum):
    VERIFY_EMAIL = "verify_email"
    RESET_PASSWORD = "reset_password"


_LINK_PATHS = {
    VerificationPurpose.VERIFY_EMAIL: "/verify-email",
    VerificationPurpose.RESET_PASSWORD: "/reset-password",
}

_SUBJECTS = {
    VerificationPurpose.VERIFY_EMAIL: "Verificá tu email",
    VerificationPurpose.RESET_PASSWORD: "Restablecé tu contraseña",
}

_INTROS = {
    VerificationPurpose.VERIFY_EMAIL: "Para activar tu cuenta, abrí el siguiente link:",
    VerificationPurpose.RESET_PASSWORD: (
        "Recibimos un pedido para restablecer tu contraseña. "
        "Si no fuiste vos, ignorá este email. Para continuar, abrí el siguiente link:"
    ),
}


@dataclass(frozen=True)
class PendingVerification:
    """Token presentado que matcheó un registro vigente (aún no consumido)."""

    user: User
    token_hash: str
    checked_at: datetime


class VerificationFlow:
    def __init__(
        self,
        users: UserCredentialRepository,
        codes: VerificationCodeGenerator,
        notifier: Notifier,
        *,
        frontend_url: str,
        clock: Clock = utc_now,
    ) -> None:
        self._users = users
        self._codes = codes
        self._notifier = notifier
        self._frontend_url = frontend_url.rstrip("/")
        self._clock = clock

    # ------------------------------------------------------------------
    # Emisión
    # ------------------------------------------------------------------
    def issue(self, user: User) -> VerificationCode:
        code = self._codes.link_token(self._clock())
        self._users.set_verification_token(
            user.id,
            token_hash=self._codes.digest(code.value),
            expires_at=code.expires_at,
        )
        return code

    def start(self, user: User, purpose: VerificationPurpose) -> VerificationCode:
        """
        Emite un token nuevo y envía el link.

        Raises:
            NotificationError: si el email no pudo salir (el token queda emitido)
        """
        code = self.issue(user)
        self._notifier.send(self.render(user, code, purpose))
        logger.info(
            "Link de verificación enviado",
            extra={"user_id": user.id, "purpose": purpose.value},
        )
        return code

    def start_best_effort(self, user: User, purpose: VerificationPurpose) -> bool:
        try:
            self.start(user, purpose)
        except NotificationError:
            logger.exception(
                "No se pudo enviar el link de verificación",
                extra={"user_id": user.id, "purpose": purpose.value},
            )
            return False
        return True

    def link_for(self, code: VerificationCode, purpose: VerificationPurpose) -> str:
        return f"{self._frontend_url}{_LINK_PATHS[purpose]}?token={code.value}"

    def render(
        self, user: User, code: VerificationCode, purpose: VerificationPurpose
    ) -> EmailMessage:
        link = self.link_for(code, purpose)
        expires = code.expires_at.strftime("%Y-%m-%d %H:%M UTC")
        greeting = f"Hola {user.name},"
        text_body = (
            f"{greeting}\n\n{_INTROS[purpose]}\n{link}\n\n"
            f"El link vence el {expires}.\n"
        )
        html_body = (
            f"<p>{html.escape(greeting)}</p>"
            f"<p>{html.escape(_INTROS[purpose])}</p>"
            f'<p><a href="{html.escape(link)}">{html.escape(link)}</a></p>'
            f"<p>El link vence el {expires}.</p>"
        )
        return EmailMessage(
            recipient=user.email,
            subject=_SUBJECTS[purpose],
            text_body=text_body,
            html_body=html_body,
        )

    # ------------------------------------------------------------------
    # Consumo
    # ------------------------------------------------------------------
    def claim(self, token: str) -> PendingVerification | None:
        """
        Resuelve el token presentado.

        Returns:
            PendingVerification si existe y no venció; None en otro caso.
            Un token vencido se limpia antes de devolver None.
        """
        if not token:
            return None

        token_hash = self._codes.digest(token)
        user = self._users.get_user_by_verification_token(token_hash)
        if user is None:
            return None

        now = self._clock()
        if user.verification_expired(now):
            self._users.clear_verification_token(user.id, token_hash=token_hash)
            logger.info("Token de verificación vencido descartado", extra={"user_id": user.id})
            return None

        return PendingVerification(user=user, token_hash=token_hash, checked_at=now)

    def consume(
        self,
        pending: PendingVerification,
        *,
        mark_verified: bool,
        password_hash: str | None = None,
    ) -> User | None:
        """Consume el token; None si otro request lo consumió o venció en el medio."""
        return self._users.consume_verification_token(
            pending.user.id,
            token_hash=pending.token_hash,
            now=self._clock(),
            mark_verified=mark_verified,
            password_hash=password_hash,
        )
