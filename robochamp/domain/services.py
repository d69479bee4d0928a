"""
CRC — domain/services.py

Name
- Outbound service ports (Protocols)

Responsibilities
- Define the Notifier contract used by verification / reset flows.

Collaborators
- infrastructure.notifications: console / resend implementations
- application.usecases.auth.verification_flow

Constraints
- Implementations raise NotificationError when delivery fails.
"""

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class EmailMessage:
    """Templated message ready to be delivered to a single recipient."""

    recipient: str
    subject: str
    text_body: str
    html_body: str


class Notifier(Protocol):
    """R: Deliver an email message (synchronous from the caller's perspective)."""

    def send(self, message: EmailMessage) -> None:
        """
        R: Deliver the message.

        Raises:
            NotificationError: when the transport/provider rejects the message
        """
        ...
