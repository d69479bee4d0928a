"""
Name: Notifier Tests

Responsibilities:
  - ResendNotifier request shape (auth header, payload)
  - Non-2xx and transport errors -> NotificationError
  - ConsoleNotifier logs the message (body optional)
"""

import json
import logging

import httpx
import pytest

from robochamp.crosscutting.exceptions import NotificationError
from robochamp.domain.services import EmailMessage
from robochamp.infrastructure.notifications import ConsoleNotifier, ResendNotifier

pytestmark = pytest.mark.unit

MESSAGE = EmailMessage(
    recipient="a@x.com",
    subject="Verificá tu email",
    text_body="link",
    html_body="<p>link</p>",
)


def _notifier(handler) -> ResendNotifier:
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return ResendNotifier(
        "re_test_key",
        sender="RoboChamp <no-reply@robochamp.test>",
        api_url="https://api.resend.test/emails",
        client=client,
    )


def test_resend_posts_message():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["auth"] = request.headers["Authorization"]
        seen["url"] = str(request.url)
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"id": "msg_123"})

    _notifier(handler).send(MESSAGE)

    assert seen["auth"] == "Bearer re_test_key"
    assert seen["url"] == "https://api.resend.test/emails"
    assert seen["body"] == {
        "from": "RoboChamp <no-reply@robochamp.test>",
        "to": ["a@x.com"],
        "subject": "Verificá tu email",
        "html": "<p>link</p>",
        "text": "link",
    }


def test_resend_rejection_raises():
    notifier = _notifier(lambda request: httpx.Response(422, json={"message": "bad from"}))

    with pytest.raises(NotificationError, match="bad from"):
        notifier.send(MESSAGE)


def test_resend_transport_error_raises():
    def handler(request):
        raise httpx.ConnectError("down", request=request)

    with pytest.raises(NotificationError):
        _notifier(handler).send(MESSAGE)


def test_resend_requires_api_key():
    with pytest.raises(ValueError):
        ResendNotifier("", sender="x@y.z")


def test_console_notifier_logs_link_body(caplog):
    caplog.set_level(logging.INFO, logger="robochamp")

    ConsoleNotifier().send(MESSAGE)

    record = caplog.records[-1]
    assert record.mail_to == "a@x.com"
    assert record.mail_body == "link"


def test_console_notifier_can_omit_body(caplog):
    caplog.set_level(logging.INFO, logger="robochamp")

    ConsoleNotifier(include_body=False).send(MESSAGE)

    assert not hasattr(caplog.records[-1], "mail_body")
