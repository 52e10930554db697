"""Shared fixtures and message builders for the OneSignal mailer tests."""

import email
from email.message import Message

import pytest

from onesignal_mailer.config import Settings

APP_ID = "00000000-0000-0000-0000-000000000000"
APP_KEY = "TEST_API_KEY"
ALT_APP_ID = "11111111-1111-1111-1111-111111111111"
ALT_APP_KEY = "ALT_APP_KEY"

EMAIL_TEXT_BODY = "I am a plain text body"
EMAIL_HTML_BODY = "I am an <b>HTML</b> body"

_ENV_VARS = (
    "ONESIGNAL_APP_ID",
    "ONESIGNAL_APP_KEY",
    "ONESIGNAL_PERFORM_SEND_REQUEST",
    "ONESIGNAL_RETURN_RESPONSE",
    "ONESIGNAL_EXTRA_NOTIFICATION_ARGS",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def settings() -> Settings:
    return Settings(ONESIGNAL_APP_ID=APP_ID, ONESIGNAL_APP_KEY=APP_KEY)


def make_message(
    *,
    to: str | None = "test@example.com",
    from_: str | None = "test@company.co",
    subject: str | None = "Hello Test!",
    headers: tuple[tuple[str, str], ...] = (),
    content_type: str | None = None,
    body: str = "",
) -> Message:
    """Parse a minimal RFC 822 message assembled from the given pieces."""
    lines = []
    if from_ is not None:
        lines.append(f"From: {from_}")
    if to is not None:
        lines.append(f"To: {to}")
    if subject is not None:
        lines.append(f"Subject: {subject}")
    for name, value in headers:
        lines.append(f"{name}: {value}")
    if content_type is not None:
        lines.append(f"Content-Type: {content_type}")
    return email.message_from_string("\n".join(lines) + "\n\n" + body)


def multipart_body(boundary: str, *parts: tuple[str, str]) -> str:
    """Render (content_type, content) pairs as a multipart body."""
    chunks = []
    for content_type, content in parts:
        chunks.append(f"--{boundary}\nContent-Type: {content_type}\n\n{content}\n")
    chunks.append(f"--{boundary}--\n")
    return "".join(chunks)
