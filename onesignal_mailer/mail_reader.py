"""Resolve stdlib email messages into MailMessage containers."""

from __future__ import annotations

import json
from email.message import Message
from typing import Any, Mapping, Optional

from .models import CustomField, MailAddress, MailMessage
from .notification import OVERRIDE_ADDRESSING_FIELDS
from .utils import decode_header_text, decode_part, split_addresses

# Custom headers the adapter understands. Other headers are left alone.
CUSTOM_FIELD_NAMES = (
    "template_id",
    "custom_data",
    "custom_notification_args",
    *OVERRIDE_ADDRESSING_FIELDS,
)

# Header values of these fields carry JSON objects.
STRUCTURED_FIELD_NAMES = frozenset({"custom_data", "custom_notification_args"})


def read_message(message: Message, extensions: Optional[Mapping[str, Any]] = None) -> MailMessage:
    """Build a MailMessage from headers and MIME parts.

    ``extensions`` supplies custom field values as Python objects (strings,
    string lists, mappings or lists of mappings). They take precedence over
    headers of the same name.
    """
    mime_type = message.get_content_type() if message.get("Content-Type") else None
    body = text_part = html_part = None

    if message.is_multipart():
        text_part, html_part = _find_alternatives(message)
    elif mime_type is not None:
        body = decode_part(message)

    return MailMessage(
        from_addresses=_addresses(message, "From"),
        to=_addresses(message, "To"),
        subject=_decoded_header(message.get("Subject")),
        mime_type=mime_type,
        body=body,
        text_part=text_part,
        html_part=html_part,
        custom_fields=_custom_fields(message, extensions or {}),
    )


def _addresses(message: Message, header: str) -> list[MailAddress]:
    values = [str(value) for value in message.get_all(header, [])]
    return [MailAddress.parse(token) for token in split_addresses(values)]


def _header_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


def _decoded_header(value: Any) -> Optional[str]:
    if value is None:
        return None
    return decode_header_text(str(value))


def _find_alternatives(message: Message) -> tuple[Optional[str], Optional[str]]:
    """Return the first plain text and first HTML leaf parts that are not attachments."""
    text_part: Optional[str] = None
    html_part: Optional[str] = None
    for part in message.walk():
        if part.is_multipart():
            continue
        disposition = (part.get("Content-Disposition") or "").lower()
        if disposition.startswith("attachment"):
            continue
        content_type = part.get_content_type()
        if content_type == "text/plain" and text_part is None:
            text_part = decode_part(part)
        elif content_type == "text/html" and html_part is None:
            html_part = decode_part(part)
    return text_part, html_part


def _custom_fields(message: Message, extensions: Mapping[str, Any]) -> dict[str, CustomField]:
    fields: dict[str, CustomField] = {}
    for name in CUSTOM_FIELD_NAMES:
        values = [_header_text(value) for value in message.get_all(name, [])]
        if not values:
            continue
        if name in STRUCTURED_FIELD_NAMES:
            decoded = [_decode_json(value) for value in values]
            raw: Any = decoded[0] if len(decoded) == 1 else decoded
        else:
            raw = values[0] if len(values) == 1 else values
        fields[name] = CustomField.resolve(name, raw)

    for name, value in extensions.items():
        key = name.lower()
        if value is None:
            fields.pop(key, None)
            continue
        fields[key] = CustomField.resolve(key, value)
    return fields


def _decode_json(value: str) -> Any:
    stripped = value.strip()
    if not stripped.startswith(("{", "[")):
        return value
    try:
        return json.loads(stripped)
    except ValueError:
        return value
