"""Utility helpers shared across modules."""

from __future__ import annotations

from email.errors import HeaderParseError
from email.header import decode_header, make_header
from email.message import Message
from typing import Iterable


def split_csv(value: str) -> list[str]:
    """Split a comma-separated value, trimming each item and dropping blanks."""
    return [item.strip() for item in value.split(",") if item.strip()]


def split_addresses(values: Iterable[str]) -> list[str]:
    """Split address header values on ',' or ';' outside quotes and angle brackets."""
    tokens: list[str] = []
    for value in values:
        current: list[str] = []
        in_quotes = False
        in_angle = False
        escaped = False
        for char in value:
            if escaped:
                current.append(char)
                escaped = False
                continue
            if char == "\\" and in_quotes:
                current.append(char)
                escaped = True
                continue
            if char == '"' and not in_angle:
                in_quotes = not in_quotes
            elif char == "<" and not in_quotes:
                in_angle = True
            elif char == ">" and not in_quotes:
                in_angle = False
            elif char in ",;" and not in_quotes and not in_angle:
                tokens.append("".join(current))
                current = []
                continue
            current.append(char)
        tokens.append("".join(current))
    return [token.strip() for token in tokens if token.strip()]


def decode_header_text(value: str) -> str:
    """Decode RFC 2047 encoded-words; undecodable values are returned unchanged."""
    try:
        return str(make_header(decode_header(value)))
    except (HeaderParseError, LookupError, UnicodeDecodeError):
        return value


def decode_part(part: Message) -> str:
    """Return the transfer-decoded text content of a non-multipart MIME part."""
    payload = part.get_payload(decode=True)
    if payload is None:
        return ""
    charset = part.get_content_charset() or "utf-8"
    try:
        return payload.decode(charset, errors="replace")
    except LookupError:
        return payload.decode("utf-8", errors="replace")
