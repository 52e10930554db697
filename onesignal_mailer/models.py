"""Typed containers for the inbound mail side of the adapter."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from email.utils import parseaddr
from typing import Any, Literal, Optional

from .utils import decode_header_text, split_csv

# Subject value that asks OneSignal to take the subject from the template.
USE_TEMPLATE_SUBJECT = "__ONESIGNAL_USE_TEMPLATE_SUBJECT__"

FieldKind = Literal["text", "list", "mapping", "mapping_list", "unsupported"]


@dataclass(frozen=True)
class MailAddress:
    """One mailbox from an address header."""

    address: str
    display_name: Optional[str] = None
    name: Optional[str] = None

    @classmethod
    def parse(cls, token: str) -> "MailAddress":
        """Parse 'Name <addr>', '"Name" <addr>', 'addr (Name)' or a bare address."""
        parsed_name, address = parseaddr(token)
        parsed_name = decode_header_text(parsed_name) if parsed_name else ""
        if "<" in token:
            return cls(address=address, display_name=parsed_name or None)
        return cls(address=address, name=parsed_name or None)

    @property
    def preferred_name(self) -> Optional[str]:
        return self.display_name or self.name


@dataclass(frozen=True)
class CustomField:
    """A custom header-like field, classified once by the shape of its value."""

    name: str
    kind: FieldKind
    value: Any

    @classmethod
    def resolve(cls, name: str, value: Any) -> "CustomField":
        if isinstance(value, str):
            return cls(name, "text", value)
        if isinstance(value, Mapping):
            return cls(name, "mapping", dict(value))
        if isinstance(value, (list, tuple)):
            items = list(value)
            if items and all(isinstance(item, Mapping) for item in items):
                return cls(name, "mapping_list", [dict(item) for item in items])
            if all(isinstance(item, str) for item in items):
                return cls(name, "list", items)
        return cls(name, "unsupported", value)

    @property
    def type_name(self) -> str:
        return type(self.value).__name__

    def as_text(self) -> str:
        if self.kind == "text":
            return self.value
        if self.kind == "list":
            return ", ".join(self.value)
        return str(self.value)

    def as_list(self) -> list[str]:
        """Comma-split, trimmed items; list values are split element by element."""
        if self.kind == "list":
            return [item for element in self.value for item in split_csv(element)]
        return split_csv(self.as_text())

    def mappings(self) -> list[dict[str, Any]]:
        """Key/value mappings carried by this field, in application order."""
        if self.kind == "mapping":
            return [self.value]
        if self.kind == "mapping_list":
            return list(self.value)
        raise TypeError(f"Field {self.name!r} does not hold key/value mappings")


@dataclass
class MailMessage:
    """Essential content of an outgoing mail, resolved for notification mapping."""

    from_addresses: list[MailAddress] = field(default_factory=list)
    to: list[MailAddress] = field(default_factory=list)
    subject: Optional[str] = None
    mime_type: Optional[str] = None
    body: Optional[str] = None
    text_part: Optional[str] = None
    html_part: Optional[str] = None
    custom_fields: dict[str, CustomField] = field(default_factory=dict)

    def custom(self, name: str) -> Optional[CustomField]:
        return self.custom_fields.get(name)

    def has_custom(self, name: str) -> bool:
        return name in self.custom_fields
