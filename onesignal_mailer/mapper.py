"""Translate a MailMessage into a OneSignal email notification request.

Precedence rules:

* a ``template_id`` field replaces any literal body, and allows the subject
  to be left to the template via ``USE_TEMPLATE_SUBJECT``;
* any of the OneSignal targeting fields (external user ids, player ids,
  included/excluded segments) replaces the message's To list;
* for multipart bodies the HTML alternative wins over plain text;
* only the first From address is used.

The mapper is a pure function of its inputs. It returns a fresh request on
success and raises a :class:`~onesignal_mailer.errors.MappingError` without
returning anything on failure.
"""

from __future__ import annotations

from typing import Any, Iterable, Optional

from pydantic import ValidationError

from .errors import (
    MissingTemplateForSentinelSubject,
    UnknownNotificationArg,
    UnsupportedCustomArgsType,
)
from .models import USE_TEMPLATE_SUBJECT, MailMessage
from .notification import (
    CUSTOM_NOTIFICATION_ARGS,
    OVERRIDE_ADDRESSING_FIELDS,
    NotificationRequest,
)

SINGLE_PART_TYPES = frozenset({"text/plain", "text/html"})
MULTIPART_TYPES = frozenset({"multipart/alternative", "multipart/mixed", "multipart/related"})


class NotificationMapper:
    """Build NotificationRequest objects from resolved mail messages."""

    def __init__(self, extra_notification_args: Iterable[str] = ()) -> None:
        self.allowed_args = CUSTOM_NOTIFICATION_ARGS | frozenset(extra_notification_args)

    def map(
        self,
        message: MailMessage,
        default_app_id: str,
        app_id: Optional[str] = None,
    ) -> NotificationRequest:
        self._validate(message)

        notification = NotificationRequest(app_id=app_id or default_app_id, is_ios=False)
        self._add_from(notification, message)
        self._add_to(notification, message)
        self._add_subject(notification, message)
        self._add_body(notification, message)
        self._add_custom_notification_args(notification, message)
        return notification

    @staticmethod
    def _validate(message: MailMessage) -> None:
        if message.subject == USE_TEMPLATE_SUBJECT and not message.has_custom("template_id"):
            raise MissingTemplateForSentinelSubject()

    @staticmethod
    def _add_from(notification: NotificationRequest, message: MailMessage) -> None:
        if not message.from_addresses:
            return
        sender = message.from_addresses[0]
        if not sender.address:
            return
        notification.email_from_address = sender.address
        notification.email_from_name = sender.preferred_name

    @staticmethod
    def _add_to(notification: NotificationRequest, message: MailMessage) -> None:
        overrides = [name for name in OVERRIDE_ADDRESSING_FIELDS if message.has_custom(name)]
        if not overrides:
            tokens = [addr.address for addr in message.to if addr.address]
            if tokens:
                notification.include_email_tokens = tokens
            return

        for name in overrides:
            setattr(notification, name, message.custom_fields[name].as_list())
        if "include_external_user_ids" in overrides:
            notification.channel_for_external_user_ids = "email"

    @staticmethod
    def _add_subject(notification: NotificationRequest, message: MailMessage) -> None:
        if message.subject is not None and message.subject != USE_TEMPLATE_SUBJECT:
            notification.email_subject = message.subject

    @staticmethod
    def _add_body(notification: NotificationRequest, message: MailMessage) -> None:
        template = message.custom("template_id")
        if template is not None:
            notification.template_id = template.as_text()
            custom_data = message.custom("custom_data")
            if custom_data is not None and custom_data.kind == "mapping":
                notification.custom_data = custom_data.value
            return

        if message.mime_type in SINGLE_PART_TYPES:
            notification.email_body = message.body
        elif message.mime_type in MULTIPART_TYPES:
            if message.text_part is not None:
                notification.email_body = message.text_part
            if message.html_part is not None:
                notification.email_body = message.html_part

    def _add_custom_notification_args(
        self, notification: NotificationRequest, message: MailMessage
    ) -> None:
        field = message.custom("custom_notification_args")
        if field is None or (field.kind == "list" and not field.value):
            return
        if field.kind not in ("mapping", "mapping_list"):
            raise UnsupportedCustomArgsType(field.type_name)

        for mapping in field.mappings():
            for key, value in mapping.items():
                self._set_arg(notification, str(key), value)

    def _set_arg(self, notification: NotificationRequest, key: str, value: Any) -> None:
        if key not in self.allowed_args:
            raise UnknownNotificationArg(key)
        try:
            setattr(notification, key, value)
        except ValidationError as exc:
            raise UnsupportedCustomArgsType(
                type(value).__name__, detail=f"invalid value for {key}"
            ) from exc

