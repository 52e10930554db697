"""Deliver outgoing mail as OneSignal email notifications."""

from __future__ import annotations

import logging
from email.message import Message
from typing import Any, Mapping, Optional, Protocol

from .config import Settings
from .errors import DeliveryError
from .mail_reader import read_message
from .mapper import NotificationMapper
from .models import MailMessage
from .notification import NotificationRequest

logger = logging.getLogger(__name__)


class NotificationSender(Protocol):
    """Anything able to submit a notification to OneSignal, e.g. a generated API client."""

    def create_notification(self, notification: NotificationRequest, *, app_key: str) -> Any:
        ...


class OneSignalMailer:
    """Send mail through OneSignal instead of SMTP.

    Constructor arguments override the matching ``settings`` values. With
    ``perform_send_request`` disabled the built notification is the response,
    which is handy for previews and tests. ``deliver`` returns the response
    when ``return_response`` is set, otherwise the mailer itself.
    """

    def __init__(
        self,
        settings: Settings,
        sender: Optional[NotificationSender] = None,
        *,
        app_id: Optional[str] = None,
        app_key: Optional[str] = None,
        perform_send_request: Optional[bool] = None,
        return_response: Optional[bool] = None,
    ) -> None:
        self.settings = settings
        self.sender = sender
        self.app_id = app_id
        self.app_key = app_key
        self.perform_send_request = (
            settings.perform_send_request if perform_send_request is None else perform_send_request
        )
        self.return_response = (
            settings.return_response if return_response is None else return_response
        )
        self.mapper = NotificationMapper(settings.extra_notification_args)

    def deliver(
        self,
        message: Message | MailMessage,
        extensions: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        mail = message if isinstance(message, MailMessage) else read_message(message, extensions)
        notification = self.mapper.map(
            mail, default_app_id=self.settings.onesignal_app_id, app_id=self.app_id
        )

        if self.perform_send_request:
            response = self._send(notification)
        else:
            logger.debug("Send disabled; built notification for app %s", notification.app_id)
            response = notification

        return response if self.return_response else self

    def _send(self, notification: NotificationRequest) -> Any:
        if self.sender is None:
            raise DeliveryError("No OneSignal sender configured")

        app_key = self.app_key or self.settings.onesignal_app_key
        logger.info(
            "Sending email notification to OneSignal app %s (subject=%r)",
            notification.app_id,
            notification.email_subject,
        )
        response = self.sender.create_notification(notification, app_key=app_key)

        errors = self._response_errors(response)
        if errors:
            logger.error("OneSignal request responded with errors: %s", errors)
            raise DeliveryError("OneSignal request responded with errors", response)
        return response

    @staticmethod
    def _response_errors(response: Any) -> Any:
        if isinstance(response, Mapping):
            return response.get("errors")
        return getattr(response, "errors", None)
