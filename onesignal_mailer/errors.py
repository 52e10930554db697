"""Exceptions raised while mapping and delivering mail through OneSignal."""

from __future__ import annotations

from typing import Any


class MappingError(ValueError):
    """A mail message cannot be expressed as a notification request."""


class MissingTemplateForSentinelSubject(MappingError):
    def __init__(self) -> None:
        super().__init__(
            "Must specify template_id if setting subject to USE_TEMPLATE_SUBJECT"
        )


class UnsupportedCustomArgsType(MappingError):
    def __init__(self, type_name: str, detail: str | None = None) -> None:
        self.type_name = type_name
        message = f"Unknown type for custom_notification_args: {type_name}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class UnknownNotificationArg(MappingError):
    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Unknown notification field in custom_notification_args: {key!r}")


class DeliveryError(RuntimeError):
    """OneSignal could not accept a notification; keeps the response when there is one."""

    def __init__(self, message: str = "OneSignal Delivery Error", response: Any = None) -> None:
        self.response = response
        super().__init__(message)
