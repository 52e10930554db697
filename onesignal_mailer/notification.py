"""OneSignal email notification request."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict

# Fields that custom_notification_args may set. Anything else has to be
# allowed explicitly through ONESIGNAL_EXTRA_NOTIFICATION_ARGS.
CUSTOM_NOTIFICATION_ARGS = frozenset(
    {
        "name",
        "external_id",
        "send_after",
        "delayed_option",
        "delivery_time_of_day",
        "throttle_rate_per_minute",
        "disable_email_click_tracking",
        "email_preheader",
        "include_unsubscribed",
    }
)

# Setting any of these switches addressing away from the mail's To list.
OVERRIDE_ADDRESSING_FIELDS = (
    "include_external_user_ids",
    "include_player_ids",
    "included_segments",
    "excluded_segments",
)


class NotificationRequest(BaseModel):
    """Body of a OneSignal create-notification call for the email channel."""

    model_config = ConfigDict(validate_assignment=True, extra="allow")

    app_id: Optional[str] = None
    is_ios: Optional[bool] = None

    email_from_address: Optional[str] = None
    email_from_name: Optional[str] = None
    email_subject: Optional[str] = None
    email_body: Optional[str] = None
    template_id: Optional[str] = None
    custom_data: Optional[dict[str, Any]] = None

    include_email_tokens: Optional[list[str]] = None
    include_external_user_ids: Optional[list[str]] = None
    channel_for_external_user_ids: Optional[str] = None
    include_player_ids: Optional[list[str]] = None
    included_segments: Optional[list[str]] = None
    excluded_segments: Optional[list[str]] = None

    name: Optional[str] = None
    external_id: Optional[str] = None
    send_after: Optional[str] = None
    delayed_option: Optional[str] = None
    delivery_time_of_day: Optional[str] = None
    throttle_rate_per_minute: Optional[int] = None
    disable_email_click_tracking: Optional[bool] = None
    email_preheader: Optional[str] = None
    include_unsubscribed: Optional[bool] = None

    def to_payload(self) -> dict[str, Any]:
        """JSON body for the OneSignal API, without unset fields."""
        return self.model_dump(mode="json", exclude_none=True)
