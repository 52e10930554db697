"""
OneSignalMailer tests: settings defaults, send toggles and response handling.

The OneSignal API is never called; a recording sender stands in for the
API client.
"""

import logging
from types import SimpleNamespace

import pytest
from conftest import ALT_APP_ID, ALT_APP_KEY, APP_ID, APP_KEY, make_message

from onesignal_mailer.config import Settings
from onesignal_mailer.delivery import OneSignalMailer
from onesignal_mailer.errors import DeliveryError, MissingTemplateForSentinelSubject
from onesignal_mailer.mail_reader import read_message
from onesignal_mailer.models import USE_TEMPLATE_SUBJECT
from onesignal_mailer.notification import NotificationRequest


class RecordingSender:
    def __init__(self, response=None):
        self.response = response if response is not None else {"id": "notif-1", "errors": None}
        self.calls = []

    def create_notification(self, notification, *, app_key):
        self.calls.append((notification, app_key))
        return self.response


# ---------------------------------------------------------------------------
# Initialisation
# ---------------------------------------------------------------------------

class TestInitialisation:
    def test_defaults_from_settings(self):
        mailer = OneSignalMailer(Settings())
        assert mailer.perform_send_request is True
        assert mailer.return_response is False
        assert mailer.app_id is None
        assert mailer.app_key is None

    def test_constructor_overrides(self, settings):
        mailer = OneSignalMailer(
            settings,
            app_id=ALT_APP_ID,
            app_key=ALT_APP_KEY,
            perform_send_request=False,
            return_response=True,
        )
        assert mailer.app_id == ALT_APP_ID
        assert mailer.app_key == ALT_APP_KEY
        assert mailer.perform_send_request is False
        assert mailer.return_response is True

    def test_toggles_read_from_environment(self, monkeypatch):
        monkeypatch.setenv("ONESIGNAL_PERFORM_SEND_REQUEST", "false")
        monkeypatch.setenv("ONESIGNAL_RETURN_RESPONSE", "true")
        mailer = OneSignalMailer(Settings())
        assert mailer.perform_send_request is False
        assert mailer.return_response is True


# ---------------------------------------------------------------------------
# deliver without sending
# ---------------------------------------------------------------------------

class TestDryRun:
    def test_returns_mailer_itself(self, settings):
        mailer = OneSignalMailer(settings, perform_send_request=False)
        assert mailer.deliver(make_message()) is mailer

    def test_returns_notification(self, settings):
        mailer = OneSignalMailer(settings, perform_send_request=False, return_response=True)
        notification = mailer.deliver(make_message())
        assert isinstance(notification, NotificationRequest)
        assert notification.app_id == APP_ID

    def test_app_id_override(self, settings):
        mailer = OneSignalMailer(settings, app_id=ALT_APP_ID, perform_send_request=False, return_response=True)
        assert mailer.deliver(make_message()).app_id == ALT_APP_ID

    def test_accepts_resolved_message(self, settings):
        mailer = OneSignalMailer(settings, perform_send_request=False, return_response=True)
        notification = mailer.deliver(read_message(make_message()))
        assert notification.include_email_tokens == ["test@example.com"]

    def test_extensions_are_applied(self, settings):
        mailer = OneSignalMailer(settings, perform_send_request=False, return_response=True)
        notification = mailer.deliver(make_message(), extensions={"include_player_ids": "7, 8"})
        assert notification.include_player_ids == ["7", "8"]
        assert notification.include_email_tokens is None

    def test_extra_args_from_settings(self, monkeypatch):
        monkeypatch.setenv("ONESIGNAL_EXTRA_NOTIFICATION_ARGS", "priority; ttl")
        mailer = OneSignalMailer(Settings(), perform_send_request=False, return_response=True)
        notification = mailer.deliver(
            make_message(), extensions={"custom_notification_args": {"priority": 10, "ttl": 60}}
        )
        assert notification.to_payload()["ttl"] == 60

    def test_mapping_errors_propagate(self, settings):
        sender = RecordingSender()
        mailer = OneSignalMailer(settings, sender)
        with pytest.raises(MissingTemplateForSentinelSubject):
            mailer.deliver(make_message(subject=USE_TEMPLATE_SUBJECT))
        assert sender.calls == []


# ---------------------------------------------------------------------------
# deliver with sending
# ---------------------------------------------------------------------------

class TestSend:
    def test_sends_with_settings_key(self, settings):
        sender = RecordingSender()
        mailer = OneSignalMailer(settings, sender)
        assert mailer.deliver(make_message()) is mailer
        notification, app_key = sender.calls[0]
        assert app_key == APP_KEY
        assert notification.email_subject == "Hello Test!"

    def test_app_key_override(self, settings):
        sender = RecordingSender()
        OneSignalMailer(settings, sender, app_key=ALT_APP_KEY).deliver(make_message())
        assert sender.calls[0][1] == ALT_APP_KEY

    def test_returns_response(self, settings):
        sender = RecordingSender()
        response = OneSignalMailer(settings, sender, return_response=True).deliver(make_message())
        assert response == {"id": "notif-1", "errors": None}

    def test_missing_sender(self, settings):
        with pytest.raises(DeliveryError, match="No OneSignal sender"):
            OneSignalMailer(settings).deliver(make_message())

    def test_error_response_mapping(self, settings, caplog):
        response = {"id": "", "errors": ["All included players are not subscribed"]}
        mailer = OneSignalMailer(settings, RecordingSender(response))
        with caplog.at_level(logging.ERROR, logger="onesignal_mailer.delivery"):
            with pytest.raises(DeliveryError) as excinfo:
                mailer.deliver(make_message())
        assert excinfo.value.response is response
        assert "not subscribed" in caplog.text

    def test_error_response_object(self, settings):
        response = SimpleNamespace(id=None, errors={"invalid_email_tokens": ["x"]})
        with pytest.raises(DeliveryError) as excinfo:
            OneSignalMailer(settings, RecordingSender(response)).deliver(make_message())
        assert excinfo.value.response is response
