"""Send outgoing mail as OneSignal email notifications."""
