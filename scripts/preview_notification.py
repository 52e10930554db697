"""Entry point that previews the OneSignal notification built from an .eml file."""

from __future__ import annotations

import argparse
import json
import logging
from email import policy
from email.parser import BytesParser
from pathlib import Path
import sys

from dotenv import load_dotenv

# Ensure project root is on sys.path when running as a script
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from onesignal_mailer.config import Settings
from onesignal_mailer.delivery import OneSignalMailer
from onesignal_mailer.errors import MappingError

load_dotenv()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Show the OneSignal email notification a message would be sent as."
    )
    parser.add_argument("eml", type=Path, help="RFC 822 message file")
    parser.add_argument("--app-id", help="Override ONESIGNAL_APP_ID for this message")
    parser.add_argument(
        "--extension",
        action="append",
        default=[],
        type=parse_extension,
        metavar="KEY=VALUE",
        help="Custom field such as include_player_ids=1,2 (JSON values are decoded)",
    )
    return parser


def parse_extension(value: str) -> tuple[str, object]:
    key, sep, raw = value.partition("=")
    if not sep or not key.strip():
        raise argparse.ArgumentTypeError(f"Expected KEY=VALUE, got: {value}")
    try:
        decoded = json.loads(raw)
    except ValueError:
        decoded = raw
    if not isinstance(decoded, (str, list, dict)):
        decoded = raw
    return key.strip(), decoded


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = Settings()
    configure_logging(settings.log_level)

    with args.eml.open("rb") as handle:
        message = BytesParser(policy=policy.default).parse(handle)

    mailer = OneSignalMailer(
        settings,
        app_id=args.app_id,
        perform_send_request=False,
        return_response=True,
    )
    try:
        notification = mailer.deliver(message, extensions=dict(args.extension))
    except MappingError as exc:
        logging.error("Cannot map %s: %s", args.eml, exc)
        return 1

    print(json.dumps(notification.to_payload(), indent=2, sort_keys=True))
    return 0


if __name__ == "__main__":
    sys.exit(main())
