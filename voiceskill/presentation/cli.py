"""
Command-line interface for the Hello World voice skill.

``serve`` runs the webhook, ``send`` simulates a single platform request
locally and prints what the skill answers.
"""

import argparse
import asyncio
import sys
from typing import Dict, List, Optional

from voiceskill.config import settings
from voiceskill.config.logging_config import configure_logging, get_logger
from voiceskill.data import create_repository
from voiceskill.events.event_interface import Event, EventEmitter, EventHandler, EventType
from voiceskill.platforms import platform_names
from voiceskill.presentation.webhook import run_webhook
from voiceskill.skill import create_app
from voiceskill.testsuite import get_platform_request_builder, send
from voiceskill.utils.error_handling import AppError

logger = get_logger(__name__)


class TranscriptPrinter(EventHandler):
    """Prints routing details of a request as it is processed."""

    def register_handlers(self) -> None:
        self.emitter.on(EventType.REQUEST_RECEIVED, self._handle_request)
        self.emitter.on(EventType.INTENT_ROUTED, self._handle_routed)

    def unregister_handlers(self) -> None:
        self.emitter.off(EventType.REQUEST_RECEIVED, self._handle_request)
        self.emitter.off(EventType.INTENT_ROUTED, self._handle_routed)

    def _handle_request(self, event: Event) -> None:
        intent = event.data.get("intent")
        print(f"> {event.data.get('platform')} {event.data.get('request_type')}"
              f"{' ' + intent if intent else ''}")

    def _handle_routed(self, event: Event) -> None:
        state = event.data.get("state")
        print(f"  -> {event.data.get('handler')}{' (state ' + state + ')' if state else ''}")


def parse_inputs(values: Optional[List[str]]) -> Dict[str, str]:
    """Parse ``name=value`` pairs given with ``--input``."""
    inputs = {}
    for value in values or []:
        name, sep, slot_value = value.partition("=")
        if not sep or not name:
            raise argparse.ArgumentTypeError(f"Invalid input '{value}', expected name=value")
        inputs[name] = slot_value
    return inputs


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="voiceskill", description="Hello World voice skill")
    parser.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
                        help="Set logging level")
    parser.add_argument("--db-path", help="Path of the JSON user database")
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the webhook server")
    serve.add_argument("--host", default=settings.server.host, help="Interface to bind")
    serve.add_argument("--port", type=int, default=settings.server.port, help="Port to listen on")

    send_parser = subparsers.add_parser("send", help="Send one simulated request")
    send_parser.add_argument("--platform", choices=platform_names(), default="AlexaSkill")
    kind = send_parser.add_mutually_exclusive_group(required=True)
    kind.add_argument("--launch", action="store_true", help="Send a launch request")
    kind.add_argument("--intent", help="Send an intent request with this name")
    kind.add_argument("--end", action="store_true", help="Send a session ended request")
    send_parser.add_argument("--input", action="append", metavar="NAME=VALUE",
                             help="Slot value for the intent (repeatable)")
    send_parser.add_argument("--user-id", help="User id to send the request as")
    send_parser.add_argument("--locale", help="Request locale")
    send_parser.add_argument("--verbose", action="store_true", help="Show routing details")
    return parser


async def run_send(args: argparse.Namespace) -> int:
    emitter = EventEmitter()
    printer = TranscriptPrinter(emitter) if args.verbose else None
    app = create_app(repository=create_repository(db_path=args.db_path), emitter=emitter)

    builder = get_platform_request_builder(args.platform, locale=args.locale, user_id=args.user_id)[0]
    if args.launch:
        request = builder.launch()
    elif args.end:
        request = builder.session_ended()
    else:
        request = builder.intent(args.intent, parse_inputs(args.input))

    try:
        response = await send(request, app=app)
    finally:
        await app.close()
        if printer:
            printer.unregister_handlers()

    if response.is_ask():
        print(f"[ask] {response.get_speech()}")
        print(f"      reprompt: {response.get_reprompt()}")
    else:
        print(f"[tell] {response.get_speech() or ''}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.log_level)

    try:
        if args.command == "serve":
            app = create_app(repository=create_repository(db_path=args.db_path))
            run_webhook(app, host=args.host, port=args.port)
            return 0
        try:
            return asyncio.run(run_send(args))
        except argparse.ArgumentTypeError as e:
            parser.error(str(e))
    except AppError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0
