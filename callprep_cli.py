#!/usr/bin/env python3
"""CallPrep - Outbound call preparation for MightyCall.

Single entry point for the command line.

Usage:
    python callprep_cli.py --status                     # Integration status
    python callprep_cli.py --call "(877) 840-6250"      # Prepare a call
    python callprep_cli.py --call 9547939065 --name "Jane Doe" --ext 501 --open
    python callprep_cli.py --call 9547939065 --json     # Wire-format output
    python callprep_cli.py --version
"""

import argparse
import json
import logging
import sys
from typing import Optional

from callprep import __version__
from callprep.core.config import get_config, validate_config
from callprep.core.exceptions import CallLogError, ConfigurationError
from callprep.core.logging import get_logger, setup_logging
from callprep.engine.call_log import InMemoryCallLog
from callprep.engine.dialer import CallRequest, CallService
from callprep.integrations.device import DeviceLauncher


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="CallPrep - Outbound call preparation for MightyCall"
    )
    parser.add_argument("--status", action="store_true", help="Show integration status and exit")
    parser.add_argument("--call", metavar="NUMBER", help="Prepare a call to NUMBER")
    parser.add_argument("--name", help="Contact name for the call")
    parser.add_argument("--ext", help="Extension to dial after connect")
    parser.add_argument("--user", type=int, default=1, help="User id placing the call")
    parser.add_argument(
        "--open",
        action="store_true",
        help="Open the first dial strategy in the browser/device dialer",
    )
    parser.add_argument("--json", action="store_true", help="Print JSON instead of text")
    parser.add_argument("--version", action="store_true", help="Show version and exit")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for CallPrep.

    Returns:
        Exit code (0 = success, non-zero = error)
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(f"CallPrep v{__version__}")
        return 0

    if not args.status and not args.call:
        parser.print_help()
        return 2

    try:
        config = get_config()
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    setup_logging(
        log_dir=config.log_path,
        console_level=logging.DEBUG if (args.debug or config.debug) else logging.WARNING,
    )
    logger = get_logger("main")
    logger.info(f"CallPrep v{__version__} starting...")

    for issue in validate_config(config):
        logger.warning(f"Configuration issue: {issue}")

    service = CallService.from_config(config)

    if args.status:
        status = service.get_status()
        if args.json:
            print(json.dumps(status.to_dict(), indent=2))
        else:
            print(f"\nCallPrep v{__version__} - MightyCall Status\n")
            for line in service.status_instructions(status):
                print(f"  {line}")
            print()
        if not args.call:
            return 0

    request = CallRequest(
        phone_number=args.call,
        user_id=args.user,
        contact_name=args.name,
        extension=args.ext,
    )
    response = service.prepare_call(request)

    if args.json:
        print(json.dumps(response.to_dict(), indent=2))
    else:
        print(f"\n{response.message}")
        print(f"Number: {response.display_number}")
        print(f"Call id: {response.call_id}\n")
        for line in response.instructions:
            print(f"  {line}")
        print()

    call_log = InMemoryCallLog()
    try:
        service.record_attempt(response, request, call_log)
    except CallLogError as e:
        logger.warning(f"Call not logged: {e}")

    if args.open:
        launcher = DeviceLauncher()
        if not launcher.open(response.dial_string):
            print("No dialer accepted the link; number copied to clipboard if possible.")

    return 0


if __name__ == "__main__":
    sys.exit(main())
