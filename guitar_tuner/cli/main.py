"""Main entry point for the guitar tuner CLI."""

import argparse
import json
import sys
from dataclasses import replace
from typing import List, Optional

from ..core.config import ConfigManager
from ..core.errors import TunerError
from ..logger import get_logger
from ..logging_config import setup_logging
from ..services.frame_providers import WavFileFrameProvider
from .replay import replay

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    # Shared options are accepted before or after the subcommand. SUPPRESS
    # keeps a subcommand's unset copy from overwriting a value given earlier.
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--config-dir",
        default=argparse.SUPPRESS,
        help="Configuration directory (default: ~/.config/guitar_tuner)",
    )
    common.add_argument(
        "--debug", action="store_true", default=argparse.SUPPRESS, help="Enable debug logging"
    )

    parser = argparse.ArgumentParser(
        description="Guitar tuner - standard tuning, string by string", parents=[common]
    )
    parser.set_defaults(config_dir=None, debug=False)
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    replay_parser = subparsers.add_parser(
        "replay", help="Run the tuner over an audio file", parents=[common]
    )
    replay_parser.add_argument("file", help="Audio file to analyse (WAV, FLAC, ...)")
    replay_parser.add_argument(
        "--tick-ms", type=float, default=None, help="Milliseconds between ticks (default: from config)"
    )
    replay_parser.add_argument(
        "--frame-size", type=int, default=None, help="Samples per analysed frame (default: from config)"
    )
    replay_parser.add_argument(
        "--tolerance", type=float, default=None, help="Tolerance in cents"
    )
    replay_parser.add_argument(
        "--confirm-ms", type=float, default=None, help="Confirmation delay in milliseconds"
    )
    replay_parser.add_argument(
        "--gain", type=float, default=1.0, help="Linear gain applied to the file"
    )
    replay_parser.add_argument(
        "--json", action="store_true", help="Print one JSON status per tick"
    )

    config_parser = subparsers.add_parser(
        "config", help="Show or reset the stored configuration", parents=[common]
    )
    config_parser.add_argument("action", choices=["show", "reset"])

    return parser


def run_replay(args, manager: ConfigManager) -> int:
    config = manager.tuner_config()
    overrides = {}
    if args.tolerance is not None:
        overrides["tolerance_cents"] = args.tolerance
    if args.confirm_ms is not None:
        overrides["confirmation_delay"] = args.confirm_ms / 1000.0
    if overrides:
        config = replace(config, **overrides)

    replay_config = manager.get_config("replay")
    frame_size = args.frame_size or int(replay_config["frame_size"])
    tick_ms = args.tick_ms or float(replay_config["tick_ms"])

    provider = WavFileFrameProvider(
        args.file, frame_size=frame_size, gain=args.gain, tick_ms=tick_ms
    )

    summary = replay(provider, config, out=sys.stdout, as_json=args.json)
    if not args.json:
        print(
            f"{summary['ticks']} ticks, confirmed: {', '.join(summary['confirmed']) or 'none'}"
            f"{' (all strings tuned)' if summary['complete'] else ''}"
        )
    return 0


def run_config(args, manager: ConfigManager) -> int:
    if args.action == "reset":
        manager.reset_config("tuner")
        manager.reset_config("replay")
    print(
        json.dumps(
            {"tuner": manager.get_config("tuner"), "replay": manager.get_config("replay")},
            indent=2,
        )
    )
    return 0


def main(args: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI.

    Args:
        args: Command line arguments, or None to use sys.argv

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = build_parser()
    parsed_args = parser.parse_args(args)

    setup_logging("DEBUG" if parsed_args.debug else None)

    if parsed_args.command is None:
        parser.print_help()
        return 1

    try:
        manager = ConfigManager(parsed_args.config_dir)
        if parsed_args.command == "replay":
            return run_replay(parsed_args, manager)
        return run_config(parsed_args, manager)
    except (TunerError, OSError, RuntimeError) as e:
        # soundfile reports unreadable files as RuntimeError subclasses
        logger.debug(f"{parsed_args.command} failed", exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
