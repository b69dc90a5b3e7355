"""Command-line front end for timexpr.

    timexpr "6h ago" --reference 2021-10-10T10:00:00Z
"""

import argparse
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from dateutil.parser import isoparse

from .core.config_manager import ConfigManager
from .core.error_handler import ErrorHandler, TimexprError
from .core.logging_manager import LoggingManager
from .resolver import TimeExpressionResolver


def _reference(value: str) -> datetime:
    try:
        return isoparse(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"invalid reference timestamp {value!r}: {e}")


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="timexpr", description="Resolve a time expression to a timestamp")
    ap.add_argument("expression", help='e.g. "now", "yesterday", "6h ago", "next 2d"')
    ap.add_argument("--reference", type=_reference, default=None,
                    help="ISO 8601 reference instant (default: current time)")
    ap.add_argument("--config", type=Path, default=None, help="configuration directory")
    ap.add_argument("--log-level", default=None, help="override configured log level")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    error_handler = ErrorHandler(install_excepthook=True)

    try:
        config = ConfigManager(config_path=args.config).load_config()
        # pydantic rejects an unknown level on assignment with a ValueError
        if args.log_level:
            config.logging.level = args.log_level
        LoggingManager().configure_from(config.logging)

        result = TimeExpressionResolver(config=config).resolve(args.expression, args.reference)
    except (TimexprError, ValueError) as e:
        error_handler.handle_error(e, context="timexpr")
        print(f"error: {e}", file=sys.stderr)
        return 1

    print(result.isoformat())
    return 0


if __name__ == "__main__":
    sys.exit(main())
