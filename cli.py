import argparse
import logging
import os
import sys
import time
import uuid as _uuid
from dataclasses import replace
from pathlib import Path

from config.settings import get_settings
from pipelines.dispatcher import Dispatcher, InputNotFound
from services.reporting import print_summary
from utils.logging_setup import init_logging


logger = logging.getLogger("cli")

# Same code argparse uses for usage errors
EXIT_CONFIG_ERROR = 2

MISSING_INPUT_MESSAGE = "Input file does not exist."


def parse_arguments(argv=None):
    parser = argparse.ArgumentParser(
        description="Enrich a ;-separated people file through the Contact/Enrich API",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python cli.py people.txt
  python cli.py people.txt --output enriched.txt --workers 4
        """
    )
    parser.add_argument("input", help="Path to the input file (one record per line)")
    parser.add_argument("--output", "-o", default=None, help="Append enriched lines to this file (default: OUTPUT_PATH)")
    parser.add_argument("--workers", "-w", type=int, default=None, help="Override the load-based worker count")
    parser.add_argument(
        "--log-level", "-l",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Set logging level (default: LOG_LEVEL)",
    )
    return parser.parse_args(argv)


def main(argv=None) -> int:
    started = time.monotonic()
    if not os.getenv("RUN_ID"):
        os.environ["RUN_ID"] = _uuid.uuid4().hex
    args = parse_arguments(argv)

    try:
        settings = get_settings()
    except RuntimeError as e:
        # Logging needs settings, so these go straight to stderr
        if not Path(args.input).is_file():
            print(MISSING_INPUT_MESSAGE, file=sys.stderr)
            return 0
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    settings = replace(
        settings,
        output_path=args.output or settings.output_path,
        log_level=args.log_level or settings.log_level,
    )
    init_logging(settings.log_level, settings=settings)

    try:
        summary = Dispatcher(settings, worker_count=args.workers).run(args.input)
    except InputNotFound:
        logger.error("Input file does not exist: %s", args.input, extra={"step": "startup", "status": "missing"})
        print(MISSING_INPUT_MESSAGE, file=sys.stderr)
        return 0

    print_summary(summary, total_seconds=time.monotonic() - started, output_path=settings.output_path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
