"""CLI entry point."""

import argparse
import asyncio
import os
import sys
from typing import Optional

from common.constants import LOG_COMPONENTS
from common.exceptions import ConfigurationError
from common.logging_config import get_logger, setup_logging
from cli.commands import upload_file
from cli.config import Config

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_PARTIAL = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chunkhook",
        description="Split a file into chunks and post each one to WEBHOOK_URL.",
    )
    parser.add_argument("file", help="Path of the file to upload")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Entry point for CLI."""
    args = build_parser().parse_args(argv)
    log_level = 'DEBUG' if args.debug else os.getenv('LOG_LEVEL', 'INFO')

    for component in LOG_COMPONENTS:
        setup_logging(component, log_level=log_level)
    logger = get_logger('cli')

    if args.debug:
        logger.info("Debug logging enabled")

    try:
        config = Config.from_env()
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR

    try:
        summary = asyncio.run(upload_file(args.file, config))
    except OSError as e:
        logger.error(f"Cannot read {args.file}: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR
    except KeyboardInterrupt:
        logger.warning("Upload interrupted")
        return EXIT_ERROR

    return EXIT_OK if not summary.failed else EXIT_PARTIAL


if __name__ == "__main__":
    sys.exit(main())
