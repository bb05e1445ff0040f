#!/usr/bin/env python3
"""Options and setup shared by every analysis subcommand."""
from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass

from ..config import Config, InsightConfig
from ..constants import OUTPUT_FORMATS
from ..logging_config import get_logger, setup_logging

logger = get_logger(__name__)


@dataclass(frozen=True)
class RunContext:
    """Resolved settings for one CLI invocation."""

    settings: InsightConfig
    config: Config
    output_format: str


def add_common_arguments(parser: argparse.ArgumentParser) -> None:
    """Output, logging and config options."""
    group = parser.add_argument_group("output and logging")
    group.add_argument(
        "--format",
        choices=OUTPUT_FORMATS,
        default=None,
        help="Output format (default: from config, else text)",
    )
    group.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored output",
    )
    group.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Logging level (default: from config, else WARNING)",
    )
    group.add_argument(
        "--log-file",
        metavar="PATH",
        help="Also write logs to this file (rotated)",
    )
    group.add_argument(
        "--config",
        metavar="PATH",
        help="Path to config file (default: auto-discover gamedata-insight.yml)",
    )


def prepare(args: argparse.Namespace) -> RunContext:
    """Load configuration, apply command-line overrides and set up logging."""
    settings = InsightConfig.load(args.config)

    setup_logging(
        level=args.log_level or settings.log_level,
        log_file=args.log_file or settings.log_file,
        force=True,
    )

    color = False if args.no_color else settings.color_enabled(sys.stdout)
    config = settings.to_config(color_enabled=color)
    output_format = args.format or settings.output_format
    logger.debug("Output format %s, color %s", output_format, color)
    return RunContext(settings=settings, config=config, output_format=output_format)


def emit(text: str) -> None:
    sys.stdout.write(text)
    sys.stdout.flush()


__all__ = ["RunContext", "add_common_arguments", "prepare", "emit"]
