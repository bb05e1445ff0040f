#!/usr/bin/env python3
"""Insight subcommand: field statistics and balance review for one file."""
from __future__ import annotations

from dataclasses import replace

from ..exceptions import RecordsFormatError
from ..insight_report import InsightReportBuilder
from ..loader import load_records, summarize_records_file
from ..logging_config import get_logger
from ..report import render
from .common import add_common_arguments, emit, prepare

logger = get_logger(__name__)


def add_insight_subcommand(subparsers) -> None:
    """Add the insight subcommand to the CLI."""
    from ..helpfmt import ColorDefaultsFormatter
    from .colors import BLUE, RESET, example, section_header

    parser = subparsers.add_parser(
        "insight",
        help="Profile the flattened records of one data file",
        formatter_class=ColorDefaultsFormatter,
        description=f"""
Aggregate per-field statistics, detect a primary key candidate, and look
for correlations, distribution shapes and extreme outliers among numeric
fields.

{section_header("INPUT")}
  One JSON object per entry (JSON array, NDJSON or a single object,
  optionally gzipped). Values are read as strings.

{section_header("OUTPUT FORMATS")}
  {BLUE}text{RESET}       Human-readable
  {BLUE}json{RESET}       Machine-readable
  {BLUE}markdown{RESET}   Documentation-ready

{section_header("EXAMPLES")}
  {example("Profile exported item records")}
  gamedata-insight insight items.ndjson --name client_items.xml

  {example("Keep more sample records")}
  gamedata-insight insight items.json --sample-limit 50 --format markdown

  {example("Compare against the live table")}
  gamedata-insight insight items.json --db-row-count 1200 --check-db-sync
        """,
    )
    parser.add_argument("records", help="Flattened-records file")
    parser.add_argument(
        "--name",
        help="Name of the original data file, used to infer the table name",
    )
    parser.add_argument(
        "--sample-limit",
        type=int,
        default=None,
        help="Number of sample records to keep (default: from config, else 24)",
    )
    parser.add_argument(
        "--check-db-sync",
        action="store_true",
        help="Compare the record count with the database row count (needs --db-row-count)",
    )
    db = parser.add_argument_group("database facts")
    facts = db.add_mutually_exclusive_group()
    facts.add_argument(
        "--db-row-count",
        type=int,
        metavar="N",
        help="Rows in the matching database table; implies the table exists",
    )
    facts.add_argument(
        "--db-table-missing",
        action="store_true",
        help="The inferred table is known to be absent from the database",
    )
    add_common_arguments(parser)
    parser.set_defaults(func=cmd_insight)


def cmd_insight(args) -> None:
    """Handle 'gamedata-insight insight'."""
    ctx = prepare(args)
    config = ctx.config
    if args.check_db_sync and not config.check_database_sync:
        config = replace(config, check_database_sync=True)

    if config.check_database_sync and args.db_row_count is None:
        logger.warning("Database sync check skipped: no --db-row-count given")

    builder = InsightReportBuilder(config)
    summary = summarize_records_file(
        args.records,
        args.name,
        table_exists=False if args.db_table_missing else None,
        database_row_count=args.db_row_count,
    )

    try:
        records = load_records(args.records)
    except RecordsFormatError as e:
        logger.warning("Cannot parse %s: %s", args.records, e)
        insight = builder.unparseable(summary)
    else:
        insight = builder.build(records, summary=summary, sample_limit=args.sample_limit)

    emit(render(insight, ctx.output_format, config))
