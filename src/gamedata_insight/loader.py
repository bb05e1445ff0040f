"""
Loader for flattened-records files.

The XML-flattening collaborator writes one mapping per top-level entry
element (attributes plus leaf-element text). This module reads such files
(JSON array, single object or NDJSON, optionally gzipped) and normalizes
every value to a string so the analysis core only ever sees
``mapping[str, str]``.

It also derives the FileSummary facts that need no database: size, display
name and inferred table name.
"""

from __future__ import annotations

import json
import os
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import ijson

from .exceptions import RecordsFormatError, wrap_exception
from .insight_report import infer_table_name
from .io_utils import all_records
from .logging_config import get_logger
from .models import FileSummary

logger = get_logger(__name__)

__all__ = ["load_records", "stringify_value", "summarize_records_file"]


def stringify_value(value: Any) -> str:
    """Render one JSON value the way it would read in the source XML."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    if isinstance(value, Decimal):
        # ijson yields Decimal for every non-integer number; avoid "1E+2"
        return format(value, "f")
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False, default=str)
    return str(value)


def load_records(
    path: Union[str, Path], max_records: Optional[int] = None
) -> List[Dict[str, str]]:
    """
    Read flattened records from ``path``.

    Raises
    ------
    RecordsFormatError
        If the file cannot be read or decoded, or holds something other than
        JSON objects.
    """
    path = str(path)
    try:
        raw_records = all_records(path, max_records)
    except (OSError, UnicodeDecodeError, ValueError, ijson.JSONError) as e:
        raise wrap_exception(
            e, f"Unable to read records: {e}", RecordsFormatError, file_path=path
        ) from e

    records = []
    for i, raw in enumerate(raw_records):
        if not isinstance(raw, dict):
            raise RecordsFormatError(
                f"Record {i} is a {type(raw).__name__}, expected an object",
                file_path=path,
            )
        records.append({str(k): stringify_value(v) for k, v in raw.items()})

    logger.info("Loaded %d records from %s", len(records), path)
    return records


def summarize_records_file(
    path: Union[str, Path],
    display_name: Optional[str] = None,
    table_exists: Optional[bool] = None,
    database_row_count: Optional[int] = None,
) -> FileSummary:
    """
    File facts for a records file.

    ``display_name`` names the original data file (e.g. ``client_items.xml``)
    when the records were exported under a different name; the table name
    is inferred from it.

    ``table_exists`` and ``database_row_count`` are passed through from
    whoever looked at the database. A known row count implies the table
    exists; leaving both unset means no database was consulted.
    """
    if database_row_count is not None:
        if database_row_count < 0:
            raise ValueError("database row count must not be negative")
        table_exists = True
    path = str(path)
    try:
        size = os.path.getsize(path)
    except OSError:
        size = 0
    name = display_name or os.path.basename(path)
    # strip compression and export suffixes before guessing the table
    base = name
    for suffix in (".gz", ".ndjson", ".jsonl", ".json"):
        if base.endswith(suffix):
            base = base[: -len(suffix)]
    return FileSummary(
        source=path,
        display_name=name,
        file_size=size,
        inferred_table_name=infer_table_name(base),
        table_exists=table_exists,
        database_row_count=database_row_count,
    )
