#!/usr/bin/env python3
"""
Bidirectional index over discovered field-to-field relationships.

The relationship-discovery step (run elsewhere over the XML schemas) reports
references between data files. This module turns that flat catalogue into
two adjacency mappings keyed by table name:

- ``forward[source][target]`` lists relationships from a source table,
- ``reverse[target][source]`` lists relationships pointing at a target table.

An index is built once per analysis run and is read-only afterwards. It is
not safe to share across threads without external synchronization.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, NamedTuple, Union

from .constants import CLIENT_FILE_PREFIX, XML_FILE_SUFFIX
from .exceptions import CatalogueFormatError, wrap_exception
from .io_utils import iter_records
from .logging_config import get_logger
from .models import Relationship

logger = get_logger(__name__)

Buckets = Dict[str, Dict[str, List[Relationship]]]


class CatalogueEntry(NamedTuple):
    """One relationship as reported by the discovery step."""

    source_file_key: str
    source_column_name: str
    source_column_path: str
    target_file_key: str
    target_column_name: str
    target_column_path: str
    confidence: float
    match_count: int


# Serialized catalogue keys, in CatalogueEntry order
_CATALOGUE_KEYS = (
    "source_file",
    "source_column",
    "source_path",
    "target_file",
    "target_column",
    "target_path",
    "confidence",
    "match_count",
)
_REQUIRED_KEYS = ("source_file", "source_column", "target_file", "target_column")


def table_name_from_file_key(file_key: str) -> str:
    """Derive a table name from a catalogue file key.

    Drops the directory part, a trailing ``.xml`` and one leading ``client_``.

    >>> table_name_from_file_key("data/items/client_items.xml")
    'items'
    """
    name = file_key.rsplit("/", 1)[-1]
    if name.endswith(XML_FILE_SUFFIX):
        name = name[: -len(XML_FILE_SUFFIX)]
    if name.startswith(CLIENT_FILE_PREFIX):
        name = name[len(CLIENT_FILE_PREFIX) :]
    return name


def relationship_from_entry(entry: CatalogueEntry) -> Relationship:
    """Normalize a catalogue entry into a table-keyed Relationship."""
    return Relationship(
        source_table=table_name_from_file_key(entry.source_file_key),
        source_field=entry.source_column_name,
        source_field_path=entry.source_column_path,
        target_table=table_name_from_file_key(entry.target_file_key),
        target_field=entry.target_column_name,
        target_field_path=entry.target_column_path,
        confidence=entry.confidence,
        match_count=entry.match_count,
    )


class RelationshipIndex:
    """Forward and reverse adjacency over relationships, keyed by table."""

    def __init__(self) -> None:
        self.forward: Buckets = {}
        self.reverse: Buckets = {}
        self._count = 0

    @classmethod
    def build(
        cls, relationships: Iterable[Union[Relationship, CatalogueEntry, Mapping[str, Any]]]
    ) -> "RelationshipIndex":
        """Index every relationship in both directions.

        Catalogue entries, as tuples or serialized mappings, are normalized
        first. Buckets are appended to, so repeated (source, target) pairs
        accumulate in input order.
        """
        index = cls()
        for i, item in enumerate(relationships):
            if isinstance(item, Relationship):
                index._add(item)
            elif isinstance(item, Mapping):
                index._add(relationship_from_entry(_entry_from_mapping(item, i, "<memory>")))
            else:
                index._add(relationship_from_entry(CatalogueEntry(*item)))
        logger.debug(
            "Indexed %d relationships across %d tables", index._count, len(index.tables())
        )
        return index

    def _add(self, rel: Relationship) -> None:
        self.forward.setdefault(rel.source_table, {}).setdefault(
            rel.target_table, []
        ).append(rel)
        self.reverse.setdefault(rel.target_table, {}).setdefault(
            rel.source_table, []
        ).append(rel)
        self._count += 1

    def referencing(self, table: str) -> Dict[str, List[Relationship]]:
        """Tables that reference ``table``, with their relationships."""
        return self.reverse.get(table, {})

    def referenced_by(self, table: str) -> Dict[str, List[Relationship]]:
        """Tables that ``table`` references, with their relationships."""
        return self.forward.get(table, {})

    def tables(self) -> List[str]:
        seen: Dict[str, None] = {}
        for source, targets in self.forward.items():
            seen[source] = None
            for target in targets:
                seen[target] = None
        return list(seen)

    def __len__(self) -> int:
        return self._count


def _entry_from_mapping(raw: Mapping[str, Any], index: int, path: str) -> CatalogueEntry:
    missing = [key for key in _REQUIRED_KEYS if not raw.get(key)]
    if missing:
        raise CatalogueFormatError(
            f"Catalogue entry is missing {', '.join(missing)}",
            file_path=path,
            entry_index=index,
        )
    try:
        return CatalogueEntry(
            source_file_key=str(raw["source_file"]),
            source_column_name=str(raw["source_column"]),
            source_column_path=str(raw.get("source_path") or ""),
            target_file_key=str(raw["target_file"]),
            target_column_name=str(raw["target_column"]),
            target_column_path=str(raw.get("target_path") or ""),
            confidence=float(raw.get("confidence") or 0.0),
            match_count=int(raw.get("match_count") or 0),
        )
    except (TypeError, ValueError) as e:
        raise CatalogueFormatError(
            f"Invalid numeric value in catalogue entry: {e}",
            file_path=path,
            entry_index=index,
            cause=e,
        ) from e


def _read_yaml(path: str) -> Any:
    import yaml

    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f)


def load_relationship_catalogue(path: Union[str, Path]) -> List[CatalogueEntry]:
    """Read a relationship catalogue export.

    Accepts a JSON array of entries, a JSON object carrying a
    ``relationships`` array (the discovery step's report shape), NDJSON, or
    the same structures in YAML. Gzipped JSON is detected automatically.
    """
    path = str(path)
    try:
        if path.endswith((".yml", ".yaml")):
            data = _read_yaml(path)
            items = data.get("relationships", []) if isinstance(data, dict) else data
        else:
            items = []
            for rec in iter_records(path):
                if isinstance(rec, dict) and "relationships" in rec:
                    items.extend(rec["relationships"])
                else:
                    items.append(rec)
    except CatalogueFormatError:
        raise
    except Exception as e:
        raise wrap_exception(
            e,
            f"Unable to read relationship catalogue: {e}",
            CatalogueFormatError,
            file_path=path,
        ) from e

    entries = []
    for i, raw in enumerate(items or []):
        if not isinstance(raw, Mapping):
            raise CatalogueFormatError(
                "Catalogue entries must be objects", file_path=path, entry_index=i
            )
        entries.append(_entry_from_mapping(raw, i, path))

    logger.info("Loaded %d catalogue entries from %s", len(entries), path)
    return entries


__all__ = [
    "CatalogueEntry",
    "RelationshipIndex",
    "table_name_from_file_key",
    "relationship_from_entry",
    "load_relationship_catalogue",
]
