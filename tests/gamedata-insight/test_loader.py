"""
Tests for reading flattened-records files.
"""
from decimal import Decimal

import pytest

from gamedata_insight.exceptions import RecordsFormatError
from gamedata_insight.loader import load_records, stringify_value, summarize_records_file


class TestStringify:
    @pytest.mark.parametrize(
        "value,expected",
        [
            (None, ""),
            (True, "true"),
            (False, "false"),
            ("sword", "sword"),
            (10, "10"),
            (1.5, "1.5"),
            (Decimal("1.50"), "1.50"),
            (Decimal("1E+2"), "100"),
            ({"a": 1}, '{"a": 1}'),
            (["火", 2], '["火", 2]'),
        ],
    )
    def test_values(self, value, expected):
        assert stringify_value(value) == expected


class TestLoadRecords:
    def test_json_array_values_become_strings(self, write_file):
        path = write_file("items.json", '[{"id": 1, "atk": 12.5, "name": "Sword", "tradable": true, "note": null}]')
        assert load_records(path) == [
            {"id": "1", "atk": "12.5", "name": "Sword", "tradable": "true", "note": ""}
        ]

    def test_ndjson_gz(self, write_file):
        path = write_file("items.ndjson.gz", '{"id": "1"}\n{"id": "2"}\n', gz=True)
        assert load_records(path) == [{"id": "1"}, {"id": "2"}]

    def test_max_records(self, write_file):
        path = write_file("items.ndjson", '{"id": "1"}\n{"id": "2"}\n{"id": "3"}\n')
        assert len(load_records(path, max_records=2)) == 2

    def test_empty_objects_are_kept(self, write_file):
        path = write_file("items.json", "[{}, {\"id\": \"1\"}]")
        assert load_records(path) == [{}, {"id": "1"}]

    def test_missing_file(self, tmp_path):
        with pytest.raises(RecordsFormatError) as exc_info:
            load_records(tmp_path / "missing.json")
        assert isinstance(exc_info.value.cause, OSError)
        assert exc_info.value.file_path.endswith("missing.json")

    def test_invalid_json(self, write_file):
        path = write_file("broken.json", '{"id": ')
        with pytest.raises(RecordsFormatError):
            load_records(path)

    def test_non_object_record(self, write_file):
        path = write_file("scalars.json", "[1, 2]")
        with pytest.raises(RecordsFormatError, match="expected an object"):
            load_records(path)


class TestSummarize:
    def test_uses_display_name(self, write_file):
        path = write_file("export.ndjson", '{"id": "1"}\n')
        summary = summarize_records_file(path, "client_item_data.xml")
        assert summary.display_name == "client_item_data.xml"
        assert summary.inferred_table_name == "item"
        assert summary.file_size > 0
        assert summary.source == path

    def test_strips_export_suffixes(self, write_file):
        path = write_file("client_npcs.ndjson.gz", '{"id": "1"}\n', gz=True)
        summary = summarize_records_file(path)
        assert summary.display_name == "client_npcs.ndjson.gz"
        assert summary.inferred_table_name == "npcs"

    def test_missing_file_has_zero_size(self, tmp_path):
        summary = summarize_records_file(tmp_path / "nothing.json")
        assert summary.file_size == 0
        assert summary.inferred_table_name == "nothing"

    def test_database_facts_default_to_unknown(self, write_file):
        summary = summarize_records_file(write_file("items.json", "[]"))
        assert summary.table_exists is None
        assert summary.database_row_count is None

    def test_row_count_implies_table_exists(self, write_file):
        summary = summarize_records_file(write_file("items.json", "[]"), database_row_count=12)
        assert summary.table_exists is True
        assert summary.database_row_count == 12

    def test_known_missing_table(self, write_file):
        summary = summarize_records_file(write_file("items.json", "[]"), table_exists=False)
        assert summary.table_exists is False

    def test_negative_row_count(self, write_file):
        with pytest.raises(ValueError, match="must not be negative"):
            summarize_records_file(write_file("items.json", "[]"), database_row_count=-1)
