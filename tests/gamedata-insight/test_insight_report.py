"""
Tests for the designer insight report builder.
"""
import pytest

import gamedata_insight.insight_report as insight_report
from gamedata_insight.config import Config
from gamedata_insight.insight_report import (
    InsightReportBuilder,
    find_id_field,
    format_file_size,
    infer_table_name,
)
from gamedata_insight.models import CorrelationType, FileSummary, InsightSeverity


def _items():
    return [
        {"id": "1", "level": "1", "atk": "10", "name": "a"},
        {"id": "2", "level": "2", "atk": "20", "name": "b"},
        {"id": "3", "level": "3", "atk": "30", "name": ""},
        {"id": "4", "level": "4", "atk": "40"},
    ]


def _metric(report, name):
    return next((m for m in report.metrics if m.name == name), None)


def _titles(report):
    return [s.title for s in report.suggestions]


class TestBuild:
    def test_basic_metrics(self, cfg_like):
        report = InsightReportBuilder(cfg_like).build(_items())
        assert report.parsed
        assert report.entry_count == 4
        assert _metric(report, "Record Count").value == "4"
        assert _metric(report, "Field Count").value == "4"
        assert _metric(report, "Primary Key Candidate").value == "id"
        assert _metric(report, "File Size").value == "0 B"
        assert _metric(report, "Inferred Table Name") is None

    def test_field_suggestions(self, cfg_like):
        report = InsightReportBuilder(cfg_like).build(_items())
        titles = _titles(report)
        assert "Moderate Coverage Field: name" in titles
        assert "Null Values Detected: name" in titles
        assert not any(t.startswith("Duplicate Values") for t in titles)

    def test_advanced_results(self, cfg_like):
        report = InsightReportBuilder(cfg_like).build(_items())
        assert set(report.attribute_types) == {"id", "level", "atk", "name"}
        assert [(c.field1, c.field2) for c in report.correlations] == [
            ("id", "level"),
            ("id", "atk"),
            ("level", "atk"),
        ]
        assert all(c.type is CorrelationType.LINEAR_GROWTH for c in report.correlations)
        assert [p.field_name for p in report.distribution_profiles] == ["id", "level", "atk"]
        assert report.balance_issues == []

    def test_balance_issue_uses_id_field(self, cfg_like):
        records = [{"id": str(i + 1), "atk": str(v)} for i, v in enumerate([10, 11, 9, 10, 12, 1000])]
        report = InsightReportBuilder(cfg_like).build(records)
        (issue,) = report.balance_issues
        assert issue.affected_records == ["6 (value: 1000.00)"]

    def test_no_records(self, cfg_like):
        report = InsightReportBuilder(cfg_like).build([])
        assert report.entry_count == 0
        assert _titles(report) == ["No Records Found"]
        assert report.suggestions[0].severity is InsightSeverity.WARNING
        assert report.correlations == []
        assert report.attribute_types == {}

    def test_empty_records_sampled_but_not_aggregated(self, cfg_like):
        report = InsightReportBuilder(cfg_like).build([{}, {"id": "1"}])
        assert report.entry_count == 2
        assert report.sample_records == [{}, {"id": "1"}]
        assert [a.attribute_name for a in report.attribute_insights] == ["id"]
        assert "Low Coverage Field: id" in _titles(report)

    def test_sample_limit(self, cfg_like):
        records = [{"id": str(i)} for i in range(30)]
        assert len(InsightReportBuilder(cfg_like).build(records).sample_records) == 24
        small = Config(color_enabled=False, sample_record_limit=5)
        assert len(InsightReportBuilder(small).build(records).sample_records) == 5
        assert len(InsightReportBuilder(cfg_like).build(records, sample_limit=2).sample_records) == 2

    def test_large_volume(self, cfg_like):
        report = InsightReportBuilder(cfg_like).build([{"id": "1"}], entry_count=6000)
        assert report.entry_count == 6000
        assert _metric(report, "Record Count").value == "6,000"
        assert "Large Record Volume" in _titles(report)

    def test_many_distinct_values(self, cfg_like):
        records = [{"code": f"c{i}"} for i in range(510)]
        report = InsightReportBuilder(cfg_like).build(records)
        assert "Many Distinct Values: code" in _titles(report)

    def test_duplicates(self, cfg_like):
        report = InsightReportBuilder(cfg_like).build([{"q": "rare"}, {"q": "rare"}])
        assert "Duplicate Values: q" in _titles(report)
        assert _metric(report, "Primary Key Candidate") is None


class TestDatabaseFacts:
    def _summary(self, **kwargs):
        return FileSummary(source="items.json", display_name="client_items.xml", inferred_table_name="items", **kwargs)

    def test_missing_table(self, cfg_like):
        report = InsightReportBuilder(cfg_like).build(_items(), summary=self._summary(table_exists=False))
        assert "Missing Database Table" in _titles(report)
        assert "No matching table" in _metric(report, "Inferred Table Name").detail

    def test_unchecked_table_makes_no_database_claims(self, cfg_like):
        report = InsightReportBuilder(cfg_like).build(_items(), summary=self._summary())
        assert "Missing Database Table" not in _titles(report)
        detail = _metric(report, "Inferred Table Name").detail
        assert detail == "Guessed from the file name; not checked against a database."
        assert _metric(report, "Database Row Count") is None

    def test_row_count_metrics(self, cfg_like):
        summary = self._summary(table_exists=True, database_row_count=30)
        report = InsightReportBuilder(cfg_like).build(_items(), summary=summary)
        assert _metric(report, "Database Row Count").value == "30"
        assert _metric(report, "Record Delta").value == "26"
        assert "Missing Database Table" not in _titles(report)

    def test_no_delta_when_equal(self, cfg_like):
        summary = self._summary(table_exists=True, database_row_count=4)
        report = InsightReportBuilder(cfg_like).build(_items(), summary=summary)
        assert _metric(report, "Record Delta") is None

    def test_sync_check_disabled_by_default(self, cfg_like):
        records = [{"id": str(i)} for i in range(20)]
        summary = self._summary(table_exists=True, database_row_count=100)
        report = InsightReportBuilder(cfg_like).build(records, summary=summary)
        assert "Database Sync Difference" not in _titles(report)

    def test_sync_check_strict(self):
        records = [{"id": str(i)} for i in range(20)]
        summary = self._summary(table_exists=True, database_row_count=100)
        config = Config(color_enabled=False, check_database_sync=True)
        report = InsightReportBuilder(config).build(records, summary=summary)
        (sync,) = [s for s in report.suggestions if s.title == "Database Sync Difference"]
        assert "80 more rows" in sync.description
        assert "400% difference" in sync.description
        assert sync.severity is InsightSeverity.INFO

    def test_sync_check_lenient(self):
        records = [{"id": str(i)} for i in range(5)]
        summary = self._summary(table_exists=True, database_row_count=30)
        config = Config(color_enabled=False, check_database_sync=True)
        report = InsightReportBuilder(config).build(records, summary=summary)
        assert "Record Count Difference" in _titles(report)

    def test_sync_check_small_difference(self):
        records = [{"id": str(i)} for i in range(20)]
        summary = self._summary(table_exists=True, database_row_count=15)
        config = Config(color_enabled=False, check_database_sync=True)
        report = InsightReportBuilder(config).build(records, summary=summary)
        assert not any("Difference" in t for t in _titles(report))


class TestFailSoft:
    def test_advanced_failure_keeps_basic_results(self, cfg_like, monkeypatch):
        def boom(name, values):
            raise RuntimeError("analysis exploded")

        monkeypatch.setattr(insight_report, "analyze_distribution", boom)
        report = InsightReportBuilder(cfg_like).build(_items())

        assert report.parsed
        assert _metric(report, "Record Count").value == "4"
        assert [a.attribute_name for a in report.attribute_insights] == ["id", "level", "atk", "name"]
        assert report.correlations == []
        assert report.distribution_profiles == []
        assert report.balance_issues == []
        assert report.attribute_types == {}


class TestUnparseable:
    def test_minimal_report(self):
        summary = FileSummary(source="bad.xml", display_name="bad.xml")
        report = InsightReportBuilder.unparseable(summary)
        assert not report.parsed
        assert report.entry_count == 0
        assert report.metrics == []
        (suggestion,) = report.suggestions
        assert suggestion.title == "Unable to Parse"
        assert suggestion.severity is InsightSeverity.CRITICAL


class TestHelpers:
    @pytest.mark.parametrize(
        "name,expected",
        [
            ("client_item_data.xml", "item"),
            ("server_npc-list.xml", "npc_list"),
            ("svr_quest_config.xml", "quest"),
            ("Skills.XML", "skills"),
            ("client_.xml", None),
            ("", None),
        ],
    )
    def test_infer_table_name(self, name, expected):
        assert infer_table_name(name) == expected

    @pytest.mark.parametrize(
        "size,expected",
        [
            (0, "0 B"),
            (-5, "0 B"),
            (512, "512.00 B"),
            (1536, "1.50 KB"),
            (3 * 1024**3, "3.00 GB"),
            (1024**4, "1024.00 GB"),
        ],
    )
    def test_format_file_size(self, size, expected):
        assert format_file_size(size) == expected

    def test_find_id_field(self):
        assert find_id_field(["name", "id", "item_id"]) == "id"
        assert find_id_field(["name", "ItemId"]) == "ItemId"
        assert find_id_field(["name"]) is None
