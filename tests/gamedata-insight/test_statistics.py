"""
Tests for the statistical analyzers: attribute types, correlation,
distribution shape and balance outliers.
"""
import pytest

import gamedata_insight.correlation as correlation
from gamedata_insight.attribute_types import identify_attribute_type
from gamedata_insight.balance import (
    OUTLIER_CATEGORY,
    detect_balance_issues,
    extract_numeric_values,
    records_by_numeric_field,
)
from gamedata_insight.correlation import (
    INSUFFICIENT_DATA_INSIGHT,
    analyze_correlation,
    detect_power_growth,
    pearson,
)
from gamedata_insight.distribution import (
    EMPTY_DATA_INSIGHT,
    analyze_distribution,
    evenness,
    find_gaps,
    is_power_law,
    skewness,
)
from gamedata_insight.models import (
    CorrelationType,
    DistributionType,
    GameAttributeCategory,
    InsightSeverity,
)


class TestAttributeTypes:
    @pytest.mark.parametrize(
        "name,category",
        [
            ("id", GameAttributeCategory.IDENTIFIER),
            ("ItemID", GameAttributeCategory.IDENTIFIER),
            ("物品编号", GameAttributeCategory.IDENTIFIER),
            ("required_level", GameAttributeCategory.PROGRESSION),
            ("LV", GameAttributeCategory.PROGRESSION),
            ("max_hp", GameAttributeCategory.COMBAT_STAT),
            ("攻击", GameAttributeCategory.COMBAT_STAT),
            ("physical_def", GameAttributeCategory.COMBAT_STAT),
            ("buy_price", GameAttributeCategory.ECONOMY),
            ("Rarity", GameAttributeCategory.QUALITY),
            ("drop_weight", GameAttributeCategory.PROBABILITY),
            ("name", GameAttributeCategory.UNKNOWN),
        ],
    )
    def test_categories(self, name, category):
        attr = identify_attribute_type(name)
        assert attr.category is category
        assert attr.field_name == name

    def test_first_pattern_wins(self):
        # contains both "id" and "level"; identifier is checked first
        assert identify_attribute_type("level_id").category is GameAttributeCategory.IDENTIFIER
        # "hp" is checked before "price"
        assert identify_attribute_type("hp_price").category is GameAttributeCategory.COMBAT_STAT

    def test_descriptions(self):
        assert identify_attribute_type("id").description == "Unique identifier, used to link other data"
        assert identify_attribute_type("name").description == ""
        assert GameAttributeCategory.COMBAT_STAT.display_name == "Combat stat"


class TestCorrelation:
    def test_perfect_linear(self):
        result = analyze_correlation("a", [1, 2, 3, 4, 5], "b", [2, 4, 6, 8, 10])
        assert result.correlation == pytest.approx(1.0)
        assert result.type is CorrelationType.LINEAR_GROWTH
        assert result.field1 == "a"
        assert result.field2 == "b"

    def test_power_growth(self):
        xs = [1, 2, 3, 4, 5, 6]
        ys = [x**3 for x in xs]
        result = analyze_correlation("level", xs, "exp", ys)
        assert result.correlation > 0.7
        assert result.type is CorrelationType.POWER_GROWTH
        assert "exp" in result.insight

    def test_strong_negative_has_no_power_check(self):
        result = analyze_correlation("a", [1, 2, 3, 4, 5], "b", [10, 8, 6, 4, 2])
        assert result.correlation == pytest.approx(-1.0)
        assert result.type is CorrelationType.NEGATIVE_LINEAR

    def test_moderate_positive(self):
        result = analyze_correlation("a", [1, 2, 3, 4, 5, 6], "b", [1, 3, 2, 1, 5, 2])
        assert 0.3 <= result.correlation <= 0.7
        assert result.type is CorrelationType.POSITIVE_LINEAR

    @pytest.mark.parametrize(
        "r,expected",
        [
            (0.3, CorrelationType.NO_CORRELATION),
            (-0.3, CorrelationType.NO_CORRELATION),
            (0.30001, CorrelationType.POSITIVE_LINEAR),
            (-0.30001, CorrelationType.NEGATIVE_LINEAR),
            (0.7, CorrelationType.POSITIVE_LINEAR),
            (-0.7, CorrelationType.NEGATIVE_LINEAR),
        ],
    )
    def test_threshold_boundaries(self, monkeypatch, r, expected):
        monkeypatch.setattr(correlation, "pearson", lambda xs, ys: r)
        result = analyze_correlation("a", [1, 2, 3], "b", [3, 1, 2])
        assert result.correlation == r
        assert result.type is expected

    def test_no_correlation(self):
        result = analyze_correlation("a", [1, 2, 3, 4], "b", [5, 1, 1, 5])
        assert result.correlation == pytest.approx(0.0)
        assert result.type is CorrelationType.NO_CORRELATION

    @pytest.mark.parametrize("v1,v2", [([], []), ([1, 2], [1, 2, 3])])
    def test_insufficient_data(self, v1, v2):
        result = analyze_correlation("a", v1, "b", v2)
        assert result.type is CorrelationType.NO_CORRELATION
        assert result.correlation == 0
        assert result.insight == INSUFFICIENT_DATA_INSIGHT

    def test_zero_variance(self):
        assert pearson([1, 1, 1], [1, 2, 3]) == 0.0

    def test_power_growth_needs_points_and_rates(self):
        assert not detect_power_growth([1, 2, 3, 4], [1, 8, 27, 64])
        # x never increases, so no rates
        assert not detect_power_growth([5, 4, 3, 2, 1], [1, 2, 3, 4, 5])

    def test_power_growth_share_uses_transitions(self):
        # rates 1, 2, 4, 4: two of three transitions accelerate (>= 0.6 * 3)
        xs = [0, 1, 2, 3, 4]
        ys = [0, 1, 3, 7, 11]
        assert detect_power_growth(xs, ys)


class TestDistribution:
    def test_extreme_right_skew(self):
        profile = analyze_distribution("drop", [1, 1, 1, 1, 1, 100])
        assert profile.type is DistributionType.SKEWED_RIGHT
        assert profile.skewness > 1.0

    def test_power_law_needs_ten_values(self):
        assert not is_power_law([1, 1, 1, 1, 1, 100])
        assert is_power_law([1] * 9 + [100])
        assert not is_power_law([0] * 10)

    def test_uniform(self):
        profile = analyze_distribution("level", list(range(1, 21)))
        assert profile.type is DistributionType.UNIFORM
        assert profile.evenness == pytest.approx(1.0)
        assert profile.gaps == []

    def test_normal(self):
        values = [1, 5, 5, 5, 5, 5, 5, 5, 5, 9]
        profile = analyze_distribution("x", values)
        assert profile.skewness == pytest.approx(0.0)
        assert profile.type is DistributionType.NORMAL

    def test_left_skew(self):
        profile = analyze_distribution("x", [1, 100, 100, 100, 100, 100])
        assert profile.type is DistributionType.SKEWED_LEFT

    def test_empty(self):
        profile = analyze_distribution("x", [])
        assert profile.type is DistributionType.DISCRETE
        assert profile.skewness == 0
        assert profile.evenness == 0
        assert profile.insight == EMPTY_DATA_INSIGHT

    def test_constant_values(self):
        values = [3.0, 3.0, 3.0]
        assert skewness(values, 3.0) == 0.0
        assert evenness(values) == 1.0
        assert evenness([7.0]) == 1.0

    def test_evenness_all_in_one_bucket(self):
        assert evenness([0, 0, 0, 0, 0, 0, 0, 0, 0, 10]) < 0.2

    def test_gaps(self):
        gaps = find_gaps([1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 100])
        assert len(gaps) == 1
        assert gaps[0].start == 10
        assert gaps[0].end == 100
        assert gaps[0].description == "No values between 10.0 and 100.0"

    def test_gap_must_exceed_one_unit(self):
        assert find_gaps([0.0, 0.1, 0.2, 0.3, 0.4, 0.5, 0.6, 0.7, 0.8, 1.5]) == []


class TestBalance:
    def _records(self, values, id_field="id"):
        return [{id_field: f"item{i}", "atk": str(v)} for i, v in enumerate(values)]

    def test_single_extreme_outlier(self):
        records = self._records([10, 11, 9, 10, 12, 1000])
        issues = detect_balance_issues({"atk": records}, "id")
        assert len(issues) == 1
        issue = issues[0]
        assert issue.category == OUTLIER_CATEGORY
        assert issue.severity is InsightSeverity.WARNING
        assert issue.affected_records == ["item5 (value: 1000.00)"]
        assert "atk" in issue.description

    def test_no_outliers(self):
        records = self._records([10, 11, 9, 10, 12, 13])
        assert detect_balance_issues({"atk": records}, "id") == []

    def test_too_few_values(self):
        records = self._records([1, 2, 3, 1000])
        assert detect_balance_issues({"atk": records}, "id") == []

    def test_more_than_five_outliers_suppressed(self):
        values = [10] * 20 + [1000] * 6
        assert detect_balance_issues({"atk": self._records(values)}, "id") == []

    def test_five_outliers_reported_with_three_examples(self):
        values = [10] * 20 + [1000] * 5
        (issue,) = detect_balance_issues({"atk": self._records(values)}, "id")
        assert len(issue.affected_records) == 3
        assert "5 extreme outlier" in issue.description

    def test_fallback_record_label(self):
        records = [{"atk": str(v)} for v in [10, 11, 9, 10, 12, 1000]]
        (issue,) = detect_balance_issues({"atk": records}, "id")
        assert issue.affected_records == ["record 5 (value: 1000.00)"]

    def test_missing_field_reads_as_zero(self):
        records = self._records([100, 101, 99, 100, 102, 100]) + [{"id": "empty"}]
        (issue,) = detect_balance_issues({"atk": records}, "id")
        assert issue.affected_records == ["empty (value: 0.00)"]

    def test_extract_numeric_values(self):
        records = [{"a": " 1.5 "}, {"a": ""}, {"a": "x"}, {}, {"a": "-2"}]
        assert extract_numeric_values(records, "a") == [1.5, -2.0]

    def test_records_by_numeric_field(self):
        records = [{"a": "1"}]
        assert records_by_numeric_field(records, ["a", "b"]) == {"a": records, "b": records}
