"""
Tests for configuration loading, validation and saving.
"""
import io

import pytest
import yaml

from gamedata_insight.config import Config, InsightConfig
from gamedata_insight.exceptions import ConfigurationError


@pytest.fixture(autouse=True)
def isolated(tmp_path, monkeypatch):
    """No discovered config files and no GAMEDATA_INSIGHT_* variables."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    for var in (
        "GAMEDATA_INSIGHT_COLOR",
        "GAMEDATA_INSIGHT_FORMAT",
        "GAMEDATA_INSIGHT_SAMPLE_LIMIT",
        "GAMEDATA_INSIGHT_CHECK_DB_SYNC",
        "GAMEDATA_INSIGHT_MAX_DEPTH",
        "GAMEDATA_INSIGHT_LOG_LEVEL",
        "GAMEDATA_INSIGHT_LOG_FILE",
    ):
        monkeypatch.delenv(var, raising=False)


class _Tty(io.StringIO):
    def isatty(self):
        return True


class TestConfig:
    def test_colors_disabled(self, cfg_like):
        assert cfg_like.colors() == ("", "", "", "", "")

    def test_colors_enabled(self):
        red, grn, yel, cyn, rst = Config().colors()
        assert red.startswith("\033[")
        assert rst == "\033[0m"


class TestInsightConfig:
    def test_defaults(self):
        config = InsightConfig.load()
        assert config.color_mode == "auto"
        assert config.output_format == "text"
        assert config.sample_record_limit == 24
        assert config.default_max_depth == 3
        assert config.check_database_sync is False

    def test_discovers_file_in_cwd(self, tmp_path):
        (tmp_path / "gamedata-insight.yml").write_text("output_format: markdown\nsample_record_limit: 5\n")
        config = InsightConfig.load()
        assert config.output_format == "markdown"
        assert config.sample_record_limit == 5

    def test_explicit_path(self, tmp_path):
        path = tmp_path / "custom.yaml"
        path.write_text("check_database_sync: true\ndefault_max_depth: 1\n")
        config = InsightConfig.load(str(path))
        assert config.check_database_sync is True
        assert config.default_max_depth == 1

    def test_explicit_missing_path(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            InsightConfig.load(str(tmp_path / "nope.yml"))

    def test_env_overrides_file(self, tmp_path, monkeypatch):
        (tmp_path / "gamedata-insight.yml").write_text("output_format: markdown\n")
        monkeypatch.setenv("GAMEDATA_INSIGHT_FORMAT", "json")
        monkeypatch.setenv("GAMEDATA_INSIGHT_CHECK_DB_SYNC", "yes")
        monkeypatch.setenv("GAMEDATA_INSIGHT_MAX_DEPTH", "5")
        config = InsightConfig.load()
        assert config.output_format == "json"
        assert config.check_database_sync is True
        assert config.default_max_depth == 5

    def test_bad_env_integer(self, monkeypatch):
        monkeypatch.setenv("GAMEDATA_INSIGHT_SAMPLE_LIMIT", "many")
        with pytest.raises(ConfigurationError) as exc_info:
            InsightConfig.load()
        assert exc_info.value.config_key == "sample_record_limit"

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "bad.yml"
        path.write_text("output_format: [unclosed\n")
        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            InsightConfig.load(str(path))

    def test_non_mapping(self, tmp_path):
        path = tmp_path / "list.yml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigurationError, match="mapping"):
            InsightConfig.load(str(path))

    def test_unknown_keys_ignored(self, tmp_path):
        path = tmp_path / "extra.yml"
        path.write_text("legacy_option: x\noutput_format: json\n")
        config = InsightConfig.load(str(path))
        assert config.output_format == "json"
        assert not hasattr(config, "legacy_option")

    @pytest.mark.parametrize(
        "content",
        [
            "color_mode: sometimes\n",
            "output_format: yaml\n",
            "sample_record_limit: -1\n",
            "default_max_depth: deep\n",
        ],
    )
    def test_validation(self, tmp_path, content):
        path = tmp_path / "invalid.yml"
        path.write_text(content)
        with pytest.raises(ConfigurationError):
            InsightConfig.load(str(path))

    def test_color_modes(self):
        assert InsightConfig(color_mode="always").color_enabled(io.StringIO())
        assert not InsightConfig(color_mode="never").color_enabled(_Tty())
        assert InsightConfig(color_mode="auto").color_enabled(_Tty())
        assert not InsightConfig(color_mode="auto").color_enabled(io.StringIO())

    def test_to_config(self):
        settings = InsightConfig(sample_record_limit=7, check_database_sync=True, default_max_depth=2)
        config = settings.to_config(color_enabled=False)
        assert config == Config(
            color_enabled=False, sample_record_limit=7, check_database_sync=True, default_max_depth=2
        )

    def test_save_round_trip(self, tmp_path):
        path = tmp_path / "nested" / "out.yml"
        InsightConfig(output_format="markdown").save(str(path))
        data = yaml.safe_load(path.read_text())
        assert data["output_format"] == "markdown"
        assert "log_file" not in data
        assert InsightConfig.load(str(path)).output_format == "markdown"
