import pytest
from gamedata_insight.config import Config


@pytest.fixture
def cfg_like():
    # deterministic, no color noise in output
    return Config(color_enabled=False, sample_record_limit=24, check_database_sync=False)
