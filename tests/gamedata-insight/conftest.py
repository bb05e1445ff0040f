import gzip
import json
import os
import sys
from pathlib import Path

import pytest

from gamedata_insight.io_utils import _run

SRC_DIR = str(Path(__file__).resolve().parents[2] / "src")


@pytest.fixture
def write_file(tmp_path):
    def _w(name: str, text: str, gz: bool = False) -> str:
        p = tmp_path / name
        if gz:
            with gzip.open(p, "wt", encoding="utf-8") as f:
                f.write(text)
        else:
            p.write_text(text, encoding="utf-8")
        return str(p)

    return _w


@pytest.fixture
def write_json(write_file):
    def _wj(name: str, payload, gz: bool = False) -> str:
        return write_file(name, json.dumps(payload, ensure_ascii=False), gz=gz)

    return _wj


@pytest.fixture
def run_cli(tmp_path):
    def _run_cli(args: list[str]):
        exe = [sys.executable, "-m", "gamedata_insight.cli"]
        env = dict(os.environ)
        env["PYTHONPATH"] = os.pathsep.join(
            p for p in (SRC_DIR, env.get("PYTHONPATH")) if p
        )
        env.pop("NO_COLOR", None)
        # keep auto-discovered user config out of the way
        env["HOME"] = str(tmp_path)
        return _run(exe + args, cwd=str(tmp_path), env=env, check=False)

    return _run_cli


def catalogue_entry(source_file, source_column, target_file, target_column, confidence=0.9, match_count=10):
    return {
        "source_file": source_file,
        "source_column": source_column,
        "source_path": f"/{source_column}",
        "target_file": target_file,
        "target_column": target_column,
        "target_path": f"/{target_column}",
        "confidence": confidence,
        "match_count": match_count,
    }


@pytest.fixture
def sample_catalogue():
    """items is referenced by drops and quests; quests references npcs."""
    return [
        catalogue_entry("data/client_drops.xml", "item_id", "data/client_items.xml", "id", 0.95),
        catalogue_entry("data/client_quests.xml", "reward_item", "data/client_items.xml", "id", 0.8),
        catalogue_entry("data/client_quests.xml", "npc_id", "data/client_npcs.xml", "id", 0.9),
    ]


@pytest.fixture
def make_entry():
    return catalogue_entry
