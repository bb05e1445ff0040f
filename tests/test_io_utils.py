import gzip
import json
import sys

import pytest

from gamedata_insight.io_utils import CommandError, _run, all_records, iter_records, sniff_ndjson


def _write(tmp_path, name, text, gz=False):
    p = tmp_path / name
    if gz:
        with gzip.open(p, "wt", encoding="utf-8") as f:
            f.write(text)
    else:
        p.write_text(text, encoding="utf-8")
    return p


def test_iter_records_ndjson(tmp_path):
    p = _write(tmp_path, "a.ndjson", '{"a":1}\n{"a":2}\n')
    assert list(iter_records(str(p))) == [{"a": 1}, {"a": 2}]


def test_iter_records_json_array(tmp_path):
    p = _write(tmp_path, "a.json", '[{"a":1},{"a":2}]')
    assert list(iter_records(str(p))) == [{"a": 1}, {"a": 2}]


def test_iter_records_single_object(tmp_path):
    p = _write(tmp_path, "a.json", '{"a":1}')
    assert list(iter_records(str(p))) == [{"a": 1}]


def test_iter_records_gz_ndjson(tmp_path):
    p = _write(tmp_path, "a.ndjson.gz", '{"a":1}\n{"a":2}\n', gz=True)
    assert list(iter_records(str(p))) == [{"a": 1}, {"a": 2}]


def test_iter_records_long_first_line(tmp_path):
    big = {"text": "x" * 10000}
    p = _write(tmp_path, "a.ndjson", json.dumps(big) + "\n" + '{"a":2}\n')
    assert list(iter_records(str(p))) == [big, {"a": 2}]


def test_iter_records_empty_file(tmp_path):
    p = _write(tmp_path, "empty.json", "  \n")
    assert list(iter_records(str(p))) == []


def test_all_records_limit(tmp_path):
    p = _write(tmp_path, "a.ndjson", "\n".join(json.dumps({"i": i}) for i in range(10)) + "\n")
    assert all_records(str(p), max_records=3) == [{"i": 0}, {"i": 1}, {"i": 2}]
    assert len(all_records(str(p))) == 10


def test_sniff_ndjson():
    assert sniff_ndjson('{"a":1}\n{"a":2}')
    assert not sniff_ndjson('{"a":1}')
    assert not sniff_ndjson('[{"a":1},\n{"a":2}]')


def test_run_rejects_suspicious_args():
    with pytest.raises(ValueError):
        _run([])
    with pytest.raises(ValueError):
        _run(["echo", "a; rm -rf /"])
    with pytest.raises(ValueError):
        _run(["echo", 1])


def test_run_reports_failure():
    with pytest.raises(CommandError) as exc_info:
        _run([sys.executable, "-c", "import sys; sys.exit(3)"], check_untrusted=False)
    assert exc_info.value.returncode == 3

    res = _run([sys.executable, "-c", "import sys; sys.exit(3)"], check_untrusted=False, check=False)
    assert res.returncode == 3
