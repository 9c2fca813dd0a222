# ==============================================
# Tests for CLI
# ==============================================

import gzip
import io
import json
import sys

import pytest
from loguru import logger

from logship import cli
from logship.forwarder import LogForwarder
from logship.logging_setup import configure_logging


@pytest.fixture(autouse=True)
def log_output(monkeypatch):
    """Send CLI logging to a buffer instead of the test's stderr."""
    sink = io.StringIO()
    monkeypatch.setattr(cli, "configure_logging", lambda level: configure_logging(level, sink))
    yield sink
    logger.remove()
    logger.add(sys.stderr)


def write_lines(path, items):
    path.write_text("\n".join(json.dumps(item) for item in items) + "\n", encoding="utf-8")
    return path


class TestReadRecords:
    def test_wrapped_and_bare_records(self, tmp_path):
        path = write_lines(tmp_path / "in.jsonl", [
            {"record": {"log": "a"}, "timestamp": 5_000_000},
            {"record": {"log": "b"}, "timestamp": {"seconds": 2, "nanoseconds": 0}},
            {"log": "c"},
        ])
        with open(path, encoding="utf-8") as stream:
            items = list(cli.read_records(stream))

        assert items[0] == ({"log": "a"}, 5_000_000)
        assert items[1][1].unix_nano() == 2_000_000_000
        assert items[2] == ({"log": "c"}, None)


class TestPackageCommand:
    def test_writes_payloads(self, tmp_path, monkeypatch, capsys):
        monkeypatch.setenv("SOURCE", "CLI")
        path = write_lines(tmp_path / "in.jsonl", [
            {"record": {"log": "a"}, "timestamp": 5_000_000},
            {"log": "b"},
        ])
        out_dir = tmp_path / "out"

        assert cli.main(["package", str(path), "--out-dir", str(out_dir)]) == 0

        payload = (out_dir / "batch-0000.json.gz").read_bytes()
        records = json.loads(gzip.decompress(payload))
        assert [r["message"] for r in records] == ["a", "b"]
        assert records[0]["timestamp"] == 5
        assert records[0]["plugin"]["source"] == "CLI"
        assert "Packaged 2 records into 1 payloads" in capsys.readouterr().out

    def test_invalid_json_line(self, tmp_path, log_output):
        path = tmp_path / "in.jsonl"
        path.write_text('{"log": "ok"}\nnot json\n', encoding="utf-8")
        assert cli.main(["package", str(path), "--out-dir", str(tmp_path / "out")]) == 1
        assert "Line 2 is not valid JSON" in log_output.getvalue()

    @pytest.mark.parametrize("timestamp", [
        {"seconds": "soon"},
        {"seconds": None},
        {"seconds": 1, "nanoseconds": [5]},
    ])
    def test_invalid_timestamp(self, tmp_path, log_output, timestamp):
        path = write_lines(tmp_path / "in.jsonl", [
            {"log": "ok"},
            {"record": {"log": "bad"}, "timestamp": timestamp},
        ])
        assert cli.main(["package", str(path), "--out-dir", str(tmp_path / "out")]) == 1
        assert "Line 2 has an invalid timestamp" in log_output.getvalue()

    def test_missing_input_file(self, tmp_path):
        assert cli.main(["package", str(tmp_path / "nope.jsonl"), "--out-dir", str(tmp_path)]) == 1


class TestSendCommand:
    @pytest.fixture
    def patched_forwarder(self, monkeypatch, fake_client):
        monkeypatch.setattr(cli, "LogForwarder", lambda config: LogForwarder(config, client=fake_client))
        return fake_client

    def test_sends_payloads(self, tmp_path, patched_forwarder, capsys):
        path = write_lines(tmp_path / "in.jsonl", [{"log": "a"}, {"log": "b"}])

        assert cli.main(["send", str(path)]) == 0
        assert len(patched_forwarder.payloads) == 1
        assert "Sent 1 payloads" in capsys.readouterr().out

    def test_missing_credentials(self, tmp_path):
        path = write_lines(tmp_path / "in.jsonl", [{"log": "a"}])
        assert cli.main(["send", str(path)]) == 1


class TestConfigureLogging:
    def test_level_filter_and_format(self):
        sink = io.StringIO()
        configure_logging("warning", sink)
        logger.info("hidden line")
        logger.warning("shown line")

        output = sink.getvalue()
        assert "hidden line" not in output
        assert "[WARNING]" in output
        assert "shown line" in output
