"""
Unit tests for the casper CLI.
"""

import json
import pytest
from datetime import timedelta

from typer.testing import CliRunner

from casper.cli import app

runner = CliRunner()


@pytest.fixture
def snapshot_file(tmp_path, now):
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps({
        "tasks": [
            {"id": "t1", "content": "Send board deck", "priority": "high",
             "scheduled_for": (now - timedelta(days=1)).isoformat()},
            {"id": "t2", "content": "Quick reply", "effort_minutes": 5},
        ],
        "inboxItems": [
            {"id": "m1", "subject": "Term sheet", "received_at": (now - timedelta(hours=1)).isoformat()},
        ],
    }))
    return path


class TestPrioritiesCommand:
    """Tests for `casper priorities`."""

    def test_json_output(self, snapshot_file, now):
        result = runner.invoke(app, ["priorities", str(snapshot_file), "--now", now.isoformat(), "--json"])
        assert result.exit_code == 0

        data = json.loads(result.stdout)
        ids = [item["id"] for item in data["items"]]
        assert set(ids) == {"task-t1", "task-t2", "inbox-m1"}
        assert data["total_count"] == 3
        assert data["generated_at"] == now.isoformat()

    def test_limit(self, snapshot_file, now):
        result = runner.invoke(app, ["priorities", str(snapshot_file), "--now", now.isoformat(),
                                     "--json", "--limit", "1"])
        assert len(json.loads(result.stdout)["items"]) == 1

    def test_available_minutes(self, snapshot_file, now):
        result = runner.invoke(app, ["priorities", str(snapshot_file), "--now", now.isoformat(),
                                     "--json", "--available-minutes", "10"])
        items = json.loads(result.stdout)["items"]
        quick = next(item for item in items if item["id"] == "task-t2")
        assert quick["breakdown"]["available_minutes"] == 10

    def test_table_output(self, snapshot_file, now):
        result = runner.invoke(app, ["priorities", str(snapshot_file), "--now", now.isoformat()])
        assert result.exit_code == 0
        assert "Priorities" in result.stdout

    def test_missing_file(self, tmp_path):
        result = runner.invoke(app, ["priorities", str(tmp_path / "missing.json")])
        assert result.exit_code == 1
        assert "Error reading snapshot" in result.stdout

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json")
        result = runner.invoke(app, ["priorities", str(path)])
        assert result.exit_code == 1

    def test_snapshot_must_be_object(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[]")
        result = runner.invoke(app, ["priorities", str(path)])
        assert result.exit_code == 1

    def test_invalid_now(self, snapshot_file):
        result = runner.invoke(app, ["priorities", str(snapshot_file), "--now", "yesterday"])
        assert result.exit_code == 1
        assert "Invalid --now" in result.stdout

    def test_config_dir(self, snapshot_file, tmp_path, now):
        config_dir = tmp_path / "config"
        config_dir.mkdir()
        (config_dir / "priority.json").write_text(json.dumps({"max_items": 1}))

        result = runner.invoke(app, ["priorities", str(snapshot_file), "--now", now.isoformat(),
                                     "--json", "--config-dir", str(config_dir)])
        assert result.exit_code == 0
        assert len(json.loads(result.stdout)["items"]) == 1


class TestConfigCommand:
    """Tests for `casper config`."""

    def test_shows_defaults(self):
        result = runner.invoke(app, ["config"], env={"CASPER_CONFIG_DIR": None})
        assert result.exit_code == 0
        assert "weight.urgency" in result.stdout
        assert "max_items" in result.stdout

    def test_non_numeric_setting(self, tmp_path):
        (tmp_path / "priority.json").write_text(json.dumps({"max_items": "8"}))
        result = runner.invoke(app, ["config", "--config-dir", str(tmp_path)])
        assert result.exit_code == 1
        assert "Error loading configuration" in result.stdout

    def test_invalid_weights(self, tmp_path):
        (tmp_path / "priority.json").write_text(json.dumps({"weights": {"urgency": -1}}))
        result = runner.invoke(app, ["config", "--config-dir", str(tmp_path)])
        assert result.exit_code == 1
        assert "Error loading configuration" in result.stdout
