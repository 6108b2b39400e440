"""Tests for the state store and runtime settings."""

import json
import logging
from pathlib import Path

from tiergraph.config import DEFAULT_STATE_KEY, Settings, get_settings
from tiergraph.storage import StateStore

_STATE = {
    "nodes": [{"id": "node-1", "label": "Gold", "color": "#f39c12"}],
    "connections": [],
    "toolbarNodes": [],
}


class TestStateStore:
    """Tests for StateStore."""

    def test_load_missing_file(self, tmp_path):
        assert StateStore(tmp_path / "state.json").load() is None

    def test_save_and_load(self, tmp_path):
        store = StateStore(tmp_path / "nested" / "state.json")
        assert store.save(_STATE)
        assert store.load() == _STATE

    def test_saved_under_key(self, tmp_path):
        path = tmp_path / "state.json"
        StateStore(path).save(_STATE)
        assert json.loads(path.read_text(encoding="utf-8")) == {DEFAULT_STATE_KEY: _STATE}

    def test_keys_are_independent(self, tmp_path):
        path = tmp_path / "state.json"
        StateStore(path, key="one").save(_STATE)
        StateStore(path, key="two").save({"nodes": []})
        assert StateStore(path, key="one").load() == _STATE
        assert StateStore(path, key="two").load() == {"nodes": []}

    def test_clear_keeps_other_keys(self, tmp_path):
        path = tmp_path / "state.json"
        StateStore(path, key="one").save(_STATE)
        StateStore(path, key="two").save(_STATE)
        assert StateStore(path, key="one").clear()
        assert StateStore(path, key="one").load() is None
        assert StateStore(path, key="two").load() == _STATE

    def test_clear_missing_file(self, tmp_path):
        assert StateStore(tmp_path / "state.json").clear()

    def test_corrupt_file_load(self, tmp_path, caplog):
        path = tmp_path / "state.json"
        path.write_text("{not json", encoding="utf-8")
        with caplog.at_level(logging.ERROR):
            assert StateStore(path).load() is None
        assert "Failed to load state" in caplog.text

    def test_corrupt_file_overwritten_on_save(self, tmp_path, caplog):
        path = tmp_path / "state.json"
        path.write_text("[1, 2, 3]", encoding="utf-8")
        with caplog.at_level(logging.WARNING):
            assert StateStore(path).save(_STATE)
        assert "Discarding unreadable state file" in caplog.text
        assert StateStore(path).load() == _STATE

    def test_non_object_state_rejected(self, tmp_path):
        path = tmp_path / "state.json"
        path.write_text(json.dumps({DEFAULT_STATE_KEY: [1, 2]}), encoding="utf-8")
        assert StateStore(path).load() is None

    def test_save_failure_returns_false(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("x", encoding="utf-8")
        # Parent path is a regular file, so the directory cannot be created
        assert not StateStore(blocker / "state.json").save(_STATE)


class TestSettings:
    """Tests for environment-driven settings."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("TIERGRAPH_STATE_PATH", raising=False)
        monkeypatch.delenv("TIERGRAPH_STATE_KEY", raising=False)
        monkeypatch.delenv("TIERGRAPH_MAX_INPUT_BYTES", raising=False)
        settings = Settings()
        assert settings.state_path == Path.home() / ".tiergraph" / "state.json"
        assert settings.state_key == DEFAULT_STATE_KEY
        assert settings.max_input_bytes == 10 * 1024 * 1024

    def test_environment_overrides(self, monkeypatch, tmp_path):
        monkeypatch.setenv("TIERGRAPH_STATE_PATH", str(tmp_path / "custom.json"))
        monkeypatch.setenv("TIERGRAPH_STATE_KEY", "my-graph")
        monkeypatch.setenv("TIERGRAPH_MAX_INPUT_BYTES", "2048")
        settings = get_settings()
        assert settings.state_path == tmp_path / "custom.json"
        assert settings.state_key == "my-graph"
        assert settings.max_input_bytes == 2048
