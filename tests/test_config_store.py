"""Tests for attention/shared/config.py and attention/shared/store.py."""

import json

import pytest
from pydantic import ValidationError

from attention.shared.config import AppConfig
from attention.shared.store import ConfigStore


@pytest.fixture
def store(tmp_path, monkeypatch):
    monkeypatch.setenv("APPDATA", str(tmp_path))
    return ConfigStore()


class TestAppConfig:
    """Field defaults, bounds and the derived component configs."""

    def test_defaults(self):
        cfg = AppConfig()
        assert cfg.enabled
        assert cfg.window_count == 1
        assert cfg.poll_interval_ms == 500
        assert cfg.image_duration_s == 8.0
        assert cfg.media_folder is None

    def test_window_count_bounds(self):
        with pytest.raises(ValidationError):
            AppConfig(window_count=5)
        with pytest.raises(ValidationError):
            AppConfig(window_count=0)

    def test_blank_media_folder(self):
        """An empty folder string means 'use the defaults'."""
        assert AppConfig(media_folder="   ").media_folder is None

    def test_playback_config_normalises_ranges(self):
        """Swapped min/max pairs are put back in order."""
        cfg = AppConfig(bounce_speed_min=8, bounce_speed_max=2, video_seek_min_s=30, video_seek_max_s=5)
        pc = cfg.to_playback_config()
        assert (pc["bounce_speed_min"], pc["bounce_speed_max"]) == (2, 8)
        assert (pc["video_seek_min_s"], pc["video_seek_max_s"]) == (5, 30)

    def test_monitor_config(self):
        assert AppConfig(poll_interval_ms=250).to_monitor_config() == {"poll_interval_ms": 250}


class TestConfigStore:
    """JSON persistence under the app data directory."""

    def test_missing_file_writes_defaults(self, store, tmp_path):
        cfg = store.load()
        assert cfg == AppConfig()
        assert (tmp_path / "Attention" / "config.json").exists()

    def test_round_trip(self, store):
        cfg = AppConfig(window_count=3, loop_mode=True, media_folder="/videos")
        store.save(cfg)
        assert store.load() == cfg

    def test_invalid_file_restores_defaults(self, store):
        """Unreadable or out-of-range config falls back to defaults and is rewritten."""
        with open(store.path(), "w", encoding="utf-8") as f:
            json.dump({"window_count": 12}, f)
        assert store.load() == AppConfig()
        with open(store.path(), encoding="utf-8") as f:
            assert json.load(f)["window_count"] == 1

    def test_corrupt_json(self, store):
        with open(store.path(), "w", encoding="utf-8") as f:
            f.write("{not json")
        assert store.load() == AppConfig()

    def test_broken_file_is_kept(self, store, tmp_path):
        """The unreadable file is moved aside, not overwritten."""
        with open(store.path(), "w", encoding="utf-8") as f:
            f.write("{not json")
        store.load()
        backup = tmp_path / "Attention" / "config.json.bad"
        assert backup.read_text(encoding="utf-8") == "{not json"

    def test_update_persists_changes(self, store):
        """A menu toggle is validated, saved and returned as a new config."""
        cfg = store.load()
        new = store.update(cfg, bounce_mode=True, window_count=2)
        assert new.bounce_mode and new.window_count == 2
        assert not cfg.bounce_mode
        assert store.load() == new

    def test_update_rejects_out_of_range(self, store):
        """An invalid value raises and leaves the saved file alone."""
        cfg = store.update(store.load(), loop_mode=True)
        with pytest.raises(ValidationError):
            store.update(cfg, window_count=9)
        assert store.load() == cfg

    def test_explicit_path(self, tmp_path, monkeypatch):
        monkeypatch.setenv("APPDATA", str(tmp_path))
        path = tmp_path / "other.json"
        ConfigStore(path).save(AppConfig(window_count=4))
        assert ConfigStore(path).load().window_count == 4
