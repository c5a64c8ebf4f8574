import pytest
from pydantic import ValidationError

from wave_editor.config import EditorConfig, load_editor_config
from wave_editor.settings import (
    SESSION_FILE_NAME,
    fallback_wave_path,
    get_settings,
    reset_settings_cache,
    session_state_path,
    state_dir,
)


def test_defaults():
    config = EditorConfig()
    assert config.canvas.size == (1000, 400)
    assert config.canvas.baseline == 200
    assert config.history.capacity == 50
    assert config.interaction.hit_radius_px == 5
    assert config.playback.gain == 840
    assert config.zoom.min_zoom == 0.1


def test_partial_yaml_keeps_other_defaults(tmp_path):
    path = tmp_path / "editor.yaml"
    path.write_text("canvas:\n  width: 800\nhistory:\n  capacity: 10\n", encoding="utf-8")
    config = load_editor_config(path)
    assert config.canvas.size == (800, 400)
    assert config.history.capacity == 10
    assert config.placement.spacing == 100


def test_empty_yaml_gives_defaults(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    assert load_editor_config(path) == EditorConfig()


def test_missing_yaml_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_editor_config(tmp_path / "absent.yaml")


def test_invalid_zoom_bounds_rejected(tmp_path):
    path = tmp_path / "editor.yaml"
    path.write_text("zoom:\n  min_zoom: 5\n  max_zoom: 2\n", encoding="utf-8")
    with pytest.raises(ValidationError):
        load_editor_config(path)


def test_state_dir_from_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("WAVE_EDITOR_STATE_DIR", str(tmp_path / "state"))
    reset_settings_cache()
    assert state_dir() == (tmp_path / "state").resolve()
    assert session_state_path() == (tmp_path / "state").resolve() / SESSION_FILE_NAME


def test_default_state_dir_is_expanded():
    path = state_dir()
    assert path.is_absolute()
    assert path.name == ".wave_editor"
    assert "~" not in str(path)


def test_optional_paths(tmp_path, monkeypatch):
    assert fallback_wave_path() is None
    monkeypatch.setenv("WAVE_EDITOR_FALLBACK_WAVE", str(tmp_path / "wave.json"))
    monkeypatch.setenv("WAVE_EDITOR_CONFIG", "")
    reset_settings_cache()
    assert fallback_wave_path() == (tmp_path / "wave.json").resolve()
    assert get_settings().config_file is None


def test_settings_are_cached(monkeypatch, tmp_path):
    first = get_settings()
    monkeypatch.setenv("WAVE_EDITOR_STATE_DIR", str(tmp_path))
    assert get_settings() is first
