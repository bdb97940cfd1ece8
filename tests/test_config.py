"""Tests for configuration loading."""

from pathlib import Path

import pytest

from coach.config import ConfigError, load_config

_ENV = ["COACH_DIR", "COACH_MAX_ENTRY_BYTES", "COACH_EDITOR", "COACH_LOG_LEVEL", "EDITOR"]


@pytest.fixture(autouse=True)
def clean_env(tmp_path: Path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    for key in _ENV:
        monkeypatch.delenv(key, raising=False)


def test_defaults():
    config = load_config()
    assert config.journal_dir == Path.cwd()
    assert config.max_entry_bytes == 8 * 1024
    assert config.editor == "vi"
    assert config.log_level == "WARNING"


def test_yaml_file(tmp_path: Path):
    path = tmp_path / "custom.yml"
    path.write_text(
        "journal_dir: ~/journal\n"
        "max_entry_bytes: 4096\n"
        "editor: nano\n"
        "log_level: debug\n"
    )

    config = load_config(path)
    assert config.journal_dir == Path("~/journal").expanduser()
    assert config.max_entry_bytes == 4096
    assert config.editor == "nano"
    assert config.log_level == "DEBUG"


def test_yaml_in_cwd_is_found(tmp_path: Path):
    (tmp_path / "coach.yml").write_text("editor: emacs\n")
    assert load_config().editor == "emacs"


def test_env_overrides_yaml(tmp_path: Path, monkeypatch):
    (tmp_path / "coach.yml").write_text("journal_dir: /from/yaml\neditor: nano\n")
    monkeypatch.setenv("COACH_DIR", str(tmp_path / "env"))
    monkeypatch.setenv("COACH_EDITOR", "code --wait")
    monkeypatch.setenv("COACH_MAX_ENTRY_BYTES", "100")

    config = load_config()
    assert config.journal_dir == tmp_path / "env"
    assert config.editor == "code --wait"
    assert config.max_entry_bytes == 100


def test_editor_falls_back_to_editor_env(monkeypatch):
    monkeypatch.setenv("EDITOR", "ed")
    assert load_config().editor == "ed"


def test_invalid_yaml(tmp_path: Path):
    (tmp_path / "coach.yml").write_text("editor: [unclosed\n")
    with pytest.raises(ConfigError, match="invalid YAML"):
        load_config()


def test_yaml_root_must_be_mapping(tmp_path: Path):
    (tmp_path / "coach.yml").write_text("- a\n- b\n")
    with pytest.raises(ConfigError, match="mapping"):
        load_config()


def test_bad_max_entry_bytes(monkeypatch):
    monkeypatch.setenv("COACH_MAX_ENTRY_BYTES", "lots")
    with pytest.raises(ConfigError, match="integer"):
        load_config()


def test_explicit_path_must_exist(tmp_path: Path):
    (tmp_path / "coach.yml").write_text("editor: emacs\n")
    with pytest.raises(ConfigError, match="not found"):
        load_config(tmp_path / "does-not-exist.yml")


def test_invalid_log_level_from_env(monkeypatch):
    monkeypatch.setenv("COACH_LOG_LEVEL", "verbose")
    with pytest.raises(ConfigError, match="log_level"):
        load_config()


def test_invalid_log_level_from_yaml(tmp_path: Path):
    (tmp_path / "coach.yml").write_text("log_level: loud\n")
    with pytest.raises(ConfigError, match="LOUD"):
        load_config()


def test_log_level_is_case_insensitive(monkeypatch):
    monkeypatch.setenv("COACH_LOG_LEVEL", "info")
    assert load_config().log_level == "INFO"
