# test_config.py

import logging

from kalc.config import (
    DEFAULT_LOG_LEVEL, DEFAULT_PROMPT, Settings, load_settings,
)


def test_defaults_without_environment():
    settings = load_settings(use_dotenv=False)
    assert settings == Settings(log_level=DEFAULT_LOG_LEVEL, prompt=DEFAULT_PROMPT)
    assert settings.log_level_value == logging.WARNING


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("KALC_LOG_LEVEL", "debug")
    monkeypatch.setenv("KALC_PROMPT", "calc> ")
    settings = load_settings(use_dotenv=False)
    assert settings.prompt == "calc> "
    assert settings.log_level_value == logging.DEBUG


def test_unknown_log_level_falls_back_to_warning():
    assert Settings(log_level="chatty").log_level_value == logging.WARNING


def test_dotenv_file_in_working_directory(tmp_path):
    (tmp_path / ".env").write_text("KALC_LOG_LEVEL=INFO\n", encoding="utf-8")
    settings = load_settings()
    assert settings.log_level == "INFO"
    assert settings.log_level_value == logging.INFO


def test_environment_wins_over_dotenv(tmp_path, monkeypatch):
    (tmp_path / ".env").write_text("KALC_PROMPT=from-file\n", encoding="utf-8")
    monkeypatch.setenv("KALC_PROMPT", "from-env")
    assert load_settings().prompt == "from-env"


def test_dotenv_in_parent_directory_is_ignored(tmp_path, monkeypatch):
    (tmp_path / ".env").write_text("KALC_PROMPT=from-parent\n", encoding="utf-8")
    project = tmp_path / "project"
    project.mkdir()
    monkeypatch.chdir(project)
    assert load_settings().prompt == DEFAULT_PROMPT
