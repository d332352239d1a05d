"""
Tests for environment-driven settings.
"""

from __future__ import annotations

from pathlib import Path

import pydantic
import pytest

from cclog.config import CclogSettings, get_settings


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv('LOAD_ENV_FILE', raising=False)
    settings = get_settings()
    assert settings.PROJECTS_DIR == Path.home() / '.claude' / 'projects'
    assert settings.SESSION_LIST_HEIGHT == 20
    assert settings.PROJECT_LIST_HEIGHT == 15
    assert settings.SCAN_LINES == 20
    assert settings.CLAUDE_COMMAND == 'claude'


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.delenv('LOAD_ENV_FILE', raising=False)
    monkeypatch.setenv('CCLOG_PROJECTS_DIR', str(tmp_path))
    monkeypatch.setenv('CCLOG_SCAN_LINES', '50')

    settings = get_settings()
    assert settings.PROJECTS_DIR == tmp_path
    assert settings.SCAN_LINES == 50


def test_env_file(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    env_file = tmp_path / 'cclog.env'
    env_file.write_text('CCLOG_CLAUDE_COMMAND=claude-beta\nUNRELATED=1\n')
    monkeypatch.setenv('LOAD_ENV_FILE', str(env_file))

    assert get_settings().CLAUDE_COMMAND == 'claude-beta'


def test_missing_env_file(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv('LOAD_ENV_FILE', str(tmp_path / 'absent.env'))
    with pytest.raises(FileNotFoundError):
        get_settings()


def test_heights_must_be_positive() -> None:
    with pytest.raises(pydantic.ValidationError):
        CclogSettings(SESSION_LIST_HEIGHT=0)
