"""
Configuration for cclog.

Settings come from CCLOG_* environment variables, optionally loaded from the
.env file named by LOAD_ENV_FILE.
"""

from __future__ import annotations

import os
import pathlib
from typing import TypeVar

import lazy_object_proxy
import pydantic
import pydantic_settings

T = TypeVar('T', bound='CclogSettings')


class CclogSettings(pydantic_settings.BaseSettings):
    """Settings shared by the CLI and the services it drives."""

    model_config = pydantic_settings.SettingsConfigDict(
        env_prefix='CCLOG_',
        env_file_encoding='utf-8',
        case_sensitive=True,  # Fail fast on misconfiguration
        extra='ignore',  # .env files may carry unrelated variables
    )

    # Application metadata
    APP_NAME: str = 'cclog'
    VERSION: str = '0.1.0'

    # Where Claude Code keeps one directory per project
    PROJECTS_DIR: pathlib.Path = pathlib.Path.home() / '.claude' / 'projects'

    # Picker window sizes (content rows)
    SESSION_LIST_HEIGHT: int = 20
    PROJECT_LIST_HEIGHT: int = 15

    # Lines decoded per session file when building summaries
    SCAN_LINES: int = 20

    # Executable used to resume a session
    CLAUDE_COMMAND: str = 'claude'

    @pydantic.field_validator('SESSION_LIST_HEIGHT', 'PROJECT_LIST_HEIGHT', 'SCAN_LINES')
    @classmethod
    def validate_positive(cls, v: int) -> int:
        """Window heights and scan limits must be positive."""
        if v < 1:
            raise ValueError('must be a positive integer')
        return v

    @pydantic.field_validator('PROJECTS_DIR')
    @classmethod
    def expand_projects_dir(cls, v: pathlib.Path) -> pathlib.Path:
        return v.expanduser()


def get_settings(settings_class: type[T] = CclogSettings, env_file: str | None = None) -> T:
    """
    Factory for creating settings with dynamic .env file loading.

    LOAD_ENV_FILE environment variable specifies custom .env file path.
    When unset, loads from environment variables only.

    Args:
        settings_class: Settings class to instantiate
        env_file: Optional path to .env file (overrides LOAD_ENV_FILE)

    Returns:
        Settings instance

    Raises:
        FileNotFoundError: If specified .env file doesn't exist
    """
    env_file_path = env_file or os.getenv('LOAD_ENV_FILE')

    if not env_file_path:
        return settings_class()

    resolved_path = pathlib.Path(env_file_path).resolve()
    if not resolved_path.exists():
        raise FileNotFoundError(f'Environment file not found: {resolved_path}')

    return settings_class(_env_file=resolved_path)


def lazy_settings(settings_class: type[T]) -> T:
    """
    Lazy settings - defers instantiation until first access.

    Args:
        settings_class: Settings class to instantiate

    Returns:
        Proxy that instantiates settings on first access
    """
    return lazy_object_proxy.Proxy(lambda: get_settings(settings_class))


# Module-level singleton (lazy-loaded)
settings = lazy_settings(CclogSettings)
