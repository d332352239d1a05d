"""
Shared fixtures: JSONL session builders and a scripted terminal.
"""

from __future__ import annotations

import contextlib
import json
from collections.abc import Iterator, Sequence
from pathlib import Path
from typing import Any

import pytest


def user_record(text: Any, timestamp: str, **extra: Any) -> dict[str, Any]:
    return {
        'type': 'user',
        'timestamp': timestamp,
        'message': {'role': 'user', 'content': text},
        **extra,
    }


def assistant_record(content: Any, timestamp: str, **extra: Any) -> dict[str, Any]:
    return {
        'type': 'assistant',
        'timestamp': timestamp,
        'message': {'role': 'assistant', 'content': content},
        **extra,
    }


def write_session(directory: Path, session_id: str, records: Sequence[dict[str, Any] | str]) -> Path:
    """Write a session file; string entries are written verbatim (for malformed lines)."""
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / f'{session_id}.jsonl'
    lines = [record if isinstance(record, str) else json.dumps(record) for record in records]
    path.write_text('\n'.join(lines) + '\n', encoding='utf-8')
    return path


class RecordingLogger:
    """LoggerProtocol implementation that keeps messages for assertions."""

    def __init__(self) -> None:
        self.messages: list[tuple[str, str]] = []

    async def info(self, message: str) -> None:
        self.messages.append(('info', message))

    async def warning(self, message: str) -> None:
        self.messages.append(('warning', message))

    async def error(self, message: str) -> None:
        self.messages.append(('error', message))

    def of_level(self, level: str) -> list[str]:
        return [message for lvl, message in self.messages if lvl == level]


class FakeTerminal:
    """Scripted stand-in for the raw-mode terminal."""

    def __init__(self, keys: Sequence[str]) -> None:
        self.keys = list(keys)
        self.frames: list[str] = []
        self.entered = False
        self.released = False

    def read_key(self) -> str:
        if not self.keys:
            raise AssertionError('picker asked for more keys than scripted')
        return self.keys.pop(0)

    def write(self, text: str) -> None:
        self.frames.append(text)

    @contextlib.contextmanager
    def session(self) -> Iterator[FakeTerminal]:
        self.entered = True
        try:
            yield self
        finally:
            self.released = True


@pytest.fixture
def logger() -> RecordingLogger:
    return RecordingLogger()


@pytest.fixture
def projects_dir(tmp_path: Path) -> Path:
    path = tmp_path / 'projects'
    path.mkdir()
    return path
