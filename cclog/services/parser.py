"""
Session parser service - reads Claude Code session JSONL files.

Malformed lines are skipped rather than failing the whole file: a session that
is being written while we read it (or was truncated) must stay browsable.
"""

from __future__ import annotations

import json
from collections.abc import Iterator
from datetime import UTC, datetime
from pathlib import Path

import pydantic

from cclog.config import settings
from cclog.exceptions import SessionParseError
from cclog.logger import LoggerProtocol, NullLogger
from cclog.models import ParsedMessage, SessionSummary
from cclog.schemas import ContentItem, MessageRecord, SessionRecord, SessionRecordAdapter, SummaryRecord

__all__ = ['SessionParserService', 'extract_user_text', 'format_message']

# Messages kept on a summary for the preview pane
PREVIEW_MESSAGE_COUNT = 3

# Display truncation for flattened message content
MAX_CONTENT_LENGTH = 200


def _decode_line(line: str) -> SessionRecord | None:
    try:
        return SessionRecordAdapter.validate_python(json.loads(line))
    except (json.JSONDecodeError, pydantic.ValidationError):
        return None


def _iter_lines(file_path: Path) -> Iterator[str]:
    with open(file_path, encoding='utf-8') as f:
        for line in f:
            line = line.strip()
            if line:
                yield line


def extract_user_text(record: MessageRecord) -> str:
    """Text typed by the user: the string content, or the first text item of a content list."""
    content = record.content
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        for item in content:
            if item.type == 'text':
                return item.text or ''
    return ''


def _is_tool_message(content: str | list[ContentItem] | None) -> bool:
    if isinstance(content, list) and content:
        return content[0].type in ('tool_use', 'tool_result')
    return False


def _flatten_content(content: str | list[ContentItem] | None) -> str:
    if content is None:
        return '[no content]'
    if isinstance(content, str):
        return content

    texts = [item.text or '' for item in content if item.type == 'text']
    if texts:
        return ' '.join(texts)

    tool_count = sum(1 for item in content if item.type in ('tool_use', 'tool_result'))
    if tool_count:
        return f'[{tool_count} tool {"call" if tool_count == 1 else "calls"}]'
    return '[complex content]'


def format_message(record: MessageRecord) -> ParsedMessage:
    """Flatten a user/assistant record into a single display line."""
    timestamp = record.timestamp.astimezone().strftime('%H:%M:%S') if record.timestamp else '00:00:00'
    content = _flatten_content(record.content)
    flattened = content.replace('\n', ' ')[:MAX_CONTENT_LENGTH]
    if len(content) > MAX_CONTENT_LENGTH:
        flattened += '...'

    return ParsedMessage(
        type=record.type,
        timestamp=timestamp,
        type_label='User      ' if record.type == 'user' else 'Assistant ',
        content=flattened,
        is_tool_use=_is_tool_message(record.content),
    )


class SessionParserService:
    """
    Service for parsing Claude Code session JSONL files.

    Pure domain logic - turns a file into a SessionSummary (bounded scan)
    or a list of display messages (full scan).
    """

    async def parse_minimal(
        self,
        file_path: Path,
        max_lines: int | None = None,
        include_summaries: bool = True,
    ) -> SessionSummary:
        """
        Build a session summary from the first lines of a session file.

        Every non-empty line is counted so the last one can provide the end
        timestamp, but only the first `max_lines` are decoded.

        Args:
            file_path: Path to {session_id}.jsonl
            max_lines: Lines to decode (default: settings.SCAN_LINES)
            include_summaries: Collect the text of summary records

        Returns:
            SessionSummary for the file

        Raises:
            SessionParseError: If no record in the scanned prefix has a timestamp
            OSError: If the file cannot be read
        """
        scan_limit = max_lines if max_lines is not None else settings.SCAN_LINES
        stat = file_path.stat()

        start_timestamp: datetime | None = None
        first_user_message = ''
        message_count = 0
        summaries: list[str] = []
        preview: list[ParsedMessage] = []
        project_path: str | None = None

        line_count = 0
        last_line: str | None = None
        for line in _iter_lines(file_path):
            line_count += 1
            last_line = line
            if line_count > scan_limit:
                continue

            record = _decode_line(line)
            if record is None:
                continue

            if start_timestamp is None and record.timestamp:
                start_timestamp = record.timestamp
            if project_path is None and record.cwd:
                project_path = record.cwd

            match record:
                case MessageRecord(type='user'):
                    text = extract_user_text(record).strip()
                    if text:
                        message_count += 1
                        first_user_message = first_user_message or text
                case SummaryRecord(summary=str() as summary) if include_summaries:
                    summaries.append(summary)

            if isinstance(record, MessageRecord) and len(preview) < PREVIEW_MESSAGE_COUNT:
                message = format_message(record)
                if not message.is_tool_use:
                    preview.append(message)

        if start_timestamp is None:
            raise SessionParseError(file_path)

        last_timestamp: datetime | None = start_timestamp
        if last_line is not None:
            last_record = _decode_line(last_line)
            if last_record is not None:
                last_timestamp = last_record.timestamp

        return SessionSummary(
            session_id=file_path.stem,
            file_path=file_path,
            start_timestamp=start_timestamp,
            last_timestamp=last_timestamp,
            first_user_message=first_user_message or 'no user message',
            message_count=message_count,
            file_size=stat.st_size,
            modification_time=datetime.fromtimestamp(stat.st_mtime, tz=UTC),
            matched_summaries=summaries or None,
            preview_messages=preview,
            project_path=project_path,
        )

    async def parse_for_display(self, file_path: Path) -> list[ParsedMessage]:
        """
        Parse every user/assistant message of a session for display.

        Args:
            file_path: Path to {session_id}.jsonl

        Returns:
            Messages in file order (malformed lines skipped)
        """
        messages = []
        for line in _iter_lines(file_path):
            record = _decode_line(line)
            if isinstance(record, MessageRecord):
                messages.append(format_message(record))
        return messages

    async def load_records(self, file_path: Path, logger: LoggerProtocol | None = None) -> list[SessionRecord]:
        """
        Load all records of a session file.

        Args:
            file_path: Path to {session_id}.jsonl
            logger: Receives a warning for each malformed line

        Returns:
            Validated records in file order
        """
        logger = logger or NullLogger()
        records = []
        for line_num, line in enumerate(_iter_lines(file_path), 1):
            record = _decode_line(line)
            if record is None:
                await logger.warning(f'Skipping malformed record {line_num} in {file_path.name}')
                continue
            records.append(record)
        await logger.info(f'Loaded {len(records)} records from {file_path.name}')
        return records
