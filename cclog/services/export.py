"""
Session export service - renders a whole session as Markdown or JSON.

Unlike the list and view commands, export keeps message text in full.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Literal

from cclog.logger import LoggerProtocol, NullLogger
from cclog.schemas import ContentItem, MessageRecord
from cclog.services.parser import SessionParserService

__all__ = ['ExportFormat', 'SessionExporter']

ExportFormat = Literal['markdown', 'json']


def _content_blocks(content: str | list[ContentItem] | None) -> list[str]:
    if content is None:
        return []
    if isinstance(content, str):
        return [content]

    blocks = []
    for item in content:
        match item.type:
            case 'text' if item.text:
                blocks.append(item.text)
            case 'tool_use':
                blocks.append(f'`[tool: {item.name or "unknown"}]`')
            case 'tool_result':
                blocks.append('`[tool result]`')
    return blocks


class SessionExporter:
    """Exports sessions for sharing or archiving outside ~/.claude."""

    def __init__(self, parser: SessionParserService | None = None) -> None:
        self.parser = parser or SessionParserService()

    async def export(
        self,
        file_path: Path,
        format: ExportFormat = 'markdown',
        logger: LoggerProtocol | None = None,
    ) -> str:
        """
        Render a session file.

        Args:
            file_path: Path to {session_id}.jsonl
            format: 'markdown' or 'json'
            logger: Receives warnings for skipped records

        Returns:
            The rendered document

        Raises:
            SessionParseError: If the session has no timestamped record
        """
        logger = logger or NullLogger()
        summary = await self.parser.parse_minimal(file_path)
        records = await self.parser.load_records(file_path, logger)
        messages = [record for record in records if isinstance(record, MessageRecord)]
        await logger.info(f'Exporting {len(messages)} messages as {format}')

        if format == 'json':
            document = {
                'session': summary.model_dump(mode='json', exclude={'preview_messages'}),
                'messages': [
                    {
                        'type': message.type,
                        'timestamp': message.timestamp.isoformat() if message.timestamp else None,
                        'content': _content_blocks(message.content),
                    }
                    for message in messages
                ],
            }
            return json.dumps(document, indent=2, ensure_ascii=False) + '\n'

        lines = [
            f'# Session {summary.session_id}',
            '',
            f'- Started: {summary.start_timestamp.astimezone():%Y-%m-%d %H:%M:%S}',
        ]
        if summary.last_timestamp:
            lines.append(f'- Finished: {summary.last_timestamp.astimezone():%Y-%m-%d %H:%M:%S}')
        if summary.project_path:
            lines.append(f'- Project: {summary.project_path}')
        lines.append(f'- Messages: {len(messages)}')

        for message in messages:
            blocks = _content_blocks(message.content)
            if not blocks:
                continue
            heading = 'User' if message.type == 'user' else 'Assistant'
            if message.timestamp:
                heading += f' ({message.timestamp.astimezone():%Y-%m-%d %H:%M:%S})'
            lines.extend(['', f'## {heading}', '', '\n\n'.join(blocks)])

        return '\n'.join(lines) + '\n'
