"""
Pydantic models for Claude Code session JSONL records.

Only the record types cclog reads are modeled in detail:
- user / assistant: conversation messages
- summary: topic summaries written by Claude Code

Every other record type (system, file-history-snapshot, ...) validates as
OtherRecord so that its timestamp and cwd still count.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated, Any, Literal

from pydantic import AfterValidator, Discriminator, Field, Tag, TypeAdapter

from cclog.base_model import RecordModel

__all__ = [
    'ContentItem',
    'Message',
    'MessageRecord',
    'OtherRecord',
    'SessionRecord',
    'SessionRecordAdapter',
    'SummaryRecord',
    'Timestamp',
]


def _as_aware(value: datetime) -> datetime:
    # Older records carry no offset; Claude Code writes them in UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


Timestamp = Annotated[datetime, AfterValidator(_as_aware)]


class ContentItem(RecordModel):
    """One typed item of a message content list (text, tool_use, tool_result, ...)."""

    type: str
    text: str | None = None
    name: str | None = None  # tool_use
    tool_use_id: str | None = None  # tool_result


class Message(RecordModel):
    role: str | None = None
    content: str | list[ContentItem] | None = None


class MessageRecord(RecordModel):
    """A user or assistant turn."""

    type: Literal['user', 'assistant']
    timestamp: Timestamp | None = None
    message: Message | None = None
    uuid: str | None = None
    session_id: str | None = Field(default=None, alias='sessionId')
    cwd: str | None = None

    @property
    def content(self) -> str | list[ContentItem] | None:
        return self.message.content if self.message else None


class SummaryRecord(RecordModel):
    type: Literal['summary']
    summary: str | None = None
    leaf_uuid: str | None = Field(default=None, alias='leafUuid')
    timestamp: Timestamp | None = None
    cwd: str | None = None


class OtherRecord(RecordModel):
    type: str
    timestamp: Timestamp | None = None
    cwd: str | None = None


def _record_kind(value: Any) -> str:
    record_type = value.get('type') if isinstance(value, dict) else getattr(value, 'type', None)
    if record_type in ('user', 'assistant'):
        return 'message'
    if record_type == 'summary':
        return 'summary'
    return 'other'


SessionRecord = Annotated[
    Annotated[MessageRecord, Tag('message')]
    | Annotated[SummaryRecord, Tag('summary')]
    | Annotated[OtherRecord, Tag('other')],
    Discriminator(_record_kind),
]

SessionRecordAdapter: TypeAdapter[MessageRecord | SummaryRecord | OtherRecord] = TypeAdapter(SessionRecord)
