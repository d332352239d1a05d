"""Schemas for data written by Claude Code."""

from __future__ import annotations

from cclog.schemas.session import (
    ContentItem,
    Message,
    MessageRecord,
    OtherRecord,
    SessionRecord,
    SessionRecordAdapter,
    SummaryRecord,
)

__all__ = [
    'ContentItem',
    'Message',
    'MessageRecord',
    'OtherRecord',
    'SessionRecord',
    'SessionRecordAdapter',
    'SummaryRecord',
]
