"""Service layer for session operations."""

from cclog.services.export import ExportFormat, SessionExporter
from cclog.services.parser import SessionParserService
from cclog.services.projects import ProjectService

__all__ = [
    'ExportFormat',
    'ProjectService',
    'SessionExporter',
    'SessionParserService',
]
