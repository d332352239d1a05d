"""
Project service - enumerates Claude Code projects and their sessions.

Claude Code keeps one directory per project under ~/.claude/projects/, named
with the lossy path encoding from cclog.paths. Project paths are recovered
by probing the real filesystem, falling back to the naive decoding.
"""

from __future__ import annotations

from pathlib import Path

from cclog.exceptions import CclogError, ProjectNotFoundError, SessionNotFoundError
from cclog.logger import LoggerProtocol, NullLogger
from cclog.models import Project, SessionSummary
from cclog.paths import decode_path, encode_path, recover_path
from cclog.services.parser import SessionParserService

__all__ = ['ProjectService']


def _path_exists(candidate: str) -> bool:
    return Path(candidate).exists()


class ProjectService:
    """
    Service for listing projects and sessions under the projects root.

    One corrupt session file never prevents the others from being listed:
    failures are logged and the file is skipped.
    """

    def __init__(
        self,
        projects_dir: Path,
        parser: SessionParserService | None = None,
        logger: LoggerProtocol | None = None,
    ) -> None:
        """
        Initialize project service.

        Args:
            projects_dir: Root holding one directory per project
            parser: Session parser (default: new SessionParserService)
            logger: Receives skipped-file warnings (default: NullLogger)
        """
        self.projects_dir = projects_dir
        self.parser = parser or SessionParserService()
        self.logger = logger or NullLogger()

    def project_dir_for(self, project_path: Path | str) -> Path:
        return self.projects_dir / encode_path(project_path)

    async def get_current_project_sessions(self, cwd: Path) -> list[SessionSummary]:
        """
        List sessions recorded for a project directory.

        Args:
            cwd: Project directory (usually the current working directory)

        Returns:
            Sessions sorted by modification time, newest first

        Raises:
            ProjectNotFoundError: If Claude Code has no logs for this directory
        """
        project_dir = self.project_dir_for(cwd)
        if not project_dir.is_dir():
            raise ProjectNotFoundError(cwd)

        await self.logger.info(f'Reading sessions from {project_dir}')
        return await self.get_sessions_from_dir(project_dir)

    async def get_all_projects(self) -> list[Project]:
        """
        List every project with at least one readable session.

        Returns:
            Projects sorted by last activity, most recent first
        """
        if not self.projects_dir.is_dir():
            await self.logger.info(f'Projects directory does not exist: {self.projects_dir}')
            return []

        projects = []
        for entry in sorted(self.projects_dir.iterdir()):
            if not entry.is_dir():
                continue

            sessions = await self.get_sessions_from_dir(entry)
            if not sessions:
                continue

            recovered = recover_path(entry.name, exists=_path_exists)
            if recovered is None:
                await self.logger.info(f'Could not locate {entry.name} on disk, using naive decoding')

            projects.append(
                Project(
                    encoded_name=entry.name,
                    path=recovered or decode_path(entry.name),
                    path_recovered=recovered is not None,
                    session_count=len(sessions),
                    last_activity=max(session.modification_time for session in sessions),
                )
            )

        return sorted(projects, key=lambda project: project.last_activity, reverse=True)

    async def get_sessions_from_dir(self, dir_path: Path) -> list[SessionSummary]:
        """
        Parse every session file in a project directory.

        Args:
            dir_path: Project directory under the projects root

        Returns:
            Sessions sorted by modification time, newest first
        """
        sessions = []
        for file_path in sorted(dir_path.glob('*.jsonl')):
            try:
                sessions.append(await self.parser.parse_minimal(file_path))
            except (CclogError, OSError, UnicodeDecodeError) as e:
                await self.logger.warning(f'Skipping {file_path.name}: {e}')

        return sorted(sessions, key=lambda session: session.modification_time, reverse=True)

    async def get_session_files(self, project: Project) -> list[Path]:
        """
        List the session files of a project, newest first.

        Args:
            project: Project from get_all_projects()

        Raises:
            ProjectNotFoundError: If the project's log directory is gone
        """
        project_dir = self.projects_dir / project.encoded_name
        if not project_dir.is_dir():
            raise ProjectNotFoundError(project.path)
        return sorted(project_dir.glob('*.jsonl'), key=lambda path: path.stat().st_mtime, reverse=True)

    async def find_session_file(self, session_id: str) -> Path:
        """
        Find a session file by ID across all projects.

        Args:
            session_id: Session ID (file stem)

        Raises:
            SessionNotFoundError: If no project holds {session_id}.jsonl
        """
        if self.projects_dir.is_dir():
            for match in sorted(self.projects_dir.glob(f'*/{session_id}.jsonl')):
                return match
        raise SessionNotFoundError(session_id, self.projects_dir)
