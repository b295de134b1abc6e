"""Git Analyzer - Read pending changes and history from git."""

import logging
import subprocess
from dataclasses import dataclass
from enum import Enum
from pathlib import PurePosixPath

from commitcraft.git.diff_analyzer import DiffFacts, analyze_diff

logger = logging.getLogger(__name__)

# Record terminator appended to each log entry so multi-line bodies survive
LOG_RECORD_SEPARATOR = '\x1e'
LOG_FORMAT = f'%H|%s|%an|%ae|%ad|%b{LOG_RECORD_SEPARATOR}'


class StatusKind(Enum):
    """What a porcelain status code means for classification."""
    ADDED = 'added'
    DELETED = 'deleted'
    MODIFIED = 'modified'
    RENAMED = 'renamed'
    OTHER = 'other'


def status_kind(status_code: str) -> StatusKind:
    """Reduce a one- or two-letter status code to a StatusKind.

    Letters are checked in a fixed order so mixed codes like "AM" resolve
    to ADDED and "MD" to DELETED. Untracked files ("??") count as added.
    """
    if 'A' in status_code or status_code == '??':
        return StatusKind.ADDED
    if 'D' in status_code:
        return StatusKind.DELETED
    if 'M' in status_code:
        return StatusKind.MODIFIED
    if 'R' in status_code:
        return StatusKind.RENAMED
    return StatusKind.OTHER


@dataclass(frozen=True)
class FileChange:
    """One entry from `git status --porcelain`."""
    path: str
    status_code: str

    @property
    def filename(self) -> str:
        return PurePosixPath(self.path).name

    @property
    def kind(self) -> StatusKind:
        return status_kind(self.status_code)


class GitError(Exception):
    """Raised when git operations fail."""
    pass


def parse_status(output: str) -> list[FileChange]:
    """Parse porcelain status lines ("XY path") into FileChange records.

    Blank lines and lines shorter than 3 characters are skipped. For renames
    and copies ("R  old -> new") the new path is kept.
    """
    changes = []
    for line in output.split('\n'):
        if len(line.rstrip()) < 3:
            continue
        code = line[:2].strip()
        path = line[3:].strip()
        if code[:1] in ('R', 'C') and ' -> ' in path:
            path = path.split(' -> ', 1)[1]
        # git quotes paths containing spaces or special characters
        path = path.strip('"')
        if not code or not path:
            continue
        changes.append(FileChange(path=path, status_code=code))
    return changes


class GitAnalyzer:
    """Runs git and hands its raw output to the parsers."""

    def __init__(self, repo_path: str | None = None):
        self.repo_path = repo_path
        self._verify_git_available()
        self._verify_in_repo()

    def _run_git(self, *args: str) -> str:
        """Run a git command and return stdout."""
        try:
            result = subprocess.run(
                ['git', *args],
                capture_output=True,
                text=True,
                check=True,
                encoding='utf-8',
                errors='replace',
                cwd=self.repo_path,
            )
            return result.stdout
        except subprocess.CalledProcessError as e:
            raise GitError(f"Git command failed: git {' '.join(args)}\n{e.stderr}")
        except FileNotFoundError:
            raise GitError("Git is not installed or not in PATH")

    def _verify_git_available(self) -> None:
        """Fail fast if git isn't available."""
        try:
            self._run_git('--version')
        except GitError:
            raise GitError("Git is not installed or not in PATH")

    def _verify_in_repo(self) -> None:
        """Fail fast if we're not in a git repository."""
        try:
            self._run_git('rev-parse', '--git-dir')
        except GitError:
            raise GitError("Not inside a git repository")

    def get_status(self) -> list[FileChange]:
        """All pending changes: staged, unstaged and untracked."""
        return parse_status(self._run_git('status', '--porcelain'))

    def get_diff(self, path: str) -> str:
        """Staged diff for one path, falling back to the unstaged diff.

        Retrieval failures are treated as "no evidence" and yield "".
        """
        for args in (('diff', '--staged', '--', path), ('diff', '--', path)):
            try:
                diff = self._run_git(*args)
            except GitError as e:
                logger.debug("diff retrieval failed for %s: %s", path, e)
                continue
            if diff.strip():
                return diff
        return ""

    def get_diff_facts(self, change: FileChange) -> DiffFacts:
        return analyze_diff(self.get_diff(change.path))

    def get_log(self, from_version: str, to_version: str) -> str:
        """Raw log records for FROM..TO, one record per commit."""
        return self._run_git(
            'log',
            f'{from_version}..{to_version}',
            f'--pretty=format:{LOG_FORMAT}',
            '--date=iso',
        )

    def stage_all(self) -> None:
        self._run_git('add', '-A')

    def commit(self, message: str) -> str:
        """Create a commit with the given message and return git's summary."""
        return self._run_git('commit', '-m', message).strip()
