"""Git Operations Package"""

from commitcraft.git.analyzer import GitAnalyzer, GitError, FileChange, StatusKind, status_kind, parse_status
from commitcraft.git.diff_analyzer import DiffFacts, analyze_diff

__all__ = [
    "GitAnalyzer",
    "GitError",
    "FileChange",
    "StatusKind",
    "status_kind",
    "parse_status",
    "DiffFacts",
    "analyze_diff",
]
