"""Commit History Package"""

from commitcraft.history.parser import (
    HistoricalCommit,
    ParsedSubject,
    guess_commit_type,
    is_breaking,
    is_valid_type,
    parse_commit_subject,
    parse_log,
)
from commitcraft.history.changelog import ChangelogError, FORMATS, file_extension, render_changelog

__all__ = [
    "HistoricalCommit",
    "ParsedSubject",
    "guess_commit_type",
    "is_breaking",
    "is_valid_type",
    "parse_commit_subject",
    "parse_log",
    "ChangelogError",
    "FORMATS",
    "file_extension",
    "render_changelog",
]
