"""Commit Message Parser - Read conventional-commit subjects back into parts."""

import re
from dataclasses import dataclass, replace
from datetime import datetime

from commitcraft import COMMIT_TYPE_NAMES
from commitcraft.git.analyzer import LOG_RECORD_SEPARATOR

# type(scope): subject  or  type: subject
CONVENTIONAL_RE = re.compile(r'^([a-zA-Z]+)(?:\(([^)]+)\))?\s*:\s*(.+)$')

# (keywords, type) checked in order against the lower-cased subject
KEYWORD_TYPES: list[tuple[tuple[str, ...], str]] = [
    (('fix', 'bug'), 'fix'),
    (('feat', 'add'), 'feat'),
    (('doc',), 'docs'),
    (('test',), 'test'),
    (('refactor',), 'refactor'),
    (('style', 'format'), 'style'),
    (('perf', 'performance'), 'perf'),
]

LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S %z'


@dataclass(frozen=True)
class ParsedSubject:
    type: str
    scope: str
    subject: str
    breaking: bool = False


def guess_commit_type(subject: str) -> str:
    """Keyword guess for subjects that don't follow the convention."""
    lowered = subject.lower()
    for keywords, commit_type in KEYWORD_TYPES:
        if any(k in lowered for k in keywords):
            return commit_type
    return 'chore'


def is_valid_type(commit_type: str) -> bool:
    return commit_type in COMMIT_TYPE_NAMES


def is_breaking(subject: str, body: str = "") -> bool:
    return 'breaking' in subject.lower() or 'breaking change' in body.lower()


def parse_commit_subject(line: str, body: str = "") -> ParsedSubject:
    """Split "type(scope): subject", guessing the type when the line doesn't match."""
    line = line.strip()
    match = CONVENTIONAL_RE.match(line)
    if match:
        commit_type, scope, subject = match.group(1), match.group(2) or "", match.group(3)
    else:
        commit_type, scope, subject = guess_commit_type(line), "", line
    return ParsedSubject(
        type=commit_type,
        scope=scope,
        subject=subject,
        breaking=is_breaking(subject, body),
    )


@dataclass(frozen=True)
class HistoricalCommit:
    """One commit from `git log`, annotated with its conventional-commit parts."""
    hash: str
    author: str
    email: str
    date: datetime
    type: str
    scope: str
    subject: str
    body: str = ""
    breaking: bool = False
    validated: bool = False

    @property
    def short_hash(self) -> str:
        return self.hash[:8]

    def with_type(self, commit_type: str) -> 'HistoricalCommit':
        """Edited copy; validity follows the new type."""
        return replace(self, type=commit_type, validated=is_valid_type(commit_type))

    def with_edits(self, **changes) -> 'HistoricalCommit':
        updated = replace(self, **changes)
        return replace(updated, validated=is_valid_type(updated.type))

    def to_dict(self) -> dict:
        return {
            'hash': self.hash,
            'type': self.type,
            'scope': self.scope,
            'subject': self.subject,
            'body': self.body,
            'author': self.author,
            'email': self.email,
            'date': self.date.isoformat(),
            'breaking': self.breaking,
            'validated': self.validated,
        }


def parse_log_record(record: str) -> HistoricalCommit | None:
    """Parse "hash|subject|author|email|date|body"; None for malformed records."""
    parts = record.strip('\n').split('|')
    if len(parts) < 5 or not parts[0].strip():
        return None

    try:
        date = datetime.strptime(parts[4].strip(), LOG_DATE_FORMAT)
    except ValueError:
        return None

    # Bodies may contain the delimiter themselves
    body = '|'.join(parts[5:]).strip()
    parsed = parse_commit_subject(parts[1], body)
    return HistoricalCommit(
        hash=parts[0].strip(),
        author=parts[2],
        email=parts[3],
        date=date,
        type=parsed.type,
        scope=parsed.scope,
        subject=parsed.subject,
        body=body,
        breaking=parsed.breaking,
        validated=is_valid_type(parsed.type),
    )


def parse_log(output: str) -> list[HistoricalCommit]:
    """Parse raw log output, newest first. Bad records are skipped."""
    separator = LOG_RECORD_SEPARATOR if LOG_RECORD_SEPARATOR in output else '\n'
    commits = []
    for record in output.split(separator):
        if not record.strip():
            continue
        commit = parse_log_record(record.strip('\n'))
        if commit is not None:
            commits.append(commit)
    commits.sort(key=lambda c: c.date, reverse=True)
    return commits
