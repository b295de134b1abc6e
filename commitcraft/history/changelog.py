"""Changelog Rendering - Turn validated history into markdown, JSON or text."""

import json
from datetime import datetime
from typing import Sequence

from commitcraft.history.parser import HistoricalCommit

FORMATS = ('markdown', 'json', 'text')

# Section order for grouped markdown output
TYPE_ORDER = ['feat', 'fix', 'perf', 'refactor', 'docs', 'style', 'test', 'chore', 'ci', 'build', 'revert']

EXTENSIONS = {
    'markdown': 'md',
    'json': 'json',
    'text': 'txt',
}

TIMESTAMP_FORMAT = '%Y-%m-%d %H:%M:%S'


class ChangelogError(Exception):
    """Raised when a changelog cannot be rendered."""
    pass


def file_extension(output_format: str) -> str:
    return EXTENSIONS.get(output_format, 'txt')


def _markdown_entry(commit: HistoricalCommit, include_breaking: bool) -> str:
    scope = f"**{commit.scope}**: " if commit.scope else ""
    breaking = " ⚠️ **BREAKING CHANGE**" if include_breaking and commit.breaking else ""
    return f"{scope}{commit.subject}{breaking}"


def _render_markdown(commits, labels, group_by_type, include_breaking, now) -> str:
    lines = ["# Changelog", "", f"Generated on {now.strftime(TIMESTAMP_FORMAT)}", ""]

    if group_by_type:
        groups: dict[str, list[HistoricalCommit]] = {}
        for commit in commits:
            groups.setdefault(commit.type, []).append(commit)
        for commit_type in TYPE_ORDER:
            members = groups.get(commit_type)
            if not members:
                continue
            label = labels.get(commit_type) or commit_type
            lines.append(f"## {label} ({len(members)})")
            lines.append("")
            lines.extend(f"- {_markdown_entry(c, include_breaking)}" for c in members)
            lines.append("")
    else:
        lines.append("## Commits")
        lines.append("")
        for commit in commits:
            lines.append(f"- **{commit.type}**: {_markdown_entry(commit, include_breaking)} ({commit.short_hash})")

    return '\n'.join(lines) + '\n'


def _render_text(commits, include_breaking, now) -> str:
    lines = ["CHANGELOG", "=========", "", f"Generated on {now.strftime(TIMESTAMP_FORMAT)}", ""]
    for commit in commits:
        scope = f"({commit.scope}) " if commit.scope else ""
        breaking = " [BREAKING CHANGE]" if include_breaking and commit.breaking else ""
        lines.append(f"{commit.short_hash} - {commit.type}: {scope}{commit.subject}{breaking}")
        lines.append(f"  Author: {commit.author} <{commit.email}>")
        lines.append(f"  Date: {commit.date.strftime(TIMESTAMP_FORMAT)}")
        lines.append("")
    return '\n'.join(lines)


def render_changelog(
    commits: Sequence[HistoricalCommit],
    output_format: str = 'markdown',
    labels: dict[str, str] | None = None,
    group_by_type: bool = True,
    include_breaking: bool = True,
    now: datetime | None = None,
) -> str:
    """Render validated commits; json lists every commit with its `validated` flag.

    Unknown formats raise ChangelogError.
    """
    if output_format not in FORMATS:
        raise ChangelogError(f"unsupported output format: {output_format}")

    now = now or datetime.now()
    valid = [c for c in commits if c.validated]

    if output_format == 'markdown':
        return _render_markdown(valid, labels or {}, group_by_type, include_breaking, now)
    if output_format == 'json':
        return json.dumps([c.to_dict() for c in commits], indent=2, ensure_ascii=False)
    return _render_text(valid, include_breaking, now)
