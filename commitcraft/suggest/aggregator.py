"""Suggestion Aggregator - Merge per-file classifications into commit suggestions."""

from collections import Counter
from dataclasses import dataclass, replace
from typing import Sequence

from commitcraft.suggest.classifier import ClassifiedChange
from commitcraft.suggest.composer import format_commit_message

SINGLE_CONFIDENCE = 0.9
GROUP_CONFIDENCE = 0.8

DEFAULT_MAX_SUGGESTIONS = 5
DEFAULT_MAX_INDIVIDUAL_FILES = 3

GROUP_BY_TYPE = 'type'
GROUP_BY_SCOPE = 'scope'

# Combined message when every change shares one type
TYPE_PHRASES = {
    'feat': 'add features',
    'fix': 'fix issues',
    'docs': 'update docs',
    'test': 'update tests',
    'chore': 'update config',
    'refactor': 'refactor code',
}
DEFAULT_PHRASE = 'update files'
MIXED_PHRASE = 'update multiple files'

# (verb, noun) per type for (type, scope) groups: "<verb> <scope> <noun>"
SCOPE_PHRASES = {
    'feat': ('add', 'functionality'),
    'fix': ('fix', 'issues'),
    'docs': ('update', 'documentation'),
    'test': ('add', 'tests'),
    'chore': ('update', 'configuration'),
}


@dataclass(frozen=True)
class CommitSuggestion:
    """A presentable commit candidate."""
    type: str
    scope: str
    message: str
    breaking: bool = False
    confidence: float = SINGLE_CONFIDENCE
    breaking_note: str = ""
    file_count: int = 1
    combined: bool = False

    def format(self) -> str:
        return format_commit_message(self.type, self.scope, self.message, self.breaking, self.breaking_note)

    def with_edits(self, **changes) -> 'CommitSuggestion':
        """Return a new suggestion with user edits applied."""
        return replace(self, **changes)

    @classmethod
    def from_change(cls, change: ClassifiedChange) -> 'CommitSuggestion':
        return cls(type=change.type, scope=change.scope, message=change.message)


def _file_suffix(count: int) -> str:
    return f" ({count} files)" if count > 1 else ""


def most_common_type(changes: Sequence[ClassifiedChange]) -> str:
    """Most frequent type; ties go to the type seen first."""
    # Counter.most_common keeps first-encountered order among equal counts
    return Counter(c.type for c in changes).most_common(1)[0][0]


def combine_changes(changes: Sequence[ClassifiedChange]) -> CommitSuggestion:
    """One suggestion standing for the whole changeset."""
    types = {c.type for c in changes}
    commit_type = most_common_type(changes)
    if len(types) == 1:
        message = TYPE_PHRASES.get(commit_type, DEFAULT_PHRASE)
    else:
        message = MIXED_PHRASE

    scopes = {c.scope for c in changes}
    scope = scopes.pop() if len(scopes) == 1 else ""

    return CommitSuggestion(
        type=commit_type,
        scope=scope,
        message=message + _file_suffix(len(changes)),
        confidence=GROUP_CONFIDENCE,
        file_count=len(changes),
        combined=True,
    )


def _scope_group_message(commit_type: str, scope: str) -> str:
    verb, noun = SCOPE_PHRASES.get(commit_type, ('update', ''))
    return ' '.join(part for part in (verb, scope, noun) if part)


def group_by_scope(changes: Sequence[ClassifiedChange]) -> list[CommitSuggestion]:
    """One suggestion per (type, scope) pair, in first-seen order."""
    groups: dict[tuple[str, str], list[ClassifiedChange]] = {}
    for change in changes:
        groups.setdefault((change.type, change.scope), []).append(change)

    suggestions = []
    for (commit_type, scope), members in groups.items():
        if len(members) == 1:
            suggestions.append(CommitSuggestion.from_change(members[0]))
            continue
        suggestions.append(CommitSuggestion(
            type=commit_type,
            scope=scope,
            message=_scope_group_message(commit_type, scope),
            confidence=GROUP_CONFIDENCE,
            file_count=len(members),
        ))
    return suggestions


def build_suggestions(
    changes: Sequence[ClassifiedChange],
    grouping: str = GROUP_BY_TYPE,
    max_suggestions: int = DEFAULT_MAX_SUGGESTIONS,
    max_individual_files: int = DEFAULT_MAX_INDIVIDUAL_FILES,
) -> list[CommitSuggestion]:
    """Combined suggestion first, then the retained per-file or per-group ones.

    Per-file suggestions are only kept while the changeset has at most
    `max_individual_files` files. The list is capped at `max_suggestions`,
    dropping from the tail; the combined suggestion always survives.
    """
    if not changes:
        return []

    suggestions = [combine_changes(changes)]
    if grouping == GROUP_BY_SCOPE:
        suggestions.extend(group_by_scope(changes))
    elif len(changes) <= max_individual_files:
        suggestions.extend(CommitSuggestion.from_change(c) for c in changes)

    return suggestions[:max(1, max_suggestions)]
