"""Suggestion Engine Package"""

from commitcraft.git.diff_analyzer import DiffFacts
from commitcraft.suggest.classifier import ClassifiedChange, classify_type, derive_scope, match_rule
from commitcraft.suggest.composer import compose_message, format_commit_message
from commitcraft.suggest.aggregator import (
    CommitSuggestion,
    build_suggestions,
    combine_changes,
    GROUP_BY_SCOPE,
    GROUP_BY_TYPE,
)


def classify_change(path: str, status_code: str, facts: DiffFacts) -> ClassifiedChange:
    """Type, scope and message for one change. Same inputs, same result."""
    commit_type = classify_type(path, status_code, facts)
    return ClassifiedChange(
        path=path,
        status_code=status_code,
        type=commit_type,
        scope=derive_scope(path),
        message=compose_message(path, status_code, facts, commit_type),
    )


__all__ = [
    "ClassifiedChange",
    "CommitSuggestion",
    "classify_change",
    "classify_type",
    "derive_scope",
    "match_rule",
    "compose_message",
    "format_commit_message",
    "build_suggestions",
    "combine_changes",
    "GROUP_BY_SCOPE",
    "GROUP_BY_TYPE",
]
