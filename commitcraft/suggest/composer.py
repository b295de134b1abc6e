"""Message Composer - Short imperative subject lines for classified changes."""

from pathlib import PurePosixPath

from commitcraft.git.analyzer import StatusKind, status_kind
from commitcraft.git.diff_analyzer import DiffFacts


def _sole_function(facts: DiffFacts) -> str | None:
    if len(facts.function_names) == 1:
        return facts.function_names[0]
    return None


def compose_message(path: str, status_code: str, facts: DiffFacts, commit_type: str) -> str:
    """Subject text (no type prefix) for one change.

    Filenames keep their original case; the verb is always lower-case and
    there is no trailing period.
    """
    name = PurePosixPath(path).name
    kind = status_kind(status_code)
    function = _sole_function(facts)

    if kind is StatusKind.ADDED:
        if function:
            return f"add {function} function"
        return f"add {name}"

    if kind is StatusKind.DELETED:
        return f"remove {name}"

    if kind is StatusKind.MODIFIED:
        stem = PurePosixPath(path).stem
        if commit_type == 'test':
            return f"update {stem} tests"
        if function and commit_type != 'docs':
            return f"update {function} function"
        return f"update {stem}"

    if kind is StatusKind.RENAMED:
        return f"rename {name}"

    return f"modify {name}"


def format_commit_message(commit_type: str, scope: str, message: str,
                          breaking: bool = False, breaking_note: str = "") -> str:
    """Render the text handed to `git commit -m`.

    "type(scope): message", or "type: message" without a scope. A breaking
    change adds a "BREAKING CHANGE:" footer after a blank line; the subject
    is reused as the note when none is given.
    """
    prefix = f"{commit_type}({scope})" if scope else commit_type
    header = f"{prefix}: {message}"
    if not breaking:
        return header
    note = breaking_note.strip() or message
    return f"{header}\n\nBREAKING CHANGE: {note}"
