"""Diff Analyzer - Pull structural facts out of unified diff text.

This is a line-level heuristic, not a parser: each added line is tested
independently against a small table of declaration and import patterns.
Nothing is executed or compiled.
"""

import re
from dataclasses import dataclass, field


@dataclass(frozen=True)
class DiffFacts:
    """What a single file's diff tells us, without understanding it."""
    lines_added: int = 0
    lines_removed: int = 0
    function_names: tuple[str, ...] = field(default_factory=tuple)
    import_lines: tuple[str, ...] = field(default_factory=tuple)

    @property
    def total_changes(self) -> int:
        return self.lines_added + self.lines_removed

    @property
    def has_functions(self) -> bool:
        return len(self.function_names) > 0

    @property
    def is_empty(self) -> bool:
        return self.total_changes == 0


# (language hint, declaration pattern). Group 1 captures the identifier.
# A line may match several entries; each match contributes one name.
DECLARATION_PATTERNS: list[tuple[str, str]] = [
    ('python', r'\bdef\s+([A-Za-z_]\w*)'),
    ('class', r'\bclass\s+([A-Za-z_$][\w$]*)'),
    ('javascript', r'\bfunction\s*\*?\s*([A-Za-z_$][\w$]*)'),
    ('go', r'\bfunc\s+(?:\([^)]*\)\s*)?([A-Za-z_]\w*)'),
    ('rust', r'\bfn\s+([A-Za-z_]\w*)'),
]

IMPORT_PATTERNS: list[str] = [
    r'^import\s',
    r'^from\s+\S+\s+import\s',
    r'^#\s*include\b',
    r'\brequire\s*\(',
    r'^use\s+[\w:]+',
    r'^using\s+[\w.]+\s*;',
]

_DECLARATION_RE = [(hint, re.compile(p)) for hint, p in DECLARATION_PATTERNS]
_IMPORT_RE = [re.compile(p) for p in IMPORT_PATTERNS]


def _declared_names(line: str) -> list[str]:
    names = []
    for _hint, pattern in _DECLARATION_RE:
        match = pattern.search(line)
        if match:
            names.append(match.group(1))
    return names


def _is_import(line: str) -> bool:
    return any(p.search(line) for p in _IMPORT_RE)


def analyze_diff(diff: str | None) -> DiffFacts:
    """Count added/removed lines and collect declarations and imports.

    An empty or missing diff yields empty facts.
    """
    if not diff:
        return DiffFacts()

    added = 0
    removed = 0
    functions: list[str] = []
    imports: list[str] = []

    for line in diff.split('\n'):
        if line.startswith('+') and not line.startswith('+++'):
            added += 1
            content = line[1:].strip()
            functions.extend(_declared_names(content))
            if _is_import(content):
                imports.append(content)
        elif line.startswith('-') and not line.startswith('---'):
            removed += 1

    return DiffFacts(
        lines_added=added,
        lines_removed=removed,
        function_names=tuple(functions),
        import_lines=tuple(imports),
    )
