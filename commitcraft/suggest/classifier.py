"""Change Classifier - Map one file change to a conventional-commit type and scope."""

from dataclasses import dataclass, replace
from pathlib import PurePosixPath
from typing import Callable

from commitcraft.git.analyzer import StatusKind, status_kind
from commitcraft.git.diff_analyzer import DiffFacts
from commitcraft.suggest.composer import format_commit_message


@dataclass(frozen=True)
class ChangeContext:
    """Inputs every rule predicate sees."""
    path: str
    facts: DiffFacts

    @property
    def name(self) -> str:
        return PurePosixPath(self.path).name

    @property
    def directories(self) -> tuple[str, ...]:
        return tuple(p.lower() for p in PurePosixPath(self.path).parts[:-1])


@dataclass(frozen=True)
class Rule:
    """One (predicate, result) pair in an ordered rule table."""
    name: str
    predicate: Callable[[ChangeContext], bool]
    commit_type: str


TEST_DIRS = {'test', 'tests', '__tests__', 'spec', 'specs'}
DOC_DIRS = {'doc', 'docs', 'documentation'}
DOC_EXTENSIONS = ('.md', '.rst', '.adoc')
CONFIG_EXTENSIONS = ('.json', '.yaml', '.yml', '.toml', '.ini')
CONFIG_NAMES = ('Dockerfile', 'Makefile')
DEPENDENCY_MANIFESTS = {
    'package.json', 'go.mod', 'Cargo.toml', 'pyproject.toml', 'requirements.txt',
    'Pipfile', 'Gemfile', 'pom.xml', 'build.gradle', 'composer.json', 'setup.py',
}


def is_test_path(ctx: ChangeContext) -> bool:
    name = ctx.name.lower()
    stem = ctx.name.split('.')[0]
    if any(d in TEST_DIRS for d in ctx.directories):
        return True
    if name.startswith('test_') or stem.lower().endswith('_test'):
        return True
    if stem.endswith(('Test', 'Tests')):
        return True
    return '.test.' in name or '.spec.' in name


def is_doc_path(ctx: ChangeContext) -> bool:
    if ctx.name.lower().endswith(DOC_EXTENSIONS):
        return True
    if 'README' in ctx.name.upper():
        return True
    return any(d in DOC_DIRS for d in ctx.directories)


def has_doc_marker(ctx: ChangeContext) -> bool:
    """Looser check for new files: any "doc" in the path, docker files aside."""
    if is_doc_path(ctx):
        return True
    return 'doc' in ctx.path.lower().replace('docker', '')


def is_config_path(ctx: ChangeContext) -> bool:
    name = ctx.name
    if 'config' in ctx.path.lower():
        return True
    if name.lower().endswith(CONFIG_EXTENSIONS):
        return True
    if name in CONFIG_NAMES or name.startswith('.env'):
        return True
    return False


def is_dependency_manifest(ctx: ChangeContext) -> bool:
    return ctx.name in DEPENDENCY_MANIFESTS


def _has_functions(ctx: ChangeContext) -> bool:
    return ctx.facts.has_functions


def _has_imports(ctx: ChangeContext) -> bool:
    return len(ctx.facts.import_lines) > 0


def _removed_more(ctx: ChangeContext) -> bool:
    f = ctx.facts
    return f.lines_removed > 0 and f.lines_added < f.lines_removed


def _grows(ctx: ChangeContext) -> bool:
    f = ctx.facts
    return f.has_functions or f.lines_added > 2 * f.lines_removed


def _balanced(ctx: ChangeContext) -> bool:
    f = ctx.facts
    return f.lines_added > 0 and f.lines_removed > 0 and abs(f.lines_added - f.lines_removed) < 10


def _small(ctx: ChangeContext) -> bool:
    return ctx.facts.total_changes < 10


def _always(ctx: ChangeContext) -> bool:
    return True


ADDED_RULES: list[Rule] = [
    Rule('test-path', is_test_path, 'test'),
    Rule('doc-marker', has_doc_marker, 'docs'),
    Rule('new-functions', _has_functions, 'feat'),
    Rule('default', _always, 'feat'),
]

DELETED_RULES: list[Rule] = [
    Rule('default', _always, 'chore'),
]

MODIFIED_RULES: list[Rule] = [
    Rule('doc-path', is_doc_path, 'docs'),
    Rule('test-path', is_test_path, 'test'),
    Rule('config-path', is_config_path, 'chore'),
    Rule('manifest-new-imports', lambda c: is_dependency_manifest(c) and _has_imports(c), 'feat'),
    Rule('manifest', is_dependency_manifest, 'chore'),
    Rule('removed-more', _removed_more, 'fix'),
    Rule('grows', _grows, 'feat'),
    Rule('balanced', _balanced, 'refactor'),
    Rule('small', _small, 'fix'),
    Rule('default', _always, 'feat'),
]

RULES_BY_STATUS: dict[StatusKind, list[Rule]] = {
    StatusKind.ADDED: ADDED_RULES,
    StatusKind.DELETED: DELETED_RULES,
    StatusKind.MODIFIED: MODIFIED_RULES,
}

FALLBACK_TYPE = 'chore'


def match_rule(path: str, status_code: str, facts: DiffFacts) -> Rule | None:
    """First rule that fires for this change, or None when the status has no table."""
    rules = RULES_BY_STATUS.get(status_kind(status_code))
    if rules is None:
        return None
    ctx = ChangeContext(path=path, facts=facts)
    for rule in rules:
        if rule.predicate(ctx):
            return rule
    return None


def classify_type(path: str, status_code: str, facts: DiffFacts) -> str:
    rule = match_rule(path, status_code, facts)
    return rule.commit_type if rule else FALLBACK_TYPE


# Top-level directory -> scope. None means "use the nested segment, else core".
SCOPE_DIRECTORIES: dict[str, str | None] = {
    'src': None,
    'lib': None,
    'tests': 'test',
    'test': 'test',
    'docs': 'docs',
    'documentation': 'docs',
    'config': 'config',
    'configs': 'config',
    'api': 'api',
    'ui': 'ui',
    'frontend': 'ui',
    'client': 'ui',
    'backend': 'api',
    'server': 'api',
    'scripts': 'tools',
    'tools': 'tools',
}


def derive_scope(path: str) -> str:
    """Scope token for a path, or "" when nothing fits."""
    parts = PurePosixPath(path).parts
    if len(parts) > 1:
        top = parts[0]
        if top in SCOPE_DIRECTORIES:
            scope = SCOPE_DIRECTORIES[top]
            if scope is None:
                return parts[1] if len(parts) > 2 else 'core'
            return scope
        return top

    name = parts[0] if parts else ''
    lowered = name.lower()
    if 'test' in lowered:
        return 'test'
    if lowered.endswith('.md'):
        return 'docs'
    if 'config' in lowered:
        return 'config'
    return ''


@dataclass(frozen=True)
class ClassifiedChange:
    """A FileChange annotated with type, scope and composed message."""
    path: str
    status_code: str
    type: str
    scope: str
    message: str

    @property
    def header(self) -> str:
        return format_commit_message(self.type, self.scope, self.message)

    def with_edits(self, **changes) -> 'ClassifiedChange':
        """Return a new record with type/scope/message replaced."""
        allowed = {'type', 'scope', 'message'}
        unknown = set(changes) - allowed
        if unknown:
            raise TypeError(f"Cannot edit fields: {', '.join(sorted(unknown))}")
        return replace(self, **changes)
