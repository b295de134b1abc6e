"""
Tests for CLI output and the end-to-end command flows.

Shows sample output for each scenario. Run with:
    pytest tests/test_display.py -v
    pytest tests/test_display.py -v -s   # see actual terminal output
"""

import argparse
import json
import re

import pytest

from commitcraft.cli.args import build_parser, split_range
from commitcraft.cli.main import _apply_overrides, _display_file_list, _display_message, main
from commitcraft.cli.utils import display_options, edit_commits, format_option, revalidate_message
from commitcraft.config import Config
from commitcraft.git import FileChange, GitError
from commitcraft.git.diff_analyzer import DiffFacts
from commitcraft.history import parse_log
from commitcraft.output import ARROW, colorize_commit_type
from commitcraft.suggest import ClassifiedChange, CommitSuggestion

ANSI_RE = re.compile(r'\033\[[0-9;]*m')


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def strip_ansi():
    """Return a function that removes ANSI escape codes."""
    def _strip(text: str) -> str:
        return ANSI_RE.sub('', text)
    return _strip


@pytest.fixture
def print_sample(capsys):
    """Return a function that replays captured output for -s viewing."""
    def _print(out: str):
        with capsys.disabled():
            try:
                print(out)
            except UnicodeEncodeError:
                cleaned = ANSI_RE.sub('', out)
                print(cleaned.encode('ascii', errors='replace').decode('ascii'))
    return _print


def classified(path, type_="feat", scope="core", message=None, status="M"):
    return ClassifiedChange(
        path=path,
        status_code=status,
        type=type_,
        scope=scope,
        message=message or f"update {path.rsplit('/', 1)[-1]}",
    )


def overrides(type=None, scope=None, breaking=None):
    return argparse.Namespace(type=type, scope=scope, breaking=breaking)


class FakeAnalyzer:
    """Stands in for GitAnalyzer; class attributes are set per test."""
    changes: list = []
    facts: dict = {}
    log_output = ""
    instances: list = []

    def __init__(self):
        self.staged = False
        self.commits = []
        self.log_range = None
        FakeAnalyzer.instances.append(self)

    def stage_all(self):
        self.staged = True

    def get_status(self):
        return list(self.changes)

    def get_diff_facts(self, change):
        return self.facts.get(change.path, DiffFacts())

    def get_log(self, from_ref, to_ref):
        self.log_range = (from_ref, to_ref)
        return self.log_output

    def commit(self, message):
        self.commits.append(message)
        return "[main 1a2b3c4] " + message.split('\n')[0]


@pytest.fixture
def fake_repo(monkeypatch):
    """Patch the CLI to use FakeAnalyzer and default config."""
    monkeypatch.setattr(FakeAnalyzer, "changes", [])
    monkeypatch.setattr(FakeAnalyzer, "facts", {})
    monkeypatch.setattr(FakeAnalyzer, "log_output", "")
    monkeypatch.setattr(FakeAnalyzer, "instances", [])
    monkeypatch.setattr("commitcraft.cli.main.GitAnalyzer", FakeAnalyzer)
    monkeypatch.setattr("commitcraft.cli.main.load_config", lambda: Config())
    return FakeAnalyzer


@pytest.fixture
def auth_feature(fake_repo):
    """Two new source files under src/auth, each declaring a function."""
    fake_repo.changes = [
        FileChange(path="src/auth/login.py", status_code="A"),
        FileChange(path="src/auth/logout.py", status_code="A"),
    ]
    fake_repo.facts = {
        "src/auth/login.py": DiffFacts(lines_added=30, function_names=("login",)),
        "src/auth/logout.py": DiffFacts(lines_added=12, function_names=("logout",)),
    }
    return fake_repo


@pytest.fixture
def answers(monkeypatch):
    """Return a function that queues replies for input()."""
    def _answers(*values):
        it = iter(values)
        monkeypatch.setattr("builtins.input", lambda prompt="": next(it))
    return _answers


LOG_OUTPUT = (
    "aaa111aaa111|feat(api): add search|Bob|bob@x.io|2024-03-02 09:30:00 +0000|\x1e\n"
    "bbb222bbb222|wip: half done|Ann|ann@x.io|2024-03-01 10:00:00 +0000|\x1e\n"
)


# ---------------------------------------------------------------------------
# File list display
# ---------------------------------------------------------------------------

class TestDisplayFileList:
    """Output from _display_file_list()."""

    def test_small_list_shows_all(self, capsys, strip_ansi):
        _display_file_list([
            classified("src/utils/validator.py", "fix", "utils", "update validator"),
            classified("README.md", "docs", "docs", "update README"),
            classified("tests/test_validator.py", "test", "test", "add test_validator.py", status="A"),
        ])
        out = strip_ansi(capsys.readouterr().out)

        assert "Pending changes:" in out
        assert f"M src/utils/validator.py {ARROW} fix(utils): update validator" in out
        assert f"M README.md {ARROW} docs(docs): update README" in out
        assert f"A tests/test_validator.py {ARROW} test(test): add test_validator.py" in out
        assert "more files" not in out

    def test_large_list_collapses(self, capsys, strip_ansi):
        changes = [classified(f"src/mod{i}.py") for i in range(11)]
        _display_file_list(changes, max_shown=8)
        out = strip_ansi(capsys.readouterr().out)

        assert "src/mod7.py" in out
        assert "src/mod8.py" not in out
        assert "... and 3 more files" in out

    def test_untracked_shows_as_added(self, capsys, strip_ansi):
        _display_file_list([classified("notes.txt", status="??")])
        out = strip_ansi(capsys.readouterr().out)
        assert "A notes.txt" in out

    def test_empty_list_prints_nothing(self, capsys):
        _display_file_list([])
        assert capsys.readouterr().out == ""


# ---------------------------------------------------------------------------
# Commit message display
# ---------------------------------------------------------------------------

class TestDisplayMessage:
    """Output from _display_message()."""

    def test_subject_with_breaking_footer(self, capsys, strip_ansi):
        _display_message("feat(api): add search\n\nBREAKING CHANGE: drops /find")
        out = strip_ansi(capsys.readouterr().out)

        assert "feat(api): add search" in out
        assert "BREAKING CHANGE: drops /find" in out

    def test_has_horizontal_rules(self, capsys, strip_ansi):
        _display_message("chore: update config")
        out = strip_ansi(capsys.readouterr().out)
        lines = [l for l in out.split("\n") if l.strip()]

        # First and last lines are rules
        assert all(c == "─" for c in lines[0].strip())
        assert all(c == "─" for c in lines[-1].strip())


# ---------------------------------------------------------------------------
# Suggestion picker
# ---------------------------------------------------------------------------

class TestFormatOption:

    def test_combined(self, strip_ansi):
        suggestion = CommitSuggestion(
            type="feat", scope="auth", message="add features (2 files)",
            confidence=0.8, file_count=2, combined=True,
        )
        line = strip_ansi(format_option(suggestion, 1))
        assert line == "[1] feat(auth): add features (2 files)  80% combined"

    def test_scope_group(self, strip_ansi):
        suggestion = CommitSuggestion(
            type="test", scope="test", message="add test tests", confidence=0.8, file_count=3,
        )
        assert strip_ansi(format_option(suggestion, 2)).endswith("80% 3 files")

    def test_single_file(self, strip_ansi):
        suggestion = CommitSuggestion(type="fix", scope="", message="update parser")
        assert strip_ansi(format_option(suggestion, 3)) == "[3] fix: update parser  90%"

    def test_breaking_footer_indented(self, strip_ansi):
        suggestion = CommitSuggestion(type="feat", scope="", message="x", breaking=True, breaking_note="gone")
        lines = strip_ansi(format_option(suggestion, 1)).split("\n")
        assert lines[1] == "    BREAKING CHANGE: gone"


class TestDisplayOptions:

    @pytest.fixture
    def suggestions(self):
        return [
            CommitSuggestion(type="feat", scope="", message="add features (2 files)", combined=True, file_count=2),
            CommitSuggestion(type="feat", scope="", message="add a.py"),
        ]

    def test_enter_picks_first(self, suggestions, answers, capsys):
        answers("")
        assert display_options(suggestions) == 0

    def test_number_picks_option(self, suggestions, answers, capsys):
        answers("2")
        assert display_options(suggestions) == 1

    def test_quit(self, suggestions, answers, capsys):
        answers("q")
        assert display_options(suggestions) is None

    def test_out_of_range_reprompts(self, suggestions, answers, capsys):
        answers("9", "abc", "1")
        assert display_options(suggestions) == 0
        assert capsys.readouterr().out.count("Enter 1-2 or q") == 2

    def test_eof_cancels(self, suggestions, monkeypatch, capsys):
        def _eof(prompt=""):
            raise EOFError
        monkeypatch.setattr("builtins.input", _eof)
        assert display_options(suggestions) is None


class TestRevalidateMessage:

    def test_valid_edit(self):
        parsed, valid = revalidate_message("fix(db): close cursor\n\nBREAKING CHANGE: api")
        assert valid
        assert parsed.scope == "db"
        assert parsed.breaking

    def test_invalid_type(self):
        parsed, valid = revalidate_message("wip: half done")
        assert not valid
        assert parsed.type == "wip"

    def test_free_text_is_guessed(self):
        parsed, valid = revalidate_message("Fixed the crash")
        assert valid
        assert parsed.type == "fix"


class TestApplyOverrides:

    @pytest.fixture
    def suggestion(self):
        return CommitSuggestion(type="feat", scope="auth", message="add login function")

    def test_no_overrides_returns_same(self, suggestion):
        assert _apply_overrides(suggestion, overrides()) is suggestion

    def test_type_and_scope(self, suggestion):
        result = _apply_overrides(suggestion, overrides(type="fix", scope="api"))
        assert result.format() == "fix(api): add login function"
        assert suggestion.type == "feat"

    def test_empty_scope_clears(self, suggestion):
        assert _apply_overrides(suggestion, overrides(scope="")).format() == "feat: add login function"

    def test_breaking_with_note(self, suggestion):
        result = _apply_overrides(suggestion, overrides(breaking="sessions reset"))
        assert result.format() == "feat(auth): add login function\n\nBREAKING CHANGE: sessions reset"

    def test_breaking_without_note_reuses_message(self, suggestion):
        result = _apply_overrides(suggestion, overrides(breaking=""))
        assert result.format().endswith("BREAKING CHANGE: add login function")


# ---------------------------------------------------------------------------
# Command flows through main(). Captured stdout is not a TTY, so these run as a pipe
# ---------------------------------------------------------------------------

class TestSuggestFlow:

    def test_pipe_prints_combined_message(self, auth_feature, capsys):
        assert main([]) == 0
        out = capsys.readouterr().out
        assert out.strip() == "feat(auth): add features (2 files)"
        assert auth_feature.instances[0].commits == []

    def test_overrides_applied(self, auth_feature, capsys):
        assert main(["-t", "fix", "--scope", "api", "-b", "tokens rotate"]) == 0
        out = capsys.readouterr().out
        assert "fix(api): add features (2 files)\n\nBREAKING CHANGE: tokens rotate" in out

    def test_stage_and_commit(self, auth_feature, capsys):
        assert main(["--stage", "--commit"]) == 0
        analyzer = auth_feature.instances[0]
        assert analyzer.staged
        assert analyzer.commits == ["feat(auth): add features (2 files)"]
        assert "[main 1a2b3c4]" in capsys.readouterr().out

    def test_no_changes(self, fake_repo, capsys):
        assert main([]) == 1
        assert "No pending changes." in capsys.readouterr().err

    def test_git_error_exits_nonzero(self, monkeypatch, capsys):
        def _no_repo():
            raise GitError("Not inside a git repository")
        monkeypatch.setattr("commitcraft.cli.main.GitAnalyzer", _no_repo)
        monkeypatch.setattr("commitcraft.cli.main.load_config", lambda: Config())

        assert main([]) == 1
        assert "Not inside a git repository" in capsys.readouterr().err


class TestFilesFlow:

    def test_lists_each_file(self, auth_feature, capsys, strip_ansi, print_sample):
        assert main(["--files"]) == 0
        out = capsys.readouterr().out
        print_sample(out)
        out = strip_ansi(out)

        assert "A src/auth/login.py" in out
        assert "feat(auth): add login function" in out
        assert "feat(auth): add logout function" in out
        assert "scope: auth" in out

    def test_no_changes(self, fake_repo, capsys):
        assert main(["--files"]) == 0
        assert "No pending changes." in capsys.readouterr().out


class TestLogFlow:

    def test_marks_invalid_commits(self, fake_repo, capsys, strip_ansi):
        fake_repo.log_output = LOG_OUTPUT
        assert main(["--log", "-r", "v1.0..v2.0"]) == 0
        out = strip_ansi(capsys.readouterr().out)

        assert fake_repo.instances[0].log_range == ("v1.0", "v2.0")
        assert "aaa111aa feat(api): add search" in out
        assert "bbb222bb wip: half done" in out
        assert "2 commits, 1 not following the convention" in out

    def test_default_range_from_config(self, fake_repo, capsys):
        assert main(["--log"]) == 0
        assert fake_repo.instances[0].log_range == ("HEAD~10", "HEAD")
        assert "No commits in range." in capsys.readouterr().out

    def test_edit_fixes_invalid_type(self, fake_repo, answers, capsys, strip_ansi):
        fake_repo.log_output = LOG_OUTPUT
        answers("2", "chore", "", "", "")

        assert main(["--log", "--edit"]) == 0
        out = strip_ansi(capsys.readouterr().out)
        assert "  2. " in out
        assert "bbb222bb chore: half done" in out
        assert "2 commits, 0 not following the convention" in out


class TestChangelogFlow:

    def test_writes_given_path(self, fake_repo, tmp_path, capsys):
        fake_repo.log_output = LOG_OUTPUT
        target = tmp_path / "CHANGES.md"

        assert main(["--changelog", str(target)]) == 0
        content = target.read_text(encoding="utf-8")
        assert "## ✨ Features (1)" in content
        assert "- **api**: add search" in content
        assert "half done" not in content
        assert f"Wrote 1 commits to {target}" in capsys.readouterr().out

    def test_default_path_uses_format_extension(self, fake_repo, tmp_path, monkeypatch, capsys):
        monkeypatch.chdir(tmp_path)
        fake_repo.log_output = LOG_OUTPUT

        assert main(["--changelog", "-f", "json"]) == 0
        assert (tmp_path / "CHANGELOG.json").read_text(encoding="utf-8").startswith("[")

    def test_unwritable_path(self, fake_repo, tmp_path, capsys):
        target = tmp_path / "missing" / "CHANGELOG.md"
        assert main(["--changelog", str(target)]) == 1
        assert "Could not write" in capsys.readouterr().err

    def test_edited_commit_is_validated_and_included(self, fake_repo, answers, tmp_path, capsys):
        fake_repo.log_output = LOG_OUTPUT
        target = tmp_path / "CHANGELOG.md"
        # commit 2 is "wip: half done"; retype it, keep scope, reword subject
        answers("2", "fix", "", "finish parser", "")

        assert main(["--changelog", str(target), "--edit"]) == 0
        content = target.read_text(encoding="utf-8")
        assert "## 🐛 Bug Fixes (1)" in content
        assert "- finish parser" in content
        assert "half done" not in content
        assert f"Wrote 2 commits to {target}" in capsys.readouterr().out

    def test_json_keeps_invalid_commits(self, fake_repo, tmp_path, capsys):
        fake_repo.log_output = LOG_OUTPUT
        target = tmp_path / "CHANGELOG.json"

        assert main(["--changelog", str(target), "-f", "json"]) == 0
        data = json.loads(target.read_text(encoding="utf-8"))
        assert [(c["type"], c["validated"]) for c in data] == [("feat", True), ("wip", False)]
        assert f"Wrote 2 commits to {target}" in capsys.readouterr().out


# ---------------------------------------------------------------------------
# Editing historical commits
# ---------------------------------------------------------------------------

class TestEditCommits:

    @pytest.fixture
    def commits(self):
        return parse_log(LOG_OUTPUT)

    def test_enter_finishes_without_changes(self, commits, answers, capsys):
        answers("")
        assert edit_commits(commits) == commits

    def test_returns_new_list(self, commits, answers, capsys):
        answers("1", "", "-", "", "")
        edited = edit_commits(commits)
        assert edited[0].scope == ""
        assert edited[0].type == "feat"
        assert commits[0].scope == "api"

    def test_invalid_choice_reprompts(self, commits, answers, capsys):
        answers("7", "x", "")
        edit_commits(commits)
        assert capsys.readouterr().out.count("Enter 1-2 or press Enter") == 2

    def test_edit_to_unknown_type_is_invalid(self, commits, answers, capsys, strip_ansi):
        answers("1", "feature", "", "", "")
        [first, _] = edit_commits(commits)
        assert first.validated is False
        assert "feature(api): add search" in strip_ansi(capsys.readouterr().out)

    def test_empty_subject_is_kept(self, commits, answers, capsys):
        answers("2", "", "", "-", "")
        assert edit_commits(commits)[1].subject == "half done"

    def test_eof_stops_editing(self, commits, monkeypatch, capsys):
        def _eof(prompt=""):
            raise EOFError
        monkeypatch.setattr("builtins.input", _eof)
        assert edit_commits(commits) == commits


# ---------------------------------------------------------------------------
# Argument parsing and header coloring
# ---------------------------------------------------------------------------

class TestArgs:

    def test_help_lists_type_descriptions(self):
        text = build_parser().format_help()
        assert "commit types:" in text
        assert "Reverts a previous commit" in text
        assert "Performance improvement" in text

    def test_edit_flag(self):
        args = build_parser().parse_args(["--changelog", "--edit"])
        assert args.edit is True
        assert args.changelog == ""

    @pytest.mark.parametrize("value, expected", [
        ("v1.0..v2.0", ("v1.0", "v2.0")),
        ("v1.0..", ("v1.0", "HEAD")),
        ("..v2.0", ("HEAD~10", "v2.0")),
        ("v1.0", ("v1.0", "HEAD")),
    ])
    def test_split_range(self, value, expected):
        assert split_range(value) == expected


class TestColorizeCommitType:

    @pytest.fixture(autouse=True)
    def colors_on(self, monkeypatch):
        monkeypatch.setattr("commitcraft.output.COLORS_ENABLED", True)

    def test_colors_prefix_only(self):
        out = colorize_commit_type("fix(db): close cursor\n\nBREAKING CHANGE: x")
        assert out == "\033[1m\033[31mfix(db): \033[0mclose cursor\n\nBREAKING CHANGE: x"

    @pytest.mark.parametrize("message", ["wip: half done", "feat!: drop py38", "Fix the crash"])
    def test_unknown_or_nonconventional_left_plain(self, message):
        assert colorize_commit_type(message) == message
