"""CLI Main Entry Point"""

import logging
import sys
from pathlib import Path

from commitcraft.config import load_config
from commitcraft.git import GitAnalyzer, GitError, status_kind
from commitcraft.history import ChangelogError, file_extension, parse_log, render_changelog
from commitcraft.output import (
    success, warning, dim, bold, highlight, print_error, print_success, print_warning,
    CHECK, CROSS, ARROW, Spinner, colorize_commit_type, status_marker,
)
from commitcraft.suggest import (
    ClassifiedChange, CommitSuggestion, build_suggestions, classify_change, format_commit_message, match_rule,
)

from commitcraft.cli.args import parse_args, split_range
from commitcraft.cli.commands import display_config, run_setup, run_install_completion
from commitcraft.cli.utils import copy_to_clipboard, display_options, edit_commits, edit_message, revalidate_message

logger = logging.getLogger(__name__)


def _configure_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format='%(levelname)s %(name)s: %(message)s',
            stream=sys.stderr,
        )


def _open_repo(stage: bool = False):
    """GitAnalyzer for the current directory, or None after reporting why."""
    try:
        analyzer = GitAnalyzer()
        if stage:
            analyzer.stage_all()
        return analyzer
    except GitError as e:
        print_error(str(e))
        return None


def _scan_changes(analyzer: GitAnalyzer, is_pipe: bool) -> list[ClassifiedChange]:
    """Status, per-file diff facts and classification for the working tree."""
    changes = analyzer.get_status()
    classified = []
    with Spinner() as spinner:
        for i, change in enumerate(changes, 1):
            if not is_pipe:
                spinner.update(f"analyzing {i}/{len(changes)} {change.filename}")
            facts = analyzer.get_diff_facts(change)
            result = classify_change(change.path, change.status_code, facts)
            rule = match_rule(change.path, change.status_code, facts)
            logger.debug(
                "%s [%s] +%d -%d -> %s (rule: %s)",
                change.path, change.kind.name, facts.lines_added, facts.lines_removed,
                result.type, rule.name if rule else 'fallback',
            )
            classified.append(result)
    return classified


def _display_file_list(classified: list[ClassifiedChange], max_shown: int = 8) -> None:
    """Show which files were classified, collapsing long lists."""
    if not classified:
        return
    print(bold("Pending changes:"))
    shown = classified[:max_shown]
    remaining = len(classified) - len(shown)
    for change in shown:
        marker = status_marker(status_kind(change.status_code))
        print(f"  {marker} {change.path} {dim(ARROW)} {colorize_commit_type(change.header)}")
    if remaining > 0:
        print(dim(f"  ... and {remaining} more files"))


def _display_message(message: str) -> None:
    """Display commit message with horizontal rules and colored type."""
    colored = colorize_commit_type(message)
    lines = colored.split('\n')
    # Use raw message for width calculation (no ANSI codes)
    raw_lines = message.split('\n')
    width = max((len(line) for line in raw_lines), default=40)
    print(f"\n{dim('─' * width)}")
    print(bold(lines[0]))
    for line in lines[1:]:
        print(line)
    print(dim('─' * width))


def _copy_and_report(message: str, no_copy: bool) -> None:
    """Copy message to clipboard and print result."""
    if no_copy:
        return
    copied, reason = copy_to_clipboard(message)
    if copied:
        print(f"{success(CHECK)} Copied to clipboard!")
    else:
        print(f"{warning('!')} Could not copy to clipboard{': ' + reason if reason else ''}")
        print(dim("  Select the message above to copy manually."))


def _apply_overrides(suggestion: CommitSuggestion, args) -> CommitSuggestion:
    """Fold --type/--scope/--breaking into a new suggestion."""
    edits = {}
    if args.type:
        edits['type'] = args.type
    if args.scope is not None:
        edits['scope'] = args.scope
    if args.breaking is not None:
        edits['breaking'] = True
        edits['breaking_note'] = args.breaking
    return suggestion.with_edits(**edits) if edits else suggestion


def _warn_if_invalid(message: str) -> None:
    parsed, valid = revalidate_message(message)
    if not valid:
        print_warning(f"'{parsed.type}' is not a conventional commit type")


def _commit(analyzer: GitAnalyzer, message: str) -> int:
    try:
        summary = analyzer.commit(message)
    except GitError as e:
        print_error(str(e))
        return 1
    print_success(summary.split('\n')[0] if summary else "Committed")
    return 0


def _handle_interactive_action(message: str) -> tuple[str, str]:
    """Prompt after a message is chosen.

    Returns:
        tuple: (action, message) where action is 'done', 'edited' or 'commit'
    """
    try:
        action = input(f"\n{dim('(e)dit, (c)ommit, or Enter to accept: ')}").strip().lower()
    except (KeyboardInterrupt, EOFError):
        return 'done', message

    if action == 'e':
        edited = edit_message(message)
        if edited:
            return 'edited', edited
    elif action == 'c':
        return 'commit', message
    return 'done', message


def _suggest_flow(args, config) -> int:
    is_pipe = not sys.stdout.isatty()
    is_interactive = sys.stdin.isatty() and not is_pipe

    analyzer = _open_repo(stage=args.stage)
    if analyzer is None:
        return 1
    try:
        classified = _scan_changes(analyzer, is_pipe)
    except GitError as e:
        print_error(str(e))
        return 1

    if not classified:
        print_error("No pending changes.")
        return 1

    if not is_pipe:
        _display_file_list(classified, config.max_file_display)

    suggestions = build_suggestions(
        classified,
        grouping=args.group_by or config.grouping,
        max_suggestions=config.max_suggestions,
        max_individual_files=config.max_individual_files,
    )

    if is_pipe or not is_interactive:
        chosen = suggestions[0]
    else:
        idx = display_options(suggestions)
        if idx is None:
            print(dim("Cancelled."))
            return 0
        chosen = suggestions[idx]

    message = _apply_overrides(chosen, args).format()

    if is_pipe:
        print(message)
        return _commit(analyzer, message) if args.commit else 0

    _display_message(message)

    if args.commit:
        return _commit(analyzer, message)

    if is_interactive:
        action, message = _handle_interactive_action(message)
        if action == 'edited':
            _warn_if_invalid(message)
            _display_message(message)
            action, message = _handle_interactive_action(message)
        if action == 'commit':
            return _commit(analyzer, message)

    _copy_and_report(message, args.no_copy)
    return 0


def _files_flow(args, config) -> int:
    analyzer = _open_repo(stage=args.stage)
    if analyzer is None:
        return 1
    try:
        classified = _scan_changes(analyzer, not sys.stdout.isatty())
    except GitError as e:
        print_error(str(e))
        return 1

    if not classified:
        print(dim("No pending changes."))
        return 0
    for change in classified:
        scope = highlight(change.scope) if change.scope else dim('-')
        print(f"{status_marker(status_kind(change.status_code))} {change.path}")
        print(f"    {colorize_commit_type(change.header)} {dim('scope:')} {scope}")
    return 0


def _history_range(args, config) -> tuple[str, str]:
    if args.range:
        return split_range(args.range)
    return config.from_version, config.to_version


def _load_history(args, config):
    analyzer = _open_repo()
    if analyzer is None:
        return None
    start, end = _history_range(args, config)
    try:
        return parse_log(analyzer.get_log(start, end))
    except GitError as e:
        print_error(str(e))
        return None


def _print_commits(commits) -> int:
    """Numbered history listing; returns how many commits fail validation."""
    invalid = 0
    for i, commit in enumerate(commits, 1):
        mark = success(CHECK) if commit.validated else warning(CROSS)
        header = format_commit_message(commit.type, commit.scope, commit.subject)
        breaking = warning(' BREAKING') if commit.breaking else ''
        print(f"{dim(f'{i:>3}.')} {mark} {dim(commit.short_hash)} {colorize_commit_type(header)}{breaking} {dim(commit.author)}")
        if not commit.validated:
            invalid += 1
    return invalid


def _log_flow(args, config) -> int:
    commits = _load_history(args, config)
    if commits is None:
        return 1
    if not commits:
        print(dim("No commits in range."))
        return 0

    invalid = _print_commits(commits)
    if args.edit:
        commits = edit_commits(commits)
        invalid = sum(1 for c in commits if not c.validated)

    print()
    print(dim(f"{len(commits)} commits, {invalid} not following the convention"))
    return 0


def _changelog_flow(args, config) -> int:
    output_format = args.format or config.output_format
    commits = _load_history(args, config)
    if commits is None:
        return 1

    if args.edit and commits:
        _print_commits(commits)
        commits = edit_commits(commits)

    try:
        content = render_changelog(
            commits,
            output_format=output_format,
            labels=config.commit_types,
            group_by_type=config.group_by_type,
            include_breaking=config.include_breaking,
        )
    except ChangelogError as e:
        print_error(str(e))
        return 1

    path = Path(args.changelog or f"CHANGELOG.{file_extension(output_format)}")
    try:
        path.write_text(content, encoding='utf-8')
    except OSError as e:
        print_error(f"Could not write {path}: {e}")
        return 1
    # json keeps every commit, the other formats only validated ones
    written = len(commits) if output_format == 'json' else sum(1 for c in commits if c.validated)
    print_success(f"Wrote {written} commits to {path}")
    return 0


def _handle_subcommands(args):
    """Handle subcommands that exit early.

    Returns:
        tuple: (exit_code, should_exit) - exit_code if should_exit is True
    """
    if args.install_completion:
        return run_install_completion(), True
    if args.display_config:
        return display_config(), True
    if args.setup:
        return run_setup(), True
    return 0, False


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    args = parse_args(argv)
    _configure_logging(args.verbose)

    exit_code, should_exit = _handle_subcommands(args)
    if should_exit:
        return exit_code

    config = load_config()

    if args.files:
        return _files_flow(args, config)
    if args.log:
        return _log_flow(args, config)
    if args.changelog is not None:
        return _changelog_flow(args, config)
    return _suggest_flow(args, config)


if __name__ == '__main__':
    sys.exit(main())
