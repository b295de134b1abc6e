"""CLI Utility Functions"""

import os
import subprocess
import sys
import tempfile

from commitcraft.history import HistoricalCommit, ParsedSubject, is_valid_type, parse_commit_subject
from commitcraft.output import bold, dim, info, success, warning, colorize_commit_type, confidence_badge, CHECK, CROSS
from commitcraft.suggest import CommitSuggestion, format_commit_message


def copy_to_clipboard(text: str) -> tuple[bool, str]:
    """Copy text to clipboard. Returns (success, failure_reason)."""
    try:
        if sys.platform == 'win32':
            subprocess.run(['clip'], input=text.encode('utf-8'), check=True)
        elif sys.platform == 'darwin':
            subprocess.run(['pbcopy'], input=text.encode('utf-8'), check=True)
        else:
            try:
                subprocess.run(['xclip', '-selection', 'clipboard'], input=text.encode('utf-8'), check=True)
            except FileNotFoundError:
                subprocess.run(['xsel', '--clipboard', '--input'], input=text.encode('utf-8'), check=True)
        return True, ""
    except FileNotFoundError:
        if sys.platform == 'linux':
            return False, "Install xclip or xsel: sudo apt install xclip"
        return False, "No clipboard tool found"
    except (subprocess.CalledProcessError, OSError) as e:
        return False, f"Clipboard command failed: {e}"


def format_option(suggestion: CommitSuggestion, option_num: int) -> str:
    """One picker line: number, colored message, confidence and file count."""
    lines = colorize_commit_type(suggestion.format()).split('\n')
    meta = confidence_badge(suggestion.confidence)
    if suggestion.combined:
        meta = f"{meta} {dim('combined')}"
    elif suggestion.file_count > 1:
        meta = f"{meta} {dim(f'{suggestion.file_count} files')}"

    parts = [f"{info(f'[{option_num}]')} {bold(lines[0])}  {meta}"]
    for line in lines[1:]:
        if line.strip():
            parts.append(f"    {line}")
    return '\n'.join(parts)


def display_options(suggestions: list[CommitSuggestion]) -> int | None:
    """Show suggestions and return the picked index, or None to quit."""
    print()
    for i, suggestion in enumerate(suggestions, 1):
        print(format_option(suggestion, i))
    print()

    while True:
        try:
            choice = input(f"Select [1-{len(suggestions)}] (Enter for 1) or (q)uit: ").strip().lower()
        except (KeyboardInterrupt, EOFError):
            return None
        if choice == 'q':
            return None
        if choice == '':
            return 0
        try:
            idx = int(choice) - 1
        except ValueError:
            idx = -1
        if 0 <= idx < len(suggestions):
            return idx
        print(f"Enter 1-{len(suggestions)} or q")


def revalidate_message(message: str) -> tuple[ParsedSubject, bool]:
    """Parse an edited message's subject line and check its type."""
    lines = message.strip().split('\n')
    body = '\n'.join(lines[1:])
    parsed = parse_commit_subject(lines[0], body)
    return parsed, is_valid_type(parsed.type)


def edit_message(message: str) -> str | None:
    """Open message in user's editor. Returns edited text or None on failure."""
    editor = os.environ.get('VISUAL') or os.environ.get('EDITOR')
    if not editor:
        editor = 'notepad' if sys.platform == 'win32' else 'vi'

    tmp = tempfile.NamedTemporaryFile(mode='w', suffix='.gitcommit', delete=False, encoding='utf-8')
    try:
        tmp.write(message)
        tmp.close()
        subprocess.run([editor, tmp.name], check=True)
        with open(tmp.name, 'r', encoding='utf-8') as f:
            edited = f.read().strip()
        return edited if edited else None
    except (subprocess.CalledProcessError, OSError):
        return None
    finally:
        try:
            os.unlink(tmp.name)
        except OSError as e:
            # Log to stderr so temp files don't silently accumulate
            print(f"Warning: Could not delete temp file {tmp.name}: {e}", file=sys.stderr)


def _prompt_field(label: str, current: str) -> str:
    """Ask for a new value; Enter keeps the current one, '-' clears it."""
    value = input(f"  {label} [{current}]: ").strip()
    if value == '-':
        return ''
    return value or current


def edit_commit(commit: HistoricalCommit) -> HistoricalCommit:
    """Prompt for type, scope and subject. Validity follows the new type."""
    print(dim(f"Editing {commit.short_hash} (Enter keeps, '-' clears)"))
    commit_type = _prompt_field('type', commit.type)
    scope = _prompt_field('scope', commit.scope)
    subject = _prompt_field('subject', commit.subject) or commit.subject
    return commit.with_edits(type=commit_type, scope=scope, subject=subject)


def edit_commits(commits: list[HistoricalCommit]) -> list[HistoricalCommit]:
    """Edit commits by number until Enter. Returns a new list."""
    edited = list(commits)
    while True:
        try:
            choice = input(f"\nEdit commit [1-{len(edited)}] (Enter to finish): ").strip()
            if choice == '':
                return edited
            if not choice.isdigit() or not 1 <= int(choice) <= len(edited):
                print(f"Enter 1-{len(edited)} or press Enter")
                continue
            idx = int(choice) - 1
            edited[idx] = edit_commit(edited[idx])
        except (KeyboardInterrupt, EOFError):
            return edited

        commit = edited[idx]
        mark = success(CHECK) if commit.validated else warning(CROSS)
        header = format_commit_message(commit.type, commit.scope, commit.subject)
        print(f"{mark} {dim(commit.short_hash)} {colorize_commit_type(header)}")
