"""Terminal Output Formatting Package"""

import os
import sys
import threading

from commitcraft.git.analyzer import StatusKind
from commitcraft.history.parser import CONVENTIONAL_RE


class Colors:
    """ANSI escape codes for terminal colors."""
    RESET = '\033[0m'
    BOLD = '\033[1m'
    DIM = '\033[2m'
    RED = '\033[31m'
    GREEN = '\033[32m'
    YELLOW = '\033[33m'
    CYAN = '\033[36m'
    MAGENTA = '\033[35m'


def _supports_color() -> bool:
    if os.environ.get('NO_COLOR'):
        return False
    if os.environ.get('FORCE_COLOR'):
        return True
    return hasattr(sys.stdout, 'isatty') and sys.stdout.isatty()


def _supports_unicode() -> bool:
    try:
        '✓─→'.encode(sys.stdout.encoding or 'utf-8')
        return True
    except (UnicodeEncodeError, LookupError):
        return False


COLORS_ENABLED = _supports_color()
UNICODE_ENABLED = _supports_unicode()

CHECK = '✓' if UNICODE_ENABLED else '[OK]'
CROSS = '✗' if UNICODE_ENABLED else '[X]'
ARROW = '→' if UNICODE_ENABLED else '->'


def _colorize(text: str, *codes: str) -> str:
    if not COLORS_ENABLED:
        return text
    return f"{''.join(codes)}{text}{Colors.RESET}"


def success(text: str) -> str:
    return _colorize(text, Colors.GREEN)


def error(text: str) -> str:
    return _colorize(text, Colors.RED)


def warning(text: str) -> str:
    return _colorize(text, Colors.YELLOW)


def info(text: str) -> str:
    return _colorize(text, Colors.CYAN)


def dim(text: str) -> str:
    return _colorize(text, Colors.DIM)


def bold(text: str) -> str:
    return _colorize(text, Colors.BOLD)


def highlight(text: str) -> str:
    return _colorize(text, Colors.MAGENTA)


def print_success(message: str) -> None:
    print(f"{success(CHECK)} {message}")


def print_error(message: str) -> None:
    print(f"{error(CROSS)} {error(message)}", file=sys.stderr)


def print_warning(message: str) -> None:
    marker = '⚠' if UNICODE_ENABLED else '[!]'
    print(f"{warning(marker)} {warning(message)}", file=sys.stderr)


# Header colors; types outside the table stay plain
COMMIT_TYPE_COLORS = {
    'feat': Colors.GREEN,
    'perf': Colors.GREEN,
    'fix': Colors.RED,
    'refactor': Colors.YELLOW,
    'revert': Colors.YELLOW,
    'docs': Colors.CYAN,
    'ci': Colors.CYAN,
    'build': Colors.CYAN,
    'test': Colors.MAGENTA,
    'chore': Colors.DIM,
    'style': Colors.DIM,
}


def colorize_commit_type(message: str) -> str:
    """Color the `type(scope):` prefix of a message's header line."""
    if not COLORS_ENABLED:
        return message
    header, sep, rest = message.partition('\n')
    match = CONVENTIONAL_RE.match(header)
    if not match or match.group(1) not in COMMIT_TYPE_COLORS:
        return message
    prefix_end = match.start(3)
    prefix = _colorize(header[:prefix_end], Colors.BOLD, COMMIT_TYPE_COLORS[match.group(1)])
    return prefix + header[prefix_end:] + sep + rest


STATUS_MARKERS = {
    StatusKind.ADDED: ('A', Colors.GREEN),
    StatusKind.DELETED: ('D', Colors.RED),
    StatusKind.MODIFIED: ('M', Colors.YELLOW),
    StatusKind.RENAMED: ('R', Colors.CYAN),
    StatusKind.OTHER: ('?', Colors.DIM),
}


def status_marker(kind: StatusKind) -> str:
    """Single colored letter for a file's status in listings."""
    letter, color = STATUS_MARKERS[kind]
    return _colorize(letter, color)


def confidence_badge(confidence: float) -> str:
    text = f"{round(confidence * 100)}%"
    return success(text) if confidence >= 0.9 else warning(text)


class Spinner:
    """Progress line for the per-file diff scan. Silent unless stdout is a TTY."""
    FRAMES = ['⠋', '⠙', '⠹', '⠸', '⠼', '⠴', '⠦', '⠧', '⠇', '⠏'] if UNICODE_ENABLED else ['-', '\\', '|', '/']

    def __init__(self, label: str = ""):
        self.label = label
        self._thread = None
        self._stop_event = threading.Event()

    def update(self, label: str) -> None:
        self.label = label

    def _spin(self):
        idx = 0
        while not self._stop_event.wait(0.08):
            frame = self.FRAMES[idx % len(self.FRAMES)]
            print(f'\r\033[K{frame} {dim(self.label)}', end='', flush=True)
            idx += 1

    def __enter__(self):
        if sys.stdout.isatty():
            self._thread = threading.Thread(target=self._spin, daemon=True)
            self._thread.start()
        return self

    def __exit__(self, *args):
        self._stop_event.set()
        if self._thread:
            self._thread.join()
            print('\r\033[K', end='', flush=True)


__all__ = [
    "Colors", "COLORS_ENABLED", "UNICODE_ENABLED",
    "CHECK", "CROSS", "ARROW",
    "success", "error", "warning", "info", "dim", "bold", "highlight",
    "print_success", "print_error", "print_warning",
    "colorize_commit_type", "confidence_badge", "status_marker",
    "Spinner", "COMMIT_TYPE_COLORS", "STATUS_MARKERS",
]
