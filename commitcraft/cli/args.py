"""CLI Argument Parsing"""

import argparse
import argcomplete

from commitcraft import COMMIT_TYPES, COMMIT_TYPE_NAMES, __version__


def _types_epilog() -> str:
    width = max(len(name) for name in COMMIT_TYPES)
    lines = [f'  {name:<{width}}  {description}' for name, description in COMMIT_TYPES.items()]
    return 'commit types:\n' + '\n'.join(lines) + '\n\nExample: ccraft (pick a suggestion, copies it to clipboard)'


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='ccraft',
        description='Suggest conventional commit messages from pending git changes',
        epilog=_types_epilog(),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument('-v', '--version', action='version', version=f'%(prog)s {__version__}')

    # Modes
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument('--files', action='store_true', help='List each changed file with its type and scope')
    mode.add_argument('--log', action='store_true', help='Show recent commits and whether they follow the convention')
    mode.add_argument('--changelog', type=str, nargs='?', const='', default=None, metavar='PATH', help='Write a changelog (default: CHANGELOG.<ext>)')

    # Suggestion options
    parser.add_argument('-g', '--group-by', type=str, choices=['type', 'scope'], help='Group suggestions by type or by (type, scope)')
    parser.add_argument('-t', '--type', type=str, choices=COMMIT_TYPE_NAMES, help='Force commit type (see the list below)')
    parser.add_argument('--scope', type=str, metavar='SCOPE', help='Force commit scope')
    parser.add_argument('-b', '--breaking', type=str, nargs='?', const='', default=None, metavar='NOTE', help='Mark as breaking change, with optional note')

    # History options
    parser.add_argument('-r', '--range', type=str, metavar='FROM..TO', help='Commit range for --log and --changelog')
    parser.add_argument('-f', '--format', type=str, choices=['markdown', 'json', 'text'], help='Changelog format')
    parser.add_argument('-e', '--edit', action='store_true', help='Edit commit type/scope/subject before --log summary or --changelog output')

    # Git actions (only on request)
    parser.add_argument('--stage', action='store_true', help='Run git add -A before scanning')
    parser.add_argument('--commit', action='store_true', help='Commit with the chosen message without asking')

    # Output options
    parser.add_argument('--no-copy', action='store_true', help='Print message only, do not copy to clipboard')
    parser.add_argument('--verbose', action='store_true', help='Show debug logging and per-file rule matches')

    # Setup/config
    parser.add_argument('--setup', action='store_true', help='Configure defaults')
    parser.add_argument('--display-config', action='store_true', help='Show current configuration')
    parser.add_argument('--install-completion', action='store_true', help='Install shell tab completion')

    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = build_parser()
    argcomplete.autocomplete(parser)
    return parser.parse_args(argv)


def split_range(value: str) -> tuple[str, str]:
    """Split "FROM..TO"; a bare ref means "ref..HEAD"."""
    if '..' in value:
        start, end = value.split('..', 1)
        return start or 'HEAD~10', end or 'HEAD'
    return value, 'HEAD'
