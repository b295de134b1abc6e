"""CLI Commands"""

import os
import sys

from commitcraft.config import Config, load_config, save_config, get_config_path
from commitcraft.output import bold, dim, info, print_success


def display_config() -> int:
    """Display current configuration."""
    config = load_config()
    config_path = get_config_path()

    print(f"\n{bold('Current Configuration')}\n")

    if config_path:
        print(f"  {dim('Loaded from:')} {config_path}")
    else:
        print(f"  {dim('Loaded from:')} defaults (no .ccraftrc found)")

    print()
    print(f"  {bold('Suggestions:')}")
    print(f"    grouping:             {info(config.grouping)}")
    print(f"    max_suggestions:      {info(str(config.max_suggestions))}")
    print(f"    max_individual_files: {info(str(config.max_individual_files))}")
    print(f"    max_file_display:     {info(str(config.max_file_display))}")
    print()
    print(f"  {bold('History / changelog:')}")
    print(f"    range:                {info(f'{config.from_version}..{config.to_version}')}")
    print(f"    output_format:        {info(config.output_format)}")
    print(f"    group_by_type:        {info(str(config.group_by_type).lower())}")
    print(f"    include_breaking:     {info(str(config.include_breaking).lower())}")

    print(f"\n  {dim('Config locations:')}")
    print(f"    Local:  .ccraftrc (in current directory)")
    print(f"    Global: ~/.ccraftrc")
    print(f"\n  {dim('Run')} ccraft --setup {dim('to configure')}\n")

    return 0


def _choose(prompt: str, options: list[str], default: str) -> str:
    """Numbered choice; Enter keeps the default."""
    for i, option in enumerate(options, 1):
        marker = dim(' (default)') if option == default else ''
        print(f"  {i}. {option}{marker}")
    print()
    while True:
        choice = input(f"{prompt} [1-{len(options)}] (Enter for default): ").strip()
        if choice == '':
            return default
        if choice.isdigit() and 1 <= int(choice) <= len(options):
            return options[int(choice) - 1]


def run_setup() -> int:
    """Quick setup wizard."""
    display_config()
    current = load_config()
    print(f"{bold('Setup Wizard')}\n")

    print("Group suggestions by:\n")
    grouping = _choose("Select", ['type', 'scope'], current.grouping)

    print("\nChangelog format:\n")
    output_format = _choose("Select", ['markdown', 'json', 'text'], current.output_format)

    print("\nDefault history range start (Enter for HEAD~10): ", end='')
    from_version = input().strip() or 'HEAD~10'

    print("Group changelog entries by type? [Y/n]: ", end='')
    group_by_type = input().strip().lower() != 'n'

    config = Config(
        grouping=grouping,
        output_format=output_format,
        from_version=from_version,
        group_by_type=group_by_type,
        max_suggestions=current.max_suggestions,
        max_individual_files=current.max_individual_files,
        max_file_display=current.max_file_display,
        include_breaking=current.include_breaking,
        commit_types=current.commit_types,
    )
    path = save_config(config, global_config=True)

    print_success(f"Saved to {path}")
    return 0


def run_install_completion() -> int:
    """Install shell tab completion."""
    shell = os.environ.get('SHELL', '')

    print(f"\n{bold('Tab Completion Setup')}\n")

    line = 'eval "$(register-python-argcomplete ccraft)"'
    if 'zsh' in shell or 'bash' in shell:
        rc_file = os.path.expanduser('~/.zshrc' if 'zsh' in shell else '~/.bashrc')
        print(f"Add this line to {dim(rc_file)}:\n")
        print(f"  {line}\n")
        print(f"Then run: {dim('source ' + rc_file)}")
    elif sys.platform == 'win32':
        print("For PowerShell, run:\n")
        print("  register-python-argcomplete --shell powershell ccraft | Out-String | Invoke-Expression\n")
        print("To make it permanent, add to your $PROFILE.")
    else:
        print("Run one of these based on your shell:\n")
        print(f"  {dim('# Bash/Zsh')}")
        print(f"  {line}\n")
        print(f"  {dim('# Fish')}")
        print("  register-python-argcomplete --shell fish ccraft | source")

    print(f"\n{dim('After setup, press TAB to autocomplete flags.')}")
    return 0
