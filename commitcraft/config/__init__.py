"""Configuration Management Package"""

import json
import sys
from dataclasses import dataclass, asdict, field
from pathlib import Path
from typing import Optional

# Valid configuration values
VALID_GROUPINGS = {"type", "scope"}
VALID_FORMATS = {"markdown", "json", "text"}

DEFAULT_COMMIT_TYPE_LABELS = {
    "feat": "✨ Features",
    "fix": "🐛 Bug Fixes",
    "docs": "📚 Documentation",
    "style": "💄 Styles",
    "refactor": "♻️ Refactoring",
    "test": "🧪 Tests",
    "chore": "🔧 Chore",
    "perf": "⚡ Performance",
    "ci": "👷 CI/CD",
    "build": "📦 Build",
    "revert": "⏪ Reverts",
}


@dataclass
class Config:
    """User configuration with sensible defaults."""
    grouping: str = "type"
    max_suggestions: int = 5
    max_individual_files: int = 3
    max_file_display: int = 8  # Max files shown before collapsing list
    from_version: str = "HEAD~10"
    to_version: str = "HEAD"
    output_format: str = "markdown"
    include_breaking: bool = True
    group_by_type: bool = True
    commit_types: dict = field(default_factory=lambda: dict(DEFAULT_COMMIT_TYPE_LABELS))

    def to_dict(self) -> dict:
        return {k: v for k, v in asdict(self).items() if v is not None}

    def validate(self) -> list[str]:
        """Validate config values and return list of warnings.

        Invalid values are replaced with defaults silently after warning.
        """
        warnings = []
        defaults = Config()

        if self.grouping not in VALID_GROUPINGS:
            warnings.append(f"Invalid grouping '{self.grouping}', using '{defaults.grouping}'")
            self.grouping = defaults.grouping

        if self.output_format not in VALID_FORMATS:
            warnings.append(f"Invalid output_format '{self.output_format}', using '{defaults.output_format}'")
            self.output_format = defaults.output_format

        for name in ("max_suggestions", "max_individual_files", "max_file_display"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                warnings.append(f"Invalid {name} '{value}', using {getattr(defaults, name)}")
                setattr(self, name, getattr(defaults, name))

        if not isinstance(self.commit_types, dict):
            warnings.append("Invalid commit_types, using defaults")
            self.commit_types = defaults.commit_types

        return warnings

    @classmethod
    def from_dict(cls, data: dict) -> 'Config':
        valid_keys = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in data.items() if k in valid_keys}
        config = cls(**filtered)
        # Validate and print warnings to stderr
        for warning in config.validate():
            print(f"Config warning: {warning}", file=sys.stderr)
        return config


class ConfigManager:
    """Manages loading and saving configuration."""

    CONFIG_FILENAME = ".ccraftrc"

    def __init__(self):
        self._config: Optional[Config] = None
        self._config_path: Optional[Path] = None

    def load(self) -> Config:
        if self._config is not None:
            return self._config

        local_path = Path.cwd() / self.CONFIG_FILENAME
        if local_path.exists():
            self._config = self._load_from_file(local_path)
            self._config_path = local_path
            return self._config

        home_path = Path.home() / self.CONFIG_FILENAME
        if home_path.exists():
            self._config = self._load_from_file(home_path)
            self._config_path = home_path
            return self._config

        self._config = Config()
        return self._config

    def _load_from_file(self, path: Path) -> Config:
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError("top-level value must be an object")
            return Config.from_dict(data)
        except (json.JSONDecodeError, ValueError, IOError) as e:
            print(f"Warning: Could not load {path}: {e}", file=sys.stderr)
            return Config()

    def save(self, config: Config, global_config: bool = True) -> Path:
        path = Path.home() / self.CONFIG_FILENAME if global_config else Path.cwd() / self.CONFIG_FILENAME
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(config.to_dict(), f, indent=2, ensure_ascii=False)
        return path

    def get_config_path(self) -> Optional[Path]:
        return self._config_path


_manager = ConfigManager()


def load_config() -> Config:
    return _manager.load()


def save_config(config: Config, global_config: bool = True) -> Path:
    return _manager.save(config, global_config)


def get_config_path() -> Optional[Path]:
    return _manager.get_config_path()


__all__ = [
    "Config",
    "ConfigManager",
    "load_config",
    "save_config",
    "get_config_path",
    "VALID_GROUPINGS",
    "VALID_FORMATS",
    "DEFAULT_COMMIT_TYPE_LABELS",
]
