"""Configuration for the snippet checker."""

import copy
import json
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from .core.errors import ConfigurationError
from .core.issues import ISSUE_KINDS
from .core.reporting import REPORT_FORMATS

CONFIG_ENV_VAR = "SNIPPETCHECK_CONFIG"
CONFIG_FILE_NAMES = [".snippetcheck.yml", ".snippetcheck.yaml", "snippetcheck.yml", "snippetcheck.yaml"]

LIST_KEYS = ("content.exclude", "globals.extra", "ignore_issue_types")
STRING_KEYS = ("content.root", "content.extension", "report.output")


class Config:
    """Configuration manager with dot-separated key access."""

    DEFAULT_CONFIG = {
        "content": {
            "root": "docs",
            "extension": ".mdx",
            "exclude": ["node_modules"],
        },
        "report": {
            "output": "/tmp/mdx-import-issues.json",
            "format": "json",  # Options: json, yaml
        },
        "globals": {
            "extra": [],
        },
        "analysis": {
            "skip_on_syntax_error": False,
        },
        "ignore_issue_types": [],
    }

    def __init__(self, config_dict: Optional[Dict] = None, source: Optional[Path] = None):
        """Initialize with optional config dictionary."""
        self.config = self._merge_configs(copy.deepcopy(self.DEFAULT_CONFIG), config_dict or {})
        self.source = source
        self.validate()

    def validate(self) -> None:
        """Check value types.

        Raises:
            ConfigurationError: if a value has the wrong type
        """
        where = f" in {self.source}" if self.source else ""
        for key in LIST_KEYS:
            value = self.get(key, [])
            if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
                raise ConfigurationError(f"{key} must be a list of strings{where}, got {value!r}")
        for key in STRING_KEYS:
            value = self.get(key)
            if not isinstance(value, str) or not value:
                raise ConfigurationError(f"{key} must be a non-empty string{where}, got {value!r}")
        if self.get("report.format") not in REPORT_FORMATS:
            raise ConfigurationError(
                f"report.format must be one of {', '.join(REPORT_FORMATS)}{where}, got {self.get('report.format')!r}"
            )
        unknown = [kind for kind in self.get("ignore_issue_types", []) if kind not in ISSUE_KINDS]
        if unknown:
            raise ConfigurationError(f"Unknown issue types in ignore_issue_types{where}: {', '.join(unknown)}")
        if not isinstance(self.get("analysis.skip_on_syntax_error", False), bool):
            raise ConfigurationError(f"analysis.skip_on_syntax_error must be true or false{where}")

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "Config":
        """Load configuration from a YAML or JSON file.

        Raises:
            ConfigurationError: if the file is missing, unreadable or malformed
        """
        path = Path(path)
        if not path.exists():
            raise ConfigurationError(f"Configuration file not found: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                if path.suffix in [".yaml", ".yml"]:
                    data = yaml.safe_load(f) or {}
                elif path.suffix == ".json":
                    data = json.load(f)
                else:
                    raise ConfigurationError(f"Unsupported config format: {path.suffix}")
        except (OSError, yaml.YAMLError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Failed to read configuration {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Configuration {path} must be a mapping, got {type(data).__name__}")
        return cls(data, source=path)

    @classmethod
    def find_and_load(cls, start_path: Path) -> "Config":
        """Find and load configuration from standard locations.

        ``SNIPPETCHECK_CONFIG`` wins; otherwise the first config file found
        walking up from ``start_path`` is used.
        """
        env_path = os.getenv(CONFIG_ENV_VAR)
        if env_path:
            return cls.from_file(env_path)

        current = Path(start_path).resolve()
        while True:
            for name in CONFIG_FILE_NAMES:
                config_path = current / name
                if config_path.exists():
                    return cls.from_file(config_path)
            if current == current.parent:
                break
            current = current.parent

        return cls()

    def get(self, key: str, default=None):
        """Get configuration value by dot-separated key."""
        keys = key.split(".")
        value = self.config

        for k in keys:
            if isinstance(value, dict):
                value = value.get(k)
                if value is None:
                    return default
            else:
                return default

        return value

    def set(self, key: str, value):
        """Set configuration value by dot-separated key."""
        keys = key.split(".")
        config = self.config

        for k in keys[:-1]:
            if k not in config or not isinstance(config[k], dict):
                config[k] = {}
            config = config[k]

        config[keys[-1]] = value

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return copy.deepcopy(self.config)

    def to_yaml(self) -> str:
        return yaml.safe_dump(self.config, default_flow_style=False, sort_keys=False)

    def _merge_configs(self, base: Dict, override: Dict) -> Dict:
        """Recursively merge configuration dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_configs(result[key], value)
            else:
                result[key] = value

        return result


def create_default_config_file(path: Union[str, Path]) -> Path:
    """Write the default configuration as YAML to ``path``."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(Config().to_yaml(), encoding="utf-8")
    return path
