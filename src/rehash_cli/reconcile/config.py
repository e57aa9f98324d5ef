"""Configuration for fingerprint reconciliation."""

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import List, Union

import yaml

from .constants import (
    DEFAULT_HASH_FUNCTION,
    DEFAULT_MANIFEST_CHUNK_NAME,
    DEFAULT_MANIFEST_JSON_NAME,
    DEFAULT_SCRIPT_EXTENSIONS,
)
from .errors import ConfigurationError


DEFAULT_CONFIG_FILE = "rehash.yml"


@dataclass
class ReconcileConfig:
    """Options for a reconciliation run."""
    manifest_json_name: str = DEFAULT_MANIFEST_JSON_NAME
    hash_function: str = DEFAULT_HASH_FUNCTION
    manifest_chunk_name: str = DEFAULT_MANIFEST_CHUNK_NAME
    script_extensions: List[str] = field(default_factory=lambda: list(DEFAULT_SCRIPT_EXTENSIONS))

    @classmethod
    def from_yml(cls, path: Union[str, Path, None] = None, **overrides) -> 'ReconcileConfig':
        """Create configuration from a rehash.yml file with command-line overrides.

        Values are read from the file's ``reconcile`` section. A missing file
        means defaults; overrides that are None are ignored.

        Args:
            path: Config file, ``rehash.yml`` in the working directory by default.
            **overrides: Command-line values that take precedence over the file.

        Returns:
            ReconcileConfig: Configuration with file values and overrides applied.

        Raises:
            ConfigurationError: If the file is not valid YAML or has unknown keys.
        """
        config = cls()
        known = {f.name for f in fields(cls)}
        config_path = Path(path) if path else Path(DEFAULT_CONFIG_FILE)

        if config_path.exists():
            try:
                with open(config_path, 'r', encoding='utf-8') as f:
                    data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Invalid YAML in {config_path}: {e}")

            section = data.get('reconcile', {}) if isinstance(data, dict) else None
            if not isinstance(section, dict):
                raise ConfigurationError(f"'reconcile' section of {config_path} must be a mapping")
            for key, value in section.items():
                attr = key.replace('-', '_')
                if attr not in known:
                    raise ConfigurationError(f"Unknown option '{key}' in {config_path}")
                setattr(config, attr, value)

        # Command-line overrides (highest priority)
        for key, value in overrides.items():
            if value is not None:
                setattr(config, key, value)

        config.validate()
        return config

    def validate(self) -> None:
        """Check option types.

        Raises:
            ConfigurationError: On the first invalid option.
        """
        for name in ('manifest_json_name', 'hash_function', 'manifest_chunk_name'):
            value = getattr(self, name)
            if not isinstance(value, str) or not value:
                raise ConfigurationError(f"'{name}' must be a non-empty string")
        if isinstance(self.script_extensions, str):
            self.script_extensions = [self.script_extensions]
        extensions = self.script_extensions
        if not isinstance(extensions, (list, tuple)) or not extensions:
            raise ConfigurationError("'script_extensions' must be a list of extensions")
        if not all(isinstance(ext, str) and ext for ext in extensions):
            raise ConfigurationError("'script_extensions' must be a list of extensions")
        self.script_extensions = [ext.lstrip('.') for ext in extensions]

    def describe(self) -> str:
        """One-line summary for console output."""
        return (
            f"manifest json: {self.manifest_json_name}, hash: {self.hash_function}, "
            f"scripts: {', '.join(self.script_extensions)}"
        )
