"""
Configuration management for envstore.

This module handles loading and parsing configuration files for the store,
including required keys, sink options and which sinks a successful load
publishes to.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .parser import DEFAULT_ENV_FILE
from .sinks.putenv import DEFAULT_PREFIX


@dataclass
class SinkConfig:
    """Configuration for a single sink."""

    name: str
    type: str
    enabled: bool = True
    config: dict[str, Any] = field(default_factory=dict)


@dataclass
class EnvStoreConfig:
    """Main configuration for envstore."""

    env_file: str = DEFAULT_ENV_FILE
    base_path: str | None = None
    required: list[str] = field(default_factory=list)
    putenv_prefix: str = DEFAULT_PREFIX
    auto_publish: list[str] = field(default_factory=list)
    sinks: list[SinkConfig] = field(default_factory=list)

    @classmethod
    def load(cls, config_path: str | Path | None = None) -> "EnvStoreConfig":
        """
        Load configuration from a YAML file.

        Args:
            config_path: Path to the configuration file. If None, searches
                        for config in standard locations.

        Returns:
            An EnvStoreConfig instance with the loaded configuration.
        """
        if config_path is None:
            config_path = cls._find_config_file()

        if config_path is None or not Path(config_path).exists():
            return cls()

        return cls._parse_config_file(config_path)

    @classmethod
    def _find_config_file(cls) -> str | None:
        """Search for config file in standard locations."""
        search_paths = [
            Path.cwd() / ".envstore.yaml",
            Path.cwd() / ".envstore.yml",
            Path.cwd() / "envstore.yaml",
            Path.cwd() / "envstore.yml",
            Path.home() / ".config" / "envstore.yaml",
            Path.home() / ".envstore.yaml",
        ]

        for path in search_paths:
            if path.exists():
                return str(path)

        return None

    @classmethod
    def _parse_config_file(cls, config_path: str | Path) -> "EnvStoreConfig":
        """Parse a YAML configuration file."""
        path = Path(config_path)

        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"Invalid YAML in config file: {exc}", exc) from exc

        if data is None:
            return cls()

        if not isinstance(data, dict):
            raise ConfigurationError(f"Config file must contain a mapping: {path}")

        sinks = []
        for sink_data in data.get("sinks", []):
            name = sink_data.get("name", "")
            sinks.append(
                SinkConfig(
                    name=name,
                    type=sink_data.get("type", name),
                    enabled=sink_data.get("enabled", True),
                    config=sink_data.get("config", {}),
                )
            )

        required = data.get("required", [])
        if isinstance(required, str):
            required = [required]

        auto_publish = data.get("auto_publish", [])
        if isinstance(auto_publish, str):
            auto_publish = [auto_publish]

        return cls(
            env_file=data.get("env_file", DEFAULT_ENV_FILE),
            base_path=data.get("base_path"),
            required=[str(key) for key in required],
            putenv_prefix=str(data.get("putenv_prefix", DEFAULT_PREFIX)),
            auto_publish=[str(name) for name in auto_publish],
            sinks=sinks,
        )

    def get_sink_config(self, sink_name: str) -> SinkConfig | None:
        """Get configuration for a specific sink."""
        for sink in self.sinks:
            if sink.name == sink_name:
                return sink
        return None


class ConfigurationError(Exception):
    """Exception raised for configuration errors."""

    def __init__(self, message: str, from_exception: Exception | None = None) -> None:
        self.message = message
        self.from_exception = from_exception
        super().__init__(message)
        if from_exception:
            self.__cause__ = from_exception
