"""
Sink Interface and Registry for envstore.

A sink is an external key/value surface that loaded variables can be copied
into: the process environment, or one of the process-wide ``ENV`` and
``SERVER`` mappings. Publishing is additive; sinks never remove keys they did
not write.

Usage:
    from envstore.sinks import EnvironmentSink, SinkInfo, SinkRegistry

    # Create a custom sink
    class MySink(EnvironmentSink):
        info = SinkInfo(name="my_sink", description="My custom sink")

        def write(self, key: str, value: str | None) -> None:
            # Implementation here
            pass

    # Register the sink
    SinkRegistry.register(MySink)

    # Get a sink instance
    sink = SinkRegistry.get("my_sink")
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Mapping

logger = logging.getLogger(__name__)


@dataclass
class SinkInfo:
    """Metadata about a sink."""

    name: str
    description: str
    version: str = "1.0.0"
    author: str = ""


class EnvironmentSink(ABC):
    """
    Base class for all environment sinks.

    To create a custom sink:
    1. Inherit from EnvironmentSink
    2. Set the `info` class attribute with sink metadata
    3. Implement the `write` method
    4. Optionally implement `configure` to accept options
    5. Register the sink with SinkRegistry.register()
    """

    info: SinkInfo

    @abstractmethod
    def write(self, key: str, value: str | None) -> None:
        """
        Write a single variable to the sink.

        Args:
            key: The variable name, unprefixed
            value: The raw value as loaded
        """
        ...

    def publish(self, values: Mapping[str, str | None]) -> int:
        """
        Write every variable in ``values`` to the sink.

        Returns:
            The number of variables written
        """
        for key, value in values.items():
            self.write(key, value)

        logger.debug("Published %d variable(s) to sink '%s'", len(values), self.info.name)
        return len(values)

    def configure(self, config: dict[str, Any]) -> None:
        """Configure the sink with options. The default accepts nothing."""
        if config:
            raise SinkError(
                f"Sink does not accept options: {', '.join(sorted(config))}",
                sink=self.info.name,
            )


class SinkRegistry:
    """
    Registry for discovering and managing environment sinks.

    The registry maintains a mapping of sink names to sink classes, and
    caches one configured instance per name.
    """

    _sinks: dict[str, type[EnvironmentSink]] = {}
    _instances: dict[str, EnvironmentSink] = {}

    @classmethod
    def register(cls, sink_class: type[EnvironmentSink], name: str | None = None) -> None:
        """
        Register a sink class with the registry.

        Args:
            sink_class: The sink class to register
            name: Optional custom name, defaults to sink.info.name

        Raises:
            ValueError: If sink class is missing required attributes
            KeyError: If a sink with the same name is already registered
        """
        if not hasattr(sink_class, "info") or not isinstance(sink_class.info, SinkInfo):
            raise ValueError(f"Sink {sink_class.__name__} must have a SinkInfo attribute")

        sink_name = name or sink_class.info.name

        if sink_name in cls._sinks:
            raise KeyError(f"Sink '{sink_name}' is already registered")

        cls._sinks[sink_name] = sink_class

    @classmethod
    def get(cls, name: str, config: dict[str, Any] | None = None) -> EnvironmentSink:
        """
        Get an instance of a sink by name.

        Args:
            name: The name of the sink to get
            config: Optional configuration for the sink instance

        Returns:
            An instance of the requested sink

        Raises:
            SinkError: If no sink with the given name is registered
        """
        if name not in cls._sinks:
            available = ", ".join(cls._sinks.keys())
            raise SinkError(f"Sink '{name}' not found. Available sinks: {available}")

        # Cache instances for reuse
        if name not in cls._instances or config is not None:
            instance = cls._sinks[name]()

            if config:
                instance.configure(config)

            cls._instances[name] = instance

        return cls._instances[name]

    @classmethod
    def list_sinks(cls) -> list[SinkInfo]:
        """List all registered sinks with their metadata."""
        return [sink.info for sink in cls._sinks.values()]

    @classmethod
    def is_registered(cls, name: str) -> bool:
        """Check if a sink is registered."""
        return name in cls._sinks

    @classmethod
    def clear(cls) -> None:
        """Clear all registered sinks and instances."""
        cls._sinks.clear()
        cls._instances.clear()

    @classmethod
    def discover_plugins(cls, entry_point_group: str = "envstore.sinks") -> None:
        """
        Discover and register sinks from installed packages.

        Entry points that fail to load, or that do not point at an
        EnvironmentSink subclass, are logged and skipped.

        Args:
            entry_point_group: The entry point group name to search
        """
        from importlib.metadata import entry_points

        for ep in entry_points(group=entry_point_group):
            try:
                sink_class = ep.load()
            except Exception as exc:
                logger.warning("Could not load sink plugin '%s': %s", ep.name, exc)
                continue

            if not (isinstance(sink_class, type) and issubclass(sink_class, EnvironmentSink)):
                logger.warning("Plugin '%s' is not an EnvironmentSink, skipping", ep.name)
                continue

            if not cls.is_registered(sink_class.info.name):
                cls.register(sink_class)


class SinkError(Exception):
    """Base exception for sink-related errors."""

    def __init__(self, message: str, sink: str | None = None):
        self.message = message
        self.sink = sink
        super().__init__(message)

    def __str__(self) -> str:
        if self.sink:
            return f"[{self.sink}] {self.message}"
        return self.message
