"""
Environment variable store for envstore.

This module holds the loaded variables and the typed accessor layer on top of
them. A store is an explicit object: hosts that want one store per process
wire it as a singleton (see ``envstore.facade``), tests build a fresh one.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Iterable

from .coercer import CoercedValue, coerce
from .config import EnvStoreConfig
from .parser import parse_file
from .sinks import EnvironmentSink, SinkError, SinkRegistry
from .sinks.built_in import register_built_in_sinks
from .sinks.putenv import PutenvSink
from .validator import RequiredKeysValidator

logger = logging.getLogger(__name__)

RawValue = str | None


class EnvStore:
    """
    Loads env files and gives typed access to their variables.

    This class handles:
    - Merging parsed env files into one ordered set of variables
    - Coercing raw values on read, with lazy defaults
    - Checking required keys after every mutation
    - Publishing variables to environment sinks

    Mutations are validated after they are applied and are not rolled back
    when validation fails: the new values stay visible and the error is
    raised to the caller. Sinks are only written when validation passes.

    The store is not thread-safe. It is meant to be filled once at startup
    and read afterwards; hosts sharing it across threads must serialize
    access themselves.

    Example:
        store = EnvStore()
        store.load("/path/to/app", ".env")
        debug = store.get("APP_DEBUG", False)
    """

    def __init__(
        self,
        config: EnvStoreConfig | None = None,
        sinks: Mapping[str, EnvironmentSink] | None = None,
    ) -> None:
        """
        Initialize the store.

        Args:
            config: Store configuration; required keys are taken from it
            sinks: Sink instances by name, overriding the registered ones
        """
        self.config = config or EnvStoreConfig()
        self._variables: dict[str, RawValue] = {}
        self._populated = False
        self._validator = RequiredKeysValidator(self.config.required)
        self._sinks: dict[str, EnvironmentSink] = dict(sinks or {})

    def load(self, directory: str | Path, file_name: str | None = None) -> None:
        """
        Load an env file and merge it into the store.

        Keys already loaded take the new value but keep their position.

        Args:
            directory: Directory containing the env file
            file_name: Name of the env file (default: config.env_file)

        Raises:
            EnvFileNotFoundError: If the file does not exist
            MissingVariableError: If a required key is missing after the merge
        """
        file_name = file_name or self.config.env_file
        values = parse_file(directory, file_name)

        self._variables.update(values)
        self._populated = True
        logger.debug("Loaded %d variable(s) from %s", len(values), Path(directory) / file_name)

        self._validator.validate(self._variables)

        for sink_name in self.config.auto_publish:
            self.publish(sink_name)

    def get(self, key: str, default: Any = None) -> CoercedValue | Any:
        """
        Get the coerced value of a variable.

        A variable that is absent, None or an empty string is a miss. On a
        miss ``default`` is returned, or called if it is callable, so that
        expensive defaults are only computed when needed.
        """
        raw = self._variables.get(key)

        if raw is None or raw == "":
            return default() if callable(default) else default

        return coerce(raw)

    def get_or_fail(self, key: str) -> CoercedValue:
        """
        Get the coerced value of a variable that must be set.

        Raises:
            MissingValueError: If the variable is absent, None or empty
        """
        raw = self._variables.get(key)

        if raw is None or raw == "":
            raise MissingValueError(key)

        return coerce(raw)

    def set(self, key: str | Mapping[str, Any], value: Any = None) -> None:
        """
        Set one variable, or several from a mapping.

        Booleans are stored as "true"/"false" and other non-string values
        with str(), so that they read back through ``get`` as given.

        Raises:
            MissingVariableError: If a required key is missing afterwards
        """
        if isinstance(key, Mapping):
            if value is not None:
                raise TypeError("value must not be given when setting from a mapping")
            updates = dict(key)
        else:
            updates = {key: value}

        for name in updates:
            if not isinstance(name, str) or not name:
                raise ValueError(f"Invalid variable name: {name!r}")

        for name, raw in updates.items():
            self._variables[name] = _to_raw(raw)
        self._populated = True

        self._validator.validate(self._variables)

    def set_required(self, keys: Iterable[str]) -> None:
        """
        Replace the required keys and check them against the current variables.

        Before the first load or set (or after a flush) the check is left to
        the next load or set. A load that found no variables still counts.

        Raises:
            MissingVariableError: If any of the new required keys is missing
        """
        self._validator.set_required(keys)

        if self._populated:
            self._validator.validate(self._variables)

    @property
    def required(self) -> tuple[str, ...]:
        return self._validator.required

    def flush(self) -> None:
        """Remove every loaded variable. Required keys are left unchanged."""
        self._variables.clear()
        self._populated = False

    def all(self) -> dict[str, CoercedValue]:
        """Return a snapshot of all variables with coerced values, in load order."""
        return {key: coerce(raw) for key, raw in self._variables.items()}

    def raw(self) -> dict[str, RawValue]:
        """Return a snapshot of all variables as loaded."""
        return dict(self._variables)

    def has(self, key: str) -> bool:
        """Check if a variable is loaded, whatever its value."""
        return key in self._variables

    def __contains__(self, key: object) -> bool:
        return key in self._variables

    def __len__(self) -> int:
        return len(self._variables)

    def publish(self, sink: str | EnvironmentSink) -> int:
        """
        Copy every variable, as loaded, into a sink.

        Args:
            sink: A sink instance, or the name of a configured or registered sink

        Returns:
            The number of variables written
        """
        if isinstance(sink, str):
            sink = self._resolve_sink(sink)

        return sink.publish(self._variables)

    def copy_vars_to_putenv(self, prefix: str | None = None) -> int:
        """Copy variables into the process environment as ``<prefix><KEY>``."""
        if prefix is not None:
            return self.publish(PutenvSink(prefix))
        return self.publish("putenv")

    def copy_vars_to_env(self) -> int:
        """Copy variables, unprefixed, into the ``ENV`` mapping."""
        return self.publish("env")

    def copy_vars_to_server(self) -> int:
        """Copy variables, unprefixed, into the ``SERVER`` mapping."""
        return self.publish("server")

    def _resolve_sink(self, name: str) -> EnvironmentSink:
        """Find a sink by name: injected first, then configured, then registered."""
        if name in self._sinks:
            return self._sinks[name]

        sink_type = name
        options: dict[str, Any] = {}

        sink_config = self.config.get_sink_config(name)
        if sink_config is not None:
            if not sink_config.enabled:
                raise SinkError("Sink is disabled in configuration", sink=name)
            sink_type = sink_config.type
            options = dict(sink_config.config)

        if sink_type == "putenv":
            options.setdefault("prefix", self.config.putenv_prefix)

        register_built_in_sinks()
        instance = SinkRegistry.get(sink_type, options or None)

        self._sinks[name] = instance
        return instance


def _to_raw(value: Any) -> RawValue:
    """Convert a value given to ``set`` to its stored form."""
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class MissingValueError(LookupError):
    """Exception raised when a variable read with get_or_fail has no value."""

    def __init__(self, key: str) -> None:
        self.key = key
        self.message = f"Environment variable [{key}] has no value."
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message
