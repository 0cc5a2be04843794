"""
Process environment sink for envstore.

Copies loaded variables into ``os.environ`` under a prefixed name, so that
child processes and code reading the environment directly can see them.

Example:
    # With DB_USER=root loaded:
    os.environ["PHP_DB_USER"] == "root"
"""

from __future__ import annotations

import os
from typing import Any, MutableMapping

from . import EnvironmentSink, SinkError, SinkInfo

DEFAULT_PREFIX = "PHP_"


class PutenvSink(EnvironmentSink):
    """
    Process environment sink.

    Configuration:
        prefix: String prepended to every key (default: "PHP_")

    The process environment only holds strings, so a None value is
    written as an empty string.
    """

    info = SinkInfo(
        name="putenv",
        description="Process environment (prefixed keys)",
        version="1.0.0",
        author="envstore contributors",
    )

    def __init__(
        self,
        prefix: str = DEFAULT_PREFIX,
        environ: MutableMapping[str, str] | None = None,
    ) -> None:
        super().__init__()
        self.prefix = prefix
        self._environ = os.environ if environ is None else environ

    def write(self, key: str, value: str | None) -> None:
        self._environ[f"{self.prefix}{key}"] = "" if value is None else value

    def configure(self, config: dict[str, Any]) -> None:
        """Configure the putenv sink with options."""
        unknown = set(config) - {"prefix"}
        if unknown:
            raise SinkError(f"Unknown options: {', '.join(sorted(unknown))}", sink=self.info.name)

        if "prefix" in config:
            self.prefix = str(config["prefix"])


def create_sink(prefix: str = DEFAULT_PREFIX) -> PutenvSink:
    """Factory function to create a PutenvSink instance."""
    return PutenvSink(prefix)
