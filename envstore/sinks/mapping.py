"""
Mapping sinks for envstore.

``ENV`` and ``SERVER`` are process-wide dictionaries that application code
reads for environment and request introspection. ``EnvSink`` and
``ServerSink`` copy loaded variables into them, unprefixed. ``MappingSink``
writes into any mutable mapping, which makes it the sink of choice for
in-memory substitution in tests.
"""

from __future__ import annotations

from typing import MutableMapping

from . import EnvironmentSink, SinkInfo

ENV: dict[str, str | None] = {}
SERVER: dict[str, str | None] = {}


class MappingSink(EnvironmentSink):
    """Writes variables into an arbitrary mutable mapping."""

    info = SinkInfo(
        name="mapping",
        description="In-memory mapping",
        version="1.0.0",
        author="envstore contributors",
    )

    def __init__(self, target: MutableMapping[str, str | None] | None = None) -> None:
        super().__init__()
        self.target = {} if target is None else target

    def write(self, key: str, value: str | None) -> None:
        self.target[key] = value


class EnvSink(MappingSink):
    """Writes variables into the process-wide ``ENV`` mapping."""

    info = SinkInfo(
        name="env",
        description="Process-wide ENV mapping",
        version="1.0.0",
        author="envstore contributors",
    )

    def __init__(self) -> None:
        super().__init__(ENV)


class ServerSink(MappingSink):
    """Writes variables into the process-wide ``SERVER`` mapping."""

    info = SinkInfo(
        name="server",
        description="Process-wide SERVER mapping",
        version="1.0.0",
        author="envstore contributors",
    )

    def __init__(self) -> None:
        super().__init__(SERVER)
