"""Built-in sink loader for envstore.

This module registers all built-in sinks with the SinkRegistry.
"""

from . import SinkRegistry
from .mapping import EnvSink, ServerSink
from .putenv import PutenvSink


def register_built_in_sinks() -> None:
    """Register the putenv, env and server sinks with the registry.

    MappingSink needs a target mapping, so it is only used as an instance.

    This function is idempotent - it can be called multiple times safely,
    including after SinkRegistry.clear().
    """
    for sink_class in (PutenvSink, EnvSink, ServerSink):
        if not SinkRegistry.is_registered(sink_class.info.name):
            SinkRegistry.register(sink_class)


# Auto-register on import
register_built_in_sinks()
