"""
envstore: .env file loading with typed access and required-key validation.

This package parses `.env` files into an ordered store, converts literal
values (true, false, empty, null, quoted strings) on read, checks that
required variables are set, and copies loaded variables into the process
environment or other sinks.

Basic Usage:
    from envstore import EnvStore

    store = EnvStore()
    store.set_required(["DB_HOST"])
    store.load("/path/to/app")
    store.get("APP_DEBUG", False)
"""

from .cli import main
from .coercer import coerce
from .config import ConfigurationError, EnvStoreConfig
from .facade import env, env_or_fail, get_store
from .parser import EnvFileError, EnvFileNotFoundError
from .sinks import EnvironmentSink, SinkError, SinkRegistry
from .store import EnvStore, MissingValueError
from .validator import MissingVariableError

__version__ = "1.0.0"
__all__ = [
    "main",
    "coerce",
    "ConfigurationError",
    "EnvStoreConfig",
    "env",
    "env_or_fail",
    "get_store",
    "EnvFileError",
    "EnvFileNotFoundError",
    "EnvironmentSink",
    "SinkError",
    "SinkRegistry",
    "EnvStore",
    "MissingValueError",
    "MissingVariableError",
]
