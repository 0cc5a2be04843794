"""
Process-wide access to a single EnvStore.

Application code that does not carry a store around uses these helpers:

    from envstore import env

    host = env("APP_HOST", "127.0.0.1")

The store is built on first use and loads ``<base_path>/<env_file>`` once.
When putenv is enabled (the default) the loaded variables are also copied
into the process environment under their own names. This prefix is set with
``enable_putenv`` and is separate from ``putenv_prefix`` in the configuration,
which only applies to ``EnvStore.copy_vars_to_putenv``.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from .coercer import CoercedValue
from .config import EnvStoreConfig
from .parser import EnvFileNotFoundError
from .store import EnvStore

logger = logging.getLogger(__name__)

_store: EnvStore | None = None
_putenv = True
_putenv_prefix = ""


def enable_putenv(prefix: str = "") -> None:
    """Copy variables into os.environ as ``<prefix><KEY>`` when the store loads."""
    global _putenv, _putenv_prefix, _store
    _putenv = True
    _putenv_prefix = prefix
    _store = None


def disable_putenv() -> None:
    """Stop copying variables into the process environment when the store loads."""
    global _putenv, _store
    _putenv = False
    _store = None


def get_store(config: EnvStoreConfig | None = None) -> EnvStore:
    """
    Return the process-wide store, creating and loading it on first use.

    A missing env file is not an error here: the store is left empty so
    that callers fall back to their defaults.

    Args:
        config: Configuration used when the store is created; ignored afterwards
    """
    global _store

    if _store is not None:
        return _store

    config = config or EnvStoreConfig.load()
    store = EnvStore(config)
    base_path = Path(config.base_path) if config.base_path else Path.cwd()

    try:
        store.load(base_path, config.env_file)
    except EnvFileNotFoundError as exc:
        logger.info("No environment file loaded: %s", exc)
    else:
        if _putenv and "putenv" not in config.auto_publish:
            store.copy_vars_to_putenv(_putenv_prefix)

    _store = store
    return store


def set_store(store: EnvStore) -> None:
    """Install an existing store as the process-wide one."""
    global _store
    _store = store


def reset_store() -> None:
    """Drop the process-wide store; the next access builds a new one."""
    global _store
    _store = None


def env(key: str, default: Any = None) -> CoercedValue | Any:
    """Get a variable from the process-wide store. See EnvStore.get."""
    return get_store().get(key, default)


def env_or_fail(key: str) -> CoercedValue:
    """Get a variable that must be set. See EnvStore.get_or_fail."""
    return get_store().get_or_fail(key)
