"""Creation of a project env file from the packaged stub."""

from __future__ import annotations

import logging
import re
from pathlib import Path

logger = logging.getLogger(__name__)

STUB_PATH = Path(__file__).parent / "stubs" / "env.stub"

ENVIRONMENTS = {
    "dev": "Development (dev)",
    "prod": "Production (prod)",
    "stag": "Staging (stag)",
}

_APP_ENV_LINE = re.compile(r"^APP_ENV=.*$", re.MULTILINE)


def compile_stub(content: str, environment: str) -> str:
    """Fill in the ``APP_ENV=`` line of a stub."""
    if environment not in ENVIRONMENTS:
        raise ValueError(
            f"Unknown environment '{environment}'. Choose one of: {', '.join(ENVIRONMENTS)}"
        )

    compiled, count = _APP_ENV_LINE.subn(f"APP_ENV={environment}", content)
    if count == 0:
        compiled = f"APP_ENV={environment}\n{content}"

    return compiled


def write_env_file(
    env_path: str | Path,
    environment: str,
    stub_path: str | Path = STUB_PATH,
    force: bool = False,
) -> bool:
    """
    Write an env file compiled from the stub.

    Args:
        env_path: Where to write the env file
        environment: One of the ENVIRONMENTS keys
        stub_path: Template to compile (default: the packaged stub)
        force: Overwrite an existing env file

    Returns:
        True if the file was written, False if it already existed
    """
    env_path = Path(env_path)

    if env_path.exists() and not force:
        logger.debug("Not overwriting existing %s", env_path)
        return False

    content = Path(stub_path).read_text(encoding="utf-8")
    env_path.parent.mkdir(parents=True, exist_ok=True)
    env_path.write_text(compile_stub(content, environment), encoding="utf-8")
    logger.info("Wrote %s for environment '%s'", env_path, environment)

    return True
