"""
Environment file parser for envstore.

This module turns the text of a ``.env`` file into an ordered mapping of
keys to raw values. Values are kept exactly as found in the file (quotes
included); turning them into typed values is left to ``envstore.coercer``.

Format:
    # full-line comment
    KEY=value
    QUOTED = "kept with its quotes"

Lines that cannot be parsed, or whose key is not a letter or underscore
followed by letters, digits, underscores or dots, are skipped rather than
reported.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

logger = logging.getLogger(__name__)

DEFAULT_ENV_FILE = ".env"

KEY_PATTERN = re.compile(r"\A[A-Za-z_][A-Za-z0-9_.]*\Z")


@dataclass
class EnvVariable:
    """Represents a single environment variable from an env file."""

    key: str
    value: str
    line_number: int
    raw_line: str


def parse_lines(lines: Iterable[str]) -> list[EnvVariable]:
    """Parse lines into EnvVariable objects, in file order."""
    variables = []

    for line_num, line in enumerate(lines, 1):
        stripped_line = line.strip()

        if not stripped_line or stripped_line.startswith("#"):
            continue

        if "=" not in stripped_line:
            logger.debug("Skipping line %d: no '=' found", line_num)
            continue

        key, raw_value = stripped_line.split("=", 1)
        key = key.strip()

        if not key:
            logger.debug("Skipping line %d: empty key", line_num)
            continue

        if not KEY_PATTERN.match(key):
            logger.debug("Skipping line %d: invalid key %r", line_num, key)
            continue

        variables.append(
            EnvVariable(
                key=key,
                value=raw_value.strip(),
                line_number=line_num,
                raw_line=line,
            )
        )

    return variables


def parse_text(text: str) -> dict[str, str]:
    """
    Parse the contents of an env file.

    Keys keep the position of their first occurrence; a key repeated later
    in the same text takes the later value.
    """
    return {var.key: var.value for var in parse_lines(text.splitlines())}


def parse_file(directory: str | Path, file_name: str = DEFAULT_ENV_FILE) -> dict[str, str]:
    """
    Read and parse ``directory/file_name``.

    Args:
        directory: Directory containing the env file
        file_name: Name of the env file (default: ".env")

    Returns:
        An insertion-ordered mapping of key to raw value

    Raises:
        EnvFileNotFoundError: If the file does not exist
        EnvFileError: If the file exists but cannot be read
    """
    path = Path(directory) / file_name

    if not path.is_file():
        raise EnvFileNotFoundError(f"Environment file not found: {path}", path)

    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise EnvFileError(f"Error reading environment file {path}: {exc}", path=path) from exc

    variables = parse_text(content)
    logger.debug("Parsed %d variable(s) from %s", len(variables), path)

    return variables


class EnvFileError(Exception):
    """Exception raised for environment file errors."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        self.message = message
        self.path = path
        super().__init__(message)


class EnvFileNotFoundError(EnvFileError, FileNotFoundError):
    """Raised when the requested env file does not exist."""
