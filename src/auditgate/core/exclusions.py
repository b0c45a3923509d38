"""Exclusions file loading.

The exclusions file (.iyarc by default) holds advisory ids separated by
commas or newlines. Everything after a "#" on a line is a comment:

    # lodash prototype pollution, no fix upstream yet
    1065, 1066
    782  # dev server only

Provides:
- parse_exclusions_file: Parse exclusions file content
- load_exclusions_file: Read and parse an exclusions file, if present
- resolve_exclusions: Command line exclusions, falling back to the file
"""

from pathlib import Path

import structlog

from auditgate.core.config import parse_exclusions
from auditgate.core.errors import ConfigError

logger = structlog.get_logger()


def parse_exclusions_file(content: str) -> frozenset[int]:
    stripped = [line.split("#", 1)[0] for line in content.splitlines()]
    return parse_exclusions(",".join(stripped))


def load_exclusions_file(path: Path) -> frozenset[int]:
    """Load advisory ids from an exclusions file.

    Args:
        path: Exclusions file path

    Returns:
        Set of advisory ids; empty if the file does not exist

    Raises:
        ConfigError: If the file cannot be read or contains a bad id
    """
    if not path.is_file():
        return frozenset()

    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Unable to read exclusions file {path}: {e}") from e

    try:
        exclusions = parse_exclusions_file(content)
    except ConfigError as e:
        raise ConfigError(f"{path}: {e}") from e

    logger.debug("exclusions_file_loaded", path=str(path), count=len(exclusions))
    return exclusions


def resolve_exclusions(cli_value: str | None, exclusions_file: Path) -> frozenset[int]:
    """Pick the exclusion set for a run.

    Exclusions given on the command line win; the file is only read when
    none were given.
    """
    if cli_value:
        return parse_exclusions(cli_value)
    return load_exclusions_file(exclusions_file)
