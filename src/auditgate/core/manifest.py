"""Dev dependency lookup from the project manifest (package.json).

Provides:
- load_dev_dependencies: Names declared under devDependencies
- dev_dependency_predicate: Path predicate for a set of dev dependency names
- load_dev_dependency_predicate: Predicate for a manifest, or None if absent
"""

import json
from pathlib import Path

import structlog

from auditgate.core.advisory import DependencyPath
from auditgate.core.classification import DevDependencyPredicate
from auditgate.core.errors import ConfigError

logger = structlog.get_logger()


def load_dev_dependencies(manifest_path: Path) -> frozenset[str] | None:
    """Read dev dependency names from a package.json manifest.

    Args:
        manifest_path: Path to package.json

    Returns:
        Set of dev dependency names, or None if the manifest does not exist

    Raises:
        ConfigError: If the manifest is not a readable JSON object
    """
    if not manifest_path.is_file():
        logger.debug("manifest_not_found", path=str(manifest_path))
        return None

    try:
        manifest = json.loads(manifest_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Unable to read manifest {manifest_path}: {e}") from e

    if not isinstance(manifest, dict):
        raise ConfigError(f"Manifest {manifest_path} is not a JSON object")

    dev_dependencies = manifest.get("devDependencies") or {}
    if not isinstance(dev_dependencies, dict):
        raise ConfigError(f"devDependencies in {manifest_path} is not an object")

    names = frozenset(dev_dependencies)
    logger.debug("manifest_loaded", path=str(manifest_path), dev_dependencies=len(names))
    return names


def dev_dependency_predicate(dev_dependencies: frozenset[str]) -> DevDependencyPredicate:
    """Build a predicate matching paths whose top-level package is a dev dependency.

    Example:
        >>> is_dev = dev_dependency_predicate(frozenset({"jest"}))
        >>> is_dev(("jest", "jest-cli", "yargs"))
        True
        >>> is_dev(("express", "qs"))
        False
    """

    def is_dev_path(path: DependencyPath) -> bool:
        return bool(path) and path[0] in dev_dependencies

    return is_dev_path


def load_dev_dependency_predicate(manifest_path: Path) -> DevDependencyPredicate | None:
    dev_dependencies = load_dev_dependencies(manifest_path)
    if dev_dependencies is None:
        return None
    return dev_dependency_predicate(dev_dependencies)
