"""Advisory classification into report buckets.

Classification is a pure function of the advisory, the run configuration
and the dev dependency predicate. Tags are not mutually exclusive: an
advisory reachable only through dev dependencies is tagged DEV_DEPENDENCY
even when it is also ignored for its severity.

Precedence:
- SEVERITY_IGNORED wins over EXCLUDED, so an advisory filtered out by
  severity is not also counted as excluded
- REPORTABLE requires: not below threshold, not excluded, and not
  (dev only with ignore_dev_deps)

Provides:
- BucketTag: Classification tags
- DevDependencyPredicate: Callable deciding whether a path is dev only
- is_dev_only: Whether every path of an advisory is dev only
- classify: Tags for one advisory
"""

from enum import Enum
from typing import Callable

from auditgate.core.advisory import Advisory, DependencyPath
from auditgate.core.config import RunConfiguration

DevDependencyPredicate = Callable[[DependencyPath], bool]


class BucketTag(str, Enum):
    """Report bucket an advisory belongs to."""

    SEVERITY_IGNORED = "severity_ignored"
    EXCLUDED = "excluded"
    DEV_DEPENDENCY = "dev_dependency"
    REPORTABLE = "reportable"


def is_dev_only(advisory: Advisory, is_dev_path: DevDependencyPredicate | None) -> bool:
    """Check whether an advisory is reachable only through dev dependencies.

    An advisory without findings (or without paths) is dev only: the check
    is "every path is a dev path", which holds for an empty set of paths.

    Args:
        advisory: Advisory to check
        is_dev_path: Predicate from the project manifest, or None when there
            is no manifest (then nothing is dev only)

    Returns:
        True if every dependency path is a dev dependency path
    """
    if is_dev_path is None:
        return False
    return all(is_dev_path(path) for path in advisory.dependency_paths())


def classify(
    advisory: Advisory,
    config: RunConfiguration,
    is_dev_path: DevDependencyPredicate | None = None,
) -> frozenset[BucketTag]:
    """Classify one advisory.

    Args:
        advisory: Decoded advisory
        config: Run configuration (threshold, exclusions, ignore_dev_deps)
        is_dev_path: Dev dependency predicate, if a manifest was found

    Returns:
        Set of bucket tags; empty when the advisory is ignored only
        because it is dev only and dev dependencies are ignored

    Example:
        >>> config = RunConfiguration(min_severity=Severity.HIGH)
        >>> classify(moderate_advisory, config)
        frozenset({<BucketTag.SEVERITY_IGNORED: 'severity_ignored'>})
    """
    tags = set()

    dev_only = is_dev_only(advisory, is_dev_path)
    severity_ignored = advisory.severity < config.min_severity
    is_excluded = advisory.id in config.exclusions

    if severity_ignored:
        tags.add(BucketTag.SEVERITY_IGNORED)
    elif is_excluded:
        tags.add(BucketTag.EXCLUDED)

    if dev_only:
        tags.add(BucketTag.DEV_DEPENDENCY)

    if not severity_ignored and not is_excluded and not (dev_only and config.ignore_dev_deps):
        tags.add(BucketTag.REPORTABLE)

    return frozenset(tags)
