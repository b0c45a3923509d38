"""Run configuration for an audit.

One immutable snapshot of the effective settings is built before the
pipeline starts and passed explicitly to every component. Defaults that
depend on the environment (the yarn binary, the network error signature)
are read from environment variables when the snapshot is created.

Provides:
- RunConfiguration: Frozen Pydantic model with all run settings
- parse_exclusions: Parse a comma-separated advisory id list
- load_config: Factory that validates raw option values
"""

import os
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from auditgate.core.errors import ConfigError
from auditgate.core.severity import Severity, parse_severity

# yarn prints this when a request to the advisory registry fails. The wording
# is not a documented contract, so it can be overridden from the environment.
DEFAULT_NETWORK_ERROR_SIGNATURE = "Error: Request failed "

DEFAULT_EXCLUSIONS_FILE = ".iyarc"
DEFAULT_MANIFEST = "package.json"


class RunConfiguration(BaseModel):
    """Effective settings for one audit run.

    Attributes:
        min_severity: Advisories below this level are ignored
        exclusions: Advisory ids that are never reported
        ignore_dev_deps: Skip advisories reachable only through dev dependencies
        fail_on_missing_exclusions: Exit non-zero when an exclusion matches nothing
        retry_on_network_failure: Retry the audit while the registry is unreachable
        debug: Emit debug logging
        yarn_binary: Package manager executable (from IMPROVED_AUDIT_YARN env)
        network_error_signature: Output text that marks a registry failure
            (from IMPROVED_AUDIT_NETWORK_ERROR env)
        retry_delay_seconds: Pause between network failure retries
        manifest_path: Project manifest declaring dev dependencies
        exclusions_file: Fallback exclusions file
    """

    model_config = ConfigDict(frozen=True)

    min_severity: Severity = Severity.LOW
    exclusions: frozenset[int] = Field(default_factory=frozenset)
    ignore_dev_deps: bool = False
    fail_on_missing_exclusions: bool = False
    retry_on_network_failure: bool = False
    debug: bool = False

    yarn_binary: str = Field(
        default_factory=lambda: os.getenv("IMPROVED_AUDIT_YARN", "yarn")
    )
    network_error_signature: str = Field(
        default_factory=lambda: os.getenv(
            "IMPROVED_AUDIT_NETWORK_ERROR", DEFAULT_NETWORK_ERROR_SIGNATURE
        )
    )
    retry_delay_seconds: float = Field(default=1.0, ge=0)

    manifest_path: Path = Path(DEFAULT_MANIFEST)
    exclusions_file: Path = Path(DEFAULT_EXCLUSIONS_FILE)


def parse_exclusions(text: str) -> frozenset[int]:
    """Parse a comma-separated list of advisory ids.

    Whitespace around ids and empty segments are ignored, so "1, 2,,3"
    and "1,2,3" are equivalent.

    Args:
        text: Raw exclusion list (e.g., "1064,1065")

    Returns:
        Set of advisory ids

    Raises:
        ConfigError: If any segment is not an integer
    """
    ids = set()
    for segment in text.split(","):
        segment = segment.strip()
        if not segment:
            continue
        # isdigit() alone accepts digits such as "²" that int() rejects
        if not (segment.isascii() and segment.isdigit()):
            raise ConfigError(f"Invalid advisory id in exclusion list: {segment!r}")
        ids.add(int(segment))
    return frozenset(ids)


def load_config(min_severity: str | Severity = Severity.LOW, **overrides) -> RunConfiguration:
    """Build the run configuration from raw option values.

    Args:
        min_severity: Severity name or member
        **overrides: Any other RunConfiguration field

    Returns:
        Validated RunConfiguration

    Raises:
        ConfigError: If a value fails validation
    """
    if not isinstance(min_severity, Severity):
        min_severity = parse_severity(min_severity)

    try:
        return RunConfiguration(min_severity=min_severity, **overrides)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
