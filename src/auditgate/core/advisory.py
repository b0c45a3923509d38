"""Advisory records decoded from `yarn audit --json` output.

yarn writes one JSON object per line. Lines of type "auditAdvisory" carry
an advisory under data.advisory; every other record type (auditSummary,
info, warning, ...) is skipped.

Provides:
- AdvisoryFinding: One version group and the dependency paths reaching it
- Advisory: Immutable advisory record
- DependencyPath: Parsed module ancestry chain
- parse_dependency_path: Split "a>b>c" into ("a", "b", "c")
- decode_line: Decode one output line into an Advisory (or None)
- decode_advisories: Lazily decode an iterable of lines
"""

import json
from typing import Any, Iterable, Iterator

from pydantic import BaseModel, ConfigDict, ValidationError

from auditgate.core.errors import DecodeError
from auditgate.core.severity import Severity

ADVISORY_RECORD_TYPE = "auditAdvisory"

DependencyPath = tuple[str, ...]


def parse_dependency_path(path: str) -> DependencyPath:
    """Split a yarn dependency path into package names.

    Example:
        >>> parse_dependency_path("webpack>watchpack>chokidar")
        ('webpack', 'watchpack', 'chokidar')
    """
    return tuple(part.strip() for part in path.split(">") if part.strip())


class AdvisoryFinding(BaseModel):
    """Affected version of the vulnerable module and the paths that pull it in."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    version: str = ""
    paths: tuple[str, ...] = ()


class Advisory(BaseModel):
    """One vulnerability advisory reported by the audit tool.

    Attributes:
        id: Advisory id, unique within a run
        severity: Advisory severity level
        url: Reference link for the advisory
        findings: Finding groups, each with dependency path strings
        module_name: Name of the vulnerable package
        title: Short description of the advisory
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int
    severity: Severity
    url: str = ""
    findings: tuple[AdvisoryFinding, ...] = ()
    module_name: str = ""
    title: str = ""

    @property
    def paths(self) -> list[str]:
        """All dependency path strings across findings, in report order."""
        return [path for finding in self.findings for path in finding.paths]

    def dependency_paths(self) -> Iterator[DependencyPath]:
        for path in self.paths:
            yield parse_dependency_path(path)


def decode_line(line: str) -> Advisory | None:
    """Decode one line of audit output.

    Args:
        line: Raw output line

    Returns:
        Advisory for auditAdvisory records, None for blank lines and
        any other record type

    Raises:
        DecodeError: If the line is not JSON, or an advisory record is
            malformed (missing id, unknown severity, ...)
    """
    line = line.strip()
    if not line:
        return None

    try:
        record: Any = json.loads(line)
    except json.JSONDecodeError as e:
        raise DecodeError(f"Unable to parse audit output line as JSON: {e}", line) from e

    if not isinstance(record, dict) or record.get("type") != ADVISORY_RECORD_TYPE:
        return None

    data = record.get("data")
    payload = data.get("advisory") if isinstance(data, dict) else None
    if not isinstance(payload, dict):
        raise DecodeError("Advisory record has no advisory payload", line)

    try:
        return Advisory.model_validate(payload)
    except ValidationError as e:
        raise DecodeError(f"Invalid advisory record: {e}", line) from e


def decode_advisories(lines: Iterable[str]) -> Iterator[Advisory]:
    """Lazily decode advisories from audit output lines.

    Consumes the iterable once; suitable for a file handle.
    """
    for line in lines:
        advisory = decode_line(line)
        if advisory is not None:
            yield advisory
