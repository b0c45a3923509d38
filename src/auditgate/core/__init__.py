"""Core audit functionality.

Provides:
- Severity ordering and parsing
- Advisory records and the audit output decoder
- Run configuration
- Advisory classification
"""

from .advisory import Advisory, AdvisoryFinding, decode_advisories, decode_line, parse_dependency_path
from .classification import BucketTag, classify, is_dev_only
from .config import RunConfiguration, load_config, parse_exclusions
from .errors import AuditError, ConfigError, DecodeError, FatalToolError, NetworkFailureError
from .severity import Severity, parse_severity

__all__ = [
    "Advisory",
    "AdvisoryFinding",
    "decode_advisories",
    "decode_line",
    "parse_dependency_path",
    "BucketTag",
    "classify",
    "is_dev_only",
    "RunConfiguration",
    "load_config",
    "parse_exclusions",
    "AuditError",
    "ConfigError",
    "DecodeError",
    "FatalToolError",
    "NetworkFailureError",
    "Severity",
    "parse_severity",
]
