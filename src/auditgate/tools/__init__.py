"""Audit tool wrappers.

Provides:
- Base attempt infrastructure (outcomes, results, output files)
- YarnAuditTool for single `yarn audit` attempts
- RetryController for network failure retries
"""

from .base import (
    AttemptOutcome,
    AttemptResult,
    AuditOutput,
    check_binary,
    classify_attempt,
    detect_network_error,
    run_subprocess_to_file,
)
from .yarn import YarnAuditTool
from .retry import RetryController

__all__ = [
    "AttemptOutcome",
    "AttemptResult",
    "AuditOutput",
    "check_binary",
    "classify_attempt",
    "detect_network_error",
    "run_subprocess_to_file",
    "YarnAuditTool",
    "RetryController",
]
