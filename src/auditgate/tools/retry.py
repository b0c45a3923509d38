"""Retry control for audit attempts.

Network failures are retried with a fixed delay for as long as they keep
happening, when the run enables it. Tool errors are never retried.
Attempts run strictly one after another, and each owns a fresh output file;
the previous attempt's file is removed before the next one starts.
"""

import asyncio
from pathlib import Path

import structlog

from auditgate.core.config import RunConfiguration
from auditgate.core.errors import FatalToolError, NetworkFailureError
from .base import AttemptOutcome, AttemptResult, AuditOutput
from .yarn import YarnAuditTool

logger = structlog.get_logger()


class RetryController:
    """Run audit attempts until one succeeds or a fatal error occurs.

    Attributes:
        tool: Audit tool wrapper performing single attempts
        attempts: Number of attempts made by the last run()
    """

    def __init__(self, tool: YarnAuditTool):
        self.tool = tool
        self.attempts = 0
        self.log = logger.bind(tool=tool.name)

    @property
    def retries(self) -> int:
        return max(self.attempts - 1, 0)

    async def run(self, config: RunConfiguration, workdir: Path) -> AuditOutput:
        """Run the audit, retrying network failures if enabled.

        Args:
            config: Run configuration (retry flag, retry delay)
            workdir: Directory for transient output files

        Returns:
            Output of the successful attempt; the caller discards it

        Raises:
            FatalToolError: If the audit tool reported an error
            NetworkFailureError: If a network failure occurred and
                retry_on_network_failure is disabled
        """
        self.attempts = 0

        while True:
            self.attempts += 1
            output_path = workdir / f"audit-{self.attempts}.jsonl"
            result = await self.tool.run(config, output_path)

            if result.status == AttemptOutcome.SUCCESS:
                self.log.debug("audit_succeeded", attempts=self.attempts)
                return result.output

            captured = self._captured_output(result)
            result.output.discard()

            if result.status == AttemptOutcome.TOOL_ERROR:
                self.log.error("audit_tool_error", returncode=result.returncode)
                raise FatalToolError(
                    result.error or "yarn audit failed",
                    output=captured,
                    returncode=result.returncode,
                )

            if not config.retry_on_network_failure:
                self.log.error("audit_network_error", attempts=self.attempts)
                raise NetworkFailureError(
                    result.error or "Network error occurred when running yarn audit",
                    output=captured,
                    returncode=result.returncode,
                )

            self.log.warning(
                "retry_after_network_error",
                attempt=self.attempts,
                backoff_seconds=config.retry_delay_seconds,
            )
            await asyncio.sleep(config.retry_delay_seconds)

    def _captured_output(self, result: AttemptResult) -> str:
        if not result.output.exists:
            return ""
        return result.output.text()
