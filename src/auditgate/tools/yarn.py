"""yarn audit tool wrapper.

Runs one `yarn audit --json` attempt with its combined output streamed to
a transient file, then classifies the attempt as success, tool error or
network error.
"""

import time
from pathlib import Path

import structlog

from auditgate.core.config import RunConfiguration
from .base import (
    AttemptOutcome,
    AttemptResult,
    AuditOutput,
    check_binary,
    classify_attempt,
    detect_network_error,
    run_subprocess_to_file,
)

logger = structlog.get_logger()


class YarnAuditTool:
    """Wrapper for the `yarn audit` command.

    Each call to run() is one attempt and owns one output file. The caller
    is responsible for discarding the output once it has been consumed.
    """

    name = "yarn-audit"

    def __init__(self, binary_name: str = "yarn"):
        """Initialize yarn audit wrapper.

        Args:
            binary_name: yarn executable name or path (default: "yarn")
        """
        self.binary_name = binary_name
        self.log = logger.bind(tool=self.name)

    def is_available(self) -> bool:
        """Check if the yarn binary is available on PATH.

        Returns:
            True if yarn is installed, False otherwise
        """
        return check_binary(self.binary_name)

    def build_command(self, config: RunConfiguration) -> list[str]:
        """Build the audit command line.

        Runs: yarn audit --json --level=<min_severity> [--groups=dependencies]

        The level flag only pre-filters; advisories are classified again
        against the same threshold after decoding.
        """
        cmd = [
            self.binary_name,
            "audit",
            "--json",
            f"--level={config.min_severity.value}",
        ]
        if config.ignore_dev_deps:
            cmd.append("--groups=dependencies")
        return cmd

    async def run(self, config: RunConfiguration, output_path: Path) -> AttemptResult:
        """Run one audit attempt.

        Args:
            config: Run configuration
            output_path: File that receives the combined output

        Returns:
            AttemptResult with status:
                SUCCESS: output holds the JSON lines to decode
                TOOL_ERROR: yarn failed (exit code 1, or not installed)
                NETWORK_ERROR: the registry request failed

        Example:
            >>> tool = YarnAuditTool()
            >>> result = await tool.run(config, Path("/tmp/audit/attempt-1.jsonl"))
            >>> if result.status == AttemptOutcome.SUCCESS:
            ...     advisories = decode_advisories(result.output.lines())
        """
        start_time = time.time()
        output = AuditOutput(output_path)
        self.log.info("audit_start", min_severity=config.min_severity.value)

        if not self.is_available():
            error_msg = (
                f"{self.binary_name} not installed. "
                "Install: npm install --global yarn"
            )
            self.log.warning("binary_not_found", binary=self.binary_name)
            return AttemptResult(
                status=AttemptOutcome.TOOL_ERROR,
                output=output,
                error=error_msg,
                duration_seconds=time.time() - start_time,
            )

        cmd = self.build_command(config)
        returncode = await run_subprocess_to_file(cmd, output_path)

        with open(output_path, encoding="utf-8", errors="replace") as f:
            network_error = detect_network_error(f, config.network_error_signature)

        status = classify_attempt(returncode, network_error)
        duration = time.time() - start_time

        error_msg = ""
        if status == AttemptOutcome.NETWORK_ERROR:
            error_msg = "Network error occurred when running yarn audit"
        elif status == AttemptOutcome.TOOL_ERROR:
            error_msg = f"yarn audit failed with code {returncode}"

        self.log.info(
            "audit_complete",
            status=status.value,
            returncode=returncode,
            duration=duration,
        )
        return AttemptResult(
            status=status,
            output=output,
            returncode=returncode,
            error=error_msg,
            duration_seconds=duration,
        )
