"""Shared infrastructure for running the audit tool.

Provides:
- AttemptOutcome: Classification of one audit attempt
- AttemptResult: Structured result of one audit attempt
- AuditOutput: Transient file holding one attempt's combined output
- check_binary: Check whether an executable is on PATH
- run_subprocess_to_file: Run a command with stdout and stderr streamed to a file
- detect_network_error: Scan output lines for the network failure signature
- classify_attempt: Map exit code and network error detection to an outcome
"""

import asyncio
import shutil
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterable, Iterator

import structlog

logger = structlog.get_logger()


class AttemptOutcome(str, Enum):
    """Outcome of one audit attempt."""
    SUCCESS = "success"
    TOOL_ERROR = "tool_error"
    NETWORK_ERROR = "network_error"


class AuditOutput:
    """Captured output of one audit attempt, stored in a transient file.

    The file is written by the subprocess and read back line by line, so
    large audit output is never held in memory as a whole. Call discard()
    (or use as a context manager) to remove the file.
    """

    def __init__(self, path: Path):
        self.path = path

    def __enter__(self) -> "AuditOutput":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.discard()

    @property
    def exists(self) -> bool:
        return self.path.exists()

    def lines(self) -> Iterator[str]:
        """Yield output lines, reading the file lazily."""
        with open(self.path, encoding="utf-8", errors="replace") as f:
            yield from f

    def text(self) -> str:
        """Full output text. Only used for diagnostics on failed attempts."""
        return self.path.read_text(encoding="utf-8", errors="replace")

    def discard(self) -> None:
        self.path.unlink(missing_ok=True)

    def __repr__(self) -> str:
        return f"AuditOutput({str(self.path)!r})"


@dataclass
class AttemptResult:
    """Structured result from one audit attempt.

    Attributes:
        status: Attempt classification
        output: Captured output file
        returncode: Exit code of the audit process (None if it never started)
        error: Error description for failed attempts
        duration_seconds: Wall time of the attempt
    """
    status: AttemptOutcome
    output: AuditOutput
    returncode: int | None = None
    error: str = ""
    duration_seconds: float = 0.0


def check_binary(binary_name: str) -> bool:
    """Check if binary exists on PATH.

    Args:
        binary_name: Name of binary to check (e.g., "yarn")

    Returns:
        True if binary is available, False otherwise
    """
    return shutil.which(binary_name) is not None


async def run_subprocess_to_file(cmd: list[str], output_path: Path) -> int:
    """Run command with stdout and stderr interleaved into one file.

    Uses asyncio.create_subprocess_exec (NEVER shell=True). The output file
    is flushed and closed before this returns, so it can be read back
    as soon as the exit code is known.

    Args:
        cmd: Command and arguments as list (e.g., ["yarn", "audit", "--json"])
        output_path: File receiving the combined output

    Returns:
        Process exit code
    """
    log = logger.bind(cmd=cmd[0])

    with open(output_path, "wb") as sink:
        process = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=sink,
            stderr=asyncio.subprocess.STDOUT,
        )
        log.debug("subprocess_started", pid=process.pid, args=cmd[1:])

        try:
            returncode = await process.wait()
        except asyncio.CancelledError:
            log.warning("subprocess_cancelled", pid=process.pid)
            process.kill()
            await process.wait()
            raise

    log.debug(
        "subprocess_completed",
        returncode=returncode,
        output_bytes=output_path.stat().st_size,
    )
    return returncode


def detect_network_error(lines: Iterable[str], signature: str) -> bool:
    """Check output for the registry request failure signature.

    yarn has no structured signal for a failed registry request; it only
    prints an error message. The signature is matched as a plain substring.

    Args:
        lines: Output lines (a file handle works)
        signature: Literal text that marks a network failure

    Returns:
        True if any line contains the signature
    """
    if not signature:
        return False
    return any(signature in line for line in lines)


def classify_attempt(returncode: int, network_error: bool) -> AttemptOutcome:
    """Classify a finished attempt.

    A network failure wins over the exit code. Otherwise exit code 1 is a
    tool error and anything else is a successful run whose output holds
    the advisories.
    """
    if network_error:
        return AttemptOutcome.NETWORK_ERROR
    if returncode == 1:
        return AttemptOutcome.TOOL_ERROR
    return AttemptOutcome.SUCCESS
