"""Error taxonomy for an audit run.

Every fatal condition derives from AuditError so the CLI can report it on
stderr and exit non-zero after transient resources have been released.
Network failures that are retried never surface as exceptions.
"""


class AuditError(Exception):
    """Base class for fatal audit run errors."""


class ConfigError(AuditError):
    """Invalid option value, exclusion list, or manifest."""


class DecodeError(AuditError):
    """A line of audit output could not be decoded.

    Attributes:
        line: The offending output line (truncated for display)
    """

    def __init__(self, message: str, line: str = ""):
        super().__init__(message)
        self.line = line[:200]

    def __str__(self) -> str:
        message = super().__str__()
        if self.line:
            return f"{message}\nOffending line: {self.line}"
        return message


class FatalToolError(AuditError):
    """The audit tool failed in a way that stops the run.

    Attributes:
        output: Captured tool output, for diagnostics
        returncode: Exit code of the failed attempt, if the tool ran at all
    """

    def __init__(self, message: str, output: str = "", returncode: int | None = None):
        super().__init__(message)
        self.output = output
        self.returncode = returncode

    def __str__(self) -> str:
        message = super().__str__()
        if self.output:
            return f"{message}\n{self.output.rstrip()}"
        return message


class NetworkFailureError(FatalToolError):
    """Registry request failed and retrying on network failure is disabled."""
