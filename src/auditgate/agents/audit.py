"""AuditAgent for orchestrating the audit pipeline.

Orchestrates yarn audit (with retries) -> decode -> classify -> aggregate
into an AuditReport whose exit code gates CI.
"""

from auditgate.core.advisory import decode_advisories
from auditgate.core.classification import DevDependencyPredicate
from auditgate.core.config import RunConfiguration
from auditgate.core.manifest import load_dev_dependency_predicate
from auditgate.core.reporting.aggregator import AuditReport, ReportAggregator
from auditgate.tools import RetryController, YarnAuditTool
from .base import BaseAgent


class AuditAgent(BaseAgent):
    """Runs the audit and turns its output into a classified report.

    Pipeline: run yarn audit -> decode advisories line by line -> classify ->
    aggregate buckets and missing exclusions

    Features:
    - Network failure retries (when enabled) through RetryController
    - Single streaming pass over the audit output file
    - Dev dependency classification from the project manifest
    - Transient files removed on success and on every fatal error
    """

    def __init__(self, run_id: str | None = None, tool: YarnAuditTool | None = None):
        """Initialize AuditAgent.

        Args:
            run_id: Optional run ID (generates new UUID if not provided)
            tool: Audit tool wrapper (default: YarnAuditTool for config.yarn_binary)
        """
        super().__init__(run_id)
        self.tool = tool
        self.retry_controller: RetryController | None = None

    async def run(
        self,
        config: RunConfiguration,
        is_dev_path: DevDependencyPredicate | None = None,
    ) -> AuditReport:
        """Execute the audit pipeline.

        Args:
            config: Run configuration
            is_dev_path: Dev dependency predicate; read from
                config.manifest_path when not given

        Returns:
            AuditReport with buckets, missing exclusions and exit code

        Raises:
            ConfigError: If the manifest cannot be read
            FatalToolError: If yarn audit failed or the registry was unreachable
            DecodeError: If a line of audit output is not JSON

        Example:
            >>> agent = AuditAgent()
            >>> report = await agent.run(load_config("high"))
            >>> print(f"{report.reportable_count} vulnerabilities")
        """
        self.log.info(
            "audit_pipeline_start",
            min_severity=config.min_severity.value,
            exclusions=sorted(config.exclusions),
            ignore_dev_deps=config.ignore_dev_deps,
        )

        if is_dev_path is None:
            is_dev_path = load_dev_dependency_predicate(config.manifest_path)

        tool = self.tool or YarnAuditTool(config.yarn_binary)
        self.retry_controller = RetryController(tool)

        async with self.workspace() as workdir:
            output = await self.retry_controller.run(config, workdir)
            with output:
                aggregator = ReportAggregator(config, is_dev_path)
                report = aggregator.consume(decode_advisories(output.lines()))

        self.log.info(
            "audit_pipeline_complete",
            attempts=self.retry_controller.attempts,
            reportable=report.reportable_count,
            exit_code=report.exit_code,
        )
        return report
