"""Text report generator with Jinja2 templates.

Renders the summary printed after an audit run: the missing exclusion
warning, the reportable count, ignored counts with their reasons, and
one block per reportable advisory.
"""

from pathlib import Path

import structlog
from jinja2 import Environment, FileSystemLoader

from auditgate.core.reporting.aggregator import AuditReport

logger = structlog.get_logger()


class ReportGenerator:
    """Render an AuditReport as plain text."""

    def __init__(self, template_dir: str | None = None):
        """Initialize report generator with Jinja2 templates.

        Args:
            template_dir: Path to template directory (defaults to ./templates/)
        """
        if template_dir is None:
            template_dir = str(Path(__file__).parent / "templates")
        self.env = Environment(
            loader=FileSystemLoader(template_dir),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )

    def generate(self, report: AuditReport) -> str:
        """Generate the text summary for a finished audit.

        Args:
            report: Aggregated audit report

        Returns:
            Report text

        Example:
            >>> text = ReportGenerator().generate(report)
            >>> print(text)
            Found 1 vulnerabilities
            ...
        """
        buckets = report.buckets
        context = {
            "config": report.config,
            "missing_exclusions": report.missing_exclusions,
            "escalated": report.missing_exclusions_escalated,
            "reportable": [self._advisory_context(a) for a in buckets.reportable],
            "severity_ignored_count": len(buckets.severity_ignored),
            "excluded_count": len(buckets.excluded),
            "dev_dependency_count": len(buckets.dev_dependency),
            "total_count": len(buckets.all_advisories),
        }

        template = self.env.get_template("report.txt.j2")
        text = template.render(**context)
        logger.debug("report_rendered", length=len(text))
        return text

    def _advisory_context(self, advisory) -> dict:
        return {
            "id": advisory.id,
            "severity": advisory.severity.value.upper(),
            "title": advisory.title,
            "module_name": advisory.module_name,
            "paths": advisory.paths,
            "url": advisory.url,
        }
