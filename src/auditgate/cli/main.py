"""AsyncClick CLI for the audit command.

Runs yarn audit, prints the filtered vulnerability report and exits with
the number of reportable advisories, so a clean audit exits 0.
"""

import logging
import sys
from pathlib import Path

import asyncclick as click
import structlog

from auditgate import __version__
from auditgate.core.config import DEFAULT_EXCLUSIONS_FILE, DEFAULT_MANIFEST, load_config
from auditgate.core.errors import AuditError, ConfigError
from auditgate.core.exclusions import resolve_exclusions
from auditgate.core.severity import severity_names

logger = structlog.get_logger()

# POSIX keeps only the low 8 bits of an exit status, so 256 would read as 0
MAX_EXIT_STATUS = 255


def process_exit_status(count: int) -> int:
    """Exit status for a vulnerability count, capped so it is never 0 by wraparound."""
    return min(count, MAX_EXIT_STATUS)


def configure_logging(debug: bool) -> None:
    """Send structured logs to stderr so stdout carries only the report."""
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.DEBUG if debug else logging.WARNING
        ),
        # resolve sys.stderr per logger, it may be swapped after configuration
        logger_factory=lambda *args: structlog.PrintLogger(sys.stderr),
        cache_logger_on_first_use=False,
    )


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("--min-severity", "-s", default="low", show_default=True,
              help=f"Minimum severity to report ({', '.join(severity_names())})")
@click.option("--exclude", "-e", default=None,
              help="Comma-separated advisory ids to ignore (e.g., '1064,1065')")
@click.option("--ignore-dev-deps", "-d", is_flag=True,
              help="Ignore advisories that only affect dev dependencies")
@click.option("--fail-on-missing-exclusions", "-f", is_flag=True,
              help="Exit non-zero when an excluded advisory is not reported")
@click.option("--retry-on-network-failure", "-r", is_flag=True,
              help="Keep retrying while the advisory registry is unreachable")
@click.option("--exclusions-file", default=DEFAULT_EXCLUSIONS_FILE, show_default=True,
              type=click.Path(dir_okay=False, path_type=Path),
              help="Exclusions file used when --exclude is not given")
@click.option("--manifest", default=DEFAULT_MANIFEST, show_default=True,
              type=click.Path(dir_okay=False, path_type=Path),
              help="Project manifest declaring dev dependencies")
@click.option("--debug", is_flag=True, help="Print debug logging to stderr")
@click.version_option(__version__, "--version", "-v")
@click.pass_context
async def cli(
    ctx,
    min_severity: str,
    exclude: str | None,
    ignore_dev_deps: bool,
    fail_on_missing_exclusions: bool,
    retry_on_network_failure: bool,
    exclusions_file: Path,
    manifest: Path,
    debug: bool,
):
    """Run yarn audit and report vulnerabilities that are not ignored.

    The exit code is the number of vulnerabilities found.

    Examples:
        improved-audit
        improved-audit -s high -e 1064,1065
        improved-audit --ignore-dev-deps --retry-on-network-failure
    """
    configure_logging(debug)

    try:
        config = load_config(
            min_severity,
            exclusions=resolve_exclusions(exclude, exclusions_file),
            ignore_dev_deps=ignore_dev_deps,
            fail_on_missing_exclusions=fail_on_missing_exclusions,
            retry_on_network_failure=retry_on_network_failure,
            debug=debug,
            manifest_path=manifest,
            exclusions_file=exclusions_file,
        )
    except ConfigError as e:
        click.echo(f"[-] {e}", err=True)
        ctx.exit(1)

    from auditgate.agents import AuditAgent
    from auditgate.core.reporting.generator import ReportGenerator

    if config.exclusions:
        click.echo(f"Excluded advisories: {', '.join(map(str, sorted(config.exclusions)))}")
    click.echo(f"Minimum severity level to report: {config.min_severity.value}")

    agent = AuditAgent()
    try:
        report = await agent.run(config)
    except AuditError as e:
        click.echo(f"[-] {e}", err=True)
        ctx.exit(1)

    click.echo(ReportGenerator().generate(report), nl=False)
    if report.missing_exclusions_escalated:
        click.echo(
            f"[-] Excluded advisories not found in the audit output: "
            f"{', '.join(map(str, report.missing_exclusions))}",
            err=True,
        )
    ctx.exit(process_exit_status(report.exit_code))


if __name__ == "__main__":
    cli()
