"""Report aggregation over the decoded advisory stream.

The aggregator makes a single pass over the advisories, classifies each
one and collects the buckets used by the summary. The number of
reportable advisories becomes the process exit status.

Provides:
- ClassificationBuckets: Mutable bucket accumulator for one run
- AuditReport: Final, read-only result of a run
- ReportAggregator: Single-pass consumer of advisories
"""

from dataclasses import dataclass, field
from typing import Iterable

import structlog

from auditgate.core.advisory import Advisory
from auditgate.core.classification import BucketTag, DevDependencyPredicate, classify
from auditgate.core.config import RunConfiguration

logger = structlog.get_logger()


@dataclass
class ClassificationBuckets:
    """Advisories collected per bucket, in the order they were reported."""

    all_advisories: dict[int, Advisory] = field(default_factory=dict)
    reportable: list[Advisory] = field(default_factory=list)
    dev_dependency: list[Advisory] = field(default_factory=list)
    severity_ignored: list[Advisory] = field(default_factory=list)
    excluded: list[Advisory] = field(default_factory=list)

    def add(self, advisory: Advisory, tags: frozenset[BucketTag]) -> None:
        self.all_advisories[advisory.id] = advisory
        if BucketTag.REPORTABLE in tags:
            self.reportable.append(advisory)
        if BucketTag.DEV_DEPENDENCY in tags:
            self.dev_dependency.append(advisory)
        if BucketTag.SEVERITY_IGNORED in tags:
            self.severity_ignored.append(advisory)
        if BucketTag.EXCLUDED in tags:
            self.excluded.append(advisory)


@dataclass(frozen=True)
class AuditReport:
    """Outcome of an audit run.

    Attributes:
        config: Configuration the run used
        buckets: Classified advisories
        missing_exclusions: Configured exclusion ids no advisory matched
    """

    config: RunConfiguration
    buckets: ClassificationBuckets
    missing_exclusions: tuple[int, ...] = ()

    @property
    def reportable_count(self) -> int:
        return len(self.buckets.reportable)

    @property
    def missing_exclusions_escalated(self) -> bool:
        return bool(self.missing_exclusions) and self.config.fail_on_missing_exclusions

    @property
    def exit_code(self) -> int:
        """Process exit status for this report.

        The number of reportable advisories, unless missing exclusions are
        escalated, in which case the number of missing exclusions.
        """
        if self.missing_exclusions_escalated:
            return len(self.missing_exclusions)
        return self.reportable_count


class ReportAggregator:
    """Classify advisories and accumulate the report buckets.

    Example:
        >>> aggregator = ReportAggregator(config, is_dev_path=None)
        >>> report = aggregator.consume(decode_advisories(lines))
        >>> report.exit_code
        1
    """

    def __init__(
        self,
        config: RunConfiguration,
        is_dev_path: DevDependencyPredicate | None = None,
    ):
        """Initialize aggregator.

        Args:
            config: Run configuration used for classification
            is_dev_path: Dev dependency predicate, or None without a manifest
        """
        self.config = config
        self.is_dev_path = is_dev_path
        self.buckets = ClassificationBuckets()
        self.log = logger.bind(component="aggregator")

    def add(self, advisory: Advisory) -> frozenset[BucketTag]:
        """Classify and record one advisory.

        yarn reports an advisory once per resolution, so repeated ids are
        skipped and keep their first classification.
        """
        if advisory.id in self.buckets.all_advisories:
            self.log.debug("duplicate_advisory_skipped", advisory_id=advisory.id)
            return frozenset()

        tags = classify(advisory, self.config, self.is_dev_path)
        self.buckets.add(advisory, tags)
        self.log.debug(
            "advisory_classified",
            advisory_id=advisory.id,
            severity=advisory.severity.value,
            tags=sorted(tag.value for tag in tags),
        )
        return tags

    def missing_exclusions(self) -> tuple[int, ...]:
        return tuple(
            sorted(set(self.config.exclusions) - set(self.buckets.all_advisories))
        )

    def finish(self) -> AuditReport:
        """Finalize the report after the last advisory.

        Logs a warning for exclusions that matched no advisory.
        """
        missing = self.missing_exclusions()
        if missing:
            self.log.warning("exclusions_not_found", advisory_ids=list(missing))

        report = AuditReport(
            config=self.config,
            buckets=self.buckets,
            missing_exclusions=missing,
        )
        self.log.info(
            "report_complete",
            advisories=len(self.buckets.all_advisories),
            reportable=report.reportable_count,
            exit_code=report.exit_code,
        )
        return report

    def consume(self, advisories: Iterable[Advisory]) -> AuditReport:
        for advisory in advisories:
            self.add(advisory)
        return self.finish()
