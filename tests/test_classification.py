"""Unit tests for advisory classification and severity ordering."""

import pytest

from auditgate.core.advisory import Advisory, AdvisoryFinding
from auditgate.core.classification import BucketTag, classify, is_dev_only
from auditgate.core.config import RunConfiguration
from auditgate.core.errors import ConfigError
from auditgate.core.manifest import dev_dependency_predicate
from auditgate.core.severity import Severity, parse_severity


def make_advisory(advisory_id=1, severity="high", paths=("express>qs",)):
    findings = (AdvisoryFinding(version="1.0.0", paths=tuple(paths)),) if paths else ()
    return Advisory(
        id=advisory_id,
        severity=severity,
        url=f"https://npmjs.com/advisories/{advisory_id}",
        findings=findings,
    )


IS_DEV = dev_dependency_predicate(frozenset({"jest", "eslint"}))


# Severity ordering
def test_severity_is_ordered_by_impact():
    """Test that severities compare by impact, not alphabetically."""
    assert Severity.INFO < Severity.LOW < Severity.MODERATE < Severity.HIGH < Severity.CRITICAL
    assert Severity.CRITICAL > Severity.HIGH
    assert Severity.MODERATE >= Severity.MODERATE
    assert max(Severity) == Severity.CRITICAL


def test_parse_severity_is_case_insensitive():
    assert parse_severity("HIGH") == Severity.HIGH
    assert parse_severity(" moderate ") == Severity.MODERATE


def test_parse_severity_rejects_unknown_name():
    with pytest.raises(ConfigError, match="Invalid severity level"):
        parse_severity("medium")


# Threshold
@pytest.mark.parametrize("severity", ["info", "low", "moderate"])
def test_below_threshold_is_severity_ignored(severity):
    """Test that advisories below the threshold are never reportable."""
    config = RunConfiguration(
        min_severity=Severity.HIGH,
        exclusions=frozenset({1}),
        ignore_dev_deps=True,
    )
    advisory = make_advisory(1, severity, paths=("jest>yargs",))

    tags = classify(advisory, config, IS_DEV)

    assert BucketTag.SEVERITY_IGNORED in tags
    assert BucketTag.REPORTABLE not in tags
    # Severity takes precedence over exclusion in the accounting
    assert BucketTag.EXCLUDED not in tags


def test_at_threshold_is_reportable():
    config = RunConfiguration(min_severity=Severity.HIGH)

    tags = classify(make_advisory(2, "high"), config)

    assert tags == frozenset({BucketTag.REPORTABLE})


# Exclusions
def test_excluded_advisory_at_threshold():
    """Test that an excluded advisory at/above threshold is counted as excluded."""
    config = RunConfiguration(min_severity=Severity.LOW, exclusions=frozenset({5}))

    tags = classify(make_advisory(5, "critical"), config)

    assert tags == frozenset({BucketTag.EXCLUDED})


def test_exclusion_does_not_affect_other_ids():
    config = RunConfiguration(exclusions=frozenset({5}))

    tags = classify(make_advisory(6, "critical"), config)

    assert tags == frozenset({BucketTag.REPORTABLE})


# Dev dependencies
def test_dev_only_advisory_ignored_when_enabled():
    """Test that dev-only advisories are tagged and not reportable with ignore_dev_deps."""
    config = RunConfiguration(ignore_dev_deps=True)
    advisory = make_advisory(7, "high", paths=("jest>jest-cli>yargs", "eslint>minimist"))

    tags = classify(advisory, config, IS_DEV)

    assert BucketTag.DEV_DEPENDENCY in tags
    assert BucketTag.REPORTABLE not in tags


def test_dev_only_advisory_reportable_when_not_ignoring_dev_deps():
    config = RunConfiguration(ignore_dev_deps=False)
    advisory = make_advisory(7, "high", paths=("jest>yargs",))

    tags = classify(advisory, config, IS_DEV)

    assert tags == frozenset({BucketTag.DEV_DEPENDENCY, BucketTag.REPORTABLE})


def test_mixed_paths_are_not_dev_only():
    """Test that one production path makes the advisory a production advisory."""
    config = RunConfiguration(ignore_dev_deps=True)
    advisory = make_advisory(8, "high", paths=("jest>yargs", "express>qs"))

    tags = classify(advisory, config, IS_DEV)

    assert tags == frozenset({BucketTag.REPORTABLE})


def test_dev_tag_coexists_with_severity_ignored():
    config = RunConfiguration(min_severity=Severity.CRITICAL)
    advisory = make_advisory(9, "low", paths=("eslint>minimist",))

    tags = classify(advisory, config, IS_DEV)

    assert tags == frozenset({BucketTag.DEV_DEPENDENCY, BucketTag.SEVERITY_IGNORED})


def test_advisory_without_findings_is_dev_only():
    """Test that zero findings is vacuously dev only."""
    config = RunConfiguration(ignore_dev_deps=True)
    advisory = make_advisory(10, "high", paths=())

    assert is_dev_only(advisory, IS_DEV) is True

    tags = classify(advisory, config, IS_DEV)
    assert BucketTag.DEV_DEPENDENCY in tags
    assert BucketTag.REPORTABLE not in tags


def test_no_manifest_means_nothing_is_dev_only():
    config = RunConfiguration(ignore_dev_deps=True)
    advisory = make_advisory(11, "high", paths=())

    assert is_dev_only(advisory, None) is False
    assert classify(advisory, config, None) == frozenset({BucketTag.REPORTABLE})


def test_classification_is_repeatable():
    """Test that classifying twice gives the same tags."""
    config = RunConfiguration(
        min_severity=Severity.MODERATE,
        exclusions=frozenset({3}),
        ignore_dev_deps=True,
    )
    advisories = [
        make_advisory(1, "low"),
        make_advisory(2, "high", paths=("jest>yargs",)),
        make_advisory(3, "critical"),
        make_advisory(4, "moderate"),
    ]

    first = [classify(a, config, IS_DEV) for a in advisories]
    second = [classify(a, config, IS_DEV) for a in advisories]

    assert first == second
