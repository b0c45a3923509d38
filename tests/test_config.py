"""Unit tests for run configuration, exclusions file and manifest loading."""

import json

import pytest
from pydantic import ValidationError

from auditgate.core.config import (
    DEFAULT_NETWORK_ERROR_SIGNATURE,
    RunConfiguration,
    load_config,
    parse_exclusions,
)
from auditgate.core.errors import ConfigError
from auditgate.core.exclusions import (
    load_exclusions_file,
    parse_exclusions_file,
    resolve_exclusions,
)
from auditgate.core.manifest import load_dev_dependencies, load_dev_dependency_predicate
from auditgate.core.severity import Severity


# Configuration
def test_load_config_defaults(monkeypatch):
    monkeypatch.delenv("IMPROVED_AUDIT_YARN", raising=False)
    monkeypatch.delenv("IMPROVED_AUDIT_NETWORK_ERROR", raising=False)

    config = load_config()

    assert config.min_severity == Severity.LOW
    assert config.exclusions == frozenset()
    assert config.retry_on_network_failure is False
    assert config.yarn_binary == "yarn"
    assert config.network_error_signature == DEFAULT_NETWORK_ERROR_SIGNATURE
    assert config.retry_delay_seconds == 1.0


def test_load_config_reads_environment(monkeypatch):
    monkeypatch.setenv("IMPROVED_AUDIT_YARN", "/opt/yarn/bin/yarn")
    monkeypatch.setenv("IMPROVED_AUDIT_NETWORK_ERROR", "ESOCKETTIMEDOUT")

    config = load_config("critical")

    assert config.min_severity == Severity.CRITICAL
    assert config.yarn_binary == "/opt/yarn/bin/yarn"
    assert config.network_error_signature == "ESOCKETTIMEDOUT"


def test_load_config_rejects_invalid_severity():
    with pytest.raises(ConfigError):
        load_config("urgent")


def test_load_config_rejects_negative_delay():
    with pytest.raises(ConfigError, match="Invalid configuration"):
        load_config(retry_delay_seconds=-1)


def test_configuration_is_immutable():
    config = RunConfiguration()

    with pytest.raises(ValidationError):
        config.min_severity = Severity.CRITICAL


# Exclusion lists
def test_parse_exclusions():
    assert parse_exclusions("1064,1065") == frozenset({1064, 1065})
    assert parse_exclusions(" 1, 2,,3 ") == frozenset({1, 2, 3})
    assert parse_exclusions("") == frozenset()


@pytest.mark.parametrize("value", ["abc", "12,x", "1.5", "-3", "²", "12,²", "٣"])
def test_parse_exclusions_rejects_non_integers(value):
    with pytest.raises(ConfigError, match="Invalid advisory id"):
        parse_exclusions(value)


def test_parse_exclusions_file_strips_comments():
    content = "# lodash, no upstream fix\n1065, 1066\n782  # dev server only\n\n"

    assert parse_exclusions_file(content) == frozenset({1065, 1066, 782})


def test_load_exclusions_file_missing(tmp_path):
    assert load_exclusions_file(tmp_path / ".iyarc") == frozenset()


def test_load_exclusions_file_malformed(tmp_path):
    path = tmp_path / ".iyarc"
    path.write_text("1065, oops\n")

    with pytest.raises(ConfigError, match=".iyarc"):
        load_exclusions_file(path)


def test_command_line_exclusions_win_over_file(tmp_path):
    path = tmp_path / ".iyarc"
    path.write_text("1, 2\n")

    assert resolve_exclusions("7", path) == frozenset({7})
    assert resolve_exclusions(None, path) == frozenset({1, 2})
    assert resolve_exclusions("", path) == frozenset({1, 2})


# Manifest
def test_load_dev_dependencies(tmp_path):
    manifest = tmp_path / "package.json"
    manifest.write_text(json.dumps({
        "name": "app",
        "dependencies": {"express": "^4.17.1"},
        "devDependencies": {"jest": "^29.0.0", "eslint": "^8.0.0"},
    }))

    assert load_dev_dependencies(manifest) == frozenset({"jest", "eslint"})


def test_manifest_without_dev_dependencies(tmp_path):
    manifest = tmp_path / "package.json"
    manifest.write_text(json.dumps({"name": "app"}))

    is_dev = load_dev_dependency_predicate(manifest)

    assert is_dev is not None
    assert is_dev(("express", "qs")) is False


def test_missing_manifest_gives_no_predicate(tmp_path):
    assert load_dev_dependency_predicate(tmp_path / "package.json") is None


def test_invalid_manifest(tmp_path):
    manifest = tmp_path / "package.json"
    manifest.write_text("{not json")

    with pytest.raises(ConfigError, match="Unable to read manifest"):
        load_dev_dependencies(manifest)


def test_dev_predicate_matches_top_level_package(tmp_path):
    manifest = tmp_path / "package.json"
    manifest.write_text(json.dumps({"devDependencies": {"jest": "^29.0.0"}}))

    is_dev = load_dev_dependency_predicate(manifest)

    assert is_dev(("jest", "jest-cli", "yargs")) is True
    assert is_dev(("jest",)) is True
    assert is_dev(("express", "jest")) is False
    assert is_dev(("jest-cli",)) is False
    assert is_dev(()) is False
