import sys
from pathlib import Path
import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from errors import ConfigError
from version_check import (
    SemVer,
    coerce_version,
    is_compound_range,
    parse_range,
    sanitize_version,
    satisfies,
)


@pytest.mark.parametrize(
    "version, constraint",
    [
        ("20.1.0", ">=18.0.0"),
        ("v20.1.0", ">=18"),
        ("9.5.0", ">= 9.0.0"),
        ("3.5.2", "^3.0.0"),
        ("0.2.5", "^0.2.3"),
        ("1.2.9", "~1.2.3"),
        ("1.9.0", "1.x"),
        ("2.3.4", "1.2.3 - 2.3.4"),
        ("2.3.9", "1.2.3 - 2.3"),
        ("14.17.0", "^12.22.0 || ^14.17.0 || >=16.0.0"),
        ("1.2.3", "=1.2.3"),
        ("1.2.3+build.5", "1.2.3"),
        ("1.3.0", ">1.2"),
        ("1.2.9", "<=1.2"),
        ("1.9.9", "<2.0.0-0"),
        ("18.0.0-rc.2", ">=18.0.0-rc.1"),
        ("1.22.19", "*"),
        ("1.22.19", ""),
    ],
)
def test_satisfied(version, constraint):
    assert satisfies(version, constraint)


@pytest.mark.parametrize(
    "version, constraint",
    [
        ("16.0.0", ">=18.0.0"),
        ("4.0.0", "^3.0.0"),
        ("0.3.0", "^0.2.3"),
        ("0.0.4", "^0.0.3"),
        ("1.3.0", "~1.2.3"),
        ("2.0.0", "1.x"),
        ("2.3.5", "1.2.3 - 2.3.4"),
        ("2.4.0", "1.2.3 - 2.3"),
        ("13.0.0", "^12.22.0 || ^14.17.0 || >=16.0.0"),
        ("1.2.9", ">1.2"),
        ("1.3.0", "<=1.2"),
        ("2.0.0", "<2.0.0-0"),
        ("18.0.0-rc.1", ">=17.0.0"),
        ("1.0.0", ">*"),
    ],
)
def test_not_satisfied(version, constraint):
    assert not satisfies(version, constraint)


def test_unparsable_reported_version_never_satisfies():
    assert not satisfies("command not found", ">=1.0.0")
    assert not satisfies("20.1", ">=18")


def test_invalid_range_raises():
    with pytest.raises(ConfigError):
        satisfies("1.0.0", ">=banana")


def test_parse_range_caret_expansion():
    assert parse_range("^1.2.3") == [[(">=", SemVer.parse("1.2.3")), ("<", SemVer.parse("2.0.0"))]]


def test_coerce_version_strips_prefix():
    assert coerce_version("  v18.2.0\n") == SemVer.parse("18.2.0")
    assert coerce_version("x.1.0") is None


def test_sanitize_version():
    assert sanitize_version(">=18.0.0") == "18.0.0"
    assert sanitize_version("^3.1") == "3.1"
    assert sanitize_version("~1.2.3") == "1.2.3"
    assert sanitize_version("18.2.0") == "18.2.0"


def test_sanitize_compound_range_is_lossy():
    sanitized = sanitize_version(">=1.0.0 <2.0.0")
    assert sanitized == "1.0.0 <2.0.0"
    assert is_compound_range(sanitized)
    assert not is_compound_range("18.2.0")


@pytest.mark.parametrize(
    "version, constraint, expected",
    [
        ("1.2.3-post", ">=1.2.3", False),
        ("1.2.3-rev.1", ">1.2.2", False),
        ("1.2.3-dev", ">=1.2.3-alpha", True),
        ("1.2.3-pre", ">=1.2.3-rc.1", False),
        ("1.2.3-next.1", ">=1.2.3-alpha", True),
        ("1.2.3-alpha.10", ">1.2.3-alpha.9", True),
        ("1.2.3-alpha.1", ">1.2.3-alpha", True),
        ("1.2.3-1", "<1.2.3-alpha", True),
        ("1.2.3", ">1.2.3-post", True),
    ],
)
def test_prerelease_tags_use_semver_precedence(version, constraint, expected):
    assert satisfies(version, constraint) is expected


def test_semver_ordering():
    assert SemVer.parse("1.2.3-alpha") < SemVer.parse("1.2.3-alpha.1")
    assert SemVer.parse("1.2.3-beta.2") < SemVer.parse("1.2.3-beta.11")
    assert SemVer.parse("1.2.3-rc.1") < SemVer.parse("1.2.3")
    assert SemVer.parse("1.2.3-post").is_prerelease
    assert str(SemVer.parse("v1.2.3-beta.1+build")) == "1.2.3-beta.1"


def test_empty_prerelease_identifier_rejected():
    with pytest.raises(ConfigError):
        satisfies("1.2.3", ">=1.2.3-alpha..1")
