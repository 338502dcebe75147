"""Tests for workspace_manifests.versions."""

from __future__ import annotations

import pytest

from workspace_manifests.errors import MalformedSpecifierError
from workspace_manifests.versions import (
    ANY,
    is_satisfied,
    parse_range,
    parse_version,
    satisfies,
)


class TestParseVersion:
    def test_full_semver(self) -> None:
        v = parse_version("1.2.3")
        assert (v.major, v.minor, v.patch) == (1, 2, 3)

    def test_leading_v_and_equals(self) -> None:
        assert parse_version("v1.2.3") == parse_version("=1.2.3")

    def test_prerelease(self) -> None:
        assert parse_version("1.2.3-beta.1").prerelease == "beta.1"

    def test_drops_build_metadata(self) -> None:
        assert parse_version("1.2.3+sha.abc").build is None

    def test_partial_version_rejected(self) -> None:
        with pytest.raises(ValueError):
            parse_version("1.2")


class TestParseRange:
    def test_empty_is_any(self) -> None:
        assert parse_range("") == [[ANY]]

    def test_star_is_any(self) -> None:
        assert parse_range("*") == [[ANY]]

    def test_star_alternative_widens_whole_range(self) -> None:
        assert parse_range("^2.0.0-0 || *") == [[ANY]]
        assert parse_range("1.x || ") == [[ANY]]

    def test_alternatives(self) -> None:
        assert len(parse_range("1.x || >=3")) == 2

    @pytest.mark.parametrize(
        "specifier",
        ["latest", "file:../utils", ">=1.0.0 <", "^1.2.3.4", "1.2.3 -", "git+https://x/y.git"],
    )
    def test_malformed(self, specifier: str) -> None:
        with pytest.raises(MalformedSpecifierError, match="Malformed"):
            parse_range(specifier)


class TestSatisfies:
    @pytest.mark.parametrize(
        ("version", "specifier", "expected"),
        [
            # exact
            ("1.2.3", "1.2.3", True),
            ("1.2.3", "v1.2.3", True),
            ("1.2.4", "=1.2.3", False),
            # caret
            ("1.2.0", "^1.0.0", True),
            ("2.0.0", "^1.0.0", False),
            ("0.2.5", "^0.2.3", True),
            ("0.3.0", "^0.2.3", False),
            ("0.0.3", "^0.0.3", True),
            ("0.0.4", "^0.0.3", False),
            ("1.9.9", "^1.x", True),
            ("0.0.9", "^0.0.x", True),
            ("0.1.0", "^0.0.x", False),
            # tilde
            ("1.2.9", "~1.2.3", True),
            ("1.3.0", "~1.2.3", False),
            ("1.2.4", "~>1.2.3", True),
            ("1.2.0", "~1.2", True),
            ("1.9.0", "~1", True),
            ("2.0.0", "~1", False),
            # x-ranges
            ("1.5.0", "1.x", True),
            ("2.0.0", "1.x", False),
            ("1.2.7", "1.2.*", True),
            ("1.3.0", "1.2", False),
            ("5.0.0", "*", True),
            ("5.0.0", "", True),
            # comparators
            ("1.2.9", ">1.2", False),
            ("1.3.0", ">1.2", True),
            ("1.2.9", "<=1.2", True),
            ("1.3.0", "<=1.2", False),
            ("1.1.9", "<1.2", True),
            ("1.2.0", "<1.2", False),
            ("1.5.0", ">= 1.0.0 < 2.0.0", True),
            ("2.0.0", ">=1.0.0 <2.0.0", False),
            ("1.0.0", ">*", False),
            # alternatives
            ("2.5.0", "1.x || >=2.5.0", True),
            ("2.4.0", "1.x || >=2.5.0", False),
            # hyphen ranges
            ("2.3.4", "1.2.3 - 2.3.4", True),
            ("2.3.5", "1.2.3 - 2.3.4", False),
            ("1.2.2", "1.2.3 - 2.3.4", False),
            ("2.3.9", "1.2.3 - 2.3", True),
            ("2.4.0", "1.2.3 - 2.3", False),
            ("2.9.0", "1.2 - 2", True),
        ],
    )
    def test_ranges(self, version: str, specifier: str, expected: bool) -> None:
        assert satisfies(version, specifier) is expected

    def test_prerelease_same_tuple_allowed(self) -> None:
        assert satisfies("1.2.3-beta.2", "^1.2.3-beta.1")

    def test_prerelease_other_tuple_excluded(self) -> None:
        assert not satisfies("1.3.0-beta", "^1.2.3-beta.1")

    def test_prerelease_not_matched_by_star(self) -> None:
        assert not satisfies("1.0.0-beta", "*")

    def test_star_alternative_excludes_prereleases(self) -> None:
        assert not satisfies("2.0.0-alpha", "^2.0.0-0 || *")

    def test_prerelease_below_caret_upper_bound(self) -> None:
        assert not satisfies("2.0.0-alpha", "^1.0.0")

    def test_malformed_specifier_raises(self) -> None:
        with pytest.raises(MalformedSpecifierError):
            satisfies("1.0.0", "latest")


class TestIsSatisfied:
    def test_true(self) -> None:
        assert is_satisfied("1.2.0", "^1.0.0")

    def test_malformed_specifier_is_false(self) -> None:
        assert is_satisfied("1.0.0", "workspace:*") is False

    def test_malformed_version_is_false(self) -> None:
        assert is_satisfied("not-a-version", "*") is False
