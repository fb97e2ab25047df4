"""Tests for monorepo_helper.versions."""

from __future__ import annotations

import pytest

from monorepo_helper.errors import PrereleaseIncrementError, TagParseError
from monorepo_helper.models import SemanticVersion
from monorepo_helper.versions import (
    increment_patch,
    increment_prerelease,
    is_semantic_version,
    next_version,
    parse_version,
    split_trailing_number,
)


class TestParseVersion:
    def test_full_semver(self) -> None:
        v = parse_version("1.2.3")
        assert v.major == 1
        assert v.minor == 2
        assert v.patch == 3
        assert v.prerelease == ()

    def test_prerelease(self) -> None:
        v = parse_version("2.0.0-alpha1")
        assert v.prerelease == ("alpha1",)

    def test_dotted_prerelease_keeps_numbers_as_ints(self) -> None:
        v = parse_version("2.0.0-rc.2")
        assert v.prerelease == ("rc", 2)

    def test_v_prefix_is_tolerated(self) -> None:
        assert parse_version("v1.4.0") == parse_version("1.4.0")

    def test_equals_prefix_is_tolerated(self) -> None:
        assert parse_version("=1.4.0") == parse_version("1.4.0")

    @pytest.mark.parametrize(
        "tag",
        ["bogus-tag", "1.2", "2.0-rc", "1.2.3.4", "release-1.2.3", "01.2.3", ""],
    )
    def test_rejects_non_semver(self, tag: str) -> None:
        with pytest.raises(TagParseError):
            parse_version(tag)

    def test_rejects_build_metadata(self) -> None:
        with pytest.raises(TagParseError, match="build metadata"):
            parse_version("1.2.3+build.5")

    def test_error_carries_tag(self) -> None:
        with pytest.raises(TagParseError) as excinfo:
            parse_version("nope")
        assert excinfo.value.tag == "nope"

    @pytest.mark.parametrize(
        "tag", ["0.0.0", "1.2.3", "10.20.30-beta.4", "1.0.0-alpha1", "3.1.4-rc.1.x"]
    )
    def test_string_round_trip(self, tag: str) -> None:
        v = parse_version(tag)
        assert str(v) == tag
        assert parse_version(str(v)) == v

    def test_is_semantic_version(self) -> None:
        assert is_semantic_version("v1.0.0")
        assert not is_semantic_version("latest")


class TestSplitTrailingNumber:
    def test_alpha_number(self) -> None:
        assert split_trailing_number("alpha1") == ("alpha", "1")

    def test_dotted(self) -> None:
        assert split_trailing_number("rc.12") == ("rc.", "12")

    def test_no_number(self) -> None:
        assert split_trailing_number("beta") == ("beta", "")

    def test_only_number(self) -> None:
        assert split_trailing_number("7") == ("", "7")


class TestIncrementPatch:
    def test_bump(self) -> None:
        assert str(increment_patch(parse_version("1.2.3"))) == "1.2.4"

    def test_bump_high_patch(self) -> None:
        assert str(increment_patch(parse_version("1.0.99"))) == "1.0.100"

    def test_clears_prerelease(self) -> None:
        bumped = increment_patch(parse_version("1.2.3-rc1"))
        assert bumped == SemanticVersion(major=1, minor=2, patch=4)

    def test_keeps_major_and_minor(self) -> None:
        bumped = increment_patch(parse_version("7.8.0"))
        assert (bumped.major, bumped.minor, bumped.patch) == (7, 8, 1)


class TestIncrementPrerelease:
    def test_alpha1_becomes_alpha2(self) -> None:
        bumped = increment_prerelease(parse_version("1.0.0-alpha1"))
        assert bumped.prerelease_identifier == "alpha2"
        assert str(bumped) == "1.0.0-alpha2"

    def test_rc9_becomes_rc10(self) -> None:
        bumped = increment_prerelease(parse_version("2.0.0-rc9"))
        assert str(bumped) == "2.0.0-rc10"

    def test_dotted_number(self) -> None:
        bumped = increment_prerelease(parse_version("2.0.0-beta.3"))
        assert str(bumped) == "2.0.0-beta.4"
        assert bumped.prerelease == ("beta", 4)

    def test_core_is_unchanged(self) -> None:
        bumped = increment_prerelease(parse_version("3.4.5-rc1"))
        assert (bumped.major, bumped.minor, bumped.patch) == (3, 4, 5)

    def test_without_trailing_number_raises(self) -> None:
        with pytest.raises(PrereleaseIncrementError) as excinfo:
            increment_prerelease(parse_version("2.0.0-rc"))
        assert excinfo.value.prerelease == "rc"

    def test_digits_before_trailing_number_raise(self) -> None:
        with pytest.raises(PrereleaseIncrementError) as excinfo:
            increment_prerelease(parse_version("1.0.0-a1b2"))
        assert excinfo.value.prerelease == "a1b2"

    def test_without_prerelease_raises(self) -> None:
        with pytest.raises(PrereleaseIncrementError):
            increment_prerelease(parse_version("2.0.0"))


class TestNextVersion:
    def test_final_release_bumps_patch(self) -> None:
        assert str(next_version(parse_version("1.3.0"))) == "1.3.1"

    def test_prerelease_bumps_embedded_number(self) -> None:
        assert str(next_version(parse_version("1.3.0-beta2"))) == "1.3.0-beta3"
