# Tests for plugin_update_checker.version
# Covers: lenient parsing, newer-than check, minimum requirement gate.
# Created: 2026-10-13

import pytest
from packaging.version import Version

from plugin_update_checker.version import is_newer, parse_version, requirement_met


class TestParseVersion:
    def test_plain(self):
        assert parse_version("1.2.3") == Version("1.2.3")

    def test_leading_v(self):
        assert parse_version("v2.0") == Version("2.0")

    def test_distro_suffix_falls_back_to_release(self):
        assert parse_version("8.1.2-1ubuntu4.3") == Version("8.1.2")

    @pytest.mark.parametrize("value", [None, "", "latest", "   "])
    def test_unusable(self, value):
        assert parse_version(value) is None


class TestIsNewer:
    def test_newer_patch(self):
        assert is_newer("1.0.0", "1.0.1") is True

    def test_newer_major(self):
        assert is_newer("1.9.9", "2.0.0") is True

    def test_same_version(self):
        assert is_newer("2.0.0", "2.0.0") is False

    def test_older_version(self):
        assert is_newer("2.0.0", "1.9.0") is False

    def test_two_vs_three_segments(self):
        assert is_newer("1.0", "1.0.0") is False
        assert is_newer("1.0", "1.0.1") is True

    def test_prerelease_is_older_than_release(self):
        assert is_newer("2.0.0", "2.0.0rc1") is False
        assert is_newer("2.0.0rc1", "2.0.0") is True

    def test_unparseable_candidate(self):
        assert is_newer("1.0.0", "nightly") is False

    def test_unparseable_current(self):
        assert is_newer("dev", "2.0.0") is False


class TestRequirementMet:
    def test_lower_requirement(self):
        assert requirement_met("6.0", "6.5") is True

    def test_equal_requirement(self):
        assert requirement_met("6.5", "6.5") is True

    def test_higher_requirement(self):
        assert requirement_met("7.0", "6.5") is False

    @pytest.mark.parametrize("required", [None, "", "  "])
    def test_no_requirement(self, required):
        assert requirement_met(required, "6.5") is True

    def test_unknown_host_version(self):
        assert requirement_met("6.0", "") is False
