"""Tests for the npm semver helpers."""

from npm_mirror.versioning import semver


class TestValid:
    """Exact version detection."""

    def test_plain_version(self):
        assert semver.valid("1.2.3") == "1.2.3"

    def test_prefixes_are_cleaned(self):
        assert semver.valid("v1.2.3") == "1.2.3"
        assert semver.valid("=1.2.3") == "1.2.3"
        assert semver.valid("  1.2.3 ") == "1.2.3"

    def test_prerelease_is_exact(self):
        assert semver.valid("2.0.0-beta.1") == "2.0.0-beta.1"

    def test_ranges_and_tags_are_not_exact(self):
        for spec in ("^1.2.3", "~1.2", "1.x", "1.2", "latest", "", ">=1.0.0"):
            assert semver.valid(spec) is None


class TestMaxSatisfying:
    """Highest matching version selection."""

    VERSIONS = ["1.0.0", "1.2.0", "2.0.0"]

    def test_caret(self):
        assert semver.max_satisfying(self.VERSIONS, "^1.0.0") == "1.2.0"

    def test_tilde(self):
        assert semver.max_satisfying(["1.2.0", "1.2.5", "1.3.0"], "~1.2.0") == "1.2.5"

    def test_x_range(self):
        assert semver.max_satisfying(self.VERSIONS, "1.x") == "1.2.0"

    def test_star_and_empty(self):
        assert semver.max_satisfying(self.VERSIONS, "*") == "2.0.0"
        assert semver.max_satisfying(self.VERSIONS, "") == "2.0.0"

    def test_hyphen_range(self):
        assert semver.max_satisfying(self.VERSIONS, "1.0.0 - 1.5.0") == "1.2.0"

    def test_prerelease_excluded_from_plain_range(self):
        assert semver.max_satisfying(["1.0.0", "1.1.0-beta.1"], "^1.0.0") == "1.0.0"

    def test_invalid_versions_are_skipped(self):
        assert semver.max_satisfying(["garbage", "1.0.1"], "^1.0.0") == "1.0.1"

    def test_no_match(self):
        assert semver.max_satisfying(self.VERSIONS, "^3.0.0") is None

    def test_unparseable_range(self):
        assert semver.max_satisfying(self.VERSIONS, "latest") is None

    def test_blank_after_operator(self):
        """npm accepts whitespace between an operator and its version."""
        assert semver.max_satisfying(self.VERSIONS, ">= 1.0.0") == "2.0.0"
        assert semver.max_satisfying(self.VERSIONS, "^ 1.0.0") == "1.2.0"
        assert semver.max_satisfying(self.VERSIONS, "~ 1.2.0") == "1.2.0"
        assert semver.max_satisfying(self.VERSIONS, ">= 1.0.0 < 2.0.0") == "1.2.0"

    def test_hyphen_range_unaffected_by_operator_cleanup(self):
        assert semver.max_satisfying(self.VERSIONS, "1.0.0 - 2.0.0") == "2.0.0"
