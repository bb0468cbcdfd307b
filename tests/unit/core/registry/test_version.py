"""Tests for version parsing and comparison."""

from __future__ import annotations

import pytest

from plugbus.core.errors import InvalidVersionError
from plugbus.core.registry.version import compare_version, parse_version, validate_version


class TestCompareVersion:
    """Tests for compare_version()."""

    @pytest.mark.parametrize(
        ("version_a", "version_b", "expected"),
        [
            ("1.2.0", "1.2", 0),
            ("2.0.0", "1.9.9", 1),
            ("1.0", "1.0.1", -1),
            ("1", "1.0.0", 0),
            ("10.0", "9.99", 1),
            ("0.0.1", "0.1", -1),
            ("1.2.3.4", "1.2.3.9", 0),
            ("01.2", "1.2", 0),
        ],
    )
    def test_compare(self, version_a, version_b, expected):
        """Test comparison over the first three segments."""
        assert compare_version(version_a, version_b) == expected

    def test_antisymmetric(self):
        """Test that swapping arguments flips the sign."""
        assert compare_version("1.4", "1.3.9") == -compare_version("1.3.9", "1.4")

    def test_non_numeric_segment_raises(self):
        """Test that a non-numeric compared segment is rejected."""
        with pytest.raises(InvalidVersionError) as exc_info:
            compare_version("1.x", "1.0")
        assert exc_info.value.version == "1.x"


class TestParseVersion:
    """Tests for parse_version()."""

    def test_pads_missing_segments(self):
        """Test that missing segments are zero."""
        assert parse_version("3") == (3, 0, 0)
        assert parse_version("3.1") == (3, 1, 0)

    def test_ignores_extra_segments(self):
        """Test that segments past the third are dropped."""
        assert parse_version("1.2.3.4.5") == (1, 2, 3)

    @pytest.mark.parametrize("version", ["", "a", "1..2", "1.-2", " 1"])
    def test_rejects_malformed(self, version):
        """Test malformed compared segments."""
        with pytest.raises(InvalidVersionError):
            parse_version(version)


class TestValidateVersion:
    """Tests for validate_version()."""

    @pytest.mark.parametrize("version", ["0", "1.2", "1.2.3", "1.2.3.4", "2024.10.18"])
    def test_accepts_dotted_decimal(self, version):
        """Test valid versions are returned unchanged."""
        assert validate_version(version) == version

    @pytest.mark.parametrize(
        "version",
        ["", "1.", ".1", "1.2.x", "v1.0", "1.0-beta", "1.0\n", "1.2.3.x", "١.٢"],
    )
    def test_rejects_malformed(self, version):
        """Test invalid versions raise InvalidVersionError."""
        with pytest.raises(InvalidVersionError):
            validate_version(version)

    def test_rejects_non_string(self):
        """Test that non-strings are rejected."""
        with pytest.raises(InvalidVersionError):
            validate_version(1.2)  # type: ignore[arg-type]

    def test_error_is_value_error(self):
        """Test that InvalidVersionError can be caught as ValueError."""
        with pytest.raises(ValueError, match="dotted-decimal"):
            validate_version("abc")
