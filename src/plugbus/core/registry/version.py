"""Dotted-decimal version parsing and comparison."""

from __future__ import annotations

import re

from plugbus.core.errors import InvalidVersionError

# Only the first three segments take part in comparisons
SIGNIFICANT_SEGMENTS = 3

_VERSION_RE = re.compile(r"[0-9]+(\.[0-9]+)*")


def validate_version(version: str) -> str:
    """
    Check that a version string is dotted-decimal.

    Args:
        version: Version string such as "1", "1.2" or "1.2.3"

    Returns:
        The version string, unchanged

    Raises:
        InvalidVersionError: If the string is not dotted-decimal
    """
    if not isinstance(version, str) or not _VERSION_RE.fullmatch(version):
        raise InvalidVersionError(version)
    return version


def _segment(version: str, token: str) -> int:
    if not (token.isascii() and token.isdigit()):
        raise InvalidVersionError(version)
    return int(token, 10)


def parse_version(version: str) -> tuple[int, int, int]:
    """
    Parse a version into its three significant segments.

    Missing segments count as 0 and anything past the third is ignored,
    so "1.2" parses to (1, 2, 0) and "1.2.3.4" to (1, 2, 3).
    """
    if not isinstance(version, str):
        raise InvalidVersionError(version)

    tokens = version.split(".")[:SIGNIFICANT_SEGMENTS]
    numbers = [_segment(version, token) for token in tokens]
    numbers.extend([0] * (SIGNIFICANT_SEGMENTS - len(numbers)))
    return numbers[0], numbers[1], numbers[2]


def compare_version(version_a: str, version_b: str) -> int:
    """
    Compare two dotted-decimal versions.

    Args:
        version_a: Left-hand version
        version_b: Right-hand version

    Returns:
        1 if version_a is newer, -1 if it is older, 0 if both are equal
        over the first three segments
    """
    parsed_a = parse_version(version_a)
    parsed_b = parse_version(version_b)

    for number_a, number_b in zip(parsed_a, parsed_b):
        if number_a != number_b:
            return 1 if number_a > number_b else -1

    return 0
