"""
Semantic Versions.

Versions are compared as (major, minor, patch) triples. Missing parts count
as 0, a leading "v" is ignored, and pre-release or build suffixes
("1.2.0-rc.1", "1.2.0+build.5") do not take part in the comparison.
"""

import re
from typing import NamedTuple

_LEADING_DIGITS = re.compile(r"\d+")


class Version(NamedTuple):
    """Three-part version identifier, ordered componentwise."""

    major: int = 0
    minor: int = 0
    patch: int = 0

    @classmethod
    def parse(cls, text: str) -> "Version":
        """Parse a version string. Components without leading digits count as 0."""
        core = text.strip().lstrip("vV")
        core = re.split(r"[-+]", core, maxsplit=1)[0]

        parts = []
        for piece in core.split(".")[:3]:
            match = _LEADING_DIGITS.match(piece)
            parts.append(int(match.group()) if match else 0)

        return cls(*parts)

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


def compare_versions(v1: str, v2: str) -> int:
    """
    Compare two version strings.

    Returns:
        1 if v1 > v2, -1 if v1 < v2, 0 if equal
    """
    a = Version.parse(v1)
    b = Version.parse(v2)
    if a > b:
        return 1
    if a < b:
        return -1
    return 0
