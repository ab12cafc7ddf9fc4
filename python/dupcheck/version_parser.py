"""Version parsing utilities for npm-style (loose semver) version strings."""

import re
from dataclasses import dataclass
from typing import Optional, Union


@dataclass
class VersionInfo:
    """
    Parsed version information.

    Attributes:
        major: Major version component
        minor: Minor version component (0 when omitted)
        patch: Patch version component (0 when omitted)
        prerelease: Pre-release identifiers after '-', if any
        build: Build metadata after '+', if any
        original_string: The original version string as-is
    """
    major: int
    minor: int
    patch: int
    original_string: str
    prerelease: Optional[str] = None
    build: Optional[str] = None


class VersionParser:
    """Parser for the version strings found in package.json files."""

    # Loose semver: optional leading 'v' or '=', minor and patch may be omitted
    # Example: v1.2.3-beta.1+build.5
    SEMVER_PATTERN = re.compile(
        r'^\s*[=v]*\s*'
        r'(0|[1-9][0-9]*)'                  # Major
        r'(?:\.(0|[1-9][0-9]*))?'           # Minor
        r'(?:\.(0|[1-9][0-9]*))?'           # Patch
        r'(?:-?([0-9A-Za-z.-]+?))??'        # Pre-release
        r'(?:\+([0-9A-Za-z.-]+))?\s*$'      # Build metadata
    )

    @classmethod
    def parse(cls, version: str) -> Optional[VersionInfo]:
        """
        Parse a version string.

        Args:
            version: The version string to parse

        Returns:
            VersionInfo, or None if the string is not a recognizable version
        """
        if not version:
            return None

        match = cls.SEMVER_PATTERN.match(version)
        if not match:
            return None

        return VersionInfo(
            major=int(match.group(1)),
            minor=int(match.group(2) or 0),
            patch=int(match.group(3) or 0),
            original_string=version,
            prerelease=match.group(4),
            build=match.group(5),
        )

    @classmethod
    def get_major(cls, version: str) -> Optional[int]:
        """
        Get the major version component.

        Returns:
            The major version, or None for unparseable versions
        """
        version_info = cls.parse(version)
        return version_info.major if version_info else None

    @classmethod
    def group_key(cls, version: str) -> Union[int, str]:
        """
        Key used by relaxed mode to group versions.

        Parseable versions group by major version. Anything else is only
        grouped with an identical version string.
        """
        major = cls.get_major(version)
        return version if major is None else major
