"""
Version parsing and per major.minor aggregation
"""

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from semantic_version import Version


@dataclass(frozen=True, order=True)
class MajorMinor:
    """A (major, minor) release line"""
    major: int
    minor: int

    @classmethod
    def of(cls, version: Version) -> 'MajorMinor':
        return cls(version.major, version.minor)

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}"


def parse_version(name: str, strict: bool = False) -> Optional[Version]:
    """
    Parse a tag name as a semantic version

    Lenient parsing drops a leading "v" and fills in missing components,
    so "v1.2" becomes 1.2.0 and "3.11-slim" becomes 3.11.0-slim.

    Args:
        name: Tag name
        strict: Only accept full SemVer 2.0 strings (default: False)

    Returns:
        Version, or None if the tag is not a version
    """
    try:
        if strict:
            return Version(name)
        if name[:1] in ('v', 'V'):
            name = name[1:]
        return Version.coerce(name)
    except ValueError:
        return None


def build_key(build: Tuple[str, ...]) -> tuple:
    """
    Sort key for build metadata

    Numeric identifiers compare numerically and sort before alphanumeric
    ones, so "1.2.3.10" (coerced to 1.2.3+10) is newer than "1.2.3.9".
    """
    return tuple(
        (0, int(part), '') if part.isdigit() else (1, 0, part)
        for part in build
    )


def is_newer(version: Version, current: Version) -> bool:
    """True if version outranks current, using build metadata to break precedence ties"""
    if version > current:
        return True
    if version < current:
        return False
    return build_key(version.build) > build_key(current.build)


class VersionAggregator:
    """Tracks the highest version seen for each major.minor line"""

    def __init__(self):
        self.versions: Dict[MajorMinor, Version] = {}

    def insert(self, version: Version):
        """
        Record a version, keeping it only if it is the highest of its line

        Args:
            version: Parsed version
        """
        key = MajorMinor.of(version)
        current = self.versions.get(key)
        if current is None or is_newer(version, current):
            self.versions[key] = version

    def snapshot(self) -> Dict[MajorMinor, Version]:
        """Highest version per line, ordered by (major, minor)"""
        return {key: self.versions[key] for key in sorted(self.versions)}

    def to_dict(self) -> Dict[str, str]:
        """Serializable form: {"1.2": "1.2.5", ...} in (major, minor) order"""
        return {str(key): str(version) for key, version in self.snapshot().items()}

    def __len__(self) -> int:
        return len(self.versions)

    def __contains__(self, key: MajorMinor) -> bool:
        return key in self.versions
