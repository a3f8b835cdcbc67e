import re
from dataclasses import dataclass
from enum import Enum
from functools import total_ordering
from typing import Any, Dict, Optional, Tuple

from depchange.core.errors import InvariantError, ParseError

# major.minor[.patch][-suffix], whole string only
VERSION_RE = re.compile(r'(\d+)\.(\d+)(?:\.(\d+))?(?:-([a-zA-Z\d.]+))?', re.ASCII)


@total_ordering
class VersionDiff(Enum):
    """Smallest compatibility-breaking magnitude of a version change."""
    PATCH = 0
    MINOR = 1
    MAJOR = 2

    @property
    def rank(self) -> int:
        return self.value

    @property
    def label(self) -> str:
        return self.name.title()

    def __lt__(self, other):
        if not isinstance(other, VersionDiff):
            return NotImplemented
        return self.rank < other.rank


@total_ordering
@dataclass(frozen=True)
class Version:
    major: int
    minor: int
    patch: int = 0
    suffix: Optional[str] = None

    def __str__(self) -> str:
        base = f"{self.major}.{self.minor}.{self.patch}"
        if self.suffix is not None:
            return f"{base}-{self.suffix}"
        return base

    def sort_key(self) -> Tuple[int, int, int, bool, str]:
        # A release sorts after its own pre-releases
        return (self.major, self.minor, self.patch, self.suffix is None, self.suffix or "")

    def __lt__(self, other):
        if not isinstance(other, Version):
            return NotImplemented
        return self.sort_key() < other.sort_key()

    @property
    def is_prerelease(self) -> bool:
        return self.suffix is not None

    def diff(self, newer: "Version") -> VersionDiff:
        """Severity of moving from this version to ``newer``."""
        return classify_change(self, newer)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "major": self.major,
            "minor": self.minor,
            "patch": self.patch,
            "suffix": self.suffix,
        }


def parse(text: str) -> Version:
    """
    Parses ``major.minor[.patch][-suffix]`` into a Version.
    A missing patch is read as 0 and a missing suffix as None.
    """
    match = VERSION_RE.fullmatch(text)
    if not match:
        raise ParseError(text)

    major, minor, patch, suffix = match.groups()
    return Version(int(major), int(minor), int(patch) if patch else 0, suffix)


def compare(a: Version, b: Version) -> int:
    if a == b:
        return 0
    return -1 if a < b else 1


def classify_change(old: Version, new: Version) -> VersionDiff:
    """
    Classifies the update needed to go from ``old`` to ``new``.

    Rollbacks count too: 1.0.1 -> 1.0.0 is a patch update, while
    1.1.0 -> 1.0.0 is a major one since the removed minor release may
    have added API that users already build against.

    When only the pre-release suffix changes, the update is as large as
    the bump the pre-release was published for:
      - 1.0.0-M1 -> 1.0.0-M2 is major, same as 1.0.0-M2 -> 1.0.0
      - 1.1.0-RC1 -> 1.1.0 is minor
      - 1.1.2-M2 -> 1.1.2-M3 is patch
    """
    if old.major != new.major:
        return VersionDiff.MAJOR

    if old.minor != new.minor:
        if old.minor < new.minor:
            return VersionDiff.MINOR
        return VersionDiff.MAJOR

    if old.patch != new.patch:
        return VersionDiff.PATCH

    if old.suffix != new.suffix:
        if old.minor == 0 and old.patch == 0:
            return VersionDiff.MAJOR
        if old.patch == 0:
            return VersionDiff.MINOR
        return VersionDiff.PATCH

    raise InvariantError(f"versions are identical: {old} -> {new}")
