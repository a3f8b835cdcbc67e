import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from depchange.core.model import Dep
from depchange.core.version import Version, VersionDiff, classify_change


@dataclass(frozen=True)
class VersionChange:
    id: str
    old: Version
    new: Version
    diff: VersionDiff
    direct: bool = False

    def __str__(self) -> str:
        return f"{self.id}: {self.old} -> {self.new}"

    @property
    def is_upgrade(self) -> bool:
        return self.new > self.old

    @property
    def is_rollback(self) -> bool:
        return self.new < self.old


@dataclass
class TreeDiff:
    changes: Dict[str, VersionChange] = field(default_factory=dict)
    added: Dict[str, Version] = field(default_factory=dict)
    removed: Dict[str, Version] = field(default_factory=dict)

    @property
    def direct(self) -> List[VersionChange]:
        return sorted((c for c in self.changes.values() if c.direct), key=lambda c: c.id)

    @property
    def transitive(self) -> List[VersionChange]:
        return sorted((c for c in self.changes.values() if not c.direct), key=lambda c: c.id)

    @property
    def severity(self) -> Optional[VersionDiff]:
        """Largest change in the tree, None when no version moved."""
        if not self.changes:
            return None
        return max(c.diff for c in self.changes.values())

    def count(self, diff: VersionDiff) -> int:
        return sum(1 for c in self.changes.values() if c.diff == diff)

    def is_empty(self) -> bool:
        return not (self.changes or self.added or self.removed)


def collect_versions(root: Dep) -> Dict[str, Version]:
    """
    First version met for every id below ``root``, in pre-order.

    A resolved module+version always has the same dependencies, so a
    repeated (id, version) is walked only once. Children that differ
    under a later repeat are not collected.
    """
    versions: Dict[str, Version] = {}
    visited = set()
    pending = list(reversed(root.children))

    while pending:
        dep = pending.pop()
        if dep.key in visited:
            continue
        visited.add(dep.key)
        versions.setdefault(dep.id, dep.version)
        pending.extend(reversed(dep.children))

    return versions


def diff_trees(old_root: Dep, new_root: Dep) -> TreeDiff:
    """Matches both trees by module id and classifies every moved version."""
    old_versions = collect_versions(old_root)
    new_versions = collect_versions(new_root)
    direct_ids = {d.id for d in old_root.children} | {d.id for d in new_root.children}

    result = TreeDiff()
    for dep_id, new_version in new_versions.items():
        old_version = old_versions.get(dep_id)
        if old_version is None:
            result.added[dep_id] = new_version
        elif old_version != new_version:
            result.changes[dep_id] = VersionChange(
                dep_id,
                old_version,
                new_version,
                classify_change(old_version, new_version),
                direct=dep_id in direct_ids,
            )

    for dep_id, old_version in old_versions.items():
        if dep_id not in new_versions:
            result.removed[dep_id] = old_version

    logging.debug(
        f"Compared {old_root} with {new_root}: {len(result.changes)} changed, "
        f"{len(result.added)} added, {len(result.removed)} removed"
    )
    return result
