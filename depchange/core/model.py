import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, FrozenSet, Iterable, Iterator, List, Optional, Set, Tuple

from depchange.core.version import Version, parse

# (organization, module name) -> keep it?
AllowPredicate = Callable[[str, str], bool]

# Runtime and platform modules that only add noise to a report.
# An empty name prefix covers the whole organization.
DEFAULT_DISALLOWED: FrozenSet[Tuple[str, str]] = frozenset({
    ("org.scala-lang", "scala-library"),
    ("org.scala-lang", "scala3-library"),
    ("org.scala-lang", "scala-reflect"),
    ("org.scala-native", ""),
    ("org.scala-js", ""),
})

INDENT = "  "
ALREADY_LISTED = "(already listed)"


@dataclass
class RawNode:
    """Node of a resolved graph as handed over by the resolver."""
    module: str
    version: str
    children: List['RawNode'] = field(default_factory=list)

    @property
    def organization(self) -> str:
        if ":" not in self.module:
            return ""
        return self.module.split(":", 1)[0]

    @property
    def name(self) -> str:
        return self.module.split(":", 1)[-1]


@dataclass(frozen=True)
class Dep:
    id: str
    version: Version
    children: Tuple['Dep', ...] = ()

    def __str__(self) -> str:
        return f"{self.id}:{self.version}"

    @property
    def key(self) -> Tuple[str, Version]:
        return self.id, self.version

    def to_dict(self) -> Dict[str, Any]:
        return {
            "module": self.id,
            "version": str(self.version),
            "children": [child.to_dict() for child in self.children],
        }

    def find(self, dep_id: str) -> Optional['Dep']:
        """First node with the given id, in pre-order."""
        pending: List[Dep] = [self]
        while pending:
            dep = pending.pop()
            if dep.id == dep_id:
                return dep
            pending.extend(reversed(dep.children))
        return None

    def to_md_tree(self) -> str:
        return render(self)


def disallow(pairs: Iterable[Tuple[str, str]]) -> AllowPredicate:
    """Builds a predicate rejecting modules matched by (organization, name prefix) pairs."""
    rules = frozenset(pairs)

    def allowed(organization: str, name: str) -> bool:
        for org, prefix in rules:
            if organization == org and name.startswith(prefix):
                return False
        return True

    return allowed


is_allowed: AllowPredicate = disallow(DEFAULT_DISALLOWED)


def _allowed_children(raw: RawNode, allow: AllowPredicate) -> List[RawNode]:
    children = []
    for child in raw.children:
        if not allow(child.organization, child.name):
            logging.debug(f"Skipping {child.module}:{child.version} (disallowed)")
            continue
        children.append(child)
    return children


def build(raw: RawNode, allow: AllowPredicate = is_allowed) -> Dep:
    """
    Converts a raw resolver node into a Dep tree.
    Children rejected by ``allow`` are dropped before they are pushed,
    so nothing below them is parsed. Nodes are built post-order from an
    explicit stack, so depth is only bounded by memory.
    """
    # (raw node, children still to build, children built so far)
    stack: List[Tuple[RawNode, Iterator[RawNode], List[Dep]]] = [
        (raw, iter(_allowed_children(raw, allow)), [])
    ]

    while True:
        node, remaining, built = stack[-1]
        child = next(remaining, None)
        if child is not None:
            stack.append((child, iter(_allowed_children(child, allow)), []))
            continue

        stack.pop()
        dep = Dep(node.module, parse(node.version), tuple(built))
        if not stack:
            return dep
        stack[-1][2].append(dep)


def render_lines(root: Dep) -> List[str]:
    """
    Pre-order outline of the tree, two spaces per level.

    Every (id, version) is expanded once, where traversal meets it first.
    Later occurrences are marked as already listed and their subtree
    is left out.
    """
    lines: List[str] = []
    visited: Set[Tuple[str, Version]] = set()
    pending: List[Tuple[Dep, int]] = [(root, 0)]

    while pending:
        dep, depth = pending.pop()
        prefix = INDENT * depth
        if dep.key in visited:
            lines.append(f"{prefix}- {dep} {ALREADY_LISTED}")
            continue

        visited.add(dep.key)
        lines.append(f"{prefix}- {dep}")
        # Stack: push in reverse so the first child comes out first
        for child in reversed(dep.children):
            pending.append((child, depth + 1))

    return lines


def render(root: Dep) -> str:
    return "\n".join(render_lines(root))
