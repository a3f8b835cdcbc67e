from depchange.core.compare import TreeDiff
from depchange.core.model import Dep, render


def format_report(old_root: Dep, new_root: Dep, report: TreeDiff) -> str:
    """Plain-text change list followed by the new dependency tree."""
    lines = [f"{old_root} -> {new_root}"]
    if report.severity is not None:
        lines.append(f"Required update: {report.severity.label}")

    sections = [
        ("Direct dependencies", report.direct),
        ("Transitive dependencies", report.transitive),
    ]
    for title, changes in sections:
        if not changes:
            continue
        lines.append("")
        lines.append(f"{title}:")
        for change in changes:
            lines.append(f"- {change} ({change.diff.label})")

    for title, versions in (("Added", report.added), ("Removed", report.removed)):
        if not versions:
            continue
        lines.append("")
        lines.append(f"{title}:")
        for dep_id in sorted(versions):
            lines.append(f"- {dep_id}:{versions[dep_id]}")

    if report.is_empty():
        lines.append("")
        lines.append("No dependency changes.")

    lines.append("")
    lines.append("Dependency tree:")
    lines.append(render(new_root))
    return "\n".join(lines)
