import unittest
from depchange.core.compare import diff_trees
from depchange.core.model import Dep
from depchange.core.version import parse
from depchange.report import format_report


def dep(dep_id, version, *children):
    return Dep(dep_id, parse(version), tuple(children))


class TestFormatReport(unittest.TestCase):

    def test_grouped_report(self):
        old = dep("lib", "1.0.0", dep("a", "1.0.0", dep("b", "2.0.0")), dep("gone", "0.1.0"))
        new = dep("lib", "1.1.0", dep("a", "2.0.0", dep("b", "2.0.1")), dep("fresh", "0.2.0"))

        text = format_report(old, new, diff_trees(old, new))

        self.assertEqual(text.splitlines(), [
            "lib:1.0.0 -> lib:1.1.0",
            "Required update: Major",
            "",
            "Direct dependencies:",
            "- a: 1.0.0 -> 2.0.0 (Major)",
            "",
            "Transitive dependencies:",
            "- b: 2.0.0 -> 2.0.1 (Patch)",
            "",
            "Added:",
            "- fresh:0.2.0",
            "",
            "Removed:",
            "- gone:0.1.0",
            "",
            "Dependency tree:",
            "- lib:1.1.0",
            "  - a:2.0.0",
            "    - b:2.0.1",
            "  - fresh:0.2.0",
        ])

    def test_no_changes(self):
        tree = dep("lib", "1.0.0", dep("a", "1.0.0"))

        text = format_report(tree, tree, diff_trees(tree, tree))

        self.assertIn("No dependency changes.", text)
        self.assertNotIn("Required update", text)
