import unittest
from unittest.mock import MagicMock
from depchange.app import ChangeReportApp, version_label
from depchange.core.version import parse


class TestChangeReportApp(unittest.TestCase):

    def test_added_and_removed_markers_differ(self):
        added = version_label("com.lihaoyi:geny_3", parse("1.0.0"), "+")
        removed = version_label("com.lihaoyi:geny_3", parse("1.0.0"), "-")

        self.assertIn("(+) com.lihaoyi:geny_3", added)
        self.assertIn("(-) com.lihaoyi:geny_3", removed)
        self.assertNotEqual(added, removed)

    def test_space_toggles_node(self):
        binding = [b for b in ChangeReportApp.BINDINGS if b.key == "space"]
        self.assertEqual(len(binding), 1)
        self.assertEqual(binding[0].action, "toggle_node")

        fake_app = MagicMock()
        ChangeReportApp.action_toggle_node(fake_app)

        fake_app.query_one.assert_called_once_with("#change-tree")
        fake_app.query_one.return_value.cursor_node.toggle.assert_called_once()
