import io
import unittest
from unittest.mock import patch, mock_open
from depchange.__main__ import main
from depchange.core.errors import ParseError, SnapshotError

OLD_SNAPSHOT = """
{"module": "com.example:lib_3", "version": "1.0.0", "children": [
  {"module": "com.lihaoyi:os-lib_3", "version": "0.9.1", "children": [
    {"module": "com.lihaoyi:geny_3", "version": "1.0.0"}
  ]}
]}
"""

NEW_SNAPSHOT = """
{"module": "com.example:lib_3", "version": "1.1.0", "children": [
  {"module": "com.lihaoyi:os-lib_3", "version": "0.10.0", "children": [
    {"module": "com.lihaoyi:geny_3", "version": "1.0.1"}
  ]}
]}
"""


def fake_files(files):
    def opener(path, *args, **kwargs):
        return mock_open(read_data=files[path])()
    return opener


class TestMain(unittest.TestCase):

    def test_print_mode_writes_report(self):
        files = {"old.json": OLD_SNAPSHOT, "new.json": NEW_SNAPSHOT}

        with patch("sys.argv", ["depchange", "old.json", "new.json", "--print"]), \
                patch("builtins.open", side_effect=fake_files(files)), \
                patch("sys.stdout", new_callable=io.StringIO) as stdout:
            code = main()

        self.assertEqual(code, 0)
        self.assertEqual(stdout.getvalue().splitlines(), [
            "com.example:lib_3:1.0.0 -> com.example:lib_3:1.1.0",
            "Required update: Minor",
            "",
            "Direct dependencies:",
            "- com.lihaoyi:os-lib_3: 0.9.1 -> 0.10.0 (Minor)",
            "",
            "Transitive dependencies:",
            "- com.lihaoyi:geny_3: 1.0.0 -> 1.0.1 (Patch)",
            "",
            "Dependency tree:",
            "- com.example:lib_3:1.1.0",
            "  - com.lihaoyi:os-lib_3:0.10.0",
            "    - com.lihaoyi:geny_3:1.0.1",
        ])

    def test_print_mode_propagates_parse_error(self):
        files = {
            "old.json": OLD_SNAPSHOT,
            "new.json": NEW_SNAPSHOT.replace('"1.0.1"', '"latest.release"'),
        }

        with patch("sys.argv", ["depchange", "old.json", "new.json", "--print"]), \
                patch("builtins.open", side_effect=fake_files(files)), \
                patch("sys.stdout", new_callable=io.StringIO) as stdout:
            with self.assertRaises(ParseError):
                main()

        self.assertEqual(stdout.getvalue(), "")

    def test_print_mode_rejects_unknown_format(self):
        with patch("sys.argv", ["depchange", "old.xml", "new.json", "--print"]):
            with self.assertRaises(SnapshotError):
                main()

    @patch("depchange.app.ChangeReportApp")
    def test_viewer_mode_runs_app(self, mock_app):
        with patch("sys.argv", ["depchange", "old.json", "new.json"]):
            code = main()

        self.assertEqual(code, 0)
        mock_app.assert_called_once_with("old.json", "new.json")
        mock_app.return_value.run.assert_called_once()
