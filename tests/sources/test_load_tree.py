import unittest
from unittest.mock import patch, mock_open
from depchange.core.errors import SnapshotError
from depchange.core.model import disallow
from depchange.core.version import parse
from depchange.sources import detect_reader, load_tree
from depchange.sources.json_snapshot import JsonSnapshotReader
from depchange.sources.toml_snapshot import TomlSnapshotReader


class TestLoadTree(unittest.TestCase):

    def test_detect_reader(self):
        self.assertIsInstance(detect_reader("deps.json"), JsonSnapshotReader)
        self.assertIsInstance(detect_reader("deps.toml"), TomlSnapshotReader)
        self.assertIsNone(detect_reader("deps.lock"))

    def test_load_builds_filtered_tree(self):
        mock_content = """
        {"module": "com.example:lib_3", "version": "1.0", "children": [
          {"module": "org.scala-lang:scala3-library_3", "version": "3.3.1"},
          {"module": "org.example:internal", "version": "0.1.0"},
          {"module": "com.lihaoyi:geny_3", "version": "1.0.0"}
        ]}
        """

        with patch("builtins.open", mock_open(read_data=mock_content)):
            root = load_tree("deps.json")

        self.assertEqual(root.version, parse("1.0.0"))
        self.assertEqual([c.id for c in root.children], ["org.example:internal", "com.lihaoyi:geny_3"])

        with patch("builtins.open", mock_open(read_data=mock_content)):
            root = load_tree("deps.json", disallow([("org.example", "")]))

        self.assertEqual([c.id for c in root.children],
                         ["org.scala-lang:scala3-library_3", "com.lihaoyi:geny_3"])

    def test_unsupported_format(self):
        with self.assertRaises(SnapshotError):
            load_tree("deps.xml")
