import json
import logging
from typing import List, Union

from depchange.core.errors import SnapshotError
from depchange.core.model import Dep, RawNode
from depchange.sources.base import SnapshotReader


class JsonSnapshotReader(SnapshotReader):
    @property
    def name(self) -> str:
        return "JSON"

    @property
    def extensions(self) -> List[str]:
        return [".json"]

    def read(self, path: str) -> RawNode:
        logging.debug(f"Parsing {path}...")
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise SnapshotError(f"Error reading {path}: {e}") from e

        node = self.to_raw(data)
        self._log_loaded(path, node)
        return node

    def write(self, tree: Union[Dep, RawNode], path: str) -> None:
        """Saves a tree in the shape ``read`` accepts, for the next release to compare against."""
        data = tree.to_dict() if isinstance(tree, Dep) else _raw_to_dict(tree)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
            f.write("\n")
        logging.debug(f"Snapshot written to {path}")


def _raw_to_dict(node: RawNode) -> dict:
    return {
        "module": node.module,
        "version": node.version,
        "children": [_raw_to_dict(child) for child in node.children],
    }
