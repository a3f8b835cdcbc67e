import logging
import os
from abc import ABC, abstractmethod
from typing import Any, List, Optional, Tuple

from depchange.core.errors import SnapshotError
from depchange.core.model import RawNode


class SnapshotReader(ABC):
    """Base class inherited by all snapshot formats."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Friendly format name (e.g., JSON, TOML)."""
        pass

    @property
    @abstractmethod
    def extensions(self) -> List[str]:
        """File extensions this reader understands, lower case with the dot."""
        pass

    def detect(self, path: str) -> bool:
        """
        Returns True if this reader supports the given file.
        Default implementation checks the file extension.
        """
        _, ext = os.path.splitext(path)
        return ext.lower() in self.extensions

    @abstractmethod
    def read(self, path: str) -> RawNode:
        pass

    def to_raw(self, data: Any, where: str = "root") -> RawNode:
        """Turns a decoded {module, version, children} document into RawNode values."""
        root = None
        # (table, location for errors, parent node)
        pending: List[Tuple[Any, str, Optional[RawNode]]] = [(data, where, None)]

        while pending:
            item, path, parent = pending.pop()
            node, children = self._check_table(item, path)
            if parent is None:
                root = node
            else:
                parent.children.append(node)

            for idx in reversed(range(len(children))):
                pending.append((children[idx], f"{path}.children[{idx}]", node))

        return root

    @staticmethod
    def _check_table(data: Any, where: str) -> Tuple[RawNode, list]:
        if not isinstance(data, dict):
            raise SnapshotError(f"{where}: expected a table, got {type(data).__name__}")

        module = data.get("module")
        version = data.get("version")
        if not module or not version:
            raise SnapshotError(f"{where}: 'module' and 'version' are required")

        children = data.get("children", [])
        if not isinstance(children, list):
            raise SnapshotError(f"{where}: 'children' must be a list")

        return RawNode(str(module), str(version)), children

    def _log_loaded(self, path: str, node: RawNode) -> None:
        logging.debug(f"{self.name} snapshot {path} loaded, root {node.module}:{node.version}")
