import logging
import sys
from typing import List

from depchange.core.errors import SnapshotError
from depchange.core.model import RawNode
from depchange.sources.base import SnapshotReader

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib


class TomlSnapshotReader(SnapshotReader):
    """
    Root table holds module and version, nested [[children]] tables
    (then [[children.children]] and so on) hold the resolved dependencies.
    """

    @property
    def name(self) -> str:
        return "TOML"

    @property
    def extensions(self) -> List[str]:
        return [".toml"]

    def read(self, path: str) -> RawNode:
        logging.debug(f"Parsing {path}...")
        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            raise SnapshotError(f"Error reading {path}: {e}") from e

        node = self.to_raw(data)
        self._log_loaded(path, node)
        return node
