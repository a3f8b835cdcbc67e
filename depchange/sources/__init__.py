import logging
from typing import Optional

from depchange.core.errors import SnapshotError
from depchange.core.model import AllowPredicate, Dep, build, is_allowed
from .base import SnapshotReader
from .json_snapshot import JsonSnapshotReader
from .toml_snapshot import TomlSnapshotReader

READERS = [
    JsonSnapshotReader(),
    TomlSnapshotReader(),
]


def detect_reader(path: str) -> Optional[SnapshotReader]:
    """Returns the reader for the given snapshot file, or None."""
    for reader in READERS:
        if reader.detect(path):
            return reader

    return None


def load_tree(path: str, allow: AllowPredicate = is_allowed) -> Dep:
    reader = detect_reader(path)
    if not reader:
        raise SnapshotError(f"Unsupported snapshot format: {path}")

    logging.info(f"Reader for {path}: {reader.name}")
    return build(reader.read(path), allow)
