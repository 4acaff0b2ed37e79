"""Indexing of the source tree into an ordered list of generation steps."""

import logging
import os
from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path

from .errors import IoError

COLLECTION_CONFIG_FILE = 'config.yaml'

logger = logging.getLogger('Renatic.Index')


class IndexKind(IntEnum):
    """Kind of an indexed node. The value is the generation order."""
    COLLECTION = 0
    DIRECTORY = 1
    FILE = 2


@dataclass(frozen=True)
class IndexNode:
    path: Path
    kind: IndexKind


def _list_dir(directory):
    try:
        with os.scandir(directory) as it:
            return sorted(Path(entry.path) for entry in it)
    except OSError as e:
        raise IoError(f"Failed to read directory '{directory}': {e}", stage='index') from e


def is_collection(path):
    """A directory is a collection when it holds a collection config file."""
    return (path / COLLECTION_CONFIG_FILE).is_file()


def index_tree(root):
    """
    Walk ``root`` and classify every node below it.

    Collections are not descended into; their contents are generated by the
    collection resolver. The result holds all collections, then all
    directories, then all files, each group in walk order (pre-order, names
    sorted), so a directory always comes before its subdirectories.

    Raises:
        IoError: If a directory cannot be read. No partial index is returned.
    """
    root = Path(root)
    nodes = []
    visited = {os.path.realpath(root)}
    stack = [iter(_list_dir(root))]

    while stack:
        path = next(stack[-1], None)
        if path is None:
            stack.pop()
            continue

        if path.is_dir():
            if is_collection(path):
                nodes.append(IndexNode(path, IndexKind.COLLECTION))
                continue
            nodes.append(IndexNode(path, IndexKind.DIRECTORY))
            real_path = os.path.realpath(path)
            if real_path in visited:
                logger.warning(f"Directory '{path}' was already indexed through another link, not descending again")
                continue
            visited.add(real_path)
            stack.append(iter(_list_dir(path)))
        else:
            nodes.append(IndexNode(path, IndexKind.FILE))

    nodes.sort(key=lambda node: node.kind)
    logger.info(f"Indexed {len(nodes)} items (files/dirs/collections)")
    return nodes
