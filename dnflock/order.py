"""Ordering of directory and symlink entries for tar archives."""

from __future__ import annotations

import posixpath
import tarfile
from collections import deque
from dataclasses import dataclass, field
from typing import Any

_TREE_TYPES = (tarfile.DIRTYPE, tarfile.SYMTYPE)


def _clean(path):
    if not path:
        return "."
    cleaned = posixpath.normpath(path)
    if cleaned.startswith("//"):
        cleaned = "/" + cleaned.lstrip("/")
    return cleaned


@dataclass(eq=False)
class Node:
    """A path component in a tree of directory and symlink headers.

    Headers are ``tarfile.TarInfo`` objects or anything with ``name`` and
    ``type`` attributes.
    """

    name: str = ""
    header: Any = None
    children: dict[str, Node] = field(default_factory=dict)

    def add(self, headers):
        """Insert the directory and symlink headers; other entries are ignored.

        A symlink header replaces a directory header for the same path, but a
        directory never replaces a symlink.
        """
        for header in headers:
            if header.type not in _TREE_TYPES:
                continue
            components = _clean(header.name).removeprefix("/").split("/")
            node = self
            for component in components:
                node = node.children.setdefault(component, Node(name=component))
            if node.header is None or node.header.type == tarfile.DIRTYPE:
                node.header = header

    def traverse(self):
        """Return the headers breadth first, in insertion order per level."""
        headers = []
        queue = deque(self.children.values())
        while queue:
            node = queue.popleft()
            if node.header is not None:
                headers.append(node.header)
            queue.extend(node.children.values())
        return headers


def new_directory_tree():
    """Create an empty tree root."""
    return Node()