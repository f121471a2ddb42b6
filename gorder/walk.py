"""Discovery of every orderable list in a tree."""

from __future__ import annotations

from typing import Iterator

from .syntax import NodeList, SourceFile


def iter_lists(tree: SourceFile) -> Iterator[NodeList]:
    """Yield the declaration list, then every interface member list, once each.

    Lists are yielded before the lists nested in their items, and the
    children are collected before the parent is handed out, so callers may
    reorder a list while iterating.
    """
    stack = [tree.decls]
    while stack:
        current = stack.pop()
        nested = [inner for item in current.items for inner in item.lists()]
        stack.extend(reversed(nested))
        yield current
